"""Asset repositories."""

from uuid import UUID

from sqlalchemy import Select, select
from sqlalchemy.orm import selectinload

from workforce_api.models.orm.asset import AssetAssignmentORM, AssetORM
from workforce_api.repositories.base import BaseRepository


class AssetRepository(BaseRepository[AssetORM]):
    """Repository for assets."""

    model = AssetORM
    search_columns = ("asset_no", "name", "serial_no")
    filter_relations = ("category", "worksite")
    references = (AssetAssignmentORM.asset_id,)

    def base_query(self) -> Select:
        return select(AssetORM).options(
            selectinload(AssetORM.category),
            selectinload(AssetORM.worksite),
            selectinload(AssetORM.assignments),
        )

    async def get_full(self, asset_id: UUID) -> AssetORM | None:
        result = await self.session.execute(
            self.base_query()
            .where(AssetORM.id == asset_id)
            .execution_options(populate_existing=True)
        )
        return result.scalar_one_or_none()

    async def get_by_asset_no(self, asset_no: str) -> AssetORM | None:
        result = await self.session.execute(select(AssetORM).where(AssetORM.asset_no == asset_no))
        return result.scalar_one_or_none()

    async def get_for_export(self, worksite_id: UUID | None = None) -> list[AssetORM]:
        """Assets with their holders loaded."""
        stmt = (
            select(AssetORM)
            .options(
                selectinload(AssetORM.category),
                selectinload(AssetORM.worksite),
                selectinload(AssetORM.assignments).selectinload(AssetAssignmentORM.employee),
            )
            .order_by(AssetORM.asset_no)
        )
        if worksite_id is not None:
            stmt = stmt.where(AssetORM.worksite_id == worksite_id)
        result = await self.session.execute(stmt)
        return list(result.scalars().all())


class AssetAssignmentRepository(BaseRepository[AssetAssignmentORM]):
    """Repository for asset hand-outs."""

    model = AssetAssignmentORM

    async def get_open(self, asset_id: UUID) -> AssetAssignmentORM | None:
        """The assignment of an asset that has not been returned yet."""
        result = await self.session.execute(
            select(AssetAssignmentORM)
            .options(selectinload(AssetAssignmentORM.employee))
            .where(AssetAssignmentORM.asset_id == asset_id, AssetAssignmentORM.returned_on.is_(None))
            .limit(1)
        )
        return result.scalar_one_or_none()
