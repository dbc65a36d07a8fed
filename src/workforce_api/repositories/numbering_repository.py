"""Numbering rule repository."""

from sqlalchemy import select

from workforce_api.models.orm.numbering import NumberingRuleORM
from workforce_api.repositories.base import BaseRepository


class NumberingRepository(BaseRepository[NumberingRuleORM]):
    """Repository for business-key sequences."""

    model = NumberingRuleORM

    async def get_for_update(self, entity: str) -> NumberingRuleORM | None:
        """Get the rule of an entity, row-locked until the transaction ends."""
        result = await self.session.execute(
            select(NumberingRuleORM).where(NumberingRuleORM.entity == entity).with_for_update()
        )
        return result.scalar_one_or_none()

    async def get_all(self) -> list[NumberingRuleORM]:
        result = await self.session.execute(select(NumberingRuleORM).order_by(NumberingRuleORM.entity))
        return list(result.scalars().all())
