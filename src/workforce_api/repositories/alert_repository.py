"""Alert repository."""

from sqlalchemy import Select, func, select
from sqlalchemy.orm import selectinload

from workforce_api.models.orm.alert import AlertORM
from workforce_api.repositories.base import BaseRepository


class AlertRepository(BaseRepository[AlertORM]):
    """Repository for materialized alerts.

    An alert is open until resolved. Read and dismissed alerts are still
    open; regeneration updates them in place instead of adding new rows.
    """

    model = AlertORM
    search_columns = ("message",)
    filter_relations = ("employee", "rule")

    def base_query(self) -> Select:
        return select(AlertORM).options(selectinload(AlertORM.employee))

    async def get_unresolved(self) -> list[AlertORM]:
        result = await self.session.execute(select(AlertORM).where(AlertORM.resolved_at.is_(None)))
        return list(result.scalars().all())

    async def count_open_by_severity(self) -> dict[str, int]:
        """Unresolved, undismissed alerts per severity."""
        result = await self.session.execute(
            select(AlertORM.severity, func.count())
            .where(AlertORM.resolved_at.is_(None), AlertORM.is_dismissed.is_(False))
            .group_by(AlertORM.severity)
        )
        return {severity: count for severity, count in result}
