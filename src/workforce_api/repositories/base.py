"""Base repository with common database operations."""

from enum import StrEnum
from typing import Any, ClassVar, Generic, Sequence, TypeVar
from uuid import UUID

from sqlalchemy import Select, func, select
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy.orm import InstrumentedAttribute

from workforce_api.models.orm.base import Base
from workforce_api.utils.query import ListQuery, apply_list_query, apply_ordering

T = TypeVar("T", bound=Base)


class RetireOutcome(StrEnum):
    """Which branch a retire-or-delete took."""

    DELETED = "DELETED"
    DEACTIVATED = "DEACTIVATED"


class BaseRepository(Generic[T]):
    """Base repository with common CRUD operations.

    Subclasses declare ``references`` as the foreign-key columns of other
    tables that point at this model; they drive :meth:`count_references`.
    """

    model: type[T]
    references: ClassVar[Sequence[InstrumentedAttribute]] = ()
    search_columns: ClassVar[Sequence[str]] = ()
    filter_relations: ClassVar[Sequence[str]] = ()

    def __init__(self, session: AsyncSession) -> None:
        """Initialize repository with database session."""
        self.session = session

    async def get(self, id: UUID) -> T | None:
        """Get a record by ID.

        Args:
            id: Record UUID

        Returns:
            Record or None if not found
        """
        result = await self.session.execute(select(self.model).where(self.model.id == id))
        return result.scalar_one_or_none()

    async def get_by_id(self, id: UUID) -> T | None:
        """Get a record by ID (alias for get)."""
        return await self.get(id)

    def base_query(self) -> Select:
        """Statement every listing starts from; override to add loaders or scoping."""
        return select(self.model)

    async def list(self, query: ListQuery, stmt: Select | None = None) -> tuple[list[T], int]:
        """List records with search, filters, ordering and paging.

        Args:
            query: Parsed list parameters
            stmt: Optional pre-filtered statement (defaults to base_query())

        Returns:
            Tuple of (records on the requested page, total matching count)
        """
        stmt = stmt if stmt is not None else self.base_query()
        search_columns = [getattr(self.model, name) for name in self.search_columns]
        filtered = apply_list_query(
            stmt, self.model, query, search_columns=search_columns, relations=self.filter_relations
        )

        count_result = await self.session.execute(
            select(func.count()).select_from(filtered.order_by(None).subquery())
        )
        total = count_result.scalar_one()

        result = await self.session.execute(apply_ordering(filtered, self.model, query))
        return list(result.scalars().unique().all()), total

    async def count(self) -> int:
        """Count total records."""
        result = await self.session.execute(select(func.count()).select_from(self.model))
        return result.scalar_one()

    async def create(self, **kwargs: Any) -> T:
        """Create a new record.

        Args:
            **kwargs: Field values

        Returns:
            Created record
        """
        instance = self.model(**kwargs)
        self.session.add(instance)
        await self.session.flush()
        await self.session.refresh(instance)
        return instance

    async def update(self, id: UUID, **kwargs: Any) -> T | None:
        """Update a record by ID.

        Args:
            id: Record UUID
            **kwargs: Fields to update

        Returns:
            Updated record or None if not found
        """
        instance = await self.get_by_id(id)
        if instance is None:
            return None

        for key, value in kwargs.items():
            if hasattr(instance, key):
                setattr(instance, key, value)

        await self.session.flush()
        await self.session.refresh(instance)
        return instance

    async def delete(self, id: UUID) -> bool:
        """Delete a record by ID.

        Returns:
            True if deleted, False if not found
        """
        instance = await self.get_by_id(id)
        if instance is None:
            return False

        await self.session.delete(instance)
        await self.session.flush()
        return True

    async def count_references(self, id: UUID) -> int:
        """Count rows in other tables that point at a record."""
        total = 0
        for column in self.references:
            result = await self.session.execute(
                select(func.count()).select_from(column.class_).where(column == id)
            )
            total += result.scalar_one()
        return total

    async def retire_or_delete(self, instance: T) -> RetireOutcome:
        """Hard-delete an unreferenced record, otherwise deactivate it.

        Deactivation sets ``is_active`` to False; the record stays available
        to the rows that reference it.
        """
        if await self.count_references(instance.id) == 0:
            await self.session.delete(instance)
            await self.session.flush()
            return RetireOutcome.DELETED

        instance.is_active = False
        await self.session.flush()
        return RetireOutcome.DEACTIVATED
