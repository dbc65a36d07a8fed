"""Numbering rule ORM model."""

from sqlalchemy import Integer, String
from sqlalchemy.orm import Mapped, mapped_column

from workforce_api.models.orm.base import Base, TimestampMixin, UUIDMixin


class NumberingRuleORM(Base, UUIDMixin, TimestampMixin):
    """Sequence used to generate business keys such as employee numbers."""

    __tablename__ = "numbering_rules"

    entity: Mapped[str] = mapped_column(String(50), unique=True, nullable=False)
    prefix: Mapped[str] = mapped_column(String(20), nullable=False)
    padding: Mapped[int] = mapped_column(Integer, default=6, nullable=False)
    next_number: Mapped[int] = mapped_column(Integer, default=1, nullable=False)
