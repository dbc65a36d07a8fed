"""Add salary revisions, patent payments, contacts and progress payments

Revision ID: 002
Revises: 001
Create Date: 2025-02-10 00:00:00.000000

"""
from typing import Sequence, Union

from alembic import op
import sqlalchemy as sa
from sqlalchemy.dialects import postgresql

# revision identifiers, used by Alembic.
revision: str = "002"
down_revision: Union[str, None] = "001"
branch_labels: Union[str, Sequence[str], None] = None
depends_on: Union[str, Sequence[str], None] = None


def _id() -> sa.Column:
    return sa.Column("id", postgresql.UUID(as_uuid=True), nullable=False)


def _timestamps() -> list[sa.Column]:
    return [
        sa.Column("created_at", sa.DateTime(timezone=True), server_default=sa.text("now()"), nullable=False),
        sa.Column("updated_at", sa.DateTime(timezone=True), server_default=sa.text("now()"), nullable=False),
    ]


def _fk(column: str, target: str, nullable: bool = True, ondelete: str | None = None) -> sa.Column:
    return sa.Column(
        column,
        postgresql.UUID(as_uuid=True),
        sa.ForeignKey(target, ondelete=ondelete),
        nullable=nullable,
    )


def upgrade() -> None:
    op.create_table(
        "salary_revisions",
        _id(),
        _fk("employee_id", "employees.id", nullable=False, ondelete="CASCADE"),
        sa.Column("field", sa.String(50), nullable=False),
        sa.Column("old_value", sa.String(100), nullable=True),
        sa.Column("new_value", sa.String(100), nullable=True),
        sa.Column("effective_from", sa.Date(), nullable=False),
        sa.Column("reason", sa.Text(), nullable=True),
        _fk("changed_by", "users.id"),
        *_timestamps(),
        sa.PrimaryKeyConstraint("id"),
    )
    op.create_index("ix_salary_revisions_employee_id", "salary_revisions", ["employee_id"])

    op.create_table(
        "patent_payments",
        _id(),
        _fk("employee_id", "employees.id", nullable=False, ondelete="CASCADE"),
        sa.Column("year", sa.Integer(), nullable=False),
        sa.Column("month", sa.Integer(), nullable=False),
        sa.Column("amount", sa.Numeric(12, 2), nullable=False),
        sa.Column("paid_date", sa.Date(), nullable=True),
        sa.Column("receipt_url", sa.String(500), nullable=True),
        sa.Column("notes", sa.Text(), nullable=True),
        *_timestamps(),
        sa.PrimaryKeyConstraint("id"),
        sa.UniqueConstraint("employee_id", "year", "month", name="uq_patent_payment_month"),
    )
    op.create_index("ix_patent_payments_employee_id", "patent_payments", ["employee_id"])

    op.create_table(
        "employee_contacts",
        _id(),
        _fk("employee_id", "employees.id", nullable=False, ondelete="CASCADE"),
        sa.Column("contact_type", sa.String(30), nullable=False),
        sa.Column("full_name", sa.String(255), nullable=False),
        sa.Column("relationship", sa.String(100), nullable=True),
        sa.Column("phone", sa.String(50), nullable=True),
        sa.Column("email", sa.String(255), nullable=True),
        sa.Column("address", sa.Text(), nullable=True),
        sa.Column("notes", sa.Text(), nullable=True),
        *_timestamps(),
        sa.PrimaryKeyConstraint("id"),
    )
    op.create_index("ix_employee_contacts_employee_id", "employee_contacts", ["employee_id"])

    op.create_table(
        "progress_payments",
        _id(),
        _fk("worksite_id", "worksites.id", nullable=False),
        sa.Column("period", sa.String(7), nullable=True),
        sa.Column("status", sa.String(20), server_default="DRAFT", nullable=False),
        sa.Column("total_amount", sa.Numeric(14, 2), server_default="0", nullable=False),
        sa.Column("notes", sa.Text(), nullable=True),
        _fk("created_by", "users.id"),
        *_timestamps(),
        sa.PrimaryKeyConstraint("id"),
    )
    op.create_index("idx_progress_payments_period", "progress_payments", ["period", "worksite_id"])

    op.create_table(
        "progress_payment_items",
        _id(),
        _fk("progress_payment_id", "progress_payments.id", nullable=False, ondelete="CASCADE"),
        _fk("employee_id", "employees.id"),
        sa.Column("work_item", sa.String(255), nullable=False),
        sa.Column("unit", sa.String(20), nullable=False),
        sa.Column("quantity", sa.Numeric(12, 3), nullable=False),
        sa.Column("unit_price", sa.Numeric(12, 2), nullable=False),
        sa.Column("total_amount", sa.Numeric(14, 2), nullable=False),
        sa.Column("team_name", sa.String(100), nullable=True),
        sa.Column("distribution_percent", sa.Numeric(5, 2), nullable=True),
        sa.Column("distribution_amount", sa.Numeric(14, 2), nullable=True),
        sa.Column("work_date", sa.Date(), nullable=False),
        sa.Column("notes", sa.Text(), nullable=True),
        *_timestamps(),
        sa.PrimaryKeyConstraint("id"),
    )
    op.create_index(
        "ix_progress_payment_items_progress_payment_id", "progress_payment_items", ["progress_payment_id"]
    )
    op.create_index("ix_progress_payment_items_employee_id", "progress_payment_items", ["employee_id"])


def downgrade() -> None:
    op.drop_table("progress_payment_items")
    op.drop_table("progress_payments")
    op.drop_table("employee_contacts")
    op.drop_table("patent_payments")
    op.drop_table("salary_revisions")
