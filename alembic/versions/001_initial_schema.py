"""Initial schema

Revision ID: 001
Revises:
Create Date: 2025-01-15 00:00:00.000000

"""
from typing import Sequence, Union

from alembic import op
import sqlalchemy as sa
from sqlalchemy.dialects import postgresql

# revision identifiers, used by Alembic.
revision: str = "001"
down_revision: Union[str, None] = None
branch_labels: Union[str, Sequence[str], None] = None
depends_on: Union[str, Sequence[str], None] = None

LOOKUP_TABLES = (
    "nationalities",
    "professions",
    "departments",
    "shifts",
    "document_types",
    "leave_types",
    "asset_categories",
    "earning_categories",
    "deduction_categories",
    "alert_rules",
    "payroll_rules",
)


def _id() -> sa.Column:
    return sa.Column("id", postgresql.UUID(as_uuid=True), nullable=False)


def _timestamps() -> list[sa.Column]:
    return [
        sa.Column("created_at", sa.DateTime(timezone=True), server_default=sa.text("now()"), nullable=False),
        sa.Column("updated_at", sa.DateTime(timezone=True), server_default=sa.text("now()"), nullable=False),
    ]


def _lookup_columns() -> list[sa.Column]:
    return [
        _id(),
        sa.Column("code", sa.String(50), nullable=False),
        sa.Column("name_tr", sa.String(255), nullable=False),
        sa.Column("name_ru", sa.String(255), nullable=True),
        sa.Column("name_en", sa.String(255), nullable=True),
        sa.Column("is_active", sa.Boolean(), server_default=sa.true(), nullable=False),
        sa.Column("sort_order", sa.Integer(), server_default="0", nullable=False),
        *_timestamps(),
    ]


def _fk(column: str, target: str, nullable: bool = True, ondelete: str | None = None) -> sa.Column:
    return sa.Column(
        column,
        postgresql.UUID(as_uuid=True),
        sa.ForeignKey(target, ondelete=ondelete),
        nullable=nullable,
    )


def upgrade() -> None:
    # Users and RBAC
    op.create_table(
        "users",
        _id(),
        sa.Column("email", sa.String(255), nullable=False),
        sa.Column("name", sa.String(255), nullable=False),
        sa.Column("password_hash", sa.String(255), nullable=False),
        sa.Column("status", sa.String(20), server_default="ACTIVE", nullable=False),
        sa.Column("locale", sa.String(5), server_default="tr", nullable=False),
        sa.Column("theme", sa.String(10), server_default="light", nullable=False),
        sa.Column("last_login_at", sa.DateTime(timezone=True), nullable=True),
        sa.Column("password_changed_at", sa.DateTime(timezone=True), nullable=True),
        sa.Column("deleted_at", sa.DateTime(timezone=True), nullable=True),
        *_timestamps(),
        sa.PrimaryKeyConstraint("id"),
    )
    op.create_index("ix_users_email", "users", ["email"], unique=True)

    op.create_table(
        "roles",
        _id(),
        sa.Column("code", sa.String(50), nullable=False),
        sa.Column("name", sa.String(100), nullable=False),
        sa.Column("description", sa.Text(), nullable=True),
        sa.Column("is_system", sa.Boolean(), server_default=sa.false(), nullable=False),
        sa.Column("site_scoped", sa.Boolean(), server_default=sa.false(), nullable=False),
        *_timestamps(),
        sa.PrimaryKeyConstraint("id"),
    )
    op.create_index("ix_roles_code", "roles", ["code"], unique=True)

    op.create_table(
        "permissions",
        _id(),
        sa.Column("code", sa.String(100), nullable=False),
        sa.Column("module", sa.String(50), nullable=False),
        sa.Column("action", sa.String(50), nullable=False),
        sa.Column("description", sa.Text(), nullable=True),
        *_timestamps(),
        sa.PrimaryKeyConstraint("id"),
    )
    op.create_index("ix_permissions_code", "permissions", ["code"], unique=True)
    op.create_index("ix_permissions_module", "permissions", ["module"])

    op.create_table(
        "role_permissions",
        _fk("role_id", "roles.id", nullable=False, ondelete="CASCADE"),
        _fk("permission_id", "permissions.id", nullable=False, ondelete="CASCADE"),
        sa.Column("created_at", sa.DateTime(timezone=True), server_default=sa.text("now()"), nullable=False),
        sa.PrimaryKeyConstraint("role_id", "permission_id"),
    )

    # Worksites
    op.create_table(
        "worksites",
        _id(),
        sa.Column("code", sa.String(50), nullable=False),
        sa.Column("name", sa.String(255), nullable=False),
        sa.Column("city", sa.String(100), nullable=True),
        sa.Column("address", sa.Text(), nullable=True),
        sa.Column("status", sa.String(20), server_default="ACTIVE", nullable=False),
        sa.Column("manager_name", sa.String(255), nullable=True),
        sa.Column("manager_phone", sa.String(50), nullable=True),
        sa.Column("start_date", sa.Date(), nullable=True),
        sa.Column("end_date", sa.Date(), nullable=True),
        sa.Column("is_active", sa.Boolean(), server_default=sa.true(), nullable=False),
        *_timestamps(),
        sa.PrimaryKeyConstraint("id"),
    )
    op.create_index("ix_worksites_code", "worksites", ["code"], unique=True)

    op.create_table(
        "user_roles",
        _id(),
        _fk("user_id", "users.id", nullable=False, ondelete="CASCADE"),
        _fk("role_id", "roles.id", nullable=False, ondelete="CASCADE"),
        _fk("worksite_id", "worksites.id", ondelete="CASCADE"),
        sa.Column("assigned_at", sa.DateTime(timezone=True), server_default=sa.text("now()"), nullable=False),
        sa.PrimaryKeyConstraint("id"),
        sa.UniqueConstraint("user_id", "role_id", "worksite_id", name="uq_user_roles_scope"),
    )
    op.create_index("ix_user_roles_user_id", "user_roles", ["user_id"])
    op.create_index("ix_user_roles_role_id", "user_roles", ["role_id"])

    # Reference data
    op.create_table(
        "nationalities",
        *_lookup_columns(),
        sa.Column("requires_work_permit", sa.Boolean(), server_default=sa.true(), nullable=False),
        sa.PrimaryKeyConstraint("id"),
        sa.UniqueConstraint("code"),
    )
    for table in ("professions", "departments", "asset_categories", "deduction_categories"):
        op.create_table(table, *_lookup_columns(), sa.PrimaryKeyConstraint("id"), sa.UniqueConstraint("code"))
    op.create_table(
        "shifts",
        *_lookup_columns(),
        sa.Column("start_time", sa.String(5), nullable=True),
        sa.Column("end_time", sa.String(5), nullable=True),
        sa.Column("is_night", sa.Boolean(), server_default=sa.false(), nullable=False),
        sa.PrimaryKeyConstraint("id"),
        sa.UniqueConstraint("code"),
    )
    op.create_table(
        "document_types",
        *_lookup_columns(),
        sa.Column("category", sa.String(50), server_default="OTHER", nullable=False),
        sa.Column("has_expiry", sa.Boolean(), server_default=sa.false(), nullable=False),
        sa.Column("default_alert_days", sa.Integer(), server_default="30", nullable=False),
        sa.PrimaryKeyConstraint("id"),
        sa.UniqueConstraint("code"),
    )
    op.create_table(
        "leave_types",
        *_lookup_columns(),
        sa.Column("is_paid", sa.Boolean(), server_default=sa.true(), nullable=False),
        sa.Column("default_days", sa.Integer(), server_default="0", nullable=False),
        sa.PrimaryKeyConstraint("id"),
        sa.UniqueConstraint("code"),
    )
    op.create_table(
        "earning_categories",
        *_lookup_columns(),
        sa.Column("is_taxable", sa.Boolean(), server_default=sa.true(), nullable=False),
        sa.PrimaryKeyConstraint("id"),
        sa.UniqueConstraint("code"),
    )
    op.create_table(
        "alert_rules",
        *_lookup_columns(),
        sa.Column("entity", sa.String(50), nullable=False),
        sa.Column("date_field", sa.String(100), nullable=False),
        sa.Column("warning_days", sa.Integer(), server_default="30", nullable=False),
        sa.Column("critical_days", sa.Integer(), server_default="7", nullable=False),
        sa.Column("document_type_code", sa.String(50), nullable=True),
        sa.PrimaryKeyConstraint("id"),
        sa.UniqueConstraint("code"),
    )
    op.create_table(
        "payroll_rules",
        *_lookup_columns(),
        sa.Column("category", sa.String(50), server_default="TAX", nullable=False),
        sa.Column("description", sa.Text(), nullable=True),
        sa.PrimaryKeyConstraint("id"),
        sa.UniqueConstraint("code"),
    )
    op.create_table(
        "payroll_rule_versions",
        _id(),
        _fk("rule_id", "payroll_rules.id", nullable=False, ondelete="CASCADE"),
        sa.Column("rate", sa.Numeric(8, 4), nullable=False),
        sa.Column("is_percentage", sa.Boolean(), server_default=sa.true(), nullable=False),
        sa.Column("effective_from", sa.Date(), nullable=False),
        sa.Column("effective_to", sa.Date(), nullable=True),
        *_timestamps(),
        sa.PrimaryKeyConstraint("id"),
    )
    op.create_index("ix_payroll_rule_versions_rule_id", "payroll_rule_versions", ["rule_id"])

    op.create_table(
        "document_requirements",
        _id(),
        sa.Column("work_status_type", sa.String(30), nullable=False),
        _fk("document_type_id", "document_types.id", nullable=False, ondelete="CASCADE"),
        sa.Column("is_mandatory", sa.Boolean(), server_default=sa.true(), nullable=False),
        *_timestamps(),
        sa.PrimaryKeyConstraint("id"),
        sa.UniqueConstraint("work_status_type", "document_type_id", name="uq_document_requirement"),
    )
    op.create_index("ix_document_requirements_work_status_type", "document_requirements", ["work_status_type"])

    op.create_table(
        "numbering_rules",
        _id(),
        sa.Column("entity", sa.String(50), nullable=False),
        sa.Column("prefix", sa.String(20), nullable=False),
        sa.Column("padding", sa.Integer(), server_default="6", nullable=False),
        sa.Column("next_number", sa.Integer(), server_default="1", nullable=False),
        *_timestamps(),
        sa.PrimaryKeyConstraint("id"),
        sa.UniqueConstraint("entity"),
    )

    # Employees
    op.create_table(
        "employees",
        _id(),
        sa.Column("employee_no", sa.String(50), nullable=False),
        sa.Column("first_name", sa.String(100), nullable=False),
        sa.Column("last_name", sa.String(100), nullable=False),
        sa.Column("patronymic", sa.String(100), nullable=True),
        sa.Column("birth_date", sa.Date(), nullable=True),
        sa.Column("gender", sa.String(10), nullable=True),
        sa.Column("phone", sa.String(50), nullable=True),
        sa.Column("email", sa.String(255), nullable=True),
        sa.Column("status", sa.String(20), server_default="ACTIVE", nullable=False),
        _fk("nationality_id", "nationalities.id"),
        _fk("profession_id", "professions.id"),
        _fk("department_id", "departments.id"),
        sa.Column("notes", sa.Text(), nullable=True),
        sa.Column("deleted_at", sa.DateTime(timezone=True), nullable=True),
        *_timestamps(),
        sa.PrimaryKeyConstraint("id"),
        sa.UniqueConstraint("employee_no"),
    )
    op.create_index("idx_employees_status", "employees", ["status"])
    op.create_index("idx_employees_last_name", "employees", ["last_name"])

    op.create_table(
        "employee_identities",
        _id(),
        _fk("employee_id", "employees.id", nullable=False, ondelete="CASCADE"),
        sa.Column("passport_no", sa.String(50), nullable=True),
        sa.Column("passport_issue_date", sa.Date(), nullable=True),
        sa.Column("passport_expiry_date", sa.Date(), nullable=True),
        sa.Column("passport_issued_by", sa.String(255), nullable=True),
        sa.Column("inn", sa.String(20), nullable=True),
        sa.Column("snils", sa.String(20), nullable=True),
        *_timestamps(),
        sa.PrimaryKeyConstraint("id"),
        sa.UniqueConstraint("employee_id"),
    )

    op.create_table(
        "employee_work_statuses",
        _id(),
        _fk("employee_id", "employees.id", nullable=False, ondelete="CASCADE"),
        sa.Column("work_status_type", sa.String(30), server_default="LOCAL", nullable=False),
        sa.Column("patent_no", sa.String(50), nullable=True),
        sa.Column("patent_start", sa.Date(), nullable=True),
        sa.Column("patent_end", sa.Date(), nullable=True),
        sa.Column("visa_no", sa.String(50), nullable=True),
        sa.Column("visa_start", sa.Date(), nullable=True),
        sa.Column("visa_end", sa.Date(), nullable=True),
        sa.Column("work_permit_no", sa.String(50), nullable=True),
        sa.Column("work_permit_end", sa.Date(), nullable=True),
        sa.Column("residence_permit_no", sa.String(50), nullable=True),
        sa.Column("residence_permit_end", sa.Date(), nullable=True),
        sa.Column("registration_address", sa.Text(), nullable=True),
        sa.Column("registration_end", sa.Date(), nullable=True),
        sa.Column("migration_card_no", sa.String(50), nullable=True),
        sa.Column("migration_card_end", sa.Date(), nullable=True),
        *_timestamps(),
        sa.PrimaryKeyConstraint("id"),
        sa.UniqueConstraint("employee_id"),
    )

    op.create_table(
        "employee_employments",
        _id(),
        _fk("employee_id", "employees.id", nullable=False, ondelete="CASCADE"),
        _fk("worksite_id", "worksites.id"),
        _fk("shift_id", "shifts.id"),
        sa.Column("hire_date", sa.Date(), nullable=True),
        sa.Column("termination_date", sa.Date(), nullable=True),
        sa.Column("contract_type", sa.String(30), nullable=True),
        sa.Column("contract_end", sa.Date(), nullable=True),
        sa.Column("probation_end", sa.Date(), nullable=True),
        sa.Column("team_name", sa.String(100), nullable=True),
        *_timestamps(),
        sa.PrimaryKeyConstraint("id"),
        sa.UniqueConstraint("employee_id"),
    )
    op.create_index("ix_employee_employments_worksite_id", "employee_employments", ["worksite_id"])

    op.create_table(
        "employee_salary_profiles",
        _id(),
        _fk("employee_id", "employees.id", nullable=False, ondelete="CASCADE"),
        sa.Column("payment_type", sa.String(20), server_default="MONTHLY", nullable=False),
        sa.Column("gross_salary", sa.Numeric(12, 2), nullable=True),
        sa.Column("net_salary", sa.Numeric(12, 2), nullable=True),
        sa.Column("daily_rate", sa.Numeric(12, 2), nullable=True),
        sa.Column("hourly_rate", sa.Numeric(12, 2), nullable=True),
        sa.Column("overtime_multiplier", sa.Numeric(4, 2), server_default="1.5", nullable=False),
        sa.Column("night_multiplier", sa.Numeric(4, 2), server_default="1.2", nullable=False),
        sa.Column("holiday_multiplier", sa.Numeric(4, 2), server_default="2.0", nullable=False),
        sa.Column("tax_status", sa.String(20), server_default="RESIDENT", nullable=False),
        sa.Column("custom_ndfl_rate", sa.Numeric(5, 2), nullable=True),
        sa.Column("currency", sa.String(3), server_default="RUB", nullable=False),
        *_timestamps(),
        sa.PrimaryKeyConstraint("id"),
        sa.UniqueConstraint("employee_id"),
    )

    # Attendance
    op.create_table(
        "attendance_periods",
        _id(),
        _fk("worksite_id", "worksites.id", nullable=False),
        sa.Column("period", sa.String(7), nullable=False),
        sa.Column("status", sa.String(20), server_default="OPEN", nullable=False),
        sa.Column("submitted_at", sa.DateTime(timezone=True), nullable=True),
        _fk("submitted_by", "users.id"),
        sa.Column("approved_at", sa.DateTime(timezone=True), nullable=True),
        _fk("approved_by", "users.id"),
        sa.Column("locked_at", sa.DateTime(timezone=True), nullable=True),
        _fk("locked_by", "users.id"),
        *_timestamps(),
        sa.PrimaryKeyConstraint("id"),
        sa.UniqueConstraint("worksite_id", "period", name="uq_attendance_period"),
    )

    op.create_table(
        "attendance_records",
        _id(),
        _fk("employee_id", "employees.id", nullable=False, ondelete="CASCADE"),
        _fk("worksite_id", "worksites.id", nullable=False),
        _fk("period_id", "attendance_periods.id", nullable=False),
        sa.Column("work_date", sa.Date(), nullable=False),
        sa.Column("attendance_type", sa.String(20), server_default="NORMAL", nullable=False),
        sa.Column("total_hours", sa.Numeric(5, 2), server_default="0", nullable=False),
        sa.Column("overtime_hours", sa.Numeric(5, 2), server_default="0", nullable=False),
        sa.Column("night_hours", sa.Numeric(5, 2), server_default="0", nullable=False),
        sa.Column("notes", sa.Text(), nullable=True),
        *_timestamps(),
        sa.PrimaryKeyConstraint("id"),
        sa.UniqueConstraint("employee_id", "work_date", name="uq_attendance_employee_date"),
    )
    op.create_index("ix_attendance_records_employee_id", "attendance_records", ["employee_id"])
    op.create_index("ix_attendance_records_period_id", "attendance_records", ["period_id"])

    # Payroll
    op.create_table(
        "payroll_runs",
        _id(),
        _fk("worksite_id", "worksites.id"),
        sa.Column("period", sa.String(7), nullable=False),
        sa.Column("status", sa.String(20), server_default="DRAFT", nullable=False),
        sa.Column("employee_count", sa.Integer(), server_default="0", nullable=False),
        sa.Column("total_gross", sa.Numeric(14, 2), server_default="0", nullable=False),
        sa.Column("total_tax", sa.Numeric(14, 2), server_default="0", nullable=False),
        sa.Column("total_deductions", sa.Numeric(14, 2), server_default="0", nullable=False),
        sa.Column("total_net", sa.Numeric(14, 2), server_default="0", nullable=False),
        sa.Column("notes", sa.Text(), nullable=True),
        _fk("created_by", "users.id"),
        sa.Column("calculated_at", sa.DateTime(timezone=True), nullable=True),
        sa.Column("approved_at", sa.DateTime(timezone=True), nullable=True),
        _fk("approved_by", "users.id"),
        sa.Column("paid_at", sa.DateTime(timezone=True), nullable=True),
        sa.Column("locked_at", sa.DateTime(timezone=True), nullable=True),
        *_timestamps(),
        sa.PrimaryKeyConstraint("id"),
    )
    op.create_index("idx_payroll_runs_period", "payroll_runs", ["period", "worksite_id"])

    amount_columns = (
        "base_amount",
        "overtime_amount",
        "night_amount",
        "holiday_amount",
        "earnings_amount",
        "gross_amount",
    )
    op.create_table(
        "payroll_items",
        _id(),
        _fk("payroll_run_id", "payroll_runs.id", nullable=False, ondelete="CASCADE"),
        _fk("employee_id", "employees.id", nullable=False),
        sa.Column("payment_type", sa.String(20), nullable=False),
        sa.Column("tax_status", sa.String(20), nullable=False),
        sa.Column("worked_days", sa.Integer(), server_default="0", nullable=False),
        *[
            sa.Column(name, sa.Numeric(8, 2), server_default="0", nullable=False)
            for name in ("worked_hours", "overtime_hours", "night_hours", "holiday_hours")
        ],
        *[sa.Column(name, sa.Numeric(12, 2), server_default="0", nullable=False) for name in amount_columns],
        sa.Column("tax_rate", sa.Numeric(5, 2), server_default="0", nullable=False),
        sa.Column("tax_amount", sa.Numeric(12, 2), server_default="0", nullable=False),
        sa.Column("deductions_amount", sa.Numeric(12, 2), server_default="0", nullable=False),
        sa.Column("manual_adjustment", sa.Numeric(12, 2), server_default="0", nullable=False),
        sa.Column("adjustment_note", sa.Text(), nullable=True),
        sa.Column("net_amount", sa.Numeric(12, 2), server_default="0", nullable=False),
        *_timestamps(),
        sa.PrimaryKeyConstraint("id"),
        sa.UniqueConstraint("payroll_run_id", "employee_id", name="uq_payroll_item_employee"),
    )
    op.create_index("ix_payroll_items_payroll_run_id", "payroll_items", ["payroll_run_id"])

    op.create_table(
        "payroll_entries",
        _id(),
        _fk("payroll_run_id", "payroll_runs.id", nullable=False, ondelete="CASCADE"),
        _fk("employee_id", "employees.id", nullable=False),
        sa.Column("kind", sa.String(20), nullable=False),
        sa.Column("category_code", sa.String(50), nullable=False),
        sa.Column("amount", sa.Numeric(12, 2), nullable=False),
        sa.Column("description", sa.Text(), nullable=True),
        sa.Column("is_approved", sa.Boolean(), server_default=sa.false(), nullable=False),
        _fk("created_by", "users.id"),
        *_timestamps(),
        sa.PrimaryKeyConstraint("id"),
    )
    op.create_index("ix_payroll_entries_payroll_run_id", "payroll_entries", ["payroll_run_id"])

    # Documents
    op.create_table(
        "employee_documents",
        _id(),
        _fk("employee_id", "employees.id", nullable=False, ondelete="CASCADE"),
        _fk("document_type_id", "document_types.id", nullable=False),
        sa.Column("document_no", sa.String(100), nullable=True),
        sa.Column("issue_date", sa.Date(), nullable=True),
        sa.Column("expiry_date", sa.Date(), nullable=True),
        sa.Column("issued_by", sa.String(255), nullable=True),
        sa.Column("notes", sa.Text(), nullable=True),
        sa.Column("is_verified", sa.Boolean(), server_default=sa.false(), nullable=False),
        sa.Column("verified_at", sa.DateTime(timezone=True), nullable=True),
        _fk("verified_by", "users.id"),
        *_timestamps(),
        sa.PrimaryKeyConstraint("id"),
    )
    op.create_index("ix_employee_documents_employee_id", "employee_documents", ["employee_id"])
    op.create_index("ix_employee_documents_expiry_date", "employee_documents", ["expiry_date"])

    op.create_table(
        "document_files",
        _id(),
        _fk("document_id", "employee_documents.id", nullable=False, ondelete="CASCADE"),
        sa.Column("version_no", sa.Integer(), nullable=False),
        sa.Column("file_name", sa.String(255), nullable=False),
        sa.Column("storage_path", sa.String(500), nullable=False),
        sa.Column("content_type", sa.String(100), nullable=False),
        sa.Column("size_bytes", sa.Integer(), nullable=False),
        sa.Column("content_hash", sa.String(64), nullable=False),
        _fk("uploaded_by", "users.id"),
        *_timestamps(),
        sa.PrimaryKeyConstraint("id"),
        sa.UniqueConstraint("document_id", "version_no", name="uq_document_file_version"),
    )
    op.create_index("ix_document_files_document_id", "document_files", ["document_id"])

    # Alerts
    op.create_table(
        "alerts",
        _id(),
        _fk("rule_id", "alert_rules.id", nullable=False, ondelete="CASCADE"),
        _fk("employee_id", "employees.id", nullable=False, ondelete="CASCADE"),
        _fk("document_id", "employee_documents.id", ondelete="CASCADE"),
        sa.Column("entity", sa.String(50), nullable=False),
        sa.Column("date_field", sa.String(100), nullable=False),
        sa.Column("due_date", sa.Date(), nullable=False),
        sa.Column("days_left", sa.Integer(), nullable=False),
        sa.Column("severity", sa.String(20), nullable=False),
        sa.Column("message", sa.Text(), nullable=False),
        sa.Column("is_read", sa.Boolean(), server_default=sa.false(), nullable=False),
        sa.Column("is_dismissed", sa.Boolean(), server_default=sa.false(), nullable=False),
        sa.Column("read_at", sa.DateTime(timezone=True), nullable=True),
        sa.Column("dismissed_at", sa.DateTime(timezone=True), nullable=True),
        sa.Column("resolved_at", sa.DateTime(timezone=True), nullable=True),
        *_timestamps(),
        sa.PrimaryKeyConstraint("id"),
    )
    op.create_index("ix_alerts_employee_id", "alerts", ["employee_id"])
    op.create_index("idx_alerts_instance", "alerts", ["rule_id", "employee_id", "document_id"])
    op.create_index("idx_alerts_open", "alerts", ["is_dismissed", "resolved_at"])

    # Leaves, transfers and assets
    op.create_table(
        "leave_requests",
        _id(),
        _fk("employee_id", "employees.id", nullable=False, ondelete="CASCADE"),
        _fk("leave_type_id", "leave_types.id", nullable=False),
        sa.Column("start_date", sa.Date(), nullable=False),
        sa.Column("end_date", sa.Date(), nullable=False),
        sa.Column("days", sa.Integer(), nullable=False),
        sa.Column("reason", sa.Text(), nullable=True),
        sa.Column("status", sa.String(20), server_default="PENDING", nullable=False),
        _fk("decided_by", "users.id"),
        sa.Column("decided_at", sa.DateTime(timezone=True), nullable=True),
        sa.Column("rejection_reason", sa.Text(), nullable=True),
        *_timestamps(),
        sa.PrimaryKeyConstraint("id"),
    )
    op.create_index("ix_leave_requests_employee_id", "leave_requests", ["employee_id"])

    op.create_table(
        "employee_site_transfers",
        _id(),
        _fk("employee_id", "employees.id", nullable=False, ondelete="CASCADE"),
        _fk("from_worksite_id", "worksites.id"),
        _fk("to_worksite_id", "worksites.id", nullable=False),
        sa.Column("transfer_date", sa.Date(), nullable=False),
        sa.Column("reason", sa.Text(), nullable=True),
        sa.Column("status", sa.String(20), server_default="PENDING", nullable=False),
        _fk("requested_by", "users.id"),
        _fk("approved_by", "users.id"),
        sa.Column("approved_at", sa.DateTime(timezone=True), nullable=True),
        sa.Column("completed_at", sa.DateTime(timezone=True), nullable=True),
        *_timestamps(),
        sa.PrimaryKeyConstraint("id"),
    )
    op.create_index("ix_employee_site_transfers_employee_id", "employee_site_transfers", ["employee_id"])

    op.create_table(
        "assets",
        _id(),
        sa.Column("asset_no", sa.String(50), nullable=False),
        sa.Column("name", sa.String(255), nullable=False),
        _fk("category_id", "asset_categories.id"),
        _fk("worksite_id", "worksites.id"),
        sa.Column("serial_no", sa.String(100), nullable=True),
        sa.Column("status", sa.String(20), server_default="AVAILABLE", nullable=False),
        sa.Column("purchase_date", sa.Date(), nullable=True),
        sa.Column("purchase_cost", sa.Numeric(12, 2), nullable=True),
        sa.Column("notes", sa.Text(), nullable=True),
        *_timestamps(),
        sa.PrimaryKeyConstraint("id"),
        sa.UniqueConstraint("asset_no"),
    )

    op.create_table(
        "asset_assignments",
        _id(),
        _fk("asset_id", "assets.id", nullable=False, ondelete="CASCADE"),
        _fk("employee_id", "employees.id", nullable=False, ondelete="CASCADE"),
        sa.Column("assigned_on", sa.Date(), nullable=False),
        sa.Column("returned_on", sa.Date(), nullable=True),
        sa.Column("condition_notes", sa.Text(), nullable=True),
        *_timestamps(),
        sa.PrimaryKeyConstraint("id"),
    )
    op.create_index("ix_asset_assignments_asset_id", "asset_assignments", ["asset_id"])
    op.create_index("ix_asset_assignments_employee_id", "asset_assignments", ["employee_id"])

    # Audit log
    op.create_table(
        "audit_logs",
        _id(),
        _fk("actor_id", "users.id", ondelete="SET NULL"),
        sa.Column("action", sa.String(50), nullable=False),
        sa.Column("entity", sa.String(100), nullable=False),
        sa.Column("entity_id", sa.String(64), nullable=True),
        sa.Column("old_values", postgresql.JSONB(), nullable=True),
        sa.Column("new_values", postgresql.JSONB(), nullable=True),
        sa.Column("ip_address", sa.String(45), nullable=True),
        sa.Column("user_agent", sa.Text(), nullable=True),
        sa.Column("created_at", sa.DateTime(timezone=True), server_default=sa.text("now()"), nullable=False),
        sa.PrimaryKeyConstraint("id"),
    )
    op.create_index("idx_audit_logs_created", "audit_logs", ["created_at"])
    op.create_index("idx_audit_logs_entity", "audit_logs", ["entity", "entity_id"])


def downgrade() -> None:
    op.drop_table("audit_logs")
    op.drop_table("asset_assignments")
    op.drop_table("assets")
    op.drop_table("employee_site_transfers")
    op.drop_table("leave_requests")
    op.drop_table("alerts")
    op.drop_table("document_files")
    op.drop_table("employee_documents")
    op.drop_table("payroll_entries")
    op.drop_table("payroll_items")
    op.drop_table("payroll_runs")
    op.drop_table("attendance_records")
    op.drop_table("attendance_periods")
    op.drop_table("employee_salary_profiles")
    op.drop_table("employee_employments")
    op.drop_table("employee_work_statuses")
    op.drop_table("employee_identities")
    op.drop_table("employees")
    op.drop_table("numbering_rules")
    op.drop_table("document_requirements")
    op.drop_table("payroll_rule_versions")
    for table in reversed(LOOKUP_TABLES):
        op.drop_table(table)
    op.drop_table("user_roles")
    op.drop_table("worksites")
    op.drop_table("role_permissions")
    op.drop_table("permissions")
    op.drop_table("roles")
    op.drop_table("users")
