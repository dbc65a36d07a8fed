"""Payroll arithmetic tests."""

from decimal import Decimal
from types import SimpleNamespace

import pytest

from workforce_api.models.domain.employee import PaymentType, TaxStatus
from workforce_api.models.domain.workflow import AttendanceType
from workforce_api.services.payroll_calculator import (
    AttendanceTotals,
    PayrollSettings,
    SalaryTerms,
    base_pay,
    calculate_pay,
    gross_up,
    net_amount,
    resolve_tax_rate,
    round_money,
)

RATE_13 = Decimal("13")


def _record(total: str, overtime: str = "0", night: str = "0", kind: AttendanceType = AttendanceType.NORMAL):
    return SimpleNamespace(
        total_hours=Decimal(total),
        overtime_hours=Decimal(overtime),
        night_hours=Decimal(night),
        attendance_type=kind,
    )


class TestRounding:
    """Money rounding."""

    @pytest.mark.parametrize(
        "value,expected",
        [
            ("1.005", "1.01"),
            ("1.004", "1.00"),
            ("-1.005", "-1.01"),
            ("2.5", "2.50"),
        ],
    )
    def test_round_half_up(self, value: str, expected: str) -> None:
        assert round_money(Decimal(value)) == Decimal(expected)


class TestGrossUp:
    """Net to gross conversion."""

    def test_net_salary_grossed_up_at_13_percent(self) -> None:
        assert gross_up(Decimal("85000"), RATE_13) == Decimal("97701.15")

    def test_zero_rate_keeps_amount(self) -> None:
        assert gross_up(Decimal("50000"), Decimal("0")) == Decimal("50000.00")

    def test_full_rate_rejected(self) -> None:
        with pytest.raises(ValueError):
            gross_up(Decimal("1000"), Decimal("100"))


class TestTaxRate:
    """NDFL rate resolution."""

    def test_custom_rate_wins(self) -> None:
        rate = resolve_tax_rate(
            TaxStatus.RESIDENT, Decimal("15"), {"NDFL_RESIDENT": RATE_13}, RATE_13, Decimal("30")
        )
        assert rate == Decimal("15")

    def test_rule_rate_used(self) -> None:
        rate = resolve_tax_rate(
            TaxStatus.NON_RESIDENT, None, {"NDFL_NON_RESIDENT": Decimal("30")}, RATE_13, Decimal("25")
        )
        assert rate == Decimal("30")

    @pytest.mark.parametrize("status", [TaxStatus.PATENT, TaxStatus.HQS])
    def test_patent_and_hqs_fall_back_to_resident_rule(self, status: TaxStatus) -> None:
        rate = resolve_tax_rate(status, None, {"NDFL_RESIDENT": Decimal("13")}, Decimal("10"), Decimal("30"))
        assert rate == Decimal("13")

    def test_configured_default_without_rules(self) -> None:
        assert resolve_tax_rate("NON_RESIDENT", None, {}, RATE_13, Decimal("30")) == Decimal("30")
        assert resolve_tax_rate("RESIDENT", None, {}, RATE_13, Decimal("30")) == RATE_13


class TestAttendanceTotals:
    """Bucketing of attendance rows."""

    def test_from_records(self) -> None:
        totals = AttendanceTotals.from_records(
            [
                _record("8"),
                _record("10", overtime="2"),
                _record("8", night="8"),
                _record("8", kind=AttendanceType.HOLIDAY),
                _record("0"),
            ]
        )
        assert totals.worked_days == 4
        assert totals.worked_hours == Decimal("34")
        assert totals.overtime_hours == Decimal("2")
        assert totals.night_hours == Decimal("8")
        assert totals.holiday_hours == Decimal("8")


class TestBasePay:
    """Base pay per payment type."""

    def test_monthly_full_month(self) -> None:
        terms = SalaryTerms(PaymentType.MONTHLY, gross_salary=Decimal("100000"))
        attendance = AttendanceTotals(worked_days=23)
        assert base_pay(terms, attendance, RATE_13, PayrollSettings()) == Decimal("100000.00")

    def test_monthly_pro_rated(self) -> None:
        terms = SalaryTerms(PaymentType.MONTHLY, gross_salary=Decimal("100000"))
        attendance = AttendanceTotals(worked_days=11)
        assert base_pay(terms, attendance, RATE_13, PayrollSettings()) == Decimal("50000.00")

    def test_daily(self) -> None:
        terms = SalaryTerms(PaymentType.DAILY, daily_rate=Decimal("3000"))
        attendance = AttendanceTotals(worked_days=20)
        assert base_pay(terms, attendance, RATE_13, PayrollSettings()) == Decimal("60000.00")

    def test_piece_rate_has_no_base(self) -> None:
        terms = SalaryTerms(PaymentType.PIECE_RATE)
        attendance = AttendanceTotals(worked_days=20, worked_hours=Decimal("160"))
        assert base_pay(terms, attendance, RATE_13, PayrollSettings()) == Decimal("0")


class TestCalculatePay:
    """Full payroll figures."""

    def test_hourly_employee(self) -> None:
        terms = SalaryTerms(PaymentType.HOURLY, hourly_rate=Decimal("350"))
        attendance = AttendanceTotals(worked_days=20, worked_hours=Decimal("160"))

        figures = calculate_pay(terms, attendance, RATE_13)

        assert figures.base_amount == Decimal("56000.00")
        assert figures.gross_amount == Decimal("56000.00")
        assert figures.tax_amount == Decimal("7280.00")
        assert figures.net_amount == Decimal("48720.00")

    def test_overtime_premium_on_monthly_salary(self) -> None:
        terms = SalaryTerms(PaymentType.MONTHLY, gross_salary=Decimal("100000"))
        attendance = AttendanceTotals(worked_days=22, overtime_hours=Decimal("10"))

        figures = calculate_pay(terms, attendance, RATE_13)

        # 100000 / 176 h * 10 h * 1.5
        assert figures.overtime_amount == Decimal("8522.73")
        assert figures.gross_amount == Decimal("108522.73")

    def test_earnings_deductions_and_adjustment(self) -> None:
        terms = SalaryTerms(PaymentType.DAILY, daily_rate=Decimal("1000"))
        attendance = AttendanceTotals(worked_days=10)

        figures = calculate_pay(
            terms,
            attendance,
            Decimal("10"),
            earnings=Decimal("2000"),
            deductions=Decimal("500"),
            manual_adjustment=Decimal("-100"),
        )

        assert figures.gross_amount == Decimal("12000.00")
        assert figures.tax_amount == Decimal("1200.00")
        assert figures.net_amount == Decimal("10200.00")

    def test_net_amount_recomputed_with_new_adjustment(self) -> None:
        terms = SalaryTerms(PaymentType.HOURLY, hourly_rate=Decimal("350"))
        figures = calculate_pay(terms, AttendanceTotals(worked_hours=Decimal("160")), RATE_13)
        assert net_amount(figures, Decimal("280")) == Decimal("49000.00")
