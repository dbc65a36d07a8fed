"""Payroll arithmetic.

Pure functions over frozen value objects; nothing here touches the database.
Amounts are ``Decimal`` rounded to kopecks with ROUND_HALF_UP, tax rates are
percentages (13 means 13%).
"""

from dataclasses import dataclass
from decimal import ROUND_HALF_UP, Decimal
from typing import Any, Iterable, Mapping

from workforce_api.models.domain.employee import PaymentType, TaxStatus
from workforce_api.models.domain.workflow import AttendanceType

ZERO = Decimal("0")
HUNDRED = Decimal("100")
CENTS = Decimal("0.01")

# Payroll rule codes holding the NDFL rate of each tax status
TAX_RULE_CODES: Mapping[TaxStatus, tuple[str, ...]] = {
    TaxStatus.RESIDENT: ("NDFL_RESIDENT",),
    TaxStatus.PATENT: ("NDFL_PATENT", "NDFL_RESIDENT"),
    TaxStatus.HQS: ("NDFL_HQS", "NDFL_RESIDENT"),
    TaxStatus.NON_RESIDENT: ("NDFL_NON_RESIDENT",),
}


def round_money(value: Decimal | int | str) -> Decimal:
    """Round to two decimal places, halves away from zero."""
    return Decimal(value).quantize(CENTS, rounding=ROUND_HALF_UP)


def _dec(value: Any) -> Decimal:
    if value is None:
        return ZERO
    return value if isinstance(value, Decimal) else Decimal(str(value))


@dataclass(frozen=True)
class PayrollSettings:
    """Standard schedule used for pro-rating and hourly equivalents."""

    working_days_per_month: int = 22
    working_hours_per_day: int = 8

    @property
    def standard_hours(self) -> Decimal:
        return Decimal(self.working_days_per_month * self.working_hours_per_day)


@dataclass(frozen=True)
class SalaryTerms:
    """Pay terms taken from an employee's salary profile."""

    payment_type: PaymentType
    gross_salary: Decimal | None = None
    net_salary: Decimal | None = None
    daily_rate: Decimal | None = None
    hourly_rate: Decimal | None = None
    overtime_multiplier: Decimal = Decimal("1.5")
    night_multiplier: Decimal = Decimal("1.2")
    holiday_multiplier: Decimal = Decimal("2.0")

    @classmethod
    def from_profile(cls, profile: Any) -> "SalaryTerms":
        return cls(
            payment_type=PaymentType(profile.payment_type),
            gross_salary=profile.gross_salary,
            net_salary=profile.net_salary,
            daily_rate=profile.daily_rate,
            hourly_rate=profile.hourly_rate,
            overtime_multiplier=_dec(profile.overtime_multiplier),
            night_multiplier=_dec(profile.night_multiplier),
            holiday_multiplier=_dec(profile.holiday_multiplier),
        )


@dataclass(frozen=True)
class AttendanceTotals:
    """Attendance of one employee over one period."""

    worked_days: int = 0
    worked_hours: Decimal = ZERO
    overtime_hours: Decimal = ZERO
    night_hours: Decimal = ZERO
    holiday_hours: Decimal = ZERO

    @classmethod
    def from_records(cls, records: Iterable[Any]) -> "AttendanceTotals":
        """Bucket attendance rows.

        A day counts as worked when it carries any hours; holiday hours are
        the hours of HOLIDAY-typed days.
        """
        worked_days = 0
        worked = overtime = night = holiday = ZERO
        for record in records:
            total = _dec(record.total_hours)
            if total > 0:
                worked_days += 1
            worked += total
            overtime += _dec(record.overtime_hours)
            night += _dec(record.night_hours)
            if record.attendance_type == AttendanceType.HOLIDAY:
                holiday += total
        return cls(worked_days, worked, overtime, night, holiday)


@dataclass(frozen=True)
class PayrollFigures:
    """Computed pay of one employee."""

    base_amount: Decimal
    overtime_amount: Decimal
    night_amount: Decimal
    holiday_amount: Decimal
    earnings_amount: Decimal
    gross_amount: Decimal
    tax_rate: Decimal
    tax_amount: Decimal
    deductions_amount: Decimal
    manual_adjustment: Decimal
    net_amount: Decimal


def gross_up(net: Decimal, tax_rate: Decimal) -> Decimal:
    """Gross amount whose after-tax value is ``net``: net / (1 - rate).

    Raises:
        ValueError: If the rate is 100% or more
    """
    fraction = tax_rate / HUNDRED
    if fraction >= 1:
        raise ValueError("Tax rate must be below 100%")
    return round_money(_dec(net) / (1 - fraction))


def resolve_tax_rate(
    tax_status: TaxStatus | str,
    custom_rate: Decimal | None,
    rule_rates: Mapping[str, Decimal],
    resident_default: Decimal,
    non_resident_default: Decimal,
) -> Decimal:
    """NDFL rate of an employee.

    A custom rate on the salary profile wins; otherwise the tax status selects
    a payroll rule, and the configured default applies when no rule is in force.
    """
    if custom_rate is not None:
        return _dec(custom_rate)
    status = TaxStatus(tax_status)
    for code in TAX_RULE_CODES[status]:
        if code in rule_rates:
            return _dec(rule_rates[code])
    return non_resident_default if status == TaxStatus.NON_RESIDENT else resident_default


def monthly_gross(terms: SalaryTerms, tax_rate: Decimal) -> Decimal:
    """Full-month gross of a MONTHLY salary; net-based salaries are grossed up."""
    if terms.gross_salary:
        return _dec(terms.gross_salary)
    if terms.net_salary:
        return gross_up(terms.net_salary, tax_rate)
    return ZERO


def hourly_equivalent(terms: SalaryTerms, tax_rate: Decimal, settings: PayrollSettings) -> Decimal:
    """Hourly value used to price overtime, night and holiday hours."""
    if terms.payment_type == PaymentType.MONTHLY:
        return monthly_gross(terms, tax_rate) / settings.standard_hours
    if terms.payment_type == PaymentType.DAILY:
        return _dec(terms.daily_rate) / Decimal(settings.working_hours_per_day)
    return _dec(terms.hourly_rate)


def base_pay(
    terms: SalaryTerms,
    attendance: AttendanceTotals,
    tax_rate: Decimal,
    settings: PayrollSettings,
) -> Decimal:
    """Base pay before premiums.

    MONTHLY salaries are pro-rated by worked days over the standard month
    when the employee worked fewer days. PIECE_RATE pay arrives through
    one-off earnings only.
    """
    if terms.payment_type == PaymentType.MONTHLY:
        full = monthly_gross(terms, tax_rate)
        standard = settings.working_days_per_month
        if attendance.worked_days >= standard:
            return round_money(full)
        return round_money(full * Decimal(attendance.worked_days) / Decimal(standard))
    if terms.payment_type == PaymentType.DAILY:
        return round_money(_dec(terms.daily_rate) * attendance.worked_days)
    if terms.payment_type == PaymentType.HOURLY:
        return round_money(_dec(terms.hourly_rate) * attendance.worked_hours)
    return ZERO


def calculate_pay(
    terms: SalaryTerms,
    attendance: AttendanceTotals,
    tax_rate: Decimal,
    earnings: Decimal = ZERO,
    deductions: Decimal = ZERO,
    manual_adjustment: Decimal = ZERO,
    settings: PayrollSettings = PayrollSettings(),
) -> PayrollFigures:
    """Compute one employee's payroll figures.

    Args:
        terms: Salary terms
        attendance: Attendance totals of the period
        tax_rate: NDFL rate in percent
        earnings: Sum of approved one-off earnings
        deductions: Sum of deductions
        manual_adjustment: Signed amount added to net
        settings: Standard schedule

    Returns:
        PayrollFigures where gross = base + premiums + earnings and
        net = gross - tax - deductions + manual_adjustment
    """
    hourly = hourly_equivalent(terms, tax_rate, settings)
    base = base_pay(terms, attendance, tax_rate, settings)
    overtime = round_money(hourly * attendance.overtime_hours * terms.overtime_multiplier)
    night = round_money(hourly * attendance.night_hours * terms.night_multiplier)
    holiday = round_money(hourly * attendance.holiday_hours * terms.holiday_multiplier)
    earnings = round_money(earnings)

    gross = base + overtime + night + holiday + earnings
    tax = round_money(gross * tax_rate / HUNDRED)
    deductions = round_money(deductions)
    adjustment = round_money(manual_adjustment)

    return PayrollFigures(
        base_amount=base,
        overtime_amount=overtime,
        night_amount=night,
        holiday_amount=holiday,
        earnings_amount=earnings,
        gross_amount=gross,
        tax_rate=round_money(tax_rate),
        tax_amount=tax,
        deductions_amount=deductions,
        manual_adjustment=adjustment,
        net_amount=gross - tax - deductions + adjustment,
    )


def net_amount(figures: PayrollFigures | Any, manual_adjustment: Decimal) -> Decimal:
    """Net pay of already computed figures under a new manual adjustment."""
    return (
        _dec(figures.gross_amount)
        - _dec(figures.tax_amount)
        - _dec(figures.deductions_amount)
        + round_money(manual_adjustment)
    )
