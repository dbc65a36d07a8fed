"""Employee domain enums."""

from enum import StrEnum


class EmployeeStatus(StrEnum):
    """Employee lifecycle status."""

    ACTIVE = "ACTIVE"
    INACTIVE = "INACTIVE"
    TERMINATED = "TERMINATED"
    ON_LEAVE = "ON_LEAVE"


class Gender(StrEnum):
    MALE = "MALE"
    FEMALE = "FEMALE"


class WorkStatusType(StrEnum):
    """Work-authorization category."""

    LOCAL = "LOCAL"
    PATENT = "PATENT"
    VISA = "VISA"
    WORK_PERMIT = "WORK_PERMIT"
    RESIDENCE_PERMIT = "RESIDENCE_PERMIT"
    OTHER = "OTHER"


class PaymentType(StrEnum):
    """How an employee's base pay is determined."""

    MONTHLY = "MONTHLY"
    HOURLY = "HOURLY"
    DAILY = "DAILY"
    PIECE_RATE = "PIECE_RATE"


class TaxStatus(StrEnum):
    """Income tax classification held on the salary profile."""

    RESIDENT = "RESIDENT"
    NON_RESIDENT = "NON_RESIDENT"
    PATENT = "PATENT"
    HQS = "HQS"


class WorksiteStatus(StrEnum):
    ACTIVE = "ACTIVE"
    PLANNED = "PLANNED"
    SUSPENDED = "SUSPENDED"
    COMPLETED = "COMPLETED"


class ContactType(StrEnum):
    EMERGENCY = "EMERGENCY"
    FAMILY = "FAMILY"
    REFERENCE = "REFERENCE"
    OTHER = "OTHER"
