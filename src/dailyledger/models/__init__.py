"""Domain models package."""

from dailyledger.models.audit_log import AuditLogEntry
from dailyledger.models.daily_record import DailyRecord, PaymentLine, SalesLine, SummaryLine
from dailyledger.models.employee import Employee, EmployeePayment
from dailyledger.models.enums import (
    AuditAction,
    LineKind,
    PaymentMethod,
    PaymentType,
    SalesCategory,
    SummaryLabel,
    WarningCode,
)
from dailyledger.models.petty_cash import PettyCashCategory, PettyCashEntry
from dailyledger.models.user import User

__all__ = [
    "AuditAction",
    "AuditLogEntry",
    "DailyRecord",
    "Employee",
    "EmployeePayment",
    "LineKind",
    "PaymentLine",
    "PaymentMethod",
    "PaymentType",
    "PettyCashCategory",
    "PettyCashEntry",
    "SalesCategory",
    "SalesLine",
    "SummaryLabel",
    "SummaryLine",
    "User",
    "WarningCode",
]
