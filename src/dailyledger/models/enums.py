"""
Enums for domain models.
Enums provide type safety and clarity. Validation for categorical fields.
"""

import enum


class LineKind(str, enum.Enum):
    """Which child table a daily record line item lives in."""

    SALES = "SALES"
    PAYMENT = "PAYMENT"
    SUMMARY = "SUMMARY"


class SalesCategory(str, enum.Enum):
    """Sales line items of a daily record."""

    GROSS_SALES = "GROSS_SALES"
    SURCHARGES = "SURCHARGES"
    NET_SALES = "NET_SALES"
    COLLECTED_AMOUNT = "COLLECTED_AMOUNT"


class PaymentMethod(str, enum.Enum):
    """Payment methods accepted at the till."""

    CASH = "CASH"
    ATH = "ATH"
    DEBIT = "DEBIT"
    CREDIT = "CREDIT"


class SummaryLabel(str, enum.Enum):
    """Summary line items. Derived ones are stored with is_calculated=True."""

    TOTAL_BY_PAYMENT_METHOD = "TOTAL_BY_PAYMENT_METHOD"
    PETTY_CASH_EXPENSES = "PETTY_CASH_EXPENSES"
    BALANCE = "BALANCE"
    DEPOSIT = "DEPOSIT"
    FIXED_FLOAT = "FIXED_FLOAT"


class AuditAction(str, enum.Enum):
    """Audit trail actions."""

    CREATE = "CREATE"
    UPDATE = "UPDATE"
    DELETE = "DELETE"


class WarningCode(str, enum.Enum):
    """Soft checks that need an explicit operator confirmation."""

    NET_EXCEEDS_GROSS = "NET_EXCEEDS_GROSS"
    PAYMENT_MISMATCH = "PAYMENT_MISMATCH"
    NEGATIVE_BALANCE = "NEGATIVE_BALANCE"
    CONFIRM_SAVE = "CONFIRM_SAVE"
    DUPLICATE_DATE = "DUPLICATE_DATE"
    CONFIRM_CHANGES = "CONFIRM_CHANGES"
    CONFIRM_DELETE = "CONFIRM_DELETE"


class PaymentType(str, enum.Enum):
    """How an employee was paid."""

    CASH = "CASH"
    BANK_TRANSFER = "BANK_TRANSFER"
