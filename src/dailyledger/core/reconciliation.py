"""Daily balance reconciliation engine.

Pure functions only: parsing operator input, computing the derived figures,
running the save checks, diffing edits, and mapping an entry to and from its
persisted line items. Nothing in here touches the database.

Derived figures:
    collected_amount        = net_sales + surcharges
    total_by_payment_method = cash + ath + debit + credit
    balance                 = cash - petty_cash_total - fixed_float - deposit
                              (exactly 0 when |balance| < 0.01)
"""

import os
from datetime import date as date_type
from decimal import Decimal
from typing import Any, Callable, Iterable

from pydantic import BaseModel, ConfigDict, Field, field_validator

from dailyledger.core.errors import ConfirmationRequiredError, SaveDeclinedError, ValidationError
from dailyledger.core.validators import (
    MAX_AMOUNT,
    parse_amount,
    parse_required_amount,
    to_cents,
    validate_currency,
)
from dailyledger.models.enums import LineKind, PaymentMethod, SalesCategory, SummaryLabel, WarningCode
from dailyledger.utils.datetime import parse_local_date

# Starting till float used when the operator leaves the field blank
DEFAULT_FIXED_FLOAT = Decimal(os.getenv("FIXED_FLOAT_DEFAULT", "147.50"))

# Payment totals may differ from the collected amount by 1% or 50 cents, whichever is larger
MISMATCH_TOLERANCE_RATE = Decimal("0.01")
MISMATCH_TOLERANCE_MIN = Decimal("0.50")

BALANCE_EPSILON = Decimal("0.01")

AMOUNT_FIELDS = (
    "gross_sales",
    "surcharges",
    "net_sales",
    "cash",
    "ath",
    "debit",
    "credit",
    "deposit",
    "fixed_float",
)

# Fields compared by apply_edit, in audit order
TRACKED_FIELDS = (
    "gross_sales",
    "surcharges",
    "net_sales",
    "cash",
    "ath",
    "debit",
    "credit",
    "petty_cash_total",
    "fixed_float",
    "deposit",
)


class EntryForm(BaseModel):
    """Raw operator input. Amounts are free text exactly as typed."""

    date: str
    gross_sales: str | None = None
    surcharges: str | None = None
    net_sales: str | None = None
    cash: str | None = None
    ath: str | None = None
    debit: str | None = None
    credit: str | None = None
    deposit: str | None = None
    fixed_float: str | None = None

    @field_validator(*AMOUNT_FIELDS, mode="before")
    @classmethod
    def stringify_numbers(cls, v: Any) -> Any:
        """Accept JSON numbers as well as strings."""
        if isinstance(v, (int, float, Decimal)) and not isinstance(v, bool):
            return str(v)
        return v

    @field_validator("date", mode="before")
    @classmethod
    def stringify_date(cls, v: Any) -> Any:
        if isinstance(v, date_type):
            return v.isoformat()
        return v


class DerivedInputs(BaseModel):
    """Numbers the derived figures depend on."""

    net_sales: Decimal = Decimal("0")
    surcharges: Decimal = Decimal("0")
    cash: Decimal = Decimal("0")
    ath: Decimal = Decimal("0")
    debit: Decimal = Decimal("0")
    credit: Decimal = Decimal("0")
    petty_cash_total: Decimal = Decimal("0")
    fixed_float: Decimal = DEFAULT_FIXED_FLOAT
    deposit: Decimal = Decimal("0")


class DerivedFigures(BaseModel):
    """Figures computed from the inputs. Never rounded here; round for display only."""

    model_config = ConfigDict(frozen=True)

    collected_amount: Decimal
    total_by_payment_method: Decimal
    petty_cash_total: Decimal
    balance: Decimal


class DailyEntry(BaseModel):
    """Parsed, validated daily entry."""

    model_config = ConfigDict(frozen=True)

    date: date_type
    gross_sales: Decimal
    surcharges: Decimal = Decimal("0")
    net_sales: Decimal
    cash: Decimal = Decimal("0")
    ath: Decimal = Decimal("0")
    debit: Decimal = Decimal("0")
    credit: Decimal = Decimal("0")
    deposit: Decimal = Decimal("0")
    fixed_float: Decimal = DEFAULT_FIXED_FLOAT
    petty_cash_total: Decimal = Decimal("0")

    def inputs(self) -> DerivedInputs:
        return DerivedInputs(
            net_sales=self.net_sales,
            surcharges=self.surcharges,
            cash=self.cash,
            ath=self.ath,
            debit=self.debit,
            credit=self.credit,
            petty_cash_total=self.petty_cash_total,
            fixed_float=self.fixed_float,
            deposit=self.deposit,
        )

    def derived(self) -> DerivedFigures:
        return compute_derived(self.inputs())


class ValidationWarning(BaseModel):
    """A soft check the operator has to confirm before the save goes ahead."""

    code: WarningCode
    message: str

    def as_dict(self) -> dict[str, str]:
        return {"code": self.code.value, "message": self.message}


class ValidationOutcome(BaseModel):
    """Result of validate_for_save.

    Either ``error`` is set (hard block, nothing may be written) or ``entry``
    and ``derived`` are set together with the ordered soft ``warnings``.
    """

    error: str | None = None
    error_details: dict[str, Any] | None = None
    entry: DailyEntry | None = None
    derived: DerivedFigures | None = None
    warnings: list[ValidationWarning] = Field(default_factory=list)

    @property
    def ok(self) -> bool:
        return self.error is None

    def raise_for_error(self) -> None:
        """Raise ValidationError if a hard check failed."""
        if self.error is not None:
            raise ValidationError(self.error, details=self.error_details)


class ChangeSet(BaseModel):
    """Field-level diff produced by apply_edit. Becomes the UPDATE audit payload."""

    changes: dict[str, dict[str, str]] = Field(default_factory=dict)

    @property
    def date_changed(self) -> bool:
        return "date" in self.changes

    @property
    def count(self) -> int:
        return len(self.changes)

    @property
    def is_empty(self) -> bool:
        return not self.changes


class LineItem(BaseModel):
    """One row of sales_data, payment_methods or summary_data."""

    model_config = ConfigDict(frozen=True)

    kind: LineKind
    key: str
    amount: Decimal
    is_calculated: bool = False


# ─────── COMPUTATION ────────


def compute_derived(inputs: DerivedInputs) -> DerivedFigures:
    """Compute collected amount, payment total and balance.

    Runs on every input change for live feedback, so it must never raise.
    """
    collected_amount = inputs.net_sales + inputs.surcharges
    total_by_payment_method = inputs.cash + inputs.ath + inputs.debit + inputs.credit

    balance = inputs.cash - inputs.petty_cash_total - inputs.fixed_float - inputs.deposit
    if abs(balance) < BALANCE_EPSILON:
        # Also normalizes Decimal("-0.00")
        balance = Decimal("0")

    return DerivedFigures(
        collected_amount=collected_amount,
        total_by_payment_method=total_by_payment_method,
        petty_cash_total=inputs.petty_cash_total,
        balance=balance,
    )


def preview(form: EntryForm, petty_cash_total: Decimal) -> DerivedFigures:
    """Lenient recomputation from raw form input. Unparsable fields count as 0."""
    return compute_derived(
        DerivedInputs(
            net_sales=parse_amount(form.net_sales),
            surcharges=parse_amount(form.surcharges),
            cash=parse_amount(form.cash),
            ath=parse_amount(form.ath),
            debit=parse_amount(form.debit),
            credit=parse_amount(form.credit),
            petty_cash_total=petty_cash_total,
            fixed_float=_parse_fixed_float(form.fixed_float),
            deposit=parse_amount(form.deposit),
        )
    )


def _parse_fixed_float(value: str | None) -> Decimal:
    if value is None or not str(value).strip():
        return DEFAULT_FIXED_FLOAT
    return parse_amount(value)


# ─────── VALIDATION ────────


def parse_entry(
    form: EntryForm, petty_cash_total: Decimal
) -> tuple[DailyEntry | None, str | None, dict[str, Any] | None]:
    """Apply the hard checks and build a DailyEntry.

    Returns ``(entry, None, None)`` on success or ``(None, error, details)``.
    """
    try:
        entry_date = parse_local_date(form.date)
    except ValueError as e:
        return None, str(e), {"field": "date"}

    gross_sales = parse_required_amount(form.gross_sales)
    net_sales = parse_required_amount(form.net_sales)
    if gross_sales is None or net_sales is None:
        missing = [
            name
            for name, value in (("gross_sales", gross_sales), ("net_sales", net_sales))
            if value is None
        ]
        return None, "Missing required sales fields", {"fields": missing}

    values = {
        "gross_sales": gross_sales,
        "surcharges": parse_amount(form.surcharges),
        "net_sales": net_sales,
        "cash": parse_amount(form.cash),
        "ath": parse_amount(form.ath),
        "debit": parse_amount(form.debit),
        "credit": parse_amount(form.credit),
        "deposit": parse_amount(form.deposit),
        "fixed_float": _parse_fixed_float(form.fixed_float),
    }

    negative = [name for name, value in values.items() if value < 0]
    if negative:
        return None, "Amounts cannot be negative", {"fields": negative}

    too_large = []
    for name, value in values.items():
        try:
            validate_currency(to_cents(value))
        except ValueError:
            too_large.append(name)
    if too_large:
        return (
            None,
            "Amounts exceed the maximum allowed",
            {"fields": too_large, "max": str(MAX_AMOUNT)},
        )

    entry = DailyEntry(date=entry_date, petty_cash_total=petty_cash_total, **values)

    # Summary rows share the NUMERIC(12, 2) limit
    derived = entry.derived()
    totals = [
        name
        for name, value in (
            ("collected_amount", derived.collected_amount),
            ("total_by_payment_method", derived.total_by_payment_method),
            ("balance", derived.balance),
        )
        if abs(to_cents(value)) > MAX_AMOUNT
    ]
    if totals:
        return (
            None,
            "Totals exceed the maximum allowed",
            {"fields": totals, "max": str(MAX_AMOUNT)},
        )
    return entry, None, None


def validate_for_save(
    form: EntryForm,
    petty_cash_total: Decimal,
    existing_date_record_exists: bool,
) -> ValidationOutcome:
    """Run the save checks in order.

    Hard checks (missing gross/net sales, negative amounts, amounts or totals
    beyond the storable maximum, bad date) return an outcome with ``error`` set.
    Otherwise the outcome lists the soft warnings in the order the operator is
    asked about them: net above gross, payment mismatch, negative balance, the
    generic save confirmation, duplicate date.
    """
    entry, error, details = parse_entry(form, petty_cash_total)
    if entry is None:
        return ValidationOutcome(error=error, error_details=details)

    derived = entry.derived()
    warnings: list[ValidationWarning] = []

    if entry.net_sales > entry.gross_sales:
        warnings.append(
            ValidationWarning(
                code=WarningCode.NET_EXCEEDS_GROSS,
                message=(
                    f"Net sales (${entry.net_sales:.2f}) exceed gross sales "
                    f"(${entry.gross_sales:.2f}). Proceed anyway?"
                ),
            )
        )

    difference = abs(derived.total_by_payment_method - derived.collected_amount)
    tolerance = max(derived.collected_amount * MISMATCH_TOLERANCE_RATE, MISMATCH_TOLERANCE_MIN)
    if difference > tolerance:
        warnings.append(
            ValidationWarning(
                code=WarningCode.PAYMENT_MISMATCH,
                message=(
                    f"Payment methods total (${derived.total_by_payment_method:.2f}) does not "
                    f"match the collected amount (${derived.collected_amount:.2f}). "
                    f"Difference: ${difference:.2f}. Proceed anyway?"
                ),
            )
        )

    if derived.balance < 0:
        warnings.append(
            ValidationWarning(
                code=WarningCode.NEGATIVE_BALANCE,
                message=(
                    f"Balance would be negative (${derived.balance:.2f}). "
                    "This may indicate an error. Proceed anyway?"
                ),
            )
        )

    warnings.append(
        ValidationWarning(
            code=WarningCode.CONFIRM_SAVE,
            message=f"Save the record for {entry.date.isoformat()}?",
        )
    )

    if existing_date_record_exists:
        warnings.append(
            ValidationWarning(
                code=WarningCode.DUPLICATE_DATE,
                message=(
                    f"A record already exists for {entry.date.isoformat()}. "
                    "Create a duplicate anyway?"
                ),
            )
        )

    return ValidationOutcome(entry=entry, derived=derived, warnings=warnings)


def confirm_all(
    warnings: Iterable[ValidationWarning],
    confirm: Callable[[ValidationWarning], bool],
) -> None:
    """Ask about each warning in order. The first decline aborts with SaveDeclinedError."""
    for warning in warnings:
        if not confirm(warning):
            raise SaveDeclinedError(warning.code.value)


def require_confirmations(
    warnings: Iterable[ValidationWarning],
    acknowledged: Iterable[WarningCode | str],
) -> None:
    """Request/response form of confirm_all.

    The client sends back the codes it has confirmed; anything still pending is
    reported, in order, through ConfirmationRequiredError.
    """
    acked = {WarningCode(code) for code in acknowledged}
    pending = [w.as_dict() for w in warnings if w.code not in acked]
    if pending:
        raise ConfirmationRequiredError(pending)


# ─────── EDITING ────────


def _display(value: Decimal) -> str:
    return str(to_cents(value))


def apply_edit(original: DailyEntry, changed: DailyEntry) -> ChangeSet:
    """Diff the loaded entry against the edited one.

    Raises:
        ValidationError: If nothing changed and the date is the same
    """
    changes: dict[str, dict[str, str]] = {}

    for field in TRACKED_FIELDS:
        old = getattr(original, field)
        new = getattr(changed, field)
        if to_cents(old) != to_cents(new):
            changes[field] = {"old": _display(old), "new": _display(new)}

    if original.date != changed.date:
        changes["date"] = {"old": original.date.isoformat(), "new": changed.date.isoformat()}

    changeset = ChangeSet(changes=changes)
    if changeset.is_empty:
        raise ValidationError("No changes detected")
    return changeset


def changes_warning(changeset: ChangeSet) -> ValidationWarning:
    """Confirmation prompt shown before an edit is persisted."""
    return ValidationWarning(
        code=WarningCode.CONFIRM_CHANGES,
        message=f"Save changes? {changeset.count} field(s) modified.",
    )


def delete_warning(entry: DailyEntry, day: str) -> ValidationWarning:
    """Confirmation prompt shown before a record and all its children are deleted."""
    return ValidationWarning(
        code=WarningCode.CONFIRM_DELETE,
        message=(
            f"Delete the record for {day}, {entry.date.isoformat()}? Sales, payment methods, "
            "summary and change history are removed too. This cannot be undone."
        ),
    )


# ─────── PERSISTENCE SHAPE ────────


def to_line_items(entry: DailyEntry, derived: DerivedFigures) -> list[LineItem]:
    """Flatten an entry and its frozen derived figures into child rows."""
    return [
        LineItem(kind=LineKind.SALES, key=SalesCategory.GROSS_SALES.value, amount=entry.gross_sales),
        LineItem(kind=LineKind.SALES, key=SalesCategory.SURCHARGES.value, amount=entry.surcharges),
        LineItem(kind=LineKind.SALES, key=SalesCategory.NET_SALES.value, amount=entry.net_sales),
        LineItem(
            kind=LineKind.SALES,
            key=SalesCategory.COLLECTED_AMOUNT.value,
            amount=derived.collected_amount,
        ),
        LineItem(kind=LineKind.PAYMENT, key=PaymentMethod.CASH.value, amount=entry.cash),
        LineItem(kind=LineKind.PAYMENT, key=PaymentMethod.ATH.value, amount=entry.ath),
        LineItem(kind=LineKind.PAYMENT, key=PaymentMethod.DEBIT.value, amount=entry.debit),
        LineItem(kind=LineKind.PAYMENT, key=PaymentMethod.CREDIT.value, amount=entry.credit),
        LineItem(
            kind=LineKind.SUMMARY,
            key=SummaryLabel.TOTAL_BY_PAYMENT_METHOD.value,
            amount=derived.total_by_payment_method,
            is_calculated=True,
        ),
        LineItem(
            kind=LineKind.SUMMARY,
            key=SummaryLabel.PETTY_CASH_EXPENSES.value,
            amount=derived.petty_cash_total,
            is_calculated=True,
        ),
        LineItem(
            kind=LineKind.SUMMARY,
            key=SummaryLabel.BALANCE.value,
            amount=derived.balance,
            is_calculated=True,
        ),
        LineItem(kind=LineKind.SUMMARY, key=SummaryLabel.DEPOSIT.value, amount=entry.deposit),
        LineItem(kind=LineKind.SUMMARY, key=SummaryLabel.FIXED_FLOAT.value, amount=entry.fixed_float),
    ]


def entry_from_line_items(entry_date: date_type, items: Iterable[LineItem]) -> DailyEntry:
    """Rebuild a DailyEntry from stored rows. Missing rows read as 0 (float: default)."""
    by_key = {(item.kind, item.key): item.amount for item in items}

    def amount(kind: LineKind, key: str, default: Decimal = Decimal("0")) -> Decimal:
        value = by_key.get((kind, key))
        return Decimal(value) if value is not None else default

    return DailyEntry(
        date=entry_date,
        gross_sales=amount(LineKind.SALES, SalesCategory.GROSS_SALES.value),
        surcharges=amount(LineKind.SALES, SalesCategory.SURCHARGES.value),
        net_sales=amount(LineKind.SALES, SalesCategory.NET_SALES.value),
        cash=amount(LineKind.PAYMENT, PaymentMethod.CASH.value),
        ath=amount(LineKind.PAYMENT, PaymentMethod.ATH.value),
        debit=amount(LineKind.PAYMENT, PaymentMethod.DEBIT.value),
        credit=amount(LineKind.PAYMENT, PaymentMethod.CREDIT.value),
        deposit=amount(LineKind.SUMMARY, SummaryLabel.DEPOSIT.value),
        fixed_float=amount(LineKind.SUMMARY, SummaryLabel.FIXED_FLOAT.value, DEFAULT_FIXED_FLOAT),
        petty_cash_total=amount(LineKind.SUMMARY, SummaryLabel.PETTY_CASH_EXPENSES.value),
    )


def snapshot(entry: DailyEntry) -> dict[str, str]:
    """Audit payload for CREATE: every tracked input as a 2-place string."""
    payload = {"date": entry.date.isoformat()}
    payload.update({field: _display(getattr(entry, field)) for field in TRACKED_FIELDS})
    return payload
