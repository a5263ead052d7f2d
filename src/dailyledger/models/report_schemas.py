"""Pydantic schemas for reports."""

from datetime import date as date_type
from decimal import Decimal

from pydantic import BaseModel


class NetTaxRow(BaseModel):
    date: date_type
    day_name: str
    surcharges: Decimal
    petty_cash_total: Decimal
    total_by_payment_method: Decimal
    collected_amount: Decimal
    deposit: Decimal


class NetTaxTotals(BaseModel):
    surcharges: Decimal
    petty_cash_total: Decimal
    total_by_payment_method: Decimal
    collected_amount: Decimal
    deposit: Decimal


class NetTaxReport(BaseModel):
    """Net sales and surcharges per day over a date range."""

    start: date_type | None
    end: date_type | None
    rows: list[NetTaxRow]
    totals: NetTaxTotals


class SafeBoxRow(BaseModel):
    date: date_type
    day_name: str
    surcharges: Decimal
    collected_amount: Decimal
    total_by_payment_method: Decimal
    balance: Decimal
    deposit: Decimal


class SafeBoxTotals(BaseModel):
    surcharges: Decimal
    collected_amount: Decimal
    total_by_payment_method: Decimal
    balance: Decimal
    deposit: Decimal


class SafeBoxReport(BaseModel):
    """Balance left in the safe box per day."""

    start: date_type | None
    end: date_type | None
    rows: list[SafeBoxRow]
    totals: SafeBoxTotals
