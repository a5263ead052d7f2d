"""Report endpoints: net tax report (JSON, CSV, Excel) and safe box report."""

import csv
import io
from datetime import date as date_type
from decimal import Decimal
from typing import Literal

from fastapi import APIRouter, Depends, Query
from fastapi.responses import StreamingResponse
from openpyxl import Workbook
from openpyxl.styles import Alignment, Font, PatternFill
from openpyxl.utils import get_column_letter

from dailyledger.api.auth import get_current_user
from dailyledger.api.daily_records import get_store
from dailyledger.core.logging import get_logger
from dailyledger.core.reconciliation import entry_from_line_items
from dailyledger.core.store import LedgerStore, record_line_items, stored_figures
from dailyledger.core.validators import to_cents
from dailyledger.models.daily_record import DailyRecord
from dailyledger.models.report_schemas import (
    NetTaxReport,
    NetTaxRow,
    NetTaxTotals,
    SafeBoxReport,
    SafeBoxRow,
    SafeBoxTotals,
)
from dailyledger.models.user import User
from dailyledger.utils.datetime import today_local

logger = get_logger(__name__)

router = APIRouter(prefix="/api/reports", tags=["reports"])

NET_TAX_HEADERS = [
    "Fecha",
    "Día",
    "Cargos y Comisiones",
    "Gastos Menores",
    "Total Ventas",
    "Monto Recaudado",
    "Depósito",
]

# Amount columns of NetTaxRow, in header order
NET_TAX_AMOUNTS = (
    "surcharges",
    "petty_cash_total",
    "total_by_payment_method",
    "collected_amount",
    "deposit",
)

SAFE_BOX_AMOUNTS = (
    "surcharges",
    "collected_amount",
    "total_by_payment_method",
    "balance",
    "deposit",
)


def _row_amounts(record: DailyRecord) -> dict[str, Decimal]:
    """Stored inputs and frozen figures of a record, rounded to cents."""
    entry = entry_from_line_items(record.date, record_line_items(record))
    figures = stored_figures(record)
    return {
        "surcharges": to_cents(entry.surcharges),
        "deposit": to_cents(entry.deposit),
        "petty_cash_total": to_cents(figures.petty_cash_total),
        "total_by_payment_method": to_cents(figures.total_by_payment_method),
        "collected_amount": to_cents(figures.collected_amount),
        "balance": to_cents(figures.balance),
    }


def _column_totals(rows: list, fields: tuple[str, ...]) -> dict[str, Decimal]:
    return {
        field: to_cents(sum((getattr(row, field) for row in rows), Decimal("0")))
        for field in fields
    }


async def build_net_tax_report(
    store: LedgerStore, start: date_type | None, end: date_type | None
) -> NetTaxReport:
    records = sorted(await store.list_records(start, end), key=lambda r: r.date)
    rows = []
    for record in records:
        amounts = _row_amounts(record)
        rows.append(
            NetTaxRow(
                date=record.date,
                day_name=record.day_name,
                **{field: amounts[field] for field in NET_TAX_AMOUNTS},
            )
        )
    return NetTaxReport(
        start=start,
        end=end,
        rows=rows,
        totals=NetTaxTotals(**_column_totals(rows, NET_TAX_AMOUNTS)),
    )


async def build_safe_box_report(
    store: LedgerStore, start: date_type | None, end: date_type | None
) -> SafeBoxReport:
    records = sorted(await store.list_records(start, end), key=lambda r: r.date)
    rows = []
    for record in records:
        amounts = _row_amounts(record)
        rows.append(
            SafeBoxRow(
                date=record.date,
                day_name=record.day_name,
                **{field: amounts[field] for field in SAFE_BOX_AMOUNTS},
            )
        )
    return SafeBoxReport(
        start=start,
        end=end,
        rows=rows,
        totals=SafeBoxTotals(**_column_totals(rows, SAFE_BOX_AMOUNTS)),
    )


def create_net_tax_csv(report: NetTaxReport) -> str:
    """Headers, one line per day, and a TOTAL line. Amounts with 2 decimals."""
    output = io.StringIO()
    writer = csv.writer(output, lineterminator="\n")

    writer.writerow(NET_TAX_HEADERS)
    for row in report.rows:
        writer.writerow(
            [row.date.isoformat(), row.day_name]
            + [f"{getattr(row, field):.2f}" for field in NET_TAX_AMOUNTS]
        )
    writer.writerow(
        ["", "TOTAL"] + [f"{getattr(report.totals, field):.2f}" for field in NET_TAX_AMOUNTS]
    )

    return output.getvalue()


def create_net_tax_excel(report: NetTaxReport) -> bytes:
    """Excel version of the net tax report with a bold TOTAL row."""
    wb = Workbook()
    ws = wb.active
    ws.title = "Impuestos Neto"

    header_fill = PatternFill(start_color="366092", end_color="366092", fill_type="solid")
    header_font = Font(bold=True, color="FFFFFF")

    for col_idx, header in enumerate(NET_TAX_HEADERS, start=1):
        cell = ws.cell(row=1, column=col_idx, value=header)
        cell.fill = header_fill
        cell.font = header_font
        cell.alignment = Alignment(horizontal="center", vertical="center")

    lines = [
        [row.date.isoformat(), row.day_name] + [getattr(row, f) for f in NET_TAX_AMOUNTS]
        for row in report.rows
    ]
    lines.append(["", "TOTAL"] + [getattr(report.totals, f) for f in NET_TAX_AMOUNTS])

    for row_idx, values in enumerate(lines, start=2):
        for col_idx, value in enumerate(values, start=1):
            if isinstance(value, Decimal):
                value = float(value)
            cell = ws.cell(row=row_idx, column=col_idx, value=value)
            if col_idx > 2:
                cell.number_format = "#,##0.00"

    total_row = len(lines) + 1
    for col_idx in range(1, len(NET_TAX_HEADERS) + 1):
        ws.cell(row=total_row, column=col_idx).font = Font(bold=True)

    for col_idx, header in enumerate(NET_TAX_HEADERS, start=1):
        ws.column_dimensions[get_column_letter(col_idx)].width = max(len(header) + 2, 12)

    ws.freeze_panes = "A2"

    output = io.BytesIO()
    wb.save(output)
    return output.getvalue()


@router.get("/net-tax", response_model=NetTaxReport)
async def net_tax_report(
    start: date_type | None = Query(None, description="Start date (YYYY-MM-DD)"),
    end: date_type | None = Query(None, description="End date (YYYY-MM-DD)"),
    store: LedgerStore = Depends(get_store),
    current_user: User = Depends(get_current_user),
):
    """Surcharges, petty cash, sales, collected amount and deposit per day, with totals."""
    return await build_net_tax_report(store, start, end)


@router.get("/net-tax/export")
async def export_net_tax_report(
    format: Literal["csv", "xlsx"] = Query("csv", description="Export format: csv or xlsx"),
    start: date_type | None = Query(None, description="Start date (YYYY-MM-DD)"),
    end: date_type | None = Query(None, description="End date (YYYY-MM-DD)"),
    store: LedgerStore = Depends(get_store),
    current_user: User = Depends(get_current_user),
):
    """Download the net tax report as CSV or Excel."""
    report = await build_net_tax_report(store, start, end)

    logger.info(
        "export.net_tax",
        format=format,
        count=len(report.rows),
        actor=current_user.actor_name,
        filters={"start": start and start.isoformat(), "end": end and end.isoformat()},
    )

    date_range = f"_{start.isoformat()}_a_{end.isoformat()}" if start and end else ""
    basename = f"reporte-impuestos-neto{date_range}_{today_local().isoformat()}"
    if format == "xlsx":
        content = create_net_tax_excel(report)
        media_type = "application/vnd.openxmlformats-officedocument.spreadsheetml.sheet"
        filename = f"{basename}.xlsx"
    else:
        content = create_net_tax_csv(report).encode("utf-8")
        media_type = "text/csv; charset=utf-8"
        filename = f"{basename}.csv"

    return StreamingResponse(
        io.BytesIO(content),
        media_type=media_type,
        headers={
            "Content-Disposition": f'attachment; filename="{filename}"',
            "Cache-Control": "no-cache, no-store, must-revalidate",
        },
    )


@router.get("/safe-box", response_model=SafeBoxReport)
async def safe_box_report(
    start: date_type | None = Query(None, description="Start date (YYYY-MM-DD)"),
    end: date_type | None = Query(None, description="End date (YYYY-MM-DD)"),
    store: LedgerStore = Depends(get_store),
    current_user: User = Depends(get_current_user),
):
    """Balance and deposit per day, with totals."""
    return await build_safe_box_report(store, start, end)
