# File: tests/test_reports.py
"""Tests for the net tax and safe box reports and their exports."""

import io
from datetime import date
from decimal import Decimal

import pytest
from openpyxl import load_workbook

from dailyledger.api.reports import NET_TAX_HEADERS, create_net_tax_csv, create_net_tax_excel
from dailyledger.models.report_schemas import NetTaxReport, NetTaxRow, NetTaxTotals
from tests.factories import DailyRecordFactory, PettyCashFactory


def sample_report() -> NetTaxReport:
    row = NetTaxRow(
        date=date(2024, 3, 4),
        day_name="lunes",
        surcharges=Decimal("70"),
        petty_cash_total=Decimal("50.00"),
        total_by_payment_method=Decimal("1000.00"),
        collected_amount=Decimal("1000.00"),
        deposit=Decimal("300.00"),
    )
    return NetTaxReport(
        start=None,
        end=None,
        rows=[row],
        totals=NetTaxTotals(
            surcharges=Decimal("70.00"),
            petty_cash_total=Decimal("50.00"),
            total_by_payment_method=Decimal("1000.00"),
            collected_amount=Decimal("1000.00"),
            deposit=Decimal("300.00"),
        ),
    )


class TestNetTaxCsv:
    """CSV layout."""

    def test_header_rows_and_total(self):
        lines = create_net_tax_csv(sample_report()).splitlines()

        assert lines[0] == "Fecha,Día,Cargos y Comisiones,Gastos Menores,Total Ventas,Monto Recaudado,Depósito"
        assert lines[1] == "2024-03-04,lunes,70.00,50.00,1000.00,1000.00,300.00"
        assert lines[2] == ",TOTAL,70.00,50.00,1000.00,1000.00,300.00"
        assert len(lines) == 3


class TestNetTaxExcel:
    def test_workbook_layout(self):
        wb = load_workbook(io.BytesIO(create_net_tax_excel(sample_report())))
        ws = wb.active

        assert [c.value for c in ws[1]] == NET_TAX_HEADERS
        assert ws["A2"].value == "2024-03-04"
        assert ws["C2"].value == pytest.approx(70.0)
        assert ws["B3"].value == "TOTAL"
        assert ws["B3"].font.bold
        assert ws["G3"].value == pytest.approx(300.0)


class TestNetTaxReportApi:
    """GET /api/reports/net-tax"""

    @pytest.mark.asyncio
    async def test_rows_ascending_with_totals(self, client):
        await PettyCashFactory.create(client.db_session, date=date(2024, 3, 5), amount=Decimal("25.00"))
        await DailyRecordFactory.create(client.db_session, date="2024-03-05")
        await DailyRecordFactory.create(client.db_session, date="2024-03-04")
        await DailyRecordFactory.create(client.db_session, date="2024-02-28")

        response = await client.get(
            "/api/reports/net-tax", params={"start": "2024-03-01", "end": "2024-03-31"}
        )

        assert response.status_code == 200
        body = response.json()
        assert [r["date"] for r in body["rows"]] == ["2024-03-04", "2024-03-05"]
        assert body["rows"][1]["petty_cash_total"] == "25.00"
        assert body["totals"] == {
            "surcharges": "140.00",
            "petty_cash_total": "25.00",
            "total_by_payment_method": "2000.00",
            "collected_amount": "2000.00",
            "deposit": "600.00",
        }

    @pytest.mark.asyncio
    async def test_export_csv(self, client):
        await DailyRecordFactory.create(client.db_session)

        response = await client.get(
            "/api/reports/net-tax/export",
            params={"format": "csv", "start": "2024-03-01", "end": "2024-03-31"},
        )

        assert response.status_code == 200
        assert response.headers["content-type"].startswith("text/csv")
        disposition = response.headers["content-disposition"]
        assert 'filename="reporte-impuestos-neto_2024-03-01_a_2024-03-31_' in disposition
        lines = response.text.splitlines()
        assert lines[1] == "2024-03-04,lunes,70.00,0.00,1000.00,1000.00,300.00"
        assert lines[-1] == ",TOTAL,70.00,0.00,1000.00,1000.00,300.00"

    @pytest.mark.asyncio
    async def test_export_xlsx(self, client):
        await DailyRecordFactory.create(client.db_session)

        response = await client.get("/api/reports/net-tax/export", params={"format": "xlsx"})

        assert response.status_code == 200
        assert ".xlsx" in response.headers["content-disposition"]
        ws = load_workbook(io.BytesIO(response.content)).active
        assert ws["B2"].value == "lunes"

    @pytest.mark.asyncio
    async def test_export_unknown_format(self, client):
        response = await client.get("/api/reports/net-tax/export", params={"format": "pdf"})
        assert response.status_code == 422


class TestSafeBoxReportApi:
    @pytest.mark.asyncio
    async def test_balance_totals(self, client):
        await DailyRecordFactory.create(client.db_session, date="2024-03-04")
        await DailyRecordFactory.create(client.db_session, date="2024-03-05", cash="500.00", ath="300.00")

        body = (await client.get("/api/reports/safe-box")).json()

        assert [r["balance"] for r in body["rows"]] == ["152.50", "52.50"]
        assert body["totals"]["balance"] == "205.00"
