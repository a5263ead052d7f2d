# File: tests/test_petty_cash.py
"""Tests for the petty cash ledger and categories."""

import uuid
from datetime import date
from decimal import Decimal

import pytest

from dailyledger.core.seed import DEFAULT_CATEGORIES, seed_categories
from dailyledger.models.petty_cash import PettyCashEntry
from tests.factories import PettyCashFactory


class TestPettyCashModel:
    def test_amount_must_be_positive(self):
        with pytest.raises(ValueError, match="greater than 0"):
            PettyCashEntry(date=date(2024, 3, 4), category="Payroll", description="x", amount=Decimal("0"))


class TestCreatePettyCash:
    """POST /api/petty-cash"""

    @pytest.mark.asyncio
    async def test_create(self, client):
        response = await client.post(
            "/api/petty-cash",
            json={
                "date": "2024-03-04",
                "category": " Payroll ",
                "description": "Ayudante",
                "amount": "45.5",
            },
        )

        assert response.status_code == 201
        body = response.json()
        assert body["category"] == "Payroll"
        assert body["amount"] == "45.50"

    @pytest.mark.asyncio
    @pytest.mark.parametrize("amount", ["0", "-3", "abc", "0.004"])
    async def test_amount_must_be_positive(self, client, amount):
        response = await client.post(
            "/api/petty-cash",
            json={"date": "2024-03-04", "category": "Payroll", "description": "x", "amount": amount},
        )
        assert response.status_code == 422

    @pytest.mark.asyncio
    async def test_blank_description_rejected(self, client):
        response = await client.post(
            "/api/petty-cash",
            json={"date": "2024-03-04", "category": "Payroll", "description": " ", "amount": "5"},
        )
        assert response.status_code == 422


class TestListPettyCash:
    """GET /api/petty-cash"""

    @pytest.mark.asyncio
    async def test_filters_and_total(self, client):
        await PettyCashFactory.create(client.db_session, date=date(2024, 3, 1), amount=Decimal("10.00"))
        await PettyCashFactory.create(
            client.db_session, date=date(2024, 3, 2), category="Supplies", amount=Decimal("5.25")
        )
        await PettyCashFactory.create(client.db_session, date=date(2024, 3, 3), amount=Decimal("20.00"))
        await PettyCashFactory.create(client.db_session, date=date(2024, 4, 1), amount=Decimal("99.00"))

        response = await client.get(
            "/api/petty-cash", params={"start": "2024-03-01", "end": "2024-03-31"}
        )
        body = response.json()
        assert [e["date"] for e in body["entries"]] == ["2024-03-03", "2024-03-02", "2024-03-01"]
        assert body["total"] == "35.25"

        response = await client.get("/api/petty-cash", params={"category": "Payroll"})
        assert response.json()["total"] == "129.00"

    @pytest.mark.asyncio
    async def test_sum_for_date(self, client):
        await PettyCashFactory.create(client.db_session, amount=Decimal("50.00"))
        await PettyCashFactory.create(client.db_session, amount=Decimal("2.50"))

        response = await client.get("/api/petty-cash/sum", params={"date": "2024-03-04"})

        assert response.json() == {"date": "2024-03-04", "total": "52.50"}

    @pytest.mark.asyncio
    async def test_sum_for_empty_date(self, client):
        response = await client.get("/api/petty-cash/sum", params={"date": "2024-03-04"})
        assert response.json()["total"] == "0.00"


class TestEditPettyCash:
    @pytest.mark.asyncio
    async def test_patch_keeps_omitted_fields(self, client):
        entry = await PettyCashFactory.create(client.db_session)

        response = await client.patch(f"/api/petty-cash/{entry.id}", json={"amount": "60"})

        assert response.status_code == 200
        assert response.json()["amount"] == "60.00"
        assert response.json()["description"] == "Ayudante"

    @pytest.mark.asyncio
    async def test_patch_amount_below_a_cent_rejected(self, client):
        entry = await PettyCashFactory.create(client.db_session)

        response = await client.patch(f"/api/petty-cash/{entry.id}", json={"amount": "0.004"})

        assert response.status_code == 422
        assert (await client.get(f"/api/petty-cash/{entry.id}")).json()["amount"] == "50.00"

    @pytest.mark.asyncio
    async def test_delete(self, client):
        entry = await PettyCashFactory.create(client.db_session)

        response = await client.delete(f"/api/petty-cash/{entry.id}")

        assert response.status_code == 204
        assert (await client.get(f"/api/petty-cash/{entry.id}")).status_code == 404

    @pytest.mark.asyncio
    async def test_unknown_entry(self, client):
        response = await client.patch(f"/api/petty-cash/{uuid.uuid4()}", json={"amount": "1"})
        assert response.status_code == 404


class TestCategories:
    """GET/POST /api/petty-cash/categories"""

    @pytest.mark.asyncio
    async def test_create_and_list(self, client):
        await client.post("/api/petty-cash/categories", json={"name": "Supplies"})
        await client.post("/api/petty-cash/categories", json={"name": "Cleaning"})

        response = await client.get("/api/petty-cash/categories")

        assert [c["name"] for c in response.json()] == ["Cleaning", "Supplies"]

    @pytest.mark.asyncio
    async def test_duplicate_is_case_insensitive(self, client):
        await client.post("/api/petty-cash/categories", json={"name": "Supplies"})

        response = await client.post("/api/petty-cash/categories", json={"name": "supplies"})

        assert response.status_code == 409
        assert response.json()["code"] == "CONFLICT"

    @pytest.mark.asyncio
    async def test_seed_is_idempotent(self, db_session):
        added = await seed_categories(db_session)
        again = await seed_categories(db_session)

        assert added == list(DEFAULT_CATEGORIES)
        assert again == []
