# File: tests/test_daily_records_api.py
"""Tests for the daily record endpoints."""

import uuid
from datetime import date

import pytest

from tests.factories import DailyRecordFactory, PettyCashFactory

FORM = {
    "date": "2024-03-04",
    "gross_sales": "1000.00",
    "surcharges": "70.00",
    "net_sales": "930.00",
    "cash": "600.00",
    "ath": "200.00",
    "debit": "150.00",
    "credit": "50.00",
    "deposit": "300.00",
    "fixed_float": "147.50",
}


class TestCreateDailyRecord:
    """POST /api/daily-records"""

    @pytest.mark.asyncio
    async def test_confirmation_required_first(self, client):
        response = await client.post("/api/daily-records", json=FORM)

        assert response.status_code == 409
        body = response.json()
        assert body["code"] == "CONFIRMATION_REQUIRED"
        assert body["details"]["warnings"] == [
            {"code": "CONFIRM_SAVE", "message": "Save the record for 2024-03-04?"}
        ]

        listing = await client.get("/api/daily-records")
        assert listing.json() == []

    @pytest.mark.asyncio
    async def test_create_with_confirmation(self, client):
        response = await client.post(
            "/api/daily-records", json={**FORM, "confirm": ["CONFIRM_SAVE"]}
        )

        assert response.status_code == 201
        record_id = response.json()["id"]

        detail = (await client.get(f"/api/daily-records/{record_id}")).json()
        assert detail["day_name"] == "lunes"
        assert detail["created_by"] == "María"
        assert detail["figures"] == {
            "collected_amount": "1000.00",
            "total_by_payment_method": "1000.00",
            "petty_cash_total": "0.00",
            "balance": "152.50",
        }
        assert detail["inputs"]["fixed_float"] == "147.50"

    @pytest.mark.asyncio
    async def test_warnings_listed_in_order(self, client):
        payload = {**FORM, "gross_sales": "100", "net_sales": "500", "confirm": []}

        response = await client.post("/api/daily-records", json=payload)

        codes = [w["code"] for w in response.json()["details"]["warnings"]]
        assert codes == ["NET_EXCEEDS_GROSS", "PAYMENT_MISMATCH", "CONFIRM_SAVE"]

    @pytest.mark.asyncio
    async def test_missing_sales_is_hard_error(self, client):
        payload = {**FORM, "net_sales": "", "confirm": ["CONFIRM_SAVE"]}

        response = await client.post("/api/daily-records", json=payload)

        assert response.status_code == 422
        body = response.json()
        assert body["code"] == "VALIDATION_ERROR"
        assert body["message"] == "Missing required sales fields"
        assert body["details"] == {"fields": ["net_sales"]}

    @pytest.mark.asyncio
    async def test_amount_too_large_is_hard_error(self, client):
        payload = {**FORM, "gross_sales": "99999999999999", "confirm": ["CONFIRM_SAVE"]}

        response = await client.post("/api/daily-records", json=payload)

        assert response.status_code == 422
        body = response.json()
        assert body["message"] == "Amounts exceed the maximum allowed"
        assert body["details"]["fields"] == ["gross_sales"]
        assert (await client.get("/api/daily-records")).json() == []

    @pytest.mark.asyncio
    async def test_negative_amount_is_hard_error(self, client):
        payload = {**FORM, "cash": "-1", "confirm": ["CONFIRM_SAVE"]}

        response = await client.post("/api/daily-records", json=payload)

        assert response.status_code == 422
        assert response.json()["message"] == "Amounts cannot be negative"

    @pytest.mark.asyncio
    async def test_duplicate_date(self, client):
        await DailyRecordFactory.create(client.db_session)

        response = await client.post(
            "/api/daily-records", json={**FORM, "confirm": ["CONFIRM_SAVE"]}
        )
        assert response.status_code == 409
        assert response.json()["details"]["warnings"][0]["code"] == "DUPLICATE_DATE"

        response = await client.post(
            "/api/daily-records",
            json={**FORM, "confirm": ["CONFIRM_SAVE", "DUPLICATE_DATE"]},
        )
        assert response.status_code == 201

    @pytest.mark.asyncio
    async def test_unknown_confirm_code_rejected(self, client):
        response = await client.post("/api/daily-records", json={**FORM, "confirm": ["YES"]})
        assert response.status_code == 422


class TestPreview:
    """POST /api/daily-records/preview"""

    @pytest.mark.asyncio
    async def test_garbage_counts_as_zero(self, client):
        response = await client.post(
            "/api/daily-records/preview",
            json={**FORM, "cash": "12abc", "fixed_float": ""},
        )

        assert response.status_code == 200
        assert response.json()["balance"] == "-447.50"

    @pytest.mark.asyncio
    async def test_includes_petty_cash(self, client):
        await PettyCashFactory.create(client.db_session)

        response = await client.post("/api/daily-records/preview", json=FORM)

        assert response.json()["petty_cash_total"] == "50.00"
        assert response.json()["balance"] == "102.50"


class TestListDailyRecords:
    @pytest.mark.asyncio
    async def test_newest_first_with_range(self, client):
        await DailyRecordFactory.create(client.db_session, date="2024-03-01")
        await DailyRecordFactory.create(client.db_session, date="2024-03-05")
        await DailyRecordFactory.create(client.db_session, date="2024-03-03")

        response = await client.get(
            "/api/daily-records", params={"start": "2024-03-02", "end": "2024-03-05"}
        )

        assert response.status_code == 200
        assert [r["date"] for r in response.json()] == ["2024-03-05", "2024-03-03"]
        assert response.json()[0]["balance"] == "152.50"


class TestDailyRecordDetail:
    """GET /api/daily-records/{id}"""

    @pytest.mark.asyncio
    async def test_not_found(self, client):
        response = await client.get(f"/api/daily-records/{uuid.uuid4()}")

        assert response.status_code == 404
        assert response.json()["code"] == "NOT_FOUND"

    @pytest.mark.asyncio
    async def test_stale_petty_cash_is_flagged(self, client):
        record = await DailyRecordFactory.create(client.db_session)
        await PettyCashFactory.create(client.db_session, date=date(2024, 3, 4))

        detail = (await client.get(f"/api/daily-records/{record.id}")).json()

        assert detail["figures"]["petty_cash_total"] == "0.00"
        assert detail["live_petty_cash_total"] == "50.00"
        assert detail["petty_cash_stale"] is True
        assert detail["petty_cash_computed_at"] is not None

    @pytest.mark.asyncio
    async def test_audit_trail(self, client):
        record = await DailyRecordFactory.create(client.db_session)

        detail = (await client.get(f"/api/daily-records/{record.id}")).json()

        assert detail["petty_cash_stale"] is False
        (created,) = detail["audit_trail"]
        assert created["action"] == "CREATE"
        assert created["changes"]["gross_sales"] == "1000.00"


class TestUpdateDailyRecord:
    """PUT /api/daily-records/{id}"""

    @pytest.mark.asyncio
    async def test_no_changes(self, client):
        record = await DailyRecordFactory.create(client.db_session)

        response = await client.put(
            f"/api/daily-records/{record.id}", json={**FORM, "confirm": ["CONFIRM_CHANGES"]}
        )

        assert response.status_code == 422
        assert response.json()["message"] == "No changes detected"

    @pytest.mark.asyncio
    async def test_needs_confirm_changes(self, client):
        record = await DailyRecordFactory.create(client.db_session)

        response = await client.put(
            f"/api/daily-records/{record.id}", json={**FORM, "cash": "650.00"}
        )

        assert response.status_code == 409
        assert response.json()["details"]["warnings"][0]["code"] == "CONFIRM_CHANGES"

    @pytest.mark.asyncio
    async def test_edit_recomputes_and_audits(self, client):
        record = await DailyRecordFactory.create(client.db_session)
        await PettyCashFactory.create(client.db_session, date=date(2024, 3, 5))

        response = await client.put(
            f"/api/daily-records/{record.id}",
            json={**FORM, "date": "2024-03-05", "confirm": ["CONFIRM_CHANGES"]},
        )

        assert response.status_code == 200
        assert response.json()["changes"] == {
            "petty_cash_total": {"old": "0.00", "new": "50.00"},
            "date": {"old": "2024-03-04", "new": "2024-03-05"},
        }

        detail = (await client.get(f"/api/daily-records/{record.id}")).json()
        assert detail["day_name"] == "martes"
        assert detail["figures"]["balance"] == "102.50"
        assert detail["last_modified_by"] == "María"
        assert detail["petty_cash_stale"] is False
        actions = [a["action"] for a in detail["audit_trail"]]
        assert sorted(actions) == ["CREATE", "UPDATE"]


class TestDeleteDailyRecord:
    """DELETE /api/daily-records/{id}"""

    @pytest.mark.asyncio
    async def test_needs_confirm_delete(self, client):
        record = await DailyRecordFactory.create(client.db_session)

        response = await client.delete(f"/api/daily-records/{record.id}")

        assert response.status_code == 409
        assert response.json()["details"]["warnings"][0]["code"] == "CONFIRM_DELETE"
        assert (await client.get(f"/api/daily-records/{record.id}")).status_code == 200

    @pytest.mark.asyncio
    async def test_delete(self, client):
        record = await DailyRecordFactory.create(client.db_session)

        response = await client.request(
            "DELETE",
            f"/api/daily-records/{record.id}",
            json={"confirm": ["CONFIRM_DELETE"]},
        )

        assert response.status_code == 204
        assert (await client.get(f"/api/daily-records/{record.id}")).status_code == 404


class TestAuthRequired:
    @pytest.mark.asyncio
    async def test_unauthenticated(self, unauthenticated_client):
        response = await unauthenticated_client.get("/api/daily-records")

        assert response.status_code == 401
        assert response.json()["code"] == "UNAUTHORIZED"
