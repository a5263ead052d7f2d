"""Tests for the health check endpoint."""

from datetime import datetime, timedelta
from unittest.mock import AsyncMock

import pytest
from sqlalchemy.exc import OperationalError

from dailyledger.api.health import check_database, get_uptime_seconds, set_app_start_time


class TestHealthCheckEndpoint:
    """Test suite for /health endpoint."""

    @pytest.mark.asyncio
    async def test_health_endpoint_returns_200_when_db_ok(self, unauthenticated_client) -> None:
        response = await unauthenticated_client.get("/health")

        assert response.status_code == 200
        data = response.json()
        assert data["status"] == "ok"
        assert data["uptime_seconds"] >= 0
        assert data["checks"]["database"]["status"] == "ok"
        assert isinstance(data["checks"]["database"]["response_time_ms"], int)

    def test_uptime_tracking(self) -> None:
        set_app_start_time(datetime.now() - timedelta(hours=1))

        uptime = get_uptime_seconds()

        assert 3590 <= uptime <= 3610, f"Expected ~3600 seconds, got {uptime}"

    @pytest.mark.asyncio
    async def test_database_down_is_reported(self) -> None:
        db = AsyncMock()
        db.execute.side_effect = OperationalError("SELECT 1", {}, Exception("connection refused"))

        result = await check_database(db)

        assert result["status"] == "down"
        assert result["error"] == "OperationalError"
