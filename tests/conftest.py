"""Shared pytest fixtures and configuration."""

import os
import pytest
from types import SimpleNamespace
from unittest.mock import AsyncMock, patch
from freezegun import freeze_time

# Set test environment variables
os.environ.setdefault("ENVIRONMENT", "test")
os.environ.setdefault("LEASING_SERVICE_URL", "http://leasing.test")
os.environ.setdefault("PROPERTY_MANAGEMENT_SERVICE_URL", "http://property-management.test")
os.environ.setdefault("COMMUNICATION_SERVICE_URL", "http://communication.test")
os.environ.setdefault("LOG_FORMAT", "text")


@pytest.fixture(autouse=True)
def reset_service_state():
    """Drop cached config and HTTP clients between tests."""
    from parking_allocation.services import service_client
    from parking_allocation.utils.config import reset_config

    reset_config()
    service_client._clients.clear()
    yield
    reset_config()
    service_client._clients.clear()


@pytest.fixture(autouse=True)
def mock_notifications():
    """Stub outgoing e-mail so workflow tests never reach the communication service."""
    with patch(
        "parking_allocation.services.communication.send_notification_to_role",
        new_callable=AsyncMock,
        return_value=True,
    ) as to_role, patch(
        "parking_allocation.services.communication.send_parking_space_offer_email",
        new_callable=AsyncMock,
        return_value=True,
    ) as offer_email:
        yield SimpleNamespace(to_role=to_role, offer_email=offer_email)


@pytest.fixture
def freeze_time_fixture():
    """Fixture for freezing time on a Monday."""
    with freeze_time("2024-12-09 12:00:00") as frozen_time:
        yield frozen_time


@pytest.fixture
def mock_vercel_request():
    """Mock Vercel cron request."""
    return {
        "method": "GET",
        "path": "/api/offers/start_batches",
        "headers": {"user-agent": "vercel-cron/1.0"},
        "body": "",
        "query": {}
    }


@pytest.fixture(scope="function")
def reset_environment(monkeypatch):
    """Reset environment variables for each test."""
    original_env = os.environ.copy()
    yield
    os.environ.clear()
    os.environ.update(original_env)
