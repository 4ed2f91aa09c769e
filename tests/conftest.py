"""Pytest configuration and shared fixtures for incident intake tests."""

import pytest
from datetime import datetime, timedelta, timezone
from fastapi.testclient import TestClient

from incident_intake.main import app
from incident_intake.core.gatekeeper import SubmissionGatekeeper
from incident_intake.core.incident_repository import (
    IncidentRepository,
    get_incident_repository,
)

# Import fixtures from fixture modules to make them available
pytest_plugins = [
    "tests.fixtures.incident_fixtures",
]


class FrozenClock:
    """A clock that only moves when told to."""

    def __init__(self, now: datetime):
        self.now = now

    def __call__(self) -> datetime:
        return self.now

    def advance(self, **kwargs):
        self.now = self.now + timedelta(**kwargs)


# ============================================================================
# Core Fixtures
# ============================================================================


@pytest.fixture
def fixed_now() -> datetime:
    """A fixed UTC instant used as "now" in time-dependent tests."""
    return datetime(2024, 6, 15, 12, 0, 0, tzinfo=timezone.utc)


@pytest.fixture
def clock(fixed_now) -> FrozenClock:
    """
    Provides a controllable clock starting at fixed_now.

    Returns:
        FrozenClock: callable returning the current frozen instant
    """
    return FrozenClock(fixed_now)


@pytest.fixture
def repository() -> IncidentRepository:
    """Provides an empty incident repository."""
    return IncidentRepository()


@pytest.fixture
def gatekeeper(repository, clock) -> SubmissionGatekeeper:
    """Provides a gatekeeper over the empty repository using the frozen clock."""
    return SubmissionGatekeeper(repository, clock=clock)


# ============================================================================
# API Fixtures
# ============================================================================


@pytest.fixture
def test_client(repository):
    """
    Provides a FastAPI TestClient backed by an isolated repository.

    Returns:
        TestClient: Configured test client for the FastAPI app
    """
    app.dependency_overrides[get_incident_repository] = lambda: repository
    with TestClient(app) as client:
        yield client
    app.dependency_overrides.clear()
