"""Tests for the incident intake API client."""

import pytest
import pytest_asyncio
from unittest.mock import AsyncMock, Mock, patch
import httpx

from incident_intake.core.incident_repository import IncidentRepository, get_incident_repository
from incident_intake.main import app
from incident_intake_cli.client import (
    IncidentClient,
    IncidentClientError,
    ConnectionError,
    DuplicateIncidentError,
    NotFoundError,
    ValidationFailedError,
)
from incident_intake_cli.mobile import MobileIncidentForm


@pytest.fixture
def base_url():
    """Test base URL."""
    return "http://localhost:8000"


def mock_response(status_code, body):
    response = Mock()
    response.status_code = status_code
    response.json.return_value = body
    return response


@pytest.fixture
def mock_http():
    """Patch httpx.AsyncClient and return the mocked instance."""
    with patch("httpx.AsyncClient") as mock_client_class:
        mock_client = AsyncMock()
        mock_client_class.return_value = mock_client
        yield mock_client


class TestIncidentClient:
    """Tests for IncidentClient class."""

    def test_initialization_strips_trailing_slash(self):
        client = IncidentClient("http://localhost:8000/", timeout=5.0)

        assert client.base_url == "http://localhost:8000"
        assert client.timeout == 5.0

    @pytest.mark.asyncio
    async def test_context_manager(self, base_url):
        async with IncidentClient(base_url) as client:
            assert client._client is not None
        assert client._client is None

    @pytest.mark.asyncio
    async def test_create_incident_success(self, base_url, mock_http, incident_record_json):
        mock_http.request.return_value = mock_response(201, incident_record_json)

        client = IncidentClient(base_url)
        incident = await client.create_incident("Checkout service down", "503s", "High")

        assert incident == incident_record_json
        mock_http.request.assert_called_once_with(
            "POST",
            "/api/v1/incidents",
            json={"title": "Checkout service down", "description": "503s", "severity": "High"},
        )

    @pytest.mark.asyncio
    async def test_submit_mobile_form_translates_fields(self, base_url, mock_http, mobile_form, incident_record_json):
        mock_http.request.return_value = mock_response(201, incident_record_json)

        client = IncidentClient(base_url)
        await client.submit_mobile_form(mobile_form)

        mock_http.request.assert_called_once_with(
            "POST",
            "/api/v1/incidents",
            json={
                "title": "Login page broken",
                "description": "Users cannot sign in from Android",
                "severity": "medium",
            },
        )

    @pytest.mark.asyncio
    async def test_create_incident_invalid_severity(self, base_url, mock_http):
        mock_http.request.return_value = mock_response(
            400,
            {
                "error": "invalid_severity",
                "detail": "Severity must be one of: Low, Medium, High",
                "provided": "Critical",
            },
        )

        client = IncidentClient(base_url)

        with pytest.raises(ValidationFailedError, match="Severity must be one of") as exc_info:
            await client.create_incident("T", "D", "Critical")
        assert exc_info.value.provided == "Critical"

    @pytest.mark.asyncio
    async def test_create_incident_validation_details(self, base_url, mock_http):
        mock_http.request.return_value = mock_response(
            400,
            {"error": "validation_error", "detail": "Invalid input", "details": ["Title is required"]},
        )

        client = IncidentClient(base_url)

        with pytest.raises(ValidationFailedError) as exc_info:
            await client.create_incident(None, "D", "Low")
        assert exc_info.value.details == ["Title is required"]

    @pytest.mark.asyncio
    async def test_create_incident_duplicate(self, base_url, mock_http):
        mock_http.request.return_value = mock_response(
            409, {"error": "duplicate_incident", "detail": "An incident with the same title"}
        )

        client = IncidentClient(base_url)

        with pytest.raises(DuplicateIncidentError, match="same title"):
            await client.create_incident("T", "D", "Low")

    @pytest.mark.asyncio
    async def test_server_error(self, base_url, mock_http):
        mock_http.request.return_value = mock_response(500, {"detail": "boom"})

        client = IncidentClient(base_url)

        with pytest.raises(IncidentClientError, match="API error: boom"):
            await client.list_incidents()

    @pytest.mark.asyncio
    async def test_connection_error(self, base_url, mock_http):
        mock_http.request.side_effect = httpx.ConnectError("Connection refused")

        client = IncidentClient(base_url)

        with pytest.raises(ConnectionError, match="Failed to connect"):
            await client.create_incident("T", "D", "Low")

    @pytest.mark.asyncio
    async def test_timeout(self, base_url, mock_http):
        mock_http.request.side_effect = httpx.TimeoutException("Timeout")

        client = IncidentClient(base_url)

        with pytest.raises(ConnectionError, match="timed out"):
            await client.list_incidents()

    @pytest.mark.asyncio
    async def test_get_incident_not_found(self, base_url, mock_http):
        mock_http.request.return_value = mock_response(404, {"error": "not_found", "detail": "Incident not found"})

        client = IncidentClient(base_url)

        with pytest.raises(NotFoundError):
            await client.get_incident("5f0c7e0e-2b7a-4a53-9d1e-0b8d7f3c9a11")

    @pytest.mark.asyncio
    async def test_get_incident_malformed_id(self, base_url, mock_http):
        mock_http.request.return_value = mock_response(400, {"error": "validation_error", "detail": "Invalid input"})

        client = IncidentClient(base_url)

        with pytest.raises(NotFoundError, match="Incident abc not found"):
            await client.get_incident("abc")

    @pytest.mark.asyncio
    async def test_reset_incidents(self, base_url, mock_http):
        mock_http.request.return_value = mock_response(200, {"message": "All incidents cleared"})

        client = IncidentClient(base_url)

        assert await client.reset_incidents() == "All incidents cleared"
        mock_http.request.assert_called_once_with("DELETE", "/api/v1/incidents/reset")


class TestAgainstService:
    """Runs the client against the FastAPI app in-process."""

    @pytest_asyncio.fixture
    async def client(self):
        repository = IncidentRepository()
        app.dependency_overrides[get_incident_repository] = lambda: repository
        client = IncidentClient("http://testserver")
        client._client = httpx.AsyncClient(
            transport=httpx.ASGITransport(app=app), base_url="http://testserver"
        )
        yield client
        await client.close()
        app.dependency_overrides.clear()

    @pytest.mark.asyncio
    async def test_mobile_submission_round_trip(self, client):
        form = MobileIncidentForm(
            incident_title="Login page broken",
            incident_description="Users cannot sign in",
            incident_severity="HIGH",
        )

        created = await client.submit_mobile_form(form)
        fetched = await client.get_incident(created["id"])
        listing = await client.list_incidents()

        assert created["severity"] == "High"
        assert fetched == created
        assert listing["count"] == 1

        with pytest.raises(DuplicateIncidentError):
            await client.submit_mobile_form(form)

    @pytest.mark.asyncio
    async def test_urgency_samples(self, client):
        report = await client.get_urgency_samples()

        assert [sample["urgency"] for sample in report["results"]] == [10, 7, 3]
