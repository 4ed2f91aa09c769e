"""Incident intake API client for making HTTP requests."""

import httpx
from typing import Optional, List, Dict, Any

from .mobile import MobileIncidentForm


class IncidentClientError(Exception):
    """Base exception for incident client errors."""
    pass


class ConnectionError(IncidentClientError):
    """Raised when connection to the intake service fails."""
    pass


class ValidationFailedError(IncidentClientError):
    """Raised when the service rejects a submission as invalid."""

    def __init__(self, message: str, details: Optional[List[str]] = None, provided: Optional[str] = None):
        super().__init__(message)
        self.details = details or []
        self.provided = provided


class DuplicateIncidentError(IncidentClientError):
    """Raised when the service reports a duplicate submission."""
    pass


class NotFoundError(IncidentClientError):
    """Raised when a resource is not found."""
    pass


def _error_detail(response: httpx.Response) -> Dict[str, Any]:
    try:
        body = response.json()
    except ValueError:
        return {"detail": response.text or "Unknown error"}
    if isinstance(body, dict):
        return body
    return {"detail": str(body)}


class IncidentClient:
    """Client for interacting with the incident intake API."""

    def __init__(self, base_url: str, timeout: float = 30.0):
        """
        Initialize the incident client.

        Args:
            base_url: Base URL of the intake service
            timeout: Request timeout in seconds
        """
        self.base_url = base_url.rstrip("/")
        self.timeout = timeout
        self._client: Optional[httpx.AsyncClient] = None

    async def __aenter__(self):
        """Async context manager entry."""
        self._get_client()
        return self

    async def __aexit__(self, exc_type, exc_val, exc_tb):
        """Async context manager exit."""
        await self.close()

    def _get_client(self) -> httpx.AsyncClient:
        """Get the HTTP client, creating it if necessary."""
        if self._client is None:
            self._client = httpx.AsyncClient(
                base_url=self.base_url,
                timeout=self.timeout
            )
        return self._client

    async def _request(self, method: str, path: str, **kwargs) -> httpx.Response:
        client = self._get_client()
        try:
            return await client.request(method, path, **kwargs)
        except httpx.ConnectError as e:
            raise ConnectionError(f"Failed to connect to intake service at {self.base_url}: {e}")
        except httpx.TimeoutException:
            raise ConnectionError(f"Request timed out after {self.timeout} seconds")
        except httpx.HTTPError as e:
            raise IncidentClientError(f"HTTP error: {e}")

    def _raise_for_error(self, response: httpx.Response):
        if response.status_code < 400:
            return

        body = _error_detail(response)
        detail = body.get("detail", "Unknown error")

        if response.status_code == 400:
            raise ValidationFailedError(
                detail, details=body.get("details"), provided=body.get("provided")
            )
        elif response.status_code == 404:
            raise NotFoundError(detail)
        elif response.status_code == 409:
            raise DuplicateIncidentError(detail)
        raise IncidentClientError(f"API error: {detail}")

    async def create_incident(
        self, title: Optional[str], description: Optional[str], severity: Optional[str]
    ) -> Dict[str, Any]:
        """
        Submit a new incident.

        Args:
            title: Incident title
            description: Incident description
            severity: Low, Medium or High

        Returns:
            The created incident record

        Raises:
            ValidationFailedError: If a field is missing, too long or the severity is unknown
            DuplicateIncidentError: If the same incident was submitted in the last 24 hours
            ConnectionError: If connection to the intake service fails
            IncidentClientError: For other API errors
        """
        response = await self._request(
            "POST",
            "/api/v1/incidents",
            json={"title": title, "description": description, "severity": severity},
        )
        self._raise_for_error(response)
        return response.json()

    async def submit_mobile_form(self, form: MobileIncidentForm) -> Dict[str, Any]:
        """Translate a mobile form to API field names and submit it."""
        payload = form.to_api_payload()
        return await self.create_incident(
            payload["title"], payload["description"], payload["severity"]
        )

    async def get_incident(self, incident_id: str) -> Dict[str, Any]:
        """
        Get incident details by ID.

        Raises:
            NotFoundError: If incident not found
            ConnectionError: If connection to the intake service fails
        """
        response = await self._request("GET", f"/api/v1/incidents/{incident_id}")
        if response.status_code == 400:
            raise NotFoundError(f"Incident {incident_id} not found")
        self._raise_for_error(response)
        return response.json()

    async def list_incidents(self) -> Dict[str, Any]:
        """
        List all incidents, most recent first.

        Returns:
            Dictionary with "incidents" and "count"
        """
        response = await self._request("GET", "/api/v1/incidents")
        self._raise_for_error(response)
        return response.json()

    async def reset_incidents(self) -> str:
        """Clear every incident on the server and return its confirmation message."""
        response = await self._request("DELETE", "/api/v1/incidents/reset")
        self._raise_for_error(response)
        return response.json().get("message", "")

    async def get_urgency_samples(self) -> Dict[str, Any]:
        """Fetch the server's sample urgency calculations."""
        response = await self._request("GET", "/api/v1/incidents/urgency-samples")
        self._raise_for_error(response)
        return response.json()

    async def close(self):
        """Close the HTTP client."""
        if self._client:
            await self._client.aclose()
            self._client = None
