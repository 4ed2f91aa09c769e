"""Mobile incident form and its translation to the intake API format."""

from typing import Dict, List, Optional

from pydantic import BaseModel

SEVERITY_OPTIONS: List[str] = ["Low", "Medium", "High"]

# mobile form field -> API field
FIELD_MAP: Dict[str, str] = {
    "incident_title": "title",
    "incident_description": "description",
    "incident_severity": "severity",
}


class MobileIncidentForm(BaseModel):
    """Incident form as filled in on the mobile client."""

    incident_title: Optional[str] = None
    incident_description: Optional[str] = None
    incident_severity: Optional[str] = None

    def missing_fields(self) -> List[str]:
        """Return the mobile field names that are blank."""
        return [
            name
            for name in FIELD_MAP
            if not (getattr(self, name) or "").strip()
        ]

    def is_complete(self) -> bool:
        return not self.missing_fields()

    def to_api_payload(self) -> Dict[str, Optional[str]]:
        """
        Translate mobile field names to the API request body.

        Values are trimmed; blank values are sent as-is so the server reports them.
        """
        payload = {}
        for mobile_name, api_name in FIELD_MAP.items():
            value = getattr(self, mobile_name)
            payload[api_name] = value.strip() if isinstance(value, str) else value
        return payload
