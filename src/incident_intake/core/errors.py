"""Domain errors raised by the incident core."""

from typing import List, Optional


class IncidentError(Exception):
    """Base exception for incident intake errors."""

    kind = "incident_error"


class ValidationError(IncidentError):
    """Raised when one or more incident fields are missing or malformed."""

    kind = "validation_error"

    def __init__(self, message: str, errors: Optional[List[str]] = None):
        super().__init__(message)
        self.message = message
        self.errors = list(errors) if errors else [message]


class InvalidSeverityError(ValidationError):
    """Raised when a severity is not one of Low, Medium or High."""

    kind = "invalid_severity"

    def __init__(self, provided: Optional[str]):
        super().__init__("Severity must be one of: Low, Medium, High")
        self.provided = provided


class DuplicateError(IncidentError):
    """Raised when the same title and description were submitted recently."""

    kind = "duplicate_incident"

    def __init__(self, window_hours: float = 24):
        hours = f"{window_hours:g}"
        super().__init__(
            "An incident with the same title and description was submitted "
            f"within the last {hours} hours"
        )
        self.message = str(self)
        self.window_hours = window_hours


class NotFoundError(IncidentError):
    """Raised when an incident id is not in the store."""

    kind = "not_found"

    def __init__(self, incident_id):
        super().__init__("Incident not found")
        self.message = str(self)
        self.incident_id = incident_id
