"""
Submission gatekeeper.

Decides whether a creation request is admitted into the incident store.
Checks run in order and stop at the first failing step:

1. shape: title, description and severity present and within length limits
2. severity: one of Low, Medium, High (case-insensitive)
3. duplicate: no matching title and description within the duplicate window
4. admission: the normalized record is appended to the store
"""

import logging
from datetime import timedelta
from typing import Callable, List, Optional

from ..config import get_intake_config
from ..models.incidents import IncidentRecord, Severity, utc_now
from .errors import InvalidSeverityError, ValidationError
from .incident_repository import IncidentRepository

logger = logging.getLogger(__name__)


def _is_blank(value: Optional[str]) -> bool:
    return value is None or not value.strip()


class SubmissionGatekeeper:
    def __init__(
        self,
        repository: IncidentRepository,
        duplicate_window: timedelta = timedelta(hours=24),
        title_max_length: int = 200,
        description_max_length: int = 1000,
        default_status: str = "Open",
        clock: Callable = utc_now,
    ):
        self.repository = repository
        self.duplicate_window = duplicate_window
        self.title_max_length = title_max_length
        self.description_max_length = description_max_length
        self.default_status = default_status
        self._clock = clock

    @classmethod
    def from_config(
        cls, repository: IncidentRepository, config: Optional[dict] = None
    ) -> "SubmissionGatekeeper":
        config = config or get_intake_config()
        return cls(
            repository,
            duplicate_window=timedelta(hours=config["duplicate_window_hours"]),
            title_max_length=config["title_max_length"],
            description_max_length=config["description_max_length"],
            default_status=config["default_status"],
        )

    def check_shape(
        self,
        title: Optional[str],
        description: Optional[str],
        severity: Optional[str],
    ) -> List[str]:
        """Return one message per missing or oversized field."""
        errors = []
        if _is_blank(title):
            errors.append("Title is required")
        elif len(title) > self.title_max_length:
            errors.append(f"Title cannot exceed {self.title_max_length} characters")

        if _is_blank(description):
            errors.append("Description is required")
        elif len(description) > self.description_max_length:
            errors.append(
                f"Description cannot exceed {self.description_max_length} characters"
            )

        if _is_blank(severity):
            errors.append("Severity is required")
        return errors

    def submit(
        self,
        title: Optional[str],
        description: Optional[str],
        severity: Optional[str],
    ) -> IncidentRecord:
        """
        Validate a submission and admit it into the store.

        Returns:
            The created IncidentRecord

        Raises:
            ValidationError: If a field is missing or too long
            InvalidSeverityError: If the severity is not Low, Medium or High
            DuplicateError: If the same title and description were admitted
                within the duplicate window
        """
        errors = self.check_shape(title, description, severity)
        if errors:
            logger.warning(f"Rejected incident submission: {'; '.join(errors)}")
            raise ValidationError("Invalid input", errors)

        parsed = Severity.parse(severity)
        if parsed is None:
            logger.warning(f"Rejected incident submission with severity '{severity}'")
            raise InvalidSeverityError(severity)

        incident = IncidentRecord(
            title=title.strip(),
            description=description.strip(),
            severity=parsed,
            created_at=self._clock(),
            status=self.default_status,
        )
        return self.repository.add_unless_duplicate(incident, self.duplicate_window)
