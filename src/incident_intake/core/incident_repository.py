from uuid import UUID
from typing import Dict, List, Optional
from datetime import datetime, timedelta
import logging
import threading
from ..models.incidents import IncidentRecord
from .errors import DuplicateError

logger = logging.getLogger(__name__)


def _match_key(value: str) -> str:
    return value.strip().casefold()


class IncidentRepository:
    """
    Process-wide in-memory incident store.

    Every read and write goes through a single lock, so the duplicate check
    and the append in add_unless_duplicate() happen as one step.
    """

    def __init__(self):
        self._incidents: Dict[UUID, IncidentRecord] = {}
        self._lock = threading.Lock()

    def find_duplicate(
        self, title: str, description: str, since: datetime
    ) -> Optional[IncidentRecord]:
        """
        Find a stored incident with the same title and description created after `since`.

        Titles and descriptions are compared trimmed and case-insensitively.
        """
        with self._lock:
            return self._find_duplicate(title, description, since)

    def _find_duplicate(
        self, title: str, description: str, since: datetime
    ) -> Optional[IncidentRecord]:
        title_key = _match_key(title)
        description_key = _match_key(description)
        for incident in self._incidents.values():
            if (
                _match_key(incident.title) == title_key
                and _match_key(incident.description) == description_key
                and incident.created_at > since
            ):
                return incident
        return None

    def add_unless_duplicate(
        self, incident: IncidentRecord, window: timedelta
    ) -> IncidentRecord:
        """
        Append an incident unless a matching one was created within `window`.

        The window is measured back from the new incident's created_at.

        Args:
            incident: The fully built record to admit
            window: How far back a matching title and description count as a duplicate

        Returns:
            The admitted incident

        Raises:
            DuplicateError: If a matching incident is inside the window
        """
        cutoff = incident.created_at - window
        with self._lock:
            existing = self._find_duplicate(
                incident.title, incident.description, cutoff
            )
            if existing is not None:
                logger.warning(
                    f"Rejected duplicate of incident {existing.id}: '{incident.title}'"
                )
                raise DuplicateError(window.total_seconds() / 3600)
            self._incidents[incident.id] = incident

        logger.info(
            f"Created incident {incident.id} with severity '{incident.severity.value}'"
        )
        return incident

    def get_by_id(self, incident_id: UUID) -> Optional[IncidentRecord]:
        """
        Retrieve an incident by its ID.

        Args:
            incident_id: The incident UUID

        Returns:
            The incident if found, None otherwise
        """
        with self._lock:
            return self._incidents.get(incident_id)

    def list_incidents(self) -> List[IncidentRecord]:
        """
        Return a snapshot of all incidents, most recently created first.

        Incidents with the same created_at are listed latest-admitted first.
        """
        with self._lock:
            # dict order is admission order
            indexed = list(enumerate(self._incidents.values()))
        indexed.sort(key=lambda pair: (pair[1].created_at, pair[0]), reverse=True)
        return [incident for _, incident in indexed]

    def count(self) -> int:
        with self._lock:
            return len(self._incidents)

    def clear(self) -> int:
        """Remove every incident and return how many were removed."""
        with self._lock:
            removed = len(self._incidents)
            self._incidents.clear()
        logger.info(f"Cleared {removed} incident(s)")
        return removed


# A single instance to act as our in-memory database
incident_repository = IncidentRepository()


def get_incident_repository() -> IncidentRepository:
    return incident_repository
