"""
Incident entity with field validation and urgency scoring.

Field checks return FieldCheck results instead of raising so that they can be
used two ways:

- fail-fast: constructing or assigning a field raises ValidationError on the
  first invalid value
- collect-all: Incident.check_fields() and Incident.validate() report every
  failing field at once
"""

from dataclasses import dataclass
from datetime import datetime, timedelta, timezone
from typing import Any, Callable, List, Optional

from ..models.incidents import Severity, utc_now
from . import urgency
from .errors import ValidationError

TITLE_MAX_LENGTH = 200
MAX_REPORT_AGE_YEARS = 10

Clock = Callable[[], datetime]


@dataclass(frozen=True)
class FieldCheck:
    """Outcome of checking a single field: the normalized value or an error."""

    field: str
    value: Any = None
    error: Optional[str] = None

    @property
    def ok(self) -> bool:
        return self.error is None

    @property
    def message(self) -> str:
        return f"{self.field}: {self.error}"


def _years_before(moment: datetime, years: int) -> datetime:
    try:
        return moment.replace(year=moment.year - years)
    except ValueError:
        # Feb 29 in a year without one
        return moment.replace(year=moment.year - years, day=28)


def _as_utc(value: datetime) -> datetime:
    if value.tzinfo is None:
        return value.replace(tzinfo=timezone.utc)
    return value.astimezone(timezone.utc)


def check_title(value: Optional[str], max_length: int = TITLE_MAX_LENGTH) -> FieldCheck:
    if value is None or not value.strip():
        return FieldCheck("Title", error="Title cannot be null or empty")
    if len(value) > max_length:
        return FieldCheck(
            "Title", error=f"Title cannot exceed {max_length} characters"
        )
    return FieldCheck("Title", value=value.strip())


def check_severity(value: Optional[str]) -> FieldCheck:
    if value is None or not value.strip():
        return FieldCheck("Severity", error="Severity cannot be null or empty")
    severity = Severity.parse(value)
    if severity is None:
        return FieldCheck(
            "Severity",
            error=f"Severity must be one of: {', '.join(Severity.choices())}",
        )
    return FieldCheck("Severity", value=severity)


def check_date_reported(value: Optional[datetime], now: datetime) -> FieldCheck:
    if value is None:
        return FieldCheck("DateReported", error="Date reported is required")
    reported = _as_utc(value)
    if reported > now:
        return FieldCheck(
            "DateReported", error="Date reported cannot be in the future"
        )
    if reported < _years_before(now, MAX_REPORT_AGE_YEARS):
        return FieldCheck(
            "DateReported",
            error=f"Date reported cannot be more than {MAX_REPORT_AGE_YEARS} years ago",
        )
    return FieldCheck("DateReported", value=reported)


def _require(check: FieldCheck):
    if not check.ok:
        raise ValidationError(check.error, [check.message])
    return check.value


class Incident:
    """
    An incident whose title, severity and report date are always valid.

    Ages are derived from the clock on every access, so the same incident
    scores higher as time passes.
    """

    def __init__(
        self,
        title: str,
        severity: str,
        date_reported: Optional[datetime] = None,
        *,
        clock: Clock = utc_now,
    ):
        self._clock = clock
        self.title = title
        self.severity = severity
        self.date_reported = date_reported if date_reported is not None else clock()

    @classmethod
    def check_fields(
        cls,
        title: Optional[str],
        severity: Optional[str],
        date_reported: Optional[datetime],
        *,
        clock: Clock = utc_now,
    ) -> List[str]:
        """Check raw field values and return every error message found."""
        checks = [
            check_title(title),
            check_severity(severity),
            check_date_reported(date_reported, clock()),
        ]
        return [check.message for check in checks if not check.ok]

    @property
    def title(self) -> str:
        return self._title

    @title.setter
    def title(self, value: str):
        self._title = _require(check_title(value))

    @property
    def severity(self) -> Severity:
        return self._severity

    @severity.setter
    def severity(self, value: str):
        self._severity = _require(check_severity(value))

    @property
    def date_reported(self) -> datetime:
        return self._date_reported

    @date_reported.setter
    def date_reported(self, value: datetime):
        self._date_reported = _require(check_date_reported(value, self._clock()))

    @property
    def age(self) -> timedelta:
        return self._clock() - self._date_reported

    @property
    def age_days(self) -> int:
        return self.age // timedelta(days=1)

    @property
    def age_hours(self) -> int:
        return self.age // timedelta(hours=1)

    def validate(self) -> List[str]:
        """
        Re-check the current field values without raising.

        The report date is checked against the current time, so an incident
        can drift past the ten-year limit while it is held.
        """
        return Incident.check_fields(
            self._title,
            self._severity.value,
            self._date_reported,
            clock=self._clock,
        )

    def is_valid(self) -> bool:
        return not self.validate()

    def calculate_urgency(self) -> int:
        hours = self.age.total_seconds() / 3600
        return urgency.calculate_urgency(self._severity, hours)

    def get_urgency_description(self) -> str:
        return urgency.describe_urgency(self.calculate_urgency())

    def is_urgent(self) -> bool:
        return urgency.is_urgent(self.calculate_urgency())

    def __repr__(self) -> str:
        return (
            f"Incident(title={self._title!r}, severity={self._severity.value!r}, "
            f"date_reported={self._date_reported.isoformat()!r})"
        )

    def __str__(self) -> str:
        return (
            f"[{self._severity.value}] {self._title} "
            f"(Reported: {self._date_reported:%Y-%m-%d}, Age: {self.age_days}d, "
            f"Urgency: {self.calculate_urgency()})"
        )
