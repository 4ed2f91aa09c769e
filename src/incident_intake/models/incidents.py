from pydantic import AliasChoices, BaseModel, ConfigDict, Field
from uuid import UUID, uuid4
from datetime import datetime, timezone
from typing import List, Optional
from enum import Enum


class Severity(str, Enum):
    """Closed set of incident severities, stored in canonical capitalization"""
    LOW = "Low"
    MEDIUM = "Medium"
    HIGH = "High"

    @classmethod
    def parse(cls, value: Optional[str]) -> Optional["Severity"]:
        """
        Match a raw severity case-insensitively. Surrounding whitespace is not ignored.

        Returns:
            The matching Severity, or None if the value is not recognised
        """
        if value is None:
            return None
        candidate = value.casefold()
        for severity in cls:
            if severity.value.casefold() == candidate:
                return severity
        return None

    @classmethod
    def choices(cls) -> List[str]:
        return [severity.value for severity in cls]


class IncidentStatus(str, Enum):
    OPEN = "Open"


def utc_now() -> datetime:
    return datetime.now(timezone.utc)


class NewIncidentRequest(BaseModel):
    # Presence and length are checked by the gatekeeper
    title: Optional[str] = Field(
        default=None, validation_alias=AliasChoices("title", "Title")
    )
    description: Optional[str] = Field(
        default=None, validation_alias=AliasChoices("description", "Description")
    )
    severity: Optional[str] = Field(
        default=None, validation_alias=AliasChoices("severity", "Severity")
    )


class IncidentRecord(BaseModel):
    """An admitted incident. Records are never modified after admission."""
    model_config = ConfigDict(frozen=True)

    id: UUID = Field(default_factory=uuid4)
    title: str
    description: str
    severity: Severity
    created_at: datetime = Field(default_factory=utc_now)
    status: str = IncidentStatus.OPEN.value


class IncidentListResponse(BaseModel):
    incidents: List[IncidentRecord]
    count: int


class UrgencySample(BaseModel):
    title: str
    severity: Severity
    age_days: int
    urgency: int
    description: str
    is_urgent: bool


class UrgencySampleReport(BaseModel):
    message: str
    business_logic: str
    results: List[UrgencySample]


class ErrorResponse(BaseModel):
    error: str
    detail: str
    details: Optional[List[str]] = None
    provided: Optional[str] = None
