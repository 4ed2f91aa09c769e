from fastapi import APIRouter, Depends, Response, status
from datetime import timedelta
from uuid import UUID
import logging

from ...models.incidents import (
    NewIncidentRequest,
    IncidentRecord,
    IncidentListResponse,
    UrgencySample,
    UrgencySampleReport,
    ErrorResponse,
    utc_now,
)
from ...core.errors import NotFoundError
from ...core.gatekeeper import SubmissionGatekeeper
from ...core.incident import Incident
from ...core.incident_repository import IncidentRepository, get_incident_repository

router = APIRouter()
logger = logging.getLogger(__name__)


def get_gatekeeper(
    repo: IncidentRepository = Depends(get_incident_repository),
) -> SubmissionGatekeeper:
    return SubmissionGatekeeper.from_config(repo)


@router.post(
    "/incidents",
    status_code=status.HTTP_201_CREATED,
    response_model=IncidentRecord,
    responses={
        400: {"model": ErrorResponse},
        409: {"model": ErrorResponse},
    },
)
def create_incident(
    request: NewIncidentRequest,
    response: Response,
    gatekeeper: SubmissionGatekeeper = Depends(get_gatekeeper),
):
    """
    Submit a new incident.

    Rejected with 400 when a field is missing, too long or has an unknown
    severity, and with 409 when the same title and description were
    submitted within the last 24 hours.
    """
    incident = gatekeeper.submit(
        title=request.title,
        description=request.description,
        severity=request.severity,
    )
    response.headers["Location"] = f"/api/v1/incidents/{incident.id}"
    return incident


@router.get("/incidents", response_model=IncidentListResponse)
def list_incidents(repo: IncidentRepository = Depends(get_incident_repository)):
    """List all incidents, most recent first."""
    incidents = repo.list_incidents()
    return IncidentListResponse(incidents=incidents, count=len(incidents))


@router.delete("/incidents/reset")
def reset_incidents(repo: IncidentRepository = Depends(get_incident_repository)):
    """Remove every incident. Intended for tests and local debugging."""
    removed = repo.clear()
    logger.info(f"Incident store reset, {removed} incident(s) removed")
    return {"message": "All incidents cleared"}


@router.get("/incidents/urgency-samples", response_model=UrgencySampleReport)
def urgency_samples():
    """
    Score a fixed set of sample incidents.

    Demonstrates the urgency rules without touching the incident store.
    """
    # ages are measured against one fixed instant so the tier boundaries are exact
    now = utc_now()

    def clock():
        return now

    samples = [
        Incident("Server Outage", "High", now - timedelta(hours=2), clock=clock),
        Incident("Performance Issue", "Medium", now - timedelta(days=7), clock=clock),
        Incident("UI Bug", "Low", now - timedelta(days=30), clock=clock),
    ]
    results = [
        UrgencySample(
            title=sample.title,
            severity=sample.severity,
            age_days=sample.age_days,
            urgency=sample.calculate_urgency(),
            description=sample.get_urgency_description(),
            is_urgent=sample.is_urgent(),
        )
        for sample in samples
    ]
    return UrgencySampleReport(
        message="Incident urgency calculation",
        business_logic=(
            "Urgency increases based on severity and age. High=8 base, "
            "Medium=5 base, Low=2 base. Age multipliers apply."
        ),
        results=results,
    )


@router.get(
    "/incidents/{incident_id}",
    response_model=IncidentRecord,
    responses={404: {"model": ErrorResponse}},
)
def get_incident(
    incident_id: UUID,
    repo: IncidentRepository = Depends(get_incident_repository),
):
    """Retrieve an incident by ID."""
    incident = repo.get_by_id(incident_id)
    if not incident:
        raise NotFoundError(incident_id)
    return incident
