from pathlib import Path

from fastapi import APIRouter, Depends, Request
from fastapi.responses import HTMLResponse
from fastapi.templating import Jinja2Templates

from ..core import urgency
from ..core.incident import Incident
from ..core.incident_repository import IncidentRepository, get_incident_repository
from ..models.incidents import utc_now

TEMPLATES_DIR = Path(__file__).resolve().parents[1] / "templates"

templates = Jinja2Templates(directory=str(TEMPLATES_DIR))

router = APIRouter(prefix="/ui", tags=["ui"])


@router.get("/incidents", response_class=HTMLResponse)
def incidents_page(
    request: Request,
    repo: IncidentRepository = Depends(get_incident_repository),
):
    # one instant per page, so every row is scored against the same age
    now = utc_now()
    rows = []
    for record in repo.list_incidents():
        # stored records only ever hold validated severities and past timestamps
        incident = Incident(
            record.title, record.severity.value, record.created_at, clock=lambda: now
        )
        score = incident.calculate_urgency()
        rows.append(
            {
                "record": record,
                "urgency": score,
                "urgency_description": urgency.describe_urgency(score),
                "is_urgent": urgency.is_urgent(score),
            }
        )
    return templates.TemplateResponse(
        request, "incidents.html", {"rows": rows, "count": len(rows)}
    )
