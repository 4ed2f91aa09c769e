import logging
from contextlib import asynccontextmanager
from datetime import datetime, timezone

import uvicorn
from dotenv import load_dotenv
from fastapi import FastAPI, Request, status
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse

from incident_intake.api import ui_router
from incident_intake.api.v1 import incidents
from incident_intake.config import get_intake_config, get_server_config
from incident_intake.core.errors import (
    DuplicateError,
    InvalidSeverityError,
    NotFoundError,
    ValidationError,
)
from incident_intake.core.incident_repository import get_incident_repository

load_dotenv()


# Define a filter to exclude /health endpoint from logs
class HealthCheckFilter(logging.Filter):
    def filter(self, record: logging.LogRecord) -> bool:
        return "GET /health" not in record.getMessage()


# Configure logging
logging.basicConfig(
    level=get_server_config()["log_level"],
    format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
)
logger = logging.getLogger(__name__)

# Add the filter to the uvicorn access logger
logging.getLogger("uvicorn.access").addFilter(HealthCheckFilter())


@asynccontextmanager
async def lifespan(app: FastAPI):
    intake_config = get_intake_config()
    logger.info(
        f"Incident intake started: duplicate window "
        f"{intake_config['duplicate_window_hours']:g}h, "
        f"title limit {intake_config['title_max_length']}, "
        f"description limit {intake_config['description_max_length']}"
    )
    yield
    logger.info("Incident intake stopped")


app = FastAPI(title="Incident Intake", lifespan=lifespan)

app.include_router(incidents.router, prefix="/api/v1")
app.include_router(ui_router.router)


@app.exception_handler(InvalidSeverityError)
async def invalid_severity_handler(request: Request, exc: InvalidSeverityError):
    return JSONResponse(
        status_code=status.HTTP_400_BAD_REQUEST,
        content={"error": exc.kind, "detail": exc.message, "provided": exc.provided},
    )


@app.exception_handler(ValidationError)
async def validation_error_handler(request: Request, exc: ValidationError):
    return JSONResponse(
        status_code=status.HTTP_400_BAD_REQUEST,
        content={"error": exc.kind, "detail": exc.message, "details": exc.errors},
    )


@app.exception_handler(RequestValidationError)
async def request_validation_handler(request: Request, exc: RequestValidationError):
    details = []
    for error in exc.errors():
        location = ".".join(str(part) for part in error.get("loc", ()) if part != "body")
        details.append(f"{location}: {error.get('msg')}" if location else error.get("msg"))
    return JSONResponse(
        status_code=status.HTTP_400_BAD_REQUEST,
        content={
            "error": ValidationError.kind,
            "detail": "Invalid input",
            "details": details,
        },
    )


@app.exception_handler(DuplicateError)
async def duplicate_handler(request: Request, exc: DuplicateError):
    return JSONResponse(
        status_code=status.HTTP_409_CONFLICT,
        content={"error": exc.kind, "detail": exc.message},
    )


@app.exception_handler(NotFoundError)
async def not_found_handler(request: Request, exc: NotFoundError):
    return JSONResponse(
        status_code=status.HTTP_404_NOT_FOUND,
        content={"error": exc.kind, "detail": exc.message},
    )


@app.get("/health")
def read_health():
    """
    Checks the health of the application.
    """
    return {
        "status": "ok",
        "timestamp": datetime.now(timezone.utc).isoformat(),
        "incident_count": get_incident_repository().count(),
    }


def run():
    """Run the service with uvicorn."""
    server_config = get_server_config()
    uvicorn.run(
        "incident_intake.main:app",
        host=server_config["host"],
        port=server_config["port"],
        log_level=server_config["log_level"].lower(),
    )


if __name__ == "__main__":
    run()
