"""Application configuration management."""
import os


def get_intake_config() -> dict:
    """
    Get submission rules from environment variables.

    Returns:
        dict: duplicate_window_hours, title_max_length, description_max_length
              and default_status
    """
    return {
        "duplicate_window_hours": float(
            os.getenv("INCIDENT_DUPLICATE_WINDOW_HOURS", "24")
        ),
        "title_max_length": 200,
        "description_max_length": 1000,
        "default_status": "Open",
    }


def get_server_config() -> dict:
    """
    Get HTTP server configuration from environment variables.

    Returns:
        dict: host, port and log_level for uvicorn
    """
    return {
        "host": os.getenv("INCIDENT_INTAKE_HOST", "0.0.0.0"),
        "port": int(os.getenv("INCIDENT_INTAKE_PORT", "8000")),
        "log_level": os.getenv("INCIDENT_INTAKE_LOG_LEVEL", "INFO").upper(),
    }
