"""Terminal UI components and formatting."""

from rich.console import Console
from rich.panel import Panel
from rich.table import Table
from rich.progress import Progress, SpinnerColumn, TextColumn
from rich.markdown import Markdown
from rich.markup import escape
from rich import box
from typing import Dict, Any, List
from datetime import datetime


console = Console()

SEVERITY_COLORS = {"High": "red", "Medium": "yellow", "Low": "green"}


def print_form_help():
    """Print instructions for the interactive incident form."""
    help_text = """
# Report an Incident

Fill in each field and press Enter. All fields are required.

- **Title** - short summary, up to 200 characters
- **Description** - what happened, up to 1000 characters
- **Severity** - `Low`, `Medium` or `High` (Tab to complete)
"""
    console.print(Markdown(help_text))


def print_error(message: str):
    """Print an error message."""
    console.print(f"[bold red]Error:[/bold red] {escape(message)}")


def print_success(message: str):
    """Print a success message."""
    console.print(f"[bold green]✓[/bold green] {escape(message)}")


def print_info(message: str):
    """Print an info message."""
    console.print(f"[bold blue]ℹ[/bold blue] {escape(message)}")


def format_severity(severity: str) -> str:
    """Format severity with color."""
    color = SEVERITY_COLORS.get(severity, "white")
    return f"[{color}]{severity}[/{color}]"


def format_timestamp(timestamp: str) -> str:
    """Format ISO timestamp to readable format."""
    try:
        dt = datetime.fromisoformat(timestamp.replace("Z", "+00:00"))
        return dt.strftime("%Y-%m-%d %H:%M:%S")
    except (ValueError, AttributeError):
        return timestamp


def format_incident(incident: Dict[str, Any]) -> Panel:
    """
    Format incident data for display.

    Args:
        incident: Incident data dictionary

    Returns:
        Rich Panel with formatted incident
    """
    lines = [
        f"[bold]Incident ID:[/bold] {incident['id']}",
        f"[bold]Title:[/bold] {escape(incident['title'])}",
        f"[bold]Severity:[/bold] {format_severity(incident['severity'])}",
        f"[bold]Status:[/bold] {escape(incident['status'])}",
        f"[bold]Created:[/bold] {format_timestamp(incident['created_at'])}",
        "",
        "[bold]Description:[/bold]",
        escape(incident["description"]),
    ]

    return Panel(
        "\n".join(lines),
        title=f"Incident {incident['id'][:8]}",
        border_style="blue",
        box=box.ROUNDED,
    )


def print_incident_table(incidents: List[Dict[str, Any]]):
    """
    Print a table of incidents.

    Args:
        incidents: List of incident dictionaries
    """
    if not incidents:
        print_info("No incidents found.")
        return

    table = Table(title=f"Incidents ({len(incidents)})", box=box.ROUNDED)

    table.add_column("ID", style="cyan", no_wrap=True)
    table.add_column("Severity")
    table.add_column("Title", style="white")
    table.add_column("Status", style="magenta")
    table.add_column("Created", style="green")

    for incident in incidents:
        title = (
            incident["title"][:50] + "..."
            if len(incident["title"]) > 50
            else incident["title"]
        )
        table.add_row(
            incident["id"][:8] + "...",
            format_severity(incident["severity"]),
            escape(title),
            escape(incident["status"]),
            format_timestamp(incident["created_at"]),
        )

    console.print(table)


def print_urgency_samples(report: Dict[str, Any]):
    """Print the server's sample urgency calculations."""
    table = Table(title=report.get("message", "Urgency samples"), box=box.ROUNDED)

    table.add_column("Title", style="white")
    table.add_column("Severity")
    table.add_column("Age (days)", justify="right")
    table.add_column("Urgency", justify="right")
    table.add_column("Description")
    table.add_column("Urgent")

    for sample in report.get("results", []):
        table.add_row(
            escape(sample["title"]),
            format_severity(sample["severity"]),
            str(sample["age_days"]),
            f"{sample['urgency']}/10",
            sample["description"],
            "[bold red]YES[/bold red]" if sample["is_urgent"] else "NO",
        )

    console.print(table)
    if report.get("business_logic"):
        console.print(f"[dim]{escape(report['business_logic'])}[/dim]")


def show_progress():
    """
    Create a progress indicator context manager.

    Returns:
        Progress context manager
    """
    return Progress(
        SpinnerColumn(),
        TextColumn("[progress.description]{task.description}"),
        console=console,
        transient=True,
    )
