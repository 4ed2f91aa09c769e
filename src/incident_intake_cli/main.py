"""Main CLI entry point with command definitions."""

import click
import asyncio
from typing import Optional

from .client import (
    IncidentClient,
    IncidentClientError,
    ConnectionError,
    ValidationFailedError,
    DuplicateIncidentError,
    NotFoundError,
)
from .config import SETTINGS, Config, ConfigError, lookup_setting
from .mobile import MobileIncidentForm, SEVERITY_OPTIONS
from .session import Session
from .ui import (
    console,
    print_form_help,
    print_error,
    print_success,
    print_info,
    format_incident,
    print_incident_table,
    print_urgency_samples,
    show_progress,
)


def get_client_from_config(config: Config, url: Optional[str] = None) -> IncidentClient:
    """Create an incident client from config, with an optional URL override."""
    intake_url = url or config.get("intake_url")

    if not intake_url:
        raise ConfigError(
            "Intake URL not configured. Run: incident-intake config set intake_url <url>"
        )

    return IncidentClient(base_url=intake_url, timeout=config.get_timeout())


def print_rejection(error: ValidationFailedError):
    """Print a rejected submission with its field errors."""
    print_error(str(error))
    for detail in error.details:
        console.print(f"  • {detail}")
    if error.provided is not None:
        print_info(f"Provided severity: {error.provided}")


@click.group()
@click.version_option(package_name="incident-intake")
def cli():
    """Incident Intake CLI - report and review incidents."""
    pass


@cli.command()
@click.option("--incident-title", help="Incident title")
@click.option("--incident-description", help="What happened")
@click.option(
    "--incident-severity",
    type=click.Choice(SEVERITY_OPTIONS, case_sensitive=False),
    help="Severity level",
)
@click.option("--url", help="Intake service URL (overrides config)")
def report(
    incident_title: Optional[str],
    incident_description: Optional[str],
    incident_severity: Optional[str],
    url: Optional[str],
):
    """Report an incident, prompting for any field not given as an option."""
    form = MobileIncidentForm(
        incident_title=incident_title,
        incident_description=incident_description,
        incident_severity=incident_severity,
    )
    asyncio.run(report_async(form, url))


async def report_async(form: MobileIncidentForm, url: Optional[str]):
    """Async implementation of report command."""
    try:
        config = Config()
        client = get_client_from_config(config, url)
    except ConfigError as e:
        print_error(str(e))
        print_info("Or use: incident-intake report --url <url>")
        return

    interactive = not form.is_complete()
    session = Session() if interactive else None
    if interactive:
        print_form_help()

    try:
        while True:
            try:
                if session is not None:
                    form = await session.fill_form(form)

                if not form.is_complete():
                    print_error(
                        "Please fill in all required fields: "
                        + ", ".join(form.missing_fields())
                    )
                    if session is None:
                        return
                    continue

                with show_progress() as progress:
                    progress.add_task("Submitting incident...", total=None)
                    incident = await client.submit_mobile_form(form)

                if session is not None:
                    session.add_incident(incident["id"])
                print_success(
                    f"Incident '{incident['title']}' has been successfully submitted! "
                    f"Incident ID: {incident['id'][:8]}..."
                )
                console.print(format_incident(incident))

            except ValidationFailedError as e:
                print_rejection(e)
            except DuplicateIncidentError as e:
                print_error(str(e))
            except (KeyboardInterrupt, EOFError):
                console.print()
                print_info("Report cancelled.")
                return

            if session is None or not click.confirm(
                "Report another incident?", default=False
            ):
                break
            form = MobileIncidentForm()

        if session is not None and len(session.incidents) > 1:
            print_info(f"Reported {len(session.incidents)} incidents this session.")

    except (ConnectionError, IncidentClientError) as e:
        print_error(str(e))
    finally:
        await client.close()


@cli.command(name="list")
@click.option("--url", help="Intake service URL (overrides config)")
def list_command(url: Optional[str]):
    """List all incidents, most recent first."""
    asyncio.run(list_async(url))


async def list_async(url: Optional[str]):
    """Async implementation of list command."""
    try:
        async with get_client_from_config(Config(), url) as client:
            result = await client.list_incidents()
            print_incident_table(result.get("incidents", []))

    except ConfigError as e:
        print_error(str(e))
    except (ConnectionError, IncidentClientError) as e:
        print_error(str(e))


@cli.command()
@click.argument("incident_id")
@click.option("--url", help="Intake service URL (overrides config)")
def show(incident_id: str, url: Optional[str]):
    """Show details of a specific incident."""
    asyncio.run(show_async(incident_id, url))


async def show_async(incident_id: str, url: Optional[str]):
    """Async implementation of show command."""
    try:
        async with get_client_from_config(Config(), url) as client:
            incident = await client.get_incident(incident_id)
            console.print(format_incident(incident))

    except ConfigError as e:
        print_error(str(e))
    except NotFoundError as e:
        print_error(str(e))
    except (ConnectionError, IncidentClientError) as e:
        print_error(str(e))


@cli.command()
@click.option("--url", help="Intake service URL (overrides config)")
def urgency(url: Optional[str]):
    """Show the server's sample urgency calculations."""
    asyncio.run(urgency_async(url))


async def urgency_async(url: Optional[str]):
    """Async implementation of urgency command."""
    try:
        async with get_client_from_config(Config(), url) as client:
            report = await client.get_urgency_samples()
            print_urgency_samples(report)

    except ConfigError as e:
        print_error(str(e))
    except (ConnectionError, IncidentClientError) as e:
        print_error(str(e))


@cli.command()
@click.option("--url", help="Intake service URL (overrides config)")
@click.confirmation_option(prompt="Delete every incident on the server?")
def reset(url: Optional[str]):
    """Clear all incidents on the server."""
    asyncio.run(reset_async(url))


async def reset_async(url: Optional[str]):
    """Async implementation of reset command."""
    try:
        async with get_client_from_config(Config(), url) as client:
            message = await client.reset_incidents()
            print_success(message or "All incidents cleared")

    except ConfigError as e:
        print_error(str(e))
    except (ConnectionError, IncidentClientError) as e:
        print_error(str(e))


@cli.group()
def config():
    """Manage CLI configuration."""
    pass


@config.command(name="set")
@click.argument("key")
@click.argument("value")
def config_set(key: str, value: str):
    """Set a configuration value (intake_url or timeout)."""
    try:
        stored = Config().set(key, value)
        print_success(f"Configuration updated: {lookup_setting(key).key} = {stored}")
    except ConfigError as e:
        print_error(str(e))


@config.command(name="get")
@click.argument("key")
def config_get(key: str):
    """Get a configuration value and where it comes from."""
    try:
        value, source = Config().resolve(key)
        name = lookup_setting(key).key
        if value is None:
            print_info(f"Configuration key '{name}' not set")
        else:
            console.print(f"{name} = {value} ({source})")
    except ConfigError as e:
        print_error(str(e))


@config.command(name="unset")
@click.argument("key")
def config_unset(key: str):
    """Remove a configuration value from the config file."""
    try:
        name = lookup_setting(key).key
        if Config().unset(key):
            print_success(f"Configuration removed: {name}")
        else:
            print_info(f"Configuration key '{name}' is not set in the config file")
    except ConfigError as e:
        print_error(str(e))


@config.command(name="list")
def config_list():
    """List every configuration key with its effective value and source."""
    try:
        rows = Config().describe()
    except ConfigError as e:
        print_error(str(e))
        return

    console.print("[bold]Configuration:[/bold]")
    for key, value, source in rows:
        shown = "not set" if value is None else value
        console.print(f"  {key} = {shown} ({source})")
        console.print(f"    [dim]{SETTINGS[key].help}[/dim]")


if __name__ == "__main__":
    cli()
