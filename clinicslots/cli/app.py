"""
Main CLI application using Typer.
"""

import logging
import time
from pathlib import Path
from typing import List, NoReturn, Optional, Annotated

import pendulum
import typer
from rich.console import Console
from rich.markup import escape
from rich.panel import Panel
from rich.table import Table

from ..config import AppConfig
from ..domain.exceptions import ClinicSlotsError
from ..domain.models import Appointment, SuggestedSlot, TherapyType, TimeRange, UserRole
from ..services.context import ClinicContext, build_context
from ..services.dashboards import PatientDashboard, PractitionerDashboard

app = typer.Typer(
    name="clinicslots",
    help="Book clinic appointments with smart slot suggestions",
    add_completion=False
)

console = Console()

ConfigOption = Annotated[
    Optional[Path],
    typer.Option("--config", "-c", help="Path to config file. Defaults to ./config.yaml"),
]
VerboseOption = Annotated[bool, typer.Option("--verbose", "-v", help="Enable debug logging.")]
DurationOption = Annotated[
    Optional[int],
    typer.Option("--duration", "-d", help="Session duration in minutes"),
]

STATUS_STYLES = {
    "scheduled": "yellow",
    "confirmed": "green",
    "cancelled": "red",
    "completed": "dim",
}


def _configure_logging(verbose: bool) -> None:
    logging.basicConfig(
        level=logging.DEBUG if verbose else logging.WARNING,
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )


def _load_context(config_file: Optional[Path], verbose: bool) -> ClinicContext:
    _configure_logging(verbose)
    config = AppConfig.load(config_file)
    return build_context(config)


def _fail(error: Exception) -> NoReturn:
    console.print(f"[bold red]Error:[/bold red] {escape(str(error))}")
    raise typer.Exit(1)


def _confidence_style(confidence: float) -> str:
    if confidence >= 0.9:
        return "green"
    if confidence >= 0.8:
        return "blue"
    return "yellow"


def _parse_start(value: str, tz: str):
    try:
        return pendulum.from_format(value, "YYYY-MM-DD HH:mm", tz=tz)
    except ValueError as e:
        raise typer.BadParameter(f"Expected 'YYYY-MM-DD HH:mm', got '{value}' ({e})")


def _render_suggestions(slots: List[SuggestedSlot], duration: int) -> None:
    console.print(f"[bold cyan]AI Suggestions[/bold cyan] for your {duration}-minute session\n")

    if not slots:
        console.print(
            "[yellow]No available slots found for the next 7 days.[/yellow]\n"
            "Try selecting a different therapy duration."
        )
        return

    for idx, slot in enumerate(slots, 1):
        style = _confidence_style(slot.confidence)
        console.print(
            f"  {idx}. [{style}]{slot.confidence_percent}% match[/{style}]  "
            f"{slot.format_display()}  [dim]{slot.reason}[/dim]"
        )


def _appointments_table(title: str, appointments: List[Appointment]) -> Table:
    table = Table(title=title, show_header=True, header_style="bold cyan")
    table.add_column("ID", style="dim")
    table.add_column("When")
    table.add_column("Therapy", style="bold yellow")
    table.add_column("Patient")
    table.add_column("Status")

    for appointment in appointments:
        style = STATUS_STYLES.get(appointment.status.value, "white")
        table.add_row(
            appointment.id,
            str(appointment.time_range()),
            appointment.title,
            appointment.patient_name,
            f"[{style}]{appointment.status.value}[/{style}]",
        )

    return table


def _render_patient_dashboard(dashboard: PatientDashboard, duration: int) -> None:
    upcoming = dashboard.upcoming_appointments()
    if upcoming:
        console.print(_appointments_table("Upcoming Appointments", upcoming))
    else:
        console.print("[dim]No upcoming appointments.[/dim]")
    console.print()
    _render_suggestions(dashboard.suggestions(duration), duration)


def _render_practitioner_dashboard(dashboard: PractitionerDashboard, selected_date) -> None:
    stats = dashboard.stats(selected_date)
    console.print(Panel.fit(
        f"[bold]Today:[/bold] {stats.today}   "
        f"[bold]Pending:[/bold] {stats.pending}   "
        f"[bold]This week:[/bold] {stats.this_week}",
        title="Practice Overview"
    ))

    day_label = selected_date.isoformat() if selected_date else "today"
    console.print(_appointments_table(f"Schedule for {day_label}", dashboard.appointments_on(selected_date)))

    pending = dashboard.pending_appointments(limit=3)
    if pending:
        console.print(_appointments_table("Pending Approval", pending))


@app.command()
def login(
    username: Annotated[str, typer.Option("--username", "-u", prompt=True, help="Username")],
    password: Annotated[str, typer.Option("--password", "-p", prompt=True, hide_input=True, help="Password")],
    role: Annotated[UserRole, typer.Option("--role", "-r", help="Log in as patient or practitioner")] = UserRole.PATIENT,
    config_file: ConfigOption = None,
    verbose: VerboseOption = False,
):
    """
    Log in with a demo account (username 'patient' or 'practitioner', password 'demo').
    """
    try:
        context = _load_context(config_file, verbose)
        user = context.auth.login(username, password, role)
        seeded = context.seed_demo_calendar(user)
    except (ClinicSlotsError, FileNotFoundError, ValueError) as e:
        _fail(e)

    console.print(f"\n[bold green]Welcome back![/bold green] Logged in as {user.display_name}")
    if seeded:
        console.print(f"[dim]Loaded {len(seeded)} demo appointment(s).[/dim]")
    console.print()


@app.command()
def logout(config_file: ConfigOption = None, verbose: VerboseOption = False):
    """
    Log out and forget the saved session.
    """
    try:
        context = _load_context(config_file, verbose)
        context.auth.logout()
    except (ClinicSlotsError, FileNotFoundError, ValueError) as e:
        _fail(e)

    console.print("[green]Logged out.[/green]")


@app.command()
def whoami(config_file: ConfigOption = None, verbose: VerboseOption = False):
    """
    Show the logged-in user.
    """
    try:
        context = _load_context(config_file, verbose)
        user = context.auth.current_user()
    except (ClinicSlotsError, FileNotFoundError, ValueError) as e:
        _fail(e)

    console.print(f"{user.display_name} ([bold]{user.role.value}[/bold], username '{user.username}')")


@app.command()
def suggest(
    duration: DurationOption = None,
    delay: Annotated[float, typer.Option("--delay", help="Seconds to show the 'thinking' spinner")] = 0.0,
    config_file: ConfigOption = None,
    verbose: VerboseOption = False,
):
    """
    Suggest the best open slots for the next 7 days.

    Examples:

        clinicslots suggest
        clinicslots suggest --duration 90
    """
    try:
        context = _load_context(config_file, verbose)
        context.auth.current_user()
        session_minutes = duration if duration is not None else context.config.defaults.duration_minutes

        if delay > 0:
            with console.status("Finding optimal appointment slots..."):
                time.sleep(delay)

        slots = context.suggestions.suggest(session_minutes)
    except (ClinicSlotsError, FileNotFoundError, ValueError) as e:
        _fail(e)

    console.print()
    _render_suggestions(slots, session_minutes)
    console.print()


@app.command()
def book(
    choice: Annotated[Optional[int], typer.Argument(help="Number of the suggestion to book (see 'suggest')")] = None,
    start: Annotated[Optional[str], typer.Option("--start", help="Explicit start 'YYYY-MM-DD HH:mm'")] = None,
    duration: DurationOption = None,
    therapy: Annotated[TherapyType, typer.Option("--therapy", "-t", help="Therapy type")] = TherapyType.CONSULTATION,
    notes: Annotated[str, typer.Option("--notes", help="Notes for the practitioner")] = "",
    config_file: ConfigOption = None,
    verbose: VerboseOption = False,
):
    """
    Book a suggested slot (by number) or an explicit start time.

    Examples:

        clinicslots book 1 --therapy abhyanga
        clinicslots book --start "2024-11-26 10:00" --duration 90 --therapy shirodhara
    """
    if (choice is None) == (start is None):
        console.print("[red]Error: pass either a suggestion number or --start.[/red]")
        raise typer.Exit(1)

    try:
        context = _load_context(config_file, verbose)
        dashboard = context.current_dashboard()
        if not isinstance(dashboard, PatientDashboard):
            console.print("[red]Error: only patients can book appointments.[/red]")
            raise typer.Exit(1)

        session_minutes = duration if duration is not None else context.config.defaults.duration_minutes

        if choice is not None:
            slots = dashboard.suggestions(session_minutes)
            if not 1 <= choice <= len(slots):
                console.print(f"[red]Error: suggestion {choice} does not exist ({len(slots)} available).[/red]")
                raise typer.Exit(1)
            slot = slots[choice - 1].time_range()
        else:
            slot_start = _parse_start(start, context.config.timezone)
            slot = TimeRange(start=slot_start, end=slot_start.add(minutes=session_minutes))

        appointment = dashboard.book(slot, therapy.value, notes)
    except (ClinicSlotsError, FileNotFoundError, ValueError) as e:
        _fail(e)

    console.print(
        f"\n[bold green]Booked![/bold green] {appointment.title} on {appointment.time_range()} "
        f"[dim](id {appointment.id})[/dim]\n"
    )


@app.command()
def appointments(config_file: ConfigOption = None, verbose: VerboseOption = False):
    """
    List appointments visible to the logged-in user.
    """
    try:
        context = _load_context(config_file, verbose)
        visible = context.current_dashboard().visible_appointments()
    except (ClinicSlotsError, FileNotFoundError, ValueError) as e:
        _fail(e)

    if not visible:
        console.print("[yellow]No appointments yet.[/yellow]")
        return

    console.print()
    console.print(_appointments_table("Appointments", visible))
    console.print()


@app.command()
def dashboard(
    date: Annotated[Optional[str], typer.Option("--date", help="Day to show for practitioners (YYYY-MM-DD)")] = None,
    duration: DurationOption = None,
    config_file: ConfigOption = None,
    verbose: VerboseOption = False,
):
    """
    Show the dashboard for the logged-in user's role.
    """
    try:
        context = _load_context(config_file, verbose)
        board = context.current_dashboard()
        console.print(f"\n[bold cyan]AyurVeda Clinic[/bold cyan] - {board.user.display_name}\n")

        if isinstance(board, PatientDashboard):
            session_minutes = duration if duration is not None else context.config.defaults.duration_minutes
            _render_patient_dashboard(board, session_minutes)
        else:
            selected = pendulum.from_format(date, "YYYY-MM-DD").date() if date else None
            _render_practitioner_dashboard(board, selected)
    except (ClinicSlotsError, FileNotFoundError, ValueError) as e:
        _fail(e)

    console.print()


def _change_status(appointment_id: str, approve: bool, config_file: Optional[Path], verbose: bool) -> None:
    try:
        context = _load_context(config_file, verbose)
        board = context.current_dashboard()
        if not isinstance(board, PractitionerDashboard):
            console.print("[red]Error: only practitioners can approve or decline appointments.[/red]")
            raise typer.Exit(1)
        appointment = board.approve(appointment_id) if approve else board.decline(appointment_id)
    except (ClinicSlotsError, FileNotFoundError, ValueError) as e:
        _fail(e)

    style = STATUS_STYLES[appointment.status.value]
    console.print(f"{appointment.title}: [{style}]{appointment.status.value}[/{style}]")


@app.command()
def approve(
    appointment_id: Annotated[str, typer.Argument(help="Appointment id")],
    config_file: ConfigOption = None,
    verbose: VerboseOption = False,
):
    """
    Confirm a scheduled appointment.
    """
    _change_status(appointment_id, True, config_file, verbose)


@app.command()
def decline(
    appointment_id: Annotated[str, typer.Argument(help="Appointment id")],
    config_file: ConfigOption = None,
    verbose: VerboseOption = False,
):
    """
    Cancel an appointment.
    """
    _change_status(appointment_id, False, config_file, verbose)


@app.command()
def version():
    """
    Show version information.
    """
    from .. import __version__
    console.print(f"\n[bold cyan]clinicslots[/bold cyan] version [bold]{__version__}[/bold]\n")


if __name__ == "__main__":
    app()
