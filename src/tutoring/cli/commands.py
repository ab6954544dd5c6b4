"""CLI commands for the tutoring marketplace.

Every command loads the marketplace snapshot from the data directory
(``TUTORING_DATA_DIR``, default ./data), runs one operation and saves
the snapshot back when something changed.

Commands:
- add-student / show-student / list-students
- become-tutor / show-tutor / list-tutors / tutor-info
- add-schedule / add-location / has-schedule / has-location
- find-tutor: online, or in-person with --day/--time/--location
- rate / donate / revenue
- set-order / export / clear
"""

import os
from contextlib import contextmanager
from pathlib import Path
from typing import Iterator

import typer
from rich.console import Console
from rich.table import Table

from tutoring.core.errors import TutoringError
from tutoring.core.marketplace import Marketplace
from tutoring.core.state import (
    delete_marketplace_state,
    load_marketplace_state,
    save_marketplace_state,
)

app = typer.Typer(
    name="tutoring",
    help="Peer-tutoring marketplace: students, tutors, matching, ratings and donations.",
    no_args_is_help=True,
)

console = Console()


def _data_dir() -> Path:
    return Path(os.environ.get("TUTORING_DATA_DIR", "data"))


def _format_cents(cents: int) -> str:
    return f"{cents // 100}.{cents % 100:02d}"


@contextmanager
def _marketplace(save: bool = True) -> Iterator[Marketplace]:
    """Load the marketplace, yield it, save it back on success.

    TutoringError is reported in red and turned into exit code 1.
    """
    data_dir = _data_dir()
    marketplace = load_marketplace_state(data_dir)
    try:
        yield marketplace
    except TutoringError as e:
        console.print(f"[red]✗ {e}[/red]")
        raise typer.Exit(code=1)
    if save:
        save_marketplace_state(marketplace, data_dir)


# =============================================================================
# STUDENTS
# =============================================================================


@app.command(name="add-student")
def add_student(
    registration_id: str = typer.Argument(..., help="Registration number"),
    name: str = typer.Argument(..., help="Full name"),
    course_code: int = typer.Argument(..., help="Course code"),
    email: str = typer.Argument(..., help="Email address"),
    phone: str = typer.Option("", "--phone", "-p", help="Phone number (optional)"),
) -> None:
    """Register a new student."""
    with _marketplace() as marketplace:
        student = marketplace.register_student(name, registration_id, course_code, phone, email)
        console.print(f"[green]✓ Student registered:[/green] {student}")


@app.command(name="show-student")
def show_student(
    registration_id: str = typer.Argument(..., help="Registration number"),
    attribute: str = typer.Option(
        None, "--attribute", "-a", help="Only print one attribute: name, phone or email"
    ),
) -> None:
    """Show a student."""
    with _marketplace(save=False) as marketplace:
        if attribute:
            console.print(marketplace.student_info(registration_id, attribute))
        else:
            console.print(marketplace.describe_student(registration_id))


@app.command(name="list-students")
def list_students() -> None:
    """List students in the configured order."""
    with _marketplace(save=False) as marketplace:
        if not len(marketplace.students):
            console.print("[yellow]No students registered[/yellow]")
            return
        console.print(marketplace.list_students())


# =============================================================================
# TUTORS
# =============================================================================


@app.command(name="become-tutor")
def become_tutor(
    registration_id: str = typer.Argument(..., help="Student registration number"),
    subject: str = typer.Argument(..., help="Subject to tutor"),
    proficiency: int = typer.Argument(..., help="Proficiency from 1 to 5"),
) -> None:
    """Make a student a tutor, or add a subject to an existing tutor."""
    with _marketplace() as marketplace:
        tutor = marketplace.become_tutor(registration_id, subject, proficiency)
        console.print(
            f"[green]✓ {tutor.name} tutors:[/green] {', '.join(sorted(tutor.subjects))}"
        )


@app.command(name="show-tutor")
def show_tutor(
    registration_id: str = typer.Argument(..., help="Tutor's registration number"),
) -> None:
    """Show a tutor by registration number."""
    with _marketplace(save=False) as marketplace:
        console.print(marketplace.describe_tutor(registration_id))


@app.command(name="list-tutors")
def list_tutors() -> None:
    """List tutors in the configured order."""
    with _marketplace(save=False) as marketplace:
        if not len(marketplace.tutors):
            console.print("[yellow]No tutors registered[/yellow]")
            return
        console.print(marketplace.list_tutors())


@app.command(name="tutor-info")
def tutor_info(email: str = typer.Argument(..., help="Tutor email")) -> None:
    """Show a tutor's rating, tier, donation rate and balance."""
    with _marketplace(save=False) as marketplace:
        tutor = marketplace.tutors.get_tutor(email)

        table = Table(title=tutor.name, show_header=False)
        table.add_row("rating", marketplace.rating_of(email))
        table.add_row("tier", marketplace.tier_of(email).value)
        table.add_row("rate", f"{marketplace.tutor_rate(email):.0%}")
        table.add_row("balance", _format_cents(marketplace.total_money(email)))
        table.add_row(
            "subjects",
            ", ".join(f"{s} ({p})" for s, p in sorted(tutor.subjects.items())),
        )
        console.print(table)


@app.command(name="add-schedule")
def add_schedule(
    email: str = typer.Argument(..., help="Tutor email"),
    time: str = typer.Argument(..., help="Time slot, e.g. 14:00"),
    day: str = typer.Argument(..., help="Day, e.g. seg"),
) -> None:
    """Add an attendance slot for a tutor."""
    with _marketplace() as marketplace:
        marketplace.add_schedule(email, time, day)
        console.print(f"[green]✓ Slot added:[/green] {day} {time}")


@app.command(name="add-location")
def add_location(
    email: str = typer.Argument(..., help="Tutor email"),
    location: str = typer.Argument(..., help="Attendance location"),
) -> None:
    """Add an attendance location for a tutor."""
    with _marketplace() as marketplace:
        marketplace.add_location(email, location)
        console.print(f"[green]✓ Location added:[/green] {location}")


@app.command(name="has-schedule")
def has_schedule(
    email: str = typer.Argument(..., help="Tutor email"),
    time: str = typer.Argument(..., help="Time slot"),
    day: str = typer.Argument(..., help="Day"),
) -> None:
    """Print whether a tutor attends at a slot."""
    with _marketplace(save=False) as marketplace:
        console.print(str(marketplace.has_schedule(email, time, day)).lower())


@app.command(name="has-location")
def has_location(
    email: str = typer.Argument(..., help="Tutor email"),
    location: str = typer.Argument(..., help="Attendance location"),
) -> None:
    """Print whether a tutor attends at a location."""
    with _marketplace(save=False) as marketplace:
        console.print(str(marketplace.has_location(email, location)).lower())


# =============================================================================
# HELP REQUESTS, RATINGS AND DONATIONS
# =============================================================================


@app.command(name="find-tutor")
def find_tutor(
    subject: str = typer.Argument(..., help="Subject you need help with"),
    day: str = typer.Option(None, "--day", "-d", help="Day (in-person)"),
    time: str = typer.Option(None, "--time", "-t", help="Time slot (in-person)"),
    location: str = typer.Option(None, "--location", "-l", help="Location (in-person)"),
) -> None:
    """Find the best tutor for a request (in-person when day/time/location are set)."""
    in_person = any(v is not None for v in (day, time, location))

    with _marketplace(save=False) as marketplace:
        if in_person:
            tutor = marketplace.find_tutor_in_person(subject, time or "", day or "", location or "")
        else:
            tutor = marketplace.find_tutor_online(subject)

        if tutor is None:
            console.print("[yellow]No tutor available[/yellow]")
            return
        console.print(f"[green]✓ Tutor found:[/green] {tutor}")
        console.print(f"  [dim]rating:[/dim] {tutor.rating:.2f} ({tutor.tier.value})")


@app.command()
def rate(
    email: str = typer.Argument(..., help="Tutor email"),
    score: int = typer.Argument(..., help="Score from 0 to 5"),
) -> None:
    """Rate a tutor after a session."""
    with _marketplace() as marketplace:
        tutor = marketplace.rate_tutor(email, score)
        console.print(
            f"[green]✓ Rated {tutor.name}:[/green] {tutor.rating:.2f} ({tutor.tier.value})"
        )


@app.command()
def donate(
    email: str = typer.Argument(..., help="Tutor email"),
    cents: int = typer.Argument(..., help="Amount in cents"),
) -> None:
    """Donate to a tutor; the platform keeps a tier-dependent share."""
    with _marketplace() as marketplace:
        split = marketplace.donate(email, cents)
        console.print(
            f"[green]✓ Donation of {_format_cents(split.total)}:[/green] "
            f"tutor {_format_cents(split.tutor_share)}, "
            f"platform {_format_cents(split.platform_share)}"
        )


@app.command()
def revenue() -> None:
    """Show total platform revenue."""
    with _marketplace(save=False) as marketplace:
        console.print(_format_cents(marketplace.system_revenue()))


# =============================================================================
# DATA MANAGEMENT
# =============================================================================


@app.command(name="set-order")
def set_order(
    order: str = typer.Argument(..., help="name, registrationId or email"),
) -> None:
    """Set the listing order for students and tutors."""
    with _marketplace() as marketplace:
        marketplace.configure_order(order)
        console.print(f"[green]✓ Listing order:[/green] {marketplace.students.order.value}")


@app.command()
def export() -> None:
    """Write student and tutor listings to the state directory."""
    with _marketplace(save=False) as marketplace:
        students_path, tutors_path = marketplace.save()
        console.print(f"  [dim]students:[/dim] {students_path}")
        console.print(f"  [dim]tutors:[/dim]   {tutors_path}")


@app.command()
def clear(
    yes: bool = typer.Option(False, "--yes", "-y", help="Skip confirmation prompt"),
) -> None:
    """Delete ALL students, tutors, listings and platform revenue."""
    if not yes:
        confirm = typer.confirm("Delete all marketplace data?")
        if not confirm:
            console.print("[yellow]Cancelled[/yellow]")
            raise typer.Exit(code=0)

    with _marketplace(save=False) as marketplace:
        marketplace.clear()
    delete_marketplace_state(_data_dir())
    console.print("[green]✓ All data cleared[/green]")
