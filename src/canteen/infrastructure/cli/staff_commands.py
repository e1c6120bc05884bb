"""CLI commands for the staff registry."""

from __future__ import annotations

import click

from canteen.application.manage_staff import AddStaffHandler, ListStaffHandler
from canteen.domain.exceptions import DomainException
from canteen.infrastructure.bootstrap import staff_repository


@click.command("add")
@click.option("--email", required=True, help="Staff email.")
@click.option("--name", "display_name", required=True, help="Display name.")
@click.option(
    "--role",
    type=click.Choice(["customer", "staff", "admin"]),
    default="staff",
    show_default=True,
)
def staff_add(email: str, display_name: str, role: str) -> None:
    """Register a staff member or change their role."""
    try:
        handler = AddStaffHandler(staff_repo=staff_repository())
        member = handler.handle(email=email, display_name=display_name, role=role)
    except DomainException as exc:
        raise click.ClickException(str(exc))

    click.echo(f"{member.email} is now {member.role}")


@click.command("list")
def staff_list() -> None:
    """List registered staff members."""
    try:
        members = ListStaffHandler(staff_repo=staff_repository()).handle()
    except DomainException as exc:
        raise click.ClickException(str(exc))

    if not members:
        click.echo("No staff members registered.")
        return

    click.echo(f"{'Email':<32} {'Name':<20} {'Role':<8}")
    click.echo("-" * 62)
    for m in members:
        click.echo(f"{m.email:<32} {m.display_name:<20} {m.role:<8}")
