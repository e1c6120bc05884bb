import logging

import click

from canteen.infrastructure.bootstrap import settings
from canteen.infrastructure.cli.menu_commands import menu_list, menu_quote
from canteen.infrastructure.cli.order_commands import (
    order_accept,
    order_board,
    order_cancel,
    order_complete,
    order_create,
    order_list,
    order_ready,
    order_show,
    order_transition,
)
from canteen.infrastructure.cli.staff_commands import staff_add, staff_list
from canteen.infrastructure.config import ConfigurationError

LOG_FORMAT = "%(asctime)s %(levelname)-7s %(name)s: %(message)s"


@click.group()
@click.option("--verbose", "-v", is_flag=True, help="Log debug output to stderr.")
def cli(verbose: bool) -> None:
    """Canteen counter order tracker."""
    try:
        level = "DEBUG" if verbose else settings().log_level
    except ConfigurationError as exc:
        raise click.ClickException(str(exc))
    logging.basicConfig(level=level, format=LOG_FORMAT)


@cli.group()
def order() -> None:
    """Manage orders."""


@cli.group()
def menu() -> None:
    """Browse the menu."""


@cli.group()
def staff() -> None:
    """Manage staff members."""


# Register subcommands
order.add_command(order_accept)
order.add_command(order_board)
order.add_command(order_cancel)
order.add_command(order_complete)
order.add_command(order_create)
order.add_command(order_list)
order.add_command(order_ready)
order.add_command(order_show)
order.add_command(order_transition)
menu.add_command(menu_list)
menu.add_command(menu_quote)
staff.add_command(staff_add)
staff.add_command(staff_list)
