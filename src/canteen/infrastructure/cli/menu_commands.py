"""CLI commands for the menu catalog."""

from __future__ import annotations

import click

from canteen.application.price_order import PriceOrderHandler
from canteen.domain.exceptions import DomainException
from canteen.infrastructure.bootstrap import catalog
from canteen.infrastructure.cli.parsing import parse_items


def _load_catalog():
    try:
        return catalog()
    except DomainException as exc:
        raise click.ClickException(str(exc))


@click.command("list")
def menu_list() -> None:
    """List every menu item with its price."""
    menu = _load_catalog()

    if not len(menu):
        click.echo("The menu is empty.")
        return

    click.echo(f"{'Item':<24} {'Price':>8}")
    click.echo("-" * 33)
    for entry in menu.entries():
        click.echo(f"{entry.name:<24} {str(entry.unit_price):>8}")


@click.command("quote")
@click.option("--items", required=True, help="Items as 'Name:Qty,Name:Qty'.")
def menu_quote(items: str) -> None:
    """Price a list of items without placing an order."""
    handler = PriceOrderHandler(_load_catalog())

    try:
        quote = handler.handle(parse_items(items))
    except DomainException as exc:
        raise click.ClickException(str(exc))

    click.echo(f"  {'Item':<24} {'Qty':>5} {'Price':>8} {'Total':>8}")
    click.echo(f"  {'-'*48}")
    for item in quote.items:
        click.echo(
            f"  {item.name:<24} {item.quantity:>5} {item.unit_price:>8} {item.item_total:>8}"
        )
    click.echo(f"  {'-'*48}")
    click.echo(f"  {'Subtotal':<38} {quote.subtotal:>8}")
    click.echo(f"  {'Tax (5%)':<38} {quote.tax:>8}")
    click.echo(f"  {'Total ' + quote.currency:<38} {quote.total:>8}")
