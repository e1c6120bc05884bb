"""CLI commands for the Order aggregate."""

from __future__ import annotations

import click

from canteen.application.create_order import CreateOrderHandler
from canteen.application.dto import CustomerSpec, OrderDTO, PaymentSpec
from canteen.application.list_orders import DEFAULT_LIMIT, ListOrdersHandler
from canteen.application.show_order import ShowOrderHandler
from canteen.application.transition_order import TransitionOrderHandler
from canteen.domain.exceptions import DomainException, IllegalTransitionError
from canteen.domain.model.order import OrderStatus
from canteen.infrastructure.bootstrap import (
    authorization_policy,
    catalog,
    order_repository,
    transition_locks,
)
from canteen.infrastructure.cli.parsing import parse_items

STATUS_CHOICES = click.Choice([s.value for s in OrderStatus])


def _display_items(dto: OrderDTO) -> None:
    click.echo(f"  {'Item':<24} {'Qty':>5} {'Price':>8} {'Total':>8}")
    click.echo(f"  {'-'*48}")
    for item in dto.items:
        click.echo(
            f"  {item.name:<24} {item.quantity:>5} {item.unit_price:>8} {item.item_total:>8}"
        )
    click.echo(f"  {'-'*48}")
    click.echo(f"  {'Subtotal':<38} {dto.subtotal:>8}")
    click.echo(f"  {'Tax (5%)':<38} {dto.tax:>8}")
    click.echo(f"  {'Total ' + dto.currency:<38} {dto.total:>8}")


def _display_order(dto: OrderDTO) -> None:
    """Shared formatting for displaying an order."""
    click.echo(f"Order #{dto.id}  (status={dto.status})")
    click.echo(f"Customer: {dto.customer_name} <{dto.customer_email}>")
    click.echo(f"Payment:  {dto.payment_status} via {dto.payment_method}")
    click.echo(f"Created:  {dto.created_at}")
    for status, (at, actor) in dto.attribution.items():
        click.echo(f"{status.capitalize() + ':':<10}{at} by {actor}")
    if dto.cancellation_reason:
        click.echo(f"Reason:   {dto.cancellation_reason}")
    if dto.notes:
        click.echo(f"Notes:    {dto.notes}")
    click.echo()
    _display_items(dto)


@click.command("create")
@click.option("--email", required=True, help="Customer email.")
@click.option("--name", "display_name", default=None, help="Customer display name.")
@click.option("--first-name", default=None)
@click.option("--last-name", default=None)
@click.option("--phone", default=None)
@click.option("--items", required=True, help="Items as 'Name:Qty,Name:Qty'.")
@click.option(
    "--payment-status",
    type=click.Choice(["success", "pending", "failed"]),
    default="success",
    show_default=True,
)
@click.option("--payment-method", default="UPI", show_default=True)
@click.option("--transaction-id", default=None)
@click.option("--notes", default=None, help="Free-text note for the kitchen.")
def order_create(
    email: str,
    display_name: str | None,
    first_name: str | None,
    last_name: str | None,
    phone: str | None,
    items: str,
    payment_status: str,
    payment_method: str,
    transaction_id: str | None,
    notes: str | None,
) -> None:
    """Create a new order; it starts as pending."""
    requests = parse_items(items)

    try:
        handler = CreateOrderHandler(order_repo=order_repository(), catalog=catalog())
        result = handler.handle(
            items=requests,
            customer=CustomerSpec(
                email=email,
                display_name=display_name,
                first_name=first_name,
                last_name=last_name,
                phone=phone,
            ),
            payment=PaymentSpec(
                status=payment_status,
                method=payment_method,
                transaction_id=transaction_id,
            ),
            notes=notes,
        )
    except DomainException as exc:
        raise click.ClickException(str(exc))

    click.echo(result.message)
    _display_order(result.order)


@click.command("show")
@click.option("--id", "order_id", required=True, type=int, help="Order ID to display.")
def order_show(order_id: int) -> None:
    """Show details of an existing order."""
    try:
        dto = ShowOrderHandler(order_repo=order_repository()).handle(order_id)
    except DomainException as exc:
        raise click.ClickException(str(exc))

    _display_order(dto)


@click.command("list")
@click.option("--status", type=STATUS_CHOICES, default=None, help="Only this status.")
@click.option("--limit", type=int, default=DEFAULT_LIMIT, show_default=True)
def order_list(status: str | None, limit: int) -> None:
    """List orders, newest first."""
    try:
        handler = ListOrdersHandler(order_repo=order_repository())
        listing = handler.handle(status=status, limit=limit)
    except DomainException as exc:
        raise click.ClickException(str(exc))

    if not listing.orders:
        click.echo("No orders found.")
        return

    click.echo(f"{'ID':<6} {'Status':<10} {'Customer':<28} {'Total':>8} {'Created':>22}")
    click.echo("-" * 78)
    for dto in listing.orders:
        click.echo(
            f"{dto.id:<6} {dto.status:<10} {dto.customer_email:<28} "
            f"{dto.total:>8} {dto.created_at:>22}"
        )
    click.echo(f"\n{listing.counts['total']} order(s)")


@click.command("board")
def order_board() -> None:
    """Show the staff dashboard: recent orders grouped by status."""
    try:
        board = ListOrdersHandler(order_repo=order_repository()).board()
    except DomainException as exc:
        raise click.ClickException(str(exc))

    for status, orders in board.buckets.items():
        click.echo(f"{status.upper()} ({len(orders)})")
        for dto in orders:
            click.echo(f"  #{dto.id:<5} {dto.customer_name or dto.customer_email:<28} {dto.total:>8}")
    click.echo(f"\nTotal: {board.total}")


def _transition(
    order_id: int,
    target: str,
    actor: str | None,
    reason: str | None = None,
    note: str | None = None,
) -> None:
    try:
        handler = TransitionOrderHandler(
            order_repo=order_repository(),
            policy=authorization_policy(),
            locks=transition_locks(),
        )
        result = handler.handle(order_id, target, actor=actor, reason=reason, note=note)
    except IllegalTransitionError as exc:
        if exc.current == exc.requested:
            raise click.ClickException(f"Order #{order_id} is already {exc.current}")
        raise click.ClickException(str(exc))
    except DomainException as exc:
        raise click.ClickException(str(exc))

    click.echo(f"Order #{result.order_id}: {result.message}")


_ID = click.option("--id", "order_id", required=True, type=int, help="Order ID.")
_BY = click.option("--by", "actor", default=None, help="Staff member performing the action.")
_NOTE = click.option("--note", default=None, help="Note recorded with the change.")


@click.command("accept")
@_ID
@_BY
@_NOTE
def order_accept(order_id: int, actor: str | None, note: str | None) -> None:
    """Accept a pending order."""
    _transition(order_id, OrderStatus.ACCEPTED.value, actor, note=note)


@click.command("ready")
@_ID
@_BY
@_NOTE
def order_ready(order_id: int, actor: str | None, note: str | None) -> None:
    """Mark an accepted order as ready for pickup."""
    _transition(order_id, OrderStatus.READY.value, actor, note=note)


@click.command("complete")
@_ID
@_BY
@_NOTE
def order_complete(order_id: int, actor: str | None, note: str | None) -> None:
    """Complete a ready order (handed to the customer)."""
    _transition(order_id, OrderStatus.COMPLETED.value, actor, note=note)


@click.command("cancel")
@_ID
@_BY
@click.option("--reason", default=None, help="Cancellation reason (default: Payment failed).")
def order_cancel(order_id: int, actor: str | None, reason: str | None) -> None:
    """Cancel an order that has not been completed."""
    _transition(order_id, OrderStatus.CANCELLED.value, actor, reason=reason)


@click.command("transition")
@_ID
@click.option("--to", "target", required=True, type=STATUS_CHOICES, help="Target status.")
@_BY
@click.option("--reason", default=None)
@_NOTE
def order_transition(
    order_id: int,
    target: str,
    actor: str | None,
    reason: str | None,
    note: str | None,
) -> None:
    """Move an order to any status the lifecycle allows."""
    _transition(order_id, target, actor, reason=reason, note=note)
