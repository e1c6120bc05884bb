"""Helpers for turning CLI option strings into request objects."""

from __future__ import annotations

import click

from canteen.application.dto import LineItemRequest


def _number(raw: str) -> int | float:
    try:
        return int(raw)
    except ValueError:
        return float(raw)


def parse_items(raw: str) -> list[LineItemRequest]:
    """Parse 'Plain Maggi:2,Coca Cola:1' into LineItemRequest list."""
    requests: list[LineItemRequest] = []
    for pair in raw.split(","):
        pair = pair.strip()
        if ":" not in pair:
            raise click.BadParameter(
                f"Invalid item format '{pair}'. Expected 'ItemName:Quantity'."
            )
        name, qty_str = pair.rsplit(":", 1)
        try:
            qty = _number(qty_str.strip())
        except ValueError:
            raise click.BadParameter(
                f"Invalid quantity '{qty_str}' for item '{name}'."
            )
        requests.append(LineItemRequest(name=name.strip(), quantity=qty))
    return requests
