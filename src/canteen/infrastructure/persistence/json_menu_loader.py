"""Loads the menu catalog from a JSON file.

Expected shape::

    {"currency": "INR", "items": {"Plain Maggi": 50, "Coca Cola": 35}}
"""

from __future__ import annotations

import json
from pathlib import Path

from canteen.domain.exceptions import StoreUnavailableError, ValidationError
from canteen.domain.model.catalog import Catalog
from canteen.domain.model.value_objects import CURRENCY


def load_catalog(file_path: Path) -> Catalog:
    try:
        raw = json.loads(file_path.read_text(encoding="utf-8"))
    except (OSError, json.JSONDecodeError) as exc:
        raise StoreUnavailableError(f"Cannot load menu from {file_path}: {exc}") from exc

    if not isinstance(raw, dict) or not isinstance(raw.get("items"), dict):
        raise ValidationError(f"Menu file {file_path} must contain an 'items' object")

    return Catalog.from_prices(raw["items"], currency=raw.get("currency", CURRENCY))
