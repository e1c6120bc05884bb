"""Composition root — wires concrete implementations to domain interfaces.

This is the only place in the codebase that knows about *all* layers.
Every other module depends only on abstractions.
"""

from __future__ import annotations

from functools import lru_cache

from canteen.application.locking import KeyedLock
from canteen.domain.model.catalog import Catalog
from canteen.domain.service.authorization import (
    AllowAllPolicy,
    AuthorizationPolicy,
    StaffRolePolicy,
)
from canteen.infrastructure.config import Settings, load_settings
from canteen.infrastructure.persistence.json_menu_loader import load_catalog
from canteen.infrastructure.persistence.json_order_repository import (
    JsonOrderRepository,
)
from canteen.infrastructure.persistence.json_staff_repository import (
    JsonStaffRepository,
)


@lru_cache(maxsize=None)
def settings() -> Settings:
    return load_settings()


@lru_cache(maxsize=None)
def catalog() -> Catalog:
    # Loaded once per process; a menu change needs a restart.
    return load_catalog(settings().menu_file)


@lru_cache(maxsize=None)
def transition_locks() -> KeyedLock:
    return KeyedLock()


def order_repository() -> JsonOrderRepository:
    return JsonOrderRepository(settings().orders_file)


def staff_repository() -> JsonStaffRepository:
    return JsonStaffRepository(settings().staff_file)


def authorization_policy() -> AuthorizationPolicy:
    if settings().enforce_staff_roles:
        return StaffRolePolicy(staff_repository())
    return AllowAllPolicy()
