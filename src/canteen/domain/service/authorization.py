"""Domain service: transition authorization.

Handlers receive an ``AuthorizationPolicy`` and ask it before applying a
status change.  Which policy is used is decided by the composition root.
"""

from __future__ import annotations

from abc import ABC, abstractmethod

from canteen.domain.exceptions import AuthorizationError, ValidationError
from canteen.domain.model.order import OrderStatus
from canteen.domain.model.value_objects import EmailAddress
from canteen.domain.repository.staff_repository import StaffRepository


class AuthorizationPolicy(ABC):

    @abstractmethod
    def authorize_transition(self, actor: str, target: OrderStatus) -> None:
        """Raise AuthorizationError if *actor* may not move an order to *target*."""


class AllowAllPolicy(AuthorizationPolicy):
    """Trusts the caller; authentication happens at the transport boundary."""

    def authorize_transition(self, actor: str, target: OrderStatus) -> None:
        return None


class StaffRolePolicy(AuthorizationPolicy):
    """Admits actors whose stored role is ``staff`` or ``admin``."""

    def __init__(self, staff_repo: StaffRepository) -> None:
        self._staff_repo = staff_repo

    def authorize_transition(self, actor: str, target: OrderStatus) -> None:
        try:
            email = EmailAddress(actor)
        except ValidationError:
            raise AuthorizationError(
                f"'{actor}' is not a staff email; cannot mark order {target.value}"
            ) from None

        member = self._staff_repo.get_by_email(email)
        if member is None:
            raise AuthorizationError(f"'{email}' is not a registered staff member")
        if not member.can_handle_orders:
            raise AuthorizationError(
                f"'{email}' has role {member.role.value} and cannot mark orders {target.value}"
            )
