"""StaffMember aggregate.

Who may act on orders is decided by the persisted ``role`` of a person,
never by comparing against a fixed list of addresses in code.
"""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum

from canteen.domain.exceptions import ValidationError
from canteen.domain.model.value_objects import EmailAddress


class Role(Enum):
    CUSTOMER = "customer"
    STAFF = "staff"
    ADMIN = "admin"

    @staticmethod
    def parse(raw: str) -> Role:
        try:
            return Role(raw)
        except ValueError:
            raise ValidationError(
                f"Invalid role: {raw!r}. Must be one of: customer, staff, admin"
            ) from None


@dataclass
class StaffMember:
    email: EmailAddress
    display_name: str
    role: Role = Role.STAFF

    @property
    def can_handle_orders(self) -> bool:
        return self.role in (Role.STAFF, Role.ADMIN)

    def change_role(self, role: Role) -> None:
        self.role = role
