"""Abstract repository for StaffMember aggregate."""

from __future__ import annotations

from abc import ABC, abstractmethod

from canteen.domain.model.staff import StaffMember
from canteen.domain.model.value_objects import EmailAddress


class StaffRepository(ABC):

    @abstractmethod
    def get_by_email(self, email: EmailAddress) -> StaffMember | None:
        """Return a staff record by email, or None."""

    @abstractmethod
    def list_all(self) -> list[StaffMember]:
        """Return every staff record."""

    @abstractmethod
    def save(self, member: StaffMember) -> None:
        """Persist a new or updated staff record."""
