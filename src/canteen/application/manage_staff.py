"""Application service: staff registry use cases."""

from __future__ import annotations

import logging

from canteen.application.dto import StaffDTO
from canteen.domain.exceptions import ValidationError
from canteen.domain.model.staff import Role, StaffMember
from canteen.domain.model.value_objects import EmailAddress
from canteen.domain.repository.staff_repository import StaffRepository

logger = logging.getLogger(__name__)


def _to_dto(member: StaffMember) -> StaffDTO:
    return StaffDTO(
        email=str(member.email),
        display_name=member.display_name,
        role=member.role.value,
    )


class AddStaffHandler:

    def __init__(self, staff_repo: StaffRepository) -> None:
        self._staff_repo = staff_repo

    def handle(self, email: str, display_name: str, role: str = "staff") -> StaffDTO:
        """Register a person, or change the role of an existing one."""
        if not display_name or not display_name.strip():
            raise ValidationError("Display name is required")

        address = EmailAddress(email)
        new_role = Role.parse(role)

        member = self._staff_repo.get_by_email(address)
        if member is None:
            member = StaffMember(
                email=address, display_name=display_name.strip(), role=new_role
            )
            logger.info("Registered %s as %s", address, new_role.value)
        else:
            logger.info(
                "Changed role of %s from %s to %s",
                address, member.role.value, new_role.value,
            )
            member.change_role(new_role)

        self._staff_repo.save(member)
        return _to_dto(member)


class ListStaffHandler:

    def __init__(self, staff_repo: StaffRepository) -> None:
        self._staff_repo = staff_repo

    def handle(self) -> list[StaffDTO]:
        return [_to_dto(m) for m in self._staff_repo.list_all()]
