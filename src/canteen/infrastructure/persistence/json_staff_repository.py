"""JSON-file-backed implementation of StaffRepository."""

from __future__ import annotations

from pathlib import Path

from canteen.domain.model.staff import Role, StaffMember
from canteen.domain.model.value_objects import EmailAddress
from canteen.domain.repository.staff_repository import StaffRepository
from canteen.infrastructure.persistence.json_file import JsonListFile


class JsonStaffRepository(StaffRepository):

    def __init__(self, file_path: Path) -> None:
        self._file = JsonListFile(file_path, "Staff store")

    # --- StaffRepository interface --------------------------------------------

    def get_by_email(self, email: EmailAddress) -> StaffMember | None:
        for raw in self._file.load():
            if raw["email"] == email.value:
                return self._to_domain(raw)
        return None

    def list_all(self) -> list[StaffMember]:
        return [self._to_domain(raw) for raw in self._file.load()]

    def save(self, member: StaffMember) -> None:
        with self._file.locked():
            records = self._file.load()
            for i, raw in enumerate(records):
                if raw["email"] == member.email.value:
                    records[i] = self._to_raw(member)
                    break
            else:
                records.append(self._to_raw(member))
            self._file.save(records)

    # --- Serialization --------------------------------------------------------

    @staticmethod
    def _to_raw(member: StaffMember) -> dict:
        return {
            "email": member.email.value,
            "display_name": member.display_name,
            "role": member.role.value,
        }

    @staticmethod
    def _to_domain(raw: dict) -> StaffMember:
        return StaffMember(
            email=EmailAddress(raw["email"]),
            display_name=raw["display_name"],
            role=Role(raw.get("role", "staff")),
        )

