from __future__ import annotations

from typing import Iterable, Optional

from .model import StaffMember
from .repository import StaffRepository


class InMemoryStaffRepository(StaffRepository):
    def __init__(self, staff: Iterable[StaffMember] = ()):
        self._by_id: dict[str, StaffMember] = {s.staff_id: s for s in staff}

    def add(self, staff: StaffMember) -> None:
        self._by_id[staff.staff_id] = staff

    def get_by_id(self, staff_id: str) -> Optional[StaffMember]:
        return self._by_id.get(staff_id)
