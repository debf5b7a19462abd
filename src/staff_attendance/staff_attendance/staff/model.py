from __future__ import annotations

from dataclasses import dataclass
from typing import Optional

from ..core.enums import EmploymentType, StaffStatus


@dataclass(frozen=True)
class StaffMember:
    """Domain entity: a member of facility staff.

    Note: ``points`` is a cached display value; the live total is derived
    from attendance records by ``PointsService``.
    """

    staff_id: str
    name: str
    email: str
    role: str
    department: str
    employment_type: EmploymentType = EmploymentType.FULL_TIME
    status: StaffStatus = StaffStatus.ACTIVE
    points: int = 0
    recovery_shifts: int = 0
    phone: Optional[str] = None
