from __future__ import annotations

from dataclasses import dataclass
from datetime import date
from typing import Optional

from ..core.enums import ShiftStatus, ShiftType


@dataclass(frozen=True)
class Shift:
    """Domain entity: one scheduled shift owned by exactly one staff member.

    ``start_time`` / ``end_time`` are facility-local "HH:MM" strings.
    """

    shift_id: str
    staff_id: str
    shift_type: ShiftType
    shift_date: date
    start_time: str
    end_time: str
    department: str
    role: str
    status: ShiftStatus = ShiftStatus.SCHEDULED
    swap_with_staff_id: Optional[str] = None
