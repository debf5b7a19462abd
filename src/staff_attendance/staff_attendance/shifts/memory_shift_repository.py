from __future__ import annotations

from typing import Iterable, Optional

from .model import Shift
from .repository import ShiftRepository


class InMemoryShiftRepository(ShiftRepository):
    def __init__(self, shifts: Iterable[Shift] = ()):
        self._by_id: dict[str, Shift] = {s.shift_id: s for s in shifts}

    def add(self, shift: Shift) -> None:
        self._by_id[shift.shift_id] = shift

    def get_by_id(self, shift_id: str) -> Optional[Shift]:
        return self._by_id.get(shift_id)
