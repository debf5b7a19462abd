from __future__ import annotations

from typing import Optional

from ..core.exceptions import GuardViolation


def require_non_empty(value: Optional[str], field_name: str) -> str:
    if not value or not value.strip():
        raise GuardViolation(f"{field_name} is required")
    return value.strip()
