from __future__ import annotations

import json
import logging
from pathlib import Path
from types import MappingProxyType
from typing import Any, Mapping, Optional

from ..core.exceptions import ConfigurationError
from .model import AttendancePolicy, CallOffPolicy, ConsequenceThresholds, RecoveryPolicy, TieredPenalty
from .rules import (
    DEFAULT_ATTENDANCE_RULES,
    REQUIRED_ATTENDANCE_KEYS,
    REQUIRED_SCHEDULING_KEYS,
    SCHEDULING_RULES,
)

logger = logging.getLogger(__name__)


def _validated(table: Mapping[str, Any], required: Mapping[str, tuple], table_name: str) -> dict[str, dict[str, int]]:
    out: dict[str, dict[str, int]] = {}
    for section, keys in required.items():
        values = table.get(section)
        if not isinstance(values, Mapping):
            raise ConfigurationError(f"{table_name}.{section} is missing")
        out[section] = {}
        for key in keys:
            if key not in values:
                raise ConfigurationError(f"{table_name}.{section}.{key} is missing")
            value = values[key]
            # bool is an int subclass; reject it explicitly
            if isinstance(value, bool) or not isinstance(value, int):
                raise ConfigurationError(f"{table_name}.{section}.{key} must be an integer, got {value!r}")
            out[section][key] = value
    return out


def _tiered(section: Mapping[str, int]) -> TieredPenalty:
    return TieredPenalty(
        points=section["POINTS"],
        under_15_min=section["UNDER_15_MIN"],
        over_15_min=section["OVER_15_MIN"],
        over_30_min=section["OVER_30_MIN"],
    )


def load_policy(
    attendance_rules: Optional[Mapping[str, Any]] = None,
    scheduling_rules: Optional[Mapping[str, Any]] = None,
) -> AttendancePolicy:
    """Validate the policy tables and freeze them.

    Raises ConfigurationError when a required key is missing or malformed.
    Callers at startup let it propagate.
    """

    attendance = _validated(
        DEFAULT_ATTENDANCE_RULES if attendance_rules is None else attendance_rules,
        REQUIRED_ATTENDANCE_KEYS,
        "ATTENDANCE_RULES",
    )
    scheduling = _validated(
        SCHEDULING_RULES if scheduling_rules is None else scheduling_rules,
        REQUIRED_SCHEDULING_KEYS,
        "SCHEDULING_RULES",
    )

    c = attendance["CONSEQUENCES"]
    if not c["WARNING_THRESHOLD"] < c["PROBATION_THRESHOLD"] < c["TERMINATION_THRESHOLD"]:
        raise ConfigurationError("CONSEQUENCES thresholds must be strictly ascending")

    frozen = MappingProxyType({k: MappingProxyType(v) for k, v in attendance.items()})

    return AttendancePolicy(
        on_time_points=attendance["ON_TIME"]["POINTS"],
        tardy_threshold_minutes=attendance["TARDY"]["THRESHOLD_MINUTES"],
        tardy=_tiered(attendance["TARDY"]),
        left_early=_tiered(attendance["LEFT_EARLY"]),
        no_show_points=attendance["NO_SHOW"]["POINTS"],
        called_off=CallOffPolicy(
            with_approval=attendance["CALLED_OFF"]["WITH_APPROVAL"],
            without_approval=attendance["CALLED_OFF"]["WITHOUT_APPROVAL"],
            expiration_days=attendance["CALLED_OFF"]["EXPIRATION_DAYS"],
        ),
        completed_points=attendance["COMPLETED"]["POINTS"],
        consequences=ConsequenceThresholds(
            warning=c["WARNING_THRESHOLD"],
            probation=c["PROBATION_THRESHOLD"],
            termination=c["TERMINATION_THRESHOLD"],
        ),
        recovery=RecoveryPolicy(
            points_threshold=scheduling["RECOVERY"]["POINTS_THRESHOLD"],
            recovery_shift_value=scheduling["RECOVERY"]["RECOVERY_SHIFT_VALUE"],
            max_recovery_per_month=scheduling["RECOVERY"]["MAX_RECOVERY_PER_MONTH"],
        ),
        rules=frozen,
    )


def load_policy_file(path: str | Path) -> AttendancePolicy:
    """Load a JSON document ``{"ATTENDANCE_RULES": {...}, "SCHEDULING_RULES": {...}}``.

    Either section may be omitted, in which case the defaults are used.
    """

    path = Path(path)
    try:
        doc = json.loads(path.read_text(encoding="utf-8"))
    except (OSError, ValueError) as e:
        raise ConfigurationError(f"Cannot read policy file {path}: {e}") from e

    if not isinstance(doc, Mapping):
        raise ConfigurationError(f"Policy file {path} must contain a JSON object")

    logger.info("Loading attendance policy from %s", path)
    return load_policy(doc.get("ATTENDANCE_RULES"), doc.get("SCHEDULING_RULES"))
