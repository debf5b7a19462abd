"""Default attendance and scheduling policy tables.

Pure data. Loaded once through ``policy.loader.load_policy`` and read-only
afterwards.
"""

DEFAULT_ATTENDANCE_RULES = {
    "ON_TIME": {
        "POINTS": 0,
    },
    "TARDY": {
        "THRESHOLD_MINUTES": 5,
        "POINTS": 1,
        "UNDER_15_MIN": 1,
        "OVER_15_MIN": 2,
        "OVER_30_MIN": 3,
    },
    "LEFT_EARLY": {
        "POINTS": 1,
        "UNDER_15_MIN": 1,
        "OVER_15_MIN": 2,
        "OVER_30_MIN": 3,
    },
    "NO_SHOW": {
        "POINTS": 4,
    },
    "CALLED_OFF": {
        "WITH_APPROVAL": 1,
        "WITHOUT_APPROVAL": 2,
        "EXPIRATION_DAYS": 14,
    },
    "COMPLETED": {
        "POINTS": 0,
    },
    "CONSEQUENCES": {
        "WARNING_THRESHOLD": 3,
        "PROBATION_THRESHOLD": 6,
        "TERMINATION_THRESHOLD": 10,
    },
}

SCHEDULING_RULES = {
    "RECOVERY": {
        "POINTS_THRESHOLD": 5,
        "RECOVERY_SHIFT_VALUE": -2,
        "MAX_RECOVERY_PER_MONTH": 2,
    },
}

TIERED_KEYS = ("POINTS", "UNDER_15_MIN", "OVER_15_MIN", "OVER_30_MIN")

REQUIRED_ATTENDANCE_KEYS = {
    "ON_TIME": ("POINTS",),
    "TARDY": ("THRESHOLD_MINUTES",) + TIERED_KEYS,
    "LEFT_EARLY": TIERED_KEYS,
    "NO_SHOW": ("POINTS",),
    "CALLED_OFF": ("WITH_APPROVAL", "WITHOUT_APPROVAL", "EXPIRATION_DAYS"),
    "COMPLETED": ("POINTS",),
    "CONSEQUENCES": ("WARNING_THRESHOLD", "PROBATION_THRESHOLD", "TERMINATION_THRESHOLD"),
}

REQUIRED_SCHEDULING_KEYS = {
    "RECOVERY": ("POINTS_THRESHOLD", "RECOVERY_SHIFT_VALUE", "MAX_RECOVERY_PER_MONTH"),
}
