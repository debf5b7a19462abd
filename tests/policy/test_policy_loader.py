from __future__ import annotations

import copy
import json

import pytest

from staff_attendance.core.exceptions import ConfigurationError
from staff_attendance.policy.loader import load_policy, load_policy_file
from staff_attendance.policy.rules import DEFAULT_ATTENDANCE_RULES


def test_default_policy_loads():
    policy = load_policy()

    assert policy.on_time_points == 0
    assert policy.tardy.under_15_min < policy.tardy.over_15_min < policy.tardy.over_30_min
    assert policy.called_off.expiration_days == 14
    assert policy.consequences.warning == 3
    assert policy.recovery.recovery_shift_value < 0


def test_values_readable_by_status_name():
    policy = load_policy()

    assert policy.lookup("NO_SHOW", "POINTS") == policy.no_show_points
    assert policy.lookup("CALLED_OFF", "WITHOUT_APPROVAL") == policy.called_off.without_approval


def test_policy_table_is_read_only():
    policy = load_policy()

    with pytest.raises(TypeError):
        policy.rules["TARDY"]["POINTS"] = 99


def test_missing_key_is_configuration_error():
    rules = copy.deepcopy(DEFAULT_ATTENDANCE_RULES)
    del rules["CALLED_OFF"]["EXPIRATION_DAYS"]

    with pytest.raises(ConfigurationError, match="CALLED_OFF.EXPIRATION_DAYS"):
        load_policy(rules)


def test_missing_section_is_configuration_error():
    rules = copy.deepcopy(DEFAULT_ATTENDANCE_RULES)
    del rules["CONSEQUENCES"]

    with pytest.raises(ConfigurationError):
        load_policy(rules)


def test_non_integer_value_rejected():
    rules = copy.deepcopy(DEFAULT_ATTENDANCE_RULES)
    rules["TARDY"]["OVER_30_MIN"] = "3"

    with pytest.raises(ConfigurationError):
        load_policy(rules)


def test_thresholds_must_ascend():
    rules = copy.deepcopy(DEFAULT_ATTENDANCE_RULES)
    rules["CONSEQUENCES"]["PROBATION_THRESHOLD"] = 2

    with pytest.raises(ConfigurationError):
        load_policy(rules)


def test_load_policy_file(tmp_path):
    rules = copy.deepcopy(DEFAULT_ATTENDANCE_RULES)
    rules["NO_SHOW"]["POINTS"] = 7
    path = tmp_path / "policy.json"
    path.write_text(json.dumps({"ATTENDANCE_RULES": rules}), encoding="utf-8")

    policy = load_policy_file(path)

    assert policy.no_show_points == 7
    assert policy.recovery.max_recovery_per_month == 2


def test_unreadable_policy_file(tmp_path):
    path = tmp_path / "broken.json"
    path.write_text("{not json", encoding="utf-8")

    with pytest.raises(ConfigurationError):
        load_policy_file(path)
