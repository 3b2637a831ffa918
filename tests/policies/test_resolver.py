from __future__ import annotations

import itertools
from datetime import datetime, timedelta

import pytest

from src.tutoring_attendance.tutoring_attendance.core.enums import PolicyScope
from src.tutoring_attendance.tutoring_attendance.core.exceptions import NotFoundError
from src.tutoring_attendance.tutoring_attendance.policies.model import DEFAULT_POLICY
from src.tutoring_attendance.tutoring_attendance.policies.resolver import (
    PolicyResolver,
    ResolutionTarget,
    pick_effective,
)
from tests.fakes import InMemoryPolicyRepository, InMemorySchoolDirectory, make_policy

AT = datetime(2024, 3, 15, 10, 0)
TARGET = ResolutionTarget(class_id="c1", school_id="s1")


def _three_scopes():
    return [
        make_policy("g", scope=PolicyScope.GLOBAL, concern_threshold=60),
        make_policy("s", scope=PolicyScope.SCHOOL, school_id="s1", concern_threshold=70),
        make_policy("c", scope=PolicyScope.CLASS, school_id="s1", class_id="c1", concern_threshold=90),
    ]


def _resolver(policies):
    return PolicyResolver(InMemoryPolicyRepository(policies), InMemorySchoolDirectory({"c1": "s1", "c2": "s1"}))


def test_class_beats_school_beats_global_in_any_order():
    for ordering in itertools.permutations(_three_scopes()):
        assert pick_effective(ordering, TARGET, AT).policy_id == "c"


def test_school_wins_when_class_policy_is_for_another_class():
    policies = _three_scopes()
    policies[2] = make_policy("c", scope=PolicyScope.CLASS, school_id="s1", class_id="other")
    assert _resolver(policies).resolve("c1", "s1", AT).policy_id == "s"


def test_school_policy_of_other_school_is_ignored():
    policies = [
        make_policy("g", scope=PolicyScope.GLOBAL),
        make_policy("s2", scope=PolicyScope.SCHOOL, school_id="s2"),
    ]
    assert pick_effective(policies, TARGET, AT).policy_id == "g"


def test_window_start_inclusive_and_end_inclusive():
    start = datetime(2024, 3, 1)
    end = datetime(2024, 3, 31, 23, 59, 59)
    p = make_policy("w", effective_from=start, effective_to=end)

    assert pick_effective([p], TARGET, start) is p
    assert pick_effective([p], TARGET, end) is p
    assert pick_effective([p], TARGET, start - timedelta(microseconds=1)) is None
    assert pick_effective([p], TARGET, end + timedelta(milliseconds=1)) is None


def test_expired_class_policy_falls_through_to_school():
    policies = _three_scopes()
    policies[2] = make_policy(
        "c",
        scope=PolicyScope.CLASS,
        school_id="s1",
        class_id="c1",
        effective_to=AT - timedelta(days=1),
    )
    assert pick_effective(policies, TARGET, AT).policy_id == "s"


def test_latest_effective_from_wins_within_scope():
    older = make_policy("a", effective_from=datetime(2024, 1, 1))
    newer = make_policy("b", effective_from=datetime(2024, 2, 1))
    assert pick_effective([newer, older], TARGET, AT) is newer
    assert pick_effective([older, newer], TARGET, AT) is newer


def test_exact_tie_breaks_on_smallest_id():
    x = make_policy("x", effective_from=datetime(2024, 1, 1))
    y = make_policy("y", effective_from=datetime(2024, 1, 1))
    assert pick_effective([y, x], TARGET, AT) is x
    assert pick_effective([x, y], TARGET, AT) is x


def test_default_policy_when_nothing_matches():
    resolver = _resolver([make_policy("future", effective_from=AT + timedelta(days=1))])
    policy = resolver.resolve("c1", "s1", AT)

    assert policy is DEFAULT_POLICY
    assert policy.policy_id == "default"
    assert policy.name == "Default Policy"
    assert (policy.concern_threshold, policy.late_tolerance_minutes, policy.max_absences) == (80, 15, 20)
    assert policy.auto_excuse_enabled is False


def test_default_policy_is_the_same_object_every_time():
    resolver = _resolver([])
    assert resolver.resolve("c1", "s1", AT) is resolver.resolve("c2", "s1", AT)


def test_unknown_class_or_school_raises_not_found():
    resolver = _resolver(_three_scopes())
    with pytest.raises(NotFoundError):
        resolver.resolve("missing", "s1", AT)
    with pytest.raises(NotFoundError):
        resolver.resolve("c1", "missing", AT)


def test_resolve_uses_clock_when_no_instant_given():
    policies = [make_policy("late", effective_from=datetime(2030, 1, 1))]
    resolver = PolicyResolver(
        InMemoryPolicyRepository(policies),
        InMemorySchoolDirectory(),
        clock=lambda: datetime(2031, 1, 1),
    )
    assert resolver.resolve("c1", "s1").policy_id == "late"
