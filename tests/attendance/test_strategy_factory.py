from src.tutoring_attendance.tutoring_attendance.attendance.factory import ClassificationStrategyFactory
from src.tutoring_attendance.tutoring_attendance.attendance.model import AttendanceObservation
from src.tutoring_attendance.tutoring_attendance.attendance.strategies.excuse_strategy import AutoExcuseStrategy
from src.tutoring_attendance.tutoring_attendance.attendance.strategies.late_strategy import LateStrategy
from src.tutoring_attendance.tutoring_attendance.attendance.strategies.normal_strategy import OnTimeStrategy
from src.tutoring_attendance.tutoring_attendance.core.enums import AttendanceStatus
from tests.fakes import make_policy


def _obs(minutes=None, reason=None, status=AttendanceStatus.PRESENT):
    return AttendanceObservation("st1", "L1", status, arrival_minutes=minutes, excuse_reason_text=reason)


def test_factory_arrival_within_tolerance():
    policy = make_policy(late_tolerance_minutes=10)
    strategy = ClassificationStrategyFactory().for_arrival(observation=_obs(minutes=10), policy=policy)
    assert isinstance(strategy, OnTimeStrategy)


def test_factory_arrival_after_tolerance():
    policy = make_policy(late_tolerance_minutes=10)
    strategy = ClassificationStrategyFactory().for_arrival(observation=_obs(minutes=11), policy=policy)
    assert isinstance(strategy, LateStrategy)


def test_factory_no_arrival_strategy_without_minutes():
    policy = make_policy()
    factory = ClassificationStrategyFactory()
    assert factory.for_arrival(observation=_obs(), policy=policy) is None
    assert factory.for_arrival(observation=_obs(minutes=-5), policy=policy) is None


def test_factory_excuse_only_for_absent_with_reason_and_enabled_policy():
    enabled = make_policy(auto_excuse_enabled=True, auto_excuse_reasons=("sick",))
    factory = ClassificationStrategyFactory()

    absent = _obs(reason="sick", status=AttendanceStatus.ABSENT)
    assert isinstance(factory.for_excuse(current=AttendanceStatus.ABSENT, observation=absent, policy=enabled), AutoExcuseStrategy)
    assert factory.for_excuse(current=AttendanceStatus.LATE, observation=absent, policy=enabled) is None
    assert factory.for_excuse(current=AttendanceStatus.ABSENT, observation=_obs(status=AttendanceStatus.ABSENT), policy=enabled) is None
    assert factory.for_excuse(current=AttendanceStatus.ABSENT, observation=absent, policy=make_policy()) is None
