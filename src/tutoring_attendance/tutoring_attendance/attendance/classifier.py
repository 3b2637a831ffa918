"""Turns raw attendance observations into final records under a resolved policy.

Steps run in order and each may override the previous status; every override
is appended to the record's applied rules:

1. the status as submitted,
2. arrival minutes against the late tolerance (LATE / PRESENT),
3. auto-excuse of absences whose reason matches the policy.

Batches are roster-filtered first: unknown students are dropped, not classified.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import AbstractSet, Iterable, Optional

from ..core.constants import NOTES_SEPARATOR
from ..policies.model import Policy
from .factory import ClassificationStrategyFactory
from .model import AttendanceObservation, AttendanceRecord


@dataclass(frozen=True)
class ClassifiedBatch:
    records: tuple[AttendanceRecord, ...]
    dropped_student_ids: tuple[str, ...] = ()


def policy_note(policy: Policy) -> str:
    return f"Policy: {policy.name} (ID: {policy.policy_id})"


class AttendanceClassifier:
    def __init__(self, factory: Optional[ClassificationStrategyFactory] = None):
        self._factory = factory or ClassificationStrategyFactory()

    def classify(self, observation: AttendanceObservation, policy: Policy) -> AttendanceRecord:
        status = observation.status
        rules: list[str] = []

        arrival = self._factory.for_arrival(observation=observation, policy=policy)
        if arrival is not None:
            decision = arrival.decide(current=status, observation=observation, policy=policy)
            status = decision.status
            if decision.rule:
                rules.append(decision.rule)

        excuse = self._factory.for_excuse(current=status, observation=observation, policy=policy)
        if excuse is not None:
            decision = excuse.decide(current=status, observation=observation, policy=policy)
            status = decision.status
            if decision.rule:
                rules.append(decision.rule)

        return AttendanceRecord(
            student_id=observation.student_id,
            lesson_id=observation.lesson_id,
            status=status,
            policy_id=policy.policy_id,
            applied_rules=tuple(rules),
            notes=NOTES_SEPARATOR.join([policy_note(policy), *rules]),
        )

    def classify_batch(
        self,
        observations: Iterable[AttendanceObservation],
        *,
        roster: AbstractSet[str],
        policy: Policy,
    ) -> ClassifiedBatch:
        """Filter to the roster, then classify; output is ordered by student id."""

        kept: list[AttendanceObservation] = []
        dropped: list[str] = []
        for obs in observations:
            if obs.student_id in roster:
                kept.append(obs)
            else:
                dropped.append(obs.student_id)

        kept.sort(key=lambda o: o.student_id)
        records = tuple(self.classify(obs, policy) for obs in kept)
        return ClassifiedBatch(records=records, dropped_student_ids=tuple(sorted(dropped)))
