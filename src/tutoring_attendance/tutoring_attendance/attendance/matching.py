"""Free-text matching of excuse reasons against a policy's reason list."""

from __future__ import annotations

from typing import Optional, Protocol, Sequence


class ReasonMatcher(Protocol):
    def find_match(self, reason_text: str, policy_reasons: Sequence[str]) -> Optional[str]:
        """Return the first policy reason (as written on the policy) matching reason_text, or None."""

        raise NotImplementedError


def normalize_reason(value: str) -> str:
    return value.strip().lower()


def reasons_overlap(submitted: str, policy_reason: str) -> bool:
    """Bidirectional substring containment on normalized text.

    Blank strings never match; an empty string is a substring of everything.
    """

    a = normalize_reason(submitted)
    b = normalize_reason(policy_reason)
    if not a or not b:
        return False
    return a in b or b in a


class ContainmentReasonMatcher:
    """First policy reason, in list order, that overlaps the submitted text."""

    def find_match(self, reason_text: str, policy_reasons: Sequence[str]) -> Optional[str]:
        for reason in policy_reasons:
            if reasons_overlap(reason_text, reason):
                return reason
        return None
