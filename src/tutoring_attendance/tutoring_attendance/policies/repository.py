from __future__ import annotations

from datetime import datetime
from typing import Optional, Protocol, Sequence

from ..core.enums import PolicyScope
from .model import Policy, PolicyDraft


class PolicyRepository(Protocol):
    def list_candidate_policies(self, class_id: str, school_id: str) -> Sequence[Policy]:
        """CLASS policies of the class, SCHOOL policies of the school and all GLOBAL policies.

        Not filtered by effective window.
        """

        raise NotImplementedError

    def list_all(self) -> Sequence[Policy]:
        raise NotImplementedError

    def find_open_policy(
        self,
        *,
        scope: PolicyScope,
        school_id: Optional[str],
        class_id: Optional[str],
    ) -> Optional[Policy]:
        """The open-ended (effective_to IS NULL) policy for exactly this scope target."""

        raise NotImplementedError

    def replace_open_policy(
        self,
        *,
        draft: PolicyDraft,
        effective_from: datetime,
        retire_policy_id: Optional[str],
        retire_at: datetime,
    ) -> Policy:
        """Set effective_to = retire_at on retire_policy_id (if given) and insert the draft.

        Both writes commit together or not at all.
        """

        raise NotImplementedError
