"""Publish a GLOBAL attendance policy with the system defaults, unless one is already open."""

from __future__ import annotations

import importlib
import sys
from pathlib import Path

REPO_ROOT = Path(__file__).resolve().parents[1]
if str(REPO_ROOT) not in sys.path:
    sys.path.insert(0, str(REPO_ROOT))

from config import get_settings_module

from src.tutoring_attendance.tutoring_attendance.container import build_container
from src.tutoring_attendance.tutoring_attendance.core import constants
from src.tutoring_attendance.tutoring_attendance.core.enums import PolicyScope
from src.tutoring_attendance.tutoring_attendance.policies.model import PolicyDraft


def main() -> None:
    settings = importlib.import_module(get_settings_module())
    container = build_container(db_config=settings.DB_CONFIG)

    existing = container.policies_repo.find_open_policy(scope=PolicyScope.GLOBAL, school_id=None, class_id=None)
    if existing:
        print(f"SKIP: global policy already active -> {existing.name} ({existing.policy_id})")
        return

    policy = container.policy_service.publish(
        PolicyDraft(
            name="Global Default Policy",
            description="Organisation-wide attendance rules",
            scope=PolicyScope.GLOBAL,
            concern_threshold=constants.DEFAULT_CONCERN_THRESHOLD,
            late_tolerance_minutes=constants.DEFAULT_LATE_TOLERANCE_MINUTES,
            max_absences=constants.DEFAULT_MAX_ABSENCES,
            auto_excuse_enabled=True,
            auto_excuse_reasons=("medical appointment", "family emergency", "school event"),
        )
    )
    print(f"OK: created global policy {policy.policy_id}")


if __name__ == "__main__":
    main()
