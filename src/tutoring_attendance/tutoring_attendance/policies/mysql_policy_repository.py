from __future__ import annotations

import uuid
from datetime import datetime
from typing import Optional, Sequence

from ..core.enums import PolicyScope
from ..database.connection import DatabaseConnection
from ..database.mysql_base import db_cursor, dump_json_list, fetchall, fetchone, load_json_list
from .model import Policy, PolicyDraft
from .repository import PolicyRepository

_COLUMNS = """
    policy_id, name, description, scope, school_id, class_id, concern_threshold,
    late_tolerance_minutes, max_absences, auto_excuse_enabled, auto_excuse_reasons,
    effective_from, effective_to
"""


def _to_policy(r: dict) -> Policy:
    return Policy(
        policy_id=str(r["policy_id"]),
        name=r["name"],
        description=r.get("description"),
        scope=PolicyScope(r["scope"]),
        school_id=r.get("school_id"),
        class_id=r.get("class_id"),
        concern_threshold=int(r["concern_threshold"]),
        late_tolerance_minutes=int(r["late_tolerance_minutes"]),
        max_absences=int(r["max_absences"]),
        auto_excuse_enabled=bool(r["auto_excuse_enabled"]),
        auto_excuse_reasons=load_json_list(r.get("auto_excuse_reasons")),
        effective_from=r["effective_from"],
        effective_to=r.get("effective_to"),
    )


class MySQLPolicyRepository(PolicyRepository):
    def __init__(self, conn_factory: DatabaseConnection):
        self._conn_factory = conn_factory

    def list_candidate_policies(self, class_id: str, school_id: str) -> Sequence[Policy]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                f"""
                SELECT {_COLUMNS}
                FROM attendance_policies
                WHERE (scope='CLASS' AND class_id=%s)
                   OR (scope='SCHOOL' AND school_id=%s)
                   OR scope='GLOBAL'
                """,
                (class_id, school_id),
            )
            return [_to_policy(r) for r in fetchall(cur)]

    def list_all(self) -> Sequence[Policy]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                f"""
                SELECT {_COLUMNS}
                FROM attendance_policies
                ORDER BY FIELD(scope, 'GLOBAL', 'SCHOOL', 'CLASS'), created_at DESC, policy_id
                """
            )
            return [_to_policy(r) for r in fetchall(cur)]

    def find_open_policy(
        self,
        *,
        scope: PolicyScope,
        school_id: Optional[str],
        class_id: Optional[str],
    ) -> Optional[Policy]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                f"""
                SELECT {_COLUMNS}
                FROM attendance_policies
                WHERE scope=%s
                  AND school_id <=> %s
                  AND class_id <=> %s
                  AND effective_to IS NULL
                ORDER BY effective_from DESC
                LIMIT 1
                """,
                (scope.value, school_id, class_id),
            )
            r = fetchone(cur)
            return _to_policy(r) if r else None

    def replace_open_policy(
        self,
        *,
        draft: PolicyDraft,
        effective_from: datetime,
        retire_policy_id: Optional[str],
        retire_at: datetime,
    ) -> Policy:
        policy = Policy(
            policy_id=uuid.uuid4().hex,
            name=draft.name,
            description=draft.description,
            scope=draft.scope,
            school_id=draft.school_id,
            class_id=draft.class_id,
            concern_threshold=draft.concern_threshold,
            late_tolerance_minutes=draft.late_tolerance_minutes,
            max_absences=draft.max_absences,
            auto_excuse_enabled=draft.auto_excuse_enabled,
            auto_excuse_reasons=tuple(draft.auto_excuse_reasons),
            effective_from=effective_from,
            effective_to=draft.effective_to,
        )
        with db_cursor(self._conn_factory) as (_, cur):
            if retire_policy_id:
                cur.execute(
                    "UPDATE attendance_policies SET effective_to=%s WHERE policy_id=%s AND effective_to IS NULL",
                    (retire_at, retire_policy_id),
                )
            cur.execute(
                """
                INSERT INTO attendance_policies(
                    policy_id, name, description, scope, school_id, class_id, concern_threshold,
                    late_tolerance_minutes, max_absences, auto_excuse_enabled, auto_excuse_reasons,
                    effective_from, effective_to
                )
                VALUES(%s,%s,%s,%s,%s,%s,%s,%s,%s,%s,%s,%s,%s)
                """,
                (
                    policy.policy_id,
                    policy.name,
                    policy.description,
                    policy.scope.value,
                    policy.school_id,
                    policy.class_id,
                    policy.concern_threshold,
                    policy.late_tolerance_minutes,
                    policy.max_absences,
                    int(policy.auto_excuse_enabled),
                    dump_json_list(policy.auto_excuse_reasons),
                    policy.effective_from,
                    policy.effective_to,
                ),
            )
        return policy
