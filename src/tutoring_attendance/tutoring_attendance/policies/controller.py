from __future__ import annotations

from typing import Any

from flask import Flask, jsonify, request

from ..common.datetime_utils import parse_iso_datetime
from ..common.http import json_body
from ..common.validators import require_enum, require_non_empty
from ..core import constants
from ..core.enums import PolicyScope
from ..core.exceptions import ValidationError
from ..container import Container
from .model import DEFAULT_POLICY, PolicyDraft


def _reasons(value: Any) -> tuple[str, ...]:
    if value is None or value == "":
        return ()
    if isinstance(value, str):
        return tuple(part for part in value.split(","))
    if isinstance(value, (list, tuple)):
        if not all(isinstance(v, str) for v in value):
            raise ValidationError("autoExcuseReasons must be a list of strings")
        return tuple(value)
    raise ValidationError("autoExcuseReasons must be a list of strings")


def draft_from_payload(data: dict) -> PolicyDraft:
    raw_scope = data.get("scope")
    scope = require_enum(PolicyScope, raw_scope.upper() if isinstance(raw_scope, str) else raw_scope, "Scope")
    return PolicyDraft(
        name=data.get("name") or "",
        description=data.get("description"),
        scope=scope,
        school_id=data.get("schoolId") or None,
        class_id=data.get("classId") or None,
        concern_threshold=data.get("concernThreshold", constants.DEFAULT_CONCERN_THRESHOLD),
        late_tolerance_minutes=data.get("lateToleranceMinutes", constants.DEFAULT_LATE_TOLERANCE_MINUTES),
        max_absences=data.get("maxAbsences", constants.DEFAULT_MAX_ABSENCES),
        auto_excuse_enabled=bool(data.get("autoExcuseEnabled", False)),
        auto_excuse_reasons=_reasons(data.get("autoExcuseReasons")),
        effective_from=parse_iso_datetime(data.get("effectiveFrom")),
        effective_to=parse_iso_datetime(data.get("effectiveTo")),
    )


def register(app: Flask, container: Container) -> None:
    @app.route("/api/attendance-policies", methods=["GET"], endpoint="list_policies")
    def list_policies():
        policies = container.policy_service.list_policies()
        return jsonify({"policies": [p.to_dict() for p in policies]})

    @app.route("/api/attendance-policies", methods=["POST"], endpoint="create_policy")
    def create_policy():
        draft = draft_from_payload(json_body())
        policy = container.policy_service.publish(draft)
        return jsonify({"message": "Attendance policy created", "policy": policy.to_dict()}), 201

    @app.route("/api/attendance-policies/effective", methods=["GET"], endpoint="effective_policy")
    def effective_policy():
        class_id = require_non_empty(request.args.get("classId"), "classId")
        policy = container.policy_service.effective_policy(
            class_id=class_id,
            school_id=request.args.get("schoolId") or None,
            at=parse_iso_datetime(request.args.get("at")),
        )
        out = policy.to_dict()
        if policy is DEFAULT_POLICY:
            # datetime.min is not a meaningful timestamp for API clients
            out["effectiveFrom"] = None
        return jsonify({"policy": out, "isDefault": policy is DEFAULT_POLICY})
