from __future__ import annotations

from flask import Flask, jsonify

from ..common.http import json_body
from ..container import Container


def register(app: Flask, container: Container) -> None:
    @app.route("/api/finances/wages/calculate", methods=["POST"], endpoint="calculate_wages")
    def calculate_wages():
        data = json_body()
        records = container.wage_service.calculate_month(
            month=data.get("month"),
            year=data.get("year"),
            teacher_id=data.get("teacherId") or None,
        )
        return jsonify({"message": f"Calculated {len(records)} wage record(s)", "records": [r.to_dict() for r in records]})
