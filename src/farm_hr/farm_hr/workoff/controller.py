from __future__ import annotations

from flask import Flask, jsonify, request

from ..common.guards import current_identity, json_body, leader_required, login_required
from ..container import Container


def register(app: Flask, container: Container) -> None:
    @app.route("/api/v1/off", methods=["POST"], endpoint="workoff_save")
    @login_required
    def workoff_save():
        container.workoff_service.save_days(current_identity(), json_body().get("dates"))
        return jsonify({"message": "Work-off days saved"})

    @app.route("/api/v1/off", methods=["GET"], endpoint="workoff_summary")
    @login_required
    def workoff_summary():
        summary = container.workoff_service.summary(current_identity())
        return jsonify(summary.to_dict())

    @app.route("/api/v1/off", methods=["PUT"], endpoint="workoff_mark_used")
    @login_required
    def workoff_mark_used():
        container.workoff_service.mark_used(current_identity(), json_body().get("date"))
        return jsonify({"message": "Marked as used"})

    @app.route("/api/v1/off/limit", methods=["GET"], endpoint="workoff_limit")
    @login_required
    def workoff_limit():
        allotment = container.workoff_service.current_allotment()
        return jsonify(allotment.to_dict())

    @app.route("/api/v1/admin/off", methods=["POST"], endpoint="admin_workoff_limit")
    @leader_required
    def admin_workoff_limit():
        data = json_body()
        allotment = container.workoff_service.set_monthly_limit(
            month=data.get("month"),
            year=data.get("year"),
            max_days=data.get("maxDays", data.get("max_days")),
        )
        return jsonify({"message": "Monthly limit saved", "setting": allotment.to_dict()})

    @app.route("/api/v1/admin/off", methods=["GET"], endpoint="admin_workoff_overview")
    @leader_required
    def admin_workoff_overview():
        records = container.workoff_service.monthly_overview(
            month=request.args.get("month"),
            year=request.args.get("year"),
            user_id=request.args.get("userId") or request.args.get("user_id"),
        )
        return jsonify({"records": [r.to_dict() for r in records]})

    @app.route("/api/v1/admin/off/<int:workoff_id>", methods=["PUT"], endpoint="admin_workoff_move")
    @leader_required
    def admin_workoff_move(workoff_id: int):
        data = json_body()
        container.workoff_service.move_date(workoff_id, data.get("newDate", data.get("new_date")))
        return jsonify({"message": "Work-off date updated"})
