from __future__ import annotations

from flask import Flask, jsonify, request

from ..common.datetime_utils import parse_iso_date
from ..common.guards import current_identity, json_body, leader_required, login_required
from ..common.pagination import parse_page
from ..container import Container


def register(app: Flask, container: Container) -> None:
    @app.route("/api/v1/attendance", methods=["POST"], endpoint="attendance_update_today")
    @login_required
    def attendance_update_today():
        record = container.attendance_service.set_today_status(current_identity(), json_body().get("status"))
        return jsonify({"message": "Attendance updated", "attendance": record.to_dict()}), 201

    @app.route("/api/v1/attendance", methods=["GET"], endpoint="attendance_mine")
    @login_required
    def attendance_mine():
        page = parse_page(request.args.get("page"), request.args.get("limit"))
        result = container.attendance_service.my_attendances(current_identity(), page)
        return jsonify(
            {
                **page.as_dict(result.total),
                "attendances": [r.to_dict() for r in result.records],
            }
        )

    @app.route("/api/v1/attendance/<int:attendance_id>", methods=["DELETE"], endpoint="attendance_delete")
    @login_required
    def attendance_delete(attendance_id: int):
        container.attendance_service.delete_my_attendance(current_identity(), attendance_id)
        return jsonify({"message": "Attendance deleted"})

    @app.route("/api/v1/admin/attendance", methods=["GET"], endpoint="admin_attendance")
    @leader_required
    def admin_attendance():
        page = parse_page(request.args.get("page"), request.args.get("limit"))
        custom = request.args.get("date")
        view = container.attendance_service.day_view(
            filter_name=request.args.get("filter"),
            custom_date=parse_iso_date(custom) if custom else None,
            page=page,
        )
        return jsonify(
            {
                "period": view.window.as_dict(),
                **page.as_dict(view.total),
                "attendances": [r.to_dict() for r in view.rows],
            }
        )

    @app.route("/api/v1/admin/attendance/<int:user_id>", methods=["GET"], endpoint="admin_attendance_for_user")
    @leader_required
    def admin_attendance_for_user(user_id: int):
        row = container.attendance_service.latest_for_user(user_id)
        return jsonify({"record": row.to_dict()})

    @app.route("/api/v1/admin/attendance/<int:attendance_id>", methods=["PUT"], endpoint="admin_attendance_update")
    @leader_required
    def admin_attendance_update(attendance_id: int):
        record = container.attendance_service.update_status(attendance_id, json_body().get("status"))
        return jsonify({"message": "Attendance updated successfully", "record": record.to_dict()})

    @app.route("/api/v1/admin/sweep", methods=["POST"], endpoint="admin_sweep")
    @leader_required
    def admin_sweep():
        result = container.daily_sweep.run()
        return jsonify({"message": "Daily sweep completed", **result.to_dict()})
