from __future__ import annotations

from flask import Flask, jsonify, request

from ..common.datetime_utils import parse_iso_date
from ..common.guards import current_identity, json_body, login_required
from ..container import Container


def register(app: Flask, container: Container) -> None:
    @app.route("/api/v1/reports", methods=["POST"], endpoint="report_create")
    @login_required
    def report_create():
        data = json_body()
        report = container.report_service.create(
            current_identity(),
            title=data.get("title"),
            tasks=data.get("tasks"),
            report_date=data.get("date"),
            challenges=data.get("challenges"),
            next_plan=data.get("nextPlan", data.get("next_plan")),
        )
        return jsonify(report.to_dict()), 201

    @app.route("/api/v1/reports", methods=["GET"], endpoint="report_ranges")
    @login_required
    def report_ranges():
        anchor = request.args.get("date")
        results = container.report_service.by_ranges(
            range_name=request.args.get("range"),
            anchor=parse_iso_date(anchor) if anchor else None,
        )
        return jsonify(
            {
                "reports": {name: [r.to_dict() for r in rows] for name, rows in results.items()},
                "counts": {
                    "daily": len(results["day"]),
                    "weekly": len(results["week"]),
                    "monthly": len(results["month"]),
                },
            }
        )

    @app.route("/api/v1/reports/<int:report_id>", methods=["GET"], endpoint="report_detail")
    @login_required
    def report_detail(report_id: int):
        return jsonify({"report": container.report_service.get(report_id).to_dict()})

    @app.route("/api/v1/reports/<int:report_id>", methods=["PUT"], endpoint="report_update")
    @login_required
    def report_update(report_id: int):
        data = json_body()
        report = container.report_service.update(
            current_identity(),
            report_id,
            title=data.get("title"),
            tasks=data.get("tasks"),
            challenges=data.get("challenges"),
            next_plan=data.get("nextPlan", data.get("next_plan")),
        )
        return jsonify({"report": report.to_dict()})

    @app.route("/api/v1/reports/<int:report_id>", methods=["DELETE"], endpoint="report_delete")
    @login_required
    def report_delete(report_id: int):
        container.report_service.delete(current_identity(), report_id)
        return jsonify({"message": "Report deleted successfully"})
