from __future__ import annotations

from flask import Flask, jsonify, request

from ..common.guards import admin_required, current_identity, json_body, login_required
from ..container import Container


def register(app: Flask, container: Container) -> None:
    @app.route("/api/v1/summaries/<summary_type>", methods=["POST"], endpoint="summary_generate")
    @login_required
    def summary_generate(summary_type: str):
        saved = container.summary_service.generate(summary_type)
        return jsonify({"message": f"Summary generated for {saved.summary_type.value}", "summary": saved.to_dict()})

    @app.route("/api/v1/summaries", methods=["GET"], endpoint="summary_list")
    @login_required
    def summary_list():
        summaries = container.summary_service.list(request.args.get("type"))
        return jsonify([s.to_dict() for s in summaries])

    @app.route("/api/v1/admin/summaries", methods=["POST"], endpoint="admin_summary_create")
    @admin_required
    def admin_summary_create():
        data = json_body()
        saved = container.summary_service.create(current_identity(), data.get("type"), data.get("content"))
        return jsonify({"message": "Summary created", "summary": saved.to_dict()}), 201

    @app.route("/api/v1/admin/summaries/<int:summary_id>", methods=["DELETE"], endpoint="admin_summary_delete")
    @admin_required
    def admin_summary_delete(summary_id: int):
        container.summary_service.delete(current_identity(), summary_id)
        return jsonify({"message": "Summary deleted"})
