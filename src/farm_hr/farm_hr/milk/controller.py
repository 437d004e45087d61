from __future__ import annotations

from flask import Flask, jsonify, request

from ..common.guards import current_identity, json_body, leader_required, login_required
from ..common.pagination import parse_page
from ..container import Container


def register(app: Flask, container: Container) -> None:
    @app.route("/api/v1/admin/milk", methods=["POST"], endpoint="admin_milk_animal")
    @leader_required
    def admin_milk_animal():
        data = json_body()
        animal = container.milk_service.add_animal(data.get("animalTag", data.get("animal_tag")))
        return jsonify({"message": "Animal created", "animal": animal.to_dict()}), 201

    @app.route("/api/v1/admin/milk/record", methods=["POST"], endpoint="admin_milk_record")
    @leader_required
    def admin_milk_record():
        data = json_body()
        measurement = container.milk_service.record(
            current_identity(),
            animal_id=data.get("animalId", data.get("animal_id")),
            period=data.get("period"),
            quantity=data.get("quantity"),
        )
        return jsonify({"message": "Milk recorded", "session": measurement.to_dict()}), 201

    @app.route("/api/v1/milk/summary", methods=["GET"], endpoint="milk_summary")
    @login_required
    def milk_summary():
        page = parse_page(request.args.get("page"), request.args.get("limit"))
        result = container.milk_service.summary(
            range_name=request.args.get("range"),
            anchor=request.args.get("date"),
            animal_tag=request.args.get("animalTag", request.args.get("animal_tag")),
            page=page,
        )
        return jsonify(result.to_dict())

    @app.route("/api/v1/milk/animals", methods=["GET"], endpoint="milk_animals")
    @login_required
    def milk_animals():
        return jsonify({"animals": [a.to_dict() for a in container.milk_service.list_animals()]})
