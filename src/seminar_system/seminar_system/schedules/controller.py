from __future__ import annotations

from flask import Flask, jsonify

from ..common.http import error_response, json_body, server_error
from ..common.serialization import to_json
from ..core.exceptions import DomainError
from ..container import Container
from ..users.guards import Guards


def register(app: Flask, container: Container) -> None:
    guards = Guards(container.auth_service)

    @app.route("/api/schedules", methods=["POST"], endpoint="schedules_create")
    @guards.admin_required
    def schedules_create():
        data = json_body()
        try:
            schedule = container.schedule_service.create(
                seminar_id=data.get("seminarId"), day=data.get("date"), time=data.get("time")
            )
            return jsonify({"message": "Schedule created successfully", "schedule": to_json(schedule)}), 201
        except DomainError as e:
            return error_response(e)
        except Exception:
            return server_error("Create schedule")

    @app.route("/api/schedules", methods=["GET"], endpoint="schedules_list")
    def schedules_list():
        try:
            return jsonify({"schedules": to_json(list(container.schedule_service.list_all()))})
        except Exception:
            return server_error("Get schedules")

    @app.route("/api/schedules/<int:schedule_id>", methods=["PUT"], endpoint="schedules_update")
    @guards.admin_required
    def schedules_update(schedule_id: int):
        data = json_body()
        try:
            schedule = container.schedule_service.update(
                schedule_id, day=data.get("date"), time=data.get("time"), is_active=data.get("isActive")
            )
            return jsonify({"message": "Schedule updated successfully", "schedule": to_json(schedule)})
        except DomainError as e:
            return error_response(e)
        except Exception:
            return server_error("Update schedule")

    @app.route("/api/schedules/<int:schedule_id>", methods=["DELETE"], endpoint="schedules_delete")
    @guards.admin_required
    def schedules_delete(schedule_id: int):
        try:
            container.schedule_service.delete(schedule_id)
            return jsonify({"message": "Schedule deleted successfully"})
        except DomainError as e:
            return error_response(e)
        except Exception:
            return server_error("Delete schedule")
