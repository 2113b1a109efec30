from __future__ import annotations

from flask import Flask, g, jsonify, request

from ..common.http import error_response, json_body, server_error
from ..common.serialization import to_json
from ..core.exceptions import DomainError
from ..container import Container
from ..users.guards import Guards


def register(app: Flask, container: Container) -> None:
    guards = Guards(container.auth_service)

    @app.route("/api/seminars", methods=["POST"], endpoint="seminars_create")
    @guards.admin_required
    def seminars_create():
        try:
            seminar = container.seminar_service.create(json_body(), created_by=g.current_user.user_id)
            return jsonify({"message": "Seminar created successfully", "seminar": to_json(seminar)}), 201
        except DomainError as e:
            return error_response(e)
        except Exception:
            return server_error("Create seminar")

    @app.route("/api/seminars", methods=["GET"], endpoint="seminars_list")
    def seminars_list():
        include_archived = request.args.get("includeArchived") == "true"
        try:
            seminars = container.seminar_service.list_seminars(include_archived=include_archived)
            return jsonify({"seminars": to_json(list(seminars))})
        except Exception:
            return server_error("Get seminars")

    @app.route("/api/seminars/<int:seminar_id>", methods=["GET"], endpoint="seminars_get")
    def seminars_get(seminar_id: int):
        try:
            seminar = container.seminar_service.get(seminar_id)
        except DomainError as e:
            return error_response(e)
        except Exception:
            return server_error("Get seminar")

        if seminar.is_archived:
            return jsonify(
                {
                    "seminar": to_json(seminar),
                    "isArchived": True,
                    "archivedAt": to_json(seminar.archived_at),
                    "message": "This seminar has been archived",
                }
            )
        return jsonify({"seminar": to_json(seminar)})

    @app.route("/api/seminars/<int:seminar_id>/capacity", methods=["GET"], endpoint="seminars_capacity")
    def seminars_capacity(seminar_id: int):
        try:
            status = container.seminar_service.capacity_status(seminar_id)
            return jsonify({"capacityStatus": to_json(status)})
        except DomainError as e:
            return error_response(e)
        except Exception:
            return server_error("Get seminar capacity status")

    @app.route("/api/seminars/<int:seminar_id>", methods=["PUT"], endpoint="seminars_update")
    @guards.admin_required
    def seminars_update(seminar_id: int):
        try:
            seminar = container.seminar_service.update(seminar_id, json_body())
            return jsonify({"message": "Seminar updated successfully", "seminar": to_json(seminar)})
        except DomainError as e:
            return error_response(e)
        except Exception:
            return server_error("Update seminar")

    @app.route("/api/seminars/<int:seminar_id>", methods=["DELETE"], endpoint="seminars_delete")
    @guards.admin_required
    def seminars_delete(seminar_id: int):
        try:
            container.seminar_service.delete(seminar_id)
            return jsonify({"message": "Seminar deleted successfully"})
        except DomainError as e:
            return error_response(e)
        except Exception:
            return server_error("Delete seminar")

    @app.route("/api/seminars/<int:seminar_id>/reconcile", methods=["POST"], endpoint="seminars_reconcile")
    @guards.admin_required
    def seminars_reconcile(seminar_id: int):
        try:
            changed = container.seminar_service.reconcile(seminar_id)
            status = container.seminar_service.capacity_status(seminar_id)
            return jsonify({"message": "Registration count reconciled", "changed": changed, "capacityStatus": to_json(status)})
        except DomainError as e:
            return error_response(e)
        except Exception:
            return server_error("Reconcile seminar")
