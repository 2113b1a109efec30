from __future__ import annotations

from flask import Flask, jsonify

from ..common.http import error_response, json_body, server_error
from ..common.serialization import to_json
from ..core.exceptions import DomainError
from ..container import Container
from ..users.guards import Guards


def register(app: Flask, container: Container) -> None:
    guards = Guards(container.auth_service)

    @app.route("/api/registrations", methods=["POST"], endpoint="registrations_create")
    def registrations_create():
        data = json_body()
        try:
            registration = container.registration_service.register(
                seminar_id=data.get("seminarId"),
                name=data.get("name"),
                email=data.get("email"),
                student_id=data.get("studentId"),
                department=data.get("department"),
            )
            return jsonify({"message": "Registration successful", "registration": registration.summary()}), 201
        except DomainError as e:
            return error_response(e)
        except Exception:
            return server_error("Create registration")

    @app.route("/api/registrations/<int:registration_id>", methods=["DELETE"], endpoint="registrations_cancel")
    def registrations_cancel(registration_id: int):
        try:
            container.registration_service.cancel(registration_id)
            return jsonify({"message": "Registration cancelled successfully"})
        except DomainError as e:
            return error_response(e)
        except Exception:
            return server_error("Cancel registration")

    @app.route("/api/registrations/seminar/<int:seminar_id>", methods=["GET"], endpoint="registrations_by_seminar")
    @guards.admin_required
    def registrations_by_seminar(seminar_id: int):
        try:
            return jsonify(to_json(container.registration_service.for_seminar(seminar_id)))
        except DomainError as e:
            return error_response(e)
        except Exception:
            return server_error("Get seminar registrations")

    @app.route(
        "/api/registrations/check/<int:seminar_id>/<path:email>", methods=["GET"], endpoint="registrations_check"
    )
    def registrations_check(seminar_id: int, email: str):
        try:
            registration = container.registration_service.check(seminar_id=seminar_id, email=email)
        except Exception:
            return server_error("Check registration status")
        return jsonify(
            {
                "isRegistered": registration is not None,
                "registration": (
                    {
                        "id": registration.registration_id,
                        "name": registration.student_name,
                        "email": registration.email,
                        "registrationDate": to_json(registration.registration_date),
                    }
                    if registration
                    else None
                ),
            }
        )

    @app.route("/api/registrations/user/<path:email>", methods=["GET"], endpoint="registrations_by_user")
    def registrations_by_user(email: str):
        try:
            registrations = list(container.registration_service.for_email(email))
        except Exception:
            return server_error("Get user registrations")
        return jsonify({"registrations": to_json(registrations), "count": len(registrations), "userEmail": email})
