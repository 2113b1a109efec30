from __future__ import annotations

from flask import Flask, jsonify

from ..common.http import error_response, json_body, server_error
from ..common.serialization import to_json
from ..core.exceptions import DomainError
from ..container import Container
from ..users.guards import Guards


def register(app: Flask, container: Container) -> None:
    guards = Guards(container.auth_service)

    @app.route("/api/feedback/submit", methods=["POST"], endpoint="feedback_submit")
    def feedback_submit():
        data = json_body()
        try:
            feedback = container.feedback_service.submit(
                registration_id=data.get("registrationId"),
                seminar_id=data.get("seminarId"),
                rating=data.get("rating"),
                content_quality=data.get("contentQuality"),
                speaker_effectiveness=data.get("speakerEffectiveness"),
                organization_quality=data.get("organizationQuality"),
                comments=data.get("comments"),
                suggestions=data.get("suggestions"),
            )
            return jsonify({"message": "Feedback submitted successfully", "feedback": to_json(feedback)}), 201
        except DomainError as e:
            return error_response(e)
        except Exception:
            return server_error("Submit feedback")

    @app.route("/api/feedback/seminar/<int:seminar_id>", methods=["GET"], endpoint="feedback_by_seminar")
    def feedback_by_seminar(seminar_id: int):
        try:
            return jsonify(to_json(container.feedback_service.for_seminar(seminar_id)))
        except DomainError as e:
            return error_response(e)
        except Exception:
            return server_error("Get seminar feedback")

    @app.route("/api/feedback/stats", methods=["GET"], endpoint="feedback_stats")
    @guards.admin_required
    def feedback_stats():
        try:
            return jsonify({"stats": to_json(container.feedback_service.stats())})
        except Exception:
            return server_error("Get feedback stats")

    @app.route("/api/feedback/user/<path:email>", methods=["GET"], endpoint="feedback_by_user")
    def feedback_by_user(email: str):
        try:
            return jsonify({"feedback": to_json(list(container.feedback_service.for_email(email)))})
        except Exception:
            return server_error("Get user feedback")

    @app.route("/api/feedback/check/<int:seminar_id>/<path:email>", methods=["GET"], endpoint="feedback_check")
    def feedback_check(seminar_id: int, email: str):
        try:
            return jsonify(to_json(container.feedback_service.check(seminar_id=seminar_id, email=email)))
        except Exception:
            return server_error("Check feedback status")

    @app.route("/api/feedback/<int:feedback_id>", methods=["GET"], endpoint="feedback_get")
    def feedback_get(feedback_id: int):
        try:
            return jsonify({"feedback": to_json(container.feedback_service.get(feedback_id))})
        except DomainError as e:
            return error_response(e)
        except Exception:
            return server_error("Get feedback by ID")
