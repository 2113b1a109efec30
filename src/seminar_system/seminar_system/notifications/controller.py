from __future__ import annotations

from flask import Flask, jsonify

from ..common.http import error_response, json_body, server_error
from ..common.serialization import to_json
from ..core.exceptions import DomainError
from ..container import Container
from ..users.guards import Guards


def register(app: Flask, container: Container) -> None:
    guards = Guards(container.auth_service)
    notifications = container.notification_service

    @app.route(
        "/api/notifications/registration-confirmation", methods=["POST"], endpoint="notify_registration_confirmation"
    )
    @guards.admin_required
    def notify_registration_confirmation():
        try:
            notifications.send_registration_confirmation(json_body().get("registrationId"))
            return jsonify({"message": "Registration confirmation email sent successfully"})
        except DomainError as e:
            return error_response(e)
        except Exception:
            return server_error("Send registration confirmation email")

    @app.route("/api/notifications/certificate", methods=["POST"], endpoint="notify_certificate")
    @guards.admin_required
    def notify_certificate():
        try:
            notifications.send_certificate(json_body().get("certificateId"))
            return jsonify({"message": "Certificate email sent successfully"})
        except DomainError as e:
            return error_response(e)
        except Exception:
            return server_error("Send certificate email")

    def _bulk(send, label: str):
        try:
            result = send(json_body().get("seminarId"))
            return jsonify({"message": f"{label} emails sent", "results": to_json(result)})
        except DomainError as e:
            return error_response(e)
        except Exception:
            return server_error(f"Send {label.lower()}")

    @app.route("/api/notifications/seminar-reminders", methods=["POST"], endpoint="notify_seminar_reminders")
    @guards.admin_required
    def notify_seminar_reminders():
        return _bulk(notifications.send_seminar_reminders, "Seminar reminder")

    @app.route("/api/notifications/feedback-requests", methods=["POST"], endpoint="notify_feedback_requests")
    @guards.admin_required
    def notify_feedback_requests():
        return _bulk(notifications.send_feedback_requests, "Feedback request")

    @app.route("/api/notifications/cancellation-notices", methods=["POST"], endpoint="notify_cancellation_notices")
    @guards.admin_required
    def notify_cancellation_notices():
        return _bulk(notifications.send_cancellation_notices, "Seminar cancellation")
