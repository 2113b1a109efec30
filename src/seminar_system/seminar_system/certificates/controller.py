from __future__ import annotations

import io

from flask import Flask, jsonify, send_file

from ..common.http import error_response, json_body, server_error
from ..common.serialization import to_json
from ..core.exceptions import DomainError
from ..container import Container
from ..users.guards import Guards


def register(app: Flask, container: Container) -> None:
    guards = Guards(container.auth_service)

    @app.route("/api/certificates/generate", methods=["POST"], endpoint="certificates_generate")
    def certificates_generate():
        try:
            certificate = container.certificate_service.generate(json_body().get("registrationId"))
            return jsonify({"message": "Certificate generated successfully", "certificate": to_json(certificate)}), 201
        except DomainError as e:
            return error_response(e)
        except Exception:
            return server_error("Generate certificate")

    @app.route("/api/certificates/generate-bulk", methods=["POST"], endpoint="certificates_generate_bulk")
    @guards.admin_required
    def certificates_generate_bulk():
        try:
            result = container.certificate_service.generate_bulk(json_body().get("seminarId"))
        except DomainError as e:
            return error_response(e)
        except Exception:
            return server_error("Bulk generate certificates")
        return jsonify(
            {
                "message": "Bulk certificate generation completed",
                "results": {
                    "success": result.success,
                    "alreadyExists": result.already_exists,
                    "failed": result.failed,
                },
                "certificates": to_json(result.certificates),
            }
        )

    @app.route("/api/certificates/verify", methods=["POST"], endpoint="certificates_verify")
    def certificates_verify():
        data = json_body()
        try:
            outcome = container.certificate_service.verify(
                certificate_number=data.get("certificateNumber"),
                verification_code=data.get("verificationCode"),
            )
        except DomainError as e:
            return error_response(e)
        except Exception:
            return server_error("Verify certificate")

        if outcome.certificate is None:
            return jsonify({"message": "Certificate not found or verification code is incorrect", "isValid": False}), 404
        if not outcome.is_valid:
            return (
                jsonify(
                    {
                        "message": "Certificate has been revoked",
                        "isValid": False,
                        "certificate": to_json(outcome.certificate),
                    }
                ),
                400,
            )
        return jsonify({"message": "Certificate is valid", "isValid": True, "certificate": to_json(outcome.certificate)})

    @app.route("/api/certificates/<int:certificate_id>", methods=["GET"], endpoint="certificates_get")
    def certificates_get(certificate_id: int):
        try:
            return jsonify({"certificate": to_json(container.certificate_service.get(certificate_id))})
        except DomainError as e:
            return error_response(e)
        except Exception:
            return server_error("Get certificate")

    @app.route("/api/certificates/<int:certificate_id>/qr", methods=["GET"], endpoint="certificates_qr")
    def certificates_qr(certificate_id: int):
        try:
            png = container.certificate_service.qr_png(certificate_id)
        except DomainError as e:
            return error_response(e)
        except Exception:
            return server_error("Certificate QR")
        return send_file(io.BytesIO(png), mimetype="image/png")

    @app.route("/api/certificates/student/<path:email>", methods=["GET"], endpoint="certificates_by_student")
    def certificates_by_student(email: str):
        try:
            return jsonify({"certificates": to_json(list(container.certificate_service.for_email(email)))})
        except Exception:
            return server_error("Get student certificates")

    @app.route("/api/certificates/seminar/<int:seminar_id>", methods=["GET"], endpoint="certificates_by_seminar")
    def certificates_by_seminar(seminar_id: int):
        try:
            return jsonify({"certificates": to_json(list(container.certificate_service.for_seminar(seminar_id)))})
        except Exception:
            return server_error("Get seminar certificates")

    @app.route("/api/certificates/revoke/<int:certificate_id>", methods=["PUT"], endpoint="certificates_revoke")
    @guards.admin_required
    def certificates_revoke(certificate_id: int):
        try:
            certificate = container.certificate_service.revoke(certificate_id)
            return jsonify({"message": "Certificate revoked successfully", "certificate": to_json(certificate)})
        except DomainError as e:
            return error_response(e)
        except Exception:
            return server_error("Revoke certificate")
