from __future__ import annotations

from flask import Flask, g, jsonify, request, send_file
from werkzeug.exceptions import RequestEntityTooLarge

from ..common.http import error_response, json_body, server_error
from ..common.serialization import to_json
from ..core.exceptions import DomainError
from ..container import Container
from ..users.guards import Guards


def register(app: Flask, container: Container) -> None:
    guards = Guards(container.auth_service)

    @app.route("/api/archives", methods=["GET"], endpoint="archives_list")
    def archives_list():
        try:
            return jsonify({"archives": to_json(list(container.archive_service.list_all()))})
        except Exception:
            return server_error("Get archived seminars")

    @app.route("/api/archives/stats", methods=["GET"], endpoint="archives_stats")
    def archives_stats():
        try:
            return jsonify(to_json(container.archive_service.stats()))
        except Exception:
            return server_error("Get archive stats")

    @app.route("/api/archives/<int:archive_id>", methods=["GET"], endpoint="archives_get")
    def archives_get(archive_id: int):
        try:
            return jsonify({"archive": to_json(container.archive_service.get(archive_id))})
        except DomainError as e:
            return error_response(e)
        except Exception:
            return server_error("Get archived seminar")

    @app.route("/api/archives/archive/<int:seminar_id>", methods=["POST"], endpoint="archives_archive")
    @guards.admin_required
    def archives_archive(seminar_id: int):
        data = json_body()
        try:
            archive = container.archive_service.archive(
                seminar_id,
                total_attendees=data.get("totalAttendees"),
                average_rating=data.get("averageRating"),
                recording_url=data.get("recordingUrl"),
                archived_by=g.current_user.user_id,
            )
            return jsonify({"message": "Seminar archived successfully", "archive": to_json(archive)}), 201
        except DomainError as e:
            return error_response(e)
        except Exception:
            return server_error("Archive seminar")

    @app.route("/api/archives/<int:archive_id>/materials", methods=["POST"], endpoint="archives_upload")
    @guards.admin_required
    def archives_upload(archive_id: int):
        try:
            materials = container.archive_service.upload_materials(archive_id, request.files.getlist("materials"))
            return jsonify({"message": "Materials uploaded successfully", "materials": to_json(materials)})
        except RequestEntityTooLarge:
            return jsonify({"message": "Upload is too large"}), 413
        except DomainError as e:
            return error_response(e)
        except Exception:
            return server_error("Upload materials")

    @app.route(
        "/api/archives/<int:archive_id>/materials/<int:material_id>/download",
        methods=["GET"],
        endpoint="archives_download",
    )
    def archives_download(archive_id: int, material_id: int):
        try:
            material = container.archive_service.material_for_download(archive_id, material_id)
        except DomainError as e:
            return error_response(e)
        except Exception:
            return server_error("Download material")
        return send_file(
            material.path,
            mimetype=material.mimetype,
            as_attachment=True,
            download_name=material.filename,
        )

    @app.route(
        "/api/archives/<int:archive_id>/materials/<int:material_id>",
        methods=["DELETE"],
        endpoint="archives_delete_material",
    )
    @guards.admin_required
    def archives_delete_material(archive_id: int, material_id: int):
        try:
            container.archive_service.delete_material(archive_id, material_id)
            return jsonify({"message": "Material deleted successfully"})
        except DomainError as e:
            return error_response(e)
        except Exception:
            return server_error("Delete material")

    @app.route("/api/archives/<int:archive_id>", methods=["PUT"], endpoint="archives_update")
    @guards.admin_required
    def archives_update(archive_id: int):
        data = json_body()
        try:
            archive = container.archive_service.update(
                archive_id,
                total_attendees=data.get("totalAttendees"),
                average_rating=data.get("averageRating"),
                recording_url=data.get("recordingUrl"),
            )
            return jsonify({"message": "Archived seminar updated successfully", "archive": to_json(archive)})
        except DomainError as e:
            return error_response(e)
        except Exception:
            return server_error("Update archived seminar")

    @app.route("/api/archives/<int:archive_id>", methods=["DELETE"], endpoint="archives_delete")
    @guards.admin_required
    def archives_delete(archive_id: int):
        try:
            container.archive_service.delete(archive_id)
            return jsonify({"message": "Archived seminar deleted successfully"})
        except DomainError as e:
            return error_response(e)
        except Exception:
            return server_error("Delete archived seminar")
