from __future__ import annotations

from flask import Flask, jsonify

from ..common.http import error_response, json_body, server_error
from ..common.serialization import to_json
from ..core.exceptions import DomainError
from ..container import Container
from ..users.guards import Guards


def register(app: Flask, container: Container) -> None:
    guards = Guards(container.auth_service)

    @app.route("/api/speakers", methods=["POST"], endpoint="speakers_create")
    @guards.admin_required
    def speakers_create():
        try:
            speaker = container.speaker_service.create(json_body())
            return jsonify({"message": "Speaker created successfully", "speaker": to_json(speaker)}), 201
        except DomainError as e:
            return error_response(e)
        except Exception:
            return server_error("Create speaker")

    @app.route("/api/speakers", methods=["GET"], endpoint="speakers_list")
    def speakers_list():
        try:
            return jsonify({"speakers": to_json(list(container.speaker_service.list_all()))})
        except Exception:
            return server_error("Get speakers")

    @app.route("/api/speakers/<int:speaker_id>", methods=["GET"], endpoint="speakers_get")
    def speakers_get(speaker_id: int):
        try:
            return jsonify({"speaker": to_json(container.speaker_service.get(speaker_id))})
        except DomainError as e:
            return error_response(e)
        except Exception:
            return server_error("Get speaker")

    @app.route("/api/speakers/<int:speaker_id>", methods=["PUT"], endpoint="speakers_update")
    @guards.admin_required
    def speakers_update(speaker_id: int):
        try:
            speaker = container.speaker_service.update(speaker_id, json_body())
            return jsonify({"message": "Speaker updated successfully", "speaker": to_json(speaker)})
        except DomainError as e:
            return error_response(e)
        except Exception:
            return server_error("Update speaker")

    @app.route("/api/speakers/<int:speaker_id>", methods=["DELETE"], endpoint="speakers_delete")
    @guards.admin_required
    def speakers_delete(speaker_id: int):
        try:
            container.speaker_service.delete(speaker_id)
            return jsonify({"message": "Speaker deleted successfully"})
        except DomainError as e:
            return error_response(e)
        except Exception:
            return server_error("Delete speaker")
