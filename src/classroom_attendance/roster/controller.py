from __future__ import annotations

import logging

from flask import Flask, jsonify

from ..container import Container

logger = logging.getLogger(__name__)


def register(app: Flask, container: Container) -> None:
    @app.route("/students", methods=["GET"], endpoint="list_students")
    def list_students():
        try:
            students = container.roster_service.list_students()
        except Exception:
            logger.exception("Failed to list students")
            return jsonify({"success": False, "error": "Internal server error"}), 500

        return jsonify({"success": True, "students": [s.to_api() for s in students]})
