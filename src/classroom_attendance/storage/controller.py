from __future__ import annotations

import logging

from flask import Flask, jsonify, request

from ..auth.controller import bearer_auth
from ..common.datetime_utils import now_utc, to_iso
from ..container import Container
from ..core.constants import SERVICE_NAME
from ..core.exceptions import ValidationError

logger = logging.getLogger(__name__)


def register(app: Flask, container: Container) -> None:
    @app.route("/attendance/batch-submit", methods=["POST"], endpoint="batch_submit")
    @bearer_auth(container, required=container.require_auth)
    def batch_submit():
        data = request.get_json(silent=True)
        try:
            summary = container.storage_service.batch_submit(data)
        except ValidationError as e:
            return jsonify({"success": False, "error": str(e)}), 400
        except Exception:
            logger.exception("Batch submit failed")
            return jsonify({"success": False, "error": "Failed to save attendance"}), 500

        return jsonify(
            {
                "success": True,
                "message": f"Attendance saved for {summary.successful} of {summary.total} students",
                "summary": summary.to_api(),
            }
        )

    @app.route("/health", methods=["GET"], endpoint="health")
    def health():
        return jsonify({"status": "OK", "timestamp": to_iso(now_utc()), "service": SERVICE_NAME})
