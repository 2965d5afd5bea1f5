from __future__ import annotations

import logging
from functools import wraps

from flask import Flask, g, jsonify, request

from ..container import Container
from ..core.exceptions import AuthenticationError

logger = logging.getLogger(__name__)


def bearer_auth(container: Container, *, required: bool):
    """Verify ``Authorization: Bearer <token>`` when present.

    A missing token is only rejected when ``required``; a bad one always is.
    """

    def decorator(view):
        @wraps(view)
        def wrapper(*args, **kwargs):
            header = request.headers.get("Authorization", "")
            token = header.split(" ", 1)[1].strip() if header.lower().startswith("bearer ") else ""
            g.current_user = None

            if not token:
                if required:
                    return jsonify({"success": False, "error": "Access token required"}), 401
                return view(*args, **kwargs)

            try:
                g.current_user = container.auth_service.verify_token(token)
            except AuthenticationError as e:
                return jsonify({"success": False, "error": str(e)}), 403
            return view(*args, **kwargs)

        return wrapper

    return decorator


def register(app: Flask, container: Container) -> None:
    @app.route("/login", methods=["POST"], endpoint="login")
    def login():
        data = request.get_json(silent=True) or {}
        try:
            result = container.auth_service.authenticate(str(data.get("username", "")), str(data.get("password", "")))
        except AuthenticationError as e:
            return jsonify({"error": str(e)}), 401
        except Exception:
            logger.exception("Login error")
            return jsonify({"error": "Internal server error"}), 500

        return jsonify({"success": True, "token": result.token, "user": result.user.to_api()})
