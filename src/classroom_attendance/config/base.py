"""Settings shared by every environment.

Environment modules import everything from here and override what differs.
"""
import json
import os

from ..core import constants


def _flag(name: str, default: str) -> bool:
    return bool(int(os.getenv(name, default)))


def _sections():
    raw = os.getenv("SECTIONS")
    if not raw:
        return [{"id": sid, "name": name} for sid, name in constants.DEFAULT_SECTIONS]
    # JSON list of {"id": ..., "name": ...}
    return json.loads(raw)


SECRET_KEY = os.getenv("SECRET_KEY", "dev-secret-key")

DB_CONFIG = {
    "host": os.getenv("DB_HOST", "localhost"),
    "port": int(os.getenv("DB_PORT", "3306")),
    "user": os.getenv("DB_USER", "root"),
    "password": os.getenv("DB_PASSWORD", ""),
    "database": os.getenv("DB_NAME", "face_attendance"),
}

DEBUG = False

AUTO_INIT_DB = _flag("AUTO_INIT_DB", "0")
AUTO_SEED_DB = _flag("AUTO_SEED_DB", "0")

# Auth
JWT_SECRET = os.getenv("JWT_SECRET", "jwt_secret_please_change")
TOKEN_TTL_HOURS = int(os.getenv("TOKEN_TTL_HOURS", str(constants.DEFAULT_TOKEN_TTL_HOURS)))
REQUIRE_AUTH = _flag("REQUIRE_AUTH", "0")
# Offline demo logins (teacher/teach123 and DEMO_NUMERIC_ID as both fields)
ALLOW_DEMO_LOGIN = _flag("ALLOW_DEMO_LOGIN", "1")
DEMO_NUMERIC_ID = os.getenv("DEMO_NUMERIC_ID", "2500032073")

# Client
API_BASE_URL = os.getenv("API_BASE_URL", "http://localhost:5000")
HTTP_TIMEOUT = int(os.getenv("HTTP_TIMEOUT", str(constants.DEFAULT_HTTP_TIMEOUT)))

CAPTURE_INTERVAL_MS = int(os.getenv("CAPTURE_INTERVAL_MS", str(constants.DEFAULT_CAPTURE_INTERVAL_MS)))
SESSION_DURATION_MS = int(os.getenv("SESSION_DURATION_MS", str(constants.DEFAULT_SESSION_DURATION_MS)))
REQUIRED_DETECTIONS = int(os.getenv("REQUIRED_DETECTIONS", str(constants.DEFAULT_REQUIRED_DETECTIONS)))
TOTAL_CAPTURES = int(os.getenv("TOTAL_CAPTURES", str(constants.DEFAULT_TOTAL_CAPTURES)))
DETECTION_TIMEOUT_MS = int(os.getenv("DETECTION_TIMEOUT_MS", str(constants.DEFAULT_DETECTION_TIMEOUT_MS)))
DETECTION_CONFIDENCE = float(os.getenv("DETECTION_CONFIDENCE", str(constants.DEFAULT_DETECTION_CONFIDENCE)))
ASSIGNMENT_STRATEGY = os.getenv("ASSIGNMENT_STRATEGY", "positional")

PENDING_QUEUE_DIR = os.getenv("PENDING_QUEUE_DIR", os.path.join(os.path.expanduser("~"), ".classroom_attendance", "pending"))
SECTIONS = _sections()
SAMPLE_ROSTER_SIZE = int(os.getenv("SAMPLE_ROSTER_SIZE", str(constants.DEFAULT_SAMPLE_ROSTER_SIZE)))
CAMERA_INDEX = int(os.getenv("CAMERA_INDEX", "0"))

LOG_LEVEL = os.getenv("LOG_LEVEL", "INFO")
LOG_FILE = os.getenv("LOG_FILE") or None
