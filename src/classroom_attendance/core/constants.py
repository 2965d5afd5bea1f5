"""Constants and defaults.

Note: Keep constants here to avoid magic numbers spread across code.
"""

DEFAULT_CAPTURE_INTERVAL_MS = 600_000
DEFAULT_SESSION_DURATION_MS = 3_000_000
DEFAULT_REQUIRED_DETECTIONS = 3
DEFAULT_TOTAL_CAPTURES = 5
DEFAULT_DETECTION_TIMEOUT_MS = 5_000
DEFAULT_DETECTION_CONFIDENCE = 0.65
DEFAULT_HTTP_TIMEOUT = 10
DEFAULT_TOKEN_TTL_HOURS = 24
DEFAULT_SAMPLE_ROSTER_SIZE = 80

DEFAULT_SECTIONS = ((1, "S33"), (2, "S34"), (3, "S35"))

SERVICE_NAME = "Face Recognition Attendance API"
