"""Application constants and defaults."""

from pathlib import Path

APP_NAME = "geomockery"

MAX_FEATURES = 50_000
DEFAULT_QUANTITY = 50

# Rejection-sampling budget per generated feature
MAX_ATTEMPTS = 100

DEFAULT_MIN_LENGTH_M = 100.0
DEFAULT_MAX_LENGTH_M = 1000.0
DEFAULT_MIN_AREA_M2 = 1000.0
DEFAULT_MAX_AREA_M2 = 10_000.0

# Used when neither a viewport nor a constraining area is available
WORLD_BBOX = (-180.0, -90.0, 180.0, 90.0)

GEOMETRY_TYPES = ("point", "line", "polygon")

POLYGON_MIN_VERTICES = 6
POLYGON_MAX_VERTICES = 12
POLYGON_ANGLE_JITTER_DEG = 10.0
POLYGON_RADIUS_JITTER = 0.2


def default_session_path() -> Path:
    return Path.home() / ".cache" / APP_NAME / "session.json"
