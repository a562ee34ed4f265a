import os
from dotenv import load_dotenv

load_dotenv()

# Integer extent of the robot table; the polygon edges sit 0.5 outside it.
TABLE_MIN = 0
TABLE_MAX = 9

# Inclusive integer range sampled for DROP coordinates.
DROP_COORD_RANGE = (-5, 14)

# Inclusive integer range sampled for the hit-test self-check points.
HIT_SAMPLE_RANGE = (-10, 19)

DEFAULT_COMMAND_COUNT = 20
DEFAULT_UNIT_SAMPLES = 10


def _get_int(name: str, default: int, minimum: int = 1) -> int:
    raw = os.environ.get(name, "").strip()
    if not raw:
        return default
    try:
        value = int(raw)
    except ValueError as exc:
        raise RuntimeError(f"{name} must be an integer, got {raw!r}") from exc
    if value < minimum:
        raise RuntimeError(f"{name} must be at least {minimum}, got {value}")
    return value


def get_default_command_count() -> int:
    """
    Return the command count used by a functional run that names none.

    Reads ROBOT_HARNESS_DEFAULT_COUNT, falling back to DEFAULT_COMMAND_COUNT.

    Raises:
        RuntimeError: if the env var is set but is not an integer >= 1.
    """
    return _get_int("ROBOT_HARNESS_DEFAULT_COUNT", DEFAULT_COMMAND_COUNT)


def get_unit_samples() -> int:
    """
    Return how many samples each self-check draws.

    Raises:
        RuntimeError: if ROBOT_HARNESS_UNIT_SAMPLES is set but is not an integer >= 1.
    """
    return _get_int("ROBOT_HARNESS_UNIT_SAMPLES", DEFAULT_UNIT_SAMPLES)


def get_log_level() -> str:
    """Return the log level name for entry points (default INFO)."""
    return os.environ.get("ROBOT_HARNESS_LOG_LEVEL", "INFO").strip().upper() or "INFO"
