"""
tracker/config.py
Runtime settings read from the environment (.env honoured).
"""
import json
import os
from pathlib import Path

from dotenv import load_dotenv

load_dotenv()

BASE_DIR = Path(__file__).resolve().parent.parent

VERSION = "0.1.0"

ACTIVITIES_CACHE_KEY = "ramadhanActivities"


def _env_float(name: str, default: float) -> float:
    raw = os.getenv(name, "").strip()
    if not raw:
        return default
    try:
        return float(raw)
    except ValueError:
        raise RuntimeError(f"{name} must be a number, got {raw!r}")


def get_data_file() -> Path:
    env_path = os.getenv("TRACKER_DATA_FILE", "").strip()
    if env_path:
        return Path(env_path).expanduser()
    return BASE_DIR / "data" / "activities.json"


def get_function_data_file() -> Path:
    data_dir = os.getenv("TRACKER_FUNCTION_DATA_DIR", "/tmp/data")
    return Path(data_dir).expanduser() / "activities.json"


def get_host() -> str:
    return os.getenv("TRACKER_HOST", "127.0.0.1")


def get_port() -> int:
    return int(_env_float("TRACKER_PORT", 3001))


def get_api_url() -> str:
    return os.getenv("TRACKER_API_URL", f"http://localhost:{get_port()}/api/activities")


def get_cache_dir() -> Path:
    env_dir = os.getenv("TRACKER_CACHE_DIR", "").strip()
    if env_dir:
        return Path(env_dir).expanduser()
    return Path.home() / ".cache" / "ramadhan-tracker"


def get_http_timeout() -> float:
    return _env_float("TRACKER_HTTP_TIMEOUT", 10.0)


def get_status_ttl() -> float:
    """Seconds a status message stays visible before it is dismissed."""
    return _env_float("TRACKER_STATUS_TTL", 3.0)


def get_log_level() -> str:
    return os.getenv("TRACKER_LOG_LEVEL", "INFO").upper()


def load_json(path: Path, default=None):
    """Read a JSON file, returning `default` when it is missing, empty or malformed."""
    if not path.exists():
        return default
    try:
        raw = path.read_text(encoding="utf-8").strip()
    except OSError:
        return default
    if not raw:
        return default
    try:
        return json.loads(raw)
    except json.JSONDecodeError:
        return default
