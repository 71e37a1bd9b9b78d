import os
from pathlib import Path
from threading import RLock


APP_NAME = "openhab_editor_bridge"
PROJECT_ROOT = Path(__file__).resolve().parents[2]
ENV_FILE_PATH = PROJECT_ROOT / ".env"


def load_local_env(env_path: Path) -> None:
    if not env_path.exists():
        return

    for raw in env_path.read_text(encoding="utf-8").splitlines():
        line = raw.strip()
        if not line or line.startswith("#") or "=" not in line:
            continue

        key, value = line.split("=", 1)
        key = key.strip()
        value = value.strip()
        if not key:
            continue

        if (value.startswith('"') and value.endswith('"')) or (value.startswith("'") and value.endswith("'")):
            value = value[1:-1]

        os.environ.setdefault(key, value)


load_local_env(ENV_FILE_PATH)


def env_float(name: str, default: float) -> float:
    raw = os.getenv(name)
    if raw is None:
        return default
    try:
        return float(raw)
    except ValueError:
        return default


def env_int(name: str, default: int) -> int:
    raw = os.getenv(name)
    if raw is None:
        return default
    try:
        return int(raw)
    except ValueError:
        return default


def env_path(name: str, default: str) -> Path:
    raw = os.getenv(name, default)
    path = Path(raw)
    if path.is_absolute():
        return path
    return (Path.cwd() / path).resolve()


def env_str(name: str, default: str) -> str:
    raw = os.getenv(name)
    if raw is None:
        return default
    value = raw.strip()
    if not value:
        return default
    return value


def env_bool(name: str, default: bool) -> bool:
    raw = os.getenv(name)
    if raw is None:
        return default
    normalized = raw.strip().lower()
    if normalized in {"1", "true", "yes", "y", "on"}:
        return True
    if normalized in {"0", "false", "no", "n", "off"}:
        return False
    return default


# Same defaults as the editor extension's "openhab.*" settings.
OPENHAB_HOST = env_str("OPENHAB_HOST", "localhost")
OPENHAB_PORT = max(1, env_int("OPENHAB_PORT", 8080))
OPENHAB_USERNAME = os.getenv("OPENHAB_USERNAME", "")
OPENHAB_PASSWORD = os.getenv("OPENHAB_PASSWORD", "")
OPENHAB_USE_REST_API = env_bool("OPENHAB_USE_REST_API", True)
OPENHAB_TIMEOUT_SEC = env_float("OPENHAB_TIMEOUT_SEC", 6.0)

SIMPLE_MODE_SERVICE_ID = "org.eclipse.smarthome.links"
DEFAULT_UI_QUERY = "/basicui/app"
CODE_BLOCK_LANGUAGE = "openhab"

APP_DIR = Path(__file__).resolve().parent.parent
HAB_DB_PATH = env_path("HAB_DB_PATH", str(APP_DIR / "bridge.db"))
HAB_LOG_PATH = env_path("HAB_LOG_PATH", str(APP_DIR / "logs" / "operations.jsonl"))
HAB_LOG_MAX_BYTES = env_int("HAB_LOG_MAX_BYTES", 5 * 1024 * 1024)
HAB_LOG_BACKUP_COUNT = max(1, env_int("HAB_LOG_BACKUP_COUNT", 10))
HAB_LOG_RETENTION_DAYS = max(1, env_int("HAB_LOG_RETENTION_DAYS", 14))
HAB_LOG_QUEUE_MAX = max(100, env_int("HAB_LOG_QUEUE_MAX", 5000))

runtime_config_lock = RLock()
storage_lock = RLock()
log_lock = RLock()
