import sqlite3
from typing import Any

from hab_bridge.core import settings


def get_db_connection() -> sqlite3.Connection:
    conn = sqlite3.connect(settings.HAB_DB_PATH, check_same_thread=False)
    conn.row_factory = sqlite3.Row
    return conn


def init_database() -> None:
    settings.HAB_DB_PATH.parent.mkdir(parents=True, exist_ok=True)
    with settings.storage_lock:
        with get_db_connection() as conn:
            conn.executescript(
                """
                CREATE TABLE IF NOT EXISTS runtime_config (
                    id INTEGER PRIMARY KEY CHECK (id = 1),
                    host TEXT NOT NULL,
                    port INTEGER NOT NULL,
                    username TEXT NOT NULL DEFAULT '',
                    password TEXT NOT NULL DEFAULT '',
                    use_rest_api INTEGER NOT NULL DEFAULT 1,
                    timeout_sec REAL NOT NULL
                );
                """
            )
            conn.commit()


def _env_defaults() -> dict[str, Any]:
    return {
        "host": settings.OPENHAB_HOST,
        "port": settings.OPENHAB_PORT,
        "username": settings.OPENHAB_USERNAME,
        "password": settings.OPENHAB_PASSWORD,
        "use_rest_api": settings.OPENHAB_USE_REST_API,
        "timeout_sec": settings.OPENHAB_TIMEOUT_SEC,
    }


def load_runtime_config_from_db() -> dict[str, Any]:
    with settings.storage_lock:
        with get_db_connection() as conn:
            row = conn.execute(
                """
                SELECT host, port, username, password, use_rest_api, timeout_sec
                FROM runtime_config
                WHERE id = 1
                """
            ).fetchone()

    if not row:
        return _env_defaults()

    return {
        "host": str(row["host"] or settings.OPENHAB_HOST),
        "port": int(row["port"] or settings.OPENHAB_PORT),
        "username": str(row["username"] or ""),
        "password": str(row["password"] or ""),
        "use_rest_api": bool(row["use_rest_api"]),
        "timeout_sec": float(row["timeout_sec"] or settings.OPENHAB_TIMEOUT_SEC),
    }


def save_runtime_config_to_db(
    *,
    host: str,
    port: int,
    username: str,
    password: str,
    use_rest_api: bool,
    timeout_sec: float,
) -> None:
    with settings.storage_lock:
        with get_db_connection() as conn:
            conn.execute(
                """
                INSERT INTO runtime_config (
                    id, host, port, username, password, use_rest_api, timeout_sec
                ) VALUES (1, ?, ?, ?, ?, ?, ?)
                ON CONFLICT(id) DO UPDATE SET
                    host = excluded.host,
                    port = excluded.port,
                    username = excluded.username,
                    password = excluded.password,
                    use_rest_api = excluded.use_rest_api,
                    timeout_sec = excluded.timeout_sec
                """,
                (host, port, username, password, 1 if use_rest_api else 0, timeout_sec),
            )
            conn.commit()


def seed_runtime_config_if_needed() -> None:
    defaults = _env_defaults()
    with settings.storage_lock:
        with get_db_connection() as conn:
            conn.execute(
                """
                INSERT INTO runtime_config (
                    id, host, port, username, password, use_rest_api, timeout_sec
                ) VALUES (1, ?, ?, ?, ?, ?, ?)
                ON CONFLICT(id) DO NOTHING
                """,
                (
                    defaults["host"],
                    defaults["port"],
                    defaults["username"],
                    defaults["password"],
                    1 if defaults["use_rest_api"] else 0,
                    defaults["timeout_sec"],
                ),
            )
            conn.commit()


def bootstrap_storage() -> None:
    init_database()
    seed_runtime_config_if_needed()
