import json
import queue
import threading
import time
from datetime import datetime
from pathlib import Path
from typing import Any
from uuid import uuid4

from hab_bridge.core import settings
from hab_bridge.models.schemas import OperationLogItem


_DETAIL_MAX_CHARS = 4000
_CLEANUP_INTERVAL_SEC = 60.0
_WRITE_IDLE_TIMEOUT_SEC = 0.25
_WRITE_BATCH_MAX = 200


def _now_iso() -> str:
    return datetime.now().isoformat(timespec="seconds")


def _compress_detail(detail: Any) -> dict[str, Any]:
    if isinstance(detail, dict):
        data = detail
    else:
        data = {"value": detail}

    try:
        raw = json.dumps(data, ensure_ascii=False)
    except TypeError:
        raw = json.dumps({"value": str(data)}, ensure_ascii=False)

    if len(raw) <= _DETAIL_MAX_CHARS:
        parsed = json.loads(raw)
        return parsed if isinstance(parsed, dict) else {"value": parsed}

    return {
        "_truncated": True,
        "_size": len(raw),
        "preview": raw[:_DETAIL_MAX_CHARS],
    }


class OperationLog:
    """Output channel of the bridge, written as rotating JSONL.

    Created once by the application lifespan and passed to whatever needs to
    log. Entries are queued and flushed by a writer thread between ``start()``
    and ``stop()``; entries logged while stopped are still queued and written
    on the next start.
    """

    def __init__(
        self,
        path: Path,
        *,
        max_bytes: int = settings.HAB_LOG_MAX_BYTES,
        backup_count: int = settings.HAB_LOG_BACKUP_COUNT,
        retention_days: int = settings.HAB_LOG_RETENTION_DAYS,
        queue_max: int = settings.HAB_LOG_QUEUE_MAX,
    ) -> None:
        self.path = path
        self.max_bytes = max_bytes
        self.backup_count = max(1, backup_count)
        self.retention_days = max(1, retention_days)
        self.queue_max = queue_max
        self._queue: queue.Queue[OperationLogItem] = queue.Queue(maxsize=queue_max)
        self._worker: threading.Thread | None = None
        self._stop_event = threading.Event()
        self._state_lock = threading.Lock()
        self._last_cleanup_at = 0.0
        self._dropped_count = 0

    @classmethod
    def from_settings(cls) -> "OperationLog":
        return cls(
            settings.HAB_LOG_PATH,
            max_bytes=settings.HAB_LOG_MAX_BYTES,
            backup_count=settings.HAB_LOG_BACKUP_COUNT,
            retention_days=settings.HAB_LOG_RETENTION_DAYS,
            queue_max=settings.HAB_LOG_QUEUE_MAX,
        )

    @property
    def running(self) -> bool:
        with self._state_lock:
            return bool(self._worker and self._worker.is_alive())

    def start(self) -> None:
        with self._state_lock:
            if self._worker and self._worker.is_alive():
                return
            self._stop_event.clear()
            self._worker = threading.Thread(
                target=self._worker_loop,
                name="hab-bridge-log-worker",
                daemon=True,
            )
            self._worker.start()

    def stop(self, timeout_sec: float = 2.0) -> None:
        with self._state_lock:
            worker = self._worker
            if not worker:
                return
            self._stop_event.set()

        worker.join(timeout=timeout_sec)
        with self._state_lock:
            if self._worker is worker:
                self._worker = None

    def flush(self, timeout_sec: float = 0.3) -> None:
        start = time.perf_counter()
        while self._queue.unfinished_tasks > 0 and (time.perf_counter() - start) < timeout_sec:
            time.sleep(0.01)

    def _backup_path(self, index: int) -> Path:
        return self.path.with_name(f"{self.path.name}.{index}")

    def _ensure_dir(self) -> None:
        self.path.parent.mkdir(parents=True, exist_ok=True)

    def _rotate_if_needed(self) -> None:
        if not self.path.exists():
            return
        if self.path.stat().st_size < self.max_bytes:
            return

        self._backup_path(self.backup_count).unlink(missing_ok=True)
        for idx in range(self.backup_count - 1, 0, -1):
            src = self._backup_path(idx)
            if src.exists():
                src.replace(self._backup_path(idx + 1))

        self.path.replace(self._backup_path(1))

    def _cleanup_backups(self, force: bool = False) -> None:
        now = time.time()
        if not force and now - self._last_cleanup_at < _CLEANUP_INTERVAL_SEC:
            return

        self._last_cleanup_at = now
        expire_before = now - (self.retention_days * 24 * 3600)

        for candidate in self.path.parent.glob(f"{self.path.name}.*"):
            suffix = candidate.name.replace(f"{self.path.name}.", "", 1)
            if not suffix.isdigit():
                continue

            too_many = int(suffix) > self.backup_count
            too_old = candidate.stat().st_mtime < expire_before
            if too_many or too_old:
                candidate.unlink(missing_ok=True)

    def _write_batch(self, entries: list[OperationLogItem]) -> None:
        if not entries:
            return

        lines = [json.dumps(entry.model_dump(mode="json"), ensure_ascii=False) for entry in entries]
        with settings.log_lock:
            self._ensure_dir()
            self._rotate_if_needed()
            self._cleanup_backups()
            with self.path.open("a", encoding="utf-8") as f:
                f.write("\n".join(lines))
                f.write("\n")

    def _flush_batch(self) -> int:
        entries: list[OperationLogItem] = []
        try:
            entries.append(self._queue.get(timeout=_WRITE_IDLE_TIMEOUT_SEC))
        except queue.Empty:
            return 0

        while len(entries) < _WRITE_BATCH_MAX:
            try:
                entries.append(self._queue.get_nowait())
            except queue.Empty:
                break

        try:
            self._write_batch(entries)
        finally:
            for _ in entries:
                self._queue.task_done()
        return len(entries)

    def _worker_loop(self) -> None:
        while not self._stop_event.is_set() or not self._queue.empty():
            try:
                self._flush_batch()
            except Exception:
                # Logging errors must not terminate worker.
                time.sleep(0.05)

    def _enqueue(self, entry: OperationLogItem) -> bool:
        try:
            self._queue.put_nowait(entry)
            return True
        except queue.Full:
            with self._state_lock:
                self._dropped_count += 1
            return False

    def log(
        self,
        *,
        event_type: str,
        source: str,
        action: str,
        method: str | None = None,
        path: str | None = None,
        status_code: int | None = None,
        duration_ms: float | None = None,
        client_ip: str | None = None,
        success: bool | None = None,
        message: str | None = None,
        detail: Any = None,
    ) -> OperationLogItem:
        item = OperationLogItem(
            event_id=uuid4().hex,
            created_at=_now_iso(),
            event_type=event_type,
            source=source,
            action=action,
            method=method,
            path=path,
            status_code=status_code,
            duration_ms=duration_ms,
            client_ip=client_ip,
            success=success,
            message=message,
            detail=_compress_detail(detail or {}),
        )
        self._enqueue(item)
        return item

    def append_line(self, message: str, *, source: str = "system") -> OperationLogItem:
        return self.log(event_type="output", source=source, action="output.append", message=message)

    def log_http_request(
        self,
        *,
        source: str,
        method: str,
        path: str,
        status_code: int,
        duration_ms: float,
        client_ip: str | None,
        detail: dict[str, Any] | None = None,
    ) -> OperationLogItem:
        return self.log(
            event_type="http_request",
            source=source,
            action="http.request",
            method=method,
            path=path,
            status_code=status_code,
            duration_ms=duration_ms,
            client_ip=client_ip,
            success=status_code < 400,
            detail=detail or {},
        )

    def log_rest_request(
        self,
        *,
        path: str,
        status_code: int,
        duration_ms: float,
        context: str,
        base_url: str,
        message: str | None = None,
    ) -> OperationLogItem:
        return self.log(
            event_type="rest_request",
            source="system",
            action="openhab.request",
            method="GET",
            path=path,
            status_code=status_code,
            duration_ms=duration_ms,
            success=0 < status_code < 400,
            message=message,
            detail={
                "context": context,
                "request": {
                    "base_url": base_url,
                    "path": path,
                },
            },
        )

    def list_recent(
        self,
        *,
        limit: int = 200,
        sources: list[str] | None = None,
        event_type: str | None = None,
    ) -> list[OperationLogItem]:
        safe_limit = max(1, min(limit, 1000))
        self.flush(timeout_sec=0.35)
        source_filters = set(sources or [])

        with settings.log_lock:
            self._ensure_dir()
            self._cleanup_backups(force=True)

            files: list[Path] = []
            if self.path.exists():
                files.append(self.path)
            for idx in range(1, self.backup_count + 1):
                p = self._backup_path(idx)
                if p.exists():
                    files.append(p)

            result: list[OperationLogItem] = []
            for file_path in files:
                try:
                    lines = file_path.read_text(encoding="utf-8").splitlines()
                except OSError:
                    continue

                for line in reversed(lines):
                    text = line.strip()
                    if not text:
                        continue
                    try:
                        item = OperationLogItem.model_validate(json.loads(text))
                    except ValueError:
                        continue

                    if source_filters and item.source not in source_filters:
                        continue
                    if event_type and item.event_type != event_type:
                        continue

                    result.append(item)
                    if len(result) >= safe_limit:
                        return result

            return result

    def storage_meta(self) -> dict[str, Any]:
        with settings.log_lock:
            size = self.path.stat().st_size if self.path.exists() else 0
        with self._state_lock:
            dropped = self._dropped_count
            worker_alive = bool(self._worker and self._worker.is_alive())
        return {
            "storage": "file",
            "log_path": str(self.path),
            "current_size_bytes": size,
            "max_bytes": self.max_bytes,
            "backup_count": self.backup_count,
            "retention_days": self.retention_days,
            "queue_max": self.queue_max,
            "queue_size": self._queue.qsize(),
            "dropped_count": dropped,
            "worker_alive": worker_alive,
        }
