"""
Audit log implementations.

``QueuedAuditLog`` is the production sink: the dispatcher enqueues a record
and returns immediately while a worker thread writes it as a structured log
event. ``InMemoryAuditLog`` keeps records for tests and embedding.
"""

from __future__ import annotations

import logging
import queue
import threading

from prompt_console.core.common.logging_utils import LogContext, get_logger
from prompt_console.core.interfaces.audit_log_interface import AuditLogRecord, IAuditLog

logger = logging.getLogger(__name__)

_STOP = object()


def write_audit_record(record: AuditLogRecord, audit_logger=None) -> None:
    """Write one record as a structured ``prompt_audit`` event."""
    target = audit_logger or get_logger("prompt_console.audit")
    with LogContext(target, log_type=record.type, **_as_fields(record)) as bound:
        if record.exception is not None:
            bound.warning(
                "prompt_audit",
                error=str(record.exception),
                error_type=type(record.exception).__name__,
                exc_info=record.exception,
            )
        else:
            bound.info("prompt_audit")


def _as_fields(record: AuditLogRecord) -> dict[str, str]:
    # Property names like "ExecutionTime(hh:mm:ss)" are not valid identifiers
    return {
        name.split("(")[0].lower(): value for name, value in record.properties.items()
    }


class QueuedAuditLog(IAuditLog):
    """Audit log that writes records on a background thread."""

    def __init__(self, max_queue_size: int = 10000, audit_logger=None) -> None:
        self._queue: queue.Queue[object] = queue.Queue(maxsize=max_queue_size)
        self._audit_logger = audit_logger
        self._worker: threading.Thread | None = None
        self._lock = threading.Lock()
        self._closed = False

    def start(self) -> None:
        with self._lock:
            if self._worker is not None and self._worker.is_alive():
                return
            self._closed = False
            self._worker = threading.Thread(
                target=self._run, name="prompt-audit-log", daemon=True
            )
            self._worker.start()

    def add_log(self, record: AuditLogRecord) -> None:
        if self._closed:
            logger.warning("Audit log is closed; dropping record")
            return
        if self._worker is None:
            self.start()
        try:
            self._queue.put_nowait(record)
        except queue.Full:
            logger.warning("Audit log queue is full; dropping record")

    def flush(self, timeout: float | None = None) -> None:
        """Block until every queued record has been written."""
        if self._worker is None:
            return
        if timeout is None:
            self._queue.join()
            return
        done = threading.Event()

        def _wait() -> None:
            self._queue.join()
            done.set()

        threading.Thread(target=_wait, daemon=True).start()
        done.wait(timeout)

    def close(self, timeout: float = 5.0) -> None:
        """Write outstanding records and stop the worker thread."""
        with self._lock:
            if self._closed:
                return
            self._closed = True
            worker = self._worker
        if worker is None:
            return
        self._queue.put(_STOP)
        worker.join(timeout=timeout)

    def _run(self) -> None:
        while True:
            item = self._queue.get()
            try:
                if item is _STOP:
                    return
                if isinstance(item, AuditLogRecord):
                    write_audit_record(item, self._audit_logger)
            except Exception:
                # A broken sink must not kill the worker
                logger.exception("Failed to write audit record")
            finally:
                self._queue.task_done()


class InMemoryAuditLog(IAuditLog):
    """Audit log that keeps records in memory."""

    def __init__(self) -> None:
        self._records: list[AuditLogRecord] = []
        self._lock = threading.Lock()

    def add_log(self, record: AuditLogRecord) -> None:
        with self._lock:
            self._records.append(record)

    @property
    def records(self) -> list[AuditLogRecord]:
        with self._lock:
            return list(self._records)

    def clear(self) -> None:
        with self._lock:
            self._records.clear()


class NullAuditLog(IAuditLog):
    """Audit log used when auditing is disabled."""

    def add_log(self, record: AuditLogRecord) -> None:
        return None
