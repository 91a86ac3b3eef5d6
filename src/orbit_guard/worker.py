"""Background dispatch for heavy analysis jobs.

Jobs are keyed by kind. While a job of one kind is running, further
submissions of that kind are coalesced onto the running future, so there is
never more than one risk projection or escape search in flight.
"""
from __future__ import annotations

import threading
from concurrent.futures import Future, ThreadPoolExecutor
from typing import Any, Callable, Optional

RISK_JOB = "risk"
ESCAPE_JOB = "escape"


class AnalysisWorker:
    def __init__(self, max_workers: int = 2) -> None:
        self._executor = ThreadPoolExecutor(max_workers=max_workers, thread_name_prefix="orbit-analysis")
        self._lock = threading.Lock()
        self._in_flight: dict[str, Future] = {}
        self._submitted: list[tuple[str, Future]] = []
        self.coalesced = 0

    def submit(self, key: str, fn: Callable[..., Any], *args: Any, **kwargs: Any) -> Future:
        """Run ``fn`` in the background unless a *key* job is already running."""

        with self._lock:
            running = self._in_flight.get(key)
            if running is not None and not running.done():
                self.coalesced += 1
                return running
            future = self._executor.submit(fn, *args, **kwargs)
            self._in_flight[key] = future
            self._submitted.append((key, future))
            return future

    def busy(self, key: str) -> bool:
        with self._lock:
            running = self._in_flight.get(key)
            return running is not None and not running.done()

    def drain(self) -> list[tuple[str, Future]]:
        """Hand finished jobs to the caller in submission order."""

        finished: list[tuple[str, Future]] = []
        pending: list[tuple[str, Future]] = []
        with self._lock:
            for entry in self._submitted:
                (finished if entry[1].done() else pending).append(entry)
            self._submitted = pending
        return finished

    def wait(self, timeout: Optional[float] = None) -> None:
        """Block until every submitted job has finished."""

        with self._lock:
            pending = [future for _, future in self._submitted]
        for future in pending:
            future.exception(timeout=timeout)

    def shutdown(self, wait: bool = True) -> None:
        self._executor.shutdown(wait=wait)

    def __enter__(self) -> "AnalysisWorker":
        return self

    def __exit__(self, exc_type, exc, tb) -> Optional[bool]:
        self.shutdown()
        return None


__all__ = ["AnalysisWorker", "ESCAPE_JOB", "RISK_JOB"]
