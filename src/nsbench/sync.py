import logging
import threading
import time

from .errors import ChannelInvariantError, InitializationError

logger = logging.getLogger(__name__)


class TerminationSignal:
    """Write-once flag observed by every worker loop."""

    def __init__(self) -> None:
        self._event = threading.Event()

    def set(self) -> None:
        if not self._event.is_set():
            logger.debug("Termination signal set")
        self._event.set()

    def is_set(self) -> bool:
        return self._event.is_set()

    def wait(self, timeout: float | None = None) -> bool:
        return self._event.wait(timeout)


class StartBarrier:
    """One-shot gate: workers report ready, then block until the coordinator releases them."""

    def __init__(self) -> None:
        self._cond = threading.Condition()
        self._ready: set[int] = set()
        self._released = False
        self._released_at: float | None = None
        self._error: BaseException | None = None

    # ────────────────────────────────
    # Worker side
    # ────────────────────────────────

    def signal_ready(self, worker_id: int) -> None:
        with self._cond:
            if worker_id in self._ready:
                raise ChannelInvariantError(f"Worker {worker_id} signalled ready twice")
            self._ready.add(worker_id)
            logger.debug(f"[W{worker_id}] ready ({len(self._ready)} reported)")
            self._cond.notify_all()

    def abort(self, worker_id: int, error: BaseException) -> None:
        with self._cond:
            if self._error is None:
                self._error = error
            logger.error(f"[W{worker_id}] failed to initialize: {error}")
            self._cond.notify_all()

    def wait(self) -> float:
        with self._cond:
            self._cond.wait_for(lambda: self._released)
            return self._released_at

    # ────────────────────────────────
    # Coordinator side
    # ────────────────────────────────

    @property
    def ready_count(self) -> int:
        with self._cond:
            return len(self._ready)

    @property
    def released(self) -> bool:
        with self._cond:
            return self._released

    def wait_for_all(self, n: int, timeout: float | None = None) -> None:
        with self._cond:
            done = self._cond.wait_for(
                lambda: self._error is not None or len(self._ready) >= n, timeout
            )
            if self._error is not None:
                raise InitializationError(
                    f"Worker initialization failed: {self._error}"
                ) from self._error
            if not done:
                raise InitializationError(
                    f"Only {len(self._ready)} of {n} workers reported ready within {timeout}s"
                )

    def release(self) -> float:
        with self._cond:
            if not self._released:
                self._released_at = time.perf_counter()
                self._released = True
                logger.debug(f"Start barrier released for {len(self._ready)} workers")
                self._cond.notify_all()
            return self._released_at
