import logging
import os
import signal
import threading
import time

logger = logging.getLogger(__name__)

# ────────────────────────────────
# Time Helpers
# ────────────────────────────────


def now() -> float:
    return time.perf_counter()


def default_worker_count() -> int:
    return os.cpu_count() or 1


# ────────────────────────────────
# Signal Handling
# ────────────────────────────────


class GracefulKiller:
    """Turns SIGINT/SIGTERM into an event the coordinator's duration wait observes."""

    def __init__(self, install: bool = True):
        self.interrupted = threading.Event()
        self._previous: dict[int, object] = {}
        if install and threading.current_thread() is threading.main_thread():
            for sig in (signal.SIGINT, signal.SIGTERM):
                self._previous[sig] = signal.signal(sig, self.exit_gracefully)

    @property
    def kill_now(self) -> bool:
        return self.interrupted.is_set()

    def exit_gracefully(self, signum, frame):
        logger.warning(f"Received signal {signum}; ending the run early")
        self.interrupted.set()

    def restore(self) -> None:
        for sig, handler in self._previous.items():
            signal.signal(sig, handler)
        self._previous.clear()
