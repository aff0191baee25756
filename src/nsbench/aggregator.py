import logging
import queue
import threading
import time

from .errors import ChannelInvariantError
from .models import ProgressCallback, ProgressLine, RunDetails

logger = logging.getLogger(__name__)

SAMPLE = "sample"
FINAL = "final"
_CLOSE = object()


class Aggregator(threading.Thread):
    """Merges per-worker samples and final results into one grand total.

    Only this thread mutates the totals. Producers (samplers and workers)
    feed it through an unbounded queue; the coordinator calls ``close()``
    once every worker has been joined and then collects the merged total
    with ``result()``.
    """

    def __init__(
        self,
        expected_workers: int,
        on_progress: ProgressCallback | None = None,
        window_s: float = 1.0,
    ) -> None:
        super().__init__(name="nsbench-aggregator", daemon=True)
        self.expected_workers = expected_workers
        self.on_progress = on_progress
        self.window_s = window_s

        self._inbox: queue.Queue = queue.Queue()
        self._result: queue.Queue = queue.Queue(maxsize=1)
        self._is_closed = False
        self._submit_lock = threading.Lock()

        # Owned by the aggregator thread
        self.totals = RunDetails()
        self.window = RunDetails()
        self.samples_received = 0
        self.finals: dict[int, RunDetails] = {}

    # ────────────────────────────────
    # Producer side
    # ────────────────────────────────

    def _submit(self, kind: str, worker_id: int, details: RunDetails) -> None:
        with self._submit_lock:
            if self._is_closed:
                raise ChannelInvariantError(
                    f"[W{worker_id}] {kind} delivered after the aggregator closed"
                )
            self._inbox.put((kind, worker_id, details))

    def submit_sample(self, worker_id: int, details: RunDetails) -> None:
        self._submit(SAMPLE, worker_id, details)

    def submit_final(self, worker_id: int, details: RunDetails) -> None:
        self._submit(FINAL, worker_id, details)

    # ────────────────────────────────
    # Coordinator side
    # ────────────────────────────────

    def close(self) -> None:
        with self._submit_lock:
            if not self._is_closed:
                self._is_closed = True
                self._inbox.put(_CLOSE)

    def result(self, timeout: float | None = None) -> RunDetails:
        try:
            outcome = self._result.get(timeout=timeout)
        except queue.Empty:
            raise ChannelInvariantError(
                f"Aggregator produced no result within {timeout}s"
            ) from None
        if isinstance(outcome, BaseException):
            raise outcome
        return outcome

    # ────────────────────────────────
    # Aggregator thread
    # ────────────────────────────────

    def run(self) -> None:
        try:
            self._result.put(self._consume())
        except Exception as e:
            logger.error(f"Aggregator failed: {e}")
            self._result.put(e)

    def _consume(self) -> RunDetails:
        window_start = time.monotonic()
        while True:
            msg = self._inbox.get()
            if msg is _CLOSE:
                break
            kind, worker_id, details = msg

            if kind == FINAL:
                if worker_id in self.finals:
                    raise ChannelInvariantError(
                        f"[W{worker_id}] final result delivered twice"
                    )
                self.finals[worker_id] = details
            else:
                self.samples_received += 1

            self.totals += details
            self.window += details

            if time.monotonic() - window_start > self.window_s:
                self._flush_window()
                window_start = time.monotonic()

        if len(self.finals) != self.expected_workers:
            raise ChannelInvariantError(
                f"Expected final results from {self.expected_workers} workers, "
                f"got {len(self.finals)}"
            )
        logger.debug(
            f"Aggregator drained: {self.samples_received} samples, "
            f"{len(self.finals)} finals, total={self.totals.total}"
        )
        return self.totals.copy()

    def _flush_window(self) -> None:
        line = ProgressLine.from_details(self.window)
        self.window = RunDetails()
        if self.on_progress is None:
            return
        try:
            self.on_progress(line)
        except Exception as e:
            logger.warning(f"Progress callback failed: {e}")
