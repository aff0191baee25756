import enum
import logging
import threading

from .aggregator import Aggregator
from .config import BenchConfig
from .errors import ChannelInvariantError, InitializationError
from .metrics import compute_report
from .models import ProgressCallback, Report, RunDetails
from .resolver import ResolverFactory, dnspython_factory
from .sync import StartBarrier, TerminationSignal
from .utils import now
from .worker import Worker

logger = logging.getLogger(__name__)

# Upper bound on the aggregator's drain once every worker has been joined
RESULT_TIMEOUT_S = 30.0


class Phase(str, enum.Enum):
    IDLE = "idle"
    SPAWNING = "spawning"
    AWAITING_READY = "awaiting_ready"
    RUNNING = "running"
    DRAINING = "draining"
    REPORTING = "reporting"
    DONE = "done"
    FAILED = "failed"


class Coordinator:
    """Drives one benchmark run from spawning the pool to the final report."""

    def __init__(
        self,
        config: BenchConfig,
        resolver_factory: ResolverFactory | None = None,
        on_progress: ProgressCallback | None = None,
        interrupt: threading.Event | None = None,
    ) -> None:
        self.config = config
        self.resolver_factory = resolver_factory or dnspython_factory(
            str(config.nameserver), config.port
        )
        self.on_progress = on_progress
        self.interrupt = interrupt or threading.Event()

        self.phase = Phase.IDLE
        self.termination = TerminationSignal()
        self.barrier = StartBarrier()
        self.aggregator: Aggregator | None = None
        self.workers: list[Worker] = []
        self.released_at: float | None = None
        self.elapsed_s: float | None = None
        self.totals: RunDetails | None = None

    def _set_phase(self, phase: Phase) -> None:
        logger.debug(f"Coordinator: {self.phase.value} -> {phase.value}")
        self.phase = phase

    # ────────────────────────────────
    # Phases
    # ────────────────────────────────

    def _spawn(self) -> None:
        self._set_phase(Phase.SPAWNING)
        cfg = self.config
        self.aggregator = Aggregator(cfg.workers, on_progress=self.on_progress)
        self.aggregator.start()

        for worker_id in range(cfg.workers):
            worker = Worker(
                worker_id,
                self.resolver_factory,
                host=cfg.host,
                record_type=cfg.record_type,
                timeout_s=cfg.timeout_s,
                termination=self.termination,
                barrier=self.barrier,
                aggregator=self.aggregator,
                sample_interval_s=cfg.sample_interval_s,
            )
            worker.start()
            self.workers.append(worker)
        logger.info(f"Spawned {len(self.workers)} workers against {cfg.nameserver}:{cfg.port}")

    def _await_ready(self) -> None:
        self._set_phase(Phase.AWAITING_READY)
        self.barrier.wait_for_all(len(self.workers), self.config.ready_timeout_s)

    def _run_for_duration(self) -> bool:
        self._set_phase(Phase.RUNNING)
        self.released_at = self.barrier.release()
        logger.info(f"Running for {self.config.duration_s:g}s")
        interrupted = self.interrupt.wait(self.config.duration_s)
        self.elapsed_s = now() - self.released_at
        if interrupted:
            logger.warning(f"Run interrupted after {self.elapsed_s:.2f}s")
        return interrupted

    def _drain(self, join_timeout: float | None = None) -> None:
        self._set_phase(Phase.DRAINING)
        self.termination.set()
        # workers resume even if the barrier was never released (abort path)
        self.barrier.release()
        for worker in self.workers:
            worker.join(join_timeout)
            if worker.is_alive():
                logger.error(f"[W{worker.worker_id}] did not stop within {join_timeout}s")
        self.aggregator.close()
        logger.debug("All workers joined")

    # ────────────────────────────────
    # Main Runner
    # ────────────────────────────────

    def run(self) -> Report:
        if self.phase is not Phase.IDLE:
            raise RuntimeError("A Coordinator runs exactly once")

        self._spawn()
        try:
            self._await_ready()
        except InitializationError:
            self._drain(join_timeout=self.config.ready_timeout_s)
            self.aggregator.join(RESULT_TIMEOUT_S)
            self._set_phase(Phase.FAILED)
            raise

        interrupted = self._run_for_duration()
        self._drain()

        crashed = [w for w in self.workers if w.error is not None]
        if crashed:
            self._set_phase(Phase.FAILED)
            self.aggregator.join(RESULT_TIMEOUT_S)
            first = crashed[0]
            raise ChannelInvariantError(
                f"{len(crashed)} worker(s) failed; W{first.worker_id}: {first.error}"
            ) from first.error

        self._set_phase(Phase.REPORTING)
        try:
            self.totals = self.aggregator.result(RESULT_TIMEOUT_S)
            duration = self.elapsed_s if interrupted else self.config.duration_s
            report = compute_report(
                self.totals,
                nameserver=str(self.config.nameserver),
                host=self.config.host,
                record_type=self.config.record_type,
                worker_count=len(self.workers),
                duration_s=duration,
            )
        except Exception:
            self._set_phase(Phase.FAILED)
            raise

        self._set_phase(Phase.DONE)
        return report
