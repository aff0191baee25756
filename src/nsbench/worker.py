import logging
import threading

from .aggregator import Aggregator
from .errors import ChannelInvariantError, InitializationError
from .models import LocalDetails
from .resolver import Resolver, ResolverFactory
from .sync import StartBarrier, TerminationSignal
from .utils import now

logger = logging.getLogger(__name__)


class Sampler(threading.Thread):
    """Every ``interval`` seconds moves the owner's current window to the aggregator."""

    def __init__(
        self,
        worker_id: int,
        details: LocalDetails,
        aggregator: Aggregator,
        interval: float = 1.0,
    ) -> None:
        super().__init__(name=f"nsbench-sampler-{worker_id}", daemon=True)
        self.worker_id = worker_id
        self.details = details
        self.aggregator = aggregator
        self.interval = interval
        self._halt = threading.Event()
        self.ticks = 0
        self.error: BaseException | None = None

    def stop(self) -> None:
        self._halt.set()

    def run(self) -> None:
        while not self._halt.wait(self.interval):
            try:
                self.aggregator.submit_sample(self.worker_id, self.details.take())
            except ChannelInvariantError as e:
                self.error = e
                break
            self.ticks += 1
        logger.debug(f"[W{self.worker_id}] sampler stopped after {self.ticks} ticks")


class Worker(threading.Thread):
    def __init__(
        self,
        worker_id: int,
        resolver_factory: ResolverFactory,
        host: str,
        record_type: str,
        timeout_s: float,
        termination: TerminationSignal,
        barrier: StartBarrier,
        aggregator: Aggregator,
        sample_interval_s: float = 1.0,
    ) -> None:
        super().__init__(name=f"nsbench-worker-{worker_id}", daemon=True)
        self.worker_id = worker_id
        self.resolver_factory = resolver_factory
        self.host = host
        self.record_type = record_type
        self.timeout_s = timeout_s
        self.termination = termination
        self.barrier = barrier
        self.aggregator = aggregator
        self.sample_interval_s = sample_interval_s

        self.details = LocalDetails()
        self.iterations = 0
        self.error: BaseException | None = None

    def run(self) -> None:
        try:
            resolver = self.resolver_factory()
        except Exception as e:
            self.error = InitializationError(f"[W{self.worker_id}] resolver setup failed: {e}")
            self.barrier.abort(self.worker_id, e)
            return

        try:
            self._run(resolver)
        except Exception as e:
            # surfaced by the coordinator after join
            logger.error(f"[W{self.worker_id}] crashed: {e}")
            self.error = e

    def _run(self, resolver: Resolver) -> None:
        sampler = Sampler(
            self.worker_id, self.details, self.aggregator, self.sample_interval_s
        )
        sampler.start()
        try:
            self.barrier.signal_ready(self.worker_id)
            self.barrier.wait()
            self._loop(resolver)
        finally:
            sampler.stop()
            sampler.join()
        if sampler.error is not None:
            raise sampler.error

        self.aggregator.submit_final(self.worker_id, self.details.take())
        logger.debug(f"[W{self.worker_id}] stopped after {self.iterations} lookups")

    def _loop(self, resolver: Resolver) -> None:
        host, record_type, timeout = self.host, self.record_type, self.timeout_s
        details = self.details
        termination = self.termination

        while not termination.is_set():
            start = now()
            try:
                ok = resolver.lookup(host, record_type, timeout)
            except Exception as e:
                logger.debug(f"[W{self.worker_id}] lookup raised: {e}")
                ok = False
            self.iterations += 1
            if ok:
                details.record_success(now() - start)
            else:
                details.record_failure()
