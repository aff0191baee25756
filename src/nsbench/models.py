import threading
from dataclasses import dataclass, asdict
from typing import Any
from collections.abc import Callable


@dataclass
class RunDetails:
    """Exact success/failure counts plus a 0.5-weighted moving latency (seconds).

    ``latency`` is not a mean. Each success folds the new sample in as
    ``(latency + sample) / 2``, and ``+=`` averages the two latencies the
    same way, so merging is commutative for one step but not associative:
    the result depends on the order in which windows are merged.
    """

    successes: int = 0
    failures: int = 0
    latency: float = 0.0

    @property
    def total(self) -> int:
        return self.successes + self.failures

    def record_success(self, elapsed: float) -> None:
        self.successes += 1
        self.latency = (self.latency + elapsed) / 2

    def record_failure(self) -> None:
        self.failures += 1

    def reset(self) -> None:
        self.successes = 0
        self.failures = 0
        self.latency = 0.0

    def copy(self) -> "RunDetails":
        return RunDetails(self.successes, self.failures, self.latency)

    def merged(self, other: "RunDetails") -> "RunDetails":
        out = self.copy()
        out += other
        return out

    def __iadd__(self, other: "RunDetails") -> "RunDetails":
        self.successes += other.successes
        self.failures += other.failures
        self.latency = (self.latency + other.latency) / 2
        return self


class LocalDetails:
    """A worker's RunDetails guarded by a private lock shared only with its sampler."""

    def __init__(self) -> None:
        self._details = RunDetails()
        self._lock = threading.Lock()

    def record_success(self, elapsed: float) -> None:
        with self._lock:
            self._details.record_success(elapsed)

    def record_failure(self) -> None:
        with self._lock:
            self._details.record_failure()

    def take(self) -> RunDetails:
        # read and reset under one lock so a window is never counted twice
        with self._lock:
            snapshot = self._details.copy()
            self._details.reset()
        return snapshot

    def peek(self) -> RunDetails:
        with self._lock:
            return self._details.copy()


@dataclass
class ProgressLine:
    latency: float
    successes: int
    failures: int
    total: int

    @classmethod
    def from_details(cls, details: RunDetails) -> "ProgressLine":
        return cls(
            latency=details.latency,
            successes=details.successes,
            failures=details.failures,
            total=details.total,
        )


@dataclass
class Report:
    nameserver: str
    host: str
    record_type: str
    worker_count: int
    successes: int
    failures: int
    success_rate_pct: float
    run_duration_secs: float
    throughput_per_sec: float
    latency: float

    def as_dict(self) -> dict[str, Any]:
        return asdict(self)


# Progress callback: receives one flushed 1-second window
ProgressCallback = Callable[[ProgressLine], None]
