import threading
import time

import pytest

from nsbench.config import BenchConfig


class FakeResolver:
    """Counts lookups independently of the worker and records when each thread first called."""

    def __init__(self, pool: "FakePool", outcome="success", delay: float = 0.0):
        self.pool = pool
        self.outcome = outcome
        self.delay = delay
        self.calls = 0

    def lookup(self, hostname: str, record_type: str, timeout: float) -> bool:
        if self.calls == 0:
            self.pool.first_call(time.perf_counter())
        self.calls += 1
        if self.delay:
            time.sleep(min(self.delay, timeout))
        if self.outcome == "success":
            return True
        if self.outcome == "failure":
            return False
        if self.outcome == "alternate":
            return self.calls % 2 == 1
        raise RuntimeError("lookup exploded")


class FakePool:
    def __init__(self, outcome="success", delay: float = 0.0, broken: set[int] | None = None):
        self.outcome = outcome
        self.delay = delay
        self.broken = broken or set()
        self.resolvers: list[FakeResolver] = []
        self.first_calls: list[float] = []
        self._lock = threading.Lock()

    def first_call(self, ts: float) -> None:
        with self._lock:
            self.first_calls.append(ts)

    def factory(self) -> FakeResolver:
        with self._lock:
            index = len(self.resolvers)
            if index in self.broken:
                self.resolvers.append(None)
                raise OSError("cannot open socket")
            resolver = FakeResolver(self, self.outcome, self.delay)
            self.resolvers.append(resolver)
        return resolver

    @property
    def total_calls(self) -> int:
        return sum(r.calls for r in self.resolvers if r is not None)


@pytest.fixture
def make_config():
    def build(**overrides) -> BenchConfig:
        values = {
            "nameserver": "127.0.0.1",
            "host": "example.com",
            "workers": 2,
            "duration_s": 0.3,
            "timeout_s": 0.2,
            "ready_timeout_s": 2.0,
            "sample_interval_s": 0.05,
        }
        values.update(overrides)
        return BenchConfig(**values)

    return build
