__all__ = [
    "Aggregator",
    "BenchConfig",
    "Coordinator",
    "DnsPythonResolver",
    "Report",
    "RunDetails",
    "StartBarrier",
    "TerminationSignal",
    "Worker",
]


from .aggregator import Aggregator
from .config import BenchConfig
from .coordinator import Coordinator
from .models import Report, RunDetails
from .resolver import DnsPythonResolver
from .sync import StartBarrier, TerminationSignal
from .worker import Worker
