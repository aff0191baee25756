"""
Quick sanity run: a short benchmark against a local resolver.
Run: uv run examples/bench_local_resolver.py
"""
import os

from nsbench import BenchConfig, Coordinator
from nsbench.logging_config import setup_logging
from nsbench.rendering import ProgressPrinter, render_report


def main():
    setup_logging(level=os.getenv("LOG_LEVEL", "INFO"))
    config = BenchConfig.from_env(
        nameserver=os.getenv("NSBENCH_NAMESERVER", "127.0.0.1"),
        host=os.getenv("NSBENCH_HOST", "localhost"),
        duration_s=5,
        workers=4,
        timeout_s=0.05,
    )
    report = Coordinator(config, on_progress=ProgressPrinter()).run()
    print(render_report(report))
    print("\nReport:", report.as_dict())


if __name__ == "__main__":
    main()
