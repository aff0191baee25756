from datetime import timedelta

from rich.console import Console

from .models import ProgressLine, Report


def format_latency(seconds: float) -> str:
    if seconds >= 1:
        return f"{seconds:.3f}s"
    if seconds >= 1e-3:
        return f"{seconds * 1e3:.3f}ms"
    return f"{seconds * 1e6:.3f}µs"


def render_progress_line(line: ProgressLine) -> str:
    return (
        f"1s latency: {format_latency(line.latency)} | Successes: {line.successes} | "
        f"Failures: {line.failures} | Total Req: {line.total}"
    )


def render_report(report: Report) -> str:
    runtime = report.run_duration_secs
    runtime_text = f"{runtime:g}s"
    if runtime >= 60:
        runtime_text += f" ({timedelta(seconds=round(runtime))})"
    lines = [
        f"Nameserver: {report.nameserver}",
        f"Host: {report.host}",
        f"Record Type: {report.record_type}",
        f"CPUs Used: {report.worker_count}",
        f"Successes: {report.successes}",
        f"Failures: {report.failures}",
        f"Success Rate: {report.success_rate_pct:.2f}%",
        f"Latency: {format_latency(report.latency)}",
        f"Runtime: {runtime_text}",
        f"Requests: {report.throughput_per_sec:.0f}/s",
    ]
    return "\n".join(lines)


class ProgressPrinter:
    """Progress callback that writes each live window to stderr."""

    def __init__(self, console: Console | None = None) -> None:
        self.console = console or Console(stderr=True, highlight=False)

    def __call__(self, line: ProgressLine) -> None:
        self.console.print(render_progress_line(line), markup=False)
