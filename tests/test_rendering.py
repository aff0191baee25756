import io

from rich.console import Console

from nsbench.models import ProgressLine, Report
from nsbench.rendering import ProgressPrinter, format_latency, render_progress_line, render_report


def make_report(**overrides):
    values = dict(
        nameserver="127.0.0.1",
        host="example.com",
        record_type="A",
        worker_count=4,
        successes=900,
        failures=100,
        success_rate_pct=90.0,
        run_duration_secs=10.0,
        throughput_per_sec=90.0,
        latency=0.00125,
    )
    values.update(overrides)
    return Report(**values)


def test_format_latency_units():
    assert format_latency(2.5) == "2.500s"
    assert format_latency(0.0025) == "2.500ms"
    assert format_latency(0.0000025) == "2.500µs"


def test_render_report():
    text = render_report(make_report())
    assert "Nameserver: 127.0.0.1" in text
    assert "CPUs Used: 4" in text
    assert "Success Rate: 90.00%" in text
    assert "Runtime: 10s" in text
    assert "Requests: 90/s" in text


def test_render_report_long_runtime():
    assert "Runtime: 120s (0:02:00)" in render_report(make_report(run_duration_secs=120.0))


def test_progress_line():
    line = ProgressLine(latency=0.001, successes=10, failures=2, total=12)
    assert render_progress_line(line) == (
        "1s latency: 1.000ms | Successes: 10 | Failures: 2 | Total Req: 12"
    )


def test_progress_printer_writes_to_console():
    buf = io.StringIO()
    printer = ProgressPrinter(Console(file=buf, width=200))
    printer(ProgressLine(latency=0.5, successes=1, failures=0, total=1))
    assert "Successes: 1" in buf.getvalue()
