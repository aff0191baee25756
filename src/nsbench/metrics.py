import logging

from .errors import RateUndefinedError
from .models import Report, RunDetails

logger = logging.getLogger(__name__)


def success_rate(details: RunDetails) -> float:
    total = details.total
    if not total:
        raise RateUndefinedError("Success rate is undefined: no lookups were attempted")
    return details.successes / total * 100.0


def throughput(details: RunDetails, duration_s: float) -> float:
    if duration_s <= 0:
        raise RateUndefinedError(
            f"Throughput is undefined for a run duration of {duration_s}s"
        )
    return details.successes / duration_s


def compute_report(
    totals: RunDetails,
    nameserver: str,
    host: str,
    record_type: str,
    worker_count: int,
    duration_s: float,
) -> Report:
    logger.debug(
        f"Computing report: total={totals.total}, success={totals.successes}, "
        f"failures={totals.failures}, duration={duration_s}s"
    )

    report = Report(
        nameserver=nameserver,
        host=host,
        record_type=record_type,
        worker_count=worker_count,
        successes=totals.successes,
        failures=totals.failures,
        success_rate_pct=success_rate(totals),
        run_duration_secs=duration_s,
        throughput_per_sec=throughput(totals, duration_s),
        latency=totals.latency,
    )

    logger.info(
        f"Report computed: success={report.successes}, failures={report.failures}, "
        f"rate={report.success_rate_pct:.2f}%, throughput={report.throughput_per_sec:.1f}/s"
    )
    return report
