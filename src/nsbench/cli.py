#!/usr/bin/env python3
# cli.py: command line entry point for nsbench

import argparse
import logging
import sys

from nsbench.config import BenchConfig
from nsbench.coordinator import Coordinator
from nsbench.errors import (
    ChannelInvariantError,
    ConfigError,
    InitializationError,
    RateUndefinedError,
)
from nsbench.logging_config import setup_logging
from nsbench.rendering import ProgressPrinter, render_report
from nsbench.utils import GracefulKiller, default_worker_count

EXIT_CONFIG = 2
EXIT_INIT = 3
EXIT_INTERNAL = 4
EXIT_RATE_UNDEFINED = 5


def parse_args(argv: list[str] | None = None) -> argparse.Namespace:
    parser = argparse.ArgumentParser(
        prog="nsbench",
        description="Nameserver benchmarking/flooding tool",
    )

    parser.add_argument("nameserver", help="IP address of the nameserver under test")
    parser.add_argument("host", help="hostname to query")

    # Run shape
    parser.add_argument(
        "-t",
        "--time-secs",
        type=float,
        default=None,
        help="time in seconds to run the test (default 60)",
    )
    parser.add_argument(
        "-l",
        "--cpus",
        type=int,
        default=None,
        help=f"number of workers (default {default_worker_count()})",
    )
    parser.add_argument(
        "--timeout",
        type=int,
        default=None,
        help="duration to wait (in ns) before considering a request failed (default 500000)",
    )
    parser.add_argument("--record-type", default=None, help="record type to query (default A)")
    parser.add_argument("--port", type=int, default=None, help="nameserver port (default 53)")
    parser.add_argument(
        "--ready-timeout",
        type=float,
        default=None,
        help="seconds to wait for every worker to initialize (default 10)",
    )
    parser.add_argument(
        "--env-file",
        default=None,
        help="read NSBENCH_* settings from this .env file",
    )
    parser.add_argument(
        "--no-progress",
        action="store_true",
        help="do not print the live 1s progress line",
    )

    # Logging & Debugging
    parser.add_argument("--debug", action="store_true", help="Enable debug-level logging")
    parser.add_argument(
        "--log-file",
        type=str,
        default=None,
        help="Optional file to write logs to (e.g., nsbench.log)",
    )

    return parser.parse_args(argv)


def run(argv: list[str] | None = None) -> int:
    args = parse_args(argv)
    setup_logging(level="DEBUG" if args.debug else "INFO", log_file=args.log_file)

    try:
        config = BenchConfig.from_env(
            dotenv_path=args.env_file,
            nameserver=args.nameserver,
            host=args.host,
            duration_s=args.time_secs,
            workers=args.cpus,
            timeout_s=args.timeout / 1e9 if args.timeout is not None else None,
            record_type=args.record_type,
            port=args.port,
            ready_timeout_s=args.ready_timeout,
        )
    except ConfigError as e:
        logging.error(f"Invalid configuration: {e}")
        return EXIT_CONFIG

    killer = GracefulKiller()
    coordinator = Coordinator(
        config,
        on_progress=None if args.no_progress else ProgressPrinter(),
        interrupt=killer.interrupted,
    )
    try:
        report = coordinator.run()
    except InitializationError as e:
        logging.error(f"Aborted before the run started: {e}")
        return EXIT_INIT
    except ChannelInvariantError as e:
        logging.error(f"Aborted: internal error while collecting results: {e}")
        return EXIT_INTERNAL
    except RateUndefinedError as e:
        logging.error(f"The run finished but produced no usable figures: {e}")
        return EXIT_RATE_UNDEFINED
    finally:
        killer.restore()

    print(render_report(report))
    return 0


def main():
    sys.exit(run())


if __name__ == "__main__":
    main()
