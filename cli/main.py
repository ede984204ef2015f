"""Storage benchmark CLI - command line interface."""

from __future__ import annotations

import argparse
import asyncio
import logging
import signal
import sys
from typing import Optional, Sequence

from common.errors import BenchmarkError, ConfigError, PreconditionError
from common.models.run import RunConfig
from common.utils import parse_size
from bench.config import BenchSettings, get_settings
from bench.core.engine import BenchmarkEngine

logger = logging.getLogger(__name__)

EXIT_OK = 0
EXIT_ERROR = 1
EXIT_INTERRUPTED = 130

FLAG_OPTIONS = {"--with-io", "-h", "--help"}
VALUE_OPTIONS = {"--size", "--output"}

EPILOG = """\
Examples:
  storage-bench tnscale                        Quick operation benchmarks
  storage-bench tnscale --with-io              Include fio I/O tests
  storage-bench tnscale --size 50G             Specify test volume size
  storage-bench tnscale --output report.json   Save results to JSON
"""


class BenchArgumentParser(argparse.ArgumentParser):
    """ArgumentParser that raises ConfigError instead of exiting."""

    def error(self, message: str):
        raise ConfigError(message)


def build_parser(settings: BenchSettings) -> BenchArgumentParser:
    parser = BenchArgumentParser(
        prog="storage-bench",
        description="Storage performance benchmark for Proxmox VE storage pools",
        epilog=EPILOG,
        formatter_class=argparse.RawDescriptionHelpFormatter,
        allow_abbrev=False,
    )
    parser.add_argument(
        "storage",
        nargs="?",
        default=settings.default_storage,
        help=f"Storage pool to test (default: {settings.default_storage})",
    )
    parser.add_argument("--with-io", action="store_true", help="Run fio I/O tests")
    parser.add_argument(
        "--size",
        default=settings.default_test_size,
        help=f"Test volume size, e.g. 10G or 512M (default: {settings.default_test_size})",
    )
    parser.add_argument("--output", default=None, help="Save results to a JSON or YAML file")
    return parser


def check_options(argv: Sequence[str]) -> None:
    """Reject any dash-prefixed token that is not a known option.

    argparse would take `-` or `-5` as the storage name.
    """
    expects_value = False
    for token in argv:
        if expects_value:
            expects_value = False
            continue
        if token in VALUE_OPTIONS:
            expects_value = True
        elif token.startswith("-") and token not in FLAG_OPTIONS:
            raise ConfigError(f"unrecognized option: {token}")


def resolve_config(argv: Optional[Sequence[str]] = None, settings: Optional[BenchSettings] = None) -> RunConfig:
    """Turn command-line tokens into a RunConfig.

    An unrecognized size suffix keeps the default byte count.
    """
    settings = settings or get_settings()
    check_options(sys.argv[1:] if argv is None else argv)
    args = build_parser(settings).parse_args(argv)

    test_size_bytes = parse_size(settings.default_test_size) or 10 * 1024 ** 3
    parsed = parse_size(args.size)
    if parsed is not None:
        test_size_bytes = parsed

    return RunConfig(
        storage_name=args.storage,
        test_size=args.size,
        test_size_bytes=test_size_bytes,
        with_io_tests=args.with_io,
        output_path=args.output,
        node_name=settings.hostname,
        test_vmid=settings.test_vmid,
        clone_vmid=settings.clone_vmid,
    )


def configure_logging(settings: BenchSettings) -> None:
    logging.basicConfig(
        level=getattr(logging, settings.log_level.upper(), logging.INFO),
        format=settings.log_format,
        handlers=[logging.StreamHandler(sys.stdout)],
    )


async def run(config: RunConfig, settings: BenchSettings) -> None:
    """Run the benchmark, turning SIGTERM into cancellation so cleanup still runs."""
    loop = asyncio.get_running_loop()
    task = asyncio.current_task()
    try:
        loop.add_signal_handler(signal.SIGTERM, task.cancel)
    except (NotImplementedError, RuntimeError):
        pass

    engine = BenchmarkEngine(config, settings)
    await engine.run()


def main(argv: Optional[Sequence[str]] = None) -> int:
    """Main entry point."""
    settings = get_settings()
    configure_logging(settings)

    try:
        config = resolve_config(argv, settings)
    except ConfigError as e:
        logger.error(f"Invalid arguments: {e}")
        return EXIT_ERROR

    try:
        asyncio.run(run(config, settings))
    except PreconditionError as e:
        logger.error(f"Error: {e}")
        return EXIT_ERROR
    except BenchmarkError as e:
        logger.error(f"Benchmark aborted: {e}")
        return EXIT_ERROR
    except (KeyboardInterrupt, asyncio.CancelledError):
        logger.error("Benchmark interrupted")
        return EXIT_INTERRUPTED

    return EXIT_OK


if __name__ == "__main__":
    sys.exit(main())
