"""
Command-line interface for dmncheck.

    dmncheck [OPTIONS] DOMAIN_OR_PATTERN...

Patterns may use ``?`` (letter), ``#`` (digit) and ``*`` (letter, digit or
hyphen). Each failure category exits with its own code, see ExitCode.
"""

import argparse
import asyncio
import sys
from pathlib import Path
from typing import NoReturn, Optional

from . import __version__
from .audit_logger import AuditLogger
from .config import (
    SystemConfig,
    create_default_config,
    load_config_from_file,
    validate_config,
)
from .enums import ExitCode, LogLevel
from .exceptions import (
    BootstrapError,
    ConfigError,
    DmncheckError,
    InvalidChunkSizeError,
    MissingDomainsError,
    NetworkError,
    UnknownTLDError,
    UnqualifiedDomainError,
)
from .i18n import get_message
from .orchestrator import CheckOrchestrator, DomainAvailability
from .reporter import ConsoleReporter


class ArgumentParser(argparse.ArgumentParser):
    """ArgumentParser whose usage errors do not collide with ExitCode values."""

    def error(self, message: str) -> NoReturn:
        self.print_usage(sys.stderr)
        self.exit(ExitCode.INVALID_CONFIG, f"{self.prog}: error: {message}\n")


def parse_chunk_size(value: str) -> int:
    """
    Parse a chunk size argument.

    Raises:
        InvalidChunkSizeError: If value is not a non-negative integer
    """
    text = value.strip()
    if not (text.isascii() and text.isdigit()):
        raise InvalidChunkSizeError(
            code="invalid_chunk_size",
            message=f"Chunk size must be a non-negative integer, got '{value}'",
            details={"value": value},
        )
    return int(text)


def create_parser() -> ArgumentParser:
    """Create the argument parser for the CLI."""
    parser = ArgumentParser(
        prog="dmncheck",
        description="Check domain name availability via RDAP",
        epilog=(
            "Wildcards: '?' any letter, '#' any digit, "
            "'*' any letter, digit or hyphen."
        ),
    )
    parser.add_argument(
        "--version",
        action="version",
        version=f"%(prog)s {__version__}",
    )
    parser.add_argument(
        "domains",
        nargs="*",
        metavar="DOMAIN",
        help="Domain names or patterns (e.g., example.com, ex??.com)",
    )
    parser.add_argument(
        "--quiet", "-q",
        action="store_true",
        help="Only print available domains",
    )
    parser.add_argument(
        "--progress", "-p",
        action="store_true",
        help="Show progress on stderr",
    )
    parser.add_argument(
        "--chunk-size", "-c",
        help="Domains queried concurrently per chunk (0 = all at once, 1 = sequential)",
    )
    parser.add_argument(
        "--retry-delay",
        type=float,
        help="Seconds to wait before retrying a failed query (default: 0.1)",
    )
    parser.add_argument(
        "--max-attempts",
        type=int,
        help="Give up on a domain after this many attempts (default: never)",
    )
    parser.add_argument(
        "--probe-timeout",
        type=float,
        help="Give up on a domain after this many seconds, retries included",
    )
    parser.add_argument(
        "--request-timeout",
        type=float,
        help="Timeout for a single RDAP request in seconds (default: 10)",
    )
    parser.add_argument(
        "--max-candidates",
        type=int,
        help="Reject patterns that expand to more candidates than this",
    )
    parser.add_argument(
        "--bootstrap-url",
        help="URL of the RDAP DNS bootstrap registry",
    )
    parser.add_argument(
        "--bootstrap-file",
        help="Read the bootstrap registry from a local JSON file",
    )
    parser.add_argument(
        "--config",
        help="Path to a JSON configuration file",
    )
    parser.add_argument(
        "--language", "-l",
        choices=["en", "de"],
        help="Output language (default: en)",
    )
    parser.add_argument(
        "--verbose", "-v",
        action="store_true",
        help="Log debug output to stderr",
    )
    return parser


def build_config(args: argparse.Namespace) -> SystemConfig:
    """
    Build the run configuration from an optional file plus CLI overrides.

    Raises:
        ConfigError: If the file or a resulting value is invalid
        InvalidChunkSizeError: If --chunk-size is malformed
    """
    if args.config:
        config = load_config_from_file(Path(args.config))
    else:
        config = create_default_config()

    if args.chunk_size is not None:
        config.query.chunk_size = parse_chunk_size(args.chunk_size)
    if args.retry_delay is not None:
        config.retry.delay_seconds = args.retry_delay
    if args.max_attempts is not None:
        config.retry.max_attempts = args.max_attempts
    if args.probe_timeout is not None:
        config.query.probe_deadline_seconds = args.probe_timeout
    if args.request_timeout is not None:
        config.query.request_timeout_seconds = args.request_timeout
    if args.max_candidates is not None:
        config.query.max_candidates = args.max_candidates
    if args.bootstrap_url:
        config.bootstrap.url = args.bootstrap_url
    if args.bootstrap_file:
        config.bootstrap.file_path = Path(args.bootstrap_file)
    if args.language:
        config.language = args.language
    if args.verbose:
        config.logging.level = LogLevel.DEBUG.value

    validate_config(config)
    return config


def format_error(error: DmncheckError, language: str) -> list[str]:
    """Render an error as the diagnostic lines printed to stderr."""
    if isinstance(error, MissingDomainsError):
        key = "error.missing_domains" if error.code == "missing_domains" else "error.no_candidates"
        return [get_message("error.usage", language), get_message(key, language)]
    if isinstance(error, UnqualifiedDomainError):
        domain = error.details.get("raw_input") or error.details.get("domain", "")
        return [
            get_message("error.unqualified_domain", language, domain=domain),
            get_message("error.unqualified_hint", language),
        ]
    if isinstance(error, UnknownTLDError):
        return [get_message("error.unknown_tld", language, tld=error.details.get("tld", ""))]
    if isinstance(error, InvalidChunkSizeError):
        return [get_message("error.invalid_chunk_size", language, value=error.details.get("value", ""))]
    if isinstance(error, BootstrapError):
        return [get_message("error.bootstrap_unavailable", language, error=error.message)]
    if isinstance(error, ConfigError):
        return [get_message("error.invalid_config", language, error=error.message)]
    if isinstance(error, NetworkError):
        return [get_message("error.probe_failed", language, error=error.message)]
    return [error.message]


async def run_check(
    patterns: list[str],
    config: SystemConfig,
    reporter: ConsoleReporter,
    logger: Optional[AuditLogger] = None,
) -> list[DomainAvailability]:
    """Run one availability check with a fresh orchestrator."""
    async with CheckOrchestrator(
        config=config,
        reporter=reporter,
        logger=logger,
    ) as orchestrator:
        return await orchestrator.run(patterns)


def main(argv: Optional[list[str]] = None) -> int:
    """
    Main entry point for the CLI.

    Args:
        argv: Command line arguments (defaults to sys.argv[1:])

    Returns:
        Exit code
    """
    parser = create_parser()
    args = parser.parse_args(argv)
    language = args.language or "en"

    try:
        if not args.domains:
            raise MissingDomainsError(code="missing_domains", message="No domains given")

        config = build_config(args)
        language = config.language
        logger = AuditLogger.from_config(config.logging)
        reporter = ConsoleReporter(
            quiet=args.quiet,
            show_progress=args.progress,
            language=language,
        )
        asyncio.run(run_check(args.domains, config, reporter, logger))
    except DmncheckError as e:
        for line in format_error(e, language):
            print(line, file=sys.stderr)
        return int(e.exit_code)
    except KeyboardInterrupt:
        print(get_message("error.interrupted", language), file=sys.stderr)
        return int(ExitCode.INTERRUPTED)

    return int(ExitCode.SUCCESS)


if __name__ == "__main__":
    sys.exit(main())
