"""
Configuration dataclasses for dmncheck.

This module defines the configuration structures used throughout the system
(bootstrap source, query concurrency, retry behaviour, logging) together with
helpers to load and save them as JSON files.
"""

import json
from dataclasses import dataclass, field
from pathlib import Path
from typing import Optional

from .enums import ProbeOutcome
from .exceptions import ConfigError

IANA_BOOTSTRAP_URL = "https://data.iana.org/rdap/dns.json"


@dataclass
class BootstrapConfig:
    """Where the DNS bootstrap registry is read from."""

    url: str = IANA_BOOTSTRAP_URL
    file_path: Optional[Path] = None
    timeout_seconds: float = 30.0


@dataclass
class RetryConfig:
    """
    Retry behaviour for availability probes.

    The defaults reproduce the classic policy: wait a fixed 100 ms and retry
    every failure forever.
    """

    delay_seconds: float = 0.1
    max_attempts: Optional[int] = None  # None = unbounded
    backoff_multiplier: float = 1.0
    max_delay_seconds: float = 60.0
    retry_on: list[ProbeOutcome] = field(
        default_factory=lambda: [
            ProbeOutcome.RETRYABLE_FAILURE,
            ProbeOutcome.FATAL_FAILURE,
        ]
    )


@dataclass
class QueryConfig:
    """Concurrency and per-request settings."""

    chunk_size: int = 0  # 0 = whole group at once
    request_timeout_seconds: float = 10.0
    probe_deadline_seconds: Optional[float] = None
    max_candidates: Optional[int] = None


@dataclass
class LoggingConfig:
    """Logging configuration."""

    level: str = "warn"
    output_format: str = "text"  # 'json', 'text', 'both'


@dataclass
class SystemConfig:
    """Main system configuration combining all sub-configurations."""

    bootstrap: BootstrapConfig = field(default_factory=BootstrapConfig)
    query: QueryConfig = field(default_factory=QueryConfig)
    retry: RetryConfig = field(default_factory=RetryConfig)
    logging: LoggingConfig = field(default_factory=LoggingConfig)
    language: str = "en"  # 'en' or 'de'


def create_default_config(language: str = "en") -> SystemConfig:
    """Create a default system configuration."""
    return SystemConfig(language=language)


def _optional(value, convert):
    return None if value is None else convert(value)


def _text(value) -> str:
    if not isinstance(value, str):
        raise TypeError(f"expected a string, got {type(value).__name__} {value!r}")
    return value


def _parse_outcomes(values: list) -> list[ProbeOutcome]:
    try:
        return [ProbeOutcome(value) for value in values]
    except ValueError as e:
        raise ConfigError(
            code="invalid_retry_on",
            message=f"Unknown probe outcome in retry.retry_on: {e}",
            details={"retry_on": values},
        )


def config_from_dict(data: dict) -> SystemConfig:
    """
    Build a SystemConfig from a plain dictionary.

    Missing sections and keys fall back to their defaults.

    Raises:
        ConfigError: If a value has the wrong type or is out of range
    """
    try:
        bootstrap_data = data.get("bootstrap", {})
        file_path = bootstrap_data.get("file_path")
        bootstrap = BootstrapConfig(
            url=_text(bootstrap_data.get("url", IANA_BOOTSTRAP_URL)),
            file_path=Path(file_path) if file_path else None,
            timeout_seconds=float(bootstrap_data.get("timeout_seconds", 30.0)),
        )

        query_data = data.get("query", {})
        query = QueryConfig(
            chunk_size=int(query_data.get("chunk_size", 0)),
            request_timeout_seconds=float(query_data.get("request_timeout_seconds", 10.0)),
            probe_deadline_seconds=_optional(query_data.get("probe_deadline_seconds"), float),
            max_candidates=_optional(query_data.get("max_candidates"), int),
        )

        retry_data = data.get("retry", {})
        retry = RetryConfig(
            delay_seconds=float(retry_data.get("delay_seconds", 0.1)),
            max_attempts=_optional(retry_data.get("max_attempts"), int),
            backoff_multiplier=float(retry_data.get("backoff_multiplier", 1.0)),
            max_delay_seconds=float(retry_data.get("max_delay_seconds", 60.0)),
        )
        if "retry_on" in retry_data:
            retry.retry_on = _parse_outcomes(retry_data["retry_on"])

        logging_data = data.get("logging", {})
        logging_config = LoggingConfig(
            level=_text(logging_data.get("level", "warn")),
            output_format=_text(logging_data.get("output_format", "text")),
        )
        language = _text(data.get("language", "en"))
    except (AttributeError, TypeError, ValueError) as e:
        raise ConfigError(
            code="invalid_config",
            message=f"Invalid configuration value: {e}",
        )

    config = SystemConfig(
        bootstrap=bootstrap,
        query=query,
        retry=retry,
        logging=logging_config,
        language=language,
    )
    validate_config(config)
    return config


def config_to_dict(config: SystemConfig) -> dict:
    """Convert a SystemConfig to a JSON-serializable dictionary."""
    return {
        "bootstrap": {
            "url": config.bootstrap.url,
            "file_path": str(config.bootstrap.file_path) if config.bootstrap.file_path else None,
            "timeout_seconds": config.bootstrap.timeout_seconds,
        },
        "query": {
            "chunk_size": config.query.chunk_size,
            "request_timeout_seconds": config.query.request_timeout_seconds,
            "probe_deadline_seconds": config.query.probe_deadline_seconds,
            "max_candidates": config.query.max_candidates,
        },
        "retry": {
            "delay_seconds": config.retry.delay_seconds,
            "max_attempts": config.retry.max_attempts,
            "backoff_multiplier": config.retry.backoff_multiplier,
            "max_delay_seconds": config.retry.max_delay_seconds,
            "retry_on": [outcome.value for outcome in config.retry.retry_on],
        },
        "logging": {
            "level": config.logging.level,
            "output_format": config.logging.output_format,
        },
        "language": config.language,
    }


def validate_config(config: SystemConfig) -> None:
    """
    Check value ranges that the dataclasses cannot express.

    Raises:
        ConfigError: Listing every invalid value found
    """
    problems = []
    if config.query.chunk_size < 0:
        problems.append("query.chunk_size must be >= 0")
    if config.retry.delay_seconds < 0:
        problems.append("retry.delay_seconds must be >= 0")
    if config.retry.max_attempts is not None and config.retry.max_attempts < 1:
        problems.append("retry.max_attempts must be >= 1")
    if config.retry.backoff_multiplier < 1.0:
        problems.append("retry.backoff_multiplier must be >= 1")
    if config.query.max_candidates is not None and config.query.max_candidates < 1:
        problems.append("query.max_candidates must be >= 1")
    if config.logging.level.lower() not in ("debug", "info", "warn", "error"):
        problems.append(f"logging.level is invalid: {config.logging.level}")
    if config.logging.output_format not in ("json", "text", "both"):
        problems.append(f"logging.output_format is invalid: {config.logging.output_format}")
    if config.language not in ("en", "de"):
        problems.append(f"language is not supported: {config.language}")

    if problems:
        raise ConfigError(
            code="invalid_config",
            message="; ".join(problems),
            details={"problems": problems},
        )


def load_config_from_file(config_path: Path) -> SystemConfig:
    """
    Load configuration from a JSON file.

    Args:
        config_path: Path to the configuration file

    Returns:
        The parsed SystemConfig

    Raises:
        ConfigError: If the file is missing, unreadable or invalid
    """
    try:
        with open(config_path, "r", encoding="utf-8") as f:
            data = json.load(f)
    except FileNotFoundError:
        raise ConfigError(
            code="config_not_found",
            message=f"Configuration file not found: {config_path}",
            details={"path": str(config_path)},
        )
    except (OSError, json.JSONDecodeError) as e:
        raise ConfigError(
            code="config_unreadable",
            message=f"Could not read configuration: {e}",
            details={"path": str(config_path)},
        )

    if not isinstance(data, dict):
        raise ConfigError(
            code="invalid_config",
            message="Configuration root must be a JSON object",
            details={"path": str(config_path)},
        )

    return config_from_dict(data)


def save_config_to_file(config: SystemConfig, config_path: Path) -> None:
    """Save configuration to a JSON file, creating parent directories."""
    config_path.parent.mkdir(parents=True, exist_ok=True)
    with open(config_path, "w", encoding="utf-8") as f:
        json.dump(config_to_dict(config), f, indent=2, ensure_ascii=False)
