"""
dmncheck - RDAP based domain availability checker.

Expands wildcard domain patterns, resolves each TLD to its RDAP service via
the IANA bootstrap registry, and queries the services with bounded
concurrency and automatic retry.
"""

__version__ = "0.1.0"
__author__ = "dmncheck contributors"

from dmncheck.exceptions import (
    DmncheckError,
    ValidationError,
    MissingDomainsError,
    UnqualifiedDomainError,
    UnknownTLDError,
    InvalidChunkSizeError,
    PatternTooLargeError,
    ConfigError,
    BootstrapError,
    NetworkError,
    ProbeError,
    RetryExhaustedError,
    ProbeTimeoutError,
)
from dmncheck.enums import (
    ExitCode,
    LogLevel,
    ProbeOutcome,
    RDAPErrorCode,
    DomainValidationErrorCode,
)
from dmncheck.config import (
    BootstrapConfig,
    QueryConfig,
    RetryConfig,
    LoggingConfig,
    SystemConfig,
    create_default_config,
    load_config_from_file,
    save_config_to_file,
)
from dmncheck.pattern_expander import (
    expand,
    iter_expand,
    count_candidates,
    is_valid_candidate,
)
from dmncheck.bootstrap import (
    BootstrapRegistry,
    BootstrapService,
    fetch_bootstrap_registry,
    load_bootstrap_registry,
)
from dmncheck.rdap_client import RDAPClient, ProbeResult, build_query_url
from dmncheck.retry_manager import RetryManager
from dmncheck.prober import AvailabilityProber
from dmncheck.batch_engine import BatchQueryEngine, ChunkResult, partition
from dmncheck.domain_validator import DomainValidator, DomainValidationResult
from dmncheck.audit_logger import AuditLogger, LogEntry
from dmncheck.reporter import ConsoleReporter, CollectingReporter
from dmncheck.orchestrator import CheckOrchestrator, DomainAvailability
from dmncheck.cli import main as cli_main

__all__ = [
    # Exceptions
    "DmncheckError",
    "ValidationError",
    "MissingDomainsError",
    "UnqualifiedDomainError",
    "UnknownTLDError",
    "InvalidChunkSizeError",
    "PatternTooLargeError",
    "ConfigError",
    "BootstrapError",
    "NetworkError",
    "ProbeError",
    "RetryExhaustedError",
    "ProbeTimeoutError",
    # Enums
    "ExitCode",
    "LogLevel",
    "ProbeOutcome",
    "RDAPErrorCode",
    "DomainValidationErrorCode",
    # Configuration
    "BootstrapConfig",
    "QueryConfig",
    "RetryConfig",
    "LoggingConfig",
    "SystemConfig",
    "create_default_config",
    "load_config_from_file",
    "save_config_to_file",
    # Pattern expansion
    "expand",
    "iter_expand",
    "count_candidates",
    "is_valid_candidate",
    # Bootstrap
    "BootstrapRegistry",
    "BootstrapService",
    "fetch_bootstrap_registry",
    "load_bootstrap_registry",
    # Querying
    "RDAPClient",
    "ProbeResult",
    "build_query_url",
    "RetryManager",
    "AvailabilityProber",
    "BatchQueryEngine",
    "ChunkResult",
    "partition",
    # Validation
    "DomainValidator",
    "DomainValidationResult",
    # Logging and output
    "AuditLogger",
    "LogEntry",
    "ConsoleReporter",
    "CollectingReporter",
    # Orchestration
    "CheckOrchestrator",
    "DomainAvailability",
    "cli_main",
]
