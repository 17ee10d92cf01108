"""
Enumeration types for dmncheck.

These enums provide type-safe constants for probe outcomes, error codes,
exit codes, and configuration options throughout the system.
"""

from enum import Enum, IntEnum


class ProbeOutcome(Enum):
    """Outcome of a single RDAP availability lookup."""

    AVAILABLE = "available"
    REGISTERED = "registered"
    RETRYABLE_FAILURE = "retryable_failure"
    FATAL_FAILURE = "fatal_failure"

    @property
    def is_definitive(self) -> bool:
        """True when the outcome answers the availability question."""
        return self in (ProbeOutcome.AVAILABLE, ProbeOutcome.REGISTERED)


class LogLevel(Enum):
    """Logging severity levels."""

    DEBUG = "debug"
    INFO = "info"
    WARN = "warn"
    ERROR = "error"

    @property
    def severity(self) -> int:
        return _SEVERITY[self]


_SEVERITY = {
    LogLevel.DEBUG: 10,
    LogLevel.INFO: 20,
    LogLevel.WARN: 30,
    LogLevel.ERROR: 40,
}


class DomainValidationErrorCode(Enum):
    """Error codes for domain validation failures."""

    EMPTY_INPUT = "empty_input"
    UNQUALIFIED_DOMAIN = "unqualified_domain"
    IDNA_ERROR = "idna_error"


class RDAPErrorCode(Enum):
    """Error codes for RDAP client operations."""

    NETWORK_ERROR = "network_error"
    TIMEOUT = "timeout"
    INVALID_URL = "invalid_url"
    UNEXPECTED_STATUS = "unexpected_status"


class ExitCode(IntEnum):
    """Process exit codes, one per failure category."""

    SUCCESS = 0
    MISSING_DOMAINS = 1
    UNQUALIFIED_DOMAIN = 2
    UNKNOWN_TLD = 3
    INVALID_CHUNK_SIZE = 4
    BOOTSTRAP_UNAVAILABLE = 5
    INVALID_CONFIG = 6
    FAILURE = 7
    INTERRUPTED = 130
