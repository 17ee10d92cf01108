"""
Exception classes for dmncheck.

All exceptions inherit from DmncheckError and provide structured
error information with codes, messages, and optional details.
"""

from typing import Optional

from .enums import ExitCode


class DmncheckError(Exception):
    """Base exception for all dmncheck errors."""

    exit_code: ExitCode = ExitCode.FAILURE

    def __init__(
        self,
        code: str,
        message: str,
        details: Optional[dict] = None,
    ) -> None:
        self.code = code
        self.message = message
        self.details = details or {}
        super().__init__(message)

    def __repr__(self) -> str:
        return f"{self.__class__.__name__}(code={self.code!r}, message={self.message!r})"


class ValidationError(DmncheckError):
    """Raised when user input is rejected. Never retried."""

    pass


class MissingDomainsError(ValidationError):
    """Raised when no domain or pattern was supplied."""

    exit_code = ExitCode.MISSING_DOMAINS


class UnqualifiedDomainError(ValidationError):
    """Raised when a domain is not fully qualified (e.g. 'example')."""

    exit_code = ExitCode.UNQUALIFIED_DOMAIN


class UnknownTLDError(ValidationError):
    """Raised when the bootstrap registry has no service for a TLD."""

    exit_code = ExitCode.UNKNOWN_TLD


class InvalidChunkSizeError(ValidationError):
    """Raised when the chunk size is not a non-negative integer."""

    exit_code = ExitCode.INVALID_CHUNK_SIZE


class PatternTooLargeError(ValidationError):
    """Raised when a pattern expands past the configured candidate cap."""

    exit_code = ExitCode.INVALID_CONFIG


class ConfigError(DmncheckError):
    """Raised when a configuration file or value is invalid."""

    exit_code = ExitCode.INVALID_CONFIG


class BootstrapError(DmncheckError):
    """Raised when the bootstrap registry cannot be loaded or parsed."""

    exit_code = ExitCode.BOOTSTRAP_UNAVAILABLE


class NetworkError(DmncheckError):
    """Raised when network operations fail terminally."""

    pass


class ProbeError(NetworkError):
    """Raised when a probe fails with an outcome the retry policy does not retry."""

    pass


class RetryExhaustedError(ProbeError):
    """Raised when a bounded retry policy runs out of attempts."""

    pass


class ProbeTimeoutError(ProbeError):
    """Raised when a probe exceeds its deadline."""

    pass
