"""
Domain validation and normalization module.

Turns raw domain input into canonical form (lowercase, IDNA-encoded) and
splits off the TLD group, which is everything after the first dot.
"""

from dataclasses import dataclass
from typing import Optional

import idna

from dmncheck.enums import DomainValidationErrorCode
from dmncheck.exceptions import UnqualifiedDomainError, ValidationError


@dataclass
class DomainValidationError:
    """Structured error information for domain validation failures."""

    code: DomainValidationErrorCode
    message: str
    details: dict


@dataclass
class DomainValidationResult:
    """Result of domain validation operation."""

    valid: bool
    canonical_domain: Optional[str]
    tld: Optional[str]
    error: Optional[DomainValidationError]


def extract_tld(domain: str) -> Optional[str]:
    """
    Return everything after the first dot, or None if the name is unqualified.

    >>> extract_tld("example.com")
    'com'
    >>> extract_tld("example.co.uk")
    'co.uk'
    """
    name, sep, tld = domain.partition(".")
    if not sep or not name or not tld:
        return None
    return tld


def _rejected(code: DomainValidationErrorCode, message: str, details: dict) -> DomainValidationResult:
    return DomainValidationResult(
        valid=False,
        canonical_domain=None,
        tld=None,
        error=DomainValidationError(code=code, message=message, details=details),
    )


class DomainValidator:
    """
    Normalizes domain names and checks that they are fully qualified.

    The canonical form is stripped, lower-cased and, for non-ASCII input,
    IDNA-encoded. A name needs a non-empty label on both sides of its first
    dot to be qualified.
    """

    def validate(self, raw_domain: str) -> DomainValidationResult:
        """
        Validate and normalize a domain string.

        Args:
            raw_domain: The raw domain string to validate

        Returns:
            DomainValidationResult with canonical form and TLD, or an error
        """
        if not raw_domain or not raw_domain.strip():
            return _rejected(
                DomainValidationErrorCode.EMPTY_INPUT,
                "Domain input is empty",
                {"raw_input": raw_domain},
            )

        try:
            canonical = self.normalize_to_canonical(raw_domain.strip())
        except ValidationError as e:
            return _rejected(DomainValidationErrorCode.IDNA_ERROR, e.message, e.details)

        tld = extract_tld(canonical)
        if tld is None:
            return _rejected(
                DomainValidationErrorCode.UNQUALIFIED_DOMAIN,
                f"Could not find the TLD for domain '{raw_domain}'",
                {"raw_input": raw_domain, "canonical": canonical},
            )

        return DomainValidationResult(valid=True, canonical_domain=canonical, tld=tld, error=None)

    def require_valid(self, raw_domain: str) -> DomainValidationResult:
        """
        Like validate(), but raise on failure.

        Raises:
            UnqualifiedDomainError: For empty, unqualified or un-encodable names
        """
        result = self.validate(raw_domain)
        if not result.valid:
            raise UnqualifiedDomainError(
                code=result.error.code.value,
                message=result.error.message,
                details=result.error.details,
            )
        return result

    def normalize_to_canonical(self, domain: str) -> str:
        """
        Convert domain to canonical form (lowercase, IDNA-encoded).

        Raises:
            ValidationError: If IDNA encoding fails
        """
        domain_lower = domain.lower()

        if domain_lower.isascii():
            return domain_lower

        try:
            return idna.encode(domain_lower, uts46=True).decode("ascii")
        except idna.IDNAError as e:
            raise ValidationError(
                code=DomainValidationErrorCode.IDNA_ERROR.value,
                message=f"IDNA encoding failed: {e}",
                details={"domain": domain, "idna_error": str(e)},
            )
