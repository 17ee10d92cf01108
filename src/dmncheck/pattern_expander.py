"""
Wildcard domain pattern expansion.

A pattern may contain three wildcard tokens:

- ``?`` any lowercase letter a-z
- ``#`` any digit 0-9
- ``*`` any letter, digit or hyphen

Expansion substitutes the earliest wildcard first, symbol by symbol in
alphabet order, and recurses until no wildcard is left. The complete
candidate list is then filtered so that only syntactically valid names
remain. A pattern without wildcards is returned unchanged and unfiltered.
"""

import re
import string
from typing import Iterator, Optional

from .exceptions import PatternTooLargeError

LETTERS = string.ascii_lowercase
DIGITS = string.digits
LDH = LETTERS + DIGITS + "-"

WILDCARD_ALPHABETS: dict[str, str] = {
    "?": LETTERS,
    "#": DIGITS,
    "*": LDH,
}

# Allowed characters in an expanded candidate: letters, digits, hyphen, dot
_CANDIDATE_CHARS = re.compile(r"[a-z0-9.-]*", re.IGNORECASE | re.ASCII)


def _first_wildcard(pattern: str) -> int:
    """Index of the earliest wildcard token, or -1 when there is none."""
    positions = [pattern.find(token) for token in WILDCARD_ALPHABETS]
    positions = [p for p in positions if p >= 0]
    return min(positions) if positions else -1


def has_wildcards(pattern: str) -> bool:
    return _first_wildcard(pattern) >= 0


def count_candidates(pattern: str) -> int:
    """Number of candidates a pattern produces before filtering."""
    total = 1
    for char in pattern:
        alphabet = WILDCARD_ALPHABETS.get(char)
        if alphabet is not None:
            total *= len(alphabet)
    return total


def is_valid_candidate(name: str) -> bool:
    """
    Check an expanded candidate against the hyphen and charset rules.

    Rejects names that start or end with a hyphen, contain ``--``, or
    contain anything besides ASCII letters, digits, hyphens and dots.
    """
    if name.startswith("-") or name.endswith("-"):
        return False
    if "--" in name:
        return False
    return _CANDIDATE_CHARS.fullmatch(name) is not None


def _substitute(pattern: str) -> Iterator[str]:
    index = _first_wildcard(pattern)
    if index < 0:
        yield pattern
        return

    head, tail = pattern[:index], pattern[index + 1:]
    for symbol in WILDCARD_ALPHABETS[pattern[index]]:
        yield from _substitute(head + symbol + tail)


def iter_expand(pattern: str) -> Iterator[str]:
    """
    Lazily yield the valid candidates of a pattern, in expansion order.

    Useful for patterns whose candidate count is too large to hold in memory.
    """
    if not has_wildcards(pattern):
        yield pattern
        return

    for candidate in _substitute(pattern):
        if is_valid_candidate(candidate):
            yield candidate


def expand(pattern: str, max_candidates: Optional[int] = None) -> list[str]:
    """
    Expand a domain pattern into the concrete names it denotes.

    Args:
        pattern: Domain name, optionally containing ``*``, ``?`` or ``#``
        max_candidates: Optional cap on the pre-filter candidate count

    Returns:
        Valid candidates in deterministic expansion order

    Raises:
        PatternTooLargeError: If the pattern exceeds ``max_candidates``
    """
    if max_candidates is not None:
        count = count_candidates(pattern)
        if count > max_candidates:
            raise PatternTooLargeError(
                code="pattern_too_large",
                message=(
                    f"Pattern '{pattern}' expands to {count} candidates "
                    f"(limit {max_candidates})"
                ),
                details={
                    "pattern": pattern,
                    "candidates": count,
                    "max_candidates": max_candidates,
                },
            )

    return list(iter_expand(pattern))
