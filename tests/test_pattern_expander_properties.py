"""
Property-based tests for the pattern expander module.

Uses Hypothesis for property-based testing of wildcard cardinality,
filtering and ordering.
"""

import re
import string

import pytest
from hypothesis import given, settings
from hypothesis import strategies as st

from dmncheck.exceptions import PatternTooLargeError
from dmncheck.pattern_expander import (
    LDH,
    WILDCARD_ALPHABETS,
    _substitute,
    count_candidates,
    expand,
    has_wildcards,
    is_valid_candidate,
    iter_expand,
)


LITERAL_CHARS = string.ascii_lowercase + string.digits + "-."
VALID_CHARS = re.compile(r"[a-z0-9.-]*", re.IGNORECASE | re.ASCII)


@st.composite
def pattern_strategy(draw, max_wildcards: int = 2) -> str:
    """Generate short patterns with at most ``max_wildcards`` wildcards."""
    literal = st.text(alphabet=LITERAL_CHARS, min_size=0, max_size=4)
    wildcards = draw(st.lists(st.sampled_from("?#*"), min_size=0, max_size=max_wildcards))
    parts = [draw(literal)]
    for token in wildcards:
        parts.append(token)
        parts.append(draw(literal))
    return "".join(parts)


class TestWildcardCardinalityProperty:
    """Pre-filter candidate count is the product of the alphabet sizes."""

    @given(
        question=st.integers(min_value=0, max_value=2),
        number=st.integers(min_value=0, max_value=2),
        star=st.integers(min_value=0, max_value=1),
        data=st.data(),
    )
    @settings(max_examples=30)
    def test_candidate_count_matches_product(
        self, question: int, number: int, star: int, data
    ) -> None:
        tokens = ["?"] * question + ["#"] * number + ["*"] * star
        tokens = data.draw(st.permutations(tokens))
        pattern = "x" + "".join(tokens) + ".com"

        expected = 26 ** question * 10 ** number * 37 ** star
        assert count_candidates(pattern) == expected

        if expected <= 2000:
            assert len(list(_substitute(pattern))) == expected

    def test_single_question_mark(self) -> None:
        assert len(list(_substitute("?"))) == 26

    def test_star_and_number_sign(self) -> None:
        assert len(list(_substitute("*#"))) == 370

    def test_alphabets(self) -> None:
        assert WILDCARD_ALPHABETS["?"] == string.ascii_lowercase
        assert WILDCARD_ALPHABETS["#"] == string.digits
        assert WILDCARD_ALPHABETS["*"] == LDH
        assert len(LDH) == 37


class TestNoWildcardIdentityProperty:
    """Patterns without wildcards are returned unchanged."""

    @given(pattern=st.text(min_size=0, max_size=30).filter(lambda s: not has_wildcards(s)))
    @settings(max_examples=100)
    def test_literal_pattern_returned_as_is(self, pattern: str) -> None:
        assert expand(pattern) == [pattern]

    def test_example(self) -> None:
        assert expand("example") == ["example"]

    def test_literal_is_not_filtered(self) -> None:
        # The validity filter only runs on wildcard output
        assert expand("-a") == ["-a"]
        assert expand("a--b.com") == ["a--b.com"]

    def test_empty_pattern(self) -> None:
        assert expand("") == [""]


class TestFilteringProperty:
    """Expanded candidates never violate the hyphen or charset rules."""

    @given(pattern=pattern_strategy().filter(has_wildcards))
    @settings(max_examples=100)
    def test_expanded_candidates_are_valid(self, pattern: str) -> None:
        for candidate in expand(pattern):
            assert not candidate.startswith("-")
            assert not candidate.endswith("-")
            assert "--" not in candidate
            assert VALID_CHARS.fullmatch(candidate)

    @given(pattern=pattern_strategy().filter(has_wildcards))
    @settings(max_examples=50)
    def test_filter_keeps_every_valid_candidate(self, pattern: str) -> None:
        raw = list(_substitute(pattern))
        assert expand(pattern) == [c for c in raw if is_valid_candidate(c)]

    def test_leading_star_drops_hyphen(self) -> None:
        result = expand("*a")
        assert "-a" not in result
        assert len(result) == 36

    def test_double_star_drops_double_hyphen(self) -> None:
        result = expand("a**b")
        assert "a--b" not in result
        assert len(result) == 37 * 37 - 1

    def test_non_ascii_candidates_are_dropped(self) -> None:
        assert expand("ü?.de") == []

    @pytest.mark.parametrize("control", ["\n", "\r", "\t", "\x00", "\x7f"])
    def test_control_characters_are_dropped(self, control: str) -> None:
        assert expand("a?" + control) == []
        assert expand("a#.com" + control) == []
        assert not is_valid_candidate("example.com" + control)

    @given(
        pattern=pattern_strategy().filter(has_wildcards),
        control=st.characters(whitelist_categories=("Cc",)),
        at_end=st.booleans(),
    )
    @settings(max_examples=50)
    def test_control_characters_never_emitted(self, pattern: str, control: str, at_end: bool) -> None:
        pattern = pattern + control if at_end else control + pattern
        assert expand(pattern) == []

    def test_uppercase_is_allowed(self) -> None:
        assert expand("AB#.com")[0] == "AB0.com"

    @pytest.mark.parametrize(
        "name,valid",
        [
            ("example.com", True),
            ("ex-ample.com", True),
            ("-example.com", False),
            ("example.com-", False),
            ("ex--ample.com", False),
            ("ex_ample.com", False),
            ("exa mple.com", False),
            ("EXAMPLE.COM", True),
        ],
    )
    def test_is_valid_candidate(self, name: str, valid: bool) -> None:
        assert is_valid_candidate(name) is valid


class TestExpansionOrderProperty:
    """Expansion is deterministic and substitutes the earliest wildcard first."""

    @given(pattern=pattern_strategy())
    @settings(max_examples=50)
    def test_deterministic(self, pattern: str) -> None:
        assert expand(pattern) == expand(pattern)

    @given(pattern=pattern_strategy())
    @settings(max_examples=50)
    def test_lazy_matches_eager(self, pattern: str) -> None:
        assert list(iter_expand(pattern)) == expand(pattern)

    def test_question_mark_example(self) -> None:
        assert expand("a?") == ["a" + c for c in string.ascii_lowercase]

    def test_earliest_wildcard_varies_slowest(self) -> None:
        result = expand("#?")
        assert result[:3] == ["0a", "0b", "0c"]
        assert result[26] == "1a"
        assert result[-1] == "9z"

    def test_star_alphabet_order(self) -> None:
        result = expand("x*")
        assert result[0] == "xa"
        assert result[25] == "xz"
        assert result[26] == "x0"
        assert result[-1] == "x9"

    def test_dot_is_preserved(self) -> None:
        assert all(c.endswith(".com") for c in expand("ab#.com"))


class TestCandidateCapProperty:
    """An opt-in cap rejects patterns that expand too far."""

    def test_cap_exceeded(self) -> None:
        with pytest.raises(PatternTooLargeError) as exc_info:
            expand("???.com", max_candidates=1000)
        assert exc_info.value.details["candidates"] == 26 ** 3

    def test_cap_not_exceeded(self) -> None:
        assert len(expand("?.com", max_candidates=26)) == 26

    def test_cap_checks_pre_filter_count(self) -> None:
        # 37 raw candidates, 36 after filtering; the cap applies to 37
        with pytest.raises(PatternTooLargeError):
            expand("*a", max_candidates=36)
