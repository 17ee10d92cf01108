"""
Property-based tests for the i18n module.
"""

import re

from hypothesis import given, settings
from hypothesis import strategies as st

from dmncheck.i18n import (
    DEFAULT_LANGUAGE,
    SUPPORTED_LANGUAGES,
    TRANSLATIONS,
    get_message,
    validate_translations,
)

PLACEHOLDER = re.compile(r"\{(\w+)\}")


class TestTranslationCompletenessProperty:
    """Every message exists in every supported language."""

    def test_no_missing_translations(self) -> None:
        assert validate_translations() == {lang: [] for lang in sorted(SUPPORTED_LANGUAGES)}

    @given(key=st.sampled_from(sorted(TRANSLATIONS)))
    @settings(max_examples=50)
    def test_placeholders_match_across_languages(self, key: str) -> None:
        placeholders = {
            lang: set(PLACEHOLDER.findall(TRANSLATIONS[key][lang]))
            for lang in SUPPORTED_LANGUAGES
        }
        assert placeholders["en"] == placeholders["de"]


class TestMessageLookup:
    def test_result_lines(self) -> None:
        assert get_message("result.available", "en", domain="example.com") == "example.com is available"
        assert get_message("result.not_available", "en", domain="example.com") == (
            "example.com is not available"
        )
        assert get_message("result.available", "de", domain="example.com") == "example.com ist verfügbar"

    def test_progress_line(self) -> None:
        assert get_message("progress.line", processed=3, total=10) == "[3/10]"

    @given(language=st.text(max_size=5).filter(lambda s: s not in SUPPORTED_LANGUAGES))
    @settings(max_examples=30)
    def test_unsupported_language_falls_back(self, language: str) -> None:
        assert get_message("error.missing_domains", language) == (
            TRANSLATIONS["error.missing_domains"][DEFAULT_LANGUAGE]
        )

    def test_unknown_key_returns_key(self) -> None:
        assert get_message("no.such.key", "de") == "no.such.key"

    def test_missing_format_argument_returns_template(self) -> None:
        assert get_message("error.unknown_tld", "en", domain="x") == (
            "Could not find a bootstrap service for tld '{tld}'"
        )
