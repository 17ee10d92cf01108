"""
Internationalization (i18n) module for dmncheck.

Provides translations for all user-facing messages in English (en) and
German (de).
"""

from typing import Optional


SUPPORTED_LANGUAGES = frozenset({"en", "de"})
DEFAULT_LANGUAGE = "en"


# Structure: {message_key: {language_code: translated_message}}
TRANSLATIONS: dict[str, dict[str, str]] = {
    # Results
    "result.available": {
        "en": "{domain} is available",
        "de": "{domain} ist verfügbar",
    },
    "result.not_available": {
        "en": "{domain} is not available",
        "de": "{domain} ist nicht verfügbar",
    },

    # Progress
    "progress.line": {
        "en": "[{processed}/{total}]",
        "de": "[{processed}/{total}]",
    },

    # Input errors
    "error.usage": {
        "en": "Usage: dmncheck [OPTIONS] DOMAINS...",
        "de": "Verwendung: dmncheck [OPTIONEN] DOMAINS...",
    },
    "error.missing_domains": {
        "en": "No domains given",
        "de": "Keine Domains angegeben",
    },
    "error.no_candidates": {
        "en": "No valid domain names could be generated from the given patterns",
        "de": "Aus den angegebenen Mustern konnten keine gültigen Domainnamen erzeugt werden",
    },
    "error.unqualified_domain": {
        "en": "Could not find the TLD for domain '{domain}'",
        "de": "Die TLD der Domain '{domain}' konnte nicht ermittelt werden",
    },
    "error.unqualified_hint": {
        "en": 'All domain names must be fully qualified. For example: "example.com"',
        "de": 'Alle Domainnamen müssen vollständig qualifiziert sein. Beispiel: "example.com"',
    },
    "error.unknown_tld": {
        "en": "Could not find a bootstrap service for tld '{tld}'",
        "de": "Für die TLD '{tld}' wurde kein Bootstrap-Dienst gefunden",
    },
    "error.invalid_chunk_size": {
        "en": "Chunk size must be a non-negative integer, got '{value}'",
        "de": "Die Chunk-Größe muss eine nicht-negative Ganzzahl sein, erhalten: '{value}'",
    },
    "error.bootstrap_unavailable": {
        "en": "Could not load the RDAP bootstrap registry: {error}",
        "de": "Die RDAP-Bootstrap-Registry konnte nicht geladen werden: {error}",
    },
    "error.invalid_config": {
        "en": "Invalid configuration: {error}",
        "de": "Ungültige Konfiguration: {error}",
    },
    "error.probe_failed": {
        "en": "Availability check failed: {error}",
        "de": "Verfügbarkeitsprüfung fehlgeschlagen: {error}",
    },
    "error.interrupted": {
        "en": "Interrupted",
        "de": "Abgebrochen",
    },
}


def get_message(key: str, language: Optional[str] = None, **kwargs) -> str:
    """
    Get a translated message by key.

    Falls back to the default language for unsupported languages, and to the
    key itself for unknown keys.

    Args:
        key: The message key (e.g., 'result.available')
        language: Language code ('en' or 'de')
        **kwargs: Format parameters for the message template
    """
    if language is None or language not in SUPPORTED_LANGUAGES:
        language = DEFAULT_LANGUAGE

    translations = TRANSLATIONS.get(key)
    if translations is None:
        return key

    template = translations.get(language) or translations.get(DEFAULT_LANGUAGE, key)
    if kwargs:
        try:
            return template.format(**kwargs)
        except KeyError:
            return template
    return template


def get_missing_translations(language: str) -> list[str]:
    """Return keys that lack a translation for the given language."""
    return [key for key, values in TRANSLATIONS.items() if language not in values]


def validate_translations() -> dict[str, list[str]]:
    """Return missing keys per supported language (empty lists when complete)."""
    return {lang: get_missing_translations(lang) for lang in sorted(SUPPORTED_LANGUAGES)}
