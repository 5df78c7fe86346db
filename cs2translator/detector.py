"""Language detection for chat messages using lingua-py."""

from __future__ import annotations

import logging

from lingua import Language, LanguageDetectorBuilder

logger = logging.getLogger(__name__)

# DeepL language code -> Lingua Language
_DEEPL_TO_LINGUA: dict[str, Language] = {
    "EN": Language.ENGLISH,
    "RU": Language.RUSSIAN,
    "DE": Language.GERMAN,
    "FR": Language.FRENCH,
    "ES": Language.SPANISH,
    "IT": Language.ITALIAN,
    "PT": Language.PORTUGUESE,
    "PL": Language.POLISH,
    "NL": Language.DUTCH,
    "SV": Language.SWEDISH,
    "DA": Language.DANISH,
    "FI": Language.FINNISH,
    "CS": Language.CZECH,
    "RO": Language.ROMANIAN,
    "HU": Language.HUNGARIAN,
    "BG": Language.BULGARIAN,
    "EL": Language.GREEK,
    "TR": Language.TURKISH,
    "UK": Language.UKRAINIAN,
    "JA": Language.JAPANESE,
    "KO": Language.KOREAN,
    "ZH": Language.CHINESE,
    "ET": Language.ESTONIAN,
    "LV": Language.LATVIAN,
    "LT": Language.LITHUANIAN,
    "SL": Language.SLOVENE,
    "SK": Language.SLOVAK,
    "ID": Language.INDONESIAN,
    "NB": Language.BOKMAL,
}

# Shorter text is left to DeepL: lingua guesses wildly on "gg" or "ty"
MIN_TEXT_LENGTH = 4


def lingua_language(code: str) -> Language | None:
    """Map a DeepL code ("EN", "en-gb", "PT-BR") to a lingua Language."""
    base = code.strip().upper().split("-", 1)[0]
    return _DEEPL_TO_LINGUA.get(base)


class ChatLanguageDetector:
    """Detects chat messages that are already in the target language."""

    def __init__(self, target_lang: str) -> None:
        self._target = lingua_language(target_lang)
        if self._target is None:
            logger.warning("No language detection for target %s", target_lang)
        self._detector = (
            LanguageDetectorBuilder.from_languages(*_DEEPL_TO_LINGUA.values())
            .with_minimum_relative_distance(0.25)
            .build()
        )

    @property
    def target_language(self) -> Language | None:
        return self._target

    def detect(self, text: str) -> Language | None:
        """Detect language of text. None if too short or undecided."""
        cleaned = text.strip()
        if len(cleaned) < MIN_TEXT_LENGTH:
            return None
        detected = self._detector.detect_language_of(cleaned)
        logger.debug("Detected %s for %r", detected, cleaned[:40])
        return detected

    def is_target_language(self, text: str) -> bool:
        """Check if text can be shown as-is instead of being translated."""
        if self._target is None:
            return False
        return self.detect(text) == self._target
