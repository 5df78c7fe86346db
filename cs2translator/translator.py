"""Translation service with DeepL API."""

from __future__ import annotations

import logging
from dataclasses import dataclass

import deepl

logger = logging.getLogger(__name__)

# DeepL language codes
DEEPL_LANGUAGES = {
    "AR", "BG", "CS", "DA", "DE", "EL", "EN", "ES", "ET", "FI", "FR",
    "HU", "ID", "IT", "JA", "KO", "LT", "LV", "NB", "NL", "PL",
    "PT", "RO", "RU", "SK", "SL", "SV", "TR", "UK", "ZH",
}

# EN target requires EN-US or EN-GB
_EN_TARGET_DEFAULT = "EN-US"
_PT_TARGET_DEFAULT = "PT-BR"


@dataclass(frozen=True, slots=True)
class TranslationResult:
    """Result of a translation attempt."""

    original: str
    translated: str
    source_lang: str
    target_lang: str
    success: bool
    error: str | None = None


class TranslatorService:
    """One-shot translation via DeepL API.

    A failed call is reported in the result and never retried: by the time a
    retry would succeed the chat has moved on.

    Usage:
        translator = TranslatorService(api_key="your-key")
        result = translator.translate("привет", target_lang="EN")
    """

    def __init__(self, api_key: str, client: deepl.Translator | None = None) -> None:
        self._client = client if client is not None else deepl.Translator(api_key)

    def translate(self, text: str, target_lang: str) -> TranslationResult:
        """Translate text to target language, auto-detecting the source.

        Args:
            text: Text to translate.
            target_lang: Target language code (e.g. "EN", "RU", "DE").

        Returns:
            TranslationResult with translated text, or the original on error.
        """
        if not text.strip():
            return TranslationResult(
                original=text, translated=text,
                source_lang="", target_lang=target_lang,
                success=True,
            )

        effective_target = normalize_target_lang(target_lang)
        logger.debug("DeepL request: target=%s text=%r", effective_target, text)

        try:
            result = self._client.translate_text(text, target_lang=effective_target)
        except deepl.QuotaExceededException:
            logger.error("DeepL quota exceeded")
            return self._failed(text, target_lang, "quota_exceeded")
        except deepl.AuthorizationException:
            logger.error("DeepL rejected the API key")
            return self._failed(text, target_lang, "authorization_failed")
        except deepl.DeepLException as e:
            logger.warning("DeepL error: %s", e)
            return self._failed(text, target_lang, "deepl_error")

        logger.debug(
            "DeepL response: source=%s text=%r",
            result.detected_source_lang, result.text,
        )
        return TranslationResult(
            original=text,
            translated=result.text,
            source_lang=result.detected_source_lang,
            target_lang=target_lang,
            success=True,
        )

    @staticmethod
    def _failed(text: str, target_lang: str, error: str) -> TranslationResult:
        return TranslationResult(
            original=text, translated=text,
            source_lang="", target_lang=target_lang,
            success=False, error=error,
        )


def normalize_target_lang(lang: str) -> str:
    """Normalize target language code for DeepL API."""
    upper = lang.strip().upper()
    if upper == "EN":
        return _EN_TARGET_DEFAULT
    if upper == "PT":
        return _PT_TARGET_DEFAULT
    return upper
