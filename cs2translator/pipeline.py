"""Translation pipeline: watcher -> parser -> own-message filter -> cache -> translator -> output."""

from __future__ import annotations

import logging
from collections import Counter
from collections.abc import Callable
from dataclasses import dataclass

from cs2translator.cache import TranslationCache
from cs2translator.config import AppConfig
from cs2translator.detector import ChatLanguageDetector
from cs2translator.identity import is_own_name
from cs2translator.parser import ChatEvent, parse_line
from cs2translator.translator import TranslationResult, TranslatorService

logger = logging.getLogger(__name__)


@dataclass
class TranslatedMessage:
    """A chat message with its translation.

    translation is None when the message was shown untranslated (already in
    the target language).
    """

    original: ChatEvent
    translation: TranslationResult | None

    @property
    def text(self) -> str:
        if self.translation is None:
            return self.original.message
        return self.translation.translated


def format_message(msg: TranslatedMessage) -> str:
    """Render a message the way it is printed to the console."""
    return f"[{msg.original.channel}] {msg.original.player}: {msg.text}"


@dataclass(frozen=True)
class PipelineConfig:
    """Pipeline configuration."""

    target_lang: str = "EN"
    own_name: str = ""
    ignored_channels: frozenset[str] = frozenset()
    skip_target_language: bool = False

    @classmethod
    def from_app_config(cls, config: AppConfig) -> PipelineConfig:
        return cls(
            target_lang=config.target_language,
            own_name=config.own_name,
            ignored_channels=frozenset(c.casefold() for c in config.ignored_channels),
            skip_target_language=config.skip_target_language,
        )


class TranslationPipeline:
    """Turns console log lines into translated chat messages.

    Lines are handled one at a time in file order; the DeepL call for a line
    finishes before the next line is parsed. There is no timeout around that
    call beyond the deepl client's own, so a hung request stalls the watcher.
    """

    def __init__(
        self,
        config: PipelineConfig,
        translator: TranslatorService,
        on_message: Callable[[TranslatedMessage], None],
        cache: TranslationCache | None = None,
        detector: ChatLanguageDetector | None = None,
    ) -> None:
        self._config = config
        self._translator = translator
        self._on_message = on_message
        self._cache = cache
        self._detector = detector
        self.stats: Counter[str] = Counter()

    def handle_line(self, line: str) -> TranslatedMessage | None:
        """Process a new line from the console log.

        Returns the emitted message, or None when nothing was printed.
        """
        self.stats["lines"] += 1
        logger.debug("New line: %s", line[:200])
        event = parse_line(line)
        if event is None:
            return None

        self.stats["chat"] += 1
        logger.debug("Parsed: [%s] %s: %s", event.channel, event.player, event.message[:80])

        if event.channel.casefold() in self._config.ignored_channels:
            logger.debug("Channel %s ignored", event.channel)
            return None

        # Own messages are never sent to DeepL
        if is_own_name(event.player, self._config.own_name):
            logger.debug("Own message, skipping: %r", event.message[:60])
            self.stats["own"] += 1
            return None

        if not event.message:
            return None

        if (
            self._config.skip_target_language
            and self._detector is not None
            and self._detector.is_target_language(event.message)
        ):
            logger.debug("Already in %s: %r", self._config.target_lang, event.message[:60])
            return self._emit(TranslatedMessage(original=event, translation=None))

        result = self._translate(event.message)
        if not result.success:
            logger.warning(
                "Translation failed (%s), skipping message from %s",
                result.error, event.player,
            )
            self.stats["failed"] += 1
            return None

        self.stats["translated"] += 1
        return self._emit(TranslatedMessage(original=event, translation=result))

    def _translate(self, text: str) -> TranslationResult:
        target_lang = self._config.target_lang

        if self._cache is not None:
            cached = self._cache.get(text, target_lang)
            if cached is not None:
                logger.debug("Cache hit: %r", text[:60])
                return TranslationResult(
                    original=text, translated=cached,
                    source_lang="", target_lang=target_lang,
                    success=True,
                )

        result = self._translator.translate(text, target_lang=target_lang)
        if result.success and self._cache is not None:
            self._cache.put(text, target_lang, result.translated)
        return result

    def _emit(self, msg: TranslatedMessage) -> TranslatedMessage:
        self._on_message(msg)
        return msg
