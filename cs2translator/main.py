"""Entry point for the CS2 chat translator."""

from __future__ import annotations

import logging
import sys

from dotenv import load_dotenv

from cs2translator import __version__
from cs2translator.cache import TranslationCache
from cs2translator.config import AppConfig, ConfigError, resolve_console_log_path
from cs2translator.detector import ChatLanguageDetector
from cs2translator.parser import parse_line
from cs2translator.pipeline import (
    PipelineConfig,
    TranslatedMessage,
    TranslationPipeline,
    format_message,
)
from cs2translator.translator import TranslatorService
from cs2translator.watcher import ConsoleLogWatcher

_LOG_FMT = "%(asctime)s [%(levelname)s] %(name)s: %(message)s"
LOG_FILE = "cs2translator.log"

logger = logging.getLogger(__name__)


def _setup_logging() -> None:
    """Log everything to LOG_FILE; only warnings and errors reach the console.

    stdout is reserved for translated chat.
    """
    console_handler = logging.StreamHandler(sys.stderr)
    console_handler.setLevel(logging.WARNING)
    logging.basicConfig(
        level=logging.INFO,
        format=_LOG_FMT,
        handlers=[
            logging.FileHandler(LOG_FILE, encoding="utf-8", mode="w"),
            console_handler,
        ],
    )


def _enable_debug() -> None:
    """Switch all logging, console included, to DEBUG."""
    root = logging.getLogger()
    root.setLevel(logging.DEBUG)
    for h in root.handlers:
        h.setLevel(logging.DEBUG)
    logger.debug("Debug logging enabled")


def wait_for_enter() -> None:
    """Keep the console window open on Windows so the user can read the error."""
    if sys.platform != "win32":
        return
    print("\nPress Enter to exit...")
    try:
        input()
    except EOFError:
        pass


def _configure_stdout() -> None:
    """Replace characters the console code page (e.g. cp1252) cannot encode."""
    reconfigure = getattr(sys.stdout, "reconfigure", None)
    if reconfigure is not None:
        reconfigure(errors="replace")


def _print_message(msg: TranslatedMessage) -> None:
    print(format_message(msg), flush=True)


def _scan_existing(watcher: ConsoleLogWatcher, max_lines: int = 50) -> None:
    """Log chat already in the file. Diagnostics only, nothing is translated."""
    found = 0
    for line in watcher.read_tail(max_lines):
        event = parse_line(line)
        if event is not None:
            found += 1
            logger.debug("History: [%s] %s: %s", event.channel, event.player, event.message)
    logger.debug("History scan: %d chat lines in the last %d lines", found, max_lines)


def main() -> int:
    _setup_logging()
    _configure_stdout()
    load_dotenv()

    try:
        config = AppConfig.load()
        log_path = resolve_console_log_path(config)
    except ConfigError as e:
        logger.error("Error loading config: %s", e)
        wait_for_enter()
        return 1

    if config.debug:
        _enable_debug()

    translator = TranslatorService(api_key=config.deepl_api_key)
    cache = TranslationCache(memory_size=config.cache_size) if config.cache_size else None
    detector = (
        ChatLanguageDetector(config.target_language)
        if config.skip_target_language else None
    )
    pipeline = TranslationPipeline(
        config=PipelineConfig.from_app_config(config),
        translator=translator,
        on_message=_print_message,
        cache=cache,
        detector=detector,
    )
    watcher = ConsoleLogWatcher(
        log_path, pipeline.handle_line, use_file_events=config.use_file_events,
    )

    try:
        watcher.start()
    except OSError as e:
        logger.error("Error opening console log %s: %s", log_path, e)
        wait_for_enter()
        return 1

    if config.debug:
        _scan_existing(watcher)

    print(f"CS2 Chat Translator {__version__} (Target: {config.target_language})")
    print(f"Watching: {log_path}\n", flush=True)
    logger.info("CS2 Chat Translator started")

    try:
        watcher.run_forever()
    except KeyboardInterrupt:
        logger.info("Interrupted, shutting down...")
    finally:
        watcher.stop()
        logger.info("Pipeline stats: %s", dict(pipeline.stats))
        if cache is not None:
            logger.info("Cache stats: %s", cache.stats())

    return 0


if __name__ == "__main__":
    sys.exit(main())
