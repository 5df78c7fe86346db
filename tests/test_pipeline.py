"""Tests for the translation pipeline."""

import pytest

from cs2translator.cache import TranslationCache
from cs2translator.config import AppConfig
from cs2translator.parser import ChatEvent
from cs2translator.pipeline import (
    PipelineConfig,
    TranslatedMessage,
    TranslationPipeline,
    format_message,
)
from cs2translator.translator import TranslationResult


class FakeTranslator:
    """Records calls; translates by upper-casing."""

    def __init__(self, fail=False):
        self.calls = []
        self.fail = fail

    def translate(self, text, target_lang):
        self.calls.append((text, target_lang))
        if self.fail:
            return TranslationResult(
                original=text, translated=text, source_lang="",
                target_lang=target_lang, success=False, error="deepl_error",
            )
        return TranslationResult(
            original=text, translated=text.upper(), source_lang="RU",
            target_lang=target_lang, success=True,
        )


class FakeDetector:
    def __init__(self, same_language):
        self.same_language = same_language

    def is_target_language(self, text):
        return text in self.same_language


@pytest.fixture
def output():
    return []


@pytest.fixture
def translator():
    return FakeTranslator()


def make_pipeline(translator, output, **kwargs):
    cache = kwargs.pop("cache", None)
    detector = kwargs.pop("detector", None)
    config = PipelineConfig(target_lang="EN", own_name="Me", **kwargs)
    return TranslationPipeline(
        config=config, translator=translator, on_message=output.append,
        cache=cache, detector=detector,
    )


class TestPipelineFlow:
    """Test line handling end to end."""

    def test_translates_chat_line(self, translator, output):
        pipeline = make_pipeline(translator, output)
        msg = pipeline.handle_line("01/27 20:28:10  [ALL] Bob: privet")
        assert translator.calls == [("privet", "EN")]
        assert output == [msg]
        assert format_message(msg) == "[ALL] Bob: PRIVET"

    def test_non_chat_line_ignored(self, translator, output):
        pipeline = make_pipeline(translator, output)
        assert pipeline.handle_line("01/27 20:28:10 [Net] connected") is None
        assert translator.calls == []
        assert output == []

    def test_own_message_never_translated(self, translator, output):
        pipeline = make_pipeline(translator, output)
        pipeline.handle_line("01/27 20:28:10  [Team] Me [TOT]: rush b")
        pipeline.handle_line("01/27 20:28:10  [ALL]  Me\u200e@steam : hi")
        assert translator.calls == []
        assert output == []
        assert pipeline.stats["own"] == 2

    def test_empty_own_name_translates_everyone(self, translator, output):
        pipeline = TranslationPipeline(
            config=PipelineConfig(own_name=""), translator=translator,
            on_message=output.append,
        )
        pipeline.handle_line("01/27 20:28:10  [ALL] Me: hi")
        assert len(translator.calls) == 1

    def test_translation_failure_skips_output(self, output):
        translator = FakeTranslator(fail=True)
        pipeline = make_pipeline(translator, output)
        assert pipeline.handle_line("01/27 20:28:10  [ALL] Bob: privet") is None
        assert len(translator.calls) == 1
        assert output == []
        assert pipeline.stats["failed"] == 1

    def test_failure_does_not_stop_next_line(self, output):
        translator = FakeTranslator(fail=True)
        pipeline = make_pipeline(translator, output)
        pipeline.handle_line("01/27 20:28:10  [ALL] Bob: one")
        translator.fail = False
        pipeline.handle_line("01/27 20:28:11  [ALL] Bob: two")
        assert [format_message(m) for m in output] == ["[ALL] Bob: TWO"]

    def test_output_in_source_order(self, translator, output):
        pipeline = make_pipeline(translator, output)
        for word in ("a1", "b2", "c3"):
            pipeline.handle_line(f"01/27 20:28:10  [ALL] Bob: {word}")
        assert [m.text for m in output] == ["A1", "B2", "C3"]

    def test_empty_message_not_sent(self, translator, output):
        pipeline = make_pipeline(translator, output)
        assert pipeline.handle_line("01/27 20:28:10  [ALL] Bob:   ") is None
        assert translator.calls == []

    def test_ignored_channel(self, translator, output):
        pipeline = make_pipeline(
            translator, output, ignored_channels=frozenset({"dead"}),
        )
        pipeline.handle_line("01/27 20:28:10  [DEAD] Bob: privet")
        pipeline.handle_line("01/27 20:28:10  [ALL] Bob: privet")
        assert len(translator.calls) == 1
        assert output[0].original.channel == "ALL"

    def test_stats(self, translator, output):
        pipeline = make_pipeline(translator, output)
        pipeline.handle_line("noise")
        pipeline.handle_line("01/27 20:28:10  [ALL] Bob: privet")
        assert pipeline.stats["lines"] == 2
        assert pipeline.stats["chat"] == 1
        assert pipeline.stats["translated"] == 1


class TestPipelineCache:
    """Test cache use."""

    def test_repeated_message_uses_cache(self, translator, output):
        pipeline = make_pipeline(translator, output, cache=TranslationCache())
        pipeline.handle_line("01/27 20:28:10  [ALL] Bob: privet")
        pipeline.handle_line("01/27 20:28:20  [ALL] Ann: privet")
        assert len(translator.calls) == 1
        assert [m.text for m in output] == ["PRIVET", "PRIVET"]

    def test_failures_not_cached(self, output):
        translator = FakeTranslator(fail=True)
        pipeline = make_pipeline(translator, output, cache=TranslationCache())
        pipeline.handle_line("01/27 20:28:10  [ALL] Bob: privet")
        pipeline.handle_line("01/27 20:28:10  [ALL] Bob: privet")
        assert len(translator.calls) == 2


class TestPipelineDetector:
    """Test skipping messages already in the target language."""

    def test_target_language_shown_untranslated(self, translator, output):
        pipeline = make_pipeline(
            translator, output, skip_target_language=True,
            detector=FakeDetector({"good game everyone"}),
        )
        msg = pipeline.handle_line("01/27 20:28:10  [ALL] Bob: good game everyone")
        assert translator.calls == []
        assert msg.translation is None
        assert format_message(msg) == "[ALL] Bob: good game everyone"

    def test_detector_ignored_when_disabled(self, translator, output):
        pipeline = make_pipeline(
            translator, output, skip_target_language=False,
            detector=FakeDetector({"good game everyone"}),
        )
        pipeline.handle_line("01/27 20:28:10  [ALL] Bob: good game everyone")
        assert len(translator.calls) == 1


class TestPipelineConfig:
    """Test building pipeline config from app config."""

    def test_from_app_config(self):
        app = AppConfig(
            deepl_api_key="k", target_language="DE", own_name="Me",
            ignored_channels=["DEAD", "Spectator"], skip_target_language=True,
        )
        config = PipelineConfig.from_app_config(app)
        assert config.target_lang == "DE"
        assert config.own_name == "Me"
        assert config.ignored_channels == frozenset({"dead", "spectator"})
        assert config.skip_target_language is True


class TestFormatMessage:
    """Test console output format."""

    def test_untranslated(self):
        msg = TranslatedMessage(
            original=ChatEvent(channel="Team", player="Alice", message="hi"),
            translation=None,
        )
        assert format_message(msg) == "[Team] Alice: hi"
