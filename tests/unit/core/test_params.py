"""Unit tests for TalkParams resolution and validation."""

import pytest

from matilda_talk.core.config import ConfigLoader
from matilda_talk.core.params import TalkParams
from matilda_talk.streaming.types import ConfigError


class TestFromConfig:
    def test_defaults(self, tmp_path):
        params = TalkParams.from_config(ConfigLoader(tmp_path / "nope.toml"))

        assert params.voice_ms == 30000
        assert params.detect_ms == 2000
        assert params.lookback_ms == 1000
        assert params.final_threshold == 0.6
        assert params.partial_threshold == 0.8
        assert params.max_chars == 100
        assert params.capture_id == -1
        assert params.model == "base.en"
        assert params.final_url == "http://localhost:8888/speech"
        assert params.partial_url == "http://localhost:8888/partial"
        assert params.post_enabled
        params.validate()

    def test_file_values(self, tmp_path):
        path = tmp_path / "config.toml"
        path.write_text("[talk.segmentation]\nvoice_ms = 10000\n\n[talk.transport]\nenabled = false\n")

        params = TalkParams.from_config(ConfigLoader(path))

        assert params.voice_ms == 10000
        assert not params.post_enabled


class TestOverrides:
    def test_none_keeps_value(self):
        params = TalkParams().with_overrides(voice_ms=None, model="small")

        assert params.voice_ms == 30000
        assert params.model == "small"

    def test_unknown_key(self):
        with pytest.raises(ConfigError, match="Unknown parameter"):
            TalkParams().with_overrides(colour="blue")

    def test_sample_conversion(self):
        params = TalkParams(voice_ms=1500)
        assert params.ms_to_samples(250) == 4000
        assert params.max_voice_samples == 24000


class TestValidate:
    @pytest.mark.parametrize("language", ["en", "de", "auto", "ja"])
    def test_known_languages(self, language):
        TalkParams(language=language).validate()

    def test_unknown_language(self):
        with pytest.raises(ConfigError) as exc_info:
            TalkParams(language="xx").validate()
        assert exc_info.value.key == "language"

    @pytest.mark.parametrize(
        "overrides,key",
        [
            ({"voice_ms": 0}, "voice_ms"),
            ({"threads": -1}, "threads"),
            ({"max_chars": 0}, "max_chars"),
            ({"final_threshold": 0.0}, "final_threshold"),
            ({"partial_threshold": 1.5}, "partial_threshold"),
            ({"final_threshold": 0.9, "partial_threshold": 0.8}, "partial_threshold"),
            ({"detect_ms": 1000, "lookback_ms": 1000}, "detect_ms"),
            ({"audio_ms": 1000}, "audio_ms"),
            ({"output_format": "xml"}, "output_format"),
        ],
    )
    def test_invalid(self, overrides, key):
        with pytest.raises(ConfigError) as exc_info:
            TalkParams(**overrides).validate()
        assert exc_info.value.key == key

    def test_equal_thresholds_are_valid(self):
        TalkParams(final_threshold=0.7, partial_threshold=0.7).validate()


class TestForModel:
    def test_english_only_model_forces_english(self):
        params = TalkParams(model="base.en", language="de", translate=True).for_model()

        assert params.language == "en"
        assert not params.translate

    def test_english_only_model_untouched_when_english(self):
        params = TalkParams(model="base.en", language="en")
        assert params.for_model() is params

    def test_multilingual_model_keeps_options(self):
        params = TalkParams(model="small", language="de", translate=True).for_model()

        assert params.language == "de"
        assert params.translate
