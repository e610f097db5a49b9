#!/usr/bin/env python3
"""CLI Smoke Tests - "Does it still work?" tests

These tests detect when the app is fundamentally broken:
- Import errors
- Config file corruption
- Basic CLI functionality
- Startup crashes

NOT testing edge cases or complex logic - just "can the app start?"
"""

import sys
from unittest.mock import AsyncMock, MagicMock, patch

import pytest
from click.testing import CliRunner

from matilda_talk.main import main, resolve_params
from matilda_talk.streaming.types import ConfigError


@pytest.fixture
def runner():
    return CliRunner()


class TestCLIImports:
    """Test that core CLI components can be imported without crashing."""

    def test_mode_class_import(self):
        from matilda_talk.modes import TalkMode

        assert TalkMode is not None

    def test_package_exports(self):
        import matilda_talk

        assert matilda_talk.__version__
        assert callable(matilda_talk.split_sentences)
        assert matilda_talk.TalkParams().voice_ms == 30000


class TestCLIBasics:
    def test_help(self, runner):
        result = runner.invoke(main, ["--help"])

        assert result.exit_code == 0
        assert "--vad-thold" in result.output
        assert "--url-final" in result.output

    def test_version(self, runner):
        result = runner.invoke(main, ["--version"])

        assert result.exit_code == 0

    def test_unknown_language_exits_1(self, runner):
        with patch("matilda_talk.main.async_main_worker", new=AsyncMock()) as worker:
            result = runner.invoke(main, ["-l", "xx", "-m", "small", "--backend", "dummy"])

        assert result.exit_code == 1
        worker.assert_not_called()

    def test_unknown_language_with_default_model_exits_1(self, runner):
        with patch("matilda_talk.main.async_main_worker", new=AsyncMock()) as worker:
            result = runner.invoke(main, ["-l", "xx"])

        assert result.exit_code == 1
        worker.assert_not_called()

    def test_bad_detection_window_exits_1(self, runner):
        with patch("matilda_talk.main.async_main_worker", new=AsyncMock()):
            result = runner.invoke(main, ["--detect-ms", "500", "--lookback-ms", "1000"])

        assert result.exit_code == 1

    def test_options_reach_talk_mode(self, runner):
        with patch("matilda_talk.main.async_main_worker", new=AsyncMock()) as worker:
            result = runner.invoke(
                main,
                [
                    "--backend", "dummy",
                    "--no-post",
                    "--json",
                    "-t", "2",
                    "--vad-thold", "0.5",
                    "--vad-thold-partial", "0.9",
                    "--max-chars", "80",
                    "-c", "3",
                    "--url-final", "http://example.invalid/final",
                ],
            )

        assert result.exit_code == 0, result.output
        params = worker.call_args.args[0]
        assert params.backend == "dummy"
        assert params.post_enabled is False
        assert params.output_format == "json"
        assert params.threads == 2
        assert params.final_threshold == 0.5
        assert params.partial_threshold == 0.9
        assert params.max_chars == 80
        assert params.capture_id == 3
        assert params.final_url == "http://example.invalid/final"
        # Flags not given keep config values
        assert params.speed_up is False
        assert params.voice_ms == 30000

    def test_list_devices(self, runner):
        devices = [{"index": 0, "name": "USB Mic", "channels": 1, "default_sample_rate": 16000.0}]
        with patch.dict(sys.modules, {"pyaudio": MagicMock()}):
            with patch("matilda_talk.audio.capture.list_input_devices", return_value=devices):
                result = runner.invoke(main, ["--list-devices"])

        assert result.exit_code == 0
        assert "USB Mic" in result.output


class TestConfigSystem:
    """Test that configuration resolution works without crashing."""

    def test_defaults_resolve(self):
        params = resolve_params(None)

        assert params.model == "base.en"
        assert params.language == "en"

    def test_config_file(self, tmp_path):
        path = tmp_path / "talk.toml"
        path.write_text('[talk.whisper]\nmodel = "small"\nlanguage = "de"\n')

        params = resolve_params(str(path))

        assert params.model == "small"
        assert params.language == "de"

    def test_english_only_model_drops_translation(self):
        params = resolve_params(None, model="tiny.en", language="fr", translate=True)

        assert params.language == "en"
        assert params.translate is False

    def test_unknown_language_rejected_before_model_fallback(self):
        with pytest.raises(ConfigError) as exc_info:
            resolve_params(None, language="xx")

        assert exc_info.value.key == "language"

    def test_invalid_config_raises(self):
        with pytest.raises(ConfigError):
            resolve_params(None, final_threshold=0.9, partial_threshold=0.5)
