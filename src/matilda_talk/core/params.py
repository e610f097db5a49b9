import dataclasses
import logging
from dataclasses import dataclass
from typing import Any

from .config import ConfigLoader
from .languages import is_english_only_model, is_known_language
from ..streaming.types import ConfigError

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class TalkParams:
    """Resolved parameters for a talk session (config file + CLI overrides)."""

    # Engine
    threads: int = 4
    max_tokens: int = 32
    audio_ctx: int = 0
    speed_up: bool = False
    translate: bool = False
    language: str = "en"
    model: str = "base.en"
    backend: str = "faster_whisper"

    # Capture
    sample_rate: int = 16000
    capture_id: int = -1
    audio_ms: int = 60000

    # Segmentation
    voice_ms: int = 30000
    detect_ms: int = 2000
    poll_interval_ms: int = 10
    max_chars: int = 100
    tighten_chars: int = 60

    # Voice activity
    lookback_ms: int = 1000
    final_threshold: float = 0.6
    partial_threshold: float = 0.8
    freq_cutoff: float = 100.0
    print_energy: bool = False

    # Output
    final_url: str = "http://localhost:8888/speech"
    partial_url: str = "http://localhost:8888/partial"
    post_enabled: bool = True
    output_format: str = "text"
    debug: bool = False

    @classmethod
    def from_config(cls, config: ConfigLoader) -> "TalkParams":
        d = cls()
        return cls(
            threads=int(config.get("whisper.threads", d.threads)),
            max_tokens=int(config.get("whisper.max_tokens", d.max_tokens)),
            audio_ctx=int(config.get("whisper.audio_ctx", d.audio_ctx)),
            speed_up=bool(config.get("whisper.speed_up", d.speed_up)),
            translate=bool(config.get("whisper.translate", d.translate)),
            language=str(config.get("whisper.language", d.language)),
            model=config.whisper_model,
            backend=config.transcription_backend,
            sample_rate=config.audio_sample_rate,
            capture_id=int(config.get("audio.capture_id", d.capture_id)),
            audio_ms=int(config.get("audio.buffer_ms", d.audio_ms)),
            voice_ms=int(config.get("segmentation.voice_ms", d.voice_ms)),
            detect_ms=int(config.get("segmentation.detect_ms", d.detect_ms)),
            poll_interval_ms=int(config.get("segmentation.poll_interval_ms", d.poll_interval_ms)),
            max_chars=int(config.get("segmentation.max_chars", d.max_chars)),
            tighten_chars=int(config.get("segmentation.tighten_chars", d.tighten_chars)),
            lookback_ms=int(config.get("vad.lookback_ms", d.lookback_ms)),
            final_threshold=float(config.get("vad.final_threshold", d.final_threshold)),
            partial_threshold=float(config.get("vad.partial_threshold", d.partial_threshold)),
            freq_cutoff=float(config.get("vad.freq_cutoff", d.freq_cutoff)),
            print_energy=bool(config.get("vad.print_energy", d.print_energy)),
            final_url=str(config.get("transport.final_url", d.final_url)),
            partial_url=str(config.get("transport.partial_url", d.partial_url)),
            post_enabled=bool(config.get("transport.enabled", d.post_enabled)),
            output_format=str(config.get("output.format", d.output_format)),
        )

    def with_overrides(self, **overrides: Any) -> "TalkParams":
        """Return a copy with every non-None override applied."""
        known = {f.name for f in dataclasses.fields(self)}
        unknown = set(overrides) - known
        if unknown:
            raise ConfigError(f"Unknown parameter(s): {', '.join(sorted(unknown))}")
        return dataclasses.replace(self, **{k: v for k, v in overrides.items() if v is not None})

    def ms_to_samples(self, ms: int) -> int:
        return self.sample_rate * ms // 1000

    @property
    def max_voice_samples(self) -> int:
        """Sample count of a full voice window; the carryover bound."""
        return self.ms_to_samples(self.voice_ms)

    def validate(self) -> None:
        """Raise ConfigError on the first unusable value."""
        if not is_known_language(self.language):
            raise ConfigError(f"Unknown language '{self.language}'", key="language")

        for name in ("threads", "voice_ms", "audio_ms", "detect_ms", "lookback_ms", "max_tokens", "sample_rate"):
            if getattr(self, name) <= 0:
                raise ConfigError(f"{name} must be positive, got {getattr(self, name)}", key=name)

        if self.max_chars <= 0:
            raise ConfigError(f"max_chars must be positive, got {self.max_chars}", key="max_chars")
        if self.poll_interval_ms < 0:
            raise ConfigError("poll_interval_ms must not be negative", key="poll_interval_ms")
        if self.audio_ctx < 0:
            raise ConfigError("audio_ctx must not be negative", key="audio_ctx")

        for name in ("final_threshold", "partial_threshold"):
            value = getattr(self, name)
            if not 0.0 < value <= 1.0:
                raise ConfigError(f"{name} must be in (0, 1], got {value}", key=name)
        if self.partial_threshold < self.final_threshold:
            raise ConfigError(
                f"partial_threshold ({self.partial_threshold}) must not be stricter than "
                f"final_threshold ({self.final_threshold})",
                key="partial_threshold",
            )

        if self.detect_ms <= self.lookback_ms:
            raise ConfigError(
                f"detect_ms ({self.detect_ms}) must be longer than lookback_ms ({self.lookback_ms})",
                key="detect_ms",
            )
        if self.audio_ms < self.voice_ms:
            raise ConfigError(
                f"audio_ms ({self.audio_ms}) must hold at least one voice window ({self.voice_ms})",
                key="audio_ms",
            )

        if self.output_format not in ("text", "json"):
            raise ConfigError(f"Unknown output format '{self.output_format}'", key="output_format")

    def for_model(self) -> "TalkParams":
        """Drop language and translation options an English-only model cannot honour."""
        if not is_english_only_model(self.model):
            return self
        if self.language == "en" and not self.translate:
            return self
        logger.warning(
            f"Model {self.model} is not multilingual, ignoring language ({self.language}) and translation options"
        )
        return dataclasses.replace(self, language="en", translate=False)
