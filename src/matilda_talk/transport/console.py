"""Console output of transcript events.

Text mode prints finals to stdout and partials to stderr, so stdout can be
piped as a clean transcript. JSON mode prints one object per event to stdout.
"""

import json
import sys
import time
from typing import TextIO

from ..streaming.types import Channel


class ConsoleTransport:
    """Print transcript events instead of (or alongside) posting them."""

    def __init__(self, output_format: str = "text", stdout: TextIO | None = None, stderr: TextIO | None = None):
        self.output_format = output_format
        self.stdout = stdout or sys.stdout
        self.stderr = stderr or sys.stderr

    async def post(self, text: str, channel: Channel) -> bool:
        if self.output_format == "json":
            output = {
                "type": "transcription",
                "channel": channel.value,
                "text": text,
                "timestamp": time.time(),
            }
            print(json.dumps(output), file=self.stdout, flush=True)
        elif channel == Channel.FINAL:
            print(text, file=self.stdout, flush=True)
        else:
            print(f"... {text}", file=self.stderr, flush=True)
        return True

    async def close(self) -> None:
        return None
