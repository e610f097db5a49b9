#!/usr/bin/env python3

import rich_click as click

# Configure rich-click to enable markup - MUST be first!
click.rich_click.USE_RICH_MARKUP = True

# Dracula theme colors
click.rich_click.STYLE_OPTION = "#ff79c6"
click.rich_click.STYLE_ARGUMENT = "#8be9fd"
click.rich_click.STYLE_COMMAND = "#50fa7b"
click.rich_click.STYLE_USAGE = "#bd93f9"
click.rich_click.STYLE_HELPTEXT = "#b3b8c0"

"""
Matilda Talk - live microphone transcription with partial and final transcripts
"""

import asyncio
import sys

from rich.console import Console
from rich.table import Table

from . import __version__
from .core.config import get_config, reset_config, setup_logging
from .core.params import TalkParams
from .streaming.types import TalkError

console = Console(stderr=True)


def _list_devices() -> None:
    from .audio.capture import list_input_devices

    table = Table(title="Capture devices")
    table.add_column("ID", justify="right", style="cyan")
    table.add_column("Name")
    table.add_column("Channels", justify="right")
    table.add_column("Rate", justify="right")
    for device in list_input_devices():
        table.add_row(
            str(device["index"]),
            device["name"],
            str(device["channels"]),
            f"{device['default_sample_rate']:.0f}",
        )
    Console().print(table)


def resolve_params(config_path: str | None, **overrides) -> TalkParams:
    """Config file values overlaid with command-line values, validated."""
    if config_path:
        reset_config()
    params = TalkParams.from_config(get_config(config_path)).with_overrides(**overrides)
    # Unknown values are fatal even when an English-only model would override them
    params.validate()
    return params.for_model()


@click.command(context_settings={"allow_extra_args": False, "help_option_names": ["-h", "--help"]})
@click.version_option(version=__version__, prog_name="Matilda Talk")
@click.option("-t", "--threads", type=int, help=" Number of engine threads")
@click.option("--voice-ms", type=int, help=" Voice window length in ms")
@click.option("--audio-ms", type=int, help=" Capture buffer length in ms")
@click.option("--detect-ms", type=int, help=" Window used for endpoint detection in ms")
@click.option("--lookback-ms", type=int, help=" Trailing part of the detection window compared against it, in ms")
@click.option("-c", "--capture", "capture_id", type=int, help=" Capture device ID (-1 for the system default)")
@click.option("--max-tokens", type=int, help=" Maximum tokens per transcription")
@click.option("--audio-ctx", type=int, help=" Audio context size (0 = all)")
@click.option("--vad-thold", "final_threshold", type=float, help=" Energy ratio that ends an utterance")
@click.option("--vad-thold-partial", "partial_threshold", type=float, help=" Loosest energy ratio for a mid-utterance pause")
@click.option("--freq-thold", "freq_cutoff", type=float, help=" High-pass frequency cutoff in Hz")
@click.option("--speed-up", is_flag=True, help=" Speed up audio by 2x before transcription")
@click.option("--translate", is_flag=True, help=" Translate from the source language to English")
@click.option("--print-energy", is_flag=True, help=" Log VAD energy levels")
@click.option("-l", "--language", help=" Spoken language code, or 'auto'")
@click.option("-m", "--model", help=" Whisper model (tiny.en, base.en, small, ...)")
@click.option("--backend", help=" Transcription backend (faster_whisper, dummy)")
@click.option("--url-final", "final_url", help=" Endpoint receiving finished sentences")
@click.option("--url-partial", "partial_url", help=" Endpoint receiving partial transcripts")
@click.option("--max-chars", type=int, help=" Force a final transcript past this many characters")
@click.option("--json", "as_json", is_flag=True, help=" Print JSON events instead of plain text")
@click.option("--no-post", is_flag=True, help=" Do not POST transcripts, print only")
@click.option("--config", "config_path", help=" Configuration file path")
@click.option("--debug", is_flag=True, help=" Enable detailed debug logging")
@click.option("--list-devices", is_flag=True, help=" List capture devices and exit")
def main(config_path, as_json, no_post, debug, list_devices, **options):
    """[bold cyan]Matilda Talk[/bold cyan] - live transcription that knows when you stopped talking

    \b
    Listens to a microphone, sends partial transcripts while you speak and
    complete sentences once you pause.

    \b
    [bold yellow]Quick Start:[/bold yellow]
    \b
      [green]matilda-talk --no-post[/green]                  [italic]# Print transcripts to the terminal[/italic]
      [green]matilda-talk -m small -l de --translate[/green]  [italic]# German speech, English text[/italic]
      [green]matilda-talk --json --no-post | jq .text[/green] [italic]# Pipeline JSON output[/italic]
      [green]matilda-talk --list-devices[/green]              [italic]# Find your microphone ID[/italic]
    """
    if list_devices:
        try:
            _list_devices()
        except Exception as e:
            console.print(f"[red]Error: {e}[/red]")
            sys.exit(1)
        return

    overrides = dict(options)
    for flag in ("speed_up", "translate", "print_energy"):
        overrides[flag] = overrides[flag] or None
    overrides["output_format"] = "json" if as_json else None
    overrides["post_enabled"] = False if no_post else None
    overrides["debug"] = debug or None

    try:
        params = resolve_params(config_path, **overrides)
    except TalkError as e:
        console.print(f"[red]Error: {e}[/red]")
        sys.exit(1)

    logger = setup_logging("matilda_talk", log_level="DEBUG" if params.debug else "INFO", include_console=params.debug)
    logger.info(
        f"Processing capture with {params.threads} threads, lang = {params.language}, "
        f"task = {'translate' if params.translate else 'transcribe'}, backend = {params.backend}"
    )

    asyncio.run(async_main_worker(params))


async def async_main_worker(params: TalkParams):
    """Run talk mode until interrupted; exit 1 on startup failure."""
    from .modes.talk import TalkMode

    try:
        mode = TalkMode(params)
        await mode.run()
    except KeyboardInterrupt:
        console.print("\n[yellow]Interrupted by user[/yellow]")
    except (TalkError, ImportError, ValueError, RuntimeError) as e:
        console.print(f"\n[red]Error: {e}[/red]")
        if params.debug:
            console.print_exception()
        sys.exit(1)


if __name__ == "__main__":
    main()
