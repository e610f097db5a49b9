"""Sentence splitting for finalized transcripts.

A finalized transcript is cut into sentences at runs of terminal punctuation.
Text after the last terminal run is held back as carryover and joined onto the
next finalized transcript, unless the transcript had no terminal punctuation
at all, in which case it is emitted whole.

Whisper marks a change of speaker with a leading "- ". Sentences are grouped
into speaker turns: a piece that does not open a new turn is merged into the
previous one.
"""

import re
from dataclasses import dataclass, field

ELLIPSIS = "..."
SPEAKER_MARKER = "- "

_DOUBLE_HYPHEN = re.compile(r"--")
_TERMINAL_RUN = re.compile(r"[.!?]+")
_SPEAKER_TURN = re.compile(r"(?=- )")


@dataclass
class SplitResult:
    """Sentences ready to emit plus the fragment held for the next final."""

    sentences: list[str] = field(default_factory=list)
    carryover: str = ""


def join_carryover(carryover: str, text: str) -> str:
    """Prepend an unfinished fragment to new text with an ellipsis separator."""
    if not carryover:
        return text
    return f"{carryover}{ELLIPSIS} {text}"


def strip_speaker_marker(text: str) -> str:
    text = text.strip()
    if text.startswith(SPEAKER_MARKER):
        text = text[len(SPEAKER_MARKER) :]
    return text.strip()


def _starts_turn(piece: str) -> bool:
    return piece.lstrip().startswith(SPEAKER_MARKER)


def _scan(text: str) -> tuple[list[str], str]:
    """Cut text after each terminal punctuation run.

    Returns the sentences and the unterminated remainder.
    """
    sentences: list[str] = []
    pos = 0
    while pos < len(text):
        match = _TERMINAL_RUN.search(text, pos)
        if match is None:
            if not sentences:
                # Never punctuated at all: still worth emitting
                return [text], ""
            return sentences, text[pos:]
        sentences.append(text[pos : match.end()])
        pos = match.end()
    return sentences, ""


def _group_turns(sentences: list[str]) -> list[str]:
    pieces = [piece for sentence in sentences for piece in _SPEAKER_TURN.split(sentence) if piece]

    turns: list[str] = []
    for piece in pieces:
        if turns and not _starts_turn(piece):
            turns[-1] = f"{turns[-1].rstrip()} {piece.strip()}"
        else:
            turns.append(piece)
    return turns


def split_sentences(text: str, carryover: str = "") -> SplitResult:
    """Split a finalized transcript into speaker-turn sentences.

    Args:
        text: Cleaned transcript of the final segment
        carryover: Unfinished fragment left by the previous final segment

    Returns:
        SplitResult with non-empty sentences and the new carryover fragment

    """
    combined = _DOUBLE_HYPHEN.sub(ELLIPSIS, join_carryover(carryover, text))

    sentences, remainder = _scan(combined)

    cleaned = [strip_speaker_marker(turn) for turn in _group_turns(sentences)]
    return SplitResult(
        sentences=[sentence for sentence in cleaned if sentence],
        carryover=strip_speaker_marker(remainder),
    )
