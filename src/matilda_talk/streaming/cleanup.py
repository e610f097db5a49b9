#!/usr/bin/env python3
"""Transcript cleanup rules.

Engine output is normalized by applying TRANSCRIPT_RULES in order. Each rule is
a pre-compiled pattern and its replacement, so rules can be tested one by one.
"""

import re
from dataclasses import dataclass
from typing import Pattern, Sequence


@dataclass(frozen=True)
class TextRule:
    """A named regex substitution."""

    name: str
    pattern: Pattern[str]
    replacement: str = ""

    def apply(self, text: str) -> str:
        return self.pattern.sub(self.replacement, text)


# Leading and trailing whitespace
TRIM = TextRule("trim", re.compile(r"^\s+|\s+$"))

# Sound annotations such as "[BLANK_AUDIO]" or "[music]"
BRACKETED_ANNOTATIONS = TextRule("bracketed_annotations", re.compile(r"\[.*?\]"))

# Parenthesized annotations such as "(static)" or "(laughs)"
PARENTHESIZED_ANNOTATIONS = TextRule("parenthesized_annotations", re.compile(r"\(.*?\)"))

# Everything except letters, digits, whitespace and . , ? ! : ' -
DISALLOWED_CHARACTERS = TextRule("disallowed_characters", re.compile(r"[^\w\s.,?!:'\-]|_"))

# A result that is nothing but one punctuation mark
LONE_PUNCTUATION = TextRule("lone_punctuation", re.compile(r"^[.,?!:'\-]$"))

TRANSCRIPT_RULES: tuple[TextRule, ...] = (
    TRIM,
    BRACKETED_ANNOTATIONS,
    PARENTHESIZED_ANNOTATIONS,
    DISALLOWED_CHARACTERS,
    TRIM,
    LONE_PUNCTUATION,
)


def clean_transcript(text: str, rules: Sequence[TextRule] = TRANSCRIPT_RULES) -> str:
    """Apply cleanup rules in order; an empty result means nothing was heard."""
    for rule in rules:
        text = rule.apply(text)
    return text
