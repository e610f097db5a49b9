"""Unit tests for transcript cleanup rules."""

import pytest

from matilda_talk.streaming.cleanup import (
    BRACKETED_ANNOTATIONS,
    DISALLOWED_CHARACTERS,
    LONE_PUNCTUATION,
    PARENTHESIZED_ANNOTATIONS,
    TRANSCRIPT_RULES,
    TRIM,
    TextRule,
    clean_transcript,
)


class TestRules:
    """Each rule on its own."""

    def test_trim(self):
        assert TRIM.apply("  hello world \n") == "hello world"

    def test_bracketed_annotations(self):
        assert BRACKETED_ANNOTATIONS.apply("[BLANK_AUDIO] hi [music]") == " hi "

    def test_bracketed_annotations_are_non_greedy(self):
        assert BRACKETED_ANNOTATIONS.apply("[a] keep [b]") == " keep "

    def test_parenthesized_annotations(self):
        assert PARENTHESIZED_ANNOTATIONS.apply("(static) hello (laughs)") == " hello "

    def test_disallowed_characters(self):
        assert DISALLOWED_CHARACTERS.apply('he said "hi" & left_now') == "he said hi  leftnow"

    def test_allowed_punctuation_survives(self):
        text = "Well, it's 5: yes - no? Fine. Wow!"
        assert DISALLOWED_CHARACTERS.apply(text) == text

    def test_unicode_letters_survive(self):
        assert DISALLOWED_CHARACTERS.apply("héllo wörld") == "héllo wörld"

    @pytest.mark.parametrize("text", [".", ",", "?", "!", ":", "'", "-"])
    def test_lone_punctuation(self, text):
        assert LONE_PUNCTUATION.apply(text) == ""

    def test_lone_punctuation_keeps_longer_text(self):
        assert LONE_PUNCTUATION.apply("..") == ".."
        assert LONE_PUNCTUATION.apply("a.") == "a."

    def test_custom_rule(self):
        import re

        rule = TextRule("shout", re.compile(r"!+"), "!")
        assert rule.apply("wow!!!") == "wow!"


class TestCleanTranscript:
    def test_annotations_are_stripped(self):
        assert clean_transcript("[noise] hello world (static)") == "hello world"

    def test_blank_audio_is_nothing(self):
        assert clean_transcript(" [BLANK_AUDIO]") == ""

    def test_lone_punctuation_after_cleanup(self):
        assert clean_transcript(" (music) . ") == ""

    def test_plain_text_unchanged(self):
        assert clean_transcript("Hello there, how are you?") == "Hello there, how are you?"

    def test_empty(self):
        assert clean_transcript("") == ""

    @pytest.mark.parametrize(
        "text",
        [
            "[noise] hello world (static)",
            " (music) . ",
            '  "quoted" text *with* symbols  ',
            "- Alice said hi- Bob replied",
        ],
    )
    def test_idempotent(self, text):
        once = clean_transcript(text)
        assert clean_transcript(once) == once

    def test_rule_order(self):
        names = [rule.name for rule in TRANSCRIPT_RULES]
        assert names == [
            "trim",
            "bracketed_annotations",
            "parenthesized_annotations",
            "disallowed_characters",
            "trim",
            "lone_punctuation",
        ]
