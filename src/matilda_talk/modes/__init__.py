"""Matilda Talk operation modes."""

from .talk import TalkMode

__all__ = ["TalkMode"]
