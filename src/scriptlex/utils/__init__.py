"""Utility helpers for ScriptLex."""

from .screenplay import ScreenplayUtils

__all__ = ["ScreenplayUtils"]
