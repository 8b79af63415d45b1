"""Screenplay-specific utility functions."""

from __future__ import annotations

import re

_SCENE_TYPE_PREFIXES = (
    ("INT./EXT.", "INT/EXT"),
    ("EXT./INT.", "INT/EXT"),
    ("INT/EXT", "INT/EXT"),
    ("EXT/INT", "INT/EXT"),
    ("I/E.", "INT/EXT"),
    ("I/E ", "INT/EXT"),
    ("INT.", "INT"),
    ("INT ", "INT"),
    ("EXT.", "EXT"),
    ("EXT ", "EXT"),
    ("EST.", "EST"),
    ("EST ", "EST"),
)

TIME_INDICATORS = (
    "MOMENTS LATER",
    "CONTINUOUS",
    "AFTERNOON",
    "MORNING",
    "EVENING",
    "SUNRISE",
    "SUNSET",
    "NIGHT",
    "LATER",
    "DAWN",
    "DUSK",
    "NOON",
    "DAY",
)

_CUE_EXTENSION = re.compile(r"\s*\(.*?\)")


class ScreenplayUtils:
    """Utility functions for screenplay processing."""

    @staticmethod
    def split_scene_type(heading: str) -> tuple[str, str]:
        """Split the INT/EXT prefix off a scene heading.

        Args:
            heading: Scene heading text (e.g., "INT. COFFEE SHOP - DAY")

        Returns:
            Tuple of (scene_type, rest); scene_type is "" when absent.
        """
        heading_upper = heading.upper()
        for prefix, scene_type in _SCENE_TYPE_PREFIXES:
            if heading_upper.startswith(prefix):
                return scene_type, heading[len(prefix) :].strip(" .")
        return "", heading.strip()

    @staticmethod
    def extract_location(heading: str) -> str | None:
        """Extract location from scene heading.

        Args:
            heading: Scene heading text (e.g., "INT. COFFEE SHOP - DAY")

        Returns:
            Extracted location or None
        """
        if not heading:
            return None

        _, rest = ScreenplayUtils.split_scene_type(heading)

        if " - " in rest:
            location, _ = rest.rsplit(" - ", 1)
            location = location.strip()
            return location if location else None

        if rest.startswith("- "):
            return None

        return rest if rest else None

    @staticmethod
    def extract_time(heading: str) -> str | None:
        """Extract time of day from scene heading.

        Args:
            heading: Scene heading text (e.g., "INT. COFFEE SHOP - DAY")

        Returns:
            Extracted time or None
        """
        if not heading or " - " not in heading:
            return None

        last_part = heading.upper().rsplit(" - ", 1)[-1]
        if re.search(r"\bMIDNIGHT\b", last_part):
            return "NIGHT"

        for indicator in TIME_INDICATORS:
            if re.search(rf"\b{re.escape(indicator)}\b", last_part):
                return indicator

        return None

    @staticmethod
    def parse_scene_heading(heading: str) -> tuple[str, str | None, str | None]:
        """Parse a scene heading into its components.

        Args:
            heading: Scene heading text (e.g., "INT. COFFEE SHOP - DAY")

        Returns:
            Tuple of (scene_type, location, time_of_day)
        """
        if not heading:
            return "", None, None

        scene_type, _ = ScreenplayUtils.split_scene_type(heading)
        return (
            scene_type,
            ScreenplayUtils.extract_location(heading),
            ScreenplayUtils.extract_time(heading),
        )

    @staticmethod
    def character_name(cue: str) -> str:
        """Reduce a cue to the bare character name.

        Extensions such as ``(V.O.)`` and a dual marker are removed.
        """
        name = _CUE_EXTENSION.sub("", cue).rstrip("^ ").strip()
        return name.upper()
