"""Key extraction from raw page content."""

from __future__ import annotations

import re

KEY_PATTERN = re.compile(r"<code>([A-Za-z0-9-]+)</code>")


class KeyParser:
    """Pull ``<code>…</code>`` wrapped keys out of fetched pages."""

    def __init__(self, pattern: re.Pattern[str] = KEY_PATTERN) -> None:
        self.pattern = pattern

    def extract(self, text: str) -> list[str]:
        """Return every captured key in document order, duplicates included."""

        if not text:
            return []
        return [match.group(1) for match in self.pattern.finditer(text)]


def extract_keys(text: str) -> list[str]:
    return KeyParser().extract(text)


__all__ = ["KEY_PATTERN", "KeyParser", "extract_keys"]
