"""Flat-file exporter writing one key per line."""

from __future__ import annotations

from pathlib import Path
from typing import Sequence

from .base import BaseExporter, FilesystemError


class KeyFileExporter(BaseExporter):
    """Write artifacts as newline-joined text files under ``output_dir``."""

    def __init__(self, output_dir: Path) -> None:
        self.output_dir = output_dir

    def ensure_dir(self) -> None:
        try:
            self.output_dir.mkdir(parents=True, exist_ok=True)
        except OSError as exc:
            raise FilesystemError(self.output_dir, f"cannot create directory: {exc}") from exc

    def export(self, name: str, keys: Sequence[str]) -> Path:
        self.ensure_dir()
        path = self.output_dir / name
        # No trailing newline after the last key.
        content = "\n".join(keys)
        try:
            path.write_text(content, encoding="utf-8")
        except OSError as exc:
            raise FilesystemError(path, f"cannot write file: {exc}") from exc
        return path


__all__ = ["KeyFileExporter"]
