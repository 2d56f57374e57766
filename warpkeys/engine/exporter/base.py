"""Exporter Service Provider Interface."""

from __future__ import annotations

from abc import ABC, abstractmethod
from pathlib import Path
from typing import Sequence


class FilesystemError(Exception):
    """Creating the output directory or writing an artifact failed."""

    def __init__(self, path: Path, reason: str) -> None:
        super().__init__(f"{path}: {reason}")
        self.path = path
        self.reason = reason


class BaseExporter(ABC):
    """Uniform exporter contract for key artifacts."""

    @abstractmethod
    def export(self, name: str, keys: Sequence[str]) -> Path:
        """Persist one named artifact and return where it went."""

    def export_many(self, artifacts: dict[str, Sequence[str]]) -> list[Path]:
        return [self.export(name, keys) for name, keys in artifacts.items()]


__all__ = ["BaseExporter", "FilesystemError"]
