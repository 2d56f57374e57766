"""Exporter SPI and implementations."""

from .base import BaseExporter, FilesystemError
from .file_exporter import KeyFileExporter

__all__ = ["BaseExporter", "FilesystemError", "KeyFileExporter"]
