"""Clipboard and selection-driven bulk file operations."""

from .clipboard import Clipboard, ClipboardOperation
from .engine import OperationEngine, OperationReport, available_path, validate_name

__all__ = [
    "Clipboard",
    "ClipboardOperation",
    "OperationEngine",
    "OperationReport",
    "available_path",
    "validate_name",
]
