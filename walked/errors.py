"""Error taxonomy shared by the session engine.

Every error carries a short ``message`` suitable for the status line.
None of these end the session; handlers record them and keep running.
"""

from __future__ import annotations

from pathlib import Path


class WalkedError(Exception):
    """Base class for all recoverable session errors."""

    @property
    def message(self) -> str:
        return str(self)


class InvalidBinding(WalkedError):
    def __init__(self, spec: str, reason: str) -> None:
        super().__init__(f"invalid binding {spec!r}: {reason}")
        self.spec = spec
        self.reason = reason


class UnknownAction(WalkedError):
    def __init__(self, name: str) -> None:
        super().__init__(f"unknown action {name!r}")
        self.name = name


class DuplicateBinding(WalkedError):
    """Two configured actions resolved to the same key; the first one keeps it."""

    def __init__(self, key: str, kept_action: str, rejected_action: str) -> None:
        super().__init__(f"{key} is bound to both {kept_action!r} and {rejected_action!r}; keeping {kept_action!r}")
        self.key = key
        self.kept_action = kept_action
        self.rejected_action = rejected_action


class CannotCloseLastPane(WalkedError):
    def __init__(self) -> None:
        super().__init__("cannot close the last pane")


class EmptyName(WalkedError):
    def __init__(self) -> None:
        super().__init__("name must not be empty")


class InvalidName(WalkedError):
    def __init__(self, name: str) -> None:
        super().__init__(f"invalid name {name!r}")
        self.name = name


class NameCollision(WalkedError):
    def __init__(self, path: Path) -> None:
        super().__init__(f"'{path}' already exists")
        self.path = path


class FilesystemError(WalkedError):
    """Failure reported by the filesystem collaborator for one path."""

    def __init__(self, op: str, path: Path, cause: BaseException) -> None:
        reason = cause.strerror if isinstance(cause, OSError) and cause.strerror else str(cause)
        super().__init__(f"{op} '{path}': {reason}")
        self.op = op
        self.path = path
        self.cause = cause


__all__ = [
    "WalkedError",
    "InvalidBinding",
    "UnknownAction",
    "DuplicateBinding",
    "CannotCloseLastPane",
    "EmptyName",
    "InvalidName",
    "NameCollision",
    "FilesystemError",
]
