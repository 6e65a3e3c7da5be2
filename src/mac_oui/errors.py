from __future__ import annotations

from dataclasses import dataclass


class MacOuiError(Exception):
    """Base class for every error raised by mac_oui."""


class AddressError(MacOuiError, ValueError):
    """Malformed MAC address or OUI prefix text."""

    def __init__(self, text: str, reason: str) -> None:
        super().__init__(f"malformed address {text!r}: {reason}")
        self.text = text
        self.reason = reason


class BuildError(MacOuiError):
    pass


class EmptyDatasetError(BuildError):
    def __init__(self, skipped: int = 0) -> None:
        super().__init__(f"no usable rows in dataset ({skipped} skipped)")
        self.skipped = skipped


class SourceError(MacOuiError):
    """The record source could not be read as an OUI table."""


# -------------------------------------------------
# Build warnings (recorded, never raised)
# -------------------------------------------------

@dataclass(frozen=True)
class BuildWarning:
    line: int
    reason: str

    def __str__(self) -> str:
        return f"line {self.line}: {self.reason}"


@dataclass(frozen=True)
class SkippedRow(BuildWarning):
    pass


@dataclass(frozen=True)
class DuplicatePrefix(BuildWarning):
    replaced_line: int = 0


@dataclass(frozen=True)
class OverlapRejected(BuildWarning):
    kept_line: int = 0
