from .address import format_mac, is_private, parse_mac, parse_prefix
from .database import Database, default_database
from .errors import (
    AddressError,
    BuildError,
    BuildWarning,
    DuplicatePrefix,
    EmptyDatasetError,
    MacOuiError,
    OverlapRejected,
    SkippedRow,
    SourceError,
)
from .records import AssignmentRecord, BlockSize, RawRow

__all__ = [
    "AddressError",
    "AssignmentRecord",
    "BlockSize",
    "BuildError",
    "BuildWarning",
    "Database",
    "DuplicatePrefix",
    "EmptyDatasetError",
    "MacOuiError",
    "OverlapRejected",
    "RawRow",
    "SkippedRow",
    "SourceError",
    "default_database",
    "format_mac",
    "is_private",
    "parse_mac",
    "parse_prefix",
]

