from __future__ import annotations

import logging
from collections import Counter
from collections.abc import Iterable
from functools import lru_cache
from importlib import resources
from pathlib import Path

from .address import parse_mac
from .errors import BuildWarning, EmptyDatasetError, SkippedRow
from .index import NameIndex, RangeIndex, build
from .records import AssignmentRecord, BlockSize, RawRow
from .source import read_rows, read_rows_text

log = logging.getLogger(__name__)

DEFAULT_DATASET = "data/oui.csv"


class Database:
    """
    Immutable OUI database: an address-range index plus a manufacturer index.

    Build with `Database.build_from_rows()`, `from_csv_file()` or
    `default_database()`. Safe to share between threads once built.
    """

    def __init__(
        self,
        ranges: RangeIndex,
        names: NameIndex,
        warnings: Iterable[BuildWarning] = (),
    ) -> None:
        self._ranges = ranges
        self._names = names
        self.warnings: tuple[BuildWarning, ...] = tuple(warnings)

    @classmethod
    def build_from_rows(cls, rows: Iterable[RawRow]) -> Database:
        ranges, names, warnings = build(rows)
        if not len(ranges):
            skipped = sum(1 for w in warnings if isinstance(w, SkippedRow))
            raise EmptyDatasetError(skipped)

        log.info("Built OUI database: %d records, %d warnings", len(ranges), len(warnings))
        return cls(ranges, names, warnings)

    @classmethod
    def from_csv_text(cls, text: str) -> Database:
        return cls.build_from_rows(read_rows_text(text))

    @classmethod
    def from_csv_file(cls, path: str | Path) -> Database:
        log.info("Loading OUI database from %s", path)
        return cls.build_from_rows(read_rows(path))

    # -------------------------------------------------
    # Queries
    # -------------------------------------------------

    def lookup(self, address_text: str) -> AssignmentRecord | None:
        """
        Resolve a MAC address to the assignment block containing it.
        Raises AddressError when the text is not a MAC address.
        """
        return self._ranges.lookup(parse_mac(address_text))

    def lookup_address(self, address: int) -> AssignmentRecord | None:
        return self._ranges.lookup(address)

    def lookup_by_manufacturer(self, name: str) -> tuple[AssignmentRecord, ...]:
        return self._names.lookup(name)

    def search_manufacturers(self, fragment: str) -> tuple[AssignmentRecord, ...]:
        """Case-insensitive substring match over company names."""
        needle = fragment.strip().casefold()
        return tuple(r for r in self._ranges if needle in r.company_name.casefold())

    def all_records(self) -> tuple[AssignmentRecord, ...]:
        return self._ranges.records()

    # -------------------------------------------------
    # Statistics
    # -------------------------------------------------

    @property
    def total_records(self) -> int:
        return len(self._ranges)

    def __len__(self) -> int:
        return len(self._ranges)

    def unique_manufacturers(self) -> list[str]:
        return sorted(self._names.names())

    def unique_ouis(self) -> list[str]:
        return sorted({r.oui for r in self._ranges})

    def block_size_counts(self) -> dict[BlockSize, int]:
        counts = Counter(r.block_size for r in self._ranges)
        return {b: counts[b] for b in BlockSize if counts[b]}


@lru_cache(maxsize=1)
def default_database() -> Database:
    """The bundled dataset, loaded once per process."""
    text = resources.files("mac_oui").joinpath(DEFAULT_DATASET).read_text(encoding="utf-8")
    return Database.from_csv_text(text)
