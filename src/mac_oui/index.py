"""
Address-range and manufacturer-name indices over OUI assignment records.

Both indices are filled by `build()` in a single pass over the raw rows and
are read-only afterwards.
"""
from __future__ import annotations

import logging
from bisect import bisect_left, bisect_right
from collections.abc import Iterable, Iterator
from datetime import date

from .address import address_range, format_mac, is_private, parse_prefix
from .errors import (
    AddressError,
    BuildWarning,
    DuplicatePrefix,
    OverlapRejected,
    SkippedRow,
)
from .records import AssignmentRecord, BlockSize, RawRow, normalize_name

log = logging.getLogger(__name__)


class RangeIndex:
    """
    Sorted, non-overlapping [low, high] ranges mapped to records.

    Parallel lists keep lows, highs and records in increasing `low` order so a
    point lookup is a single bisect.
    """

    def __init__(self) -> None:
        self._lows: list[int] = []
        self._highs: list[int] = []
        self._records: list[AssignmentRecord] = []

    def __len__(self) -> int:
        return len(self._records)

    def __iter__(self) -> Iterator[AssignmentRecord]:
        return iter(self._records)

    def lookup(self, address: int) -> AssignmentRecord | None:
        i = bisect_right(self._lows, address) - 1
        if i >= 0 and address <= self._highs[i]:
            return self._records[i]
        return None

    def records(self) -> tuple[AssignmentRecord, ...]:
        return tuple(self._records)

    def _slot(self, low: int, high: int) -> tuple[int, bool, int | None]:
        """
        Returns (insertion index, exact duplicate?, index of an overlapping range).
        """
        i = bisect_left(self._lows, low)
        n = len(self._lows)
        if i < n and self._lows[i] == low and self._highs[i] == high:
            return i, True, None
        if i > 0 and self._highs[i - 1] >= low:
            return i, False, i - 1
        if i < n and self._lows[i] <= high:
            return i, False, i
        return i, False, None

    def _record_at(self, i: int) -> AssignmentRecord:
        return self._records[i]

    def _insert(self, i: int, low: int, high: int, record: AssignmentRecord) -> None:
        self._lows.insert(i, low)
        self._highs.insert(i, high)
        self._records.insert(i, record)

    def _replace(self, i: int, record: AssignmentRecord) -> AssignmentRecord:
        old = self._records[i]
        self._records[i] = record
        return old


class NameIndex:
    """Normalized company name -> records in insertion order."""

    def __init__(self) -> None:
        self._by_name: dict[str, list[AssignmentRecord]] = {}

    def __len__(self) -> int:
        return len(self._by_name)

    def __contains__(self, name: object) -> bool:
        return isinstance(name, str) and normalize_name(name) in self._by_name

    def lookup(self, name: str) -> tuple[AssignmentRecord, ...]:
        return tuple(self._by_name.get(normalize_name(name), ()))

    def names(self) -> list[str]:
        # Display name of the first record seen for each vendor
        return [recs[0].company_name for recs in self._by_name.values()]

    def _add(self, record: AssignmentRecord) -> None:
        self._by_name.setdefault(normalize_name(record.company_name), []).append(record)

    def _discard(self, record: AssignmentRecord) -> None:
        key = normalize_name(record.company_name)
        recs = self._by_name.get(key, [])
        for i, r in enumerate(recs):
            if r is record:
                del recs[i]
                break
        if not recs:
            self._by_name.pop(key, None)


# -------------------------------------------------
# Row parsing
# -------------------------------------------------

_REQUIRED = ("prefix", "company_name", "block_size", "date_created", "date_updated")


class _RowDefect(Exception):
    pass


def _parse_date(field: str, text: str) -> date:
    try:
        return date.fromisoformat(text.strip())
    except ValueError:
        raise _RowDefect(f"bad {field} {text!r}") from None


def _parse_flag(text: str | None) -> bool:
    return (text or "").strip().lower() in {"1", "true", "yes", "y"}


def _parse_row(row: RawRow) -> AssignmentRecord:
    for field in _REQUIRED:
        value = getattr(row, field)
        if value is None or not value.strip():
            raise _RowDefect(f"missing {field}")

    try:
        block_size = BlockSize.parse(row.block_size)
    except ValueError as e:
        raise _RowDefect(str(e)) from None

    try:
        prefix, bits = parse_prefix(row.prefix, block_size)
    except AddressError as e:
        raise _RowDefect(str(e)) from None

    return AssignmentRecord(
        oui=row.prefix.strip(),
        oui_prefix=prefix,
        prefix_bits=bits,
        is_private=is_private(prefix),
        details_private=_parse_flag(row.is_private),
        company_name=row.company_name.strip(),
        company_address=(row.company_address or "").strip(),
        country_code=(row.country_code or "").strip().upper(),
        block_size=block_size,
        date_created=_parse_date("date_created", row.date_created),
        date_updated=_parse_date("date_updated", row.date_updated),
    )


# -------------------------------------------------
# Builder
# -------------------------------------------------

def _warn(warnings: list[BuildWarning], w: BuildWarning) -> None:
    log.debug("%s: %s", type(w).__name__, w)
    warnings.append(w)


def build(rows: Iterable[RawRow]) -> tuple[RangeIndex, NameIndex, list[BuildWarning]]:
    """
    Build both indices from raw rows.

    - malformed rows are skipped (SkippedRow)
    - a range identical to an existing one replaces it (DuplicatePrefix)
    - a range that partially overlaps an existing one is dropped (OverlapRejected)
    """
    ranges = RangeIndex()
    names = NameIndex()
    warnings: list[BuildWarning] = []
    lines: list[int] = []  # source line per stored range, parallel to ranges

    for row in rows:
        try:
            record = _parse_row(row)
        except _RowDefect as e:
            _warn(warnings, SkippedRow(line=row.line, reason=str(e)))
            continue

        low, high = address_range(record.oui_prefix, record.prefix_bits)
        i, exact, clash = ranges._slot(low, high)

        if exact:
            replaced = ranges._replace(i, record)
            _warn(
                warnings,
                DuplicatePrefix(
                    line=row.line,
                    reason=f"{record.oui} replaces entry from line {lines[i]} ({replaced.company_name})",
                    replaced_line=lines[i],
                ),
            )
            names._discard(replaced)
            lines[i] = row.line
            names._add(record)
            continue

        if clash is not None:
            kept = ranges._record_at(clash)
            _warn(
                warnings,
                OverlapRejected(
                    line=row.line,
                    reason=(
                        f"{record.oui} [{format_mac(low)}-{format_mac(high)}] overlaps "
                        f"{kept.oui} from line {lines[clash]}"
                    ),
                    kept_line=lines[clash],
                ),
            )
            continue

        ranges._insert(i, low, high, record)
        lines.insert(i, row.line)
        names._add(record)

    return ranges, names, warnings
