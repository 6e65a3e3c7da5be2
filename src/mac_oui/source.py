from __future__ import annotations

import csv
import io
import re
from pathlib import Path

from .errors import SourceError
from .records import RawRow

# Normalized header -> RawRow field. Covers both `Prefix,BlockSize,...` and the
# macaddress.io export (`oui,assignmentBlockSize,...`).
_COLUMNS = {
    "prefix": "prefix",
    "oui": "prefix",
    "isprivate": "is_private",
    "private": "is_private",
    "companyname": "company_name",
    "company": "company_name",
    "companyaddress": "company_address",
    "countrycode": "country_code",
    "country": "country_code",
    "blocksize": "block_size",
    "assignmentblocksize": "block_size",
    "datecreated": "date_created",
    "dateupdated": "date_updated",
}

_FIELDS = (
    "prefix",
    "is_private",
    "company_name",
    "company_address",
    "country_code",
    "block_size",
    "date_created",
    "date_updated",
)


def _header_key(name: str) -> str:
    return re.sub(r"[^a-z]", "", name.lower())


def read_rows_text(text: str) -> list[RawRow]:
    """
    Parse OUI CSV text into RawRow objects.
    Line numbers are 1-based and count the header line.
    """
    reader = csv.reader(io.StringIO(text))
    try:
        header = next(reader)
    except StopIteration:
        raise SourceError("empty OUI csv") from None

    positions: dict[str, int] = {}
    for pos, name in enumerate(header):
        field = _COLUMNS.get(_header_key(name))
        if field is not None and field not in positions:
            positions[field] = pos

    if "prefix" not in positions:
        raise SourceError(f"no prefix/oui column in header: {header}")

    rows: list[RawRow] = []
    for cells in reader:
        line = reader.line_num
        if not any(c.strip() for c in cells):
            continue
        values = {
            field: cells[positions[field]] if field in positions and positions[field] < len(cells) else None
            for field in _FIELDS
        }
        rows.append(RawRow(line=line, **values))
    return rows


def read_rows(path: str | Path) -> list[RawRow]:
    p = Path(path)
    try:
        text = p.read_text(encoding="utf-8-sig")
    except OSError as e:
        raise SourceError(f"could not open database file - {p}: {e}") from e
    except UnicodeDecodeError as e:
        raise SourceError(f"database file is not UTF-8 - {p}: {e}") from e
    return read_rows_text(text)
