from __future__ import annotations

import enum
from dataclasses import dataclass
from datetime import date

from .address import address_range, format_mac


class BlockSize(enum.Enum):
    """IEEE assignment block types and the prefix width each one grants."""

    MA_L = "MA-L"
    MA_M = "MA-M"
    MA_S = "MA-S"
    IAB = "IAB"
    CID = "CID"

    @property
    def prefix_bits(self) -> int:
        return _PREFIX_BITS[self]

    @classmethod
    def parse(cls, label: str) -> BlockSize:
        key = label.strip().upper().replace("_", "-")
        for member in cls:
            if member.value == key:
                return member
        raise ValueError(f"unknown block size {label!r}")


_PREFIX_BITS = {
    BlockSize.MA_L: 24,
    BlockSize.MA_M: 28,
    BlockSize.MA_S: 36,
    BlockSize.IAB: 36,
    BlockSize.CID: 24,
}


def normalize_name(name: str) -> str:
    return name.strip().casefold()


@dataclass(frozen=True)
class RawRow:
    """One unparsed row as handed over by a record source."""

    prefix: str | None
    is_private: str | None
    company_name: str | None
    company_address: str | None
    country_code: str | None
    block_size: str | None
    date_created: str | None
    date_updated: str | None
    line: int = 0


@dataclass(frozen=True)
class AssignmentRecord:
    oui: str
    oui_prefix: int
    prefix_bits: int
    is_private: bool
    details_private: bool
    company_name: str
    company_address: str
    country_code: str
    block_size: BlockSize
    date_created: date
    date_updated: date

    @property
    def low(self) -> int:
        return address_range(self.oui_prefix, self.prefix_bits)[0]

    @property
    def high(self) -> int:
        return address_range(self.oui_prefix, self.prefix_bits)[1]

    def to_dict(self) -> dict[str, object]:
        return {
            "oui": self.oui,
            "range": [format_mac(self.low), format_mac(self.high)],
            "prefix_bits": self.prefix_bits,
            "is_private": self.is_private,
            "details_private": self.details_private,
            "company_name": self.company_name,
            "company_address": self.company_address,
            "country_code": self.country_code,
            "block_size": self.block_size.value,
            "date_created": self.date_created.isoformat(),
            "date_updated": self.date_updated.isoformat(),
        }
