from __future__ import annotations

import re
from typing import TYPE_CHECKING

from .errors import AddressError

if TYPE_CHECKING:
    from .records import BlockSize

MAC_BITS = 48
MAC_MAX = (1 << MAC_BITS) - 1

# Locally administered: second least significant bit of first octet is 1
LOCAL_ADMIN_BIT = 0x02 << 40

_OCTET = re.compile(r"[0-9A-Fa-f]{1,2}")
_HEX = re.compile(r"[0-9A-Fa-f]+")
_PREFIX_SEPARATORS = str.maketrans("", "", ":-.")


def parse_mac(text: str) -> int:
    """
    Parse `AA:BB:CC:DD:EE:FF` or `aa-bb-cc-dd-ee-ff` into a 48-bit int.
    Delimiters must not be mixed.
    """
    m = text.strip()
    if ":" in m and "-" in m:
        raise AddressError(text, "mixed delimiters")

    sep = ":" if ":" in m else "-"
    octets = m.split(sep)
    if len(octets) != 6:
        raise AddressError(text, f"expected 6 octets, got {len(octets)}")

    value = 0
    for octet in octets:
        if not _OCTET.fullmatch(octet):
            raise AddressError(text, f"bad octet {octet!r}")
        value = (value << 8) | int(octet, 16)
    return value


def parse_prefix(text: str, block_size: BlockSize) -> tuple[int, int]:
    """
    Parse an OUI prefix into (left-aligned 48-bit prefix, prefix bit width).

    The width comes from the block size unless the text carries an explicit
    `/N` mask, e.g. `00:1B:C5:00:00:00/36`.
    """
    raw = text.strip()
    bits = block_size.prefix_bits

    if "/" in raw:
        raw, _, mask = raw.partition("/")
        try:
            bits = int(mask)
        except ValueError:
            raise AddressError(text, f"bad mask {mask!r}") from None
        if not 8 <= bits <= MAC_BITS:
            raise AddressError(text, f"mask {bits} out of range 8..48")

    digits = raw.translate(_PREFIX_SEPARATORS)
    if not digits:
        raise AddressError(text, "empty prefix")
    if not _HEX.fullmatch(digits):
        raise AddressError(text, "non-hex characters")
    value = int(digits, 16)

    width = len(digits) * 4
    if width < bits:
        raise AddressError(text, f"{len(digits)} hex digits cannot hold a /{bits} prefix")
    if width > MAC_BITS:
        raise AddressError(text, "longer than 48 bits")

    value <<= MAC_BITS - width
    return value & prefix_mask(bits), bits


def prefix_mask(bits: int) -> int:
    return MAC_MAX ^ (MAC_MAX >> bits)


def address_range(prefix: int, bits: int) -> tuple[int, int]:
    """Closed [low, high] interval covered by a left-aligned prefix."""
    low = prefix & prefix_mask(bits)
    high = low | (MAC_MAX >> bits)
    return low, high


def is_private(address: int) -> bool:
    return bool(address & LOCAL_ADMIN_BIT)


def format_mac(address: int) -> str:
    return ":".join(f"{(address >> shift) & 0xFF:02X}" for shift in range(40, -1, -8))
