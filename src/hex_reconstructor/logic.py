# hex_reconstructor/logic.py

from __future__ import annotations

import re
from typing import Iterable, Optional, Tuple

from .errors import OutOfRangeError

PRINTABLE_MIN = 32
PRINTABLE_MAX = 126
SIZE_UNITS = ("KB", "MB", "GB", "TB")


# ---------------- Value logic ----------------
def parse_int_maybe(text: str) -> int:
    """Parse an integer accepting 0x/0b/0o prefixes or decimal."""
    s = text.strip().replace("_", "")
    if not s:
        raise ValueError("Enter a number (e.g., 1234 or 0x4D2).")
    return int(s, 0)

def int_range_for(width: int, signed: bool) -> Tuple[int, int]:
    """
    Return inclusive (lo, hi) range for a given byte width and signedness.

    Unsigned:        [0, 2^n - 1]
    2's complement:  [-(2^(n-1)), 2^(n-1) - 1]
    """
    if width < 1:
        raise ValueError("width must be at least 1")
    if signed:
        lo = -(1 << (8 * width - 1))
        hi = (1 << (8 * width - 1)) - 1
    else:
        lo = 0
        hi = (1 << (8 * width)) - 1
    return lo, hi

def clamp_to_byte(value: int) -> int:
    return max(0, min(255, int(value)))

def bytes_to_ascii(data: Iterable[int]) -> str:
    """Printable ASCII verbatim, everything else as '.'."""
    return "".join(chr(b) if PRINTABLE_MIN <= b <= PRINTABLE_MAX else "." for b in data)

def format_size(num: float) -> str:
    """Human readable byte count: 512 → "512 B", 1536 → "1.50 KB"."""
    if num < 1024:
        return f"{int(num)} B"
    i = -1
    while True:
        num /= 1024
        i += 1
        if num < 1024 or i == len(SIZE_UNITS) - 1:
            break
    return f"{num:.2f} {SIZE_UNITS[i]}"


# ---------------- Byte edits ----------------
def parse_hex_cell(text: str) -> Optional[int]:
    """Parse a single hex cell edit ("f", "0F", "a7"); None if it is not one."""
    s = (text or "").strip()
    if not re.fullmatch(r"[0-9A-Fa-f]{1,2}", s):
        return None
    return int(s, 16)

def set_byte(data: bytes, index: int, value: int) -> bytes:
    """Return a copy of ``data`` with ``data[index]`` replaced.

    The value is clamped to 0..255; the index must address an existing byte.
    """
    if not 0 <= index < len(data):
        raise OutOfRangeError(f"offset {index} outside buffer of {len(data)} bytes")
    out = bytearray(data)
    out[index] = clamp_to_byte(value)
    return bytes(out)

def apply_hex_edit(data: bytes, index: int, text: str) -> bytes:
    """Apply a hex cell edit; invalid text leaves the buffer unchanged."""
    value = parse_hex_cell(text)
    if value is None:
        return bytes(data)
    return set_byte(data, index, value)

def apply_ascii_edit(data: bytes, index: int, text: str) -> bytes:
    """Replace one byte with the code of the first character of ``text``.

    Empty text leaves the buffer unchanged; code points above 0xFF clamp to 0xFF.
    """
    if not text:
        return bytes(data)
    return set_byte(data, index, ord(text[0]))

def truncate(data: bytes, length: int) -> bytes:
    if length < 0:
        raise ValueError("length must be non-negative")
    return bytes(data[:length])
