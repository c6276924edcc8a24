# hex_reconstructor/view.py

from __future__ import annotations

from typing import Optional

from .logic import bytes_to_ascii
from .search import compute_highlight_indices

DEFAULT_BYTES_PER_ROW = 16
MIN_BYTES_PER_ROW = 8
MAX_BYTES_PER_ROW = 32


def format_hex_view(
    data: bytes,
    bytes_per_row: int = DEFAULT_BYTES_PER_ROW,
    highlight: Optional[str] = None,
) -> str:
    """Render ``data`` as ``offset  hex bytes  |ascii|`` rows.

    Bytes covered by a match of ``highlight`` are shown in uppercase hex; all
    other bytes are lowercase. A short final row is padded so its ASCII
    gutter lines up with the rows above.
    """
    if bytes_per_row < 1:
        raise ValueError("bytes_per_row must be at least 1")

    marked = compute_highlight_indices(data, highlight)
    width = bytes_per_row * 3 - 1

    lines: list[str] = []
    for start in range(0, len(data), bytes_per_row):
        row = data[start:start + bytes_per_row]
        hex_parts = []
        for i, b in enumerate(row):
            h = f"{b:02x}"
            hex_parts.append(h.upper() if start + i in marked else h)
        lines.append(f"{start:08x}  {' '.join(hex_parts).ljust(width)}  |{bytes_to_ascii(row)}|")
    return "\n".join(lines)
