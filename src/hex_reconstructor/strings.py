# hex_reconstructor/strings.py

from __future__ import annotations

from typing import NamedTuple

from .logic import PRINTABLE_MAX, PRINTABLE_MIN

DEFAULT_MIN_STRING_LENGTH = 4


class ExtractedString(NamedTuple):
    offset: int
    text: str


def extract_printable_strings(data: bytes, min_length: int = DEFAULT_MIN_STRING_LENGTH) -> list[ExtractedString]:
    """Runs of printable ASCII at least ``min_length`` bytes long."""
    results: list[ExtractedString] = []
    start = -1
    for i in range(len(data) + 1):
        b = data[i] if i < len(data) else 0
        if PRINTABLE_MIN <= b <= PRINTABLE_MAX:
            if start == -1:
                start = i
        elif start != -1:
            if i - start >= min_length:
                results.append(ExtractedString(start, data[start:i].decode("ascii")))
            start = -1
    return results

def extract_utf16le_strings(data: bytes, min_length: int = DEFAULT_MIN_STRING_LENGTH) -> list[ExtractedString]:
    """Runs of UTF-16LE code units in the printable ASCII range.

    Only even offsets are scanned; ``min_length`` counts characters.
    """
    results: list[ExtractedString] = []
    start = -1
    count = 0
    for i in range(0, len(data) + 1, 2):
        has_pair = i + 1 < len(data)
        code = data[i] | (data[i + 1] << 8) if has_pair else 0
        if has_pair and PRINTABLE_MIN <= code <= PRINTABLE_MAX:
            if start == -1:
                start = i
            count += 1
        elif start != -1:
            if count >= min_length:
                text = data[start:start + count * 2].decode("utf-16-le")
                results.append(ExtractedString(start, text))
            start = -1
            count = 0
    return results
