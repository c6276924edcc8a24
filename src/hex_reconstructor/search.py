# hex_reconstructor/search.py

from __future__ import annotations

import re
from typing import Optional

HEX_QUERY = re.compile(r"(?:[0-9a-fA-F]{2}\s*)+")


# ---------------- Search ----------------
def query_to_needle(query: Optional[str]) -> bytes:
    """Interpret a search query as a byte pattern.

    "41 42" / "4142" → b"AB" (hex pairs, optional whitespace between pairs)
    "ABC"            → b"ABC" (anything else is literal UTF-8 text)
    """
    q = (query or "").strip()
    if HEX_QUERY.fullmatch(q):
        return bytes.fromhex(re.sub(r"\s+", "", q))
    return q.encode("utf-8")

def find_all(data: bytes, needle: bytes) -> list[int]:
    """Start offsets of every occurrence of ``needle``, overlaps included."""
    if not needle:
        return []
    n = len(needle)
    return [i for i in range(len(data) - n + 1) if data[i:i + n] == needle]

def count_search_matches(data: bytes, query: Optional[str]) -> int:
    if not query:
        return 0
    return len(find_all(data, query_to_needle(query)))

def compute_highlight_indices(data: bytes, query: Optional[str]) -> frozenset[int]:
    """Every offset covered by at least one match of ``query``."""
    if not query:
        return frozenset()
    needle = query_to_needle(query)
    return frozenset(
        i for start in find_all(data, needle) for i in range(start, start + len(needle))
    )


# ---------------- Diff ----------------
def compute_diff_indices(a: bytes, b: bytes) -> frozenset[int]:
    """Offsets where ``a`` and ``b`` disagree.

    Past the end of the shorter buffer every offset counts as a difference.
    """
    common = min(len(a), len(b))
    diff = {i for i in range(common) if a[i] != b[i]}
    diff.update(range(common, max(len(a), len(b))))
    return frozenset(diff)
