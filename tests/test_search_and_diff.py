import pytest

from hex_reconstructor.search import (
    compute_diff_indices,
    compute_highlight_indices,
    count_search_matches,
    find_all,
    query_to_needle,
)

DATA = bytes([0x41, 0x42, 0x99, 0x41, 0x42])


@pytest.mark.parametrize("query", ["4142", "41 42", "  41   42  ", "41\t42"])
def test_hex_query_matches(query):
    assert count_search_matches(DATA, query) == 2
    assert compute_highlight_indices(DATA, query) == {0, 1, 3, 4}

@pytest.mark.parametrize(
    "query,needle",
    [
        ("4142", b"AB"),
        ("ab", b"\xab"),          # two hex digits are always a byte pattern
        ("hello", b"hello"),
        ("414", b"414"),          # odd digit count is literal text
        ("41 4", b"41 4"),
        ("café", "café".encode("utf-8")),
        ("", b""),
    ],
)
def test_query_to_needle(query, needle):
    assert query_to_needle(query) == needle

def test_literal_text_query():
    data = b"say hello, hello"
    assert count_search_matches(data, "hello") == 2
    assert compute_highlight_indices(data, "hello") == set(range(4, 9)) | set(range(11, 16))

def test_overlapping_matches():
    data = b"\x00\x00\x00"
    assert find_all(data, b"\x00\x00") == [0, 1]
    assert count_search_matches(data, "0000") == 2
    assert compute_highlight_indices(data, "0000") == {0, 1, 2}

@pytest.mark.parametrize("query", ["", None, "   "])
def test_empty_query_matches_nothing(query):
    assert count_search_matches(DATA, query) == 0
    assert compute_highlight_indices(DATA, query) == frozenset()

def test_needle_longer_than_buffer():
    assert find_all(b"AB", b"ABC") == []
    assert count_search_matches(b"", "41") == 0

def test_highlight_set_is_immutable():
    assert isinstance(compute_highlight_indices(DATA, "41"), frozenset)


# ---------------- Diff ----------------
def test_diff_equal_buffers_is_empty():
    assert compute_diff_indices(b"same", b"same") == frozenset()
    assert compute_diff_indices(b"", b"") == frozenset()

@pytest.mark.parametrize("k", [0, 3, 7])
def test_diff_single_change(k):
    a = bytes(range(8))
    b = bytearray(a)
    b[k] ^= 0xFF
    assert compute_diff_indices(a, bytes(b)) == {k}

@pytest.mark.parametrize(
    "a,b,expected",
    [
        (b"abc", b"abcde", {3, 4}),
        (b"", b"xyz", {0, 1, 2}),
        (b"\x00\x00", b"\x01", {0, 1}),
        # a zero byte past the end still differs from "no byte"
        (b"ab", b"ab\x00", {2}),
    ],
)
def test_diff_length_mismatch(a, b, expected):
    assert compute_diff_indices(a, b) == expected

@pytest.mark.parametrize(
    "a,b",
    [(b"abc", b"abd"), (b"abc", b"a"), (b"", b"\x00"), (bytes(range(10)), bytes(range(10, 0, -1)))],
)
def test_diff_is_symmetric(a, b):
    assert compute_diff_indices(a, b) == compute_diff_indices(b, a)
