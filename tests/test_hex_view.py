import pytest

from hex_reconstructor.view import format_hex_view


def test_single_short_row_is_padded():
    view = format_hex_view(b"ABCD")
    assert view == "00000000  " + "41 42 43 44".ljust(47) + "  |ABCD|"

def test_full_rows_and_short_tail():
    data = bytes(range(0x41, 0x41 + 20))
    lines = format_hex_view(data, bytes_per_row=8).split("\n")
    assert len(lines) == 3
    assert lines[0] == "00000000  41 42 43 44 45 46 47 48  |ABCDEFGH|"
    assert lines[1] == "00000008  49 4a 4b 4c 4d 4e 4f 50  |IJKLMNOP|"
    assert lines[2] == "00000010  51 52 53 54" + " " * 12 + "  |QRST|"
    # gutters line up even on the short row
    assert {line.index("|") for line in lines} == {35}

@pytest.mark.parametrize("per_row,rows", [(8, 4), (16, 2), (32, 1), (5, 7)])
def test_row_count(per_row, rows):
    view = format_hex_view(bytes(32), bytes_per_row=per_row)
    assert len(view.split("\n")) == rows

def test_ascii_gutter_masks_non_printables():
    view = format_hex_view(b"\x00A\x7f\x80 ~", bytes_per_row=8)
    assert view.endswith("|.A.. ~|")

def test_highlight_uppercases_matched_bytes_only():
    view = format_hex_view(b"\xab\xcd\xef\xcd", highlight="cd")
    assert view.startswith("00000000  ab CD ef CD")

def test_literal_highlight():
    view = format_hex_view(b"xjx", highlight="j")
    assert view.startswith("00000000  78 6A 78")

def test_no_highlight_is_lowercase():
    assert "ab cd ef" in format_hex_view(b"\xab\xcd\xef")

def test_offsets_are_eight_hex_digits():
    view = format_hex_view(bytes(0x120), bytes_per_row=16)
    assert view.split("\n")[-1].startswith("00000110  ")

def test_empty_buffer():
    assert format_hex_view(b"") == ""

@pytest.mark.parametrize("per_row", [0, -4])
def test_bad_row_width(per_row):
    with pytest.raises(ValueError):
        format_hex_view(b"abc", bytes_per_row=per_row)
