import os

import pytest

from hex_reconstructor.parse import FormatKind, autodetect_and_parse, is_likely_text

PNG_HEAD = b"\x89PNG\r\n\x1a\n\x00\x00\x00\rIHDR\x00\x00\x00\x01"


def test_text_bytes_go_through_dialects():
    res = autodetect_and_parse(b"00000000: 41 42 43 44  |ABCD|\n")
    assert res.data == b"ABCD"
    assert res.detected.kind is FormatKind.XXD

def test_str_input():
    res = autodetect_and_parse("00000000  de ad be ef  |....|\n")
    assert res.data == b"\xde\xad\xbe\xef"
    assert res.detected.kind is FormatKind.HEXDUMP

def test_space_separated_stream_is_read_as_hexdump():
    # the hexdump dialect is tried first and takes the leading pair as the offset
    res = autodetect_and_parse("de ad be ef")
    assert res.detected.kind is FormatKind.HEXDUMP
    assert res.data == b"\xad\xbe\xef"
    assert res.detected.warnings == ()

def test_plain_hex_after_dump_dialects_decline():
    res = autodetect_and_parse(b"DE:AD:BE:EF\n")
    assert res.detected.kind is FormatKind.PLAIN_HEX
    assert res.data == b"\xde\xad\xbe\xef"

def test_utf8_bom_is_dropped():
    res = autodetect_and_parse(b"\xef\xbb\xbf00000000: 41 42\n")
    assert res.detected.kind is FormatKind.XXD
    assert res.data == b"AB"

def test_binary_with_signature():
    payload = PNG_HEAD + bytes(range(256))
    res = autodetect_and_parse(payload)
    assert res.data == payload
    assert res.detected.kind is FormatKind.RAW_BINARY
    assert res.detected.mime == "image/png"
    assert res.detected.extension == "png"
    assert res.detected.suggested_name == "reconstructed.png"

def test_binary_without_signature():
    payload = bytes(range(256)) * 4
    res = autodetect_and_parse(bytearray(payload))
    assert res.data == payload
    assert isinstance(res.data, bytes)
    assert res.detected.kind is FormatKind.RAW_BINARY
    assert res.detected.mime is None
    assert res.detected.extension is None
    assert res.detected.suggested_name == "reconstructed.bin"

def test_empty_payload_is_binary():
    res = autodetect_and_parse(b"")
    assert res.data == b""
    assert res.detected.kind is FormatKind.RAW_BINARY
    assert res.detected.suggested_name == "reconstructed.bin"

def test_unrecognised_text_falls_back_to_utf8():
    res = autodetect_and_parse("hello world! ✓")
    assert res.data == "hello world! ✓".encode("utf-8")
    assert res.detected.kind is FormatKind.UNKNOWN
    assert res.detected.warnings == ("Unable to match a known hex dump format",)

def test_malformed_warning_is_carried_through():
    res = autodetect_and_parse("0: 41 42 123\n")
    assert res.data == b"AB"
    assert res.detected.warnings == ("1 line(s) contained non-hex tokens",)

@pytest.mark.parametrize(
    "payload",
    [
        b"\x00",
        b"\xff" * 10,
        bytes(range(256)),
        b"\x80\x81\x82 not utf-8 \xfe",
        os.urandom(64),
        os.urandom(5000),
        "",
        "\x00\x01 text with controls",
    ],
)
def test_autodetect_never_raises(payload):
    res = autodetect_and_parse(payload)
    assert isinstance(res.data, bytes)
    assert res.detected.kind in set(FormatKind)

def test_rejects_other_payload_types():
    with pytest.raises(TypeError):
        autodetect_and_parse(1234)


@pytest.mark.parametrize(
    "data,expected",
    [
        (b"plain text\twith\r\nwhitespace", True),
        (b"a" * 99 + b"\x00", True),      # 1 control in 100 is under 2%
        (b"a" * 98 + b"\x00\x00", False),  # 2 in 100 is not
        (b"a" * 98 + b"\x7f\x01", False),
        (b"", False),
        (b"a" * 4096 + b"\x00" * 1000, True),  # only the first 4096 bytes are sampled
    ],
)
def test_is_likely_text(data, expected):
    assert is_likely_text(data) is expected
