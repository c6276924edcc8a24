# hex_reconstructor/parse.py

"""Autodetection of hex-dump dialects and raw binary input.

Text input is tried against each dialect parser in ``DIALECT_PARSERS`` order;
the first parser that recognises the text wins. Binary input that looks like
text is decoded and sent down the same path, anything else is kept verbatim.
"""

from __future__ import annotations

import enum
import logging
import re
from dataclasses import dataclass, field
from typing import Callable, Optional, Union

from .signatures import detect_file_signature

logger = logging.getLogger(__name__)

TEXT_SAMPLE_SIZE = 4096
CONTROL_RATIO = 0.02

HEX_BYTE = re.compile(r"\b[0-9a-fA-F]{2}\b", re.ASCII)
XXD_LINE = re.compile(r"^\s*([0-9a-fA-F]{1,8}):\s+([0-9a-fA-F\s]+)(?:\s{2,}\|.*\|)?")
HEXDUMP_LINE = re.compile(r"^\s*([0-9a-fA-F]{1,8})\s+((?:[0-9a-fA-F]{2}(?:\s+|$)){1,16})(?:\s*\|.*\|)?")
NEWLINE = re.compile(r"\r?\n")
WHITESPACE = re.compile(r"\s+")


class FormatKind(str, enum.Enum):
    XXD = "xxd"
    HEXDUMP = "hexdump"
    RAW_BINARY = "raw-binary"
    PLAIN_HEX = "plain-hex"
    UNKNOWN = "unknown"


@dataclass(frozen=True)
class DetectedFormat:
    kind: FormatKind
    mime: Optional[str] = None
    extension: Optional[str] = None
    suggested_name: Optional[str] = None
    warnings: tuple[str, ...] = field(default_factory=tuple)


@dataclass(frozen=True)
class HexParseResult:
    data: bytes
    detected: DetectedFormat


DialectParser = Callable[[str], Optional[HexParseResult]]


# ---------------- Dialect parsers ----------------
def _parse_dump_lines(text: str, line_re: re.Pattern, kind: FormatKind) -> Optional[HexParseResult]:
    out = bytearray()
    matched = 0
    malformed = 0
    for line in NEWLINE.split(text):
        m = line_re.match(line)
        if not m:
            continue
        matched += 1
        region = m.group(2).strip()
        out.extend(int(h, 16) for h in HEX_BYTE.findall(region))
        if WHITESPACE.sub("", HEX_BYTE.sub("", region)):
            malformed += 1

    if matched == 0 or not out:
        return None
    warnings: tuple[str, ...] = ()
    if malformed:
        warnings = (f"{malformed} line(s) contained non-hex tokens",)
    return HexParseResult(bytes(out), DetectedFormat(kind, warnings=warnings))

def parse_xxd(text: str) -> Optional[HexParseResult]:
    """Parse ``xxd``-style lines: ``00000000: 41 42 43 44  |ABCD|``."""
    return _parse_dump_lines(text, XXD_LINE, FormatKind.XXD)

def parse_hexdump(text: str) -> Optional[HexParseResult]:
    """Parse ``hexdump -C``-style lines: ``00000000  41 42 43 44  |ABCD|``."""
    return _parse_dump_lines(text, HEXDUMP_LINE, FormatKind.HEXDUMP)

def parse_plain_hex(text: str) -> Optional[HexParseResult]:
    """Collect every standalone two-digit hex token in ``text``.

    Anything between tokens is ignored. When the text is nothing but hex
    digits and whitespace, an odd digit count is flagged since the token scan
    silently drops a trailing half byte.
    """
    tokens = HEX_BYTE.findall(text)
    if not tokens:
        return None
    warnings: list[str] = []
    compact = WHITESPACE.sub("", text)
    if re.fullmatch(r"[0-9a-fA-F]+", compact) and len(compact) % 2 == 1:
        warnings.append("Odd-length hex stream detected")
    data = bytes(int(h, 16) for h in tokens)
    return HexParseResult(data, DetectedFormat(FormatKind.PLAIN_HEX, warnings=tuple(warnings)))


DIALECT_PARSERS: tuple[DialectParser, ...] = (parse_xxd, parse_hexdump, parse_plain_hex)


# ---------------- Autodetection ----------------
def is_likely_text(data: bytes) -> bool:
    """True when under 2% of the leading sample is control characters."""
    sample = data[:TEXT_SAMPLE_SIZE]
    control = sum(1 for b in sample if (b < 32 and b not in (9, 10, 13)) or b == 127)
    return control < len(sample) * CONTROL_RATIO

def _parse_binary(data: bytes) -> HexParseResult:
    sig = detect_file_signature(data)
    if sig is not None:
        detected = DetectedFormat(
            FormatKind.RAW_BINARY,
            mime=sig.mime,
            extension=sig.extension,
            suggested_name=f"reconstructed.{sig.extension}",
        )
    else:
        detected = DetectedFormat(FormatKind.RAW_BINARY, suggested_name="reconstructed.bin")
    return HexParseResult(data, detected)

def _parse_text(text: str) -> HexParseResult:
    for parser in DIALECT_PARSERS:
        result = parser(text)
        if result is not None:
            return result
    return HexParseResult(
        text.encode("utf-8"),
        DetectedFormat(FormatKind.UNKNOWN, warnings=("Unable to match a known hex dump format",)),
    )

def autodetect_and_parse(payload: Union[bytes, bytearray, memoryview, str]) -> HexParseResult:
    """Turn a file payload into a canonical byte buffer plus its detected format.

    Never raises for ``str`` or bytes-like input: unrecognised text falls back
    to its UTF-8 encoding with kind ``unknown``.
    """
    if isinstance(payload, str):
        result = _parse_text(payload)
    elif isinstance(payload, (bytes, bytearray, memoryview)):
        data = bytes(payload)
        if is_likely_text(data):
            result = _parse_text(data.decode("utf-8-sig", errors="replace"))
        else:
            result = _parse_binary(data)
    else:
        raise TypeError(f"expected str or bytes-like payload, got {type(payload).__name__}")

    logger.debug("detected %s (%d bytes)", result.detected.kind.value, len(result.data))
    for warning in result.detected.warnings:
        logger.info("%s: %s", result.detected.kind.value, warning)
    return result
