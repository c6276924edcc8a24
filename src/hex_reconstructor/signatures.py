# hex_reconstructor/signatures.py

from __future__ import annotations

from dataclasses import dataclass
from typing import Callable, Optional


@dataclass(frozen=True)
class FileSignature:
    mime: str
    extension: str


def _starts_with(data: bytes, *sigs: bytes) -> bool:
    return any(data[:len(sig)] == sig for sig in sigs)

def _tag_at(data: bytes, offset: int, tag: bytes) -> bool:
    return data[offset:offset + len(tag)] == tag

def _riff(form: bytes):
    return lambda data: _tag_at(data, 0, b"RIFF") and _tag_at(data, 8, form)


# Order matters: the first matching entry wins.
SIGNATURES: list[tuple[Callable[[bytes], bool], FileSignature]] = [
    (lambda d: _starts_with(d, b"\x89PNG\r\n\x1a\n"), FileSignature("image/png", "png")),
    (lambda d: _starts_with(d, b"\xff\xd8\xff"), FileSignature("image/jpeg", "jpg")),
    (lambda d: _starts_with(d, b"GIF87a", b"GIF89a"), FileSignature("image/gif", "gif")),
    (lambda d: _starts_with(d, b"%PDF-"), FileSignature("application/pdf", "pdf")),
    (lambda d: _starts_with(d, b"PK\x03\x04", b"PK\x05\x06", b"PK\x07\x08"),
     FileSignature("application/zip", "zip")),
    (lambda d: _starts_with(d, b"\x1f\x8b"), FileSignature("application/gzip", "gz")),
    (lambda d: _starts_with(d, b"Rar!\x1a\x07"), FileSignature("application/x-rar-compressed", "rar")),
    (lambda d: _starts_with(d, b"7z\xbc\xaf\x27\x1c"), FileSignature("application/x-7z-compressed", "7z")),
    (lambda d: _starts_with(d, b"\x7fELF"), FileSignature("application/x-elf", "elf")),
    (lambda d: _starts_with(d, b"MZ"),
     FileSignature("application/vnd.microsoft.portable-executable", "exe")),
    (_riff(b"WAVE"), FileSignature("audio/wav", "wav")),
    (lambda d: _tag_at(d, 4, b"ftyp"), FileSignature("video/mp4", "mp4")),
    (lambda d: _starts_with(d, b"OggS"), FileSignature("application/ogg", "ogg")),
    (lambda d: _starts_with(d, b"BM"), FileSignature("image/bmp", "bmp")),
    (lambda d: _starts_with(d, b"\x00\x00\x01\x00"), FileSignature("image/x-icon", "ico")),
    (_riff(b"WEBP"), FileSignature("image/webp", "webp")),
    (lambda d: _starts_with(d, b"SQLite"), FileSignature("application/vnd.sqlite3", "sqlite")),
]


def detect_file_signature(data: bytes) -> Optional[FileSignature]:
    """Return the MIME type/extension of the first matching magic number.

    Slicing keeps every check inside the buffer, so a buffer shorter than a
    signature just fails that check.
    """
    head = bytes(data[:16])
    for check, sig in SIGNATURES:
        if check(head):
            return sig
    return None
