# hex_reconstructor/export.py

from __future__ import annotations

import logging
from pathlib import Path
from typing import Optional, Union

from .parse import DetectedFormat

logger = logging.getLogger(__name__)

DEFAULT_EXPORT_NAME = "reconstructed.bin"


def suggested_filename(detected: Optional[DetectedFormat], fallback: str = DEFAULT_EXPORT_NAME) -> str:
    """Name to offer when saving a reconstructed buffer."""
    if detected is not None and detected.suggested_name:
        return detected.suggested_name
    return fallback

def export_bytes(data: bytes, path: Union[str, Path]) -> Path:
    path = Path(path)
    path.write_bytes(bytes(data))
    logger.info("wrote %d bytes to %s", len(data), path)
    return path
