# hex_reconstructor/definitions.py

"""Import tuning definitions from JSON or XDF documents.

JSON documents are validated against the :class:`~.layout.Definition` model.
XDF documents are parsed with ElementTree and mapped element by element:
``XDFCONSTANT`` becomes a scalar, ``XDFTABLE`` a table, both in document order.
"""

from __future__ import annotations

import logging
import xml.etree.ElementTree as ET
from pathlib import Path, PurePath
from typing import Optional, Tuple, Union

from pydantic import ValidationError

from .equation import parse_linear_equation
from .errors import DefinitionImportError, EquationError, UnsupportedDefinitionFormatError
from .layout import Calibration, Definition, Endianness, PrimitiveType, ScalarSpec, TableSpec

logger = logging.getLogger(__name__)

XDF_ROOT = "XDFFORMAT"
DEFAULT_DEFINITION_NAME = "Unnamed Definition"

FLAG_SIGNED = 0x01
FLAG_BIG_ENDIAN = 0x06  # bits 1-2
SIZE_SHIFT = 4
SIZE_MASK = 0x0F


# ---------------- Field helpers ----------------
def _field(elem: Optional[ET.Element], name: str) -> Optional[str]:
    """Attribute ``name`` if present, else the text of child ``<name>``."""
    if elem is None:
        return None
    value = elem.get(name)
    if value is None:
        child = elem.find(name)
        if child is not None:
            value = child.text
    if value is None:
        return None
    value = value.strip()
    return value or None

def parse_address(value: Union[str, ET.Element, None]) -> int:
    """Decimal or 0x-prefixed address; a ``<address value="…"/>`` wrapper is unwrapped.

    Anything unparsable reads as address 0.
    """
    if isinstance(value, ET.Element):
        value = value.get("value") if value.get("value") is not None else value.text
    if value is None:
        return 0
    s = value.strip()
    try:
        if s.lower().startswith("0x"):
            return int(s[2:], 16)
        return int(s, 10)
    except ValueError:
        logger.warning("unparsable address %r, using 0", value)
        return 0

def _element_address(elem: ET.Element) -> int:
    child = elem.find("address")
    if child is not None:
        return parse_address(child)
    return parse_address(elem.get("address"))

def parse_flags(flags: Union[str, int, None]) -> Tuple[PrimitiveType, Endianness]:
    """Decode the XDF flags bitfield into a type and byte order.

    bit 0     signed
    bits 1-2  big-endian when either is set (0x24 reads as big-endian uint16)
    bits 4-7  element size in bytes (0/1, 2 or 4; anything else means uint8)

    String flags are always read as hexadecimal, with or without ``0x``.
    """
    if isinstance(flags, int):
        num = flags
    else:
        try:
            num = int((flags or "0").strip(), 16)
        except ValueError:
            logger.warning("unparsable flags %r, using 0x0", flags)
            num = 0

    signed = bool(num & FLAG_SIGNED)
    size = (num >> SIZE_SHIFT) & SIZE_MASK
    if size in (0, 1):
        dtype = PrimitiveType.INT8 if signed else PrimitiveType.UINT8
    elif size == 2:
        dtype = PrimitiveType.INT16 if signed else PrimitiveType.UINT16
    elif size == 4:
        dtype = PrimitiveType.INT32 if signed else PrimitiveType.UINT32
    else:
        dtype = PrimitiveType.UINT8
    endian = Endianness.BIG if num & FLAG_BIG_ENDIAN else Endianness.LITTLE
    return dtype, endian

def _count(elem: ET.Element, child_tag: str, attr: str) -> int:
    child = elem.find(child_tag)
    raw = child.get("count") if child is not None else None
    if raw is None:
        raw = elem.get(attr)
    try:
        n = int((raw or "1").strip(), 10)
    except ValueError:
        return 1
    return n if n >= 1 else 1

def _calibration(elem: ET.Element) -> Calibration:
    math_elem = elem.find("MATH")
    if math_elem is None:
        math_elem = elem.find("math")
    if math_elem is None:
        return Calibration()

    equation = _field(math_elem, "equation")
    if equation is None:
        equation = _field(math_elem.find("VAR"), "equation")
    if equation is None:
        return Calibration()
    try:
        return parse_linear_equation(equation)
    except EquationError as e:
        logger.warning("ignoring calibration: %s", e)
        return Calibration()


# ---------------- XDF ----------------
def _spec_fields(elem: ET.Element, fallback_id: str) -> dict:
    spec_id = elem.get("uniqueid") or elem.get("id") or fallback_id
    dtype, endian = parse_flags(_field(elem, "flags"))
    cal = _calibration(elem)
    return {
        "id": spec_id,
        "name": _field(elem, "title") or spec_id,
        "address": _element_address(elem),
        "type": dtype,
        "endianness": endian,
        "factor": cal.factor,
        "offset": cal.offset,
        "unit": _field(elem, "units"),
    }

def definition_from_xdf(root: ET.Element) -> Definition:
    """Build a Definition from a parsed XDF tree rooted at ``XDFFORMAT``."""
    if root is None or root.tag != XDF_ROOT:
        raise DefinitionImportError(f"Invalid XDF format: missing {XDF_ROOT} root element")

    header = root.find("XDFHEADER")
    scalars: list[ScalarSpec] = []
    tables: list[TableSpec] = []
    try:
        for elem in root:
            if elem.tag == "XDFCONSTANT":
                scalars.append(ScalarSpec(**_spec_fields(elem, f"scalar_{len(scalars)}")))
            elif elem.tag == "XDFTABLE":
                tables.append(TableSpec(
                    **_spec_fields(elem, f"table_{len(tables)}"),
                    rows=_count(elem, "XDFROWS", "rows"),
                    cols=_count(elem, "XDFCOLS", "cols"),
                ))
        definition = Definition(
            name=_field(header, "deftitle") or DEFAULT_DEFINITION_NAME,
            description=_field(header, "description"),
            scalars=scalars,
            tables=tables,
        )
    except ValidationError as e:
        raise DefinitionImportError(f"Invalid XDF definition: {e}") from e

    logger.info("imported XDF %r: %d scalar(s), %d table(s)",
                definition.name, len(definition.scalars), len(definition.tables))
    return definition

def parse_xdf(text: str) -> Definition:
    try:
        root = ET.fromstring(text)
    except ET.ParseError as e:
        raise DefinitionImportError(f"Invalid XDF document: {e}") from e
    return definition_from_xdf(root)


# ---------------- JSON ----------------
def parse_json_definition(text: str) -> Definition:
    """Validate a JSON document against the Definition model."""
    try:
        definition = Definition.model_validate_json(text)
    except ValidationError as e:
        raise DefinitionImportError(f"Invalid JSON definition: {e}") from e
    logger.info("imported JSON %r: %d scalar(s), %d table(s)",
                definition.name, len(definition.scalars), len(definition.tables))
    return definition


# ---------------- Import boundary ----------------
LOADERS = {
    ".json": parse_json_definition,
    ".xdf": parse_xdf,
}


def load_definition(text: str, filename: str) -> Definition:
    """Pick a loader from ``filename``'s extension and parse ``text`` with it."""
    suffix = PurePath(filename).suffix.lower()
    loader = LOADERS.get(suffix)
    if loader is None:
        raise UnsupportedDefinitionFormatError("Unsupported definition format. Use .xdf or .json")
    return loader(text)

def load_definition_file(path: Union[str, Path]) -> Definition:
    path = Path(path)
    return load_definition(path.read_text(encoding="utf-8"), path.name)
