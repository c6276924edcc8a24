# hex_reconstructor/layout.py

"""Calibrated scalar and 2-D table values stored in a byte buffer.

A scalar or table names an address, a primitive type, a byte order and a linear
calibration ``physical = raw * factor + offset``. Reads return physical
values; writes take physical values and return a new buffer with only the
addressed bytes replaced. The input buffer is never modified.
"""

from __future__ import annotations

import enum
import logging
import math
import struct
from dataclasses import dataclass
from typing import Any, Optional, Sequence, Union

from pydantic import AliasChoices, BaseModel, ConfigDict, Field, field_validator, model_validator

from .errors import (
    OutOfRangeError,
    RawValueError,
    TableShapeError,
    UnsupportedEndiannessError,
    UnsupportedTypeError,
)
from .logic import int_range_for

logger = logging.getLogger(__name__)


class PrimitiveType(str, enum.Enum):
    UINT8 = "uint8"
    INT8 = "int8"
    UINT16 = "uint16"
    INT16 = "int16"
    UINT32 = "uint32"
    INT32 = "int32"
    FLOAT32 = "float32"


class Endianness(str, enum.Enum):
    LITTLE = "little"
    BIG = "big"


WIDTHS = {
    PrimitiveType.UINT8: 1,
    PrimitiveType.INT8: 1,
    PrimitiveType.UINT16: 2,
    PrimitiveType.INT16: 2,
    PrimitiveType.UINT32: 4,
    PrimitiveType.INT32: 4,
    PrimitiveType.FLOAT32: 4,
}
SIGNED = {PrimitiveType.INT8, PrimitiveType.INT16, PrimitiveType.INT32}
TYPE_ALIASES = {
    "u8": "uint8", "i8": "int8",
    "u16": "uint16", "i16": "int16",
    "u32": "uint32", "i32": "int32",
    "f32": "float32",
}
STRUCT_ORDER = {Endianness.LITTLE: "<", Endianness.BIG: ">"}


def parse_primitive_type(value: Union[str, PrimitiveType]) -> PrimitiveType:
    """Resolve a type name (``uint16``, ``u16`` …) to a PrimitiveType."""
    if isinstance(value, PrimitiveType):
        return value
    name = str(value).strip().lower()
    try:
        return PrimitiveType(TYPE_ALIASES.get(name, name))
    except ValueError:
        raise UnsupportedTypeError(f"Unsupported data type: {value}") from None

def parse_endianness(value: Union[str, Endianness, None]) -> Endianness:
    if value is None:
        return Endianness.LITTLE
    if isinstance(value, Endianness):
        return value
    try:
        return Endianness(str(value).strip().lower())
    except ValueError:
        raise UnsupportedEndiannessError(f"Unsupported endianness: {value}") from None

def width_of(dtype: Union[str, PrimitiveType]) -> int:
    return WIDTHS[parse_primitive_type(dtype)]


@dataclass(frozen=True)
class Calibration:
    factor: float = 1.0
    offset: float = 0.0

    def to_physical(self, raw: float) -> float:
        return raw * self.factor + self.offset

    def to_raw(self, physical: float) -> float:
        return (physical - self.offset) / self.factor


# ---------------- Definition model ----------------
class _ValueSpec(BaseModel):
    """Fields shared by scalars and tables.

    JSON documents may use the ``dataType`` / ``endian`` spellings.
    """

    model_config = ConfigDict(frozen=True)

    id: str
    name: str
    address: int = Field(ge=0)
    type: PrimitiveType = Field(validation_alias=AliasChoices("type", "dataType"),
                                serialization_alias="dataType")
    endianness: Endianness = Field(default=Endianness.LITTLE,
                                   validation_alias=AliasChoices("endianness", "endian"),
                                   serialization_alias="endian")
    factor: float = 1.0
    offset: float = 0.0
    unit: Optional[str] = None

    @model_validator(mode="before")
    @classmethod
    def _default_name(cls, data: Any) -> Any:
        if isinstance(data, dict) and not data.get("name") and data.get("id") is not None:
            data = {**data, "name": str(data["id"])}
        return data

    @field_validator("id", mode="before")
    @classmethod
    def _id_as_str(cls, v: Any) -> Any:
        return str(v) if isinstance(v, int) else v

    @field_validator("address", mode="before")
    @classmethod
    def _address_literal(cls, v: Any) -> Any:
        if isinstance(v, str):
            return int(v.strip(), 0)
        return v

    @field_validator("type", mode="before")
    @classmethod
    def _type_alias(cls, v: Any) -> Any:
        return parse_primitive_type(v) if isinstance(v, str) else v

    @field_validator("endianness", mode="before")
    @classmethod
    def _endian_default(cls, v: Any) -> Any:
        return parse_endianness(v) if v is None or isinstance(v, str) else v

    @field_validator("factor", mode="before")
    @classmethod
    def _factor_default(cls, v: Any) -> Any:
        return 1.0 if v is None else v

    @field_validator("offset", mode="before")
    @classmethod
    def _offset_default(cls, v: Any) -> Any:
        return 0.0 if v is None else v

    @property
    def calibration(self) -> Calibration:
        return Calibration(self.factor, self.offset)

    @property
    def width(self) -> int:
        return WIDTHS[self.type]


class ScalarSpec(_ValueSpec):
    """A single calibrated value at ``address``."""

    @property
    def size(self) -> int:
        return self.width


class TableSpec(_ValueSpec):
    """A row-major ``rows × cols`` grid of values starting at ``address``."""

    rows: int = Field(default=1, ge=1)
    cols: int = Field(default=1, ge=1)

    @property
    def size(self) -> int:
        return self.rows * self.cols * self.width

    def cell_address(self, row: int, col: int) -> int:
        return self.address + (row * self.cols + col) * self.width


class Definition(BaseModel):
    model_config = ConfigDict(frozen=True)

    name: Optional[str] = None
    description: Optional[str] = None
    scalars: list[ScalarSpec] = Field(default_factory=list)
    tables: list[TableSpec] = Field(default_factory=list,
                                    validation_alias=AliasChoices("tables", "tables2d"),
                                    serialization_alias="tables2d")

    @field_validator("scalars", "tables", mode="before")
    @classmethod
    def _none_is_empty(cls, v: Any) -> Any:
        return [] if v is None else v

    @model_validator(mode="after")
    def _unique_ids(self) -> "Definition":
        for kind, specs in (("scalar", self.scalars), ("table", self.tables)):
            seen: set[str] = set()
            for spec in specs:
                if spec.id in seen:
                    raise ValueError(f"duplicate {kind} id: {spec.id}")
                seen.add(spec.id)
        return self

    def scalar(self, spec_id: str) -> ScalarSpec:
        for s in self.scalars:
            if s.id == spec_id:
                return s
        raise KeyError(spec_id)

    def table(self, spec_id: str) -> TableSpec:
        for t in self.tables:
            if t.id == spec_id:
                return t
        raise KeyError(spec_id)


# ---------------- Raw values ----------------
def _check_range(data: bytes, address: int, size: int) -> None:
    if address < 0 or address + size > len(data):
        raise OutOfRangeError(
            f"bytes [{address}, {address + size}) outside buffer of {len(data)} bytes"
        )

def decode_value(chunk: bytes, dtype: PrimitiveType, endian: Endianness) -> Union[int, float]:
    if dtype is PrimitiveType.FLOAT32:
        return struct.unpack(STRUCT_ORDER[endian] + "f", chunk)[0]
    return int.from_bytes(chunk, byteorder=endian.value, signed=dtype in SIGNED)

def encode_value(raw: float, dtype: PrimitiveType, endian: Endianness) -> bytes:
    """Encode an un-calibrated value; integer types round to the nearest integer."""
    if dtype is PrimitiveType.FLOAT32:
        try:
            return struct.pack(STRUCT_ORDER[endian] + "f", raw)
        except OverflowError:
            raise RawValueError(f"{raw} does not fit in float32") from None
    if not math.isfinite(raw):
        raise RawValueError(f"{raw} cannot be stored as {dtype.value}")
    value = int(round(raw))
    lo, hi = int_range_for(WIDTHS[dtype], dtype in SIGNED)
    if not lo <= value <= hi:
        raise RawValueError(f"{value} out of range for {dtype.value} [{lo}, {hi}]")
    return value.to_bytes(WIDTHS[dtype], byteorder=endian.value, signed=dtype in SIGNED)

def read_value(data: bytes, address: int, dtype: Union[str, PrimitiveType],
               endian: Union[str, Endianness, None] = Endianness.LITTLE) -> Union[int, float]:
    dtype = parse_primitive_type(dtype)
    endian = parse_endianness(endian)
    width = WIDTHS[dtype]
    _check_range(data, address, width)
    return decode_value(bytes(data[address:address + width]), dtype, endian)

def write_value(data: bytes, address: int, raw: float, dtype: Union[str, PrimitiveType],
                endian: Union[str, Endianness, None] = Endianness.LITTLE) -> bytes:
    """Return a copy of ``data`` with ``raw`` encoded at ``address``."""
    dtype = parse_primitive_type(dtype)
    endian = parse_endianness(endian)
    _check_range(data, address, WIDTHS[dtype])
    encoded = encode_value(raw, dtype, endian)
    out = bytearray(data)
    out[address:address + len(encoded)] = encoded
    return bytes(out)


# ---------------- Scalars ----------------
def read_scalar(data: bytes, scalar: ScalarSpec) -> float:
    raw = read_value(data, scalar.address, scalar.type, scalar.endianness)
    return scalar.calibration.to_physical(raw)

def write_scalar(data: bytes, scalar: ScalarSpec, physical: float) -> bytes:
    raw = scalar.calibration.to_raw(physical)
    logger.debug("write %s @0x%x: %r -> raw %r", scalar.id, scalar.address, physical, raw)
    return write_value(data, scalar.address, raw, scalar.type, scalar.endianness)


# ---------------- Tables ----------------
def read_table(data: bytes, table: TableSpec) -> list[list[float]]:
    """Read every cell as a ``rows × cols`` list of physical values."""
    _check_range(data, table.address, table.size)
    cal = table.calibration
    width = table.width
    result: list[list[float]] = []
    for r in range(table.rows):
        row: list[float] = []
        for c in range(table.cols):
            addr = table.cell_address(r, c)
            raw = decode_value(bytes(data[addr:addr + width]), table.type, table.endianness)
            row.append(cal.to_physical(raw))
        result.append(row)
    return result

def write_table(data: bytes, table: TableSpec, values: Sequence[Sequence[float]]) -> bytes:
    """Write a full ``rows × cols`` grid of physical values.

    Every cell is encoded before the copy is touched, so a bad cell value
    leaves no partial write behind.
    """
    if len(values) != table.rows or any(len(row) != table.cols for row in values):
        raise TableShapeError(f"expected {table.rows}x{table.cols} values for table {table.id}")
    _check_range(data, table.address, table.size)
    cal = table.calibration
    encoded = b"".join(
        encode_value(cal.to_raw(v), table.type, table.endianness)
        for row in values for v in row
    )
    out = bytearray(data)
    out[table.address:table.address + table.size] = encoded
    return bytes(out)

def write_table_cell(data: bytes, table: TableSpec, row: int, col: int, physical: float) -> bytes:
    if not (0 <= row < table.rows and 0 <= col < table.cols):
        raise OutOfRangeError(f"cell ({row}, {col}) outside {table.rows}x{table.cols} table {table.id}")
    raw = table.calibration.to_raw(physical)
    return write_value(data, table.cell_address(row, col), raw, table.type, table.endianness)
