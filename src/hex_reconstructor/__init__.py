# hex_reconstructor/__init__.py

"""Hex Reconstructor package.

Re-exports the codec, layout and definition APIs for convenient imports in
tests or other code.
"""
from .__about__ import (
    __version__,
    APP_NAME,
    APP_TITLE,
    AUTHOR,
    COPYRIGHT,
    COPYRIGHT_YEAR,
    HOMEPAGE,
)

from .errors import (
    HexReconstructorError,
    LayoutError,
    UnsupportedTypeError,
    UnsupportedEndiannessError,
    OutOfRangeError,
    RawValueError,
    TableShapeError,
    DefinitionImportError,
    UnsupportedDefinitionFormatError,
    EquationError,
)

from .signatures import FileSignature, detect_file_signature

from .parse import (
    DIALECT_PARSERS,
    FormatKind,
    DetectedFormat,
    HexParseResult,
    autodetect_and_parse,
    is_likely_text,
    parse_hexdump,
    parse_plain_hex,
    parse_xxd,
)

from .search import (
    compute_diff_indices,
    compute_highlight_indices,
    count_search_matches,
    find_all,
    query_to_needle,
)

from .view import format_hex_view

from .layout import (
    Calibration,
    Definition,
    Endianness,
    PrimitiveType,
    ScalarSpec,
    TableSpec,
    read_scalar,
    read_table,
    read_value,
    width_of,
    write_scalar,
    write_table,
    write_table_cell,
    write_value,
)

from .equation import parse_linear_equation

from .definitions import (
    definition_from_xdf,
    load_definition,
    load_definition_file,
    parse_flags,
    parse_json_definition,
    parse_xdf,
)

from .logic import (
    apply_ascii_edit,
    apply_hex_edit,
    format_size,
    parse_hex_cell,
    set_byte,
    truncate,
)

from .strings import ExtractedString, extract_printable_strings, extract_utf16le_strings

from .export import export_bytes, suggested_filename

__all__ = [
    # Metadata
    "__version__", "APP_NAME", "APP_TITLE",
    "AUTHOR", "COPYRIGHT", "COPYRIGHT_YEAR", "HOMEPAGE",
    # Errors
    "HexReconstructorError", "LayoutError", "UnsupportedTypeError", "UnsupportedEndiannessError",
    "OutOfRangeError",
    "RawValueError", "TableShapeError", "DefinitionImportError",
    "UnsupportedDefinitionFormatError", "EquationError",
    # Codec
    "FileSignature", "detect_file_signature",
    "DIALECT_PARSERS", "FormatKind", "DetectedFormat", "HexParseResult",
    "autodetect_and_parse", "is_likely_text", "parse_hexdump", "parse_plain_hex", "parse_xxd",
    "compute_diff_indices", "compute_highlight_indices", "count_search_matches",
    "find_all", "query_to_needle", "format_hex_view",
    # Layout
    "Calibration", "Definition", "Endianness", "PrimitiveType", "ScalarSpec", "TableSpec",
    "read_scalar", "read_table", "read_value", "width_of",
    "write_scalar", "write_table", "write_table_cell", "write_value",
    "parse_linear_equation",
    "definition_from_xdf", "load_definition", "load_definition_file",
    "parse_flags", "parse_json_definition", "parse_xdf",
    # Editing / export
    "apply_ascii_edit", "apply_hex_edit", "format_size", "parse_hex_cell",
    "set_byte", "truncate",
    "ExtractedString", "extract_printable_strings", "extract_utf16le_strings",
    "export_bytes", "suggested_filename",
]
