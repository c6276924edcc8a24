# hex_reconstructor/cli.py
from __future__ import annotations

import argparse
import logging
import sys
from pathlib import Path
from typing import Iterable, Sequence

from .__about__ import about_text
from .definitions import load_definition_file
from .errors import HexReconstructorError
from .export import export_bytes, suggested_filename
from .layout import (
    Definition,
    ScalarSpec,
    TableSpec,
    read_scalar,
    read_table,
    write_scalar,
    write_table,
    write_table_cell,
)
from .logic import apply_ascii_edit, apply_hex_edit, format_size, parse_hex_cell, parse_int_maybe
from .parse import HexParseResult, autodetect_and_parse
from .search import compute_diff_indices, count_search_matches, find_all, query_to_needle
from .strings import DEFAULT_MIN_STRING_LENGTH, extract_printable_strings, extract_utf16le_strings
from .view import DEFAULT_BYTES_PER_ROW, MAX_BYTES_PER_ROW, MIN_BYTES_PER_ROW, format_hex_view

logger = logging.getLogger(__name__)


# ---------- helpers ----------
def _print_kv(key: str, value: str | Iterable[str]) -> None:
    if isinstance(value, (list, tuple)):
        print(f"{key}: {' '.join(str(v) for v in value)}")
    else:
        print(f"{key}: {value}")

def _fmt(value: float) -> str:
    return f"{value:g}"

def _row_width(text: str) -> int:
    return max(MIN_BYTES_PER_ROW, min(MAX_BYTES_PER_ROW, int(text)))

def _load(path: str) -> HexParseResult:
    payload = sys.stdin.buffer.read() if path == "-" else Path(path).read_bytes()
    return autodetect_and_parse(payload)

def _find_spec(definition: Definition, spec_id: str) -> ScalarSpec | TableSpec:
    for spec in (*definition.scalars, *definition.tables):
        if spec.id == spec_id:
            return spec
    raise ValueError(f"no scalar or table with id {spec_id!r}")

def _parse_rows(text: str) -> list[list[float]]:
    """Table rows written as ``1,2;3,4``."""
    return [[float(v) for v in row.split(",")] for row in text.split(";") if row.strip()]

def _spec_line(spec: ScalarSpec | TableSpec) -> str:
    shape = f" {spec.rows}x{spec.cols}" if isinstance(spec, TableSpec) else ""
    unit = f" [{spec.unit}]" if spec.unit else ""
    return (
        f"{spec.id}  {spec.name}{unit}  @0x{spec.address:x}{shape}  "
        f"{spec.type.value} {spec.endianness.value}  "
        f"X*{_fmt(spec.factor)}+{_fmt(spec.offset)}"
    )


# ---------- subcommands ----------
def cmd_detect(args: argparse.Namespace) -> int:
    res = _load(args.file)
    det = res.detected
    _print_kv("Format", det.kind.value)
    if det.mime:
        _print_kv("MIME", det.mime)
    if det.extension:
        _print_kv("Extension", det.extension)
    _print_kv("Suggested name", suggested_filename(det))
    _print_kv("Size", format_size(len(res.data)))
    for warning in det.warnings:
        _print_kv("Warning", warning)
    return 0


def cmd_view(args: argparse.Namespace) -> int:
    data = _load(args.file).data
    view = format_hex_view(data, args.row_width, args.highlight)
    if view:
        print(view)
    if args.highlight:
        _print_kv("Matches", str(count_search_matches(data, args.highlight)))
    return 0


def cmd_search(args: argparse.Namespace) -> int:
    data = _load(args.file).data
    starts = find_all(data, query_to_needle(args.query))
    _print_kv("Matches", str(len(starts)))
    if starts:
        _print_kv("Offsets", [f"{i:08x}" for i in starts])
    return 0


def cmd_diff(args: argparse.Namespace) -> int:
    a = _load(args.file_a).data
    b = _load(args.file_b).data
    diff = sorted(compute_diff_indices(a, b))
    _print_kv("Size A", format_size(len(a)))
    _print_kv("Size B", format_size(len(b)))
    _print_kv("Differences", str(len(diff)))
    if diff:
        shown = diff if args.limit <= 0 else diff[:args.limit]
        _print_kv("Offsets", [f"{i:08x}" for i in shown])
    return 1 if diff else 0


def cmd_strings(args: argparse.Namespace) -> int:
    data = _load(args.file).data
    extract = extract_utf16le_strings if args.utf16 else extract_printable_strings
    for found in extract(data, args.min_length):
        print(f"{found.offset:08x}  {found.text}")
    return 0


def cmd_export(args: argparse.Namespace) -> int:
    res = _load(args.file)
    out = export_bytes(res.data, args.output or suggested_filename(res.detected))
    _print_kv("Wrote", f"{out} ({format_size(len(res.data))})")
    return 0


def cmd_edit(args: argparse.Namespace) -> int:
    data = _load(args.file).data
    offset = parse_int_maybe(args.offset)
    if args.ascii:
        if not args.value:
            raise ValueError("ASCII edit needs a character")
        data = apply_ascii_edit(data, offset, args.value)
    else:
        if parse_hex_cell(args.value) is None:
            raise ValueError(f"Invalid hex byte: {args.value}")
        data = apply_hex_edit(data, offset, args.value)
    export_bytes(data, args.output)
    _print_kv("Byte", f"{offset:08x} = {data[offset]:02x}")
    return 0


def cmd_defs(args: argparse.Namespace) -> int:
    definition = load_definition_file(args.definition)
    _print_kv("Name", definition.name or "")
    if definition.description:
        _print_kv("Description", definition.description)
    for s in definition.scalars:
        _print_kv("Scalar", _spec_line(s))
    for t in definition.tables:
        _print_kv("Table", _spec_line(t))
    return 0


def cmd_read(args: argparse.Namespace) -> int:
    data = _load(args.file).data
    definition = load_definition_file(args.definition)
    specs = [_find_spec(definition, args.id)] if args.id else [*definition.scalars, *definition.tables]
    for spec in specs:
        unit = f" {spec.unit}" if spec.unit else ""
        if isinstance(spec, TableSpec):
            print(f"{spec.name} ({spec.rows}x{spec.cols}){unit}:")
            for row in read_table(data, spec):
                print("  " + " ".join(_fmt(v) for v in row))
        else:
            _print_kv(spec.name, f"{_fmt(read_scalar(data, spec))}{unit}")
    return 0


def cmd_write(args: argparse.Namespace) -> int:
    data = _load(args.file).data
    definition = load_definition_file(args.definition)
    spec = _find_spec(definition, args.id)
    if isinstance(spec, ScalarSpec):
        data = write_scalar(data, spec, float(args.value))
    elif args.cell:
        row, col = args.cell
        data = write_table_cell(data, spec, row, col, float(args.value))
    else:
        data = write_table(data, spec, _parse_rows(args.value))
    export_bytes(data, args.output)
    _print_kv("Wrote", f"{spec.id} → {args.output}")
    return 0


# ---------- parser ----------
def build_parser() -> argparse.ArgumentParser:
    p = argparse.ArgumentParser(
        prog="hex-reconstructor",
        description="Hex Dump ⇆ Binary Reconstructor (CLI)",
        formatter_class=argparse.RawDescriptionHelpFormatter,
    )
    p.add_argument("--version", action="version", version=about_text())
    p.add_argument("-v", "--verbose", action="count", default=0,
                   help="log more detail (-v info, -vv debug)")

    sp = p.add_subparsers(dest="cmd")

    pd = sp.add_parser("detect", help="detect the format of a dump or binary")
    pd.add_argument("file", help="input file ('-' for stdin)")
    pd.set_defaults(func=cmd_detect)

    pv = sp.add_parser("view", help="render the reconstructed bytes as a hex view")
    pv.add_argument("file", help="input file ('-' for stdin)")
    pv.add_argument(
        "--row-width", type=_row_width, default=DEFAULT_BYTES_PER_ROW,
        help=f"bytes per row ({MIN_BYTES_PER_ROW}..{MAX_BYTES_PER_ROW}, default: {DEFAULT_BYTES_PER_ROW})"
    )
    pv.add_argument("--highlight", default=None, help="hex bytes ('41 42') or text to highlight")
    pv.set_defaults(func=cmd_view)

    ps = sp.add_parser("search", help="count and locate matches of a hex or text query")
    ps.add_argument("file")
    ps.add_argument("query", help="hex like '41 42' / '4142' or literal text")
    ps.set_defaults(func=cmd_search)

    pf = sp.add_parser("diff", help="list offsets where two inputs differ (exit 1 if any)")
    pf.add_argument("file_a")
    pf.add_argument("file_b")
    pf.add_argument("--limit", type=int, default=64, help="max offsets to print (0: all, default: 64)")
    pf.set_defaults(func=cmd_diff)

    pt = sp.add_parser("strings", help="extract printable strings")
    pt.add_argument("file")
    pt.add_argument("--min-length", type=int, default=DEFAULT_MIN_STRING_LENGTH)
    pt.add_argument("--utf16", action="store_true", help="scan UTF-16LE instead of ASCII")
    pt.set_defaults(func=cmd_strings)

    px = sp.add_parser("export", help="write the reconstructed bytes to a file")
    px.add_argument("file")
    px.add_argument("-o", "--output", help="output path (default: suggested name)")
    px.set_defaults(func=cmd_export)

    pe = sp.add_parser("edit", help="replace one byte and write the result")
    pe.add_argument("file")
    pe.add_argument("offset", help="byte offset (dec or 0x…)")
    pe.add_argument("value", help="new byte as 1-2 hex digits (or a character with --ascii)")
    pe.add_argument("--ascii", action="store_true")
    pe.add_argument("-o", "--output", required=True)
    pe.set_defaults(func=cmd_edit)

    pn = sp.add_parser("defs", help="list the scalars and tables of a definition")
    pn.add_argument("definition", help=".json or .xdf definition")
    pn.set_defaults(func=cmd_defs)

    pr = sp.add_parser("read", help="read calibrated values through a definition")
    pr.add_argument("file")
    pr.add_argument("definition")
    pr.add_argument("--id", help="only this scalar/table")
    pr.set_defaults(func=cmd_read)

    pw = sp.add_parser("write", help="write a calibrated scalar or table and save the result")
    pw.add_argument("file")
    pw.add_argument("definition")
    pw.add_argument("id")
    pw.add_argument("value", help="scalar value, table rows like '1,2;3,4', or one cell with --cell")
    pw.add_argument("--cell", nargs=2, type=int, metavar=("ROW", "COL"))
    pw.add_argument("-o", "--output", required=True)
    pw.set_defaults(func=cmd_write)

    return p


def main(argv: Sequence[str] | None = None) -> int:
    parser = build_parser()
    args = parser.parse_args(argv)

    logging.basicConfig(
        level=max(logging.DEBUG, logging.WARNING - 10 * args.verbose),
        format="%(levelname)s: %(message)s",
    )

    if not getattr(args, "cmd", None):
        parser.print_help()
        return 0

    try:
        return args.func(args)
    except (HexReconstructorError, OSError, ValueError) as e:
        logger.debug("%s failed", args.cmd, exc_info=True)
        print(f"error: {e}", file=sys.stderr)
        return 1


if __name__ == "__main__":
    raise SystemExit(main())
