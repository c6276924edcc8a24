# hex_reconstructor/errors.py

"""Exception types raised by the codec and definition layers.

Dialect parsers never raise: a dump that does not match simply yields ``None``
and malformed lines are reported as warnings on the detected format.
"""


class HexReconstructorError(Exception):
    """Base class for every error raised by this package."""


# ---------------- Layout codec ----------------
class LayoutError(HexReconstructorError):
    pass


class UnsupportedTypeError(LayoutError, ValueError):
    """A type name outside the supported primitive set."""


class UnsupportedEndiannessError(LayoutError, ValueError):
    """A byte order other than ``little`` or ``big``."""


class OutOfRangeError(LayoutError, IndexError):
    """A computed byte range falls outside the buffer."""


class RawValueError(LayoutError, ValueError):
    """An un-calibrated value cannot be represented in the target type."""


class TableShapeError(LayoutError, ValueError):
    pass


# ---------------- Definitions ----------------
class DefinitionImportError(HexReconstructorError, ValueError):
    """A definition document could not be turned into a Definition."""


class UnsupportedDefinitionFormatError(DefinitionImportError):
    pass


class EquationError(HexReconstructorError, ValueError):
    """A calibration equation is not a linear expression in X."""
