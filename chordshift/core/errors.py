"""Errors, warnings and diagnostics.

Nothing in chordshift is fatal. Parsing problems on single tokens are
collected as ``Diagnostic`` records, key names that cannot be understood
raise ``InvalidKeyName`` (or warn, in non-strict mode).
"""

from dataclasses import dataclass
from enum import Enum
from typing import Optional


class ChordShiftError(Exception):
    """Base class for chordshift errors."""


class InvalidKeyName(ChordShiftError, ValueError):
    """A key or note name whose root could not be understood."""

    def __init__(self, name: Optional[str]):
        self.name = name
        super().__init__(f"Unknown key name: {name!r}")


class UnparseableChord(ChordShiftError, ValueError):
    """A token that is not a chord symbol."""

    def __init__(self, text: str, offset: int = 0):
        self.text = text
        self.offset = offset
        super().__init__(f"Unparseable chord {text!r} at offset {offset}")


class InvalidKeyNameWarning(UserWarning):
    """Emitted when a key name is replaced by a neutral fallback."""


class DiagnosticKind(Enum):
    """Kinds of non-fatal problems reported alongside results."""

    UNPARSEABLE_CHORD = "unparseable_chord"
    UNSUPPORTED_QUALITY = "unsupported_quality"
    INVALID_KEY_NAME = "invalid_key_name"


@dataclass(frozen=True)
class Diagnostic:
    """A non-fatal problem found while processing input."""

    kind: DiagnosticKind
    text: str
    offset: int  # Character offset in text, or element index in a chord list
    message: str = ""

    @classmethod
    def from_error(cls, error: UnparseableChord) -> "Diagnostic":
        return cls(
            kind=DiagnosticKind.UNPARSEABLE_CHORD,
            text=error.text,
            offset=error.offset,
            message=str(error),
        )
