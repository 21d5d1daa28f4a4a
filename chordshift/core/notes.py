"""Note and key model - pitch classes, enharmonic spelling and named keys.

Pitch classes are plain ints (0=C ... 11=B). Every arithmetic path reduces
modulo 12, so callers may pass any integer offset.
"""

import re
import warnings
from dataclasses import dataclass
from enum import Enum
from typing import List, Optional, Tuple

from .constants import (
    SHARP_NAMES,
    FLAT_NAMES,
    NOTE_TO_PITCH_CLASS,
    ACCIDENTAL_ALIASES,
    SCALE_INTERVALS,
    MAJOR_KEY_PREFERS_SHARPS,
    MINOR_KEY_PREFERS_SHARPS,
    MAJOR_TONIC_NAMES,
    MINOR_TONIC_NAMES,
)
from .errors import InvalidKeyName, InvalidKeyNameWarning

# Root letter plus optional accidental at the start of a symbol
_ROOT_RE = re.compile(r"^([A-G])([#b♯♭]?)")

# Mode suffixes accepted after a key root, e.g. "Am", "A minor", "A:min"
_MINOR_SUFFIXES = {"m", "min", "minor", "-", "mi"}
_MAJOR_SUFFIXES = {"", "maj", "major", "M", "ma"}


class Mode(Enum):
    """Key modes."""

    MAJOR = "major"
    MINOR = "minor"


@dataclass(frozen=True)
class NoteSpelling:
    """A pitch class with one concrete name."""

    pitch_class: int
    name: str
    prefer_sharps: bool = True

    def __str__(self) -> str:
        return self.name


def spell(pitch_class: int, prefer_sharps: bool = True) -> NoteSpelling:
    """Spell a pitch class with sharps or flats.

    Total over all ints; the value is reduced mod 12.
    """
    pc = pitch_class % 12
    names = SHARP_NAMES if prefer_sharps else FLAT_NAMES
    return NoteSpelling(pitch_class=pc, name=names[pc], prefer_sharps=prefer_sharps)


def normalize_accidentals(text: str) -> str:
    """Replace unicode sharps/flats with ASCII ones."""
    for alias, ascii_char in ACCIDENTAL_ALIASES.items():
        text = text.replace(alias, ascii_char)
    return text


def split_root(symbol: str) -> Optional[Tuple[str, int, str]]:
    """Split a symbol into (root name, pitch class, remainder).

    Returns None if the symbol does not start with a note name.
    """
    match = _ROOT_RE.match(symbol)
    if not match:
        return None
    root = normalize_accidentals(match.group(1) + match.group(2))
    pc = NOTE_TO_PITCH_CLASS.get(root)
    if pc is None:
        return None
    return root, pc, symbol[match.end():]


def pitch_class_of(note_name: str) -> int:
    """Return the pitch class of a bare note name like 'C#' or 'Bb'.

    Raises:
        InvalidKeyName: if the name is not a note.
    """
    if note_name is None:
        raise InvalidKeyName(note_name)
    name = normalize_accidentals(note_name.strip())
    if name not in NOTE_TO_PITCH_CLASS:
        raise InvalidKeyName(note_name)
    return NOTE_TO_PITCH_CLASS[name]


@dataclass(frozen=True)
class Key:
    """A tonal center: root spelling plus mode."""

    root: NoteSpelling
    mode: Mode = Mode.MAJOR

    @classmethod
    def parse(cls, name: str) -> "Key":
        """
        Parse a key name.

        Accepts "C", "Am", "F#m", "Bb minor", "Ebmin", "C major", "A:min".

        Raises:
            InvalidKeyName: if the root or the mode suffix is not understood.
        """
        if not name or not name.strip():
            raise InvalidKeyName(name)

        parts = split_root(name.strip())
        if parts is None:
            raise InvalidKeyName(name)
        root_name, pc, rest = parts

        suffix = rest.strip().lstrip(":").strip()
        if suffix in _MINOR_SUFFIXES or suffix.lower() in {"minor", "min"}:
            mode = Mode.MINOR
        elif suffix in _MAJOR_SUFFIXES or suffix.lower() in {"major", "maj"}:
            mode = Mode.MAJOR
        else:
            raise InvalidKeyName(name)

        prefer = _signature_prefers_sharps(root_name, mode)
        return cls(NoteSpelling(pc, root_name, prefer), mode)

    @classmethod
    def from_pitch_class(cls, pitch_class: int, mode: Mode = Mode.MAJOR) -> "Key":
        """Build a key from a pitch class, spelled by key-signature convention."""
        pc = pitch_class % 12
        names = MAJOR_TONIC_NAMES if mode == Mode.MAJOR else MINOR_TONIC_NAMES
        root_name = names[pc]
        prefer = _signature_prefers_sharps(root_name, mode)
        return cls(NoteSpelling(pc, root_name, prefer), mode)

    @property
    def pitch_class(self) -> int:
        return self.root.pitch_class

    @property
    def is_minor(self) -> bool:
        return self.mode == Mode.MINOR

    @property
    def name(self) -> str:
        """Full name, e.g. 'C major', 'F# minor'."""
        return f"{self.root.name} {self.mode.value}"

    @property
    def short_name(self) -> str:
        """Chord-style name, e.g. 'C', 'F#m'."""
        return self.root.name + ("m" if self.is_minor else "")

    @property
    def prefers_sharps(self) -> bool:
        return _signature_prefers_sharps(self.root.name, self.mode)

    @property
    def scale_pitch_classes(self) -> List[int]:
        """Pitch classes of the key's (natural) scale, tonic first."""
        intervals = SCALE_INTERVALS[self.mode.value]
        return [(self.pitch_class + i) % 12 for i in intervals]

    def contains(self, pitch_class: int) -> bool:
        return pitch_class % 12 in self.scale_pitch_classes

    def spell(self, pitch_class: int) -> NoteSpelling:
        """Spell a pitch class the way this key's signature would."""
        return spell(pitch_class, self.prefers_sharps)

    @property
    def relative(self) -> "Key":
        """Relative minor (3 semitones down) or relative major (3 up)."""
        if self.is_minor:
            return Key.from_pitch_class(self.pitch_class + 3, Mode.MAJOR)
        return Key.from_pitch_class(self.pitch_class - 3, Mode.MINOR)

    @property
    def parallel(self) -> "Key":
        """Same root, other mode."""
        other = Mode.MAJOR if self.is_minor else Mode.MINOR
        return Key(NoteSpelling(self.pitch_class, self.root.name,
                                _signature_prefers_sharps(self.root.name, other)), other)

    @property
    def dominant(self) -> "Key":
        return Key.from_pitch_class(self.pitch_class + 7, self.mode)

    @property
    def subdominant(self) -> "Key":
        return Key.from_pitch_class(self.pitch_class + 5, self.mode)

    def __str__(self) -> str:
        return self.name


def _signature_prefers_sharps(root_name: str, mode: Mode) -> bool:
    table = MINOR_KEY_PREFERS_SHARPS if mode == Mode.MINOR else MAJOR_KEY_PREFERS_SHARPS
    return table.get(root_name, True)


def prefers_sharps(key_name: Optional[str]) -> bool:
    """
    Whether a key is conventionally written with sharps.

    Pure lookup against the key-signature table. Unknown or missing key
    names fall back to the C major convention (sharps).
    """
    if not key_name:
        return True
    try:
        key = Key.parse(key_name)
    except InvalidKeyName:
        return True
    return key.prefers_sharps


def semitones_between(from_key: str, to_key: str, strict: bool = True) -> int:
    """
    Ascending semitone distance from one key to another (0-11).

    Only the roots are compared; mode and chord suffixes are ignored,
    so "C" -> "G" is 7 and "G" -> "C" is 5.

    Args:
        from_key: Source key or chord name
        to_key: Target key or chord name
        strict: Raise on unknown names; otherwise warn and return 0

    Raises:
        InvalidKeyName: if either root is not understood and strict is set
    """
    from_parts = split_root(from_key.strip()) if from_key else None
    to_parts = split_root(to_key.strip()) if to_key else None

    if from_parts is None or to_parts is None:
        bad = from_key if from_parts is None else to_key
        if strict:
            raise InvalidKeyName(bad)
        warnings.warn(f"Unknown key name {bad!r}, assuming no transposition",
                      InvalidKeyNameWarning, stacklevel=2)
        return 0

    return (to_parts[1] - from_parts[1]) % 12


class TransposeInterval(Enum):
    """Common transposition intervals and their signed semitone values."""

    HALF_STEP_UP = ("Half Step Up", 1)
    HALF_STEP_DOWN = ("Half Step Down", -1)
    WHOLE_STEP_UP = ("Whole Step Up", 2)
    WHOLE_STEP_DOWN = ("Whole Step Down", -2)
    MINOR_THIRD_UP = ("Minor 3rd Up", 3)
    MINOR_THIRD_DOWN = ("Minor 3rd Down", -3)
    MAJOR_THIRD_UP = ("Major 3rd Up", 4)
    MAJOR_THIRD_DOWN = ("Major 3rd Down", -4)
    FOURTH_UP = ("4th Up", 5)
    FOURTH_DOWN = ("4th Down", -5)
    FIFTH_UP = ("5th Up", 7)
    FIFTH_DOWN = ("5th Down", -7)

    @property
    def label(self) -> str:
        return self.value[0]

    @property
    def semitones(self) -> int:
        return self.value[1]
