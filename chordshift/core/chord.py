"""Chord data class - root, opaque quality suffix and optional slash bass."""

import re
from dataclasses import dataclass, replace
from enum import Enum
from typing import Optional, Set

from .errors import UnparseableChord
from .notes import NoteSpelling, normalize_accidentals, spell, split_root


class QualityFamily(Enum):
    """Chord quality families the analysis layer understands."""

    MAJOR = "major"
    MINOR = "minor"
    DOMINANT7 = "dominant7"
    MAJOR7 = "major7"
    MINOR7 = "minor7"
    HALF_DIMINISHED = "half_diminished"
    DIMINISHED = "diminished"
    DIMINISHED7 = "diminished7"
    AUGMENTED = "augmented"
    SUSPENDED = "suspended"
    POWER = "power"
    OTHER = "other"  # Suffix not modelled


# Suffix patterns, checked in order. First match wins.
_QUALITY_PATTERNS = [
    (re.compile(r"^(maj|M|Δ|ma)$"), QualityFamily.MAJOR),
    (re.compile(r"^(6|add9|add2|6/9|69|add4|add11)$"), QualityFamily.MAJOR),
    (re.compile(r"^(m7b5|min7b5|m7-5|ø|ø7)$"), QualityFamily.HALF_DIMINISHED),
    (re.compile(r"^(dim7|°7|o7)$"), QualityFamily.DIMINISHED7),
    (re.compile(r"^(dim|°|o)$"), QualityFamily.DIMINISHED),
    (re.compile(r"^(aug|\+|\+5|#5|aug7|7#5|\+7)$"), QualityFamily.AUGMENTED),
    (re.compile(r"^(maj7|M7|Δ7|maj9|M9|maj11|maj13|ma7|maj7#11)$"), QualityFamily.MAJOR7),
    (re.compile(r"^(m7|min7|-7|m9|min9|m11|m13|mi7)$"), QualityFamily.MINOR7),
    (re.compile(r"^(m|min|-|mi|m6|min6|madd9|m\(add9\)|mmaj7|m\(maj7\))$"), QualityFamily.MINOR),
    (re.compile(r"^(7|9|11|13|7b9|7#9|7b5|7#11|9sus4|13b9|7alt)$"), QualityFamily.DOMINANT7),
    (re.compile(r"^(sus|sus2|sus4|7sus4|7sus2|7sus|sus24)$"), QualityFamily.SUSPENDED),
    (re.compile(r"^5$"), QualityFamily.POWER),
]

# Building blocks of a chord suffix. Section labels like "Chorus" fall outside it.
_SUFFIX_RE = re.compile(r"^(?:maj|Maj|min|Min|dim|aug|sus|add|alt|omit|no|mi|ma|m|M|Δ|ø|°|o|\+|-|#|b|♯|♭|\d+|\(|\)|,|/)*$")

# Triad intervals (semitones from root) per family
FAMILY_INTERVALS = {
    QualityFamily.MAJOR: [0, 4, 7],
    QualityFamily.MINOR: [0, 3, 7],
    QualityFamily.DOMINANT7: [0, 4, 7, 10],
    QualityFamily.MAJOR7: [0, 4, 7, 11],
    QualityFamily.MINOR7: [0, 3, 7, 10],
    QualityFamily.HALF_DIMINISHED: [0, 3, 6, 10],
    QualityFamily.DIMINISHED: [0, 3, 6],
    QualityFamily.DIMINISHED7: [0, 3, 6, 9],
    QualityFamily.AUGMENTED: [0, 4, 8],
    QualityFamily.SUSPENDED: [0, 5, 7],
    QualityFamily.POWER: [0, 7],
}


def classify_quality(suffix: str) -> QualityFamily:
    """Classify a chord suffix ('m7', 'sus4', ...) into a family."""
    suffix = normalize_accidentals(suffix.strip())
    if suffix == "":
        return QualityFamily.MAJOR
    for pattern, family in _QUALITY_PATTERNS:
        if pattern.match(suffix):
            return family
    return QualityFamily.OTHER


@dataclass(frozen=True)
class Chord:
    """A chord symbol split into root, quality suffix and optional bass.

    The quality suffix is kept verbatim; only root and bass are ever
    re-spelled.
    """

    root: NoteSpelling
    quality: str = ""
    bass: Optional[NoteSpelling] = None

    @classmethod
    def parse(cls, text: str, offset: int = 0) -> "Chord":
        """
        Parse a chord symbol like 'Cmaj7', 'F#m', 'D/F#', 'Bbsus4'.

        Args:
            text: Chord symbol
            offset: Source offset, reported on failure

        Raises:
            UnparseableChord: if the text is not a root, a chord suffix and an
                optional slash bass.
        """
        if not text or text != text.strip():
            raise UnparseableChord(text, offset)

        parts = split_root(text)
        if parts is None:
            raise UnparseableChord(text, offset)
        root_name, root_pc, rest = parts

        bass = None
        if "/" in rest:
            rest, bass_text = rest.rsplit("/", 1)
            bass_parts = split_root(bass_text)
            # "6/9" is a quality, not a slash chord
            if bass_parts is None and bass_text.isdigit():
                rest = f"{rest}/{bass_text}"
            elif bass_parts is None or bass_parts[2] != "":
                raise UnparseableChord(text, offset)
            else:
                bass_name, bass_pc, _ = bass_parts
                bass = NoteSpelling(bass_pc, bass_name, "b" not in bass_name[1:])

        if not _SUFFIX_RE.match(rest):
            raise UnparseableChord(text, offset)

        root = NoteSpelling(root_pc, root_name, "b" not in root_name[1:])
        return cls(root=root, quality=rest, bass=bass)

    @classmethod
    def try_parse(cls, text: str) -> Optional["Chord"]:
        try:
            return cls.parse(text)
        except UnparseableChord:
            return None

    @property
    def root_pitch_class(self) -> int:
        return self.root.pitch_class

    @property
    def bass_pitch_class(self) -> Optional[int]:
        return self.bass.pitch_class if self.bass else None

    @property
    def family(self) -> QualityFamily:
        return classify_quality(self.quality)

    @property
    def is_supported(self) -> bool:
        """False when the suffix is not modelled by analysis."""
        return self.family != QualityFamily.OTHER

    @property
    def is_minor(self) -> bool:
        return self.family in (QualityFamily.MINOR, QualityFamily.MINOR7)

    @property
    def pitch_classes(self) -> Set[int]:
        """Chord tones as pitch classes (triad or seventh, plus bass)."""
        intervals = FAMILY_INTERVALS.get(self.family, [0, 4, 7])
        tones = {(self.root_pitch_class + i) % 12 for i in intervals}
        if self.bass is not None:
            tones.add(self.bass.pitch_class)
        return tones

    @property
    def symbol(self) -> str:
        """Chord symbol, e.g. 'Cmaj7', 'D/F#'."""
        text = f"{self.root.name}{self.quality}"
        if self.bass is not None:
            text += f"/{self.bass.name}"
        return text

    def with_quality(self, quality: str) -> "Chord":
        return replace(self, quality=quality)

    def with_bass(self, bass: Optional[NoteSpelling]) -> "Chord":
        return replace(self, bass=bass)

    def transposed(self, semitones: int, prefer_sharps: bool = True) -> "Chord":
        """Shift root and bass, re-spelling both; quality is untouched."""
        root = spell(self.root_pitch_class + semitones, prefer_sharps)
        bass = None
        if self.bass is not None:
            bass = spell(self.bass.pitch_class + semitones, prefer_sharps)
        return Chord(root=root, quality=self.quality, bass=bass)

    def __str__(self) -> str:
        return self.symbol
