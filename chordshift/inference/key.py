"""Key inference - Best-fit key for a list of chords.

Scores every major and minor key by how many chord roots fall on its
scale. Ties are common (C major, A minor, F major and D minor all contain
C G Am F), so they are broken by, in order:
- the key named by the first chord (same tonic and mode)
- how many chords also have the quality the key expects
- whether the tonic chord appears at all
- a fixed enumeration order (majors C..B, then minors C..B)
"""

from dataclasses import dataclass, field
from typing import List, Optional, Sequence

import numpy as np

from ..core import Chord, Key, Mode
from ..core.constants import SCALE_INTERVALS
from ..parsing import tokenize
from .degrees import is_diatonic


@dataclass(frozen=True)
class KeyCandidate:
    """A key with its fit against a chord list."""

    key: Key
    score: int  # Chords whose root is on the scale
    first_chord_match: bool = False
    quality_matches: int = 0  # Chords fully diatonic (root and quality)
    has_tonic: bool = False

    @property
    def name(self) -> str:
        return self.key.name

    @property
    def rank(self):
        """Sort key, larger is better."""
        return (self.score, self.first_chord_match, self.quality_matches, self.has_tonic)


@dataclass(frozen=True)
class KeyEstimate:
    """Container for key inference results."""

    key: Optional[Key]
    score: int = 0
    total: int = 0  # Chords that were scored
    candidates: List[KeyCandidate] = field(default_factory=list)  # Best first

    @property
    def confidence(self) -> float:
        """Fraction of chords whose root fits the key."""
        return self.score / self.total if self.total else 0.0


def _key_masks() -> np.ndarray:
    """24x12 scale masks. Rows 0-11: C..B major, rows 12-23: C..B minor."""
    major = np.zeros(12, dtype=int)
    major[SCALE_INTERVALS["major"]] = 1
    minor = np.zeros(12, dtype=int)
    minor[SCALE_INTERVALS["minor"]] = 1
    return np.array([np.roll(major, i) for i in range(12)] + [np.roll(minor, i) for i in range(12)])


class KeyFinder:
    """Infer the key of a chord progression.

    Root counts are matched against 24 diatonic masks (12 rotations of the
    major and natural minor scales) in one matrix product.
    """

    KEY_MASKS = _key_masks()

    def __init__(self, allow_harmonic_minor: bool = True):
        """
        Initialize KeyFinder.

        Args:
            allow_harmonic_minor: Count a major V as diatonic in minor keys
                when comparing chord qualities
        """
        self.allow_harmonic_minor = allow_harmonic_minor

    def root_histogram(self, chords: Sequence[Chord]) -> np.ndarray:
        """Count of chord roots per pitch class."""
        histogram = np.zeros(12, dtype=int)
        for chord in chords:
            histogram[chord.root_pitch_class] += 1
        return histogram

    def find(self, chords: Sequence[Chord]) -> KeyEstimate:
        """
        Infer the key of parsed chords.

        Args:
            chords: Chords in progression order

        Returns:
            KeyEstimate with the best key (None for no chords) and all 24
            candidates, best first
        """
        if not chords:
            return KeyEstimate(key=None)

        scores = self.KEY_MASKS @ self.root_histogram(chords)
        first = chords[0]
        first_mode = Mode.MINOR if first.is_minor else Mode.MAJOR
        present = {c.root_pitch_class for c in chords}

        candidates = []
        for index, score in enumerate(scores):
            mode = Mode.MAJOR if index < 12 else Mode.MINOR
            key = Key.from_pitch_class(index % 12, mode)
            candidates.append(KeyCandidate(
                key=key,
                score=int(score),
                first_chord_match=(key.pitch_class == first.root_pitch_class and mode == first_mode),
                quality_matches=sum(
                    1 for c in chords if is_diatonic(c, key, self.allow_harmonic_minor)
                ),
                has_tonic=key.pitch_class in present,
            ))

        # Stable sort keeps enumeration order for full ties
        ranked = sorted(candidates, key=lambda c: c.rank, reverse=True)
        best = ranked[0]
        return KeyEstimate(key=best.key, score=best.score, total=len(chords), candidates=ranked)

    def find_from_symbols(self, symbols: Sequence[str]) -> KeyEstimate:
        """Infer the key of chord names; unparseable names are ignored."""
        return self.find(tokenize(list(symbols)).chords)


def infer_key(chords: Sequence[str]) -> KeyEstimate:
    """Infer the key of a list of chord names."""
    return KeyFinder().find_from_symbols(chords)
