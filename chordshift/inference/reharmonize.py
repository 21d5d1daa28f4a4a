"""Reharmonization - Alternative chord progressions of the same length.

Every variation keeps one chord per input chord, so it can be dropped into
the same bars. Generation is deterministic: the same chords and style always
give the same variations in the same order.

Styles:
- simpler: basic triads, power chords, diatonic-only
- jazzier: tritone substitutions, secondary dominants, diatonic sevenths, 9ths
- colorful: added 7ths, suspensions, added tones, inversions
- balanced: round-robin mix of the three above
"""

from dataclasses import dataclass, field
from enum import Enum
from itertools import zip_longest
from typing import Callable, List, Optional, Sequence, Union

from ..core import Chord, Key, QualityFamily, spell
from .degrees import (
    HarmonicFunction,
    degree_function,
    diatonic_chord,
    expected_seventh,
    is_diatonic,
    scale_degree,
    triad_family,
    FAMILY_SUFFIX,
)
from .key import KeyFinder


class ReharmonizationStyle(Enum):
    """Reharmonization flavours."""

    SIMPLER = "simpler"
    JAZZIER = "jazzier"
    COLORFUL = "colorful"
    BALANCED = "balanced"


class VariationType(Enum):
    SIMPLER = "Simpler"
    JAZZ_REHARMONIZATION = "Jazz Reharmonization"
    SUBSTITUTION = "Chord Substitution"
    INVERSION = "With Inversions"
    EXTENSIONS = "With Extensions"


class Difficulty(Enum):
    BEGINNER = "Beginner"
    INTERMEDIATE = "Intermediate"
    ADVANCED = "Advanced"


@dataclass(frozen=True)
class ProgressionVariation:
    """An alternative progression, one chord per original chord."""

    chords: List[str]
    variation_type: VariationType
    description: str
    difficulty: Difficulty


@dataclass(frozen=True)
class ReharmonizerConfig:
    """Configuration for reharmonization.

    Attributes:
        max_variations: Upper bound on variations returned (default: 8)
        power_chord_max_length: Longest progression offered as power chords (default: 6)
    """

    max_variations: int = 8
    power_chord_max_length: int = 6


# Input chord slot: the original text plus its parse, None if unparseable
@dataclass(frozen=True)
class _Slot:
    text: str
    chord: Optional[Chord] = None

    @property
    def usable(self) -> bool:
        return self.chord is not None and self.chord.is_supported


@dataclass
class _Context:
    slots: List[_Slot]
    key: Optional[Key] = None
    config: ReharmonizerConfig = field(default_factory=ReharmonizerConfig)

    def rewrite(self, change: Callable[[int, Chord], Optional[Chord]]) -> List[str]:
        """Apply ``change`` to usable chords; None keeps the original text."""
        result = []
        for i, slot in enumerate(self.slots):
            new = change(i, slot.chord) if slot.usable else None
            result.append(new.symbol if new is not None else slot.text)
        return result

    def next_chord(self, index: int) -> Optional[Chord]:
        if index + 1 < len(self.slots) and self.slots[index + 1].usable:
            return self.slots[index + 1].chord
        return None

    def function_of(self, chord: Chord) -> HarmonicFunction:
        if self.key is None or not is_diatonic(chord, self.key):
            return HarmonicFunction.OTHER
        return degree_function(scale_degree(chord.root_pitch_class, self.key))


def _resolves_down_a_fifth(chord: Chord, target: Optional[Chord]) -> bool:
    return target is not None and (target.root_pitch_class - chord.root_pitch_class) % 12 == 5


def _is_plain_major(chord: Chord) -> bool:
    return chord.quality in ("", "maj", "M") and chord.family == QualityFamily.MAJOR


def _is_plain_minor(chord: Chord) -> bool:
    return chord.quality in ("m", "min", "-", "mi")


# Simpler

def _basic_triads(ctx: _Context) -> List[str]:
    def change(_, chord: Chord) -> Chord:
        triad = triad_family(chord.family) or QualityFamily.MAJOR
        return Chord(root=chord.root, quality=FAMILY_SUFFIX[triad])
    return ctx.rewrite(change)


def _power_chords(ctx: _Context) -> List[str]:
    if len(ctx.slots) > ctx.config.power_chord_max_length:
        return []
    return ctx.rewrite(lambda _, chord: Chord(root=chord.root, quality="5"))


def _diatonic_only(ctx: _Context) -> List[str]:
    """Swap out-of-key chords for the in-key chord sharing most tones."""
    if ctx.key is None:
        return []
    key = ctx.key
    in_key = [diatonic_chord(d, key) for d in range(1, 8)]

    def change(_, chord: Chord) -> Optional[Chord]:
        if is_diatonic(chord, key):
            return None
        tones = chord.pitch_classes
        # max() keeps the lowest degree on ties
        return max(in_key, key=lambda c: len(c.pitch_classes & tones))
    return ctx.rewrite(change)


# Jazzier

def _tritone_substitutions(ctx: _Context) -> List[str]:
    def change(_, chord: Chord) -> Optional[Chord]:
        if chord.family != QualityFamily.DOMINANT7:
            return None
        # Substitutes are conventionally spelled with flats (G7 -> Db7)
        return chord.transposed(6, prefer_sharps=False)
    return ctx.rewrite(change)


def _secondary_dominants(ctx: _Context) -> List[str]:
    """Turn chords that fall a fifth into the next chord into dominant 7ths."""
    allowed = {QualityFamily.MAJOR, QualityFamily.MINOR, QualityFamily.MAJOR7, QualityFamily.MINOR7}

    def change(i: int, chord: Chord) -> Optional[Chord]:
        if chord.family not in allowed or not _resolves_down_a_fifth(chord, ctx.next_chord(i)):
            return None
        return chord.with_quality("7")
    return ctx.rewrite(change)


def _diatonic_sevenths(ctx: _Context) -> List[str]:
    if ctx.key is None:
        return []
    key = ctx.key

    def change(_, chord: Chord) -> Optional[Chord]:
        if triad_family(chord.family) is None or not is_diatonic(chord, key):
            return None
        degree = scale_degree(chord.root_pitch_class, key)
        seventh = expected_seventh(degree, key)
        if key.is_minor and degree == 5 and triad_family(chord.family) == QualityFamily.MAJOR:
            seventh = QualityFamily.DOMINANT7
        return chord.with_quality(FAMILY_SUFFIX[seventh])
    return ctx.rewrite(change)


_NINTHS = {
    QualityFamily.DOMINANT7: "9",
    QualityFamily.MAJOR7: "maj9",
    QualityFamily.MINOR7: "m9",
}


def _ninths(ctx: _Context) -> List[str]:
    """9th chords on top of the diatonic sevenths."""
    sevenths = _diatonic_sevenths(ctx) or [s.text for s in ctx.slots]
    stacked = _Context([_Slot(text, Chord.try_parse(text)) for text in sevenths], ctx.key, ctx.config)

    def change(_, chord: Chord) -> Optional[Chord]:
        suffix = _NINTHS.get(chord.family)
        return chord.with_quality(suffix) if suffix else None
    return stacked.rewrite(change)


# Colorful

def _added_sevenths(ctx: _Context) -> List[str]:
    def change(_, chord: Chord) -> Optional[Chord]:
        if _is_plain_major(chord):
            return chord.with_quality("maj7")
        if _is_plain_minor(chord):
            return chord.with_quality("m7")
        return None
    return ctx.rewrite(change)


def _suspensions(ctx: _Context) -> List[str]:
    """sus4 on dominant chords, sus2 on tonic chords."""
    def change(i: int, chord: Chord) -> Optional[Chord]:
        if not _is_plain_major(chord):
            return None
        function = ctx.function_of(chord)
        if function == HarmonicFunction.DOMINANT or _resolves_down_a_fifth(chord, ctx.next_chord(i)):
            return chord.with_quality("sus4")
        if function == HarmonicFunction.TONIC:
            return chord.with_quality("sus2")
        return None
    return ctx.rewrite(change)


def _added_tones(ctx: _Context) -> List[str]:
    """6 on tonic major chords, add9 on subdominant major chords."""
    def change(_, chord: Chord) -> Optional[Chord]:
        if not _is_plain_major(chord):
            return None
        function = ctx.function_of(chord)
        if function == HarmonicFunction.TONIC:
            return chord.with_quality("6")
        if function == HarmonicFunction.SUBDOMINANT:
            return chord.with_quality("add9")
        return None
    return ctx.rewrite(change)


def _distance(a: int, b: int) -> int:
    d = (a - b) % 12
    return min(d, 12 - d)


def _inversions(ctx: _Context) -> List[str]:
    """Put the chord tone nearest the previous bass note in the bass."""
    sharps = ctx.key.prefers_sharps if ctx.key is not None else True
    result = []
    previous_bass = None

    for slot in ctx.slots:
        chord = slot.chord
        if not slot.usable:
            result.append(slot.text)
            continue
        if triad_family(chord.family) is None or chord.bass is not None:
            result.append(slot.text)
            previous_bass = chord.bass_pitch_class if chord.bass is not None else chord.root_pitch_class
            continue

        bass = chord.root_pitch_class
        if previous_bass is not None:
            tones = sorted(chord.pitch_classes - {chord.root_pitch_class},
                           key=lambda pc: ((pc - chord.root_pitch_class) % 12))
            for pc in tones:
                if _distance(pc, previous_bass) < _distance(bass, previous_bass):
                    bass = pc

        if bass == chord.root_pitch_class:
            result.append(slot.text)
        else:
            result.append(chord.with_bass(spell(bass, sharps)).symbol)
        previous_bass = bass

    return result


# (generator, variation type, description, difficulty), in output order per style
_GENERATORS = {
    ReharmonizationStyle.SIMPLER: [
        (_basic_triads, VariationType.SIMPLER, "Basic triads only - easiest to play", Difficulty.BEGINNER),
        (_power_chords, VariationType.SIMPLER, "Power chords - great for rock/punk", Difficulty.BEGINNER),
        (_diatonic_only, VariationType.SIMPLER, "Stay in key - diatonic chords only", Difficulty.BEGINNER),
    ],
    ReharmonizationStyle.JAZZIER: [
        (_tritone_substitutions, VariationType.JAZZ_REHARMONIZATION,
         "Tritone substitution on dominant chords", Difficulty.ADVANCED),
        (_secondary_dominants, VariationType.JAZZ_REHARMONIZATION,
         "Secondary dominants into chords a fifth below", Difficulty.ADVANCED),
        (_diatonic_sevenths, VariationType.JAZZ_REHARMONIZATION,
         "Diatonic seventh chords", Difficulty.INTERMEDIATE),
        (_ninths, VariationType.EXTENSIONS, "Add 9th extensions", Difficulty.ADVANCED),
    ],
    ReharmonizationStyle.COLORFUL: [
        (_added_sevenths, VariationType.EXTENSIONS, "Add 7th chords for richer harmony", Difficulty.INTERMEDIATE),
        (_suspensions, VariationType.SUBSTITUTION, "Add suspended chords for tension", Difficulty.INTERMEDIATE),
        (_added_tones, VariationType.EXTENSIONS, "Add6 and add9 chords", Difficulty.INTERMEDIATE),
        (_inversions, VariationType.INVERSION, "Use inversions for smoother bass movement", Difficulty.INTERMEDIATE),
    ],
}


class Reharmonizer:
    """Generate reharmonized variations of a progression."""

    def __init__(self, config: Optional[ReharmonizerConfig] = None):
        self.config = config or ReharmonizerConfig()
        self.key_finder = KeyFinder()

    def reharmonize(
        self,
        chords: Sequence[str],
        style: Union[ReharmonizationStyle, str] = ReharmonizationStyle.BALANCED,
        key: Optional[Key] = None,
    ) -> List[ProgressionVariation]:
        """
        Generate alternative progressions.

        Args:
            chords: Chord names in order
            style: ReharmonizationStyle or its value ("simpler", "jazzier", ...)
            key: Key to reharmonize in; inferred from the chords if omitted

        Returns:
            Distinct variations, none equal to the input, at most
            ``config.max_variations``

        Raises:
            ValueError: if ``style`` is not a known style name
        """
        style = ReharmonizationStyle(style)
        slots = [_Slot(text, Chord.try_parse(text)) for text in chords]
        if not any(slot.usable for slot in slots):
            return []

        if key is None:
            key = self.key_finder.find([s.chord for s in slots if s.chord is not None]).key
        ctx = _Context(slots, key, self.config)

        if style == ReharmonizationStyle.BALANCED:
            groups = [_GENERATORS[s] for s in (
                ReharmonizationStyle.SIMPLER,
                ReharmonizationStyle.JAZZIER,
                ReharmonizationStyle.COLORFUL,
            )]
            ordered = [g for row in zip_longest(*groups) for g in row if g is not None]
        else:
            ordered = _GENERATORS[style]

        original = list(chords)
        seen = set()
        variations = []
        for generate, variation_type, description, difficulty in ordered:
            result = generate(ctx)
            if not result or result == original or tuple(result) in seen:
                continue
            seen.add(tuple(result))
            variations.append(ProgressionVariation(result, variation_type, description, difficulty))
            if len(variations) >= self.config.max_variations:
                break

        return variations


def reharmonize(
    chords: Sequence[str],
    style: Union[ReharmonizationStyle, str] = ReharmonizationStyle.BALANCED,
    key: Optional[Key] = None,
) -> List[ProgressionVariation]:
    """Reharmonize a progression in the given style."""
    return Reharmonizer().reharmonize(chords, style, key)
