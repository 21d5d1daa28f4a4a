"""Error detection - Flag doubtful chords and suggest replacements.

Checks each chord of a progression for:
- Invalid syntax (with typo corrections)
- Unmodelled chord qualities
- Chords outside the key (with in-key alternatives)
- Spellings that fight the key signature (A# in F major)

Suggestions are ranked by confidence and capped, each tagged with why it
was offered.
"""

import difflib
from dataclasses import dataclass, field
from enum import Enum
from typing import List, Optional, Sequence, Union

from ..core import Chord, Key, SHARP_NAMES, FLAT_NAMES
from ..parsing import tokenize
from .degrees import diatonic_chord, is_diatonic, is_seventh, scale_degree
from .key import KeyFinder

MAX_SUGGESTIONS = 5

# Suffixes offered by typo correction
COMMON_SUFFIXES = ["", "m", "7", "m7", "maj7", "sus4", "sus2", "dim", "aug", "6", "9", "add9", "m7b5", "5"]


class ChordErrorType(Enum):
    INVALID_SYNTAX = "Invalid Syntax"
    OUT_OF_KEY = "Out of Key"
    ENHARMONIC_ISSUE = "Enharmonic Issue"
    UNSUPPORTED_QUALITY = "Unsupported Quality"


class ErrorSeverity(Enum):
    INFO = "Info"
    WARNING = "Warning"
    ERROR = "Error"


class SuggestionReason(Enum):
    CLOSER_DIATONIC = "Closer Diatonic Chord"
    COMMON_SUBSTITUTION = "Common Substitution"
    TYPO_CORRECTION = "Typo Correction"
    ENHARMONIC = "Enharmonic Equivalent"


@dataclass(frozen=True)
class ChordSuggestion:
    """A replacement chord with a confidence in [0, 1]."""

    chord: str
    confidence: float
    reason: SuggestionReason
    context: Optional[str] = None


@dataclass(frozen=True)
class ChordError:
    """A problem found at ``chords[chord_index]``."""

    chord_index: int
    chord: str
    error_type: ChordErrorType
    severity: ErrorSeverity
    suggestions: List[ChordSuggestion] = field(default_factory=list)
    explanation: str = ""


def _rank(suggestions: List[ChordSuggestion], exclude: str, limit: int) -> List[ChordSuggestion]:
    """Best first, one entry per chord text, never the chord itself."""
    ordered = sorted(enumerate(suggestions), key=lambda pair: (-pair[1].confidence, pair[0]))
    seen = {exclude}
    ranked = []
    for _, suggestion in ordered:
        if suggestion.chord in seen:
            continue
        seen.add(suggestion.chord)
        ranked.append(suggestion)
        if len(ranked) >= limit:
            break
    return ranked


def _vocabulary() -> List[str]:
    roots = list(dict.fromkeys(SHARP_NAMES + FLAT_NAMES))
    return [root + suffix for root in roots for suffix in COMMON_SUFFIXES]


class ChordChecker:
    """Detect chord errors in a progression and propose corrections."""

    VOCABULARY = _vocabulary()

    def __init__(self, max_suggestions: int = MAX_SUGGESTIONS, typo_cutoff: float = 0.5):
        """
        Initialize ChordChecker.

        Args:
            max_suggestions: Suggestions kept per error
            typo_cutoff: Minimum similarity (0-1) for a typo correction
        """
        self.max_suggestions = max_suggestions
        self.typo_cutoff = typo_cutoff
        self.key_finder = KeyFinder()

    def detect_errors(
        self,
        chords: Sequence[str],
        key: Optional[Union[str, Key]] = None,
    ) -> List[ChordError]:
        """
        Scan a progression for doubtful chords.

        Args:
            chords: Chord names in order
            key: Key name or Key; inferred from the chords if omitted

        Returns:
            ChordError list in chord order (a chord may have several)

        Raises:
            InvalidKeyName: if ``key`` is a name that cannot be parsed
        """
        chords = list(chords)
        key = self._resolve_key(chords, key)
        errors = []

        for index, text in enumerate(chords):
            chord = Chord.try_parse((text or "").strip())

            if chord is None:
                errors.append(ChordError(
                    chord_index=index,
                    chord=text,
                    error_type=ChordErrorType.INVALID_SYNTAX,
                    severity=ErrorSeverity.ERROR,
                    suggestions=self._rank(self.typo_corrections(text, key), text),
                    explanation="Invalid chord syntax. Check spelling and format.",
                ))
                continue

            if not chord.is_supported:
                errors.append(ChordError(
                    chord_index=index,
                    chord=text,
                    error_type=ChordErrorType.UNSUPPORTED_QUALITY,
                    severity=ErrorSeverity.INFO,
                    suggestions=self._rank(self.typo_corrections(text, key), text),
                    explanation=f"{text} uses a chord quality ({chord.quality}) that is not analysed.",
                ))
                continue

            if key is None:
                continue

            if not is_diatonic(chord, key):
                errors.append(ChordError(
                    chord_index=index,
                    chord=text,
                    error_type=ChordErrorType.OUT_OF_KEY,
                    severity=ErrorSeverity.WARNING,
                    suggestions=self._rank(self.diatonic_alternatives(chord, key), text),
                    explanation=(
                        f"{text} is not diatonic to {key.name}. This may be intentional "
                        "(modal interchange, secondary dominant, etc.)"
                    ),
                ))
            else:
                respelled = self.key_spelling(chord, key)
                if respelled is not None:
                    errors.append(ChordError(
                        chord_index=index,
                        chord=text,
                        error_type=ChordErrorType.ENHARMONIC_ISSUE,
                        severity=ErrorSeverity.INFO,
                        suggestions=[ChordSuggestion(
                            respelled, 0.9, SuggestionReason.ENHARMONIC, f"Spelled for {key.name}",
                        )],
                        explanation=f"{key.name} is written with "
                                    f"{'sharps' if key.prefers_sharps else 'flats'}; "
                                    f"{text} is usually spelled {respelled}.",
                    ))

        return errors

    def suggest_corrections(
        self,
        chord: str,
        key: Optional[Union[str, Key]] = None,
    ) -> List[ChordSuggestion]:
        """
        Ranked replacements for a single chord.

        Combines typo corrections (for unreadable chords), key-signature
        respelling and in-key alternatives.
        """
        if isinstance(key, str):
            key = Key.parse(key)

        parsed = Chord.try_parse((chord or "").strip())
        if parsed is None or not parsed.is_supported:
            return self._rank(self.typo_corrections(chord, key), chord)

        suggestions = []
        if key is not None:
            if is_diatonic(parsed, key):
                respelled = self.key_spelling(parsed, key)
                if respelled is not None:
                    suggestions.append(ChordSuggestion(respelled, 0.9, SuggestionReason.ENHARMONIC))
            else:
                suggestions.extend(self.diatonic_alternatives(parsed, key))
        elif len(parsed.root.name) > 1:
            flip = parsed.transposed(0, prefer_sharps="b" in parsed.root.name)
            suggestions.append(ChordSuggestion(flip.symbol, 0.5, SuggestionReason.ENHARMONIC))

        return self._rank(suggestions, chord)

    def typo_corrections(self, text: str, key: Optional[Key] = None) -> List[ChordSuggestion]:
        """Common chords that look like ``text``, most similar first."""
        text = (text or "").strip()
        if not text:
            return []

        suggestions = []
        # Lower-case root ("am", "bb7")
        if text[0] in "abcdefg":
            fixed = Chord.try_parse(text[0].upper() + text[1:])
            if fixed is not None and fixed.is_supported:
                suggestions.append(ChordSuggestion(
                    fixed.symbol, 0.95, SuggestionReason.TYPO_CORRECTION, "Root should be upper case",
                ))

        for candidate in self.VOCABULARY:
            ratio = difflib.SequenceMatcher(None, text, candidate).ratio()
            if ratio < self.typo_cutoff:
                continue
            confidence = ratio
            if key is not None and is_diatonic(Chord.parse(candidate), key):
                confidence = min(1.0, confidence + 0.05)
            suggestions.append(ChordSuggestion(
                candidate, round(confidence, 3), SuggestionReason.TYPO_CORRECTION,
            ))
        return suggestions

    def diatonic_alternatives(self, chord: Chord, key: Key) -> List[ChordSuggestion]:
        """In-key chords to replace an out-of-key chord."""
        seventh = is_seventh(chord.family)
        in_key = [diatonic_chord(d, key, seventh) for d in range(1, 8)]
        suggestions = []

        # Same root, key's quality (D -> Dm in C major)
        degree = scale_degree(chord.root_pitch_class, key)
        if degree is not None:
            suggestions.append(ChordSuggestion(
                in_key[degree - 1].symbol, 0.9, SuggestionReason.CLOSER_DIATONIC,
                f"Degree {degree} of {key.name}",
            ))

        # Roots a half step away (C# -> C, D)
        for candidate in in_key:
            step = (candidate.root_pitch_class - chord.root_pitch_class) % 12
            if step in (1, 11):
                suggestions.append(ChordSuggestion(
                    candidate.symbol, 0.7, SuggestionReason.CLOSER_DIATONIC, "Half step away",
                ))

        # Chords sharing at least two tones
        tones = chord.pitch_classes
        for candidate in in_key:
            shared = len(candidate.pitch_classes & tones)
            if shared >= 2:
                suggestions.append(ChordSuggestion(
                    candidate.symbol, 0.5 + 0.1 * min(shared, 3), SuggestionReason.COMMON_SUBSTITUTION,
                    f"Shares {shared} notes with {chord.symbol}",
                ))

        return suggestions

    def key_spelling(self, chord: Chord, key: Key) -> Optional[str]:
        """The chord respelled for the key signature, None if already fine."""
        sharps = key.prefers_sharps
        wrong = "b" if sharps else "#"
        names = [chord.root.name] + ([chord.bass.name] if chord.bass else [])
        if not any(wrong in name[1:] for name in names):
            return None
        respelled = chord.transposed(0, sharps).symbol
        return respelled if respelled != chord.symbol else None

    def _rank(self, suggestions: List[ChordSuggestion], exclude: str) -> List[ChordSuggestion]:
        return _rank(suggestions, exclude, self.max_suggestions)

    def _resolve_key(self, chords: List[str], key: Optional[Union[str, Key]]) -> Optional[Key]:
        if isinstance(key, str):
            return Key.parse(key)
        if key is not None:
            return key
        return self.key_finder.find(tokenize(chords).chords).key


def detect_errors(chords: Sequence[str], key: Optional[Union[str, Key]] = None) -> List[ChordError]:
    """Find doubtful chords in a progression; see ChordChecker.detect_errors."""
    return ChordChecker().detect_errors(chords, key)


def suggest_corrections(chord: str, key: Optional[Union[str, Key]] = None) -> List[ChordSuggestion]:
    """Ranked replacements for one chord."""
    return ChordChecker().suggest_corrections(chord, key)
