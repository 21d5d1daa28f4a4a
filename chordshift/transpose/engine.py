"""Transposition engine - Shift chords, keys and whole chord charts.

Only roots and slash basses are ever rewritten. Quality suffixes pass
through verbatim, including suffixes the analyzers do not model, and every
character of a document that is not a chord is left untouched.
"""

from dataclasses import dataclass, field
from typing import List, Optional, Tuple

from ..core import (
    Chord,
    Diagnostic,
    Key,
    InvalidKeyName,
    DEFAULT_PREVIEW_LIMIT,
    prefers_sharps as key_prefers_sharps,
    semitones_between,
    spell,
)
from ..core.notes import split_root
from ..parsing import ChordSource, tokenize


@dataclass(frozen=True)
class TransposeConfig:
    """Configuration for the transposition engine.

    Attributes:
        prefer_sharps: Spell shifted roots with sharps (default: True)
        preview_limit: Pairs a preview shows before summarising the rest (default: 10)
    """

    prefer_sharps: bool = True
    preview_limit: int = DEFAULT_PREVIEW_LIMIT


@dataclass(frozen=True)
class TransposePreview:
    """Distinct (original, transposed) chord pairs for a document."""

    pairs: List[Tuple[str, str]] = field(default_factory=list)
    limit: int = DEFAULT_PREVIEW_LIMIT
    diagnostics: List[Diagnostic] = field(default_factory=list)

    @property
    def visible(self) -> List[Tuple[str, str]]:
        """Pairs to display."""
        return self.pairs[:self.limit]

    @property
    def remaining(self) -> int:
        """Number of pairs beyond the display limit."""
        return max(0, len(self.pairs) - self.limit)


def transpose(name: str, semitones: int, prefer_sharps: bool = True) -> str:
    """
    Transpose a chord or key name.

    Never fails: text that is not a chord or key is returned unchanged.

    Args:
        name: Chord or key name, e.g. "G", "F#m7", "D/F#", "Bb minor"
        semitones: Signed shift, any integer (reduced mod 12)
        prefer_sharps: Spell the result with sharps or flats

    Returns:
        Transposed name with the suffix untouched
    """
    if semitones % 12 == 0:
        return name

    chord = Chord.try_parse(name)
    if chord is not None:
        return chord.transposed(semitones, prefer_sharps).symbol

    # Key names with a spelled-out mode ("Bb minor", "A:min")
    parts = split_root(name)
    if parts is not None:
        try:
            Key.parse(name)
        except InvalidKeyName:
            return name
        _, pc, rest = parts
        return spell(pc + semitones, prefer_sharps).name + rest

    return name


def transpose_content(content: str, semitones: int, prefer_sharps: bool = True) -> str:
    """
    Transpose every chord in a chord chart, in place.

    Lyrics, directives, whitespace and malformed chord markers are kept
    byte for byte.
    """
    if semitones % 12 == 0:
        return content

    pieces = []
    cursor = 0
    for token in tokenize(content).tokens:
        pieces.append(content[cursor:token.start])
        pieces.append(token.chord.transposed(semitones, prefer_sharps).symbol)
        cursor = token.end
    pieces.append(content[cursor:])
    return "".join(pieces)


def preview_transposition(
    content: ChordSource,
    semitones: int,
    prefer_sharps: bool = True,
) -> List[Tuple[str, str]]:
    """
    Distinct chords and what they become, in first-occurrence order.

    Deduplication is by literal chord text, so "C" and "Cmaj" are separate
    entries.

    Args:
        content: Chord chart text or list of chord names
        semitones: Signed shift
        prefer_sharps: Spelling policy for the transposed names

    Returns:
        List of (original, transposed) pairs
    """
    pairs = []
    seen = set()
    for token in tokenize(content).tokens:
        if token.text in seen:
            continue
        seen.add(token.text)
        pairs.append((token.text, transpose(token.text, semitones, prefer_sharps)))
    return pairs


def transpose_to_key(
    content: str,
    from_key: str,
    to_key: str,
    prefer_sharps: Optional[bool] = None,
) -> str:
    """
    Move a chord chart from one key to another.

    Args:
        content: Chord chart text
        from_key: Current key name
        to_key: Target key name
        prefer_sharps: Spelling policy; defaults to the target key's signature

    Raises:
        InvalidKeyName: if either key name cannot be understood
    """
    semitones = semitones_between(from_key, to_key)
    if prefer_sharps is None:
        prefer_sharps = key_prefers_sharps(to_key)
    return transpose_content(content, semitones, prefer_sharps)


class TransposeEngine:
    """Transposition with a fixed spelling policy and preview limit.

    Stateless apart from its configuration; one instance can be shared
    freely.
    """

    def __init__(
        self,
        prefer_sharps: bool = True,
        preview_limit: int = DEFAULT_PREVIEW_LIMIT,
        config: Optional[TransposeConfig] = None,
    ):
        """
        Initialize TransposeEngine.

        Args:
            prefer_sharps: Default spelling policy
            preview_limit: Pairs shown by a preview before the remainder count
            config: Optional TransposeConfig, overrides the other arguments
        """
        if config is None:
            config = TransposeConfig(prefer_sharps=prefer_sharps, preview_limit=preview_limit)
        self.config = config

    def _sharps(self, prefer_sharps: Optional[bool]) -> bool:
        return self.config.prefer_sharps if prefer_sharps is None else prefer_sharps

    def transpose(self, name: str, semitones: int, prefer_sharps: Optional[bool] = None) -> str:
        return transpose(name, semitones, self._sharps(prefer_sharps))

    def transpose_content(
        self, content: str, semitones: int, prefer_sharps: Optional[bool] = None
    ) -> str:
        return transpose_content(content, semitones, self._sharps(prefer_sharps))

    def transpose_to_key(
        self, content: str, from_key: str, to_key: str, prefer_sharps: Optional[bool] = None
    ) -> str:
        return transpose_to_key(content, from_key, to_key, prefer_sharps)

    def preview(
        self, content: ChordSource, semitones: int, prefer_sharps: Optional[bool] = None
    ) -> TransposePreview:
        """
        Preview a transposition for display.

        Returns:
            TransposePreview carrying every pair, the display limit and
            any tokenizer diagnostics
        """
        return TransposePreview(
            pairs=preview_transposition(content, semitones, self._sharps(prefer_sharps)),
            limit=self.config.preview_limit,
            diagnostics=tokenize(content).diagnostics,
        )
