"""Chord tokenizer - Find chord symbols in chord charts and chord lists.

Handles the two input shapes chord charts arrive in:
- Annotated text: inline ``[C]Amazing [F]grace`` markers, ChordPro
  directives and comments, and chord-only lines (chords above lyrics,
  ``| C | G |`` bar lines)
- Pre-split lists of bare chord names, as passed to the analyzers

A bad token never stops tokenization; it is skipped and reported as a
diagnostic with its source offset.
"""

import re
from dataclasses import dataclass, field
from typing import List, Sequence, Union

from ..core import Chord, Diagnostic, UnparseableChord

# Inline chord marker; group 1 is the chord text
_BRACKET_RE = re.compile(r"\[([^\[\]\n]*)\]")

# Words on a bare chord line, separated by whitespace or bar lines
_WORD_RE = re.compile(r"[^\s|]+")

# Repeat signs and bar decorations allowed between chords on a chord line
_BAR_FILLERS = {":", "::", "%", "/", "-", "x2", "x3", "x4"}

ChordSource = Union[str, Sequence[str]]


@dataclass(frozen=True)
class ChordToken:
    """A chord plus where it was found.

    For text input ``source[start:end] == text`` (brackets excluded).
    For list input ``start`` is the element index and ``end`` is
    ``start + 1``.
    """

    chord: Chord
    text: str
    start: int
    end: int
    bracketed: bool = False


@dataclass(frozen=True)
class TokenizeResult:
    """Tokens in source order plus any diagnostics."""

    tokens: List[ChordToken] = field(default_factory=list)
    diagnostics: List[Diagnostic] = field(default_factory=list)

    @property
    def chords(self) -> List[Chord]:
        return [t.chord for t in self.tokens]

    @property
    def symbols(self) -> List[str]:
        """Chord texts exactly as written."""
        return [t.text for t in self.tokens]

    def __len__(self) -> int:
        return len(self.tokens)


def tokenize(source: ChordSource) -> TokenizeResult:
    """
    Extract chord tokens from annotated text or a list of chord names.

    Args:
        source: Chord chart text, or a sequence of bare chord names

    Returns:
        TokenizeResult with tokens in source order and diagnostics for
        malformed chord markers
    """
    if isinstance(source, str):
        return _tokenize_text(source)
    return _tokenize_list(source)


def _tokenize_list(items: Sequence[str]) -> TokenizeResult:
    tokens: List[ChordToken] = []
    diagnostics: List[Diagnostic] = []

    for index, item in enumerate(items):
        text = (item or "").strip()
        try:
            chord = Chord.parse(text, offset=index)
        except UnparseableChord as e:
            diagnostics.append(Diagnostic.from_error(e))
            continue
        tokens.append(ChordToken(chord, text, index, index + 1))

    return TokenizeResult(tokens, diagnostics)


def _tokenize_text(text: str) -> TokenizeResult:
    tokens: List[ChordToken] = []
    diagnostics: List[Diagnostic] = []

    line_start = 0
    for line in text.splitlines(keepends=True):
        stripped = line.strip()
        if stripped and not _is_directive(stripped):
            if "[" in line:
                _scan_brackets(line, line_start, tokens, diagnostics)
            else:
                tokens.extend(_scan_chord_line(line, line_start))
        line_start += len(line)

    return TokenizeResult(tokens, diagnostics)


def _is_directive(stripped_line: str) -> bool:
    """ChordPro ``{directive}`` or ``# comment`` line."""
    if stripped_line.startswith("#"):
        return True
    return stripped_line.startswith("{") and stripped_line.endswith("}")


def _scan_brackets(
    line: str,
    line_start: int,
    tokens: List[ChordToken],
    diagnostics: List[Diagnostic],
) -> None:
    for match in _BRACKET_RE.finditer(line):
        chord_text = match.group(1)
        start = line_start + match.start(1)
        try:
            chord = Chord.parse(chord_text, offset=start)
        except UnparseableChord as e:
            diagnostics.append(Diagnostic.from_error(e))
            continue
        tokens.append(ChordToken(chord, chord_text, start, start + len(chord_text), True))


def _scan_chord_line(line: str, line_start: int) -> List[ChordToken]:
    """
    Tokens for a line made only of chords, or nothing.

    A line counts as a chord line when every word parses as a chord with a
    modelled quality, so lyric lines ("Amazing grace") are left alone. A lone
    chord-like word ("A", "Am") counts only between bar lines.
    """
    found = []
    for match in _WORD_RE.finditer(line):
        word = match.group(0)
        if word in _BAR_FILLERS:
            continue
        chord = Chord.try_parse(word)
        if chord is None or not chord.is_supported:
            return []
        start = line_start + match.start()
        found.append(ChordToken(chord, word, start, start + len(word)))
    if len(found) < 2 and "|" not in line:
        return []
    return found


def extract_chords(source: ChordSource) -> List[str]:
    """Unique chord texts in first-occurrence order."""
    seen = set()
    unique = []
    for token in tokenize(source).tokens:
        if token.text not in seen:
            seen.add(token.text)
            unique.append(token.text)
    return unique


def split_chord_list(text: str) -> List[str]:
    """
    Split a bare chord list like ``"C G Am F"`` or ``"| C | G |"``.

    No validation is done; pass the result to ``tokenize`` for that.
    """
    return [w for w in _WORD_RE.findall(text) if w not in _BAR_FILLERS]
