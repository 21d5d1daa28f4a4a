"""Parsing layer - Chord tokens from chord charts and chord lists.

Pipeline: Text or [str] → Tokenizer → ChordToken stream (+ diagnostics)
"""

from .tokenizer import (
    ChordSource,
    ChordToken,
    TokenizeResult,
    tokenize,
    extract_chords,
    split_chord_list,
)

__all__ = [
    "ChordSource",
    "ChordToken",
    "TokenizeResult",
    "tokenize",
    "extract_chords",
    "split_chord_list",
]
