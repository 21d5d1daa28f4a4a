"""Transpose layer - Moving chord charts between keys and capo positions.

Pipeline: ChordTokens → [Transpose, Capo] → Rewritten chart / chord pairs
"""

from .engine import (
    TransposeConfig,
    TransposeEngine,
    TransposePreview,
    transpose,
    transpose_content,
    transpose_to_key,
    preview_transposition,
)
from .capo import (
    CapoCalculator,
    CapoConfig,
    CapoExplanation,
    CapoPattern,
    CapoSuggestion,
    ChordDifficulty,
    average_difficulty,
    calculate_capo,
    capo_chord,
    capo_content,
    chord_difficulty,
    common_capo_positions,
    explain_capo_transpose,
    sounding_key,
    suggest_capo,
    written_key,
)

__all__ = [
    # Transposition
    "TransposeConfig",
    "TransposeEngine",
    "TransposePreview",
    "transpose",
    "transpose_content",
    "transpose_to_key",
    "preview_transposition",
    # Capo
    "CapoCalculator",
    "CapoConfig",
    "CapoExplanation",
    "CapoPattern",
    "CapoSuggestion",
    "ChordDifficulty",
    "average_difficulty",
    "calculate_capo",
    "capo_chord",
    "capo_content",
    "chord_difficulty",
    "common_capo_positions",
    "explain_capo_transpose",
    "sounding_key",
    "suggest_capo",
    "written_key",
]
