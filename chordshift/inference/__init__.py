"""Inference layer - Harmonic understanding of chord progressions.

This layer builds musical understanding from chord names:
- Key inference (best-fit major/minor key)
- Roman numeral analysis and named progression recognition
- Error detection with ranked suggestions
- Deterministic reharmonization

Pipeline: [str] → Tokenizer → Key → [Numerals, Patterns, Errors, Variations]
"""

from .degrees import HarmonicFunction, is_diatonic, scale_degree
from .key import KeyFinder, KeyEstimate, KeyCandidate, infer_key
from .progression import (
    AnalyzerConfig,
    NumeralQuality,
    PatternMatch,
    ProgressionAnalysis,
    ProgressionAnalyzer,
    ProgressionPattern,
    ProgressionType,
    RomanNumeral,
    PROGRESSION_PATTERNS,
    analyze_progression,
)
from .suggestions import (
    ChordChecker,
    ChordError,
    ChordErrorType,
    ChordSuggestion,
    ErrorSeverity,
    SuggestionReason,
    detect_errors,
    suggest_corrections,
)
from .reharmonize import (
    Difficulty,
    ProgressionVariation,
    ReharmonizationStyle,
    Reharmonizer,
    ReharmonizerConfig,
    VariationType,
    reharmonize,
)

__all__ = [
    # Scale degrees
    "HarmonicFunction",
    "is_diatonic",
    "scale_degree",
    # Key inference
    "KeyFinder",
    "KeyEstimate",
    "KeyCandidate",
    "infer_key",
    # Progression analysis
    "AnalyzerConfig",
    "NumeralQuality",
    "PatternMatch",
    "ProgressionAnalysis",
    "ProgressionAnalyzer",
    "ProgressionPattern",
    "ProgressionType",
    "RomanNumeral",
    "PROGRESSION_PATTERNS",
    "analyze_progression",
    # Error detection
    "ChordChecker",
    "ChordError",
    "ChordErrorType",
    "ChordSuggestion",
    "ErrorSeverity",
    "SuggestionReason",
    "detect_errors",
    "suggest_corrections",
    # Reharmonization
    "Difficulty",
    "ProgressionVariation",
    "ReharmonizationStyle",
    "Reharmonizer",
    "ReharmonizerConfig",
    "VariationType",
    "reharmonize",
]
