"""Global constants for chordshift."""

# Pitch names
SHARP_NAMES = ["C", "C#", "D", "D#", "E", "F", "F#", "G", "G#", "A", "A#", "B"]
FLAT_NAMES = ["C", "Db", "D", "Eb", "E", "F", "Gb", "G", "Ab", "A", "Bb", "B"]
PITCH_NAMES = SHARP_NAMES

# Note name -> pitch class, including the edge spellings
NOTE_TO_PITCH_CLASS = {
    "C": 0, "C#": 1, "Db": 1,
    "D": 2, "D#": 3, "Eb": 3,
    "E": 4, "Fb": 4, "E#": 5,
    "F": 5, "F#": 6, "Gb": 6,
    "G": 7, "G#": 8, "Ab": 8,
    "A": 9, "A#": 10, "Bb": 10,
    "B": 11, "Cb": 11, "B#": 0,
}

# Unicode accidentals accepted on input
ACCIDENTAL_ALIASES = {"♯": "#", "♭": "b"}

# Scale intervals from the tonic
SCALE_INTERVALS = {
    "major": [0, 2, 4, 5, 7, 9, 11],
    "minor": [0, 2, 3, 5, 7, 8, 10],  # Natural minor
}

# Key signature convention: True = sharps, False = flats.
# C major / A minor default to sharps.
MAJOR_KEY_PREFERS_SHARPS = {
    "C": True,
    "G": True, "D": True, "A": True, "E": True, "B": True, "F#": True, "C#": True,
    "F": False, "Bb": False, "Eb": False, "Ab": False, "Db": False, "Gb": False, "Cb": False,
    # Off the circle of fifths: follow the accidental
    "D#": True, "G#": True, "A#": True, "E#": True, "B#": True, "Fb": False,
}

MINOR_KEY_PREFERS_SHARPS = {
    "A": True,
    "E": True, "B": True, "F#": True, "C#": True, "G#": True, "D#": True, "A#": True,
    "D": False, "G": False, "C": False, "F": False, "Bb": False, "Eb": False, "Ab": False,
    # Off the circle of fifths
    "Db": False, "Gb": False, "Cb": False, "E#": True, "B#": True, "Fb": False,
}

# Preview display default (UI shows the first N pairs plus a remainder count)
DEFAULT_PREVIEW_LIMIT = 10

# Capo ranges
CAPO_MIN = 0
CAPO_MAX = 11
DEFAULT_MAX_CAPO_FRET = 7

# Conventional tonic spelling when a key is built from a pitch class
MAJOR_TONIC_NAMES = ["C", "Db", "D", "Eb", "E", "F", "F#", "G", "Ab", "A", "Bb", "B"]
MINOR_TONIC_NAMES = ["C", "C#", "D", "Eb", "E", "F", "F#", "G", "G#", "A", "Bb", "B"]
