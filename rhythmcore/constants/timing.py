"""Practice-mode and export timing constants.

Millisecond values are applied to elapsed time since the session start.
"""

DEFAULT_TOLERANCE_MS = 50.0
PERFECT_HIT_THRESHOLD_MS = 5.0

LATENCY_ADJUSTMENT_MIN_MS = -300.0
LATENCY_ADJUSTMENT_MAX_MS = 300.0

BPM_MIN = 40
BPM_MAX = 260

# Onsets of the same voice closer than this are treated as one hit.
DEDUP_WINDOW_MS = 5.0

# Standard MIDI File resolution used by the exporter.
TICKS_PER_QUARTER = 480
NOTE_OFF_FRACTION = 0.9

ACCENT_VELOCITY = 100
NORMAL_VELOCITY = 80
GHOST_VELOCITY = 40

# Channel 10 in 1-indexed terms.
DRUM_CHANNEL = 9
