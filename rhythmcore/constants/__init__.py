"""Constants for rhythmcore.

This package contains:

- ``rhythmcore.constants.durations`` - Beat-based note values and the standard
  duration tables used for tuplet resolution
- ``rhythmcore.constants.gm_drums`` - General MIDI drum note numbers and the
  default voice token tables
- ``rhythmcore.constants.timing`` - Practice-mode timing defaults (tolerance,
  perfect-hit threshold, MIDI export resolution)
"""

# Candidate subdivisions, from quarter notes to thirty-second notes.
# 12 is eighth-note triplets and 24 is sixteenth-note sextuplets.

SUBDIVISIONS = (4, 8, 12, 16, 24, 32)

DEFAULT_SUBDIVISION = 16
DEFAULT_TIME_SIGNATURE = "4/4"
DEFAULT_BPM = 120
