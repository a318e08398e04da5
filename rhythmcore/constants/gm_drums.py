"""General MIDI drum note numbers and the default voice token tables.

Drum voices are written as single-letter tokens in patterns:

====  ==================  =======
Tok   Voice               GM note
====  ==================  =======
K     Kick                36
S     Snare               38
H     Hi-hat (closed)     42
O     Hi-hat (open)       46
T     Tom (generic)       48
I     High tom            48
M     Mid tom             47
F     Floor tom           41
====  ==================  =======

The tables here are read-only mappings. Pass an alternative kit through
``rhythmcore.kit.DrumKit`` rather than editing them.
"""

import types
import typing


# ─── Individual note constants ───────────────────────────────────────
#
# Subset of the General MIDI Level 1 percussion key map used by drum kits.

KICK_2 = 35
KICK_1 = 36
SIDE_STICK = 37
SNARE_1 = 38
HAND_CLAP = 39
SNARE_2 = 40
LOW_FLOOR_TOM = 41
HI_HAT_CLOSED = 42
HIGH_FLOOR_TOM = 43
HI_HAT_PEDAL = 44
LOW_TOM = 45
HI_HAT_OPEN = 46
LOW_MID_TOM = 47
HIGH_MID_TOM = 48
CRASH_1 = 49
HIGH_TOM = 50
RIDE_1 = 51


# ─── Voice tokens ────────────────────────────────────────────────────

KICK = "K"
SNARE = "S"
HI_HAT = "H"
OPEN_HI_HAT = "O"
TOM = "T"
HIGH_TOM_VOICE = "I"
MID_TOM_VOICE = "M"
FLOOR_TOM = "F"

FALLBACK_VOICE = SNARE

# Canonical ordering when several voices share one grid cell ("K+S+H").
# The high and mid toms sort with the generic tom.
VOICE_ORDER: typing.Mapping[str, int] = types.MappingProxyType({
	KICK: 0,
	SNARE: 1,
	HI_HAT: 2,
	TOM: 3,
	HIGH_TOM_VOICE: 3,
	MID_TOM_VOICE: 3,
	FLOOR_TOM: 4,
	OPEN_HI_HAT: 5,
})


# ─── Default tables ──────────────────────────────────────────────────

# Voice token -> note number, used for export and expected-note building.
DEFAULT_VOICE_NOTES: typing.Mapping[str, int] = types.MappingProxyType({
	KICK: KICK_1,
	SNARE: SNARE_1,
	HI_HAT: HI_HAT_CLOSED,
	OPEN_HI_HAT: HI_HAT_OPEN,
	TOM: HIGH_MID_TOM,
	HIGH_TOM_VOICE: HIGH_MID_TOM,
	MID_TOM_VOICE: LOW_MID_TOM,
	FLOOR_TOM: LOW_FLOOR_TOM,
})

# Note number -> voice token, used when converting recordings. Covers the
# common electronic kit layouts (41 and 43 are both floor toms on some kits,
# the crash on 49 is written on the high tom line).
DEFAULT_NOTE_VOICES: typing.Mapping[int, str] = types.MappingProxyType({
	KICK_1: KICK,
	SNARE_1: SNARE,
	LOW_FLOOR_TOM: FLOOR_TOM,
	HIGH_FLOOR_TOM: FLOOR_TOM,
	HI_HAT_CLOSED: HI_HAT,
	HI_HAT_OPEN: OPEN_HI_HAT,
	HIGH_MID_TOM: HIGH_TOM_VOICE,
	LOW_MID_TOM: MID_TOM_VOICE,
	LOW_TOM: MID_TOM_VOICE,
	CRASH_1: HIGH_TOM_VOICE,
	HIGH_TOM: HIGH_TOM_VOICE,
})
