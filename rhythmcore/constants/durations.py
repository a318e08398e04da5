"""Beat-based duration constants for note values and tuplet resolution.

All values are in **beats**, where 1.0 = one quarter note in simple time.
In compound (eighth-beat) time the same numbers are read against the dotted
quarter, so ``DOTTED_HALF`` (3.0) plays the role of a whole bar of 6/8.

The two ``STANDARD_*`` tuples list the note values that can be written without
a tuplet bracket::

    import rhythmcore.constants.durations as dur

    dur.is_standard(4 / 3, beat_value=4)   # False - needs a triplet
    dur.is_standard(0.5, beat_value=8)     # True
"""

import typing

THIRTYSECOND = 0.125
SIXTEENTH = 0.25
EIGHTH = 0.5
QUARTER = 1.0
DOTTED_QUARTER = 1.5
HALF = 2.0
DOTTED_HALF = 3.0
WHOLE = 4.0

STANDARD_SIMPLE: typing.Tuple[float, ...] = (WHOLE, HALF, QUARTER, EIGHTH, SIXTEENTH, THIRTYSECOND)
STANDARD_COMPOUND: typing.Tuple[float, ...] = (DOTTED_HALF, DOTTED_QUARTER, QUARTER, EIGHTH, SIXTEENTH, THIRTYSECOND)

# Renderer duration codes, longest first, as (minimum beats, code).
SIMPLE_CODES: typing.Tuple[typing.Tuple[float, str], ...] = (
	(WHOLE, "w"),
	(HALF, "h"),
	(QUARTER, "q"),
	(EIGHTH, "8"),
	(SIXTEENTH, "16"),
)

COMPOUND_CODES: typing.Tuple[typing.Tuple[float, str], ...] = (
	(DOTTED_HALF, "wd"),
	(DOTTED_QUARTER, "hd"),
	(QUARTER, "qd"),
	(EIGHTH, "8"),
	(SIXTEENTH, "16"),
)

MATCH_EPSILON = 0.001


def is_compound (beat_value: int) -> bool:

	"""Eighth-note (and shorter) beat units are read as compound time."""

	return beat_value >= 8


def standard_values (beat_value: int = 4) -> typing.Tuple[float, ...]:

	"""Return the standard note values for the given beat unit."""

	return STANDARD_COMPOUND if is_compound(beat_value) else STANDARD_SIMPLE


def is_standard (beats: float, beat_value: int = 4) -> bool:

	"""True when ``beats`` matches a standard note value within 0.001 beats."""

	return any(abs(beats - value) < MATCH_EPSILON for value in standard_values(beat_value))


def nearest_standard (beats: float, beat_value: int = 4) -> float:

	"""Return the standard note value closest to ``beats`` (the longer one on ties)."""

	values = standard_values(beat_value)
	closest = values[0]

	for value in values[1:]:
		if abs(value - beats) < abs(closest - beats):
			closest = value

	return closest


def duration_code (beats: float, beat_value: int = 4) -> str:

	"""Convert a duration in beats to a renderer code ('q', '8', 'hd', ...)."""

	codes = COMPOUND_CODES if is_compound(beat_value) else SIMPLE_CODES

	for minimum, code in codes:
		if beats >= minimum:
			return code

	return "32"
