"""Polyrhythm positions, alignments, cycle length and tuplet notation.

A polyrhythm ``N:M`` plays N evenly spaced notes in one voice against M evenly
spaced notes in another, both spanning the same bar. Positions are computed
in beats rather than grid indices so that notation stays exact for ratios
that do not fit any subdivision (5:4, 7:3 ...).

Example:
	```python
	import rhythmcore.polyrhythm

	result = rhythmcore.polyrhythm.positions(4, 3, 4)
	result.right   # [0.0, 1.0, 2.0, 3.0]
	result.left    # [0.0, 1.333.., 2.666..]

	rhythmcore.polyrhythm.durations(4, 3, 4).left.tuplet
	# TupletConfig(num_notes=3, notes_occupied=4)
	```
"""

import dataclasses
import logging
import math
import typing

import rhythmcore.constants.durations
import rhythmcore.grid
import rhythmcore.notation
import rhythmcore.pattern

logger = logging.getLogger(__name__)


ALIGNMENT_TOLERANCE = 1e-4

LIMB_STICKING: typing.Dict[str, str] = {
	"right-hand": "R",
	"left-hand": "L",
	"right-foot": "RF",
	"left-foot": "LF",
}

VOICE_TOKENS: typing.Dict[str, str] = {
	"snare": "S",
	"kick": "K",
	"hi-hat": "H",
	"tom": "T",
	"floor": "F",
}

# (numerator, denominator, name, description)
COMMON_POLYRHYTHMS: typing.Tuple[typing.Tuple[int, int, str, str], ...] = (
	(3, 2, "3 against 2", "Triplets against eighth notes"),
	(4, 3, "4 against 3", "Four notes against three"),
	(5, 4, "5 against 4", "Five notes against four"),
	(5, 3, "5 against 3", "Five notes against three"),
	(7, 4, "7 against 4", "Seven notes against four"),
	(3, 4, "3 against 4", "Three notes against four"),
)


@dataclasses.dataclass(frozen=True)
class PolyrhythmRatio:

	"""Note counts of the two voices across the same bar span."""

	numerator: int
	denominator: int

	def __post_init__ (self) -> None:
		if self.numerator <= 0 or self.denominator <= 0:
			raise ValueError("Polyrhythm counts must be positive")

	def __str__ (self) -> str:
		return f"{self.numerator}:{self.denominator}"


@dataclasses.dataclass(frozen=True)
class Alignment:

	"""Indices of a right-voice note and a left-voice note that coincide."""

	right_index: int
	left_index: int


@dataclasses.dataclass(frozen=True)
class PolyrhythmPositions:

	right: typing.List[float]
	left: typing.List[float]
	alignments: typing.List[Alignment]


@dataclasses.dataclass(frozen=True)
class TupletConfig:

	"""``num_notes`` notes played in the time of ``notes_occupied`` base notes."""

	num_notes: int
	notes_occupied: int


@dataclasses.dataclass(frozen=True)
class VoiceDuration:

	"""
	Notation for one voice of a polyrhythm.

	``duration`` is the renderer code of the written note value. For tuplet
	voices it is the tuplet's base note value, not the sounding length.
	"""

	duration_beats: float
	duration: str
	needs_tuplet: bool
	tuplet: typing.Optional[TupletConfig] = None


@dataclasses.dataclass(frozen=True)
class PolyrhythmDurations:

	right: VoiceDuration
	left: VoiceDuration


@dataclasses.dataclass(frozen=True)
class PolyrhythmVoice:

	"""One voice of a polyrhythm: beat positions plus who plays it on what."""

	positions: typing.Tuple[float, ...]
	limb: str
	voice: str
	accents: typing.Tuple[int, ...] = ()
	grid_indices: typing.Tuple[int, ...] = ()


def _check_counts (numerator: int, denominator: int, beats_per_bar: float) -> None:

	if numerator <= 0 or denominator <= 0:
		raise ValueError("Polyrhythm counts must be positive")

	if beats_per_bar <= 0:
		raise ValueError("Beats per bar must be positive")


def positions (numerator: int, denominator: int, beats_per_bar: float) -> PolyrhythmPositions:

	"""
	Beat positions for both voices and every exact alignment between them.

	Voice A (right) note ``i`` sits at ``i * beats_per_bar / numerator`` and
	voice B (left) note ``j`` at ``j * beats_per_bar / denominator``. A pair
	aligns when the positions differ by less than 1e-4 beats, so ``(0, 0)``
	is always present.
	"""

	_check_counts(numerator, denominator, beats_per_bar)

	right = [i * beats_per_bar / numerator for i in range(numerator)]
	left = [j * beats_per_bar / denominator for j in range(denominator)]

	alignments = [
		Alignment(i, j)
		for i, right_pos in enumerate(right)
		for j, left_pos in enumerate(left)
		if abs(right_pos - left_pos) < ALIGNMENT_TOLERANCE
	]

	return PolyrhythmPositions(right=right, left=left, alignments=alignments)


def lcm (a: int, b: int) -> int:

	"""Least common multiple of two positive integers."""

	return abs(a * b) // math.gcd(a, b)


def cycle_length (numerator: int, denominator: int) -> int:

	"""Number of pulses after which both voices line up again (``lcm(n, m)``)."""

	_check_counts(numerator, denominator, 1)

	return lcm(numerator, denominator)


def _voice_duration (count: int, other_count: int, beats_per_bar: float, beat_value: int) -> VoiceDuration:

	"""
	Resolve the written duration of a voice with ``count`` notes per bar.

	A standard note value is used directly. Otherwise the voice becomes a
	tuplet: on the other voice's note value when that is standard, else on the
	nearest standard value to this voice's own duration.
	"""

	durations = rhythmcore.constants.durations
	duration_beats = beats_per_bar / count

	if durations.is_standard(duration_beats, beat_value):
		return VoiceDuration(
			duration_beats = duration_beats,
			duration = durations.duration_code(duration_beats, beat_value),
			needs_tuplet = False,
		)

	other_beats = beats_per_bar / other_count

	if durations.is_standard(other_beats, beat_value):
		base = other_beats
		tuplet = TupletConfig(num_notes=count, notes_occupied=other_count)

	else:
		base = durations.nearest_standard(duration_beats, beat_value)
		tuplet = TupletConfig(num_notes=count, notes_occupied=rhythmcore.grid.round_half_up(beats_per_bar / base))
		logger.debug(f"{count} notes over {beats_per_bar} beats: tuplet on nearest value {base}")

	return VoiceDuration(
		duration_beats = duration_beats,
		duration = durations.duration_code(base, beat_value),
		needs_tuplet = True,
		tuplet = tuplet,
	)


def durations (numerator: int, denominator: int, beats_per_bar: float, beat_value: int = 4) -> PolyrhythmDurations:

	"""
	Note durations and tuplet brackets for both voices.

	Parameters:
		numerator: Notes in the right voice.
		denominator: Notes in the left voice.
		beats_per_bar: Length of the bar in beats.
		beat_value: Time signature denominator (4 = quarter beat, 8 = compound).

	Example:
		```python
		d = durations(4, 3, 4, 4)
		d.right.duration, d.right.needs_tuplet   # "q", False
		d.left.tuplet                            # TupletConfig(3, 4)
		```
	"""

	_check_counts(numerator, denominator, beats_per_bar)

	return PolyrhythmDurations(
		right = _voice_duration(numerator, denominator, beats_per_bar, beat_value),
		left = _voice_duration(denominator, numerator, beats_per_bar, beat_value),
	)


@dataclasses.dataclass(frozen=True)
class Polyrhythm:

	"""
	A two-voice polyrhythm laid out in one bar of a time signature.

	``measure_length`` is the number of grid cells in the bar at
	``subdivision``; each voice's ``grid_indices`` are its positions snapped to
	that grid for playback and for the combined pattern.
	"""

	ratio: PolyrhythmRatio
	time_signature: rhythmcore.grid.TimeSignature
	subdivision: int
	right: PolyrhythmVoice
	left: PolyrhythmVoice
	name: str = ""
	description: str = ""
	repeat: int = 1

	@property
	def measure_length (self) -> int:
		return rhythmcore.grid.notes_per_bar(self.time_signature, self.subdivision)

	@property
	def cycle_length (self) -> int:
		return cycle_length(self.ratio.numerator, self.ratio.denominator)

	def durations (self) -> PolyrhythmDurations:
		return durations(self.ratio.numerator, self.ratio.denominator, self.time_signature.numerator, self.time_signature.denominator)

	def to_pattern (self) -> rhythmcore.pattern.Pattern:

		"""
		Combine both voices into one grid pattern.

		Cells where both voices play become ``"S+K"`` with sticking ``"R+L"``;
		empty cells are rests (``R`` in the voice line, ``-`` in sticking).
		"""

		right_voice = VOICE_TOKENS.get(self.right.voice, "S")
		left_voice = VOICE_TOKENS.get(self.left.voice, "K")
		right_limb = LIMB_STICKING.get(self.right.limb, "R")
		left_limb = LIMB_STICKING.get(self.left.limb, "L")

		right_cells = set(self.right.grid_indices)
		left_cells = set(self.left.grid_indices)

		voices: typing.List[str] = []
		sticking: typing.List[str] = []

		for cell in range(self.measure_length):

			if cell in right_cells and cell in left_cells:
				voices.append(f"{right_voice}+{left_voice}")
				sticking.append(f"{right_limb}+{left_limb}")

			elif cell in right_cells:
				voices.append(right_voice)
				sticking.append(right_limb)

			elif cell in left_cells:
				voices.append(left_voice)
				sticking.append(left_limb)

			else:
				voices.append("R")
				sticking.append("-")

		return rhythmcore.pattern.Pattern(
			time_signature = self.time_signature,
			subdivision = self.subdivision,
			phrase = (self.measure_length,),
			voices = rhythmcore.notation.tokenize_voices(voices),
			sticking = rhythmcore.notation.tokenize_sticking(sticking),
			repeat = self.repeat,
			polyrhythm = True,
		)


def generate_polyrhythm (
	numerator: int,
	denominator: int,
	time_signature: typing.Union[str, rhythmcore.grid.TimeSignature] = "4/4",
	subdivision: int = 16,
	right_limb: str = "right-hand",
	left_limb: str = "left-hand",
	right_voice: str = "snare",
	left_voice: str = "kick",
	name: typing.Optional[str] = None,
	description: typing.Optional[str] = None
) -> Polyrhythm:

	"""
	Lay out an ``N:M`` polyrhythm across one bar.

	Positions are in beats of the time signature; grid indices snap them to
	``subdivision`` (a 16th-note grid in 4/4 puts beat 1 at index 4).
	"""

	ratio = PolyrhythmRatio(numerator, denominator)
	ts = rhythmcore.grid.TimeSignature.parse(time_signature)
	beats_per_bar = ts.numerator

	placed = positions(numerator, denominator, beats_per_bar)
	cells_per_beat = rhythmcore.grid.notes_per_bar(ts, subdivision) / beats_per_bar

	def snap (beat_positions: typing.List[float]) -> typing.Tuple[int, ...]:
		return tuple(rhythmcore.grid.round_half_up(pos * cells_per_beat) for pos in beat_positions)

	return Polyrhythm(
		ratio = ratio,
		time_signature = ts,
		subdivision = subdivision,
		right = PolyrhythmVoice(positions=tuple(placed.right), limb=right_limb, voice=right_voice, grid_indices=snap(placed.right)),
		left = PolyrhythmVoice(positions=tuple(placed.left), limb=left_limb, voice=left_voice, grid_indices=snap(placed.left)),
		name = name or f"{ratio} Polyrhythm",
		description = description or f"{numerator} notes in {right_limb.replace('-', ' ')} against {denominator} notes in {left_limb.replace('-', ' ')}",
	)
