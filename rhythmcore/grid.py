import dataclasses
import math
import re
import typing


_TIME_SIGNATURE = re.compile(r"^\s*(\d+)\s*/\s*(\d+)\s*$")


def round_half_up (value: float) -> int:

	"""Round to the nearest integer with halves going up (2.5 -> 3, -2.5 -> -2)."""

	return int(math.floor(value + 0.5))


@dataclasses.dataclass(frozen=True)
class TimeSignature:

	"""
	A time signature: ``numerator`` beats of a ``denominator`` note.
	"""

	numerator: int = 4
	denominator: int = 4

	def __post_init__ (self) -> None:
		if self.numerator < 1 or self.denominator < 1:
			raise ValueError("time signature parts must be at least 1")

	@classmethod
	def parse (cls, value: typing.Union[str, "TimeSignature", None]) -> "TimeSignature":

		"""
		Parse ``"num/den"``. Anything unparseable gives 4/4 and both parts are
		clamped to at least 1, so this never raises.
		"""

		if isinstance(value, TimeSignature):
			return value

		match = _TIME_SIGNATURE.match(value or "")

		if not match:
			return cls()

		return cls(max(1, int(match.group(1))), max(1, int(match.group(2))))

	def __str__ (self) -> str:
		return f"{self.numerator}/{self.denominator}"


def notes_per_beat (time_signature: TimeSignature, subdivision: int) -> float:

	"""Number of grid notes in one beat of the time signature (may be fractional)."""

	if subdivision <= 0:
		raise ValueError("Subdivision must be positive")

	return subdivision / time_signature.denominator


def notes_per_bar (time_signature: typing.Union[str, TimeSignature], subdivision: int) -> int:

	"""
	Total grid notes in one bar for a uniform subdivision.

	Example:
		```python
		notes_per_bar("4/4", 16)   # 16
		notes_per_bar("7/8", 16)   # 14
		notes_per_bar("3/4", 8)    # 6
		```
	"""

	ts = TimeSignature.parse(time_signature)

	return round_half_up(ts.numerator * notes_per_beat(ts, subdivision))


def per_beat_notes (time_signature: typing.Union[str, TimeSignature], subdivisions: typing.Sequence[int]) -> typing.Tuple[int, typing.List[int]]:

	"""
	Notes per bar and notes per beat for per-beat subdivisions.

	Returns ``(notes_per_bar, [notes in beat 0, notes in beat 1, ...])``.
	"""

	ts = TimeSignature.parse(time_signature)

	if not subdivisions:
		raise ValueError("Per-beat subdivisions cannot be empty")

	per_beat = [notes_per_beat(ts, subdivision) for subdivision in subdivisions]

	return round_half_up(sum(per_beat)), [round_half_up(n) for n in per_beat]


def is_whole_beat (time_signature: TimeSignature, subdivision: int) -> bool:

	"""True when ``subdivision`` puts a whole number of notes in each beat."""

	return subdivision > 0 and subdivision % time_signature.denominator == 0


def beat_note_counts (time_signature: typing.Union[str, TimeSignature], subdivisions: typing.Sequence[int]) -> typing.List[int]:

	"""
	Grid cells in each beat for per-beat subdivisions, at least one per beat.

	This is the cell layout used for timing, export and conversion. It agrees
	with ``per_beat_notes`` whenever every subdivision is a whole-beat one.
	"""

	ts = TimeSignature.parse(time_signature)

	return [max(1, round_half_up(notes_per_beat(ts, subdivision))) for subdivision in subdivisions]


def note_positions (time_signature: typing.Union[str, TimeSignature], subdivisions: typing.Sequence[int]) -> typing.List[float]:

	"""
	Beat positions of every note for per-beat subdivisions.

	Each beat contributes its notes evenly spaced from the beat's integer offset:
	``note_positions("4/4", [16, 8, 4, 4])`` gives
	``[0, 0.25, 0.5, 0.75, 1, 1.5, 2, 3]``.
	"""

	ts = TimeSignature.parse(time_signature)
	positions: typing.List[float] = []

	for beat, subdivision in enumerate(subdivisions):

		count = notes_per_beat(ts, subdivision)
		spacing = 1.0 / count
		i = 0

		while i < count:
			positions.append(beat + i * spacing)
			i += 1

	return positions


def ms_per_beat (bpm: float) -> float:

	"""Milliseconds per beat at the given tempo."""

	if bpm <= 0:
		raise ValueError("BPM must be positive")

	return 60000.0 / bpm


def note_durations_ms (
	time_signature: typing.Union[str, TimeSignature],
	bpm: float,
	note_count: int,
	subdivision: int,
	per_beat_subdivisions: typing.Optional[typing.Sequence[int]] = None
) -> typing.List[float]:

	"""
	Duration in milliseconds of each of ``note_count`` consecutive notes.

	With a uniform subdivision every note lasts ``ms_per_beat / notes_per_beat``.
	With per-beat subdivisions each beat's notes share that beat evenly and the
	beat list is cycled if ``note_count`` runs past one bar.
	"""

	ts = TimeSignature.parse(time_signature)
	beat_ms = ms_per_beat(bpm)

	if note_count <= 0:
		return []

	if not per_beat_subdivisions:
		return [beat_ms / notes_per_beat(ts, subdivision)] * note_count

	counts = beat_note_counts(ts, per_beat_subdivisions)
	durations: typing.List[float] = []
	beat = 0

	while len(durations) < note_count:
		count = counts[beat % len(counts)]
		durations.extend([beat_ms / count] * count)
		beat += 1

	return durations[:note_count]


def subdivision_label (subdivision: int) -> str:

	"""Short human label for a subdivision ('16th', '8th (triplets)', ...)."""

	labels = {
		4: "4th",
		8: "8th",
		12: "8th (triplets)",
		16: "16th",
		24: "16th (sextuplets)",
		32: "32nd",
	}

	return labels.get(subdivision, f"{subdivision}th")
