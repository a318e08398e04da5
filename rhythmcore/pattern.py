import dataclasses
import typing

import rhythmcore.constants
import rhythmcore.grid
import rhythmcore.notation


@dataclasses.dataclass(frozen=True)
class Pattern:

	"""
	A drum pattern: one bar of grid notes plus how many times to play it.

	Every calculator treats a pattern as read-only input. Voice and sticking
	lines shorter than the bar are cycled, so ``"S S K S"`` over sixteen
	sixteenth notes repeats four times.

	Parameters:
		time_signature: Beats per bar and beat unit.
		subdivision: Uniform grid (4 = quarters, 16 = sixteenths, ...). In
			per-beat mode this is the finest beat subdivision.
		phrase: Accent group lengths; the first note of each group is accented.
		voices: Voice tokens, one per grid note.
		sticking: Sticking tokens, one per grid note (may be empty).
		repeat: How many times the bar is played.
		left_foot: Left foot pedal ostinato flag.
		right_foot: Right foot pedal ostinato flag.
		per_beat_subdivisions: Optional subdivision per beat ("advanced mode").
		polyrhythm: True when the pattern was built from a polyrhythm.
	"""

	time_signature: rhythmcore.grid.TimeSignature = dataclasses.field(default_factory=rhythmcore.grid.TimeSignature)
	subdivision: int = rhythmcore.constants.DEFAULT_SUBDIVISION
	phrase: typing.Tuple[int, ...] = (4, 4, 4, 4)
	voices: typing.Tuple[rhythmcore.notation.NoteToken, ...] = ()
	sticking: typing.Tuple[rhythmcore.notation.NoteToken, ...] = ()
	repeat: int = 1
	left_foot: bool = False
	right_foot: bool = False
	per_beat_subdivisions: typing.Optional[typing.Tuple[int, ...]] = None
	polyrhythm: bool = False

	@classmethod
	def from_strings (
		cls,
		time_signature: str = rhythmcore.constants.DEFAULT_TIME_SIGNATURE,
		subdivision: int = rhythmcore.constants.DEFAULT_SUBDIVISION,
		phrase: typing.Optional[str] = None,
		drum_pattern: str = "",
		sticking_pattern: str = "",
		repeat: int = 1,
		left_foot: bool = False,
		right_foot: bool = False,
		per_beat_subdivisions: typing.Optional[typing.Sequence[int]] = None,
		polyrhythm: bool = False
	) -> "Pattern":

		"""
		Build a pattern from its stored string form.

		A missing or unparseable phrase becomes one group spanning the bar.

		Example:
			```python
			Pattern.from_strings("4/4", 16, "4 4 4 4", "S S K S", "R L K R")
			```
		"""

		ts = rhythmcore.grid.TimeSignature.parse(time_signature)
		per_beat = tuple(per_beat_subdivisions) if per_beat_subdivisions else None

		if per_beat:
			bar_notes, _ = rhythmcore.grid.per_beat_notes(ts, per_beat)
		else:
			bar_notes = rhythmcore.grid.notes_per_bar(ts, subdivision)

		groups = tuple(
			rhythmcore.grid.round_half_up(value)
			for value in rhythmcore.notation.parse_number_list(phrase)
			if rhythmcore.grid.round_half_up(value) > 0
		)

		if not groups:
			groups = (max(1, bar_notes),)

		return cls(
			time_signature = ts,
			subdivision = subdivision,
			phrase = groups,
			voices = rhythmcore.notation.tokenize_voices(drum_pattern),
			sticking = rhythmcore.notation.tokenize_sticking(sticking_pattern),
			repeat = max(1, int(repeat)),
			left_foot = left_foot,
			right_foot = right_foot,
			per_beat_subdivisions = per_beat,
			polyrhythm = polyrhythm,
		)

	@property
	def advanced_mode (self) -> bool:
		return bool(self.per_beat_subdivisions)

	@property
	def notes_per_bar (self) -> int:

		"""Grid notes in one bar from the time signature and subdivision(s)."""

		if self.per_beat_subdivisions:
			return rhythmcore.grid.per_beat_notes(self.time_signature, self.per_beat_subdivisions)[0]

		return rhythmcore.grid.notes_per_bar(self.time_signature, self.subdivision)

	@property
	def note_count (self) -> int:

		"""Notes walked per repeat (the sum of the phrase groups)."""

		return sum(self.phrase)

	@property
	def accent_indices (self) -> typing.List[int]:
		return rhythmcore.notation.build_accent_indices(self.phrase)

	@property
	def drum_pattern (self) -> str:
		return rhythmcore.notation.format_list(rhythmcore.notation.format_token(t) for t in self.voices)

	@property
	def sticking_pattern (self) -> str:
		return rhythmcore.notation.format_list(rhythmcore.notation.format_token(t, rest="-") for t in self.sticking)

	def voice_at (self, index: int) -> rhythmcore.notation.NoteToken:

		"""Voice token for a note index, cycling the voice line. Rest if empty."""

		if not self.voices:
			return rhythmcore.notation.REST

		return self.voices[index % len(self.voices)]

	def sticking_at (self, index: int) -> rhythmcore.notation.NoteToken:

		"""Sticking token for a note index, cycling the sticking line. Rest if empty."""

		if not self.sticking:
			return rhythmcore.notation.REST

		return self.sticking[index % len(self.sticking)]

	def validate (self) -> typing.List[str]:

		"""
		Check the pattern before handing it to storage or export.

		Returns a list of human-readable problems; an empty list means valid.
		"""

		problems: typing.List[str] = []
		ts = self.time_signature

		if not 1 <= ts.numerator <= 32:
			problems.append("Time signature numerator must be between 1 and 32")

		if ts.denominator > 32 or ts.denominator & (ts.denominator - 1):
			problems.append("Time signature denominator must be a power of 2 (1, 2, 4, 8, 16, 32)")

		if self.subdivision not in rhythmcore.constants.SUBDIVISIONS:
			problems.append(f"Subdivision {self.subdivision} is unusual (common values: 4, 8, 12, 16, 24, 32)")

		if self.per_beat_subdivisions and len(self.per_beat_subdivisions) != ts.numerator:
			problems.append(f"Expected {ts.numerator} per-beat subdivisions, got {len(self.per_beat_subdivisions)}")

		for subdivision in sorted(set(self.per_beat_subdivisions or ())):
			if not rhythmcore.grid.is_whole_beat(ts, subdivision):
				problems.append(f"Per-beat subdivision {subdivision} does not give a whole number of notes per beat in {ts}")

		if self.note_count != self.notes_per_bar:
			problems.append(f"Phrase covers {self.note_count} notes but the bar has {self.notes_per_bar}")

		if not self.voices:
			problems.append("Drum pattern is required")

		elif self.note_count % len(self.voices):
			problems.append(f"Drum pattern length {len(self.voices)} does not divide {self.note_count} notes")

		if self.sticking and self.note_count % len(self.sticking):
			problems.append(f"Sticking pattern length {len(self.sticking)} does not divide {self.note_count} notes")

		if self.repeat < 1:
			problems.append("Repeat must be a positive number")

		return problems
