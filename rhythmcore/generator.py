"""Create default and random patterns.

All randomness comes from the ``random.Random`` passed in, so a seeded
generator always reproduces the same pattern:

```python
import random
import rhythmcore.generator

rng = random.Random(7)
pattern = rhythmcore.generator.generate_pattern(rng)
```
"""

import logging
import random
import typing

import rhythmcore.constants
import rhythmcore.grid
import rhythmcore.notation
import rhythmcore.pattern
import rhythmcore.sequence_utils

logger = logging.getLogger(__name__)


TIME_SIGNATURES: typing.Tuple[str, ...] = ("4/4", "3/4", "2/4", "5/4", "6/8", "7/8")

DRUM_PATTERNS: typing.Tuple[typing.Tuple[str, ...], ...] = (
	("S",),
	("S", "K"),
	("K", "S", "K", "S"),
	("S", "S", "K", "S"),
	("K", "H", "S", "H"),
	("H", "H", "S", "H"),
	("K+H", "H", "S+H", "H"),
	("S", "(S)", "S", "(S)"),
	("S", "T", "F", "K"),
)

# Favour the grids drummers practise most.
SUBDIVISION_WEIGHTS: typing.Tuple[typing.Tuple[int, float], ...] = (
	(4, 0.10),
	(8, 0.25),
	(12, 0.15),
	(16, 0.30),
	(24, 0.10),
	(32, 0.10),
)

# (name, sticking)
COMMON_STICKINGS: typing.Tuple[typing.Tuple[str, str], ...] = (
	("Single Stroke Roll", "R L"),
	("Double Stroke Roll", "R R L L"),
	("Paradiddle", "R L R R L R L L"),
	("Inverted Paradiddle", "R L L R L R R L"),
	("Paradiddle-diddle", "R L R R L L"),
	("Flam", "lR rL"),
	("Swiss Army Triplet", "R L R"),
	("Flam Tap", "lR rL R L"),
	("Drag", "R R L"),
	("Six Stroke Roll", "R R L L R L"),
	("Seven Stroke Roll", "R R L L R L R"),
)


def default_pattern () -> rhythmcore.pattern.Pattern:

	"""A bar of sixteenth notes on the snare, alternating hands, no accents."""

	ts = rhythmcore.grid.TimeSignature.parse(rhythmcore.constants.DEFAULT_TIME_SIGNATURE)
	subdivision = rhythmcore.constants.DEFAULT_SUBDIVISION
	notes = rhythmcore.grid.notes_per_bar(ts, subdivision)

	return rhythmcore.pattern.Pattern(
		time_signature = ts,
		subdivision = subdivision,
		phrase = tuple(rhythmcore.notation.build_phrase_from_accents([], notes)),
		voices = rhythmcore.notation.tokenize_voices(["S"] * notes),
		sticking = rhythmcore.notation.tokenize_sticking(["R" if i % 2 == 0 else "L" for i in range(notes)]),
	)


def random_accents (notes_per_bar: int, rng: random.Random) -> typing.List[int]:

	"""Between zero and ``notes_per_bar`` distinct accent positions, sorted."""

	if notes_per_bar <= 0:
		raise ValueError("notes_per_bar must be positive")

	count = rng.randint(0, notes_per_bar)

	return sorted(rng.sample(range(notes_per_bar), count))


def euclidean_accents (notes_per_bar: int, accents: int, rotation: int = 0) -> typing.List[int]:

	"""
	Spread ``accents`` evenly across the bar, optionally rotated.

	Example:
		```python
		euclidean_accents(8, 3)      # [0, 3, 6]
		euclidean_accents(8, 3, 2)   # [0, 2, 5]
		```
	"""

	sequence = rhythmcore.sequence_utils.generate_euclidean_sequence(notes_per_bar, accents)
	indices = rhythmcore.sequence_utils.sequence_to_indices(sequence)

	return rhythmcore.sequence_utils.roll(indices, rotation, notes_per_bar)


def random_per_beat_subdivisions (time_signature: typing.Union[str, rhythmcore.grid.TimeSignature], rng: random.Random) -> typing.List[int]:

	"""
	One weighted-random subdivision per beat of the bar, restricted to grids
	that put a whole number of notes in each beat (8 and up in 7/8).
	"""

	ts = rhythmcore.grid.TimeSignature.parse(time_signature)
	weights = [(subdivision, weight) for subdivision, weight in SUBDIVISION_WEIGHTS if rhythmcore.grid.is_whole_beat(ts, subdivision)]

	if not weights:
		raise ValueError(f"No subdivision gives whole beats in {ts}")

	return [rhythmcore.sequence_utils.weighted_choice(weights, rng) for _ in range(ts.numerator)]


def generate_sticking (
	voices: typing.Sequence[rhythmcore.notation.NoteToken],
	notes_per_bar: int,
	rng: random.Random,
	practice_pad: bool = False
) -> typing.List[str]:

	"""
	Sticking to go with a voice line.

	Kick notes are played with the foot (``K``) unless ``practice_pad`` is set.
	Hands alternate over every other note starting from a random hand, and
	rests get a random hand.
	"""

	sticking: typing.List[str] = []
	hand = rng.choice(("R", "L"))

	for i in range(notes_per_bar):

		token = voices[i % len(voices)] if voices else rhythmcore.notation.REST

		if "K" in token.voices and not practice_pad:
			sticking.append("K")

		elif token.is_rest:
			sticking.append(rng.choice(("R", "L")))

		else:
			sticking.append(hand)
			hand = "L" if hand == "R" else "R"

	return sticking


def generate_pattern (
	rng: random.Random,
	practice_pad: bool = False,
	advanced: bool = False,
	time_signature: typing.Optional[str] = None
) -> rhythmcore.pattern.Pattern:

	"""
	A random pattern that passes ``Pattern.validate()``.

	Parameters:
		rng: Source of randomness.
		practice_pad: Snare only, and no kick in the sticking.
		advanced: Pick a subdivision per beat instead of one for the bar.
		time_signature: Fix the time signature instead of picking one.
	"""

	ts = rhythmcore.grid.TimeSignature.parse(time_signature or rng.choice(TIME_SIGNATURES))
	subdivision = rhythmcore.sequence_utils.weighted_choice(SUBDIVISION_WEIGHTS, rng)
	per_beat: typing.Optional[typing.Tuple[int, ...]] = None

	if advanced:
		per_beat = tuple(random_per_beat_subdivisions(ts, rng))
		subdivision = max(per_beat)
		notes = rhythmcore.grid.per_beat_notes(ts, per_beat)[0]
	else:
		notes = rhythmcore.grid.notes_per_bar(ts, subdivision)

	notes = max(1, notes)
	accents = random_accents(notes, rng)

	if practice_pad:
		cell = ("S",)
	else:
		cell = rng.choice(DRUM_PATTERNS)

	voices = rhythmcore.notation.tokenize_voices([cell[i % len(cell)] for i in range(notes)])
	sticking = rhythmcore.notation.tokenize_sticking(generate_sticking(voices, notes, rng, practice_pad))

	pattern = rhythmcore.pattern.Pattern(
		time_signature = ts,
		subdivision = subdivision,
		phrase = tuple(rhythmcore.notation.build_phrase_from_accents(accents, notes)),
		voices = voices,
		sticking = sticking,
		repeat = rng.randint(1, 4),
		per_beat_subdivisions = per_beat,
	)

	logger.debug(f"Generated {ts} at {subdivision}: {pattern.drum_pattern}")

	return pattern
