import bisect
import itertools
import random
import typing

T = typing.TypeVar("T")


def generate_euclidean_sequence (steps: int, pulses: int) -> typing.List[int]:

	"""
	Spread ``pulses`` onsets as evenly as possible over ``steps`` (Bjorklund).

	The result starts on an onset. ``generate_euclidean_sequence(8, 3)`` gives
	the tresillo ``[1, 0, 0, 1, 0, 0, 1, 0]``.
	"""

	if steps <= 0:
		raise ValueError("Steps must be positive")

	if pulses < 0 or pulses > steps:
		raise ValueError(f"Pulses ({pulses}) must be between 0 and steps ({steps})")

	if pulses == 0:
		return [0] * steps

	# Pair off the onset groups with the remainder groups until at most one
	# remainder group is left over.
	groups: typing.List[typing.List[int]] = [[1] for _ in range(pulses)]
	remainder: typing.List[typing.List[int]] = [[0] for _ in range(steps - pulses)]

	while len(remainder) > 1:

		paired = min(len(groups), len(remainder))
		merged = [groups[i] + remainder[i] for i in range(paired)]

		if len(groups) > paired:
			remainder = groups[paired:]
		else:
			remainder = remainder[paired:]

		groups = merged

	return [step for group in groups + remainder for step in group]


def sequence_to_indices (sequence: typing.Sequence[int]) -> typing.List[int]:

	"""Positions of the onsets in a binary sequence."""

	return [i for i, value in enumerate(sequence) if value]


def roll (indices: typing.Iterable[int], shift: int, length: int) -> typing.List[int]:

	"""Rotate positions by ``shift`` within a cycle of ``length``, sorted."""

	return sorted((i + shift) % length for i in indices)


def weighted_choice (options: typing.Sequence[typing.Tuple[T, float]], rng: random.Random) -> T:

	"""
	Pick one value from ``(value, weight)`` pairs.

	Weights are relative and need not sum to 1.

	Example:
		```python
		subdivision = weighted_choice([(8, 0.5), (16, 0.3), (12, 0.2)], rng)
		```
	"""

	if not options:
		raise ValueError("Options list cannot be empty")

	cumulative = list(itertools.accumulate(weight for _, weight in options))

	if cumulative[-1] <= 0:
		raise ValueError("Total weight must be positive")

	position = bisect.bisect_left(cumulative, rng.random() * cumulative[-1])

	return options[min(position, len(options) - 1)][0]
