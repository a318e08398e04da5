"""Infer the subdivision a performer played from recorded onset times.

Onsets are grouped by beat (``floor(time / ms_per_beat)``) and each beat is
classified on its own, so a take can mix quarters, eighths and sixteenths
inside one bar:

- A beat with a single onset is a quarter (on the beat) or an eighth (on the
  half beat), judged with tempo-scaled tolerance bands.
- A beat with several onsets is tested against every candidate grid. Every
  interval must land on the grid within a tolerance, and the candidate with
  the lowest total quantization error wins.

The result always holds one subdivision per beat of the bar.
"""

import dataclasses
import logging
import math
import typing

import rhythmcore.constants
import rhythmcore.grid

logger = logging.getLogger(__name__)


QUARTER = 4
EIGHTH = 8

QUARTER_TOLERANCE_RATIO = 0.12
QUARTER_TOLERANCE_MIN_MS = 20.0
EIGHTH_TOLERANCE_RATIO = 0.18
EIGHTH_TOLERANCE_MIN_MS = 15.0

# Fallbacks for a single onset outside both tolerance bands.
QUARTER_NEAR_RATIO = 0.25
EIGHTH_NEAR_RATIO = 0.3

FAST_TOLERANCE = 0.25
SLOW_TOLERANCE = 0.15


def beat_grid (subdivision: int, denominator: int) -> int:

	"""
	Rescale a quarter-beat subdivision to a beat of ``1/denominator``.

	The single-onset bands speak in quarter-beat terms: 4 is one note per beat
	and 8 is two. In 6/8 one note per beat is an eighth-note grid, so
	``beat_grid(4, 8)`` is 8. The result never drops below 4, which keeps a
	whole number of notes in every beat.
	"""

	return max(QUARTER, subdivision * denominator // QUARTER)


@dataclasses.dataclass(frozen=True)
class SubdivisionResult:

	"""
	Outcome of subdivision detection.

	``subdivision`` is the finest per-beat value, usable as a uniform grid.
	``detected`` is False when the guess is a default (too few onsets) or a beat
	fitted no candidate grid.
	"""

	subdivision: int
	per_beat_subdivisions: typing.Optional[typing.Tuple[int, ...]] = None
	detected: bool = False


def classify_single_onset (offset_ms: float, beat_ms: float) -> int:

	"""
	Classify a lone onset ``offset_ms`` after its beat start as 4 or 8.

	Example:
		```python
		classify_single_onset(3, 500)     # 4, on the beat
		classify_single_onset(245, 500)   # 8, on the half beat
		```
	"""

	half_ms = beat_ms / 2

	quarter_tolerance = max(beat_ms * QUARTER_TOLERANCE_RATIO, QUARTER_TOLERANCE_MIN_MS)
	eighth_tolerance = max(half_ms * EIGHTH_TOLERANCE_RATIO, EIGHTH_TOLERANCE_MIN_MS)

	quarter_error = abs(offset_ms)
	eighth_error = abs(offset_ms - rhythmcore.grid.round_half_up(offset_ms / half_ms) * half_ms)

	if quarter_error < quarter_tolerance:
		return QUARTER

	if eighth_error < eighth_tolerance:
		return EIGHTH

	if quarter_error < beat_ms * QUARTER_NEAR_RATIO:
		return QUARTER

	if eighth_error < half_ms * EIGHTH_NEAR_RATIO:
		return EIGHTH

	return QUARTER


def fit_subdivision (times: typing.Sequence[float], beat_ms: float, denominator: int = 4) -> typing.Optional[int]:

	"""
	Find the candidate grid that fits every interval between ``times``.

	Intervals outside ``(0, beat_ms)`` are ignored; with none left the beat
	counts as a quarter. Returns None when no candidate fits every interval.
	Ties on total error keep the coarser candidate.
	"""

	intervals = [b - a for a, b in zip(times, times[1:]) if 0 < b - a < beat_ms]

	if not intervals:
		return beat_grid(QUARTER, denominator)

	average = sum(intervals) / len(intervals)
	tolerance = FAST_TOLERANCE if average < beat_ms / 4 else SLOW_TOLERANCE

	best: typing.Optional[int] = None
	best_error = math.inf

	for candidate in rhythmcore.constants.SUBDIVISIONS:

		# Only grids with a whole number of notes per beat.
		if candidate % denominator:
			continue

		grid_ms = beat_ms / (candidate / denominator)
		total_error = 0.0

		for interval in intervals:

			error = abs(interval - rhythmcore.grid.round_half_up(interval / grid_ms) * grid_ms)

			if error > grid_ms * tolerance:
				break

			total_error += error

		else:
			if total_error < best_error:
				best, best_error = candidate, total_error

	return best


def detect_subdivision (
	onsets: typing.Iterable[float],
	time_signature: typing.Union[str, rhythmcore.grid.TimeSignature],
	bpm: float
) -> SubdivisionResult:

	"""
	Detect one subdivision per beat of the bar from onset times in ms.

	The beats are counted from the start of the bar holding the first onset;
	beats with no onset are quarters. The sequence is repeated or trimmed to
	the time signature's beat count. Fewer than two onsets gives the default
	subdivision with ``detected=False``.

	Example:
		```python
		result = detect_subdivision([0, 250], "4/4", 120)
		result.per_beat_subdivisions   # (8, 8, 8, 8)
		result.subdivision             # 8
		```
	"""

	ts = rhythmcore.grid.TimeSignature.parse(time_signature)
	beat_ms = rhythmcore.grid.ms_per_beat(bpm)
	times = sorted(float(t) for t in onsets)

	if len(times) < 2:
		return SubdivisionResult(subdivision=rhythmcore.constants.DEFAULT_SUBDIVISION, detected=False)

	by_beat: typing.Dict[int, typing.List[float]] = {}

	for t in times:
		by_beat.setdefault(math.floor(t / beat_ms), []).append(t)

	first_beat = (min(by_beat) // ts.numerator) * ts.numerator
	last_beat = max(by_beat)

	detected = True
	sequence: typing.List[int] = []

	for beat in range(first_beat, last_beat + 1):

		beat_times = by_beat.get(beat)

		if not beat_times:
			subdivision = beat_grid(QUARTER, ts.denominator)

		elif len(beat_times) == 1:
			subdivision = beat_grid(classify_single_onset(beat_times[0] - beat * beat_ms, beat_ms), ts.denominator)

		else:
			fitted = fit_subdivision(beat_times, beat_ms, ts.denominator)

			if fitted is None:
				logger.debug(f"Beat {beat}: {len(beat_times)} onsets fit no grid")
				detected = False
				fitted = beat_grid(QUARTER, ts.denominator)

			subdivision = fitted

		logger.debug(f"Beat {beat}: {len(beat_times or [])} onset(s), subdivision {subdivision}")
		sequence.append(subdivision)

	per_beat = tuple((sequence * (ts.numerator // len(sequence) + 1))[:ts.numerator])

	return SubdivisionResult(
		subdivision = max(per_beat),
		per_beat_subdivisions = per_beat,
		detected = detected,
	)
