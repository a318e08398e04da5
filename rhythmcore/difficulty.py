"""Rate how hard a pattern is to play, on a 1-10 scale.

The rating is a sum of structural factors, each one capped, so a single
feature (a bar full of ghost notes, say) cannot push a pattern to expert on
its own.
"""

import dataclasses
import logging
import typing

import rhythmcore.grid
import rhythmcore.pattern

logger = logging.getLogger(__name__)


BEGINNER = "beginner"
INTERMEDIATE = "intermediate"
ADVANCED = "advanced"
EXPERT = "expert"

# (largest subdivision, base difficulty)
SUBDIVISION_TIERS: typing.Tuple[typing.Tuple[int, float], ...] = (
	(4, 1.0),
	(8, 2.0),
	(16, 3.0),
	(24, 5.0),
)
FINEST_TIER = 7.0

# (largest score, level)
LEVELS: typing.Tuple[typing.Tuple[float, str], ...] = (
	(3.0, BEGINNER),
	(6.0, INTERMEDIATE),
	(8.0, ADVANCED),
)

PRIORITY_ORDER = {"high": 3, "medium": 2, "low": 1}


@dataclasses.dataclass(frozen=True)
class DifficultyFactors:

	"""The raw features a rating was computed from."""

	subdivision: int
	time_signature: int
	notes_per_bar: int
	accents: int
	rests: int
	advanced_mode: bool
	polyrhythm: bool
	ghost_notes: int
	ornaments: int


@dataclasses.dataclass(frozen=True)
class DifficultyRating:

	"""
	``difficulty`` is on the 1-10 scale (one decimal), ``score`` the same
	value on a 0-100 scale for display.
	"""

	level: str
	difficulty: float
	score: int
	factors: DifficultyFactors


@dataclasses.dataclass(frozen=True)
class PracticeRecommendation:

	kind: str
	message: str
	priority: str


def _subdivision_tier (subdivision: int) -> float:

	for limit, tier in SUBDIVISION_TIERS:
		if subdivision <= limit:
			return tier

	return FINEST_TIER


def level_for (difficulty: float) -> str:

	"""Map a 1-10 difficulty to its level name."""

	for limit, level in LEVELS:
		if difficulty <= limit:
			return level

	return EXPERT


def pattern_factors (pattern: rhythmcore.pattern.Pattern) -> DifficultyFactors:

	"""
	Count the features that make a pattern hard.

	Accents are the phrase group starts, counted only when the bar is split
	into more than one group. Ornaments are sticking tokens with a grace-note
	prefix (``"lR"``).

	Rests are the rest tokens of the voice line, so ``"."`` counts alongside
	``"R"`` and ``"-"``.
	"""

	return DifficultyFactors(
		subdivision = pattern.subdivision,
		time_signature = pattern.time_signature.numerator,
		notes_per_bar = pattern.notes_per_bar,
		accents = len(pattern.phrase) if len(pattern.phrase) > 1 else 0,
		rests = sum(1 for token in pattern.voices if token.is_rest),
		advanced_mode = pattern.advanced_mode,
		polyrhythm = pattern.polyrhythm,
		ghost_notes = sum(1 for token in pattern.voices if token.is_ghost),
		ornaments = sum(1 for token in pattern.sticking if token.has_ornament_prefix),
	)


def rate (pattern: rhythmcore.pattern.Pattern) -> DifficultyRating:

	"""
	Rate a pattern.

	Example:
		```python
		pattern = Pattern.from_strings("4/4", 8, "8", "H H H H H H H H")
		rate(pattern).difficulty   # 2.0
		rate(pattern).level        # "beginner"
		```
	"""

	factors = pattern_factors(pattern)
	total = _subdivision_tier(factors.subdivision)

	if factors.time_signature == 3:
		total += 0.5
	elif factors.time_signature != 4:
		total += 1.0

	if factors.notes_per_bar > 32:
		total += 1.0
	elif factors.notes_per_bar > 16:
		total += 0.5

	total += min(factors.accents * 0.3, 1.5)
	total += min(factors.rests * 0.1, 0.5)

	if factors.advanced_mode:
		beats = len(pattern.per_beat_subdivisions or ())
		total += min(beats * 2 * 0.5, 2.0)

	if factors.polyrhythm:
		total += 2.0

	total += min(factors.ghost_notes * 0.4, 1.5)
	total += min(factors.ornaments * 0.8, 2.5)

	difficulty = max(1.0, min(10.0, rhythmcore.grid.round_half_up(total * 10) / 10))

	logger.debug(f"Difficulty {difficulty} from {factors}")

	return DifficultyRating(
		level = level_for(difficulty),
		difficulty = difficulty,
		score = rhythmcore.grid.round_half_up(difficulty * 10),
		factors = factors,
	)


def practice_recommendations (
	pattern: rhythmcore.pattern.Pattern,
	rating: typing.Optional[DifficultyRating] = None,
	average_accuracy: typing.Optional[float] = None,
	average_timing_error_ms: typing.Optional[float] = None
) -> typing.List[PracticeRecommendation]:

	"""
	Suggest how to practice a pattern, most important first.

	``average_accuracy`` is a percentage (0-100) and
	``average_timing_error_ms`` a mean absolute error, both from earlier
	sessions when available.
	"""

	if rating is None:
		rating = rate(pattern)

	factors = rating.factors
	recommendations: typing.List[PracticeRecommendation] = []

	if rating.score > 60:
		recommendations.append(PracticeRecommendation("tempo", "Start slow (60-80 BPM) and gradually increase tempo as you build muscle memory.", "high"))
	elif rating.score > 30:
		recommendations.append(PracticeRecommendation("tempo", "Practice at a comfortable tempo (80-100 BPM) before increasing speed.", "medium"))

	if average_accuracy is not None and average_accuracy < 70:
		recommendations.append(PracticeRecommendation("accuracy", "Focus on accuracy over speed. Practice slowly until you can play consistently.", "high"))

	if factors.ghost_notes:
		recommendations.append(PracticeRecommendation("technique", "Pay attention to ghost notes: play them softer than regular notes.", "medium"))

	if factors.ornaments:
		recommendations.append(PracticeRecommendation("technique", "Practice flams, drags and ruffs separately before adding them to the pattern.", "high"))

	if average_timing_error_ms is not None and average_timing_error_ms > 50:
		recommendations.append(PracticeRecommendation("timing", "Work on timing precision. Use a metronome and focus on staying in time.", "high"))

	if factors.polyrhythm:
		recommendations.append(PracticeRecommendation("technique", "Practice each hand separately, then combine.", "high"))

	if factors.advanced_mode:
		recommendations.append(PracticeRecommendation("technique", "This pattern mixes subdivisions. Practice each beat separately first.", "high"))

	if factors.notes_per_bar > 2 and pattern.repeat > 4:
		recommendations.append(PracticeRecommendation("endurance", "Build endurance by gradually increasing the number of repeats.", "medium"))

	if rating.level == BEGINNER and not recommendations:
		recommendations.append(PracticeRecommendation("tempo", "Great pattern to start with! Focus on consistency and steady tempo.", "low"))

	return sorted(recommendations, key=lambda recommendation: -PRIORITY_ORDER[recommendation.priority])
