import dataclasses

import pytest

import rhythmcore.difficulty
import rhythmcore.pattern
import rhythmcore.polyrhythm


def test_plain_eighths_are_beginner () -> None:

	"""A single-voice eighth-note bar rates on its subdivision alone."""

	pattern = rhythmcore.pattern.Pattern.from_strings("4/4", 8, "8", "H H H H H H H H")
	rating = rhythmcore.difficulty.rate(pattern)

	assert rating.difficulty == 2.0
	assert rating.score == 20
	assert rating.level == rhythmcore.difficulty.BEGINNER
	assert rating.factors.accents == 0


def test_accent_groups_add_difficulty (rock_beat: rhythmcore.pattern.Pattern) -> None:

	"""Each accent group beyond a single one adds a little."""

	rating = rhythmcore.difficulty.rate(rock_beat)

	assert rating.factors.accents == 2
	assert rating.difficulty == pytest.approx(2.6)


def test_odd_meter () -> None:

	"""Three-beat bars add half a point on top of sixteenths and accents."""

	pattern = rhythmcore.pattern.Pattern.from_strings("3/4", 16, "4 4 4", "S")
	rating = rhythmcore.difficulty.rate(pattern)

	assert rating.difficulty == pytest.approx(4.4)
	assert rating.score == 44
	assert rating.level == rhythmcore.difficulty.INTERMEDIATE


def test_ghosts_and_ornaments () -> None:

	"""Ghost notes and grace-note prefixes are counted from the lines."""

	pattern = rhythmcore.pattern.Pattern.from_strings("4/4", 16, "4 4 4 4", "(S) S (S) S", "lR L R L")
	rating = rhythmcore.difficulty.rate(pattern)

	assert rating.factors.ghost_notes == 2
	assert rating.factors.ornaments == 1
	assert rating.difficulty == pytest.approx(5.8)
	assert rating.score == 58


def test_every_rest_spelling_counts () -> None:

	"""Dots count as rests just like R and dashes."""

	pattern = rhythmcore.pattern.Pattern.from_strings("4/4", 8, "8", "K . S - K r S R")

	assert rhythmcore.difficulty.pattern_factors(pattern).rests == 4


def test_polyrhythm () -> None:

	"""Polyrhythms carry a fixed bonus; rests add a capped amount."""

	pattern = rhythmcore.polyrhythm.generate_polyrhythm(3, 2, "4/4", 12).to_pattern()
	rating = rhythmcore.difficulty.rate(pattern)

	assert rating.factors.polyrhythm
	assert rating.factors.rests == 8
	assert rating.difficulty == pytest.approx(5.5)


def test_level_boundaries () -> None:

	"""Level thresholds are inclusive at the top of each band."""

	level_for = rhythmcore.difficulty.level_for

	assert level_for(3.0) == rhythmcore.difficulty.BEGINNER
	assert level_for(3.1) == rhythmcore.difficulty.INTERMEDIATE
	assert level_for(6.0) == rhythmcore.difficulty.INTERMEDIATE
	assert level_for(8.0) == rhythmcore.difficulty.ADVANCED
	assert level_for(8.1) == rhythmcore.difficulty.EXPERT


def test_recommendations_sorted_by_priority () -> None:

	"""High priority advice comes first; equal priorities keep their order."""

	pattern = rhythmcore.pattern.Pattern.from_strings("4/4", 16, "4 4 4 4", "(S) S (S) S", "lR L R L")
	recommendations = rhythmcore.difficulty.practice_recommendations(pattern)

	assert [r.priority for r in recommendations] == ["high", "medium", "medium"]
	assert [r.kind for r in recommendations] == ["technique", "tempo", "technique"]
	assert "flams" in recommendations[0].message


def test_recommendations_from_history (rock_beat: rhythmcore.pattern.Pattern) -> None:

	"""Poor accuracy and loose timing from earlier sessions add advice."""

	recommendations = rhythmcore.difficulty.practice_recommendations(rock_beat, average_accuracy=50, average_timing_error_ms=60)

	assert {r.kind for r in recommendations} == {"accuracy", "timing"}


def test_recommendations_endurance (rock_beat: rhythmcore.pattern.Pattern) -> None:

	"""Many repeats suggest building endurance."""

	pattern = dataclasses.replace(rock_beat, repeat=5)
	recommendations = rhythmcore.difficulty.practice_recommendations(pattern)

	assert [r.kind for r in recommendations] == ["endurance"]


def test_easy_pattern_gets_encouragement () -> None:

	"""A beginner pattern with nothing to warn about still gets one tip."""

	pattern = rhythmcore.pattern.Pattern.from_strings("4/4", 8, "8", "H")
	recommendations = rhythmcore.difficulty.practice_recommendations(pattern)

	assert len(recommendations) == 1
	assert recommendations[0].priority == "low"
