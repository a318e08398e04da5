import pytest

import rhythmcore.grid


def test_round_half_up () -> None:

	"""Halves round towards positive infinity."""

	assert rhythmcore.grid.round_half_up(2.5) == 3
	assert rhythmcore.grid.round_half_up(3.5) == 4
	assert rhythmcore.grid.round_half_up(-2.5) == -2
	assert rhythmcore.grid.round_half_up(2.49) == 2


def test_parse_time_signature () -> None:

	"""Valid strings parse, anything else falls back to 4/4."""

	ts = rhythmcore.grid.TimeSignature.parse("7/8")

	assert (ts.numerator, ts.denominator) == (7, 8)
	assert str(ts) == "7/8"
	assert rhythmcore.grid.TimeSignature.parse(" 3 / 4 ") == rhythmcore.grid.TimeSignature(3, 4)

	for bad in ("", None, "four/four", "4-4", "4/"):
		assert rhythmcore.grid.TimeSignature.parse(bad) == rhythmcore.grid.TimeSignature(4, 4)


def test_parse_time_signature_clamps_zero () -> None:

	"""Zero parts are clamped to 1 instead of raising."""

	assert rhythmcore.grid.TimeSignature.parse("0/0") == rhythmcore.grid.TimeSignature(1, 1)


def test_time_signature_rejects_zero () -> None:

	"""Direct construction with a zero part is a programming error."""

	with pytest.raises(ValueError):
		rhythmcore.grid.TimeSignature(0, 4)


def test_notes_per_bar () -> None:

	"""Notes per bar for common time signatures."""

	assert rhythmcore.grid.notes_per_bar("4/4", 16) == 16
	assert rhythmcore.grid.notes_per_bar("7/8", 16) == 14
	assert rhythmcore.grid.notes_per_bar("3/4", 8) == 6
	assert rhythmcore.grid.notes_per_bar("6/8", 12) == 9
	assert rhythmcore.grid.notes_per_bar("4/4", 12) == 12


def test_notes_per_bar_rejects_bad_subdivision () -> None:

	"""A zero or negative subdivision raises."""

	with pytest.raises(ValueError):
		rhythmcore.grid.notes_per_bar("4/4", 0)

	with pytest.raises(ValueError):
		rhythmcore.grid.notes_per_bar("4/4", -8)


def test_per_beat_notes () -> None:

	"""Per-beat subdivisions sum beat by beat."""

	total, per_beat = rhythmcore.grid.per_beat_notes("4/4", [16, 8, 4, 4])

	assert total == 8
	assert per_beat == [4, 2, 1, 1]


def test_per_beat_notes_rejects_empty () -> None:

	"""An empty subdivision list raises."""

	with pytest.raises(ValueError):
		rhythmcore.grid.per_beat_notes("4/4", [])


def test_is_whole_beat () -> None:

	"""A subdivision is whole when each beat gets a whole number of notes."""

	seven_eight = rhythmcore.grid.TimeSignature.parse("7/8")

	assert rhythmcore.grid.is_whole_beat(seven_eight, 8)
	assert rhythmcore.grid.is_whole_beat(seven_eight, 16)
	assert not rhythmcore.grid.is_whole_beat(seven_eight, 4)
	assert not rhythmcore.grid.is_whole_beat(seven_eight, 12)


def test_beat_note_counts () -> None:

	"""Cell counts per beat never drop below one."""

	assert rhythmcore.grid.beat_note_counts("4/4", [16, 8, 4, 4]) == [4, 2, 1, 1]
	assert rhythmcore.grid.beat_note_counts("6/8", [8, 16, 4]) == [1, 2, 1]


def test_note_positions () -> None:

	"""Each beat's notes are evenly spaced from the beat's integer offset."""

	positions = rhythmcore.grid.note_positions("4/4", [16, 8, 4, 4])

	assert positions == [0, 0.25, 0.5, 0.75, 1, 1.5, 2, 3]


def test_note_positions_triplets () -> None:

	"""Triplet beats place notes on thirds of the beat."""

	positions = rhythmcore.grid.note_positions("2/4", [12, 4])

	assert positions == pytest.approx([0, 1 / 3, 2 / 3, 1])


def test_ms_per_beat () -> None:

	"""60000 / bpm, with non-positive tempos rejected."""

	assert rhythmcore.grid.ms_per_beat(120) == 500
	assert rhythmcore.grid.ms_per_beat(60) == 1000

	with pytest.raises(ValueError):
		rhythmcore.grid.ms_per_beat(0)


def test_note_durations_uniform () -> None:

	"""Uniform subdivisions give equal note lengths."""

	assert rhythmcore.grid.note_durations_ms("4/4", 120, 4, 8) == [250, 250, 250, 250]
	assert rhythmcore.grid.note_durations_ms("4/4", 120, 0, 8) == []


def test_note_durations_per_beat () -> None:

	"""Per-beat subdivisions share each beat among its own notes and cycle."""

	durations = rhythmcore.grid.note_durations_ms("2/4", 120, 5, 8, [8, 4])

	assert durations == [250, 250, 500, 250, 250]


def test_subdivision_label () -> None:

	"""Known subdivisions get friendly labels."""

	assert rhythmcore.grid.subdivision_label(16) == "16th"
	assert rhythmcore.grid.subdivision_label(12) == "8th (triplets)"
	assert rhythmcore.grid.subdivision_label(64) == "64th"
