import rhythmcore.constants.durations as durations


def test_standard_values_by_beat_unit () -> None:

	"""Quarter-beat time and eighth-beat time have different standard sets."""

	assert durations.is_standard(1.0, 4)
	assert durations.is_standard(4.0, 4)
	assert not durations.is_standard(3.0, 4)
	assert durations.is_standard(3.0, 8)
	assert durations.is_standard(1.5, 8)
	assert not durations.is_standard(4 / 3, 4)


def test_nearest_standard () -> None:

	"""The closest standard value wins, the longer one on a tie."""

	assert durations.nearest_standard(0.8, 4) == 1.0
	assert durations.nearest_standard(0.75, 4) == 1.0
	assert durations.nearest_standard(2.4, 8) == 3.0


def test_duration_code () -> None:

	"""Beat lengths map to renderer codes, dotted in compound time."""

	assert durations.duration_code(1.0, 4) == "q"
	assert durations.duration_code(0.5, 4) == "8"
	assert durations.duration_code(4.0, 4) == "w"
	assert durations.duration_code(0.125, 4) == "32"
	assert durations.duration_code(1.5, 8) == "hd"
	assert durations.duration_code(3.0, 8) == "wd"
