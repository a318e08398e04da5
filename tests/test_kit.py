import logging

import pytest

import rhythmcore.constants.gm_drums as gm_drums
import rhythmcore.kit


def test_default_table_lookup () -> None:

	"""Notes in the default table map directly."""

	kit = rhythmcore.kit.DEFAULT_KIT

	assert kit.voice_for_note(36) == "K"
	assert kit.voice_for_note(38) == "S"
	assert kit.voice_for_note(43) == "F"
	assert kit.voice_for_note(46) == "O"
	assert kit.voice_for_note(49) == "I"


def test_range_heuristic () -> None:

	"""Notes missing from the table are inferred from the GM ranges."""

	kit = rhythmcore.kit.DEFAULT_KIT

	assert kit.voice_for_note(35) == "K"
	assert kit.voice_for_note(40) == "S"
	assert kit.voice_for_note(44) == "H"


def test_unknown_note_falls_back_with_warning (caplog: pytest.LogCaptureFixture) -> None:

	"""An unrecognised note becomes the fallback voice and is logged."""

	with caplog.at_level(logging.WARNING, logger="rhythmcore.kit"):
		voice = rhythmcore.kit.DEFAULT_KIT.voice_for_note(60)

	assert voice == gm_drums.FALLBACK_VOICE
	assert "Unknown MIDI note 60" in caplog.text


def test_custom_kit_overrides_both_directions () -> None:

	"""A custom table wins over the defaults for lookups either way."""

	kit = rhythmcore.kit.DrumKit.with_custom({"k": 35, "S": 40, "H": 0})

	assert kit.voice_for_note(35) == "K"
	assert kit.voice_for_note(40) == "S"
	assert kit.note_for_voice("K") == 35
	assert kit.note_for_voice("s") == 40
	assert kit.note_for_voice("H") == 42
	assert kit.voice_for_note(36) == "K"


def test_custom_kit_does_not_touch_defaults () -> None:

	"""Building a custom kit leaves the default kit and tables unchanged."""

	rhythmcore.kit.DrumKit.with_custom({"K": 35})

	assert rhythmcore.kit.DEFAULT_KIT.note_for_voice("K") == 36
	assert gm_drums.DEFAULT_VOICE_NOTES["K"] == 36


def test_kit_tables_are_read_only () -> None:

	"""Caller mappings are snapshotted and cannot be mutated through the kit."""

	notes = {"K": 36}
	kit = rhythmcore.kit.DrumKit(voice_notes=notes)
	notes["K"] = 99

	assert kit.note_for_voice("K") == 36

	with pytest.raises(TypeError):
		kit.voice_notes["K"] = 1  # type: ignore[index]


def test_note_for_unknown_voice () -> None:

	"""A voice the kit has no note for gives None."""

	assert rhythmcore.kit.DEFAULT_KIT.note_for_voice("Z") is None
