import pathlib

import pytest

import rhythmcore.config
import rhythmcore.kit


def test_load_config (tmp_path: pathlib.Path) -> None:

	"""Values from each YAML section land on the config."""

	path = tmp_path / "config.yaml"
	path.write_text(
		"practice:\n"
		"  bpm: 96\n"
		"  tolerance_ms: 40\n"
		"  latency_ms: -12\n"
		"pattern:\n"
		"  time_signature: \"7/8\"\n"
		"midi:\n"
		"  note_map:\n"
		"    k: 35\n"
		"    S: 40\n"
	)

	config = rhythmcore.config.load_config(str(path))

	assert config.bpm == 96
	assert config.tolerance_ms == 40
	assert config.latency_ms == -12
	assert config.time_signature == "7/8"
	assert config.note_map == {"K": 35, "S": 40}


def test_partial_config_keeps_defaults (tmp_path: pathlib.Path) -> None:

	"""Missing sections and keys fall back to the defaults."""

	path = tmp_path / "config.yaml"
	path.write_text("practice:\n  bpm: 80\n")

	config = rhythmcore.config.load_config(str(path))

	assert config.bpm == 80
	assert config.time_signature == "4/4"
	assert config.tolerance_ms == 50
	assert config.kit() is rhythmcore.kit.DEFAULT_KIT


def test_empty_file_is_defaults (tmp_path: pathlib.Path) -> None:

	"""An empty YAML document gives the default config."""

	path = tmp_path / "config.yaml"
	path.write_text("")

	assert rhythmcore.config.load_config(str(path)) == rhythmcore.config.Config()


def test_missing_file_warns (tmp_path: pathlib.Path, caplog: pytest.LogCaptureFixture) -> None:

	"""A missing config file logs a warning and returns the defaults."""

	config = rhythmcore.config.load_config(str(tmp_path / "nope.yaml"))

	assert config == rhythmcore.config.Config()
	assert "not found" in caplog.text


def test_note_map_builds_custom_kit () -> None:

	"""A note map produces a kit that reads the custom notes."""

	config = rhythmcore.config.config_from_dict({"midi": {"note_map": {"K": 35}}})
	kit = config.kit()

	assert kit.voice_for_note(35) == "K"
	assert kit.note_for_voice("K") == 35
