import pathlib
import typing

import mido
import pytest

import rhythmcore.__main__


@pytest.fixture
def no_config (tmp_path: pathlib.Path) -> typing.List[str]:

	"""Point the command line at a config file that does not exist."""

	return ["--config", str(tmp_path / "missing.yaml")]


def test_score (no_config: typing.List[str], capsys: pytest.CaptureFixture) -> None:

	"""Scoring prints the pattern, its rating and advice."""

	code = rhythmcore.__main__.main(no_config + ["score", "--subdivision", "8", "--phrase", "8", "--voices", "H H H H H H H H"])
	output = capsys.readouterr().out

	assert code == 0
	assert "difficulty 2.0 (beginner)" in output
	assert "[low]" in output


def test_export_and_convert (no_config: typing.List[str], tmp_path: pathlib.Path, capsys: pytest.CaptureFixture) -> None:

	"""An exported pattern converts back to the same bar."""

	take = str(tmp_path / "beat.mid")

	code = rhythmcore.__main__.main(no_config + [
		"export",
		"--subdivision", "8",
		"--phrase", "4 4",
		"--voices", "K+H H S+H H K+H H S+H H",
		"--bpm", "120",
		"--output", take,
	])

	assert code == 0
	assert mido.MidiFile(take).type == 0

	capsys.readouterr()

	code = rhythmcore.__main__.main(no_config + ["convert", take, "--bpm", "120"])
	output = capsys.readouterr().out

	assert code == 0
	assert "bar 1: phrase [2, 2, 2, 2] per-beat [8, 8, 8, 8]" in output
	assert "K+H H S+H H K+H H S+H H" in output


def test_export_rejects_invalid_pattern (no_config: typing.List[str], tmp_path: pathlib.Path) -> None:

	"""A pattern that fails validation is not written."""

	output = tmp_path / "bad.mid"
	code = rhythmcore.__main__.main(no_config + ["export", "--subdivision", "16", "--phrase", "3", "--voices", "S", "--output", str(output)])

	assert code == 1
	assert not output.exists()


def test_generate (no_config: typing.List[str], capsys: pytest.CaptureFixture) -> None:

	"""Generation prints the requested number of seeded patterns."""

	code = rhythmcore.__main__.main(no_config + ["generate", "--count", "3", "--seed", "4", "--time-signature", "3/4"])
	output = capsys.readouterr().out

	assert code == 0
	assert output.count("3/4 ") == 3
	assert output.count("sticking") == 3


def test_config_file_is_used (tmp_path: pathlib.Path, capsys: pytest.CaptureFixture) -> None:

	"""The time signature comes from the config when not given."""

	config = tmp_path / "config.yaml"
	config.write_text("pattern:\n  time_signature: \"5/4\"\n")

	code = rhythmcore.__main__.main(["--config", str(config), "score", "--subdivision", "4", "--voices", "S"])

	assert code == 0
	assert capsys.readouterr().out.startswith("5/4 S")
