import io
import logging
import pathlib

import mido
import pytest

import rhythmcore.kit
import rhythmcore.midi_convert
import rhythmcore.midi_file
import rhythmcore.pattern


KIT = rhythmcore.kit.DEFAULT_KIT


def _read (data: bytes) -> mido.MidiFile:
	return mido.MidiFile(file=io.BytesIO(data))


def test_tempo_for_bpm () -> None:

	"""Tempo is microseconds per quarter note, rounded down."""

	assert rhythmcore.midi_file.tempo_for_bpm(120) == 500000
	assert rhythmcore.midi_file.tempo_for_bpm(70) == 857142

	with pytest.raises(ValueError):
		rhythmcore.midi_file.tempo_for_bpm(0)


def test_note_ticks (rock_beat: rhythmcore.pattern.Pattern) -> None:

	"""Grid notes last 1920 / subdivision ticks; per-beat notes share their beat."""

	sixteenths = rhythmcore.pattern.Pattern.from_strings("4/4", 16, "16", "S")
	per_beat = rhythmcore.pattern.Pattern.from_strings("2/4", 8, "2 1", "S", per_beat_subdivisions=[8, 4])

	assert rhythmcore.midi_file.note_ticks(sixteenths) == [120] * 16
	assert rhythmcore.midi_file.note_ticks(rock_beat) == [240] * 8
	assert rhythmcore.midi_file.note_ticks(per_beat) == [240, 240, 480]


def test_pattern_events_velocities_and_release () -> None:

	"""Accents, ghosts and normal notes get their velocities; notes end at 90%."""

	pattern = rhythmcore.pattern.Pattern.from_strings("4/4", 4, "2 2", "S (S) S+K R")
	events = rhythmcore.midi_file.pattern_events([pattern])

	snare = KIT.note_for_voice("S")
	kick = KIT.note_for_voice("K")

	assert [(e.tick, e.note, e.velocity, e.on) for e in events] == [
		(0, snare, 100, True),
		(432, snare, 0, False),
		(480, snare, 40, True),
		(912, snare, 0, False),
		(960, snare, 100, True),
		(960, kick, 100, True),
		(1392, snare, 0, False),
		(1392, kick, 0, False),
	]


def test_pattern_events_repeats_and_sequence () -> None:

	"""Repeats and following patterns continue on the same timeline."""

	first = rhythmcore.pattern.Pattern.from_strings("4/4", 4, "4", "S", repeat=2)
	second = rhythmcore.pattern.Pattern.from_strings("4/4", 8, "8", "K")

	note_ons = [e for e in rhythmcore.midi_file.pattern_events([first, second]) if e.on]

	assert len(note_ons) == 16
	assert note_ons[7].tick == 7 * 480
	assert note_ons[8].tick == 8 * 480
	assert note_ons[9].tick == 8 * 480 + 240


def test_unknown_voice_is_skipped () -> None:

	"""Voices with no note in the kit produce no events."""

	pattern = rhythmcore.pattern.Pattern.from_strings("4/4", 4, "4", "X S")
	events = rhythmcore.midi_file.pattern_events([pattern])

	assert {e.note for e in events} == {KIT.note_for_voice("S")}


def test_midi_bytes_header (rock_beat: rhythmcore.pattern.Pattern) -> None:

	"""The file is a format 0 SMF with one track at 480 ticks per quarter."""

	data = rhythmcore.midi_file.midi_bytes([rock_beat], bpm=120)

	assert data[:4] == b"MThd"
	assert data[8:10] == b"\x00\x00"
	assert data[10:12] == b"\x00\x01"
	assert data[12:14] == (480).to_bytes(2, "big")


def test_midi_bytes_parse_back (rock_beat: rhythmcore.pattern.Pattern) -> None:

	"""Written messages carry the tempo and drum-channel notes."""

	midi_file = _read(rhythmcore.midi_file.midi_bytes([rock_beat], bpm=100))
	track = midi_file.tracks[0]

	assert track[0].type == "set_tempo"
	assert track[0].tempo == 600000
	assert track[-1].type == "end_of_track"

	note_ons = [message for message in track if message.type == "note_on"]

	assert all(message.channel == 9 for message in note_ons)
	assert len(note_ons) == 12
	assert note_ons[0].velocity == 100
	assert note_ons[2].velocity == 80


def test_export_round_trips_through_converter (rock_beat: rhythmcore.pattern.Pattern, tmp_path: pathlib.Path) -> None:

	"""An exported bar converts back to the same voices."""

	path = str(tmp_path / "rock.mid")
	rhythmcore.midi_file.export_midi([rock_beat], 120, path)

	notes = rhythmcore.midi_convert.read_midi_notes(path)
	measures = rhythmcore.midi_convert.convert_recording(notes, "4/4", bpm=120)

	assert len(measures) == 1
	assert measures[0].drum_pattern == rock_beat.drum_pattern


def test_export_logs_and_rejects_empty (rock_beat: rhythmcore.pattern.Pattern, tmp_path: pathlib.Path, caplog: pytest.LogCaptureFixture) -> None:

	"""Exporting nothing raises; a successful export is logged."""

	with pytest.raises(ValueError):
		rhythmcore.midi_file.export_midi([], 120, str(tmp_path / "empty.mid"))

	with caplog.at_level(logging.INFO, logger="rhythmcore.midi_file"):
		rhythmcore.midi_file.export_midi([rock_beat], 120, str(tmp_path / "rock.mid"))

	assert (tmp_path / "rock.mid").exists()
	assert "Saved 1 pattern(s)" in caplog.text
