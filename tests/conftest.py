import pathlib
import typing

import mido
import pytest

import rhythmcore.pattern


@pytest.fixture
def rock_beat () -> rhythmcore.pattern.Pattern:

	"""Eighth-note rock beat: kick and snare under a closed hi-hat, accents on 1 and 3."""

	return rhythmcore.pattern.Pattern.from_strings(
		time_signature = "4/4",
		subdivision = 8,
		phrase = "4 4",
		drum_pattern = "K+H H S+H H K+H H S+H H",
		sticking_pattern = "R R R R R R R R",
	)


@pytest.fixture
def write_take (tmp_path: pathlib.Path) -> typing.Callable[..., str]:

	"""Return a helper that writes ``(time_ms, note, velocity)`` note-ons to a .mid file."""

	def write (notes: typing.Sequence[typing.Tuple[float, int, int]], bpm: float = 120, name: str = "take.mid") -> str:

		midi_file = mido.MidiFile(type=0, ticks_per_beat=480)
		track = mido.MidiTrack()
		midi_file.tracks.append(track)
		track.append(mido.MetaMessage("set_tempo", tempo=mido.bpm2tempo(bpm), time=0))

		ms_per_tick = 60000.0 / bpm / 480
		events: typing.List[typing.Tuple[int, mido.Message]] = []

		for time_ms, note, velocity in notes:
			tick = int(round(time_ms / ms_per_tick))
			events.append((tick, mido.Message("note_on", channel=9, note=note, velocity=velocity)))
			events.append((tick + 30, mido.Message("note_on", channel=9, note=note, velocity=0)))

		events.sort(key=lambda event: event[0])
		last_tick = 0

		for tick, message in events:
			track.append(message.copy(time=tick - last_tick))
			last_tick = tick

		path = tmp_path / name
		midi_file.save(str(path))

		return str(path)

	return write
