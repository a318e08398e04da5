"""Write patterns to a Standard MIDI File.

The file is format 0 with one track at 480 ticks per quarter note: a tempo
meta event, then note-on/note-off pairs on the drum channel (channel 10,
``9`` zero-indexed). Accented notes (phrase group starts) play at velocity
100, ghost notes at 40 and everything else at 80. Each note is released at
90% of its grid length.
"""

import dataclasses
import io
import logging
import math
import typing

import mido

import rhythmcore.constants.timing as timing
import rhythmcore.grid
import rhythmcore.kit
import rhythmcore.pattern

logger = logging.getLogger(__name__)


WHOLE_NOTE_TICKS = timing.TICKS_PER_QUARTER * 4


@dataclasses.dataclass(frozen=True)
class NoteEvent:

	"""A note-on or note-off at an absolute tick."""

	tick: int
	note: int
	velocity: int
	on: bool


def tempo_for_bpm (bpm: float) -> int:

	"""Microseconds per quarter note, rounded down."""

	if bpm <= 0:
		raise ValueError("BPM must be positive")

	return int(math.floor(60000000 / bpm))


def note_ticks (pattern: rhythmcore.pattern.Pattern) -> typing.List[int]:

	"""
	Length in ticks of each note of one pass through the pattern.

	A note of a ``1/subdivision`` grid lasts ``1920 / subdivision`` ticks
	(120 for sixteenths). In per-beat mode each beat's notes share the beat.
	"""

	if not pattern.per_beat_subdivisions:
		return [WHOLE_NOTE_TICKS // pattern.subdivision] * pattern.note_count

	ts = pattern.time_signature
	beat_ticks = WHOLE_NOTE_TICKS / ts.denominator
	counts = rhythmcore.grid.beat_note_counts(ts, pattern.per_beat_subdivisions)
	ticks: typing.List[int] = []
	beat = 0

	while len(ticks) < pattern.note_count:
		count = counts[beat % len(counts)]
		ticks.extend([int(beat_ticks // count)] * count)
		beat += 1

	return ticks[:pattern.note_count]


def pattern_events (
	patterns: typing.Sequence[rhythmcore.pattern.Pattern],
	kit: rhythmcore.kit.DrumKit = rhythmcore.kit.DEFAULT_KIT
) -> typing.List[NoteEvent]:

	"""
	Absolute-tick note events for patterns played back to back, sorted by tick.

	Rests produce nothing but still take their time. Voices the kit has no
	note for are skipped.
	"""

	events: typing.List[NoteEvent] = []
	tick = 0

	for pattern in patterns:

		accents = set(pattern.accent_indices)
		lengths = note_ticks(pattern)

		for _ in range(pattern.repeat):

			for position, length in enumerate(lengths):

				token = pattern.voice_at(position)

				if token.is_ghost:
					velocity = timing.GHOST_VELOCITY
				elif position in accents:
					velocity = timing.ACCENT_VELOCITY
				else:
					velocity = timing.NORMAL_VELOCITY

				for voice in token.voices:

					note = kit.note_for_voice(voice)

					if note is None:
						logger.debug(f"No MIDI note for voice {voice}, skipped")
						continue

					events.append(NoteEvent(tick=tick, note=note, velocity=velocity, on=True))
					events.append(NoteEvent(tick=tick + int(math.floor(length * timing.NOTE_OFF_FRACTION)), note=note, velocity=0, on=False))

				tick += length

	events.sort(key=lambda event: event.tick)

	return events


def patterns_to_midi (
	patterns: typing.Sequence[rhythmcore.pattern.Pattern],
	bpm: float,
	kit: rhythmcore.kit.DrumKit = rhythmcore.kit.DEFAULT_KIT
) -> mido.MidiFile:

	"""Build a format 0 ``mido.MidiFile`` for the patterns."""

	midi_file = mido.MidiFile(type=0, ticks_per_beat=timing.TICKS_PER_QUARTER)
	track = mido.MidiTrack()
	midi_file.tracks.append(track)

	track.append(mido.MetaMessage("set_tempo", tempo=tempo_for_bpm(bpm), time=0))

	last_tick = 0

	for event in pattern_events(patterns, kit):

		message_type = "note_on" if event.on else "note_off"

		track.append(mido.Message(
			message_type,
			channel = timing.DRUM_CHANNEL,
			note = event.note,
			velocity = event.velocity,
			time = event.tick - last_tick,
		))

		last_tick = event.tick

	track.append(mido.MetaMessage("end_of_track", time=0))

	return midi_file


def midi_bytes (
	patterns: typing.Sequence[rhythmcore.pattern.Pattern],
	bpm: float,
	kit: rhythmcore.kit.DrumKit = rhythmcore.kit.DEFAULT_KIT
) -> bytes:

	"""The Standard MIDI File for the patterns, as bytes."""

	buffer = io.BytesIO()
	patterns_to_midi(patterns, bpm, kit).save(file=buffer)

	return buffer.getvalue()


def export_midi (
	patterns: typing.Sequence[rhythmcore.pattern.Pattern],
	bpm: float,
	path: str,
	kit: rhythmcore.kit.DrumKit = rhythmcore.kit.DEFAULT_KIT
) -> None:

	"""Write the patterns to ``path`` as a Standard MIDI File."""

	if not patterns:
		raise ValueError("No patterns to export")

	midi_file = patterns_to_midi(patterns, bpm, kit)
	midi_file.save(path)

	logger.info(f"Saved {len(patterns)} pattern(s) at {bpm} BPM to {path}")
