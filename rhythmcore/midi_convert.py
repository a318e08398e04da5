"""Convert a recorded MIDI take into one pattern per measure.

The take is split into measures, the subdivision of every beat is detected per
measure, and each onset is snapped to a cell of its beat's grid. Drums struck
together land in one cell and are written as a combined token (``"K+S"``).

Example:
	```python
	import rhythmcore.midi_convert

	notes = rhythmcore.midi_convert.read_midi_notes("take.mid")
	measures = rhythmcore.midi_convert.convert_recording(notes, "4/4", bpm=100)

	for measure in measures:
		print(measure.phrase, measure.drum_pattern)
	```
"""

import collections
import dataclasses
import logging
import math
import typing

import mido

import rhythmcore.constants.gm_drums
import rhythmcore.constants.timing
import rhythmcore.grid
import rhythmcore.kit
import rhythmcore.notation
import rhythmcore.pattern
import rhythmcore.subdivision

logger = logging.getLogger(__name__)


REST = "R"


@dataclasses.dataclass(frozen=True)
class MIDIRecordedNote:

	"""A note-on from a recording: ``time`` in ms since the take started."""

	time: float
	note: int
	velocity: int = 100


@dataclasses.dataclass(frozen=True)
class ConvertedMeasure:

	"""
	One measure of a converted recording.

	``phrase`` holds the notes of each beat and ``voices`` one token per grid
	cell of the bar, so ``sum(phrase) == len(voices)``.
	"""

	index: int
	time_signature: rhythmcore.grid.TimeSignature
	subdivision: int
	phrase: typing.Tuple[int, ...]
	voices: typing.Tuple[str, ...]
	per_beat_subdivisions: typing.Optional[typing.Tuple[int, ...]] = None
	detected: bool = False

	@property
	def drum_pattern (self) -> str:
		return rhythmcore.notation.format_list(self.voices)

	def to_pattern (self) -> rhythmcore.pattern.Pattern:

		"""Build a repeat-once ``Pattern`` with no sticking from this measure."""

		return rhythmcore.pattern.Pattern(
			time_signature = self.time_signature,
			subdivision = self.subdivision,
			phrase = self.phrase,
			voices = rhythmcore.notation.tokenize_voices(self.voices),
			per_beat_subdivisions = self.per_beat_subdivisions,
		)


def read_midi_notes (path: str) -> typing.List[MIDIRecordedNote]:

	"""
	Load the note-ons of a Standard MIDI File as recorded notes.

	Times follow the file's tempo map. A note-on with velocity 0 is a note-off
	and is skipped.
	"""

	midi_file = mido.MidiFile(path)
	notes: typing.List[MIDIRecordedNote] = []
	elapsed = 0.0

	for message in midi_file:

		elapsed += message.time

		if message.type == "note_on" and message.velocity > 0:
			notes.append(MIDIRecordedNote(time=elapsed * 1000.0, note=message.note, velocity=message.velocity))

	logger.info(f"Read {len(notes)} notes from {path}")

	return notes


def combine_voices (voices: typing.Iterable[str]) -> str:

	"""
	Join the distinct voices of one grid cell in canonical order.

	Example:
		```python
		combine_voices(["O", "S", "K", "S"])   # "K+S+O"
		```
	"""

	order = rhythmcore.constants.gm_drums.VOICE_ORDER
	distinct = list(dict.fromkeys(voices))

	return "+".join(sorted(distinct, key=lambda voice: order.get(voice, len(order))))


def deduplicate (
	onsets: typing.Iterable[typing.Tuple[float, str]],
	window_ms: float = rhythmcore.constants.timing.DEDUP_WINDOW_MS
) -> typing.List[typing.Tuple[float, str]]:

	"""
	Drop onsets of a voice that fall within ``window_ms`` of the last kept one.

	Input is ``(time_ms, voice)`` pairs; the result is sorted by time.
	"""

	kept: typing.List[typing.Tuple[float, str]] = []
	last_kept: typing.Dict[str, float] = {}

	for time, voice in sorted(onsets, key=lambda onset: onset[0]):

		if voice in last_kept and time - last_kept[voice] <= window_ms:
			logger.debug(f"Dropped duplicate {voice} at {time:.2f}ms")
			continue

		last_kept[voice] = time
		kept.append((time, voice))

	return kept


def _convert_measure (
	index: int,
	onsets: typing.List[typing.Tuple[float, str]],
	ts: rhythmcore.grid.TimeSignature,
	beat_ms: float,
	bpm: float,
	subdivision: typing.Optional[int]
) -> ConvertedMeasure:

	"""Quantize one measure's onsets and lay them out beat by beat."""

	if subdivision is None:
		result = rhythmcore.subdivision.detect_subdivision((time for time, _ in onsets), ts, bpm)
		detected = result.detected
		per_beat = list(result.per_beat_subdivisions or [result.subdivision] * ts.numerator)
	else:
		detected = False
		per_beat = [subdivision] * ts.numerator

	first_beat = index * ts.numerator
	by_beat: typing.Dict[int, typing.List[typing.Tuple[float, str]]] = collections.defaultdict(list)

	for time, voice in onsets:
		by_beat[math.floor(time / beat_ms) - first_beat].append((time, voice))

	if subdivision is None:
		for beat in range(ts.numerator):
			if not by_beat.get(beat):
				per_beat[beat] = rhythmcore.subdivision.beat_grid(rhythmcore.subdivision.QUARTER, ts.denominator)

	counts = rhythmcore.grid.beat_note_counts(ts, per_beat)
	offsets = [sum(counts[:beat]) for beat in range(ts.numerator)]
	total_cells = sum(counts)

	cells: typing.Dict[int, typing.List[str]] = collections.defaultdict(list)

	for beat, beat_onsets in by_beat.items():

		grid_ms = beat_ms / counts[beat]
		beat_start = (first_beat + beat) * beat_ms

		for time, voice in beat_onsets:

			cell = offsets[beat] + max(0, rhythmcore.grid.round_half_up((time - beat_start) / grid_ms))

			if cell >= total_cells:
				logger.debug(f"Measure {index + 1}: {voice} at {time:.2f}ms rounds past the bar, dropped")
				continue

			cells[cell].append(voice)

	voices = tuple(combine_voices(cells[cell]) if cell in cells else REST for cell in range(total_cells))

	logger.debug(f"Measure {index + 1}: per-beat {per_beat}, pattern {rhythmcore.notation.format_list(voices)}")

	return ConvertedMeasure(
		index = index,
		time_signature = ts,
		subdivision = subdivision if subdivision is not None else max(per_beat),
		phrase = tuple(counts),
		voices = voices,
		per_beat_subdivisions = tuple(per_beat) if subdivision is None else None,
		detected = detected,
	)


def convert_recording (
	notes: typing.Iterable[MIDIRecordedNote],
	time_signature: typing.Union[str, rhythmcore.grid.TimeSignature],
	bpm: float = rhythmcore.constants.DEFAULT_BPM,
	subdivision: typing.Optional[int] = None,
	kit: rhythmcore.kit.DrumKit = rhythmcore.kit.DEFAULT_KIT,
	max_bars: typing.Optional[int] = None
) -> typing.List[ConvertedMeasure]:

	"""
	Convert recorded notes into one ``ConvertedMeasure`` per non-empty measure.

	Parameters:
		notes: Recorded note-ons, times in ms from the start of the take.
		time_signature: Time signature of the take.
		bpm: Tempo the take was played at.
		subdivision: Force a uniform grid instead of detecting one per beat.
		kit: Note number to voice tables.
		max_bars: Only convert the first ``max_bars`` measures.

	Onsets of one voice within 5 ms of each other count once. Measures with no
	onsets are skipped, so the result can have gaps in ``index``.
	"""

	if subdivision is not None and subdivision <= 0:
		raise ValueError("Subdivision must be positive")

	ts = rhythmcore.grid.TimeSignature.parse(time_signature)

	if subdivision is not None and not rhythmcore.grid.is_whole_beat(ts, subdivision):
		raise ValueError(f"Subdivision {subdivision} does not give a whole number of notes per beat in {ts}")

	beat_ms = rhythmcore.grid.ms_per_beat(bpm)

	onsets = deduplicate((note.time, kit.voice_for_note(note.note)) for note in notes)

	if not onsets:
		return []

	voice_counts = collections.Counter(voice for _, voice in onsets)
	logger.info(f"Converting {len(onsets)} onsets: {dict(voice_counts)}")

	by_measure: typing.Dict[int, typing.List[typing.Tuple[float, str]]] = collections.defaultdict(list)

	for time, voice in onsets:
		by_measure[math.floor(time / beat_ms) // ts.numerator].append((time, voice))

	measure_count = max_bars if max_bars is not None else max(by_measure) + 1

	return [
		_convert_measure(index, by_measure[index], ts, beat_ms, bpm, subdivision)
		for index in range(measure_count)
		if by_measure.get(index)
	]
