"""Match live hits against the notes a pattern expects.

A practice session lays the patterns out on an absolute timeline
(``build_expected_notes``), then each incoming hit is matched to the nearest
unmatched expected note of the same voice (``match_hit``). A note, once
matched, stays matched for the rest of the session.

Times are milliseconds since the session started. Voice ids are whatever the
input device reports: drum tokens by default, or MIDI note numbers when a
``voice_map`` such as ``kit.voice_notes`` is given.

Example:
	```python
	import rhythmcore.pattern
	import rhythmcore.practice

	pattern = rhythmcore.pattern.Pattern.from_strings("4/4", 4, "4", "S K S K")
	session = rhythmcore.practice.PracticeSession([pattern], bpm=120, tolerance_ms=50)

	session.on("hit", lambda hit: print(hit.voice, hit.error_ms))
	session.register_hit(508, "K")

	session.summary().accuracy   # 0.25
	```
"""

import dataclasses
import logging
import typing

import rhythmcore.constants.timing
import rhythmcore.event_emitter
import rhythmcore.grid
import rhythmcore.pattern

logger = logging.getLogger(__name__)


VoiceId = typing.Hashable


@dataclasses.dataclass
class ExpectedNote:

	"""
	A note the performer should play.

	``index`` is the note's position in the whole walked sequence, rests
	included. ``matched`` only ever goes from False to True.
	"""

	time: float
	voice: VoiceId
	index: int
	matched: bool = False
	is_accent: bool = False
	is_ghost: bool = False


@dataclasses.dataclass(frozen=True)
class MatchResult:

	"""
	The candidate a hit was matched to.

	``position`` indexes the expected-notes list. ``error_ms`` is signed:
	negative when the hit came early.
	"""

	position: int
	note: ExpectedNote
	error_ms: float
	matched: bool


@dataclasses.dataclass(frozen=True)
class PracticeHit:

	"""A hit as classified by a session. ``extra`` hits had no candidate at all."""

	time: float
	voice: typing.Optional[VoiceId]
	expected_time: typing.Optional[float]
	error_ms: typing.Optional[float]
	matched: bool
	early: bool = False
	perfect: bool = False
	extra: bool = False
	velocity: typing.Optional[int] = None

	@property
	def abs_error_ms (self) -> typing.Optional[float]:
		return None if self.error_ms is None else abs(self.error_ms)


@dataclasses.dataclass(frozen=True)
class SessionSummary:

	total_notes: int
	matched_notes: int
	accuracy: float
	hit_count: int
	early_count: int
	late_count: int
	perfect_count: int
	extra_count: int
	score: float
	mean_abs_error_ms: float
	missed: typing.Tuple[ExpectedNote, ...]


def build_expected_notes (
	patterns: typing.Sequence[rhythmcore.pattern.Pattern],
	bpm: float,
	voice_map: typing.Optional[typing.Mapping[str, VoiceId]] = None
) -> typing.List[ExpectedNote]:

	"""
	Lay patterns out back to back as a list of expected notes.

	Each pattern walks ``sum(phrase)`` notes per repeat, cycling its voice
	line. A note lasts ``ms_per_beat / notes_per_beat`` (per beat in per-beat
	mode). Rests advance time without producing a note; so do voices missing
	from ``voice_map``. A combined token such as ``"S+K"`` produces one note per
	voice at the same time.

	Parameters:
		patterns: Patterns to play in order.
		bpm: Tempo in beats per minute.
		voice_map: Voice token -> voice id. When omitted the token itself is
			the voice id.
	"""

	expected: typing.List[ExpectedNote] = []
	offset = 0.0
	index = 0

	for pattern in patterns:

		accents = set(pattern.accent_indices)

		durations = rhythmcore.grid.note_durations_ms(
			pattern.time_signature,
			bpm,
			pattern.note_count,
			pattern.subdivision,
			pattern.per_beat_subdivisions,
		)

		for _ in range(pattern.repeat):

			for position, duration in enumerate(durations):

				token = pattern.voice_at(position)

				for voice in token.voices:

					if voice_map is None:
						voice_id: typing.Optional[VoiceId] = voice
					else:
						voice_id = voice_map.get(voice)

					if voice_id is None:
						continue

					expected.append(ExpectedNote(
						time = offset,
						voice = voice_id,
						index = index,
						is_accent = position in accents,
						is_ghost = token.is_ghost,
					))

				offset += duration
				index += 1

	return expected


def match_hit (
	hit_time: float,
	hit_voice: typing.Optional[VoiceId],
	expected: typing.Sequence[ExpectedNote],
	tolerance_ms: float
) -> typing.Optional[MatchResult]:

	"""
	Find the unmatched expected note of ``hit_voice`` closest to ``hit_time``.

	A ``hit_voice`` of None matches a note of any voice, for onsets that carry
	no voice such as those from a microphone. Returns None when no unmatched
	note of that voice exists. On equal
	distances the earlier note in the list wins. The expected list is not
	modified.

	Example:
		```python
		result = match_hit(260, "K", notes, tolerance_ms=100)
		result.error_ms, result.matched   # 10.0, True
		```
	"""

	best: typing.Optional[int] = None
	best_distance = 0.0

	for position, note in enumerate(expected):

		if note.matched or (hit_voice is not None and note.voice != hit_voice):
			continue

		distance = abs(hit_time - note.time)

		if best is None or distance < best_distance:
			best, best_distance = position, distance

	if best is None:
		return None

	return MatchResult(
		position = best,
		note = expected[best],
		error_ms = hit_time - expected[best].time,
		matched = best_distance <= tolerance_ms,
	)


def accuracy (expected: typing.Sequence[ExpectedNote]) -> float:

	"""Fraction of expected notes matched so far; 0 for an empty list."""

	if not expected:
		return 0.0

	return sum(1 for note in expected if note.matched) / len(expected)


class PracticeSession:

	"""
	One practice run: an expected-notes list plus the hits matched against it.

	Parameters:
		patterns: Patterns to practice, in order.
		bpm: Tempo in beats per minute.
		tolerance_ms: Largest timing error that still counts as a match.
		latency_ms: Signed input latency subtracted from every hit time.
		voice_map: Voice token -> voice id reported by the input device.

	Events:
		``"hit"``: a hit that found a candidate, with its ``PracticeHit``.
		``"extra_hit"``: a hit with no candidate of its voice.

	Feed the session from one task per input; it is not safe to register
	hits from several threads at once.
	"""

	def __init__ (
		self,
		patterns: typing.Sequence[rhythmcore.pattern.Pattern],
		bpm: float,
		tolerance_ms: float = rhythmcore.constants.timing.DEFAULT_TOLERANCE_MS,
		latency_ms: float = 0.0,
		voice_map: typing.Optional[typing.Mapping[str, VoiceId]] = None
	) -> None:

		if tolerance_ms < 0:
			raise ValueError("Tolerance must not be negative")

		timing = rhythmcore.constants.timing

		if not timing.LATENCY_ADJUSTMENT_MIN_MS <= latency_ms <= timing.LATENCY_ADJUSTMENT_MAX_MS:
			raise ValueError(f"Latency adjustment must be between {timing.LATENCY_ADJUSTMENT_MIN_MS} and {timing.LATENCY_ADJUSTMENT_MAX_MS} ms")

		self.patterns = list(patterns)
		self.bpm = bpm
		self.tolerance_ms = tolerance_ms
		self.latency_ms = latency_ms
		self.voice_map = voice_map

		self.events = rhythmcore.event_emitter.EventEmitter()

		self.expected: typing.List[ExpectedNote] = []
		self.hits: typing.List[PracticeHit] = []

		self.restart()

	@property
	def perfect_threshold_ms (self) -> float:
		return min(rhythmcore.constants.timing.PERFECT_HIT_THRESHOLD_MS, self.tolerance_ms / 4)

	def on (self, event_name: str, callback: rhythmcore.event_emitter.CallbackType) -> None:
		self.events.on(event_name, callback)

	def restart (self) -> None:

		"""Discard all hits and rebuild the expected notes from scratch."""

		self.expected = build_expected_notes(self.patterns, self.bpm, self.voice_map)
		self.hits = []

		logger.info(f"Practice session ready: {len(self.expected)} expected notes at {self.bpm} BPM")

	def register_hit (self, elapsed_ms: float, voice: typing.Optional[VoiceId] = None, velocity: typing.Optional[int] = None) -> PracticeHit:

		"""
		Classify one hit at ``elapsed_ms`` since the session started.

		A hit within tolerance marks its expected note matched. Hits outside
		tolerance are still recorded, unmatched, so late and early playing
		shows up in the summary.

		With no ``voice`` the hit matches the nearest unmatched note of any
		voice and is recorded under that note's voice.
		"""

		hit_time = elapsed_ms - self.latency_ms
		result = match_hit(hit_time, voice, self.expected, self.tolerance_ms)

		if result is None:
			hit = PracticeHit(time=hit_time, voice=voice, expected_time=None, error_ms=None, matched=False, extra=True, velocity=velocity)
			self.hits.append(hit)
			logger.debug(f"Extra hit {voice} at {hit_time:.1f}ms")
			self.events.emit("extra_hit", hit)
			return hit

		if result.matched:
			result.note.matched = True

		hit = PracticeHit(
			time = hit_time,
			voice = result.note.voice,
			expected_time = result.note.time,
			error_ms = result.error_ms,
			matched = result.matched,
			early = result.error_ms < 0,
			perfect = abs(result.error_ms) <= self.perfect_threshold_ms,
			velocity = velocity,
		)

		self.hits.append(hit)
		self.events.emit("hit", hit)

		return hit

	def missed_notes (self, before_ms: typing.Optional[float] = None) -> typing.List[ExpectedNote]:

		"""
		Unmatched expected notes, optionally only those whose tolerance window
		closed before ``before_ms``.
		"""

		return [
			note for note in self.expected
			if not note.matched and (before_ms is None or note.time + self.tolerance_ms < before_ms)
		]

	def summary (self) -> SessionSummary:

		"""
		Totals for the run so far. Perfect hits are counted as neither early nor
		late. ``score`` is like ``accuracy`` but every extra hit also counts as a
		note that was not matched.
		"""

		matched_hits = [hit for hit in self.hits if hit.matched]
		errors = [abs(hit.error_ms) for hit in matched_hits if hit.error_ms is not None]
		matched_notes = sum(1 for note in self.expected if note.matched)
		extra_count = sum(1 for hit in self.hits if hit.extra)

		return SessionSummary(
			total_notes = len(self.expected),
			matched_notes = matched_notes,
			accuracy = accuracy(self.expected),
			hit_count = len(self.hits),
			early_count = sum(1 for hit in matched_hits if hit.early and not hit.perfect),
			late_count = sum(1 for hit in matched_hits if not hit.early and not hit.perfect),
			perfect_count = sum(1 for hit in matched_hits if hit.perfect),
			extra_count = extra_count,
			score = matched_notes / (len(self.expected) + extra_count) if self.expected or extra_count else 0.0,
			mean_abs_error_ms = sum(errors) / len(errors) if errors else 0.0,
			missed = tuple(self.missed_notes()),
		)
