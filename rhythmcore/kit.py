import dataclasses
import logging
import types
import typing

import rhythmcore.constants.gm_drums as gm_drums

logger = logging.getLogger(__name__)


def _freeze (mapping: typing.Mapping) -> typing.Mapping:
	return types.MappingProxyType(dict(mapping))


@dataclasses.dataclass(frozen=True)
class DrumKit:

	"""
	Immutable voice <-> MIDI note tables for one drum kit.

	A kit is passed explicitly to the converter, the practice matcher and the
	MIDI exporter so that alternate kits never touch shared state.

	Parameters:
		voice_notes: Voice token -> note number (export, expected notes).
		note_voices: Note number -> voice token (recording conversion).
		custom_note_voices: Per-pattern overrides consulted before
			``note_voices``.
		fallback_voice: Voice used for notes nothing else recognises.

	Example:
		```python
		kit = DrumKit.with_custom({"K": 35, "S": 40})
		kit.voice_for_note(35)   # "K"
		kit.voice_for_note(38)   # "S" from the default table
		```
	"""

	voice_notes: typing.Mapping[str, int] = dataclasses.field(default_factory=lambda: gm_drums.DEFAULT_VOICE_NOTES)
	note_voices: typing.Mapping[int, str] = dataclasses.field(default_factory=lambda: gm_drums.DEFAULT_NOTE_VOICES)
	custom_note_voices: typing.Mapping[int, str] = dataclasses.field(default_factory=lambda: _freeze({}))
	fallback_voice: str = gm_drums.FALLBACK_VOICE

	def __post_init__ (self) -> None:

		# Snapshot caller mappings.
		object.__setattr__(self, "voice_notes", _freeze(self.voice_notes))
		object.__setattr__(self, "note_voices", _freeze(self.note_voices))
		object.__setattr__(self, "custom_note_voices", _freeze(self.custom_note_voices))

	@classmethod
	def with_custom (cls, custom_voice_notes: typing.Mapping[str, int]) -> "DrumKit":

		"""
		Build a kit from a user's voice -> note table (as edited in a mapping UI).

		The custom table overrides both directions. Entries with a note number
		of 0 or less are treated as unassigned.
		"""

		assigned = {voice.upper(): int(note) for voice, note in custom_voice_notes.items() if int(note) > 0}
		voice_notes = dict(gm_drums.DEFAULT_VOICE_NOTES)
		voice_notes.update(assigned)

		return cls(
			voice_notes = voice_notes,
			custom_note_voices = {note: voice for voice, note in assigned.items()},
		)

	def note_for_voice (self, voice: str) -> typing.Optional[int]:

		"""Return the note number for a voice token, or None if the kit has none."""

		return self.voice_notes.get(voice.upper())

	def voice_for_note (self, note: int) -> str:

		"""
		Map a MIDI note number to a voice token.

		Lookup order: custom table, default table, GM range heuristic, then the
		fallback voice. Unknown notes are logged and defaulted, never dropped.
		"""

		if note in self.custom_note_voices:
			return self.custom_note_voices[note]

		if note in self.note_voices:
			return self.note_voices[note]

		voice = _voice_from_range(note)

		if voice is None:
			logger.warning(f"Unknown MIDI note {note}, defaulting to {self.fallback_voice}")
			return self.fallback_voice

		logger.debug(f"MIDI note {note} mapped to {voice} by range")
		return voice


def _voice_from_range (note: int) -> typing.Optional[str]:

	"""Infer a voice from the General MIDI percussion ranges."""

	if note == gm_drums.LOW_FLOOR_TOM:
		return gm_drums.FLOOR_TOM

	if gm_drums.KICK_2 <= note <= gm_drums.KICK_1:
		return gm_drums.KICK

	if gm_drums.SNARE_1 <= note <= gm_drums.SNARE_2:
		return gm_drums.SNARE

	if gm_drums.HI_HAT_CLOSED <= note <= gm_drums.HI_HAT_OPEN:
		return gm_drums.OPEN_HI_HAT if note == gm_drums.HI_HAT_OPEN else gm_drums.HI_HAT

	if gm_drums.HIGH_MID_TOM <= note <= gm_drums.HIGH_TOM:
		return gm_drums.HIGH_TOM_VOICE

	if note == gm_drums.LOW_MID_TOM:
		return gm_drums.MID_TOM_VOICE

	return None


DEFAULT_KIT = DrumKit()
