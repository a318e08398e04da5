import dataclasses
import math
import re
import typing


VOICE_RESTS = frozenset(("R", "-", "."))
STICKING_RESTS = frozenset(("-",))

_ORNAMENT_PREFIX = re.compile(r"^([a-z]+)([A-Z].*)$")


@dataclasses.dataclass(frozen=True)
class NoteToken:

	"""
	One position of a voice or sticking line, parsed once.

	A voice token such as ``"S+K"`` plays several voices at once, ``"(S)"``
	is a ghost note and a sticking token such as ``"lR"`` carries a grace-note
	ornament prefix (flam, drag, ruff). A token with no voices is a rest.
	"""

	voices: typing.Tuple[str, ...] = ()
	is_ghost: bool = False
	has_ornament_prefix: bool = False
	ornament: str = ""

	@property
	def is_rest (self) -> bool:
		return not self.voices


REST = NoteToken()


def parse_tokens (value: typing.Union[str, typing.Sequence[str], None]) -> typing.List[str]:

	"""
	Split a whitespace-separated string into trimmed, non-empty tokens.

	Already-tokenized input (a list or tuple) is returned as a new list with
	the same normalisation applied, so the function is idempotent.

	Example:
		```python
		parse_tokens("  S  K   S+K ")   # ["S", "K", "S+K"]
		```
	"""

	if not value:
		return []

	if isinstance(value, str):
		return value.split()

	tokens: typing.List[str] = []
	for item in value:
		tokens.extend(str(item).split())
	return tokens


def parse_number_list (value: typing.Union[str, typing.Sequence[str], None]) -> typing.List[float]:

	"""
	Parse tokens as numbers, dropping anything non-finite or non-positive.

	Integral values come back as ``int`` so phrase groups stay usable as counts.
	"""

	numbers: typing.List[float] = []

	for token in parse_tokens(value):

		try:
			number = float(token)
		except ValueError:
			continue

		if not math.isfinite(number) or number <= 0:
			continue

		numbers.append(int(number) if number.is_integer() else number)

	return numbers


def format_list (values: typing.Iterable[typing.Any]) -> str:

	"""Format a list as a space-separated string."""

	return " ".join(str(value) for value in values)


def build_accent_indices (phrase: typing.Sequence[int]) -> typing.List[int]:

	"""
	Return the first index of each phrase group.

	Example:
		```python
		build_accent_indices([2, 2, 2, 2])   # [0, 2, 4, 6]
		build_accent_indices([3, 1, 4])      # [0, 3, 4]
		```
	"""

	accents: typing.List[int] = []
	position = 0

	for group in phrase:
		accents.append(position)
		position += int(group)

	return accents


def build_phrase_from_accents (accent_indices: typing.Iterable[int], notes_per_bar: int) -> typing.List[int]:

	"""
	Derive phrase groups from accent positions.

	Accents outside ``[0, notes_per_bar)`` are ignored. With no valid accent
	the whole bar is one group. A gap before the first accent becomes its own
	leading group and the last group runs to the end of the bar.

	Example:
		```python
		build_phrase_from_accents([0, 2, 4, 6], 8)   # [2, 2, 2, 2]
		build_phrase_from_accents([4], 8)            # [4, 4]
		build_phrase_from_accents([], 4)             # [4]
		```
	"""

	if notes_per_bar <= 0:
		raise ValueError("notes_per_bar must be positive")

	valid = sorted({int(a) for a in accent_indices if 0 <= a < notes_per_bar})

	if not valid:
		return [notes_per_bar]

	phrase: typing.List[int] = []

	if valid[0] > 0:
		phrase.append(valid[0])

	for current, following in zip(valid, valid[1:] + [notes_per_bar]):
		phrase.append(following - current)

	return phrase


def parse_voice_token (token: str) -> NoteToken:

	"""
	Parse one voice-line token: ``"S"``, ``"S+K"``, ``"(S)"`` or a rest.
	"""

	text = token.strip()
	is_ghost = False

	if len(text) >= 2 and text.startswith("(") and text.endswith(")"):
		is_ghost = True
		text = text[1:-1]

	voices = tuple(
		part.upper()
		for part in text.split("+")
		if part and part.upper() not in VOICE_RESTS
	)

	if not voices:
		return REST

	return NoteToken(voices=voices, is_ghost=is_ghost)


def parse_sticking_token (token: str) -> NoteToken:

	"""
	Parse one sticking token: ``"R"``, ``"L"``, ``"RF"``, ``"R+L"``, ``"lR"``.

	In sticking lines ``R`` is the right hand, so only ``-`` is a rest.
	A lowercase prefix in front of the main stroke is an ornament.
	"""

	text = token.strip()
	ornament = ""

	match = _ORNAMENT_PREFIX.match(text)
	if match:
		ornament, text = match.group(1), match.group(2)

	limbs = tuple(part for part in text.split("+") if part and part not in STICKING_RESTS)

	if not limbs:
		return REST

	return NoteToken(voices=limbs, has_ornament_prefix=bool(ornament), ornament=ornament)


def tokenize_voices (value: typing.Union[str, typing.Sequence[str], None]) -> typing.Tuple[NoteToken, ...]:

	"""Parse a whole voice line into ``NoteToken``s."""

	return tuple(parse_voice_token(token) for token in parse_tokens(value))


def tokenize_sticking (value: typing.Union[str, typing.Sequence[str], None]) -> typing.Tuple[NoteToken, ...]:

	"""Parse a whole sticking line into ``NoteToken``s."""

	return tuple(parse_sticking_token(token) for token in parse_tokens(value))


def format_token (token: NoteToken, rest: str = "R") -> str:

	"""Render a token back to its text form."""

	if token.is_rest:
		return rest

	text = token.ornament + "+".join(token.voices)

	if token.is_ghost:
		text = f"({text})"

	return text
