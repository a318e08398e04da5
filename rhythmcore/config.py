import dataclasses
import logging
import os
import typing

import yaml

import rhythmcore.constants
import rhythmcore.constants.timing
import rhythmcore.kit

logger = logging.getLogger(__name__)


DEFAULT_CONFIG_PATH = "config.yaml"


@dataclasses.dataclass(frozen=True)
class Config:

	"""
	Settings for practice and conversion, usually read from ``config.yaml``:

	```yaml
	practice:
	  bpm: 100
	  tolerance_ms: 40
	  latency_ms: -12
	pattern:
	  time_signature: "7/8"
	midi:
	  note_map:
	    K: 35
	    S: 40
	```
	"""

	bpm: float = rhythmcore.constants.DEFAULT_BPM
	time_signature: str = rhythmcore.constants.DEFAULT_TIME_SIGNATURE
	tolerance_ms: float = rhythmcore.constants.timing.DEFAULT_TOLERANCE_MS
	latency_ms: float = 0.0
	note_map: typing.Mapping[str, int] = dataclasses.field(default_factory=dict)

	def kit (self) -> rhythmcore.kit.DrumKit:

		"""The drum kit for this configuration's note map."""

		if not self.note_map:
			return rhythmcore.kit.DEFAULT_KIT

		return rhythmcore.kit.DrumKit.with_custom(self.note_map)


def config_from_dict (data: typing.Optional[typing.Mapping[str, typing.Any]]) -> Config:

	"""
	Build a ``Config`` from parsed YAML. Missing sections and keys keep their
	defaults.
	"""

	data = data or {}
	practice = data.get("practice") or {}
	pattern = data.get("pattern") or {}
	midi = data.get("midi") or {}

	defaults = Config()

	return Config(
		bpm = float(practice.get("bpm", defaults.bpm)),
		time_signature = str(pattern.get("time_signature", defaults.time_signature)),
		tolerance_ms = float(practice.get("tolerance_ms", defaults.tolerance_ms)),
		latency_ms = float(practice.get("latency_ms", defaults.latency_ms)),
		note_map = {str(voice).upper(): int(note) for voice, note in (midi.get("note_map") or {}).items()},
	)


def load_config (config_path: str = DEFAULT_CONFIG_PATH) -> Config:

	"""
	Load configuration from a YAML file, or the defaults if it does not exist.
	"""

	if not os.path.exists(config_path):
		logger.warning(f"Config file {config_path} not found. Using defaults.")
		return Config()

	with open(config_path, "r") as f:
		return config_from_dict(yaml.safe_load(f))
