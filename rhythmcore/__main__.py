import argparse
import logging
import random
import sys
import typing

import rhythmcore.config
import rhythmcore.difficulty
import rhythmcore.generator
import rhythmcore.midi_convert
import rhythmcore.midi_file
import rhythmcore.pattern


# Configure logging
logging.basicConfig(level=logging.INFO)
logger = logging.getLogger(__name__)


def _add_pattern_arguments (parser: argparse.ArgumentParser) -> None:

	parser.add_argument("--time-signature", default=None, help="e.g. 4/4 (default from config)")
	parser.add_argument("--subdivision", type=int, default=16)
	parser.add_argument("--phrase", default=None, help="accent groups, e.g. '4 4 4 4'")
	parser.add_argument("--voices", required=True, help="voice tokens, e.g. 'S S K S'")
	parser.add_argument("--sticking", default="", help="sticking tokens, e.g. 'R L K R'")
	parser.add_argument("--repeat", type=int, default=1)


def _pattern_from_args (args: argparse.Namespace, config: rhythmcore.config.Config) -> rhythmcore.pattern.Pattern:

	return rhythmcore.pattern.Pattern.from_strings(
		time_signature = args.time_signature or config.time_signature,
		subdivision = args.subdivision,
		phrase = args.phrase,
		drum_pattern = args.voices,
		sticking_pattern = args.sticking,
		repeat = args.repeat,
	)


def _print_rating (pattern: rhythmcore.pattern.Pattern) -> None:

	rating = rhythmcore.difficulty.rate(pattern)

	print(f"{pattern.time_signature} {pattern.drum_pattern}")
	print(f"  difficulty {rating.difficulty} ({rating.level})")

	for recommendation in rhythmcore.difficulty.practice_recommendations(pattern, rating):
		print(f"  [{recommendation.priority}] {recommendation.message}")


def convert (args: argparse.Namespace, config: rhythmcore.config.Config) -> int:

	"""Convert a recorded take into patterns, optionally writing them back out quantized."""

	bpm = args.bpm or config.bpm
	notes = rhythmcore.midi_convert.read_midi_notes(args.input)

	measures = rhythmcore.midi_convert.convert_recording(
		notes,
		args.time_signature or config.time_signature,
		bpm = bpm,
		subdivision = args.subdivision,
		kit = config.kit(),
		max_bars = args.max_bars,
	)

	if not measures:
		logger.warning(f"No notes found in {args.input}")
		return 1

	for measure in measures:
		per_beat = "" if measure.per_beat_subdivisions is None else f" per-beat {list(measure.per_beat_subdivisions)}"
		print(f"bar {measure.index + 1}: phrase {list(measure.phrase)}{per_beat}")
		print(f"  {measure.drum_pattern}")

	if args.output:
		rhythmcore.midi_file.export_midi([measure.to_pattern() for measure in measures], bpm, args.output, config.kit())

	return 0


def score (args: argparse.Namespace, config: rhythmcore.config.Config) -> int:

	"""Rate a pattern given on the command line."""

	pattern = _pattern_from_args(args, config)
	problems = pattern.validate()

	for problem in problems:
		logger.warning(problem)

	_print_rating(pattern)

	return 0


def export (args: argparse.Namespace, config: rhythmcore.config.Config) -> int:

	"""Write a pattern given on the command line to a MIDI file."""

	pattern = _pattern_from_args(args, config)
	problems = pattern.validate()

	if problems:
		for problem in problems:
			logger.error(problem)
		return 1

	rhythmcore.midi_file.export_midi([pattern], args.bpm or config.bpm, args.output, config.kit())

	return 0


def generate (args: argparse.Namespace, config: rhythmcore.config.Config) -> int:

	"""Print random patterns with their ratings."""

	rng = random.Random(args.seed)

	for _ in range(args.count):
		pattern = rhythmcore.generator.generate_pattern(rng, practice_pad=args.practice_pad, advanced=args.advanced, time_signature=args.time_signature)
		_print_rating(pattern)
		print(f"  sticking {pattern.sticking_pattern}")

	return 0


def build_parser () -> argparse.ArgumentParser:

	parser = argparse.ArgumentParser(prog="rhythmcore", description="Drum pattern timing and notation tools.")
	parser.add_argument("--config", default=rhythmcore.config.DEFAULT_CONFIG_PATH)
	commands = parser.add_subparsers(dest="command", required=True)

	convert_parser = commands.add_parser("convert", help="convert a recorded .mid take into patterns")
	convert_parser.add_argument("input")
	convert_parser.add_argument("--output", help="write the quantized patterns to this .mid file")
	convert_parser.add_argument("--time-signature", default=None)
	convert_parser.add_argument("--bpm", type=float, default=None)
	convert_parser.add_argument("--subdivision", type=int, default=None, help="force a uniform grid")
	convert_parser.add_argument("--max-bars", type=int, default=None)
	convert_parser.set_defaults(handler=convert)

	score_parser = commands.add_parser("score", help="rate a pattern's difficulty")
	_add_pattern_arguments(score_parser)
	score_parser.set_defaults(handler=score)

	export_parser = commands.add_parser("export", help="write a pattern to a .mid file")
	_add_pattern_arguments(export_parser)
	export_parser.add_argument("--bpm", type=float, default=None)
	export_parser.add_argument("--output", required=True)
	export_parser.set_defaults(handler=export)

	generate_parser = commands.add_parser("generate", help="print random patterns")
	generate_parser.add_argument("--count", type=int, default=1)
	generate_parser.add_argument("--seed", type=int, default=None)
	generate_parser.add_argument("--time-signature", default=None)
	generate_parser.add_argument("--practice-pad", action="store_true")
	generate_parser.add_argument("--advanced", action="store_true")
	generate_parser.set_defaults(handler=generate)

	return parser


def main (argv: typing.Optional[typing.Sequence[str]] = None) -> int:

	"""
	Main entry point for the rhythmcore command line.
	"""

	args = build_parser().parse_args(argv)
	config = rhythmcore.config.load_config(args.config)

	return args.handler(args, config)


if __name__ == "__main__":
	sys.exit(main())
