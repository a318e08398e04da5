"""
rhythmcore - timing and notation engine for drum practice.

A drum pattern is written compactly: a time signature, a subdivision (or one
per beat), accent groups and a line of voice tokens such as ``"K H S+H H"``.
rhythmcore turns that into millisecond timing and back again, and scores how
well a live performance lines up with it.

What it does:

- **Notation.** Tokenize voice and sticking lines once into ``NoteToken``
  values (combined voices ``"S+K"``, ghost notes ``"(S)"``, flams ``"lR"``).
  Convert between accent positions and phrase groups.
- **Grid math.** Notes per bar and note positions for uniform or per-beat
  subdivisions, in any time signature.
- **Polyrhythms.** Beat positions, alignments, cycle length and tuplet
  brackets for any ``N:M`` ratio, plus a combined playable pattern.
- **Recording conversion.** Detect the subdivision of every beat of a
  recorded take, quantize it, and write one pattern per measure.
- **Practice matching.** Build the expected-note timeline for a set of
  patterns and match hits to it within a tolerance window.
- **Difficulty.** Rate a pattern from beginner to expert with practice tips.
- **MIDI files.** Export patterns as a format 0 Standard MIDI File, read a
  take back in.

Minimal example:

    ```python
    import rhythmcore

    pattern = rhythmcore.Pattern.from_strings("4/4", 8, "4 4", "K H S H K H S H", "R R R R R R R R")
    session = rhythmcore.PracticeSession([pattern], bpm=90)

    session.register_hit(4.0, "K")
    session.summary().accuracy

    rhythmcore.rate(pattern).level   # "beginner"
    ```

Package-level exports: ``DrumKit``, ``Pattern``, ``PracticeSession``,
``TimeSignature``, ``convert_recording``, ``detect_subdivision``,
``generate_polyrhythm``, ``rate``.
"""

import rhythmcore.difficulty
import rhythmcore.grid
import rhythmcore.kit
import rhythmcore.midi_convert
import rhythmcore.pattern
import rhythmcore.polyrhythm
import rhythmcore.practice
import rhythmcore.subdivision


DrumKit = rhythmcore.kit.DrumKit
Pattern = rhythmcore.pattern.Pattern
PracticeSession = rhythmcore.practice.PracticeSession
TimeSignature = rhythmcore.grid.TimeSignature
convert_recording = rhythmcore.midi_convert.convert_recording
detect_subdivision = rhythmcore.subdivision.detect_subdivision
generate_polyrhythm = rhythmcore.polyrhythm.generate_polyrhythm
rate = rhythmcore.difficulty.rate
