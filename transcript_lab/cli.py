"""Command-line interface for Transcript Lab.

WHY: The generation service is called by whatever orchestrates it (a web
app, a notebook, a batch script); what comes back is a raw text blob
saved to disk. Users need a simple way to turn those blobs into subtitle,
lyric, and data files from the terminal, and to check what a player would
highlight at a given time, without writing code.

HOW: Uses argparse to accept one or more response files (one per lane),
optional per-lane translation responses and labels, the text variant,
output format selection, the known audio duration, and an output
directory. Each lane
is repaired, normalized, optionally merged with the translation, and
written through every selected formatter. Status messages go to stderr;
output files are saved next to the response (or to --output-dir).

RULES:
- Positional arguments: response files; "-" reads one response from stdin
- --formats: comma-separated formatter keys (default: all registered)
- --translation and --label are per lane: given once per input, paired
  by position; each lane is merged only with its own translation
- --variant translated requires nothing extra; missing translations
  export as empty text
- Output naming: {stem}[_{label}][_{language}]{suffix}, language defaulting
  to "translated" for the translated variant; numeric suffix on conflict
- A lane that cannot be repaired is reported and the other lanes still run
- --active-at prints "{index}\\t{start}\\t{text}" (or "none") per lane on stdout
- Status output goes to stderr (not stdout)
- Exit codes: 0 = success, 1 = any error (including any failed lane)
"""

from __future__ import annotations

import argparse
import logging
import sys
from pathlib import Path
from typing import List, Optional

from transcript_lab.config import DEFAULT_VARIANT
from transcript_lab.core.assembler import (
    build_transcript,
    merge_translation,
    parse_transcription_response,
)
from transcript_lab.core.errors import ResponseRepairError
from transcript_lab.core.ir import TextVariant, Transcript
from transcript_lab.core.playback import ActiveSegmentResolver
from transcript_lab.formatters import FORMATTERS
from transcript_lab.formatters.base import FormatterOutput

STDIN_MARKER = "-"


def _status(msg: str) -> None:
    """Print a status message to stderr.

    WHY: Status output must not pollute stdout so the CLI can be piped.
    """
    print(msg, file=sys.stderr, flush=True)


def _fail(msg: str) -> None:
    print("Error: {}".format(msg), file=sys.stderr)
    sys.exit(1)


def _read_blob(source: str) -> str:
    if source == STDIN_MARKER:
        return sys.stdin.read()
    return Path(source).read_text(encoding="utf-8")


def _resolve_output_path(
    stem: str,
    suffix: str,
    output_dir: Path,
) -> Path:
    """Resolve the output file path, adding a numeric suffix on conflict.

    WHY: Users re-run the converter on the same response after tweaking
    options. Overwriting previous output would lose work.

    RULES:
    - First attempt: {stem}{suffix} (e.g. interview.srt)
    - Conflict: insert counter before the suffix (e.g. interview-2.srt)
    - Counter starts at 2 and increments
    """
    base_path = output_dir / "{}{}".format(stem, suffix)
    if not base_path.exists():
        return base_path

    counter = 2
    while True:
        candidate = output_dir / "{}-{}{}".format(stem, counter, suffix)
        if not candidate.exists():
            return candidate
        counter += 1


def _save_output(
    output: FormatterOutput,
    stem: str,
    output_dir: Path,
) -> Path:
    """Save a single formatter output to disk as UTF-8 text."""
    path = _resolve_output_path(stem, output.suffix, output_dir)
    path.write_text(output.content, encoding="utf-8")
    return path


def _parse_format_keys(formats: Optional[str]) -> List[str]:
    if not formats:
        return list(FORMATTERS.keys())
    keys = [f.strip() for f in formats.split(",") if f.strip()]
    for key in keys:
        if key not in FORMATTERS:
            available = ", ".join(sorted(FORMATTERS.keys()))
            _fail("Unknown format '{}'. Available formats: {}".format(key, available))
    return keys


def _output_stem(
    source: str,
    variant: TextVariant,
    label: Optional[str] = None,
    language: Optional[str] = None,
) -> str:
    """Build the output stem: {base}[_{label}][_{language}].

    RULES:
    - base is the response file's stem, or "stdin"
    - label tags the lane (e.g. the model that produced it)
    - The translated variant appends the language tag, "translated" when
      no language is given
    """
    stem = "stdin" if source == STDIN_MARKER else Path(source).stem
    if label:
        stem += "_" + label
    if variant is TextVariant.translated:
        stem += "_" + (language or "translated")
    return stem


def _report_active(transcript: Transcript, playhead: float) -> None:
    resolver = ActiveSegmentResolver(transcript.segments)
    index = resolver.resolve(playhead)
    if index is None:
        print("none")
        return
    segment = transcript.segments[index]
    print("{}\t{}\t{}".format(index, segment.start_time, segment.text))


def _process_lane(
    source: str,
    args: argparse.Namespace,
    format_keys: List[str],
    variant: TextVariant,
    translation_blob: Optional[str],
    label: Optional[str] = None,
) -> List[Path]:
    """Repair, normalize, and export one response file."""
    _status("Processing {}...".format("stdin" if source == STDIN_MARKER else source))

    segments = parse_transcription_response(_read_blob(source))
    _status("  Recovered {} segments".format(len(segments)))

    if translation_blob is not None:
        segments = merge_translation(segments, translation_blob)
        translated = sum(1 for s in segments if s.translated_text is not None)
        _status("  Attached {} translations".format(translated))

    transcript = build_transcript(
        segments,
        source_filename="" if source == STDIN_MARKER else Path(source).name,
        duration_s=args.duration,
    )

    if args.active_at is not None:
        _report_active(transcript, args.active_at)

    if args.output_dir:
        output_dir = Path(args.output_dir).resolve()
    elif source == STDIN_MARKER:
        output_dir = Path.cwd()
    else:
        output_dir = Path(source).resolve().parent

    stem = _output_stem(source, variant, label, args.language)
    saved: List[Path] = []
    for key in format_keys:
        formatter = FORMATTERS[key]()
        for output in formatter.format(transcript, variant):
            path = _save_output(output, stem, output_dir)
            saved.append(path)
            _status("  Saved: {}".format(path.name))
    return saved


def _paired_option(values: Optional[List[str]], inputs: List[str], flag: str) -> List[Optional[str]]:
    """Pair a repeatable per-lane option with the inputs by position.

    RULES:
    - Not given: every lane gets None
    - Given: exactly one value per input, in the same order
    """
    if not values:
        return [None] * len(inputs)
    if len(values) != len(inputs):
        _fail("{} was given {} time(s) for {} input(s); give it once per input.".format(
            flag, len(values), len(inputs)))
    return list(values)


def run(args: argparse.Namespace) -> None:
    """Execute the conversion for every lane named on the command line.

    Each lane is processed independently: a response that cannot be
    repaired is reported and the remaining lanes still run. The exit
    code is 1 when any lane failed.
    """
    if args.verbose:
        logging.basicConfig(
            level=logging.DEBUG,
            format="%(asctime)s %(name)s %(levelname)s %(message)s",
        )

    if args.inputs.count(STDIN_MARKER) > 1:
        _fail("stdin ('-') can only be given once.")

    for source in args.inputs:
        if source != STDIN_MARKER and not Path(source).is_file():
            _fail("File not found: {}".format(source))

    if args.output_dir and not Path(args.output_dir).is_dir():
        _fail("Output directory does not exist: {}".format(args.output_dir))

    try:
        variant = TextVariant(args.variant)
    except ValueError:
        _fail("Unknown variant '{}'. Use 'original' or 'translated'.".format(args.variant))

    format_keys = _parse_format_keys(args.formats)
    translations = _paired_option(args.translations, args.inputs, "--translation")
    labels = _paired_option(args.labels, args.inputs, "--label")

    saved_files: List[Path] = []
    failed: List[str] = []
    for source, translation, label in zip(args.inputs, translations, labels):
        try:
            translation_blob = None
            if translation is not None:
                translation_blob = Path(translation).read_text(encoding="utf-8")
            saved_files.extend(_process_lane(
                source, args, format_keys, variant, translation_blob, label,
            ))
        except (ResponseRepairError, OSError) as e:
            _status("  Failed: {}: {}".format(source, e))
            failed.append(source)

    _status("")
    _status("Done! Saved {} file(s)".format(len(saved_files)))
    if failed:
        _fail("{} of {} input(s) failed: {}".format(
            len(failed), len(args.inputs), ", ".join(failed)))


def build_parser() -> argparse.ArgumentParser:
    """Build the argparse parser for the CLI.

    WHY: Separating parser construction from main() makes the CLI
    testable: tests can inspect the parser without running a conversion.
    """
    parser = argparse.ArgumentParser(
        prog="transcript_lab",
        description="Repair raw transcription responses and export them as "
                    "plain text, SRT, LRC, JSON, or TTML.",
    )

    parser.add_argument(
        "inputs",
        nargs="+",
        metavar="RESPONSE",
        help="Raw response file(s) from the transcription service ('-' for stdin).",
    )

    parser.add_argument(
        "--formats",
        default=None,
        help="Comma-separated list of output formats. "
             "Available: {}. Default: all.".format(", ".join(sorted(FORMATTERS.keys()))),
    )

    parser.add_argument(
        "--variant",
        default=DEFAULT_VARIANT,
        help="Text to export: 'original' or 'translated' (default: %(default)s).",
    )

    parser.add_argument(
        "--translation",
        action="append",
        dest="translations",
        default=None,
        metavar="FILE",
        help="Raw translation response for a lane. Repeat once per input, "
             "in the same order as the inputs.",
    )

    parser.add_argument(
        "--label",
        action="append",
        dest="labels",
        default=None,
        metavar="TAG",
        help="Lane tag added to output names (e.g. the model). Repeat once per input.",
    )

    parser.add_argument(
        "--language",
        default=None,
        metavar="TAG",
        help="Language tag for translated output names (default: 'translated').",
    )

    parser.add_argument(
        "--duration",
        type=float,
        default=None,
        help="Total audio duration in seconds (controls the final LRC clearing line).",
    )

    parser.add_argument(
        "--output-dir",
        default=None,
        help="Directory to save output files (default: same as the response file).",
    )

    parser.add_argument(
        "--active-at",
        type=float,
        default=None,
        metavar="SECONDS",
        help="Print the segment active at this playhead position.",
    )

    parser.add_argument(
        "-v", "--verbose",
        action="store_true",
        help="Log repair and normalization details to stderr.",
    )

    return parser


def main(argv: Optional[List[str]] = None) -> None:
    """Entry point for the CLI.

    RULES:
    - argv=None means use sys.argv (normal CLI invocation)
    - Explicit argv is for testing
    """
    parser = build_parser()
    args = parser.parse_args(argv)
    run(args)


if __name__ == "__main__":
    main()
