"""Output formatter registry — pluggable format hub.

WHY: The CLI and any embedding application need a single lookup to find
the right formatter by name. A central dict makes it trivial to add new
formats: create the formatter class, import it here, add one line.

HOW: FORMATTERS maps string keys to formatter *classes* (not instances).
Callers instantiate as needed: ``formatter = FORMATTERS["srt"]()``.
export_segments() is the one-call path from a segment list to a string.

RULES:
- Keys are snake_case identifiers (used in CLI flags, config, etc.)
- Values are BaseFormatter subclasses (not instances)
- Every formatter listed here must be importable without side effects
- An unknown key is a programming error and raises ValueError
"""

from __future__ import annotations

from typing import TYPE_CHECKING, Dict, Optional, Sequence, Type, Union

from transcript_lab.core.ir import Segment, TextVariant, Transcript
from transcript_lab.formatters.json_segments import JSONSegmentsFormatter
from transcript_lab.formatters.lrc_lyrics import LRCFormatter
from transcript_lab.formatters.plain_text import PlainTextFormatter
from transcript_lab.formatters.srt_captions import SRTFormatter
from transcript_lab.formatters.ttml_captions import TTMLFormatter

if TYPE_CHECKING:
    from transcript_lab.formatters.base import BaseFormatter

FORMATTERS: Dict[str, Type[BaseFormatter]] = {
    "plain_text": PlainTextFormatter,
    "srt": SRTFormatter,
    "lrc": LRCFormatter,
    "json": JSONSegmentsFormatter,
    "ttml": TTMLFormatter,
}


def get_formatter(format_key: str) -> BaseFormatter:
    """Instantiate the formatter registered under *format_key*."""
    try:
        formatter_cls = FORMATTERS[format_key]
    except KeyError:
        raise ValueError(
            "Unknown format '{}'. Available formats: {}".format(
                format_key, ", ".join(sorted(FORMATTERS))
            )
        ) from None
    return formatter_cls()


def export_segments(
    segments: Sequence[Segment],
    format_key: str,
    variant: Union[TextVariant, str] = TextVariant.original,
    duration_s: Optional[float] = None,
) -> str:
    """Render segments in one format and return the file content.

    Args:
        segments: Canonical segments, in the order they should be written.
        format_key: A key of FORMATTERS.
        variant: "original" or "translated".
        duration_s: Total audio duration, used by the LRC trailing
                    clearing line; None when unknown.

    Raises:
        ValueError: If format_key or variant is not recognized.
    """
    formatter = get_formatter(format_key)
    transcript = Transcript(segments=list(segments), duration_s=duration_s)
    outputs = formatter.format(transcript, TextVariant(variant))
    return outputs[0].content
