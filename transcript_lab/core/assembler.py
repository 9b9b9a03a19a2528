"""Segment assembly, ordering, translation merging, and Transcript construction.

WHY: The repair cascade hands back RawRecords whose fields are still the
strings the model wrote. Formatters and the playback resolver need
Segments with canonical float-second timing. This module is the bridge
between the raw records and the structured IR, and it is where the
translation pass is folded back into an existing segment list.

HOW: Each RawRecord's startTime and endTime go through normalize_timestamp;
text and translatedText are carried over unchanged. build_transcript wraps
a segment list with lane metadata. merge_translation runs the translation
response through the same repair cascade and attaches each returned
translatedText to the segment at the same position.

RULES:
- Emission order is preserved; sort_segments() is opt-in for consumers
- A record with end < start is kept as-is (soft invariant)
- Translation is positional; timestamps in the translation response are
  ignored because the service is told not to touch them and sometimes does
- Nothing is mutated: every function returns new Segment values
"""

from __future__ import annotations

import logging
from dataclasses import replace
from typing import Iterable, List, Optional

from transcript_lab.core.ir import Segment, Transcript
from transcript_lab.core.records import RawRecord
from transcript_lab.core.repair import repair_response
from transcript_lab.core.timestamps import parse_timestamp

logger = logging.getLogger(__name__)


def record_to_segment(record: RawRecord) -> Segment:
    """Normalize one RawRecord into a canonical Segment."""
    return Segment(
        start_s=parse_timestamp(record.startTime),
        end_s=parse_timestamp(record.endTime),
        text=record.text,
        translated_text=record.translatedText,
    )


def assemble_segments(records: Iterable[RawRecord]) -> List[Segment]:
    """Normalize every record, preserving emission order."""
    segments = [record_to_segment(r) for r in records]
    inverted = sum(1 for s in segments if s.end_s < s.start_s)
    if inverted:
        logger.warning("%d segment(s) end before they start; kept as-is", inverted)
    return segments


def sort_segments(segments: Iterable[Segment]) -> List[Segment]:
    """Return segments ordered by start time (stable for equal starts)."""
    return sorted(segments, key=lambda s: s.start_s)


def parse_transcription_response(raw: Optional[str]) -> List[Segment]:
    """Repair a raw transcription blob and normalize it into Segments.

    Raises:
        EmptyResponseError: The blob is empty.
        UnrecoverableResponseError: No record could be recovered.
    """
    return assemble_segments(repair_response(raw))


def merge_translation(segments: List[Segment], raw: Optional[str]) -> List[Segment]:
    """Attach translations from a translation-service response.

    WHY: The translation service echoes the segment list back with an extra
    ``translatedText`` key per record. Its output is exactly as unreliable
    as the transcription output, so it gets the same repair treatment.

    HOW: Repair the blob, then pair records with segments by position.
    Segments past the end of a truncated translation keep whatever
    translated_text they already had.

    Raises:
        EmptyResponseError: The blob is empty.
        UnrecoverableResponseError: No record could be recovered.
    """
    records = repair_response(raw)
    if len(records) != len(segments):
        logger.warning(
            "Translation returned %d record(s) for %d segment(s)",
            len(records), len(segments),
        )

    merged: List[Segment] = []
    for index, segment in enumerate(segments):
        if index < len(records) and records[index].translatedText is not None:
            merged.append(replace(segment, translated_text=records[index].translatedText))
        else:
            merged.append(segment)
    return merged


def build_transcript(
    segments: List[Segment],
    source_filename: str = "",
    duration_s: Optional[float] = None,
) -> Transcript:
    """Wrap a segment list with the metadata formatters need.

    Args:
        segments: Canonical segments in emission order.
        source_filename: Original audio/response filename, for output naming.
        duration_s: Total audio duration, or None when unknown.
    """
    return Transcript(
        segments=list(segments),
        source_filename=source_filename,
        duration_s=duration_s,
    )
