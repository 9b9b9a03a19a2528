"""Intermediate representation dataclasses for normalized transcripts.

WHY: The generation service returns segments whose timestamps arrive in
half a dozen notations and whose records may be partial. Downstream
formatters (SRT, LRC, plain text, JSON, TTML) and the playback resolver
all need the same thing: segments with trustworthy float-second timing.
The IR provides a single, well-typed intermediate form that every consumer
reads, decoupling repair and normalization from formatting.

HOW: Two dataclasses and one enum:
  Segment     — one time-bounded transcript unit with optional translation
  Transcript  — the segments of one lane plus source and duration metadata
  TextVariant — which text a formatter should render

RULES:
- All times are in float seconds, rounded to whole milliseconds
- end_s >= start_s is expected but NOT enforced; upstream data may violate it
- Segments are frozen; translation and normalization build new values
- Segment order is emission order; consumers that need chronology sort
"""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum
from typing import List, Optional

from transcript_lab.core.timestamps import format_canonical


class TextVariant(str, Enum):
    """Which text of a segment to render.

    RULES:
    - original: the transcribed text, always present
    - translated: the translation pass output, "" when absent
    """

    original = "original"
    translated = "translated"


@dataclass(frozen=True)
class Segment:
    """A single time-coded transcript unit.

    WHY: This is the atomic unit every formatter and the playback resolver
    consume. Keeping it immutable lets two lanes share segment lists
    without any coordination.

    RULES:
    - start_s / end_s: canonical non-negative seconds (millisecond resolution)
    - text: transcribed text, may be empty
    - translated_text: None until a translation pass attaches one
    """

    start_s: float
    end_s: float
    text: str
    translated_text: Optional[str] = None

    @property
    def start_time(self) -> str:
        """Canonical ``HH:MM:SS.mmm`` start timestamp."""
        return format_canonical(self.start_s)

    @property
    def end_time(self) -> str:
        """Canonical ``HH:MM:SS.mmm`` end timestamp."""
        return format_canonical(self.end_s)

    def text_for(self, variant: TextVariant | str) -> str:
        """Return the text selected by *variant*.

        Missing translations fall back to an empty string rather than
        the original text, so translated exports never silently mix
        languages.
        """
        if TextVariant(variant) is TextVariant.translated:
            return self.translated_text or ""
        return self.text


@dataclass
class Transcript:
    """The segments of one transcription lane plus export metadata.

    RULES:
    - segments: emission order from the upstream service
    - source_filename: original audio filename (for output naming)
    - duration_s: total audio duration, None when unknown
    """

    segments: List[Segment] = field(default_factory=list)
    source_filename: str = ""
    duration_s: Optional[float] = None
