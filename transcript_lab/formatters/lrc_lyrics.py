"""LRC lyric timing formatter with silence clearing lines.

WHY: Karaoke and lyric displays (music players, streaming overlays) read
LRC. An LRC line stays on screen until the next timestamp, so without help
the last lyric before an instrumental break lingers for the whole break.
A timestamp-only "clearing" line blanks the display during the silence.

HOW: One ``[MM:SS.hh]text`` line per segment, in order. After each
segment, when the silence before the next segment is longer than the gap
threshold, a clearing line is stamped at ``end + clear_offset``. The final
segment gets the same clearing line unless the audio is known to end
before it.

RULES:
- Tags are ``[MM:SS.hh]``: total minutes, seconds, hundredths (no hours)
- Newlines inside a text collapse to single spaces
- Non-final segment: clear when next.start - end > gap_threshold_s
- Final segment: duration unknown → always clear; known → clear only when
  end + clear_offset_s <= duration
- Comparisons are done in whole milliseconds
- Lines are joined with "\\n", no trailing newline
- Output suffix: ".lrc"
"""

from __future__ import annotations

import re
from typing import List, Optional, Union

from transcript_lab.config import LRC_CLEAR_OFFSET_S, LRC_GAP_THRESHOLD_S
from transcript_lab.core.ir import TextVariant, Transcript
from transcript_lab.core.timestamps import format_lrc_time, millis_of
from transcript_lab.formatters.base import BaseFormatter, FormatterOutput

_NEWLINE_RE = re.compile(r"\r\n|\r|\n")


class LRCFormatter(BaseFormatter):
    """Formatter that produces an LRC lyric file.

    Args:
        gap_threshold_s: Silence longer than this gets a clearing line.
        clear_offset_s: Clearing lines are stamped this long after the
                        preceding segment ends.
    """

    def __init__(
        self,
        gap_threshold_s: float = LRC_GAP_THRESHOLD_S,
        clear_offset_s: float = LRC_CLEAR_OFFSET_S,
    ) -> None:
        self.gap_threshold_s = gap_threshold_s
        self.clear_offset_s = clear_offset_s

    @property
    def name(self) -> str:
        return "LRC Lyrics"

    def _should_clear_after_last(self, clear_ms: int, duration_s: Optional[float]) -> bool:
        if duration_s is None:
            return True
        return clear_ms <= millis_of(duration_s)

    def format(
        self,
        transcript: Transcript,
        variant: Union[TextVariant, str] = TextVariant.original,
    ) -> List[FormatterOutput]:
        """Convert the Transcript IR into LRC lines.

        Args:
            transcript: Segments plus lane metadata; duration_s drives the
                        trailing clearing line.
            variant: Which text to render.

        Returns:
            A single-element list containing the LRC output.
        """
        gap_ms = millis_of(self.gap_threshold_s)
        offset_ms = millis_of(self.clear_offset_s)
        segments = transcript.segments
        lines: List[str] = []

        for i, segment in enumerate(segments):
            text = _NEWLINE_RE.sub(" ", segment.text_for(variant))
            lines.append(format_lrc_time(segment.start_s) + text)

            end_ms = millis_of(segment.end_s)
            clear_ms = end_ms + offset_ms

            if i + 1 < len(segments):
                next_start_ms = millis_of(segments[i + 1].start_s)
                should_clear = next_start_ms - end_ms > gap_ms
            else:
                should_clear = self._should_clear_after_last(clear_ms, transcript.duration_s)

            if should_clear:
                lines.append(format_lrc_time(clear_ms / 1000.0))

        return [
            FormatterOutput(
                suffix=".lrc",
                content="\n".join(lines),
                media_type="text/plain",
            )
        ]
