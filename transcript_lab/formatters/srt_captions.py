"""SRT subtitle formatter.

WHY: SRT is the one subtitle format every player, editor, and upload form
accepts. Segments from the model are already subtitle-sized, so no
re-segmentation is needed — only exact SRT encoding.

HOW: For each segment in order, emit a 1-based index line, the
``start --> end`` line, the selected text, and a blank line.

RULES:
- Timestamps are ``HH:MM:SS,mmm`` — comma before milliseconds, unlike the
  canonical dot form
- Each block is "{index}\\n{start} --> {end}\\n{text}\\n"; blocks are joined
  with "\\n", giving one blank line between blocks
- Timing is written as normalized; no overlap or minimum-duration fixes
- Output suffix: ".srt"
- Media type: "application/x-subrip"
"""

from typing import List, Union

from transcript_lab.core.ir import TextVariant, Transcript
from transcript_lab.core.timestamps import format_srt_time
from transcript_lab.formatters.base import BaseFormatter, FormatterOutput


class SRTFormatter(BaseFormatter):
    """Formatter that produces one SRT subtitle file."""

    @property
    def name(self) -> str:
        return "SRT Subtitles"

    def format(
        self,
        transcript: Transcript,
        variant: Union[TextVariant, str] = TextVariant.original,
    ) -> List[FormatterOutput]:
        """Convert the Transcript IR into an SRT file.

        Args:
            transcript: Segments plus lane metadata.
            variant: Which text to render.

        Returns:
            A single-element list containing the SRT output.
        """
        blocks = []
        for i, segment in enumerate(transcript.segments, 1):
            blocks.append("{}\n{} --> {}\n{}\n".format(
                i,
                format_srt_time(segment.start_s),
                format_srt_time(segment.end_s),
                segment.text_for(variant),
            ))

        return [
            FormatterOutput(
                suffix=".srt",
                content="\n".join(blocks),
                media_type="application/x-subrip",
            )
        ]
