"""Plain text transcript formatter.

WHY: Editors and translators need a readable transcript for review and
archival: no timecodes, just the text. This is the simplest output
format and the baseline proof that the pluggable formatter pattern works.

HOW: Takes each segment's selected text in order and joins them with a
blank line between segments.

RULES:
- One paragraph per segment, separated by exactly one blank line ("\\n\\n")
- No timing metadata, no trailing newline after the last segment
- Empty segment texts still produce their (empty) paragraph
- Output suffix: ".txt"
- Media type: "text/plain"
"""

from __future__ import annotations

from typing import List, Union

from transcript_lab.core.ir import TextVariant, Transcript
from transcript_lab.formatters.base import BaseFormatter, FormatterOutput


class PlainTextFormatter(BaseFormatter):
    """Formatter that produces blank-line-separated plain text."""

    @property
    def name(self) -> str:
        return "Plain Text"

    def format(
        self,
        transcript: Transcript,
        variant: Union[TextVariant, str] = TextVariant.original,
    ) -> List[FormatterOutput]:
        content = "\n\n".join(s.text_for(variant) for s in transcript.segments)
        return [
            FormatterOutput(
                suffix=".txt",
                content=content,
                media_type="text/plain",
            )
        ]
