"""TTML caption formatter.

WHY: Word-mode transcripts are aimed at high-precision karaoke timing, and
the players that render those (and broadcast caption pipelines) take TTML
rather than SRT.

HOW: Writes a minimal TTML document with one ``<p>`` per segment inside
``tt/body/div``, with ``begin``/``end`` clock values and XML-escaped text.

RULES:
- Clock values are canonical ``HH:MM:SS.mmm``, rendered from the segment seconds
- ``< > & ' "`` are escaped in text and attribute values
- Segments keep their order; empty texts produce empty ``<p>`` elements
- Output suffix: ".ttml"
- Media type: "application/ttml+xml"
"""

from __future__ import annotations

from typing import List, Union
from xml.sax.saxutils import escape

from transcript_lab.core.ir import TextVariant, Transcript
from transcript_lab.core.timestamps import format_ttml_time
from transcript_lab.formatters.base import BaseFormatter, FormatterOutput

TTML_NAMESPACE = "http://www.w3.org/ns/ttml"

_EXTRA_ENTITIES = {"'": "&apos;", '"': "&quot;"}


def escape_xml(text: str) -> str:
    """Escape the five XML special characters."""
    return escape(text, _EXTRA_ENTITIES)


class TTMLFormatter(BaseFormatter):
    """Formatter that produces a TTML caption document."""

    @property
    def name(self) -> str:
        return "TTML Captions"

    def format(
        self,
        transcript: Transcript,
        variant: Union[TextVariant, str] = TextVariant.original,
    ) -> List[FormatterOutput]:
        lines = [
            '<?xml version="1.0" encoding="UTF-8"?>',
            '<tt xmlns="{}">'.format(TTML_NAMESPACE),
            "  <body>",
            "    <div>",
        ]
        for segment in transcript.segments:
            lines.append('      <p begin="{}" end="{}">{}</p>'.format(
                escape_xml(format_ttml_time(segment.start_s)),
                escape_xml(format_ttml_time(segment.end_s)),
                escape_xml(segment.text_for(variant)),
            ))
        lines.extend([
            "    </div>",
            "  </body>",
            "</tt>",
        ])

        return [
            FormatterOutput(
                suffix=".ttml",
                content="\n".join(lines) + "\n",
                media_type="application/ttml+xml",
            )
        ]
