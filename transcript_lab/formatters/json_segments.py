"""Structured JSON segment formatter.

WHY: Downstream tools (re-import into the lab, custom players, diffing two
model lanes) want the normalized segments as data, in the same key layout
the generation service was asked for.

HOW: Builds one object per segment with exactly three keys in fixed
order, validates the array against EXPORT_SCHEMA, and pretty-prints it.

RULES:
- Keys are exactly startTime, endTime, text — in that order
- The text key is "text" for both variants; its value is the selected text
- Timestamps are canonical ``HH:MM:SS.mmm`` strings
- 2-space indentation, non-ASCII written as-is (UTF-8)
- Validate output against EXPORT_SCHEMA before returning; raise on failure
- Output suffix: ".json"
"""

from __future__ import annotations

import json
from typing import Any, Dict, List, Union

import jsonschema

from transcript_lab.core.ir import TextVariant, Transcript
from transcript_lab.formatters.base import BaseFormatter, FormatterOutput

_CANONICAL_PATTERN = r"^\d{2,}:\d{2}:\d{2}\.\d{3}$"

EXPORT_SCHEMA: Dict[str, Any] = {
    "type": "array",
    "items": {
        "type": "object",
        "required": ["startTime", "endTime", "text"],
        "additionalProperties": False,
        "properties": {
            "startTime": {"type": "string", "pattern": _CANONICAL_PATTERN},
            "endTime": {"type": "string", "pattern": _CANONICAL_PATTERN},
            "text": {"type": "string"},
        },
    },
}


class JSONSegmentsFormatter(BaseFormatter):
    """Formatter that produces a pretty-printed JSON array of segments."""

    @property
    def name(self) -> str:
        return "JSON Segments"

    def format(
        self,
        transcript: Transcript,
        variant: Union[TextVariant, str] = TextVariant.original,
    ) -> List[FormatterOutput]:
        """Convert the Transcript IR into a JSON array.

        Raises:
            jsonschema.ValidationError: If the generated data does not
                conform to EXPORT_SCHEMA.
        """
        data = [
            {
                "startTime": segment.start_time,
                "endTime": segment.end_time,
                "text": segment.text_for(variant),
            }
            for segment in transcript.segments
        ]

        jsonschema.validate(instance=data, schema=EXPORT_SCHEMA)

        return [
            FormatterOutput(
                suffix=".json",
                content=json.dumps(data, indent=2, ensure_ascii=False),
                media_type="application/json",
            )
        ]
