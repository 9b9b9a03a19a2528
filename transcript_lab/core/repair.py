"""Recover segment records from degraded generation-service output.

WHY: The model is asked for ``{"segments": [...]}`` JSON, but long audio
regularly hits the output-length limit and the response stops mid-record.
Responses also arrive wrapped in Markdown code fences, preceded by prose,
or with a stray unescaped quote that breaks the whole document. Throwing
away a 40-minute transcript because the last record is cut off is not
acceptable; recovering every complete record is.

HOW: A cascade, each stage tried only when the previous one fails:
  1. Strip code fences and parse directly (also trying the embedded
     ``{...}``/``[...]`` payload when prose surrounds it).
  2. Truncation repair: cut the text after the last closed ``}`` record
     boundary, synthetically close the array and object, and re-parse.
  3. Fragment scan: a tolerant regex picks out every record-shaped
     ``startTime`` / ``endTime`` / ``text`` triple regardless of the
     surrounding structure, and unescapes each text value.
  4. Boundary walk-back: earlier ``}`` boundaries are tried in turn, for
     records the scan cannot see (keys in another order).

RULES:
- Empty input raises EmptyResponseError
- Zero records after all stages raises UnrecoverableResponseError
- A structurally complete ``{"segments": []}`` is a valid empty result
- Returned text values are fully unescaped; no backslash escapes survive
- Record order is emission order; nothing is sorted here
- A walked-back prefix is only used when the fragment scan finds nothing,
  so a stray quote in one record does not cost the records after it
"""

from __future__ import annotations

import json
import logging
import re
from typing import Any, List, Optional

import jsonschema

from transcript_lab.config import MAX_REPAIR_BOUNDARY_ATTEMPTS
from transcript_lab.core.errors import EmptyResponseError, UnrecoverableResponseError
from transcript_lab.core.records import RawRecord

logger = logging.getLogger(__name__)

# Accepted payload shapes: the requested object, or a bare record array.
RESPONSE_SCHEMA: dict = {
    "anyOf": [
        {
            "type": "object",
            "required": ["segments"],
            "properties": {"segments": {"type": "array"}},
        },
        {
            "type": "array",
            "items": {"type": "object"},
        },
    ]
}

_RESPONSE_VALIDATOR = jsonschema.Draft7Validator(RESPONSE_SCHEMA)

_LEADING_FENCE_RE = re.compile(r"^```[\w+-]*[ \t]*\r?\n?")
_TRAILING_FENCE_RE = re.compile(r"\r?\n?[ \t]*```$")

# Closers tried after the last complete record boundary, most likely first.
_CLOSING_SUFFIXES = ("]}", "]", "}]}", "}]")

# ---------------------------------------------------------------------------
# Fragment scan pattern
# ---------------------------------------------------------------------------

_DQ_STRING = r'"((?:[^"\\]|\\.)*)"'
_SQ_STRING = r"'((?:[^'\\]|\\.)*)'"
_TIME_VALUE = r"""(?:"([^"]*)"|'([^']*)'|([^\s,}\]]+))"""


def _key(name: str) -> str:
    return r"""["']?""" + name + r"""["']?\s*:\s*"""


_FRAGMENT_RE = re.compile(
    r"\{\s*"
    + _key("startTime") + _TIME_VALUE + r"\s*,\s*"
    + _key("endTime") + _TIME_VALUE + r"\s*,\s*"
    + _key("text") + "(?:" + _DQ_STRING + "|" + _SQ_STRING + ")"
    + r"(?:\s*,\s*" + _key("translatedText") + "(?:" + _DQ_STRING + "|" + _SQ_STRING + "))?",
    re.DOTALL,
)

_ESCAPE_RE = re.compile(r"\\(u[0-9a-fA-F]{4}|.)", re.DOTALL)
_SIMPLE_ESCAPES = {"n": "\n", "t": "\t", "r": "\r", "b": "\b", "f": "\f"}
_SINGLE_QUOTED_RE = re.compile(r'\\(.)|"', re.DOTALL)


def strip_code_fence(text: str) -> str:
    """Remove a leading ```` ```lang ```` and trailing ```` ``` ```` fence.

    Either fence may be missing; a truncated response usually has the
    opening fence only.
    """
    text = text.strip()
    text = _LEADING_FENCE_RE.sub("", text, count=1)
    text = _TRAILING_FENCE_RE.sub("", text, count=1)
    return text.strip()


def _payload_records(data: Any) -> Optional[List[RawRecord]]:
    """Return records from a parsed payload, or None if the shape is wrong."""
    if not _RESPONSE_VALIDATOR.is_valid(data):
        return None
    items = data["segments"] if isinstance(data, dict) else data
    return [RawRecord.model_validate(item) for item in items if isinstance(item, dict)]


def _payload_start(text: str) -> int:
    starts = [idx for idx in (text.find("{"), text.find("[")) if idx != -1]
    return min(starts) if starts else -1


def _parse_complete(text: str) -> Optional[List[RawRecord]]:
    """Stage 1: direct parse, then the embedded payload between outer brackets."""
    try:
        return _payload_records(json.loads(text))
    except json.JSONDecodeError:
        pass

    start = _payload_start(text)
    if start == -1:
        return None
    end_ch = "}" if text[start] == "{" else "]"
    end = text.rfind(end_ch)
    if end <= start:
        return None
    try:
        return _payload_records(json.loads(text[start:end + 1]))
    except json.JSONDecodeError:
        return None


def _parse_truncated(text: str, max_attempts: int = 1) -> List[RawRecord]:
    """Close the document after a record boundary and re-parse.

    Stage 2 tries only the last ``}``; the walk-back stage passes a larger
    *max_attempts* to try earlier boundaries as well.
    """
    start = _payload_start(text)
    if start == -1:
        return []
    body = text[start:]

    end = len(body)
    for _ in range(max_attempts):
        end = body.rfind("}", 0, end)
        if end == -1:
            break
        head = body[:end + 1]
        for suffix in _CLOSING_SUFFIXES:
            try:
                data = json.loads(head + suffix)
            except json.JSONDecodeError:
                continue
            records = _payload_records(data)
            if records:
                return records
    return []


def _unescape_manually(raw: str) -> str:
    def _replace(match: "re.Match[str]") -> str:
        seq = match.group(1)
        if len(seq) == 5 and seq[0] == "u":
            return chr(int(seq[1:], 16))
        return _SIMPLE_ESCAPES.get(seq, seq)

    return _ESCAPE_RE.sub(_replace, raw)


def unescape_text(raw: str, quote: str = '"') -> str:
    """Decode a quoted string body captured from raw JSON-like text.

    WHY: Fragment-scanned text still carries its source escaping
    (``\\"``, ``\\n``, ``\\u00e9``), and single-quoted values use escapes
    JSON does not define (``\\'``).

    HOW: Rewrite single-quoted bodies into JSON string syntax and decode
    with the json module (which handles surrogate pairs). When that fails
    (invalid escapes), fall back to a manual pass that resolves every
    backslash sequence.
    """
    body = raw
    if quote == "'":
        def _requote(match: "re.Match[str]") -> str:
            escaped = match.group(1)
            if escaped is None:
                return '\\"'
            if escaped == "'":
                return "'"
            return match.group(0)

        body = _SINGLE_QUOTED_RE.sub(_requote, raw)
    try:
        return json.loads('"' + body + '"', strict=False)
    except json.JSONDecodeError:
        return _unescape_manually(raw)


def _first(*values: Optional[str]) -> Optional[str]:
    for value in values:
        if value is not None:
            return value
    return None


def _scan_fragments(text: str) -> List[RawRecord]:
    """Stage 3: collect every record-shaped fragment in the text."""
    records: List[RawRecord] = []
    for match in _FRAGMENT_RE.finditer(text):
        groups = match.groups()
        start = _first(*groups[0:3]) or ""
        end = _first(*groups[3:6]) or ""
        if groups[6] is not None:
            body = unescape_text(groups[6], '"')
        else:
            body = unescape_text(groups[7], "'")
        translated: Optional[str] = None
        if groups[8] is not None:
            translated = unescape_text(groups[8], '"')
        elif groups[9] is not None:
            translated = unescape_text(groups[9], "'")
        records.append(RawRecord(
            startTime=start.strip(),
            endTime=end.strip(),
            text=body,
            translatedText=translated,
        ))
    return records


def repair_response(
    raw: Optional[str],
    max_boundary_attempts: int = MAX_REPAIR_BOUNDARY_ATTEMPTS,
) -> List[RawRecord]:
    """Recover the ordered segment records from a raw response blob.

    Args:
        raw: The text returned by the generation service, possibly fenced,
             truncated, or otherwise malformed.
        max_boundary_attempts: How many ``}`` boundaries the last-resort
             walk-back tries when the fragment scan finds nothing.

    Returns:
        RawRecords in emission order.

    Raises:
        EmptyResponseError: The blob is empty or holds only code fences.
        UnrecoverableResponseError: No stage recovered a single record.
    """
    if raw is None or not raw.strip():
        raise EmptyResponseError()

    text = strip_code_fence(raw)
    if not text:
        raise EmptyResponseError()

    records = _parse_complete(text)
    if records is not None:
        if not records:
            logger.warning("Response parsed cleanly but contains no segments")
        logger.debug("Parsed %d record(s) directly", len(records))
        return records

    records = _parse_truncated(text)
    if records:
        logger.warning(
            "Response was malformed; recovered %d record(s) up to the last complete boundary",
            len(records),
        )
        return records

    records = _scan_fragments(text)
    if records:
        logger.warning(
            "Response structure unusable; salvaged %d record fragment(s) by pattern scan",
            len(records),
        )
        return records

    records = _parse_truncated(text, max_boundary_attempts)
    if records:
        logger.warning(
            "Response structure unusable; recovered %d record(s) before an earlier boundary",
            len(records),
        )
        return records

    logger.error("No segment records recoverable from %d-character response", len(raw))
    raise UnrecoverableResponseError()
