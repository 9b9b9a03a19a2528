"""Shared test fixtures for the transcript_lab test suite.

WHY: Multiple test modules need the same raw responses and the same
normalized segment lists. Centralizing fixtures here avoids duplication
and keeps every module testing against identical data.

HOW: Pytest fixtures provide raw response blobs in the shapes the
generation service actually returns (clean, fenced, truncated) and a
pre-normalized two-segment Transcript with a silence gap between the
segments.

RULES:
- Raw blobs are plain strings exactly as the service would return them
- The gap transcript has segments at 0–2 s and 10–12 s (an 8 s silence)
"""

import json

import pytest

from transcript_lab.core.ir import Segment, Transcript


# ---------------------------------------------------------------------------
# Raw response blobs
# ---------------------------------------------------------------------------

CLEAN_RESPONSE = json.dumps({
    "segments": [
        {"startTime": "00:00.000", "endTime": "00:02.000", "text": "Hello there"},
        {"startTime": "00:10.000", "endTime": "00:12.000", "text": "General Kenobi"},
    ]
})

TRUNCATED_RESPONSE = (
    '{"segments":[{"startTime":"0:00","endTime":"0:02","text":"Hi"},'
    '{"startTime":"0:02","endTime":"0'
)

TRANSLATION_RESPONSE = json.dumps({
    "segments": [
        {"startTime": "00:00:00.000", "endTime": "00:00:02.000",
         "text": "Hello there", "translatedText": "Halo"},
        {"startTime": "00:00:10.000", "endTime": "00:00:12.000",
         "text": "General Kenobi", "translatedText": "Jenderal Kenobi"},
    ]
})


@pytest.fixture
def clean_response():
    """A well-formed response with two segments."""
    return CLEAN_RESPONSE


@pytest.fixture
def fenced_response():
    """The clean response wrapped in a ```json Markdown fence."""
    return "```json\n" + CLEAN_RESPONSE + "\n```"


@pytest.fixture
def truncated_response():
    """A response cut off in the middle of its second record."""
    return TRUNCATED_RESPONSE


@pytest.fixture
def translation_response():
    """A translation-pass response for the clean response's segments."""
    return TRANSLATION_RESPONSE


# ---------------------------------------------------------------------------
# Normalized IR
# ---------------------------------------------------------------------------


@pytest.fixture
def gap_segments():
    """Two segments with an 8-second silence between them."""
    return [
        Segment(start_s=0.0, end_s=2.0, text="Hello there"),
        Segment(start_s=10.0, end_s=12.0, text="General Kenobi"),
    ]


@pytest.fixture
def gap_transcript(gap_segments):
    """gap_segments with unknown total duration."""
    return Transcript(segments=gap_segments, source_filename="song.mp3")


@pytest.fixture
def translated_segments():
    """Two segments where only the first has a translation."""
    return [
        Segment(start_s=0.0, end_s=2.0, text="Hello there", translated_text="Halo"),
        Segment(start_s=10.0, end_s=12.0, text="General Kenobi"),
    ]
