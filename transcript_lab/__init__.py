"""Transcript Lab — repair, normalize, export, and follow LLM transcripts.

WHY: Generative transcription models return time-coded segments as loosely
structured JSON. The output is often fenced in Markdown, cut off mid-record
by output-length limits, and uses a different timestamp notation from one
segment to the next. Nothing downstream (subtitle players, lyric displays,
editors) can ingest that directly.

HOW: Four-stage pipeline — repair (raw blob → records), normalize (records →
canonical Segment IR), format (pluggable formatters), follow (active segment
for a playhead). Each stage is a pure function and independently testable.

RULES:
- All formatters consume the same Segment IR
- Adding a new output format = one new formatter module, no core changes
- The IR is the stable contract between repair/normalization and formatting
- Nothing here talks to the network; the raw blob is handed in by the caller
"""

__version__ = "0.1.0"
