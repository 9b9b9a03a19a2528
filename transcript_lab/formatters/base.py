"""Formatter interface and the file-content container it returns.

WHY: Subtitle, lyric, text, and data exports all read one segment list but
encode it differently. The CLI, export_segments(), and anything embedding
the library should be able to drive any of them the same way, with the
text variant (original or translated) chosen by the caller.

HOW: BaseFormatter declares a ``name`` and a ``format(transcript, variant)``
method. FormatterOutput carries what a caller needs to save the result: a
suffix, the exact content, and a MIME type.

RULES:
- A formatter never reorders, filters, or mutates the segments it is given
- ``format()`` returns a list so a format may span several files; the
  built-in formats each produce exactly one
- ``suffix`` starts with a dot (``".lrc"``); callers supply the file stem
"""

from __future__ import annotations

from abc import ABC, abstractmethod
from dataclasses import dataclass
from typing import List, Union

from transcript_lab.core.ir import TextVariant, Transcript


@dataclass
class FormatterOutput:
    """Content for one exported file.

    Attributes:
        suffix: Appended to the caller's stem, e.g. ``".srt"`` gives
                ``"song.srt"``.
        content: Exact file content as text; callers write it as UTF-8.
        media_type: MIME type, e.g. ``"application/x-subrip"``.
    """

    suffix: str
    content: str
    media_type: str


class BaseFormatter(ABC):
    """Common interface of every export format.

    New formats subclass this, implement ``name`` and ``format()``, and
    get a key in ``FORMATTERS`` (formatters/__init__.py).
    """

    @property
    @abstractmethod
    def name(self) -> str:
        """Display name, e.g. 'LRC Lyrics'."""

    @abstractmethod
    def format(
        self,
        transcript: Transcript,
        variant: Union[TextVariant, str] = TextVariant.original,
    ) -> List[FormatterOutput]:
        """Render a transcript lane.

        Args:
            transcript: Segments plus lane metadata (source name, duration).
            variant: Export the original text or the translation; segments
                     without a translation render as empty strings.

        Returns:
            The FormatterOutput list for this format.
        """
