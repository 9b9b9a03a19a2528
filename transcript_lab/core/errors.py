"""Typed failures surfaced to callers of the core pipeline.

WHY: Most degraded input is absorbed silently (bad timestamps become zero,
partial responses yield partial records). Two conditions cannot be
absorbed: an empty upstream result and a response from which no record can
be recovered. Callers need to tell these apart to show the right message.

RULES:
- Every error carries a human-readable message
- ResponseRepairError subclasses ValueError so callers that already catch
  ValueError for bad input keep working
"""


class TranscriptLabError(Exception):
    """Base class for all transcript_lab failures."""


class ResponseRepairError(TranscriptLabError, ValueError):
    """The upstream response could not be turned into any segment record."""


class EmptyResponseError(ResponseRepairError):
    """The upstream service returned an empty result."""

    def __init__(self, message: str = "Empty response from model") -> None:
        super().__init__(message)


class UnrecoverableResponseError(ResponseRepairError):
    """The response structure is invalid and no record could be salvaged."""

    def __init__(
        self,
        message: str = "Response structure invalid and could not be repaired.",
    ) -> None:
        super().__init__(message)
