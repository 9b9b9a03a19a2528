"""Pydantic model for raw, pre-normalization segment records.

WHY: Records recovered from the model response are untrusted. The schema
asks for string timestamps, but models also emit numbers (``"startTime":
12.5``) or nulls, and the translation pass adds an extra field. A typed
model makes the accepted shape explicit and coerces the stray types in
one place instead of at every call site.

HOW: RawRecord mirrors the upstream JSON keys exactly (camelCase) and
coerces every field to ``str`` before validation. Unknown keys are
ignored so speaker labels or confidences do not break parsing.

RULES:
- startTime / endTime / text are always strings after validation
- Missing or null timestamps become "" (normalized to zero later)
- Missing or null text becomes ""
- translatedText stays None when absent; it is never invented
- Python 3.9+ compatible (Optional from typing in model fields)
"""

from __future__ import annotations

from typing import Any, Optional

from pydantic import BaseModel, ConfigDict, Field, field_validator


def _coerce_str(value: Any) -> str:
    if value is None:
        return ""
    if isinstance(value, str):
        return value
    return str(value)


class RawRecord(BaseModel):
    """One segment record exactly as recovered from the response blob."""

    model_config = ConfigDict(extra="ignore", frozen=True)

    startTime: str = Field(default="", description="Raw start timestamp token.")
    endTime: str = Field(default="", description="Raw end timestamp token.")
    text: str = Field(default="", description="Fully unescaped segment text.")
    translatedText: Optional[str] = Field(
        default=None,
        description="Translation attached by the translation pass, if any.",
    )

    @field_validator("startTime", "endTime", "text", mode="before")
    @classmethod
    def _coerce_required(cls, value: Any) -> str:
        return _coerce_str(value)

    @field_validator("translatedText", mode="before")
    @classmethod
    def _coerce_optional(cls, value: Any) -> Optional[str]:
        if value is None:
            return None
        return _coerce_str(value)
