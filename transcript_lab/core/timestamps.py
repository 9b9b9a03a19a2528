"""Timestamp normalization and timestamp rendering for every output format.

WHY: The generation model is asked for ``MM:SS.mmm`` but in practice emits
``HH:MM:SS.mmm``, ``MM:SS:mmm`` (a colon where the dot belongs),
``HH:MM:SS:mmm``, bare seconds (``"65.5"``), comma decimals (``"00:23,5"``),
and unit-suffixed values (``"12.5s"``), sometimes all in the same response.
Every consumer needs one canonical number.

HOW: normalize_timestamp() cleans the token, decomposes it by colon count,
recomputes total milliseconds, and re-derives the display string from the
total so overflowing fields ("00:65.250") roll into larger units. The
format_* helpers render whole milliseconds into the encodings used by the
canonical display, SRT, LRC, and TTML.

RULES:
- normalize_timestamp() never raises; unparseable, negative, NaN, or
  infinite input becomes 0.0 / "00:00:00.000"
- 3-component tokens are ambiguous: a dotted third part means HH:MM:SS.mmm;
  a bare third part with exactly 3 digits or a value above 59 means
  MM:SS:mmm; anything else is HH:MM:SS. A real HH:MM:SS whose seconds
  field is zero-padded to 3 digits (or garbled above 59) is misread as
  MM:SS:mmm. This is accepted; the notation itself carries no more signal.
- Fractions keep their first 3 digits, right-padded ("5" → 500 ms)
- All rendering rounds half-up to whole milliseconds (hundredths for LRC)
"""

from __future__ import annotations

import math
import re
from typing import NamedTuple, Optional, Tuple, Union

TimestampToken = Union[str, int, float, None]

CANONICAL_ZERO = "00:00:00.000"

# Unit suffixes the model tacks onto values ("12.5s", "300ms", "4 sec").
_UNIT_SUFFIX_RE = re.compile(r"\s*(?:ms|msec|secs?|seconds?|s)$")

# Anything that cannot be part of a numeric timestamp after cleanup.
_NON_TIMESTAMP_RE = re.compile(r"[^0-9:.\-]")

_MS_PER_SECOND = 1000
_MS_PER_MINUTE = 60 * _MS_PER_SECOND
_MS_PER_HOUR = 60 * _MS_PER_MINUTE


class NormalizedTimestamp(NamedTuple):
    """Canonical seconds plus the ``HH:MM:SS.mmm`` display string."""

    seconds: float
    display: str


def _to_int(part: str) -> int:
    try:
        return int(part)
    except ValueError:
        return 0


def _fraction_to_ms(fraction: str) -> int:
    """Read a decimal fraction as milliseconds: "5" → 500, "2504" → 250."""
    digits = fraction[:3].ljust(3, "0")
    return _to_int(digits) if digits.isdigit() else 0


def _split_seconds(part: str) -> Tuple[int, int]:
    """Split a "SS" or "SS.mmm" component into (seconds, milliseconds)."""
    whole, _, fraction = part.partition(".")
    return _to_int(whole), _fraction_to_ms(fraction)


def _clean_token(token: str) -> str:
    text = token.strip().lower().replace(",", ".")
    text = _UNIT_SUFFIX_RE.sub("", text)
    return _NON_TIMESTAMP_RE.sub("", text)


def _seconds_to_ms(seconds: float) -> int:
    if not math.isfinite(seconds):
        return 0
    return int(math.floor(seconds * _MS_PER_SECOND + 0.5))


def _colon_parts_to_ms(parts: list) -> int:
    hours = minutes = seconds = millis = 0

    if len(parts) == 4:
        # HH:MM:SS:mmm: colon used where the millisecond dot belongs
        hours = _to_int(parts[0])
        minutes = _to_int(parts[1])
        seconds = _to_int(parts[2].partition(".")[0])
        millis = _fraction_to_ms(parts[3])
    elif len(parts) == 3:
        first, second, third = parts
        if "." in third:
            hours = _to_int(first)
            minutes = _to_int(second)
            seconds, millis = _split_seconds(third)
        else:
            value = _to_int(third)
            if len(third) == 3 or value > 59:
                # MM:SS:mmm
                minutes = _to_int(first)
                seconds = _to_int(second)
                millis = value
            else:
                hours = _to_int(first)
                minutes = _to_int(second)
                seconds = value
    elif len(parts) == 2:
        minutes = _to_int(parts[0])
        seconds, millis = _split_seconds(parts[1])
    else:
        return 0

    return hours * _MS_PER_HOUR + minutes * _MS_PER_MINUTE + seconds * _MS_PER_SECOND + millis


def _token_to_ms(token: TimestampToken) -> int:
    if token is None or isinstance(token, bool):
        return 0
    if isinstance(token, (int, float)):
        return _seconds_to_ms(float(token))

    cleaned = _clean_token(str(token))
    if not cleaned:
        return 0

    if ":" not in cleaned:
        try:
            return _seconds_to_ms(float(cleaned))
        except ValueError:
            return 0

    return _colon_parts_to_ms(cleaned.split(":"))


def normalize_timestamp(token: TimestampToken) -> NormalizedTimestamp:
    """Normalize an arbitrary timestamp token into canonical form.

    Args:
        token: A string in any notation the model emits, a number of
               seconds, or None.

    Returns:
        NormalizedTimestamp with seconds at millisecond resolution and
        the reduced ``HH:MM:SS.mmm`` display string.
    """
    total_ms = max(_token_to_ms(token), 0)
    return NormalizedTimestamp(total_ms / _MS_PER_SECOND, _format_ms(total_ms, "."))


def parse_timestamp(token: TimestampToken) -> float:
    """Shorthand for ``normalize_timestamp(token).seconds``."""
    return normalize_timestamp(token).seconds


# ---------------------------------------------------------------------------
# Rendering
# ---------------------------------------------------------------------------


def _format_ms(total_ms: int, separator: str) -> str:
    total_ms = max(total_ms, 0)
    hours, rest = divmod(total_ms, _MS_PER_HOUR)
    minutes, rest = divmod(rest, _MS_PER_MINUTE)
    seconds, millis = divmod(rest, _MS_PER_SECOND)
    return "{:02d}:{:02d}:{:02d}{}{:03d}".format(hours, minutes, seconds, separator, millis)


def format_canonical(seconds: float) -> str:
    """Render seconds as the canonical ``HH:MM:SS.mmm`` string."""
    return _format_ms(_seconds_to_ms(seconds), ".")


def format_srt_time(seconds: float) -> str:
    """Render seconds as an SRT timestamp: ``HH:MM:SS,mmm`` (comma separator)."""
    return _format_ms(_seconds_to_ms(seconds), ",")


def format_lrc_time(seconds: float) -> str:
    """Render seconds as an LRC tag: ``[MM:SS.hh]``.

    RULES:
    - hh is hundredths of a second, rounded half-up
    - Minutes are total minutes (no hours field), at least 2 digits
    - Negative or non-finite input renders as [00:00.00]
    """
    if not math.isfinite(seconds) or seconds < 0:
        seconds = 0.0
    centis = int(math.floor(seconds * 100 + 0.5))
    minutes, rest = divmod(centis, 6000)
    secs, hundredths = divmod(rest, 100)
    return "[{:02d}:{:02d}.{:02d}]".format(minutes, secs, hundredths)


def format_ttml_time(value: Union[str, float]) -> str:
    """Render a TTML ``begin``/``end`` clock value (``HH:MM:SS.mmm``).

    Numbers (the formatters' path) are rendered canonically. Display
    strings from outside the pipeline, such as a player's ``MM:SS.mmm``
    cue times, are passed through, with a 2-component value padded by a
    leading ``00:``.
    """
    if isinstance(value, str):
        text = value.strip()
        if text.count(":") == 1:
            return "00:" + text
        return text
    return format_canonical(value)


def millis_of(seconds: Optional[float]) -> int:
    """Whole milliseconds of a seconds value, 0 for None or non-finite."""
    if seconds is None:
        return 0
    return max(_seconds_to_ms(seconds), 0)
