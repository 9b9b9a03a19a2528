"""Configuration constants, export policy defaults, and .env loading.

WHY: Centralizes every tunable value so it is easy to find, update, and
override. The lyric clearing policy, the playback hysteresis, and the
repair effort bound are plain data, not buried in logic, so both humans
and coding agents can modify them confidently.

HOW: python-dotenv loads the .env file on import. Constants are defined
as module-level values read through read_float_env()/os.getenv(), so each
can be overridden per deployment without code changes. Components take
these as default parameter values; callers can always pass explicit ones.

RULES:
- Every constant has an environment override prefixed TRANSCRIPT_LAB_
- Invalid numeric overrides fail loudly at import with a ValueError
- Nothing here holds a service client or any other shared mutable state
"""

from __future__ import annotations

import math
import os

from dotenv import load_dotenv

# Load .env from the project root (where the script is run from)
load_dotenv()


def read_float_env(name: str, default: float) -> float:
    """Read a float from the environment, falling back to *default*.

    RULES:
    - Unset or empty variable returns the default
    - A value that is not a finite, non-negative number raises ValueError
    """
    raw = os.getenv(name, "").strip()
    if not raw:
        return default
    try:
        value = float(raw)
    except ValueError:
        raise ValueError(
            "{} must be a number of seconds, got {!r}.".format(name, raw)
        ) from None
    if not math.isfinite(value) or value < 0:
        raise ValueError(
            "{} must be a finite, non-negative number, got {!r}.".format(name, raw)
        )
    return value


# ---------------------------------------------------------------------------
# Lyric (LRC) clearing policy
# ---------------------------------------------------------------------------

LRC_GAP_THRESHOLD_S = read_float_env("TRANSCRIPT_LAB_LRC_GAP_THRESHOLD", 4.0)
"""A silence longer than this between two segments gets a clearing line."""

LRC_CLEAR_OFFSET_S = read_float_env("TRANSCRIPT_LAB_LRC_CLEAR_OFFSET", 4.0)
"""Clearing lines are stamped this long after the preceding segment ends."""

# ---------------------------------------------------------------------------
# Playback
# ---------------------------------------------------------------------------

ACTIVE_SEGMENT_EPSILON_S = read_float_env("TRANSCRIPT_LAB_ACTIVE_EPSILON", 0.05)
"""Hysteresis buffer that keeps the highlight from flickering at boundaries."""

# ---------------------------------------------------------------------------
# Response repair
# ---------------------------------------------------------------------------

MAX_REPAIR_BOUNDARY_ATTEMPTS = int(
    read_float_env("TRANSCRIPT_LAB_MAX_REPAIR_ATTEMPTS", 16)
)
"""How many record boundaries the last-resort walk-back tries."""

# ---------------------------------------------------------------------------
# Export defaults
# ---------------------------------------------------------------------------

DEFAULT_VARIANT = os.getenv("TRANSCRIPT_LAB_DEFAULT_VARIANT", "original").strip().lower()
