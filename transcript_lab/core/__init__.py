"""Core repair, normalization, and intermediate representation modules.

WHY: The core package contains the stable heart of the converter —
the IR dataclasses, the timestamp normalizer, the response repair
cascade, and the active-segment resolver. These are consumed by all
formatters and by the CLI, and must remain backward-compatible.

HOW: ir.py defines the data structures, timestamps.py turns arbitrary
timestamp tokens into canonical seconds, repair.py recovers raw records
from degraded model output, assembler.py builds Segments from records,
playback.py answers "which segment is active right now".

RULES:
- IR dataclasses are the contract — change with care
- Every function here is pure: no I/O, no shared mutable state
- Formatter-specific logic never lives in core
"""
