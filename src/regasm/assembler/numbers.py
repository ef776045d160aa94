"""
Integer literal parsing with C-style base detection.

| Spelling    | Base | Example | Value |
|-------------|------|---------|-------|
| 0x / 0X     | 16   | 0x1A    | 26    |
| leading 0   | 8    | 0755    | 493   |
| otherwise   | 10   | 123     | 123   |

The whole text must be consumed: "10abc", "08" and a bare "0x" are not
numbers. Range checking is left to the caller.
"""

from typing import Optional
import re

_HEX = re.compile(r"0[xX]([0-9a-fA-F]+)")
_OCTAL = re.compile(r"0([0-7]*)")
_DECIMAL = re.compile(r"[1-9][0-9]*")


def parse_c_integer(text: str) -> Optional[int]:
    """
    Parse an unsigned integer, detecting the base from its prefix.

    Args:
        text: The literal, without sign or surrounding whitespace

    Returns:
        The value, or None if the text is not entirely a number
    """
    if match := _HEX.fullmatch(text):
        return int(match.group(1), 16)
    if match := _OCTAL.fullmatch(text):
        return int(match.group(1) or "0", 8)
    if _DECIMAL.fullmatch(text):
        return int(text)
    return None
