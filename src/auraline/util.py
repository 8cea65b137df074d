from __future__ import annotations
from pathlib import Path

SUPERSCRIPT_DIGITS = "⁰¹²³⁴⁵⁶⁷⁸⁹"


def cat(path: Path) -> str | None:
    """
    Return the contents of the given file with leading & trailing whitespace
    stripped.  If the file does not exist or cannot be read as UTF-8 text,
    return `None`.
    """
    try:
        return path.read_text(encoding="utf-8").strip()
    except (OSError, UnicodeDecodeError):
        return None


def to_superscript(s: str) -> str:
    """Replace each ASCII digit in ``s`` with its Unicode superscript form"""
    return "".join(
        SUPERSCRIPT_DIGITS[ord(c) - ord("0")] if "0" <= c <= "9" else c for c in s
    )


def format_duration(secs: float) -> str:
    """
    Format a duration in seconds using the largest unit (``ns``, ``μs``,
    ``ms``, or ``s``) that keeps the value at or above one
    """
    if secs < 0.000001:
        return f"{secs * 1_000_000_000:.0f}ns"
    elif secs < 0.001:
        return f"{secs * 1_000_000:.0f}μs"
    elif secs < 1:
        return f"{secs * 1_000:.0f}ms"
    else:
        return f"{secs:.2f}s"
