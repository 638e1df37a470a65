"""Shared utilities for the slide renderers.

Text helpers for core PDF fonts and story summaries.
"""

from typing import Callable, List

NO_DATA_TEXT = "No data available"


def sanitize_text(obj):
    """
    Recursively replace unicode chars that fpdf core fonts can't handle.

    Args:
        obj: String, dict, list, or other object to sanitize.

    Returns:
        Sanitized object with problematic unicode characters replaced.
    """
    if isinstance(obj, str):
        # Replace em-dash, en-dash, smart quotes, bullets, arrows
        obj = obj.replace('\u2014', '-').replace('\u2013', '-')
        obj = obj.replace('\u2018', "'").replace('\u2019', "'")
        obj = obj.replace('\u201c', '"').replace('\u201d', '"')
        obj = obj.replace('\u2022', '*').replace('\u2026', '...')
        obj = obj.replace('\u27a4', '>')
        obj = obj.replace('\u2011', '-')  # Non-breaking hyphen
        obj = obj.replace('\u00a0', ' ')  # Non-breaking space
        obj = obj.replace('\u2003', ' ')  # Em space
        obj = obj.replace('\u2002', ' ')  # En space
        # Anything else outside latin-1 cannot be drawn with core fonts
        return obj.encode("latin-1", "replace").decode("latin-1")
    elif isinstance(obj, dict):
        return {k: sanitize_text(v) for k, v in obj.items()}
    elif isinstance(obj, list):
        return [sanitize_text(x) for x in obj]
    return obj


def wrap_text(text: str, width: float, measure: Callable[[str], float]) -> List[str]:
    """
    Greedy word wrap.

    Args:
        text: Text to wrap; explicit newlines are kept as line breaks.
        width: Maximum line width in the measure's units.
        measure: Returns the rendered width of a string.

    Returns:
        Wrapped lines. A single word wider than ``width`` gets its own line.
    """
    lines: List[str] = []
    for paragraph in text.split("\n"):
        current = ""
        for word in paragraph.split():
            candidate = f"{current} {word}" if current else word
            if current and measure(candidate) > width:
                lines.append(current)
                current = word
            else:
                current = candidate
        lines.append(current)
    return lines


def truncate(text: str, limit: int) -> str:
    """Cut text to ``limit`` characters, marking the cut with '...'."""
    if len(text) <= limit:
        return text
    return text[: max(limit - 3, 0)].rstrip() + "..."
