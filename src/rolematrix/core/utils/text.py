"""Text processing utilities."""

import re

from rolematrix.core.constants import PERMISSION_ID_ESCAPE, PERMISSION_ID_SEPARATOR


def normalize_segment(name: str) -> str:
    """Normalize a hierarchy name for use in a permission id.

    Converts the input string by:
    - Converting to lowercase
    - Stripping surrounding whitespace
    - Collapsing runs of inner whitespace to a single space

    Args:
        name: Module, submodule, popup or action name

    Returns:
        Normalized segment

    Examples:
        >>> normalize_segment("  Leave   Management ")
        'leave management'
        >>> normalize_segment("HR Setup")
        'hr setup'
    """
    return re.sub(r"\s+", " ", name.strip().lower())


def escape_segment(segment: str) -> str:
    """Escape the separator and escape characters inside a segment."""
    return segment.replace(PERMISSION_ID_ESCAPE, PERMISSION_ID_ESCAPE * 2).replace(
        PERMISSION_ID_SEPARATOR, PERMISSION_ID_ESCAPE + PERMISSION_ID_SEPARATOR
    )


def split_escaped(value: str) -> list[str]:
    """Split an escaped, separator-joined string back into raw segments.

    Args:
        value: String produced by joining escape_segment() results

    Returns:
        The unescaped segments, in order

    Raises:
        ValueError: If the string ends with a dangling escape character
    """
    segments: list[str] = []
    current: list[str] = []
    chars = iter(value)
    for char in chars:
        if char == PERMISSION_ID_ESCAPE:
            escaped = next(chars, None)
            if escaped is None:
                raise ValueError(f"Dangling escape in {value!r}")
            current.append(escaped)
        elif char == PERMISSION_ID_SEPARATOR:
            segments.append("".join(current))
            current = []
        else:
            current.append(char)
    segments.append("".join(current))
    return segments
