"""
File utility functions for document URIs and source offsets.
"""

from pathlib import Path
from typing import Optional, Tuple
from urllib.parse import unquote, urlparse


def uri_to_path(uri: str) -> Optional[Path]:
    """
    Convert a ``file://`` URI into a filesystem path.

    Args:
        uri: Document URI as sent by the editor

    Returns:
        The path, or None for non-file schemes (untitled buffers, git views)
    """
    parsed = urlparse(uri)
    if parsed.scheme != "file":
        return None

    path = unquote(parsed.path)
    # file:///c%3A/project on Windows
    if len(path) >= 3 and path[0] == "/" and path[2] == ":":
        path = path[1:]
    return Path(path)


def offset_to_position(text: str, offset: int) -> Tuple[int, int]:
    """Map a character offset in ``text`` to a zero-based (line, character)."""
    offset = max(0, min(offset, len(text)))
    line = text.count("\n", 0, offset)
    line_start = text.rfind("\n", 0, offset) + 1
    return line, offset - line_start
