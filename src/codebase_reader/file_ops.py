"""
Size-limited file reading for Codebase Reader.
"""

from pathlib import Path
from typing import Union

from .exceptions import FileAccessError

PathLike = Union[str, Path]


def read_source(filepath: PathLike, max_size: int) -> bytes:
    """
    Read a file's raw bytes, refusing anything larger than ``max_size``.

    Args:
        filepath: File to read
        max_size: Largest accepted size in bytes

    Returns:
        File contents

    Raises:
        FileAccessError: If the file cannot be read or exceeds the limit
    """
    try:
        with open(filepath, "rb") as f:
            # One extra byte tells "exactly at the limit" from "over it"
            content = f.read(max_size + 1)
    except OSError as e:
        raise FileAccessError(filepath, f"OS error: {e}")

    if len(content) > max_size:
        raise FileAccessError(filepath, f"File exceeds size limit of {max_size} bytes")
    return content
