"""CLI helper utilities for obtaining the raw command line."""

import os
from typing import BinaryIO, Sequence

from ..errors import LineTooLongError


def read_line(stream: BinaryIO) -> str:
    """Read the first line of a binary stream without its line terminator.

    Bytes are decoded the way the OS decodes command-line arguments, so
    undecodable bytes survive unchanged into the spawned programs' argv.
    Returns an empty string at end of input.
    """
    return os.fsdecode(stream.readline().rstrip(b"\r\n"))


def join_words(words: Sequence[str]) -> str:
    """Join command-line words back into one raw line."""
    return " ".join(words)


def check_line_length(line: str, max_line_bytes: int) -> None:
    """Reject lines longer than the configured limit.

    Raises:
        LineTooLongError: If the encoded line exceeds max_line_bytes
    """
    length = len(os.fsencode(line))
    if length > max_line_bytes:
        raise LineTooLongError(length, max_line_bytes)
