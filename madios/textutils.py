"""Text, file and clock helpers used when preparing corpora."""

from __future__ import annotations

import time
import warnings
from typing import Iterable, TextIO

START_MARKER = "*"
END_MARKER = "#"


def getlines(stream: TextIO | Iterable[str]) -> list[str]:
    """Read every line of *stream*, without the line terminators."""
    return [line.rstrip("\r\n") for line in stream]


def tokenise(line: str, delimiter: str | None = None) -> list[str]:
    """Split *line* on whitespace, or on *delimiter* when one is given.

    With a delimiter, empty fields between delimiters are kept, but a
    single trailing empty field (a line ending in the delimiter) is not.
    """
    if delimiter is None:
        return line.split()
    if not line:
        return []
    tokens = line.split(delimiter)
    if tokens and tokens[-1] == "":
        tokens.pop()
    return tokens


def uppercase(text: str) -> str:
    """Return an upper-case copy of *text*."""
    return text.upper()


def lowercase(text: str) -> str:
    """Return a lower-case copy of *text*."""
    return text.lower()


def trim_spaces(text: str) -> str:
    """Strip leading and trailing whitespace from *text*."""
    return text.strip()


def read_sequences_from_file(filename: str) -> list[list[str]]:
    """Read token sequences, one per non-blank line.

    Lines may be wrapped in the ``*`` and ``#`` start and end markers, which
    are removed, or be plain whitespace-separated tokens. A single warning is
    issued if any line lacks the markers.
    """
    sequences: list[list[str]] = []
    missing_markers = False
    with open(filename, encoding="utf-8") as handle:
        for line in getlines(handle):
            tokens = tokenise(line)
            if not tokens:
                continue
            has_start = tokens[0] == START_MARKER
            has_end = len(tokens) > int(has_start) and tokens[-1] == END_MARKER
            if has_start:
                tokens = tokens[1:]
            if has_end:
                tokens = tokens[:-1]
            if not (has_start and has_end):
                missing_markers = True
            if tokens:
                sequences.append(tokens)
    if missing_markers:
        warnings.warn(
            f"{filename}: some sequences lack the '{START_MARKER}' and "
            f"'{END_MARKER}' markers; reading them as plain token lines",
            UserWarning,
            stacklevel=2,
        )
    return sequences


def get_time() -> float:
    """Return the system time in seconds."""
    return time.time()


def seed_from_time() -> int:
    """Return an unsigned 32-bit random seed derived from the clock."""
    return time.time_ns() & 0xFFFFFFFF