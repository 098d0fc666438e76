"""Two-dimensional array helpers with column-major linear indexing.

Arrays are numpy arrays. Linear indices follow column-major order, so index
``i + rows * j`` addresses row ``i`` of column ``j``.
"""

from __future__ import annotations

from pathlib import Path
from typing import Any, Callable, Union

import numpy as np

PathLike = Union[str, Path]


def _as_2d(a: Any) -> np.ndarray:
    array = np.asarray(a)
    if array.ndim == 1:
        return array.reshape(-1, 1)
    if array.ndim != 2:
        raise ValueError(f"expected a two-dimensional array, got {array.ndim} dimensions")
    return array


def _format_value(value: Any) -> str:
    if isinstance(value, (bool, np.bool_)):
        return str(int(value))
    if isinstance(value, (int, np.integer)):
        return str(int(value))
    return format(float(value), "g")


def format_array(a: Any) -> str:
    """Return the text form: ``rows cols`` then one line per row.

    Each value is followed by a single space.
    """
    array = _as_2d(a)
    rows, cols = array.shape
    lines = [f"{rows} {cols}\n"]
    for row in array:
        lines.append("".join(f"{_format_value(value)} " for value in row) + "\n")
    return "".join(lines)


def parse_array(text: str) -> np.ndarray:
    """Parse the text form written by :func:`format_array` into a float array."""
    tokens = text.split()
    if len(tokens) < 2:
        raise ValueError("missing array dimensions")
    try:
        rows, cols = int(tokens[0]), int(tokens[1])
    except ValueError:
        raise ValueError("array dimensions must be integers") from None
    if rows < 0 or cols < 0:
        raise ValueError(f"array dimensions must be non-negative, got {rows} {cols}")
    values = tokens[2:]
    if len(values) < rows * cols:
        raise ValueError(f"expected {rows * cols} values, found {len(values)}")
    try:
        data = [float(value) for value in values[: rows * cols]]
    except ValueError as error:
        raise ValueError(f"invalid array value: {error}") from None
    return np.array(data, dtype=float).reshape(rows, cols)


def save_array(a: Any, filename: PathLike) -> None:
    """Write *a* to *filename* in the text form."""
    with open(filename, "w", encoding="utf-8") as handle:
        handle.write(format_array(a))


def load_array(filename: PathLike) -> np.ndarray:
    """Read an array written by :func:`save_array`."""
    with open(filename, encoding="utf-8") as handle:
        return parse_array(handle.read())


def sub2ind(shape: tuple[int, int], row: int, col: int) -> int:
    """Return the column-major linear index of (row, col)."""
    rows, cols = shape
    if not (0 <= row < rows and 0 <= col < cols):
        raise IndexError(f"subscript ({row}, {col}) outside shape {shape}")
    return row + rows * col


def ind2sub(shape: tuple[int, int], index: int) -> tuple[int, int]:
    """Return the (row, col) of a column-major linear index."""
    rows, cols = shape
    if not 0 <= index < rows * cols:
        raise IndexError(f"index {index} outside shape {shape}")
    return index % rows, index // rows


def _check_block(shape: tuple[int, int], r0: int, r1: int, c0: int, c1: int) -> None:
    rows, cols = shape
    if r0 < 0 or c0 < 0 or r1 >= rows or c1 >= cols:
        raise IndexError(f"block [{r0}:{r1}, {c0}:{c1}] outside shape {shape}")
    if r1 < r0 or c1 < c0:
        raise ValueError(f"empty block [{r0}:{r1}, {c0}:{c1}]")


def getsub(a: Any, r0: int, r1: int, c0: int, c1: int) -> np.ndarray:
    """Return a copy of rows r0..r1 and columns c0..c1, bounds inclusive."""
    array = _as_2d(a)
    _check_block(array.shape, r0, r1, c0, c1)
    return array[r0 : r1 + 1, c0 : c1 + 1].copy()


def setsub(a: np.ndarray, r0: int, r1: int, c0: int, c1: int, b: Any) -> None:
    """Overwrite rows r0..r1 and columns c0..c1 of *a* in place with *b*."""
    if a.ndim != 2:
        raise ValueError("target must be a two-dimensional array")
    _check_block(a.shape, r0, r1, c0, c1)
    block = _as_2d(b)
    expected = (r1 - r0 + 1, c1 - c0 + 1)
    if block.shape != expected:
        raise ValueError(f"block shape {block.shape} does not match {expected}")
    a[r0 : r1 + 1, c0 : c1 + 1] = block


def repmat(a: Any, m: int, n: int) -> np.ndarray:
    """Tile *a* m times down and n times across."""
    if m < 0 or n < 0:
        raise ValueError("repetition counts must be non-negative")
    return np.tile(_as_2d(a), (m, n))


def diag(a: Any) -> np.ndarray:
    """Build a diagonal matrix from a vector, or extract a matrix's diagonal.

    A row or column vector gives a square matrix with it on the diagonal;
    any other matrix gives its diagonal as a column.
    """
    array = _as_2d(a)
    rows, cols = array.shape
    if rows == 1 or cols == 1:
        return np.diag(array.ravel())
    return np.diagonal(array).copy().reshape(-1, 1)


def make_homogeneous(a: Any) -> np.ndarray:
    """Divide every column by its last entry (plus the smallest normal float)."""
    array = _as_2d(a).astype(float)
    if array.size == 0:
        return array.copy()
    return array / (array[-1, :] + np.finfo(float).tiny)


def normalise_cols(a: Any) -> np.ndarray:
    """Scale every column to unit Euclidean length."""
    array = _as_2d(a).astype(float)
    lengths = np.sqrt(np.sum(array * array, axis=0))
    return array / (lengths + np.finfo(float).tiny)


def find(a: Any, predicate: Callable[[Any], bool]) -> list[int]:
    """Return the column-major linear indices of the values matching *predicate*."""
    array = _as_2d(a)
    return [
        index
        for index, value in enumerate(array.flatten(order="F"))
        if predicate(value)
    ]