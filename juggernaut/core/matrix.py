"""Dense two-dimensional matrices backed by ``float64`` numpy arrays."""

from __future__ import annotations

from typing import Callable, List, Sequence, Tuple

import numpy as np

from .errors import ShapeError
from .types import Array

_RNG = np.random.default_rng()


def seed(value: int | None) -> None:
    """Reseed the process-wide generator used by :meth:`Matrix.random`."""

    global _RNG
    _RNG = np.random.default_rng(value)


def _check_dims(m: int, n: int) -> None:
    if m < 0 or n < 0:
        raise ShapeError(f"Matrix dimensions must be non-negative, got {m}x{n}")


class Matrix:
    """An ``M x N`` matrix of doubles.

    Matrices behave as values: the constructor copies its input and every
    arithmetic helper returns a new instance. Shapes are never broadcast;
    any mismatch raises :class:`~juggernaut.core.errors.ShapeError`.
    """

    __slots__ = ("_data",)

    def __init__(self, rows: Sequence[Sequence[float]] | Array) -> None:
        if isinstance(rows, np.ndarray):
            data = np.array(rows, dtype=np.float64)
        else:
            rows = list(rows)
            if any(np.ndim(row) != 1 for row in rows):
                raise ShapeError("Matrix rows must be one-dimensional sequences of numbers")
            rows = [list(row) for row in rows]
            widths = {len(row) for row in rows}
            if len(widths) > 1:
                raise ShapeError(f"All rows must have the same length, got {sorted(widths)}")
            width = widths.pop() if widths else 0
            data = np.array(rows, dtype=np.float64).reshape(len(rows), width)
        if data.ndim != 2:
            raise ShapeError(f"Matrix requires two dimensions, got {data.ndim}")
        self._data = data

    # ------------------------------------------------------------------
    # Construction

    @classmethod
    def generate(cls, m: int, n: int, f: Callable[[], float]) -> "Matrix":
        """Return an ``m x n`` matrix filled by calling ``f`` once per cell.

        ``f`` is invoked row by row, left to right.
        """

        _check_dims(m, n)
        values = np.fromiter((f() for _ in range(m * n)), dtype=np.float64, count=m * n)
        return cls(values.reshape(m, n))

    @classmethod
    def zero(cls, m: int, n: int) -> "Matrix":
        _check_dims(m, n)
        return cls(np.zeros((m, n), dtype=np.float64))

    @classmethod
    def random(cls, m: int, n: int, rng: np.random.Generator | None = None) -> "Matrix":
        """Return an ``m x n`` matrix with elements drawn from ``[-1.0, 1.0)``."""

        _check_dims(m, n)
        rng = rng if rng is not None else _RNG
        return cls(rng.uniform(-1.0, 1.0, size=(m, n)))

    # ------------------------------------------------------------------
    # Shape and element access

    @property
    def shape(self) -> Tuple[int, int]:
        return int(self._data.shape[0]), int(self._data.shape[1])

    def rows(self) -> int:
        return int(self._data.shape[0])

    def cols(self) -> int:
        if self.rows() == 0:
            raise ShapeError("A matrix without rows has no column count")
        return int(self._data.shape[1])

    def _check_index(self, m: int, n: int) -> None:
        rows, cols = self.shape
        if not (0 <= m < rows and 0 <= n < cols):
            raise IndexError(f"Index ({m}, {n}) out of bounds for {rows}x{cols} matrix")

    def get(self, m: int, n: int) -> float:
        self._check_index(m, n)
        return float(self._data[m, n])

    def set(self, m: int, n: int, value: float) -> None:
        self._check_index(m, n)
        self._data[m, n] = float(value)

    def row(self, m: int) -> List[float]:
        if not 0 <= m < self.rows():
            raise IndexError(f"Row {m} out of bounds for {self.rows()} rows")
        return self._data[m].tolist()

    # ------------------------------------------------------------------
    # Arithmetic

    def _require_nonempty(self, op: str) -> None:
        if self._data.size == 0:
            raise ShapeError(f"Cannot {op} a zero-sized {self.shape[0]}x{self.shape[1]} matrix")

    def _require_same_shape(self, other: "Matrix", op: str) -> None:
        if self.shape != other.shape:
            raise ShapeError(f"Cannot {op} {self.shape} and {other.shape} matrices")

    def dot(self, other: "Matrix") -> "Matrix":
        """Matrix product; requires ``self.cols() == other.rows()``."""

        self._require_nonempty("multiply")
        other._require_nonempty("multiply")
        if self.cols() != other.rows():
            raise ShapeError(
                f"Cannot multiply {self.rows()}x{self.cols()} by "
                f"{other.rows()}x{other.cols()}: inner dimensions differ"
            )
        return Matrix(self._data @ other._data)

    def transpose(self) -> "Matrix":
        return Matrix(self._data.T)

    def apply(self, fn: Callable[[Array], Array]) -> "Matrix":
        """Apply an array-aware element-wise function to the whole matrix at once."""

        out = np.asarray(fn(self._data), dtype=np.float64)
        if out.shape != self._data.shape:
            raise ShapeError(f"Element-wise function changed shape {self.shape} -> {out.shape}")
        return Matrix(out)

    def map(self, fn: Callable[[float], float]) -> "Matrix":
        """Call a scalar function once per element, row by row."""

        return Matrix(np.vectorize(fn, otypes=[np.float64])(self._data))

    def hadamard(self, other: "Matrix") -> "Matrix":
        self._require_same_shape(other, "multiply element-wise")
        return Matrix(self._data * other._data)

    def add(self, other: "Matrix") -> "Matrix":
        self._require_same_shape(other, "add")
        return Matrix(self._data + other._data)

    def sub(self, other: "Matrix") -> "Matrix":
        self._require_same_shape(other, "subtract")
        return Matrix(self._data - other._data)

    def scale(self, factor: float) -> "Matrix":
        return Matrix(self._data * float(factor))

    def allclose(self, other: "Matrix", tol: float = 1e-9) -> bool:
        return self.shape == other.shape and bool(np.allclose(self._data, other._data, rtol=0.0, atol=tol))

    # ------------------------------------------------------------------
    # Conversion

    def to_list(self) -> List[List[float]]:
        return self._data.tolist()

    def to_array(self) -> Array:
        return self._data.copy()

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, Matrix):
            return NotImplemented
        return self.shape == other.shape and bool(np.array_equal(self._data, other._data))

    __hash__ = None  # type: ignore[assignment]

    def __repr__(self) -> str:
        return f"Matrix({self.to_list()!r})"


__all__ = ["Matrix", "seed"]
