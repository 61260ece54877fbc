"""
Fixed-Length Parameter Vectors
==============================

Immutable numeric vectors of a fixed length, used as the parameter storage
of evolvable models. Binary operations check lengths and raise
VectorLengthError on mismatch.
"""

from __future__ import annotations

from typing import Any, Callable, Iterable, Iterator, List, Optional

import numpy as np

from core.exceptions import VectorLengthError


class Vector:
    """An immutable vector of floats with a fixed length."""

    __slots__ = ("_data",)

    def __init__(self, values: Iterable[float] = (), length: Optional[int] = None):
        data = np.array(list(values), dtype=float)
        if data.ndim != 1:
            raise ValueError("Vector values must be one-dimensional")
        if length is not None and len(data) != length:
            raise VectorLengthError(
                "Vector built with wrong number of elements",
                context={"expected": length, "actual": len(data)},
            )
        data.setflags(write=False)
        self._data = data

    @classmethod
    def _wrap(cls, data: np.ndarray) -> "Vector":
        v = cls.__new__(cls)
        data.setflags(write=False)
        v._data = data
        return v

    @classmethod
    def generate(cls, length: int, fn: Callable[[int], float]) -> "Vector":
        """Build a vector by applying fn to each index 0..length-1."""
        if length < 0:
            raise ValueError(f"Vector length must be non-negative, got {length}")
        return cls(fn(i) for i in range(length))

    @classmethod
    def replicate(cls, length: int, value: float) -> "Vector":
        """Vector of the given length with every element equal to value."""
        return cls._wrap(np.full(length, value, dtype=float))

    # ------------------------------------------------------------------
    # Access
    # ------------------------------------------------------------------

    def __len__(self) -> int:
        return len(self._data)

    def __iter__(self) -> Iterator[float]:
        return (float(x) for x in self._data)

    def __getitem__(self, i: int) -> float:
        value = self.get(i)
        if value is None:
            raise IndexError(f"Vector index {i} out of range for length {len(self)}")
        return value

    def get(self, i: int) -> Optional[float]:
        """Element at index i, or None when the index is invalid."""
        if not 0 <= i < len(self._data):
            return None
        return float(self._data[i])

    def head(self) -> float:
        """First element of a non-empty vector."""
        if not len(self._data):
            raise IndexError("head of empty Vector")
        return float(self._data[0])

    def tail(self) -> "Vector":
        """The vector without its first element."""
        if not len(self._data):
            raise IndexError("tail of empty Vector")
        return Vector._wrap(self._data[1:].copy())

    def to_list(self) -> List[float]:
        return [float(x) for x in self._data]

    def to_numpy(self) -> np.ndarray:
        """Read-only view of the underlying array."""
        return self._data

    # ------------------------------------------------------------------
    # Arithmetic
    # ------------------------------------------------------------------

    def _check_length(self, other: "Vector", op: str) -> None:
        if len(self) != len(other):
            raise VectorLengthError(
                f"Cannot {op} vectors of different lengths",
                context={"left": len(self), "right": len(other)},
            )

    def map(self, fn: Callable[[float], float]) -> "Vector":
        return Vector(fn(x) for x in self)

    def zip_with(self, fn: Callable[[float, float], float], other: "Vector") -> "Vector":
        self._check_length(other, "zip")
        return Vector(fn(a, b) for a, b in zip(self, other))

    def __add__(self, other: "Vector") -> "Vector":
        if not isinstance(other, Vector):
            return NotImplemented
        self._check_length(other, "add")
        return Vector._wrap(self._data + other._data)

    def __sub__(self, other: "Vector") -> "Vector":
        if not isinstance(other, Vector):
            return NotImplemented
        self._check_length(other, "subtract")
        return Vector._wrap(self._data - other._data)

    def scale(self, factor: float) -> "Vector":
        return Vector._wrap(self._data * factor)

    def dot(self, other: "Vector") -> float:
        """Scalar product of two vectors of the same length."""
        self._check_length(other, "take the scalar product of")
        return float(np.dot(self._data, other._data))

    def sq_norm(self) -> float:
        """Squared euclidean norm, i.e. the scalar product with itself."""
        return self.dot(self)

    def sq_diff(self, other: "Vector") -> float:
        """Squared euclidean distance to another vector of the same length."""
        return (self - other).sq_norm()

    # ------------------------------------------------------------------
    # Comparison / display
    # ------------------------------------------------------------------

    def __eq__(self, other: Any) -> bool:
        if not isinstance(other, Vector):
            return NotImplemented
        return len(self) == len(other) and bool(np.array_equal(self._data, other._data))

    def __hash__(self) -> int:
        # -0.0 == 0.0, so normalize signed zeros before hashing
        return hash((self._data + 0.0).tobytes())

    def __repr__(self) -> str:
        return f"Vector({self.to_list()})"


def nil() -> Vector:
    """The vector of length zero."""
    return Vector()


def cons(x: float, v: Vector) -> Vector:
    """Prepend x to v, giving a vector one element longer."""
    return Vector._wrap(np.concatenate(([float(x)], v.to_numpy())))
