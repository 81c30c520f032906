"""Square numeric grid that grows to fit the largest index written.

The matrix is the backing store of the confusion matrix. It is not
thread-safe on its own; callers serialize access.
"""

from typing import Any

import numpy as np
from numpy.typing import NDArray


class ResizableMatrix:
    """An N×N float64 grid addressed by two non-negative indices.

    Reads beyond the current order return zero (or None for whole rows and
    columns) and never grow the matrix. Writes grow it directly to the
    order required by the larger index, preserving stored values.

    Example:
        >>> m = ResizableMatrix()
        >>> m.set(2, 0, 1.5)
        >>> m.size
        3
        >>> m.at(2, 0), m.at(7, 7)
        (1.5, 0.0)
    """

    def __init__(self) -> None:
        """Initialize an empty matrix."""
        self._data: NDArray[np.float64] = np.zeros((0, 0), dtype=np.float64)

    @property
    def size(self) -> int:
        """Current order of the matrix."""
        return self._data.shape[0]

    def reset(self) -> None:
        """Return to the empty state."""
        self._data = np.zeros((0, 0), dtype=np.float64)

    def set(self, i: int, j: int, value: float) -> None:
        """Store value at (i, j), growing the matrix if needed."""
        self._resize(max(i + 1, j + 1))
        self._data[i, j] = value

    def add(self, i: int, j: int, value: float) -> None:
        """Add value to the cell at (i, j), growing the matrix if needed."""
        self.set(i, j, self.at(i, j) + value)

    def at(self, i: int, j: int) -> float:
        """Return the value at (i, j), or 0 outside the current bounds."""
        if 0 <= i < self.size and 0 <= j < self.size:
            return float(self._data[i, j])
        return 0.0

    def row(self, i: int) -> NDArray[np.float64] | None:
        """Return a copy of row i, or None if out of bounds."""
        if 0 <= i < self.size:
            return self._data[i, :].copy()
        return None

    def column(self, j: int) -> NDArray[np.float64] | None:
        """Return a copy of column j, or None if out of bounds."""
        if 0 <= j < self.size:
            return self._data[:, j].copy()
        return None

    def row_sum(self, i: int) -> float:
        """Return the sum of row i (0 if out of bounds)."""
        if 0 <= i < self.size:
            return float(self._data[i, :].sum())
        return 0.0

    def col_sum(self, j: int) -> float:
        """Return the sum of column j (0 if out of bounds)."""
        if 0 <= j < self.size:
            return float(self._data[:, j].sum())
        return 0.0

    def row_sums(self) -> NDArray[np.float64]:
        """Return the sums of all rows."""
        return self._data.sum(axis=1)

    def col_sums(self) -> NDArray[np.float64]:
        """Return the sums of all columns."""
        return self._data.sum(axis=0)

    def diagonal(self) -> NDArray[np.float64]:
        """Return a copy of the main diagonal."""
        return np.diagonal(self._data).copy()

    def trace(self) -> float:
        """Return the sum of the main diagonal."""
        return float(np.trace(self._data))

    def sum(self) -> float:
        """Return the sum of all cells."""
        return float(self._data.sum())

    def to_array(self) -> NDArray[np.float64]:
        """Return a copy of the full grid."""
        return self._data.copy()

    def to_list(self) -> list[list[float]]:
        """Return the grid as nested lists."""
        rows: list[list[Any]] = self._data.tolist()
        return rows

    def _resize(self, n: int) -> None:
        """Grow to order n, keeping every stored value at its index."""
        old = self.size
        if n <= old:
            return

        data = np.zeros((n, n), dtype=np.float64)
        data[:old, :old] = self._data
        self._data = data

    def __len__(self) -> int:
        """Return the matrix order."""
        return self.size

    def __repr__(self) -> str:
        """String representation."""
        return f"ResizableMatrix(size={self.size})"
