# --- Purpose: The dense Matrix value type used by the network arithmetic. ---

import logging
import numbers
import operator
from typing import Callable, Iterator, Tuple

import numpy as np

from .config import DTYPE, DISPLAY_FORMAT, DISPLAY_SEPARATOR, TSV_DELIMITER
from .errors import InvalidDimension, ShapeMismatch, IndexOutOfRange
from .observability import get_profiler

logger = logging.getLogger(__name__)


def _as_cells(values) -> np.ndarray:
    """Normalize varargs (or a single sequence passed in their place) into a flat float array."""
    if len(values) == 1 and np.ndim(values[0]) > 0:
        values = values[0]
    cells = np.asarray(values, dtype=DTYPE)
    if cells.ndim != 1:
        raise ValueError(f"Expected a flat sequence of reals, got an array of shape {cells.shape}.")
    return cells


class Matrix:
    """
    A two-dimensional array of doubles with row-major layout.

    Every instance owns its backing NumPy array, which is made read-only once
    the instance is built. Operations that look like updates (``row(i, ...)``,
    ``map``, ``scale``, ``transpose`` ...) always return a new Matrix and leave
    the receiver untouched, so instances can be shared freely.

    Example:
        >>> weights = Matrix(3, 2).fill_gaussian(np.random.default_rng(7))
        >>> inputs = Matrix.of_column(0.5, -1.0)
        >>> activations = weights.multiply(inputs).scale_sigmoid()
        >>> activations.shape
        (3, 1)
    """

    def __init__(self, row_count, column_count=None):
        """
        Create a zero-filled matrix, or deep-copy an existing one.

        Args:
            row_count: Number of rows, or a Matrix to copy
            column_count: Number of columns (omitted when copying)

        Raises:
            InvalidDimension: If either dimension is not positive
        """
        if isinstance(row_count, Matrix):
            if column_count is not None:
                raise TypeError("A column count cannot be given when copying a Matrix.")
            values = np.array(row_count._values, dtype=DTYPE, copy=True)
        else:
            if column_count is None:
                raise TypeError("Matrix() takes a row and column count, or a Matrix to copy.")
            rows = operator.index(row_count)
            columns = operator.index(column_count)
            if rows <= 0 or columns <= 0:
                logger.debug("Rejecting matrix size %dx%d", rows, columns)
                raise InvalidDimension(
                    f"Invalid matrix size {rows}x{columns}: both dimensions must be positive."
                )
            values = np.zeros((rows, columns), dtype=DTYPE)

        values.setflags(write=False)
        self._values = values

    @classmethod
    def _wrap(cls, values: np.ndarray) -> 'Matrix':
        """Internal constructor taking ownership of a freshly computed array."""
        obj = cls.__new__(cls)
        values.setflags(write=False)
        obj._values = values
        return obj

    @classmethod
    def of_column(cls, *values) -> 'Matrix':
        """
        Build a single-column matrix holding ``values`` top to bottom.

        A single sequence may be passed instead of separate arguments.
        """
        cells = _as_cells(values)
        return cls(len(cells), 1).column(0, cells)

    @classmethod
    def from_rows(cls, rows) -> 'Matrix':
        """
        Build a matrix from a nested sequence (or 2-D array) of reals.

        Args:
            rows: Sequence of equally long rows

        Returns:
            Matrix: A new matrix owning a copy of the data

        Raises:
            InvalidDimension: If the rows are empty, ragged or not two-dimensional
        """
        try:
            values = np.array(rows, dtype=DTYPE, order='C')
        except ValueError as error:
            raise InvalidDimension("Rows must form a rectangular grid of real numbers.") from error
        if values.ndim != 2 or values.shape[0] == 0 or values.shape[1] == 0:
            raise InvalidDimension(
                f"Rows must form a non-empty two-dimensional grid, got shape {values.shape}."
            )
        return cls._wrap(values)

    def copy(self) -> 'Matrix':
        return Matrix(self)

    # ------------------------------------------------------------------
    # Shape
    # ------------------------------------------------------------------

    @property
    def row_count(self) -> int:
        return self._values.shape[0]

    @property
    def column_count(self) -> int:
        return self._values.shape[1]

    @property
    def shape(self) -> Tuple[int, int]:
        """Return the ``(row_count, column_count)`` pair."""
        return self._values.shape

    # ------------------------------------------------------------------
    # Row / column view and replace
    # ------------------------------------------------------------------

    @staticmethod
    def _check_index(index, bound: int, axis: str) -> int:
        index = operator.index(index)
        if not 0 <= index < bound:
            raise IndexOutOfRange(f"{axis} index {index} is out of range for size {bound}.")
        return index

    @staticmethod
    def _cells(line: np.ndarray) -> Iterator[float]:
        for value in line:
            yield float(value)

    def row(self, index, *values):
        """
        View or replace a row.

        With only an index, returns a fresh generator over the row's cells.
        With values, returns a new Matrix whose row ``index`` starts with
        those values; cells beyond the supplied values keep their previous
        contents and surplus values are ignored.
        """
        index = self._check_index(index, self.row_count, "Row")
        if not values:
            return self._cells(self._values[index, :])

        cells = _as_cells(values)
        count = min(len(cells), self.column_count)
        result = np.array(self._values, copy=True)
        result[index, :count] = cells[:count]
        return Matrix._wrap(result)

    def column(self, index, *values):
        """
        View or replace a column.

        Mirrors :meth:`row`: a generator when called with an index only, a new
        Matrix with the leading cells of column ``index`` overwritten otherwise.
        """
        index = self._check_index(index, self.column_count, "Column")
        if not values:
            return self._cells(self._values[:, index])

        cells = _as_cells(values)
        count = min(len(cells), self.row_count)
        result = np.array(self._values, copy=True)
        result[:count, index] = cells[:count]
        return Matrix._wrap(result)

    def __getitem__(self, key) -> float:
        if not isinstance(key, tuple) or len(key) != 2:
            raise TypeError("Matrix cells are addressed as matrix[row, column].")
        row_index = self._check_index(key[0], self.row_count, "Row")
        column_index = self._check_index(key[1], self.column_count, "Column")
        return float(self._values[row_index, column_index])

    # ------------------------------------------------------------------
    # Elementwise construction
    # ------------------------------------------------------------------

    def fill(self, supplier: Callable[[], float]) -> 'Matrix':
        """
        Return a same-shaped matrix whose cells come from ``supplier``.

        The supplier is called once per cell, one after another, in row-major
        order, so a seeded generator always lands the same draws in the same cells.
        """
        count = self._values.size
        with get_profiler().profile("matrix.fill", shape=self.shape):
            cells = np.fromiter((supplier() for _ in range(count)), dtype=DTYPE, count=count)
        return Matrix._wrap(cells.reshape(self.shape))

    def fill_gaussian(self, random_source: np.random.Generator) -> 'Matrix':
        """Fill with standard-normal draws taken from the caller's generator."""
        return self.fill(random_source.standard_normal)

    # ------------------------------------------------------------------
    # Arithmetic
    # ------------------------------------------------------------------

    @staticmethod
    def _require_matrix(that, operation: str):
        if not isinstance(that, Matrix):
            raise TypeError(f"Cannot {operation} a Matrix and {type(that).__name__}.")

    def _require_same_shape(self, that: 'Matrix', operation: str):
        self._require_matrix(that, operation)
        if self.shape != that.shape:
            logger.debug("Rejecting %s of %s and %s", operation, self.shape, that.shape)
            raise ShapeMismatch(operation, self.shape, that.shape)

    def add(self, that: 'Matrix') -> 'Matrix':
        """Elementwise sum of two matrices of identical shape."""
        self._require_same_shape(that, "add")
        return Matrix._wrap(self._values + that._values)

    def subtract(self, that: 'Matrix') -> 'Matrix':
        """Elementwise difference of two matrices of identical shape."""
        self._require_same_shape(that, "subtract")
        return Matrix._wrap(self._values - that._values)

    def multiply(self, that: 'Matrix') -> 'Matrix':
        """
        Matrix product ``self @ that``.

        Args:
            that: Matrix whose row count equals this matrix's column count

        Returns:
            Matrix: A ``self.row_count x that.column_count`` matrix

        Raises:
            ShapeMismatch: If the inner dimensions differ
        """
        self._require_matrix(that, "multiply")
        if self.column_count != that.row_count:
            logger.debug("Rejecting multiply of %s and %s", self.shape, that.shape)
            raise ShapeMismatch("multiply", self.shape, that.shape)

        with get_profiler().profile("matrix.multiply", left=self.shape, right=that.shape):
            product = self._values @ that._values
        return Matrix._wrap(product)

    def times(self, that: 'Matrix') -> 'Matrix':
        """Element-wise (Hadamard) product."""
        self._require_same_shape(that, "times")
        return Matrix._wrap(self._values * that._values)

    def scale(self, scalar: float) -> 'Matrix':
        return Matrix._wrap(self._values * float(scalar))

    def square(self) -> 'Matrix':
        return Matrix._wrap(np.square(self._values))

    def transpose(self) -> 'Matrix':
        return Matrix._wrap(self._values.T.copy())

    # ------------------------------------------------------------------
    # Mapping and activations
    # ------------------------------------------------------------------

    def map(self, function: Callable[[float], float]) -> 'Matrix':
        """
        Apply ``function`` to every cell independently.

        Each cell is handed over as a Python float and the result converted
        back to a double.
        """
        count = self._values.size
        with get_profiler().profile("matrix.map", shape=self.shape):
            cells = np.fromiter(
                (function(float(value)) for value in self._values.flat),
                dtype=DTYPE,
                count=count
            )
        return Matrix._wrap(cells.reshape(self.shape))

    def scale_sigmoid(self) -> 'Matrix':
        """Logistic sigmoid ``1 / (1 + e^-x)`` of every cell."""
        with np.errstate(over='ignore'):
            return Matrix._wrap(1.0 / (1.0 + np.exp(-self._values)))

    def scale_sigmoid_prime(self) -> 'Matrix':
        """
        Sigmoid derivative ``e^-x / (1 + e^-x)^2`` of every cell.

        Takes the pre-activation value ``x``, not an already squashed value.
        """
        with np.errstate(over='ignore', invalid='ignore'):
            decay = np.exp(-self._values)
            return Matrix._wrap(decay / (1.0 + decay) ** 2)

    # ------------------------------------------------------------------
    # Rendering
    # ------------------------------------------------------------------

    def _render(self, format_cell: Callable[[float], str], separator: str,
                prefix: str, suffix: str) -> str:
        return "".join(
            prefix + separator.join(format_cell(value) for value in row) + suffix
            for row in self._values.tolist()
        )

    def to_tsv(self) -> str:
        """Tab-separated rows, each terminated by a newline."""
        return self._render(repr, TSV_DELIMITER, "", "\n")

    def to_numpy(self) -> np.ndarray:
        """Return a writable copy of the cells as a NumPy array."""
        return np.array(self._values, copy=True)

    def __str__(self):
        return self._render(lambda value: DISPLAY_FORMAT % value, DISPLAY_SEPARATOR, "[", "]\n")

    def __repr__(self):
        return f"Matrix(shape={self.shape})"

    # ------------------------------------------------------------------
    # Value semantics and operator sugar
    # ------------------------------------------------------------------

    def __eq__(self, other):
        # NaN cells compare equal to NaN so a matrix always equals its own copy
        if not isinstance(other, Matrix):
            return NotImplemented
        return self.shape == other.shape and bool(
            np.array_equal(self._values, other._values, equal_nan=True)
        )

    __hash__ = None

    # Make NumPy scalars defer to the reflected operators below
    __array_ufunc__ = None

    def __add__(self, other):
        if not isinstance(other, Matrix):
            return NotImplemented
        return self.add(other)

    def __sub__(self, other):
        if not isinstance(other, Matrix):
            return NotImplemented
        return self.subtract(other)

    def __matmul__(self, other):
        if not isinstance(other, Matrix):
            return NotImplemented
        return self.multiply(other)

    def __mul__(self, other):
        if isinstance(other, Matrix):
            return self.times(other)
        if isinstance(other, numbers.Real):
            return self.scale(other)
        return NotImplemented

    def __rmul__(self, other):
        if isinstance(other, numbers.Real):
            return self.scale(other)
        return NotImplemented
