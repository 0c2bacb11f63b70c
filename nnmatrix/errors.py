# --- Purpose: Error taxonomy raised by Matrix operations. ---


class MatrixError(Exception):
    """Base class for every error raised by nnmatrix."""


class InvalidDimension(MatrixError, ValueError):
    """A matrix would have a non-positive or ragged shape."""


class ShapeMismatch(MatrixError, ValueError):
    """Operand shapes are incompatible for the requested operation."""

    def __init__(self, operation, left_shape, right_shape):
        self.operation = operation
        self.left_shape = left_shape
        self.right_shape = right_shape
        super().__init__(
            f"Cannot {operation} matrices of shape {left_shape} and {right_shape}."
        )


class IndexOutOfRange(MatrixError, IndexError):
    """A row or column index falls outside the matrix."""
