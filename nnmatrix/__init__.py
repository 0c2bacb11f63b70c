"""
nnmatrix - a small dense matrix value type for feed-forward neural networks.
"""

from .core import Matrix
from .errors import MatrixError, InvalidDimension, ShapeMismatch, IndexOutOfRange
from .observability import configure_logging, get_profiler, ExecutionProfiler

__all__ = [
    "Matrix",
    "MatrixError",
    "InvalidDimension",
    "ShapeMismatch",
    "IndexOutOfRange",
    "configure_logging",
    "get_profiler",
    "ExecutionProfiler",
]

__version__ = "0.1.0"
