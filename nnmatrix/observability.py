"""
Observability utilities for nnmatrix.

This module provides:
- Logging configuration for the ``nnmatrix`` logger hierarchy
- A lightweight execution profiler used around the heavier Matrix operations
"""

import logging
import time
import functools
from contextlib import contextmanager
from typing import Optional, Dict, Any, List
from dataclasses import dataclass, field
from collections import defaultdict

from .config import DEFAULT_LOG_LEVEL, PROFILING_ENABLED


# ============================================================================
# Logging Configuration
# ============================================================================

_installed_handlers: List[logging.Handler] = []


def configure_logging(level: str = DEFAULT_LOG_LEVEL, log_file: Optional[str] = None):
    """
    Configure logging for the nnmatrix package.

    Calling this again replaces the handlers installed by the previous call.

    Args:
        level: Logging level (DEBUG, INFO, WARNING, ERROR, CRITICAL)
        log_file: Optional file path to write logs

    Returns:
        The configured ``nnmatrix`` logger
    """
    log_level = getattr(logging, level.upper())

    console_formatter = logging.Formatter(
        '%(asctime)s - %(name)s - %(levelname)s - %(message)s',
        datefmt='%Y-%m-%d %H:%M:%S'
    )

    detailed_formatter = logging.Formatter(
        '%(asctime)s - %(name)s - %(levelname)s - [%(filename)s:%(lineno)d] - %(message)s',
        datefmt='%Y-%m-%d %H:%M:%S'
    )

    package_logger = logging.getLogger('nnmatrix')

    for handler in _installed_handlers:
        package_logger.removeHandler(handler)
        handler.close()
    _installed_handlers.clear()

    console_handler = logging.StreamHandler()
    console_handler.setLevel(log_level)
    console_handler.setFormatter(console_formatter)
    package_logger.addHandler(console_handler)
    _installed_handlers.append(console_handler)

    if log_file:
        file_handler = logging.FileHandler(log_file)
        file_handler.setLevel(logging.DEBUG)  # Always log everything to file
        file_handler.setFormatter(detailed_formatter)
        package_logger.addHandler(file_handler)
        _installed_handlers.append(file_handler)
        package_logger.setLevel(logging.DEBUG)
    else:
        package_logger.setLevel(log_level)

    # Prevent propagation to root logger
    package_logger.propagate = False

    return package_logger


# ============================================================================
# Performance Profiling
# ============================================================================

@dataclass
class ProfileEntry:
    """Single profile measurement."""
    name: str
    start_time: float
    end_time: Optional[float] = None
    duration: Optional[float] = None
    metadata: Dict[str, Any] = field(default_factory=dict)

    def complete(self):
        """Mark this entry as complete and calculate duration."""
        self.end_time = time.perf_counter()
        self.duration = self.end_time - self.start_time


class ExecutionProfiler:
    """
    Profiler for tracking how long Matrix operations take.

    Example:
        profiler = ExecutionProfiler()

        with profiler.profile("matrix.multiply", shape=(3, 4)):
            weights.multiply(activations)

        profiler.get_summary()
    """

    def __init__(self, enabled: bool = True):
        self.entries: List[ProfileEntry] = []
        self.aggregated: Dict[str, List[float]] = defaultdict(list)
        self._enabled = enabled

    @property
    def enabled(self) -> bool:
        return self._enabled

    @contextmanager
    def profile(self, name: str, **metadata):
        """
        Context manager for profiling a code block.

        Args:
            name: Name of the operation being profiled
            **metadata: Additional metadata to attach
        """
        if not self._enabled:
            yield None
            return

        entry = ProfileEntry(
            name=name,
            start_time=time.perf_counter(),
            metadata=metadata
        )

        try:
            yield entry
        finally:
            entry.complete()
            self.entries.append(entry)
            self.aggregated[name].append(entry.duration)

    def profile_decorator(self, name: Optional[str] = None):
        """
        Decorator for profiling function calls.

        Example:
            @profiler.profile_decorator("train_step")
            def train_step(network, batch):
                ...
        """
        def decorator(func):
            profile_name = name or f"{func.__module__}.{func.__name__}"

            @functools.wraps(func)
            def wrapper(*args, **kwargs):
                with self.profile(profile_name):
                    return func(*args, **kwargs)
            return wrapper
        return decorator

    def get_summary(self) -> Dict[str, Dict[str, float]]:
        """
        Get aggregated statistics for all profiled operations.

        Returns:
            Dictionary mapping operation names to statistics
        """
        summary = {}
        for name, durations in self.aggregated.items():
            if durations:
                summary[name] = {
                    'count': len(durations),
                    'total': sum(durations),
                    'mean': sum(durations) / len(durations),
                    'min': min(durations),
                    'max': max(durations)
                }
        return summary

    def reset(self):
        """Clear all profiling data."""
        self.entries.clear()
        self.aggregated.clear()

    def enable(self):
        """Enable profiling."""
        self._enabled = True

    def disable(self):
        """Disable profiling."""
        self._enabled = False


# Global profiler instance
_global_profiler = ExecutionProfiler(enabled=PROFILING_ENABLED)

def get_profiler() -> ExecutionProfiler:
    """Get the global profiler instance."""
    return _global_profiler
