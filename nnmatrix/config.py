# nnmatrix/config.py
"""
Centralized configuration for the nnmatrix library.
This module provides a single source of truth for all configurable parameters.
"""

import numpy as np

# Storage
DTYPE = np.float64  # Every cell is a double precision real

# Text renderings
DISPLAY_FORMAT = "%f"  # Six fractional digits, used by str(matrix)
DISPLAY_SEPARATOR = ", "
TSV_DELIMITER = "\t"

# Observability
DEFAULT_LOG_LEVEL = "INFO"
PROFILING_ENABLED = False  # Initial state of the global profiler
