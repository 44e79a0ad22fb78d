# File: utils/__init__.py
"""Pure Python utilities for LifeTracker.

This module contains pure Python functions with ZERO Home Assistant dependencies.
All functions here can be unit tested without Home Assistant mocking.

Submodules:
    - dt_utils: Day parsing, windows, calendar periods, consecutive runs
    - math_utils: Rounding, percentages, clamping

Usage:
    from . import dt_utils
    from .math_utils import calculate_percentage
"""

from . import dt_utils, math_utils

__all__ = ["dt_utils", "math_utils"]
