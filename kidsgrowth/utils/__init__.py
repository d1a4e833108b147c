# File: utils/__init__.py
"""Pure Python utilities for KidsGrowth.

Submodules:
    - dt_utils: Timezone handling, period boundaries, date parsing
    - math_utils: Clamping and completion ratios

Usage:
    from . import dt_utils
    from .math_utils import calculate_ratio
"""

from . import dt_utils, math_utils

__all__ = ["dt_utils", "math_utils"]
