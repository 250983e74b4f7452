"""
Core math modules для collateral harness

Fixed-point арифметика (18 decimals) и композиция цены из фидов.
"""

# Fixed point
from src.core.math.fixed_point import (
    FIX_DECIMALS,
    FIX_ONE,
    INT256_MAX,
    INT256_MIN,
    UINT256_MAX,
    div_trunc,
    fix_mul,
    normalize,
    pct_decrease,
    pct_increase,
    pct_of,
    to_int256,
    to_uint256,
)

# Price composition
from src.core.math.price_composer import compose_price

__all__ = [
    # Fixed point: Constants
    "FIX_DECIMALS",
    "FIX_ONE",
    "INT256_MAX",
    "INT256_MIN",
    "UINT256_MAX",
    # Fixed point: Functions
    "div_trunc",
    "fix_mul",
    "normalize",
    "pct_decrease",
    "pct_increase",
    "pct_of",
    "to_int256",
    "to_uint256",
    # Price composition
    "compose_price",
]
