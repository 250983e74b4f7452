"""
Domain models and value objects.

Contains fundamental domain entities like FeedReading and CollateralOpts.
"""

from src.core.domain.address import ZERO_ADDRESS, is_zero_address, normalize_address
from src.core.domain.collateral_opts import (
    DEFAULT_DEFAULT_THRESHOLD,
    DEFAULT_DELAY_UNTIL_DEFAULT,
    DEFAULT_MAX_TRADE_VOLUME,
    DEFAULT_ORACLE_ERROR,
    DEFAULT_ORACLE_TIMEOUT,
    CollateralOpts,
    LidoCollateralOpts,
)
from src.core.domain.feed import FeedReading

__all__ = [
    # Address helpers
    "ZERO_ADDRESS",
    "is_zero_address",
    "normalize_address",
    # Feed model
    "FeedReading",
    # Collateral configuration
    "CollateralOpts",
    "LidoCollateralOpts",
    "DEFAULT_ORACLE_TIMEOUT",
    "DEFAULT_ORACLE_ERROR",
    "DEFAULT_MAX_TRADE_VOLUME",
    "DEFAULT_DEFAULT_THRESHOLD",
    "DEFAULT_DELAY_UNTIL_DEFAULT",
]
