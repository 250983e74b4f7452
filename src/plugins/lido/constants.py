"""
Lido плагин — константы fork-состояния и параметры по умолчанию

Адреса совпадают с mainnet.
"""

from typing import Final

from src.core.domain.collateral_opts import (
    DEFAULT_DEFAULT_THRESHOLD,
    DEFAULT_DELAY_UNTIL_DEFAULT,
    DEFAULT_MAX_TRADE_VOLUME,
    DEFAULT_ORACLE_ERROR,
    DEFAULT_ORACLE_TIMEOUT,
)
from src.core.math.fixed_point import FIX_ONE

# =============================================================================
# АДРЕСА
# =============================================================================

STETH: Final[str] = "0xae7ab96520de3a18e5e111b5eaab095312d7fe84"
WSTETH: Final[str] = "0x7f39c581f595b53c5cb19bd0b3f8da6c935e2ca0"
ETH_USD_PRICE_FEED: Final[str] = "0x5f4ec3df9cbd43714fe2740f5e3616155c5b8419"
STETH_ETH_PRICE_FEED: Final[str] = "0x86392dc19c0b719886221c78ab11eb8cf5c52812"
LIDO_ORACLE: Final[str] = "0x442af784a788a5bd6f42a01ebe9f287a871243fb"
WSTETH_WHALE: Final[str] = "0x10cd5fbe1b404b7e19ef964b63939907bdaf42e2"

# =============================================================================
# ПАРАМЕТРЫ COLLATERAL
# =============================================================================

ORACLE_TIMEOUT: Final[int] = DEFAULT_ORACLE_TIMEOUT
ORACLE_ERROR: Final[int] = DEFAULT_ORACLE_ERROR
MAX_TRADE_VOL: Final[int] = DEFAULT_MAX_TRADE_VOLUME
DEFAULT_THRESHOLD: Final[int] = DEFAULT_DEFAULT_THRESHOLD
DELAY_UNTIL_DEFAULT: Final[int] = DEFAULT_DELAY_UNTIL_DEFAULT

# =============================================================================
# FORK STATE
# =============================================================================

FORK_DEPOSITED_VALIDATORS: Final[int] = 170_000
FORK_BEACON_VALIDATORS: Final[int] = 169_800
FORK_BEACON_BALANCE: Final[int] = 5_600_000 * FIX_ONE
FORK_BUFFERED_ETHER: Final[int] = 12_000 * FIX_ONE
FORK_TOTAL_SHARES: Final[int] = 5_200_000 * FIX_ONE
FORK_WHALE_BALANCE: Final[int] = 100_000 * FIX_ONE

# ETH/USD: 8 decimals, stETH/ETH: 18 decimals
FORK_ETH_USD_ANSWER: Final[int] = 1_200 * 10**8
FORK_STETH_ETH_ANSWER: Final[int] = 998 * FIX_ONE // 1000
