"""
Price Composer — ожидаемая цена обёрнутого токена

Цена складывается из трёх независимых множителей:
- peg feed: reference asset в единицах учёта (UoA per ref)
- target-per-ref feed: target unit на единицу reference asset
- exchange rate (refPerTok): reference asset на единицу обёрнутого токена

Масштабы фидов настраиваются независимо, поэтому каждый фид сначала
нормализуется к 18 decimals, и только потом значения перемножаются.

ФОРМУЛА:
    price = norm(peg) * norm(target) * refPerTok / 1e18 / 1e18
"""

from src.core.domain.feed import FeedReading
from src.core.errors import InvalidOracleAnswer
from src.core.math.fixed_point import FIX_ONE


def _require_positive(reading: FeedReading, label: str) -> None:
    if reading.value <= 0:
        raise InvalidOracleAnswer(f"{label} feed answer must be positive, got {reading.value}")


def compose_price(
    peg_reading: FeedReading,
    target_reading: FeedReading,
    exchange_rate: int,
) -> int:
    """
    Ожидаемая цена токена в 18 decimals.

    Args:
        peg_reading: Ответ peg фида (ref в единицах учёта)
        target_reading: Ответ target-per-ref фида
        exchange_rate: refPerTok в 18 decimals

    Returns:
        Цена в 18 decimals

    Raises:
        InvalidOracleAnswer: если ответ любого фида <= 0
        ValueError: если exchange_rate <= 0

    Examples:
        >>> peg = FeedReading(value=1800 * 10**8, decimals=8, timestamp=0)
        >>> tgt = FeedReading(value=10**8, decimals=8, timestamp=0)
        >>> compose_price(peg, tgt, 10**18)
        1800000000000000000000
    """
    _require_positive(peg_reading, "peg")
    _require_positive(target_reading, "targetPerRef")
    if exchange_rate <= 0:
        raise ValueError(f"exchange_rate must be positive, got {exchange_rate}")

    peg_price = peg_reading.normalized()
    target_per_ref = target_reading.normalized()

    return peg_price * target_per_ref * exchange_rate // FIX_ONE // FIX_ONE
