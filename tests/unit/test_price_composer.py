"""
Tests for Price Composer

Coverage:
- Формула price = norm(peg) * norm(target) * rate / 1e18 / 1e18
- Независимость от decimals фидов
- Отказы: answer <= 0, rate <= 0, decimals > 18
"""

import pytest

from src.core.domain.feed import FeedReading
from src.core.errors import InvalidOracleAnswer, PrecisionLoss
from src.core.math.fixed_point import FIX_ONE
from src.core.math.price_composer import compose_price


def reading(value: int, decimals: int) -> FeedReading:
    return FeedReading(value=value, decimals=decimals, timestamp=1_669_852_800)


class TestComposePrice:
    """Тесты композиции ожидаемой цены."""

    def test_default_answers(self):
        """1800 USD/ETH * 1 ETH/stETH * 1 stETH/wstETH = 1800e18."""
        price = compose_price(reading(1800 * 10**8, 8), reading(10**8, 8), FIX_ONE)
        assert price == 1800 * FIX_ONE

    def test_exchange_rate_scales_price(self):
        rate = 1_100_000_000_000_000_000  # 1.1
        price = compose_price(reading(1800 * 10**8, 8), reading(10**8, 8), rate)
        assert price == 1980 * FIX_ONE

    def test_target_per_ref_scales_price(self):
        price = compose_price(reading(1800 * 10**8, 8), reading(998 * FIX_ONE // 1000, 18), FIX_ONE)
        assert price == 1796_400_000_000_000_000_000

    def test_invariant_under_feed_precision(self):
        """Один и тот же курс в 6, 8 и 18 decimals даёт одну цену."""
        rate = 1_123_456_789_012_345_678
        expected = compose_price(reading(1800 * 10**8, 8), reading(10**8, 8), rate)
        for decimals in (0, 6, 8, 18):
            peg = reading(1800 * 10**decimals, decimals)
            target = reading(10**decimals, decimals)
            assert compose_price(peg, target, rate) == expected

    def test_zero_peg_answer_rejected(self):
        with pytest.raises(InvalidOracleAnswer):
            compose_price(reading(0, 8), reading(10**8, 8), FIX_ONE)

    def test_negative_target_answer_rejected(self):
        with pytest.raises(InvalidOracleAnswer):
            compose_price(reading(1800 * 10**8, 8), reading(-1, 8), FIX_ONE)

    def test_non_positive_rate_rejected(self):
        with pytest.raises(ValueError):
            compose_price(reading(1800 * 10**8, 8), reading(10**8, 8), 0)

    def test_feed_above_eighteen_decimals_rejected(self):
        with pytest.raises(PrecisionLoss):
            compose_price(reading(1800 * 10**20, 20), reading(10**8, 8), FIX_ONE)
