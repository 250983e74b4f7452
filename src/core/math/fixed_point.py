"""
Fixed Point — целочисленная fixed-point арифметика

Модуль содержит примитивы для работы с on-chain величинами:
- Нормализация значения из произвольной точности (decimals) в 18 decimals
- Проверки диапазонов uint256 / int256
- Процентные изменения с делением, усекающим к нулю (семантика EVM)

КРИТИЧЕСКИЕ ИНВАРИАНТЫ:
1. Все операции над int, без float
2. Уменьшение точности запрещено → PrecisionLoss (никакого усечения)
3. Выход за диапазон → ArithmeticOverflow (никакого clamp)
4. Деление усекает к нулю, а не к минус бесконечности (в отличие от //)
"""

from typing import Final

from src.core.errors import ArithmeticOverflow, PrecisionLoss

# =============================================================================
# КОНСТАНТЫ
# =============================================================================

# Каноническая точность fixed-point значений
FIX_DECIMALS: Final[int] = 18

# 1.0 в fixed-point
FIX_ONE: Final[int] = 10**FIX_DECIMALS

UINT256_MAX: Final[int] = 2**256 - 1
INT256_MIN: Final[int] = -(2**255)
INT256_MAX: Final[int] = 2**255 - 1


# =============================================================================
# НОРМАЛИЗАЦИЯ
# =============================================================================


def normalize(value: int, source_decimals: int, target_decimals: int = FIX_DECIMALS) -> int:
    """
    Перевод значения из source_decimals в target_decimals.

    value * 10^(target_decimals - source_decimals)

    Args:
        value: Сырое значение в точности source_decimals
        source_decimals: Точность исходного значения
        target_decimals: Целевая точность (default: 18)

    Returns:
        Значение в точности target_decimals

    Raises:
        PrecisionLoss: если target_decimals < source_decimals
        ValueError: если decimals отрицательные

    Examples:
        >>> normalize(1800_00000000, 8)
        1800000000000000000000
        >>> normalize(5, 18, 18)
        5
    """
    if source_decimals < 0 or target_decimals < 0:
        raise ValueError(
            f"decimals must be non-negative, got source={source_decimals}, "
            f"target={target_decimals}"
        )
    if target_decimals < source_decimals:
        raise PrecisionLoss(
            f"cannot rescale from {source_decimals} to {target_decimals} decimals "
            f"without truncation"
        )
    return value * 10 ** (target_decimals - source_decimals)


def fix_mul(a: int, b: int) -> int:
    """Произведение двух 18-decimal значений с округлением вниз."""
    return a * b // FIX_ONE


# =============================================================================
# ДИАПАЗОНЫ
# =============================================================================


def to_uint256(value: int) -> int:
    """
    Проверка, что значение помещается в uint256.

    Raises:
        ArithmeticOverflow: если value < 0 или value > 2^256 - 1
    """
    if value < 0 or value > UINT256_MAX:
        raise ArithmeticOverflow(f"value {value} out of uint256 range")
    return value


def to_int256(value: int) -> int:
    """
    Проверка, что значение помещается в int256.

    Raises:
        ArithmeticOverflow: если value вне [-2^255, 2^255 - 1]
    """
    if value < INT256_MIN or value > INT256_MAX:
        raise ArithmeticOverflow(f"value {value} out of int256 range")
    return value


# =============================================================================
# ПРОЦЕНТНЫЕ ИЗМЕНЕНИЯ
# =============================================================================


def div_trunc(numerator: int, denominator: int) -> int:
    """
    Целочисленное деление с усечением к нулю.

    Examples:
        >>> div_trunc(7, 2)
        3
        >>> div_trunc(-7, 2)
        -3
    """
    if denominator == 0:
        raise ZeroDivisionError("division by zero")
    quotient = abs(numerator) // abs(denominator)
    if (numerator < 0) != (denominator < 0):
        return -quotient
    return quotient


def pct_of(value: int, pct: int) -> int:
    """value * pct / 100 с усечением к нулю."""
    return div_trunc(value * pct, 100)


def pct_decrease(value: int, pct: int) -> int:
    """
    value - value * pct / 100

    pct не валидируется: значения вне [0, 100] дают отрицательный или
    слишком большой результат, который отклоняется при применении
    (to_uint256 / to_int256), а не здесь.

    Examples:
        >>> pct_decrease(1000, 10)
        900
        >>> pct_decrease(99, 10)
        90
    """
    return value - pct_of(value, pct)


def pct_increase(value: int, pct: int) -> int:
    """
    value + value * pct / 100

    Examples:
        >>> pct_increase(1000, 5)
        1050
    """
    return value + pct_of(value, pct)
