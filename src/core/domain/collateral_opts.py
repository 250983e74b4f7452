"""
CollateralOpts — конфигурация деплоя collateral адаптера

Immutable Pydantic модель, собираемая из документированных defaults.
Вызывающий код переопределяет только поля, важные для сценария:

    opts = DEFAULT_OPTS.merged(oracle_timeout=0)

Все числовые поля в единицах, которые ожидает адаптер:
- timeouts: секунды
- oracle_error, default_threshold: 18 decimals (fp)
- max_trade_volume: единицы учёта, 18 decimals
"""

from typing import Any, Final

from pydantic import BaseModel, Field, field_validator

from src.core.domain.address import ZERO_ADDRESS, normalize_address
from src.core.math.fixed_point import FIX_ONE

# =============================================================================
# DEFAULTS
# =============================================================================

# 24 часа
DEFAULT_ORACLE_TIMEOUT: Final[int] = 86400

# 0.5%
DEFAULT_ORACLE_ERROR: Final[int] = 5 * FIX_ONE // 1000

# 1M единиц учёта
DEFAULT_MAX_TRADE_VOLUME: Final[int] = 1_000_000 * FIX_ONE

# 15%
DEFAULT_DEFAULT_THRESHOLD: Final[int] = 15 * FIX_ONE // 100

# 24 часа
DEFAULT_DELAY_UNTIL_DEFAULT: Final[int] = 86400


# =============================================================================
# MODELS
# =============================================================================


class CollateralOpts(BaseModel):
    """
    Общие параметры конструктора collateral адаптера.

    Адреса по умолчанию нулевые: конкретный плагин подставляет свои.
    """

    erc20: str = Field(ZERO_ADDRESS, description="Адрес обёрнутого токена")
    target_name: str = Field("", description="Идентификатор target unit (например, ETH)")
    reward_erc20: str = Field(ZERO_ADDRESS, description="Адрес reward токена")
    price_timeout: int = Field(
        DEFAULT_ORACLE_TIMEOUT, ge=0, description="Время затухания сохранённой цены (сек)"
    )
    chainlink_feed: str = Field(ZERO_ADDRESS, description="Адрес peg фида")
    oracle_timeout: int = Field(DEFAULT_ORACLE_TIMEOUT, ge=0, description="Timeout peg фида (сек)")
    oracle_error: int = Field(DEFAULT_ORACLE_ERROR, ge=0, description="Погрешность oracle (fp)")
    max_trade_volume: int = Field(
        DEFAULT_MAX_TRADE_VOLUME, ge=0, description="Максимальный объём сделки (fp)"
    )
    default_threshold: int = Field(
        DEFAULT_DEFAULT_THRESHOLD, ge=0, description="Допустимое отклонение от peg (fp)"
    )
    delay_until_default: int = Field(
        DEFAULT_DELAY_UNTIL_DEFAULT, ge=0, description="Задержка IFFY → DISABLED (сек)"
    )

    model_config = {"frozen": True}

    @field_validator("erc20", "reward_erc20", "chainlink_feed")
    @classmethod
    def _canonical_address(cls, value: str) -> str:
        return normalize_address(value)

    def merged(self, **overrides: Any) -> "CollateralOpts":
        """
        Новая конфигурация: текущие значения + overrides.

        Overrides проходят полную валидацию модели (в отличие от
        model_copy(update=...)), неизвестные поля отклоняются.

        Raises:
            pydantic.ValidationError: при неверном значении поля
            TypeError: при неизвестном поле
        """
        unknown = set(overrides) - set(type(self).model_fields)
        if unknown:
            raise TypeError(f"unknown {type(self).__name__} fields: {sorted(unknown)}")
        data = self.model_dump()
        data.update(overrides)
        return type(self).model_validate(data)


class LidoCollateralOpts(CollateralOpts):
    """CollateralOpts + второй фид (stETH/ETH) и его timeout."""

    target_per_ref_chainlink_feed: str = Field(
        ZERO_ADDRESS, description="Адрес target-per-ref фида"
    )
    target_per_ref_chainlink_timeout: int = Field(
        DEFAULT_ORACLE_TIMEOUT, ge=0, description="Timeout target-per-ref фида (сек)"
    )

    @field_validator("target_per_ref_chainlink_feed")
    @classmethod
    def _canonical_target_feed(cls, value: str) -> str:
        return normalize_address(value)
