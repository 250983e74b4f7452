"""
Errors — таксономия ошибок harness

Все ошибки поднимаются до вызывающего сценария без изменений:
локального слоя восстановления нет. Сценарий, ожидающий конкретный
отказ, сверяет литеральную строку причины (reason), а не категорию.

Иерархия:
    HarnessError
    ├── Reverted (on-chain отказ с литеральной причиной)
    │   └── ConstructionRejected (отказ конструктора адаптера)
    ├── Unauthorized
    ├── InvalidOracleAnswer
    ├── StalePrice
    ├── PrecisionLoss
    ├── ArithmeticOverflow
    ├── UnknownContract
    └── HookBundleError
"""


class HarnessError(Exception):
    """Базовый класс всех ошибок harness."""


class Reverted(HarnessError):
    """
    Транзакция отклонена симулированным контрактом.

    Attributes:
        reason: Литеральная строка причины (как в require(..., "reason"))
    """

    def __init__(self, reason: str):
        super().__init__(reason)
        self.reason = reason


class ConstructionRejected(Reverted):
    """Деплой адаптера отклонён валидацией конструктора."""


class Unauthorized(HarnessError):
    """Вызов выполнен от identity без нужных прав (или без ключа/impersonation)."""


class InvalidOracleAnswer(HarnessError):
    """Фид вернул неположительный ответ (answer <= 0)."""


class StalePrice(HarnessError):
    """Ответ фида старше допустимого oracle timeout."""


class PrecisionLoss(HarnessError):
    """Нормализатор попросили уменьшить точность (target < source decimals)."""


class ArithmeticOverflow(HarnessError):
    """Значение вышло за представимый диапазон (uint256 / int256)."""


class UnknownContract(HarnessError):
    """По адресу нет задеплоенного кода."""


class HookBundleError(HarnessError, ValueError):
    """HookBundle собран с полем неверного типа."""
