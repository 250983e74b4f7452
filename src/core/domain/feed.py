"""
FeedReading — снапшот ответа oracle фида

Immutable Pydantic модель: сырой ответ фида до масштабирования,
точность фида и время последнего обновления.
"""

from pydantic import BaseModel, Field

from src.core.math.fixed_point import FIX_DECIMALS, normalize


class FeedReading(BaseModel):
    """
    Ответ фида в его собственной точности.

    value — сырое значение до масштабирования; decimals фиксирован
    для экземпляра фида на всё время его жизни.
    """

    value: int = Field(..., description="Сырой ответ фида (answer)")
    decimals: int = Field(..., ge=0, description="Точность фида")
    timestamp: int = Field(..., ge=0, description="Время обновления (unix, секунды)")

    model_config = {"frozen": True}

    def normalized(self, target_decimals: int = FIX_DECIMALS) -> int:
        """Значение, приведённое к target_decimals (по умолчанию 18)."""
        return normalize(self.value, self.decimals, target_decimals)
