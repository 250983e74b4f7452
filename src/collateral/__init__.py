"""
Collateral — симулированные collateral адаптеры.
"""

from src.collateral.lido_collateral import MAX_DELAY_UNTIL_DEFAULT, LidoStakedEthCollateral
from src.collateral.status import NEVER, CollateralStatus

__all__ = [
    "CollateralStatus",
    "LidoStakedEthCollateral",
    "MAX_DELAY_UNTIL_DEFAULT",
    "NEVER",
]
