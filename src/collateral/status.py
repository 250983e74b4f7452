"""CollateralStatus — статус collateral адаптера."""

from enum import Enum
from typing import Final

# when_default для SOUND: "никогда"
NEVER: Final[int] = 2**48 - 1


class CollateralStatus(str, Enum):
    """Статус collateral.

    SOUND: цена и курс в норме
    IFFY: подозрение на default, DISABLED после delay_until_default
    DISABLED: default зафиксирован, необратимо
    """
    SOUND = "SOUND"
    IFFY = "IFFY"
    DISABLED = "DISABLED"
