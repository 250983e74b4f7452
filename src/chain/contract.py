"""
Contract — базовый handle симулированного контракта

Handle = (chain, address). Состояние контракта лежит в storage сети,
поэтому snapshot/revert не требуют пересоздавать handles.
"""

import logging
from typing import Any, Dict, Optional, TypeVar

from src.chain.simulated_chain import Signer, SimulatedChain

logger = logging.getLogger(__name__)

C = TypeVar("C", bound="Contract")


class Contract:
    """Базовый класс симулированных контрактов."""

    def __init__(self, chain: SimulatedChain, address: str):
        self.chain = chain
        self.address = address

    def __repr__(self) -> str:
        return f"{type(self).__name__}({self.address})"

    def __eq__(self, other: object) -> bool:
        return (
            isinstance(other, Contract)
            and other.chain is self.chain
            and other.address == self.address
        )

    def __hash__(self) -> int:
        return hash((id(self.chain), self.address))

    @property
    def _store(self) -> Dict[str, Any]:
        return self.chain.storage(self.address)

    @classmethod
    async def deploy(
        cls,
        chain: SimulatedChain,
        *args: Any,
        sender: Optional[Signer] = None,
        **kwargs: Any,
    ):
        """
        Деплой нового экземпляра.

        Деплой атомарен: если _construct поднимает ошибку, код и storage
        по новому адресу удаляются, ошибка уходит вызывающему без изменений.
        """
        deployer = chain.authorize(sender)
        address = chain.next_deploy_address(deployer)
        chain.install(address, cls, {})
        instance = cls(chain, address)
        try:
            await instance._construct(deployer, *args, **kwargs)
        except Exception:
            chain.uninstall(address)
            raise
        await chain.mine()
        logger.debug("deployed %s at %s by %s", cls.__name__, address, deployer.address)
        return instance

    async def _construct(self, deployer: Signer, *args: Any, **kwargs: Any) -> None:
        """Инициализация storage; переопределяется наследниками."""
