"""
SimulatedChain — детерминированная in-process сеть

Заменяет fork mainnet для harness:
- Локальные аккаунты с детерминированными адресами
- Хранилище контрактов (storage) по адресам + реестр кода
- Детерминированные адреса деплоя (sha256(deployer, nonce))
- Блоки и время: каждая транзакция майнит блок (block_time_sec)
- Snapshot / revert / reset_fork
- Impersonation адресов без ключа

КРИТИЧЕСКИЕ ИНВАРИАНТЫ:
1. reset_fork() всегда восстанавливает одно и то же состояние (genesis детерминирован)
2. Порядок вызовов = порядок эффектов (транзакции не переупорядочиваются)
3. Snapshot копирует storage целиком: handles контрактов остаются валидными
"""

import asyncio
import copy
import hashlib
import logging
from dataclasses import dataclass
from typing import Any, Callable, Dict, List, Optional, Set, Tuple, Type

from src.core.domain.address import normalize_address
from src.core.errors import Unauthorized, UnknownContract

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class ChainConfig:
    """Параметры симулированной сети."""

    chain_id: int = 31337
    fork_block_number: int = 16_074_053
    fork_timestamp: int = 1_669_852_800
    block_time_sec: int = 12
    num_accounts: int = 4


@dataclass(frozen=True)
class Signer:
    """Identity, от имени которой отправляются транзакции."""

    address: str


Genesis = Callable[["SimulatedChain"], None]


class SimulatedChain:
    """
    Одна симулированная сеть: состояние, время и identities.

    genesis — функция, устанавливающая fork-состояние (контракты по
    фиксированным адресам). Она вызывается на пустом состоянии при
    создании сети и при каждом reset_fork().
    """

    def __init__(self, config: Optional[ChainConfig] = None, genesis: Optional[Genesis] = None):
        self.config = config or ChainConfig()
        self._genesis = genesis
        self._accounts: List[Signer] = [
            Signer(self._derive_address(f"account:{i}")) for i in range(self.config.num_accounts)
        ]
        self._impersonated: Set[str] = set()
        self._snapshots: Dict[int, Tuple[Any, ...]] = {}
        self._next_snapshot_id = 1
        self._init_state()

    # -------------------------------------------------------------------------
    # STATE
    # -------------------------------------------------------------------------

    def _init_state(self) -> None:
        self._storage: Dict[str, Dict[str, Any]] = {}
        self._code: Dict[str, Type[Any]] = {}
        self._nonces: Dict[str, int] = {}
        self.block_number = self.config.fork_block_number
        self.block_timestamp = self.config.fork_timestamp
        if self._genesis is not None:
            self._genesis(self)

    @staticmethod
    def _derive_address(seed: str) -> str:
        return "0x" + hashlib.sha256(seed.encode("utf-8")).hexdigest()[:40]

    def get_signers(self) -> List[Signer]:
        """Локальные аккаунты (ключи которых есть у сети)."""
        return list(self._accounts)

    @property
    def default_signer(self) -> Signer:
        return self._accounts[0]

    def storage(self, address: str) -> Dict[str, Any]:
        """
        Storage контракта по адресу.

        Raises:
            UnknownContract: если по адресу нет кода
        """
        address = normalize_address(address)
        try:
            return self._storage[address]
        except KeyError:
            raise UnknownContract(f"no contract deployed at {address}") from None

    def has_code(self, address: str) -> bool:
        return normalize_address(address) in self._code

    def install(self, address: str, contract_cls: Type[Any], storage: Dict[str, Any]) -> None:
        """Установка кода и storage по фиксированному адресу (fork state)."""
        address = normalize_address(address)
        self._code[address] = contract_cls
        self._storage[address] = storage

    def uninstall(self, address: str) -> None:
        address = normalize_address(address)
        self._code.pop(address, None)
        self._storage.pop(address, None)

    def get_contract_at(self, address: str) -> Any:
        """
        Handle контракта по адресу (аналог getContractAt).

        Raises:
            UnknownContract: если по адресу нет кода
        """
        address = normalize_address(address)
        try:
            contract_cls = self._code[address]
        except KeyError:
            raise UnknownContract(f"no contract deployed at {address}") from None
        return contract_cls(self, address)

    def next_deploy_address(self, deployer: Signer) -> str:
        """Адрес следующего деплоя от deployer; увеличивает nonce."""
        nonce = self._nonces.get(deployer.address, 0)
        self._nonces[deployer.address] = nonce + 1
        return self._derive_address(f"create:{deployer.address}:{nonce}")

    # -------------------------------------------------------------------------
    # IDENTITIES
    # -------------------------------------------------------------------------

    def impersonate(self, address: str) -> Signer:
        address = normalize_address(address)
        self._impersonated.add(address)
        logger.debug("impersonating %s", address)
        return Signer(address)

    def stop_impersonating(self, address: str) -> None:
        address = normalize_address(address)
        self._impersonated.discard(address)
        logger.debug("stopped impersonating %s", address)

    def is_impersonated(self, address: str) -> bool:
        return normalize_address(address) in self._impersonated

    def authorize(self, sender: Optional[Signer]) -> Signer:
        """
        Проверка, что сеть может подписать транзакцию от sender.

        None → default signer (первый локальный аккаунт).

        Raises:
            Unauthorized: если sender не локальный аккаунт и не impersonated
        """
        if sender is None:
            return self.default_signer
        if sender in self._accounts or sender.address in self._impersonated:
            return sender
        raise Unauthorized(f"sender {sender.address} is not unlocked")

    # -------------------------------------------------------------------------
    # BLOCKS & TIME
    # -------------------------------------------------------------------------

    async def mine(self) -> None:
        """Майнинг одного блока (точка приостановки для вызывающего кода)."""
        await asyncio.sleep(0)
        self.block_number += 1
        self.block_timestamp += self.config.block_time_sec

    async def advance_time(self, seconds: int) -> None:
        """Сдвиг времени на seconds и майнинг блока."""
        if seconds < 0:
            raise ValueError(f"cannot move time backwards: {seconds}")
        self.block_timestamp += seconds
        await self.mine()

    # -------------------------------------------------------------------------
    # SNAPSHOTS & FORK
    # -------------------------------------------------------------------------

    def snapshot(self) -> int:
        """Снапшот состояния; возвращает id для revert()."""
        snapshot_id = self._next_snapshot_id
        self._next_snapshot_id += 1
        self._snapshots[snapshot_id] = (
            copy.deepcopy(self._storage),
            dict(self._code),
            dict(self._nonces),
            self.block_number,
            self.block_timestamp,
        )
        return snapshot_id

    async def revert(self, snapshot_id: int) -> None:
        """
        Откат к снапшоту. Снапшот остаётся доступным для повторного revert.

        Raises:
            KeyError: если снапшот неизвестен
        """
        storage, code, nonces, block_number, block_timestamp = self._snapshots[snapshot_id]
        await asyncio.sleep(0)
        self._storage = copy.deepcopy(storage)
        self._code = dict(code)
        self._nonces = dict(nonces)
        self.block_number = block_number
        self.block_timestamp = block_timestamp

    async def reset_fork(self) -> None:
        """Возврат к исходному fork-состоянию; снапшоты и impersonation сбрасываются."""
        await asyncio.sleep(0)
        self._impersonated.clear()
        self._snapshots.clear()
        self._init_state()
        logger.debug("fork reset at block %d", self.block_number)
