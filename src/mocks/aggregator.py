"""
MockV3Aggregator — управляемый Chainlink-подобный фид

Фид отдаёт текущий ответ и позволяет безусловно его перезаписать.
update_answer открывает новый раунд и ставит текущий block timestamp.
Сам адаптер update_answer не вызывает: им пользуются только мутаторы
сценариев.
"""

from typing import Any, Dict, NamedTuple, Optional

from src.chain.contract import Contract
from src.chain.simulated_chain import Signer, SimulatedChain
from src.core.domain.feed import FeedReading
from src.core.math.fixed_point import to_int256


class RoundData(NamedTuple):
    """Ответ latestRoundData()."""

    round_id: int
    answer: int
    started_at: int
    updated_at: int
    answered_in_round: int


class MockV3Aggregator(Contract):
    """Фид с фиксированной точностью и безусловным setter'ом ответа."""

    @staticmethod
    def initial_storage(decimals: int, initial_answer: int, timestamp: int) -> Dict[str, Any]:
        """Storage фида для установки по фиксированному адресу (genesis)."""
        to_int256(initial_answer)
        return {
            "decimals": decimals,
            "latest_round": 1,
            "answers": {1: initial_answer},
            "timestamps": {1: timestamp},
        }

    @classmethod
    async def deploy(
        cls,
        chain: SimulatedChain,
        decimals: int,
        initial_answer: int,
        sender: Optional[Signer] = None,
    ) -> "MockV3Aggregator":
        return await super().deploy(chain, decimals, initial_answer, sender=sender)

    async def _construct(self, deployer: Signer, decimals: int, initial_answer: int) -> None:
        if decimals < 0:
            raise ValueError(f"decimals must be non-negative, got {decimals}")
        self._store.update(
            self.initial_storage(decimals, initial_answer, self.chain.block_timestamp)
        )

    # -------------------------------------------------------------------------
    # VIEWS
    # -------------------------------------------------------------------------

    async def decimals(self) -> int:
        return self._store["decimals"]

    async def latest_answer(self) -> int:
        store = self._store
        return store["answers"][store["latest_round"]]

    async def latest_round_data(self) -> RoundData:
        store = self._store
        round_id = store["latest_round"]
        updated_at = store["timestamps"][round_id]
        return RoundData(
            round_id=round_id,
            answer=store["answers"][round_id],
            started_at=updated_at,
            updated_at=updated_at,
            answered_in_round=round_id,
        )

    async def get_latest(self) -> FeedReading:
        """Текущий ответ фида вместе с точностью и временем обновления."""
        round_data = await self.latest_round_data()
        return FeedReading(
            value=round_data.answer,
            decimals=await self.decimals(),
            timestamp=round_data.updated_at,
        )

    # -------------------------------------------------------------------------
    # MUTATIONS
    # -------------------------------------------------------------------------

    async def update_answer(self, new_answer: int, sender: Optional[Signer] = None) -> None:
        """
        Безусловная перезапись ответа (новый раунд).

        Raises:
            ArithmeticOverflow: если new_answer не помещается в int256
        """
        self.chain.authorize(sender)
        to_int256(new_answer)
        store = self._store
        round_id = store["latest_round"] + 1
        store["latest_round"] = round_id
        store["answers"][round_id] = new_answer
        store["timestamps"][round_id] = self.chain.block_timestamp
        await self.chain.mine()
