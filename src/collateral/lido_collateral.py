"""
LidoStakedEthCollateral — симулированный collateral адаптер wstETH

Цена wstETH в единицах учёта:
    {UoA/tok} = {UoA/target} * {target/ref} * {ref/tok}
    - {UoA/target}: chainlink_feed (ETH/USD)
    - {target/ref}: target_per_ref_feed (stETH/ETH), он же peg price
    - {ref/tok}:   wstETH.st_eth_per_token()

Статус (refresh):
- refPerTok уменьшился → DISABLED сразу
- peg price вне [1 - default_threshold, 1 + default_threshold] → IFFY
- фид устарел или вернул answer <= 0 → IFFY
- IFFY дольше delay_until_default → DISABLED
- DISABLED необратим

Конструктор отклоняет неверную конфигурацию с литеральной причиной
(ConstructionRejected.reason), которую сверяют constructor тесты.
"""

import logging
from typing import Final, Optional, Tuple

from src.chain.contract import Contract
from src.chain.simulated_chain import Signer, SimulatedChain
from src.collateral.status import NEVER, CollateralStatus
from src.core.domain.address import is_zero_address, normalize_address
from src.core.domain.collateral_opts import CollateralOpts
from src.core.errors import ConstructionRejected, InvalidOracleAnswer, StalePrice
from src.core.math.fixed_point import FIX_ONE, fix_mul

logger = logging.getLogger(__name__)

# 2 недели
MAX_DELAY_UNTIL_DEFAULT: Final[int] = 1_209_600


def _require(condition: bool, reason: str) -> None:
    if not condition:
        raise ConstructionRejected(reason)


class LidoStakedEthCollateral(Contract):
    """Collateral адаптер wstETH с двумя фидами и внутренним курсом."""

    @classmethod
    async def deploy(
        cls,
        chain: SimulatedChain,
        config: CollateralOpts,
        revenue_hiding: int,
        target_per_ref_feed: str,
        target_per_ref_timeout: int,
        sender: Optional[Signer] = None,
    ) -> "LidoStakedEthCollateral":
        return await super().deploy(
            chain,
            config,
            revenue_hiding,
            target_per_ref_feed,
            target_per_ref_timeout,
            sender=sender,
        )

    async def _construct(
        self,
        deployer: Signer,
        config: CollateralOpts,
        revenue_hiding: int,
        target_per_ref_feed: str,
        target_per_ref_timeout: int,
    ) -> None:
        # Asset
        _require(config.price_timeout > 0, "price timeout zero")
        _require(not is_zero_address(config.chainlink_feed), "missing chainlink feed")
        _require(config.oracle_timeout > 0, "oracleTimeout zero")
        _require(not is_zero_address(config.erc20), "missing erc20")
        _require(config.max_trade_volume > 0, "invalid max trade volume")
        _require(0 < config.oracle_error < FIX_ONE, "oracle error out of range")
        # FiatCollateral
        _require(config.target_name != "", "targetName missing")
        if config.default_threshold > 0:
            _require(config.delay_until_default > 0, "delayUntilDefault zero")
        _require(config.delay_until_default <= MAX_DELAY_UNTIL_DEFAULT, "delayUntilDefault too long")
        # AppreciatingFiatCollateral
        _require(0 <= revenue_hiding < FIX_ONE, "revenueHiding out of range")
        # Lido
        _require(not is_zero_address(target_per_ref_feed), "missing targetPerRef feed")
        _require(target_per_ref_timeout != 0, "targetPerRefChainlinkTimeout zero")

        store = self._store
        store.update(
            {
                "erc20": config.erc20,
                "target_name": config.target_name,
                "reward_erc20": config.reward_erc20,
                "price_timeout": config.price_timeout,
                "chainlink_feed": config.chainlink_feed,
                "oracle_timeout": config.oracle_timeout,
                "oracle_error": config.oracle_error,
                "max_trade_volume": config.max_trade_volume,
                "peg_bottom": FIX_ONE - min(config.default_threshold, FIX_ONE),
                "peg_top": FIX_ONE + config.default_threshold,
                "delay_until_default": config.delay_until_default,
                "revenue_showing": FIX_ONE - revenue_hiding,
                "target_per_ref_feed": normalize_address(target_per_ref_feed),
                "target_per_ref_timeout": target_per_ref_timeout,
                "when_default": NEVER,
            }
        )
        underlying = await self.underlying_ref_per_tok()
        store["exposed_reference_price"] = fix_mul(underlying, store["revenue_showing"])

    # -------------------------------------------------------------------------
    # CONFIG VIEWS
    # -------------------------------------------------------------------------

    async def erc20(self) -> str:
        return self._store["erc20"]

    async def target_name(self) -> str:
        return self._store["target_name"]

    async def reward_erc20(self) -> str:
        return self._store["reward_erc20"]

    async def chainlink_feed(self) -> str:
        return self._store["chainlink_feed"]

    async def target_per_ref_chainlink_feed(self) -> str:
        return self._store["target_per_ref_feed"]

    async def oracle_error(self) -> int:
        return self._store["oracle_error"]

    async def max_trade_volume(self) -> int:
        return self._store["max_trade_volume"]

    async def delay_until_default(self) -> int:
        return self._store["delay_until_default"]

    async def max_oracle_timeout(self) -> int:
        store = self._store
        return max(store["oracle_timeout"], store["target_per_ref_timeout"])

    # -------------------------------------------------------------------------
    # EXCHANGE RATE
    # -------------------------------------------------------------------------

    async def underlying_ref_per_tok(self) -> int:
        """Фактический {ref/tok} из wstETH."""
        token = self.chain.get_contract_at(self._store["erc20"])
        return await token.st_eth_per_token()

    async def ref_per_tok(self) -> int:
        """Публикуемый {ref/tok} (с учётом revenue hiding, обновляется в refresh)."""
        return self._store["exposed_reference_price"]

    async def target_per_ref(self) -> int:
        return FIX_ONE

    # -------------------------------------------------------------------------
    # PRICE
    # -------------------------------------------------------------------------

    async def _feed_price(self, feed_address: str, timeout: int) -> int:
        """
        Ответ фида в 18 decimals.

        Raises:
            InvalidOracleAnswer: если answer <= 0
            StalePrice: если ответ старше timeout
        """
        reading = await self.chain.get_contract_at(feed_address).get_latest()
        if reading.value <= 0:
            raise InvalidOracleAnswer(f"feed {feed_address} answered {reading.value}")
        if self.chain.block_timestamp - reading.timestamp > timeout:
            raise StalePrice(f"feed {feed_address} last updated at {reading.timestamp}")
        return reading.normalized()

    async def try_price(self) -> Tuple[int, int, int]:
        """
        (low, high, peg_price) в 18 decimals.

        Raises:
            InvalidOracleAnswer, StalePrice: при проблемах с любым фидом
        """
        store = self._store
        uoa_per_target = await self._feed_price(store["chainlink_feed"], store["oracle_timeout"])
        target_per_ref = await self._feed_price(
            store["target_per_ref_feed"], store["target_per_ref_timeout"]
        )
        ref_per_tok = await self.underlying_ref_per_tok()

        p = fix_mul(fix_mul(uoa_per_target, target_per_ref), ref_per_tok)
        err = fix_mul(p, store["oracle_error"])
        return p - err, p + err, target_per_ref

    async def price(self) -> Tuple[int, int]:
        """(low, high) в 18 decimals."""
        low, high, _ = await self.try_price()
        return low, high

    # -------------------------------------------------------------------------
    # STATUS
    # -------------------------------------------------------------------------

    def _status_at(self, timestamp: int) -> CollateralStatus:
        when_default = self._store["when_default"]
        if when_default == NEVER:
            return CollateralStatus.SOUND
        if when_default > timestamp:
            return CollateralStatus.IFFY
        return CollateralStatus.DISABLED

    async def status(self) -> CollateralStatus:
        return self._status_at(self.chain.block_timestamp)

    async def when_default(self) -> int:
        return self._store["when_default"]

    def _mark_status(self, status: CollateralStatus) -> None:
        store = self._store
        now = self.chain.block_timestamp
        if store["when_default"] <= now:
            return
        if status == CollateralStatus.SOUND:
            store["when_default"] = NEVER
        elif status == CollateralStatus.IFFY:
            store["when_default"] = min(now + store["delay_until_default"], store["when_default"])
        else:
            store["when_default"] = now

    async def refresh(self, sender: Optional[Signer] = None) -> None:
        """Пересчёт refPerTok и статуса."""
        self.chain.authorize(sender)
        if self._status_at(self.chain.block_timestamp) == CollateralStatus.DISABLED:
            await self.chain.mine()
            return

        store = self._store
        old_status = self._status_at(self.chain.block_timestamp)
        underlying = await self.underlying_ref_per_tok()
        hidden = fix_mul(underlying, store["revenue_showing"])

        if underlying < store["exposed_reference_price"]:
            store["exposed_reference_price"] = hidden
            self._mark_status(CollateralStatus.DISABLED)
        else:
            if hidden > store["exposed_reference_price"]:
                store["exposed_reference_price"] = hidden
            try:
                low, _, peg_price = await self.try_price()
            except (InvalidOracleAnswer, StalePrice) as exc:
                logger.debug("%s: price unavailable: %s", self.address, exc)
                self._mark_status(CollateralStatus.IFFY)
            else:
                if peg_price < store["peg_bottom"] or peg_price > store["peg_top"] or low == 0:
                    self._mark_status(CollateralStatus.IFFY)
                else:
                    self._mark_status(CollateralStatus.SOUND)

        new_status = self._status_at(self.chain.block_timestamp)
        if new_status != old_status:
            logger.info("%s: status %s -> %s", self.address, old_status.value, new_status.value)
        await self.chain.mine()

    async def claim_rewards(self, sender: Optional[Signer] = None) -> None:
        """У wstETH нет reward токена: вызов только майнит блок."""
        self.chain.authorize(sender)
        await self.chain.mine()
