"""
Lido плагин — fork-состояние и вспомогательные операции

lido_fork_genesis устанавливает контракты по mainnet адресам:
stETH (с oracle), wstETH (с балансом whale) и два реальных фида.
"""

import logging
from typing import Optional

from src.chain.impersonation import while_impersonating
from src.chain.simulated_chain import ChainConfig, Signer, SimulatedChain
from src.mocks.aggregator import MockV3Aggregator
from src.mocks.lido import StETHMock, WstETHMock
from src.plugins.lido.constants import (
    ETH_USD_PRICE_FEED,
    FORK_BEACON_BALANCE,
    FORK_BEACON_VALIDATORS,
    FORK_BUFFERED_ETHER,
    FORK_DEPOSITED_VALIDATORS,
    FORK_ETH_USD_ANSWER,
    FORK_STETH_ETH_ANSWER,
    FORK_TOTAL_SHARES,
    FORK_WHALE_BALANCE,
    LIDO_ORACLE,
    STETH,
    STETH_ETH_PRICE_FEED,
    WSTETH,
    WSTETH_WHALE,
)

logger = logging.getLogger(__name__)


def lido_fork_genesis(chain: SimulatedChain) -> None:
    """Fork-состояние Lido на пустой сети."""
    chain.install(
        STETH,
        StETHMock,
        StETHMock.initial_storage(
            oracle=LIDO_ORACLE,
            deposited_validators=FORK_DEPOSITED_VALIDATORS,
            beacon_validators=FORK_BEACON_VALIDATORS,
            beacon_balance=FORK_BEACON_BALANCE,
            buffered_ether=FORK_BUFFERED_ETHER,
            total_shares=FORK_TOTAL_SHARES,
        ),
    )
    chain.install(
        WSTETH,
        WstETHMock,
        WstETHMock.initial_storage(steth=STETH, balances={WSTETH_WHALE: FORK_WHALE_BALANCE}),
    )
    chain.install(
        ETH_USD_PRICE_FEED,
        MockV3Aggregator,
        MockV3Aggregator.initial_storage(8, FORK_ETH_USD_ANSWER, chain.block_timestamp),
    )
    chain.install(
        STETH_ETH_PRICE_FEED,
        MockV3Aggregator,
        MockV3Aggregator.initial_storage(18, FORK_STETH_ETH_ANSWER, chain.block_timestamp),
    )


def make_lido_chain(config: Optional[ChainConfig] = None) -> SimulatedChain:
    """Новая сеть с fork-состоянием Lido."""
    return SimulatedChain(config, genesis=lido_fork_genesis)


async def reset_fork(chain: SimulatedChain) -> None:
    await chain.reset_fork()


async def mint_wsteth(
    wsteth: WstETHMock,
    account: Signer,
    amount: int,
    recipient: str,
) -> None:
    """Перевод wstETH от whale к recipient (account не используется)."""
    async with while_impersonating(wsteth.chain, WSTETH_WHALE) as whale:
        await wsteth.transfer(recipient, amount, sender=whale)
    logger.debug("minted %d wstETH to %s", amount, recipient)
