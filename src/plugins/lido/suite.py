"""
Lido плагин — hooks для ConformanceBattery (wstETH collateral)

Цена wstETH: ETH/USD фид * stETH/ETH фид * stETH на wstETH.
Курс stETH меняется только oracle отчётом Lido (через impersonation
LIDO_ORACLE), фиды — прямым update_answer.

Переключатели:
- rewards: SKIP (у wstETH нет reward токена)
- default по targetPerRef: SKIP
- default по refPerTok: RUN
- изменения цены: RUN
"""

import functools
from dataclasses import dataclass
from typing import Any, Mapping, Optional, Union

from src.chain.simulated_chain import Signer, SimulatedChain
from src.collateral.lido_collateral import LidoStakedEthCollateral
from src.core.contracts import validate_collateral_opts
from src.core.domain.address import ZERO_ADDRESS
from src.core.domain.collateral_opts import CollateralOpts, LidoCollateralOpts
from src.core.math.price_composer import compose_price
from src.mocks.aggregator import MockV3Aggregator
from src.mocks.lido import WstETHMock
from src.plugins.battery import assert_reverted_with
from src.plugins.hooks import (
    CollateralFixtureContext,
    ConstructorSubTest,
    HookBundle,
    ScenarioToggle,
)
from src.plugins.lido.constants import (
    DEFAULT_THRESHOLD,
    DELAY_UNTIL_DEFAULT,
    ETH_USD_PRICE_FEED,
    LIDO_ORACLE,
    MAX_TRADE_VOL,
    ORACLE_ERROR,
    ORACLE_TIMEOUT,
    STETH,
    STETH_ETH_PRICE_FEED,
    WSTETH,
)
from src.plugins.lido.helpers import mint_wsteth, reset_fork
from src.plugins.mutators import (
    increase_beacon_balance,
    increase_feed_answer,
    reduce_beacon_balance,
    reduce_feed_answer,
)

COLLATERAL_NAME = "LidoStakedETH"

CHAINLINK_DEFAULT_ANSWER = 1800 * 10**8
CHAINLINK_TARGET_UNIT_DEFAULT_ANSWER = 1 * 10**8


@dataclass
class LidoFixtureContext(CollateralFixtureContext):
    wsteth: WstETHMock
    target_per_ref_chainlink_feed: MockV3Aggregator


# =============================================================================
# DEPLOYMENT
# =============================================================================

DEFAULT_LIDO_COLLATERAL_OPTS = LidoCollateralOpts(
    erc20=WSTETH,
    target_name="ETH",
    reward_erc20=ZERO_ADDRESS,
    price_timeout=ORACLE_TIMEOUT,
    chainlink_feed=ETH_USD_PRICE_FEED,
    oracle_timeout=ORACLE_TIMEOUT,
    oracle_error=ORACLE_ERROR,
    max_trade_volume=MAX_TRADE_VOL,
    default_threshold=DEFAULT_THRESHOLD,
    delay_until_default=DELAY_UNTIL_DEFAULT,
    target_per_ref_chainlink_feed=STETH_ETH_PRICE_FEED,
    target_per_ref_chainlink_timeout=ORACLE_TIMEOUT,
)

OptsLike = Union[None, Mapping[str, Any], LidoCollateralOpts]


def merge_opts(opts: OptsLike = None) -> LidoCollateralOpts:
    """
    Defaults + overrides.

    Overrides-словарь проверяется по схеме collateral_opts.

    Raises:
        jsonschema.ValidationError: неизвестное поле или неверный тип
    """
    if opts is None:
        return DEFAULT_LIDO_COLLATERAL_OPTS
    if isinstance(opts, LidoCollateralOpts):
        return opts
    overrides = dict(opts)
    validate_collateral_opts(overrides)
    return DEFAULT_LIDO_COLLATERAL_OPTS.merged(**overrides)


async def deploy_collateral(chain: SimulatedChain, opts: OptsLike = None) -> LidoStakedEthCollateral:
    opts = merge_opts(opts)
    config = CollateralOpts(**opts.model_dump(include=set(CollateralOpts.model_fields)))
    return await LidoStakedEthCollateral.deploy(
        chain,
        config,
        0,
        opts.target_per_ref_chainlink_feed,
        opts.target_per_ref_chainlink_timeout,
    )


async def make_collateral_fixture_context(
    chain: SimulatedChain,
    alice: Signer,
    opts: OptsLike = None,
) -> LidoFixtureContext:
    """Свежие mock фиды (8 decimals), адаптер поверх них и handle wstETH."""
    collateral_opts = merge_opts(opts)

    chainlink_feed = await MockV3Aggregator.deploy(chain, 8, CHAINLINK_DEFAULT_ANSWER)
    target_per_ref_chainlink_feed = await MockV3Aggregator.deploy(
        chain, 8, CHAINLINK_TARGET_UNIT_DEFAULT_ANSWER
    )
    collateral_opts = collateral_opts.merged(
        chainlink_feed=chainlink_feed.address,
        target_per_ref_chainlink_feed=target_per_ref_chainlink_feed.address,
    )

    wsteth = chain.get_contract_at(WSTETH)
    collateral = await deploy_collateral(chain, collateral_opts)
    tok_decimals = await wsteth.decimals()

    return LidoFixtureContext(
        chain=chain,
        alice=alice,
        collateral=collateral,
        chainlink_feed=chainlink_feed,
        tok=wsteth,
        tok_decimals=tok_decimals,
        reward_token=None,
        wsteth=wsteth,
        target_per_ref_chainlink_feed=target_per_ref_chainlink_feed,
    )


# =============================================================================
# HELPERS
# =============================================================================


async def mint_collateral_to(
    ctx: LidoFixtureContext,
    amount: int,
    user: Signer,
    recipient: str,
) -> None:
    await mint_wsteth(ctx.wsteth, user, amount, recipient)


async def reduce_target_per_ref(ctx: LidoFixtureContext, pct_decrease: int) -> None:
    await reduce_feed_answer(ctx.target_per_ref_chainlink_feed, pct_decrease)


async def increase_target_per_ref(ctx: LidoFixtureContext, pct_increase: int) -> None:
    await increase_feed_answer(ctx.target_per_ref_chainlink_feed, pct_increase)


async def reduce_ref_per_tok(ctx: LidoFixtureContext, pct_decrease: int) -> None:
    # меньше beacon balance → меньше stETH на wstETH → меньше refPerTok
    steth = ctx.chain.get_contract_at(STETH)
    await reduce_beacon_balance(steth, LIDO_ORACLE, pct_decrease)


async def increase_ref_per_tok(ctx: LidoFixtureContext, pct_increase: int) -> None:
    steth = ctx.chain.get_contract_at(STETH)
    await increase_beacon_balance(steth, LIDO_ORACLE, pct_increase)


async def get_expected_price(ctx: LidoFixtureContext) -> int:
    peg_reading = await ctx.chainlink_feed.get_latest()
    target_reading = await ctx.target_per_ref_chainlink_feed.get_latest()
    ref_per_tok = await ctx.collateral.ref_per_tok()
    return compose_price(peg_reading, target_reading, ref_per_tok)


async def before_each_rewards_test(ctx: LidoFixtureContext) -> None:
    pass


# =============================================================================
# HOOK BUNDLE
# =============================================================================


def make_lido_hooks(chain: SimulatedChain) -> HookBundle:
    """HookBundle Lido плагина поверх сети с fork-состоянием Lido."""

    async def does_not_allow_missing_target_per_ref_feed() -> None:
        await assert_reverted_with(
            deploy_collateral(chain, {"target_per_ref_chainlink_feed": ZERO_ADDRESS}),
            "missing targetPerRef feed",
        )

    async def does_not_allow_zero_target_per_ref_timeout() -> None:
        await assert_reverted_with(
            deploy_collateral(chain, {"target_per_ref_chainlink_timeout": 0}),
            "targetPerRefChainlinkTimeout zero",
        )

    return HookBundle(
        deploy_collateral=functools.partial(deploy_collateral, chain),
        make_collateral_fixture_context=functools.partial(make_collateral_fixture_context, chain),
        mint_collateral_to=mint_collateral_to,
        reduce_target_per_ref=reduce_target_per_ref,
        increase_target_per_ref=increase_target_per_ref,
        reduce_ref_per_tok=reduce_ref_per_tok,
        increase_ref_per_tok=increase_ref_per_tok,
        get_expected_price=get_expected_price,
        collateral_specific_constructor_tests=(
            ConstructorSubTest(
                "does not allow missing targetPerRef chainlink feed",
                does_not_allow_missing_target_per_ref_feed,
            ),
            ConstructorSubTest(
                "does not allow targetPerRef oracle timeout at 0",
                does_not_allow_zero_target_per_ref_timeout,
            ),
        ),
        collateral_specific_status_tests=(),
        before_each_rewards_test=before_each_rewards_test,
        it_claims_rewards=ScenarioToggle.SKIP,
        it_checks_target_per_ref_default=ScenarioToggle.SKIP,
        it_checks_ref_per_tok_default=ScenarioToggle.RUN,
        it_check_price_changes=ScenarioToggle.RUN,
        reset_fork=functools.partial(reset_fork, chain),
        get_signers=chain.get_signers,
        collateral_name=COLLATERAL_NAME,
        chainlink_default_answer=CHAINLINK_DEFAULT_ANSWER,
    )
