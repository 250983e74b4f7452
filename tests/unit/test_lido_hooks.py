"""
Тесты для hooks Lido плагина.

Coverage:
- get_expected_price по формуле на ответах по умолчанию
- Мутаторы targetPerRef / refPerTok: точные значения
- mint_collateral_to и reset_fork из HookBundle
"""

import pytest

from src.core.math.fixed_point import FIX_ONE
from src.mocks import MockV3Aggregator
from src.plugins.lido import CHAINLINK_DEFAULT_ANSWER, make_collateral_fixture_context
from src.plugins.lido.constants import STETH


class TestExpectedPrice:
    @pytest.mark.asyncio
    async def test_default_answers_formula(self, chain, hooks, alice):
        """1800e8 и 1e8 (8 decimals) → norm * norm * refPerTok / 1e18 / 1e18."""
        ctx = await make_collateral_fixture_context(chain, alice)
        ref_per_tok = await ctx.collateral.ref_per_tok()

        expected = (1800 * 10**8 * 10**10) * (10**8 * 10**10) * ref_per_tok // FIX_ONE // FIX_ONE
        assert CHAINLINK_DEFAULT_ANSWER == 1800 * 10**8
        assert await hooks.get_expected_price(ctx) == expected

    @pytest.mark.asyncio
    async def test_formula_after_rate_increase(self, chain, hooks, alice):
        ctx = await make_collateral_fixture_context(chain, alice)
        await hooks.increase_ref_per_tok(ctx, 10)
        await ctx.collateral.refresh()
        ref_per_tok = await ctx.collateral.ref_per_tok()

        expected = 1800 * FIX_ONE * FIX_ONE * ref_per_tok // FIX_ONE // FIX_ONE
        assert await hooks.get_expected_price(ctx) == expected


class TestMutatorHooks:
    """Тесты мутаторов через HookBundle."""

    @pytest.mark.asyncio
    async def test_reduce_target_per_ref_ten_percent(self, chain, hooks, alice):
        ctx = await make_collateral_fixture_context(chain, alice)
        old = await ctx.target_per_ref_chainlink_feed.latest_answer()
        await hooks.reduce_target_per_ref(ctx, 10)
        assert await ctx.target_per_ref_chainlink_feed.latest_answer() == old - old * 10 // 100

    @pytest.mark.asyncio
    async def test_increase_target_per_ref(self, chain, hooks, alice):
        ctx = await make_collateral_fixture_context(chain, alice)
        await hooks.increase_target_per_ref(ctx, 20)
        assert await ctx.target_per_ref_chainlink_feed.latest_answer() == 120 * 10**6

    @pytest.mark.asyncio
    async def test_increase_ref_per_tok_five_percent(self, chain, hooks, alice):
        ctx = await make_collateral_fixture_context(chain, alice)
        steth = chain.get_contract_at(STETH)
        deposited, validators, balance = await steth.get_beacon_stat()

        await hooks.increase_ref_per_tok(ctx, 5)

        assert await steth.get_beacon_stat() == (deposited, validators, balance + balance * 5 // 100)

    @pytest.mark.asyncio
    async def test_reduce_ref_per_tok(self, chain, hooks, alice):
        ctx = await make_collateral_fixture_context(chain, alice)
        steth = chain.get_contract_at(STETH)
        _, _, balance = await steth.get_beacon_stat()
        rate_before = await ctx.collateral.underlying_ref_per_tok()

        await hooks.reduce_ref_per_tok(ctx, 5)

        assert (await steth.get_beacon_stat())[2] == balance - balance * 5 // 100
        assert await ctx.collateral.underlying_ref_per_tok() < rate_before


class TestBundleHelpers:
    @pytest.mark.asyncio
    async def test_mint_collateral_to(self, chain, hooks, alice):
        ctx = await make_collateral_fixture_context(chain, alice)
        recipient = chain.get_signers()[2].address
        await hooks.mint_collateral_to(ctx, 3 * FIX_ONE, alice, recipient)
        assert await ctx.tok.balance_of(recipient) == 3 * FIX_ONE

    @pytest.mark.asyncio
    async def test_reset_fork_restores_genesis(self, chain, hooks):
        feed = await MockV3Aggregator.deploy(chain, 8, 1)
        await hooks.reset_fork()
        assert not chain.has_code(feed.address)
        assert chain.has_code(STETH)
