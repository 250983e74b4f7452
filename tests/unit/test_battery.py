"""
Тесты для ConformanceBattery.

Coverage:
- Провал одного сценария не влияет на остальные
- SKIP → SKIPPED без запуска тела (и без reset_fork)
- Плагин-специфичные status sub-тесты
- Отчёт: выборки по итогу, to_dict по схеме
"""

import dataclasses

import pytest

from src.collateral import CollateralStatus
from src.core.errors import HookBundleError, Reverted
from src.plugins.battery import (
    BatteryReport,
    ConformanceBattery,
    ScenarioOutcome,
    ScenarioResult,
    assert_reverted_with,
)
from src.plugins.hooks import ScenarioToggle, StatusSubTest

REF_PER_TOK_INCREASE_SCENARIOS = {
    "prices change as refPerTok changes",
    "remains SOUND when refPerTok() increases",
}


class TestAssertRevertedWith:
    @pytest.mark.asyncio
    async def test_matching_reason(self):
        async def call():
            raise Reverted("missing erc20")

        await assert_reverted_with(call(), "missing erc20")

    @pytest.mark.asyncio
    async def test_other_reason(self):
        async def call():
            raise Reverted("oracleTimeout zero")

        with pytest.raises(AssertionError, match="oracleTimeout zero"):
            await assert_reverted_with(call(), "missing erc20")

    @pytest.mark.asyncio
    async def test_call_succeeded(self):
        async def call():
            return 1

        with pytest.raises(AssertionError, match="succeeded"):
            await assert_reverted_with(call(), "missing erc20")


class TestBatteryIsolation:
    """Тесты изоляции сценариев."""

    def test_requires_hook_bundle(self):
        with pytest.raises(TypeError):
            ConformanceBattery({"collateral_name": "x"})

    def test_requires_signers(self, hooks):
        bundle = dataclasses.replace(hooks, get_signers=lambda: [])
        with pytest.raises(HookBundleError):
            ConformanceBattery(bundle)

    @pytest.mark.asyncio
    async def test_failing_hook_fails_only_its_scenarios(self, hooks):
        async def increase_ref_per_tok(ctx, pct):
            raise RuntimeError("boom")

        broken = dataclasses.replace(hooks, increase_ref_per_tok=increase_ref_per_tok)
        report = await ConformanceBattery(broken).run()

        assert {result.name for result in report.failed} == REF_PER_TOK_INCREASE_SCENARIOS
        for result in report.failed:
            assert result.error == "RuntimeError: boom"
        assert not report.ok
        assert len(report.passed) == len(report.results) - len(report.skipped) - 2

    @pytest.mark.asyncio
    async def test_assertion_message_reported(self, hooks):
        async def fails(ctx):
            raise AssertionError("collateral looks wrong")

        bundle = dataclasses.replace(
            hooks, collateral_specific_status_tests=(StatusSubTest("custom check", fails),)
        )
        report = await ConformanceBattery(bundle).run()
        result = report.result("custom check")
        assert result.group == "status"
        assert result.outcome == ScenarioOutcome.FAILED
        assert result.error == "collateral looks wrong"

    @pytest.mark.asyncio
    async def test_status_sub_test_gets_fresh_fixture(self, hooks):
        seen = []

        async def sound_on_fresh_fixture(ctx):
            seen.append(ctx.collateral.address)
            assert await ctx.collateral.status() == CollateralStatus.SOUND

        bundle = dataclasses.replace(
            hooks,
            collateral_specific_status_tests=(
                StatusSubTest("fresh fixture is SOUND", sound_on_fresh_fixture),
            ),
        )
        report = await ConformanceBattery(bundle).run()
        assert report.result("fresh fixture is SOUND").outcome == ScenarioOutcome.PASSED
        assert len(seen) == 1


class TestToggles:
    @pytest.mark.asyncio
    async def test_skipped_scenarios_do_not_run(self, hooks):
        resets = []

        async def reset_fork():
            resets.append(1)
            await hooks.reset_fork()

        async def unreachable(ctx, pct):
            raise RuntimeError("must not run")

        bundle = dataclasses.replace(
            hooks,
            reset_fork=reset_fork,
            increase_ref_per_tok=unreachable,
            it_claims_rewards=ScenarioToggle.SKIP,
            it_checks_target_per_ref_default=ScenarioToggle.SKIP,
            it_checks_ref_per_tok_default=ScenarioToggle.SKIP,
            it_check_price_changes=ScenarioToggle.SKIP,
        )
        report = await ConformanceBattery(bundle).run()

        assert report.ok
        assert len(report.skipped) == 8
        assert all(result.error is None for result in report.skipped)
        assert len(resets) == len(report.results) - len(report.skipped)

    @pytest.mark.asyncio
    async def test_target_per_ref_default_enabled(self, hooks):
        bundle = dataclasses.replace(hooks, it_checks_target_per_ref_default=ScenarioToggle.RUN)
        report = await ConformanceBattery(bundle).run()
        assert report.ok
        for name in (
            "enters IFFY state when targetPerRef depegs below low threshold",
            "enters IFFY state when targetPerRef depegs above high threshold",
        ):
            assert report.result(name).outcome == ScenarioOutcome.PASSED

    @pytest.mark.asyncio
    async def test_rewards_enabled_without_reward_token(self, hooks):
        bundle = dataclasses.replace(hooks, it_claims_rewards=ScenarioToggle.RUN)
        report = await ConformanceBattery(bundle).run()
        assert report.result("claims rewards").outcome == ScenarioOutcome.PASSED


class TestBatteryReport:
    def _report(self):
        return BatteryReport(
            collateral_name="Example",
            results=(
                ScenarioResult(group="mint", name="a", outcome=ScenarioOutcome.PASSED),
                ScenarioResult(group="mint", name="b", outcome=ScenarioOutcome.FAILED, error="x"),
                ScenarioResult(group="rewards", name="c", outcome=ScenarioOutcome.SKIPPED),
            ),
        )

    def test_selections(self):
        report = self._report()
        assert [r.name for r in report.passed] == ["a"]
        assert [r.name for r in report.failed] == ["b"]
        assert [r.name for r in report.skipped] == ["c"]
        assert not report.ok

    def test_unknown_scenario(self):
        with pytest.raises(KeyError):
            self._report().result("missing")

    def test_to_dict(self):
        data = self._report().to_dict()
        assert data["collateral_name"] == "Example"
        assert data["results"][1] == {"group": "mint", "name": "b", "outcome": "FAILED", "error": "x"}
        assert data["results"][0]["error"] is None
