"""
ConformanceBattery — общий набор проверок для любого collateral плагина

Battery получает только HookBundle и прогоняет фиксированный набор
сценариев. Каждый сценарий:
1. reset_fork() — чистое fork-состояние
2. свежий fixture (если нужен)
3. проверки; провал завершает только этот сценарий

Сценарии с ScenarioToggle.SKIP попадают в отчёт как SKIPPED.

Группы:
- constructor: деплой по умолчанию, общие отказы конструктора,
  плагин-специфичные constructor sub-тесты
- prices: цена адаптера совпадает с get_expected_price при изменениях
  peg фида, target-per-ref и refPerTok
- status: SOUND / IFFY / DISABLED при устаревании фидов, depeg и
  изменении refPerTok, плагин-специфичные status sub-тесты
- rewards: claim_rewards не уменьшает reward баланс
- mint: mint_collateral_to начисляет ровно amount
"""

import logging
from dataclasses import dataclass
from enum import Enum
from typing import Any, Awaitable, Callable, Dict, List, Mapping, Optional, Tuple

from pydantic import BaseModel, Field

from src.collateral.status import CollateralStatus
from src.core.contracts import validate_battery_report
from src.core.domain.address import ZERO_ADDRESS
from src.core.errors import HookBundleError, InvalidOracleAnswer, Reverted
from src.core.math.fixed_point import FIX_ONE, pct_increase
from src.plugins.hooks import CollateralFixtureContext, HookBundle, ScenarioToggle

logger = logging.getLogger(__name__)

# Относительный допуск сравнения цены адаптера с ожидаемой
PRICE_TOLERANCE_DIVISOR = 10**15

# Сдвиг времени перед claim_rewards (сек)
REWARDS_TIME_SKIP = 3600


# =============================================================================
# REPORT
# =============================================================================


class ScenarioOutcome(str, Enum):
    """Итог сценария."""
    PASSED = "PASSED"
    FAILED = "FAILED"
    SKIPPED = "SKIPPED"


class ScenarioResult(BaseModel):
    """Результат одного сценария."""

    group: str = Field(..., min_length=1, description="Группа сценариев")
    name: str = Field(..., min_length=1, description="Название сценария")
    outcome: ScenarioOutcome = Field(..., description="Итог")
    error: Optional[str] = Field(None, description="Причина провала (nullable)")

    model_config = {"frozen": True}


class BatteryReport(BaseModel):
    """Отчёт прогона battery для одного плагина."""

    collateral_name: str = Field(..., min_length=1)
    results: Tuple[ScenarioResult, ...] = Field(default_factory=tuple)

    model_config = {"frozen": True}

    def _with_outcome(self, outcome: ScenarioOutcome) -> List[ScenarioResult]:
        return [result for result in self.results if result.outcome == outcome]

    @property
    def passed(self) -> List[ScenarioResult]:
        return self._with_outcome(ScenarioOutcome.PASSED)

    @property
    def failed(self) -> List[ScenarioResult]:
        return self._with_outcome(ScenarioOutcome.FAILED)

    @property
    def skipped(self) -> List[ScenarioResult]:
        return self._with_outcome(ScenarioOutcome.SKIPPED)

    @property
    def ok(self) -> bool:
        return not self.failed

    def result(self, name: str) -> ScenarioResult:
        """Результат сценария по имени. Raises KeyError."""
        for result in self.results:
            if result.name == name:
                return result
        raise KeyError(name)

    def to_dict(self) -> Dict[str, Any]:
        """JSON-совместимый dict, проверенный по схеме battery_report."""
        data = self.model_dump(mode="json")
        validate_battery_report(data)
        return data


# =============================================================================
# ASSERTIONS
# =============================================================================


def expect(condition: bool, message: str) -> None:
    if not condition:
        raise AssertionError(message)


async def assert_reverted_with(awaitable: Awaitable[Any], reason: str) -> None:
    """
    Вызов должен быть отклонён с точно такой причиной.

    Raises:
        AssertionError: если вызов прошёл или причина другая
    """
    try:
        await awaitable
    except Reverted as exc:
        expect(exc.reason == reason, f"expected revert {reason!r}, got {exc.reason!r}")
        return
    raise AssertionError(f"expected revert {reason!r}, but call succeeded")


# =============================================================================
# BATTERY
# =============================================================================


@dataclass(frozen=True)
class Scenario:
    group: str
    name: str
    toggle: ScenarioToggle
    body: Callable[[], Awaitable[None]]


# (название, overrides, причина отказа)
GENERIC_CONSTRUCTOR_REJECTIONS: Tuple[Tuple[str, Mapping[str, Any], str], ...] = (
    ("does not allow missing erc20", {"erc20": ZERO_ADDRESS}, "missing erc20"),
    (
        "does not allow missing chainlink feed",
        {"chainlink_feed": ZERO_ADDRESS},
        "missing chainlink feed",
    ),
    ("does not allow zero price timeout", {"price_timeout": 0}, "price timeout zero"),
    ("does not allow zero oracle timeout", {"oracle_timeout": 0}, "oracleTimeout zero"),
    (
        "does not allow out of range oracle error",
        {"oracle_error": FIX_ONE},
        "oracle error out of range",
    ),
    ("does not allow zero max trade volume", {"max_trade_volume": 0}, "invalid max trade volume"),
    ("does not allow missing target name", {"target_name": ""}, "targetName missing"),
    (
        "does not allow zero delay until default",
        {"default_threshold": FIX_ONE // 20, "delay_until_default": 0},
        "delayUntilDefault zero",
    ),
)


class ConformanceBattery:
    """Прогон общего набора сценариев по HookBundle."""

    def __init__(self, hooks: HookBundle):
        if not isinstance(hooks, HookBundle):
            raise TypeError(f"expected HookBundle, got {type(hooks).__name__}")
        if not hooks.get_signers():
            raise HookBundleError("get_signers returned no signers")
        self.hooks = hooks

    # -------------------------------------------------------------------------
    # RUN
    # -------------------------------------------------------------------------

    async def run(self) -> BatteryReport:
        results = []
        for scenario in self.scenarios():
            results.append(await self.run_scenario(scenario))
        report = BatteryReport(collateral_name=self.hooks.collateral_name, results=tuple(results))
        logger.info(
            "%s: %d passed, %d failed, %d skipped",
            report.collateral_name,
            len(report.passed),
            len(report.failed),
            len(report.skipped),
        )
        return report

    async def run_scenario(self, scenario: Scenario) -> ScenarioResult:
        if scenario.toggle == ScenarioToggle.SKIP:
            return ScenarioResult(
                group=scenario.group, name=scenario.name, outcome=ScenarioOutcome.SKIPPED
            )
        try:
            await self.hooks.reset_fork()
            await scenario.body()
        except AssertionError as exc:
            error = str(exc) or "assertion failed"
        except Exception as exc:
            # провал сценария не должен останавливать соседние
            error = f"{type(exc).__name__}: {exc}"
        else:
            logger.debug("%s / %s: passed", self.hooks.collateral_name, scenario.name)
            return ScenarioResult(
                group=scenario.group, name=scenario.name, outcome=ScenarioOutcome.PASSED
            )
        logger.warning("%s / %s: %s", self.hooks.collateral_name, scenario.name, error)
        return ScenarioResult(
            group=scenario.group, name=scenario.name, outcome=ScenarioOutcome.FAILED, error=error
        )

    def scenarios(self) -> List[Scenario]:
        hooks = self.hooks
        run = ScenarioToggle.RUN
        scenarios = [Scenario("constructor", "deploys with default options", run, self._deploys_with_defaults)]

        for name, overrides, reason in GENERIC_CONSTRUCTOR_REJECTIONS:
            scenarios.append(
                Scenario("constructor", name, run, self._rejects(overrides, reason))
            )
        for sub_test in hooks.collateral_specific_constructor_tests:
            scenarios.append(Scenario("constructor", sub_test.name, run, sub_test.run))

        price_toggle = hooks.it_check_price_changes
        scenarios += [
            Scenario("prices", "prices change as peg feed price changes", price_toggle, self._prices_track_peg_feed),
            Scenario("prices", "prices change as targetPerRef changes", price_toggle, self._prices_track_target_per_ref),
            Scenario("prices", "prices change as refPerTok changes", price_toggle, self._prices_track_ref_per_tok),
        ]

        tpr_toggle = hooks.it_checks_target_per_ref_default
        rpt_toggle = hooks.it_checks_ref_per_tok_default
        scenarios += [
            Scenario("status", "maintains SOUND status at default prices", run, self._sound_at_defaults),
            Scenario("status", "enters IFFY state when price becomes stale", run, self._iffy_when_stale),
            Scenario("status", "enters IFFY state when peg feed answers zero", run, self._iffy_when_peg_feed_zero),
            Scenario("status", "enters IFFY state when targetPerRef depegs below low threshold", tpr_toggle, self._depeg_below),
            Scenario("status", "enters IFFY state when targetPerRef depegs above high threshold", tpr_toggle, self._depeg_above),
            Scenario("status", "enters DISABLED state when refPerTok() decreases", rpt_toggle, self._disabled_when_ref_per_tok_decreases),
            Scenario("status", "remains SOUND when refPerTok() increases", rpt_toggle, self._sound_when_ref_per_tok_increases),
        ]
        for sub_test in hooks.collateral_specific_status_tests:
            scenarios.append(Scenario("status", sub_test.name, run, self._status_sub_test(sub_test.run)))

        scenarios += [
            Scenario("rewards", "claims rewards", hooks.it_claims_rewards, self._claims_rewards),
            Scenario("mint", "mints collateral to recipient", run, self._mints_to_recipient),
        ]
        return scenarios

    # -------------------------------------------------------------------------
    # HELPERS
    # -------------------------------------------------------------------------

    async def _fixture(self, opts: Optional[Mapping[str, Any]] = None) -> CollateralFixtureContext:
        signers = self.hooks.get_signers()
        alice = signers[1] if len(signers) > 1 else signers[0]
        return await self.hooks.make_collateral_fixture_context(alice, opts)

    async def _expect_price(self, ctx: CollateralFixtureContext) -> None:
        expected = await self.hooks.get_expected_price(ctx)
        low, high = await ctx.collateral.price()
        mid = (low + high) // 2
        tolerance = max(expected // PRICE_TOLERANCE_DIVISOR, 2)
        expect(low <= high, f"low price {low} above high price {high}")
        expect(abs(mid - expected) <= tolerance, f"price {mid} != expected {expected}")

    async def _expect_status(self, ctx: CollateralFixtureContext, status: CollateralStatus) -> None:
        actual = await ctx.collateral.status()
        expect(actual == status, f"expected status {status.value}, got {actual.value}")

    # -------------------------------------------------------------------------
    # CONSTRUCTOR
    # -------------------------------------------------------------------------

    async def _deploys_with_defaults(self) -> None:
        collateral = await self.hooks.deploy_collateral()
        expect(await collateral.ref_per_tok() > 0, "refPerTok must be positive after deploy")
        expect(await collateral.status() == CollateralStatus.SOUND, "fresh collateral must be SOUND")

    def _rejects(self, overrides: Mapping[str, Any], reason: str) -> Callable[[], Awaitable[None]]:
        async def body() -> None:
            await assert_reverted_with(self.hooks.deploy_collateral(dict(overrides)), reason)

        return body

    # -------------------------------------------------------------------------
    # PRICES
    # -------------------------------------------------------------------------

    async def _prices_track_peg_feed(self) -> None:
        ctx = await self._fixture()
        await ctx.collateral.refresh()
        await self._expect_price(ctx)

        await ctx.chainlink_feed.update_answer(pct_increase(self.hooks.chainlink_default_answer, 20))
        await ctx.collateral.refresh()
        await self._expect_price(ctx)

        await ctx.chainlink_feed.update_answer(self.hooks.chainlink_default_answer // 2)
        await ctx.collateral.refresh()
        await self._expect_price(ctx)

    async def _prices_track_target_per_ref(self) -> None:
        ctx = await self._fixture()
        await ctx.collateral.refresh()
        await self._expect_price(ctx)

        await self.hooks.increase_target_per_ref(ctx, 20)
        await ctx.collateral.refresh()
        await self._expect_price(ctx)

        await self.hooks.reduce_target_per_ref(ctx, 50)
        await ctx.collateral.refresh()
        await self._expect_price(ctx)

    async def _prices_track_ref_per_tok(self) -> None:
        ctx = await self._fixture()
        await ctx.collateral.refresh()
        await self._expect_price(ctx)

        await self.hooks.increase_ref_per_tok(ctx, 10)
        await ctx.collateral.refresh()
        await self._expect_price(ctx)

        await self.hooks.reduce_ref_per_tok(ctx, 5)
        await ctx.collateral.refresh()
        await self._expect_price(ctx)

    # -------------------------------------------------------------------------
    # STATUS
    # -------------------------------------------------------------------------

    async def _sound_at_defaults(self) -> None:
        ctx = await self._fixture()
        await ctx.collateral.refresh()
        await self._expect_status(ctx, CollateralStatus.SOUND)

    async def _iffy_when_stale(self) -> None:
        ctx = await self._fixture()
        await ctx.collateral.refresh()
        await self._expect_status(ctx, CollateralStatus.SOUND)

        await ctx.chain.advance_time(await ctx.collateral.max_oracle_timeout() + 1)
        await ctx.collateral.refresh()
        await self._expect_status(ctx, CollateralStatus.IFFY)

        await ctx.chain.advance_time(await ctx.collateral.delay_until_default())
        await self._expect_status(ctx, CollateralStatus.DISABLED)

    async def _iffy_when_peg_feed_zero(self) -> None:
        ctx = await self._fixture()
        await ctx.chainlink_feed.update_answer(0)
        await ctx.collateral.refresh()
        await self._expect_status(ctx, CollateralStatus.IFFY)
        try:
            await self.hooks.get_expected_price(ctx)
        except InvalidOracleAnswer:
            return
        raise AssertionError("expected price must reject a zero peg answer")

    async def _depeg(self, mutate: Callable[[CollateralFixtureContext, int], Awaitable[None]]) -> None:
        ctx = await self._fixture()
        await ctx.collateral.refresh()
        await self._expect_status(ctx, CollateralStatus.SOUND)

        await mutate(ctx, 20)
        await ctx.collateral.refresh()
        await self._expect_status(ctx, CollateralStatus.IFFY)

        await ctx.chain.advance_time(await ctx.collateral.delay_until_default())
        await ctx.collateral.refresh()
        await self._expect_status(ctx, CollateralStatus.DISABLED)

    async def _depeg_below(self) -> None:
        await self._depeg(self.hooks.reduce_target_per_ref)

    async def _depeg_above(self) -> None:
        await self._depeg(self.hooks.increase_target_per_ref)

    async def _disabled_when_ref_per_tok_decreases(self) -> None:
        ctx = await self._fixture()
        await ctx.collateral.refresh()
        await self._expect_status(ctx, CollateralStatus.SOUND)
        ref_per_tok_before = await ctx.collateral.ref_per_tok()

        await self.hooks.reduce_ref_per_tok(ctx, 5)
        await ctx.collateral.refresh()
        await self._expect_status(ctx, CollateralStatus.DISABLED)
        expect(await ctx.collateral.ref_per_tok() < ref_per_tok_before, "refPerTok must decrease")

    async def _sound_when_ref_per_tok_increases(self) -> None:
        ctx = await self._fixture()
        await ctx.collateral.refresh()
        ref_per_tok_before = await ctx.collateral.ref_per_tok()

        await self.hooks.increase_ref_per_tok(ctx, 5)
        await ctx.collateral.refresh()
        await self._expect_status(ctx, CollateralStatus.SOUND)
        expect(await ctx.collateral.ref_per_tok() > ref_per_tok_before, "refPerTok must increase")

    def _status_sub_test(
        self, run: Callable[[CollateralFixtureContext], Awaitable[None]]
    ) -> Callable[[], Awaitable[None]]:
        async def body() -> None:
            await run(await self._fixture())

        return body

    # -------------------------------------------------------------------------
    # REWARDS & MINT
    # -------------------------------------------------------------------------

    async def _claims_rewards(self) -> None:
        ctx = await self._fixture()
        await self.hooks.before_each_rewards_test(ctx)
        amount = 10**ctx.tok_decimals
        await self.hooks.mint_collateral_to(ctx, amount, ctx.alice, ctx.collateral.address)
        await ctx.chain.advance_time(REWARDS_TIME_SKIP)

        before = await ctx.reward_token.balance_of(ctx.collateral.address) if ctx.reward_token else 0
        await ctx.collateral.claim_rewards()
        after = await ctx.reward_token.balance_of(ctx.collateral.address) if ctx.reward_token else 0
        expect(after >= before, f"reward balance dropped from {before} to {after}")

    async def _mints_to_recipient(self) -> None:
        ctx = await self._fixture()
        recipient = ctx.alice.address
        amount = 10**ctx.tok_decimals
        before = await ctx.tok.balance_of(recipient)
        await self.hooks.mint_collateral_to(ctx, amount, ctx.alice, recipient)
        after = await ctx.tok.balance_of(recipient)
        expect(after - before == amount, f"minted {after - before}, expected {amount}")
