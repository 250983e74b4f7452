"""
Hook Contract — что плагин collateral отдаёт общему battery

HookBundle — фиксированная запись именованных callables и двух констант.
Все поля обязательны: отсутствующее поле → TypeError при создании,
поле неверного вида → HookBundleError при создании (а не во время прогона).
Поведение "ничего не делать" задаётся явно: пустой tuple sub-тестов или
async no-op.

Переключатели сценариев — ScenarioToggle {RUN, SKIP}: набор проверок
виден статически, без условных ссылок на функции.
"""

import inspect
from dataclasses import dataclass, fields
from enum import Enum
from typing import Any, Awaitable, Callable, Optional, Sequence, Tuple

from src.chain.simulated_chain import Signer, SimulatedChain
from src.core.errors import HookBundleError


class ScenarioToggle(str, Enum):
    """Включение класса сценариев в прогон."""
    RUN = "run"
    SKIP = "skip"


@dataclass
class CollateralFixtureContext:
    """
    Состояние одного сценария: адаптер, его фиды и токен.

    Создаётся заново для каждого сценария и не разделяется между ними.
    """

    chain: SimulatedChain
    alice: Signer
    collateral: Any
    chainlink_feed: Any
    tok: Any
    tok_decimals: int
    reward_token: Optional[Any]


@dataclass(frozen=True)
class ConstructorSubTest:
    """Проверка конструктора: конкретная неверная конфигурация отклоняется."""

    name: str
    run: Callable[[], Awaitable[None]]


@dataclass(frozen=True)
class StatusSubTest:
    """Плагин-специфичная проверка статуса на свежем fixture."""

    name: str
    run: Callable[[CollateralFixtureContext], Awaitable[None]]


DeployCollateralFunc = Callable[..., Awaitable[Any]]
MakeFixtureFunc = Callable[..., Awaitable[CollateralFixtureContext]]
MintCollateralFunc = Callable[[CollateralFixtureContext, int, Signer, str], Awaitable[None]]
MutatorFunc = Callable[[CollateralFixtureContext, int], Awaitable[None]]
ExpectedPriceFunc = Callable[[CollateralFixtureContext], Awaitable[int]]
ContextHookFunc = Callable[[CollateralFixtureContext], Awaitable[None]]


_ASYNC_HOOKS = (
    "deploy_collateral",
    "make_collateral_fixture_context",
    "mint_collateral_to",
    "reduce_target_per_ref",
    "increase_target_per_ref",
    "reduce_ref_per_tok",
    "increase_ref_per_tok",
    "get_expected_price",
    "before_each_rewards_test",
    "reset_fork",
)

_TOGGLES = (
    "it_claims_rewards",
    "it_checks_target_per_ref_default",
    "it_checks_ref_per_tok_default",
    "it_check_price_changes",
)


@dataclass(frozen=True)
class HookBundle:
    """Полный набор hooks плагина для ConformanceBattery."""

    deploy_collateral: DeployCollateralFunc
    make_collateral_fixture_context: MakeFixtureFunc
    mint_collateral_to: MintCollateralFunc
    reduce_target_per_ref: MutatorFunc
    increase_target_per_ref: MutatorFunc
    reduce_ref_per_tok: MutatorFunc
    increase_ref_per_tok: MutatorFunc
    get_expected_price: ExpectedPriceFunc
    collateral_specific_constructor_tests: Tuple[ConstructorSubTest, ...]
    collateral_specific_status_tests: Tuple[StatusSubTest, ...]
    before_each_rewards_test: ContextHookFunc
    it_claims_rewards: ScenarioToggle
    it_checks_target_per_ref_default: ScenarioToggle
    it_checks_ref_per_tok_default: ScenarioToggle
    it_check_price_changes: ScenarioToggle
    reset_fork: Callable[[], Awaitable[None]]
    get_signers: Callable[[], Sequence[Signer]]
    collateral_name: str
    chainlink_default_answer: int

    def __post_init__(self) -> None:
        for name in _ASYNC_HOOKS:
            hook = getattr(self, name)
            if not callable(hook) or not inspect.iscoroutinefunction(hook):
                raise HookBundleError(f"{name} must be an async function, got {hook!r}")

        if not callable(self.get_signers):
            raise HookBundleError(f"get_signers must be callable, got {self.get_signers!r}")

        for name in _TOGGLES:
            if not isinstance(getattr(self, name), ScenarioToggle):
                raise HookBundleError(f"{name} must be a ScenarioToggle")

        _check_sub_tests(
            "collateral_specific_constructor_tests",
            self.collateral_specific_constructor_tests,
            ConstructorSubTest,
        )
        _check_sub_tests(
            "collateral_specific_status_tests",
            self.collateral_specific_status_tests,
            StatusSubTest,
        )

        if not isinstance(self.collateral_name, str) or not self.collateral_name:
            raise HookBundleError("collateral_name must be a non-empty string")
        if (
            not isinstance(self.chainlink_default_answer, int)
            or isinstance(self.chainlink_default_answer, bool)
            or self.chainlink_default_answer <= 0
        ):
            raise HookBundleError("chainlink_default_answer must be a positive int")

    @classmethod
    def field_names(cls) -> Tuple[str, ...]:
        return tuple(f.name for f in fields(cls))


def _check_sub_tests(name: str, sub_tests: Any, expected_type: type) -> None:
    if not isinstance(sub_tests, tuple):
        raise HookBundleError(f"{name} must be a tuple, got {type(sub_tests).__name__}")
    for sub_test in sub_tests:
        if not isinstance(sub_test, expected_type):
            raise HookBundleError(f"{name} items must be {expected_type.__name__}")
        if not inspect.iscoroutinefunction(sub_test.run):
            raise HookBundleError(f"{name}: {sub_test.name!r} must be an async function")
