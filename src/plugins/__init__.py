"""
Plugins — Hook Contract, общий battery и плагины collateral.

- hooks: HookBundle и типы fixture
- mutators: применение процентных изменений к фидам и rate source
- battery: ConformanceBattery и отчёт
- lido: плагин wstETH
"""

from src.plugins.battery import (
    BatteryReport,
    ConformanceBattery,
    ScenarioOutcome,
    ScenarioResult,
    assert_reverted_with,
)
from src.plugins.hooks import (
    CollateralFixtureContext,
    ConstructorSubTest,
    HookBundle,
    ScenarioToggle,
    StatusSubTest,
)

__all__ = [
    "BatteryReport",
    "CollateralFixtureContext",
    "ConformanceBattery",
    "ConstructorSubTest",
    "HookBundle",
    "ScenarioOutcome",
    "ScenarioResult",
    "ScenarioToggle",
    "StatusSubTest",
    "assert_reverted_with",
]
