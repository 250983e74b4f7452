"""
Integration: полный прогон ConformanceBattery по Lido плагину.
"""

import pytest

from src.plugins import ConformanceBattery, ScenarioOutcome
from src.plugins.lido import make_lido_chain, make_lido_hooks

EXPECTED_SKIPPED = {
    "enters IFFY state when targetPerRef depegs below low threshold",
    "enters IFFY state when targetPerRef depegs above high threshold",
    "claims rewards",
}


@pytest.mark.asyncio
async def test_lido_plugin_passes_battery(hooks):
    report = await ConformanceBattery(hooks).run()

    assert report.failed == [], [(r.name, r.error) for r in report.failed]
    assert report.collateral_name == "LidoStakedETH"
    assert {r.name for r in report.skipped} == EXPECTED_SKIPPED


@pytest.mark.asyncio
async def test_groups_are_covered(hooks):
    report = await ConformanceBattery(hooks).run()
    groups = {r.group for r in report.results if r.outcome == ScenarioOutcome.PASSED}
    assert groups == {"constructor", "prices", "status", "mint"}


@pytest.mark.asyncio
async def test_plugin_constructor_checks_run(hooks):
    report = await ConformanceBattery(hooks).run()
    for sub_test in hooks.collateral_specific_constructor_tests:
        result = report.result(sub_test.name)
        assert (result.group, result.outcome) == ("constructor", ScenarioOutcome.PASSED)


@pytest.mark.asyncio
async def test_runs_are_reproducible():
    """Два прогона на разных сетях и повторный прогон на той же дают один отчёт."""
    chain = make_lido_chain()
    first = await ConformanceBattery(make_lido_hooks(chain)).run()
    second = await ConformanceBattery(make_lido_hooks(chain)).run()
    third = await ConformanceBattery(make_lido_hooks(make_lido_chain())).run()

    assert first == second == third
    assert first.to_dict() == third.to_dict()
