"""
Тесты для Scenario Mutators.

Coverage:
- Процентное изменение ответа фида (точное, с усечением)
- Изменение backing баланса только через oracle отчёт
- Impersonation не утекает после мутации (и после ошибки)
- Процент вне [0, 100] → ArithmeticOverflow
"""

import pytest

from src.core.errors import ArithmeticOverflow, Unauthorized
from src.mocks import MockV3Aggregator
from src.plugins.lido.constants import LIDO_ORACLE, STETH
from src.plugins.mutators import (
    increase_beacon_balance,
    increase_feed_answer,
    reduce_beacon_balance,
    reduce_feed_answer,
    report_beacon_balance,
)


class TestFeedMutators:
    @pytest.mark.asyncio
    async def test_reduce_ten_percent(self, chain):
        feed = await MockV3Aggregator.deploy(chain, 8, 1800 * 10**8)
        assert await reduce_feed_answer(feed, 10) == 1620 * 10**8
        assert await feed.latest_answer() == 1620 * 10**8

    @pytest.mark.asyncio
    async def test_increase_twenty_percent(self, chain):
        feed = await MockV3Aggregator.deploy(chain, 8, 10**8)
        await increase_feed_answer(feed, 20)
        assert await feed.latest_answer() == 120 * 10**6

    @pytest.mark.asyncio
    async def test_delta_truncates(self, chain):
        feed = await MockV3Aggregator.deploy(chain, 0, 99)
        await reduce_feed_answer(feed, 10)
        assert await feed.latest_answer() == 90

    @pytest.mark.asyncio
    async def test_mutation_opens_new_round(self, chain):
        feed = await MockV3Aggregator.deploy(chain, 8, 10**8)
        await increase_feed_answer(feed, 0)
        assert (await feed.latest_round_data()).round_id == 2


class TestBeaconBalanceMutators:
    """Тесты изменения курса через oracle отчёт."""

    @pytest.mark.asyncio
    async def test_increase_five_percent(self, chain):
        steth = chain.get_contract_at(STETH)
        deposited, validators, balance = await steth.get_beacon_stat()
        new_balance = await increase_beacon_balance(steth, LIDO_ORACLE, 5)
        assert new_balance == balance + balance * 5 // 100
        assert await steth.get_beacon_stat() == (deposited, validators, new_balance)

    @pytest.mark.asyncio
    async def test_reduce_lowers_pooled_ether(self, chain):
        steth = chain.get_contract_at(STETH)
        before = await steth.get_total_pooled_ether()
        await reduce_beacon_balance(steth, LIDO_ORACLE, 10)
        assert await steth.get_total_pooled_ether() < before

    @pytest.mark.asyncio
    async def test_impersonation_released(self, chain):
        await increase_beacon_balance(chain.get_contract_at(STETH), LIDO_ORACLE, 1)
        assert not chain.is_impersonated(LIDO_ORACLE)

    @pytest.mark.asyncio
    async def test_non_oracle_reporter_rejected(self, chain, alice):
        steth = chain.get_contract_at(STETH)
        with pytest.raises(Unauthorized):
            await report_beacon_balance(steth, alice.address, 1)
        assert not chain.is_impersonated(alice.address)

    @pytest.mark.asyncio
    async def test_pct_above_hundred_overflows(self, chain):
        steth = chain.get_contract_at(STETH)
        _, _, balance = await steth.get_beacon_stat()
        with pytest.raises(ArithmeticOverflow):
            await reduce_beacon_balance(steth, LIDO_ORACLE, 101)
        assert (await steth.get_beacon_stat())[2] == balance
        assert not chain.is_impersonated(LIDO_ORACLE)
