"""
Scenario Mutators — общие шаги применения процентных изменений

Арифметика (pct_decrease / pct_increase) чистая и живёт в
src.core.math.fixed_point; здесь только эффектный шаг:
- фид меняется прямым setter'ом (update_answer)
- backing баланс rate source меняется только через привилегированный
  oracle отчёт под scoped impersonation

Процент не валидируется: выход за [0, 100] даёт отрицательное или
слишком большое значение, которое отклоняется как ArithmeticOverflow.
"""

import logging

from src.chain.impersonation import while_impersonating
from src.core.math.fixed_point import pct_decrease, pct_increase
from src.mocks.aggregator import MockV3Aggregator
from src.mocks.lido import StETHMock

logger = logging.getLogger(__name__)


async def reduce_feed_answer(feed: MockV3Aggregator, pct: int) -> int:
    """answer → answer - answer * pct / 100; возвращает новый ответ."""
    round_data = await feed.latest_round_data()
    next_answer = pct_decrease(round_data.answer, pct)
    await feed.update_answer(next_answer)
    return next_answer


async def increase_feed_answer(feed: MockV3Aggregator, pct: int) -> int:
    """answer → answer + answer * pct / 100; возвращает новый ответ."""
    round_data = await feed.latest_round_data()
    next_answer = pct_increase(round_data.answer, pct)
    await feed.update_answer(next_answer)
    return next_answer


async def report_beacon_balance(steth: StETHMock, reporter: str, beacon_balance: int) -> None:
    """
    Отчёт нового backing баланса от имени reporter.

    Число валидаторов не меняется. Impersonation снимается даже при ошибке.
    """
    _, beacon_validators, _ = await steth.get_beacon_stat()
    async with while_impersonating(steth.chain, reporter) as reporter_signer:
        await steth.handle_oracle_report(beacon_validators, beacon_balance, sender=reporter_signer)
    logger.debug("reported beacon balance %d via %s", beacon_balance, reporter)


async def reduce_beacon_balance(steth: StETHMock, reporter: str, pct: int) -> int:
    """balance → balance - balance * pct / 100; уменьшает refPerTok."""
    _, _, beacon_balance = await steth.get_beacon_stat()
    lower = pct_decrease(beacon_balance, pct)
    await report_beacon_balance(steth, reporter, lower)
    return lower


async def increase_beacon_balance(steth: StETHMock, reporter: str, pct: int) -> int:
    """balance → balance + balance * pct / 100; увеличивает refPerTok."""
    _, _, beacon_balance = await steth.get_beacon_stat()
    higher = pct_increase(beacon_balance, pct)
    await report_beacon_balance(steth, reporter, higher)
    return higher
