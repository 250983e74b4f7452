"""
Mocks — управляемые заменители внешних контрактов.
"""

from src.mocks.aggregator import MockV3Aggregator, RoundData
from src.mocks.lido import StETHMock, WstETHMock

__all__ = [
    "MockV3Aggregator",
    "RoundData",
    "StETHMock",
    "WstETHMock",
]
