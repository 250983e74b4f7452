"""
Impersonation — scoped доступ к чужому адресу

    async with while_impersonating(chain, LIDO_ORACLE) as oracle:
        await steth.handle_oracle_report(validators, balance, sender=oracle)

Impersonation снимается в finally: и при успехе, и при ошибке тела.
Scope восстанавливает состояние, которое застал: если адрес уже был
impersonated (внешний scope), он остаётся impersonated после выхода.
"""

from contextlib import asynccontextmanager
from typing import AsyncIterator

from src.chain.simulated_chain import Signer, SimulatedChain


@asynccontextmanager
async def while_impersonating(chain: SimulatedChain, address: str) -> AsyncIterator[Signer]:
    already_impersonated = chain.is_impersonated(address)
    signer = chain.impersonate(address)
    try:
        yield signer
    finally:
        if not already_impersonated:
            chain.stop_impersonating(address)
