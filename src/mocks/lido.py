"""
Lido mocks — stETH (источник курса) и wstETH (обёрнутый токен)

stETH:
    total_pooled_ether = buffered_ether + beacon_balance + transient_balance
    transient_balance  = (deposited_validators - beacon_validators) * 32 ether
    pooled_eth_by_shares(s) = s * total_pooled_ether / total_shares

Курс меняется только через handle_oracle_report, который принимает
вызов исключительно от адреса oracle (единственный reporter).

wstETH:
    st_eth_per_token() = stETH.get_pooled_eth_by_shares(1e18)
"""

from typing import Any, Dict, Optional, Tuple

from src.chain.contract import Contract
from src.chain.simulated_chain import Signer
from src.core.domain.address import normalize_address
from src.core.errors import Reverted, Unauthorized
from src.core.math.fixed_point import FIX_ONE, to_uint256

DEPOSIT_SIZE = 32 * FIX_ONE


class StETHMock(Contract):
    """Rebasing stETH: backing баланс обновляется oracle отчётом."""

    @staticmethod
    def initial_storage(
        oracle: str,
        deposited_validators: int,
        beacon_validators: int,
        beacon_balance: int,
        buffered_ether: int,
        total_shares: int,
    ) -> Dict[str, Any]:
        return {
            "oracle": normalize_address(oracle),
            "deposited_validators": deposited_validators,
            "beacon_validators": beacon_validators,
            "beacon_balance": to_uint256(beacon_balance),
            "buffered_ether": to_uint256(buffered_ether),
            "total_shares": to_uint256(total_shares),
        }

    async def get_oracle(self) -> str:
        return self._store["oracle"]

    async def get_beacon_stat(self) -> Tuple[int, int, int]:
        """(deposited_validators, beacon_validators, beacon_balance)"""
        store = self._store
        return (
            store["deposited_validators"],
            store["beacon_validators"],
            store["beacon_balance"],
        )

    def _total_pooled_ether(self) -> int:
        store = self._store
        transient = (store["deposited_validators"] - store["beacon_validators"]) * DEPOSIT_SIZE
        return store["buffered_ether"] + store["beacon_balance"] + transient

    async def get_total_pooled_ether(self) -> int:
        return self._total_pooled_ether()

    async def get_total_shares(self) -> int:
        return self._store["total_shares"]

    async def get_pooled_eth_by_shares(self, shares: int) -> int:
        total_shares = self._store["total_shares"]
        if total_shares == 0:
            return 0
        return shares * self._total_pooled_ether() // total_shares

    async def handle_oracle_report(
        self,
        beacon_validators: int,
        beacon_balance: int,
        sender: Optional[Signer] = None,
    ) -> None:
        """
        Rebase отчёт: новое число валидаторов и backing баланс.

        Raises:
            Unauthorized: если sender не oracle (или не может подписать)
            ArithmeticOverflow: если beacon_balance вне uint256
            Reverted: если число валидаторов противоречит депозитам
        """
        signer = self.chain.authorize(sender)
        store = self._store
        if signer.address != store["oracle"]:
            raise Unauthorized("APP_AUTH_FAILED")
        to_uint256(beacon_balance)
        if beacon_validators > store["deposited_validators"]:
            raise Reverted("REPORTED_MORE_DEPOSITED")
        if beacon_validators < store["beacon_validators"]:
            raise Reverted("REPORTED_LESS_VALIDATORS")
        store["beacon_validators"] = beacon_validators
        store["beacon_balance"] = beacon_balance
        await self.chain.mine()


class WstETHMock(Contract):
    """Non-rebasing обёртка над shares stETH (ERC20)."""

    @staticmethod
    def initial_storage(steth: str, balances: Dict[str, int]) -> Dict[str, Any]:
        balances = {normalize_address(holder): to_uint256(amount) for holder, amount in balances.items()}
        return {
            "steth": normalize_address(steth),
            "decimals": 18,
            "balances": balances,
            "total_supply": sum(balances.values()),
        }

    async def decimals(self) -> int:
        return self._store["decimals"]

    async def total_supply(self) -> int:
        return self._store["total_supply"]

    async def balance_of(self, holder: str) -> int:
        return self._store["balances"].get(normalize_address(holder), 0)

    async def st_eth_per_token(self) -> int:
        """stETH (ref) на 1 wstETH, 18 decimals."""
        steth = self.chain.get_contract_at(self._store["steth"])
        return await steth.get_pooled_eth_by_shares(FIX_ONE)

    async def transfer(self, recipient: str, amount: int, sender: Optional[Signer] = None) -> None:
        """
        Raises:
            Reverted: если у отправителя недостаточно баланса
        """
        signer = self.chain.authorize(sender)
        to_uint256(amount)
        recipient = normalize_address(recipient)
        balances = self._store["balances"]
        balance = balances.get(signer.address, 0)
        if balance < amount:
            raise Reverted("ERC20: transfer amount exceeds balance")
        balances[signer.address] = balance - amount
        balances[recipient] = balances.get(recipient, 0) + amount
        await self.chain.mine()
