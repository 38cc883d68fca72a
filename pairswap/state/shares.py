"""
Liquidity share mints.

Each pool owns one share mint. A mint record is `{authority, supply}`; holder
balances are tracked per (holder, mint). Only the mint's authority (the pool
authority address) may mint or burn.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Dict, Tuple

from ..errors import AccountNotFound, AlreadyExists, InsufficientLiquidity, Unauthorized
from ..kernels.safe_math import checked_add, checked_sub, require_amount, to_u64
from .balances import Amount, Owner

# Type alias
MintId = str


@dataclass(frozen=True)
class MintRecord:
    authority: Owner
    supply: Amount


class ShareLedger:
    """
    Share supply + holder balances for every pool's liquidity mint.

    Notes:
    - Holder balances are always non-negative; zero balances are omitted.
    - `supply` always equals the sum of holder balances for that mint.
    """

    def __init__(self) -> None:
        self._mints: Dict[MintId, MintRecord] = {}
        self._balances: Dict[Tuple[Owner, MintId], Amount] = {}

    def create_mint(self, mint: MintId, authority: Owner) -> None:
        if mint in self._mints:
            raise AlreadyExists(f"share mint already exists: {mint}")
        self._mints[mint] = MintRecord(authority=authority, supply=0)

    def _record(self, mint: MintId) -> MintRecord:
        record = self._mints.get(mint)
        if record is None:
            raise AccountNotFound(f"unknown share mint: {mint}")
        return record

    def supply(self, mint: MintId) -> Amount:
        return self._record(mint).supply

    def authority(self, mint: MintId) -> Owner:
        return self._record(mint).authority

    def balance_of(self, mint: MintId, holder: Owner) -> Amount:
        """Share balance of `holder`. Returns 0 if not found."""
        return self._balances.get((holder, mint), 0)

    def _set_balance(self, holder: Owner, mint: MintId, amount: Amount) -> None:
        if amount == 0:
            self._balances.pop((holder, mint), None)
        else:
            self._balances[(holder, mint)] = amount

    def mint_to(self, mint: MintId, holder: Owner, amount: Amount, *, authority: Owner) -> None:
        amount = require_amount("amount", amount)
        record = self._record(mint)
        if authority != record.authority:
            raise Unauthorized(f"{authority} is not the mint authority of {mint}")
        new_supply = to_u64(checked_add(record.supply, amount), name="supply")
        new_balance = to_u64(checked_add(self.balance_of(mint, holder), amount), name="share balance")
        self._mints[mint] = MintRecord(authority=record.authority, supply=new_supply)
        self._set_balance(holder, mint, new_balance)

    def burn(self, mint: MintId, holder: Owner, amount: Amount, *, authority: Owner) -> None:
        amount = require_amount("amount", amount)
        record = self._record(mint)
        if authority != record.authority:
            raise Unauthorized(f"{authority} is not the mint authority of {mint}")
        current = self.balance_of(mint, holder)
        if amount > current:
            raise InsufficientLiquidity(
                f"insufficient share balance for {holder}: {current} < {amount}"
            )
        self._mints[mint] = MintRecord(authority=record.authority, supply=checked_sub(record.supply, amount))
        self._set_balance(holder, mint, current - amount)

    def get_all_mints(self) -> Dict[MintId, MintRecord]:
        return dict(self._mints)

    def get_all_balances(self) -> Dict[Tuple[Owner, MintId], Amount]:
        """Return all share balances (holder, mint) -> amount."""
        return dict(self._balances)

    def verify_supply(self) -> bool:
        """Verify every mint's supply equals the sum of its holder balances."""
        totals: Dict[MintId, int] = {mint: 0 for mint in self._mints}
        for (_holder, mint), amount in self._balances.items():
            if mint not in totals:
                return False
            totals[mint] += amount
        return all(totals[mint] == record.supply for mint, record in self._mints.items())

    def copy(self) -> "ShareLedger":
        copied = ShareLedger()
        copied._mints = dict(self._mints)
        copied._balances = dict(self._balances)
        return copied

    def __repr__(self) -> str:
        return f"ShareLedger({len(self._mints)} mints, {len(self._balances)} balances)"
