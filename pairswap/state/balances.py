"""
Asset custody table.

Implements BalanceTable[(owner, asset)] -> amount, the custody service the
engine moves tokens through. Pool vaults are ordinary rows owned by the pool
authority address.
"""

from __future__ import annotations

from typing import Dict, Tuple

from ..errors import InsufficientBalance, InvalidAmount
from ..kernels.safe_math import U64_MAX, require_amount


# Type aliases
Owner = str  # actor identity or derived authority address
AssetId = str  # 0x-prefixed 32-byte hex string
Amount = int  # u64


class BalanceTable:
    """
    Balance table mapping (owner, asset) -> amount.

    Note: balances live in a plain dict. Do not rely on dict iteration order;
    serialization sorts keys explicitly (see `pairswap.state.snapshot`).
    """

    def __init__(self) -> None:
        self._balances: Dict[Tuple[Owner, AssetId], Amount] = {}

    def balance_of(self, asset: AssetId, owner: Owner) -> Amount:
        """Balance of `owner` in `asset`. Returns 0 if not found."""
        return self._balances.get((owner, asset), 0)

    def set(self, owner: Owner, asset: AssetId, amount: Amount) -> None:
        """
        Set balance for (owner, asset).

        Raises:
            ArithmeticOverflow: If amount is negative or does not fit in u64
        """
        amount = require_amount("balance", amount)
        if amount == 0:
            # Remove zero balances to keep table sparse
            self._balances.pop((owner, asset), None)
        else:
            self._balances[(owner, asset)] = amount

    def credit(self, owner: Owner, asset: AssetId, amount: Amount) -> None:
        amount = require_amount("amount", amount)
        current = self.balance_of(asset, owner)
        if amount > U64_MAX - current:
            raise InvalidAmount(f"credit would overflow balance: {current} + {amount}")
        self.set(owner, asset, current + amount)

    def transfer(self, asset: AssetId, src: Owner, dst: Owner, amount: Amount) -> None:
        """
        Move `amount` of `asset` from `src` to `dst`.

        Both legs are checked before either is written.
        """
        amount = require_amount("amount", amount)
        if amount == 0 or src == dst:
            return
        src_balance = self.balance_of(asset, src)
        if amount > src_balance:
            raise InsufficientBalance(
                f"insufficient balance of {asset} for {src}: {src_balance} < {amount}"
            )
        dst_balance = self.balance_of(asset, dst)
        if amount > U64_MAX - dst_balance:
            raise InvalidAmount(f"transfer would overflow balance: {dst_balance} + {amount}")
        self.set(src, asset, src_balance - amount)
        self.set(dst, asset, dst_balance + amount)

    def get_all_balances(self) -> Dict[Tuple[Owner, AssetId], Amount]:
        """Return all balances as a dictionary (owner, asset) -> amount."""
        return dict(self._balances)

    def total_of(self, asset: AssetId) -> Amount:
        """Sum of every owner's balance in `asset`."""
        return sum(amount for (_owner, a), amount in self._balances.items() if a == asset)

    def copy(self) -> "BalanceTable":
        copied = BalanceTable()
        copied._balances = dict(self._balances)
        return copied

    def __repr__(self) -> str:
        return f"BalanceTable({len(self._balances)} entries)"
