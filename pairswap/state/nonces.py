"""
Nonce table for replay protection.

Tracks, per acting party, the last accepted request nonce. The acceptance
policy lives in the integration layer (strict sequential nonces).
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Dict, Mapping

from .balances import Owner
from .canonical import require_identity

U32_MAX = 0xFFFFFFFF


@dataclass
class NonceTable:
    """Mutable mapping: actor -> last_used_nonce. Absent actors read as 0."""

    _last: Dict[Owner, int] = field(default_factory=dict)

    def get_last(self, actor: Owner) -> int:
        actor = require_identity(actor, name="actor")
        v = self._last.get(actor, 0)
        if not isinstance(v, int) or isinstance(v, bool) or v < 0:
            raise ValueError(f"invalid stored nonce for {actor!r}: {v!r}")
        return int(v)

    def next_nonce(self, actor: Owner) -> int:
        return self.get_last(actor) + 1

    def set_last(self, actor: Owner, last_nonce: int) -> None:
        if not isinstance(last_nonce, int) or isinstance(last_nonce, bool) or last_nonce < 0:
            raise TypeError("last_nonce must be a non-negative int")
        if last_nonce > U32_MAX:
            raise TypeError("last_nonce must fit in u32")
        actor = require_identity(actor, name="actor")
        if last_nonce == 0:
            self._last.pop(actor, None)
        else:
            self._last[actor] = int(last_nonce)

    def get_all(self) -> Mapping[Owner, int]:
        return dict(self._last)

    def copy(self) -> "NonceTable":
        return NonceTable(_last=dict(self._last))
