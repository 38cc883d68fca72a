"""
AMM registry: one immutable fee-policy record per AMM id.
"""

from __future__ import annotations

import logging

from ..errors import AccountNotFound, AlreadyExists
from ..kernels.cpmm_swap import require_fee_bps
from ..state.accounts import AmmState
from ..state.addressing import derive_amm_address
from ..state.canonical import canonical_id, require_identity
from ..state.ledger import LedgerState

logger = logging.getLogger(__name__)


def create_amm(state: LedgerState, amm_id: str, fee_bps: int, admin: str) -> AmmState:
    """
    Register a new AMM.

    Args:
        state: Ledger state to write into
        amm_id: 32-byte identifier (hex)
        fee_bps: Swap fee in basis points, 0 <= fee_bps < 10000
        admin: Identity recorded as the AMM admin

    Returns:
        The stored AmmState

    Raises:
        InvalidFee: If fee_bps is out of range
        AlreadyExists: If an AMM with this id is already registered
    """
    amm_id = canonical_id(amm_id, name="amm_id")
    fee_bps = require_fee_bps(fee_bps)
    admin = require_identity(admin, name="admin")

    address = derive_amm_address(amm_id)
    if address in state.amms:
        raise AlreadyExists(f"AMM already exists: {amm_id}")

    amm = AmmState(id=amm_id, address=address, fee_bps=fee_bps, admin=admin)
    state.amms[address] = amm
    logger.info("AMM %s created at %s fee_bps=%d admin=%s", amm_id, address, fee_bps, admin)
    return amm


def get_amm(state: LedgerState, amm_id: str) -> AmmState:
    address = derive_amm_address(canonical_id(amm_id, name="amm_id"))
    amm = state.amms.get(address)
    if amm is None:
        raise AccountNotFound(f"AMM not found: {amm_id}")
    return amm
