"""Exception types for the pool accounting and pricing engine.

Every class carries a stable ``code`` so the functional core can report failures
as data (``TxResult.error_code``) while the imperative shell re-raises them.
All of them derive from ``ValueError`` to keep ``except ValueError`` call sites
working across the codebase.
"""

from __future__ import annotations


class AmmError(ValueError):
    """Base class for every engine failure."""

    code = "AmmError"


class InvalidFee(AmmError):
    """Raised when fee_bps is outside [0, 10000)."""

    code = "InvalidFee"


class AlreadyExists(AmmError):
    """Raised when an AMM or pool record is created twice."""

    code = "AlreadyExists"


class AccountNotFound(AmmError):
    code = "AccountNotFound"


class InvalidMints(AmmError):
    """Raised when a pool's asset pair is not in canonical (strictly ascending) order."""

    code = "InvalidMints"


class IdenticalAssets(InvalidMints):
    code = "IdenticalAssets"


class AddressMismatch(AmmError):
    """Raised when a caller-derived address does not match the engine's derivation."""

    code = "AddressMismatch"


class InvalidAmount(AmmError):
    code = "InvalidAmount"


class DepositTooSmall(AmmError):
    code = "DepositTooSmall"


class InsufficientBalance(AmmError):
    code = "InsufficientBalance"


class InsufficientLiquidity(AmmError):
    code = "InsufficientLiquidity"


class SlippageExceeded(AmmError):
    """Raised when a swap's output is below the caller's minimum."""

    code = "SlippageExceeded"


class ArithmeticOverflow(AmmError):
    """Raised when a checked operation leaves its unsigned domain (overflow or underflow)."""

    code = "ArithmeticOverflow"


class DivisionByZero(AmmError):
    code = "DivisionByZero"


class InvariantViolated(AmmError):
    """Raised when a post-state breaks a pool invariant. Never expected in normal operation."""

    code = "InvariantViolated"

    def __init__(self, violations: list[str]) -> None:
        self.violations = violations
        super().__init__(f"invariant violations: {', '.join(violations)}")


class Unauthorized(AmmError):
    code = "Unauthorized"


class InvalidNonce(AmmError):
    """Raised when a request's nonce is not the actor's next expected nonce (replayed or skipped)."""

    code = "InvalidNonce"
