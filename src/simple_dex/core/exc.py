"""
Core exception types for simple_dex.

These are dependency-free and may be imported by all modules. Messages
default to the revert strings of the on-chain pool so that callers see the
same failure reason whichever implementation they talk to.
"""

__all__ = [
    "DexError",
    "NotAuthorized",
    "InvalidAmount",
    "InvalidRatio",
    "InsufficientReserves",
    "InvalidToken",
    "EmptyReserves",
    "InvalidDirection",
    "LedgerFailure",
    "InsufficientBalance",
    "InsufficientAllowance",
    "UnknownAsset",
    "SettlementFailure",
]


class DexError(Exception):
    """Base class for every failure raised by the exchange engine."""

    default_message = "DEX operation failed"

    def __init__(self, message: str | None = None) -> None:
        super().__init__(message if message is not None else self.default_message)


class NotAuthorized(DexError):
    """Raised when a liquidity entry point is called by someone other than the operator."""
    default_message = "Not the owner"


class InvalidAmount(DexError):
    """Raised when an amount is zero, negative or otherwise disallowed."""
    default_message = "Amount must be > 0"


class InvalidRatio(DexError):
    """Raised when a liquidity deposit does not match the current reserve ratio exactly."""
    default_message = "Invalid ratio"


class InsufficientReserves(DexError):
    """Raised when a removal or a swap would need more than the pool holds."""
    default_message = "Insufficient reserves"


class InvalidToken(DexError):
    """Raised for asset identities that are not part of the pool."""
    default_message = "Invalid token address"


class EmptyReserves(DexError):
    """Raised when a price is requested while a reserve is zero."""
    default_message = "Empty reserves"


class InvalidDirection(DexError):
    """Raised when a swap direction is neither "A->B" nor "B->A"."""
    default_message = "Invalid direction"


class LedgerFailure(DexError):
    """Raised by the asset ledger when it rejects a transfer.

    Attributes
    ----------
    asset : str | None
        Asset identity of the rejected transfer.
    holder : str | None
        Account that would have been debited.
    amount : int | None
        Requested amount in smallest units.
    """

    default_message = "Ledger transfer failed"

    def __init__(self, message: str | None = None, *, asset=None, holder=None, amount=None) -> None:
        super().__init__(message)
        self.asset = asset
        self.holder = holder
        self.amount = amount


class InsufficientBalance(LedgerFailure):
    """Raised when the debited account does not hold enough of the asset."""
    default_message = "ERC20: transfer amount exceeds balance"


class InsufficientAllowance(LedgerFailure):
    """Raised when a pull transfer exceeds what the holder pre-authorised."""
    default_message = "ERC20: insufficient allowance"


class UnknownAsset(LedgerFailure):
    """Raised when the ledger has no record of the asset."""
    default_message = "Unknown asset"


class SettlementFailure(LedgerFailure):
    """Raised when a failed operation could not reverse the transfers it had made.

    The operation's own failure is chained as `__cause__`; `undo_errors`
    holds what went wrong while reversing. Pool holdings may then differ
    from the recorded reserves.
    """
    default_message = "Settlement rollback failed"

    def __init__(self, message: str | None = None, *, undo_errors=(), **kw) -> None:
        super().__init__(message, **kw)
        self.undo_errors = list(undo_errors)
