"""Pool error classes.

Every error carries a human-readable reason (the exception message) and a
stable ``code`` used by the HTTP layer and in log events. Arithmetic faults
live in dexpool.safe_int and subclass ArithmeticError.
"""


class PoolError(Exception):
    """Base error for pool operations."""

    code = "pool_error"

    @property
    def reason(self) -> str:
        return str(self)


class PreconditionError(PoolError):
    """A caller-supplied precondition does not hold."""

    code = "precondition_failed"


class ZeroAmount(PreconditionError):
    """Operation requires a positive amount."""

    code = "zero_amount"


class AlreadyInitialized(PreconditionError):
    """Bootstrap attempted on a pool that already has liquidity."""

    code = "already_initialized"


class NotInitialized(PreconditionError):
    """Operation requires a bootstrapped pool."""

    code = "not_initialized"


class InsufficientLiquidity(PreconditionError):
    """Pool reserve cannot honor the quoted output."""

    code = "insufficient_liquidity"


class InsufficientLPBalance(PreconditionError):
    """Caller tried to redeem more LP units than it owns."""

    code = "insufficient_lp_balance"


class NonPayable(PreconditionError):
    """Native value was attached to an operation that does not accept it."""

    code = "non_payable"


class TransferError(PoolError):
    """An external transfer was rejected."""

    code = "transfer_failed"


class TokenTransferFailed(TransferError):
    """Token transfer or transfer_from returned False."""

    code = "token_transfer_failed"


class NativeTransferFailed(TransferError):
    """Native-asset send was refused."""

    code = "native_transfer_failed"


class ReentrancyError(PoolError):
    """A state-changing operation was re-entered mid-execution."""

    code = "reentrant_call"


class InsufficientFunds(PoolError):
    """Sender cannot fund the native value attached to a call."""

    code = "insufficient_funds"


class UnknownContract(PoolError):
    """Call target is not deployed on the chain."""

    code = "unknown_contract"
