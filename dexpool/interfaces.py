"""Interfaces consumed by the pool and the execution environment."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Protocol, runtime_checkable


@dataclass(frozen=True)
class Msg:
    """Call context handed to every state-changing contract method.

    Attributes:
        sender: Address that made the call
        value: Native amount sent with the call (already credited to the callee)
    """

    sender: str
    value: int = 0


@runtime_checkable
class Contract(Protocol):
    """Anything deployable on the chain.

    The chain snapshots every deployed contract before a call and restores
    the snapshot if the call fails.
    """

    address: str

    def snapshot(self) -> Any:
        """Return an independent copy of all mutable state."""
        ...

    def restore(self, snapshot: Any) -> None:
        """Replace mutable state with a value returned by snapshot()."""
        ...


@runtime_checkable
class TokenInterface(Protocol):
    """Fungible token as seen by the pool.

    ``transfer`` and ``transfer_from`` report rejection by returning False.
    For ``transfer_from`` the spender is ``msg.sender`` and must hold an
    allowance granted by ``owner``.
    """

    address: str

    def balance_of(self, account: str) -> int: ...

    def transfer(self, msg: Msg, to: str, amount: int) -> bool: ...

    def transfer_from(self, msg: Msg, owner: str, to: str, amount: int) -> bool: ...


__all__ = ["Msg", "Contract", "TokenInterface"]
