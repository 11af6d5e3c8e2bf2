"""In-process execution environment for the pool.

The Chain models just enough of a ledger host to run the pool with
all-or-nothing semantics:
- Native-asset balances per address
- Deployed contracts, each able to snapshot and restore its state
- A single global re-entrant lock: callers from different threads are
  serialized into one global order, while nested frames (pool -> token,
  send -> receive hook) run on the same thread
- An event log that is truncated when a call is rolled back

Every call and every send runs in a frame. A frame snapshots the whole
world on entry and restores it if anything inside it fails.
"""

from __future__ import annotations

import threading
from dataclasses import dataclass
from typing import Any

import structlog

from dexpool.constants import ADDRESS_HEX_LENGTH
from dexpool.errors import InsufficientFunds, NativeTransferFailed, UnknownContract
from dexpool.events import PoolEvent
from dexpool.interfaces import Contract, Msg
from dexpool.safe_int import S

logger = structlog.get_logger()


@dataclass(frozen=True)
class _Snapshot:
    balances: dict[str, int]
    event_count: int
    contracts: dict[str, Any]


def format_address(number: int) -> str:
    """Render an integer as a 0x-prefixed 20-byte address."""
    return "0x" + format(number, f"0{ADDRESS_HEX_LENGTH}x")


class Chain:
    """Atomic, globally serialized host for contracts and native balances."""

    # Contract addresses are allocated from here upward
    CONTRACT_ADDRESS_BASE = 0xC0DE << 144

    def __init__(self) -> None:
        self._balances: dict[str, int] = {}
        self._contracts: dict[str, Contract] = {}
        self._events: list[PoolEvent] = []
        self._lock = threading.RLock()
        self._deployed = 0
        self._depth = 0

    @property
    def lock(self) -> threading.RLock:
        """Global lock; hold it to read several balances consistently."""
        return self._lock

    # --- Deployment ---

    def deploy(self, contract: Contract) -> Contract:
        """Register a contract, assigning it an address if it has none."""
        with self._lock:
            if not getattr(contract, "address", None):
                self._deployed += 1
                contract.address = format_address(self.CONTRACT_ADDRESS_BASE + self._deployed)
            self._contracts[contract.address] = contract
            logger.debug(
                "contract_deployed",
                address=contract.address,
                contract=type(contract).__name__,
            )
            return contract

    def is_contract(self, address: str) -> bool:
        return address in self._contracts

    # --- Native balances ---

    def balance_of(self, account: str) -> int:
        """Native-asset balance of an account (0 if never seen)."""
        return self._balances.get(account, 0)

    def mint_native(self, account: str, amount: int) -> None:
        """Credit native asset out of thin air (genesis / faucet)."""
        with self._lock:
            self._balances[account] = (S(self.balance_of(account)) + S(amount)).value

    def _move(self, sender: str, to: str, amount: int) -> None:
        available = S(self.balance_of(sender))
        if available < S(amount):
            raise InsufficientFunds(f"{sender} has {available}, needs {amount}")
        self._balances[sender] = (available - amount).value
        self._balances[to] = (S(self.balance_of(to)) + amount).value

    # --- Events ---

    def emit(self, event: PoolEvent) -> None:
        """Append an event to the log of the current call."""
        self._events.append(event)

    @property
    def events(self) -> tuple[PoolEvent, ...]:
        with self._lock:
            return tuple(self._events)

    # --- Frames ---

    def _snapshot(self) -> _Snapshot:
        return _Snapshot(
            balances=dict(self._balances),
            event_count=len(self._events),
            contracts={address: c.snapshot() for address, c in self._contracts.items()},
        )

    def _restore(self, snapshot: _Snapshot) -> None:
        self._balances = snapshot.balances
        del self._events[snapshot.event_count :]
        for address, state in snapshot.contracts.items():
            self._contracts[address].restore(state)

    def _resolve(self, contract: Contract | str) -> Contract:
        address = contract if isinstance(contract, str) else contract.address
        try:
            return self._contracts[address]
        except KeyError:
            raise UnknownContract(f"No contract deployed at {address}") from None

    def call(
        self,
        sender: str,
        contract: Contract | str,
        method: str,
        *args: Any,
        value: int = 0,
    ) -> Any:
        """Invoke ``contract.method(Msg(sender, value), *args)`` atomically.

        ``value`` is moved from the sender to the contract before the method
        runs. If anything raises, every state change made inside this frame
        (balances, contract state, events) is discarded and the exception
        propagates to the caller.

        Raises:
            UnknownContract: If the target is not deployed
            InsufficientFunds: If the sender cannot cover ``value``
            Exception: Whatever the invoked method raises
        """
        with self._lock:
            target = self._resolve(contract)
            snapshot = self._snapshot()
            self._depth += 1
            try:
                if value:
                    self._move(sender, target.address, value)
                result = getattr(target, method)(Msg(sender=sender, value=value), *args)
            except Exception as exc:
                self._restore(snapshot)
                log = logger.warning if self._depth == 1 else logger.debug
                log(
                    "call_reverted",
                    sender=sender,
                    target=target.address,
                    method=method,
                    depth=self._depth,
                    error=getattr(exc, "code", type(exc).__name__),
                    reason=str(exc),
                )
                raise
            finally:
                self._depth -= 1
            return result

    def send(self, sender: str, to: str, amount: int) -> bool:
        """Call-style native transfer whose outcome is reported, not raised.

        Externally owned addresses always accept. A deployed contract accepts
        only if it defines ``receive(msg)`` and that hook returns normally; the
        hook may call back into other contracts. On refusal the frame is rolled
        back and False is returned.
        """
        with self._lock:
            snapshot = self._snapshot()
            self._depth += 1
            try:
                self._move(sender, to, amount)
                if self.is_contract(to):
                    receive = getattr(self._contracts[to], "receive", None)
                    if receive is None:
                        raise NativeTransferFailed(f"{to} does not accept native transfers")
                    receive(Msg(sender=sender, value=amount))
            except Exception as exc:
                # Recipient failure is the send's result, surfaced as False
                self._restore(snapshot)
                logger.warning(
                    "send_refused",
                    sender=sender,
                    to=to,
                    amount=amount,
                    error=getattr(exc, "code", type(exc).__name__),
                    exc_info=True,
                )
                return False
            finally:
                self._depth -= 1
            return True


__all__ = ["Chain", "format_address"]
