"""Contract test doubles that exercise the pool's external-call boundaries."""

from typing import Any

from dexpool.chain import Chain
from dexpool.errors import ReentrancyError
from dexpool.interfaces import Msg
from dexpool.pool import Pool


class RefusingReceiver:
    """Contract whose receive hook always fails."""

    def __init__(self) -> None:
        self.address: str | None = None

    def snapshot(self) -> Any:
        return None

    def restore(self, snapshot: Any) -> None:
        pass

    def receive(self, msg: Msg) -> None:
        raise RuntimeError(f"refusing {msg.value} from {msg.sender}")


class ObservingReceiver:
    """Contract that records the pool's LP ledger whenever it is paid."""

    def __init__(self, pool: Pool) -> None:
        self.address: str | None = None
        self.pool = pool
        self.observed: list[tuple[int, int]] = []

    def snapshot(self) -> Any:
        return list(self.observed)

    def restore(self, snapshot: Any) -> None:
        self.observed = list(snapshot)

    def receive(self, msg: Msg) -> None:
        self.observed.append((self.pool.get_liquidity(self.address), self.pool.total_liquidity))


class ReentrantWithdrawer:
    """Contract that tries to withdraw again while being paid by a withdrawal."""

    def __init__(self, chain: Chain, pool: Pool, amount: int) -> None:
        self.address: str | None = None
        self.chain = chain
        self.pool = pool
        self.amount = amount
        # Not part of the snapshot: survives rollback so tests can inspect it
        self.errors: list[Exception] = []

    def snapshot(self) -> Any:
        return None

    def restore(self, snapshot: Any) -> None:
        pass

    def receive(self, msg: Msg) -> None:
        try:
            self.chain.call(self.address, self.pool, "withdraw", self.amount)
        except ReentrancyError as exc:
            self.errors.append(exc)
            raise


class RejectingToken:
    """Token that accepts everything except transfers out of one account."""

    def __init__(self, frozen: str) -> None:
        self.address: str | None = None
        self.frozen = frozen
        self.balances: dict[str, int] = {}

    def snapshot(self) -> Any:
        return dict(self.balances)

    def restore(self, snapshot: Any) -> None:
        self.balances = dict(snapshot)

    def balance_of(self, account: str) -> int:
        return self.balances.get(account, 0)

    def transfer(self, msg: Msg, to: str, amount: int) -> bool:
        return self._move(msg.sender, to, amount)

    def transfer_from(self, msg: Msg, owner: str, to: str, amount: int) -> bool:
        return self._move(owner, to, amount)

    def _move(self, sender: str, to: str, amount: int) -> bool:
        if sender == self.frozen or self.balance_of(sender) < amount:
            return False
        self.balances[sender] -= amount
        self.balances[to] = self.balance_of(to) + amount
        return True
