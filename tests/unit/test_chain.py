"""Tests for the execution environment: frames, rollback and native transfers."""

import pytest

from dexpool.chain import Chain, format_address
from dexpool.errors import InsufficientFunds, TokenTransferFailed, UnknownContract
from dexpool.events import LiquidityProvided
from dexpool.interfaces import Contract, Msg
from dexpool.pool import Pool
from dexpool.safe_int import UINT256_MAX, Uint256Overflow
from dexpool.token import Token
from tests.helpers import ALICE, BOB, ETH, TOKEN
from tests.helpers.contracts import RefusingReceiver, RejectingToken


class Counter:
    """Minimal contract that counts calls and can be told to fail afterwards."""

    def __init__(self, chain: Chain) -> None:
        self.address = None
        self.chain = chain
        self.count = 0

    def snapshot(self):
        return self.count

    def restore(self, snapshot):
        self.count = snapshot

    def bump(self, msg: Msg, fail: bool = False) -> int:
        self.count += 1
        self.chain.emit(LiquidityProvided(account=msg.sender, amount=1, eth_amount=0, token_amount=0))
        if fail:
            raise RuntimeError("boom")
        return self.count

    def bump_then_fail_inner(self, msg: Msg, other: "Counter") -> int:
        self.count += 1
        try:
            self.chain.call(self.address, other, "bump", True)
        except RuntimeError:
            pass
        return self.count


@pytest.fixture
def chain():
    return Chain()


class TestDeploy:
    """Tests for contract registration."""

    def test_assigns_sequential_addresses(self, chain):
        """Contracts without an address get one allocated from the contract range."""
        first = chain.deploy(Counter(chain))
        second = chain.deploy(Counter(chain))

        assert first.address == format_address(Chain.CONTRACT_ADDRESS_BASE + 1)
        assert second.address == format_address(Chain.CONTRACT_ADDRESS_BASE + 2)
        assert chain.is_contract(first.address)
        assert not chain.is_contract(ALICE)

    def test_keeps_explicit_address(self, chain):
        """A contract that already has an address is registered under it."""
        token = chain.deploy(Token("Test", "TST", address=BOB))
        assert token.address == BOB
        assert chain.is_contract(BOB)

    def test_contracts_satisfy_protocol(self, chain):
        """Token and Pool satisfy the Contract protocol."""
        token = chain.deploy(Token("Test", "TST"))
        pool = chain.deploy(Pool(chain, token))
        assert isinstance(token, Contract)
        assert isinstance(pool, Contract)

    def test_format_address(self):
        """Addresses are 0x plus 40 lowercase hex digits."""
        assert format_address(0xAB) == "0x" + "0" * 38 + "ab"


class TestCall:
    """Tests for atomic call frames."""

    def test_moves_value_and_returns_result(self, chain):
        """Attached value reaches the contract before the method runs."""
        counter = chain.deploy(Counter(chain))
        chain.mint_native(ALICE, 10)

        assert chain.call(ALICE, counter, "bump", value=4) == 1
        assert chain.balance_of(ALICE) == 6
        assert chain.balance_of(counter.address) == 4
        assert len(chain.events) == 1

    def test_failure_rolls_back_everything(self, chain):
        """A raising method undoes value transfer, contract state and events."""
        counter = chain.deploy(Counter(chain))
        chain.mint_native(ALICE, 10)

        with pytest.raises(RuntimeError, match="boom"):
            chain.call(ALICE, counter, "bump", True, value=4)

        assert chain.balance_of(ALICE) == 10
        assert chain.balance_of(counter.address) == 0
        assert counter.count == 0
        assert chain.events == ()

    def test_caught_inner_failure_only_rolls_back_inner_frame(self, chain):
        """An inner failure the caller handles leaves the outer frame's changes."""
        outer = chain.deploy(Counter(chain))
        inner = chain.deploy(Counter(chain))

        assert chain.call(ALICE, outer, "bump_then_fail_inner", inner) == 1
        assert outer.count == 1
        assert inner.count == 0
        assert chain.events == ()

    def test_insufficient_value(self, chain):
        """Attaching more value than the sender holds is rejected."""
        counter = chain.deploy(Counter(chain))
        chain.mint_native(ALICE, 3)

        with pytest.raises(InsufficientFunds):
            chain.call(ALICE, counter, "bump", value=4)

        assert chain.balance_of(ALICE) == 3
        assert counter.count == 0

    def test_unknown_contract(self, chain):
        """Calls to an address without a contract fail."""
        with pytest.raises(UnknownContract):
            chain.call(ALICE, BOB, "bump")

    def test_call_by_address(self, chain):
        """A contract can be addressed by its address string."""
        counter = chain.deploy(Counter(chain))
        assert chain.call(ALICE, counter.address, "bump") == 1


class TestSend:
    """Tests for call-style native transfers."""

    def test_send_to_external_account(self, chain):
        """Sends to addresses without a contract always succeed."""
        chain.mint_native(ALICE, 10)

        assert chain.send(ALICE, BOB, 7) is True
        assert chain.balance_of(ALICE) == 3
        assert chain.balance_of(BOB) == 7

    def test_send_more_than_balance(self, chain):
        """Overdrawing reports False and moves nothing."""
        chain.mint_native(ALICE, 1)

        assert chain.send(ALICE, BOB, 2) is False
        assert chain.balance_of(ALICE) == 1
        assert chain.balance_of(BOB) == 0

    def test_send_to_contract_without_receive(self, chain):
        """Contracts without a receive hook refuse native transfers."""
        counter = chain.deploy(Counter(chain))
        chain.mint_native(ALICE, 10)

        assert chain.send(ALICE, counter.address, 5) is False
        assert chain.balance_of(ALICE) == 10

    def test_send_to_refusing_receiver(self, chain):
        """A receive hook that raises turns into a False result."""
        receiver = chain.deploy(RefusingReceiver())
        chain.mint_native(ALICE, 10)

        assert chain.send(ALICE, receiver.address, 5) is False
        assert chain.balance_of(receiver.address) == 0


class TestNativeSupply:
    """Tests for native-asset minting."""

    def test_mint_accumulates(self, chain):
        chain.mint_native(ALICE, 5)
        chain.mint_native(ALICE, 6)
        assert chain.balance_of(ALICE) == 11

    def test_mint_overflow(self, chain):
        """Balances are bounded by uint256."""
        chain.mint_native(ALICE, UINT256_MAX)
        with pytest.raises(Uint256Overflow):
            chain.mint_native(ALICE, 1)
        assert chain.balance_of(ALICE) == UINT256_MAX


class TestForeignToken:
    """The pool only relies on the token's boolean transfer results."""

    def test_rejected_payout_reverts_swap(self, chain):
        """A token that refuses to pay out fails the swap atomically."""
        token = chain.deploy(RejectingToken(frozen=""))
        pool = chain.deploy(Pool(chain, token))
        token.balances[ALICE] = 10 * TOKEN
        chain.mint_native(ALICE, 10 * ETH)
        chain.mint_native(BOB, 10 * ETH)
        chain.call(ALICE, pool, "init", 5 * TOKEN, value=5 * ETH)

        token.frozen = pool.address
        with pytest.raises(TokenTransferFailed):
            chain.call(BOB, pool, "eth_to_token", value=1 * ETH)

        assert chain.balance_of(BOB) == 10 * ETH
        assert chain.balance_of(pool.address) == 5 * ETH
        assert token.balance_of(pool.address) == 5 * TOKEN
