"""
Тесты InMemoryLedger и LedgerHandle

Проверяет ERC20-подобную семантику: переводы, allowance, minter-роль,
владение и соответствие handle capability-протоколам.
"""

import pytest

from src.core.domain.errors import InsufficientAllowance, InsufficientFunds, InvalidAmount, Unauthorized
from src.ledger import BindableLedger, InMemoryLedger, LedgerHandle, ReserveLedger, TokenLedger


@pytest.fixture
def ledger():
    ledger = InMemoryLedger("Tether USD", "USDT", 6, owner="issuer")
    ledger.mint("issuer", "alice", 1_000)
    return ledger


class TestTransfers:
    def test_transfer(self, ledger):
        ledger.transfer("alice", "bob", 400)

        assert ledger.balance_of("alice") == 600
        assert ledger.balance_of("bob") == 400
        assert ledger.total_supply == 1_000

    def test_transfer_insufficient_funds(self, ledger):
        with pytest.raises(InsufficientFunds):
            ledger.transfer("alice", "bob", 1_001)
        assert ledger.balance_of("alice") == 1_000

    def test_negative_amount_rejected(self, ledger):
        with pytest.raises(InvalidAmount):
            ledger.transfer("alice", "bob", -1)

    def test_transfer_from_consumes_allowance(self, ledger):
        ledger.approve("alice", "pool", 300)
        ledger.transfer_from("pool", "alice", "pool", 200)

        assert ledger.allowance("alice", "pool") == 100
        assert ledger.balance_of("pool") == 200

    def test_transfer_from_without_allowance(self, ledger):
        with pytest.raises(InsufficientAllowance):
            ledger.transfer_from("pool", "alice", "pool", 1)

    def test_transfer_from_insufficient_funds_keeps_allowance(self, ledger):
        ledger.approve("alice", "pool", 5_000)
        with pytest.raises(InsufficientFunds):
            ledger.transfer_from("pool", "alice", "pool", 2_000)
        assert ledger.allowance("alice", "pool") == 5_000

    def test_refund_transfer_from_restores_allowance(self, ledger):
        """Компенсация pull возвращает и баланс, и израсходованный allowance."""
        ledger.approve("alice", "pool", 300)
        ledger.transfer_from("pool", "alice", "pool", 200)

        ledger.refund_transfer_from("pool", "alice", 200)

        assert ledger.balance_of("alice") == 1_000
        assert ledger.balance_of("pool") == 0
        assert ledger.allowance("alice", "pool") == 300
        assert ledger.total_supply == 1_000

    def test_refund_more_than_spender_holds(self, ledger):
        ledger.approve("alice", "pool", 300)
        ledger.transfer_from("pool", "alice", "pool", 100)

        with pytest.raises(InsufficientFunds):
            ledger.refund_transfer_from("pool", "alice", 101)
        assert ledger.allowance("alice", "pool") == 200


class TestMinting:
    def test_mint_requires_minter(self, ledger):
        with pytest.raises(Unauthorized):
            ledger.mint("alice", "alice", 1)

    def test_grant_and_revoke_minter(self, ledger):
        ledger.grant_minter("issuer", "pool")
        ledger.mint("pool", "bob", 50)
        assert ledger.total_supply == 1_050

        ledger.revoke_minter("issuer", "pool")
        assert not ledger.is_minter("pool")
        with pytest.raises(Unauthorized):
            ledger.mint("pool", "bob", 50)

    def test_only_owner_manages_roles(self, ledger):
        with pytest.raises(Unauthorized):
            ledger.grant_minter("alice", "alice")
        with pytest.raises(Unauthorized):
            ledger.transfer_ownership("alice", "alice")

    def test_transfer_ownership(self, ledger):
        ledger.transfer_ownership("issuer", "pool")

        assert ledger.owner == "pool"
        with pytest.raises(Unauthorized):
            ledger.grant_minter("issuer", "issuer")

    def test_holder_burns_own_balance(self, ledger):
        ledger.burn("alice", "alice", 100)

        assert ledger.balance_of("alice") == 900
        assert ledger.total_supply == 900

    def test_burn_foreign_balance_requires_minter(self, ledger):
        with pytest.raises(Unauthorized):
            ledger.burn("bob", "alice", 100)
        ledger.burn("issuer", "alice", 100)
        assert ledger.balance_of("alice") == 900

    def test_burn_more_than_balance(self, ledger):
        with pytest.raises(InsufficientFunds):
            ledger.burn("alice", "alice", 1_001)


class TestLedgerHandle:
    def test_handle_acts_for_account(self, ledger):
        ledger.grant_minter("issuer", "pool")
        handle = ledger.bind("pool")

        handle.mint("pool", 10)
        handle.transfer("bob", 4)

        assert handle.account == "pool"
        assert handle.decimals == 6
        assert handle.balance_of("pool") == 6
        assert ledger.balance_of("bob") == 4

    def test_allowance_pull(self, ledger):
        handle = ledger.bind("pool")
        ledger.approve("alice", "pool", 250)

        handle.transfer_allowance_pull("alice", 250)

        assert ledger.balance_of("pool") == 250
        assert ledger.allowance("alice", "pool") == 0

        handle.refund_allowance_pull("alice", 250)

        assert ledger.balance_of("alice") == 1_000
        assert ledger.allowance("alice", "pool") == 250

    def test_protocols(self, ledger):
        handle = ledger.bind("pool")

        assert isinstance(handle, LedgerHandle)
        assert isinstance(handle, ReserveLedger)
        assert isinstance(handle, TokenLedger)
        assert isinstance(ledger, BindableLedger)
