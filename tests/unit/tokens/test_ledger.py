"""Tests for TokenLedger, TaxedToken and ShareLedger."""

import pytest

from amm_pool.errors import InsufficientAllowance, InsufficientBalance, InvalidAmount
from amm_pool.tokens import ShareLedger, TaxedToken, TokenLedger
from tests.helpers import ALICE, BOB, CAROL, ONE, units

TREASURY = "0x" + "7e" * 20


@pytest.fixture
def ledger() -> TokenLedger:
    token = TokenLedger("Ether", "ETH")
    token.mint(ALICE, 10 * ONE)
    return token


@pytest.fixture
def taxed() -> TaxedToken:
    token = TaxedToken("SpaceCoin", "SPC", treasury=TREASURY, tax_enabled=True)
    token.mint(ALICE, 10 * ONE)
    token.mint(TREASURY, 10 * ONE)
    return token


class TestTokenLedgerTransfers:
    """Plain balance movements."""

    def test_transfer_moves_balance(self, ledger):
        received = ledger.transfer(ALICE, BOB, 3 * ONE)
        assert received == 3 * ONE
        assert ledger.balance_of(ALICE) == 7 * ONE
        assert ledger.balance_of(BOB) == 3 * ONE
        assert ledger.total_supply == 10 * ONE

    def test_transfer_exceeding_balance_raises(self, ledger):
        with pytest.raises(InsufficientBalance):
            ledger.transfer(BOB, ALICE, 1)

    def test_negative_amount_raises(self, ledger):
        with pytest.raises(InvalidAmount):
            ledger.transfer(ALICE, BOB, -1)

    def test_addresses_are_case_insensitive(self, ledger):
        ledger.transfer(ALICE.upper().replace("0X", "0x"), BOB, ONE)
        assert ledger.balance_of(BOB.upper().replace("0X", "0x")) == ONE

    def test_zero_balances_are_dropped(self, ledger):
        ledger.transfer(ALICE, BOB, 10 * ONE)
        assert ledger.holders() == {BOB: 10 * ONE}

    def test_burn_reduces_supply(self, ledger):
        ledger.burn(ALICE, 4 * ONE)
        assert ledger.total_supply == 6 * ONE
        with pytest.raises(InsufficientBalance):
            ledger.burn(ALICE, 7 * ONE)


class TestTokenLedgerAllowances:
    """Allowance-based transfers."""

    def test_transfer_from_consumes_allowance(self, ledger):
        ledger.approve(ALICE, BOB, 5 * ONE)
        ledger.transfer_from(BOB, ALICE, CAROL, 2 * ONE)
        assert ledger.allowance(ALICE, BOB) == 3 * ONE
        assert ledger.balance_of(CAROL) == 2 * ONE

    def test_transfer_from_without_allowance_raises(self, ledger):
        with pytest.raises(InsufficientAllowance):
            ledger.transfer_from(BOB, ALICE, BOB, 1)

    def test_allowance_checked_before_balance(self, ledger):
        ledger.approve(ALICE, BOB, 100 * ONE)
        with pytest.raises(InsufficientBalance):
            ledger.transfer_from(BOB, ALICE, BOB, 11 * ONE)
        # Failed transfer leaves the allowance untouched
        assert ledger.allowance(ALICE, BOB) == 100 * ONE

    def test_approve_overwrites(self, ledger):
        ledger.approve(ALICE, BOB, 5)
        ledger.approve(ALICE, BOB, 2)
        assert ledger.allowance(ALICE, BOB) == 2
        ledger.approve(ALICE, BOB, 0)
        assert ledger.allowance(ALICE, BOB) == 0


class TestLedgerSnapshots:
    """snapshot() / restore() used by pool transactions."""

    def test_restore_rolls_back_everything(self, ledger):
        snapshot = ledger.snapshot()
        ledger.transfer(ALICE, BOB, ONE)
        ledger.approve(ALICE, BOB, ONE)
        ledger.mint(CAROL, ONE)

        ledger.restore(snapshot)

        assert ledger.holders() == {ALICE: 10 * ONE}
        assert ledger.allowance(ALICE, BOB) == 0
        assert ledger.total_supply == 10 * ONE

    def test_snapshot_is_independent_copy(self, ledger):
        snapshot = ledger.snapshot()
        ledger.transfer(ALICE, BOB, ONE)
        assert snapshot.balances == {ALICE: 10 * ONE}


class TestTaxedToken:
    """2% transfer tax credited to the treasury."""

    def test_tax_is_withheld(self, taxed):
        received = taxed.transfer(ALICE, BOB, ONE)
        assert received == units("0.98")
        assert taxed.balance_of(BOB) == units("0.98")
        assert taxed.balance_of(TREASURY) == 10 * ONE + units("0.02")

    def test_total_supply_unchanged_by_tax(self, taxed):
        taxed.transfer(ALICE, BOB, ONE)
        assert taxed.total_supply == 20 * ONE

    def test_transfer_into_treasury_lands_in_full(self, taxed):
        taxed.transfer(ALICE, TREASURY, ONE)
        assert taxed.balance_of(TREASURY) == 11 * ONE

    def test_transfer_from_treasury_is_taxed_back_to_treasury(self, taxed):
        received = taxed.transfer(TREASURY, BOB, ONE)
        assert received == units("0.98")
        assert taxed.balance_of(TREASURY) == 9 * ONE + units("0.02")

    def test_transfer_from_is_taxed(self, taxed):
        taxed.approve(ALICE, BOB, ONE)
        assert taxed.transfer_from(BOB, ALICE, CAROL, ONE) == units("0.98")

    def test_tax_rounds_down(self, taxed):
        # 2 * 49 // 100 == 0
        assert taxed.tax_for(49) == 0
        assert taxed.tax_for(50) == 1

    def test_tax_toggle(self, taxed):
        taxed.set_tax(False)
        assert taxed.tax_for(ONE) == 0
        assert taxed.transfer(ALICE, BOB, ONE) == ONE


class TestShareLedger:
    """Share token with a locked minimum."""

    def test_lock_raises_supply_without_holder(self):
        shares = ShareLedger()
        shares.lock(1000)
        shares.mint(ALICE, 5000)
        assert shares.total_supply == 6000
        assert shares.locked == 1000
        assert sum(shares.holders().values()) + shares.locked == shares.total_supply

    def test_negative_lock_raises(self):
        with pytest.raises(InvalidAmount):
            ShareLedger().lock(-1)

    def test_restore_includes_locked(self):
        shares = ShareLedger()
        snapshot = shares.snapshot()
        shares.lock(1000)
        shares.mint(ALICE, 1)
        shares.restore(snapshot)
        assert shares.locked == 0
        assert shares.total_supply == 0
