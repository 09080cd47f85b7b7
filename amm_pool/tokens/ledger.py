"""Fungible balance ledger with allowances.

TokenLedger models a standard transferable-balance token. The pool and
router treat it as an external collaborator: they read ``balance_of`` as the
source of truth and move funds with ``transfer`` / ``transfer_from``.
"""

from __future__ import annotations

import threading
from dataclasses import dataclass

from amm_pool.errors import InsufficientAllowance, InsufficientBalance, InvalidAmount
from amm_pool.models.types import normalize_address


@dataclass(frozen=True)
class LedgerSnapshot:
    """Copy of a ledger's mutable state, used to roll back a failed transaction."""

    balances: dict[str, int]
    allowances: dict[tuple[str, str], int]
    total_supply: int


class TokenLedger:
    """Balance table mapping account -> amount, plus (owner, spender) allowances.

    Balances are kept sparse: zero entries are removed. Accounts are
    normalized to lowercase, so callers may pass mixed-case addresses.

    Every write holds ``mutex``. A pool transaction holds the same mutex for
    its whole duration, so writes from other threads wait until it commits
    or rolls back instead of being erased by the rollback.
    """

    def __init__(self, name: str, symbol: str, *, mutex: threading.RLock | None = None) -> None:
        self.name = name
        self.symbol = symbol
        self.mutex = mutex if mutex is not None else threading.RLock()
        self._balances: dict[str, int] = {}
        self._allowances: dict[tuple[str, str], int] = {}
        self._total_supply = 0

    def __repr__(self) -> str:
        return f"{type(self).__name__}({self.symbol}, supply={self._total_supply})"

    @property
    def total_supply(self) -> int:
        """Total amount in existence."""
        return self._total_supply

    def balance_of(self, account: str) -> int:
        """Balance of an account (0 if unknown)."""
        return self._balances.get(normalize_address(account), 0)

    def allowance(self, owner: str, spender: str) -> int:
        """Amount `spender` may still move out of `owner`'s balance."""
        return self._allowances.get((normalize_address(owner), normalize_address(spender)), 0)

    def holders(self) -> dict[str, int]:
        """All non-zero balances."""
        return dict(self._balances)

    # --- Mutations ---

    def approve(self, owner: str, spender: str, amount: int) -> None:
        """Set the allowance of `spender` over `owner`'s balance."""
        _check_amount(amount)
        key = (normalize_address(owner), normalize_address(spender))
        with self.mutex:
            if amount == 0:
                self._allowances.pop(key, None)
            else:
                self._allowances[key] = amount

    def transfer(self, sender: str, to: str, amount: int) -> int:
        """Move `amount` from `sender` to `to`.

        Returns:
            Amount actually credited to `to`

        Raises:
            InsufficientBalance: If sender holds less than amount
        """
        _check_amount(amount)
        sender = normalize_address(sender)
        to = normalize_address(to)
        with self.mutex:
            self._debit(sender, amount)
            return self._deliver(sender, to, amount)

    def transfer_from(self, spender: str, owner: str, to: str, amount: int) -> int:
        """Move `amount` from `owner` to `to` using `spender`'s allowance.

        Returns:
            Amount actually credited to `to`

        Raises:
            InsufficientAllowance: If the allowance is lower than amount
            InsufficientBalance: If owner holds less than amount
        """
        _check_amount(amount)
        key = (normalize_address(owner), normalize_address(spender))
        with self.mutex:
            allowed = self._allowances.get(key, 0)
            if allowed < amount:
                raise InsufficientAllowance(
                    f"{self.symbol}: allowance {allowed} < {amount} for spender {key[1]}"
                )
            self._debit(key[0], amount)
            remaining = allowed - amount
            if remaining == 0:
                self._allowances.pop(key, None)
            else:
                self._allowances[key] = remaining
            return self._deliver(key[0], normalize_address(to), amount)

    def mint(self, to: str, amount: int) -> None:
        """Create `amount` new units in `to`'s balance."""
        _check_amount(amount)
        with self.mutex:
            self._credit(normalize_address(to), amount)
            self._total_supply += amount

    def burn(self, owner: str, amount: int) -> None:
        """Destroy `amount` units from `owner`'s balance."""
        _check_amount(amount)
        with self.mutex:
            self._debit(normalize_address(owner), amount)
            self._total_supply -= amount

    # --- Rollback support ---

    def snapshot(self) -> LedgerSnapshot:
        with self.mutex:
            return LedgerSnapshot(
                balances=dict(self._balances),
                allowances=dict(self._allowances),
                total_supply=self._total_supply,
            )

    def restore(self, snapshot: LedgerSnapshot) -> None:
        with self.mutex:
            self._balances = dict(snapshot.balances)
            self._allowances = dict(snapshot.allowances)
            self._total_supply = snapshot.total_supply

    # --- Internals ---

    def _deliver(self, sender: str, to: str, amount: int) -> int:
        """Credit a transfer that has already been debited. Overridden by taxed tokens."""
        self._credit(to, amount)
        return amount

    def _credit(self, account: str, amount: int) -> None:
        if amount:
            self._balances[account] = self._balances.get(account, 0) + amount

    def _debit(self, account: str, amount: int) -> None:
        current = self._balances.get(account, 0)
        if current < amount:
            raise InsufficientBalance(
                f"{self.symbol}: balance of {account} is {current}, needs {amount}"
            )
        remaining = current - amount
        if remaining == 0:
            self._balances.pop(account, None)
        else:
            self._balances[account] = remaining


def _check_amount(amount: int) -> None:
    if amount < 0:
        raise InvalidAmount(f"Amount must be non-negative: {amount}")
