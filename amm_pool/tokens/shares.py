"""Share token issued by a liquidity pool."""

from __future__ import annotations

import threading
from dataclasses import dataclass

from amm_pool.errors import InvalidAmount
from amm_pool.tokens.ledger import LedgerSnapshot, TokenLedger


@dataclass(frozen=True)
class ShareSnapshot(LedgerSnapshot):
    """Ledger snapshot that also carries the locked amount."""

    locked: int = 0


class ShareLedger(TokenLedger):
    """Pool share token with a permanently locked minimum.

    ``lock`` raises total supply without crediting any holder, so once
    liquidity exists: total_supply == sum(holder balances) + locked.
    """

    def __init__(
        self,
        name: str = "Liquidity Pool Share",
        symbol: str = "LPS",
        *,
        mutex: threading.RLock | None = None,
    ) -> None:
        super().__init__(name, symbol, mutex=mutex)
        self._locked = 0

    @property
    def locked(self) -> int:
        """Shares counted in total supply but held by no account."""
        return self._locked

    def lock(self, amount: int) -> None:
        """Add unredeemable shares to total supply."""
        if amount < 0:
            raise InvalidAmount(f"Amount must be non-negative: {amount}")
        with self.mutex:
            self._locked += amount
            self._total_supply += amount

    def snapshot(self) -> ShareSnapshot:
        with self.mutex:
            return ShareSnapshot(
                balances=dict(self._balances),
                allowances=dict(self._allowances),
                total_supply=self._total_supply,
                locked=self._locked,
            )

    def restore(self, snapshot: LedgerSnapshot) -> None:
        with self.mutex:
            super().restore(snapshot)
            if isinstance(snapshot, ShareSnapshot):
                self._locked = snapshot.locked
