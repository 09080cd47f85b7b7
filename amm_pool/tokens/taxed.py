"""Token with an optional proportional transfer tax."""

from __future__ import annotations

import threading

import structlog

from amm_pool.constants import TAX_DENOMINATOR, TAX_NUMERATOR
from amm_pool.models.types import normalize_address
from amm_pool.safe_int import S
from amm_pool.tokens.ledger import TokenLedger

logger = structlog.get_logger()


class TaxedToken(TokenLedger):
    """TokenLedger that can divert a share of every transfer to a treasury.

    When the tax is on, a transfer of `amount` credits
    ``amount - amount * 2 // 100`` to the recipient and the remainder to the
    treasury. This applies even when the treasury is the sender or the
    recipient, so a transfer into the treasury lands in full.

    Consumers must measure the recipient's balance delta instead of trusting
    the nominal amount.
    """

    def __init__(
        self,
        name: str,
        symbol: str,
        treasury: str,
        *,
        tax_enabled: bool = False,
        mutex: threading.RLock | None = None,
    ) -> None:
        super().__init__(name, symbol, mutex=mutex)
        self.treasury = normalize_address(treasury)
        self.tax_enabled = tax_enabled

    def set_tax(self, enabled: bool) -> None:
        """Toggle the transfer tax."""
        with self.mutex:
            self.tax_enabled = enabled
        logger.info("tax_toggled", token=self.symbol, enabled=enabled)

    def tax_for(self, amount: int) -> int:
        """Tax withheld from a transfer of `amount` (0 when the tax is off)."""
        if not self.tax_enabled:
            return 0
        return (S(amount) * S(TAX_NUMERATOR) // S(TAX_DENOMINATOR)).value

    def _deliver(self, sender: str, to: str, amount: int) -> int:
        tax = self.tax_for(amount)
        net = amount - tax
        self._credit(to, net)
        self._credit(self.treasury, tax)
        if tax:
            logger.debug("transfer_taxed", token=self.symbol, sender=sender, to=to, tax=tax)
        return net
