"""Asset and share ledgers the pool debits and credits."""

from amm_pool.tokens.ledger import LedgerSnapshot, TokenLedger
from amm_pool.tokens.shares import ShareLedger, ShareSnapshot
from amm_pool.tokens.taxed import TaxedToken

__all__ = [
    "LedgerSnapshot",
    "TokenLedger",
    "TaxedToken",
    "ShareLedger",
    "ShareSnapshot",
]
