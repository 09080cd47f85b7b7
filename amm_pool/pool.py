"""Constant-product liquidity pool for one pair of assets.

The pool keeps an "official" view of its reserves next to the balances the
asset ledgers actually record for the pool account. Every mutating call
starts with ``reconcile()``: whatever the ledgers hold above the official
reserves is treated as freshly deposited. That surplus is how deposits
arrive (callers transfer first, then call mint or swap), and it is also how
donations and tax-adjusted transfers are absorbed. A surplus is swept into
whichever operation runs next, and reserves are resynchronized to the actual
balances at the end of every call.

Each call runs inside ``transaction()``: the pool lock and the mutex of every
ledger it touches, plus a snapshot of reserves, events and ledgers, restored
if the call raises. Holding the ledger mutexes keeps writes from other
threads (funding, approvals, donations) out of the window a rollback covers.
"""

from __future__ import annotations

import threading
from collections.abc import Iterator
from contextlib import contextmanager
from dataclasses import dataclass
from decimal import Decimal

import structlog

from amm_pool import cpmm
from amm_pool.config import DEFAULT_POOL_CONFIG, PoolConfig
from amm_pool.errors import (
    InvariantViolation,
    MintAmountTooSmall,
    NothingToBurn,
    ZeroDeposit,
    ZeroLiquidity,
    ZeroOutput,
)
from amm_pool.models.events import BurnEvent, MintEvent, PoolEvent, SwapEvent
from amm_pool.models.types import normalize_address, require_address
from amm_pool.safe_int import S
from amm_pool.tokens.ledger import LedgerSnapshot, TokenLedger
from amm_pool.tokens.shares import ShareLedger

logger = structlog.get_logger()


@dataclass(frozen=True)
class PoolSnapshot:
    """Everything a failed transaction must put back."""

    reserve_a: int
    reserve_b: int
    event_count: int
    asset_a: LedgerSnapshot
    asset_b: LedgerSnapshot
    shares: LedgerSnapshot


class LiquidityPool:
    """Two-asset constant-product pool issuing fungible ownership shares.

    Args:
        address: Account under which the asset ledgers hold the pool's funds
        asset_a: Ledger of asset A (native currency, ETH in a Market)
        asset_b: Ledger of asset B (possibly a taxed token)
        config: Minimum liquidity and fee parameters
        shares: Share ledger; a fresh one is created if omitted
    """

    def __init__(
        self,
        address: str,
        asset_a: TokenLedger,
        asset_b: TokenLedger,
        config: PoolConfig = DEFAULT_POOL_CONFIG,
        shares: ShareLedger | None = None,
    ) -> None:
        self.address = normalize_address(address)
        self.asset_a = asset_a
        self.asset_b = asset_b
        self.config = config
        self.shares = shares if shares is not None else ShareLedger()
        self.reserve_a = 0
        self.reserve_b = 0
        self.events: list[PoolEvent] = []
        self._lock = threading.RLock()
        self._depth = 0

    def __repr__(self) -> str:
        return (
            f"LiquidityPool({self.asset_a.symbol}/{self.asset_b.symbol}, "
            f"reserves=({self.reserve_a}, {self.reserve_b}), shares={self.total_shares})"
        )

    # --- Views ---

    @property
    def total_shares(self) -> int:
        """Outstanding shares, including the locked minimum."""
        return self.shares.total_supply

    @property
    def is_empty(self) -> bool:
        return self.total_shares == 0

    def get_reserves(self) -> tuple[int, int]:
        """Official reserves (reserve_a, reserve_b)."""
        return self.reserve_a, self.reserve_b

    def balance_of(self, holder: str) -> int:
        """Shares held by `holder`."""
        return self.shares.balance_of(holder)

    def spot_price(self) -> Decimal | None:
        """Asset B per unit of asset A at the official reserves."""
        return cpmm.spot_price(self.reserve_a, self.reserve_b)

    # --- Transactions ---

    @contextmanager
    def transaction(self) -> Iterator[None]:
        """Run a block atomically against this pool.

        Re-entrant: only the outermost block snapshots and restores, so a
        router call wrapping several pool primitives reverts as one unit.
        Ledger writes from other threads block until the block exits.
        """
        with self._lock, self.asset_a.mutex, self.asset_b.mutex, self.shares.mutex:
            if self._depth:
                self._depth += 1
                try:
                    yield
                finally:
                    self._depth -= 1
                return

            snapshot = self._snapshot()
            self._depth = 1
            try:
                yield
            except Exception as err:
                self._restore(snapshot)
                logger.info(
                    "transaction_reverted",
                    pool=self.address,
                    error=getattr(err, "code", type(err).__name__),
                )
                raise
            finally:
                self._depth = 0

    def _snapshot(self) -> PoolSnapshot:
        return PoolSnapshot(
            reserve_a=self.reserve_a,
            reserve_b=self.reserve_b,
            event_count=len(self.events),
            asset_a=self.asset_a.snapshot(),
            asset_b=self.asset_b.snapshot(),
            shares=self.shares.snapshot(),
        )

    def _restore(self, snapshot: PoolSnapshot) -> None:
        self.reserve_a = snapshot.reserve_a
        self.reserve_b = snapshot.reserve_b
        del self.events[snapshot.event_count :]
        self.asset_a.restore(snapshot.asset_a)
        self.asset_b.restore(snapshot.asset_b)
        self.shares.restore(snapshot.shares)

    # --- Reserve accounting ---

    def reconcile(self) -> tuple[int, int]:
        """Amounts held by the pool account but not yet in the official reserves.

        Returns:
            (unaccounted_a, unaccounted_b)

        Raises:
            Underflow: If a ledger reports less than the official reserve,
                which would mean funds left the pool outside its own calls
        """
        actual_a = self.asset_a.balance_of(self.address)
        actual_b = self.asset_b.balance_of(self.address)
        unaccounted_a = (S(actual_a) - S(self.reserve_a)).value
        unaccounted_b = (S(actual_b) - S(self.reserve_b)).value
        logger.debug(
            "reconcile",
            pool=self.address,
            reserve_a=self.reserve_a,
            reserve_b=self.reserve_b,
            unaccounted_a=unaccounted_a,
            unaccounted_b=unaccounted_b,
        )
        return unaccounted_a, unaccounted_b

    def _sync(self) -> None:
        self.reserve_a = self.asset_a.balance_of(self.address)
        self.reserve_b = self.asset_b.balance_of(self.address)

    def _pay(self, ledger: TokenLedger, to: str, amount: int) -> int:
        """Transfer out of the pool; return what `to` actually received."""
        if amount == 0:
            return 0
        before = ledger.balance_of(to)
        ledger.transfer(self.address, to, amount)
        return ledger.balance_of(to) - before

    # --- Primitives ---

    def mint(self, sender: str, to: str) -> int:
        """Issue shares for assets already transferred to the pool account.

        Args:
            sender: Account calling mint (recorded in the event)
            to: Recipient of the new shares

        Returns:
            Shares credited to `to`

        Raises:
            ZeroDeposit: If either asset has no unaccounted balance
            MintAmountTooSmall: If the first deposit's geometric mean does not
                exceed MIN_LIQUIDITY, or a later deposit rounds to zero shares
        """
        sender, to = require_address(sender), require_address(to)
        with self.transaction():
            amount_a, amount_b = self.reconcile()
            if amount_a == 0 or amount_b == 0:
                raise ZeroDeposit(f"Deposit must include both assets: ({amount_a}, {amount_b})")

            if self.total_shares == 0:
                shares = cpmm.initial_shares(amount_a, amount_b, self.config.min_liquidity)
                self.shares.lock(self.config.min_liquidity)
            else:
                shares = cpmm.proportional_shares(
                    amount_a, amount_b, self.reserve_a, self.reserve_b, self.total_shares
                )
                if shares == 0:
                    raise MintAmountTooSmall(
                        f"Deposit ({amount_a}, {amount_b}) mints zero shares"
                    )

            self.shares.mint(to, shares)
            self._sync()

            self.events.append(
                MintEvent(
                    sender=sender,
                    to=to,
                    amount_a=amount_a,
                    amount_b=amount_b,
                    shares=shares,
                )
            )
            logger.info(
                "mint",
                pool=self.address,
                to=to,
                amount_a=amount_a,
                amount_b=amount_b,
                shares=shares,
                total_shares=self.total_shares,
            )
            return shares

    def burn(self, sender: str, to: str) -> tuple[int, int]:
        """Redeem the shares held by the pool account for the underlying assets.

        Args:
            sender: Account calling burn (recorded in the event)
            to: Recipient of the redeemed assets

        Returns:
            (amount_a, amount_b) actually received by `to`

        Raises:
            NothingToBurn: If the pool account holds no shares
            ZeroOutput: If the shares redeem to nothing on both sides
        """
        sender, to = require_address(sender), require_address(to)
        with self.transaction():
            self.reconcile()
            liquidity = self.shares.balance_of(self.address)
            if liquidity == 0:
                raise NothingToBurn("No shares were transferred to the pool")

            out_a, out_b = cpmm.redeem_amounts(
                liquidity, self.reserve_a, self.reserve_b, self.total_shares
            )
            # Unreachable while reserve_a * reserve_b >= total_shares ** 2, which
            # the first mint establishes and every later call preserves: the
            # larger reserve is then at least total_shares, so one share redeems
            # at least one unit of it.
            if out_a == 0 and out_b == 0:
                raise ZeroOutput(f"Burning {liquidity} shares redeems nothing")

            self.shares.burn(self.address, liquidity)
            received_a = self._pay(self.asset_a, to, out_a)
            received_b = self._pay(self.asset_b, to, out_b)
            self._sync()

            self.events.append(
                BurnEvent(
                    sender=sender,
                    to=to,
                    shares=liquidity,
                    amount_a=received_a,
                    amount_b=received_b,
                )
            )
            logger.info(
                "burn",
                pool=self.address,
                to=to,
                shares=liquidity,
                amount_a=received_a,
                amount_b=received_b,
                total_shares=self.total_shares,
            )
            return received_a, received_b

    def swap_a_to_b(self, sender: str, to: str) -> int:
        """Swap the unaccounted asset A balance for asset B sent to `to`."""
        return self._swap(sender, to, a_to_b=True)

    def swap_b_to_a(self, sender: str, to: str) -> int:
        """Swap the unaccounted asset B balance for asset A sent to `to`."""
        return self._swap(sender, to, a_to_b=False)

    def _swap(self, sender: str, to: str, *, a_to_b: bool) -> int:
        """Shared body of both swap directions.

        Returns:
            Output amount actually received by `to`

        Raises:
            ZeroLiquidity: If no shares exist
            ZeroDeposit: If nothing of the input asset is unaccounted
            InvariantViolation: If reserve_a * reserve_b would decrease
        """
        sender, to = require_address(sender), require_address(to)
        with self.transaction():
            if self.total_shares == 0:
                raise ZeroLiquidity("Pool has no liquidity")

            unaccounted_a, unaccounted_b = self.reconcile()
            if a_to_b:
                amount_in, surplus_out = unaccounted_a, unaccounted_b
                reserve_in, reserve_out = self.reserve_a, self.reserve_b
                ledger_out = self.asset_b
            else:
                amount_in, surplus_out = unaccounted_b, unaccounted_a
                reserve_in, reserve_out = self.reserve_b, self.reserve_a
                ledger_out = self.asset_a

            if amount_in == 0:
                raise ZeroDeposit("Nothing deposited on the input side")
            if surplus_out:
                # Stays in the pool and lands in reserves below
                logger.warning(
                    "unaccounted_balance",
                    pool=self.address,
                    asset=ledger_out.symbol,
                    amount=surplus_out,
                )

            k_before = S(self.reserve_a) * S(self.reserve_b)
            amount_out = cpmm.get_amount_out(
                amount_in,
                reserve_in,
                reserve_out,
                self.config.fee_numerator,
                self.config.fee_denominator,
            )
            received = self._pay(ledger_out, to, amount_out)
            self._sync()

            k_after = S(self.reserve_a) * S(self.reserve_b)
            if k_after < k_before:
                raise InvariantViolation(
                    f"Swap of {amount_in} would decrease k: {k_before.value} -> {k_after.value}"
                )

            self.events.append(
                SwapEvent(
                    sender=sender,
                    to=to,
                    amount_a_in=amount_in if a_to_b else 0,
                    amount_b_in=0 if a_to_b else amount_in,
                    amount_a_out=0 if a_to_b else received,
                    amount_b_out=received if a_to_b else 0,
                )
            )
            logger.info(
                "swap",
                pool=self.address,
                to=to,
                direction="a_to_b" if a_to_b else "b_to_a",
                amount_in=amount_in,
                amount_out=received,
                reserve_a=self.reserve_a,
                reserve_b=self.reserve_b,
            )
            return received
