"""Router: slippage-checked entry points in front of a LiquidityPool.

The pool's primitives expect funds to be transferred to the pool account
before they are called. The router does that for the caller: it picks
amounts consistent with the current reserve ratio, pulls asset B and shares
through allowances, forwards the attached native value (asset A), invokes
the pool and checks the outcome against the caller's minimums.

The router holds no state of its own. Each public method runs in one pool
transaction, so a failed check reverts every transfer made before it.
"""

import structlog

from amm_pool import cpmm
from amm_pool.errors import (
    MinimumNotMet,
    NoLiquidityIn,
    NotEnoughAIn,
    NotEnoughBIn,
    NothingToBurn,
    SupplyMoreLiquidity,
    SwapMoreA,
    SwapMoreB,
)
from amm_pool.models.types import normalize_address, require_address
from amm_pool.pool import LiquidityPool
from amm_pool.tokens.ledger import TokenLedger

logger = structlog.get_logger()


class Router:
    """Computes safe deposit, withdrawal and swap amounts for a pool.

    Args:
        pool: The pool to route into
        address: The router's own account; it is the spender callers approve
            and the `sender` recorded in pool events
    """

    def __init__(self, pool: LiquidityPool, address: str) -> None:
        self.pool = pool
        self.address = normalize_address(address)

    @property
    def asset_a(self) -> TokenLedger:
        return self.pool.asset_a

    @property
    def asset_b(self) -> TokenLedger:
        return self.pool.asset_b

    # --- Quotes ---

    def quote_b_for_a(self, amount_a: int) -> int:
        """Asset B matching `amount_a` at the current ratio (0 for an empty pool)."""
        reserve_a, reserve_b = self.pool.get_reserves()
        if reserve_a == 0:
            return 0
        return cpmm.quote(amount_a, reserve_a, reserve_b)

    def get_amount_out(self, amount_in: int, *, a_to_b: bool = True) -> int:
        """Expected swap output at the current official reserves."""
        reserve_a, reserve_b = self.pool.get_reserves()
        reserve_in, reserve_out = (reserve_a, reserve_b) if a_to_b else (reserve_b, reserve_a)
        return cpmm.get_amount_out(
            amount_in,
            reserve_in,
            reserve_out,
            self.pool.config.fee_numerator,
            self.pool.config.fee_denominator,
        )

    def _match_amounts(
        self,
        desired_a: int,
        desired_b: int,
        min_a: int,
        min_b: int,
    ) -> tuple[int, int]:
        """Largest deposit within the desired amounts that keeps the reserve ratio.

        Raises:
            NotEnoughBIn: If the matched asset B amount is below min_b
            NotEnoughAIn: If the matched asset A amount is below min_a
        """
        reserve_a, reserve_b = self.pool.get_reserves()

        matched_b = cpmm.quote(desired_a, reserve_a, reserve_b)
        if matched_b <= desired_b:
            if matched_b < min_b:
                raise NotEnoughBIn(f"Matched asset B {matched_b} < minimum {min_b}")
            return desired_a, matched_b

        matched_a = cpmm.quote(desired_b, reserve_b, reserve_a)
        if matched_a < min_a:
            raise NotEnoughAIn(f"Matched asset A {matched_a} < minimum {min_a}")
        return matched_a, desired_b

    # --- Liquidity ---

    def add_liquidity(
        self,
        sender: str,
        to: str,
        desired_b: int,
        min_a: int,
        min_b: int,
        value: int,
    ) -> int:
        """Deposit both assets and mint shares to `to`.

        Args:
            sender: Account paying the deposit
            to: Recipient of the shares
            desired_b: Most asset B the sender is willing to deposit
                (pulled via the sender's allowance to the router)
            min_a: Least asset A the sender accepts to deposit
            min_b: Least asset B the sender accepts to deposit
            value: Native value (asset A) attached to the call; the desired
                asset A amount. Whatever is not deposited is refunded.

        Returns:
            Shares minted to `to`

        Raises:
            NoLiquidityIn: First deposit with a zero amount on either side
            NotEnoughAIn / NotEnoughBIn: Ratio-matched amount below a minimum
            MinimumNotMet: Amounts delivered after transfer tax below a minimum
            ZeroDeposit: From the pool, when the matched deposit is empty
        """
        sender, to = require_address(sender), require_address(to)
        with self.pool.transaction():
            if value:
                self.asset_a.transfer(sender, self.address, value)

            reserve_a, reserve_b = self.pool.get_reserves()
            first_deposit = self.pool.is_empty
            if first_deposit:
                if value == 0 or desired_b == 0:
                    raise NoLiquidityIn(
                        f"First deposit needs both assets: ({value}, {desired_b})"
                    )
                amount_a, amount_b = value, desired_b
            else:
                amount_a, amount_b = self._match_amounts(value, desired_b, min_a, min_b)

            received_b = self._pull_b(sender, amount_b)
            if received_b < amount_b and not first_deposit:
                # Taxed transfer: price asset A against what actually arrived
                amount_a = cpmm.quote(received_b, reserve_b, reserve_a)
            logger.debug(
                "add_liquidity_amounts",
                amount_a=amount_a,
                amount_b=amount_b,
                received_b=received_b,
            )

            if amount_a < min_a or received_b < min_b:
                raise MinimumNotMet(
                    f"Deposit ({amount_a}, {received_b}) below minimums ({min_a}, {min_b})"
                )

            if amount_a:
                self.asset_a.transfer(self.address, self.pool.address, amount_a)
            refund = value - amount_a
            if refund:
                self.asset_a.transfer(self.address, sender, refund)
                logger.info("native_refund", to=sender, amount=refund)

            shares = self.pool.mint(self.address, to)
            logger.info(
                "liquidity_added",
                sender=sender,
                to=to,
                amount_a=amount_a,
                amount_b=received_b,
                shares=shares,
            )
            return shares

    def _pull_b(self, sender: str, amount: int) -> int:
        """Move asset B from sender to the pool; return what the pool received."""
        if amount == 0:
            return 0
        before = self.asset_b.balance_of(self.pool.address)
        self.asset_b.transfer_from(self.address, sender, self.pool.address, amount)
        return self.asset_b.balance_of(self.pool.address) - before

    def remove_liquidity(
        self,
        sender: str,
        to: str,
        liquidity: int,
        min_a: int,
        min_b: int,
    ) -> tuple[int, int]:
        """Redeem `liquidity` of the sender's shares; assets go to `to`.

        Returns:
            (amount_a, amount_b) received by `to`

        Raises:
            NothingToBurn: If liquidity is zero
            InsufficientAllowance: If the sender has not approved the router
            SupplyMoreLiquidity: If either received amount is below its minimum
        """
        sender, to = require_address(sender), require_address(to)
        if liquidity == 0:
            raise NothingToBurn("Cannot remove zero liquidity")

        with self.pool.transaction():
            self.pool.shares.transfer_from(self.address, sender, self.pool.address, liquidity)
            amount_a, amount_b = self.pool.burn(self.address, to)
            if amount_a < min_a or amount_b < min_b:
                raise SupplyMoreLiquidity(
                    f"Redeemed ({amount_a}, {amount_b}) below minimums ({min_a}, {min_b})"
                )

            logger.info(
                "liquidity_removed",
                sender=sender,
                to=to,
                shares=liquidity,
                amount_a=amount_a,
                amount_b=amount_b,
            )
            return amount_a, amount_b

    # --- Swaps ---

    def swap_a_for_b(self, sender: str, to: str, min_out: int, value: int) -> int:
        """Swap the attached native value (asset A) for asset B.

        Raises:
            SwapMoreA: If the asset B received is below min_out
        """
        sender, to = require_address(sender), require_address(to)
        with self.pool.transaction():
            if value:
                self.asset_a.transfer(sender, self.pool.address, value)
            amount_out = self.pool.swap_a_to_b(self.address, to)
            if amount_out < min_out:
                raise SwapMoreA(f"Output {amount_out} < minimum {min_out}")

            logger.info("swapped", sender=sender, to=to, direction="a_to_b", amount_out=amount_out)
            return amount_out

    def swap_b_for_a(self, sender: str, to: str, amount_in: int, min_out: int) -> int:
        """Swap `amount_in` of the sender's asset B (via allowance) for asset A.

        Raises:
            SwapMoreB: If the asset A received is below min_out
        """
        sender, to = require_address(sender), require_address(to)
        with self.pool.transaction():
            if amount_in:
                self.asset_b.transfer_from(self.address, sender, self.pool.address, amount_in)
            amount_out = self.pool.swap_b_to_a(self.address, to)
            if amount_out < min_out:
                raise SwapMoreB(f"Output {amount_out} < minimum {min_out}")

            logger.info("swapped", sender=sender, to=to, direction="b_to_a", amount_out=amount_out)
            return amount_out
