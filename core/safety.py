"""Quote safety checks.

Validates a swap quote against configurable risk thresholds. Only failed
error-severity checks make a quote unsafe; warnings are informational.
"""

import logging
from typing import Sequence

from core.models import (
    Quote,
    SafetyCheck,
    SafetyCheckResult,
    SafetyChecks,
    SafetyConfig,
    Severity,
)

logger = logging.getLogger(__name__)

# Route splits above this suggest fragmented liquidity
MAX_ROUTE_SPLITS = 5


class SafetyChecker:
    """Run the five safety checks against swap quotes."""

    def __init__(self, config: SafetyConfig | None = None):
        self.config = config or SafetyConfig()

    def check_quote_safety(
        self,
        quote: Quote,
        input_decimals: int,
        output_decimals: int,
    ) -> SafetyCheckResult:
        """
        Perform all safety checks on a quote.

        Args:
            quote: Quote to validate
            input_decimals: Input token decimals
            output_decimals: Output token decimals

        Returns:
            SafetyCheckResult with the individual checks and overall verdict
        """
        checks = SafetyChecks(
            price_impact=self._check_price_impact(quote),
            slippage=self._check_slippage(quote),
            route_count=self._check_route_count(quote),
            output_amount=self._check_output_amount(quote, input_decimals, output_decimals),
            liquidity_depth=self._check_liquidity_depth(quote),
        )
        result = SafetyCheckResult(safe=True, checks=checks)
        blocking = [name for name, check in result.iter_checks() if check.is_blocking]
        if blocking:
            logger.debug("Quote %s -> %s failed checks: %s", quote.input_mint, quote.output_mint, blocking)
            return result.model_copy(update={"safe": False})
        return result

    def _check_price_impact(self, quote: Quote) -> SafetyCheck:
        impact = abs(quote.price_impact_percent)
        cfg = self.config

        if impact > cfg.max_price_impact_percent:
            return SafetyCheck(
                passed=False,
                reason=f"Price impact {impact:.2f}% exceeds maximum {cfg.max_price_impact_percent}%",
                severity=Severity.ERROR,
            )
        if impact > cfg.warn_price_impact_percent:
            return SafetyCheck(
                passed=True,
                reason=(
                    f"Price impact {impact:.2f}% is above warning threshold "
                    f"{cfg.warn_price_impact_percent}%"
                ),
                severity=Severity.WARNING,
            )
        return SafetyCheck(
            passed=True,
            reason=f"Price impact {impact:.2f}% is acceptable",
            severity=Severity.INFO,
        )

    def _check_slippage(self, quote: Quote) -> SafetyCheck:
        slippage = quote.slippage_bps
        cfg = self.config

        if slippage > cfg.max_slippage_bps:
            return SafetyCheck(
                passed=False,
                reason=f"Slippage {slippage}bps exceeds maximum {cfg.max_slippage_bps}bps",
                severity=Severity.ERROR,
            )
        if slippage > cfg.warn_slippage_bps:
            return SafetyCheck(
                passed=True,
                reason=f"Slippage {slippage}bps is above warning threshold {cfg.warn_slippage_bps}bps",
                severity=Severity.WARNING,
            )
        return SafetyCheck(
            passed=True,
            reason=f"Slippage {slippage}bps is acceptable",
            severity=Severity.INFO,
        )

    def _check_route_count(self, quote: Quote) -> SafetyCheck:
        count = quote.route_count

        if count < self.config.min_route_count:
            return SafetyCheck(
                passed=False,
                reason=f"Only {count} route(s) found, minimum is {self.config.min_route_count}",
                severity=Severity.ERROR,
            )
        return SafetyCheck(
            passed=True,
            reason=f"Found {count} route(s)",
            severity=Severity.INFO,
        )

    def _check_output_amount(
        self,
        quote: Quote,
        input_decimals: int,
        output_decimals: int,
    ) -> SafetyCheck:
        output_amount = quote.output_amount(output_decimals)
        # Raw output/input ratio; no oracle price is consulted
        ratio = quote.rate(input_decimals, output_decimals)

        # A zero ratio (empty input or output) is let through unflagged
        if 0 < ratio < self.config.min_output_ratio:
            return SafetyCheck(
                passed=False,
                reason=f"Output ratio {ratio:.4f} is below minimum {self.config.min_output_ratio}",
                severity=Severity.WARNING,
            )
        return SafetyCheck(
            passed=True,
            reason=f"Output amount {output_amount:.6f} appears reasonable",
            severity=Severity.INFO,
        )

    def _check_liquidity_depth(self, quote: Quote) -> SafetyCheck:
        splits = quote.route_count

        if splits > MAX_ROUTE_SPLITS:
            return SafetyCheck(
                passed=True,
                reason=f"Swap split across {splits} routes - may indicate fragmented liquidity",
                severity=Severity.WARNING,
            )
        return SafetyCheck(
            passed=True,
            reason=f"Liquidity depth appears adequate ({splits} route(s))",
            severity=Severity.INFO,
        )

    def select_safest_quote(
        self,
        quotes: Sequence[Quote],
        input_decimals: int,
        output_decimals: int,
    ) -> tuple[Quote, SafetyCheckResult] | None:
        """
        Pick the best safe quote.

        Safe quotes are ranked by raw output amount (highest first), then by
        absolute price impact (lowest first); remaining ties keep input order.

        Returns:
            (quote, safety result) or None if no quote is safe
        """
        candidates = []
        for quote in quotes:
            result = self.check_quote_safety(quote, input_decimals, output_decimals)
            if result.safe:
                candidates.append((quote, result))

        if not candidates:
            logger.info("No safe quote among %d candidates", len(quotes))
            return None

        # sorted() is stable, so equal keys keep iteration order
        ranked = sorted(
            candidates,
            key=lambda c: (-c[0].out_amount, abs(c[0].price_impact_pct)),
        )
        return ranked[0]
