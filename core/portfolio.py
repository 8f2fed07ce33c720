"""Paper trading portfolio simulator.

Owns the simulated account (cash, positions, trade ledger), applies
accepted swaps with weighted-average cost and closes positions with
realized P&L. Single writer: callers must not run trades concurrently
against the same manager.
"""

import logging

from core.models import (
    PaperTradingConfig,
    Portfolio,
    Position,
    Quote,
    Trade,
    TradeHistory,
    TradeResult,
    TradeStatus,
    TradeType,
)
from core.safety import SafetyChecker

logger = logging.getLogger(__name__)


class PaperTradingManager:
    """
    Simulated account driven by swap quotes.

    Prices are expressed in the base currency per unit of the position
    token, so a freshly opened position is worth exactly what it cost.
    Every failed operation returns a tagged TradeResult and leaves the
    portfolio untouched.
    """

    def __init__(
        self,
        config: PaperTradingConfig | None = None,
        safety: SafetyChecker | None = None,
    ):
        self.config = config or PaperTradingConfig()
        self.safety = safety or SafetyChecker()
        self._portfolio = Portfolio.create(self.config.starting_balance)
        self._trades: list[Trade] = []

        logger.info(
            "Paper trading started with %.4f %s",
            self.config.starting_balance,
            self.config.base_currency,
        )

    def _result(self, success: bool, trade: Trade | None = None, error: str | None = None) -> TradeResult:
        return TradeResult(success=success, trade=trade, error=error, portfolio=self.get_portfolio())

    def execute_trade(
        self,
        quote: Quote,
        input_decimals: int,
        output_decimals: int,
        input_symbol: str,
        output_symbol: str,
    ) -> TradeResult:
        """
        Execute a paper swap from the base currency into output_symbol.

        Args:
            quote: Swap quote, input side is the base currency
            input_decimals: Input token decimals
            output_decimals: Output token decimals
            input_symbol: Input token symbol (for logging)
            output_symbol: Position key for the acquired token

        Returns:
            TradeResult; failures: unsafe quote or insufficient balance
        """
        safety = self.safety.check_quote_safety(quote, input_decimals, output_decimals)
        if not safety.safe:
            logger.warning("Trade %s -> %s rejected by safety checks", input_symbol, output_symbol)
            return self._result(False, error="Trade failed safety checks")

        input_amount = quote.input_amount(input_decimals)
        output_amount = quote.output_amount(output_decimals)
        price = quote.unit_cost(input_decimals, output_decimals)
        price_impact = quote.price_impact_percent

        if output_amount <= 0:
            logger.warning("Trade %s -> %s rejected: empty output", input_symbol, output_symbol)
            return self._result(False, error="Quote has no output amount")

        cash = self._portfolio.cash
        if input_amount > cash:
            logger.warning("Insufficient balance: need %.6f, have %.6f", input_amount, cash)
            return self._result(False, error="Insufficient balance")

        trade = Trade(
            type=TradeType.SWAP,
            input_token=quote.input_mint,
            output_token=quote.output_mint,
            input_amount=input_amount,
            output_amount=output_amount,
            price=price,
            price_impact=price_impact,
            slippage=quote.slippage_bps / 100,
            routes=quote.route_count,
            status=TradeStatus.EXECUTED,
        )

        self._portfolio.cash -= input_amount

        position = self._portfolio.positions.get(output_symbol)
        if position is not None:
            position.amount += output_amount
            position.total_cost += input_amount
            position.average_price = position.total_cost / position.amount
            position.revalue(price)
        else:
            self._portfolio.positions[output_symbol] = Position(
                token=quote.output_mint,
                symbol=output_symbol,
                amount=output_amount,
                average_price=price,
                total_cost=input_amount,
                current_value=output_amount * price,
            )

        self._portfolio.recalculate()
        self._trades.append(trade)

        logger.info(
            "Trade executed: %.6f %s -> %.6f %s @ %.6f (portfolio %.4f %s)",
            input_amount,
            input_symbol,
            output_amount,
            output_symbol,
            price,
            self._portfolio.total_value,
            self.config.base_currency,
        )
        return self._result(True, trade=trade)

    def close_position(
        self,
        symbol: str,
        current_price: float,
        amount: float | None = None,
    ) -> TradeResult:
        """
        Sell part or all of a position back to the base currency.

        Args:
            symbol: Position key
            current_price: Base currency per token
            amount: Tokens to sell (defaults to the whole position)

        Returns:
            TradeResult with a sell trade carrying realized profit
        """
        position = self._portfolio.positions.get(symbol)
        if position is None:
            return self._result(False, error=f"No position found for {symbol}")

        if current_price <= 0:
            return self._result(False, error="Price must be positive")

        close_amount = position.amount if amount is None else amount
        if close_amount <= 0:
            return self._result(False, error="Close amount must be positive")
        if close_amount > position.amount:
            return self._result(False, error="Insufficient position size")

        proceeds = close_amount * current_price
        cost_basis = position.total_cost / position.amount * close_amount
        profit = proceeds - cost_basis
        profit_percent = profit / cost_basis * 100 if cost_basis else 0.0

        trade = Trade(
            type=TradeType.SELL,
            input_token=position.token,
            output_token=self.config.base_currency,
            input_amount=close_amount,
            output_amount=proceeds,
            price=current_price,
            status=TradeStatus.EXECUTED,
            profit=profit,
            profit_percent=profit_percent,
        )

        self._portfolio.cash += proceeds

        if close_amount == position.amount:
            del self._portfolio.positions[symbol]
        else:
            position.amount -= close_amount
            position.total_cost -= cost_basis
            position.revalue(current_price)

        self._portfolio.recalculate()
        self._trades.append(trade)

        logger.info(
            "Position closed: %.6f %s -> %.4f %s, profit %.4f (%.2f%%)",
            close_amount,
            symbol,
            proceeds,
            self.config.base_currency,
            profit,
            profit_percent,
        )
        return self._result(True, trade=trade)

    def mark_to_market(self, symbol: str, current_price: float) -> bool:
        """Revalue an open position at the current price.

        Returns:
            False if there is no position for symbol
        """
        position = self._portfolio.positions.get(symbol)
        if position is None:
            return False
        position.revalue(current_price)
        self._portfolio.recalculate()
        return True

    def get_portfolio(self) -> Portfolio:
        """Get a snapshot of the portfolio (safe to mutate)."""
        return self._portfolio.model_copy(deep=True)

    def get_position(self, symbol: str) -> Position | None:
        position = self._portfolio.positions.get(symbol)
        return position.model_copy() if position is not None else None

    def get_trades(self) -> tuple[Trade, ...]:
        return tuple(self._trades)

    def get_trade_history(self) -> TradeHistory:
        """Compute trade statistics from the ledger."""
        executed = [t for t in self._trades if t.status == TradeStatus.EXECUTED]
        profitable = [t for t in executed if (t.profit or 0) > 0]
        losing = [t for t in executed if (t.profit or 0) < 0]

        total_profit = sum(t.profit for t in profitable)
        total_loss = abs(sum(t.profit for t in losing))

        return TradeHistory(
            trades=list(self._trades),
            total_trades=len(self._trades),
            successful_trades=len(executed),
            failed_trades=sum(1 for t in self._trades if t.status == TradeStatus.FAILED),
            total_volume=sum(t.input_amount for t in executed),
            total_profit=total_profit,
            total_loss=total_loss,
            net_pnl=total_profit - total_loss,
            win_rate=len(profitable) / len(executed) if executed else 0.0,
            average_profit=total_profit / len(profitable) if profitable else 0.0,
            average_loss=total_loss / len(losing) if losing else 0.0,
            largest_win=max((t.profit for t in profitable), default=0.0),
            largest_loss=min((t.profit for t in losing), default=0.0),
        )
