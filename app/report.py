"""Report formatting for paper trading sessions.

Outputs safety reports, portfolio and trade history to the console, and
whole sessions to JSON files.
"""

from __future__ import annotations

import json
from datetime import datetime, timezone
from pathlib import Path

from core.models import (
    MarketAnalysis,
    Portfolio,
    SafetyCheckResult,
    Severity,
    TradeHistory,
)
from core.portfolio import PaperTradingManager

_SEVERITY_TAGS = {
    Severity.INFO: "OK  ",
    Severity.WARNING: "WARN",
    Severity.ERROR: "FAIL",
}


class ReportFormatter:
    """Format paper trading results for display and export."""

    @staticmethod
    def print_safety_report(result: SafetyCheckResult) -> None:
        """Print the individual checks and overall verdict."""
        print("\n" + "=" * 70)
        print("  SAFETY CHECK REPORT")
        print("=" * 70)
        print(f"  Overall status: {'SAFE' if result.safe else 'UNSAFE'}")
        print("-" * 70)
        for name, check in result.iter_checks():
            tag = _SEVERITY_TAGS[check.severity]
            print(f"  [{tag}] {name:<16} {check.reason}")
        print("=" * 70)

    @staticmethod
    def print_portfolio(portfolio: Portfolio, base_currency: str) -> None:
        """Print cash, value, P&L and open positions."""
        print("\n" + "=" * 70)
        print("  PORTFOLIO SUMMARY")
        print("=" * 70)
        print(f"  Total value:    {portfolio.total_value:.4f} {base_currency}")
        print(f"  Cash:           {portfolio.cash:.4f} {base_currency}")
        print(f"  Total P&L:      {portfolio.total_pnl:+.4f} ({portfolio.total_pnl_percent:+.2f}%)")

        print("\n" + "-" * 70)
        print("  POSITIONS")
        print("-" * 70)
        if not portfolio.positions:
            print("  No open positions")
        else:
            print(f"  {'Symbol':<10} {'Amount':>14} {'Avg price':>12} {'Value':>12} {'Unrealized':>12} {'%':>8}")
            for symbol, p in portfolio.positions.items():
                print(
                    f"  {symbol:<10} {p.amount:>14.6f} {p.average_price:>12.6f} "
                    f"{p.current_value:>12.4f} {p.unrealized_pnl:>+12.4f} {p.unrealized_pnl_percent:>+7.2f}%"
                )
        print("=" * 70)

    @staticmethod
    def print_trade_history(history: TradeHistory) -> None:
        """Print ledger statistics and the trade log."""
        print("\n" + "=" * 70)
        print("  TRADE HISTORY")
        print("=" * 70)
        print(f"  Total trades:   {history.total_trades}")
        print(f"  Successful:     {history.successful_trades}")
        print(f"  Failed:         {history.failed_trades}")
        print(f"  Win rate:       {history.win_rate * 100:.2f}%")
        print(f"  Total profit:   {history.total_profit:.4f}")
        print(f"  Total loss:     {history.total_loss:.4f}")
        print(f"  Net P&L:        {history.net_pnl:+.4f}")
        print(f"  Average win:    {history.average_profit:.4f}")
        print(f"  Average loss:   {history.average_loss:.4f}")
        print(f"  Largest win:    {history.largest_win:.4f}")
        print(f"  Largest loss:   {history.largest_loss:.4f}")

        if history.trades:
            print("\n" + "-" * 70)
            print("  TRADES")
            print("-" * 70)
            print(f"  {'Time':<20} {'Type':<6} {'Input':>14} {'Output':>14} {'Price':>12} {'Profit':>10}")
            for t in history.trades:
                profit = f"{t.profit:+.4f}" if t.profit is not None else "-"
                print(
                    f"  {t.timestamp:%Y-%m-%d %H:%M:%S}  {t.type.value:<6} {t.input_amount:>14.6f} "
                    f"{t.output_amount:>14.6f} {t.price:>12.6f} {profit:>10}"
                )
        print("=" * 70)

    @staticmethod
    def print_analysis(analysis: MarketAnalysis) -> None:
        """Print one analysis pass with its recommendation."""
        signal = analysis.trading_signal
        rec = analysis.recommendation

        print("\n" + "-" * 70)
        print(f"  {analysis.timestamp:%H:%M:%S} | {analysis.pair}")
        print("-" * 70)
        print(f"  Price:   {analysis.price:.6f} ({analysis.price_change_24h:+.2f}%)")
        print(f"  RSI:     {analysis.rsi.value:.2f} ({analysis.rsi.signal.value} - {analysis.rsi.strength.value})")
        print(f"  MACD:    {analysis.macd.histogram:.6f} ({analysis.macd.crossover.value})")
        print(f"  Signal:  {signal.action.value} ({signal.confidence:.1f}% confidence)")
        if rec.entry_price is not None:
            print(
                f"  Entry {rec.entry_price:.6f}  target {rec.target_price:.6f}  "
                f"stop {rec.stop_loss:.6f}  size {rec.position_size * 100:.0f}%"
            )
        for reason in signal.reasons:
            print(f"    - {reason}")

    @staticmethod
    def to_dict(manager: PaperTradingManager) -> dict:
        """Convert a session to a JSON-serializable dict."""
        return {
            "config": manager.config.model_dump(mode="json"),
            "portfolio": manager.get_portfolio().model_dump(mode="json"),
            "trades": [t.model_dump(mode="json") for t in manager.get_trades()],
            "history": manager.get_trade_history().model_dump(mode="json", exclude={"trades"}),
            "timestamp": datetime.now(timezone.utc).isoformat(),
        }

    @staticmethod
    def save_session(manager: PaperTradingManager, filepath: str | Path) -> Path:
        """Save a session to a JSON file, creating parent directories."""
        path = Path(filepath)
        path.parent.mkdir(parents=True, exist_ok=True)
        data = ReportFormatter.to_dict(manager)
        with open(path, "w") as f:
            json.dump(data, f, indent=2)
        print(f"\nSession saved to {path}")
        return path
