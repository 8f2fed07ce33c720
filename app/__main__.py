"""CLI entry point for paper trading.

Usage:
    python -m app demo
    python -m app demo --save
    python -m app simulate --steps 300 --seed 7
    python -m app simulate --config trading.yaml --start-price 150 -o sessions/run.json
"""

import argparse
import asyncio
import logging
from datetime import datetime, timezone
from pathlib import Path

from app.config import get_settings
from app.report import ReportFormatter
from app.services.auto_trader import AutoTrader
from app.services.mock_quotes import DEMO_PAIR, DEMO_QUOTES, RandomWalkQuoteSource
from app.trading_config import load_trading_config
from core.models import MarketAnalysis, PaperTradingConfig, SignalAction
from core.portfolio import PaperTradingManager
from core.safety import SafetyChecker


def parse_args() -> argparse.Namespace:
    parser = argparse.ArgumentParser(
        description="Paper trading simulator",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog="""
Examples:
  python -m app demo
  python -m app simulate --steps 300 --seed 7
        """,
    )
    parser.add_argument(
        "--verbose", "-v",
        action="store_true",
        help="Verbose logging",
    )
    sub = parser.add_subparsers(dest="command", required=True)

    demo = sub.add_parser("demo", help="Run the scripted SOL -> USDC paper trading scenario")
    demo.add_argument(
        "--save",
        action="store_true",
        help="Save the session JSON to the sessions directory",
    )

    sim = sub.add_parser("simulate", help="Run the auto trader against random-walk quotes")
    sim.add_argument(
        "--config",
        type=Path,
        default=None,
        help="Path to trading.yaml (default: PAPER_TRADING_CONFIG_PATH or ./trading.yaml)",
    )
    sim.add_argument("--steps", type=int, default=300, help="Number of cycles (default: 300)")
    sim.add_argument("--seed", type=int, default=None, help="Random seed")
    sim.add_argument(
        "--start-price",
        type=float,
        default=150.0,
        help="Starting price in base currency per token (default: 150)",
    )
    sim.add_argument(
        "--volatility",
        type=float,
        default=0.01,
        help="Per-step log-return standard deviation (default: 0.01)",
    )
    sim.add_argument(
        "--output", "-o",
        type=str,
        default=None,
        help="Output file path for the session JSON",
    )
    return parser.parse_args()


def _session_path(sessions_dir: str) -> Path:
    stamp = datetime.now(timezone.utc).strftime("%Y%m%d-%H%M%S")
    return Path(sessions_dir) / f"paper-trading-session-{stamp}.json"


def cmd_demo(args: argparse.Namespace) -> None:
    """Two buys, a partial close, then reports."""
    settings = get_settings()
    safety = SafetyChecker()
    manager = PaperTradingManager(
        PaperTradingConfig(starting_balance=10.0, base_currency="SOL"),
        safety,
    )
    ReportFormatter.print_portfolio(manager.get_portfolio(), "SOL")

    for name in ("sol_to_usdc", "sol_to_usdc_higher"):
        quote = DEMO_QUOTES[name]
        ReportFormatter.print_safety_report(
            safety.check_quote_safety(quote, DEMO_PAIR.input_decimals, DEMO_PAIR.output_decimals)
        )
        result = manager.execute_trade(
            quote,
            DEMO_PAIR.input_decimals,
            DEMO_PAIR.output_decimals,
            DEMO_PAIR.input_symbol,
            DEMO_PAIR.symbol,
        )
        print(f"\n{name}: {'executed' if result.success else result.error}")

    ReportFormatter.print_portfolio(manager.get_portfolio(), "SOL")

    # USDC appreciates against SOL, sell half
    position = manager.get_position(DEMO_PAIR.symbol)
    if position is not None:
        result = manager.close_position(DEMO_PAIR.symbol, 0.00420, position.amount / 2)
        if result.success and result.trade is not None:
            print(f"\nPartial close profit: {result.trade.profit:+.6f} SOL ({result.trade.profit_percent:+.2f}%)")
        else:
            print(f"\nClose failed: {result.error}")

    ReportFormatter.print_portfolio(manager.get_portfolio(), "SOL")
    ReportFormatter.print_trade_history(manager.get_trade_history())

    if args.save:
        ReportFormatter.save_session(manager, _session_path(settings.sessions_dir))


async def cmd_simulate(args: argparse.Namespace) -> None:
    """Drive the auto trader with synthetic quotes and no delay between cycles."""
    settings = get_settings()
    config_path = args.config or (
        Path(settings.trading_config_path) if settings.trading_config_path else None
    )
    config = load_trading_config(config_path)

    source = RandomWalkQuoteSource(
        {pair.symbol: args.start_price for pair in config.pairs},
        volatility=args.volatility,
        seed=args.seed,
    )
    trader = AutoTrader(
        config,
        source,
        update_interval=0,
        error_backoff=0,
        max_history=settings.price_history_size,
    )

    async def _show_strong(analysis: MarketAnalysis) -> None:
        if analysis.trading_signal.action in (SignalAction.STRONG_BUY, SignalAction.STRONG_SELL):
            ReportFormatter.print_analysis(analysis)

    trader.on_analysis(_show_strong)
    await trader.start(max_cycles=args.steps)

    base = config.paper_trading.base_currency
    ReportFormatter.print_portfolio(trader.manager.get_portfolio(), base)
    ReportFormatter.print_trade_history(trader.manager.get_trade_history())

    if args.output:
        ReportFormatter.save_session(trader.manager, args.output)


def main() -> None:
    args = parse_args()
    settings = get_settings()

    # Configure logging
    level = logging.DEBUG if args.verbose else getattr(logging, settings.log_level.upper(), logging.INFO)
    logging.basicConfig(
        level=level,
        format="%(asctime)s - %(levelname)s - %(message)s",
    )
    logging.getLogger("asyncio").setLevel(logging.WARNING)

    if args.command == "demo":
        cmd_demo(args)
    else:
        asyncio.run(cmd_simulate(args))


if __name__ == "__main__":
    main()
