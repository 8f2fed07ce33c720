"""Paper trading portfolio, position and trade ledger models."""

import time
from datetime import datetime, timezone
from enum import Enum
from uuid import uuid4

from pydantic import BaseModel, ConfigDict, Field


class TradeType(str, Enum):
    """Kind of ledger entry."""

    BUY = "buy"
    SELL = "sell"
    SWAP = "swap"


class TradeStatus(str, Enum):
    """Trade lifecycle status."""

    PENDING = "pending"
    EXECUTED = "executed"
    FAILED = "failed"


def generate_trade_id() -> str:
    """Generate a unique trade ID: trade-<epoch ms>-<random suffix>."""
    return f"trade-{int(time.time() * 1000)}-{uuid4().hex[:9]}"


def _utcnow() -> datetime:
    return datetime.now(timezone.utc)


class PaperTradingConfig(BaseModel):
    """Simulation session settings."""

    starting_balance: float = Field(default=10.0, gt=0)
    base_currency: str = "SOL"


class Position(BaseModel):
    """Open simulated holding, tracked at weighted-average cost."""

    token: str
    symbol: str
    amount: float
    average_price: float
    total_cost: float
    current_value: float = 0.0
    unrealized_pnl: float = 0.0
    unrealized_pnl_percent: float = 0.0

    def revalue(self, current_price: float) -> None:
        """Recompute value and unrealized P&L at the given price."""
        self.current_value = self.amount * current_price
        self.unrealized_pnl = self.current_value - self.total_cost
        if self.total_cost:
            self.unrealized_pnl_percent = self.unrealized_pnl / self.total_cost * 100
        else:
            self.unrealized_pnl_percent = 0.0


class Trade(BaseModel):
    """Immutable ledger entry."""

    model_config = ConfigDict(frozen=True)

    id: str = Field(default_factory=generate_trade_id)
    timestamp: datetime = Field(default_factory=_utcnow)
    type: TradeType
    input_token: str
    output_token: str
    input_amount: float
    output_amount: float
    price: float
    price_impact: float = 0.0  # Percent
    slippage: float = 0.0  # Percent
    routes: int = 0
    status: TradeStatus = TradeStatus.EXECUTED
    profit: float | None = None
    profit_percent: float | None = None


class Portfolio(BaseModel):
    """Simulated account: cash plus open positions keyed by symbol."""

    total_value: float
    cash: float
    positions: dict[str, Position] = Field(default_factory=dict)
    total_pnl: float = 0.0
    total_pnl_percent: float = 0.0
    starting_balance: float

    @classmethod
    def create(cls, starting_balance: float) -> "Portfolio":
        return cls(
            total_value=starting_balance,
            cash=starting_balance,
            starting_balance=starting_balance,
        )

    @property
    def positions_value(self) -> float:
        return sum(p.current_value for p in self.positions.values())

    def recalculate(self) -> None:
        """Refresh aggregate value and P&L from cash and positions."""
        self.total_value = self.cash + self.positions_value
        self.total_pnl = self.total_value - self.starting_balance
        self.total_pnl_percent = self.total_pnl / self.starting_balance * 100


class TradeResult(BaseModel):
    """Tagged outcome of a trade attempt."""

    success: bool
    trade: Trade | None = None
    error: str | None = None
    portfolio: Portfolio


class TradeHistory(BaseModel):
    """Aggregate statistics derived from the trade ledger."""

    trades: list[Trade] = Field(default_factory=list)
    total_trades: int = 0
    successful_trades: int = 0
    failed_trades: int = 0
    total_volume: float = 0.0
    total_profit: float = 0.0
    total_loss: float = 0.0
    net_pnl: float = 0.0
    win_rate: float = 0.0  # Fraction of executed trades, 0..1
    average_profit: float = 0.0
    average_loss: float = 0.0
    largest_win: float = 0.0
    largest_loss: float = 0.0
