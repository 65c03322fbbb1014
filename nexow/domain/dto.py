from dataclasses import dataclass, field
from enum import Enum
from typing import List


class Side(str, Enum):
    BUY = "Buy"
    SELL = "Sell"


class OrderType(str, Enum):
    MARKET = "Market"


@dataclass(frozen=True)
class Bar:
    ts: int # epoch ms
    open: float
    high: float
    low: float
    close: float
    volume: float
    symbol: str


@dataclass(frozen=True)
class Order:
    id: int
    symbol: str
    side: Side
    qty: float
    type: OrderType = OrderType.MARKET


@dataclass(frozen=True)
class Trade:
    # reserved for fill modelling, the simulation loop never emits one
    order_id: int
    price: float
    qty: float
    symbol: str
    ts: int


@dataclass
class Position:
    symbol: str
    qty: float
    avg_price: float
    unrealized_pnl: float = 0.0


@dataclass
class Portfolio:
    cash: float
    positions: List[Position] = field(default_factory=list)
    equity: float = 0.0


@dataclass(frozen=True)
class Metrics:
    pnl: float
    max_drawdown: float
    sharpe: float
    win_rate: float
    trades: int
