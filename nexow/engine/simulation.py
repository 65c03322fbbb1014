# nexow/engine/simulation.py
from __future__ import annotations

import itertools
from typing import List, Optional

from nexow.config import settings
from nexow.domain.dto import Bar, Metrics, Order, OrderType, Side
from nexow.domain.interfaces import Strategy
from nexow.engine.events import BarEvent, EngineEvent, MetricsEvent, OrderEvent


class Simulation:
    """
    Single-symbol, single-position portfolio replayed bar by bar.

    Per bar: ask the strategy, flat -> long spends `position_fraction` of cash at the close,
    long -> flat liquidates everything at the close, then marks to market and emits
    [Order]? Bar Metrics.
    """

    def __init__(
        self,
        symbol: str,
        strategy: Strategy,
        starting_cash: float,
        position_fraction: Optional[float] = None,
        report_sell_quantity: bool = False,
    ):
        self.symbol = symbol
        self.strategy = strategy
        self.position_fraction = settings.POSITION_FRACTION if position_fraction is None else position_fraction
        self.report_sell_quantity = report_sell_quantity

        self.cash = starting_cash
        self.quantity = 0.0
        self.entry_price = 0.0
        self.wins = 0
        self.losses = 0
        self.pnl = 0.0
        self.peak_equity = starting_cash
        self.equity = starting_cash
        self.drawdown = 0.0
        self.bars_processed = 0
        self._order_ids = itertools.count(1)

    @property
    def trade_count(self) -> int:
        return self.wins + self.losses

    @property
    def win_rate(self) -> float:
        return self.wins / self.trade_count if self.trade_count > 0 else 0.0

    def metrics(self) -> Metrics:
        return Metrics(
            pnl=self.pnl,
            max_drawdown=self.drawdown,
            sharpe=0.0,  # no returns series yet
            win_rate=self.win_rate,
            trades=self.trade_count,
        )

    def _order(self, side: Side, qty: float) -> Order:
        return Order(id=next(self._order_ids), symbol=self.symbol, side=side, qty=qty, type=OrderType.MARKET)

    def step(self, bar: Bar) -> List[EngineEvent]:
        events: List[EngineEvent] = []
        long = self.strategy.decide(bar)

        if long and self.quantity == 0.0:
            spend = self.cash * self.position_fraction
            self.quantity = spend / bar.close
            self.entry_price = bar.close
            self.cash -= spend
            events.append(OrderEvent(self._order(Side.BUY, self.quantity)))
        elif not long and self.quantity > 0.0:
            sold = self.quantity
            proceeds = sold * bar.close
            trade_pnl = proceeds - sold * self.entry_price
            self.pnl += trade_pnl
            if trade_pnl >= 0.0:
                self.wins += 1
            else:
                self.losses += 1
            self.cash += proceeds
            self.quantity = 0.0
            # sell quantity is reported as 0.0 unless asked otherwise
            events.append(OrderEvent(self._order(Side.SELL, sold if self.report_sell_quantity else 0.0)))

        self.equity = self.cash + self.quantity * bar.close
        self.peak_equity = max(self.peak_equity, self.equity)
        self.drawdown = (self.peak_equity - self.equity) / max(self.peak_equity, 1.0)
        self.bars_processed += 1

        events.append(BarEvent(bar))
        events.append(MetricsEvent(self.metrics()))
        return events
