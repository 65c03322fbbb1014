from typing import Iterable, List, Sequence

import numpy as np
import pandas as pd

from nexow.domain.dto import Side
from nexow.engine.events import BarEvent, EngineEvent, MetricsEvent, OrderEvent

PERIODS_PER_YEAR = 252


def max_drawdown(closes: Sequence[float]) -> float:
    """Largest peak-to-trough fall of a close series, as a fraction of the running peak."""
    path = np.asarray(closes, dtype=float)
    if path.size == 0:
        return 0.0
    peaks = np.maximum.accumulate(path)
    safe = np.where(peaks > 0, peaks, 1.0)
    falls = np.where(peaks > 0, (peaks - path) / safe, 0.0)
    return float(falls.max())


def close_returns(closes: Sequence[float]) -> List[float]:
    path = np.asarray(closes, dtype=float)
    if path.size < 2:
        return []
    return (path[1:] / path[:-1] - 1.0).tolist()


def sharpe_ratio(returns: Sequence[float], rf: float = 0.0, periods: int = PERIODS_PER_YEAR) -> float:
    """Annualised per-bar Sharpe. A zero deviation is taken as 1e-9."""
    r = np.asarray(returns, dtype=float)
    if r.size == 0:
        return 0.0
    std = float(r.std()) or 1e-9
    return float((r.mean() - rf) / std * np.sqrt(periods))


def events_frame(events: Iterable[EngineEvent]) -> pd.DataFrame:
    """One row per tick: the Bar fields joined with the Metrics snapshot that follows it."""
    rows: List[dict] = []
    bar = None
    for e in events:
        if isinstance(e, BarEvent):
            bar = e.bar
        elif isinstance(e, MetricsEvent) and bar is not None:
            m = e.metrics
            rows.append({
                "ts": bar.ts, "close": bar.close,
                "pnl": m.pnl, "drawdown": m.max_drawdown, "win_rate": m.win_rate, "trades": m.trades,
            })
            bar = None
    return pd.DataFrame(rows, columns=["ts", "close", "pnl", "drawdown", "win_rate", "trades"])


def summarize(events: List[EngineEvent]) -> dict:
    df = events_frame(events)
    orders = [e.order for e in events if isinstance(e, OrderEvent)]
    closes = df["close"].tolist()
    rets = close_returns(closes)
    return {
        "bars": len(df),
        "buys": sum(1 for o in orders if o.side is Side.BUY),
        "sells": sum(1 for o in orders if o.side is Side.SELL),
        "pnl": float(df["pnl"].iloc[-1]) if len(df) else 0.0,
        "worst_drawdown": float(df["drawdown"].max()) if len(df) else 0.0,
        "win_rate": float(df["win_rate"].iloc[-1]) if len(df) else 0.0,
        "trades": int(df["trades"].iloc[-1]) if len(df) else 0,
        "price_mdd": max_drawdown(closes),
        "price_sharpe": sharpe_ratio(rets),
    }
