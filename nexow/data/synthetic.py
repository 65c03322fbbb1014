# nexow/data/synthetic.py
from __future__ import annotations

import time
from typing import List, Optional

import numpy as np
import pandas as pd

from nexow.domain.dto import Bar

PRICE_FLOOR = 0.0001
VOLUME_RANGE = (1000.0, 10000.0)


def generate_synthetic_bars(
    symbol: str,
    start_price: float,
    interval_ms: int,
    n: int,
    vol: float,
    start_ts: Optional[int] = None,
    seed: Optional[int] = None,
) -> List[Bar]:
    """
    Geometric random walk:
    - r ~ U[-vol, vol], close = max(price * (1 + r), PRICE_FLOOR), open = previous close
    - high/low widen the body by U[0, vol] on each side
    - volume ~ U[1000, 10000]
    Timestamps start now (epoch ms) unless start_ts is given and advance by interval_ms.
    Without a seed every call draws a fresh path.
    """
    rng = np.random.default_rng(seed)
    width = abs(vol)
    ts = int(time.time() * 1000) if start_ts is None else start_ts
    price = start_price
    bars: List[Bar] = []

    for _ in range(n):
        ret = rng.uniform(-width, width)
        open_ = price
        price = max(price * (1.0 + ret), PRICE_FLOOR)
        close = price
        high = max(open_, close) * (1.0 + rng.uniform(0.0, width))
        low = min(open_, close) * (1.0 - rng.uniform(0.0, width))
        volume = rng.uniform(*VOLUME_RANGE)

        bars.append(
            Bar(
                ts=ts,
                open=float(open_),
                high=float(high),
                low=float(low),
                close=float(close),
                volume=float(volume),
                symbol=symbol,
            )
        )
        ts += interval_ms

    return bars


def bars_to_frame(bars: List[Bar]) -> pd.DataFrame:
    """Columns: timestamp (UTC), open, high, low, close, volume, symbol."""
    df = pd.DataFrame(
        [(b.ts, b.open, b.high, b.low, b.close, b.volume, b.symbol) for b in bars],
        columns=["ts", "open", "high", "low", "close", "volume", "symbol"],
    )
    df.insert(0, "timestamp", pd.to_datetime(df.pop("ts"), unit="ms", utc=True))
    return df
