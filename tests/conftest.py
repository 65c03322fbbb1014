# tests/conftest.py
from __future__ import annotations

import threading
from typing import List, Sequence

import pytest

from nexow.domain.dto import Bar
from nexow.domain.interfaces import Strategy


def make_bar(close: float, open_: float = None, ts: int = 0, symbol: str = "TEST") -> Bar:
    open_ = close if open_ is None else open_
    return Bar(
        ts=ts,
        open=open_,
        high=max(open_, close) * 1.01,
        low=min(open_, close) * 0.99,
        close=close,
        volume=5000.0,
        symbol=symbol,
    )


class ScriptedStrategy(Strategy):
    """Replays a fixed list of decisions, then stays flat."""

    def __init__(self, decisions: Sequence[bool]):
        self.decisions = list(decisions)
        self.calls = 0
        self.trained_on = None

    def train(self, bars):
        self.trained_on = len(bars)

    def decide(self, bar: Bar) -> bool:
        i = self.calls
        self.calls += 1
        return self.decisions[i] if i < len(self.decisions) else False


class GatedStrategy(Strategy):
    """
    Waits on `go` before the first decision (or already in train() with gate_train=True),
    and calls `on_call(n)` after deciding bar n. Lets a test line up a Stop against an exact bar.
    """

    def __init__(self, on_call=None, gate_train=False):
        self.go = threading.Event()
        self.calls = 0
        self.on_call = on_call
        self.gate_train = gate_train

    def train(self, bars):
        if self.gate_train:
            self.go.wait(5.0)

    def decide(self, bar: Bar) -> bool:
        self.go.wait(5.0)
        self.calls += 1
        if self.on_call is not None:
            self.on_call(self.calls)
        return bar.close > bar.open


@pytest.fixture
def rising_bars() -> List[Bar]:
    return [make_bar(100.0 + i, open_=99.5 + i, ts=i * 1000) for i in range(20)]
