from typing import Sequence
from nexow.domain.interfaces import Strategy
from nexow.domain.dto import Bar


class HeuristicStrategy(Strategy):
    """Long on an up bar (close > open), flat otherwise. Nothing to train."""

    def train(self, bars: Sequence[Bar]) -> None:
        return None

    def decide(self, bar: Bar) -> bool:
        return bar.close > bar.open
