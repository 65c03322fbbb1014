# nexow/strategies/forest.py
from __future__ import annotations

from typing import Optional, Sequence, Tuple

import numpy as np
from loguru import logger
from sklearn.ensemble import RandomForestClassifier

from nexow.config import settings
from nexow.domain.dto import Bar
from nexow.domain.errors import TrainingFailed
from nexow.domain.interfaces import Strategy
from nexow.strategies.heuristic import HeuristicStrategy


def window_features(bars: Sequence[Bar]) -> Tuple[np.ndarray, np.ndarray]:
    """
    One example per consecutive 3-bar window (w0, w1, w2):
    - X = [return(w0 -> w1), (w2.high - w2.low) / w2.close, w2.close - w1.close]
    - y = 1 if return(w1 -> w2) > 0 else 0
    """
    close = np.array([b.close for b in bars], dtype=float)
    high = np.array([b.high for b in bars], dtype=float)
    low = np.array([b.low for b in bars], dtype=float)
    if len(close) < 3:
        return np.empty((0, 3)), np.empty(0, dtype=int)

    r1 = close[1:-1] / close[:-2] - 1.0
    r2 = close[2:] / close[1:-1] - 1.0
    rng = (high[2:] - low[2:]) / close[2:]
    mom = close[2:] - close[1:-1]

    X = np.column_stack([r1, rng, mom])
    y = (r2 > 0).astype(int)
    return X, y


class RandomForestStrategy(Strategy):
    """
    Random forest over a fixed 3-bar feature window.

    decide() on a trained model uses the single incoming bar for every window
    position: the return feature is 0.0 and momentum is close - open. Training
    uses three distinct bars, so live and training features are not the same
    distribution. With track_previous=True the previous decided bar is kept and
    the live vector is built from (previous, current) instead.
    Untrained (too few bars, or failed fit) -> close > open.
    """

    def __init__(
        self,
        trees: int = 50,
        max_depth: int = 6,
        min_bars: Optional[int] = None,
        track_previous: bool = False,
        random_state: Optional[int] = None,
    ):
        self.trees = trees
        self.max_depth = max_depth
        self.min_bars = settings.MIN_TRAIN_BARS if min_bars is None else min_bars
        self.track_previous = track_previous
        self.random_state = random_state
        self._model: Optional[RandomForestClassifier] = None
        self._fallback = HeuristicStrategy()
        self._prev: Optional[Bar] = None

    @property
    def is_trained(self) -> bool:
        return self._model is not None

    def train(self, bars: Sequence[Bar]) -> None:
        if len(bars) < self.min_bars:
            # a model from an earlier train() call does not survive a too-short history
            self._model = None
            logger.info(f"RF: {len(bars)} bars < {self.min_bars}, staying on heuristic")
            return

        X, y = window_features(bars)
        model = RandomForestClassifier(
            n_estimators=self.trees,
            max_depth=self.max_depth,
            random_state=self.random_state,
        )
        try:
            model.fit(X, y)
        except ValueError as e:
            self._model = None
            raise TrainingFailed(str(e)) from e

        self._model = model
        logger.info(f"RF fitted on {len(y)} windows (trees={self.trees}, max_depth={self.max_depth})")

    def features(self, bar: Bar) -> np.ndarray:
        prev = self._prev if self.track_previous else None
        if prev is None:
            row = [0.0, (bar.high - bar.low) / bar.close, bar.close - bar.open]
        else:
            row = [bar.close / prev.close - 1.0, (bar.high - bar.low) / bar.close, bar.close - prev.close]
        return np.array([row], dtype=float)

    def decide(self, bar: Bar) -> bool:
        if self._model is None:
            return self._fallback.decide(bar)

        X = self.features(bar)
        if self.track_previous:
            self._prev = bar
        try:
            pred = self._model.predict(X)
        except ValueError as e:
            logger.warning(f"RF predict failed ({e}), staying flat")
            return False
        return int(pred[0]) == 1
