from __future__ import annotations

from dataclasses import dataclass, replace
from enum import Enum
from typing import Any, Dict, Tuple

from loguru import logger

from nexow.config import settings
from nexow.domain.errors import ConfigError


class Mode(str, Enum):
    SIMULATE = "simulate"
    BACKTEST = "backtest"
    FORWARDTEST = "forwardtest"

    @classmethod
    def parse(cls, value: str) -> "Mode":
        # unknown names fall back to plain simulation
        try:
            return cls(value.strip().lower())
        except ValueError:
            return cls.SIMULATE


class StrategyKind(str, Enum):
    FOREST = "forest"
    HEURISTIC = "heuristic"


@dataclass(frozen=True)
class EngineConfig:
    symbols: Tuple[str, ...] = ()
    bar_interval_ms: int = 1000
    bar_count: int = 500
    rf_trees: int = 50
    rf_max_depth: int = 6
    train_split: float = 0.7
    mode: Mode = Mode.SIMULATE
    starting_cash: float = 10000.0
    strategy: StrategyKind = StrategyKind.FOREST
    start_price: float = 100.0
    volatility: float = 0.01
    report_sell_quantity: bool = False

    @property
    def symbol(self) -> str:
        """Only the first symbol is simulated; an empty list runs under the placeholder symbol."""
        return self.symbols[0] if self.symbols else settings.DEFAULT_SYMBOL

    @staticmethod
    def from_settings(**overrides: Any) -> "EngineConfig":
        cfg = EngineConfig(
            symbols=(settings.DEFAULT_SYMBOL,),
            bar_interval_ms=settings.BAR_INTERVAL_MS,
            bar_count=settings.LENGTH_BARS,
            rf_trees=settings.RF_TREES,
            rf_max_depth=settings.RF_MAX_DEPTH,
            train_split=settings.TRAIN_SPLIT,
            starting_cash=settings.STARTING_CASH,
            start_price=settings.START_PRICE,
            volatility=settings.VOLATILITY,
        )
        if "symbols" in overrides:
            overrides["symbols"] = tuple(overrides["symbols"])
        return replace(cfg, **overrides)

    @staticmethod
    def from_request(payload: Dict[str, Any]) -> "EngineConfig":
        """
        Maps a start-simulation request body onto a config:
        {symbols, bar_interval_ms, length_bars, rf_trees, rf_max_depth, train_split, mode, starting_cash}
        Missing keys take the defaults from settings. Malformed values raise ConfigError.
        """
        base = EngineConfig.from_settings()
        symbols = payload.get("symbols", base.symbols)
        if not isinstance(symbols, (list, tuple)) or not all(isinstance(s, str) for s in symbols):
            raise ConfigError(f"symbols must be a list of strings, got {symbols!r}")
        try:
            return replace(
                base,
                symbols=tuple(symbols),
                bar_interval_ms=int(payload.get("bar_interval_ms", base.bar_interval_ms)),
                bar_count=int(payload.get("length_bars", base.bar_count)),
                rf_trees=int(payload.get("rf_trees", base.rf_trees)),
                rf_max_depth=int(payload.get("rf_max_depth", base.rf_max_depth)),
                train_split=float(payload.get("train_split", base.train_split)),
                mode=Mode.parse(str(payload.get("mode", "simulate"))),
                starting_cash=float(payload.get("starting_cash", base.starting_cash)),
                strategy=StrategyKind(payload.get("strategy", base.strategy.value)),
            )
        except (TypeError, ValueError) as e:
            raise ConfigError(f"malformed engine request: {e}") from e

    def validate(self) -> "EngineConfig":
        if not 0.0 <= self.train_split <= 1.0:
            raise ConfigError(f"train_split must be within [0, 1], got {self.train_split}")
        if self.starting_cash < 0:
            raise ConfigError(f"starting_cash must be >= 0, got {self.starting_cash}")
        if self.bar_count < 0:
            raise ConfigError(f"bar_count must be >= 0, got {self.bar_count}")
        if self.bar_interval_ms <= 0:
            raise ConfigError(f"bar_interval_ms must be > 0, got {self.bar_interval_ms}")
        if self.rf_trees < 1 or self.rf_max_depth < 1:
            raise ConfigError("rf_trees and rf_max_depth must be >= 1")
        if self.start_price <= 0 or self.volatility < 0:
            raise ConfigError("start_price must be > 0 and volatility >= 0")
        if not self.symbols:
            logger.warning(f"No symbols configured, running under placeholder '{settings.DEFAULT_SYMBOL}'")
        return self
