from nexow.domain.interfaces import Strategy
from nexow.domain.models import StrategyKind
from nexow.strategies.forest import RandomForestStrategy
from nexow.strategies.heuristic import HeuristicStrategy


def build_strategy(kind: StrategyKind, trees: int = 50, max_depth: int = 6) -> Strategy:
    if kind is StrategyKind.FOREST:
        return RandomForestStrategy(trees=trees, max_depth=max_depth)
    if kind is StrategyKind.HEURISTIC:
        return HeuristicStrategy()
    raise ValueError(f"Unknown strategy kind: {kind}")
