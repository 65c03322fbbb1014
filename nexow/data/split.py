import math
from typing import Sequence, Tuple, TypeVar

T = TypeVar("T")


def split_index(n: int, split: float) -> int:
    # half-up rounding, clamped to [0, n]
    idx = math.floor(n * split + 0.5)
    return max(0, min(idx, n))


def train_test_split(bars: Sequence[T], split: float) -> Tuple[Sequence[T], Sequence[T]]:
    """Temporal split, no shuffling: train is always the leading segment."""
    idx = split_index(len(bars), split)
    return bars[:idx], bars[idx:]
