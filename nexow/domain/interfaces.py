from abc import ABC, abstractmethod
from typing import Sequence
from .dto import Bar


class Strategy(ABC):
    """
    Long/flat decision source.
    - train(bars): fit on historical bars; raises TrainingFailed on a failed fit
    - decide(bar): True = want long, False = want flat. Must work before and after train().
    """

    @abstractmethod
    def train(self, bars: Sequence[Bar]) -> None: ...

    @abstractmethod
    def decide(self, bar: Bar) -> bool: ...

    @property
    def is_trained(self) -> bool:
        return False
