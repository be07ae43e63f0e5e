"""
Ordered extraction strategies

A strategy is a named pure function `(text) -> Optional[value]`. A chain
evaluates its strategies in priority order and stops at the first result.
"""
from dataclasses import dataclass
from typing import Callable, Generic, Optional, Sequence, Tuple, TypeVar

T = TypeVar("T")


@dataclass(frozen=True)
class Strategy(Generic[T]):
    """One named heuristic"""
    name: str
    func: Callable[[str], Optional[T]]

    def __call__(self, text: str) -> Optional[T]:
        return self.func(text)


class StrategyChain(Generic[T]):
    """First-success evaluation over an ordered list of strategies"""

    def __init__(self, strategies: Sequence[Strategy[T]]):
        self.strategies: Tuple[Strategy[T], ...] = tuple(strategies)

    @property
    def names(self) -> Tuple[str, ...]:
        return tuple(s.name for s in self.strategies)

    def run(self, text: str) -> Tuple[Optional[str], Optional[T]]:
        """Return (strategy name, value) of the first hit, or (None, None)."""
        for strategy in self.strategies:
            value = strategy(text)
            if value is not None:
                return strategy.name, value
        return None, None

    def first(self, text: str) -> Optional[T]:
        return self.run(text)[1]
