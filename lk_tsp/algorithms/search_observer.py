"""
Event sinks for the Lin-Kernighan search.

The search reports its progress through an observer instead of printing,
so callers decide whether events are logged, recorded or ignored.
"""

import logging
from dataclasses import dataclass, field
from typing import Any, Dict, List, Optional

from lk_tsp.models.alternating_walk import AlternatingWalk
from lk_tsp.models.tour import Tour

logger = logging.getLogger(__name__)


class SearchObserver:
    """Base observer; every hook is a no-op."""

    def on_search_start(self, tour: Tour, length: int):
        pass

    def on_new_best_walk(self, walk: AlternatingWalk, gain: int, previous_gain: int):
        pass

    def on_exchange(self, walk: AlternatingWalk, gain: int, previous_length: int,
                    new_length: int, tour: Tour):
        pass

    def on_local_optimum(self, tour: Tour, length: int):
        pass

    def on_stopped(self, tour: Tour, length: int):
        pass

    def on_search_finished(self, inner_iterations: int):
        pass


class LoggingSearchObserver(SearchObserver):
    """Writes search events to the standard logging system."""

    def __init__(self, log: Optional[logging.Logger] = None):
        self.logger = log or logger

    def on_search_start(self, tour: Tour, length: int):
        self.logger.info(f"Lin-Kernighan search started on a tour of length {length}")

    def on_new_best_walk(self, walk: AlternatingWalk, gain: int, previous_gain: int):
        self.logger.debug(f"New highest gain: {gain}, value before: {previous_gain} ({walk})")

    def on_exchange(self, walk: AlternatingWalk, gain: int, previous_length: int,
                    new_length: int, tour: Tour):
        self.logger.info(f"Exchange done: {walk} with gain: {gain}")
        self.logger.info(f"   previous length: {previous_length}, new length: {new_length}")
        self.logger.debug(f"   removed edges: {walk.removed_edges()}, added edges: {walk.added_edges()}")
        self.logger.debug(f"   new tour: {tour}")

    def on_local_optimum(self, tour: Tour, length: int):
        self.logger.info(f"No improving exchange left, local optimum length: {length}")

    def on_stopped(self, tour: Tour, length: int):
        self.logger.warning(f"Search stopped before reaching a local optimum, length: {length}")

    def on_search_finished(self, inner_iterations: int):
        self.logger.debug(f"Search finished after {inner_iterations} inner iterations")


@dataclass
class ExchangeRecord:
    """One committed exchange."""
    exchange: int
    walk: List[int]
    gain: int
    previous_length: int
    new_length: int

    def to_dict(self) -> Dict[str, Any]:
        return {
            'exchange': self.exchange,
            'walk': " ".join(str(v) for v in self.walk),
            'walk_length': len(self.walk),
            'gain': self.gain,
            'previous_length': self.previous_length,
            'new_length': self.new_length,
        }


@dataclass
class RecordingSearchObserver(SearchObserver):
    """Keeps every event in memory; used for statistics, exports and tests."""
    start_length: Optional[int] = None
    final_length: Optional[int] = None
    best_walk_updates: List[Dict[str, Any]] = field(default_factory=list)
    exchanges: List[ExchangeRecord] = field(default_factory=list)
    reached_local_optimum: bool = False
    stopped: bool = False
    inner_iterations: int = 0

    def on_search_start(self, tour: Tour, length: int):
        self.start_length = length

    def on_new_best_walk(self, walk: AlternatingWalk, gain: int, previous_gain: int):
        self.best_walk_updates.append({'walk': list(walk), 'gain': gain, 'previous_gain': previous_gain})

    def on_exchange(self, walk: AlternatingWalk, gain: int, previous_length: int,
                    new_length: int, tour: Tour):
        self.exchanges.append(ExchangeRecord(
            exchange=len(self.exchanges) + 1,
            walk=list(walk),
            gain=gain,
            previous_length=previous_length,
            new_length=new_length,
        ))

    def on_local_optimum(self, tour: Tour, length: int):
        self.reached_local_optimum = True
        self.final_length = length

    def on_stopped(self, tour: Tour, length: int):
        self.stopped = True
        self.final_length = length

    def on_search_finished(self, inner_iterations: int):
        self.inner_iterations = inner_iterations

    @property
    def exchange_count(self) -> int:
        return len(self.exchanges)

    @property
    def total_gain(self) -> int:
        return sum(record.gain for record in self.exchanges)

    def length_history(self) -> List[int]:
        """Tour length before the first exchange and after each one."""
        if self.start_length is None:
            return []
        return [self.start_length] + [record.new_length for record in self.exchanges]


class CompositeSearchObserver(SearchObserver):
    """Forwards every event to several observers in order."""

    def __init__(self, observers: List[SearchObserver]):
        self.observers = list(observers)

    def on_search_start(self, tour, length):
        for observer in self.observers:
            observer.on_search_start(tour, length)

    def on_new_best_walk(self, walk, gain, previous_gain):
        for observer in self.observers:
            observer.on_new_best_walk(walk, gain, previous_gain)

    def on_exchange(self, walk, gain, previous_length, new_length, tour):
        for observer in self.observers:
            observer.on_exchange(walk, gain, previous_length, new_length, tour)

    def on_local_optimum(self, tour, length):
        for observer in self.observers:
            observer.on_local_optimum(tour, length)

    def on_stopped(self, tour, length):
        for observer in self.observers:
            observer.on_stopped(tour, length)

    def on_search_finished(self, inner_iterations):
        for observer in self.observers:
            observer.on_search_finished(inner_iterations)
