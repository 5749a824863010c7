"""TraceReplayer coordinates cache accesses and statistics.
Feeds decoded trace records into the core Cache and updates the counters.
"""
from typing import Callable, Iterable, List, Optional

from .cache import Cache, Outcome
from .trace import OperationKind, TraceRecord
from ..data.stats_export import Statistics

# number of cache accesses each operation performs
_ACCESS_COUNT = {
    OperationKind.LOAD: 1,
    OperationKind.STORE: 1,
    # a modify is a load followed by a store to the same address
    OperationKind.MODIFY: 2,
    OperationKind.OTHER: 0,
}


class TraceReplayer:
    def __init__(self, cache: Cache, stats: Optional[Statistics] = None):
        self.cache = cache
        self.stats = stats or Statistics()

    def reset(self):
        self.stats.reset()
        self.cache.reset()

    def step(self, record: TraceRecord) -> List[Outcome]:
        """Apply one record and return the outcome of each access it made."""
        outcomes = []
        for _ in range(_ACCESS_COUNT[record.op]):
            outcome = self.cache.access(record.address)
            self.stats.record(outcome)
            outcomes.append(outcome)
        return outcomes

    def replay(
        self,
        records: Iterable[TraceRecord],
        callback: Optional[Callable[[TraceRecord, List[Outcome]], None]] = None,
    ) -> Statistics:
        for record in records:
            outcomes = self.step(record)
            if callback and outcomes:
                callback(record, outcomes)
        return self.stats
