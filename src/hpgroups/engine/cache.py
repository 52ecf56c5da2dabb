"""
AggregationCache - reuses aggregation results across polling requests.

Entries are keyed by the content fingerprint of the snapshot and the aggregation
parameters, so a changed snapshot never sees results computed for an older one,
even when both carry the same version label.
"""

from __future__ import annotations

import logging
import threading
from collections import OrderedDict
from collections.abc import Mapping
from types import MappingProxyType

from hpgroups.models import AggregationType, MetricName

from .aggregator import GroupMetrics

logger = logging.getLogger(__name__)

CacheKey = tuple[str, AggregationType, MetricName | None]


class AggregationCache:
    """Bounded LRU cache of per-group aggregation results.

    Stored results are read-only mappings, so concurrent queries can share
    them. A maxsize of 0 disables caching.
    """

    def __init__(self, maxsize: int = 32) -> None:
        self.maxsize = maxsize
        self._entries: OrderedDict[CacheKey, Mapping[str, GroupMetrics]] = OrderedDict()
        self._lock = threading.Lock()

    @staticmethod
    def make_key(fingerprint: str, aggregation_type: AggregationType, aggregation_metric: MetricName | None) -> CacheKey:
        # The aggregation metric does not affect AVG results
        if aggregation_type == AggregationType.AVG:
            aggregation_metric = None
        return (fingerprint, aggregation_type, aggregation_metric)

    def get(self, key: CacheKey) -> Mapping[str, GroupMetrics] | None:
        with self._lock:
            entry = self._entries.get(key)
            if entry is not None:
                self._entries.move_to_end(key)
            return entry

    def put(self, key: CacheKey, value: Mapping[str, GroupMetrics]) -> Mapping[str, GroupMetrics]:
        """Store a result and return its read-only form."""
        frozen = MappingProxyType({name: MappingProxyType(dict(metrics)) for name, metrics in value.items()})
        if self.maxsize <= 0:
            return frozen

        with self._lock:
            self._entries[key] = frozen
            self._entries.move_to_end(key)
            while len(self._entries) > self.maxsize:
                evicted, _ = self._entries.popitem(last=False)
                logger.debug(f"Evicted aggregation cache entry for snapshot {evicted[0][:12]}")
        return frozen

    def clear(self) -> None:
        with self._lock:
            self._entries.clear()

    def __len__(self) -> int:
        with self._lock:
            return len(self._entries)

    def __contains__(self, key: object) -> bool:
        with self._lock:
            return key in self._entries
