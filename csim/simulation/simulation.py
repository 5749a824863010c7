"""Simulation run context

Builds a fresh Cache and TraceReplayer from a SimulationConfig, feeds the
trace through them and hands the final counts to the reporters.
"""
import logging
from typing import Callable, List

from csim.core.cache import Cache, Outcome
from csim.core.simulator import TraceReplayer
from csim.core.trace import TraceRecord, UnreadableTraceError, read_trace
from csim.data.stats_export import (
    Exporter,
    Statistics,
    export_chart,
    format_verbose,
    print_summary,
)

logger = logging.getLogger(__name__)


class Simulation:
    def __init__(self, config, out: Callable[[str], None] = print):
        self.config = config
        self.out = out
        self.cache = Cache(config.geometry)
        self.replayer = TraceReplayer(self.cache)
        self.hit_rate_history: List[float] = []
        self.eviction_points: List[int] = []

    @property
    def _track_history(self) -> bool:
        return bool(self.config.chart_path or self.config.json_path)

    def _on_record(self, record: TraceRecord, outcomes: List[Outcome]):
        if self.config.verbose:
            self.out(format_verbose(record, outcomes))
        if self._track_history:
            if any(o.evicted for o in outcomes):
                self.eviction_points.append(len(self.hit_rate_history))
            self.hit_rate_history.append(self.replayer.stats.hit_rate)

    def run(self) -> Statistics:
        g = self.config.geometry
        logger.debug("cache: %d sets x %d lines, %d-byte blocks",
                     g.num_sets, g.associativity, g.block_size)
        try:
            records = read_trace(self.config.trace_path)
            stats = self.replayer.replay(records, callback=self._on_record)
        except UnreadableTraceError as e:
            logger.error("%s: %s", e.filename, e.strerror)
            raise
        self.report(stats)
        return stats

    def report(self, stats: Statistics):
        print_summary(stats, results_path=self.config.results_path)
        if self.config.csv_path:
            Exporter.export_stats_csv(self.config.csv_path, stats)
        if self.config.json_path:
            Exporter.export_stats_json(self.config.json_path, stats,
                                      self.hit_rate_history, self.eviction_points)
        if self.config.chart_path:
            export_chart(self.hit_rate_history, self.config.chart_path, self.eviction_points)
