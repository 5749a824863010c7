"""Statistics, summary reporting and exporters.
"""
import csv
import json
from typing import Dict, List, Optional, Sequence

from ..core.cache import Outcome
from ..core.trace import TraceRecord

RESULTS_FILE = ".csim_results"


class Statistics:
    def __init__(self):
        self.reset()

    def reset(self):
        # counters start from zero and only ever grow
        self.hits = 0
        self.misses = 0
        self.evictions = 0

    def record(self, outcome: Outcome):
        # call this for every cache access
        if outcome.is_hit:
            self.hits += 1
        else:
            self.misses += 1
            if outcome.evicted:
                self.evictions += 1

    @property
    def accesses(self):
        return self.hits + self.misses

    @property
    def hit_rate(self):
        return (self.hits / self.accesses) if self.accesses else 0.0

    @property
    def miss_rate(self):
        return (self.misses / self.accesses) if self.accesses else 0.0

    def as_dict(self) -> Dict[str, float]:
        return {
            'hits': self.hits,
            'misses': self.misses,
            'evictions': self.evictions,
            'accesses': self.accesses,
            'hit_rate': self.hit_rate,
            'miss_rate': self.miss_rate,
        }

    def __repr__(self):
        return f"Statistics(hits={self.hits}, misses={self.misses}, evictions={self.evictions})"


def format_summary(stats: Statistics) -> str:
    return f"hits:{stats.hits} misses:{stats.misses} evictions:{stats.evictions}"


def format_verbose(record: TraceRecord, outcomes: Sequence[Outcome]) -> str:
    """One verbose line per record, e.g. ``M 20,1 miss eviction hit``."""
    return ' '.join([record.text] + [o.value for o in outcomes])


def print_summary(stats: Statistics, results_path: Optional[str] = RESULTS_FILE) -> str:
    """Print the summary line and store the raw counts in `results_path`."""
    summary = format_summary(stats)
    print(summary)
    if results_path:
        with open(results_path, 'w', encoding='utf-8') as fh:
            fh.write(f"{stats.hits} {stats.misses} {stats.evictions}\n")
    return summary


def export_chart_json(hit_rate_history: List[float], stats: Statistics, fpath: str,
                      eviction_points: Optional[Sequence[int]] = None) -> str:
    """Export hit-rate history and stats to a JSON file. Returns the path."""
    data = {
        'hit_rate_history': list(hit_rate_history),
        'eviction_points': list(eviction_points or []),
        'stats': stats.as_dict(),
    }
    with open(fpath, 'w', encoding='utf-8') as fh:
        json.dump(data, fh, indent=2)
    return fpath


def export_chart(hit_rate_history: List[float], fpath: str,
                 eviction_points: Optional[Sequence[int]] = None) -> str:
    """Plot the cumulative hit rate per trace record and save it to `fpath`.

    Records listed in `eviction_points` are marked on the curve. The image
    format follows the file extension (pdf, png, svg...).
    """
    from matplotlib.backends.backend_agg import FigureCanvasAgg
    from matplotlib.figure import Figure

    rates = list(hit_rate_history) or [0.0]
    records = range(1, len(rates) + 1)
    fig = Figure(figsize=(7, 2.5))
    FigureCanvasAgg(fig)
    ax = fig.add_subplot(1, 1, 1)
    ax.step(records, rates, where='post', color='#1f77b4', linewidth=1.5, label='hit rate')
    points = [i for i in (eviction_points or []) if 0 <= i < len(rates)]
    if points:
        ax.scatter([i + 1 for i in points], [rates[i] for i in points],
                   marker='x', s=18, color='#d62728', zorder=3, label='eviction')
    ax.set_xlim(1, max(len(rates), 2))
    ax.set_ylim(-0.02, 1.02)
    ax.set_xlabel('Trace record')
    ax.set_ylabel('Cumulative hit rate')
    ax.legend(loc='lower right', fontsize='small')
    fig.tight_layout()
    fig.savefig(fpath, dpi=120)
    return fpath


class Exporter:
    @staticmethod
    def export_stats_csv(path: str, stats: Statistics):
        with open(path, 'w', newline='') as f:
            writer = csv.writer(f)
            writer.writerow(['hits', 'misses', 'evictions', 'accesses', 'hit_rate', 'miss_rate'])
            writer.writerow([
                stats.hits, stats.misses, stats.evictions,
                stats.accesses, stats.hit_rate, stats.miss_rate,
            ])

    @staticmethod
    def export_stats_json(path: str, stats: Statistics, hit_rate_history: Optional[List[float]] = None,
                          eviction_points: Optional[Sequence[int]] = None):
        return export_chart_json(hit_rate_history or [], stats, path, eviction_points)
