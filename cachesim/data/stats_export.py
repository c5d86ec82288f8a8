"""Statistics and exporter.
"""
import csv
import json
import logging
import time
from typing import Dict, List

LOGGER = logging.getLogger(__name__)


class Statistics:
    def __init__(self):
        self.reset()

    def reset(self):
        # counters start from zero
        self.accesses = 0
        self.hits = 0
        self.misses = 0
        self.memory_reads = 0
        self.evictions = 0
        self.hit_rate_history: List[float] = []
        self.start_time = time.time()

    def record_access(self, hit: bool, evicted: bool = False):
        # called once per completed cache access
        self.accesses += 1
        if hit:
            self.hits += 1
        else:
            self.misses += 1
            self.memory_reads += 1
            if evicted:
                self.evictions += 1
        self.hit_rate_history.append(self.hit_rate)

    @property
    def hit_rate(self):
        return (self.hits / self.accesses) if self.accesses else 0.0

    @property
    def miss_rate(self):
        return (self.misses / self.accesses) if self.accesses else 0.0

    def as_dict(self) -> Dict[str, float]:
        return {
            'accesses': self.accesses,
            'hits': self.hits,
            'misses': self.misses,
            'hit_rate': self.hit_rate,
            'miss_rate': self.miss_rate,
            'memory_reads': self.memory_reads,
            'evictions': self.evictions,
        }


class Exporter:
    @staticmethod
    def export_stats_csv(path: str, stats: Statistics) -> str:
        row = stats.as_dict()
        with open(path, 'w', newline='') as f:
            writer = csv.writer(f)
            writer.writerow(list(row))
            writer.writerow(list(row.values()))
        LOGGER.info("wrote stats csv to %s", path)
        return path


def export_chart_json(hit_rate_history: List[float], stats: Dict[str, float], fpath: str) -> str:
    """Export hit-rate history and stats to a JSON file. Returns the saved path."""
    data = {
        'hit_rate_history': list(hit_rate_history),
        'stats': stats
    }
    with open(fpath, 'w', encoding='utf-8') as fh:
        json.dump(data, fh, indent=2)
    LOGGER.info("wrote chart json to %s", fpath)
    return fpath


def export_chart_pdf(hit_rate_history: List[float], fpath: str) -> str:
    """Render the hit-rate history to a PDF using matplotlib and save it.
    Returns the saved file path.
    """
    import matplotlib
    matplotlib.use('Agg')
    import matplotlib.pyplot as plt

    data = list(hit_rate_history) or [0]
    fig, ax = plt.subplots(figsize=(6, 2))
    ax.plot(range(len(data)), data, color='#FFA500', linewidth=2)
    ax.fill_between(range(len(data)), data, color='#FFA500', alpha=0.1)
    ax.set_ylim(0, 1)
    ax.set_xlabel('Access')
    ax.set_ylabel('Hit rate')
    ax.grid(False)
    fig.tight_layout()
    fig.savefig(fpath, format='pdf', dpi=150)
    plt.close(fig)
    LOGGER.info("wrote hit-rate chart to %s", fpath)
    return fpath
