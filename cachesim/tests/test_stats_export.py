"""Tests for the statistics counters and the exporters."""
import csv
import json

import pytest
from cachesim.core.cache import Cache
from cachesim.core.memory import RAM
from cachesim.data.stats_export import Exporter, Statistics, export_chart_json, export_chart_pdf


def _run_small_trace():
    ram = RAM.from_bytes(bytes(range(32)))
    c = Cache(ram, block_count=2, bytes_per_block=4)
    for a in (0, 1, 2, 8, 9, 0, 16):
        c.load(a)
    return c.stats


def test_statistics_start_empty():
    s = Statistics()
    assert s.accesses == 0
    assert s.hit_rate == 0.0
    assert s.miss_rate == 0.0
    assert s.hit_rate_history == []


def test_record_access_counts():
    s = Statistics()
    s.record_access(False)
    s.record_access(True)
    s.record_access(False, evicted=True)
    # evicted is meaningless on a hit
    s.record_access(True, evicted=True)
    assert s.as_dict() == {
        'accesses': 4,
        'hits': 2,
        'misses': 2,
        'hit_rate': 0.5,
        'miss_rate': 0.5,
        'memory_reads': 2,
        'evictions': 1,
    }


def test_reset_clears_counters():
    s = _run_small_trace()
    assert s.accesses == 7
    s.reset()
    assert s.accesses == s.hits == s.misses == s.memory_reads == s.evictions == 0
    assert s.hit_rate_history == []


def test_export_stats_csv(tmp_path):
    stats = _run_small_trace()
    path = tmp_path / 'stats.csv'
    assert Exporter.export_stats_csv(str(path), stats) == str(path)
    with open(path, newline='') as f:
        rows = list(csv.reader(f))
    assert rows[0] == ['accesses', 'hits', 'misses', 'hit_rate', 'miss_rate', 'memory_reads', 'evictions']
    values = dict(zip(rows[0], rows[1]))
    assert values['accesses'] == '7'
    assert values['hits'] == '3'
    assert values['misses'] == '4'
    assert values['evictions'] == '3'


def test_export_chart_json(tmp_path):
    stats = _run_small_trace()
    path = tmp_path / 'chart.json'
    export_chart_json(stats.hit_rate_history, stats.as_dict(), str(path))
    data = json.loads(path.read_text(encoding='utf-8'))
    assert len(data['hit_rate_history']) == 7
    assert data['hit_rate_history'][-1] == pytest.approx(3 / 7)
    assert data['stats']['memory_reads'] == 4


def test_export_chart_pdf(tmp_path):
    pytest.importorskip('matplotlib')
    stats = _run_small_trace()
    path = tmp_path / 'chart.pdf'
    assert export_chart_pdf(stats.hit_rate_history, str(path)) == str(path)
    assert path.read_bytes().startswith(b'%PDF')


def test_export_chart_pdf_empty_history(tmp_path):
    pytest.importorskip('matplotlib')
    path = tmp_path / 'empty.pdf'
    export_chart_pdf([], str(path))
    assert path.exists()
