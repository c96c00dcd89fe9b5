from __future__ import annotations

import math
from itertools import combinations

import pytest

from simnet.config import AppConfig, SizeRange, load_config
from simnet.graph import MetricDomain, build_graph, normalize_metrics, scale_linear


@pytest.fixture(name="config")
def fixture_config() -> AppConfig:
    return load_config()


def test_node_size_is_monotonic_in_degree(config: AppConfig) -> None:
    rows = [
        ("a", "b", "1"),
        ("a", "c", "1"),
        ("a", "d", "1"),
        ("a", "e", "1"),
        ("b", "c", "1"),
        ("d", "f", "1"),
    ]
    graph = build_graph(rows, config.ingestion)
    metrics = normalize_metrics(graph, config.sizing)
    degrees = graph.degrees()
    for first, second in combinations(graph.nodes(), 2):
        if degrees[first] <= degrees[second]:
            assert metrics.node_size(first) <= metrics.node_size(second)
        else:
            assert metrics.node_size(first) >= metrics.node_size(second)
    assert metrics.node_size("a") == config.sizing.node.max
    assert metrics.node_size("e") == config.sizing.node.min
    assert metrics.node_size("f") == config.sizing.node.min


def test_path_graph_sizes(config: AppConfig) -> None:
    graph = build_graph([("a", "b", "1"), ("b", "c", "1")], config.ingestion)
    metrics = normalize_metrics(graph, config.sizing)
    assert metrics.node_sizes == {"a": 3.0, "b": 9.0, "c": 3.0}


def test_equal_degrees_use_fallback_size(config: AppConfig) -> None:
    graph = build_graph([("a", "b", "1"), ("b", "c", "1"), ("c", "a", "1")], config.ingestion)
    metrics = normalize_metrics(graph, config.sizing)
    sizes = set(metrics.node_sizes.values())
    assert sizes == {config.sizing.node.fallback}
    assert all(math.isfinite(size) for size in sizes)
    assert metrics.degree_domain.degenerate


def test_edge_sizes_follow_weights(config: AppConfig) -> None:
    graph = build_graph([("a", "b", "1"), ("b", "c", "2"), ("c", "d", "3")], config.ingestion)
    metrics = normalize_metrics(graph, config.sizing)
    assert metrics.edge_size("a", "b") == pytest.approx(1.0)
    assert metrics.edge_size("c", "b") == pytest.approx(2.0)
    assert metrics.edge_size("c", "d") == pytest.approx(3.0)


def test_single_edge_uses_fallback_edge_size(config: AppConfig) -> None:
    graph = build_graph([("a", "b", "0.7")], config.ingestion)
    metrics = normalize_metrics(graph, config.sizing)
    assert metrics.edge_size("a", "b") == config.sizing.edge.fallback
    assert metrics.node_size("a") == config.sizing.node.fallback


def test_nodes_without_edges_still_get_a_size(config: AppConfig) -> None:
    graph = build_graph([("a", "b", "bad")], config.ingestion)
    metrics = normalize_metrics(graph, config.sizing)
    assert metrics.node_sizes == {"a": 3.0, "b": 3.0}
    assert metrics.edge_sizes == {}


def test_scale_linear() -> None:
    target = SizeRange(min=2.0, max=4.0)
    assert scale_linear(5.0, MetricDomain(minimum=0.0, maximum=10.0), target) == pytest.approx(3.0)
    assert scale_linear(7.0, MetricDomain(minimum=7.0, maximum=7.0), target) == 2.0
