"""Tests for the seeded force-directed layout adapter."""

from __future__ import annotations

import pytest

from simnet.config import AppConfig, LayoutConfig, load_config
from simnet.graph import SimilarityGraph, build_graph
from simnet.layout import compute_layout


@pytest.fixture(name="config")
def fixture_config() -> AppConfig:
    return load_config()


@pytest.fixture(name="graph")
def fixture_graph(config: AppConfig) -> SimilarityGraph:
    rows = [
        ("a", "b", "1"),
        ("b", "c", "2"),
        ("c", "a", "1"),
        ("c", "d", "0.5"),
        ("d", "e", "3"),
        ("f", "g", "bad"),
    ]
    return build_graph(rows, config.ingestion)


def test_layout_covers_every_node_within_bounds(graph: SimilarityGraph, config: AppConfig) -> None:
    result = compute_layout(graph, config.layout)
    assert set(result.positions) == set(graph.nodes())
    for x, y in result.positions.values():
        assert -1.0 <= x <= 1.0
        assert -1.0 <= y <= 1.0
    widest = max(max(abs(x), abs(y)) for x, y in result.positions.values())
    assert widest == pytest.approx(1.0)


def test_layout_is_deterministic(graph: SimilarityGraph, config: AppConfig) -> None:
    assert compute_layout(graph, config.layout) == compute_layout(graph, config.layout)


def test_layout_scale_is_configurable(graph: SimilarityGraph) -> None:
    result = compute_layout(graph, LayoutConfig(iterations=50, seed=3, scale=2.0))
    widest = max(max(abs(x), abs(y)) for x, y in result.positions.values())
    assert widest == pytest.approx(2.0)


def test_layout_separates_two_nodes(config: AppConfig) -> None:
    graph = build_graph([("a", "b", "1")], config.ingestion)
    result = compute_layout(graph, config.layout)
    assert result.position("a") != result.position("b")


def test_empty_graph_layout(config: AppConfig) -> None:
    assert compute_layout(build_graph([], config.ingestion), config.layout).positions == {}
