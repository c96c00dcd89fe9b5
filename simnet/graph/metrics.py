"""Min–max scaling of node degree and edge weight into visual sizes."""
from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Dict, Mapping, Tuple

from simnet.config import SizeRange, SizingConfig
from simnet.graph.builder import SimilarityGraph

LOGGER = logging.getLogger(__name__)


@dataclass(frozen=True)
class MetricDomain:
    """Observed extremes of a metric; ``degenerate`` when they coincide."""

    minimum: float
    maximum: float

    @property
    def degenerate(self) -> bool:
        return self.maximum == self.minimum


@dataclass(frozen=True)
class GraphMetrics:
    """Normalised sizes derived from one graph."""

    node_sizes: Mapping[str, float]
    edge_sizes: Mapping[Tuple[str, str], float]
    degree_domain: MetricDomain
    weight_domain: MetricDomain

    def node_size(self, node_id: str) -> float:
        return self.node_sizes[node_id]

    def edge_size(self, source: str, target: str) -> float:
        if (source, target) in self.edge_sizes:
            return self.edge_sizes[(source, target)]
        return self.edge_sizes[(target, source)]


def scale_linear(value: float, domain: MetricDomain, target: SizeRange) -> float:
    """Map ``value`` from ``domain`` onto ``target``.

    A degenerate domain maps every value to ``target.fallback`` instead of
    dividing by zero.
    """

    if domain.degenerate:
        return target.fallback
    ratio = (value - domain.minimum) / (domain.maximum - domain.minimum)
    return target.min + ratio * (target.max - target.min)


def _domain(values: list[float]) -> MetricDomain:
    if not values:
        return MetricDomain(minimum=0.0, maximum=0.0)
    return MetricDomain(minimum=min(values), maximum=max(values))


def normalize_metrics(graph: SimilarityGraph, sizing: SizingConfig) -> GraphMetrics:
    """Compute degree-based node sizes and weight-based edge sizes.

    Args:
        graph: Built similarity graph.
        sizing: Node and edge size ranges.

    Returns:
        GraphMetrics: Sizes keyed by node id and by first-seen edge orientation.
    """

    degrees = graph.degrees()
    degree_domain = _domain([float(value) for value in degrees.values()])
    node_sizes: Dict[str, float] = {
        node_id: scale_linear(float(degrees[node_id]), degree_domain, sizing.node) for node_id in graph.nodes()
    }

    edges = graph.edges()
    weight_domain = _domain([edge.weight for edge in edges])
    edge_sizes: Dict[Tuple[str, str], float] = {
        edge.key: scale_linear(edge.weight, weight_domain, sizing.edge) for edge in edges
    }

    if degree_domain.degenerate and node_sizes:
        LOGGER.info("Degree domain is degenerate (degree=%s); using fallback node size", degree_domain.minimum)
    if weight_domain.degenerate and edge_sizes:
        LOGGER.info("Weight domain is degenerate (weight=%s); using fallback edge size", weight_domain.minimum)
    return GraphMetrics(
        node_sizes=node_sizes,
        edge_sizes=edge_sizes,
        degree_domain=degree_domain,
        weight_domain=weight_domain,
    )
