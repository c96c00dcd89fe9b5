"""Deterministic force-directed positions for a similarity graph."""
from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Dict, Mapping, Tuple

import networkx as nx

from simnet.config import LayoutConfig
from simnet.graph.builder import SimilarityGraph

LOGGER = logging.getLogger(__name__)


@dataclass(frozen=True)
class LayoutResult:
    """Normalised node coordinates in ``[-1.0, 1.0]``."""

    positions: Dict[str, Tuple[float, float]]

    def position(self, node_id: str) -> Tuple[float, float]:
        return self.positions[node_id]


def _normalise(positions: Mapping[str, Tuple[float, float]], scale: float) -> Dict[str, Tuple[float, float]]:
    xs = [coord[0] for coord in positions.values()]
    ys = [coord[1] for coord in positions.values()]
    min_x = min(xs, default=0.0)
    max_x = max(xs, default=0.0)
    min_y = min(ys, default=0.0)
    max_y = max(ys, default=0.0)
    centre_x = (min_x + max_x) / 2.0
    centre_y = (min_y + max_y) / 2.0
    span = max(max_x - min_x, max_y - min_y, 1e-6)
    factor = 2.0 * scale / span

    normalised: Dict[str, Tuple[float, float]] = {}
    for node_id, (x, y) in positions.items():
        px = max(min((x - centre_x) * factor, scale), -scale)
        py = max(min((y - centre_y) * factor, scale), -scale)
        normalised[node_id] = (px, py)
    return normalised


def compute_layout(graph: SimilarityGraph, settings: LayoutConfig) -> LayoutResult:
    """Place nodes on a circle, then relax them with a seeded spring layout.

    The iteration count is fixed and the seed is configured, so repeated runs
    over the same graph give the same coordinates. Positions are centred and
    scaled so the widest axis spans ``[-scale, scale]``.

    Args:
        graph: Built similarity graph.
        settings: Iteration count, seed and output scale.

    Returns:
        LayoutResult containing one coordinate pair per node.
    """

    nx_graph = graph.nx_graph
    if nx_graph.number_of_nodes() == 0:
        return LayoutResult(positions={})
    if nx_graph.number_of_nodes() == 1:
        only = next(iter(graph.nodes()))
        return LayoutResult(positions={only: (0.0, 0.0)})

    initial = nx.circular_layout(nx_graph)
    weight = "weight" if any(edge.weight > 0 for edge in graph.iter_edges()) else None
    relaxed = nx.spring_layout(
        nx_graph,
        pos=initial,
        iterations=settings.iterations,
        weight=weight,
        seed=settings.seed,
    )
    positions = {
        node_id: (float(relaxed[node_id][0]), float(relaxed[node_id][1])) for node_id in graph.nodes()
    }
    LOGGER.debug("Computed layout for %d nodes over %d iterations", len(positions), settings.iterations)
    return LayoutResult(positions=_normalise(positions, settings.scale))
