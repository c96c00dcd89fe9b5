"""Build a deduplicated, undirected, weighted similarity graph from edge rows."""
from __future__ import annotations

import logging
import math
from dataclasses import dataclass
from typing import Dict, Iterable, Iterator, List, Optional, Sequence, Set, Tuple, Union

import networkx as nx

from simnet.config import IngestionConfig
from simnet.contracts import EdgeRow
from simnet.errors import UnknownNodeError
from simnet.titles import normalize_title

LOGGER = logging.getLogger(__name__)

EdgeInput = Union[EdgeRow, Tuple[object, object, object]]


@dataclass(frozen=True)
class GraphEdge:
    """Undirected weighted edge in first-seen orientation."""

    source: str
    target: str
    weight: float

    @property
    def key(self) -> Tuple[str, str]:
        return (self.source, self.target)


@dataclass(frozen=True)
class BuildStats:
    """Counters describing what the builder absorbed during one pass."""

    rows_seen: int
    malformed_rows: int
    self_loops: int
    duplicate_edges: int
    unparsable_weights: int


class SimilarityGraph:
    """Read-only view over the built ``networkx.Graph``.

    Nodes iterate in first-seen order and edges in insertion order, which
    keeps every downstream step (sizing, clustering, palette) deterministic.
    """

    def __init__(self, graph: nx.Graph, edges: Sequence[GraphEdge], stats: BuildStats) -> None:
        self._graph = graph
        self._stats = stats
        self._edges: List[GraphEdge] = list(edges)
        self._edge_index: Dict[frozenset[str], GraphEdge] = {
            frozenset((edge.source, edge.target)): edge for edge in self._edges
        }

    @property
    def nx_graph(self) -> nx.Graph:
        """Underlying networkx graph; callers must not mutate it."""

        return self._graph

    @property
    def stats(self) -> BuildStats:
        return self._stats

    def __contains__(self, node_id: object) -> bool:
        return node_id in self._graph

    def __len__(self) -> int:
        return self._graph.number_of_nodes()

    def nodes(self) -> List[str]:
        return list(self._graph.nodes)

    def edges(self) -> List[GraphEdge]:
        return list(self._edges)

    def iter_edges(self) -> Iterator[GraphEdge]:
        return iter(self._edges)

    @property
    def node_count(self) -> int:
        return self._graph.number_of_nodes()

    @property
    def edge_count(self) -> int:
        return len(self._edges)

    def label(self, node_id: str) -> str:
        """Return the normalised display label of ``node_id``."""

        self._require(node_id)
        return str(self._graph.nodes[node_id]["label"])

    def degree(self, node_id: str) -> int:
        self._require(node_id)
        return int(self._graph.degree(node_id))

    def degrees(self) -> Dict[str, int]:
        return {node_id: int(degree) for node_id, degree in self._graph.degree()}

    def neighbors(self, node_id: str) -> Set[str]:
        self._require(node_id)
        return set(self._graph.neighbors(node_id))

    def has_edge(self, first: str, second: str) -> bool:
        return frozenset((first, second)) in self._edge_index

    def edge(self, first: str, second: str) -> Optional[GraphEdge]:
        return self._edge_index.get(frozenset((first, second)))

    def centrality(self, node_id: str) -> float:
        """Degree centrality ``degree / (n - 1)``; ``0.0`` for single-node graphs."""

        total = self.node_count
        if total <= 1:
            return 0.0
        return self.degree(node_id) / (total - 1)

    def _require(self, node_id: str) -> None:
        if node_id not in self._graph:
            raise UnknownNodeError(node_id)


def _parse_weight(raw: object) -> Optional[float]:
    if isinstance(raw, (int, float)) and not isinstance(raw, bool):
        value = float(raw)
    else:
        text = str(raw if raw is not None else "").strip()
        if not text:
            return None
        try:
            value = float(text)
        except ValueError:
            return None
    if not math.isfinite(value) or value < 0:
        return None
    return value


def _coerce_row(row: EdgeInput) -> Tuple[str, str, object]:
    if isinstance(row, EdgeRow):
        return row.source, row.target, row.weight
    source, target, weight = row
    return (
        "" if source is None else str(source),
        "" if target is None else str(target),
        weight,
    )


def build_graph(rows: Iterable[EdgeInput], settings: IngestionConfig) -> SimilarityGraph:
    """Convert ``(source, target, weight)`` triples into a ``SimilarityGraph``.

    Endpoints are trimmed. Rows with an empty endpoint or with identical
    endpoints are skipped. The first occurrence of an unordered pair wins;
    later rows for the same pair in either orientation are dropped. A row
    whose weight is not a finite non-negative number registers its endpoints
    but contributes no edge and does not claim the pair.

    Args:
        rows: Edge rows in input order.
        settings: Ingestion configuration used for display labels.

    Returns:
        SimilarityGraph: The built graph.
    """

    graph = nx.Graph()
    edges: List[GraphEdge] = []
    rows_seen = malformed = self_loops = duplicates = unparsable = 0
    for row in rows:
        rows_seen += 1
        raw_source, raw_target, raw_weight = _coerce_row(row)
        source = raw_source.strip()
        target = raw_target.strip()
        if not source or not target:
            malformed += 1
            continue
        if source == target:
            self_loops += 1
            continue
        for node_id in (source, target):
            if node_id not in graph:
                graph.add_node(node_id, label=normalize_title(node_id, settings))
        weight = _parse_weight(raw_weight)
        if weight is None:
            unparsable += 1
            LOGGER.warning("Unparsable weight %r for edge %s -- %s; edge skipped", raw_weight, source, target)
            continue
        if graph.has_edge(source, target):
            duplicates += 1
            continue
        graph.add_edge(source, target, weight=weight)
        edges.append(GraphEdge(source=source, target=target, weight=weight))

    stats = BuildStats(
        rows_seen=rows_seen,
        malformed_rows=malformed,
        self_loops=self_loops,
        duplicate_edges=duplicates,
        unparsable_weights=unparsable,
    )
    LOGGER.info(
        "Built similarity graph (nodes=%d, edges=%d, rows=%d, malformed=%d, self_loops=%d, duplicates=%d, unparsable=%d)",
        graph.number_of_nodes(),
        graph.number_of_edges(),
        rows_seen,
        malformed,
        self_loops,
        duplicates,
        unparsable,
    )
    return SimilarityGraph(graph, edges, stats)
