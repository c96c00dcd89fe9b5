"""Resting visual state of a built graph, before any interaction."""
from __future__ import annotations

from dataclasses import dataclass
from typing import Mapping, Optional, Sequence, Tuple

from simnet.graph.builder import SimilarityGraph


@dataclass(frozen=True)
class SceneNode:
    """Node with its derived size and colors."""

    node_id: str
    label: str
    size: float
    base_color: str
    community_id: Optional[int] = None
    community_color: Optional[str] = None


@dataclass(frozen=True)
class SceneEdge:
    """Edge with its derived thickness."""

    source: str
    target: str
    weight: float
    size: float

    @property
    def key(self) -> Tuple[str, str]:
        return (self.source, self.target)


@dataclass(frozen=True)
class Scene:
    """Everything the highlighter needs to derive a render state."""

    graph: SimilarityGraph
    nodes: Mapping[str, SceneNode]
    edges: Sequence[SceneEdge]
    clustering_active: bool
    edge_color: str

    def resting_color(self, node_id: str) -> str:
        """Community color when clustering is active and assigned, else the base color."""

        node = self.nodes[node_id]
        if self.clustering_active and node.community_color:
            return node.community_color
        return node.base_color

