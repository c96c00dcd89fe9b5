"""Louvain community detection over the similarity graph."""
from __future__ import annotations

import logging
from dataclasses import dataclass, field
from typing import Dict, List, Mapping, Optional, Sequence, Set, Tuple

import networkx as nx

from simnet.config import ClusteringConfig
from simnet.graph.builder import SimilarityGraph

LOGGER = logging.getLogger(__name__)


@dataclass(frozen=True)
class Community:
    """Reported community of at least two nodes."""

    index: int
    members: Tuple[str, ...]

    def __len__(self) -> int:
        return len(self.members)

    def __contains__(self, node_id: object) -> bool:
        return node_id in self.members


@dataclass(frozen=True)
class CommunityResult:
    """Partition of the graph plus the communities reported to callers.

    ``partition`` assigns every node a community id, including nodes that
    ended up alone; ``communities`` only lists groups of two or more.
    """

    enabled: bool
    partition: Mapping[str, int] = field(default_factory=dict)
    communities: Sequence[Community] = ()
    modularity: Optional[float] = None

    def community_of(self, node_id: str) -> Optional[Community]:
        return self.membership().get(node_id)

    def membership(self) -> Dict[str, Community]:
        """Map every reported member to its community."""

        return {node_id: community for community in self.communities for node_id in community.members}

    def member_sets(self) -> List[Set[str]]:
        return [set(community.members) for community in self.communities]


def _ordered_partition(graph: SimilarityGraph, raw: Sequence[Set[str]]) -> List[List[str]]:
    """Order groups by their earliest member in first-seen node order."""

    position = {node_id: index for index, node_id in enumerate(graph.nodes())}
    groups = [sorted(group, key=position.__getitem__) for group in raw if group]
    groups.sort(key=lambda members: position[members[0]])
    return groups


def detect_communities(
    graph: SimilarityGraph,
    settings: ClusteringConfig,
    *,
    enabled: Optional[bool] = None,
) -> CommunityResult:
    """Partition ``graph`` with Louvain and drop singleton communities.

    Louvain is order-dependent; membership is reproducible only with a fixed
    ``settings.seed`` and the same networkx release, since node order is
    already pinned to first-seen order.

    Args:
        graph: Built similarity graph.
        settings: Resolution, threshold and seed for the algorithm.
        enabled: Overrides ``settings.enabled`` when provided.

    Returns:
        CommunityResult: Full partition and the reported communities.
    """

    active = settings.enabled if enabled is None else enabled
    if not active:
        return CommunityResult(enabled=False)
    if graph.node_count == 0:
        return CommunityResult(enabled=True)

    nx_graph = graph.nx_graph
    weight: Optional[str] = "weight"
    if nx_graph.size(weight="weight") <= 0:
        # modularity is undefined on zero total weight
        weight = None
    if nx_graph.number_of_edges() == 0:
        raw: List[Set[str]] = [{node_id} for node_id in graph.nodes()]
    else:
        raw = [
            set(group)
            for group in nx.community.louvain_communities(
                nx_graph,
                weight=weight,
                resolution=settings.resolution,
                threshold=settings.threshold,
                seed=settings.seed,
            )
        ]

    groups = _ordered_partition(graph, raw)
    partition: Dict[str, int] = {}
    for community_id, members in enumerate(groups):
        for node_id in members:
            partition[node_id] = community_id

    reported = [members for members in groups if len(members) > 1]
    communities = [Community(index=index, members=tuple(members)) for index, members in enumerate(reported)]

    modularity: Optional[float] = None
    if nx_graph.number_of_edges() > 0:
        modularity = float(
            nx.community.modularity(nx_graph, [set(members) for members in groups], weight=weight, resolution=settings.resolution)
        )
    LOGGER.info(
        "Louvain found %d communities (%d reported, resolution=%s, seed=%s, modularity=%s)",
        len(groups),
        len(communities),
        settings.resolution,
        settings.seed,
        "n/a" if modularity is None else f"{modularity:.4f}",
    )
    return CommunityResult(enabled=True, partition=partition, communities=communities, modularity=modularity)
