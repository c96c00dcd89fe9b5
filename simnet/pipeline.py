"""Single-pass build of a renderable similarity network."""
from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Callable, Dict, Iterable, List, Optional, Sequence, Tuple

from simnet.communities.detector import CommunityResult, detect_communities
from simnet.communities.palette import assign_palette
from simnet.config import AppConfig
from simnet.graph.builder import EdgeInput, SimilarityGraph, build_graph
from simnet.graph.metrics import GraphMetrics, normalize_metrics
from simnet.graph.scene import Scene, SceneEdge, SceneNode
from simnet.ingestion import load_emotion_table, load_tag_table, load_thumbnail_table, read_edge_rows
from simnet.layout import LayoutResult, compute_layout
from simnet.resolution.resolver import EntityResolver, ResolutionListener

LOGGER = logging.getLogger(__name__)

ClustersCallback = Callable[[List[List[str]]], None]


@dataclass(frozen=True)
class GraphSummary:
    """Headline statistics of one build."""

    node_count: int
    edge_count: int
    community_count: int
    min_degree: int
    max_degree: int
    min_weight: Optional[float]
    max_weight: Optional[float]
    modularity: Optional[float]

    def as_dict(self) -> Dict[str, object]:
        return {
            "nodes": self.node_count,
            "edges": self.edge_count,
            "communities": self.community_count,
            "degree": [self.min_degree, self.max_degree],
            "weight": [self.min_weight, self.max_weight],
            "modularity": self.modularity,
        }


@dataclass(frozen=True)
class ClusterSummary:
    """One reported community with its color and member labels."""

    index: int
    color: str
    members: Tuple[str, ...]
    labels: Tuple[str, ...]


@dataclass(frozen=True)
class RenderableGraph:
    """Sized, colored and optionally laid-out graph ready for a renderer."""

    scene: Scene
    metrics: GraphMetrics
    communities: CommunityResult
    palette: Tuple[str, ...]
    layout: Optional[LayoutResult] = None

    @property
    def graph(self) -> SimilarityGraph:
        return self.scene.graph

    def clusters(self) -> List[ClusterSummary]:
        summaries: List[ClusterSummary] = []
        for community in self.communities.communities:
            summaries.append(
                ClusterSummary(
                    index=community.index,
                    color=self.palette[community.index],
                    members=community.members,
                    labels=tuple(self.graph.label(node_id) for node_id in community.members),
                )
            )
        return summaries

    def summary(self) -> GraphSummary:
        degrees = list(self.graph.degrees().values())
        weights = [edge.weight for edge in self.graph.iter_edges()]
        return GraphSummary(
            node_count=self.graph.node_count,
            edge_count=self.graph.edge_count,
            community_count=len(self.communities.communities),
            min_degree=min(degrees, default=0),
            max_degree=max(degrees, default=0),
            min_weight=min(weights) if weights else None,
            max_weight=max(weights) if weights else None,
            modularity=self.communities.modularity,
        )

    def to_payload(self) -> Dict[str, object]:
        """Return a JSON-serialisable mapping of nodes, edges and clusters."""

        nodes: List[Dict[str, object]] = []
        for node_id, node in self.scene.nodes.items():
            entry: Dict[str, object] = {
                "id": node_id,
                "label": node.label,
                "size": node.size,
                "color": self.scene.resting_color(node_id),
                "community": node.community_id,
            }
            if self.layout is not None:
                x, y = self.layout.position(node_id)
                entry["x"] = x
                entry["y"] = y
            nodes.append(entry)
        edges = [
            {
                "source": edge.source,
                "target": edge.target,
                "weight": edge.weight,
                "size": edge.size,
                "color": self.scene.edge_color,
            }
            for edge in self.scene.edges
        ]
        clusters = [
            {"index": cluster.index, "color": cluster.color, "members": list(cluster.labels)}
            for cluster in self.clusters()
        ]
        return {
            "nodes": nodes,
            "edges": edges,
            "clusters": clusters,
            "clustering": self.scene.clustering_active,
            "summary": self.summary().as_dict(),
        }


def _build_scene(
    graph: SimilarityGraph,
    metrics: GraphMetrics,
    communities: CommunityResult,
    palette: Sequence[str],
    config: AppConfig,
) -> Scene:
    base_color = config.interaction.base_color
    membership = communities.membership()
    nodes: Dict[str, SceneNode] = {}
    for node_id in graph.nodes():
        community = membership.get(node_id)
        nodes[node_id] = SceneNode(
            node_id=node_id,
            label=graph.label(node_id),
            size=metrics.node_size(node_id),
            base_color=base_color,
            community_id=community.index if community is not None else None,
            community_color=palette[community.index] if community is not None else None,
        )
    edges = [
        SceneEdge(
            source=edge.source,
            target=edge.target,
            weight=edge.weight,
            size=metrics.edge_size(edge.source, edge.target),
        )
        for edge in graph.iter_edges()
    ]
    return Scene(
        graph=graph,
        nodes=nodes,
        edges=edges,
        clustering_active=communities.enabled,
        edge_color=config.interaction.edge_color,
    )


def build_network(
    rows: Iterable[EdgeInput],
    config: AppConfig,
    *,
    clustering: Optional[bool] = None,
    on_clusters_found: Optional[ClustersCallback] = None,
    with_layout: bool = True,
) -> RenderableGraph:
    """Build, size, cluster, color and lay out a similarity network.

    Every call is a fresh build; nothing is carried over from earlier calls.

    Args:
        rows: Raw ``(source, target, weight)`` triples in input order.
        config: Application configuration.
        clustering: Enables community detection; defaults to
            ``config.clustering.enabled``.
        on_clusters_found: Receives the member lists of the reported
            communities whenever clustering is active.
        with_layout: Compute node coordinates as well.

    Returns:
        RenderableGraph: The built network.
    """

    graph = build_graph(rows, config.ingestion)
    metrics = normalize_metrics(graph, config.sizing)
    communities = detect_communities(graph, config.clustering, enabled=clustering)
    palette = tuple(assign_palette(len(communities.communities), config.palette))
    scene = _build_scene(graph, metrics, communities, palette, config)
    layout = compute_layout(graph, config.layout) if with_layout else None
    network = RenderableGraph(
        scene=scene,
        metrics=metrics,
        communities=communities,
        palette=palette,
        layout=layout,
    )
    summary = network.summary()
    LOGGER.info(
        "Network ready (nodes=%d, edges=%d, communities=%d, clustering=%s)",
        summary.node_count,
        summary.edge_count,
        summary.community_count,
        communities.enabled,
    )
    if communities.enabled and on_clusters_found is not None:
        on_clusters_found([list(community.members) for community in communities.communities])
    return network


def build_network_from_text(
    edges_text: str,
    config: AppConfig,
    *,
    clustering: Optional[bool] = None,
    on_clusters_found: Optional[ClustersCallback] = None,
    with_layout: bool = True,
) -> RenderableGraph:
    """Parse an edge list and build the network from it."""

    rows = read_edge_rows(edges_text, config.ingestion)
    return build_network(
        rows,
        config,
        clustering=clustering,
        on_clusters_found=on_clusters_found,
        with_layout=with_layout,
    )


def build_resolver(
    config: AppConfig,
    *,
    thumbnails_text: Optional[str] = None,
    tags_text: Optional[str] = None,
    emotions_text: Optional[str] = None,
    listener: Optional[ResolutionListener] = None,
) -> EntityResolver:
    """Load whichever auxiliary tables are provided and build a resolver."""

    ingestion = config.ingestion
    thumbnails = load_thumbnail_table(thumbnails_text, ingestion) if thumbnails_text else []
    tags = load_tag_table(tags_text, ingestion) if tags_text else []
    emotions = load_emotion_table(emotions_text, ingestion) if emotions_text else []
    LOGGER.info(
        "Loaded auxiliary tables (thumbnails=%d, tags=%d, emotions=%d)",
        len(thumbnails),
        len(tags),
        len(emotions),
    )
    return EntityResolver.from_records(
        config,
        thumbnails=thumbnails,
        tags=tags,
        emotions=emotions,
        listener=listener,
    )
