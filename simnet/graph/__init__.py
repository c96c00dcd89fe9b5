"""Graph construction, metric normalisation and the resting scene."""

from .builder import BuildStats, GraphEdge, SimilarityGraph, build_graph
from .metrics import GraphMetrics, MetricDomain, normalize_metrics, scale_linear
from .scene import Scene, SceneEdge, SceneNode

__all__ = [
    "BuildStats",
    "GraphEdge",
    "GraphMetrics",
    "MetricDomain",
    "Scene",
    "SceneEdge",
    "SceneNode",
    "SimilarityGraph",
    "build_graph",
    "normalize_metrics",
    "scale_linear",
]
