"""Hover highlighting as a pure function of scene and interaction state."""
from __future__ import annotations

from dataclasses import dataclass
from typing import Dict, FrozenSet, Mapping, Optional, Tuple, Union

from simnet.communities.palette import with_alpha
from simnet.config import InteractionConfig
from simnet.errors import UnknownNodeError
from simnet.graph.scene import Scene


@dataclass(frozen=True)
class Idle:
    """No node is hovered."""


@dataclass(frozen=True)
class Focused:
    """The pointer is over ``node_id``."""

    node_id: str


InteractionState = Union[Idle, Focused]

IDLE = Idle()


@dataclass(frozen=True)
class NodeStyle:
    color: str
    size: float


@dataclass(frozen=True)
class EdgeStyle:
    color: str
    size: float


@dataclass(frozen=True)
class RenderState:
    """Displayed color and size of every node and edge."""

    nodes: Mapping[str, NodeStyle]
    edges: Mapping[Tuple[str, str], EdgeStyle]
    focus: Optional[str] = None
    neighborhood: FrozenSet[str] = frozenset()


def enter(state: InteractionState, node_id: str) -> InteractionState:
    """Transition for the pointer entering ``node_id``.

    Re-entering the focused node is a no-op; entering another node moves focus.
    """

    if isinstance(state, Focused) and state.node_id == node_id:
        return state
    return Focused(node_id)


def leave(state: InteractionState, node_id: str) -> InteractionState:
    """Transition for the pointer leaving ``node_id``; ignored unless it is focused."""

    if isinstance(state, Focused) and state.node_id == node_id:
        return IDLE
    return state


def closed_neighborhood(scene: Scene, node_id: str) -> FrozenSet[str]:
    """Return ``{node_id}`` plus its direct neighbors."""

    if node_id not in scene.nodes:
        raise UnknownNodeError(node_id)
    return frozenset({node_id, *scene.graph.neighbors(node_id)})


def render_state(scene: Scene, state: InteractionState, settings: InteractionConfig) -> RenderState:
    """Derive the displayed styles for ``state`` without touching ``scene``.

    Idle renders every element at its resting color and normalised size, so a
    focus followed by a leave reproduces the original styles exactly.

    Args:
        scene: Sized and colored graph.
        state: Current interaction state.
        settings: Dimming alpha, shrink factor and size floors.

    Returns:
        RenderState: Styles keyed by node id and by edge ``(source, target)``.

    Raises:
        UnknownNodeError: If the focused node is not in the scene.
    """

    edge_color = scene.edge_color
    if isinstance(state, Idle):
        nodes = {
            node_id: NodeStyle(color=scene.resting_color(node_id), size=node.size)
            for node_id, node in scene.nodes.items()
        }
        edges = {edge.key: EdgeStyle(color=edge_color, size=edge.size) for edge in scene.edges}
        return RenderState(nodes=nodes, edges=edges)

    neighborhood = closed_neighborhood(scene, state.node_id)
    focused_nodes: Dict[str, NodeStyle] = {}
    for node_id, node in scene.nodes.items():
        color = scene.resting_color(node_id)
        if node_id in neighborhood:
            focused_nodes[node_id] = NodeStyle(color=color, size=node.size)
        else:
            focused_nodes[node_id] = NodeStyle(
                color=with_alpha(color, settings.dim_alpha),
                size=max(node.size * settings.shrink_factor, settings.min_node_size),
            )

    dimmed_edge_color = with_alpha(edge_color, settings.dim_alpha)
    focused_edges: Dict[Tuple[str, str], EdgeStyle] = {}
    for edge in scene.edges:
        if edge.source in neighborhood and edge.target in neighborhood:
            focused_edges[edge.key] = EdgeStyle(color=edge_color, size=edge.size)
        else:
            focused_edges[edge.key] = EdgeStyle(
                color=dimmed_edge_color,
                size=max(edge.size * settings.shrink_factor, settings.min_edge_size),
            )
    return RenderState(
        nodes=focused_nodes,
        edges=focused_edges,
        focus=state.node_id,
        neighborhood=neighborhood,
    )
