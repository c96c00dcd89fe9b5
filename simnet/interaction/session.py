"""Event-driven hover session over one scene."""
from __future__ import annotations

import logging
from typing import Optional, Tuple, Union

from simnet.config import InteractionConfig
from simnet.errors import UnknownNodeError
from simnet.graph.scene import Scene
from simnet.interaction.highlighter import IDLE, Focused, InteractionState, RenderState, enter, leave, render_state
from simnet.interaction.tooltip import EdgeTooltip, NodeTooltip, position_tooltip
from simnet.resolution.resolver import EntityResolver

LOGGER = logging.getLogger(__name__)

Tooltip = Union[NodeTooltip, EdgeTooltip]


class HoverSession:
    """Track pointer events and expose the resulting render state and tooltip.

    The session holds only the interaction state; every render is derived
    from the untouched scene, so hover and unhover cycles are idempotent.
    """

    def __init__(
        self,
        scene: Scene,
        settings: InteractionConfig,
        *,
        resolver: Optional[EntityResolver] = None,
        container: Tuple[float, float] = (800.0, 500.0),
    ) -> None:
        self._scene = scene
        self._settings = settings
        self._resolver = resolver
        self._container = container
        self._state: InteractionState = IDLE
        self._render = render_state(scene, IDLE, settings)
        self._tooltip: Optional[Tooltip] = None
        self._tooltip_position: Optional[Tuple[float, float]] = None
        self._pointer: Tuple[float, float] = (0.0, 0.0)

    @property
    def state(self) -> InteractionState:
        return self._state

    @property
    def render(self) -> RenderState:
        return self._render

    @property
    def tooltip(self) -> Optional[Tooltip]:
        return self._tooltip

    @property
    def tooltip_position(self) -> Optional[Tuple[float, float]]:
        return self._tooltip_position

    def enter_node(self, node_id: str, pointer: Optional[Tuple[float, float]] = None) -> RenderState:
        """Focus ``node_id``, dim everything outside its neighborhood and compose a tooltip."""

        if node_id not in self._scene.nodes:
            raise UnknownNodeError(node_id)
        next_state = enter(self._state, node_id)
        if next_state == self._state:
            if not isinstance(self._tooltip, NodeTooltip):
                self._show_node_tooltip(node_id, pointer)
            return self._render
        self._set_state(next_state)
        self._show_node_tooltip(node_id, pointer)
        return self._render

    def leave_node(self, node_id: str) -> RenderState:
        """Restore resting styles when the pointer leaves the focused node."""

        next_state = leave(self._state, node_id)
        if next_state == self._state:
            return self._render
        self._set_state(next_state)
        self._tooltip = None
        self._tooltip_position = None
        return self._render

    def move_pointer(self, pointer: Tuple[float, float]) -> Optional[Tuple[float, float]]:
        """Follow the pointer with the visible tooltip, if any."""

        if self._tooltip is None:
            return None
        self._place_tooltip(pointer)
        return self._tooltip_position

    def enter_edge(self, source: str, target: str, pointer: Optional[Tuple[float, float]] = None) -> EdgeTooltip:
        """Show the weight of the hovered edge without changing highlighting."""

        edge = self._scene.graph.edge(source, target)
        if edge is None:
            msg = f"No edge between {source!r} and {target!r}"
            raise KeyError(msg)
        tooltip = EdgeTooltip(source=edge.source, target=edge.target, weight=edge.weight)
        self._tooltip = tooltip
        self._place_tooltip(pointer)
        return tooltip

    def leave_edge(self) -> None:
        """Drop the edge tooltip, falling back to the focused node's tooltip."""

        if not isinstance(self._tooltip, EdgeTooltip):
            return
        if isinstance(self._state, Focused):
            self._show_node_tooltip(self._state.node_id, None)
            return
        self._tooltip = None
        self._tooltip_position = None

    def resize(self, width: float, height: float) -> RenderState:
        """Record a new container size; the scene and state are kept as they are."""

        self._container = (width, height)
        if self._tooltip is not None:
            self._place_tooltip(None)
        return self._render

    def _set_state(self, state: InteractionState) -> None:
        self._state = state
        self._render = render_state(self._scene, state, self._settings)
        LOGGER.debug("Interaction state -> %s (neighborhood=%d)", state, len(self._render.neighborhood))

    def _show_node_tooltip(self, node_id: str, pointer: Optional[Tuple[float, float]]) -> None:
        self._tooltip = self._node_tooltip(node_id)
        self._place_tooltip(pointer)

    def _node_tooltip(self, node_id: str) -> NodeTooltip:
        graph = self._scene.graph
        label = self._scene.nodes[node_id].label
        enrichment = self._resolver.enrich(label) if self._resolver is not None else None
        return NodeTooltip(
            title=label,
            degree=graph.degree(node_id),
            centrality=graph.centrality(node_id),
            enrichment=enrichment,
        )

    def _place_tooltip(self, pointer: Optional[Tuple[float, float]]) -> None:
        if pointer is not None:
            self._pointer = pointer
        self._tooltip_position = position_tooltip(self._pointer, self._container, self._settings.tooltip)
