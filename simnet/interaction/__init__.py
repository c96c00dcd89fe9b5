"""Hover highlighting, tooltips and the event-driven hover session."""

from simnet.interaction.highlighter import (
    IDLE,
    EdgeStyle,
    Focused,
    Idle,
    InteractionState,
    NodeStyle,
    RenderState,
    closed_neighborhood,
    enter,
    leave,
    render_state,
)
from simnet.interaction.session import HoverSession
from simnet.interaction.tooltip import EdgeTooltip, NodeTooltip, position_tooltip

__all__ = [
    "IDLE",
    "EdgeStyle",
    "EdgeTooltip",
    "Focused",
    "HoverSession",
    "Idle",
    "InteractionState",
    "NodeStyle",
    "NodeTooltip",
    "RenderState",
    "closed_neighborhood",
    "enter",
    "leave",
    "position_tooltip",
    "render_state",
]
