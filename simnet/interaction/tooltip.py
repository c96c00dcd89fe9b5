"""Tooltip payloads and placement for node and edge hover."""
from __future__ import annotations

import html
from dataclasses import dataclass
from typing import List, Optional, Tuple

from simnet.config import TooltipConfig
from simnet.resolution.resolver import NodeEnrichment


@dataclass(frozen=True)
class NodeTooltip:
    """Content shown while a node is focused."""

    title: str
    degree: int
    centrality: float
    enrichment: Optional[NodeEnrichment] = None

    @property
    def thumbnail_url(self) -> Optional[str]:
        return self.enrichment.thumbnail_url if self.enrichment else None

    @property
    def tags(self) -> Tuple[str, ...]:
        return self.enrichment.tags if self.enrichment else ()

    @property
    def emotions(self) -> Tuple[Tuple[str, float], ...]:
        return self.enrichment.emotions if self.enrichment else ()

    def to_text(self) -> str:
        """Plain-text rendering; unresolved sections are omitted."""

        lines: List[str] = [
            self.title,
            f"Connections: {self.degree}",
            f"Centrality: {self.centrality:.3f}",
        ]
        if self.tags:
            lines.append("Tags: " + " ".join(f"#{tag}" for tag in self.tags))
        if self.emotions:
            lines.append("Emotions: " + ", ".join(f"{name} {value:.0%}" for name, value in self.emotions))
        if self.thumbnail_url:
            lines.append(f"Thumbnail: {self.thumbnail_url}")
        return "\n".join(lines)

    def to_html(self) -> str:
        """HTML fragment with every dynamic value escaped."""

        title = html.escape(self.title)
        parts = [
            f'<div class="tooltip-title"><strong>{title}</strong></div>',
            '<div class="tooltip-metrics">'
            f"Connections: {self.degree}<br>Centrality: {self.centrality:.3f}"
            "</div>",
        ]
        if self.tags:
            tags = " ".join(f'<span class="tooltip-tag">#{html.escape(tag)}</span>' for tag in self.tags)
            parts.append(f'<div class="tooltip-tags">{tags}</div>')
        if self.emotions:
            rows = "".join(
                f"<li>{html.escape(name)}: {value:.0%}</li>" for name, value in self.emotions
            )
            parts.append(f'<ul class="tooltip-emotions">{rows}</ul>')
        if self.thumbnail_url:
            src = html.escape(self.thumbnail_url, quote=True)
            parts.append(f'<div class="tooltip-thumbnail"><img src="{src}" alt="{html.escape(self.title, quote=True)}" /></div>')
        return "".join(parts)


@dataclass(frozen=True)
class EdgeTooltip:
    """Content shown while an edge is hovered: its weight only."""

    source: str
    target: str
    weight: float

    def to_text(self) -> str:
        return f"Weight: {self.weight:.3f}"

    def to_html(self) -> str:
        return f"<strong>Connection</strong><br>Weight: {self.weight:.3f}"


def position_tooltip(
    pointer: Tuple[float, float],
    container: Tuple[float, float],
    settings: TooltipConfig,
) -> Tuple[float, float]:
    """Place the tooltip near the pointer and keep it inside the container.

    The tooltip sits at ``pointer + offset``. It flips to the left of the
    pointer when it would overflow the right edge and drops below when it
    would start above the top, then is clamped into the container box.

    Args:
        pointer: Pointer ``(x, y)`` relative to the container.
        container: Container ``(width, height)``.
        settings: Tooltip geometry.

    Returns:
        Tuple[float, float]: Top-left corner of the tooltip.
    """

    pointer_x, pointer_y = pointer
    width, height = container
    x = pointer_x + settings.offset_x
    y = pointer_y + settings.offset_y
    if x + settings.width > width:
        x = x - settings.width - settings.flip_margin
    if y < 0:
        y = y + settings.drop_offset
    x = min(max(x, 0.0), max(width - settings.width, 0.0))
    y = min(max(y, 0.0), max(height - settings.height, 0.0))
    return x, y
