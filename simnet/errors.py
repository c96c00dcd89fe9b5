"""Exception hierarchy for the SimNet core."""
from __future__ import annotations


class SimNetError(RuntimeError):
    """Base class for errors surfaced to callers of the core."""


class IngestionError(SimNetError):
    """Raised when raw input text cannot be parsed into rows at all."""


class UnknownNodeError(SimNetError, KeyError):
    """Raised when an interaction event references a node that is not in the graph."""

    def __init__(self, node_id: str) -> None:
        super().__init__(node_id)
        self.node_id = node_id

    def __str__(self) -> str:
        return f"Node {self.node_id!r} is not part of the graph"
