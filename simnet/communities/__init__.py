"""Community detection and palette assignment."""

from .detector import Community, CommunityResult, detect_communities
from .palette import assign_palette, generate_palette, with_alpha

__all__ = [
    "Community",
    "CommunityResult",
    "assign_palette",
    "detect_communities",
    "generate_palette",
    "with_alpha",
]
