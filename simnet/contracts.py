"""Immutable data contracts for SimNet inputs."""
from __future__ import annotations

from typing import Dict, Tuple

from pydantic import BaseModel, ConfigDict, Field, field_validator


class _FrozenBaseModel(BaseModel):
    """Base model enforcing immutability after creation."""

    model_config = ConfigDict(frozen=True)


class EdgeRow(_FrozenBaseModel):
    """Raw ``(source, target, weight)`` triple read from an edge list.

    Fields are kept verbatim; the graph builder decides which rows are usable.
    """

    source: str = ""
    target: str = ""
    weight: str = ""


class ThumbnailRecord(_FrozenBaseModel):
    """Thumbnail URL keyed by title."""

    title: str = Field(..., min_length=1)
    image_url: str = Field(..., min_length=1)


class TagRecord(_FrozenBaseModel):
    """Ordered tag list keyed by title."""

    title: str = Field(..., min_length=1)
    tags: Tuple[str, ...] = ()

    @field_validator("tags")
    @classmethod
    def _strip_hash_prefix(cls, values: Tuple[str, ...]) -> Tuple[str, ...]:
        """Remove ``#`` prefixes and drop empty tokens while preserving order."""

        cleaned = []
        for value in values:
            token = value.strip().lstrip("#").strip()
            if token:
                cleaned.append(token)
        return tuple(cleaned)


class EmotionRecord(_FrozenBaseModel):
    """Emotion intensity profile keyed by image key."""

    image_key: str = Field(..., min_length=1)
    intensities: Dict[str, float] = Field(default_factory=dict)

    @field_validator("intensities")
    @classmethod
    def _validate_intensities(cls, values: Dict[str, float]) -> Dict[str, float]:
        """Validate that every intensity is a fraction in ``[0, 1]``.

        Args:
            values: Mapping of emotion name to intensity.

        Returns:
            Dict[str, float]: The validated mapping.

        Raises:
            ValueError: If an intensity falls outside ``[0, 1]``.
        """
        for name, intensity in values.items():
            if not 0.0 <= intensity <= 1.0:
                msg = f"emotion intensity for {name!r} must be within [0, 1]"
                raise ValueError(msg)
        return values
