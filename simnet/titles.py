"""Title normalisation shared by display labels and auxiliary lookups."""
from __future__ import annotations

import re
from functools import lru_cache
from typing import Pattern, Sequence

from simnet.config import IngestionConfig


@lru_cache(maxsize=16)
def _compile_prefix(pattern: str) -> Pattern[str]:
    return re.compile(pattern)


@lru_cache(maxsize=16)
def _compile_extension(extensions: tuple[str, ...]) -> Pattern[str]:
    alternatives = "|".join(re.escape(ext) for ext in extensions)
    return re.compile(rf"\.(?:{alternatives})$", re.IGNORECASE)


def strip_source_prefix(raw: str, settings: IngestionConfig) -> str:
    """Remove the leading source/day/rank tag (``tue_12_``) from ``raw``."""

    return _compile_prefix(settings.title_prefix_pattern).sub("", raw.strip(), count=1)


def strip_image_extension(raw: str, extensions: Sequence[str]) -> str:
    """Remove one trailing image file extension from ``raw``."""

    if not extensions:
        return raw
    return _compile_extension(tuple(extensions)).sub("", raw, count=1)


def normalize_title(raw: str, settings: IngestionConfig) -> str:
    """Return the display/lookup form of a raw node identifier.

    The source prefix and image extension are removed and surrounding
    whitespace trimmed. Internal punctuation such as colons, periods and
    spaces is preserved, so ``"tue_12_퇴마록 : 세계편.jpg"`` becomes
    ``"퇴마록 : 세계편"``.

    Args:
        raw: Identifier as it appears in the edge list.
        settings: Ingestion configuration holding the prefix pattern and
            known image extensions.

    Returns:
        str: Normalised title.
    """

    without_prefix = strip_source_prefix(raw, settings)
    return strip_image_extension(without_prefix, settings.image_extensions).strip()
