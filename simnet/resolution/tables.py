"""Read-only auxiliary lookup tables keyed by title."""
from __future__ import annotations

from typing import Dict, Generic, Iterable, Iterator, Mapping, Optional, Tuple, TypeVar

from simnet.contracts import EmotionRecord, TagRecord, ThumbnailRecord
from simnet.resolution.rules import fuzzy_key

T = TypeVar("T")

THUMBNAIL_TABLE = "thumbnail"
TAG_TABLE = "tags"
EMOTION_TABLE = "emotions"


class AuxiliaryTable(Generic[T]):
    """Immutable mapping from stored key to value.

    ``key_suffix`` describes the key shape: thumbnail and tag keys are plain
    titles while emotion keys carry an image extension. When the same key
    appears twice the first entry wins.
    """

    def __init__(self, name: str, entries: Iterable[Tuple[str, T]], *, key_suffix: str = "") -> None:
        self.name = name
        self.key_suffix = key_suffix
        self._entries: Dict[str, T] = {}
        for key, value in entries:
            self._entries.setdefault(key, value)
        self._fuzzy_index: Optional[Dict[str, str]] = None

    def __contains__(self, key: object) -> bool:
        return key in self._entries

    def __len__(self) -> int:
        return len(self._entries)

    def __iter__(self) -> Iterator[str]:
        return iter(self._entries)

    def get(self, key: str) -> Optional[T]:
        return self._entries.get(key)

    def key_for(self, candidate: str) -> Optional[str]:
        """Return the stored key for a title candidate, or ``None``."""

        key = f"{candidate}{self.key_suffix}"
        return key if key in self._entries else None

    def fuzzy_lookup(self, target: str) -> Optional[str]:
        """Return the first stored key whose fuzzy form equals ``target``."""

        if self._fuzzy_index is None:
            index: Dict[str, str] = {}
            for key in self._entries:
                index.setdefault(fuzzy_key(self._strip_suffix(key)), key)
            self._fuzzy_index = index
        return self._fuzzy_index.get(target)

    def _strip_suffix(self, key: str) -> str:
        if self.key_suffix and key.endswith(self.key_suffix):
            return key[: -len(self.key_suffix)]
        return key


def thumbnail_table(records: Iterable[ThumbnailRecord], *, key_suffix: str = "") -> AuxiliaryTable[str]:
    return AuxiliaryTable(THUMBNAIL_TABLE, ((record.title, record.image_url) for record in records), key_suffix=key_suffix)


def tag_table(records: Iterable[TagRecord], *, key_suffix: str = "") -> AuxiliaryTable[Tuple[str, ...]]:
    return AuxiliaryTable(TAG_TABLE, ((record.title, record.tags) for record in records), key_suffix=key_suffix)


def emotion_table(
    records: Iterable[EmotionRecord], *, key_suffix: str = ""
) -> AuxiliaryTable[Mapping[str, float]]:
    return AuxiliaryTable(
        EMOTION_TABLE,
        ((record.image_key, dict(record.intensities)) for record in records),
        key_suffix=key_suffix,
    )
