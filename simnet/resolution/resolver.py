"""Resolve node titles against auxiliary metadata tables."""
from __future__ import annotations

import logging
from dataclasses import asdict, dataclass, field
from typing import Callable, Dict, Generic, Iterable, Mapping, Optional, Sequence, Tuple, TypeVar

from simnet.config import AppConfig
from simnet.contracts import EmotionRecord, TagRecord, ThumbnailRecord
from simnet.resolution.rules import Rule, default_rules, describe
from simnet.resolution.tables import (
    EMOTION_TABLE,
    TAG_TABLE,
    THUMBNAIL_TABLE,
    AuxiliaryTable,
    emotion_table,
    tag_table,
    thumbnail_table,
)
from simnet.titles import normalize_title

LOGGER = logging.getLogger(__name__)

T = TypeVar("T")


@dataclass(frozen=True)
class ResolutionEvent:
    """Diagnostic record emitted once per resolution attempt."""

    table: str
    title: str
    step: Optional[int]
    rule: Optional[str]
    key: Optional[str]
    attempts: int

    @property
    def matched(self) -> bool:
        return self.step is not None

    def as_dict(self) -> Dict[str, object]:
        return asdict(self)


@dataclass(frozen=True)
class Resolution(Generic[T]):
    """Outcome of running the cascade against one table."""

    table: str
    title: str
    step: Optional[int] = None
    rule: Optional[str] = None
    key: Optional[str] = None
    value: Optional[T] = None

    @property
    def found(self) -> bool:
        return self.key is not None


@dataclass(frozen=True)
class NodeEnrichment:
    """Display-only metadata gathered for one title."""

    title: str
    thumbnail_url: Optional[str] = None
    tags: Tuple[str, ...] = ()
    emotions: Tuple[Tuple[str, float], ...] = ()
    resolutions: Mapping[str, Resolution] = field(default_factory=dict)


ResolutionListener = Callable[[ResolutionEvent], None]


class EntityResolver:
    """Run the matching cascade independently against each auxiliary table.

    The cascade is a fixed, ordered rule list; the first rule that yields an
    existing key wins and later rules are never consulted. Unresolved titles
    are not errors: the caller simply gets an empty section.
    """

    def __init__(
        self,
        *,
        tables: Iterable[AuxiliaryTable],
        rules: Sequence[Rule],
        normalizer: Callable[[str], str],
        listener: Optional[ResolutionListener] = None,
    ) -> None:
        self._tables: Dict[str, AuxiliaryTable] = {table.name: table for table in tables}
        self._rules = list(rules)
        self._normalizer = normalizer
        self._listener = listener

    @classmethod
    def from_records(
        cls,
        config: AppConfig,
        *,
        thumbnails: Iterable[ThumbnailRecord] = (),
        tags: Iterable[TagRecord] = (),
        emotions: Iterable[EmotionRecord] = (),
        listener: Optional[ResolutionListener] = None,
    ) -> "EntityResolver":
        """Build a resolver with the default cascade and configured key shapes."""

        settings = config.resolution
        tables = [
            thumbnail_table(thumbnails, key_suffix=settings.key_suffix(THUMBNAIL_TABLE)),
            tag_table(tags, key_suffix=settings.key_suffix(TAG_TABLE)),
            emotion_table(emotions, key_suffix=settings.key_suffix(EMOTION_TABLE)),
        ]
        ingestion = config.ingestion
        return cls(
            tables=tables,
            rules=default_rules(settings),
            normalizer=lambda raw: normalize_title(raw, ingestion),
            listener=listener,
        )

    @property
    def rules(self) -> Sequence[Rule]:
        return tuple(self._rules)

    def describe_rules(self) -> Sequence[str]:
        return describe(self._rules)

    def table(self, name: str) -> Optional[AuxiliaryTable]:
        return self._tables.get(name)

    def resolve(self, title: str, table_name: str) -> Resolution:
        """Find the record for ``title`` in the named table.

        Args:
            title: Normalised title.
            table_name: Name of the auxiliary table to search.

        Returns:
            Resolution: The matched step, rule, key and value, or an empty
            resolution when no rule succeeds or the table is absent.
        """

        table = self._tables.get(table_name)
        resolution: Resolution = Resolution(table=table_name, title=title)
        attempts = 0
        if table is not None and len(table) and title:
            for step, rule in enumerate(self._rules, start=1):
                attempts += 1
                key = rule.match(title, table)
                if key is not None:
                    resolution = Resolution(
                        table=table_name,
                        title=title,
                        step=step,
                        rule=rule.name,
                        key=key,
                        value=table.get(key),
                    )
                    break
        self._emit(
            ResolutionEvent(
                table=table_name,
                title=title,
                step=resolution.step,
                rule=resolution.rule,
                key=resolution.key,
                attempts=attempts,
            )
        )
        return resolution

    def enrich(self, title: str) -> NodeEnrichment:
        """Resolve ``title`` against every table and assemble tooltip metadata."""

        thumbnail = self.resolve(title, THUMBNAIL_TABLE)
        tags = self.resolve(title, TAG_TABLE)
        emotions = self.resolve(title, EMOTION_TABLE)
        emotion_pairs: Tuple[Tuple[str, float], ...] = ()
        if emotions.found and emotions.value is not None:
            emotion_pairs = tuple((name, float(value)) for name, value in emotions.value.items())
        return NodeEnrichment(
            title=title,
            thumbnail_url=thumbnail.value if thumbnail.found else None,
            tags=tuple(tags.value) if tags.found and tags.value is not None else (),
            emotions=emotion_pairs,
            resolutions={
                THUMBNAIL_TABLE: thumbnail,
                TAG_TABLE: tags,
                EMOTION_TABLE: emotions,
            },
        )

    def enrich_node(self, node_id: str) -> NodeEnrichment:
        """Normalise a raw node identifier and enrich it."""

        return self.enrich(self._normalizer(node_id))

    def _emit(self, event: ResolutionEvent) -> None:
        if event.matched:
            LOGGER.debug(
                "Resolved %r in %s at step %d (%s)",
                event.title,
                event.table,
                event.step,
                event.rule,
                extra={"resolution": event.as_dict()},
            )
        else:
            LOGGER.info(
                "No %s record for %r after %d attempts",
                event.table,
                event.title,
                event.attempts,
                extra={"resolution": event.as_dict()},
            )
        if self._listener is not None:
            self._listener(event)
