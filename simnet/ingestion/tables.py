"""Delimited-text readers for the edge list and auxiliary metadata tables."""
from __future__ import annotations

import csv
import io
import logging
import math
from typing import Dict, List, Sequence, Tuple

from pydantic import ValidationError

from simnet.config import IngestionConfig
from simnet.contracts import EdgeRow, EmotionRecord, TagRecord, ThumbnailRecord
from simnet.errors import IngestionError
from simnet.titles import strip_source_prefix

LOGGER = logging.getLogger(__name__)


def _split_records(text: str) -> Tuple[List[str], List[List[str]]]:
    """Split delimited text into a trimmed header and trimmed data rows.

    Quoted fields may contain commas and colons. Blank lines are skipped.

    Raises:
        IngestionError: If the text is empty or has no header row.
    """

    if text is None or not text.strip():
        raise IngestionError("Input text is empty; expected a header row")
    try:
        reader = csv.reader(io.StringIO(text.strip().lstrip("\ufeff")), skipinitialspace=True)
        records = [[cell.strip() for cell in record] for record in reader if record and any(cell.strip() for cell in record)]
    except csv.Error as exc:
        raise IngestionError(f"Input text could not be parsed as delimited rows: {exc}") from exc
    if not records:
        raise IngestionError("Input text has no header row")
    header, *rows = records
    if not any(header):
        raise IngestionError("Input header row is empty")
    return header, rows


def parse_rows(text: str) -> List[Dict[str, str]]:
    """Parse delimited text into row mappings keyed by header name.

    Missing trailing cells are filled with empty strings.

    Args:
        text: Raw delimited text including a header row.

    Returns:
        List[Dict[str, str]]: One mapping per data row, in input order.

    Raises:
        IngestionError: If the text cannot be parsed into rows at all.
    """

    header, rows = _split_records(text)
    parsed: List[Dict[str, str]] = []
    for cells in rows:
        parsed.append({name: cells[index] if index < len(cells) else "" for index, name in enumerate(header)})
    return parsed


def read_edge_rows(text: str, settings: IngestionConfig) -> List[EdgeRow]:
    """Read an edge list into raw ``EdgeRow`` triples.

    Raises:
        IngestionError: If the header lacks the configured source, target or
            weight column.
    """

    header, _ = _split_records(text)
    required = [settings.source_column, settings.target_column, settings.weight_column]
    missing = [column for column in required if column not in header]
    if missing:
        raise IngestionError(f"Edge list is missing required columns: {', '.join(missing)}")
    return edge_rows_from_mappings(parse_rows(text), settings)


def edge_rows_from_mappings(rows: Sequence[Dict[str, str]], settings: IngestionConfig) -> List[EdgeRow]:
    """Convert already-parsed row mappings into ``EdgeRow`` triples."""

    return [
        EdgeRow(
            source=str(row.get(settings.source_column) or ""),
            target=str(row.get(settings.target_column) or ""),
            weight=str(row.get(settings.weight_column) or ""),
        )
        for row in rows
    ]


def _unquote(value: str) -> str:
    return value.replace('"', "").strip()


def load_thumbnail_table(text: str, settings: IngestionConfig) -> List[ThumbnailRecord]:
    """Read the thumbnail table by positional column offsets."""

    _, rows = _split_records(text)
    records: List[ThumbnailRecord] = []
    title_index = settings.thumbnail_title_index
    url_index = settings.thumbnail_url_index
    for cells in rows:
        if len(cells) <= max(title_index, url_index):
            LOGGER.warning("Skipping thumbnail row with %d cells", len(cells))
            continue
        title = _unquote(cells[title_index])
        image_url = _unquote(cells[url_index])
        if not title or not image_url:
            continue
        records.append(ThumbnailRecord(title=title, image_url=image_url))
    return records


def load_tag_table(text: str, settings: IngestionConfig) -> List[TagRecord]:
    """Read the tag table; the tag cell holds a comma-separated ``#token`` list."""

    records: List[TagRecord] = []
    for row in parse_rows(text):
        title = _unquote(row.get(settings.tag_title_column, ""))
        if not title:
            continue
        raw_tags = row.get(settings.tag_list_column, "")
        records.append(TagRecord(title=title, tags=tuple(raw_tags.split(","))))
    return records


def parse_percentage(value: str) -> float:
    """Convert a percentage string such as ``"45.5%"`` into a ``[0, 1]`` fraction.

    Unparsable values default to ``0.0``; out-of-range values are clamped.
    """

    cleaned = str(value or "").strip().rstrip("%").strip()
    if not cleaned:
        return 0.0
    try:
        numeric = float(cleaned)
    except ValueError:
        LOGGER.warning("Unparsable percentage value %r defaulted to 0", value)
        return 0.0
    if not math.isfinite(numeric):
        LOGGER.warning("Non-finite percentage value %r defaulted to 0", value)
        return 0.0
    return min(max(numeric / 100.0, 0.0), 1.0)


def load_emotion_table(text: str, settings: IngestionConfig) -> List[EmotionRecord]:
    """Read the emotion table: first column is the image key, the rest are emotions.

    Image keys keep their file extension but lose the source/day/rank prefix.
    """

    header, rows = _split_records(text)
    emotion_names = header[1:]
    records: List[EmotionRecord] = []
    for cells in rows:
        image_key = strip_source_prefix(_unquote(cells[0]), settings) if cells else ""
        if not image_key:
            continue
        intensities: Dict[str, float] = {}
        for offset, name in enumerate(emotion_names, start=1):
            if not name:
                continue
            raw = cells[offset] if offset < len(cells) else ""
            intensities[name] = parse_percentage(raw)
        try:
            records.append(EmotionRecord(image_key=image_key, intensities=intensities))
        except ValidationError as exc:  # pragma: no cover - parse_percentage clamps
            LOGGER.warning("Skipping emotion row %s: %s", image_key, exc)
    return records
