"""Readers turning delimited text into edge rows and auxiliary records."""

from .tables import (
    edge_rows_from_mappings,
    load_emotion_table,
    load_tag_table,
    load_thumbnail_table,
    parse_percentage,
    parse_rows,
    read_edge_rows,
)

__all__ = [
    "edge_rows_from_mappings",
    "load_emotion_table",
    "load_tag_table",
    "load_thumbnail_table",
    "parse_percentage",
    "parse_rows",
    "read_edge_rows",
]
