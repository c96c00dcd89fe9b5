"""Entity resolution of node titles against auxiliary metadata tables."""

from .resolver import EntityResolver, NodeEnrichment, Resolution, ResolutionEvent
from .rules import AppendChar, Chain, Exact, FuzzyStrip, InsertComma, StripChars, default_rules, fuzzy_key
from .tables import EMOTION_TABLE, TAG_TABLE, THUMBNAIL_TABLE, AuxiliaryTable

__all__ = [
    "AppendChar",
    "AuxiliaryTable",
    "Chain",
    "EMOTION_TABLE",
    "EntityResolver",
    "Exact",
    "FuzzyStrip",
    "InsertComma",
    "NodeEnrichment",
    "Resolution",
    "ResolutionEvent",
    "StripChars",
    "TAG_TABLE",
    "THUMBNAIL_TABLE",
    "default_rules",
    "fuzzy_key",
]
