"""
Triples Module - RDF graph construction and serialization.

This module converts synthesis Batch Records into triples conforming to the
cat+ ontology.

Components:
- terms.py: Named node / literal constructors and kind checks
- namespaces.py: Namespace registry (prefix -> IRI base)
- identity.py: Blank node and named node minting
- store.py: Insertion-ordered triple store
- mapper.py: Batch Record -> triples
- serializer.py: Turtle / JSON-LD rendering
"""

from .identity import IdentityGenerator
from .mapper import ACTION_CLASSES, FALLBACK_ACTION_CLASS, BatchMapper, MappingStats, map_batch
from .namespaces import (
    ALLOQUAL,
    ALLORES,
    CAT,
    CAT_RES,
    DEFAULT_NAMESPACES,
    OBO,
    PURL,
    QUDT,
    SCHEMA,
    NamespaceRegistry,
)
from .serializer import JsonLdRenderer, Renderer, TripleSerializer, TurtleRenderer
from .store import GraphStore, Triple
from .terms import date_time_literal, double_literal, literal, named_node

__all__ = [
    # Terms
    "named_node",
    "literal",
    "date_time_literal",
    "double_literal",
    # Namespaces
    "NamespaceRegistry",
    "DEFAULT_NAMESPACES",
    "CAT",
    "CAT_RES",
    "ALLORES",
    "ALLOQUAL",
    "QUDT",
    "PURL",
    "OBO",
    "SCHEMA",
    # Identity
    "IdentityGenerator",
    # Store
    "GraphStore",
    "Triple",
    # Mapper
    "BatchMapper",
    "MappingStats",
    "ACTION_CLASSES",
    "FALLBACK_ACTION_CLASS",
    "map_batch",
    # Serializer
    "Renderer",
    "TurtleRenderer",
    "JsonLdRenderer",
    "TripleSerializer",
]
