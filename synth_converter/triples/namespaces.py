"""
Namespace Registry - prefix to IRI base bindings for the cat+ ontology.

All predicates and classes used by the mapper are resolved here, and the
serializer declares exactly these prefixes, so prefixed output can never
disagree with the IRIs that were actually emitted.
"""

import logging
from collections.abc import Iterator, Mapping
from types import MappingProxyType
from typing import TYPE_CHECKING

from rdflib import Graph, Namespace, URIRef
from rdflib.namespace import RDF, XSD

from synth_converter.errors import UnknownPrefix
from .terms import named_node

if TYPE_CHECKING:
    from synth_converter.config.settings import Settings

logger = logging.getLogger(__name__)


# =============================================================================
# NAMESPACE DEFINITIONS
# =============================================================================

# cat+ synthesis ontology
CAT = Namespace("http://example.org/cat#")

# Allotrope result and quality vocabularies
ALLORES = Namespace("http://purl.allotrope.org/ontologies/result#")
ALLOQUAL = Namespace("http://purl.allotrope.org/ontologies/quality#")

# QUDT units and values
QUDT = Namespace("http://qudt.org/schema/qudt/")

# Dublin Core terms (identifier)
PURL = Namespace("http://purl.org/dc/terms/")

# OBO (ChEBI chemical entity)
OBO = Namespace("http://purl.obolibrary.org/obo/")

# schema.org (name)
SCHEMA = Namespace("https://schema.org/")

# Base for synthesized named nodes
CAT_RES = Namespace("http://example.org/cat/resource/")

DEFAULT_NAMESPACES: dict[str, str] = {
    "cat": str(CAT),
    "allores": str(ALLORES),
    "alloqual": str(ALLOQUAL),
    "qudt": str(QUDT),
    "purl": str(PURL),
    "obo": str(OBO),
    "schema": str(SCHEMA),
    "rdf": str(RDF),
    "xsd": str(XSD),
    "catres": str(CAT_RES),
}


# =============================================================================
# NAMESPACE REGISTRY
# =============================================================================


class NamespaceRegistry:
    """
    Fixed mapping of prefix -> base IRI.

    The bindings are copied and frozen at construction; there is no way to
    register a prefix afterwards. Instances are read-only and can be shared
    between conversions.
    """

    def __init__(self, bindings: Mapping[str, str]):
        """
        Initialize the registry.

        Args:
            bindings: Mapping of prefix to base IRI

        Raises:
            InvalidIri: If any base IRI is malformed
        """
        validated = {}
        for prefix, base in bindings.items():
            validated[prefix] = str(named_node(base))

        self._bindings = MappingProxyType(validated)
        logger.debug("Namespace registry ready with %d prefixes", len(validated))

    @classmethod
    def default(cls) -> "NamespaceRegistry":
        """Registry with the built-in cat+ namespace table."""
        return cls(DEFAULT_NAMESPACES)

    @classmethod
    def from_settings(cls, settings: "Settings") -> "NamespaceRegistry":
        """Registry built from the ``namespaces`` configuration section."""
        return cls(settings.namespaces.as_bindings())

    def resolve(self, prefix: str, local_name: str) -> URIRef:
        """
        Resolve a (prefix, local name) pair to a named node.

        Raises:
            UnknownPrefix: If the prefix is not registered
            InvalidIri: If the resulting IRI is malformed
        """
        try:
            base = self._bindings[prefix]
        except KeyError:
            raise UnknownPrefix(prefix, list(self._bindings)) from None

        return named_node(base + local_name)

    @property
    def prefixes(self) -> Mapping[str, str]:
        """Read-only view of every prefix binding."""
        return self._bindings

    def base(self, prefix: str) -> str:
        """Base IRI bound to a prefix."""
        if prefix not in self._bindings:
            raise UnknownPrefix(prefix, list(self._bindings))
        return self._bindings[prefix]

    def bind(self, graph: Graph) -> Graph:
        """
        Bind every registered prefix on an rdflib graph.

        ``replace=True`` makes our binding win over any rdflib default that
        uses the same prefix for a different IRI.
        """
        for prefix, base in self._bindings.items():
            graph.bind(prefix, Namespace(base), override=True, replace=True)
        return graph

    def __contains__(self, prefix: object) -> bool:
        return prefix in self._bindings

    def __iter__(self) -> Iterator[str]:
        return iter(self._bindings)

    def __len__(self) -> int:
        return len(self._bindings)

    def __repr__(self) -> str:
        return f"NamespaceRegistry({dict(self._bindings)!r})"
