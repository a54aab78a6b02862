"""
Triple Serializer - renders a completed GraphStore as Turtle or JSON-LD.

Renderers are pluggable: anything with ``name``, ``extension``, ``mime`` and
``render(graph)`` can be registered. The serializer always hands them an
rdflib graph carrying exactly the registry's prefix map.
"""

import logging
from collections import Counter
from collections.abc import Mapping
from pathlib import Path
from typing import Any, Protocol

from rdflib import Graph

from synth_converter.errors import SerializationFailure, UnsupportedFormat

from .namespaces import NamespaceRegistry
from .store import GraphStore
from .terms import is_blank_node, is_literal

logger = logging.getLogger(__name__)


# =============================================================================
# RENDERERS
# =============================================================================


class Renderer(Protocol):
    """Turns an rdflib graph into text."""

    name: str
    extension: str
    mime: str

    def render(self, graph: Graph) -> str: ...


class TurtleRenderer:
    """Indented Turtle using the graph's bound prefixes."""

    name = "turtle"
    extension = ".ttl"
    mime = "text/turtle"

    def render(self, graph: Graph) -> str:
        return graph.serialize(format="turtle")


class JsonLdRenderer:
    """JSON-LD grouped by subject, compacted against the prefix map."""

    name = "json-ld"
    extension = ".jsonld"
    mime = "application/ld+json"

    def __init__(self, context: Mapping[str, str] | None = None, indent: int = 2):
        self.context = dict(context) if context else None
        self.indent = indent

    def render(self, graph: Graph) -> str:
        context = self.context
        if context is None:
            context = {prefix: str(ns) for prefix, ns in graph.namespaces()}
        return graph.serialize(format="json-ld", context=context, indent=self.indent)


ALIASES = {
    "ttl": "turtle",
    "jsonld": "json-ld",
}


# =============================================================================
# TRIPLE SERIALIZER
# =============================================================================


class TripleSerializer:
    """
    Drives renderers over a GraphStore.

    The store is frozen before rendering, so nothing can be inserted between
    two serializations and the output stays byte-identical.
    """

    def __init__(
        self,
        registry: NamespaceRegistry,
        renderers: list[Renderer] | None = None,
        jsonld_indent: int = 2,
    ):
        """
        Initialize the serializer.

        Args:
            registry: Namespace registry used during mapping
            renderers: Renderers to register (Turtle and JSON-LD if None)
            jsonld_indent: Indentation of the default JSON-LD renderer
        """
        self.registry = registry
        if renderers is None:
            renderers = [
                TurtleRenderer(),
                JsonLdRenderer(context=registry.prefixes, indent=jsonld_indent),
            ]
        self._renderers = {r.name: r for r in renderers}

    @property
    def formats(self) -> list[str]:
        return list(self._renderers)

    def renderer(self, fmt: str) -> Renderer:
        """
        Look up the renderer for a format name or alias.

        Raises:
            UnsupportedFormat: If no renderer handles the format
        """
        name = ALIASES.get(fmt.lower(), fmt.lower())
        if name not in self._renderers:
            raise UnsupportedFormat(fmt, sorted(self._renderers) + sorted(ALIASES))
        return self._renderers[name]

    def serialize(self, store: GraphStore, fmt: str = "turtle") -> str:
        """
        Render the store in the requested format.

        Raises:
            UnsupportedFormat: If the format is unknown
            SerializationFailure: If the renderer fails
        """
        renderer = self.renderer(fmt)
        store.freeze()
        graph = store.to_rdflib(self.registry)

        try:
            content = renderer.render(graph)
        except Exception as e:
            raise SerializationFailure(renderer.name, str(e)) from e

        logger.debug("Rendered %d triples as %s (%d chars)", len(graph), renderer.name, len(content))
        return content

    def to_turtle(self, store: GraphStore) -> str:
        return self.serialize(store, "turtle")

    def to_jsonld(self, store: GraphStore) -> str:
        return self.serialize(store, "json-ld")

    def to_file(self, store: GraphStore, path: Path | str, format: str = "turtle") -> Path:
        """
        Serialize the store to a file.

        Args:
            store: Completed graph store
            path: Output file path (parent directories are created)
            format: Output format (turtle, json-ld)

        Returns:
            The written path
        """
        path = Path(path)
        content = self.serialize(store, format)

        try:
            path.parent.mkdir(parents=True, exist_ok=True)
            path.write_text(content, encoding="utf-8")
        except (OSError, UnicodeEncodeError) as e:
            raise SerializationFailure(format, f"cannot write {path}: {e}") from e

        logger.info("Serialized %d triples to %s (%s)", len(store), path, format)
        return path

    def get_statistics(self, store: GraphStore) -> dict[str, Any]:
        """
        Get statistics about the store.

        Returns:
            Dictionary with triple, node and predicate counts
        """
        predicates: Counter[str] = Counter()
        literal_count = 0

        for triple in store.iter_triples():
            predicates[self._compact(triple.predicate)] += 1
            if is_literal(triple.object):
                literal_count += 1

        return {
            "total_triples": len(store),
            "unique_subjects": len(store.subjects()),
            "blank_nodes": len(store.blank_nodes()),
            "named_subjects": sum(1 for s in store.subjects() if not is_blank_node(s)),
            "literals": literal_count,
            "unique_predicates": len(predicates),
            "predicates": dict(predicates.most_common(20)),
            "namespaces": dict(self.registry.prefixes),
        }

    def _compact(self, iri: str) -> str:
        """prefix:local form when the IRI falls under a registered base."""
        best = None
        for prefix, base in self.registry.prefixes.items():
            if iri.startswith(base) and (best is None or len(base) > len(best[1])):
                best = (prefix, base)
        if best is None:
            return str(iri)
        return f"{best[0]}:{iri[len(best[1]):]}"
