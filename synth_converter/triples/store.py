"""
Graph Store - the insertion-ordered triple multiset for one batch.

rdflib's ``Graph`` is a set and gives no ordering guarantee, so the store
keeps its own list of triples and only builds an rdflib graph when the
result is handed to a renderer.
"""

import logging
from collections.abc import Iterator
from typing import NamedTuple

from rdflib import BNode, Graph, URIRef
from rdflib.term import Identifier, Node

from synth_converter.errors import InvalidTriplePosition, StoreFrozen
from .namespaces import NamespaceRegistry
from .terms import is_blank_node, is_literal, is_named_node, is_term

logger = logging.getLogger(__name__)


class Triple(NamedTuple):
    """One graph edge."""

    subject: URIRef | BNode
    predicate: URIRef
    object: Identifier


class GraphStore:
    """
    Append-only sequence of triples.

    No deduplication is performed: inserting the same triple twice stores it
    twice. The mapper mints a fresh blank node for every substructure, so
    correct mapping never produces duplicates anyway.
    """

    def __init__(self):
        self._triples: list[Triple] = []
        self._frozen = False

    def insert(self, subject: Node, predicate: Node, object: Node) -> Triple:
        """
        Append a triple.

        Raises:
            InvalidTriplePosition: If the subject is not a named/blank node,
                the predicate is not a named node, or the object is not a term
            StoreFrozen: If the store has been frozen for serialization
        """
        if self._frozen:
            raise StoreFrozen("Cannot insert into a frozen graph store")

        if not (is_named_node(subject) or is_blank_node(subject)):
            raise InvalidTriplePosition("subject", subject)
        if not is_named_node(predicate):
            raise InvalidTriplePosition("predicate", predicate)
        if not is_term(object):
            raise InvalidTriplePosition("object", object)

        triple = Triple(subject, predicate, object)
        self._triples.append(triple)
        return triple

    def iter_triples(self) -> Iterator[Triple]:
        """Fresh iterator over the triples in insertion order."""
        return iter(tuple(self._triples))

    def __iter__(self) -> Iterator[Triple]:
        return self.iter_triples()

    def __len__(self) -> int:
        return len(self._triples)

    # =========================================================================
    # LIFECYCLE
    # =========================================================================

    def freeze(self) -> "GraphStore":
        """Make the store read-only. Idempotent."""
        self._frozen = True
        return self

    @property
    def frozen(self) -> bool:
        return self._frozen

    # =========================================================================
    # VIEWS
    # =========================================================================

    def subjects(self) -> list[URIRef | BNode]:
        """Distinct subjects in first-seen order."""
        return list(dict.fromkeys(t.subject for t in self._triples))

    def blank_nodes(self) -> list[BNode]:
        """Distinct blank nodes (any position) in first-seen order."""
        seen: dict[BNode, None] = {}
        for triple in self._triples:
            for term in (triple.subject, triple.object):
                if is_blank_node(term):
                    seen.setdefault(term, None)
        return list(seen)

    def literals(self) -> list[Identifier]:
        return [t.object for t in self._triples if is_literal(t.object)]

    def to_rdflib(self, registry: NamespaceRegistry) -> Graph:
        """
        Build an rdflib graph in insertion order with the registry prefixes bound.

        rdflib's own default bindings are disabled so that the only declared
        prefixes are the ones the mapper resolved against.
        """
        graph = Graph(bind_namespaces="none")
        registry.bind(graph)
        for triple in self._triples:
            graph.add(triple)
        logger.debug("Built rdflib graph: %d stored -> %d distinct triples", len(self), len(graph))
        return graph
