"""
Term Model - the three RDF term kinds used in a batch graph.

Terms are plain rdflib identifiers: named nodes are ``URIRef``, blank nodes
are ``BNode`` and literals are ``Literal``. rdflib already gives them
structural equality, so two named nodes built from the same IRI compare
equal wherever they were created.

Blank nodes are minted by ``IdentityGenerator.new_blank_node``.
"""

import re
from typing import Any

from rdflib import BNode, Literal, URIRef
from rdflib.namespace import XSD
from rdflib.term import Identifier

from synth_converter.errors import InvalidIri

# Characters that may never appear in an IRI reference (RFC 3987 excludes them
# from every production).
_FORBIDDEN_IRI_CHARS = re.compile(r'[<>"{}|\\^`\s]')
_SCHEME = re.compile(r"^[A-Za-z][A-Za-z0-9+.\-]*:")


# =============================================================================
# CONSTRUCTORS
# =============================================================================


def named_node(iri: str) -> URIRef:
    """
    Build a named node from an absolute IRI.

    Args:
        iri: Absolute IRI string

    Returns:
        URIRef for the IRI

    Raises:
        InvalidIri: If the IRI has no scheme or contains forbidden characters
    """
    if not isinstance(iri, str) or not iri:
        raise InvalidIri(str(iri), "IRI must be a non-empty string")

    if not _SCHEME.match(iri):
        raise InvalidIri(iri, "IRI is not absolute (missing scheme)")

    if match := _FORBIDDEN_IRI_CHARS.search(iri):
        raise InvalidIri(iri, f"forbidden character {match.group()!r}")

    return URIRef(iri)


def literal(value: Any, datatype: URIRef | str | None = None) -> Literal:
    """
    Build a literal, optionally typed.

    The lexical form is kept exactly as given; rdflib normalization is off so
    that what goes in is what gets serialized.
    """
    if datatype is None:
        return Literal(value, normalize=False)

    if not isinstance(datatype, URIRef):
        datatype = named_node(datatype)

    return Literal(value, datatype=datatype, normalize=False)


def date_time_literal(value: str) -> Literal:
    """xsd:dateTime literal; the input string is passed through verbatim."""
    return literal(value, XSD.dateTime)


def double_literal(value: float) -> Literal:
    """xsd:double literal for a measured value."""
    return Literal(float(value), datatype=XSD.double)


# =============================================================================
# KIND CHECKS
# =============================================================================


def is_named_node(term: Any) -> bool:
    return isinstance(term, URIRef)


def is_blank_node(term: Any) -> bool:
    return isinstance(term, BNode)


def is_literal(term: Any) -> bool:
    return isinstance(term, Literal)


def is_term(term: Any) -> bool:
    """True for any of the three term kinds."""
    return isinstance(term, Identifier) and (
        is_named_node(term) or is_blank_node(term) or is_literal(term)
    )
