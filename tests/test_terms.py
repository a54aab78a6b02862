"""
Unit tests for the term model and the error hierarchy.
"""

import pytest
from rdflib import BNode, Literal, URIRef
from rdflib.namespace import XSD

from synth_converter.errors import ConversionError, InvalidIri
from synth_converter.triples.terms import (
    date_time_literal,
    double_literal,
    is_blank_node,
    is_literal,
    is_named_node,
    is_term,
    literal,
    named_node,
)


class TestNamedNode:
    """Tests for named_node()."""

    def test_absolute_iri(self):
        node = named_node("http://example.org/cat#Batch")
        assert node == URIRef("http://example.org/cat#Batch")
        assert is_named_node(node)

    def test_urn_is_absolute(self):
        assert named_node("urn:uuid:1234") == URIRef("urn:uuid:1234")

    def test_structural_equality(self):
        assert named_node("https://schema.org/name") == named_node("https://schema.org/name")

    @pytest.mark.parametrize("iri", ["", "Batch", "cat:Batch x", "//example.org/a"])
    def test_rejects_relative_or_empty(self, iri):
        with pytest.raises(InvalidIri):
            named_node(iri)

    @pytest.mark.parametrize("char", [" ", "<", ">", '"', "{", "}", "|", "\\", "^", "`", "\n"])
    def test_rejects_forbidden_characters(self, char):
        with pytest.raises(InvalidIri, match="forbidden character"):
            named_node(f"http://example.org/a{char}b")

    def test_invalid_iri_is_value_error(self):
        with pytest.raises(ValueError):
            named_node("not an iri")

    def test_non_string(self):
        with pytest.raises(InvalidIri):
            named_node(None)


class TestLiterals:
    """Tests for the literal constructors."""

    def test_plain_literal(self):
        lit = literal("B-1")
        assert lit == Literal("B-1")
        assert lit.datatype is None

    def test_typed_literal_from_string_datatype(self):
        lit = literal("42", "http://www.w3.org/2001/XMLSchema#integer")
        assert lit.datatype == XSD.integer

    def test_typed_literal_rejects_bad_datatype(self):
        with pytest.raises(InvalidIri):
            literal("42", "integer")

    def test_date_time_passes_lexical_form_through(self):
        lit = date_time_literal("2024-01-01T00:00:00Z")
        assert str(lit) == "2024-01-01T00:00:00Z"
        assert lit.datatype == XSD.dateTime

    def test_date_time_is_not_validated(self):
        lit = date_time_literal("yesterday")
        assert str(lit) == "yesterday"
        assert lit.datatype == XSD.dateTime

    def test_double(self):
        lit = double_literal(25)
        assert lit.datatype == XSD.double
        assert lit.value == 25.0


class TestKindChecks:
    def test_kinds_are_exclusive(self):
        named, blank, lit = URIRef("http://example.org/a"), BNode("b0"), Literal("x")

        assert [is_named_node(t) for t in (named, blank, lit)] == [True, False, False]
        assert [is_blank_node(t) for t in (named, blank, lit)] == [False, True, False]
        assert [is_literal(t) for t in (named, blank, lit)] == [False, False, True]
        assert all(is_term(t) for t in (named, blank, lit))

    def test_plain_values_are_not_terms(self):
        assert not is_term("http://example.org/a")
        assert not is_term(42)


class TestConversionError:
    def test_context_is_prepended(self):
        error = ConversionError("boom")
        error.with_context("item[0]").with_context("action[1] (AddAction)")

        assert error.context == ["action[1] (AddAction)", "item[0]"]
        assert str(error) == "action[1] (AddAction) > item[0]: boom"

    def test_without_context(self):
        assert str(ConversionError("boom")) == "boom"
