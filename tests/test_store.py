"""
Unit tests for the graph store.
"""

import pytest
from rdflib import BNode, Literal, URIRef
from rdflib.namespace import RDF

from synth_converter.errors import ConversionError, InvalidTriplePosition, StoreFrozen
from synth_converter.triples import CAT, SCHEMA, GraphStore, Triple


@pytest.fixture
def batch_node():
    return BNode("b0")


class TestInsert:
    def test_returns_triple(self, store, batch_node):
        triple = store.insert(batch_node, RDF.type, CAT.Batch)

        assert triple == Triple(batch_node, RDF.type, CAT.Batch)
        assert triple.subject is batch_node
        assert len(store) == 1

    def test_named_subject(self, store):
        store.insert(URIRef("http://example.org/cat/resource/AddAction_1"), RDF.type, CAT.AddAction)
        assert len(store) == 1

    def test_literal_subject_rejected(self, store):
        with pytest.raises(InvalidTriplePosition) as exc_info:
            store.insert(Literal("B-1"), RDF.type, CAT.Batch)

        assert exc_info.value.position == "subject"
        assert len(store) == 0

    @pytest.mark.parametrize("predicate", [BNode("p"), Literal("name"), "https://schema.org/name"])
    def test_predicate_must_be_named(self, store, batch_node, predicate):
        with pytest.raises(InvalidTriplePosition, match="predicate"):
            store.insert(batch_node, predicate, Literal("B-1"))

    def test_object_must_be_a_term(self, store, batch_node):
        with pytest.raises(InvalidTriplePosition, match="object"):
            store.insert(batch_node, SCHEMA.name, "B-1")

    def test_position_error_is_conversion_error(self, store):
        with pytest.raises(ConversionError):
            store.insert(Literal("x"), RDF.type, CAT.Batch)

    def test_duplicates_are_kept(self, store, batch_node):
        store.insert(batch_node, SCHEMA.name, Literal("B-1"))
        store.insert(batch_node, SCHEMA.name, Literal("B-1"))

        assert len(store) == 2


class TestIteration:
    def test_insertion_order(self, store):
        nodes = [BNode(f"b{i}") for i in range(5)]
        for node in reversed(nodes):
            store.insert(node, RDF.type, CAT.Sample)

        assert [t.subject for t in store.iter_triples()] == list(reversed(nodes))

    def test_restartable(self, store, batch_node):
        store.insert(batch_node, RDF.type, CAT.Batch)
        store.insert(batch_node, SCHEMA.name, Literal("B-1"))

        assert list(store.iter_triples()) == list(store.iter_triples())
        assert list(store) == list(store.iter_triples())

    def test_views(self, store):
        batch, action, obs = BNode("b0"), BNode("b1"), BNode("b2")
        store.insert(batch, RDF.type, CAT.Batch)
        store.insert(action, CAT.hasBatch, batch)
        store.insert(action, CAT.speedInRPM, obs)
        store.insert(obs, CAT.unit, Literal("rpm"))

        assert store.subjects() == [batch, action, obs]
        assert store.blank_nodes() == [batch, action, obs]
        assert store.literals() == [Literal("rpm")]


class TestFreeze:
    def test_frozen_store_rejects_inserts(self, store, batch_node):
        store.insert(batch_node, RDF.type, CAT.Batch)
        store.freeze()

        assert store.frozen
        with pytest.raises(StoreFrozen):
            store.insert(batch_node, SCHEMA.name, Literal("B-1"))
        assert len(store) == 1

    def test_freeze_is_idempotent(self, store):
        assert store.freeze().freeze() is store


class TestToRdflib:
    def test_binds_registry_prefixes_only(self, store, registry, batch_node):
        store.insert(batch_node, RDF.type, CAT.Batch)
        graph = store.to_rdflib(registry)

        prefixes = {prefix for prefix, _ in graph.namespaces()}
        assert set(registry.prefixes) <= prefixes
        assert "owl" not in prefixes
        assert "foaf" not in prefixes

    def test_duplicates_collapse_in_rdflib_graph(self, store, registry, batch_node):
        store.insert(batch_node, SCHEMA.name, Literal("B-1"))
        store.insert(batch_node, SCHEMA.name, Literal("B-1"))

        assert len(store.to_rdflib(registry)) == 1
