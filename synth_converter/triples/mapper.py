"""
Batch Mapper - maps a synthesis Batch Record onto the cat+ ontology.

Every step follows the same pattern:
1. mint the node for the current record
2. emit its scalar fields
3. emit optional fields only when present
4. recurse into nested records, one fresh node per element, linked from the parent

The first failure aborts the conversion. Nothing is rolled back; the caller
drops the partially built store.
"""

import logging
from dataclasses import asdict, dataclass
from typing import Literal as TypingLiteral

from rdflib import BNode, URIRef

from synth_converter.errors import ConversionError
from synth_converter.loaders.batch import (
    Action,
    ActionName,
    Batch,
    Chemical,
    ContainerInfo,
    ContainerPosition,
    Observation,
    Sample,
    SampleItem,
)

from .identity import IdentityGenerator
from .namespaces import NamespaceRegistry
from .store import GraphStore
from .terms import date_time_literal, double_literal, literal

logger = logging.getLogger(__name__)

Subject = URIRef | BNode

# Ontology class for each action kind; UNRECOGNIZED falls back to the generic
# Allotrope registered-action class.
ACTION_CLASSES: dict[ActionName, tuple[str, str]] = {
    ActionName.ADD: ("cat", "AddAction"),
    ActionName.SET_TEMPERATURE: ("cat", "setTemperatureAction"),
}
FALLBACK_ACTION_CLASS = ("allores", "AFRE_0000001")


@dataclass
class MappingStats:
    """Counts of mapped substructures for one conversion."""

    actions: int = 0
    fallback_actions: int = 0
    samples: int = 0
    sample_items: int = 0
    chemicals: int = 0
    observations: int = 0
    container_positions: int = 0

    def to_dict(self) -> dict[str, int]:
        return asdict(self)


class BatchMapper:
    """
    Populates a GraphStore from one Batch.

    A mapper owns its identity generator and statistics, so it maps exactly
    one batch. Build a new mapper (and store) for the next conversion.
    """

    def __init__(
        self,
        store: GraphStore,
        registry: NamespaceRegistry,
        identity: IdentityGenerator | None = None,
        action_nodes: TypingLiteral["blank", "named"] = "blank",
    ):
        """
        Initialize the mapper.

        Args:
            store: Empty graph store to populate
            registry: Namespace registry used for every predicate and class
            identity: Identity generator (a fresh one is created if None)
            action_nodes: "blank" for blank action nodes, "named" for
                deterministic ``<resource base><actionName>_<n>`` IRIs
        """
        if action_nodes not in ("blank", "named"):
            raise ValueError(f"action_nodes must be 'blank' or 'named', got {action_nodes!r}")

        self.store = store
        self.registry = registry
        self.identity = identity or IdentityGenerator(registry)
        self.action_nodes = action_nodes
        self.stats = MappingStats()

    # =========================================================================
    # HELPERS
    # =========================================================================

    def _term(self, prefix: str, local_name: str) -> URIRef:
        return self.registry.resolve(prefix, local_name)

    def _insert(self, subject: Subject, prefix: str, local_name: str, obj) -> None:
        self.store.insert(subject, self._term(prefix, local_name), obj)

    def _insert_type(self, subject: Subject, prefix: str, local_name: str) -> None:
        self._insert(subject, "rdf", "type", self._term(prefix, local_name))

    def _insert_string(self, subject: Subject, prefix: str, local_name: str, value: str | None) -> None:
        """Plain string literal, skipped when the value is absent."""
        if value is None:
            return
        self._insert(subject, prefix, local_name, literal(value))

    def _insert_date_time(self, subject: Subject, prefix: str, local_name: str, value: str | None) -> None:
        if value is None:
            return
        self._insert(subject, prefix, local_name, date_time_literal(value))

    # =========================================================================
    # RECORD MAPPERS
    # =========================================================================

    def _insert_container_properties(self, subject: Subject, container: ContainerInfo) -> None:
        self._insert_string(subject, "cat", "containerID", container.container_id)
        self._insert_string(subject, "cat", "containerBarcode", container.container_barcode)

    def _insert_an_observation(
        self, subject: Subject, prefix: str, local_name: str, observation: Observation
    ) -> BNode:
        """Observation node carrying exactly a unit and a value."""
        observation_node = self.identity.new_blank_node()

        self._insert(subject, prefix, local_name, observation_node)
        self._insert(observation_node, "qudt", "unit", literal(observation.unit))
        self._insert(observation_node, "qudt", "value", double_literal(observation.value))

        self.stats.observations += 1
        return observation_node

    def _insert_a_container_position(self, subject: Subject, position: ContainerPosition) -> None:
        position_node = self.identity.new_blank_node()

        self._insert(subject, "cat", "hasContainerPositionAndQuantity", position_node)
        self._insert_type(position_node, "cat", "ContainerPositionAndQuantity")
        self._insert_string(position_node, "allores", "AFR_0002240", position.position)
        self._insert_an_observation(position_node, "qudt", "quantity", position.quantity)

        self.stats.container_positions += 1

    def _insert_a_chemical(self, subject: Subject, chemical: Chemical) -> None:
        chemical_node = self.identity.new_blank_node()

        self._insert(subject, "cat", "has_chemical", chemical_node)
        self._insert_type(chemical_node, "obo", "CHEBI_25367")
        self._insert_string(chemical_node, "purl", "identifier", chemical.chemical_id)
        self._insert_string(chemical_node, "cat", "chemicalName", chemical.chemical_name)
        self._insert_string(chemical_node, "cat", "casNumber", chemical.cas_number)
        self._insert_string(chemical_node, "allores", "AFR_0002295", chemical.smiles)

        if chemical.molecular_mass is not None:
            self._insert_an_observation(chemical_node, "allores", "AFR_0002294", chemical.molecular_mass)

        self.stats.chemicals += 1

    def _insert_a_sample_item(self, subject: Subject, item: SampleItem) -> None:
        item_node = self.identity.new_blank_node()

        self._insert(subject, "cat", "hasSample", item_node)
        self._insert_type(item_node, "cat", "Sample")
        self._insert_string(item_node, "cat", "role", item.role)

        if item.expected_datum is not None:
            self._insert_an_observation(item_node, "cat", "expectedDatum", item.expected_datum)

        self._insert_string(item_node, "purl", "identifier", item.sample_id)
        self._insert_string(item_node, "alloqual", "AFQ_0000111", item.physical_state)
        self._insert_string(item_node, "cat", "internalBarCode", item.internal_bar_code)

        if item.has_chemical is not None:
            try:
                self._insert_a_chemical(item_node, item.has_chemical)
            except ConversionError as e:
                raise e.with_context("chemical")

        self.stats.sample_items += 1

    def _insert_a_sample(self, subject: Subject, sample: Sample) -> None:
        sample_node = self.identity.new_blank_node()

        self._insert(subject, "cat", "hasSample", sample_node)
        self._insert_type(sample_node, "cat", "Sample")

        if sample.container is not None:
            self._insert_container_properties(sample_node, sample.container)

        if sample.expected_datum is not None:
            self._insert_an_observation(sample_node, "cat", "expectedDatum", sample.expected_datum)

        self._insert_string(sample_node, "cat", "vialShape", sample.vial_type)
        self._insert_string(sample_node, "allores", "AFR_0002464", sample.vial_id)
        self._insert_string(sample_node, "cat", "role", sample.role)

        for index, item in enumerate(sample.has_sample):
            try:
                self._insert_a_sample_item(sample_node, item)
            except ConversionError as e:
                raise e.with_context(f"item[{index}] ({item.sample_id or 'no id'})")

        self.stats.samples += 1

    def _insert_action_type(self, subject: Subject, action: Action) -> None:
        """Exactly one rdf:type per action; unknown tags get the fallback class."""
        kind = action.kind
        if kind is ActionName.UNRECOGNIZED:
            logger.debug("No ontology class for action '%s', using fallback", action.action_name)
            self.stats.fallback_actions += 1

        self._insert_type(subject, *ACTION_CLASSES.get(kind, FALLBACK_ACTION_CLASS))

    def _new_action_node(self, action: Action) -> Subject:
        if self.action_nodes == "named":
            return self.identity.new_named_node(action.action_name)
        return self.identity.new_blank_node()

    def _insert_an_action(self, batch_node: Subject, action: Action) -> Subject:
        action_node = self._new_action_node(action)

        self._insert(action_node, "cat", "hasBatch", batch_node)

        self._insert_date_time(action_node, "allores", "AFX_0000622", action.start_time)
        self._insert_date_time(action_node, "allores", "AFR_0002423", action.ending_time)
        self._insert_string(action_node, "allores", "AFR_0001606", action.method_name)
        self._insert_string(action_node, "allores", "AFR_0001723", action.equipment_name)
        self._insert_string(action_node, "cat", "localEquipmentName", action.sub_equipment_name)

        if action.container_info is not None:
            self._insert_container_properties(action_node, action.container_info)

        if action.temperature_shaker is not None:
            self._insert_an_observation(
                action_node, "cat", "temperatureShakerShape", action.temperature_shaker
            )

        if action.temperature_tumble_stirrer is not None:
            self._insert_an_observation(
                action_node, "cat", "temperatureTumbleStirrerShape", action.temperature_tumble_stirrer
            )

        if action.speed_shaker is not None:
            self._insert_an_observation(action_node, "cat", "speedInRPM", action.speed_shaker)

        self._insert_string(action_node, "cat", "dispenseType", action.dispense_type)
        self._insert_string(action_node, "alloqual", "AFQ_0000111", action.dispense_state)

        for index, position in enumerate(action.has_container_position_and_quantity or []):
            try:
                self._insert_a_container_position(action_node, position)
            except ConversionError as e:
                raise e.with_context(f"position[{index}] ({position.position})")

        if action.has_sample is not None:
            try:
                self._insert_a_sample(action_node, action.has_sample)
            except ConversionError as e:
                raise e.with_context("sample")

        self._insert_action_type(action_node, action)

        self.stats.actions += 1
        return action_node

    # =========================================================================
    # ENTRY POINT
    # =========================================================================

    def map_batch(self, batch: Batch) -> BNode:
        """
        Map one batch into the store.

        Args:
            batch: Validated batch record

        Returns:
            The batch node

        Raises:
            ConversionError: On the first failing insertion, with the record
                path in ``context``
        """
        logger.info("BatchMapper: Mapping batch '%s' (%d actions)", batch.batch_id, len(batch.actions))

        try:
            batch_node = self.identity.new_blank_node()

            self._insert_type(batch_node, "cat", "Batch")
            self._insert(batch_node, "schema", "name", literal(batch.batch_id))

            for index, action in enumerate(batch.actions):
                try:
                    self._insert_an_action(batch_node, action)
                except ConversionError as e:
                    raise e.with_context(f"action[{index}] ({action.action_name})")
        except ConversionError as e:
            raise e.with_context(f"batch {batch.batch_id}")

        logger.info(
            "BatchMapper: Generated %d triples, %d blank nodes (%s)",
            len(self.store),
            self.identity.blank_nodes_minted,
            ", ".join(f"{k}={v}" for k, v in self.stats.to_dict().items()),
        )
        return batch_node


def map_batch(
    batch: Batch,
    registry: NamespaceRegistry | None = None,
    action_nodes: TypingLiteral["blank", "named"] = "blank",
) -> tuple[GraphStore, BNode]:
    """Quick function: map a batch into a fresh store."""
    registry = registry or NamespaceRegistry.default()
    store = GraphStore()
    mapper = BatchMapper(store, registry, IdentityGenerator(registry), action_nodes=action_nodes)
    return store, mapper.map_batch(batch)
