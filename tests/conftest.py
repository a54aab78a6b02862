"""
Shared fixtures: batch records and a ready-to-use conversion context.
"""

import copy

import pytest
from rdflib import Graph, Literal

from synth_converter.config.settings import Settings
from synth_converter.loaders import Batch, parse_batch
from synth_converter.triples import GraphStore, IdentityGenerator, NamespaceRegistry

FULL_BATCH = {
    "batchID": "23",
    "Actions": [
        {
            "actionName": "setTemperatureAction",
            "speedShaker": {"value": 152, "unit": "rpm"},
            "startTime": "2024-07-25T12:00:00",
            "endingTime": "2024-07-25T12:15:00",
            "methodName": "set_temperature",
            "equipmentName": "Chemspeed SWING XL",
            "subEquipmentName": "heater",
            "containerInfo": {"containerID": "1", "containerBarcode": "1"},
            "temperatureTumbleStirrer": {"value": 25, "unit": "°C"},
            "temperatureShaker": {"value": 25, "unit": "°C"},
        },
        {
            "actionName": "AddAction",
            "startTime": "2024-07-25T12:03:31",
            "endingTime": "2024-07-25T12:03:50",
            "methodName": "addition",
            "equipmentName": "GDU-V",
            "subEquipmentName": "GDU-V",
            "dispenseType": "volume",
            "dispenseState": "Liquid",
            "containerInfo": {"containerID": "1", "containerBarcode": "1"},
            "hasContainerPositionAndQuantity": [
                {"position": "A1", "quantity": {"value": 0.026, "unit": "mg"}},
                {"position": "B1", "quantity": {"value": 0.014, "unit": "mg"}},
            ],
            "hasSample": {
                "containerInfo": {"containerID": "19", "containerBarcode": "19"},
                "vialType": "storage vial",
                "vialID": "17",
                "role": "reagent",
                "expectedDatum": {"value": 5, "unit": "mg"},
                "hasSample": [
                    {
                        "sampleID": "124",
                        "role": "reagent",
                        "internalBarCode": "1",
                        "physicalState": "Liquid",
                        "expectedDatum": {"value": 5, "unit": "mg"},
                        "hasChemical": {
                            "chemicalID": "134",
                            "chemicalName": "Sodium tetrafluoroborate",
                            "CASNumber": "13755-29-8",
                            "smiles": "[B-](F)(F)(F)F.[Na+]",
                            "molecularMass": {"value": 109.794, "unit": "g/mol"},
                        },
                    }
                ],
            },
        },
        {
            "actionName": "shakeAction",
            "startTime": "2024-07-25T12:20:00",
            "speedShaker": {"value": 300, "unit": "rpm"},
        },
    ],
}


@pytest.fixture
def full_batch_data() -> dict:
    return copy.deepcopy(FULL_BATCH)


@pytest.fixture
def full_batch(full_batch_data) -> Batch:
    return parse_batch(full_batch_data)


@pytest.fixture
def minimal_batch() -> Batch:
    """One AddAction with only a start time."""
    return parse_batch(
        {
            "batchID": "B-1",
            "Actions": [{"actionName": "AddAction", "startTime": "2024-01-01T00:00:00Z"}],
        }
    )


@pytest.fixture
def registry() -> NamespaceRegistry:
    return NamespaceRegistry.default()


@pytest.fixture
def store() -> GraphStore:
    return GraphStore()


@pytest.fixture
def identity(registry) -> IdentityGenerator:
    return IdentityGenerator(registry)


@pytest.fixture
def settings() -> Settings:
    return Settings()


def normalized(graph: Graph) -> Graph:
    """
    Copy of a graph with every literal rebuilt from its Python value.

    Parsers normalize lexical forms (``25.0`` vs ``2.5e+01``), so graphs read
    back from text are compared by value rather than by lexical form.
    """
    out = Graph()
    for s, p, o in graph:
        if isinstance(o, Literal) and o.value is not None:
            o = Literal(o.value, datatype=o.datatype, lang=o.language)
        out.add((s, p, o))
    return out


@pytest.fixture
def normalize():
    return normalized
