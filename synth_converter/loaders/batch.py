"""
Batch Loader - pydantic models for synthesis batch records.

This module provides:
- The Batch Record tree (batch -> actions -> samples -> sample items -> chemical)
- Field aliases matching the camelCase JSON emitted by the upstream parser
- JSON file loading with typed errors
"""

import json
import logging
from enum import Enum
from pathlib import Path
from typing import Any

from pydantic import AliasChoices, BaseModel, ConfigDict, Field, ValidationError

from synth_converter.errors import ConversionError

logger = logging.getLogger(__name__)


class BatchLoadError(ConversionError):
    """Raised when a batch file cannot be read or does not match the schema."""

    def __init__(self, source: str, reason: str):
        super().__init__(f"Cannot load batch from {source}: {reason}")
        self.source = source


# =============================================================================
# ACTION KINDS
# =============================================================================


class ActionName(str, Enum):
    """
    Action kinds with a dedicated ontology class.

    Any other tag resolves to UNRECOGNIZED, which the mapper types with the
    generic registered-action class.
    """

    ADD = "AddAction"
    SET_TEMPERATURE = "setTemperatureAction"
    UNRECOGNIZED = "unrecognized"

    @classmethod
    def from_tag(cls, tag: str) -> "ActionName":
        for member in cls:
            if member is not cls.UNRECOGNIZED and member.value == tag:
                return member
        return cls.UNRECOGNIZED


# =============================================================================
# PYDANTIC MODELS
# =============================================================================


class _Record(BaseModel):
    model_config = ConfigDict(populate_by_name=True, frozen=True, extra="ignore")


class Observation(_Record):
    """A measured quantity: unit plus numeric value."""

    unit: str
    value: float


class ContainerInfo(_Record):
    container_id: str = Field(alias="containerID")
    container_barcode: str = Field(alias="containerBarcode")


class ContainerPosition(_Record):
    """One position of a plate or rack with the quantity dispensed there."""

    position: str
    quantity: Observation


class Chemical(_Record):
    chemical_id: str | None = Field(default=None, alias="chemicalID")
    chemical_name: str | None = Field(default=None, alias="chemicalName")
    cas_number: str | None = Field(default=None, alias="CASNumber")
    smiles: str | None = None
    molecular_mass: Observation | None = Field(default=None, alias="molecularMass")


class SampleItem(_Record):
    """A single vial content inside a sample, holding one chemical."""

    sample_id: str | None = Field(default=None, alias="sampleID")
    role: str | None = None
    expected_datum: Observation | None = Field(default=None, alias="expectedDatum")
    physical_state: str | None = Field(default=None, alias="physicalState")
    internal_bar_code: str | None = Field(default=None, alias="internalBarCode")
    has_chemical: Chemical | None = Field(default=None, alias="hasChemical")


class Sample(_Record):
    """A sample container (vial) grouping sample items."""

    container: ContainerInfo | None = Field(
        default=None, validation_alias=AliasChoices("container", "containerInfo")
    )
    expected_datum: Observation | None = Field(default=None, alias="expectedDatum")
    vial_type: str | None = Field(default=None, alias="vialType")
    vial_id: str | None = Field(default=None, alias="vialID")
    role: str | None = None
    has_sample: list[SampleItem] = Field(default_factory=list, alias="hasSample")


class Action(_Record):
    """One step of a synthesis batch."""

    action_name: str = Field(alias="actionName")
    start_time: str | None = Field(default=None, alias="startTime")
    ending_time: str | None = Field(default=None, alias="endingTime")
    method_name: str | None = Field(default=None, alias="methodName")
    equipment_name: str | None = Field(default=None, alias="equipmentName")
    sub_equipment_name: str | None = Field(default=None, alias="subEquipmentName")
    container_info: ContainerInfo | None = Field(default=None, alias="containerInfo")
    temperature_shaker: Observation | None = Field(default=None, alias="temperatureShaker")
    temperature_tumble_stirrer: Observation | None = Field(
        default=None, alias="temperatureTumbleStirrer"
    )
    speed_shaker: Observation | None = Field(default=None, alias="speedShaker")
    dispense_type: str | None = Field(default=None, alias="dispenseType")
    dispense_state: str | None = Field(default=None, alias="dispenseState")
    has_container_position_and_quantity: list[ContainerPosition] | None = Field(
        default=None, alias="hasContainerPositionAndQuantity"
    )
    has_sample: Sample | None = Field(default=None, alias="hasSample")

    @property
    def kind(self) -> ActionName:
        return ActionName.from_tag(self.action_name)


class Batch(_Record):
    """Root of the record tree."""

    batch_id: str = Field(validation_alias=AliasChoices("batch_id", "batchID"))
    actions: list[Action] = Field(
        default_factory=list, validation_alias=AliasChoices("actions", "Actions")
    )


# =============================================================================
# LOADING
# =============================================================================


def parse_batch(data: dict[str, Any], source: str = "<memory>") -> Batch:
    """
    Validate a decoded JSON object as a Batch.

    Raises:
        BatchLoadError: If the object does not match the schema
    """
    try:
        return Batch.model_validate(data)
    except ValidationError as e:
        raise BatchLoadError(source, f"{e.error_count()} validation error(s)\n{e}") from e


def load_batch(path: Path | str) -> Batch:
    """
    Load one batch from a JSON file.

    Raises:
        BatchLoadError: If the file is missing, not JSON, or invalid
    """
    path = Path(path)
    try:
        data = json.loads(path.read_text(encoding="utf-8"))
    except OSError as e:
        raise BatchLoadError(str(path), e.strerror or str(e)) from e
    except json.JSONDecodeError as e:
        raise BatchLoadError(str(path), f"invalid JSON ({e})") from e

    if not isinstance(data, dict):
        raise BatchLoadError(str(path), "top-level JSON value must be an object")

    batch = parse_batch(data, source=str(path))
    logger.info("Loaded batch '%s' with %d actions from %s", batch.batch_id, len(batch.actions), path.name)
    return batch


def load_all_batches(directory: Path | str, limit: int | None = None) -> list[Batch]:
    """Load every ``*.json`` file in a directory, sorted by name."""
    directory = Path(directory)
    files = sorted(directory.glob("*.json"))
    if limit:
        files = files[:limit]

    logger.info("Found %d batch files in %s", len(files), directory)
    return [load_batch(f) for f in files]
