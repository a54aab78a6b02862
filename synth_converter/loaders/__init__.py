"""Loaders package for synthesis batch records."""

from .batch import (
    Action,
    ActionName,
    Batch,
    BatchLoadError,
    Chemical,
    ContainerInfo,
    ContainerPosition,
    Observation,
    Sample,
    SampleItem,
    load_all_batches,
    load_batch,
    parse_batch,
)

__all__ = [
    "Action",
    "ActionName",
    "Batch",
    "BatchLoadError",
    "Chemical",
    "ContainerInfo",
    "ContainerPosition",
    "Observation",
    "Sample",
    "SampleItem",
    "load_all_batches",
    "load_batch",
    "parse_batch",
]
