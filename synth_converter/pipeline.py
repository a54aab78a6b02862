"""
Synth Pipeline - batch files in, Turtle / JSON-LD out.

Orchestrates the flow: batch loading → graph construction → serialization.
Each batch gets its own GraphStore and IdentityGenerator; only the namespace
registry is shared.
"""

import json
import logging
import re
from dataclasses import dataclass, field
from datetime import datetime
from pathlib import Path
from typing import Any

from synth_converter.config.settings import Settings, get_settings
from synth_converter.errors import ConversionError
from synth_converter.loaders import Batch, load_batch
from synth_converter.triples import (
    BatchMapper,
    GraphStore,
    IdentityGenerator,
    MappingStats,
    NamespaceRegistry,
    Renderer,
    TripleSerializer,
)
from synth_converter.utils.logging import add_file_handler, remove_file_handler

logger = logging.getLogger(__name__)


# =============================================================================
# SINGLE CONVERSION
# =============================================================================


@dataclass
class ConversionResult:
    """Graph and renderings for one batch."""

    batch_id: str
    store: GraphStore
    registry: NamespaceRegistry
    stats: MappingStats
    renderings: dict[str, str] = field(default_factory=dict)

    @property
    def turtle(self) -> str | None:
        return self.renderings.get("turtle")

    @property
    def jsonld(self) -> str | None:
        return self.renderings.get("json-ld")


def convert_batch(
    batch: Batch,
    settings: Settings | None = None,
    registry: NamespaceRegistry | None = None,
    formats: list[str] | None = None,
) -> ConversionResult:
    """
    Convert one batch with a fresh store and identity generator.

    Args:
        batch: Validated batch record
        settings: Configuration (global settings if None)
        registry: Namespace registry to share across conversions (built from
            settings if None)
        formats: Formats to render (configured formats if None)

    Returns:
        ConversionResult with the completed store and its renderings

    Raises:
        ConversionError: On the first mapping or serialization failure
    """
    settings = settings or get_settings()
    registry = registry or NamespaceRegistry.from_settings(settings)
    if formats is None:
        formats = list(settings.output.formats)

    store = GraphStore()
    identity = IdentityGenerator(registry, resource_prefix=settings.identity.resource_prefix)
    mapper = BatchMapper(store, registry, identity, action_nodes=settings.identity.action_nodes)
    mapper.map_batch(batch)

    serializer = TripleSerializer(registry, jsonld_indent=settings.output.jsonld_indent)
    result = ConversionResult(
        batch_id=batch.batch_id,
        store=store,
        registry=registry,
        stats=mapper.stats,
    )
    for fmt in formats:
        result.renderings[serializer.renderer(fmt).name] = serializer.serialize(store, fmt)

    return result


# =============================================================================
# PIPELINE RESULT
# =============================================================================


@dataclass
class PipelineResult:
    """Outcome of one pipeline run over a set of batch files."""

    # Timing
    started_at: datetime = field(default_factory=datetime.now)
    completed_at: datetime | None = None
    duration_seconds: float = 0.0

    # Batches
    batches_loaded: int = 0
    batches_converted: int = 0
    batches_failed: dict[str, str] = field(default_factory=dict)  # source -> error

    # Triples
    triples_generated: int = 0
    mapping_stats: dict[str, int] = field(default_factory=dict)

    # Output
    run_directory: str | None = None
    output_files: list[str] = field(default_factory=list)

    def finalize(self) -> None:
        """Stamp the end time."""
        self.completed_at = datetime.now()
        self.duration_seconds = (self.completed_at - self.started_at).total_seconds()

    def add_stats(self, stats: MappingStats) -> None:
        for key, value in stats.to_dict().items():
            self.mapping_stats[key] = self.mapping_stats.get(key, 0) + value

    def to_dict(self) -> dict[str, Any]:
        """JSON-ready form written to metadata.json."""
        return {
            "timing": {
                "started_at": self.started_at.isoformat(),
                "completed_at": self.completed_at.isoformat() if self.completed_at else None,
                "duration_seconds": round(self.duration_seconds, 2),
            },
            "batches": {
                "loaded": self.batches_loaded,
                "converted": self.batches_converted,
                "failed": self.batches_failed,
            },
            "triples": {
                "total": self.triples_generated,
                "by_structure": self.mapping_stats,
            },
            "output": {
                "run_directory": self.run_directory,
                "files": self.output_files,
            },
        }

    def print_summary(self) -> None:
        """Human-readable run report on stdout."""
        print("\n" + "=" * 60)
        print("📊 CONVERSION SUMMARY")
        print("=" * 60)

        print(f"\n⏱️  Duration: {self.duration_seconds:.2f}s")
        print(f"📁 Batches: {self.batches_converted}/{self.batches_loaded} converted")

        if self.batches_failed:
            print(f"   ⚠️  Failed: {len(self.batches_failed)}")
            for source, error in self.batches_failed.items():
                print(f"      • {source}: {error}")

        print(f"\n🔗 Triples: {self.triples_generated} generated")
        for key, value in self.mapping_stats.items():
            print(f"   • {key}: {value}")

        if self.output_files:
            print(f"\n💾 Output files ({len(self.output_files)}):")
            for path in self.output_files:
                print(f"   • {path}")

        print("=" * 60)


# =============================================================================
# PIPELINE
# =============================================================================


class Pipeline:
    """
    synth-converter Pipeline

    Orchestrates:
    1. Loading batch records from JSON
    2. Mapping each batch onto the cat+ ontology
    3. Serializing to Turtle/JSON-LD in a per-run directory

    Usage:
        pipeline = Pipeline()
        result = pipeline.execute()
        result.print_summary()
    """

    def __init__(
        self,
        settings: Settings | None = None,
        input_dir: str | Path | None = None,
        output_dir: str | Path | None = None,
    ):
        """
        Initialize the pipeline.

        Args:
            settings: Settings to run with (global settings if None)
            input_dir: Override directory for batch JSON files
            output_dir: Parent directory for run folders (overrides settings)
        """
        self.settings = settings or get_settings()

        self.input_dir = Path(input_dir) if input_dir else self.settings.paths.input_dir
        self.output_dir = Path(output_dir) if output_dir else self.settings.paths.output_dir

        # Read-only after construction, shared by every conversion
        self.registry = NamespaceRegistry.from_settings(self.settings)
        self.serializer = TripleSerializer(
            self.registry, jsonld_indent=self.settings.output.jsonld_indent
        )

        logger.info("Pipeline ready: %s -> %s (%d prefixes)", self.input_dir, self.output_dir, len(self.registry))

    def discover_inputs(self, limit: int | None = None) -> list[Path]:
        """Batch JSON files in the input directory, sorted by name."""
        files = sorted(self.input_dir.glob("*.json"))
        if limit:
            files = files[:limit]
        logger.info("Found %d batch files in %s", len(files), self.input_dir)
        return files

    def convert(self, batch: Batch, formats: list[str] | None = None) -> ConversionResult:
        """Convert one batch against the pipeline's registry."""
        return convert_batch(batch, self.settings, registry=self.registry, formats=formats)

    def _create_run_directory(self) -> Path:
        """
        Make a fresh synth_run_<timestamp> folder, suffixed when the name is taken.

        Returns:
            Path to the run directory (e.g., output/synth_run_20260203_120000/)
        """
        timestamp = datetime.now().strftime("%Y%m%d_%H%M%S")
        run_dir = self.output_dir / f"synth_run_{timestamp}"
        suffix = 1
        while run_dir.exists():
            run_dir = self.output_dir / f"synth_run_{timestamp}_{suffix}"
            suffix += 1
        run_dir.mkdir(parents=True)
        return run_dir

    def _save_metadata(self, run_dir: Path, result: PipelineResult, renderers: list[Renderer]) -> str:
        metadata_path = run_dir / "metadata.json"
        metadata = result.to_dict()
        metadata["run_info"] = {
            "action_nodes": self.settings.identity.action_nodes,
            "namespaces": dict(self.registry.prefixes),
            "formats": {
                renderer.name: {"extension": renderer.extension, "mime": renderer.mime}
                for renderer in renderers
            },
        }

        with open(metadata_path, "w", encoding="utf-8") as f:
            json.dump(metadata, f, indent=2, ensure_ascii=False, default=str)

        logger.info("Run metadata: %s", metadata_path)
        return str(metadata_path)

    @staticmethod
    def _output_stem(batch: Batch, source: Path, taken: set[str]) -> str:
        """
        File stem for a batch, unique within the run.

        Derived from the batch ID (the source file name when the ID has no
        usable characters); a clash gets a numeric suffix.
        """
        base = re.sub(r"[^A-Za-z0-9_.\-]", "_", batch.batch_id).strip("._") or source.stem
        stem = base
        suffix = 2
        while stem in taken:
            stem = f"{base}_{suffix}"
            suffix += 1
        taken.add(stem)
        return stem

    def execute(
        self,
        paths: list[str | Path] | None = None,
        formats: list[str] | None = None,
        limit: int | None = None,
        enable_file_logging: bool = True,
    ) -> PipelineResult:
        """
        Convert every batch file and write the renderings into a new run folder.

        A batch that fails to load, convert or be written is recorded in
        ``batches_failed`` and its partial graph is discarded; the remaining
        batches are still converted. Output stems are unique within the run.

        Args:
            paths: Batch files to convert (input directory if None)
            formats: Override output formats
            limit: Maximum batches to process (None = all)
            enable_file_logging: Save execution log to the run directory

        Returns:
            PipelineResult describing converted and failed batches
        """
        result = PipelineResult()
        if formats is None:
            formats = list(self.settings.output.formats)
        run_dir = None
        stems: set[str] = set()
        renderers: list[Renderer] = []

        try:
            run_dir = self._create_run_directory()
            result.run_directory = str(run_dir)
            logger.info("Writing run into %s", run_dir)

            if enable_file_logging:
                add_file_handler(run_dir / "execution.log")

            # Unknown formats abort the run before any batch is touched
            renderers = [self.serializer.renderer(fmt) for fmt in formats]

            sources = [Path(p) for p in paths] if paths else self.discover_inputs(limit=limit)
            result.batches_loaded = len(sources)

            for source in sources:
                logger.info("--- Converting %s ---", source.name)
                try:
                    batch = load_batch(source)
                    conversion = self.convert(batch, formats=[])

                    stem = self._output_stem(batch, source, stems)
                    for renderer in renderers:
                        out_path = self.serializer.to_file(
                            conversion.store, run_dir / f"{stem}{renderer.extension}", renderer.name
                        )
                        result.output_files.append(str(out_path))
                except ConversionError as e:
                    logger.error("Batch %s failed: %s", source.name, e)
                    result.batches_failed[str(source)] = str(e)
                    continue

                result.batches_converted += 1
                result.triples_generated += len(conversion.store)
                result.add_stats(conversion.stats)

        except Exception as e:
            logger.exception("Run aborted: %s", e)
            raise

        finally:
            result.finalize()

            if run_dir and self.settings.output.save_metadata:
                result.output_files.append(self._save_metadata(run_dir, result, renderers))

            if enable_file_logging:
                remove_file_handler()
                log_path = run_dir / "execution.log" if run_dir else None
                if log_path and log_path.exists():
                    result.output_files.append(str(log_path))

        return result
