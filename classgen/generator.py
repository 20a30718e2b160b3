# File: classgen/generator.py
"""
ClassGen - Generation Entry Points
====================================
Connects the pieces:

    Model file → Options → Checks → ClassBuilder per table → Files

Entry points:

    generate_one        one table → text, optionally saved
    build_models        many tables → plain (pure) classes, returns count
    build_interfaces    many tables → interfaces, returns count
    generate_from_file  model file → ``GenerationReport``

Every table gets a fresh ``ClassBuilder`` and its own derived
``BuilderOption``; nothing one run does is visible to the next.

Error handling strategy:
    - ``build_models`` / ``build_interfaces`` propagate the first failure.
    - ``generate_from_file`` isolates failures per table: one bad table or
      one unwritable file does not stop the batch.  Files already written
      stay on disk.
"""

from __future__ import annotations

import logging
import time
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any, Dict, List, Optional, Sequence

from classgen.builder import ClassBuilder
from classgen.conversion import TypeResolver
from classgen.exporters import resolve_output_path, save_text
from classgen.loader import load_models
from classgen.models import BuilderOption, TableInfo
from classgen.utils import Timer, count_lines
from classgen.validators import ValidationResult, validate_full

# ---------------------------------------------------------------------------
# Logger
# ---------------------------------------------------------------------------
logger: logging.Logger = logging.getLogger("classgen.generator")


# ---------------------------------------------------------------------------
# Generation report
# ---------------------------------------------------------------------------


@dataclass(frozen=False, slots=True)
class GenerationStepMetric:
    """Timing and outcome for a single pipeline step."""

    step_name: str = ""
    success: bool = True
    elapsed_seconds: float = 0.0
    detail: str = ""


@dataclass(frozen=False, slots=True)
class GenerationReport:
    """Outcome of ``generate_from_file``."""

    model_file: str = ""
    output_directory: str = ""

    # Metrics
    tables_processed: int = 0
    files_written: int = 0
    files_skipped: int = 0
    total_lines: int = 0
    elapsed_seconds: float = 0.0

    paths: List[str] = field(default_factory=list)
    # Generated text by class name, filled when files are not written
    texts: Dict[str, str] = field(default_factory=dict)
    step_metrics: List[GenerationStepMetric] = field(default_factory=list)

    # Problems
    warnings: List[str] = field(default_factory=list)
    validation_warnings: List[str] = field(default_factory=list)
    input_errors: List[str] = field(default_factory=list)
    generation_errors: List[str] = field(default_factory=list)
    export_errors: List[str] = field(default_factory=list)

    @property
    def success(self) -> bool:
        return not (self.input_errors or self.generation_errors or self.export_errors)

    def summary(self) -> str:
        """Return a human-readable summary string."""
        lines: List[str] = []
        status: str = "SUCCESS" if self.success else "FAILED"
        lines.append("=" * 60)
        lines.append("  ClassGen - Generation Report")
        lines.append("=" * 60)
        lines.append(f"  Status:           {status}")
        lines.append(f"  Model file:       {self.model_file}")
        lines.append(f"  Output:           {self.output_directory}")
        lines.append(f"  Tables processed: {self.tables_processed}")
        lines.append(f"  Files written:    {self.files_written}")
        lines.append(f"  Files kept:       {self.files_skipped}")
        lines.append(f"  Total lines:      {self.total_lines:,}")
        lines.append(f"  Total time:       {self.elapsed_seconds:.3f}s")

        if self.step_metrics:
            lines.append("-" * 60)
            lines.append("  Pipeline Steps:")
            for step in self.step_metrics:
                icon: str = "+" if step.success else "x"
                lines.append(
                    f"    {icon} {step.step_name:<20s} "
                    f"{step.elapsed_seconds:>7.3f}s  {step.detail}"
                )

        sections = (
            ("Input Errors", self.input_errors),
            ("Validation Warnings", self.validation_warnings),
            ("Type Warnings", self.warnings),
            ("Generation Errors", self.generation_errors),
            ("Export Errors", self.export_errors),
        )
        for title, items in sections:
            if items:
                lines.append("-" * 60)
                lines.append(f"  {title} ({len(items)}):")
                for item in items:
                    lines.append(f"    - {item}")

        lines.append("=" * 60)
        return "\n".join(lines)


# ---------------------------------------------------------------------------
# Single table
# ---------------------------------------------------------------------------


def generate_one(
    table: TableInfo,
    option: Optional[BuilderOption] = None,
    *,
    resolver: Optional[TypeResolver] = None,
    save: bool = False,
    ext: Optional[str] = None,
    overwrite: bool = True,
    use_display_name: bool = True,
    log: Optional[logging.Logger] = None,
) -> str:
    """
    Generate the source text for *table*; write it too when *save* is set.
    """
    builder: ClassBuilder = ClassBuilder(
        table, option, resolver=resolver, log=log
    )
    text: str = builder.execute()
    if save:
        builder.save(ext, overwrite=overwrite, use_display_name=use_display_name)
    return text


# ---------------------------------------------------------------------------
# Batches
# ---------------------------------------------------------------------------


def _build_many(
    tables: Sequence[TableInfo],
    option: BuilderOption,
    resolver: Optional[TypeResolver],
) -> int:
    count: int = 0
    for table in tables:
        builder: ClassBuilder = ClassBuilder(
            table, option.clone(), resolver=resolver
        )
        builder.execute()
        builder.save(None, overwrite=True, use_display_name=False)
        count += 1
    return count


def build_models(
    tables: Sequence[TableInfo],
    option: Optional[BuilderOption] = None,
    *,
    resolver: Optional[TypeResolver] = None,
) -> int:
    """
    Write one plain class per table and return the number of files.

    Pure mode is forced: batch models never carry attributes.
    """
    shared: BuilderOption = (option or BuilderOption()).derive(pure=True)
    count: int = _build_many(tables, shared, resolver)
    logger.info("Built %d model class(es) in %s.", count, shared.output)
    return count


def build_interfaces(
    tables: Sequence[TableInfo],
    option: Optional[BuilderOption] = None,
    *,
    resolver: Optional[TypeResolver] = None,
) -> int:
    """Write one interface per table and return the number of files."""
    shared: BuilderOption = (option or BuilderOption()).derive(interface=True)
    count: int = _build_many(tables, shared, resolver)
    logger.info("Built %d interface(s) in %s.", count, shared.output)
    return count


# ---------------------------------------------------------------------------
# Model file pipeline
# ---------------------------------------------------------------------------


def _finalise_report(report: GenerationReport, start: float) -> GenerationReport:
    report.elapsed_seconds = time.perf_counter() - start
    if report.success:
        logger.info(
            "Generation complete: %d table(s), %d file(s) written in %.3fs.",
            report.tables_processed,
            report.files_written,
            report.elapsed_seconds,
        )
    else:
        logger.error(
            "Generation finished with errors: %d input, %d generation, "
            "%d export.",
            len(report.input_errors),
            len(report.generation_errors),
            len(report.export_errors),
        )
    return report


def _run_table(
    table: TableInfo,
    option: BuilderOption,
    resolver: TypeResolver,
    report: GenerationReport,
    *,
    write: bool,
    ext: Optional[str],
    overwrite: bool,
    use_display_name: bool,
) -> None:
    builder: ClassBuilder = ClassBuilder(table, option, resolver=resolver)
    try:
        text: str = builder.execute()
    except Exception as exc:
        msg: str = f"{table.name}: {type(exc).__name__}: {exc}"
        report.generation_errors.append(msg)
        logger.error("Generation failed for %s", msg, exc_info=True)
        return

    report.tables_processed += 1
    report.total_lines += count_lines(text)
    report.warnings.extend(f"{table.name}: {w}" for w in builder.warnings)

    if not write:
        report.texts[builder.class_name or table.name] = text
        return

    path: Path = resolve_output_path(
        table,
        builder.class_name or table.name,
        option,
        ext=ext,
        use_display_name=use_display_name,
    )
    try:
        written: bool = save_text(path, text, overwrite=overwrite)
    except OSError as exc:
        report.export_errors.append(f"{path}: {exc}")
        logger.error("Could not write %s: %s", path, exc)
        return

    report.paths.append(str(path))
    if written:
        report.files_written += 1
    else:
        report.files_skipped += 1


def generate_from_file(
    model_path: Optional[Path] = None,
    *,
    overrides: Optional[Dict[str, Any]] = None,
    extra_usings: Sequence[str] = (),
    batch: bool = False,
    write: bool = True,
    ext: Optional[str] = None,
    overwrite: bool = True,
    use_display_name: bool = False,
) -> GenerationReport:
    """
    Full pipeline: load model file → derive options → check → generate.

    Args:
        model_path: Model file; the working directory is searched when None.
        overrides: Option values applied on top of the model file's.
        extra_usings: Namespaces imported in addition to the resolved usings.
        batch: Force pure mode (or keep interface mode) like
            ``build_models`` / ``build_interfaces``.
        write: Save files; when False the texts land in ``report.texts``.
        ext: File extension (see ``normalise_extension``).
        overwrite: Replace existing files.
        use_display_name: Name class files after the table display name.
    """
    start: float = time.perf_counter()
    report: GenerationReport = GenerationReport()

    # Step 1: load
    with Timer("load_model") as t_load:
        try:
            schema, option = load_models(model_path)
            if overrides:
                option = option.derive(**overrides)
            if extra_usings:
                option = option.with_usings(*extra_usings)
        except (FileNotFoundError, ValueError) as exc:
            report.input_errors.append(str(exc))
            report.step_metrics.append(GenerationStepMetric(
                step_name="Load Model File",
                success=False,
                elapsed_seconds=t_load.elapsed,
                detail=str(exc),
            ))
            return _finalise_report(report, start)

    if batch and not option.interface:
        option = option.derive(pure=True)

    report.model_file = schema.source_file or ""
    report.output_directory = str(Path(option.output).resolve())
    report.step_metrics.append(GenerationStepMetric(
        step_name="Load Model File",
        success=True,
        elapsed_seconds=t_load.elapsed,
        detail=f"{schema.table_count} table(s)",
    ))

    # Step 2: checks
    resolver: TypeResolver = TypeResolver.from_schema(schema)
    with Timer("validation") as t_check:
        result: ValidationResult = validate_full(schema, option, resolver)
    report.validation_warnings.extend(str(w) for w in result.warnings)
    report.step_metrics.append(GenerationStepMetric(
        step_name="Check Model",
        success=True,
        elapsed_seconds=t_check.elapsed,
        detail=f"{len(result.warnings)} warning(s)",
    ))

    # Step 3: generate
    with Timer("generate") as t_gen:
        for table in schema.tables:
            _run_table(
                table,
                option.clone(),
                resolver,
                report,
                write=write,
                ext=ext,
                overwrite=overwrite,
                use_display_name=use_display_name and not batch,
            )
    report.step_metrics.append(GenerationStepMetric(
        step_name="Generate",
        success=not (report.generation_errors or report.export_errors),
        elapsed_seconds=t_gen.elapsed,
        detail=f"{report.tables_processed}/{schema.table_count} table(s)",
    ))

    return _finalise_report(report, start)


__all__: List[str] = [
    "GenerationStepMetric",
    "GenerationReport",
    "generate_one",
    "build_models",
    "build_interfaces",
    "generate_from_file",
]
