# File: jdlschema/compiler.py
"""
jdlschema - Compilation Pipeline (Orchestrator)
===============================================
Connects every phase together:

    JDL text → Parse → Validation → Output document → File

The ``SchemaCompiler`` class provides both a programmatic API and the
backend for the CLI.

Workflow::

    1. Read the JDL file (``compile_file`` only).
    2. Parse into a ``ParsedSchema``, collecting parse diagnostics.
    3. Run the validation pipeline (validators.py).
    4. Build the output document and render it as JSON or YAML.
    5. ``emit`` writes it to ``config.output_file`` unless unchanged.

Error handling strategy:
    - Parse diagnostics are surfaced as warnings; they never stop the run.
    - Validation errors stop the pipeline when ``fail_on_errors`` is set.
    - Read and write failures are recorded in the report, not raised.
"""

from __future__ import annotations

import json
import logging
import time
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any, Dict, List, Mapping, Optional, Union

import yaml

from jdlschema.models import GeneratorConfig, OutputFormat, ParsedSchema
from jdlschema.naming import resource_plural
from jdlschema.parser import parse_jdl
from jdlschema.relationships import relationship_metadata
from jdlschema.utils import Timer, count_lines, read_file, write_if_changed
from jdlschema.validators import ValidationResult, validate_full

# ---------------------------------------------------------------------------
# Logger
# ---------------------------------------------------------------------------
logger: logging.Logger = logging.getLogger("jdlschema.compiler")


# ---------------------------------------------------------------------------
# Compilation report
# ---------------------------------------------------------------------------


@dataclass(frozen=False, slots=True)
class CompileStepMetric:
    """Timing and outcome for a single pipeline step."""

    step_name: str = ""
    success: bool = True
    elapsed_seconds: float = 0.0
    detail: str = ""


@dataclass(frozen=False, slots=True)
class CompilationReport:
    """
    Report produced by ``SchemaCompiler.compile_text()`` / ``compile_file()``.

    ``document`` and ``rendered`` stay None when the pipeline stopped before
    the output step.
    """

    success: bool = False
    jdl_file: str = ""
    output_file: str = ""
    output_format: str = OutputFormat.JSON.value

    # Metrics
    total_entities: int = 0
    total_enums: int = 0
    total_fields: int = 0
    total_relationship_fields: int = 0
    total_lines: int = 0
    total_elapsed_seconds: float = 0.0

    # Outcome of emit()
    written: bool = False
    skipped: bool = False

    # Sub-reports
    step_metrics: List[CompileStepMetric] = field(default_factory=list)
    parse_warnings: List[str] = field(default_factory=list)
    validation_errors: List[str] = field(default_factory=list)
    validation_warnings: List[str] = field(default_factory=list)
    compilation_errors: List[str] = field(default_factory=list)

    # Artifacts
    schema: Optional[ParsedSchema] = None
    validation: Optional[ValidationResult] = None
    document: Optional[Dict[str, Any]] = None
    rendered: Optional[str] = None

    def summary(self) -> str:
        """Plain-text report: counts, one line per step, then any problems."""
        file_state: str = (
            "written" if self.written else "unchanged" if self.skipped else "-"
        )
        lines: List[str] = [
            f"jdlschema Compilation Report: {'SUCCESS' if self.success else 'FAILED'}",
            f"  input   {self.jdl_file or '<text>'}",
            f"  output  {self.output_file or '<stdout>'} "
            f"({self.output_format}, {file_state})",
            f"  schema  {self.total_entities} entities, {self.total_enums} enums, "
            f"{self.total_fields} fields ({self.total_relationship_fields} "
            f"relationship), {self.total_lines} document lines",
            f"  time    {self.total_elapsed_seconds:.3f}s",
        ]

        for step in self.step_metrics:
            lines.append(
                f"  [{'ok' if step.success else 'FAIL':<4}] {step.step_name:<16s} "
                f"{step.elapsed_seconds:.3f}s  {step.detail}".rstrip()
            )

        sections = (
            ("Parse Warnings", self.parse_warnings),
            ("Validation Errors", self.validation_errors),
            ("Validation Warnings", self.validation_warnings),
            ("Compilation Errors", self.compilation_errors),
        )
        for title, items in sections:
            if items:
                lines.append(f"  {title} ({len(items)}):")
                lines.extend(f"    {item}" for item in items)

        return "\n".join(lines)


# ---------------------------------------------------------------------------
# Output document
# ---------------------------------------------------------------------------


def _enum_value(value: Any) -> Any:
    return getattr(value, "value", value)


def build_output_document(
    schema: ParsedSchema,
    config: GeneratorConfig,
) -> Dict[str, Any]:
    """
    The document handed to downstream generators.

    ``entities`` and ``enums`` are the parsed schema itself, with
    relationship fields annotated by ``relationship_metadata``;
    ``resources`` maps each entity to its REST path; ``options`` passes the
    renderer settings through untouched.
    """
    document: Dict[str, Any] = schema.to_dict()
    for name, fields in schema.entities.items():
        for f, entry in zip(fields, document["entities"][name]):
            entry.update(relationship_metadata(schema.entities, name, f))
    document["resources"] = {
        name: "/" + resource_plural(name, config.plural_overrides)
        for name in schema.entities
    }
    document["options"] = {
        "pluralOverrides": dict(config.plural_overrides),
        "relationshipPayloadMode": _enum_value(config.relationship_payload_mode),
    }
    return document


def render_document(
    document: Mapping[str, Any],
    fmt: Union[OutputFormat, str] = OutputFormat.JSON,
    indent: int = 2,
) -> str:
    """
    Serialize *document* as JSON or YAML, always ending with a newline.

    An *indent* of 0 gives compact single-line JSON.

    Raises:
        ValueError: For an unknown format.
    """
    fmt_value: str = str(_enum_value(fmt)).lower()

    if fmt_value == OutputFormat.JSON.value:
        text: str = json.dumps(
            document,
            indent=indent if indent > 0 else None,
            ensure_ascii=False,
        )
        return text + "\n"

    if fmt_value == OutputFormat.YAML.value:
        return yaml.safe_dump(
            dict(document),
            sort_keys=False,
            allow_unicode=True,
            default_flow_style=False,
            indent=max(indent, 2),
        )

    raise ValueError(f"Unknown output format: {fmt!r}")


# ---------------------------------------------------------------------------
# SchemaCompiler — Master orchestrator
# ---------------------------------------------------------------------------


class SchemaCompiler:
    """
    Pipeline orchestrator for JDL compilation.

    Usage::

        compiler = SchemaCompiler()
        report = compiler.compile_file(Path("app.jdl"), config)
        if report.success:
            compiler.emit(report, config)
        print(report.summary())

    The compiler holds no per-run state and is reusable.
    """

    def __init__(self, *, fail_on_errors: bool = True) -> None:
        """
        Args:
            fail_on_errors: If True, validation errors stop the pipeline
                            before the output document is built.
        """
        self._fail_on_errors: bool = fail_on_errors
        logger.debug("SchemaCompiler initialised: fail_on_errors=%s.", fail_on_errors)

    # -----------------------------------------------------------------
    # Public: compile from file
    # -----------------------------------------------------------------

    def compile_file(
        self,
        path: Path,
        config: Optional[GeneratorConfig] = None,
    ) -> CompilationReport:
        """Load *path* and run the pipeline on its contents."""
        config = config if config is not None else GeneratorConfig()
        path = Path(path)
        report: CompilationReport = self._new_report(config)
        report.jdl_file = str(path)

        start: float = time.perf_counter()
        text: Optional[str] = None
        error: Optional[str] = None
        with Timer("load_jdl") as t_load:
            if not path.is_file():
                error = f"JDL file not found: {path}"
            else:
                try:
                    text = read_file(path)
                except (OSError, UnicodeDecodeError) as exc:
                    error = f"Cannot read {path}: {exc}"

        if error is not None or text is None:
            report.compilation_errors.append(error or f"Cannot read {path}")
            report.step_metrics.append(CompileStepMetric(
                step_name="Load JDL File",
                success=False,
                elapsed_seconds=t_load.elapsed,
                detail=error or "",
            ))
            logger.error("%s", error)
            return self._finalise_report(report, time.perf_counter() - start)

        report.step_metrics.append(CompileStepMetric(
            step_name="Load JDL File",
            success=True,
            elapsed_seconds=t_load.elapsed,
            detail=f"{count_lines(text)} lines from {path.name}",
        ))
        return self._run_pipeline(text, config, report, start)

    # -----------------------------------------------------------------
    # Public: compile from text
    # -----------------------------------------------------------------

    def compile_text(
        self,
        text: str,
        config: Optional[GeneratorConfig] = None,
    ) -> CompilationReport:
        """Run the pipeline on in-memory JDL *text*."""
        config = config if config is not None else GeneratorConfig()
        report: CompilationReport = self._new_report(config)
        return self._run_pipeline(text, config, report, time.perf_counter())

    # -----------------------------------------------------------------
    # Public: write the rendered document
    # -----------------------------------------------------------------

    def emit(
        self,
        report: CompilationReport,
        config: Optional[GeneratorConfig] = None,
    ) -> bool:
        """
        Write ``report.rendered`` to ``config.output_file``.

        Returns True when the file was (re)written. Nothing happens when
        there is no output file or nothing was rendered.
        """
        config = config if config is not None else GeneratorConfig()
        if report.rendered is None or not config.output_file:
            return False

        target: Path = Path(config.output_file)
        report.output_file = str(target)
        with Timer("emit") as t:
            try:
                written: bool = write_if_changed(target, report.rendered, force=config.force)
            except OSError as exc:
                written = False
                report.compilation_errors.append(f"Cannot write {target}: {exc}")
                report.success = False

        report.written = written
        report.skipped = not written and report.success
        report.step_metrics.append(CompileStepMetric(
            step_name="Write Output",
            success=report.success,
            elapsed_seconds=t.elapsed,
            detail="written" if written else ("unchanged" if report.skipped else "failed"),
        ))
        report.total_elapsed_seconds += t.elapsed
        return written

    # -----------------------------------------------------------------
    # Internal: master pipeline
    # -----------------------------------------------------------------

    def _new_report(self, config: GeneratorConfig) -> CompilationReport:
        report: CompilationReport = CompilationReport()
        report.output_format = str(_enum_value(config.output_format))
        report.output_file = config.output_file or ""
        return report

    def _run_pipeline(
        self,
        text: str,
        config: GeneratorConfig,
        report: CompilationReport,
        start: float,
    ) -> CompilationReport:
        schema: ParsedSchema = self._step_parse(text, report)

        validation_ok: bool = self._step_validate(schema, config, report)
        if not validation_ok and self._fail_on_errors:
            return self._finalise_report(report, time.perf_counter() - start)

        self._step_render(schema, config, report)
        return self._finalise_report(report, time.perf_counter() - start)

    # -----------------------------------------------------------------
    # Pipeline step: Parse
    # -----------------------------------------------------------------

    def _step_parse(self, text: str, report: CompilationReport) -> ParsedSchema:
        diagnostics: ValidationResult = ValidationResult()
        with Timer("parse") as t:
            schema: ParsedSchema = parse_jdl(text, diagnostics)

        report.schema = schema
        report.total_entities = len(schema.entities)
        report.total_enums = len(schema.enums)
        report.total_fields = schema.total_fields
        report.total_relationship_fields = schema.total_relationships
        report.parse_warnings.extend(str(item) for item in diagnostics.all_items)

        for item in diagnostics.all_items:
            logger.warning("%s", item)

        report.step_metrics.append(CompileStepMetric(
            step_name="Parse JDL",
            success=True,
            elapsed_seconds=t.elapsed,
            detail=(
                f"{report.total_entities} entities, {report.total_enums} enums"
                + (f", {len(diagnostics)} skipped construct(s)" if len(diagnostics) else "")
            ),
        ))
        return schema

    # -----------------------------------------------------------------
    # Pipeline step: Validation
    # -----------------------------------------------------------------

    def _step_validate(
        self,
        schema: ParsedSchema,
        config: GeneratorConfig,
        report: CompilationReport,
    ) -> bool:
        """Returns True if validation produced no errors."""
        with Timer("validation") as t:
            result: ValidationResult = validate_full(schema, config)

        report.validation = result
        report.validation_errors.extend(str(e) for e in result.errors)
        report.validation_warnings.extend(str(w) for w in result.warnings)

        if result.has_errors:
            detail: str = f"{result.error_count} error(s)"
        elif result.has_warnings:
            detail = f"{result.warning_count} warning(s)"
        else:
            detail = "all checks passed"

        report.step_metrics.append(CompileStepMetric(
            step_name="Validate Schema",
            success=result.is_valid,
            elapsed_seconds=t.elapsed,
            detail=detail,
        ))

        if result.has_errors:
            for err in result.errors:
                logger.error("%s", err)
            return False

        for warn in result.warnings:
            logger.warning("%s", warn)
        return True

    # -----------------------------------------------------------------
    # Pipeline step: Output document
    # -----------------------------------------------------------------

    def _step_render(
        self,
        schema: ParsedSchema,
        config: GeneratorConfig,
        report: CompilationReport,
    ) -> None:
        with Timer("render") as t:
            document: Dict[str, Any] = build_output_document(schema, config)
            rendered: str = render_document(document, config.output_format, config.indent)

        report.document = document
        report.rendered = rendered
        report.total_lines = count_lines(rendered)
        report.step_metrics.append(CompileStepMetric(
            step_name="Render Document",
            success=True,
            elapsed_seconds=t.elapsed,
            detail=f"{report.output_format}, {report.total_lines:,} lines",
        ))

    # -----------------------------------------------------------------
    # Internal: finalise report
    # -----------------------------------------------------------------

    def _finalise_report(
        self,
        report: CompilationReport,
        total_elapsed: float,
    ) -> CompilationReport:
        """Set final status and timing on the report."""
        report.total_elapsed_seconds = total_elapsed
        has_errors: bool = bool(report.compilation_errors) or (
            bool(report.validation_errors) and self._fail_on_errors
        )
        report.success = not has_errors and report.rendered is not None

        if report.success:
            logger.info(
                "Compilation succeeded: %d entities, %d enums in %.3fs.",
                report.total_entities,
                report.total_enums,
                total_elapsed,
            )
        else:
            logger.error("Compilation failed in %.3fs.", total_elapsed)
        return report


# ---------------------------------------------------------------------------
# Module-level exports
# ---------------------------------------------------------------------------

__all__: List[str] = [
    "CompileStepMetric",
    "CompilationReport",
    "build_output_document",
    "render_document",
    "SchemaCompiler",
]

logger.debug("jdlschema.compiler loaded — %d public symbols.", len(__all__))
