# File: jdlschema/__init__.py
"""
jdlschema — JDL to Schema Compiler
==================================

Parses JHipster-style JDL text (entities, enums, relationship blocks) into a
normalized, immutable schema that downstream code generators consume.

Architecture overview::

    ┌──────────────┐     ┌────────────────┐     ┌──────────────────┐
    │  CLI / Entry │────▶│ SchemaCompiler │────▶│    parse_jdl     │
    │   (cli.py)   │     │  (compiler.py) │     │   (parser.py)    │
    └──────────────┘     └───────┬────────┘     └────────┬─────────┘
                                 │                       │
                    ┌────────────┼────────────┐    ┌─────┴──────────┐
                    ▼            ▼            ▼    ▼                ▼
             ┌──────────┐ ┌───────────┐ ┌────────┐ ┌──────────┐ ┌─────────────┐
             │validators│ │  config   │ │ naming │ │extractors│ │relationships│
             └──────────┘ └───────────┘ └────────┘ └──────────┘ └─────────────┘

Usage::

    # As a library
    from jdlschema import parse_jdl
    schema = parse_jdl(open("app.jdl").read())
    schema.get_fields("Order")

    # From the command line
    python -m jdlschema app.jdl -o schema.json

Public API:
    - parse_jdl / parse_file — JDL text → ParsedSchema
    - ParsedSchema, EntityField — schema models
    - SchemaCompiler        — parse + validate + render pipeline
    - GeneratorConfig       — settings model, see load_config
    - pluralize / singularize / resource_plural — naming helpers
    - validate_full         — schema validation entry point
"""

from __future__ import annotations

__version__: str = "1.0.0"
__license__: str = "MIT"

from jdlschema.models import (
    EntityField,
    GeneratorConfig,
    OutputFormat,
    ParsedSchema,
    RelationshipPayloadMode,
    RelationshipType,
)
from jdlschema.naming import (
    lc_first,
    pluralize,
    resource_plural,
    singularize,
    uc_first,
)
from jdlschema.parser import parse_file, parse_jdl
from jdlschema.validators import ValidationResult, validate_full
from jdlschema.config import load_config
from jdlschema.compiler import (
    CompilationReport,
    SchemaCompiler,
    build_output_document,
    render_document,
)

# ---------------------------------------------------------------------------
# Public API surface
# ---------------------------------------------------------------------------

__all__: list[str] = [
    # Version info
    "__version__",
    "__license__",
    # Parsing
    "parse_jdl",
    "parse_file",
    # Models
    "EntityField",
    "GeneratorConfig",
    "OutputFormat",
    "ParsedSchema",
    "RelationshipPayloadMode",
    "RelationshipType",
    # Naming
    "lc_first",
    "uc_first",
    "pluralize",
    "singularize",
    "resource_plural",
    # Validation
    "validate_full",
    "ValidationResult",
    # Pipeline
    "load_config",
    "SchemaCompiler",
    "CompilationReport",
    "build_output_document",
    "render_document",
]
