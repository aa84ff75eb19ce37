# File: jdlschema/parser.py
"""
jdlschema - JDL Parser
======================
Single entry point turning JDL text into an immutable ``ParsedSchema``.

Workflow::

    1. Strip comments.
    2. Extract enum blocks.
    3. Extract entity blocks (+ audit fields for ``@EnableAudit``).
    4. Ensure every entity has an ``id`` field at position 0.
    5. Extract relationship blocks into records.
    6. Materialize relationship fields onto both entities.
    7. Freeze into ``ParsedSchema``.

``parse_jdl`` is a pure function of its input: no I/O, no shared state,
and equal input gives an equal schema.
"""

from __future__ import annotations

import logging
from pathlib import Path
from typing import Dict, List, Optional

from jdlschema.extractors import (
    ensure_id_fields,
    extract_entities,
    extract_enums,
    extract_relationships,
)
from jdlschema.models import EntityField, ParsedSchema, RelationshipRecord
from jdlschema.relationships import materialize_relationships
from jdlschema.scanner import strip_comments
from jdlschema.validators import ValidationResult

# ---------------------------------------------------------------------------
# Logger
# ---------------------------------------------------------------------------
logger: logging.Logger = logging.getLogger("jdlschema.parser")


def parse_jdl(
    text: str,
    diagnostics: Optional[ValidationResult] = None,
) -> ParsedSchema:
    """
    Parse JDL *text* into a ``ParsedSchema``.

    Malformed constructs are skipped rather than raised. Pass a
    ``ValidationResult`` as *diagnostics* to find out what was skipped; the
    returned schema is the same either way.
    """
    clean: str = strip_comments(text or "")

    enums: Dict[str, List[str]] = extract_enums(clean, diagnostics)
    entities: Dict[str, List[EntityField]] = extract_entities(clean, diagnostics)

    injected: List[str] = ensure_id_fields(entities)
    if injected:
        logger.debug("Injected 'id' into %d entit(y/ies): %s", len(injected), injected)

    records: List[RelationshipRecord] = extract_relationships(clean, diagnostics)
    added: int = materialize_relationships(entities, records, diagnostics)

    schema: ParsedSchema = ParsedSchema(entities=entities, enums=enums)
    logger.info(
        "Parsed JDL: %d entities, %d enums, %d relationship statement(s) → "
        "%d relationship field(s).",
        len(schema.entities),
        len(schema.enums),
        len(records),
        added,
    )
    return schema


def parse_file(
    path: Path,
    diagnostics: Optional[ValidationResult] = None,
) -> ParsedSchema:
    """
    Read a UTF-8 JDL file and parse it.

    Raises:
        FileNotFoundError: If *path* does not exist.
        ValueError: If *path* is not a regular file.
    """
    path = Path(path)
    if not path.exists():
        raise FileNotFoundError(f"JDL file not found: {path}")
    if not path.is_file():
        raise ValueError(f"JDL path is not a file: {path}")

    logger.debug("Reading JDL from %s", path)
    return parse_jdl(path.read_text(encoding="utf-8"), diagnostics)


# ---------------------------------------------------------------------------
# Module-level exports
# ---------------------------------------------------------------------------

__all__: List[str] = [
    "parse_jdl",
    "parse_file",
]

logger.debug("jdlschema.parser loaded — %d public symbols.", len(__all__))
