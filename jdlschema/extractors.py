# File: jdlschema/extractors.py
"""
jdlschema - Block Extractors
============================
Pulls ``enum``, ``entity`` and ``relationship`` blocks out of comment-free
JDL text.

The extractors are lenient: a line that does not fit the expected shape is
dropped and, when a diagnostics collector is supplied, reported there as a
warning. Line matching returns a ``LineMatch`` so callers can tell a dropped
line from a parsed one without exceptions.

Supported shapes::

    enum Status { ACTIVE, INACTIVE }

    @EnableAudit
    entity Order {
        reference String required
        placedAt Instant
    }

    relationship ManyToOne {
        Order{customer(name)} to Customer
    }
"""

from __future__ import annotations

import logging
import re
from dataclasses import dataclass
from typing import Any, Dict, List, Optional, Tuple

from jdlschema.models import (
    ID_FIELD_NAME,
    ID_FIELD_TYPE,
    EntityField,
    RelationshipRecord,
)
from jdlschema.scanner import BraceCursor
from jdlschema.validators import ValidationResult

# ---------------------------------------------------------------------------
# Logger
# ---------------------------------------------------------------------------
logger: logging.Logger = logging.getLogger("jdlschema.extractors")

# ---------------------------------------------------------------------------
# Patterns
# ---------------------------------------------------------------------------

_ENUM_RE: re.Pattern[str] = re.compile(
    r"\benum\s+([A-Za-z_]\w*)\s*\{\s*([^}]*)\}"
)
_ENTITY_RE: re.Pattern[str] = re.compile(
    r"((?:@[A-Za-z_]\w*(?:\([^)]*\))?\s*)*)\bentity\s+([A-Za-z_]\w*)\s*\{\s*([^}]*)\}"
)
_RELATIONSHIP_BLOCK_RE: re.Pattern[str] = re.compile(
    r"\brelationship\s+([A-Za-z]+)\s*\{"
)

_ENUM_VALUE_SPLIT_RE: re.Pattern[str] = re.compile(r"[,;\n]")
_LINE_SPLIT_RE: re.Pattern[str] = re.compile(r"\r?\n")
_STATEMENT_SPLIT_RE: re.Pattern[str] = re.compile(r"\r?\n|,")

_FIELD_LINE_RE: re.Pattern[str] = re.compile(
    r"^([A-Za-z_]\w*)\s+([A-Za-z_]\w*),?(?:\s+(.*))?$"
)
_REQUIRED_RE: re.Pattern[str] = re.compile(r"\brequired\b", re.IGNORECASE)
_AUDIT_MARKER_RE: re.Pattern[str] = re.compile(r"@EnableAudit\b", re.IGNORECASE)

_STATEMENT_RE: re.Pattern[str] = re.compile(
    r"^([A-Za-z_]\w*)(?:\{([^}]*)\})?\s+to\s+([A-Za-z_]\w*)(?:\{([^}]*)\})?;?$"
)
_INJECTED_FIELD_RE: re.Pattern[str] = re.compile(r"^([A-Za-z_]\w*)(?:\([^)]*\))?$")

# Audit fields in injection order: (name, type token)
AUDIT_FIELDS: Tuple[Tuple[str, str], ...] = (
    ("createdBy", "String"),
    ("createdDate", "Instant"),
    ("lastModifiedBy", "String"),
    ("lastModifiedDate", "Instant"),
)



# ---------------------------------------------------------------------------
# Match result
# ---------------------------------------------------------------------------


@dataclass(frozen=True, slots=True)
class LineMatch:
    """Outcome of matching one source line: ``value`` is None when unmatched."""

    source: str
    value: Optional[Any] = None

    @property
    def matched(self) -> bool:
        return self.value is not None


# ---------------------------------------------------------------------------
# Enums
# ---------------------------------------------------------------------------


def extract_enums(
    text: str,
    diagnostics: Optional[ValidationResult] = None,
) -> Dict[str, List[str]]:
    """
    Return ``{EnumName: [values...]}`` for every enum block.

    Values are split on commas, semicolons and newlines; empty tokens are
    dropped. A block with no values is not recorded. A repeated name
    overwrites the earlier declaration.
    """
    enums: Dict[str, List[str]] = {}

    for m in _ENUM_RE.finditer(text):
        name: str = m.group(1).strip()
        values: List[str] = [
            v.strip() for v in _ENUM_VALUE_SPLIT_RE.split(m.group(2)) if v.strip()
        ]
        if not values:
            logger.debug("Enum '%s' has no values — dropped.", name)
            if diagnostics is not None:
                diagnostics.add_warning(
                    "EMPTY_ENUM",
                    f"Enum '{name}' declares no values and was ignored.",
                    {"enum": name},
                )
            continue
        if name in enums and diagnostics is not None:
            diagnostics.add_warning(
                "DUPLICATE_ENUM",
                f"Enum '{name}' is declared more than once; the last "
                f"declaration wins.",
                {"enum": name},
            )
        enums[name] = values

    logger.debug("Extracted %d enum(s).", len(enums))
    return enums


# ---------------------------------------------------------------------------
# Entities
# ---------------------------------------------------------------------------


def match_field_line(line: str) -> LineMatch:
    """Match ``fieldName TypeToken [flags...]`` into an ``EntityField``."""
    m = _FIELD_LINE_RE.match(line)
    if m is None:
        return LineMatch(line)

    flags: str = (m.group(3) or "").strip()
    required: bool = bool(_REQUIRED_RE.search(flags))
    return LineMatch(
        line,
        EntityField(
            name=m.group(1).strip(),
            type=m.group(2).strip(),
            required=required,
            nullable=not required,
            is_relationship=False,
        ),
    )


def add_audit_fields(fields: List[EntityField]) -> int:
    """
    Append the four audit fields, skipping names already present.

    Returns how many were added; calling twice adds nothing the second time.
    """
    added: int = 0
    for name, type_token in AUDIT_FIELDS:
        if any(f.name.lower() == name.lower() for f in fields):
            continue
        fields.append(EntityField(
            name=name,
            type=type_token,
            required=False,
            nullable=True,
            is_relationship=False,
            is_audit=True,
            read_only=True,
        ))
        added += 1
    return added


def extract_entities(
    text: str,
    diagnostics: Optional[ValidationResult] = None,
) -> Dict[str, List[EntityField]]:
    """
    Return ``{EntityName: [fields...]}`` for every entity block.

    Annotations in front of ``entity`` are collected; ``@EnableAudit``
    triggers audit-field injection. ``id`` fields are *not* added here, see
    ``ensure_id_fields``.
    """
    entities: Dict[str, List[EntityField]] = {}

    for m in _ENTITY_RE.finditer(text):
        annotations: str = (m.group(1) or "").strip()
        name: str = m.group(2).strip()
        body: str = m.group(3) or ""
        fields: List[EntityField] = []

        for raw_line in _LINE_SPLIT_RE.split(body):
            line: str = raw_line.strip()
            if not line:
                continue
            outcome: LineMatch = match_field_line(line)
            if outcome.matched:
                fields.append(outcome.value)
                continue
            logger.debug("Entity '%s': unmatched line %r dropped.", name, line)
            if diagnostics is not None:
                diagnostics.add_warning(
                    "UNMATCHED_FIELD_LINE",
                    f"Line '{line}' in entity '{name}' is not "
                    f"'fieldName Type [flags]' and was ignored.",
                    {"entity": name, "line": line},
                )

        if _AUDIT_MARKER_RE.search(annotations):
            added: int = add_audit_fields(fields)
            logger.debug("Entity '%s': %d audit field(s) injected.", name, added)

        if name in entities and diagnostics is not None:
            diagnostics.add_warning(
                "DUPLICATE_ENTITY",
                f"Entity '{name}' is declared more than once; the last "
                f"declaration wins.",
                {"entity": name},
            )
        entities[name] = fields

    logger.debug("Extracted %d entit(y/ies).", len(entities))
    return entities


def ensure_id_fields(entities: Dict[str, List[EntityField]]) -> List[str]:
    """
    Insert ``id Long`` at position 0 of every entity without an id field.

    Returns the names of the entities that received one.
    """
    injected: List[str] = []
    for name, fields in entities.items():
        if any(f.name.lower() == ID_FIELD_NAME for f in fields):
            continue
        fields.insert(0, EntityField(
            name=ID_FIELD_NAME,
            type=ID_FIELD_TYPE,
            required=False,
            nullable=True,
            is_relationship=False,
        ))
        injected.append(name)
    return injected


# ---------------------------------------------------------------------------
# Relationships
# ---------------------------------------------------------------------------


def parse_injected_field(spec: Optional[str]) -> Optional[str]:
    """
    Extract the field name from a ``{...}`` spec.

    ``orders`` → ``orders``; ``customer(name)`` → ``customer`` (the display
    hint is discarded); anything else → None.
    """
    if not spec:
        return None
    m = _INJECTED_FIELD_RE.match(spec.strip())
    if m is None:
        return None
    return m.group(1)


def match_relationship_statement(
    rel_type: str,
    statement: str,
    diagnostics: Optional[ValidationResult] = None,
) -> LineMatch:
    """Match ``From[{field}] to To[{field}][;]`` into a ``RelationshipRecord``."""
    m = _STATEMENT_RE.match(statement)
    if m is None:
        return LineMatch(statement)

    from_spec: str = (m.group(2) or "").strip()
    to_spec: str = (m.group(4) or "").strip()
    from_field: Optional[str] = parse_injected_field(from_spec)
    to_field: Optional[str] = parse_injected_field(to_spec)

    if diagnostics is not None:
        for spec, parsed in ((from_spec, from_field), (to_spec, to_field)):
            if spec and parsed is None:
                diagnostics.add_warning(
                    "INVALID_INJECTED_FIELD",
                    f"Field spec '{{{spec}}}' in '{statement}' is not a "
                    f"field name; the default name is used instead.",
                    {"statement": statement, "spec": spec},
                )

    return LineMatch(
        statement,
        RelationshipRecord(
            type=rel_type,
            from_entity=m.group(1).strip(),
            to_entity=m.group(3).strip(),
            from_field=from_field,
            to_field=to_field,
        ),
    )


def extract_relationships(
    text: str,
    diagnostics: Optional[ValidationResult] = None,
) -> List[RelationshipRecord]:
    """
    Scan every ``relationship TYPE { ... }`` block into records.

    Block extents are found with a ``BraceCursor`` so nested braces inside
    statements are safe. An unterminated block ends the scan: records from
    earlier blocks are kept, nothing after it is read.
    """
    records: List[RelationshipRecord] = []
    pos: int = 0

    while True:
        bm = _RELATIONSHIP_BLOCK_RE.search(text, pos)
        if bm is None:
            break

        rel_type: str = bm.group(1).strip()
        body_start: int = bm.end()
        cursor: BraceCursor = BraceCursor(text, body_start)
        body_end: Optional[int] = cursor.find_closing()

        if body_end is None:
            logger.debug(
                "Unterminated relationship block at offset %d — scan stopped.",
                bm.start(),
            )
            if diagnostics is not None:
                diagnostics.add_warning(
                    "UNTERMINATED_RELATIONSHIP_BLOCK",
                    f"'relationship {rel_type}' block opened at offset "
                    f"{bm.start()} is never closed; the rest of the input "
                    f"was ignored.",
                    {"type": rel_type, "offset": bm.start()},
                )
            break

        body: str = text[body_start:body_end]
        pos = cursor.position

        for raw in _STATEMENT_SPLIT_RE.split(body):
            statement: str = raw.strip()
            if not statement:
                continue
            outcome: LineMatch = match_relationship_statement(
                rel_type, statement, diagnostics
            )
            if outcome.matched:
                records.append(outcome.value)
                continue
            logger.debug(
                "Relationship %s: unmatched statement %r dropped.",
                rel_type,
                statement,
            )
            if diagnostics is not None:
                diagnostics.add_warning(
                    "UNMATCHED_RELATIONSHIP_STATEMENT",
                    f"Statement '{statement}' in 'relationship {rel_type}' is "
                    f"not 'From{{field}} to To{{field}}' and was ignored.",
                    {"type": rel_type, "statement": statement},
                )

    logger.debug("Extracted %d relationship record(s).", len(records))
    return records


# ---------------------------------------------------------------------------
# Module-level exports
# ---------------------------------------------------------------------------

__all__: List[str] = [
    "AUDIT_FIELDS",
    "LineMatch",
    "extract_enums",
    "match_field_line",
    "add_audit_fields",
    "extract_entities",
    "ensure_id_fields",
    "parse_injected_field",
    "match_relationship_statement",
    "extract_relationships",
]

logger.debug("jdlschema.extractors loaded — %d public symbols.", len(__all__))
