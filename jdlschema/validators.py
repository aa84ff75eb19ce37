# File: jdlschema/validators.py
"""
jdlschema - Diagnostics & Schema Validators
===========================================
Two jobs share one result container:

* **Parse diagnostics.** Every parser entry point accepts an optional
  ``ValidationResult``. Constructs the lenient parser drops (unmatched
  lines, unknown entities, unterminated blocks...) are recorded there as
  warnings. Passing a collector never changes the parsed schema.

* **Post-parse checks.** ``validate_schema`` inspects a finished
  ``ParsedSchema`` for the guarantees renderers rely on (one ``id`` per
  entity, resolvable relationship targets, unique field names) and for
  naming-convention issues.

Usage::

    from jdlschema.validators import validate_full
    result = validate_full(schema, config)
    if not result:
        print(result.format_report())
"""

from __future__ import annotations

import logging
import re
from dataclasses import asdict, dataclass, field
from typing import Any, Callable, Dict, List, Optional, Set, Tuple

from jdlschema.models import (
    EntityField,
    GeneratorConfig,
    ParsedSchema,
    RelationshipType,
)
from jdlschema.relationships import find_inverse_field

# ---------------------------------------------------------------------------
# Logger
# ---------------------------------------------------------------------------
logger: logging.Logger = logging.getLogger("jdlschema.validators")

# ---------------------------------------------------------------------------
# Diagnostics container
# ---------------------------------------------------------------------------

_LEVELS: Tuple[str, ...] = ("error", "warning", "info")


@dataclass(frozen=True, slots=True)
class ValidationError:
    """One diagnostic: level (error, warning or info), stable code, message."""

    level: str
    code: str
    message: str
    context: Dict[str, Any] = field(default_factory=dict)

    def __str__(self) -> str:
        return f"[{self.level.upper()}] {self.code}: {self.message}"

    def to_dict(self) -> Dict[str, Any]:
        return asdict(self)


class ValidationResult:
    """
    Ordered collection of diagnostics.

    Truthy when it holds no errors, so ``if not result:`` reads as "failed".
    """

    __slots__ = ("_items",)

    def __init__(self) -> None:
        self._items: List[ValidationError] = []

    def add(
        self,
        level: str,
        code: str,
        message: str,
        context: Optional[Dict[str, Any]] = None,
    ) -> None:
        if level not in _LEVELS:
            raise ValueError(f"Unknown diagnostic level: {level!r}")
        self._items.append(ValidationError(level, code, message, context or {}))

    def add_error(
        self,
        code: str,
        message: str,
        context: Optional[Dict[str, Any]] = None,
    ) -> None:
        self.add("error", code, message, context)

    def add_warning(
        self,
        code: str,
        message: str,
        context: Optional[Dict[str, Any]] = None,
    ) -> None:
        self.add("warning", code, message, context)

    def add_info(
        self,
        code: str,
        message: str,
        context: Optional[Dict[str, Any]] = None,
    ) -> None:
        self.add("info", code, message, context)

    def merge(self, other: "ValidationResult") -> None:
        self._items.extend(other._items)

    def at_level(self, level: str) -> List[ValidationError]:
        return [item for item in self._items if item.level == level]

    @property
    def errors(self) -> List[ValidationError]:
        return self.at_level("error")

    @property
    def warnings(self) -> List[ValidationError]:
        return self.at_level("warning")

    @property
    def all_items(self) -> List[ValidationError]:
        return list(self._items)

    @property
    def codes(self) -> List[str]:
        return [item.code for item in self._items]

    @property
    def error_count(self) -> int:
        return len(self.errors)

    @property
    def warning_count(self) -> int:
        return len(self.warnings)

    @property
    def has_errors(self) -> bool:
        return self.error_count > 0

    @property
    def has_warnings(self) -> bool:
        return self.warning_count > 0

    @property
    def is_valid(self) -> bool:
        return not self.has_errors

    def summary(self) -> str:
        return (
            f"Validation: {self.error_count} error(s), "
            f"{self.warning_count} warning(s), "
            f"{len(self._items)} total item(s)."
        )

    def format_report(self, include_info: bool = False) -> str:
        """
        Summary line followed by one line per diagnostic, errors first.

        Context is appended as ``key=value`` pairs; info items are listed
        only when *include_info* is set.
        """
        lines: List[str] = [self.summary()]
        levels = _LEVELS if include_info else _LEVELS[:2]
        for level in levels:
            for item in self.at_level(level):
                line: str = f"  {level:<7} {item.code}: {item.message}"
                if item.context:
                    pairs = ", ".join(f"{k}={v}" for k, v in item.context.items())
                    line += f" ({pairs})"
                lines.append(line)
        return "\n".join(lines)

    def __bool__(self) -> bool:
        return self.is_valid

    def __len__(self) -> int:
        return len(self._items)

    def __repr__(self) -> str:
        return f"<ValidationResult {self.summary()}>"


# ---------------------------------------------------------------------------
# Regex patterns
# ---------------------------------------------------------------------------

_IDENTIFIER_RE: re.Pattern[str] = re.compile(r"^[A-Za-z_][A-Za-z0-9_]*$")
_PASCAL_CASE_RE: re.Pattern[str] = re.compile(r"^[A-Z][A-Za-z0-9]*$")


# ---------------------------------------------------------------------------
# Individual schema checks
# ---------------------------------------------------------------------------


def validate_entity_ids(schema: ParsedSchema) -> ValidationResult:
    """Every entity must carry exactly one ``id`` field (case-insensitive)."""
    result: ValidationResult = ValidationResult()

    for entity, fields in schema.entities.items():
        ids: List[EntityField] = [f for f in fields if f.name.lower() == "id"]
        if not ids:
            result.add_error(
                "MISSING_ID_FIELD",
                f"Entity '{entity}' has no 'id' field.",
                {"entity": entity},
            )
        elif len(ids) > 1:
            result.add_error(
                "DUPLICATE_ID_FIELD",
                f"Entity '{entity}' declares {len(ids)} id fields: "
                f"{[f.name for f in ids]}.",
                {"entity": entity},
            )

    return result


def validate_entity_names(schema: ParsedSchema) -> ValidationResult:
    result: ValidationResult = ValidationResult()

    for entity in schema.entities:
        if not _PASCAL_CASE_RE.match(entity):
            result.add_warning(
                "ENTITY_NAME_NOT_PASCAL_CASE",
                f"Entity name '{entity}' is not PascalCase. "
                f"Generated class names may look odd.",
                {"entity": entity},
            )

    return result


def validate_field_names(schema: ParsedSchema) -> ValidationResult:
    """Field names must be identifiers and unique within their entity."""
    result: ValidationResult = ValidationResult()

    for entity, fields in schema.entities.items():
        seen: Set[str] = set()
        for f in fields:
            ctx: Dict[str, Any] = {"entity": entity, "field": f.name}
            if f.name in seen:
                result.add_error(
                    "DUPLICATE_FIELD_NAME",
                    f"Field '{f.name}' appears more than once in entity "
                    f"'{entity}'.",
                    ctx,
                )
            seen.add(f.name)

            if not _IDENTIFIER_RE.match(f.name):
                result.add_error(
                    "INVALID_FIELD_NAME",
                    f"Field '{f.name}' in entity '{entity}' is not a valid "
                    f"identifier.",
                    ctx,
                )

    return result


def validate_relationship_targets(schema: ParsedSchema) -> ValidationResult:
    """Relationship fields must name a cardinality and a declared entity."""
    result: ValidationResult = ValidationResult()

    for entity, fields in schema.entities.items():
        for f in fields:
            if not f.is_relationship:
                continue
            ctx: Dict[str, Any] = {
                "entity": entity,
                "field": f.name,
                "target": f.target_entity,
            }

            if RelationshipType.from_token(f.relationship_type) is None:
                result.add_error(
                    "REL_TYPE_MISSING",
                    f"Relationship field '{entity}.{f.name}' has no "
                    f"recognised cardinality.",
                    ctx,
                )

            if not f.target_entity or f.target_entity not in schema.entities:
                result.add_error(
                    "REL_TARGET_ENTITY_MISSING",
                    f"Relationship field '{entity}.{f.name}' targets "
                    f"undeclared entity '{f.target_entity}'.",
                    ctx,
                )

    return result


def validate_inverse_links(schema: ParsedSchema) -> ValidationResult:
    """Note relationship fields with no counterpart on their target."""
    result: ValidationResult = ValidationResult()

    for entity, fields in schema.entities.items():
        for f in fields:
            if not f.is_relationship or f.target_entity not in schema.entities:
                continue
            if find_inverse_field(schema.entities, entity, f) is None:
                result.add_info(
                    "REL_ONE_SIDED",
                    f"Relationship '{entity}.{f.name}' ({f.relationship_type}) "
                    f"has no inverse field on '{f.target_entity}'.",
                    {"entity": entity, "field": f.name, "target": f.target_entity},
                )

    return result


def validate_enums(schema: ParsedSchema) -> ValidationResult:
    result: ValidationResult = ValidationResult()

    for name, values in schema.enums.items():
        ctx: Dict[str, Any] = {"enum": name}
        if not values:
            result.add_error(
                "EMPTY_ENUM_VALUES",
                f"Enum '{name}' has no values.",
                ctx,
            )
            continue
        seen: Set[str] = set()
        for value in values:
            if value in seen:
                result.add_warning(
                    "DUPLICATE_ENUM_VALUE",
                    f"Enum '{name}' lists value '{value}' more than once.",
                    {"enum": name, "value": value},
                )
            seen.add(value)

    return result


def validate_generation_config(config: GeneratorConfig) -> ValidationResult:
    result: ValidationResult = ValidationResult()

    for word, plural in config.plural_overrides.items():
        if not str(plural).strip():
            result.add_warning(
                "EMPTY_PLURAL_OVERRIDE",
                f"Plural override for '{word}' is empty and will be ignored.",
                {"word": word},
            )

    return result


# ---------------------------------------------------------------------------
# Aggregate entry points
# ---------------------------------------------------------------------------


def validate_schema(schema: ParsedSchema) -> ValidationResult:
    """Run all schema-level checks and merge their results."""
    result: ValidationResult = ValidationResult()

    validators: List[Callable[[ParsedSchema], ValidationResult]] = [
        validate_entity_ids,
        validate_entity_names,
        validate_field_names,
        validate_relationship_targets,
        validate_inverse_links,
        validate_enums,
    ]

    for validator_fn in validators:
        logger.debug("Running validator: %s", validator_fn.__name__)
        result.merge(validator_fn(schema))

    logger.info("Schema validation complete: %s", result.summary())
    return result


def validate_config(config: GeneratorConfig) -> ValidationResult:
    result: ValidationResult = validate_generation_config(config)
    logger.info("Config validation complete: %s", result.summary())
    return result


def validate_full(schema: ParsedSchema, config: GeneratorConfig) -> ValidationResult:
    """
    **Master validation entry point.**

    Schema checks, configuration checks, and the cross-check that plural
    overrides refer to something the schema actually declares.
    """
    logger.info(
        "Starting full validation — %d entities, %d enums.",
        len(schema.entities),
        len(schema.enums),
    )

    result: ValidationResult = ValidationResult()
    result.merge(validate_schema(schema))
    result.merge(validate_config(config))

    known: Set[str] = {name.lower() for name in schema.entities}
    for word in config.plural_overrides:
        if word.lower() not in known:
            result.add_warning(
                "PLURAL_OVERRIDE_UNKNOWN_ENTITY",
                f"Plural override defined for '{word}' which matches no "
                f"entity in the schema.",
                {"word": word},
            )

    if result.has_errors:
        logger.error(
            "Validation FAILED with %d error(s). %s",
            result.error_count,
            result.summary(),
        )
    else:
        logger.info("Validation PASSED. %s", result.summary())

    return result


# ---------------------------------------------------------------------------
# Module-level exports
# ---------------------------------------------------------------------------

__all__: List[str] = [
    "ValidationError",
    "ValidationResult",
    "validate_entity_ids",
    "validate_entity_names",
    "validate_field_names",
    "validate_relationship_targets",
    "validate_inverse_links",
    "validate_enums",
    "validate_generation_config",
    "validate_schema",
    "validate_config",
    "validate_full",
]

logger.debug("jdlschema.validators loaded — %d public symbols.", len(__all__))
