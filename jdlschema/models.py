# File: jdlschema/models.py
"""
jdlschema - Core Data Models
============================
Pydantic V2 models describing the normalized schema produced from JDL text
and the configuration handed to downstream generators.

Pipeline: JDL text → extraction → ``ParsedSchema`` → validation → output.

The schema models are frozen: once ``parse_jdl`` returns, nothing downstream
can reassign a field, every sequence is a tuple and every mapping is a
``MappingProxyType``.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from enum import Enum
from types import MappingProxyType
from typing import Any, Dict, List, Mapping, Optional, Tuple

from pydantic import (
    BaseModel,
    ConfigDict,
    Field,
    computed_field,
    field_validator,
)
from pydantic.alias_generators import to_camel

# ---------------------------------------------------------------------------
# Logger
# ---------------------------------------------------------------------------
logger: logging.Logger = logging.getLogger("jdlschema.models")

# ---------------------------------------------------------------------------
# Enums
# ---------------------------------------------------------------------------


class RelationshipType(str, Enum):
    """Relationship cardinalities understood by the materializer."""

    ONE_TO_ONE = "OneToOne"
    ONE_TO_MANY = "OneToMany"
    MANY_TO_ONE = "ManyToOne"
    MANY_TO_MANY = "ManyToMany"

    @classmethod
    def from_token(cls, token: Optional[str]) -> Optional["RelationshipType"]:
        """Resolve a JDL token case-insensitively; unknown tokens give None."""
        if not token:
            return None
        return _RELATIONSHIP_TOKENS.get(token.strip().lower())

    @property
    def inverse(self) -> "RelationshipType":
        """Cardinality expected on the opposite side."""
        return _INVERSE_TYPES[self]

    @property
    def is_collection(self) -> bool:
        return self in (RelationshipType.ONE_TO_MANY, RelationshipType.MANY_TO_MANY)

    @property
    def kind(self) -> str:
        """Short form emitted as ``relKind``: O2O, O2M, M2O or M2M."""
        return _KIND_CODES[self]


_RELATIONSHIP_TOKENS: Dict[str, RelationshipType] = {
    member.value.lower(): member for member in RelationshipType
}

_INVERSE_TYPES: Dict[RelationshipType, RelationshipType] = {
    RelationshipType.ONE_TO_ONE: RelationshipType.ONE_TO_ONE,
    RelationshipType.ONE_TO_MANY: RelationshipType.MANY_TO_ONE,
    RelationshipType.MANY_TO_ONE: RelationshipType.ONE_TO_MANY,
    RelationshipType.MANY_TO_MANY: RelationshipType.MANY_TO_MANY,
}

_KIND_CODES: Dict[RelationshipType, str] = {
    RelationshipType.ONE_TO_ONE: "O2O",
    RelationshipType.ONE_TO_MANY: "O2M",
    RelationshipType.MANY_TO_ONE: "M2O",
    RelationshipType.MANY_TO_MANY: "M2M",
}


class RelationshipPayloadMode(str, Enum):
    """How generated clients serialize relationship fields."""

    ID_ONLY = "idOnly"
    FULL_OBJECT = "fullObject"


class OutputFormat(str, Enum):
    """Serialization format of the compiled schema document."""

    JSON = "json"
    YAML = "yaml"


# ---------------------------------------------------------------------------
# Shared model configuration
# ---------------------------------------------------------------------------

# Schema models: immutable, camelCase on the wire, snake_case in Python.
_SCHEMA_CONFIG: ConfigDict = ConfigDict(
    frozen=True,
    populate_by_name=True,
    alias_generator=to_camel,
    use_enum_values=True,
    extra="forbid",
)

# Configuration models: mutable so CLI overrides can be applied.
_CONFIG_CONFIG: ConfigDict = ConfigDict(
    strict=False,
    populate_by_name=True,
    alias_generator=to_camel,
    validate_assignment=True,
    use_enum_values=True,
    extra="forbid",
)


# ---------------------------------------------------------------------------
# Schema primitives
# ---------------------------------------------------------------------------

RELATIONSHIP_TYPE_TOKEN: str = "relationship"
ID_FIELD_NAME: str = "id"
ID_FIELD_TYPE: str = "Long"


class EntityField(BaseModel):
    """
    A single field of an entity.

    Plain fields carry the raw type token exactly as written in the JDL
    (``String``, ``Instant``, an enum name...). Relationship fields carry the
    literal token ``relationship`` plus the cardinality and target entity.
    """

    model_config = _SCHEMA_CONFIG

    name: str = Field(..., min_length=1, description="Field name as declared.")
    type: str = Field(..., min_length=1, description="Raw JDL type token.")
    required: bool = Field(default=False, description="Declared 'required'.")
    nullable: bool = Field(default=True, description="Defaults to not required.")
    is_relationship: bool = Field(
        default=False, description="Materialized from a relationship block."
    )
    relationship_type: Optional[RelationshipType] = Field(
        default=None, description="Cardinality, relationship fields only."
    )
    target_entity: Optional[str] = Field(
        default=None, description="Referenced entity, relationship fields only."
    )
    is_audit: Optional[bool] = Field(
        default=None, description="Injected audit field."
    )
    read_only: Optional[bool] = Field(
        default=None, description="Not editable by generated forms."
    )

    @computed_field  # type: ignore[misc]
    @property
    def is_collection(self) -> bool:
        if not self.is_relationship or self.relationship_type is None:
            return False
        return RelationshipType(self.relationship_type).is_collection

    def to_dict(self) -> Dict[str, Any]:
        """camelCase mapping without unset optional keys."""
        return self.model_dump(
            by_alias=True,
            exclude_none=True,
            exclude={"is_collection"},
        )

    def __repr__(self) -> str:
        if self.is_relationship:
            return (
                f"<EntityField {self.name} {self.relationship_type} "
                f"→ {self.target_entity}>"
            )
        flag: str = " required" if self.required else ""
        return f"<EntityField {self.name} {self.type}{flag}>"


@dataclass(frozen=True, slots=True)
class RelationshipRecord:
    """One parsed ``From{field} to To{field}`` statement (internal only)."""

    type: str
    from_entity: str
    to_entity: str
    from_field: Optional[str] = None
    to_field: Optional[str] = None

    @property
    def relationship_type(self) -> Optional[RelationshipType]:
        return RelationshipType.from_token(self.type)


# ---------------------------------------------------------------------------
# Parsed schema — top-level result
# ---------------------------------------------------------------------------


class ParsedSchema(BaseModel):
    """
    The normalized result of one ``parse_jdl`` call.

    ``entities`` maps entity name → fields in insertion order.
    ``enums`` maps enum name → values in declaration order.

    Both mappings are read-only views: item assignment raises ``TypeError``.
    """

    model_config = _SCHEMA_CONFIG

    entities: Mapping[str, Tuple[EntityField, ...]] = Field(default_factory=dict)
    enums: Mapping[str, Tuple[str, ...]] = Field(default_factory=dict)

    @field_validator("entities", "enums", mode="after")
    @classmethod
    def _read_only(cls, v: Mapping[str, Any]) -> Mapping[str, Any]:
        return MappingProxyType(dict(v))

    def get_fields(self, entity_name: str) -> Tuple[EntityField, ...]:
        """Fields of *entity_name*; empty tuple for unknown entities."""
        return self.entities.get(entity_name, ())

    def get_field(self, entity_name: str, field_name: str) -> Optional[EntityField]:
        for f in self.get_fields(entity_name):
            if f.name == field_name:
                return f
        return None

    @property
    def entity_names(self) -> List[str]:
        return list(self.entities)

    @property
    def total_fields(self) -> int:
        return sum(len(fields) for fields in self.entities.values())

    @property
    def total_relationships(self) -> int:
        return sum(
            1
            for fields in self.entities.values()
            for f in fields
            if f.is_relationship
        )

    def to_dict(self) -> Dict[str, Any]:
        """JSON-compatible ``{"entities": ..., "enums": ...}`` document."""
        return {
            "entities": {
                name: [f.to_dict() for f in fields]
                for name, fields in self.entities.items()
            },
            "enums": {name: list(values) for name, values in self.enums.items()},
        }

    def __repr__(self) -> str:
        return (
            f"<ParsedSchema {len(self.entities)} entities, "
            f"{len(self.enums)} enums, "
            f"{self.total_relationships} relationship fields>"
        )


# ---------------------------------------------------------------------------
# Generator configuration
# ---------------------------------------------------------------------------


class GeneratorConfig(BaseModel):
    """
    Settings read from ``jdlschema.config.yaml`` and the command line.

    ``plural_overrides`` and ``relationship_payload_mode`` are never read by
    the parser; they are passed through to downstream renderers.
    """

    model_config = _CONFIG_CONFIG

    jdl_file: Optional[str] = Field(default=None, description="Input JDL path.")
    output_file: Optional[str] = Field(
        default=None, description="Where to write the compiled document."
    )
    output_format: OutputFormat = Field(
        default=OutputFormat.JSON, description="Document format."
    )
    plural_overrides: Dict[str, str] = Field(
        default_factory=dict,
        description="Exact-match word → plural overrides for renderers.",
    )
    relationship_payload_mode: RelationshipPayloadMode = Field(
        default=RelationshipPayloadMode.ID_ONLY,
        description="Relationship serialization mode for generated clients.",
    )
    force: bool = Field(
        default=False, description="Rewrite output even when unchanged."
    )
    indent: int = Field(default=2, ge=0, le=8, description="JSON indent width.")

    @field_validator("plural_overrides", mode="before")
    @classmethod
    def _coerce_overrides(cls, v: Any) -> Any:
        if v is None:
            return {}
        if isinstance(v, dict):
            return {str(k): "" if val is None else str(val) for k, val in v.items()}
        return v


# ---------------------------------------------------------------------------
# Module-level exports
# ---------------------------------------------------------------------------

__all__: List[str] = [
    "RelationshipType",
    "RelationshipPayloadMode",
    "OutputFormat",
    "RELATIONSHIP_TYPE_TOKEN",
    "ID_FIELD_NAME",
    "ID_FIELD_TYPE",
    "EntityField",
    "RelationshipRecord",
    "ParsedSchema",
    "GeneratorConfig",
]

logger.debug("jdlschema.models loaded — %d public symbols.", len(__all__))
