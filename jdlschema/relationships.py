# File: jdlschema/relationships.py
"""
jdlschema - Relationship Materializer
=====================================
Turns parsed ``RelationshipRecord`` instances into concrete relationship
fields on the entities involved.

Cardinality rules (``from`` side / ``to`` side):

    OneToMany   collection on from       singular on to (always)
    ManyToOne   singular on from         collection on to (only if named)
    OneToOne    singular on from         singular on to (only if named)
    ManyToMany  collection on from       collection on to (always)

Unnamed sides fall back to ``lc_first(Entity)`` for singular fields and
``pluralize(lc_first(Entity))`` for collections.

Each record touches only the two field lists it names; records that refer to
an unknown entity or cardinality are skipped.
"""

from __future__ import annotations

import logging
from typing import (
    TYPE_CHECKING,
    Any,
    Dict,
    Iterable,
    List,
    Mapping,
    Optional,
    Sequence,
)

from jdlschema.models import (
    ID_FIELD_NAME,
    RELATIONSHIP_TYPE_TOKEN,
    EntityField,
    RelationshipRecord,
    RelationshipType,
)
from jdlschema.naming import lc_first, pluralize

if TYPE_CHECKING:
    from jdlschema.validators import ValidationResult

# ---------------------------------------------------------------------------
# Logger
# ---------------------------------------------------------------------------
logger: logging.Logger = logging.getLogger("jdlschema.relationships")


# ---------------------------------------------------------------------------
# Field construction
# ---------------------------------------------------------------------------


def make_relationship_field(
    name: str,
    relationship_type: RelationshipType,
    target_entity: str,
) -> EntityField:
    return EntityField(
        name=name,
        type=RELATIONSHIP_TYPE_TOKEN,
        required=False,
        nullable=True,
        is_relationship=True,
        relationship_type=relationship_type,
        target_entity=target_entity,
    )


def add_relationship_field(
    fields: List[EntityField],
    field: EntityField,
    owner: Optional[str] = None,
    diagnostics: Optional["ValidationResult"] = None,
) -> bool:
    """
    Append *field* unless a relationship field with that name exists.

    A relationship named ``id`` (any case) is never added: the entity's
    own id field keeps the name. Returns True when the field was added.
    """
    if field.name.lower() == ID_FIELD_NAME:
        logger.debug(
            "Relationship field '%s' on %s would shadow the id field — skipped.",
            field.name,
            owner or "?",
        )
        if diagnostics is not None:
            diagnostics.add_warning(
                "RELATIONSHIP_FIELD_NAMED_ID",
                f"Relationship field '{field.name}' on entity '{owner}' "
                f"clashes with the id field and was ignored.",
                {"entity": owner, "field": field.name, "target": field.target_entity},
            )
        return False
    for existing in fields:
        if existing.is_relationship and existing.name == field.name:
            logger.debug(
                "Relationship field '%s' already present — skipped.", field.name
            )
            return False
    fields.append(field)
    return True


# ---------------------------------------------------------------------------
# Materialization
# ---------------------------------------------------------------------------


def apply_relationship(
    record: RelationshipRecord,
    from_fields: List[EntityField],
    to_fields: List[EntityField],
    diagnostics: Optional["ValidationResult"] = None,
) -> int:
    """
    Materialize one record onto the two field lists.

    Returns the number of fields added (0 for an unknown cardinality or a
    repeated declaration).
    """
    rel_type: Optional[RelationshipType] = record.relationship_type
    if rel_type is None:
        return 0

    src: str = record.from_entity
    dst: str = record.to_entity

    def add_from(name: str, kind: RelationshipType) -> bool:
        return add_relationship_field(
            from_fields, make_relationship_field(name, kind, dst), src, diagnostics
        )

    def add_to(name: str, kind: RelationshipType) -> bool:
        return add_relationship_field(
            to_fields, make_relationship_field(name, kind, src), dst, diagnostics
        )

    added: int = 0

    if rel_type is RelationshipType.ONE_TO_MANY:
        added += add_from(
            record.from_field or pluralize(lc_first(dst)), RelationshipType.ONE_TO_MANY
        )
        added += add_to(record.to_field or lc_first(src), RelationshipType.MANY_TO_ONE)

    elif rel_type is RelationshipType.MANY_TO_ONE:
        added += add_from(record.from_field or lc_first(dst), RelationshipType.MANY_TO_ONE)
        if record.to_field:
            added += add_to(record.to_field, RelationshipType.ONE_TO_MANY)

    elif rel_type is RelationshipType.ONE_TO_ONE:
        added += add_from(record.from_field or lc_first(dst), RelationshipType.ONE_TO_ONE)
        if record.to_field:
            added += add_to(record.to_field, RelationshipType.ONE_TO_ONE)

    elif rel_type is RelationshipType.MANY_TO_MANY:
        added += add_from(
            record.from_field or pluralize(lc_first(dst)), RelationshipType.MANY_TO_MANY
        )
        added += add_to(
            record.to_field or pluralize(lc_first(src)), RelationshipType.MANY_TO_MANY
        )

    return added


def materialize_relationships(
    entities: Dict[str, List[EntityField]],
    records: Iterable[RelationshipRecord],
    diagnostics: Optional["ValidationResult"] = None,
) -> int:
    """
    Apply every record to *entities* in place.

    Returns the total number of relationship fields added.
    """
    total: int = 0
    for record in records:
        if record.from_entity not in entities or record.to_entity not in entities:
            missing: List[str] = [
                name
                for name in (record.from_entity, record.to_entity)
                if name not in entities
            ]
            logger.debug(
                "Relationship %s → %s skipped: unknown entity %s.",
                record.from_entity,
                record.to_entity,
                missing,
            )
            if diagnostics is not None:
                diagnostics.add_warning(
                    "UNKNOWN_RELATIONSHIP_ENTITY",
                    f"Relationship '{record.from_entity} to {record.to_entity}' "
                    f"references undeclared entity {', '.join(missing)}.",
                    {"type": record.type, "missing": missing},
                )
            continue

        if record.relationship_type is None:
            logger.debug("Relationship type '%s' is not supported.", record.type)
            if diagnostics is not None:
                diagnostics.add_warning(
                    "UNKNOWN_RELATIONSHIP_TYPE",
                    f"Relationship type '{record.type}' is not one of "
                    f"{', '.join(t.value for t in RelationshipType)}.",
                    {"from": record.from_entity, "to": record.to_entity},
                )
            continue

        total += apply_relationship(
            record,
            entities[record.from_entity],
            entities[record.to_entity],
            diagnostics,
        )

    logger.debug("Materialized %d relationship field(s).", total)
    return total


# ---------------------------------------------------------------------------
# Inverse lookup
# ---------------------------------------------------------------------------


def find_inverse_field(
    entities: Mapping[str, Sequence[EntityField]],
    entity_name: str,
    field: EntityField,
) -> Optional[EntityField]:
    """
    Find the field on ``field.target_entity`` pointing back at *entity_name*.

    Candidates must carry the expected inverse cardinality. When several
    match, ``lc_first(entity_name)`` is preferred, then its plural, then the
    first candidate.
    """
    if not field.is_relationship or not field.target_entity:
        return None
    rel_type: Optional[RelationshipType] = RelationshipType.from_token(
        field.relationship_type
    )
    if rel_type is None:
        return None

    expected: RelationshipType = rel_type.inverse
    candidates: List[EntityField] = [
        g
        for g in entities.get(field.target_entity, ())
        if g.is_relationship
        and RelationshipType.from_token(g.relationship_type) is expected
        and g.target_entity == entity_name
        and g is not field
    ]
    if not candidates:
        return None
    if len(candidates) == 1:
        return candidates[0]

    singular: str = lc_first(entity_name)
    plural: str = pluralize(singular)
    for wanted in (singular, plural):
        for candidate in candidates:
            if candidate.name == wanted:
                return candidate
    return candidates[0]


# ---------------------------------------------------------------------------
# Relationship metadata
# ---------------------------------------------------------------------------

_TARGET_ONE: frozenset = frozenset(
    {RelationshipType.ONE_TO_MANY, RelationshipType.ONE_TO_ONE}
)


def relationship_metadata(
    entities: Mapping[str, Sequence[EntityField]],
    entity_name: str,
    field: EntityField,
) -> Dict[str, Any]:
    """
    Extra document keys for a relationship field.

    ``relKind`` (O2O/O2M/M2O/M2M), ``isCollection``, ``cardinality`` as
    ``{"self", "target"}`` with ``one``/``many``, and ``inverse`` as
    ``{"entity", "fieldName"}`` when an opposite field exists. Plain fields
    get an empty mapping.
    """
    if not field.is_relationship:
        return {}
    rel_type: Optional[RelationshipType] = RelationshipType.from_token(
        field.relationship_type
    )
    if rel_type is None:
        return {}

    meta: Dict[str, Any] = {
        "relKind": rel_type.kind,
        "isCollection": field.is_collection,
        "cardinality": {
            "self": "many" if field.is_collection else "one",
            "target": "one" if rel_type in _TARGET_ONE else "many",
        },
    }
    inverse: Optional[EntityField] = find_inverse_field(entities, entity_name, field)
    if inverse is not None:
        meta["inverse"] = {"entity": field.target_entity, "fieldName": inverse.name}
    return meta


# ---------------------------------------------------------------------------
# Module-level exports
# ---------------------------------------------------------------------------

__all__: List[str] = [
    "make_relationship_field",
    "add_relationship_field",
    "apply_relationship",
    "materialize_relationships",
    "find_inverse_field",
    "relationship_metadata",
]

logger.debug("jdlschema.relationships loaded — %d public symbols.", len(__all__))
