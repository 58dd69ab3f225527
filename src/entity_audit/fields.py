"""Audit field augmentation.

For every entity selected for auditing, the standard audit fields that
the entity does not already declare are appended to its field list.
Fields the entity already declares always win, so running the augmenter
again never duplicates anything.

The shared entity registry consumed by older host code is a read-only
projection of the entity configs, so it always mirrors their fields.
"""

from __future__ import annotations

import logging
from typing import Iterable, Iterator, Mapping

from entity_audit.base import STANDARD_AUDIT_FIELDS, EntityConfig, FieldSpec
from entity_audit.config import ApplicationConfig

logger = logging.getLogger(__name__)


def is_audit_enabled(entity: EntityConfig, audited_entities: Iterable[str] = ()) -> bool:
    """Whether the entity is audited.

    Either an explicit selection by name or the entity's own flag enables
    auditing; neither source can disable what the other enabled.
    """
    return entity.name in set(audited_entities) or entity.enable_audit


def missing_audit_fields(entity: EntityConfig) -> list[FieldSpec]:
    """Copies of the standard audit fields the entity does not declare,
    in canonical order."""
    declared = set(entity.field_names)
    return [f.copy() for f in STANDARD_AUDIT_FIELDS if f.field_name not in declared]


def augment_entity(
    entity: EntityConfig,
    audited_entities: Iterable[str] = (),
) -> list[FieldSpec]:
    """Enable auditing on an entity and append its missing audit fields.

    Entities that are not audited are left untouched.

    Args:
        entity: Entity to augment in place.
        audited_entities: Names explicitly selected for auditing.

    Returns:
        The fields appended by this call.
    """
    if not is_audit_enabled(entity, audited_entities):
        return []

    entity.enable_audit = True
    to_add = missing_audit_fields(entity)
    entity.fields.extend(to_add)

    if to_add:
        logger.debug(
            f"Added audit fields to {entity.name}: "
            f"{', '.join(f.field_name for f in to_add)}"
        )
    return to_add


def prepare_entity(entity: EntityConfig, app: ApplicationConfig) -> None:
    """Record the application table prefix on an audited entity."""
    if not entity.enable_audit:
        return
    entity.jhi_table_prefix = app.jhi_table_prefix


# =============================================================================
# Shared Entity Registry
# =============================================================================


class SharedEntityRegistry(Mapping[str, list[FieldSpec]]):
    """Entity name to field list view over a set of entity configs.

    The registry holds no fields of its own. Each lookup copies the
    entity's current field list, so anything appended to an entity is
    visible here and nothing can be appended through the registry.

    Example:
        >>> registry = SharedEntityRegistry(entities)
        >>> registry.field_names("Book")
        ['title', 'createdBy', 'createdDate', 'lastModifiedBy', 'lastModifiedDate']
    """

    def __init__(self, entities: Iterable[EntityConfig] = ()) -> None:
        self._entities: dict[str, EntityConfig] = {}
        for entity in entities:
            self.add(entity)

    def add(self, entity: EntityConfig) -> None:
        """Track an entity; a later entity with the same name replaces it."""
        self._entities[entity.name] = entity

    def entity(self, name: str) -> EntityConfig:
        return self._entities[name]

    def field_names(self, name: str) -> list[str]:
        return self._entities[name].field_names

    def __getitem__(self, name: str) -> list[FieldSpec]:
        return list(self._entities[name].fields)

    def __iter__(self) -> Iterator[str]:
        return iter(self._entities)

    def __len__(self) -> int:
        return len(self._entities)

    def __repr__(self) -> str:
        return f"<SharedEntityRegistry entities={list(self._entities)}>"
