"""Entity audit generation pipeline.

The pipeline runs a fixed sequence of stages, in this order:

    composing                -> select the audit strategy, compose its generator
    preparing                -> derive the strategy flags
    configuring_each_entity  -> append the audit fields to audited entities
    preparing_each_entity    -> record the table prefix on audited entities
    writing                  -> render the shared audit artifacts
    post_writing             -> patch the architecture test
    post_writing_entities    -> make audited entities extend the auditing bases

Any failure stops the run and propagates; files already written stay on
disk.

Usage:
    >>> from entity_audit import generate, BlueprintConfig, ApplicationConfig
    >>> from entity_audit.files import LocalFileSystem
    >>>
    >>> result = generate(
    ...     BlueprintConfig(audit_framework="custom", audited_entities=("Book",)),
    ...     ApplicationConfig(package_name="com.example.library"),
    ...     entities,
    ...     LocalFileSystem("path/to/project"),
    ... )
    >>> result.patched_files
    ['src/main/java/com/example/library/domain/Book.java', ...]
"""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from enum import Enum
from typing import Callable, Iterable

from entity_audit.artifacts import TemplateRenderer, emit_artifacts
from entity_audit.base import EntityConfig, FieldSpec, GeneratedArtifact
from entity_audit.config import ApplicationConfig, BlueprintConfig
from entity_audit.fields import SharedEntityRegistry, augment_entity, prepare_entity
from entity_audit.files import FileSystem
from entity_audit.patching import (
    apply_architecture_test_patch,
    architecture_test_path,
    patch_entity_sources,
)
from entity_audit.strategy import (
    AuditFlags,
    AuditStrategy,
    Composer,
    derive_flags,
    select_strategy,
)

logger = logging.getLogger(__name__)


class Stage(str, Enum):
    """Pipeline stages, in execution order."""

    COMPOSING = "composing"
    PREPARING = "preparing"
    CONFIGURING_EACH_ENTITY = "configuring_each_entity"
    PREPARING_EACH_ENTITY = "preparing_each_entity"
    WRITING = "writing"
    POST_WRITING = "post_writing"
    POST_WRITING_ENTITIES = "post_writing_entities"


@dataclass
class GenerationResult:
    """Outcome of a generation run.

    Attributes:
        strategy: The audit strategy selected for the run.
        flags: Strategy flags passed to the templates.
        composed: Whether a sibling strategy generator was composed.
        added_fields: Audit fields appended, by entity name.
        artifacts: Shared artifacts written.
        patched_files: Generated sources changed by the patcher.
        patched_by_entity: Patched sources, by entity name.
        stages: Stages that completed, in order.
        registry: Entity name to field list view.
    """

    strategy: AuditStrategy | None = None
    flags: AuditFlags = field(default_factory=AuditFlags)
    composed: bool = False
    added_fields: dict[str, list[FieldSpec]] = field(default_factory=dict)
    artifacts: list[GeneratedArtifact] = field(default_factory=list)
    patched_files: list[str] = field(default_factory=list)
    patched_by_entity: dict[str, list[str]] = field(default_factory=dict)
    stages: list[Stage] = field(default_factory=list)
    registry: SharedEntityRegistry = field(default_factory=SharedEntityRegistry)

    @property
    def audited_entities(self) -> list[str]:
        return [name for name in self.registry if self.registry.entity(name).enable_audit]

    def to_dict(self) -> dict[str, object]:
        return {
            "auditFramework": self.flags.audit_framework.value,
            "composed": self.composed,
            "auditedEntities": self.audited_entities,
            "addedFields": {
                name: [f.field_name for f in fields]
                for name, fields in self.added_fields.items()
            },
            "artifacts": [a.path for a in self.artifacts],
            "patchedFiles": list(self.patched_files),
            "stages": [s.value for s in self.stages],
        }


class EntityAuditGenerator:
    """Runs the audit decoration pipeline over a set of entities.

    Example:
        >>> generator = EntityAuditGenerator(blueprint, app, entities, files)
        >>> result = generator.run()
        >>> result.audited_entities
        ['Book']
    """

    def __init__(
        self,
        blueprint: BlueprintConfig,
        app: ApplicationConfig,
        entities: Iterable[EntityConfig],
        files: FileSystem,
        composer: Composer | None = None,
        renderer: TemplateRenderer | None = None,
    ) -> None:
        self.blueprint = blueprint
        self.app = app
        self.entities = list(entities)
        self.files = files
        self.composer = composer
        self.renderer = renderer or TemplateRenderer()
        self.result = GenerationResult()

        self._stages: tuple[tuple[Stage, Callable[[], None]], ...] = (
            (Stage.COMPOSING, self._composing),
            (Stage.PREPARING, self._preparing),
            (Stage.CONFIGURING_EACH_ENTITY, self._configuring_each_entity),
            (Stage.PREPARING_EACH_ENTITY, self._preparing_each_entity),
            (Stage.WRITING, self._writing),
            (Stage.POST_WRITING, self._post_writing),
            (Stage.POST_WRITING_ENTITIES, self._post_writing_entities),
        )

    def run(self) -> GenerationResult:
        """Run every stage in order.

        Raises:
            EntityAuditError: If a stage fails. Remaining stages are skipped.
        """
        self.result = GenerationResult(registry=SharedEntityRegistry(self.entities))

        for stage, task in self._stages:
            try:
                task()
            except Exception as e:
                logger.error(f"Stage {stage.value} failed: {e}")
                raise
            self.result.stages.append(stage)
            logger.debug(f"Stage {stage.value} complete")

        logger.info(
            f"Entity audit generation complete: "
            f"{len(self.result.audited_entities)} audited entities, "
            f"{len(self.result.patched_files)} patched files"
        )
        return self.result

    # -------------------------------------------------------------------------
    # Stages
    # -------------------------------------------------------------------------

    def _composing(self) -> None:
        strategy = select_strategy(self.blueprint.audit_framework)
        self.result.strategy = strategy
        self.result.composed = strategy.compose(self.composer)

    def _preparing(self) -> None:
        self.result.flags = derive_flags(self.blueprint)
        logger.debug(f"Audit flags: {self.result.flags}")

    def _configuring_each_entity(self) -> None:
        for entity in self.entities:
            added = augment_entity(entity, self.blueprint.audited_entities)
            if added:
                self.result.added_fields[entity.name] = added

    def _preparing_each_entity(self) -> None:
        for entity in self.entities:
            prepare_entity(entity, self.app)

    def _writing(self) -> None:
        artifacts = emit_artifacts(self.app, self.result.flags, self.files, self.renderer)
        self.result.artifacts.extend(artifacts)

    def _post_writing(self) -> None:
        if apply_architecture_test_patch(self.app, self.files):
            self.result.patched_files.append(architecture_test_path(self.app))

    def _post_writing_entities(self) -> None:
        for entity in self.entities:
            patched = patch_entity_sources(entity, self.app, self.files)
            if patched:
                self.result.patched_by_entity[entity.name] = patched
            self.result.patched_files.extend(patched)


def generate(
    blueprint: BlueprintConfig,
    app: ApplicationConfig,
    entities: Iterable[EntityConfig],
    files: FileSystem,
    composer: Composer | None = None,
) -> GenerationResult:
    """Run the entity audit pipeline once."""
    return EntityAuditGenerator(
        blueprint, app, entities, files, composer=composer
    ).run()
