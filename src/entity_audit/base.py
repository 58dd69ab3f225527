"""Core types for the entity audit blueprint.

This module defines the data model shared by every stage of the
decoration pipeline:
- AuditFramework: Which audit persistence strategy is active
- FieldSpec: One entity attribute, in the host's JSON shape
- EntityConfig: One domain entity and its field list
- STANDARD_AUDIT_FIELDS: The four creation/modification fields
- Exceptions raised by the pipeline
"""

from __future__ import annotations

import copy
from dataclasses import dataclass, field
from enum import Enum
from pathlib import Path
from typing import Any


# =============================================================================
# Audit Framework
# =============================================================================


class AuditFramework(str, Enum):
    """Audit persistence strategies supported by the blueprint."""

    NO = "no"
    JAVERS = "javers"
    CUSTOM = "custom"

    @classmethod
    def parse(cls, value: "AuditFramework | str | None") -> "AuditFramework":
        """Convert a configuration value to an AuditFramework.

        Values are compared exactly ("Javers" is not "javers"). Unset and
        unrecognized values map to NO.
        """
        if isinstance(value, AuditFramework):
            return value
        try:
            return cls(value)
        except ValueError:
            return cls.NO


# =============================================================================
# Exceptions
# =============================================================================


class EntityAuditError(Exception):
    """Base exception for entity audit generation errors."""

    pass


class ConfigError(EntityAuditError):
    """Raised when blueprint or application configuration is invalid."""

    pass


class TemplateError(EntityAuditError):
    """Raised when a shared artifact template fails to render."""

    def __init__(self, message: str, template: str | None = None):
        self.template = template
        super().__init__(message)


class FileOperationError(EntityAuditError):
    """Raised when reading, writing or editing a generated file fails."""

    def __init__(self, message: str, path: Path | str | None = None):
        self.path = str(path) if path is not None else None
        super().__init__(message)


# =============================================================================
# Fields
# =============================================================================


# Maps FieldSpec attributes to the host's entity JSON keys.
_FIELD_KEYS = {
    "field_name": "fieldName",
    "field_type": "fieldType",
    "column_type": "columnType",
    "auto_generate": "autoGenerate",
    "readonly": "readonly",
    "java_inherited": "javaInherited",
    "nullable": "nullable",
}


@dataclass
class FieldSpec:
    """One attribute of an entity.

    Attributes:
        field_name: Name of the field, unique within an entity.
        field_type: Declared Java type (e.g. "String", "Instant").
        column_type: Optional database column type override.
        auto_generate: Hidden from the create form.
        readonly: Not editable in forms.
        java_inherited: Declared by a base class, so excluded from the
            generated entity body and its form.
        nullable: Whether the column accepts nulls.
        extra: Unknown JSON keys, kept so that entity files round-trip.
    """

    field_name: str
    field_type: str
    column_type: str | None = None
    auto_generate: bool = False
    readonly: bool = False
    java_inherited: bool = False
    nullable: bool = True
    extra: dict[str, Any] = field(default_factory=dict)

    @property
    def non_nullable(self) -> bool:
        return not self.nullable

    def copy(self) -> "FieldSpec":
        """Return an independent deep copy of this field."""
        return copy.deepcopy(self)

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> "FieldSpec":
        """Build a field from the host's entity JSON representation."""
        if "fieldName" not in data:
            raise ConfigError(f"Field definition without fieldName: {data!r}")

        known = set(_FIELD_KEYS.values())
        return cls(
            field_name=data["fieldName"],
            field_type=data.get("fieldType", "String"),
            column_type=data.get("columnType"),
            auto_generate=bool(data.get("autoGenerate", False)),
            readonly=bool(data.get("readonly", False)),
            java_inherited=bool(data.get("javaInherited", False)),
            nullable=bool(data.get("nullable", True)),
            extra={k: v for k, v in data.items() if k not in known},
        )

    def to_dict(self) -> dict[str, Any]:
        """Serialize to the host's entity JSON representation.

        Flags left at their default are omitted.
        """
        data: dict[str, Any] = {
            "fieldName": self.field_name,
            "fieldType": self.field_type,
        }
        if self.column_type is not None:
            data["columnType"] = self.column_type
        if self.auto_generate:
            data["autoGenerate"] = True
        if self.readonly:
            data["readonly"] = True
        if self.java_inherited:
            data["javaInherited"] = True
        if not self.nullable:
            data["nullable"] = False
        data.update(copy.deepcopy(self.extra))
        return data


def _audit_field(name: str, field_type: str, column_type: str | None = None) -> FieldSpec:
    return FieldSpec(
        field_name=name,
        field_type=field_type,
        column_type=column_type,
        auto_generate=True,
        readonly=True,
        java_inherited=True,
        nullable=False,
    )


# Canonical order; augmentation appends missing fields in this order.
STANDARD_AUDIT_FIELDS: tuple[FieldSpec, ...] = (
    _audit_field("createdBy", "String", "varchar(50)"),
    _audit_field("createdDate", "Instant"),
    _audit_field("lastModifiedBy", "String", "varchar(50)"),
    _audit_field("lastModifiedDate", "Instant"),
)

STANDARD_AUDIT_FIELD_NAMES: tuple[str, ...] = tuple(
    f.field_name for f in STANDARD_AUDIT_FIELDS
)


# =============================================================================
# Entities
# =============================================================================


# EntityConfig attributes stored under host JSON keys.
_ENTITY_KEYS = {
    "enable_audit": "enableAudit",
    "persist_class": "persistClass",
    "rest_class": "restClass",
    "entity_package": "entityPackage",
    "dto": "dto",
    "built_in": "builtIn",
}


@dataclass
class EntityConfig:
    """Configuration of one domain entity.

    The field list is mutated in place by the field augmenter; everything
    else is owned by the host.

    Attributes:
        name: Entity name, unique within the project.
        fields: Ordered, name-unique field list.
        enable_audit: Whether creation/modification metadata is tracked.
        persist_class: Generated persistence class name
            (defaults to name + entity_suffix).
        rest_class: Generated DTO class name (defaults to name + dto_suffix).
        entity_package: Optional sub-package path (e.g. "billing").
        dto: DTO strategy tag ("mapstruct" or "no").
        built_in: Entities provided by the host (User, Authority).
        entity_suffix: Application-wide persistence class suffix.
        dto_suffix: Application-wide DTO class suffix.
        jhi_table_prefix: Table prefix recorded for audited entities.
        extra: Unknown JSON keys, kept so that entity files round-trip.
        source_keys: Keys of the JSON the entity was read from, in order.
    """

    name: str
    fields: list[FieldSpec] = field(default_factory=list)
    enable_audit: bool = False
    persist_class: str | None = None
    rest_class: str | None = None
    entity_package: str | None = None
    dto: str = "no"
    built_in: bool = False
    entity_suffix: str = ""
    dto_suffix: str = "DTO"
    jhi_table_prefix: str | None = None
    extra: dict[str, Any] = field(default_factory=dict)
    source_keys: tuple[str, ...] = field(default=(), repr=False)

    def __post_init__(self) -> None:
        if not self.name:
            raise ConfigError("Entity name cannot be empty")
        if self.persist_class is None:
            self.persist_class = self.default_persist_class
        if self.rest_class is None:
            self.rest_class = self.default_rest_class

    @property
    def default_persist_class(self) -> str:
        return f"{self.name}{self.entity_suffix}"

    @property
    def default_rest_class(self) -> str:
        return f"{self.name}{self.dto_suffix}"

    @property
    def field_names(self) -> list[str]:
        return [f.field_name for f in self.fields]

    def has_field(self, name: str) -> bool:
        return any(f.field_name == name for f in self.fields)

    @property
    def uses_mapped_dto(self) -> bool:
        """Whether a mapped DTO class is generated for this entity."""
        return self.dto == "mapstruct"

    @classmethod
    def from_dict(
        cls,
        data: dict[str, Any],
        name: str | None = None,
        entity_suffix: str = "",
        dto_suffix: str = "DTO",
    ) -> "EntityConfig":
        """Build an entity from the host's entity JSON representation.

        Args:
            data: Parsed entity JSON.
            name: Fallback entity name when the JSON has no "name" key.
            entity_suffix: Application persistence class suffix, used when
                the JSON names no "persistClass".
            dto_suffix: Application DTO class suffix, used when the JSON
                names no "restClass".
        """
        entity_name = data.get("name") or name
        if not entity_name:
            raise ConfigError("Entity definition without a name")

        known = set(_ENTITY_KEYS.values()) | {"name", "fields"}
        return cls(
            name=entity_name,
            fields=[FieldSpec.from_dict(f) for f in data.get("fields", [])],
            enable_audit=bool(data.get("enableAudit", False)),
            persist_class=data.get("persistClass") or None,
            rest_class=data.get("restClass") or None,
            entity_package=data.get("entityPackage"),
            dto=data.get("dto") or "no",
            built_in=bool(data.get("builtIn", False)),
            entity_suffix=entity_suffix,
            dto_suffix=dto_suffix,
            extra={k: v for k, v in data.items() if k not in known},
            source_keys=tuple(data),
        )

    def to_dict(self) -> dict[str, Any]:
        """Serialize to the host's entity JSON representation.

        Keys read from the entity file are written back in their original
        order, defaults included. A key the file did not have is only
        added when its value differs from the default, so saving an
        entity changes nothing but what the pipeline changed.
        """
        present = set(self.source_keys)
        values: dict[str, Any] = {"name": self.name}
        values["fields"] = [f.to_dict() for f in self.fields]
        if self.enable_audit or "enableAudit" in present:
            values["enableAudit"] = self.enable_audit
        if self.persist_class != self.default_persist_class or "persistClass" in present:
            values["persistClass"] = self.persist_class
        if self.rest_class != self.default_rest_class or "restClass" in present:
            values["restClass"] = self.rest_class
        if self.entity_package or "entityPackage" in present:
            values["entityPackage"] = self.entity_package
        if self.dto != "no" or "dto" in present:
            values["dto"] = self.dto
        if self.built_in or "builtIn" in present:
            values["builtIn"] = self.built_in
        if self.source_keys and "name" not in present:
            # name came from the file name
            del values["name"]

        data: dict[str, Any] = {}
        for key in self.source_keys or ("name", *self.extra):
            if key in values:
                data[key] = values.pop(key)
            elif key in self.extra:
                data[key] = copy.deepcopy(self.extra[key])
        for key, value in self.extra.items():
            data.setdefault(key, copy.deepcopy(value))
        data.update(values)
        return data


@dataclass(frozen=True)
class GeneratedArtifact:
    """A rendered shared source file.

    Attributes:
        path: Project-relative output path.
        content: Rendered source text.
        template: Name of the template it was rendered from.
    """

    path: str
    content: str
    template: str = ""
