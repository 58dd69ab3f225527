"""Entity audit - creation/modification metadata and change history for
generated domain entities."""

from entity_audit.base import (
    STANDARD_AUDIT_FIELD_NAMES,
    STANDARD_AUDIT_FIELDS,
    AuditFramework,
    ConfigError,
    EntityAuditError,
    EntityConfig,
    FieldSpec,
    FileOperationError,
    GeneratedArtifact,
    TemplateError,
)
from entity_audit.config import ApplicationConfig, BlueprintConfig
from entity_audit.fields import SharedEntityRegistry, augment_entity, is_audit_enabled
from entity_audit.files import FileSystem, LocalFileSystem, MemoryFileSystem
from entity_audit.generator import EntityAuditGenerator, GenerationResult, Stage, generate
from entity_audit.strategy import AuditFlags, AuditStrategy, derive_flags, select_strategy

__version__ = "0.1.0"

__all__ = [
    # Types
    "AuditFramework",
    "FieldSpec",
    "EntityConfig",
    "GeneratedArtifact",
    "STANDARD_AUDIT_FIELDS",
    "STANDARD_AUDIT_FIELD_NAMES",
    # Errors
    "EntityAuditError",
    "ConfigError",
    "TemplateError",
    "FileOperationError",
    # Configuration
    "BlueprintConfig",
    "ApplicationConfig",
    # Pipeline
    "AuditFlags",
    "AuditStrategy",
    "derive_flags",
    "select_strategy",
    "SharedEntityRegistry",
    "augment_entity",
    "is_audit_enabled",
    "EntityAuditGenerator",
    "GenerationResult",
    "Stage",
    "generate",
    # Infrastructure
    "FileSystem",
    "LocalFileSystem",
    "MemoryFileSystem",
]
