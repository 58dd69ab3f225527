"""Blueprint and application configuration.

Two configuration records feed the pipeline:
- BlueprintConfig: the audit options chosen for the project
  (auditFramework, auditPage, auditedEntities)
- ApplicationConfig: the host application settings needed to compute
  output locations (packageName, jhiPrefix)

Both can be built from mappings, from the host's ``.yo-rc.json`` file,
from YAML/JSON files, and (for the blueprint) from environment variables.

Usage:
    >>> config = BlueprintConfig.from_file(".yo-rc.json")
    >>> config = config.merge({"auditPage": True})
    >>> app = ApplicationConfig.from_file(".yo-rc.json")
    >>> app.absolute_package_folder
    'src/main/java/com/mycompany/myapp/'
"""

from __future__ import annotations

import json
import os
import re
from dataclasses import dataclass, field, replace
from pathlib import Path
from typing import Any, Mapping

import yaml

from entity_audit.base import AuditFramework, ConfigError

SERVER_MAIN_SRC_DIR = "src/main/java/"
SERVER_TEST_SRC_DIR = "src/test/java/"

HOST_NAMESPACE = "generator-jhipster"
BLUEPRINT_NAMESPACE = "generator-jhipster-entity-audit"

_TRUE_STRINGS = {"true", "yes", "y", "1", "on"}
_FALSE_STRINGS = {"false", "no", "n", "0", "off", ""}


def parse_bool(value: Any, name: str = "value") -> bool:
    """Interpret a boolean-ish configuration value.

    Raises:
        ConfigError: If a string is neither truthy nor falsy.
    """
    if isinstance(value, bool):
        return value
    if value is None:
        return False
    if isinstance(value, (int, float)):
        return bool(value)
    text = str(value).strip().lower()
    if text in _TRUE_STRINGS:
        return True
    if text in _FALSE_STRINGS:
        return False
    raise ConfigError(f"Invalid boolean for {name}: {value!r}")


def _parse_names(value: Any) -> tuple[str, ...]:
    if value is None:
        return ()
    if isinstance(value, str):
        value = value.split(",")
    return tuple(name.strip() for name in value if name and name.strip())


def read_config_file(path: Path | str) -> dict[str, Any]:
    """Read a JSON or YAML configuration file into a dict.

    Raises:
        ConfigError: If the file is missing, unreadable or malformed.
    """
    path = Path(path)
    if not path.exists():
        raise ConfigError(f"Configuration file not found: {path}")

    try:
        text = path.read_text(encoding="utf-8")
    except OSError as e:
        raise ConfigError(f"Cannot read configuration file {path}: {e}") from e

    try:
        if path.suffix in (".yml", ".yaml"):
            data = yaml.safe_load(text) or {}
        else:
            data = json.loads(text) if text.strip() else {}
    except (json.JSONDecodeError, yaml.YAMLError) as e:
        raise ConfigError(f"Cannot parse configuration file {path}: {e}") from e

    if not isinstance(data, dict):
        raise ConfigError(f"Configuration file {path} must contain a mapping")
    return data


_MISSING = object()


def _first(data: Mapping[str, Any], *keys: str) -> Any:
    for key in keys:
        if key in data:
            return data[key]
    return _MISSING


def _section(data: Mapping[str, Any], namespace: str) -> Mapping[str, Any]:
    """Return the namespaced section of a .yo-rc.json document, or the
    document itself when it is not namespaced."""
    section = data.get(namespace)
    if isinstance(section, Mapping):
        return section
    return data


# =============================================================================
# Blueprint Configuration
# =============================================================================


@dataclass(frozen=True)
class BlueprintConfig:
    """Audit options for one generation run.

    Attributes:
        audit_framework: Selected audit persistence strategy.
        audit_page: Whether the audit browsing page is generated.
        audited_entities: Entity names explicitly selected for auditing.
    """

    audit_framework: AuditFramework = AuditFramework.NO
    audit_page: bool = False
    audited_entities: tuple[str, ...] = field(default_factory=tuple)

    def __post_init__(self) -> None:
        object.__setattr__(self, "audit_framework", AuditFramework.parse(self.audit_framework))
        object.__setattr__(self, "audited_entities", _parse_names(self.audited_entities))

    @classmethod
    def from_dict(cls, data: Mapping[str, Any]) -> "BlueprintConfig":
        """Build from a mapping with camelCase or snake_case keys."""
        return cls().merge(data)

    @classmethod
    def from_file(cls, path: Path | str) -> "BlueprintConfig":
        """Load from a JSON/YAML file or a host ``.yo-rc.json``."""
        data = read_config_file(path)
        return cls.from_dict(_section(data, BLUEPRINT_NAMESPACE))

    @classmethod
    def from_env(
        cls,
        prefix: str = "ENTITY_AUDIT_",
        base: "BlueprintConfig | None" = None,
    ) -> "BlueprintConfig":
        """Overlay environment variables on a base configuration.

        Reads ``<prefix>FRAMEWORK``, ``<prefix>PAGE`` and
        ``<prefix>ENTITIES`` (comma separated).
        """
        overrides: dict[str, Any] = {}
        for key, env_name in (
            ("auditFramework", "FRAMEWORK"),
            ("auditPage", "PAGE"),
            ("auditedEntities", "ENTITIES"),
        ):
            value = os.getenv(f"{prefix}{env_name}")
            if value is not None:
                overrides[key] = value
        return (base or cls()).merge(overrides)

    def merge(self, other: "BlueprintConfig | Mapping[str, Any]") -> "BlueprintConfig":
        """Merge with another config, other takes precedence."""
        if isinstance(other, BlueprintConfig):
            return other

        updates: dict[str, Any] = {}
        framework = _first(other, "auditFramework", "audit_framework")
        if framework is not _MISSING:
            updates["audit_framework"] = AuditFramework.parse(framework)
        page = _first(other, "auditPage", "audit_page")
        if page is not _MISSING:
            updates["audit_page"] = parse_bool(page, "auditPage")
        names = _first(other, "auditedEntities", "audited_entities")
        if names is not _MISSING:
            updates["audited_entities"] = _parse_names(names)
        return replace(self, **updates)

    def to_dict(self) -> dict[str, Any]:
        return {
            "auditFramework": self.audit_framework.value,
            "auditPage": self.audit_page,
            "auditedEntities": list(self.audited_entities),
        }


# =============================================================================
# Application Configuration
# =============================================================================


def get_table_name(value: str) -> str:
    """Convert a name to the host's snake_case table naming.

    >>> get_table_name("jhi")
    'jhi'
    >>> get_table_name("myPrefix")
    'my_prefix'
    """
    snake = re.sub(r"([a-z0-9])([A-Z])", r"\1_\2", value)
    snake = re.sub(r"[^A-Za-z0-9]+", "_", snake)
    return snake.strip("_").lower()


@dataclass(frozen=True)
class ApplicationConfig:
    """Host application settings.

    Attributes:
        package_name: Base Java package (e.g. "com.mycompany.myapp").
        jhi_prefix: Host table/class prefix.
        entity_suffix: Suffix of generated persistence class names.
        dto_suffix: Suffix of generated DTO class names.
    """

    package_name: str = "com.mycompany.myapp"
    jhi_prefix: str = "jhi"
    entity_suffix: str = ""
    dto_suffix: str = "DTO"

    def __post_init__(self) -> None:
        if not re.match(r"^[A-Za-z_][\w]*(\.[A-Za-z_][\w]*)*$", self.package_name):
            raise ConfigError(f"Invalid package name: {self.package_name!r}")

    @property
    def package_folder(self) -> str:
        return self.package_name.replace(".", "/")

    @property
    def absolute_package_folder(self) -> str:
        return f"{SERVER_MAIN_SRC_DIR}{self.package_folder}/"

    @property
    def absolute_package_test_folder(self) -> str:
        return f"{SERVER_TEST_SRC_DIR}{self.package_folder}/"

    @property
    def jhi_table_prefix(self) -> str:
        return get_table_name(self.jhi_prefix)

    @classmethod
    def from_dict(cls, data: Mapping[str, Any]) -> "ApplicationConfig":
        """Build from a mapping using the host's camelCase keys."""
        kwargs: dict[str, Any] = {}
        if data.get("packageName"):
            kwargs["package_name"] = data["packageName"]
        if data.get("jhiPrefix"):
            kwargs["jhi_prefix"] = data["jhiPrefix"]
        # an empty suffix is a valid setting
        if data.get("entitySuffix") is not None:
            kwargs["entity_suffix"] = data["entitySuffix"]
        if data.get("dtoSuffix") is not None:
            kwargs["dto_suffix"] = data["dtoSuffix"]
        return cls(**kwargs)

    @classmethod
    def from_file(cls, path: Path | str) -> "ApplicationConfig":
        """Load from a host ``.yo-rc.json`` (or any JSON/YAML mapping)."""
        data = read_config_file(path)
        return cls.from_dict(_section(data, HOST_NAMESPACE))
