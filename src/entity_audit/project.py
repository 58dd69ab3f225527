"""Loading and saving host project state.

A generated project keeps its configuration in ``.yo-rc.json`` and one
JSON file per entity under ``.jhipster/``. These helpers turn them into
the pipeline's config objects and write augmented entities back.
"""

from __future__ import annotations

import json
import logging
from pathlib import Path

from entity_audit.base import ConfigError, EntityConfig, FileOperationError
from entity_audit.config import ApplicationConfig, BlueprintConfig

logger = logging.getLogger(__name__)

YO_RC_FILE = ".yo-rc.json"
ENTITIES_DIR = ".jhipster"


def load_application(project_dir: Path | str) -> ApplicationConfig:
    """Read the host application settings of a project.

    Falls back to defaults when the project has no ``.yo-rc.json``.
    """
    path = Path(project_dir) / YO_RC_FILE
    if not path.exists():
        logger.warning(f"{path} not found, using default application settings")
        return ApplicationConfig()
    return ApplicationConfig.from_file(path)


def load_blueprint(project_dir: Path | str) -> BlueprintConfig:
    """Read the blueprint settings stored in the project's ``.yo-rc.json``."""
    path = Path(project_dir) / YO_RC_FILE
    if not path.exists():
        return BlueprintConfig()
    return BlueprintConfig.from_file(path)


def entity_file(project_dir: Path | str, name: str) -> Path:
    return Path(project_dir) / ENTITIES_DIR / f"{name}.json"


def load_entities(
    project_dir: Path | str,
    app: ApplicationConfig | None = None,
) -> list[EntityConfig]:
    """Read every entity definition of a project, sorted by file name.

    Class names the entity files leave out are derived with the
    application's entity and DTO suffixes.

    Raises:
        ConfigError: If an entity file is not valid JSON.
    """
    entities_dir = Path(project_dir) / ENTITIES_DIR
    if not entities_dir.is_dir():
        return []

    app = app or ApplicationConfig()
    entities: list[EntityConfig] = []
    for path in sorted(entities_dir.glob("*.json")):
        try:
            data = json.loads(path.read_text(encoding="utf-8"))
        except json.JSONDecodeError as e:
            raise ConfigError(f"Invalid entity file {path}: {e}") from e
        except OSError as e:
            raise FileOperationError(f"Cannot read {path}: {e}", path=path) from e
        entity = EntityConfig.from_dict(
            data,
            name=path.stem,
            entity_suffix=app.entity_suffix,
            dto_suffix=app.dto_suffix,
        )
        entities.append(entity)

    logger.debug(f"Loaded {len(entities)} entities from {entities_dir}")
    return entities


def save_entities(entities: list[EntityConfig], project_dir: Path | str) -> list[Path]:
    """Write entity definitions back to ``.jhipster/<Name>.json``.

    Returns:
        The written paths.
    """
    written: list[Path] = []
    for entity in entities:
        path = entity_file(project_dir, entity.name)
        try:
            path.parent.mkdir(parents=True, exist_ok=True)
            path.write_text(json.dumps(entity.to_dict(), indent=2) + "\n", encoding="utf-8")
        except OSError as e:
            raise FileOperationError(f"Cannot write {path}: {e}", path=path) from e
        written.append(path)
    return written
