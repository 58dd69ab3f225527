"""Shared audit artifacts.

Three Java sources are rendered on every run, whatever the number of
audited entities:

- domain/enumeration/EntityAuditAction.java
- domain/EntityAuditEvent.java
- service/dto/AbstractAuditingDTO.java

Templates ship with the package under ``entity_audit/templates`` and are
rendered with Jinja2.
"""

from __future__ import annotations

import logging
import posixpath
from typing import Any

from jinja2 import (
    Environment,
    PackageLoader,
    StrictUndefined,
    TemplateError as JinjaTemplateError,
)

from entity_audit.base import (
    STANDARD_AUDIT_FIELDS,
    GeneratedArtifact,
    TemplateError,
)
from entity_audit.config import ApplicationConfig
from entity_audit.files import FileSystem
from entity_audit.strategy import AuditFlags

logger = logging.getLogger(__name__)

ARTIFACT_TEMPLATES: tuple[str, ...] = (
    "domain/enumeration/EntityAuditAction.java",
    "domain/EntityAuditEvent.java",
    "service/dto/AbstractAuditingDTO.java",
)

AUDIT_ACTIONS: tuple[str, ...] = ("CREATE", "UPDATE", "DELETE")

# Properties of EntityAuditEvent, in declaration order.
EVENT_PROPERTIES: tuple[tuple[str, str], ...] = (
    ("id", "Long"),
    ("entityId", "String"),
    ("entityType", "String"),
    ("action", "String"),
    ("entityValue", "String"),
    ("commitVersion", "Integer"),
    ("modifiedBy", "String"),
    ("modifiedDate", "Instant"),
)


def upper_first(value: str) -> str:
    """Capitalize the first character only ("createdBy" -> "CreatedBy")."""
    return value[:1].upper() + value[1:]


class TemplateRenderer:
    """Renders the packaged Java templates.

    The Jinja2 environment is created lazily and reused.
    """

    def __init__(self, package: str = "entity_audit", template_dir: str = "templates") -> None:
        self._package = package
        self._template_dir = template_dir
        self._env: Environment | None = None

    def get_environment(self) -> Environment:
        if self._env is not None:
            return self._env

        self._env = Environment(
            loader=PackageLoader(self._package, self._template_dir),
            undefined=StrictUndefined,
            keep_trailing_newline=True,
            trim_blocks=True,
            lstrip_blocks=True,
            autoescape=False,
        )
        self._env.filters["upper_first"] = upper_first
        return self._env

    def render(self, template_name: str, context: dict[str, Any]) -> str:
        """Render a template by its output path.

        Args:
            template_name: Output path, without the ``.j2`` suffix.
            context: Template variables.

        Raises:
            TemplateError: If the template is missing or fails to render.
        """
        try:
            template = self.get_environment().get_template(f"{template_name}.j2")
            return template.render(**context)
        except JinjaTemplateError as e:
            raise TemplateError(
                f"Failed to render {template_name}: {e}",
                template=template_name,
            ) from e


def build_context(app: ApplicationConfig, flags: AuditFlags) -> dict[str, Any]:
    """Template variables for the shared artifacts."""
    context = flags.as_template_context()
    context.update(
        {
            "packageName": app.package_name,
            "jhiTablePrefix": app.jhi_table_prefix,
            "auditEventTable": f"{app.jhi_table_prefix}_entity_audit_event",
            "auditActions": AUDIT_ACTIONS,
            "auditFields": [f.copy() for f in STANDARD_AUDIT_FIELDS],
            "eventProperties": [
                {"name": name, "type": java_type} for name, java_type in EVENT_PROPERTIES
            ],
        }
    )
    return context


def artifact_path(app: ApplicationConfig, template_name: str) -> str:
    return posixpath.join(app.absolute_package_folder, template_name)


def emit_artifacts(
    app: ApplicationConfig,
    flags: AuditFlags,
    files: FileSystem,
    renderer: TemplateRenderer | None = None,
) -> list[GeneratedArtifact]:
    """Render and write the shared audit artifacts.

    Args:
        app: Application settings, for the package and output folder.
        flags: Strategy flags, selecting template variants.
        files: Destination file system.
        renderer: Template renderer (a default one is created if omitted).

    Returns:
        The written artifacts, in template order.

    Raises:
        TemplateError: If a template fails to render.
        FileOperationError: If a file cannot be written.
    """
    renderer = renderer or TemplateRenderer()
    context = build_context(app, flags)

    artifacts: list[GeneratedArtifact] = []
    for template_name in ARTIFACT_TEMPLATES:
        content = renderer.render(template_name, context)
        path = artifact_path(app, template_name)
        files.write(path, content)
        artifacts.append(GeneratedArtifact(path=path, content=content, template=template_name))

    logger.info(f"Wrote {len(artifacts)} shared audit artifacts")
    return artifacts
