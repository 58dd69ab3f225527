"""Tests for the shared audit artifacts."""

from __future__ import annotations

import pytest

from entity_audit.artifacts import (
    ARTIFACT_TEMPLATES,
    TemplateRenderer,
    emit_artifacts,
    upper_first,
)
from entity_audit.base import TemplateError
from entity_audit.config import ApplicationConfig, BlueprintConfig
from entity_audit.files import MemoryFileSystem
from entity_audit.strategy import derive_flags

from java_sources import MAIN


def _emit(framework: str, app: ApplicationConfig | None = None):
    files = MemoryFileSystem()
    flags = derive_flags(BlueprintConfig(audit_framework=framework))
    artifacts = emit_artifacts(app or ApplicationConfig(package_name="com.mycompany.myapp"), flags, files)
    return files, {a.template: a.content for a in artifacts}


class TestEmitArtifacts:
    """Tests for emit_artifacts."""

    @pytest.mark.parametrize("framework", ["no", "javers", "custom"])
    def test_always_writes_three_artifacts(self, framework):
        files, _ = _emit(framework)

        assert files.written == [
            f"{MAIN}/domain/enumeration/EntityAuditAction.java",
            f"{MAIN}/domain/EntityAuditEvent.java",
            f"{MAIN}/service/dto/AbstractAuditingDTO.java",
        ]

    def test_action_enum(self):
        _, content = _emit("custom")
        source = content["domain/enumeration/EntityAuditAction.java"]

        assert "package com.mycompany.myapp.domain.enumeration;" in source
        assert "public enum EntityAuditAction {" in source
        for action in ("CREATE,", "UPDATE,", "DELETE;"):
            assert action in source

    def test_abstract_auditing_dto(self):
        _, content = _emit("no")
        source = content["service/dto/AbstractAuditingDTO.java"]

        assert "package com.mycompany.myapp.service.dto;" in source
        assert "public abstract class AbstractAuditingDTO implements Serializable" in source
        assert "private String createdBy;" in source
        assert "private Instant lastModifiedDate;" in source
        assert "public String getLastModifiedBy()" in source
        assert "public void setCreatedDate(Instant createdDate)" in source

    def test_custom_event_is_jpa_entity(self):
        _, content = _emit("custom", ApplicationConfig(package_name="com.example", jhi_prefix="app"))
        source = content["domain/EntityAuditEvent.java"]

        assert "package com.example.domain;" in source
        assert "@Entity" in source
        assert '@Table(name = "app_entity_audit_event")' in source
        assert "fromJaversSnapshot" not in source

    def test_javers_event_maps_snapshots(self):
        _, content = _emit("javers")
        source = content["domain/EntityAuditEvent.java"]

        assert "@Entity" not in source
        assert "import org.javers.core.metamodel.object.CdoSnapshot;" in source
        assert "public static EntityAuditEvent fromJaversSnapshot(CdoSnapshot snapshot)" in source

    def test_event_accessors(self):
        _, content = _emit("no")
        source = content["domain/EntityAuditEvent.java"]

        assert "public Integer getCommitVersion()" in source
        assert "public void setModifiedDate(Instant modifiedDate)" in source

    def test_templates_listed(self):
        assert len(ARTIFACT_TEMPLATES) == 3


class TestTemplateRenderer:
    """Tests for TemplateRenderer."""

    def test_missing_template(self):
        with pytest.raises(TemplateError) as exc_info:
            TemplateRenderer().render("domain/Missing.java", {})
        assert exc_info.value.template == "domain/Missing.java"

    def test_missing_variable(self):
        with pytest.raises(TemplateError):
            TemplateRenderer().render("domain/enumeration/EntityAuditAction.java", {})

    def test_environment_reused(self):
        renderer = TemplateRenderer()
        assert renderer.get_environment() is renderer.get_environment()


def test_upper_first():
    assert upper_first("createdBy") == "CreatedBy"
    assert upper_first("") == ""
