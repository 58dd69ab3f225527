"""Shared fixtures for entity audit tests."""

from __future__ import annotations

import pytest

from entity_audit.base import EntityConfig, FieldSpec
from entity_audit.config import ApplicationConfig, BlueprintConfig
from entity_audit.files import MemoryFileSystem

from java_sources import ARCHITECTURE_TEST, MAIN, PACKAGE, TEST, dto_source, entity_source


@pytest.fixture
def app() -> ApplicationConfig:
    return ApplicationConfig(package_name=PACKAGE)


@pytest.fixture
def blueprint() -> BlueprintConfig:
    return BlueprintConfig(audit_framework="custom", audited_entities=("Book",))


@pytest.fixture
def book() -> EntityConfig:
    return EntityConfig(
        name="Book",
        fields=[FieldSpec(field_name="title", field_type="String")],
        dto="mapstruct",
    )


@pytest.fixture
def author() -> EntityConfig:
    return EntityConfig(
        name="Author",
        fields=[FieldSpec(field_name="name", field_type="String")],
    )


@pytest.fixture
def project_files() -> MemoryFileSystem:
    """In-memory project with the sources the host generates."""
    return MemoryFileSystem(
        {
            f"{MAIN}/domain/Book.java": entity_source("Book"),
            f"{MAIN}/service/dto/BookDTO.java": dto_source("BookDTO"),
            f"{MAIN}/domain/Author.java": entity_source("Author"),
            f"{TEST}/TechnicalStructureTest.java": ARCHITECTURE_TEST,
        }
    )
