"""Patching of already generated Java sources.

Two kinds of edits are applied after the host has rendered its files:

1. The architecture test gets the imports and ``ignoreDependency``
   clauses that allow the audit listener and the auditing base entity to
   cross layers.
2. Each audited entity class (and its mapped DTO) is made to extend the
   auditing base class.

Every edit is anchored on the first match of a pattern. When the anchor
is absent the text is returned unchanged; this is expected for sources
not produced by a compatible host version and is only logged. Edits that
are already present are not applied twice.
"""

from __future__ import annotations

import logging
import posixpath
import re
from typing import Pattern

from entity_audit.base import EntityConfig
from entity_audit.config import ApplicationConfig
from entity_audit.files import FileSystem

logger = logging.getLogger(__name__)

SERIALIZABLE_IMPORT = "java.io.Serializable"
LAYERED_ARCHITECTURE_IMPORT = re.compile(
    r"import\s+static\s+com\.tngtech\.archunit\.library\.Architectures\.layeredArchitecture\s*;"
)
IGNORE_DEPENDENCY = re.compile(r"\.ignoreDependency\b")

ARCHITECTURE_TEST_FILE = "TechnicalStructureTest.java"
AUDITING_ENTITY_BASE = "AbstractAuditingEntity"
AUDITING_DTO_BASE = "AbstractAuditingDTO"


# =============================================================================
# Text Splicing
# =============================================================================


def _compile(anchor: str | Pattern[str]) -> Pattern[str]:
    if isinstance(anchor, str):
        return re.compile(re.escape(anchor))
    return anchor


def _newline(text: str) -> str:
    return "\r\n" if "\r\n" in text else "\n"


def insert_after_line(text: str, anchor: str | Pattern[str], lines: list[str]) -> str:
    """Insert lines after the line holding the first anchor match.

    Args:
        text: Source text.
        anchor: Literal string or compiled pattern.
        lines: Lines to insert, without line terminators.

    Returns:
        The patched text, or the original text if the anchor is absent.
    """
    if not lines:
        return text
    match = _compile(anchor).search(text)
    if match is None:
        return text

    newline = _newline(text)
    line_end = text.find("\n", match.end())
    block = newline.join(lines)
    if line_end == -1:
        return f"{text}{newline}{block}"
    return f"{text[:line_end + 1]}{block}{newline}{text[line_end + 1:]}"


def insert_before(text: str, anchor: str | Pattern[str], snippet: str) -> str:
    """Insert a snippet immediately before the first anchor match.

    Returns:
        The patched text, or the original text if the anchor is absent.
    """
    match = _compile(anchor).search(text)
    if match is None:
        return text
    return f"{text[:match.start()]}{snippet}{text[match.start():]}"


def _line_indent(text: str, position: int) -> str:
    line_start = text.rfind("\n", 0, position) + 1
    line = text[line_start:position]
    return line[: len(line) - len(line.lstrip())]


def has_import(text: str, fqn: str) -> bool:
    return re.search(rf"(?m)^\s*import\s+{re.escape(fqn)}\s*;", text) is not None


def add_import_after(text: str, fqn: str, anchor_import: str = SERIALIZABLE_IMPORT) -> str:
    """Add ``import <fqn>;`` right after an existing import line.

    Nothing happens when the import is already present or the anchor
    import is missing.
    """
    if has_import(text, fqn):
        return text
    anchor = re.compile(rf"(?m)^\s*import\s+{re.escape(anchor_import)}\s*;")
    patched = insert_after_line(text, anchor, [f"import {fqn};"])
    if patched == text:
        logger.debug(f"Anchor import {anchor_import} not found, skipping import of {fqn}")
    return patched


# =============================================================================
# Class Declarations
# =============================================================================


def class_declaration_pattern(class_name: str) -> Pattern[str]:
    """Pattern for the ``public class <Name>`` declaration of a class.

    The name must be followed by ``extends``, ``implements`` or the class
    body, so identifiers that merely start with the class name
    (``BookDTO`` for ``Book``) or mention it elsewhere never match.
    """
    return re.compile(
        rf"\bpublic\s+(?:(?:abstract|final|static)\s+)*class\s+{re.escape(class_name)}\b"
        rf"(?:\s+extends\s+(?P<base>[\w.]+(?:\s*<[^>{{]*>)?))?"
        rf"(?=\s*(?:\{{|implements\b))"
    )


def _raw_type(name: str) -> str:
    return name.split("<", 1)[0].strip().rsplit(".", 1)[-1]


def extend_class(text: str, class_name: str, base: str) -> str:
    """Make a class extend a base class.

    ``public class Book implements Serializable`` becomes
    ``public class Book extends AbstractAuditingEntity implements Serializable``.

    Args:
        text: Java source.
        class_name: Simple name of the class to patch.
        base: Base class to extend, optionally with type arguments.

    Returns:
        The patched source. Unchanged when the declaration is not found,
        already extends ``base``, or already extends another class.
    """
    match = class_declaration_pattern(class_name).search(text)
    if match is None:
        logger.debug(f"Class declaration for {class_name} not found")
        return text

    current = match.group("base")
    if current is not None:
        if _raw_type(current) != _raw_type(base):
            logger.warning(
                f"{class_name} already extends {current}, not extending {base}"
            )
        return text

    return f"{text[:match.end()]} extends {base}{text[match.end():]}"


# =============================================================================
# Architecture Test
# =============================================================================


def architecture_test_imports(package_name: str) -> list[str]:
    return [
        "import static com.tngtech.archunit.core.domain.JavaClass.Predicates.type;",
        "import static com.tngtech.archunit.core.domain.JavaClass.Predicates.resideInAPackage;",
        f"import {package_name}.audit.EntityAuditEventListener;",
        f"import {package_name}.domain.{AUDITING_ENTITY_BASE};",
    ]


def architecture_test_clauses(package_name: str) -> list[str]:
    return [
        f'.ignoreDependency(resideInAPackage("{package_name}.audit"), alwaysTrue())',
        f".ignoreDependency(type({AUDITING_ENTITY_BASE}.class), type(EntityAuditEventListener.class))",
    ]


def patch_architecture_test(text: str, package_name: str) -> str:
    """Allow the audit classes through the layered architecture test.

    The imports go after the ``layeredArchitecture`` static import, the
    clauses before the first ``.ignoreDependency`` call. Lines that are
    already present are not inserted again.
    """
    imports = [line for line in architecture_test_imports(package_name) if line not in text]
    text = insert_after_line(text, LAYERED_ARCHITECTURE_IMPORT, imports)

    clauses = [clause for clause in architecture_test_clauses(package_name) if clause not in text]
    match = IGNORE_DEPENDENCY.search(text)
    if clauses and match is not None:
        indent = _line_indent(text, match.start())
        snippet = "".join(f"{clause}{_newline(text)}{indent}" for clause in clauses)
        text = insert_before(text, IGNORE_DEPENDENCY, snippet)
    elif clauses:
        logger.debug("No .ignoreDependency call found in architecture test")
    return text


def architecture_test_path(app: ApplicationConfig) -> str:
    return posixpath.join(app.absolute_package_test_folder, ARCHITECTURE_TEST_FILE)


def apply_architecture_test_patch(app: ApplicationConfig, files: FileSystem) -> bool:
    """Patch the project's architecture test in place.

    Returns:
        True if the file changed.
    """
    return files.edit(
        architecture_test_path(app),
        lambda contents: patch_architecture_test(contents, app.package_name),
    )


# =============================================================================
# Entity Sources
# =============================================================================


def entity_folder(app: ApplicationConfig, entity: EntityConfig) -> str:
    sub_package = (entity.entity_package or "").replace(".", "/")
    return posixpath.join(app.absolute_package_folder, sub_package)


def entity_source_path(app: ApplicationConfig, entity: EntityConfig) -> str:
    return posixpath.join(entity_folder(app, entity), "domain", f"{entity.persist_class}.java")


def dto_source_path(app: ApplicationConfig, entity: EntityConfig) -> str:
    return posixpath.join(entity_folder(app, entity), "service", "dto", f"{entity.rest_class}.java")


def patch_inheritance(
    text: str,
    class_name: str,
    base: str,
    base_import: str | None = None,
) -> str:
    """Import (optionally) and extend a base class."""
    if base_import:
        text = add_import_after(text, base_import)
    return extend_class(text, class_name, base)


def patch_entity_sources(
    entity: EntityConfig,
    app: ApplicationConfig,
    files: FileSystem,
) -> list[str]:
    """Make an audited entity and its mapped DTO extend the auditing bases.

    Entities outside the base package also get an import for the base
    class, since it lives in the base package. Built-in and non-audited
    entities are skipped.

    Returns:
        Paths of the files that changed.
    """
    if entity.built_in or not entity.enable_audit:
        return []

    in_sub_package = bool(entity.entity_package)
    patched: list[str] = []

    entity_path = entity_source_path(app, entity)
    entity_import = f"{app.package_name}.domain.{AUDITING_ENTITY_BASE}" if in_sub_package else None
    if files.edit(
        entity_path,
        lambda contents: patch_inheritance(
            contents, entity.persist_class, AUDITING_ENTITY_BASE, entity_import
        ),
    ):
        patched.append(entity_path)

    if entity.uses_mapped_dto:
        dto_path = dto_source_path(app, entity)
        dto_import = f"{app.package_name}.service.dto.{AUDITING_DTO_BASE}" if in_sub_package else None
        if files.edit(
            dto_path,
            lambda contents: patch_inheritance(
                contents, entity.rest_class, AUDITING_DTO_BASE, dto_import
            ),
        ):
            patched.append(dto_path)

    return patched
