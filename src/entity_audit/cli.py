"""Command-line interface for the entity audit blueprint."""

import logging
from pathlib import Path
from typing import Annotated, Any, Optional

import typer
from rich.console import Console
from rich.table import Table

from entity_audit.base import STANDARD_AUDIT_FIELDS, EntityAuditError
from entity_audit.config import BLUEPRINT_NAMESPACE, BlueprintConfig, read_config_file
from entity_audit.files import FileSystem, LocalFileSystem, MemoryFileSystem
from entity_audit.generator import GenerationResult, generate
from entity_audit.project import load_application, load_blueprint, load_entities, save_entities

app = typer.Typer(
    name="entity-audit",
    help="Add audit fields and auditing base classes to generated entities",
    add_completion=False,
)

console = Console()


def _configure_logging(verbose: bool) -> None:
    logging.basicConfig(
        level=logging.DEBUG if verbose else logging.INFO,
        format="%(levelname)s %(name)s: %(message)s",
    )


def _print_result(result: GenerationResult, dry_run: bool) -> None:
    table = Table(title="Entity audit" + (" (dry run)" if dry_run else ""))
    table.add_column("Entity")
    table.add_column("Added fields")
    table.add_column("Patched files", justify="right")

    for name in result.audited_entities:
        added = result.added_fields.get(name, [])
        table.add_row(
            name,
            ", ".join(f.field_name for f in added) or "-",
            str(len(result.patched_by_entity.get(name, []))),
        )
    console.print(table)

    console.print(f"Audit framework: [bold]{result.flags.audit_framework.value}[/bold]")
    for artifact in result.artifacts:
        console.print(f"  wrote {artifact.path}")
    for path in result.patched_files:
        console.print(f"  patched {path}")


@app.command(name="generate")
def generate_cmd(
    project_dir: Annotated[
        Path,
        typer.Argument(help="Root directory of the generated project"),
    ] = Path("."),
    framework: Annotated[
        Optional[str],
        typer.Option("--framework", "-f", help="Audit framework (no, javers, custom)"),
    ] = None,
    audit_page: Annotated[
        Optional[bool],
        typer.Option("--audit-page/--no-audit-page", help="Generate the audit page"),
    ] = None,
    entities: Annotated[
        Optional[list[str]],
        typer.Option("--entity", "-e", help="Entity to audit (repeatable)"),
    ] = None,
    config_file: Annotated[
        Optional[Path],
        typer.Option("--config", "-c", help="Blueprint configuration file (JSON or YAML)"),
    ] = None,
    dry_run: Annotated[
        bool,
        typer.Option("--dry-run", help="Show what would change without writing"),
    ] = False,
    verbose: Annotated[
        bool,
        typer.Option("--verbose", "-v", help="Enable debug logging"),
    ] = False,
) -> None:
    """Run the audit pipeline against a generated project."""
    _configure_logging(verbose)

    if not project_dir.is_dir():
        typer.echo(f"Error: Project directory not found: {project_dir}", err=True)
        raise typer.Exit(1)

    overrides: dict[str, Any] = {}
    if framework is not None:
        overrides["auditFramework"] = framework
    if audit_page is not None:
        overrides["auditPage"] = audit_page
    if entities:
        overrides["auditedEntities"] = [e.strip() for e in ",".join(entities).split(",")]

    try:
        blueprint = load_blueprint(project_dir)
        if config_file is not None:
            data = read_config_file(config_file)
            blueprint = blueprint.merge(data.get(BLUEPRINT_NAMESPACE, data))
        blueprint = BlueprintConfig.from_env(base=blueprint).merge(overrides)

        application = load_application(project_dir)
        entity_configs = load_entities(project_dir, application)
        before = {e.name: e.to_dict() for e in entity_configs}

        files: FileSystem
        if dry_run:
            files = MemoryFileSystem.from_directory(project_dir, "src/**/*.java")
        else:
            files = LocalFileSystem(project_dir)

        result = generate(
            blueprint,
            application,
            entity_configs,
            files,
            composer=lambda namespace: console.print(f"Composing {namespace}"),
        )

        if not dry_run:
            changed = [e for e in entity_configs if e.to_dict() != before[e.name]]
            save_entities(changed, project_dir)
    except EntityAuditError as e:
        typer.echo(f"Error: {e}", err=True)
        raise typer.Exit(1)

    _print_result(result, dry_run)


@app.command(name="fields")
def fields_cmd() -> None:
    """List the standard audit fields."""
    table = Table(title="Standard audit fields")
    table.add_column("Name")
    table.add_column("Type")
    table.add_column("Column type")

    for spec in STANDARD_AUDIT_FIELDS:
        table.add_row(spec.field_name, spec.field_type, spec.column_type or "-")
    console.print(table)


def main() -> None:
    app()


if __name__ == "__main__":
    main()
