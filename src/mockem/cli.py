"""
Command-line interface for mockem.

Provides generate, catalog and serve commands.
"""

from __future__ import annotations

import logging
import sys
from pathlib import Path
from typing import Optional

import click
from rich.console import Console
from rich.table import Table

from mockem import __version__
from mockem.errors import MockemError
from mockem.log import setup_logging

console = Console()


@click.group()
@click.version_option(version=__version__, prog_name="mockem")
@click.option("-v", "--verbose", is_flag=True, help="Enable verbose output")
def cli(verbose: bool) -> None:
    """
    MockEm - Enterprise Mock Data Generator

    Generate fictitious, relationally consistent business records as CSV.
    """
    setup_logging(logging.DEBUG if verbose else logging.INFO, console=console)


@cli.command()
@click.option(
    "--category",
    type=str,
    required=True,
    help="Business category (e.g. sales-crm, finance-erp)",
)
@click.option(
    "--schemas",
    type=str,
    required=True,
    help="Comma-separated schema names within the category",
)
@click.option(
    "--rows",
    type=int,
    default=10,
    show_default=True,
    help="Rows per schema (1-100)",
)
@click.option(
    "--platform",
    type=str,
    default="general",
    show_default=True,
    help="Target platform label",
)
@click.option(
    "--seed",
    type=int,
    default=None,
    help="Random seed for reproducibility",
)
@click.option(
    "--output_dir",
    type=click.Path(path_type=Path),
    default=Path("output"),
    show_default=True,
    help="Directory for CSV files and manifest.json",
)
@click.option(
    "--catalog",
    "catalog_path",
    type=click.Path(exists=True, path_type=Path),
    default=None,
    help="Alternative catalog YAML",
)
def generate(
    category: str,
    schemas: str,
    rows: int,
    platform: str,
    seed: Optional[int],
    output_dir: Path,
    catalog_path: Optional[Path],
) -> None:
    """
    Generate related mock data and write it as CSV files.

    Examples:

        # Companies with their contacts, 25 rows each
        mockem generate --category sales-crm --schemas companies,contacts --rows 25

        # Reproducible supply chain batch
        mockem generate --category supply-chain \\
            --schemas suppliers,products,orders --rows 50 --seed 42
    """
    from mockem.catalog import load_catalog, load_vocabularies
    from mockem.generator import Generator
    from mockem.models import GenerationRequest
    from mockem.output import ExportWriter
    from mockem.utils import IntegrityReporter

    console.print("[bold blue]MockEm Generation[/bold blue]")
    console.print(f"Category: {category}")
    console.print(f"Platform: {platform}")

    request = GenerationRequest(
        category=category,
        schemas=schemas,
        row_count=rows,
        platform=platform,
        seed=seed,
    )

    try:
        catalog = load_catalog(catalog_path)
        generator = Generator(catalog, request, load_vocabularies(), show_progress=True)
        result = generator.generate()
    except MockemError as e:
        console.print(f"[red]Error: {e.message}[/red]")
        sys.exit(1)

    table = Table(title="Generated Schemas")
    table.add_column("Schema", style="cyan")
    table.add_column("Rows", style="green", justify="right")
    table.add_column("Columns", style="yellow", justify="right")
    table.add_column("Placeholder FKs", style="magenta")

    for schema in result.order:
        table.add_row(
            schema,
            f"{len(result.data[schema]):,}",
            str(len(result.columns(schema))),
            ", ".join(result.unresolved_references.get(schema, [])) or "-",
        )

    console.print(table)

    output_paths = ExportWriter(result).write_files(output_dir)
    console.print(f"\n[green]Wrote {len(output_paths)} files to {output_dir}[/green]")

    report = IntegrityReporter(catalog, result).generate_report()
    ri_score = report["referential_integrity"]["integrity_score"]
    if ri_score == 1.0:
        console.print(f"\n[green]Referential Integrity: {ri_score:.0%}[/green]")
    else:
        console.print(f"\n[yellow]Referential Integrity: {ri_score:.0%}[/yellow]")


@cli.command(name="catalog")
@click.option(
    "--catalog",
    "catalog_path",
    type=click.Path(exists=True, path_type=Path),
    default=None,
    help="Alternative catalog YAML",
)
def show_catalog(catalog_path: Optional[Path]) -> None:
    """
    List categories, schemas and foreign-key relationships.

    Example:

        mockem catalog
    """
    from mockem.catalog import RelationshipResolver, load_catalog

    catalog = load_catalog(catalog_path)
    resolver = RelationshipResolver(catalog)

    categories_table = Table(title="Categories")
    categories_table.add_column("Category", style="cyan")
    categories_table.add_column("Title", style="green")
    categories_table.add_column("Generation Order", style="yellow")

    for name, category in catalog.categories.items():
        order = resolver.resolve(name, category.schemas)
        categories_table.add_row(name, category.title, " -> ".join(order))

    console.print(categories_table)

    rel_table = Table(title="Relationships")
    rel_table.add_column("Category", style="cyan")
    rel_table.add_column("Child", style="yellow")
    rel_table.add_column("Key", style="magenta")
    rel_table.add_column("Parent", style="green")

    for name, category in catalog.categories.items():
        for child, fks in category.relationships.items():
            for fk in fks:
                rel_table.add_row(name, child, fk.field, fk.schema)

    console.print(rel_table)
    console.print(f"Platforms: {', '.join(catalog.platforms)}")


@cli.command()
@click.option("--host", type=str, default="127.0.0.1", show_default=True)
@click.option("--port", type=int, default=8000, show_default=True)
@click.option(
    "--config",
    "config_path",
    type=click.Path(exists=True, path_type=Path),
    default=None,
    help="Service configuration YAML",
)
def serve(host: str, port: int, config_path: Optional[Path]) -> None:
    """
    Run the HTTP API.

    Example:

        mockem serve --port 8000 --config mockem.yaml
    """
    import uvicorn

    from mockem.api import create_app
    from mockem.config import load_config

    config = load_config(config_path)

    console.print(f"[bold blue]MockEm API[/bold blue] on http://{host}:{port}")
    uvicorn.run(create_app(config), host=host, port=port, log_config=None)


if __name__ == "__main__":
    cli()
