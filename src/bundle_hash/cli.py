"""CLI for bundle-hash."""

import logging
from pathlib import Path
from typing import Optional

import typer
from rich.console import Console
from rich.logging import RichHandler
from rich.table import Table

from .builder import ManifestBuilder
from .config import HashConfig, load_hash_config
from .diffing import diff_manifests
from .errors import BundleHashError
from .manifest import PackageManifest


app = typer.Typer(help="""\
Content-addressed manifests for release packages. Hash a directory or a
zip archive into a path -> digest manifest and a single package hash that
is identical for zipped and extracted copies of the same files.""")

console = Console()

_state = {"config_path": None}


@app.callback()
def main_callback(
    verbose: bool = typer.Option(False, "--verbose", "-v", help="Show debug logging"),
    config: Optional[Path] = typer.Option(
        None, "--config", "-c", help="Config file or directory holding .bundle-hash.yaml"
    ),
):
    """Global options."""
    logging.basicConfig(
        level=logging.DEBUG if verbose else logging.WARNING,
        format="%(message)s",
        handlers=[RichHandler(console=Console(stderr=True), show_path=False)],
        force=True,
    )
    _state["config_path"] = config


def _load_config() -> HashConfig:
    return load_hash_config(_state["config_path"])


def _build(path: Path) -> PackageManifest:
    """Build a manifest, turning bundle-hash errors into a clean exit."""
    try:
        return ManifestBuilder(_load_config()).build(path)
    except BundleHashError as e:
        console.print(f"[red]✗[/red] {e}")
        raise typer.Exit(1)


@app.command()
def manifest(
    path: Path = typer.Argument(..., help="Zip archive or directory to hash"),
    output: Optional[Path] = typer.Option(None, "--output", "-o", help="Write manifest JSON to this file"),
):
    """Build the manifest of a package.

    Examples:
        bundle-hash manifest build/www
        bundle-hash manifest release.zip -o release.manifest.json
    """
    result = _build(path)
    if output:
        result.save(output)
        console.print(f"[green]✓[/green] Wrote {len(result)} entries to {output}")
        console.print(f"  Package hash: [bold]{result.compute_aggregate_digest()}[/bold]")
    else:
        typer.echo(result.serialize())


@app.command("hash")
def package_hash(
    path: Path = typer.Argument(..., help="Zip archive or directory to hash"),
):
    """Print the aggregate package hash.

    Examples:
        bundle-hash hash build/www
    """
    typer.echo(_build(path).compute_aggregate_digest())


@app.command()
def diff(
    previous: Path = typer.Argument(..., help="Previously saved manifest JSON"),
    path: Path = typer.Argument(..., help="Zip archive or directory to compare"),
    show_unchanged: bool = typer.Option(False, "--all", help="Also list unchanged files"),
):
    """Compare a saved manifest with the current package contents.

    Exits with status 1 when the package hash differs, or when the saved
    manifest path exists but cannot be read. A missing or malformed
    manifest counts as empty (first release).

    Examples:
        bundle-hash diff release.manifest.json build/www
    """
    try:
        old = PackageManifest.load(previous)
    except OSError as e:
        console.print(f"[red]✗[/red] Cannot read manifest {previous}: {e}")
        raise typer.Exit(1)
    new = _build(path)
    result = diff_manifests(old, new)

    rows = (
        [(p, "added", "green") for p in result.added]
        + [(p, "removed", "red") for p in result.removed]
        + [(p, "modified", "yellow") for p in result.modified]
    )
    if show_unchanged:
        rows += [(p, "unchanged", "dim") for p in result.unchanged]

    if rows:
        table = Table(title="Manifest changes")
        table.add_column("Path", style="cyan")
        table.add_column("Change")
        for p, change, style in sorted(rows):
            table.add_row(p, f"[{style}]{change}[/{style}]")
        console.print(table)

    if result.has_changes:
        console.print(f"[yellow]Changed:[/yellow] {result.summary}")
        console.print(f"  Old hash: {result.old_digest}")
        console.print(f"  New hash: {result.new_digest}")
        raise typer.Exit(1)

    console.print(f"[green]✓[/green] Up to date ({result.new_digest[:12]}...)")


def main():
    """Entry point for CLI."""
    app()


if __name__ == "__main__":
    main()
