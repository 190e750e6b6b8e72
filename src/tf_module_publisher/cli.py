"""
Terraform Module Publisher CLI - Command-line interface.

Publish module archives to GCS, prune old versions and inspect what is
stored, from a terminal or as a GitHub Actions step.
"""

import logging
from pathlib import Path
from typing import Optional

import typer
from rich.console import Console
from rich.markup import escape
from rich.panel import Panel
from rich.table import Table

from tf_module_publisher import ci
from tf_module_publisher.core.config import (
    DEFAULT_KEEP_VERSIONS,
    PublishOptions,
    load_options,
    validate_bucket_name,
    validate_keep_versions,
    validate_module_name,
    validate_module_version,
)
from tf_module_publisher.core.exceptions import (
    ConfigurationError,
    PublisherError,
    exit_code_for,
    format_exception,
)
from tf_module_publisher.core.models import CleanupResult, PublishResult
from tf_module_publisher.credentials import staged_credentials
from tf_module_publisher.publisher import publish_module
from tf_module_publisher.retention import (
    cleanup_old_versions,
    collect_versioned_objects,
    module_folder,
    sort_newest_first,
)
from tf_module_publisher.storage import GCSObjectStore, ObjectStore

LOG_FORMAT = "%(asctime)s - %(name)s - %(levelname)s - %(message)s"

app = typer.Typer(
    name="tf-module-publisher",
    help="Publish versioned Terraform modules to Google Cloud Storage",
    no_args_is_help=True,
)
console = Console()


@app.callback()
def main_callback(
    verbose: bool = typer.Option(False, "--verbose", "-v", help="Enable debug logging"),
):
    """Configure logging for every command."""
    logging.basicConfig(
        level=logging.DEBUG if verbose else logging.INFO,
        format=LOG_FORMAT,
    )


def _fail(error: Exception) -> None:
    """Report a fatal error once and exit with its code."""
    message = format_exception(error)
    console.print(f"[red]{escape(message)}[/red]")
    typer.echo(ci.error_annotation(message))
    raise typer.Exit(exit_code_for(error))


def _open_store(bucket_name: str, credentials_file: Path | None) -> ObjectStore:
    """Create a GCS store from a key file or application default credentials."""
    if credentials_file is not None:
        return GCSObjectStore.from_credentials_file(bucket_name, credentials_file)
    return GCSObjectStore.from_environment(bucket_name)


def _cleanup_table(result: CleanupResult) -> Table:
    table = Table(title=f"Retention for {result.module_name}")
    table.add_column("Version", style="cyan")
    table.add_column("Action")

    table.add_row(result.current_version, "[green]current[/green]")
    for version in result.kept_versions:
        table.add_row(version, "kept")
    action = "[yellow]would delete[/yellow]" if result.dry_run else "[red]deleted[/red]"
    for version in result.deleted_versions:
        table.add_row(version, action)
    return table


def _run_publish(
    options: PublishOptions,
    work_dir: Path,
    github_output: Path | None,
    dry_run_cleanup: bool,
) -> PublishResult:
    """Stage credentials, publish and write step outputs."""
    with staged_credentials(options.credentials_json.get_secret_value(), work_dir) as key_file:
        store = GCSObjectStore.from_credentials_file(options.bucket_name, key_file)
        result = publish_module(options, store, work_dir, dry_run_cleanup=dry_run_cleanup)

    outputs = {"module-url": result.module_url, "version": result.version}
    ci.write_outputs(outputs, github_output)
    for name, value in outputs.items():
        typer.echo(f"{name}={value}")

    if result.cleanup is not None:
        console.print(_cleanup_table(result.cleanup))
        console.print(result.cleanup.message)
    console.print(f"[green]Successfully published module to {result.module_url}[/green]")
    return result


@app.command()
def publish(
    bucket: str = typer.Option(..., "--bucket", "-b", help="GCS bucket name"),
    module_name: str = typer.Option(..., "--module-name", "-n", help="Terraform module name"),
    module_version: str = typer.Option(
        ..., "--module-version", "-V", help="Module version (semver)"
    ),
    module_path: Path = typer.Option(Path("."), "--module-path", "-p", help="Module directory"),
    credentials_file: Path = typer.Option(
        ..., "--credentials-file", "-c", help="Service account key file (JSON)"
    ),
    delete_old_versions: bool = typer.Option(
        False, "--delete-old-versions", help="Prune older versions after upload"
    ),
    keep_versions: int = typer.Option(
        DEFAULT_KEEP_VERSIONS, "--keep-versions", "-k", help="Prior versions to keep"
    ),
    dry_run_cleanup: bool = typer.Option(
        False, "--dry-run-cleanup", help="Report old versions instead of deleting them"
    ),
    work_dir: Optional[Path] = typer.Option(
        None, "--work-dir", help="Directory for temporary files"
    ),
    github_output: Optional[Path] = typer.Option(
        None, "--github-output", help="File that receives step outputs"
    ),
):
    """Package a module directory, upload it and optionally prune old versions."""
    console.print(
        Panel.fit(
            f"[bold blue]Terraform Module Publisher[/bold blue]\n"
            f"Module: {escape(module_name)} v{escape(module_version)}\n"
            f"Bucket: {escape(bucket)}",
        )
    )
    try:
        try:
            credentials_json = credentials_file.read_text(encoding="utf-8")
        except OSError as e:
            raise ConfigurationError(
                f"Cannot read credentials file {credentials_file}: {e}",
                input_name="google-credentials",
            ) from e
        options = load_options(
            bucket_name=bucket,
            module_name=module_name,
            module_version=module_version,
            module_path=module_path,
            credentials_json=credentials_json,
            delete_old_versions=delete_old_versions,
            keep_versions=keep_versions,
        )
        _run_publish(options, work_dir or ci.runner_temp_dir(), github_output, dry_run_cleanup)
    except PublisherError as e:
        _fail(e)


@app.command()
def action():
    """Run as a GitHub Actions step, reading INPUT_* variables."""
    try:
        options = load_options(**ci.read_action_inputs())
        _run_publish(
            options,
            ci.runner_temp_dir(),
            ci.github_output_file(),
            dry_run_cleanup=False,
        )
    except PublisherError as e:
        _fail(e)


@app.command()
def cleanup(
    bucket: str = typer.Option(..., "--bucket", "-b", help="GCS bucket name"),
    module_name: str = typer.Option(..., "--module-name", "-n", help="Terraform module name"),
    current_version: str = typer.Option(
        ..., "--current-version", help="Version that must never be deleted"
    ),
    keep: int = typer.Option(DEFAULT_KEEP_VERSIONS, "--keep", "-k", help="Prior versions to keep"),
    dry_run: bool = typer.Option(False, "--dry-run", "-d", help="Only report what would be deleted"),
    credentials_file: Optional[Path] = typer.Option(
        None, "--credentials-file", "-c", help="Service account key file (default credentials if omitted)"
    ),
):
    """Prune old versions of a module without uploading anything."""
    try:
        validate_bucket_name(bucket)
        validate_module_name(module_name)
        validate_module_version(current_version)
        validate_keep_versions(keep)

        store = _open_store(bucket, credentials_file)
        result = cleanup_old_versions(store, module_name, current_version, keep, dry_run=dry_run)
    except PublisherError as e:
        _fail(e)

    console.print(_cleanup_table(result))
    console.print(result.message)


@app.command()
def versions(
    bucket: str = typer.Option(..., "--bucket", "-b", help="GCS bucket name"),
    module_name: str = typer.Option(..., "--module-name", "-n", help="Terraform module name"),
    credentials_file: Optional[Path] = typer.Option(
        None, "--credentials-file", "-c", help="Service account key file (default credentials if omitted)"
    ),
):
    """List stored versions of a module, newest first."""
    try:
        validate_bucket_name(bucket)
        validate_module_name(module_name)

        store = _open_store(bucket, credentials_file)
        folder = module_folder(module_name)
        stored = sort_newest_first(
            collect_versioned_objects(store.list(f"{folder}/"), folder, module_name)
        )
    except PublisherError as e:
        _fail(e)

    if not stored:
        console.print(f"[yellow]No versions of {module_name} found in {bucket}[/yellow]")
        return

    table = Table(title=f"Stored Versions ({len(stored)})")
    table.add_column("Version", style="cyan")
    table.add_column("Key")
    table.add_column("Size", justify="right")
    table.add_column("Updated", style="dim")

    for obj in stored:
        size = f"{obj.remote.size:,}" if obj.remote.size is not None else "-"
        updated = obj.remote.updated.isoformat()[:19] if obj.remote.updated else "-"
        table.add_row(obj.version, obj.name, size, updated)

    console.print(table)


@app.command()
def version():
    """Show the publisher version."""
    from tf_module_publisher import __version__

    console.print(f"Terraform Module Publisher v{__version__}")


def main():
    """Entry point for the CLI."""
    app()


if __name__ == "__main__":
    main()
