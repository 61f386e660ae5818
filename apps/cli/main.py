"""CLI application for cargo-stabilize."""

import logging
from pathlib import Path

import typer
from rich.console import Console
from rich.logging import RichHandler
from rich.markup import escape

from stabilize.errors import (
    DependenciesError,
    ManifestIOError,
    ManifestParseError,
    ManifestShapeError,
)
from stabilize.manifest import load_manifest, write_manifest
from stabilize.models import LookupFailure, RunSummary, StabilizeConfig
from stabilize.registry import RegistryClient, build_client
from stabilize.rewrite import stabilize_dependencies, summary_lines

console = Console()

INVOCATION_NAME = "stabilize"

EXIT_OK = 0
EXIT_MANIFEST_IO = 1
EXIT_MANIFEST_PARSE = 2
EXIT_LOOKUP_FAILED = 3

USAGE = """\
Usage:
    cargo stabilize [flags]

Flags:
    -h | --help     Display usage information
    --upgrade       Upgrade all dependency versions to the newest,
                    not just wildcards
"""


def unknown_arguments(args: list[str]) -> list[str]:
    """Drop the invocation-name tokens cargo passes before the real flags.

    ``cargo stabilize --upgrade`` runs ``cargo-stabilize stabilize --upgrade``,
    so everything up to and including the first ``stabilize`` is ignored.
    """
    if INVOCATION_NAME in args:
        return args[args.index(INVOCATION_NAME) + 1 :]
    return list(args)


def configure_logging(verbose: bool) -> None:
    logging.basicConfig(
        level=logging.DEBUG if verbose else logging.WARNING,
        format="%(message)s",
        handlers=[RichHandler(console=Console(stderr=True), show_path=False)],
        force=True,
    )


def print_outcomes(summary: RunSummary) -> None:
    """Print every change and failure in document order."""
    for outcome in summary.outcomes:
        if isinstance(outcome, LookupFailure):
            console.print(escape(outcome.message), style="red")
        else:
            console.print(
                f"[bright_yellow]{escape(outcome.name)}[/]: "
                f"[cyan]{escape(outcome.old)}[/] -> "
                f"[bright_cyan]{escape(outcome.new)}[/]"
            )


def run(config: StabilizeConfig, client: RegistryClient) -> int:
    """Load, rewrite and save the manifest. Returns the exit code."""
    try:
        document = load_manifest(config.manifest_path)
    except ManifestIOError as e:
        console.print(escape(str(e)), style="red")
        return EXIT_MANIFEST_IO
    except (ManifestParseError, ManifestShapeError) as e:
        console.print(escape(str(e)), style="red")
        return EXIT_MANIFEST_PARSE

    exit_code = EXIT_OK
    try:
        summary = stabilize_dependencies(document, client, upgrade_all=config.upgrade_all)
    except DependenciesError as e:
        console.print(str(e))
    else:
        print_outcomes(summary)
        for line in summary_lines(summary, upgrade_all=config.upgrade_all):
            console.print(line, style="bright_green")
        if summary.failures:
            exit_code = EXIT_LOOKUP_FAILED

    if config.dry_run:
        console.print(f"Dry run, {escape(str(config.manifest_path))} not written")
        return exit_code

    try:
        write_manifest(config.manifest_path, document)
    except ManifestIOError as e:
        console.print(escape(str(e)), style="red")
        return EXIT_MANIFEST_IO

    return exit_code


app = typer.Typer(
    name="cargo-stabilize",
    help="cargo-stabilize - Replace wildcard dependency versions in Cargo.toml with the newest release",
    add_completion=False,
)


@app.command(
    context_settings={
        "allow_extra_args": True,
        "ignore_unknown_options": True,
        "help_option_names": ["-h", "--help"],
    }
)
def stabilize(
    ctx: typer.Context,
    upgrade: bool = typer.Option(
        False, "--upgrade", help="Upgrade all dependency versions to the newest, not just wildcards"
    ),
    manifest_path: Path = typer.Option(
        Path("Cargo.toml"), "--manifest-path", help="Path to Cargo.toml"
    ),
    registry: str = typer.Option("crates-io", "--registry", help="Registry passed to cargo search"),
    client: str = typer.Option("cargo", "--client", help="Version source: cargo (cargo search) or api (crates.io web API)"),
    dry_run: bool = typer.Option(False, "--dry-run", help="Show changes without writing Cargo.toml"),
    verbose: bool = typer.Option(False, "--verbose", "-v", help="Enable debug logging"),
) -> None:
    """Replace wildcard dependency versions in Cargo.toml with the newest release."""
    configure_logging(verbose)

    for arg in unknown_arguments(ctx.args):
        console.print(f"Unknown command {escape(arg)}\n{escape(USAGE)}", highlight=False)

    if client not in ("cargo", "api"):
        console.print(f"Unknown client {escape(client)}, using cargo", style="yellow")
        client = "cargo"

    config = StabilizeConfig(
        upgrade_all=upgrade,
        manifest_path=manifest_path,
        registry=registry,
        client=client,
        dry_run=dry_run,
    )

    exit_code = run(config, build_client(config.client, registry=config.registry))
    if exit_code != EXIT_OK:
        raise typer.Exit(exit_code)


def main() -> None:
    app()


if __name__ == "__main__":
    main()
