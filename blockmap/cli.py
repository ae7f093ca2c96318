"""
blockmap CLI entry point.
"""
import json
import os
import sys
from typing import List, Optional, Tuple

import click
from rich.console import Console
from rich.table import Table

from blockmap import __version__
from blockmap import engine
from blockmap.clients import ClientFactory
from blockmap.config import load_settings
from blockmap.engine import Outcome
from blockmap.models.resource import Resource
from blockmap.parsers import terraform
from blockmap.reporters import json_reporter, markdown
from blockmap.services import REGISTRY

console = Console(stderr=True)

_SEVERITY_COLORS = {
    "ERROR": "bold red",
    "WARNING": "yellow",
}


def _print_banner(no_color: bool = False) -> None:
    c = Console(stderr=True, no_color=no_color)
    c.print(f"[bold]blockmap[/bold] [dim]v{__version__}[/dim]")


def _existing_paths(paths: Tuple[str, ...]) -> List[str]:
    found = []
    for p in paths:
        if os.path.exists(p):
            found.append(p)
        else:
            console.print(f"[yellow]Warning:[/yellow] '{p}' does not exist, skipping.")
    return found


def _parse_paths(paths: List[str]) -> List[Resource]:
    """Parse every .tf file in the given files or directories."""
    resources: List[Resource] = []
    for p in paths:
        resources.extend(terraform.parse_directory(p))
    return resources


def _print_summary_table(outcomes: List[Outcome], no_color: bool) -> None:
    """Print a rich summary table to stderr."""
    tbl = Table(title="Read Summary", show_header=True, header_style="bold")
    tbl.add_column("Address", width=60)
    tbl.add_column("ID", width=20)
    tbl.add_column("Diagnostics")

    for o in outcomes:
        notes = []
        for d in o.diagnostics:
            color = _SEVERITY_COLORS.get(d.severity.value, "") if not no_color else ""
            text = f"{d.severity.value}: {d.summary}"
            notes.append(f"[{color}]{text}[/{color}]" if color else text)
        tbl.add_row(o.resource.address, o.id or "-", "\n".join(notes) or "ok")

    Console(stderr=True, no_color=no_color).print(tbl)


def _write(content: str, output: Optional[str], stderr: Console) -> None:
    if output:
        with open(output, "w", encoding="utf-8", newline="\n") as fh:
            fh.write(content)
        stderr.print(f"Report written to [bold]{output}[/bold]")
    else:
        click.echo(content)


@click.group(context_settings=dict(help_option_names=["-h", "--help"]))
@click.version_option(__version__)
@click.pass_context
def cli(ctx):
    """blockmap: map configuration blocks to cloud API objects."""
    if ctx.invoked_subcommand is None:
        click.echo(ctx.get_help())
        ctx.exit()


@cli.command()
@click.argument("paths", nargs=-1, required=True, type=click.Path())
@click.option(
    "--format", "output_format",
    type=click.Choice(["json", "markdown"], case_sensitive=False),
    default="json",
    show_default=True,
    help="Output format.",
)
@click.option("--output", "-o", type=click.Path(), default=None,
              help="Write report to this file (default: stdout).")
@click.option("--config", "config_path", type=click.Path(), default=None,
              help="Settings file (default: ./blockmap.yaml).")
@click.option("--region", default=None, help="AWS region for data sources that call an API.")
@click.option("--profile", default=None, help="AWS shared-credentials profile.")
@click.option("--fail-on-error", is_flag=True, default=False,
              help="Exit with code 1 if any block failed (for CI gates).")
@click.option("--ascii", is_flag=True, default=False,
              help="Use ASCII-only severity indicators (no emojis).")
@click.option("--no-color", is_flag=True, default=False, help="Disable rich terminal color output.")
def read(
    paths: Tuple[str, ...],
    output_format: str,
    output: Optional[str],
    config_path: Optional[str],
    region: Optional[str],
    profile: Optional[str],
    fail_on_error: bool,
    ascii: bool,
    no_color: bool,
) -> None:
    """
    Read every supported data block in Terraform files or directories.

    PATHS can be files or directories; multiple values accepted.
    """
    _print_banner(no_color)
    stderr = Console(stderr=True, no_color=no_color)
    settings = load_settings(config_path).with_overrides(region=region, profile=profile)

    existing = _existing_paths(paths)
    if not existing:
        stderr.print("[red]No files found.[/red]")
        sys.exit(2)

    with stderr.status(f"[bold]Parsing {len(existing)} path(s)…"):
        resources = _parse_paths(existing)

    if not resources:
        stderr.print("[yellow]No configuration blocks found in the provided paths.[/yellow]")
        sys.exit(0)

    stderr.print(f"Found [bold]{len(resources)}[/bold] blocks.")

    with stderr.status("[bold]Reading data sources…"):
        outcomes = engine.run(resources, ClientFactory(settings), settings)

    _print_summary_table(outcomes, no_color)

    source_label = ", ".join(paths)
    if output_format.lower() == "markdown":
        content = markdown.build_report(outcomes, source_label, ascii_mode=ascii)
    else:
        content = json_reporter.build_report(outcomes, source_label)
    _write(content, output, stderr)

    if fail_on_error and not all(o.ok for o in outcomes):
        failed = sum(1 for o in outcomes if not o.ok)
        stderr.print(f"[red]CI gate triggered:[/red] {failed} block(s) failed (--fail-on-error).")
        sys.exit(1)

    sys.exit(0)


@cli.command()
@click.argument("type_name", type=click.Choice(sorted(REGISTRY)))
def schema(type_name: str) -> None:
    """Print the attribute schema of a data source or resource type."""
    definition = REGISTRY[type_name]
    tbl = Table(title=f"{definition.kind} {type_name}", show_header=True, header_style="bold")
    tbl.add_column("Attribute")
    tbl.add_column("Type")
    tbl.add_column("Mode")
    tbl.add_column("Items")
    tbl.add_column("Default")

    for path, attr in definition.schema.walk():
        if attr.required:
            mode = "required"
        elif attr.computed_only:
            mode = "computed"
        elif attr.computed:
            mode = "optional, computed"
        else:
            mode = "optional"
        type_label = "block" if attr.is_block else attr.type.value
        items = ""
        if attr.min_items or attr.max_items:
            items = f"{attr.min_items}..{attr.max_items or '*'}"
        default = "" if attr.default is None else json.dumps(attr.default)
        tbl.add_row(path, type_label, mode, items, default)

    Console().print(tbl)


@cli.command(name="import")
@click.argument("type_name")
@click.argument("resource_id")
@click.option("--config", "config_path", type=click.Path(), default=None,
              help="Settings file (default: ./blockmap.yaml).")
@click.option("--region", default=None, help="AWS region.")
@click.option("--profile", default=None, help="AWS shared-credentials profile.")
@click.option("--output", "-o", type=click.Path(), default=None,
              help="Write state to this file (default: stdout).")
def import_(
    type_name: str,
    resource_id: str,
    config_path: Optional[str],
    region: Optional[str],
    profile: Optional[str],
    output: Optional[str],
) -> None:
    """Import an existing remote object and print its state as JSON."""
    stderr = Console(stderr=True)
    settings = load_settings(config_path).with_overrides(region=region, profile=profile)

    with stderr.status(f"[bold]Importing {type_name} {resource_id}…"):
        outcome = engine.import_resource(type_name, resource_id, ClientFactory(settings), settings)

    for d in outcome.diagnostics:
        color = _SEVERITY_COLORS.get(d.severity.value, "")
        stderr.print(f"[{color}]{d.severity.value}:[/{color}] {d.summary}")
    if not outcome.ok:
        sys.exit(1)

    _write(json.dumps(outcome.state, indent=2, default=sorted), output, stderr)
    sys.exit(0)


def main():
    cli(obj={})


if __name__ == "__main__":
    main()
