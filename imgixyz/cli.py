"""
Command-line interface for imgixyz.

Drives the provider the way a host runtime would, with state kept in a
local JSON file. Useful for inspecting sources and for one-off changes
outside a full configuration run.

Usage:
    imgixyz show SOURCE_ID                         # Print a source as state
    imgixyz lookup NAME                            # Find a source by name
    imgixyz apply source.json --state state.json   # Create or update
    imgixyz import SOURCE_ID --state state.json    # Track an existing source
    imgixyz destroy --state state.json             # Disable the source
"""

import asyncio
import json
import sys
from pathlib import Path
from typing import Awaitable, Callable

import click
from pydantic import ValidationError

from imgixyz import __version__
from imgixyz.client.errors import ImgixClientError
from imgixyz.observability.logging import bind_context, setup_logging
from imgixyz.observability.metrics import get_metrics
from imgixyz.provider.base import Diagnostics, ResourceResponse, Severity
from imgixyz.provider.models import SourceModel, from_remote
from imgixyz.provider.plan_modifiers import plan_source
from imgixyz.provider.provider import ImgixyzProvider, ProviderConfig

Operation = Callable[[ImgixyzProvider], Awaitable[ResourceResponse]]


@click.group()
@click.option("--debug", is_flag=True, help="Enable debug logging")
@click.option("--token", default=None, help="imgix API token (defaults to IMGIXYZ_TOKEN)")
@click.option(
    "--upsert-by-name/--no-upsert-by-name",
    default=None,
    help="Adopt an existing source with the same name on create",
)
@click.option("--metrics-port", default=None, type=int, help="Expose Prometheus metrics on this port")
@click.version_option(__version__, prog_name="imgixyz")
@click.pass_context
def main(
    ctx: click.Context,
    debug: bool,
    token: str | None,
    upsert_by_name: bool | None,
    metrics_port: int | None,
) -> None:
    """imgixyz - manage imgix sources declaratively."""
    setup_logging(level="DEBUG" if debug else None)
    bind_context(command=ctx.invoked_subcommand)

    if metrics_port:
        get_metrics().start_server(port=metrics_port)

    ctx.obj = ProviderConfig(token=token, upsert_by_name=upsert_by_name)


def _report(diagnostics: Diagnostics) -> None:
    for diag in diagnostics:
        color = "red" if diag.severity is Severity.ERROR else "yellow"
        click.echo(click.style(str(diag), fg=color), err=True)


def _run(config: ProviderConfig, operation: Operation) -> ResourceResponse:
    """Configure a provider, run one operation, report diagnostics.

    Exits with status 1 when any error diagnostic was produced.
    """

    async def run() -> ResourceResponse:
        provider = ImgixyzProvider(version=__version__)
        try:
            diagnostics = provider.configure(config)
            if diagnostics.has_error():
                return ResourceResponse(diagnostics=diagnostics)

            response = await operation(provider)
            response.diagnostics[:0] = diagnostics
            return response
        finally:
            await provider.aclose()

    response = asyncio.run(run())
    _report(response.diagnostics)
    if response.diagnostics.has_error():
        sys.exit(1)
    return response


def _echo_state(state: SourceModel | None) -> None:
    if state is not None:
        click.echo(json.dumps(state.to_dict(), indent=2))


def _read_record(path: Path, param_hint: str) -> SourceModel:
    """Load and validate a source record, reporting bad files as usage errors."""
    try:
        with open(path) as f:
            return SourceModel.from_dict(json.load(f))
    except (json.JSONDecodeError, ValidationError) as e:
        raise click.BadParameter(
            f"{path} is not a valid source record:\n{e}",
            param_hint=param_hint,
        ) from e


def _load_state(path: Path) -> SourceModel | None:
    if not path.exists():
        return None
    return _read_record(path, "'--state'")


def _write_state(path: Path, state: SourceModel) -> None:
    with open(path, "w") as f:
        json.dump(state.to_dict(), f, indent=2)
        f.write("\n")


@main.command()
@click.argument("source_id")
@click.pass_obj
def show(config: ProviderConfig, source_id: str) -> None:
    """Print a source as a state record."""

    async def operation(provider: ImgixyzProvider) -> ResourceResponse:
        return await provider.new_source_data_source().read(SourceModel(id=source_id))

    _echo_state(_run(config, operation).state)


@main.command()
@click.argument("name")
@click.pass_obj
def lookup(config: ProviderConfig, name: str) -> None:
    """Find a source by its name."""

    async def operation(provider: ImgixyzProvider) -> ResourceResponse:
        response = ResourceResponse()
        try:
            source = await provider.client.get_source_by_name(name)
        except ImgixClientError as e:
            response.diagnostics.add_error("Failed to look up source by name", str(e))
            return response
        if source is not None:
            response.state = from_remote(source)
        return response

    response = _run(config, operation)
    if response.state is None:
        click.echo(f"No source named {name!r}")
    _echo_state(response.state)


@main.command()
@click.argument("config_file", type=click.Path(exists=True, dir_okay=False, path_type=Path))
@click.option(
    "--state",
    "state_file",
    required=True,
    type=click.Path(dir_okay=False, path_type=Path),
    help="State file to read and write",
)
@click.pass_obj
def apply(config: ProviderConfig, config_file: Path, state_file: Path) -> None:
    """Create or update the source described by CONFIG_FILE."""
    desired = _read_record(config_file, "'CONFIG_FILE'")
    prior = _load_state(state_file)
    plan = plan_source(prior, desired)

    async def operation(provider: ImgixyzProvider) -> ResourceResponse:
        resource = provider.new_source_resource()
        if prior is None or not prior.id:
            return await resource.create(plan)
        return await resource.update(prior, plan)

    response = _run(config, operation)
    if response.state is not None:
        _write_state(state_file, response.state)
        click.echo(f"Source {response.state.id} written to {state_file}")


@main.command("import")
@click.argument("source_id")
@click.option(
    "--state",
    "state_file",
    required=True,
    type=click.Path(dir_okay=False, path_type=Path),
    help="State file to write",
)
@click.pass_obj
def import_source(config: ProviderConfig, source_id: str, state_file: Path) -> None:
    """Start tracking an existing source."""

    async def operation(provider: ImgixyzProvider) -> ResourceResponse:
        resource = provider.new_source_resource()
        imported = await resource.import_state(source_id)
        if imported.state is None:
            return imported
        return await resource.read(imported.state)

    response = _run(config, operation)
    if response.state is not None:
        _write_state(state_file, response.state)
        click.echo(f"Imported source {response.state.id} into {state_file}")


@main.command()
@click.option(
    "--state",
    "state_file",
    required=True,
    type=click.Path(exists=True, dir_okay=False, path_type=Path),
    help="State file of the source to disable",
)
@click.pass_obj
def destroy(config: ProviderConfig, state_file: Path) -> None:
    """Disable the source (imgix sources cannot be deleted)."""
    state = _load_state(state_file)

    async def operation(provider: ImgixyzProvider) -> ResourceResponse:
        return await provider.new_source_resource().delete(state)

    _run(config, operation)
    state_file.unlink()
    click.echo(f"Source {state.id} disabled; removed {state_file}")


if __name__ == "__main__":
    main()
