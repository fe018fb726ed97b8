"""
Typer application for exercising the REST template bridge from a shell.

The CLI mirrors what a bridge host does: it loads the adapter properties from
configuration, initializes the adapter (credential check), and runs a single
count, retrieve, or search request. Results are printed as JSON.
"""

from __future__ import annotations

import json
from importlib import resources
from pathlib import Path
from typing import Any, Dict, List, Optional

import typer

from ..adapters import BridgeError, BridgeRequest, RestTemplateAdapter
from ..config import BridgeSettings, load_settings
from ..core import RegistryLoadError, StructureRegistry, configure_logging

app = typer.Typer(
    no_args_is_help=True,
    add_completion=False,
    help=(
        "Query a REST service through the template bridge adapter.\n\n"
        "Command groups:\n"
        "- structures: inspect the structure allow-list.\n"
        "- verify / count / retrieve / search: run adapter operations."
    ),
)
structures_app = typer.Typer(help="Inspect the structures the adapter accepts.")
app.add_typer(structures_app, name="structures")


def _load_registry(structures_file: Optional[Path], settings: BridgeSettings) -> StructureRegistry:
    if structures_file:
        return StructureRegistry.from_yaml(structures_file)
    if settings.structures:
        return StructureRegistry.from_names(settings.structures)
    structures_pkg = "rest_template_bridge.resources.structures"
    with resources.as_file(resources.files(structures_pkg) / "default.yaml") as resolved:
        return StructureRegistry.from_yaml(resolved)


def _parse_parameters(values: Optional[List[str]]) -> Dict[str, str]:
    parameters: Dict[str, str] = {}
    for entry in values or []:
        if "=" not in entry:
            raise typer.BadParameter(f"Parameter '{entry}' must use NAME=VALUE format.")
        name, value = entry.split("=", 1)
        if not name.strip():
            raise typer.BadParameter(f"Parameter '{entry}' is missing a name.")
        parameters[name.strip()] = value
    return parameters


def build_adapter(settings: BridgeSettings, registry: StructureRegistry) -> RestTemplateAdapter:
    """Construct an adapter from resolved settings and load its properties."""

    adapter = RestTemplateAdapter(endpoint=settings.endpoint, structures=registry, timeout=settings.timeout)
    adapter.set_properties(settings.to_properties())
    return adapter


@app.callback(invoke_without_command=False)
def main(
    ctx: typer.Context,
    config_file: Optional[Path] = typer.Option(
        None,
        "--config",
        "-c",
        help="TOML file with a [bridge] table (endpoint, username, password, structures).",
        exists=True,
        dir_okay=False,
        readable=True,
    ),
    structures_file: Optional[Path] = typer.Option(
        None,
        "--structures",
        "-s",
        help="Override the structure allow-list with a YAML file.",
        exists=True,
        dir_okay=False,
        readable=True,
    ),
    endpoint: Optional[str] = typer.Option(None, "--endpoint", "-e", help="Override the REST service root URL."),
    log_level: Optional[str] = typer.Option(None, "--log-level", help="Logging level (DEBUG, INFO, ...)."),
) -> None:
    """
    Resolve settings and the structure registry.

    Both are stored on the Typer context so commands can build the adapter.
    """

    configure_logging(log_level, force=log_level is not None)
    settings = load_settings(config_file)
    if endpoint:
        settings.endpoint = endpoint
    try:
        registry = _load_registry(structures_file, settings)
    except RegistryLoadError as exc:
        typer.echo(str(exc), err=True)
        raise typer.Exit(code=1) from exc

    state = ctx.ensure_object(dict)
    state["settings"] = settings
    state["registry"] = registry


def _require_state(ctx: typer.Context) -> tuple[BridgeSettings, StructureRegistry]:
    state = ctx.ensure_object(dict)
    settings = state.get("settings")
    registry = state.get("registry")
    if not isinstance(settings, BridgeSettings) or not isinstance(registry, StructureRegistry):
        raise typer.Exit(code=2)
    return settings, registry


def _emit(payload: Any) -> None:
    typer.echo(json.dumps(payload, ensure_ascii=False, indent=2))


def _run(ctx: typer.Context, operation: str, request: BridgeRequest) -> Any:
    settings, registry = _require_state(ctx)
    adapter = build_adapter(settings, registry)
    try:
        adapter.initialize()
        return getattr(adapter, operation)(request)
    except BridgeError as exc:
        typer.echo(f"{type(exc).__name__}: {exc}", err=True)
        raise typer.Exit(code=1) from exc


@structures_app.command("list")
def structures_list(ctx: typer.Context) -> None:
    """List the structures in the allow-list."""

    _, registry = _require_state(ctx)
    if not len(registry):
        typer.echo("No structures are configured.")
        raise typer.Exit(code=0)
    for descriptor in registry:
        suffix = f"  {descriptor.description}" if descriptor.description else ""
        typer.echo(f"{descriptor.name}{suffix}")


@app.command("verify")
def verify(ctx: typer.Context) -> None:
    """Check connectivity and credentials against the authentication endpoint."""

    settings, registry = _require_state(ctx)
    result = build_adapter(settings, registry).verify()
    typer.echo(result.message)
    if not result.success:
        raise typer.Exit(code=1)


_STRUCTURE_OPTION = typer.Option(..., "--structure", "-S", help="Structure to query.")
_QUERY_OPTION = typer.Option("", "--query", "-q", help='Query template, e.g. name=<%=parameter["Name"]%>.')
_PARAM_OPTION = typer.Option(None, "--param", "-p", help="Parameter in NAME=VALUE form. Can be repeated.")
_FIELD_OPTION = typer.Option(None, "--field", "-f", help="Field to include in the output. Can be repeated.")


def _request(structure: str, query: str, params: Optional[List[str]], fields: Optional[List[str]]) -> BridgeRequest:
    return BridgeRequest(structure=structure, query=query, parameters=_parse_parameters(params), fields=tuple(fields or ()))


@app.command("count")
def count(
    ctx: typer.Context,
    structure: str = _STRUCTURE_OPTION,
    query: str = _QUERY_OPTION,
    param: Optional[List[str]] = _PARAM_OPTION,
) -> None:
    """Count the records matching a query."""

    result = _run(ctx, "count", _request(structure, query, param, None))
    _emit({"count": result.value})


@app.command("retrieve")
def retrieve(
    ctx: typer.Context,
    structure: str = _STRUCTURE_OPTION,
    query: str = _QUERY_OPTION,
    param: Optional[List[str]] = _PARAM_OPTION,
    field: Optional[List[str]] = _FIELD_OPTION,
) -> None:
    """Retrieve a single record; the query must contain id=<value>."""

    result = _run(ctx, "retrieve", _request(structure, query, param, field))
    _emit({"record": result.to_dict()})


@app.command("search")
def search(
    ctx: typer.Context,
    structure: str = _STRUCTURE_OPTION,
    query: str = _QUERY_OPTION,
    param: Optional[List[str]] = _PARAM_OPTION,
    field: Optional[List[str]] = _FIELD_OPTION,
) -> None:
    """Search records matching a query."""

    result = _run(ctx, "search", _request(structure, query, param, field))
    _emit(result.to_dict())


if __name__ == "__main__":  # pragma: no cover
    app()
