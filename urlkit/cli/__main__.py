"""urlkit CLI - Main Entry Point.

Commands:
    tree     - Print the group hierarchy of a configuration
    build    - Build one URL
    validate - Check that groups expose the expected routes
"""

import logging
import sys
from typing import Dict, List, Optional, Tuple

import click

from .. import __version__
from ..config import load_manager
from ..faults import Fault, ValidationFault
from ..patterns import PatternSyntaxError
from ..routing.manager import RouteManager
from . import __cli_name__
from .utils.colors import success, error, info, section, kv, bullet, _CHECK, _CROSS

logger = logging.getLogger("urlkit.cli")


def _parse_pairs(values: Tuple[str, ...], option: str) -> List[Tuple[str, str]]:
    pairs = []
    for value in values:
        key, sep, val = value.partition("=")
        if not sep or not key:
            raise click.BadParameter(f"expected key=value, got {value!r}", param_hint=option)
        pairs.append((key, val))
    return pairs


def _parse_expectations(values: Tuple[str, ...]) -> Dict[str, List[str]]:
    expected: Dict[str, List[str]] = {}
    for value in values:
        group, sep, routes = value.partition(":")
        if not sep or not group:
            raise click.BadParameter(
                f"expected group:route1,route2, got {value!r}", param_hint="--expect"
            )
        names = [r.strip() for r in routes.split(",") if r.strip()]
        expected.setdefault(group, []).extend(names)
    return expected


def _load(ctx: click.Context, config_path: str) -> RouteManager:
    try:
        return load_manager(config_path, env_file=ctx.obj.get("env_file"))
    except (Fault, PatternSyntaxError) as e:
        error(f"  {_CROSS} Failed to load {config_path}: {e.message}")
        sys.exit(1)


@click.group()
@click.version_option(version=__version__, prog_name=__cli_name__)
@click.option('--verbose', '-v', is_flag=True, help='Verbose output')
@click.option('--env-file', type=click.Path(dir_okay=False), help='.env file for ${VAR} expansion')
@click.pass_context
def cli(ctx, verbose: bool, env_file: Optional[str]):
    """Build URLs from hierarchical route configurations.

    \b
    Quick start:
      urlkit tree routes.yaml
      urlkit build routes.yaml api user -p id=42
      urlkit validate routes.yaml -e api:user
    """
    ctx.ensure_object(dict)
    ctx.obj['verbose'] = verbose
    ctx.obj['env_file'] = env_file
    logging.basicConfig(
        level=logging.DEBUG if verbose else logging.WARNING,
        format="%(levelname)s %(name)s: %(message)s",
    )


# ============================================================================
# Commands
# ============================================================================

@cli.command('tree')
@click.argument('config_path', type=click.Path(dir_okay=False))
@click.pass_context
def tree(ctx, config_path: str):
    """
    Print every group with its template, variables and routes.

    Examples:
      urlkit tree routes.yaml
    """
    manager = _load(ctx, config_path)
    click.echo(manager.debug_tree(), nl=False)


@cli.command('build')
@click.argument('config_path', type=click.Path(dir_okay=False))
@click.argument('group')
@click.argument('route')
@click.option('--param', '-p', 'params', multiple=True, help='Path parameter as key=value')
@click.option('--query', '-q', 'queries', multiple=True, help='Query parameter as key=value (repeatable)')
@click.pass_context
def build(ctx, config_path: str, group: str, route: str, params: Tuple[str, ...], queries: Tuple[str, ...]):
    """
    Build one URL.

    Repeating a query key produces a multi-valued parameter.

    Examples:
      urlkit build routes.yaml api user -p id=42
      urlkit build routes.yaml frontend search -q q=shoes -q tag=a -q tag=b
    """
    path_params = dict(_parse_pairs(params, "--param"))

    query: Dict[str, object] = {}
    for key, value in _parse_pairs(queries, "--query"):
        if key in query:
            existing = query[key]
            query[key] = existing + [value] if isinstance(existing, list) else [existing, value]
        else:
            query[key] = value

    manager = _load(ctx, config_path)
    try:
        url = manager.resolve_with(group, route, path_params, query)
    except Fault as e:
        logger.log(e.severity.log_level, "build failed: %r", e.to_dict())
        error(f"  {_CROSS} {e.message}")
        sys.exit(1)

    logger.debug("Built %s.%s -> %s", group, route, url)
    click.echo(url)


@cli.command('validate')
@click.argument('config_path', type=click.Path(dir_okay=False))
@click.option('--expect', '-e', 'expectations', multiple=True,
              help='Expected routes as group:route1,route2 (repeatable)')
@click.pass_context
def validate(ctx, config_path: str, expectations: Tuple[str, ...]):
    """
    Validate that groups expose the expected routes.

    Examples:
      urlkit validate routes.yaml -e api:user,users
      urlkit validate routes.yaml -e frontend.en:home -e api:user
    """
    expected = _parse_expectations(expectations)
    manager = _load(ctx, config_path)

    try:
        manager.validate(expected)
    except ValidationFault as e:
        error(f"  {_CROSS} Validation failed")
        click.echo()
        for group in sorted(e.errors):
            section(group, fg="red")
            for route in e.errors[group]:
                bullet(route, fg="red")
        sys.exit(1)

    success(f"  {_CHECK} Validation passed")
    if ctx.obj["verbose"]:
        info(f"  Checked {len(expected)} group(s)")
        kv("Roots", ", ".join(manager.root_names()))


def main():
    """Entry point for `urlkit` command."""
    cli(obj={})


if __name__ == '__main__':
    main()
