"""Command-line interface for hiera lookups.

Scope variables are given as `NAME=value` arguments and may be
preloaded from YAML or JSON files.
"""

import logging
from json import JSONDecodeError, dumps, loads
from pathlib import Path
from typing import TYPE_CHECKING

from click import BadParameter, ClickException, argument, echo, group, option
from click import Path as PathParam
from yaml import YAMLError, safe_load

from hiera.config import HieraSettings, load_config
from hiera.engine import Hiera
from hiera.errors import HieraError
from hiera.log import setup_logging

if TYPE_CHECKING:
    from collections.abc import Callable

if TYPE_CHECKING:
    from hiera.values import RuntimeValue

InputFilepath = PathParam(
    exists=True,
    dir_okay=False,
    readable=True,
    path_type=Path,
)


def _read_scope_file(path: Path, loader: 'Callable[[str], RuntimeValue]') -> dict[str, 'RuntimeValue']:
    """Read scope variables from a file.

    Raises:
        BadParameter: If the file is not a mapping.
    """
    try:
        data = loader(path.read_text(encoding='utf-8'))

    except (YAMLError, JSONDecodeError) as base:
        raise BadParameter(f'Cannot parse scope file {path}') from base

    if data is None:
        return {}

    if not isinstance(data, dict):
        raise BadParameter(f'Scope file {path} must contain a mapping')

    return data


def _make_scope(variables: tuple[str, ...],
                yaml_scope: Path | None = None,
                json_scope: Path | None = None) -> dict[str, 'RuntimeValue']:
    """Build a lookup scope from scope files and `NAME=value` arguments.

    Later sources override earlier ones: YAML file, JSON file, arguments.
    """
    scope: dict[str, RuntimeValue] = {}

    if yaml_scope:
        scope.update(_read_scope_file(yaml_scope, safe_load))
    if json_scope:
        scope.update(_read_scope_file(json_scope, loads))

    for variable in variables:
        name, sep, value = variable.partition('=')
        if not sep or not name:
            raise BadParameter(f'Expected NAME=value, got {variable!r}', param_hint='VARIABLES')
        scope[name] = value

    return scope


def _make_engine(config: Path | None, *, strict: bool | None, debug: bool) -> Hiera:
    """Load the configuration, set up logging and build an engine.

    Raises:
        ClickException: If the configuration or a backend plugin is invalid.
    """
    settings = HieraSettings()

    try:
        loaded = load_config(config or settings.config)
        setup_logging(loaded.logger, logging.DEBUG if debug else logging.WARNING)

        return Hiera(loaded, strict_mode=settings.strict if strict is None else strict)

    except HieraError as base:
        raise ClickException(str(base)) from base


def _format(value: 'RuntimeValue') -> str:
    """Format an answer for output."""
    if isinstance(value, str):
        return value

    return dumps(value, ensure_ascii=False, indent=4)


@group(help='Hierarchical key/value lookups.')
def cli() -> None:
    """Root CLI group for hiera tools."""
    return None


@cli.command(
    name='lookup',
    help='Look up KEY and print the answer.',
)
@option('-c', '--config', type=InputFilepath, help='Configuration file.')
@option('-d', '--default', 'default', help='Value printed when nothing is found.')
@option('-a', '--array', 'policy', flag_value='array', help='Collect answers from all sources.')
@option('-h', '--hash', 'policy', flag_value='hash', help='Merge hash answers from all sources.')
@option('-o', '--override', help='Data source checked before the hierarchy.')
@option('-y', '--yaml', 'yaml_scope', type=InputFilepath, help='YAML file with scope variables.')
@option('-j', '--json', 'json_scope', type=InputFilepath, help='JSON file with scope variables.')
@option('--strict/--relaxed', default=None, help='Fail on unknown or broken backends.')
@option('--debug', is_flag=True, help='Print diagnostic messages.')
@argument('key')
@argument('variables', nargs=-1)
def lookup(key: str, variables: tuple[str, ...], *,  # noqa: PLR0913
           config: Path | None, default: str | None, policy: str | None,
           override: str | None, yaml_scope: Path | None, json_scope: Path | None,
           strict: bool | None, debug: bool) -> None:
    """Look up a key and print the answer."""
    scope = _make_scope(variables, yaml_scope, json_scope)
    hiera = _make_engine(config, strict=strict, debug=debug)

    try:
        answer = hiera.lookup(key, default, scope, override, policy)

    except HieraError as base:
        raise ClickException(str(base)) from base

    echo(_format(answer))


@cli.command(
    name='datasources',
    help='Print the resolved data sources, most specific first.',
)
@option('-c', '--config', type=InputFilepath, help='Configuration file.')
@option('-o', '--override', help='Data source checked before the hierarchy.')
@option('-y', '--yaml', 'yaml_scope', type=InputFilepath, help='YAML file with scope variables.')
@option('-j', '--json', 'json_scope', type=InputFilepath, help='JSON file with scope variables.')
@argument('variables', nargs=-1)
def print_datasources(variables: tuple[str, ...], *,
                      config: Path | None, override: str | None,
                      yaml_scope: Path | None, json_scope: Path | None) -> None:
    """Print one data source name per line."""
    scope = _make_scope(variables, yaml_scope, json_scope)
    hiera = _make_engine(config, strict=False, debug=False)

    try:
        hiera.visit_datasources(scope, echo, override)

    except HieraError as base:
        raise ClickException(str(base)) from base


if __name__ == '__main__':
    cli()
