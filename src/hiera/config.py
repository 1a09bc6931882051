"""Configuration models and loading.

This module defines the validated configuration consumed by the lookup
engine: the ordered backend list, the hierarchy of data source
templates, the merge behavior used by hash lookups, and free-form
per-backend sections such as `yaml: {datadir: ...}`.

Classic configuration files write every key as a Ruby symbol
(`:backends:`). Leading colons are stripped on load so such files can
be used unchanged.
"""

from collections.abc import Mapping
from pathlib import Path
from typing import TYPE_CHECKING, Any, Literal, Self

from pydantic import BaseModel, ConfigDict, Field, ValidationError, field_validator, model_validator
from pydantic_settings import BaseSettings, SettingsConfigDict
from yaml import safe_load
from yaml.error import MarkedYAMLError

from hiera.errors import ConfigError, ErrorContext
from hiera.names import DEFAULT_SOURCE, BackendName, HierarchyLevel  # noqa: TC001
from hiera.resolution import MergeBehavior

if TYPE_CHECKING:
    from hiera.values import RuntimeValue

CONFIG_DIR = Path('/etc')
VAR_DIR = Path('/var/lib/hiera')
DEFAULT_CONFIG_FILE = CONFIG_DIR / 'hiera.yaml'

#: Options whose values may be written as symbols as well.
_SYMBOL_OPTIONS = frozenset({'backends', 'merge_behavior', 'logger'})


class BackendSettings(BaseModel):
    """Settings section of a single backend.

    Only `datadir` is interpreted by the engine; backends may read any
    other key from `model_extra`.
    """

    model_config = ConfigDict(
        frozen=True,
        extra='allow',
    )

    datadir: str | None = Field(
        default=None,
        title='Data directory',
        description=(
            'Directory holding the data files of the backend. '
            'May contain interpolation tokens. '
            'Defaults to the system variable data directory.'
        ),
    )


class HieraConfig(BaseModel):
    """Validated lookup configuration.

    Unknown top-level keys are kept as backend sections and must be
    mappings (or empty).
    """

    model_config = ConfigDict(
        frozen=True,
        extra='allow',
    )

    backends: list[BackendName] = Field(
        default_factory=lambda: ['yaml'],
        title='Backends',
        description='Names of the backends queried in order.',
    )

    hierarchy: list[HierarchyLevel] = Field(
        default_factory=lambda: [DEFAULT_SOURCE],
        title='Hierarchy',
        description=(
            'Data source templates, most specific first. '
            'Empty hierarchies fall back to `common`.'
        ),
    )

    merge_behavior: MergeBehavior = Field(
        default=MergeBehavior.NATIVE,
        title='Merge behavior',
        description='Strategy used to merge mapping answers of hash lookups.',
    )

    logger: Literal['console', 'noop'] = Field(
        default='console',
        title='Logger',
        description='Destination of diagnostic messages.',
    )

    @field_validator('backends', 'hierarchy', mode='before')
    @classmethod
    def wrap_single_value(cls, value: 'RuntimeValue') -> 'RuntimeValue':
        """Accept a single name in place of a list, and `None` as empty."""
        if value is None:
            return []

        if isinstance(value, str):
            return [value]

        return value

    @model_validator(mode='after')
    def check_backend_sections(self) -> Self:
        """Check that every extra key holds a mapping or nothing.

        Returns:
            Self.

        Raises:
            ValueError: If a backend section is not a mapping.
        """
        for name, section in (self.model_extra or {}).items():
            if section is not None and not isinstance(section, Mapping):
                raise ValueError(f'backend section `{name}` must be a mapping')

        return self

    def backend_settings(self, name: str) -> BackendSettings:
        """Return the settings section of a backend.

        Args:
            name: Backend name.

        Returns:
            Parsed settings. Missing or empty sections yield defaults.
        """
        section = (self.model_extra or {}).get(name)
        if not section:
            return BackendSettings()

        return BackendSettings.model_validate(section)


class HieraSettings(BaseSettings):
    """Runtime settings resolved from `HIERA_*` environment variables.

    Unknown variables are ignored, resolved settings are immutable.
    """

    model_config = SettingsConfigDict(
        env_prefix='HIERA_',
        frozen=True,
        extra='ignore',
    )

    config: Path = Field(
        default=DEFAULT_CONFIG_FILE,
        title='Configuration file',
    )

    strict: bool = Field(
        default=False,
        title='Strict mode',
        description=(
            'Raise on unknown or failing backends instead of '
            'warning and skipping them.'
        ),
    )


def _strip_symbols(value: 'RuntimeValue', *, option: bool = False) -> 'RuntimeValue':
    """Strip leading colons from mapping keys and symbol-valued options.

    Args:
        value: Raw configuration value.
        option: Whether string values are symbols to be stripped.

    Returns:
        The normalized value.
    """
    if isinstance(value, Mapping):
        result = {}
        for key, item in value.items():
            if isinstance(key, str):
                key = key.removeprefix(':')  # noqa: PLW2901
            result[key] = _strip_symbols(item, option=key in _SYMBOL_OPTIONS)
        return result

    if isinstance(value, list):
        return [_strip_symbols(item, option=option) for item in value]

    if option and isinstance(value, str):
        return value.removeprefix(':')

    return value


def _read_file(path: Path) -> Any:  # noqa: ANN401
    """Read and parse a YAML configuration file.

    Raises:
        ConfigError: If the file is missing or is not valid YAML.
    """
    filename = str(path)
    if not path.is_file():
        raise ConfigError(
            f'Config file {filename} not found',
            context=ErrorContext(filename=filename),
        )

    try:
        with path.open('rt', encoding='utf-8') as source:
            return safe_load(source) or {}

    except MarkedYAMLError as base:
        raise ConfigError.from_yaml_error(base, filename) from base


def load_config(source: 'HieraConfig | Mapping[str, RuntimeValue] | str | Path | None' = None) -> HieraConfig:
    """Build a validated configuration.

    Args:
        source: A ready configuration, a mapping of options, a path to a
            YAML file, or `None` for defaults.

    Returns:
        Validated configuration.

    Raises:
        ConfigError: If the file cannot be read or the options are invalid.
    """
    if isinstance(source, HieraConfig):
        return source

    filename = None
    data: Any = {}

    if isinstance(source, Mapping):
        data = source
    elif source is not None:
        path = Path(source)
        filename = str(path)
        data = _read_file(path)

    if not isinstance(data, Mapping):
        raise ConfigError(
            'Configuration must be a mapping',
            context=ErrorContext(filename=filename),
        )

    try:
        return HieraConfig.model_validate(_strip_symbols(data))

    except ValidationError as base:
        raise ConfigError.from_pydantic_error(base, filename) from base
