"""Tests for configuration loading."""

from typing import TYPE_CHECKING, Any

import pytest

from hiera.config import DEFAULT_CONFIG_FILE, HieraConfig, HieraSettings, load_config
from hiera.errors import ConfigError
from hiera.resolution import MergeBehavior

if TYPE_CHECKING:
    from pathlib import Path


def test_defaults() -> None:
    """Use defaults when nothing is configured."""
    config = load_config()

    assert config.backends == ['yaml']
    assert config.hierarchy == ['common']
    assert config.merge_behavior is MergeBehavior.NATIVE
    assert config.logger == 'console'
    assert config.backend_settings('yaml').datadir is None


def test_ready_config_kept() -> None:
    """Return a ready configuration as is."""
    config = HieraConfig(backends=['json'])

    assert load_config(config) is config


@pytest.mark.parametrize('options, backends, hierarchy', (
    pytest.param({'backends': 'json'}, ['json'], ['common'], id='single backend'),
    pytest.param({'hierarchy': 'nodes/%{fqdn}'}, ['yaml'], ['nodes/%{fqdn}'], id='single level'),
    pytest.param({'hierarchy': None}, ['yaml'], [], id='empty hierarchy'),
    pytest.param({'backends': None}, [], ['common'], id='no backends'),
    pytest.param(
        {':backends': [':yaml', 'json'], ':hierarchy': ['%{environment}', 'common']},
        ['yaml', 'json'],
        ['%{environment}', 'common'],
        id='symbol keys',
    ),
))
def test_options(options: dict[str, Any], backends: list[str],
                 hierarchy: list[str]) -> None:
    """Normalize backend and hierarchy options."""
    config = load_config(options)

    assert config.backends == backends
    assert config.hierarchy == hierarchy


def test_symbol_hierarchy_levels_kept() -> None:
    """Keep leading colons of hierarchy levels."""
    config = load_config({'hierarchy': [':special']})

    assert config.hierarchy == [':special']


def test_backend_sections() -> None:
    """Parse backend sections, keeping unknown section keys."""
    config = load_config({
        'yaml': {'datadir': '/srv/%{environment}', 'cache': True},
        'json': None,
    })

    yaml = config.backend_settings('yaml')
    assert yaml.datadir == '/srv/%{environment}'
    assert yaml.model_extra == {'cache': True}
    assert config.backend_settings('json').datadir is None
    assert config.backend_settings('missing').datadir is None


def test_config_file(tmp_path: 'Path') -> None:
    """Load a configuration file with symbol keys and values."""
    path = tmp_path / 'hiera.yaml'
    path.write_text(
        '---\n'
        ':backends:\n'
        '  - :yaml\n'
        ':hierarchy:\n'
        '  - "nodes/%{fqdn}"\n'
        '  - common\n'
        ':merge_behavior: :deeper\n'
        ':logger: noop\n'
        ':yaml:\n'
        '  :datadir: /srv/hieradata\n',
        encoding='utf-8',
    )

    config = load_config(path)

    assert config.backends == ['yaml']
    assert config.hierarchy == ['nodes/%{fqdn}', 'common']
    assert config.merge_behavior is MergeBehavior.DEEPER
    assert config.logger == 'noop'
    assert config.backend_settings('yaml').datadir == '/srv/hieradata'


def test_empty_config_file(tmp_path: 'Path') -> None:
    """Use defaults for an empty configuration file."""
    path = tmp_path / 'hiera.yaml'
    path.write_text('', encoding='utf-8')

    assert load_config(str(path)) == HieraConfig()


def test_missing_config_file(tmp_path: 'Path') -> None:
    """Fail on a missing configuration file."""
    path = tmp_path / 'missing.yaml'

    with pytest.raises(ConfigError, match=r'^Config file .*missing\.yaml not found') as error:
        load_config(path)

    assert error.value.context['filename'] == str(path)


def test_invalid_yaml_config_file(tmp_path: 'Path') -> None:
    """Fail with a location on invalid YAML."""
    path = tmp_path / 'hiera.yaml'
    path.write_text('backends: [yaml\nhierarchy: common\n', encoding='utf-8')

    with pytest.raises(ConfigError, match=r'^Invalid YAML') as error:
        load_config(path)

    assert error.value.context['filename'] == str(path)
    assert error.value.context['line_num'] is not None
    assert f'in "{path}", line' in str(error.value)


def test_non_mapping_config_file(tmp_path: 'Path') -> None:
    """Fail when the configuration file is not a mapping."""
    path = tmp_path / 'hiera.yaml'
    path.write_text('- yaml\n', encoding='utf-8')

    with pytest.raises(ConfigError, match=r'^Configuration must be a mapping'):
        load_config(path)


@pytest.mark.parametrize('options, option', (
    pytest.param({'merge_behavior': 'shallow'}, 'merge_behavior', id='merge behavior'),
    pytest.param({'backends': ['1yaml']}, 'backends.0', id='backend name'),
    pytest.param({'logger': 'syslog'}, 'logger', id='logger'),
    pytest.param({'hierarchy': [1]}, 'hierarchy.0', id='hierarchy level'),
))
def test_invalid_option(options: dict[str, Any], option: str) -> None:
    """Fail on invalid options, naming the option."""
    with pytest.raises(ConfigError, match=r'^Invalid configuration: ') as error:
        load_config(options)

    assert error.value.context['option'] == option
    assert f'option {option!r}' in str(error.value)


def test_invalid_backend_section() -> None:
    """Fail on backend sections which are not mappings."""
    with pytest.raises(ConfigError, match=r'backend section `yaml` must be a mapping'):
        load_config({'yaml': '/srv/hieradata'})


def test_config_frozen() -> None:
    """Forbid changing a validated configuration."""
    config = load_config()

    with pytest.raises(ValueError, match=r'frozen'):
        config.backends = ['json']


def test_settings_defaults(monkeypatch: pytest.MonkeyPatch) -> None:
    """Use defaults without environment variables."""
    monkeypatch.delenv('HIERA_CONFIG', raising=False)
    monkeypatch.delenv('HIERA_STRICT', raising=False)

    settings = HieraSettings()

    assert settings.config == DEFAULT_CONFIG_FILE
    assert settings.strict is False


def test_settings_from_environment(monkeypatch: pytest.MonkeyPatch, tmp_path: 'Path') -> None:
    """Read settings from `HIERA_*` environment variables."""
    monkeypatch.setenv('HIERA_CONFIG', str(tmp_path / 'hiera.yaml'))
    monkeypatch.setenv('HIERA_STRICT', 'true')

    settings = HieraSettings()

    assert settings.config == tmp_path / 'hiera.yaml'
    assert settings.strict is True
