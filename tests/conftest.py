"""Tests configurations and fixtures."""

import logging
from importlib.metadata import EntryPoint, EntryPoints
from typing import TYPE_CHECKING, Any

import pytest
import yaml

from hiera.backends import BackendRegistry
from hiera.engine import Hiera

if TYPE_CHECKING:
    from collections.abc import Callable, Iterator
    from pathlib import Path

if TYPE_CHECKING:
    from pytest_mock import MockerFixture, MockType

if TYPE_CHECKING:
    from hiera.backends import Backend


@pytest.fixture(autouse=True)
def isolated_logger() -> 'Iterator[None]':
    """Restore the `hiera` logger after each test.

    The command-line interface attaches its own handlers and stops
    propagation, which would hide records from `caplog` in later tests.
    """
    yield

    root = logging.getLogger('hiera')
    for handler in list(root.handlers):
        root.removeHandler(handler)
    root.setLevel(logging.NOTSET)
    root.propagate = True


@pytest.fixture
def make_hiera() -> 'Callable[..., Hiera]':
    """Provide a factory for engines backed by given backend objects.

    Each keyword argument of the factory maps a backend name to an
    object exposing `lookup`; the configured backends list follows
    the argument order. Configuration options are passed via `config`.
    """
    def make(config: dict[str, Any] | None = None, **backends: 'Backend') -> Hiera:
        registry = BackendRegistry()
        for name, backend in backends.items():
            registry.register(name, lambda _hiera, backend=backend: backend)

        return Hiera({'backends': list(backends), **(config or {})}, registry=registry)

    return make


@pytest.fixture
def datadir(tmp_path: 'Path') -> 'Path':
    """Provide a data directory with a small YAML hierarchy.

    Layout:
        common.yaml: defaults shared by every node;
        production.yaml: environment overrides;
        nodes/web01.yaml: node-specific values.
    """
    files = {
        'common.yaml': {
            'ntp_servers': ['ntp1.example.com', 'ntp2.example.com'],
            'motd': 'Welcome to %{fqdn}',
            'users': {'admin': {'uid': 1000, 'groups': ['wheel']}},
            'port': 80,
        },
        'production.yaml': {
            'ntp_servers': ['ntp3.example.com', 'ntp1.example.com'],
            'users': {'admin': {'groups': ['ops']}, 'deploy': {'uid': 1001}},
        },
        'nodes/web01.yaml': {
            'port': 8080,
            'enabled': False,
        },
    }

    for name, content in files.items():
        path = tmp_path / name
        path.parent.mkdir(parents=True, exist_ok=True)
        path.write_text(yaml.safe_dump(content), encoding='utf-8')

    return tmp_path


@pytest.fixture
def patch_entrypoints(mocker: 'MockerFixture') -> 'Callable[..., MockType]':
    """Provide a factory for mocking `importlib.metadata.entry_points`.

    Returns a callable that patches `entry_points()` to simulate
    discovery of backends in the `hiera_backends` entry point group.
    """
    def patch(*factories: Any, raises: Exception | None = None,  # noqa: ANN401
              name: str = 'tests') -> 'MockType':
        """Patch `entry_points` with a controlled backend configuration.

        Args:
            factories: Objects to be returned by `EntryPoint.load()`.
                If empty, no entry points are registered.
            raises: Exception to raise when `EntryPoint.load()` is called.
            name: Entry point (backend) name.

        Returns:
            A mock patch object replacing `importlib.metadata.entry_points`.
        """
        entrypoints = []
        for factory in factories:
            ep = mocker.Mock(spec=EntryPoint)
            ep.group = 'hiera_backends'
            ep.name = name
            ep.value = 'tests.backends:test'
            ep.load.return_value = factory
            if raises is not None:
                ep.load.side_effect = raises
            entrypoints.append(ep)

        return mocker.patch(
            'importlib.metadata.entry_points',
            return_value=EntryPoints(entrypoints),
        )

    return patch
