"""Backend registry and plugin discovery.

This module maps backend names to factories. Built-in backends are
registered explicitly; third-party backends are discovered from the
`hiera_backends` entry point group.

Plugins are loaded defensively: individual failures do not interrupt
the loading process unless strict mode is enabled.
"""

from collections.abc import Callable
from typing import TYPE_CHECKING
from warnings import warn

from hiera.errors import PluginError, PluginWarning
from hiera.names import BACKEND_PATTERN

from .base import Backend
from .json_backend import JsonBackend
from .yaml_backend import YamlBackend

if TYPE_CHECKING:
    from importlib.metadata import EntryPoint

if TYPE_CHECKING:
    from hiera.engine import Hiera

#: A callable building a backend bound to an engine.
#: Backend subclasses are factories themselves.
type BackendFactory = Callable[['Hiera'], Backend]

ENTRYPOINT_GROUP = 'hiera_backends'

BUILTINS: dict[str, BackendFactory] = {
    YamlBackend.name: YamlBackend,
    JsonBackend.name: JsonBackend,
}


class BackendRegistry:
    """Registry of backend factories.

    Attributes:
        strict_mode: If True, any plugin issue raises an error.
            If False, issues are emitted as warnings and the
            offending backend is skipped.
        factories: Registered factories by backend name.
    """

    def __init__(self, *, strict_mode: bool = False) -> None:
        """Initialize a registry with the built-in backends.

        Args:
            strict_mode: Raise on plugin issues instead of warning.
        """
        self.strict_mode = strict_mode
        self.factories: dict[str, BackendFactory] = dict(BUILTINS)

    def register(self, name: str, factory: BackendFactory,
                 entrypoint: 'EntryPoint | None' = None) -> None:
        """Register a backend factory.

        Args:
            name: Backend name used in the `backends` configuration.
            factory: Callable building the backend.
            entrypoint: Entry point from which the factory was loaded,
                if applicable. Used for diagnostics and warnings.

        Raises:
            PluginError: If the name is invalid, or shadows an existing
                backend on strict mode.
        """
        if not BACKEND_PATTERN.match(name):
            raise PluginError(f'Invalid backend name {name!r}', entrypoint=entrypoint)

        if name in self.factories and (error := self.emit_plugin_issue(
            f'Backend {name!r} is shadowing an existing',
            entrypoint,
        )):
            raise error

        self.factories[name] = factory

    def create(self, name: str, hiera: 'Hiera') -> Backend | None:
        """Build a backend instance.

        Exceptions raised by the factory itself are propagated.

        Args:
            name: Backend name.
            hiera: Engine the backend is bound to.

        Returns:
            A new backend, or `None` if the name is unknown
            (not on strict mode).

        Raises:
            PluginError: If the backend is unknown on strict mode.
        """
        factory = self.factories.get(name)
        if factory is None:
            if error := self.emit_plugin_issue(f'Backend {name!r} is not registered'):
                raise error
            return None

        return factory(hiera)

    def emit_plugin_issue(self, message: str,
                          entrypoint: 'EntryPoint | None' = None) -> Exception | None:
        """Emit a plugin warning or return the exception.

        Args:
            message: Warning message to emit.
            entrypoint: Entry point associated with the issue, if applicable.

        Returns:
            PluginError on strict mode, otherwise `None`
                with producing a PluginWarning.
        """
        if self.strict_mode:
            return PluginError(message, entrypoint=entrypoint)

        warn(message, category=PluginWarning, stacklevel=3)

        return None

    def _load_plugin(self, entrypoint: 'EntryPoint') -> None:
        """Load and register a single backend entry point.

        The entry point name is the backend name, the loaded object
        must be a callable accepting the engine.

        Args:
            entrypoint: Entry point describing the backend to load.

        Raises:
            PluginError: If any loading issues occur on strict mode.
        """
        try:
            factory = entrypoint.load()

        except Exception as base:
            if error := self.emit_plugin_issue(
                f'Failed to load entrypoint {entrypoint.name!r}',
                entrypoint,
            ):
                raise error from base
            return None

        if not callable(factory):
            if error := self.emit_plugin_issue(
                f'Loaded from entrypoint {entrypoint.name!r} object is not a backend factory',
                entrypoint,
            ):
                raise error
            return None

        self.register(entrypoint.name, factory, entrypoint)

    def clear_plugins(self) -> None:
        """Drop all registered factories except the built-in ones."""
        self.factories = dict(BUILTINS)

    def load_plugins(self) -> None:
        """Discover backends via entry points and register them.

        Raises:
            PluginError: If any loading issues occur on strict mode.
        """
        from importlib.metadata import entry_points  # noqa: PLC0415

        for entrypoint in entry_points().select(group=ENTRYPOINT_GROUP):
            self._load_plugin(entrypoint)
