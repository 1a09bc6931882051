"""Lookup engine.

The engine ties configuration, backends and interpolation together.
It walks configured backends and resolved data sources in order and
combines their answers according to the resolution policy:

- priority lookups stop at the first answer;
- array lookups collect answers from every backend and source;
- hash lookups merge mapping answers from every backend and source,
  earlier answers winning conflicting keys.

When no backend answers, the default value is interpolated and returned.
"""

import logging
from pathlib import Path
from threading import Lock
from typing import TYPE_CHECKING, Any

from hiera.backends import BackendRegistry
from hiera.config import VAR_DIR, load_config
from hiera.errors import AnswerTypeError
from hiera.hierarchy import datasources
from hiera.interpolation import parse_answer, resolve_string
from hiera.resolution import ResolutionPolicy, merge_answer, resolve_answer
from hiera.scope import Scope
from hiera.values import MAPPINGS, SEQUENCES

if TYPE_CHECKING:
    from collections.abc import Callable, Iterator, Mapping, Sequence

if TYPE_CHECKING:
    from hiera.backends import Backend
    from hiera.config import HieraConfig
    from hiera.values import Answer, RuntimeValue

logger = logging.getLogger(__name__)


class Hiera:
    """Hierarchical key/value lookup context.

    An engine holds the configuration, the backend registry and the
    cache of backend instances. Backends are built lazily by the first
    lookup, exactly once per configured name, and reused afterwards.

    Attributes:
        config: Active configuration.
        registry: Backend factories by name.
    """

    def __init__(self, config: 'HieraConfig | Mapping[str, RuntimeValue] | str | Path | None' = None, *,
                 registry: BackendRegistry | None = None,
                 strict_mode: bool = False,
                 load_plugins: bool = True) -> None:
        """Initialize an engine.

        Args:
            config: Configuration, options mapping or configuration file.
            registry: Backend registry. A registry holding the built-in
                backends is created when omitted.
            strict_mode: Raise on unknown backends instead of warning.
                Ignored when a registry is given.
            load_plugins: Discover entry point backends for a newly
                created registry.

        Raises:
            ConfigError: If the configuration is invalid.
            PluginError: If a plugin fails to load on strict mode.
        """
        self.config = load_config(config)

        if registry is None:
            registry = BackendRegistry(strict_mode=strict_mode)
            if load_plugins:
                registry.load_plugins()
        self.registry = registry

        self._backends: dict[str, Backend] | None = None
        self._lock = Lock()

    def configure(self, config: 'HieraConfig | Mapping[str, RuntimeValue] | str | Path | None') -> None:
        """Replace the configuration and drop cached backends."""
        self.config = load_config(config)
        self.reset()

    def reset(self) -> None:
        """Drop cached backend instances.

        The next lookup builds them again.
        """
        with self._lock:
            self._backends = None

    @property
    def backends(self) -> list['Backend']:
        """Backend instances in configured order.

        Built on first access under a lock, so concurrent first lookups
        still build every backend once. Unknown backends are skipped.
        """
        with self._lock:
            if self._backends is None:
                backends: dict[str, Backend] = {}
                for name in self.config.backends:
                    if name in backends:
                        continue
                    if (backend := self.registry.create(name, self)) is not None:
                        backends[name] = backend
                self._backends = backends

            return list(self._backends.values())

    def datasources(self, scope: 'Mapping[str, RuntimeValue] | None' = None,
                    override: str | None = None,
                    hierarchy: 'Sequence[str] | str | None' = None) -> 'Iterator[str]':
        """Yield resolved data source names, most specific first.

        Args:
            scope: Variables used to interpolate level templates.
            override: Optional level checked before the hierarchy.
            hierarchy: Level templates; the configured hierarchy is used
                when omitted.

        Returns:
            A generator of data source names.
        """
        if hierarchy is None:
            hierarchy = self.config.hierarchy

        return datasources(scope, override, hierarchy)

    def visit_datasources(self, scope: 'Mapping[str, RuntimeValue] | None',
                          visit: 'Callable[[str], object]',
                          override: str | None = None,
                          hierarchy: 'Sequence[str] | str | None' = None) -> None:
        """Call `visit` once per resolved data source name, in order."""
        for source in self.datasources(scope, override, hierarchy):
            visit(source)

    def resolve_string(self, text: 'RuntimeValue',
                       scope: 'Mapping[str, RuntimeValue] | None' = None,
                       extra_data: 'Mapping[str, RuntimeValue] | None' = None) -> 'RuntimeValue':
        """Interpolate tokens in a string. See `hiera.interpolation`."""
        return resolve_string(text, scope, extra_data)

    def parse_answer(self, data: 'RuntimeValue',
                     scope: 'Mapping[str, RuntimeValue] | None' = None,
                     extra_data: 'Mapping[str, RuntimeValue] | None' = None) -> 'RuntimeValue':
        """Interpolate every string in an answer. See `hiera.interpolation`."""
        return parse_answer(data, scope, extra_data)

    def resolve_answer(self, answer: 'Answer', policy: ResolutionPolicy | str | None) -> 'Answer':
        """Post-process an accumulated answer. See `hiera.resolution`."""
        return resolve_answer(answer, policy)

    def merge_answer(self, left: dict[str, Any], right: dict[str, Any]) -> dict[str, Any]:
        """Merge two mapping answers with the configured merge behavior."""
        return merge_answer(left, right, self.config.merge_behavior)

    def datadir(self, backend: str, scope: 'Mapping[str, RuntimeValue] | None' = None) -> str:
        """Resolve the data directory of a backend.

        Args:
            backend: Backend name.
            scope: Variables used to interpolate the directory.

        Returns:
            The interpolated `datadir` setting of the backend, or the
            system variable data directory when unset.
        """
        datadir = self.config.backend_settings(backend).datadir
        if datadir is None:
            datadir = str(VAR_DIR)

        return self.resolve_string(datadir, scope)

    def datafile(self, backend: str, scope: 'Mapping[str, RuntimeValue] | None',
                 source: str, extension: str) -> Path | None:
        """Resolve the data file of a source.

        Args:
            backend: Backend name.
            scope: Variables used to interpolate the directory.
            source: Resolved data source name.
            extension: File name extension, without the dot.

        Returns:
            Path of the data file if it exists, otherwise `None`.
        """
        path = Path(self.datadir(backend, scope)) / f'{source}.{extension}'
        if not path.exists():
            logger.debug('Cannot find datafile %s, skipping', path)
            return None

        return path

    def lookup(self, key: str, default: 'RuntimeValue' = None,
               scope: 'Mapping[str, RuntimeValue] | None' = None,
               override: str | None = None,
               policy: ResolutionPolicy | str | None = None) -> 'RuntimeValue':
        """Look up a key.

        Args:
            key: Key to look up.
            default: Value returned, interpolated, when nothing is found.
            scope: Variables used for hierarchy and answer interpolation.
            override: Optional data source checked before the hierarchy.
            policy: Resolution policy; unset behaves as priority.

        Returns:
            The resolved answer, or the interpolated default.

        Raises:
            AnswerTypeError: If an answer does not fit the policy.
            InterpolationLoopError: If interpolation loops.
            PluginError: If a backend is unknown on strict mode.
        """
        policy = ResolutionPolicy.coerce(policy)
        scope = Scope.wrap(scope)

        logger.debug('Looking up %s with %s resolution', key, policy or ResolutionPolicy.PRIORITY)

        if policy in (ResolutionPolicy.ARRAY, ResolutionPolicy.HASH):
            answer = self._collect(key, scope, override, policy)
        else:
            answer = self._first(key, scope, override, policy)

        if answer is None:
            return self.parse_answer(default, scope)

        return self.resolve_answer(answer, policy)

    def _answers(self, key: str, scope: Scope, override: str | None,
                 policy: ResolutionPolicy | None) -> 'Iterator[Answer]':
        """Yield non-empty answers of every backend and source, in order."""
        for backend in self.backends:
            for source in self.datasources(scope, override):
                answer = backend.lookup(key, scope, source, policy)
                if answer is not None:
                    yield answer

    def _first(self, key: str, scope: Scope, override: str | None,
               policy: ResolutionPolicy | None) -> 'Answer':
        """Return the first answer found, or `None`."""
        return next(self._answers(key, scope, override, policy), None)

    def _collect(self, key: str, scope: Scope, override: str | None,
                 policy: ResolutionPolicy) -> 'Answer':
        """Accumulate answers of every backend and source.

        Returns:
            A list of answers for array lookups, a merged mapping for
            hash lookups, or `None` when nothing (or only empty
            mappings) was found.
        """
        answer: Any = None

        for new_answer in self._answers(key, scope, override, policy):
            if policy is ResolutionPolicy.ARRAY:
                if not isinstance(new_answer, (*SEQUENCES, str)):
                    raise AnswerTypeError('Array', new_answer)
                answer = answer or []
                answer.append(new_answer)
            else:
                if not isinstance(new_answer, MAPPINGS):
                    raise AnswerTypeError('Hash', new_answer)
                answer = self.merge_answer(new_answer, answer or {})

        return answer or None
