"""Backend interfaces.

A backend answers a key for one data source at a time. The lookup
engine iterates data sources and backends; a backend only has to say
whether a given source holds the key.
"""

import logging
from typing import TYPE_CHECKING, Any, ClassVar

from hiera.interpolation import parse_answer
from hiera.values import MAPPINGS

if TYPE_CHECKING:
    from collections.abc import Mapping
    from pathlib import Path

if TYPE_CHECKING:
    from hiera.engine import Hiera
    from hiera.resolution import ResolutionPolicy
    from hiera.values import Answer, RuntimeValue

logger = logging.getLogger(__name__)


class Backend:
    """Base class for lookup backends.

    Backends are created once per engine by their registered factory,
    which receives the engine itself. Subclasses implement `lookup`.
    """

    #: Registered backend name, also the name of its configuration section.
    name: ClassVar[str]

    def __init__(self, hiera: 'Hiera') -> None:
        """Initialize a backend bound to an engine.

        Args:
            hiera: Engine providing configuration and path helpers.
        """
        self.hiera = hiera

    def lookup(self, key: str, scope: 'Mapping[str, RuntimeValue]',
               source: str, policy: 'ResolutionPolicy | None') -> 'Answer':
        """Look up a key in a single data source.

        Args:
            key: Key to look up.
            scope: Lookup scope, used to interpolate answers.
            source: Resolved data source name.
            policy: Resolution policy of the current lookup.

        Returns:
            The interpolated answer, or `None` if the source has no answer.
        """
        raise NotImplementedError


class FileBackend(Backend):
    """Backend reading one data file per data source.

    The file for a source is `<datadir>/<source>.<extension>`. Parsed
    files are cached and reloaded once their modification time changes.
    """

    #: File name extension of data files, without the dot.
    extension: ClassVar[str]
    #: Human-readable format name used in diagnostics.
    label: ClassVar[str]

    def __init__(self, hiera: 'Hiera') -> None:
        """Initialize a file backend bound to an engine."""
        super().__init__(hiera)

        self._cache: dict[Path, tuple[int, dict[str, Any]]] = {}

        logger.debug('Hiera %s backend starting', self.label)

    def load_data(self, path: 'Path') -> 'RuntimeValue':
        """Parse a data file.

        Args:
            path: Existing data file.

        Returns:
            Parsed file contents.

        Raises:
            DataError: If the file cannot be parsed.
        """
        raise NotImplementedError

    def read(self, path: 'Path') -> dict[str, Any]:
        """Return the parsed contents of a data file, using the cache.

        Files whose top level is not a mapping are treated as empty.
        """
        mtime = path.stat().st_mtime_ns
        if (cached := self._cache.get(path)) and cached[0] == mtime:
            return cached[1]

        data = self.load_data(path)
        if not isinstance(data, MAPPINGS):
            if data is not None:
                logger.debug('Data file %s is not a mapping, skipping', path)
            data = {}

        self._cache[path] = (mtime, data)

        return data

    def lookup(self, key: str, scope: 'Mapping[str, RuntimeValue]',
               source: str, policy: 'ResolutionPolicy | None') -> 'Answer':
        """Look up a key in the data file of a source."""
        logger.debug('Looking for data source %s', source)

        path = self.hiera.datafile(self.name, scope, source, self.extension)
        if path is None:
            return None

        data = self.read(path)
        if key not in data:
            return None

        logger.debug('Found %s in %s', key, source)

        return parse_answer(data[key], scope)
