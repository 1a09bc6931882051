"""Hierarchical key/value lookups with interpolation.

The `hiera` package resolves a key by searching an ordered hierarchy
of data sources across configured backends.

Key features:
- `%{variable}` interpolation of hierarchy levels, data directories
  and answers against a caller-supplied scope;
- priority, array and hash resolution of answers from several sources;
- native, deep and deeper merging of hash answers;
- built-in YAML and JSON backends, and third-party backends
  registered through entry points.
"""

from hiera.engine import Hiera
from hiera.errors import (
    AnswerTypeError,
    ConfigError,
    DataError,
    HieraError,
    InterpolationLoopError,
    PluginError,
    PluginWarning,
)
from hiera.hierarchy import datasources
from hiera.interpolation import parse_answer, resolve_string
from hiera.resolution import MergeBehavior, ResolutionPolicy, merge_answer, resolve_answer
from hiera.values import UNDEFINED

__all__ = (
    'UNDEFINED',
    'AnswerTypeError',
    'ConfigError',
    'DataError',
    'Hiera',
    'HieraError',
    'InterpolationLoopError',
    'MergeBehavior',
    'PluginError',
    'PluginWarning',
    'ResolutionPolicy',
    'datasources',
    'merge_answer',
    'parse_answer',
    'resolve_answer',
    'resolve_string',
)
