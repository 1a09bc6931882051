"""Lookup backends.

This package provides the backend interface, the built-in file
backends, and the registry used to resolve configured backend names.

Third-party backends are registered through the `hiera_backends`
entry point group::

    [project.entry-points.hiera_backends]
    redis = "hiera_redis:RedisBackend"
"""

from .base import Backend, FileBackend
from .json_backend import JsonBackend
from .registry import BackendFactory, BackendRegistry
from .yaml_backend import YamlBackend

__all__ = (
    'Backend',
    'BackendFactory',
    'BackendRegistry',
    'FileBackend',
    'JsonBackend',
    'YamlBackend',
)
