"""YAML data files backend."""

from typing import TYPE_CHECKING

from yaml import safe_load
from yaml.error import MarkedYAMLError

from hiera.errors import DataError

from .base import FileBackend

if TYPE_CHECKING:
    from pathlib import Path

if TYPE_CHECKING:
    from hiera.values import RuntimeValue


class YamlBackend(FileBackend):
    """Backend reading `<source>.yaml` files with PyYAML safe loading."""

    name = 'yaml'
    extension = 'yaml'
    label = 'YAML'

    def load_data(self, path: 'Path') -> 'RuntimeValue':
        """Parse a YAML data file."""
        try:
            with path.open('rt', encoding='utf-8') as source:
                return safe_load(source)

        except MarkedYAMLError as base:
            raise DataError.from_yaml_error(base, str(path)) from base
