"""JSON data files backend."""

from json import JSONDecodeError, loads
from typing import TYPE_CHECKING

from hiera.errors import DataError, ErrorContext

from .base import FileBackend

if TYPE_CHECKING:
    from pathlib import Path

if TYPE_CHECKING:
    from hiera.values import RuntimeValue


class JsonBackend(FileBackend):
    """Backend reading `<source>.json` files."""

    name = 'json'
    extension = 'json'
    label = 'JSON'

    def load_data(self, path: 'Path') -> 'RuntimeValue':
        """Parse a JSON data file.

        Empty files are treated as containing no data.
        """
        content = path.read_text(encoding='utf-8')
        if not content.strip():
            return None

        try:
            return loads(content)

        except JSONDecodeError as base:
            raise DataError(f'Invalid JSON: {base.msg}', context=ErrorContext(
                filename=str(path),
                line_num=base.lineno - 1,
                column_num=base.colno - 1,
                error=base,
            )) from base
