"""Core exception hierarchy.

This module defines base error and warning types used across the library
to report configuration loading issues, backend plugin failures, and
lookup runtime errors in a structured and extensible way.
"""

from os import linesep
from typing import TYPE_CHECKING, TypedDict

from yaml.error import MarkedYAMLError

if TYPE_CHECKING:
    from importlib.metadata import EntryPoint
    from typing import Self

if TYPE_CHECKING:
    from pydantic import ValidationError

FORMAT_FILENAME = '<configuration>'
FORMAT_INDENT = 4


class ErrorContext(TypedDict, total=False):
    """Container describing contextual information for error formatting.

    All fields are optional; the formatter adapts output based on
    provided values.
    """

    #: Name of the source file where the error occurred.
    filename: str | None

    #: Line number in the source file.
    line_num: int | None
    #: Column number in the source file.
    column_num: int | None

    #: Dotted location of the failing configuration option.
    option: str | None

    #: Underlying exception that triggered formatting.
    error: Exception | None


class ErrorFormatter:
    """Utility class for formatting errors with source locations."""

    @classmethod
    def format(cls, message: str, context: ErrorContext | None = None) -> str:
        """Format an error message using contextual information.

        Args:
            message: Base human-readable error message.
            context: Optional error context with location data.

        Returns:
            A fully formatted error message suitable for display.
        """
        if not context:
            return message

        if location := cls.get_location_string(context, indent=FORMAT_INDENT):
            message += linesep
            message += location

        return message

    @classmethod
    def get_location_string(cls, context: ErrorContext, *,
                            indent: str | int | None = None) -> str:
        """Format source location information.

        Args:
            context: Error context containing location metadata.
            indent: Optional indentation (string or number of spaces).

        Returns:
            A formatted location string including filename, line,
            column and option when available, or an empty string.
        """
        filename = context.get('filename')
        option = context.get('option')
        if not filename and not option:
            return ''

        indent = cls._ensure_indent(indent)

        message = f'{indent}in "{filename or FORMAT_FILENAME}"'
        if (line_num := context.get('line_num')) is not None:
            line_num += 1
            message += f', line {line_num}'
            if (column_num := context.get('column_num')) is not None:
                column_num += 1
                message += f', column {column_num}'
        if option:
            message += f', option {option!r}'

        return message

    @staticmethod
    def _ensure_indent(indent: str | int | None = None) -> str:
        """Normalize indentation input.

        Args:
            indent: Indentation as string or number of spaces.

        Returns:
            A string consisting of spaces or the provided string.
        """
        if isinstance(indent, int) and indent > 0:
            return ' ' * indent

        if isinstance(indent, str):
            return indent

        return ''


class PluginWarning(UserWarning):
    """Warning emitted for non-fatal backend plugin issues.

    This warning is used when a backend cannot be found or loaded,
    but the error does not prevent lookups from proceeding with the
    remaining backends (when running in non-strict mode).
    """


class HieraError(Exception, ErrorFormatter):
    """Base exception for all hiera errors.

    All custom exceptions raised by the library should inherit from
    this class to allow unified error handling by callers.
    """

    def __init__(self, message: str, *,
                 context: ErrorContext | None = None) -> None:
        """Initialize an error.

        Args:
            message: Human-readable error description.
            context: Error context containing optional location values.
        """
        self.message = message
        self.context = context

        super().__init__(message)

    def __str__(self) -> str:
        """String representation."""
        return self.format(self.message, self.context)

    @classmethod
    def from_yaml_error(cls, error: MarkedYAMLError,
                        filename: str | None = None) -> 'Self':
        """Create an error from a YAML parsing failure.

        Positional information of the problem mark is preserved
        in the error context.

        Args:
            error: Exception raised by the YAML parser.
            filename: Optional name of the parsed file.

        Returns:
            An error instance representing the YAML parsing failure.
        """
        error_context = ErrorContext(filename=filename, error=error)
        if mark := error.problem_mark:
            error_context.update(
                filename=filename or mark.name,
                line_num=mark.line,
                column_num=mark.column,
            )

        message = 'Invalid YAML'
        if error.problem:
            message += f'{linesep}{' ' * FORMAT_INDENT}{error.problem}'

        return cls(message, context=error_context)


class InterpolationLoopError(HieraError):
    """Error raised when recursive interpolation revisits a key.

    The `keys` attribute holds the ordered chain of keys visited
    before the loop closed.
    """

    def __init__(self, keys: list[str]) -> None:
        """Initialize a loop error.

        Args:
            keys: Ordered interpolation keys forming the loop.
        """
        self.keys = list(keys)

        super().__init__(f'Interpolation loop detected in [{', '.join(self.keys)}]')


class AnswerTypeError(HieraError):
    """Error raised when a backend answer does not fit the resolution policy.

    Array lookups accept sequences and strings, hash lookups accept
    mappings only.
    """

    def __init__(self, expected: str, answer: object) -> None:
        """Initialize a type mismatch error.

        Args:
            expected: Name of the expected answer shape.
            answer: The offending answer.
        """
        self.expected = expected
        self.answer = answer

        super().__init__(
            f'Hiera type mismatch: expected {expected} '
            f'and got {type(answer).__name__}',
        )


class PluginError(HieraError):
    """Error raised for fatal backend plugin failures.

    This exception is raised when a backend is unknown, its entry
    point is invalid, or its factory fails in strict mode.
    """

    def __init__(self, message: str, *,
                 entrypoint: 'EntryPoint | None' = None) -> None:
        """Initialize a plugin error.

        Args:
            message: Human-readable error description.
            entrypoint: Optional plugin entry point associated with the error.
        """
        self.entrypoint = entrypoint

        super().__init__(message)


class DataError(HieraError):
    """Error raised when a backend data file cannot be parsed.

    Missing data files are not errors; backends skip them.
    """


class ConfigError(HieraError):
    """Error raised when the configuration cannot be loaded or validated."""

    @classmethod
    def from_pydantic_error(cls, error: 'ValidationError',
                            filename: str | None = None) -> 'Self':
        """Create a configuration error from a Pydantic validation failure.

        Only the first reported issue is kept; its location path
        is rendered as a dotted option name.

        Args:
            error: ValidationError raised by Pydantic.
            filename: Optional name of the configuration file.

        Returns:
            ConfigError representing the validation failure.
        """
        error_context = ErrorContext(filename=filename, error=error)

        for item in error.errors(include_url=False, include_input=False):
            option = '.'.join(str(part) for part in item['loc'])
            if option:
                error_context['option'] = option
            return cls(f'Invalid configuration: {item['msg']}', context=error_context)

        return cls('Invalid configuration', context=error_context)
