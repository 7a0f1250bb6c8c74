"""Core exception hierarchy.

This module defines base error and warning types used across the library
to report chain execution failures, selector resolution problems and
reference file issues in a structured way.
"""

from os import linesep
from typing import Any, TypedDict

from yaml import dump

from pytest_page_content.values import MAPPINGS, SCALARS, SEQUENCES

SNIPPET_ELLIPSIS = f' ...{linesep}'
SNIPPET_INDENT = 2

FORMAT_REPLACER = '<runtime object>'
FORMAT_INDENT = 4


class ErrorContext(TypedDict, total=False):
    """Container describing contextual information for error formatting.

    All fields are optional; the formatter adapts output based on
    provided values.
    """

    #: Reference file involved in the failure.
    filename: str | None
    #: Selector involved in the failure.
    selector: str | None

    #: Number of the action where the error occurred.
    step_num: int | None
    #: Number of the expectation where the error occurred.
    check_num: int | None

    #: Operation associated with the error.
    element: Any


class ErrorFormatter:
    """Utility class for formatting chain-related errors.

    This formatter produces human-readable error messages with optional
    location and YAML-based snippets of the failing operation.
    """

    @classmethod
    def format(cls, message: str, context: ErrorContext | None = None) -> str:
        """Format an error message using contextual information.

        Args:
            message: Base human-readable error message.
            context: Optional error context with location and data.

        Returns:
            A fully formatted error message suitable for display.
        """
        if not context:
            return message

        message += linesep
        message += cls.get_location_string(context, indent=FORMAT_INDENT)
        message += cls.get_snippet_string(context, indent=FORMAT_INDENT * 2)

        return message

    @classmethod
    def get_location_string(cls, context: ErrorContext, *,
                            indent: str | int | None = None) -> str:
        """Format chain location information.

        Args:
            context: Error context containing location metadata.
            indent: Optional indentation (string or number of spaces).

        Returns:
            A formatted location string including action or expectation
            numbers, selector and reference file when available.
        """
        indent = cls._ensure_indent(indent)

        message = ''
        if (step_num := context.get('step_num')) is not None:
            message += f'{indent}on action {step_num + 1}{linesep}'

        if (check_num := context.get('check_num')) is not None:
            message += f'{indent}on expectation {check_num + 1}{linesep}'

        if selector := context.get('selector'):
            message += f'{indent}for selector "{selector}"{linesep}'

        if filename := context.get('filename'):
            message += f'{indent}against "{filename}"{linesep}'

        return message

    @classmethod
    def get_snippet_string(cls, context: ErrorContext, *,
                           indent: str | int | None = None) -> str:
        """Generate a formatted snippet of the failing operation.

        Args:
            context: Error context containing operation data.
            indent: Optional indentation (string or number of spaces).

        Returns:
            A formatted multi-line snippet string, or an empty string
            if no snippet data is available.
        """
        indent = cls._ensure_indent(indent)

        if element := context.get('element'):
            snippet = f'{indent}{SNIPPET_ELLIPSIS}'
            snippet += cls._make_yaml(element, indent)
            snippet += linesep
            return snippet

        return ''

    @classmethod
    def _filter_unsafe(cls, value: Any) -> Any:  # noqa: ANN401
        """Recursively sanitize values for safe YAML serialization.

        Non-scalar and non-container objects (callbacks, pages) are
        replaced with a placeholder.

        Args:
            value: Arbitrary value to sanitize.

        Returns:
            A YAML-safe representation of the value.
        """
        if value is None or isinstance(value, SCALARS):
            return value

        if isinstance(value, MAPPINGS):
            return {
                key: cls._filter_unsafe(item)
                for key, item in value.items()
            }

        if isinstance(value, SEQUENCES):
            return [
                cls._filter_unsafe(item)
                for item in value
            ]

        return FORMAT_REPLACER

    @classmethod
    def _make_yaml(cls, value: Any, indent: str = '') -> str:  # noqa: ANN401
        """Serialize a value to a YAML-formatted string.

        Args:
            value: Arbitrary value to serialize.
            indent: Optional indentation prefix.

        Returns:
            A YAML-formatted string representation of the value.
        """
        data = dump(
            cls._filter_unsafe(value),
            indent=SNIPPET_INDENT,
            sort_keys=False,
        )

        return cls._make_indent(data, indent)

    @staticmethod
    def _make_indent(value: str, indent: str) -> str:
        """Apply indentation to a multi-line string.

        Empty or whitespace-only lines are omitted.
        """
        if not indent:
            return value

        return linesep.join(
            f'{indent}{line}'
            for line in value.splitlines()
            if line.strip()
        )

    @staticmethod
    def _ensure_indent(indent: str | int | None = None) -> str:
        """Normalize indentation input."""
        if isinstance(indent, int) and indent > 0:
            return ' ' * indent

        if isinstance(indent, str):
            return indent

        return ''


class FixtureWarning(UserWarning):
    """Warning emitted for non-fatal fixture usage issues."""


class AmbiguousSelectorWarning(FixtureWarning):
    """Warning emitted when several logical selectors address one element."""


class PageContentError(Exception, ErrorFormatter):
    """Base exception for all pytest-page-content errors.

    All custom exceptions raised by the library inherit from this
    class to allow unified error handling by callers.
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


class ChainRuntimeError(PageContentError):
    """Error raised while running a chain against a live page."""


class SelectorResolutionError(ChainRuntimeError):
    """Error raised when a logical selector can not be resolved.

    Raised when the target element is absent from the document under
    test, or when no anchor addresses it through its logical selector.
    """


class ReferenceFileError(ChainRuntimeError):
    """Error raised when a reference file is missing or unreadable."""
