"""Tests for error formatting."""

import pytest

from pytest_page_content.errors import ErrorContext, PageContentError, SelectorResolutionError
from pytest_page_content.schema import CallbackAction, ClickAction


def test_plain_message() -> None:
    """Errors without context render their message only."""
    assert f'{PageContentError("Boom")}' == 'Boom'


def test_location_message() -> None:
    """Location details are rendered in a stable order."""
    message = PageContentError.format('Boom', ErrorContext(
        step_num=0,
        check_num=2,
        selector='#panel',
        filename='panel.html',
    ))

    assert message.splitlines() == [
        'Boom',
        '    on action 1',
        '    on expectation 3',
        '    for selector "#panel"',
        '    against "panel.html"',
    ]


def test_operation_snippet() -> None:
    """Operations are rendered as YAML snippets below the location."""
    message = PageContentError.format('Chain action failed', ErrorContext(
        step_num=1,
        element=ClickAction(selector='#open').model_dump(exclude_none=True),
    ))

    assert message.splitlines() == [
        'Chain action failed',
        '    on action 2',
        '         ...',
        '        action: click',
        '        selector: \'#open\'',
    ]


def test_error_context_in_message() -> None:
    """Raised errors render their context."""
    error = SelectorResolutionError(
        'Target element not found in document',
        context=ErrorContext(selector='#missing'),
    )

    assert f'{error}'.splitlines() == [
        'Target element not found in document',
        '    for selector "#missing"',
    ]


@pytest.mark.parametrize('value', (
    pytest.param(lambda page: page, id='lambda'),
    pytest.param(print, id='builtin'),
))
def test_unsafe_values_are_replaced(value: object) -> None:
    """Callables never leak into snippets."""
    message = PageContentError.format('Chain action failed', ErrorContext(
        element=CallbackAction(callback=value).model_dump(),
    ))

    assert 'callback: <runtime object>' in message
