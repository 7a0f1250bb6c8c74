"""Tests for logical selector resolution and content synchronization."""

import asyncio
from typing import TYPE_CHECKING

import pytest

from pytest_page_content.errors import AmbiguousSelectorWarning, SelectorResolutionError
from pytest_page_content.resolver import RESOLVE_SCRIPT, ContentSynchronizer, SelectorResolver
from tests.examples.documents import DOCUMENT, PANEL_LOADED

if TYPE_CHECKING:
    from pytest_mock import MockType

    from pytest_page_content.events import PageEventLogger


@pytest.mark.asyncio
async def test_resolve_logical_selector(page: 'MockType') -> None:
    """Resolve the logical selector from the original document."""
    resolver = SelectorResolver(DOCUMENT)

    assert await resolver.resolve(page, 'main > section:first-child') == '#panel'

    page.evaluate.assert_awaited_once_with(
        RESOLVE_SCRIPT,
        [DOCUMENT, 'main > section:first-child', 'data-target'],
    )


@pytest.mark.asyncio
async def test_resolve_is_not_cached(page: 'MockType') -> None:
    """Every resolution evaluates the page again."""
    resolver = SelectorResolver(DOCUMENT, anchor_attribute='data-panel')

    await resolver.resolve(page, '#panel')
    await resolver.resolve(page, '#panel')

    assert page.evaluate.await_count == 2
    assert page.evaluate.await_args.args[1][2] == 'data-panel'


@pytest.mark.asyncio
async def test_resolve_missing_element(page: 'MockType') -> None:
    """A target element absent from the document is an error."""
    page.evaluate.return_value = {'found': False, 'candidates': []}

    with pytest.raises(SelectorResolutionError, match=r'^Target element not found in document'):
        await SelectorResolver(DOCUMENT).resolve(page, '#missing')


@pytest.mark.asyncio
async def test_resolve_without_anchor(page: 'MockType') -> None:
    """An element no anchor addresses is an error."""
    page.evaluate.return_value = {'found': True, 'candidates': []}

    with pytest.raises(SelectorResolutionError, match=r'addresses the target element') as error:
        await SelectorResolver(DOCUMENT).resolve(page, '#orphan')

    assert 'for selector "#orphan"' in f'{error.value}'


@pytest.mark.asyncio
async def test_resolve_duplicated_anchors(page: 'MockType', recwarn: pytest.WarningsRecorder) -> None:
    """Several anchors sharing one logical selector are not ambiguous."""
    page.evaluate.return_value = {'found': True, 'candidates': ['#panel', '#panel']}

    assert await SelectorResolver(DOCUMENT).resolve(page, '#panel') == '#panel'
    assert len(recwarn) == 0


@pytest.mark.asyncio
async def test_resolve_ambiguous_anchors(page: 'MockType') -> None:
    """The first of several distinct logical selectors is used with a warning."""
    page.evaluate.return_value = {'found': True, 'candidates': ['#panel', 'main > #panel']}

    with pytest.warns(AmbiguousSelectorWarning, match=r'using "#panel"$'):
        assert await SelectorResolver(DOCUMENT).resolve(page, '#panel') == '#panel'


@pytest.mark.parametrize('detail, expected', (
    pytest.param({'target': '#panel'}, True, id='match'),
    pytest.param({'target': '#panel', 'id': 'x'}, True, id='extra keys'),
    pytest.param({'target': '#other'}, False, id='other target'),
    pytest.param({'id': '#panel'}, False, id='missing key'),
    pytest.param('#panel', False, id='scalar'),
    pytest.param(None, False, id='none'),
))
def test_has_received_content(event_logger: 'PageEventLogger',
                              detail: object, expected: bool) -> None:
    """Match details reporting the logical selector under the target key."""
    synchronizer = ContentSynchronizer(event_logger)

    assert synchronizer.has_received_content(detail, '#panel') is expected


@pytest.mark.asyncio
async def test_wait_for_content(event_logger: 'PageEventLogger') -> None:
    """Waiting ends with the notification reporting the logical selector."""
    synchronizer = ContentSynchronizer(event_logger, target_key='panel')

    waiter = asyncio.create_task(synchronizer.wait('#panel'))
    event_logger.dispatch(PANEL_LOADED)
    await asyncio.sleep(0)

    assert not waiter.done()

    event_logger.dispatch({'panel': '#panel'})

    assert await waiter == {'panel': '#panel'}
