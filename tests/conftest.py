"""Tests configurations and fixtures."""

from typing import TYPE_CHECKING

import pytest
from playwright.async_api import ElementHandle, Page

from pytest_page_content.capabilities import FixtureCapabilities
from pytest_page_content.events import PageEventLogger
from pytest_page_content.settings import PageContentSettings
from tests.examples.documents import PAGE_URL

if TYPE_CHECKING:
    from pathlib import Path

    from pytest_mock import MockerFixture, MockType


@pytest.fixture
def page(mocker: 'MockerFixture') -> 'MockType':
    """Provide a Playwright page double.

    Asynchronous page methods are replaced by `AsyncMock` instances and
    synchronous ones by `MagicMock` instances. The logical selector
    resolution of `DOCUMENT` is preset, as is the live `#panel` element
    holding `<p>X</p>`.
    """
    page = mocker.MagicMock(spec=Page)
    page.url = PAGE_URL

    element = mocker.MagicMock(spec=ElementHandle)
    element.inner_html.return_value = '\n  <p>X</p>\n'

    page.query_selector.return_value = element
    page.evaluate.return_value = {'found': True, 'candidates': ['#panel']}

    return page


@pytest.fixture
def event_logger() -> PageEventLogger:
    """Provide a detached event logger."""
    return PageEventLogger()


@pytest.fixture
def calls() -> list[str]:
    """Provide a journal of provider calls."""
    return []


@pytest.fixture
def capabilities(page: 'MockType', event_logger: PageEventLogger,
                 calls: list[str]) -> FixtureCapabilities:
    """Provide providers journaling their calls into `calls`.

    The context preparer awaits the event logger hook and then records
    the document as loaded.
    """
    async def prepare_context(*, page_content: str, before_loading_lib) -> 'MockType':  # noqa: ANN001, ARG001
        calls.append('prepare')
        await before_loading_lib(page)
        calls.append('load')
        return page

    async def create_event_logger(page_: 'MockType') -> PageEventLogger:
        assert page_ is page
        calls.append('logger')
        return event_logger

    return FixtureCapabilities(
        prepare_context=prepare_context,
        create_event_logger=create_event_logger,
    )


@pytest.fixture
def settings(tmp_path: 'Path') -> PageContentSettings:
    """Provide settings resolving reference files from a temporary directory."""
    return PageContentSettings(fixtures_dir=tmp_path)
