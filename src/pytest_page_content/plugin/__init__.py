"""Pytest plugin providing page content fixtures.

This module integrates page content chains with pytest by:
- registering custom command-line options;
- resolving shared runtime settings;
- providing the `with_page_content` fixture and the default providers
  it consumes.

The default `prepare_context` fixture expects an asynchronous Playwright
`page` fixture to be provided by the project (for example, by
`pytest-playwright-asyncio`). Override `prepare_context` or
`create_event_logger` to customize how the document is loaded or how
events are observed.
"""

from typing import TYPE_CHECKING

import pytest

from pytest_page_content.capabilities import FixtureCapabilities, make_context_preparer, make_event_logger_factory
from pytest_page_content.chain import make_fixture
from pytest_page_content.settings import PageContentSettings

if TYPE_CHECKING:
    from collections.abc import Callable

    from playwright.async_api import Page

if TYPE_CHECKING:
    from _pytest.config import Config
    from _pytest.config.argparsing import Parser

if TYPE_CHECKING:
    from pytest_page_content.capabilities import CreateEventLogger, PrepareContext
    from pytest_page_content.chain import PageContentFixture

#: Mapping of command-line option destinations to settings fields.
OPTIONS = {
    'page_content_url': 'page_url',
    'page_content_event': 'event_name',
    'page_content_fixtures': 'fixtures_dir',
    'page_content_timeout': 'timeout',
}


def pytest_addoption(parser: 'Parser') -> None:
    """Register pytest command-line options for pytest-page-content.

    Args:
        parser: Pytest argument parser.
    """
    group = parser.getgroup('page-content', 'page content fixtures')
    group.addoption(
        '--page-content-url',
        dest='page_content_url',
        default=None,
        help='URL the document under test is served at.',
    )
    group.addoption(
        '--page-content-event',
        dest='page_content_event',
        default=None,
        help='Type of the DOM events recorded by the event logger.',
    )
    group.addoption(
        '--page-content-fixtures',
        dest='page_content_fixtures',
        default=None,
        help='Base directory of reference files.',
    )
    group.addoption(
        '--page-content-timeout',
        dest='page_content_timeout',
        type=float,
        default=None,
        help='Default Playwright timeout in milliseconds.',
    )


def load_settings(config: 'Config') -> PageContentSettings:
    """Resolve settings from the environment and command-line options.

    Options given on the command line take precedence.

    Args:
        config: Pytest configuration object.

    Returns:
        Resolved settings.
    """
    overrides = {}
    for option, field in OPTIONS.items():
        value = config.getoption(option, default=None)
        if value is not None:
            overrides[field] = value

    return PageContentSettings(**overrides)


@pytest.fixture(scope='session')
def page_content_settings(pytestconfig: 'Config') -> PageContentSettings:
    """Provide the runtime settings of the session."""
    return load_settings(pytestconfig)


@pytest.fixture
def prepare_context(page: 'Page', page_content_settings: PageContentSettings) -> 'PrepareContext':
    """Provide a context preparer loading documents into `page`."""
    return make_context_preparer(page, page_content_settings)


@pytest.fixture
def create_event_logger(page_content_settings: PageContentSettings) -> 'CreateEventLogger':
    """Provide a factory attaching event loggers to pages."""
    return make_event_logger_factory(page_content_settings)


@pytest.fixture
def with_page_content(prepare_context: 'PrepareContext',
                      create_event_logger: 'CreateEventLogger',
                      page_content_settings: PageContentSettings,
                      ) -> 'Callable[[str], PageContentFixture]':
    """Provide a factory of page content chains.

    Each call of the factory builds an independent chain bound to
    the given document.
    """
    capabilities = FixtureCapabilities(
        prepare_context=prepare_context,
        create_event_logger=create_event_logger,
    )

    def factory(html: str) -> 'PageContentFixture':
        return make_fixture(html, capabilities, page_content_settings)

    return factory
