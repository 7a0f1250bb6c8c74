"""Page context and event logger providers consumed by chains.

A chain never drives the browser lifecycle itself. It receives two
providers: one preparing a page displaying the document under test, and
one attaching an event logger to that page. This module declares them
and ships default Playwright-backed implementations.
"""

from collections.abc import Awaitable, Callable
from typing import TYPE_CHECKING

from playwright.async_api import Page
from pydantic import Field

from pytest_page_content.events import EventLogger, PageEventLogger
from pytest_page_content.models import SchemaModel

if TYPE_CHECKING:
    from playwright.async_api import Route

if TYPE_CHECKING:
    from pytest_page_content.settings import PageContentSettings

#: Hook called with the page before the document is loaded.
type BeforeLoadingLib = Callable[[Page], Awaitable[None]]

#: Called with keyword arguments `page_content` and `before_loading_lib`;
#: returns the page displaying the document.
type PrepareContext = Callable[..., Awaitable[Page]]

#: Attaches an event logger to a page.
type CreateEventLogger = Callable[[Page], Awaitable[EventLogger]]


class FixtureCapabilities(SchemaModel):
    """Providers a chain consumes at run time."""

    prepare_context: PrepareContext = Field(
        title='Context preparer',
        description=(
            'Asynchronous callable receiving `page_content` and '
            '`before_loading_lib` keyword arguments. It must await the hook '
            'before the document is loaded and return the page.'
        ),
    )

    create_event_logger: CreateEventLogger = Field(
        title='Event logger factory',
        description='Asynchronous callable attaching an event logger to a page.',
    )


def make_context_preparer(page: Page, settings: 'PageContentSettings') -> PrepareContext:
    """Build a context preparer serving documents from `settings.page_url`.

    Every run replaces the document served by the previous one, so
    several chains can run against the same page.

    Args:
        page: Page provided by the surrounding browser fixtures.
        settings: Runtime settings.

    Returns:
        Context preparer loading the document into the page.
    """
    async def prepare_context(*, page_content: str,
                              before_loading_lib: BeforeLoadingLib) -> Page:
        if settings.timeout is not None:
            page.set_default_timeout(settings.timeout)

        await before_loading_lib(page)

        async def fulfill(route: 'Route') -> None:
            await route.fulfill(
                status=200,
                content_type='text/html; charset=utf-8',
                body=page_content,
            )

        await page.unroute(settings.page_url)
        await page.route(settings.page_url, fulfill)
        await page.goto(settings.page_url)

        return page

    return prepare_context


def make_event_logger_factory(settings: 'PageContentSettings') -> CreateEventLogger:
    """Build a factory attaching `PageEventLogger` instances.

    Args:
        settings: Runtime settings.

    Returns:
        Event logger factory.
    """
    async def create_event_logger(page: Page) -> EventLogger:
        event_logger = PageEventLogger(
            event_name=settings.event_name,
            binding_name=settings.binding_name,
        )
        await event_logger.attach(page)

        return event_logger

    return create_event_logger
