"""Queued page expectations.

An expectation is an immutable descriptor of a read-only check against
the page state or the event stream. Expectations run concurrently once
every action has completed and raise `AssertionError` on mismatch.
"""

from difflib import unified_diff
from os import linesep
from pathlib import Path  # noqa: TC003
from typing import Literal

from playwright.async_api import Page  # noqa: TC002
from pydantic import Field
from yaml import dump

from pytest_page_content.errors import ChainRuntimeError, ErrorContext
from pytest_page_content.events import EventLogger, first_notification  # noqa: TC001
from pytest_page_content.files import read_file_content
from pytest_page_content.models import SchemaModel
from pytest_page_content.resolver import ContentSynchronizer, SelectorResolver
from pytest_page_content.values import RuntimeValue, normalize  # noqa: TC001


def _text_mismatch(message: str, expected: str, actual: str) -> str:
    """Describe a text mismatch with a unified diff."""
    diff = unified_diff(
        expected.splitlines(),
        actual.splitlines(),
        fromfile='expected',
        tofile='actual',
        lineterm='',
    )

    return linesep.join((
        message,
        f'expected: {expected!r}',
        f'actual: {actual!r}',
        *diff,
    ))


def _value_mismatch(message: str, expected: RuntimeValue, actual: RuntimeValue) -> str:
    """Describe a structured value mismatch as YAML."""
    return linesep.join((
        message,
        'expected:',
        dump(expected, indent=2, sort_keys=False).rstrip(),
        'actual:',
        dump(actual, indent=2, sort_keys=False).rstrip(),
    ))


class BaseCheck(SchemaModel):
    """Base class for queued expectations.

    Subclasses implement `__call__`, which receives the live page and
    the event logger of the run and only reads from them.
    """

    #: Expectation discriminator.
    check: str

    async def __call__(self, page: Page, event_logger: EventLogger) -> None:
        """Evaluate the expectation.

        Raises:
            AssertionError: If the expectation does not hold.
        """
        raise NotImplementedError


class URLEndsWithCheck(BaseCheck):
    """Expectation on the suffix of the current page URL."""

    check: Literal['browserURLEndsWith'] = 'browserURLEndsWith'

    url: str = Field(
        title='URL suffix',
        description='Literal suffix the current page URL must end with.',
    )

    async def __call__(self, page: Page, event_logger: EventLogger) -> None:  # noqa: ARG002
        """Compare the current page URL suffix."""
        if not page.url.endswith(self.url):
            raise AssertionError(
                f'Browser URL {page.url!r} does not end with {self.url!r}',
            )


class LoadEventCheck(BaseCheck):
    """Expectation on the first event delivered by the event logger.

    Only the first event is compared: a later matching event does not
    make the expectation pass.
    """

    check: Literal['loadEvent'] = 'loadEvent'

    details: RuntimeValue = Field(
        title='Expected event detail',
        description='Value the first event detail must deep-equal.',
    )

    async def __call__(self, page: Page, event_logger: EventLogger) -> None:  # noqa: ARG002
        """Await the first event and compare its detail."""
        actual = normalize(await first_notification(event_logger))
        expected = normalize(self.details)

        if actual != expected:
            raise AssertionError(_value_mismatch(
                'Load event dispatched with unexpected details',
                expected,
                actual,
            ))


class SameContentCheck(BaseCheck):
    """Expectation on the inner markup of an element.

    The element may receive its content asynchronously. The check first
    resolves the logical selector the page uses for the element, waits
    for the page to report that selector as loaded, and then compares the
    trimmed inner markup with the trimmed reference file.
    """

    check: Literal['hasSameContentOf'] = 'hasSameContentOf'

    selector: str = Field(
        title='Element selector',
        description='Selector of the element in the document under test.',
    )

    filename: Path = Field(
        title='Reference file',
        description='File holding the expected inner markup of the element.',
    )

    html: str = Field(
        exclude=True,
        repr=False,
        title='Document under test',
        description='Original document used to resolve the logical selector.',
    )

    anchor_attribute: str = 'data-target'
    target_key: str = 'target'
    encoding: str = 'utf-8'

    async def __call__(self, page: Page, event_logger: EventLogger) -> None:
        """Synchronize with the content loading and compare markup."""
        resolver = SelectorResolver(self.html, self.anchor_attribute)
        logical_selector = await resolver.resolve(page, self.selector)

        synchronizer = ContentSynchronizer(event_logger, self.target_key)
        await synchronizer.wait(logical_selector)

        element = await page.query_selector(self.selector)
        if element is None:
            raise ChainRuntimeError(
                'Target element not found in page',
                context=ErrorContext(selector=self.selector),
            )

        actual = (await element.inner_html()).strip()
        expected = read_file_content(self.filename, self.encoding).strip()

        if actual != expected:
            raise AssertionError(_text_mismatch(
                f'Content of "{self.selector}" differs from "{self.filename}"',
                expected,
                actual,
            ))
