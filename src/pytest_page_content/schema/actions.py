"""Queued page actions.

An action is an immutable descriptor of a page interaction. Actions are
appended to a chain while the test is declared and are executed later,
strictly in insertion order, against the shared page of the run.
"""

from collections.abc import Awaitable, Callable
from typing import Literal

from playwright.async_api import Page
from pydantic import Field

from pytest_page_content.models import SchemaModel

#: Arbitrary asynchronous page interaction.
type PageConsumer = Callable[[Page], Awaitable[None]]


class BaseAction(SchemaModel):
    """Base class for queued page actions.

    Subclasses implement `__call__`, which receives the live page and
    produces no result. Failures propagate to the runner unmodified.
    """

    #: Action discriminator.
    action: str

    async def __call__(self, page: Page) -> None:
        """Execute the action against the live page."""
        raise NotImplementedError


class CallbackAction(BaseAction):
    """Action running an arbitrary asynchronous callback."""

    action: Literal['do'] = 'do'

    callback: PageConsumer = Field(
        title='Page callback',
        description='Asynchronous callable receiving the live page.',
    )

    async def __call__(self, page: Page) -> None:
        """Run the callback."""
        await self.callback(page)


class ClickAction(BaseAction):
    """Action clicking a single element."""

    action: Literal['click'] = 'click'

    selector: str = Field(
        title='Element selector',
        description=(
            'Selector of the element to click. It must resolve to one '
            'clickable element when the action runs.'
        ),
    )

    async def __call__(self, page: Page) -> None:
        """Click the element."""
        await page.click(self.selector)
