"""Logical selector resolution and content synchronization.

Pages under test often load content lazily into panels addressed by
anchors through a logical selector (the `data-target` attribute) rather
than by the panel's own selector. Before comparing the content of an
element, the expectation has to find the logical selector the page uses
for it, then wait until the page reports that selector as loaded.
"""

from collections.abc import Mapping
from logging import getLogger
from typing import TYPE_CHECKING
from warnings import warn

from pytest_page_content.errors import AmbiguousSelectorWarning, ErrorContext, SelectorResolutionError
from pytest_page_content.events import first_notification

if TYPE_CHECKING:
    from playwright.async_api import Page

if TYPE_CHECKING:
    from pytest_page_content.events import EventLogger
    from pytest_page_content.values import EventDetail

logger = getLogger(__name__)

#: Page function mapping a target selector to logical selector candidates.
#: The document is parsed into a container that is never inserted into
#: the live DOM. Its `<script>` elements do not run, but inline event
#: handlers (for example `<img onerror>`) may still fire.
RESOLVE_SCRIPT = '''
([html, selector, attribute]) => {
    const container = window.document.createElement('div');
    container.insertAdjacentHTML('afterbegin', html);

    const desiredTarget = container.querySelector(selector);
    if (desiredTarget === null) {
        return {found: false, candidates: []};
    }

    const anchors = container.querySelectorAll(`a[${attribute}]`);
    const candidates = Array.from(anchors)
        .map((anchor) => anchor.getAttribute(attribute))
        .filter((targetSelector) => {
            try {
                return container.querySelector(targetSelector) === desiredTarget;
            } catch (error) {
                return false;
            }
        });

    return {found: true, candidates};
}
'''


class SelectorResolver:
    """Resolver of logical selectors within the document under test."""

    def __init__(self, html: str, anchor_attribute: str = 'data-target') -> None:
        """Initialize a resolver.

        Args:
            html: Original document under test.
            anchor_attribute: Anchor attribute carrying logical selectors.
        """
        self.html = html
        self.anchor_attribute = anchor_attribute

    async def resolve(self, page: 'Page', selector: str) -> str:
        """Compute the logical selector addressing an element.

        The result is computed from the original document and is not
        cached between calls.

        Args:
            page: Live page used to evaluate the document.
            selector: Selector of the target element.

        Returns:
            The logical selector of the first anchor addressing the element.

        Raises:
            SelectorResolutionError: If the element is absent from the
                document or no anchor addresses it.
        """
        result = await page.evaluate(
            RESOLVE_SCRIPT,
            [self.html, selector, self.anchor_attribute],
        )

        context = ErrorContext(selector=selector)
        if not result['found']:
            raise SelectorResolutionError(
                'Target element not found in document',
                context=context,
            )

        candidates = list(dict.fromkeys(result['candidates']))
        if not candidates:
            raise SelectorResolutionError(
                f'No anchor with "{self.anchor_attribute}" addresses the target element',
                context=context,
            )

        if len(candidates) > 1:
            warn(
                f'Selector "{selector}" is addressed by several logical '
                f'selectors {candidates!r}, using "{candidates[0]}"',
                category=AmbiguousSelectorWarning,
                stacklevel=2,
            )

        logger.debug('selector %r resolved to %r', selector, candidates[0])

        return candidates[0]


class ContentSynchronizer:
    """Waiter for content loading notifications."""

    def __init__(self, event_logger: 'EventLogger', target_key: str = 'target') -> None:
        """Initialize a synchronizer.

        Args:
            event_logger: Logger receiving the page notifications.
            target_key: Detail key naming the loaded logical selector.
        """
        self.event_logger = event_logger
        self.target_key = target_key

    def has_received_content(self, detail: 'EventDetail', logical_selector: str) -> bool:
        """Check whether a detail reports content for a logical selector."""
        if not isinstance(detail, Mapping):
            return False

        return detail.get(self.target_key) == logical_selector

    async def wait(self, logical_selector: str) -> 'EventDetail':
        """Block until the logical selector is reported as loaded.

        No timeout is applied here; the surrounding test runner limits
        apply.

        Args:
            logical_selector: Logical selector of the loading element.

        Returns:
            Detail of the notification that reported the content.
        """
        return await first_notification(
            self.event_logger,
            lambda detail: self.has_received_content(detail, logical_selector),
        )
