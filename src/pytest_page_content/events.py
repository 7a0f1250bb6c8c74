"""Application-level event channel of the page under test.

The page under test reports its asynchronous activity (for example, a
panel that has received lazily loaded content) by dispatching DOM
`CustomEvent`s. The event logger forwards the `detail` of those events
to Python subscribers.

The channel is a broadcast: every subscriber observes every event, and a
late subscriber is first replayed the events dispatched before it
subscribed. Expectations subscribe only after all actions have run, so
the replay is what lets them observe events fired by those actions.
"""

from asyncio import get_running_loop
from contextlib import suppress
from json import dumps
from logging import getLogger
from typing import TYPE_CHECKING, Protocol
from weakref import WeakKeyDictionary

from pytest_page_content.errors import ChainRuntimeError
from pytest_page_content.values import normalize

if TYPE_CHECKING:
    from asyncio import Future
    from collections.abc import Callable

    from playwright.async_api import Page

if TYPE_CHECKING:
    from pytest_page_content.values import EventDetail, RuntimeValue

logger = getLogger(__name__)

#: Init script forwarding event details to the exposed binding.
#: Registered before any document script runs.
LISTENER_SCRIPT = '''
document.addEventListener(%(event)s, (event) => {
    window[%(binding)s](event.detail === undefined ? null : event.detail);
});
'''

#: Predicate selecting which event detail resolves a subscription.
type DetailPredicate = Callable[[EventDetail], bool]


class EventSubscriber(Protocol):
    """Receiver of event notifications."""

    def notify(self, detail: 'EventDetail') -> None:
        """Receive the detail of a dispatched event."""


class EventLogger(Protocol):
    """Broadcast channel of application-level events."""

    def subscribe(self, subscriber: EventSubscriber) -> None:
        """Start delivering event details to a subscriber."""

    def unsubscribe(self, subscriber: EventSubscriber) -> None:
        """Stop delivering event details to a subscriber."""


class PageBinding:
    """Function exposed to a page, forwarding to the current event logger.

    A page accepts each binding name once, for its whole lifetime.
    """

    def __init__(self, event_name: str) -> None:
        self.event_name = event_name
        self.event_logger: PageEventLogger | None = None

    def dispatch(self, detail: 'RuntimeValue') -> None:
        """Forward an event detail to the current event logger."""
        if self.event_logger is not None:
            self.event_logger.dispatch(detail)


#: Bindings registered on live pages, by binding name.
PAGE_BINDINGS: 'WeakKeyDictionary[Page, dict[str, PageBinding]]' = WeakKeyDictionary()


class PageEventLogger:
    """Event logger fed by a Playwright page.

    The logger is fed through a `PageBinding` exposed to the page and an
    init script listening to `event_name` events on `document`. It must
    be attached before the document is loaded.
    """

    def __init__(self, event_name: str = 'load',
                 binding_name: str = '__pageContentNotify') -> None:
        """Initialize a detached event logger.

        Args:
            event_name: Type of the DOM events to record.
            binding_name: Name of the function exposed to the page.
        """
        self.event_name = event_name
        self.binding_name = binding_name

        self.history: list[EventDetail] = []
        self.subscribers: list[EventSubscriber] = []

    @property
    def script(self) -> str:
        """Return the init script forwarding events to this logger."""
        return LISTENER_SCRIPT % {
            'event': dumps(self.event_name),
            'binding': dumps(self.binding_name),
        }

    async def attach(self, page: 'Page') -> None:
        """Wire the logger into a page.

        The binding and its listener script are registered on the first
        attachment to a page only. Later attachments retarget that
        binding, so events of the next documents reach this logger alone.

        Args:
            page: Page whose next documents report events to this logger.

        Raises:
            ChainRuntimeError: If the binding of the page already forwards
                another event type.
        """
        bindings = PAGE_BINDINGS.setdefault(page, {})

        binding = bindings.get(self.binding_name)
        if binding is None:
            binding = PageBinding(self.event_name)
            await page.expose_function(self.binding_name, binding.dispatch)
            await page.add_init_script(script=self.script)
            bindings[self.binding_name] = binding

        elif binding.event_name != self.event_name:
            raise ChainRuntimeError(
                f'Binding "{self.binding_name}" already forwards '
                f'"{binding.event_name}" events',
            )

        binding.event_logger = self

    def dispatch(self, detail: 'RuntimeValue') -> None:
        """Record an event and notify every current subscriber.

        Args:
            detail: Detail payload of the event.
        """
        value = normalize(detail)
        self.history.append(value)

        logger.debug('event %r dispatched with %r', self.event_name, value)

        for subscriber in tuple(self.subscribers):
            subscriber.notify(value)

    def subscribe(self, subscriber: EventSubscriber) -> None:
        """Subscribe and replay already dispatched events.

        The replay stops as soon as the subscriber unsubscribes itself.

        Args:
            subscriber: Receiver of event notifications.
        """
        self.subscribers.append(subscriber)

        for detail in tuple(self.history):
            if subscriber not in self.subscribers:
                break
            subscriber.notify(detail)

    def unsubscribe(self, subscriber: EventSubscriber) -> None:
        """Unsubscribe; unknown subscribers are ignored."""
        with suppress(ValueError):
            self.subscribers.remove(subscriber)


class OneShotSubscriber:
    """Subscriber resolving a future with the first matching detail.

    Once resolved, the subscriber detaches itself from the logger so that
    it is notified at most once.
    """

    def __init__(self, event_logger: EventLogger,
                 predicate: DetailPredicate | None = None) -> None:
        """Initialize a subscriber bound to the running event loop.

        Args:
            event_logger: Logger the subscriber will be attached to.
            predicate: Optional filter; any detail matches when omitted.
        """
        self.event_logger = event_logger
        self.predicate = predicate

        self.future: Future[EventDetail] = get_running_loop().create_future()

    def notify(self, detail: 'EventDetail') -> None:
        """Resolve the future if the detail matches."""
        if self.future.done():
            return

        if self.predicate is not None and not self.predicate(detail):
            return

        self.future.set_result(detail)
        self.event_logger.unsubscribe(self)


async def first_notification(event_logger: EventLogger,
                             predicate: DetailPredicate | None = None) -> 'EventDetail':
    """Wait for the first event detail delivered to a new subscription.

    The subscription is dropped once the wait completes, fails or
    is cancelled.

    Args:
        event_logger: Logger to subscribe to.
        predicate: Optional filter applied to delivered details.

    Returns:
        The first delivered detail accepted by the predicate.
    """
    subscriber = OneShotSubscriber(event_logger, predicate)
    event_logger.subscribe(subscriber)

    try:
        return await subscriber.future

    finally:
        event_logger.unsubscribe(subscriber)
