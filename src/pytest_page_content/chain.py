"""Fluent chain declaring page actions and expectations.

A chain is built in phases, each represented by its own class exposing
only the operations valid in that phase:

- `PageContentFixture`: entry point (`do`, `click`, `then`, `expect_that`);
- `ActionsChain`: action phase (`do`, `click`, `then`);
- `AssertionsChainRoot`: first expectation (`expect_that`);
- `ContinuationChain`: after an expectation (`and_`);
- `FinalizableAssertionsChainRoot`: further expectations or `run_test`.

Every phase object is a view over a single `ChainState` created per
document. Declaring operations only appends descriptors to that state;
the page is touched only when `run_test` is awaited.

Example:
    await (
        with_page_content(html)
        .click('a[data-target="#panel"]')
        .then()
        .expect_that().element('#panel').has_same_content_of('panel.html')
        .and_()
        .expect_that().browser_url_ends_with('/index.html')
        .and_()
        .run_test()
    )
"""

from typing import TYPE_CHECKING

from pytest_page_content.runner import TestRunner
from pytest_page_content.schema import (
    CallbackAction,
    ClickAction,
    LoadEventCheck,
    SameContentCheck,
    URLEndsWithCheck,
)
from pytest_page_content.settings import PageContentSettings

if TYPE_CHECKING:
    from pathlib import Path

if TYPE_CHECKING:
    from pytest_page_content.capabilities import FixtureCapabilities
    from pytest_page_content.schema import BaseAction, BaseCheck, PageConsumer
    from pytest_page_content.values import RuntimeValue


class ChainState:
    """Operations queued by one chain."""

    def __init__(self) -> None:
        """Initialize empty queues."""
        self.actions: list[BaseAction] = []
        self.assertions: list[BaseCheck] = []


class FinalizableAssertionsChainRoot:
    """Phase offering another expectation or the chain execution."""

    def __init__(self, assertions: 'AssertionsChainRoot', runner: TestRunner) -> None:
        self.assertions = assertions
        self.runner = runner

    def expect_that(self) -> 'ExpectationChoice':
        """Declare another expectation."""
        return self.assertions.expect_that()

    async def run_test(self) -> None:
        """Run the queued actions, then every queued expectation.

        Raises:
            AssertionError: If any expectation fails.
        """
        await self.runner.run()


class ContinuationChain:
    """Phase following a declared expectation."""

    def __init__(self, assertions: 'AssertionsChainRoot', runner: TestRunner) -> None:
        self.assertions_or_run_test = FinalizableAssertionsChainRoot(assertions, runner)

    def and_(self) -> FinalizableAssertionsChainRoot:
        """Continue the chain."""
        return self.assertions_or_run_test


class ElementAssertion:
    """Expectations on a single element."""

    def __init__(self, chain: 'AssertionsChainRoot', selector: str,
                 continuation: ContinuationChain) -> None:
        self.chain = chain
        self.selector = selector
        self.continuation = continuation

    def has_same_content_of(self, filename: 'str | Path') -> ContinuationChain:
        """Expect the element inner markup to equal a reference file.

        The comparison waits until the page reports the element, through
        its logical selector, as having received its content. Surrounding
        whitespace is ignored on both sides.

        Args:
            filename: Reference file, relative to the fixtures directory.
        """
        settings = self.chain.settings

        self.chain.state.assertions.append(SameContentCheck(
            selector=self.selector,
            filename=settings.resolve_reference(filename),
            html=self.chain.html,
            anchor_attribute=settings.anchor_attribute,
            target_key=settings.target_key,
            encoding=settings.encoding,
        ))

        return self.continuation


class LoadEventAssertion:
    """Expectations on the event stream."""

    def __init__(self, chain: 'AssertionsChainRoot',
                 continuation: ContinuationChain) -> None:
        self.chain = chain
        self.continuation = continuation

    def has_been_dispatched_with_details(self, details: 'RuntimeValue') -> ContinuationChain:
        """Expect the first delivered event detail to deep-equal `details`."""
        self.chain.state.assertions.append(LoadEventCheck(details=details))

        return self.continuation


class ExpectationChoice:
    """Kinds of expectation available after `expect_that`."""

    def __init__(self, chain: 'AssertionsChainRoot',
                 continuation: ContinuationChain) -> None:
        self.chain = chain
        self.continuation = continuation

    def element(self, selector: str) -> ElementAssertion:
        """Select the element to check."""
        return ElementAssertion(self.chain, selector, self.continuation)

    def browser_url_ends_with(self, url: str) -> ContinuationChain:
        """Expect the current page URL to end with `url`."""
        self.chain.state.assertions.append(URLEndsWithCheck(url=url))

        return self.continuation

    def load_event(self) -> LoadEventAssertion:
        """Select the event stream to check."""
        return LoadEventAssertion(self.chain, self.continuation)


class AssertionsChainRoot:
    """Phase declaring the first expectation."""

    def __init__(self, html: str, state: ChainState, runner: TestRunner,
                 settings: PageContentSettings) -> None:
        self.html = html
        self.state = state
        self.runner = runner
        self.settings = settings

    def expect_that(self) -> ExpectationChoice:
        """Declare an expectation."""
        return ExpectationChoice(self, ContinuationChain(self, self.runner))


class ActionsChain:
    """Phase declaring page actions."""

    def __init__(self, state: ChainState, assertions: AssertionsChainRoot) -> None:
        self.state = state
        self.assertions = assertions

    def do(self, callback: 'PageConsumer') -> 'ActionsChain':
        """Queue an arbitrary asynchronous page callback."""
        self.state.actions.append(CallbackAction(callback=callback))

        return self

    def click(self, selector: str) -> 'ActionsChain':
        """Queue a click on the element matching `selector`."""
        self.state.actions.append(ClickAction(selector=selector))

        return self

    def then(self) -> AssertionsChainRoot:
        """Close the action phase."""
        return self.assertions


class PageContentFixture:
    """Entry point of a chain bound to one document."""

    def __init__(self, actions: ActionsChain, assertions: AssertionsChainRoot) -> None:
        self.actions = actions
        self.assertions = assertions

    def do(self, callback: 'PageConsumer') -> ActionsChain:
        """Queue an arbitrary asynchronous page callback."""
        return self.actions.do(callback)

    def click(self, selector: str) -> ActionsChain:
        """Queue a click on the element matching `selector`."""
        return self.actions.click(selector)

    def then(self) -> AssertionsChainRoot:
        """Skip the action phase."""
        return self.actions.then()

    def expect_that(self) -> ExpectationChoice:
        """Declare an expectation without any action."""
        return self.assertions.expect_that()


def make_fixture(html: str, capabilities: 'FixtureCapabilities',
                 settings: PageContentSettings | None = None) -> PageContentFixture:
    """Build an independent chain for a document.

    Args:
        html: Document under test.
        capabilities: Page context and event logger providers.
        settings: Runtime settings; resolved from the environment if omitted.

    Returns:
        Entry point of the chain.
    """
    if settings is None:
        settings = PageContentSettings()

    state = ChainState()
    runner = TestRunner(html, state, capabilities)
    assertions = AssertionsChainRoot(html, state, runner, settings)
    actions = ActionsChain(state, assertions)

    return PageContentFixture(actions, assertions)
