"""Runtime execution layer for page content chains.

The runner owns the page and the event logger of one chain run. It
prepares the page context, drains the queued actions sequentially and
then evaluates every queued expectation concurrently.
"""

from asyncio import TaskGroup
from logging import getLogger
from os import linesep
from typing import TYPE_CHECKING

from pytest_page_content.errors import ChainRuntimeError, ErrorContext, PageContentError

if TYPE_CHECKING:
    from playwright.async_api import Page

if TYPE_CHECKING:
    from pytest_page_content.capabilities import FixtureCapabilities
    from pytest_page_content.chain import ChainState
    from pytest_page_content.events import EventLogger
    from pytest_page_content.schema import BaseAction, BaseCheck

logger = getLogger(__name__)


class TestRunner:
    """Executor of the operations queued in a chain state.

    A runner is single-use: its state is never reset, so running it
    twice executes the queued operations twice.
    """

    __test__ = False

    def __init__(self, html: str, state: 'ChainState',
                 capabilities: 'FixtureCapabilities') -> None:
        """Initialize a runner.

        Args:
            html: Document under test.
            state: Chain state shared with the chain phases.
            capabilities: Page context and event logger providers.
        """
        self.html = html
        self.state = state
        self.capabilities = capabilities

        self.event_logger: EventLogger | None = None

    async def before_loading_lib(self, page: 'Page') -> None:
        """Attach the event logger before the page content loads."""
        self.event_logger = await self.capabilities.create_event_logger(page)

    async def prepare(self) -> tuple['Page', 'EventLogger']:
        """Acquire the page context of the run.

        Returns:
            The live page and the event logger attached to it.

        Raises:
            ChainRuntimeError: If the context preparer never called
                the event logger hook.
        """
        page = await self.capabilities.prepare_context(
            page_content=self.html,
            before_loading_lib=self.before_loading_lib,
        )

        if self.event_logger is None:
            raise ChainRuntimeError(
                'Event logger was not attached before loading the page content',
            )

        return page, self.event_logger

    async def run_action(self, action: 'BaseAction', page: 'Page', *,
                         step_num: int) -> None:
        """Execute a single action.

        Exceptions propagate unmodified, with a note locating the action.

        Args:
            action: Action to execute.
            page: Live page.
            step_num: Action index for error reporting.
        """
        try:
            await action(page)

        except Exception as error:
            error.add_note(PageContentError.format(
                'Chain action failed',
                ErrorContext(
                    step_num=step_num,
                    element=action.model_dump(exclude_none=True),
                ),
            ))
            raise

    async def run_check(self, check: 'BaseCheck', page: 'Page',
                        event_logger: 'EventLogger', *, check_num: int) -> None:
        """Evaluate a single expectation.

        Args:
            check: Expectation to evaluate.
            page: Live page.
            event_logger: Event logger of the run.
            check_num: Expectation index for error reporting.

        Raises:
            AssertionError: If the expectation fails, enriched with its location.
            ChainRuntimeError: Propagated as-is.
        """
        try:
            await check(page, event_logger)

        except AssertionError as base:
            raise self.fail(check, base, check_num=check_num) from base

    async def run_checks(self, page: 'Page', event_logger: 'EventLogger') -> None:
        """Evaluate every expectation concurrently.

        The first failure cancels the expectations still in flight. A single
        failure is re-raised as is, several failures as an exception group.
        """
        try:
            async with TaskGroup() as group:
                for check_num, check in enumerate(self.state.assertions):
                    group.create_task(self.run_check(
                        check,
                        page,
                        event_logger,
                        check_num=check_num,
                    ))

        except ExceptionGroup as failures:
            if len(failures.exceptions) > 1:
                raise
            failure = failures.exceptions[0]

        else:
            return

        raise failure

    async def run(self) -> None:
        """Execute the chain.

        Raises:
            AssertionError: If any expectation fails.
            ChainRuntimeError: If the chain can not be executed.
        """
        page, event_logger = await self.prepare()
        logger.debug('page context prepared')

        for step_num, action in enumerate(self.state.actions):
            await self.run_action(action, page, step_num=step_num)
        logger.debug('%d actions drained', len(self.state.actions))

        await self.run_checks(page, event_logger)
        logger.debug('%d expectations settled', len(self.state.assertions))

    @staticmethod
    def fail(check: 'BaseCheck', error: AssertionError, *,
             check_num: int | None = None) -> AssertionError:
        """Create an AssertionError enriched with the expectation location.

        Args:
            check: Expectation that failed.
            error: Original assertion failure.
            check_num: Index of the expectation.

        Returns:
            AssertionError with formatted message.
        """
        message = 'Expectation fail'
        if reason := f'{error}':
            message += f'{linesep}{reason}'

        return AssertionError(PageContentError.format(message, ErrorContext(
            check_num=check_num,
            element=check.model_dump(exclude_none=True),
        )))
