"""Immutable descriptors of queued chain operations.

Actions mutate or interact with the page and run sequentially.
Expectations only read the page and the event stream and run
concurrently once all actions have completed.
"""

from .actions import BaseAction, CallbackAction, ClickAction, PageConsumer
from .checks import BaseCheck, LoadEventCheck, SameContentCheck, URLEndsWithCheck

__all__ = (
    'BaseAction',
    'BaseCheck',
    'CallbackAction',
    'ClickAction',
    'LoadEventCheck',
    'PageConsumer',
    'SameContentCheck',
    'URLEndsWithCheck',
)
