"""Core value types for page content assertions.

This module defines the value types exchanged between the page under
test, the event logger and the assertion chain, together with a helper
normalizing arbitrary runtime objects into comparable values.
"""

from collections.abc import Mapping, Sequence
from typing import Any

from pydantic import BaseModel

#: Scalars are atomic values delivered by the page or declared by tests.
type Scalar = str | bytes | int | float | bool

#: A value is a JSON-like structure that can be deep-compared
#: and rendered into error snippets.
type Value = Scalar | Sequence['Value'] | Mapping[str, 'Value'] | None

#: A value in runtime represents any Python object received from
#: Playwright bindings or user-defined code prior to normalization.
type RuntimeValue = Any

#: Detail payload carried by an application-level event.
type EventDetail = Value

MAPPINGS = (dict,)
SCALARS = (str, bytes, int, float, bool)
SEQUENCES = (list, tuple)


def _normalize_key(value: RuntimeValue) -> str:
    """Validate and normalize a mapping key.

    Args:
        value: Candidate mapping key.

    Returns:
        The validated key as a string.

    Raises:
        TypeError: If the provided key is not a string.
    """
    if not isinstance(value, str):
        raise TypeError(f'Can not use {value!r} as mapping key')

    return value


def normalize(value: RuntimeValue) -> Value:
    """Recursively normalize a runtime value into a `Value`.

    Tuples become lists and pydantic models are dumped into mappings,
    so that event details can be compared by deep equality regardless
    of the container types used to declare them.

    Args:
        value: Runtime value to normalize.

    Returns:
        A fully normalized value.

    Raises:
        TypeError: If the value type is unsupported.
    """
    if value is None:
        return None

    if isinstance(value, SCALARS):
        return value

    if isinstance(value, BaseModel):
        return normalize(value.model_dump(mode='json'))

    if isinstance(value, Mapping):
        return {
            _normalize_key(key): normalize(item)
            for key, item in value.items()
        }

    if isinstance(value, SEQUENCES):
        return [
            normalize(item)
            for item in value
        ]

    raise TypeError(f'{value!r} has unsupported type')
