"""Navigation results returned by prompts, wizards and command handlers.

Every interactive call returns one of:

* ``Proceed(value)`` - the user answered; carry on with ``value``
* ``BACK`` - the user chose "Go back"
* ``CANCEL`` - the user chose "Cancel" or pressed Ctrl+C

Back and cancel are ordinary values, not errors, so callers switch on them
instead of catching exceptions.
"""

from dataclasses import dataclass
from typing import Any, Generic, TypeVar, Union

T = TypeVar("T")


@dataclass(frozen=True)
class Proceed(Generic[T]):
    """The user supplied a value."""

    value: T


class Back:
    """The user asked to return to the previous step."""

    _instance: "Back | None" = None

    def __new__(cls) -> "Back":
        if cls._instance is None:
            cls._instance = super().__new__(cls)
        return cls._instance

    def __repr__(self) -> str:
        return "BACK"


class Cancel:
    """The user asked to abandon the whole operation."""

    _instance: "Cancel | None" = None

    def __new__(cls) -> "Cancel":
        if cls._instance is None:
            cls._instance = super().__new__(cls)
        return cls._instance

    def __repr__(self) -> str:
        return "CANCEL"


BACK = Back()
CANCEL = Cancel()

NavResult = Union[Proceed[Any], Back, Cancel]


def is_navigation(result: Any) -> bool:
    """Return True if ``result`` is a back or cancel signal."""
    return isinstance(result, (Back, Cancel))
