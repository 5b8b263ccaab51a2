"""Index-based multi-step wizard with back and cancel navigation."""

from collections.abc import Callable
from dataclasses import dataclass
from typing import Any

from ..common.logging import get_logger
from .navigation import BACK, CANCEL, Back, Cancel, NavResult, Proceed

logger = get_logger(__name__)

StepFunc = Callable[[dict[str, Any]], NavResult]


@dataclass(frozen=True)
class Step:
    """One wizard step.

    ``run`` receives the answers collected so far and returns a navigation
    result. A ``Proceed`` value is stored under ``key`` when one is given.
    """

    title: str
    run: StepFunc
    key: str | None = None


class Wizard:
    """Runs steps in order, moving back one step on ``BACK``.

    Going back from the first step ends the wizard with ``BACK``; ``CANCEL``
    from any step ends it with ``CANCEL``. Answers from earlier steps are
    kept when the user goes back, so re-entered steps only overwrite their
    own key.
    """

    def __init__(
        self,
        title: str,
        steps: list[Step],
        on_step: Callable[[int, int, Step], None] | None = None,
    ):
        """Initialize wizard.

        Args:
            title: Wizard title, used for logging
            steps: Steps in order
            on_step: Called with (index, total, step) before each step runs
        """
        if not steps:
            raise ValueError("Wizard needs at least one step")
        self.title = title
        self.steps = steps
        self.on_step = on_step

    def run(self, answers: dict[str, Any] | None = None) -> NavResult:
        """Run the wizard to completion.

        Args:
            answers: Pre-filled answers

        Returns:
            ``Proceed(answers)`` when every step completed, otherwise
            ``BACK`` or ``CANCEL``
        """
        answers = dict(answers or {})
        index = 0

        while index < len(self.steps):
            step = self.steps[index]
            if self.on_step is not None:
                self.on_step(index, len(self.steps), step)

            result = step.run(answers)

            if isinstance(result, Cancel):
                logger.debug("Wizard cancelled", wizard=self.title, step=step.title)
                return CANCEL

            if isinstance(result, Back):
                if index == 0:
                    logger.debug("Wizard left from first step", wizard=self.title)
                    return BACK
                index -= 1
                continue

            if not isinstance(result, Proceed):
                raise TypeError(
                    f"Step '{step.title}' returned {result!r}, expected a navigation result"
                )

            if step.key is not None:
                answers[step.key] = result.value
            index += 1

        return Proceed(answers)
