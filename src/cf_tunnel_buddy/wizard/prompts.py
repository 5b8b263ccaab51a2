"""Interactive prompts built on questionary.

Prompts return navigation results instead of raising: a prompt aborted with
Ctrl+C (questionary answers ``None``) becomes ``CANCEL``.
"""

from collections.abc import Callable, Sequence
from typing import Any

import questionary

from .navigation import BACK, CANCEL, NavResult, Proceed

BACK_VALUE = "__back__"
CANCEL_VALUE = "__cancel__"

ChoiceSpec = tuple[Any, str]


def _choices(specs: Sequence[ChoiceSpec]) -> list[questionary.Choice]:
    return [questionary.Choice(title=title, value=value) for value, title in specs]


class Prompter:
    """Questionary-backed prompts used by the wizard and command handlers."""

    def select(
        self,
        message: str,
        choices: Sequence[ChoiceSpec],
        navigation: bool = True,
        default: Any = None,
    ) -> NavResult:
        """Ask the user to pick one of ``choices``.

        Args:
            message: Question to show
            choices: ``(value, title)`` pairs
            navigation: Append "Go back" and "Cancel" entries
            default: Value pre-selected when the prompt opens

        Returns:
            ``Proceed(value)``, ``BACK`` or ``CANCEL``
        """
        options = _choices(choices)
        if navigation:
            options.append(questionary.Separator())
            options.append(questionary.Choice(title="← Go back", value=BACK_VALUE))
            options.append(questionary.Choice(title="✕ Cancel", value=CANCEL_VALUE))

        answer = questionary.select(
            message,
            choices=options,
            default=default if default in [value for value, _ in choices] else None,
        ).ask()

        if answer is None or answer == CANCEL_VALUE:
            return CANCEL
        if answer == BACK_VALUE:
            return BACK
        return Proceed(answer)

    def confirm(
        self, message: str, default: bool = True, cancellable: bool = True
    ) -> NavResult:
        """Ask a yes/no question.

        Args:
            message: Question to show
            default: Answer listed first
            cancellable: Offer a "Cancel" entry next to yes and no

        Returns:
            ``Proceed(bool)`` or ``CANCEL``
        """
        if not cancellable:
            answer = questionary.confirm(message, default=default).ask()
            return CANCEL if answer is None else Proceed(bool(answer))

        yes_no: list[ChoiceSpec] = [(True, "Yes"), (False, "No")]
        if not default:
            yes_no.reverse()
        options = _choices(yes_no)
        options.append(questionary.Choice(title="✕ Cancel", value=CANCEL_VALUE))

        answer = questionary.select(message, choices=options).ask()
        if answer is None or answer == CANCEL_VALUE:
            return CANCEL
        return Proceed(bool(answer))

    def text(
        self,
        message: str,
        default: str = "",
        validate: Callable[[str], bool | str] | None = None,
    ) -> NavResult:
        """Ask for free text, re-prompting in place until ``validate`` accepts it.

        Args:
            message: Question to show
            default: Pre-filled answer
            validate: Returns True or an error message

        Returns:
            ``Proceed(str)`` or ``CANCEL``
        """
        kwargs: dict[str, Any] = {"default": default}
        if validate is not None:
            kwargs["validate"] = validate
        answer = questionary.text(message, **kwargs).ask()
        return CANCEL if answer is None else Proceed(answer.strip())

    def menu(self, message: str, choices: Sequence[ChoiceSpec]) -> Any | None:
        """Show the top-level menu; returns None on Ctrl+C."""
        return questionary.select(message, choices=_choices(choices)).ask()

    def pause(self) -> None:
        """Wait for a key press."""
        questionary.press_any_key_to_continue("Press any key to continue...").ask()
