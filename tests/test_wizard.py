"""Tests for navigation results, the wizard loop and the prompter."""

from unittest.mock import Mock, patch

import pytest

from cf_tunnel_buddy.wizard.engine import Step, Wizard
from cf_tunnel_buddy.wizard.navigation import (
    BACK,
    CANCEL,
    Back,
    Cancel,
    Proceed,
    is_navigation,
)
from cf_tunnel_buddy.wizard.prompts import BACK_VALUE, CANCEL_VALUE, Prompter


def scripted(*results):
    """Step function returning ``results`` in order and recording its calls."""
    calls = []
    queue = list(results)

    def run(answers):
        calls.append(dict(answers))
        return queue.pop(0)

    run.calls = calls
    return run


class TestNavigation:
    """Test the navigation result values."""

    def test_singletons(self):
        """Back() and Cancel() always return the shared instances"""
        assert Back() is BACK
        assert Cancel() is CANCEL
        assert repr(BACK) == "BACK"
        assert repr(CANCEL) == "CANCEL"

    def test_is_navigation(self):
        """Only back and cancel are navigation signals"""
        assert is_navigation(BACK)
        assert is_navigation(CANCEL)
        assert not is_navigation(Proceed(None))
        assert not is_navigation(None)


class TestWizard:
    """Test the index-based wizard loop."""

    def test_completes_with_answers(self):
        """Every Proceed value is stored under its step key"""
        wizard = Wizard(
            "test",
            [
                Step("One", scripted(Proceed("a")), key="one"),
                Step("Two", scripted(Proceed("b")), key="two"),
            ],
        )

        result = wizard.run()

        assert result == Proceed({"one": "a", "two": "b"})

    def test_back_returns_to_previous_step(self):
        """BACK at step N re-runs step N-1 with earlier answers intact"""
        first = scripted(Proceed("a"))
        second = scripted(Proceed("b1"), Proceed("b2"))
        third = scripted(BACK, Proceed("c"))
        wizard = Wizard(
            "test",
            [
                Step("One", first, key="one"),
                Step("Two", second, key="two"),
                Step("Three", third, key="three"),
            ],
        )

        result = wizard.run()

        assert result == Proceed({"one": "a", "two": "b2", "three": "c"})
        assert len(first.calls) == 1
        assert len(second.calls) == 2
        assert second.calls[1]["one"] == "a"
        assert second.calls[1]["two"] == "b1"

    def test_back_from_first_step(self):
        """BACK at the first step leaves the wizard with BACK"""
        wizard = Wizard("test", [Step("One", scripted(BACK), key="one")])

        assert wizard.run() is BACK

    def test_cancel_from_any_step(self):
        """CANCEL unwinds the whole wizard immediately"""
        later = scripted(Proceed("never"))
        wizard = Wizard(
            "test",
            [
                Step("One", scripted(Proceed("a")), key="one"),
                Step("Two", scripted(CANCEL), key="two"),
                Step("Three", later, key="three"),
            ],
        )

        assert wizard.run() is CANCEL
        assert later.calls == []

    def test_prefilled_answers(self):
        """Pre-filled answers are visible to the steps"""
        step = scripted(Proceed("x"))
        wizard = Wizard("test", [Step("One", step, key="one")])

        result = wizard.run({"name": "given"})

        assert step.calls[0] == {"name": "given"}
        assert result.value == {"name": "given", "one": "x"}

    def test_on_step_callback(self):
        """on_step is told the position of each step"""
        seen = []
        wizard = Wizard(
            "test",
            [Step("One", scripted(Proceed(1))), Step("Two", scripted(Proceed(2)))],
            on_step=lambda index, total, step: seen.append((index, total, step.title)),
        )

        wizard.run()

        assert seen == [(0, 2, "One"), (1, 2, "Two")]

    def test_invalid_step_result(self):
        """A step returning a non-navigation value is a programming error"""
        wizard = Wizard("test", [Step("One", lambda answers: "oops")])

        with pytest.raises(TypeError):
            wizard.run()

    def test_requires_steps(self):
        """A wizard without steps cannot be built"""
        with pytest.raises(ValueError):
            Wizard("test", [])


class TestPrompter:
    """Test translation of questionary answers into navigation results."""

    @patch("questionary.select")
    def test_select_value(self, mock_select):
        """A real choice becomes Proceed(value)"""
        mock_select.return_value.ask.return_value = "http"

        result = Prompter().select("Pick", [("http", "HTTP"), ("tcp", "TCP")])

        assert result == Proceed("http")
        choices = mock_select.call_args.kwargs["choices"]
        assert [c.title for c in choices[-2:]] == ["← Go back", "✕ Cancel"]

    @patch("questionary.select")
    def test_select_back_and_cancel(self, mock_select):
        """The navigation entries become BACK and CANCEL"""
        mock_select.return_value.ask.side_effect = [BACK_VALUE, CANCEL_VALUE, None]
        prompter = Prompter()

        assert prompter.select("Pick", [("a", "A")]) is BACK
        assert prompter.select("Pick", [("a", "A")]) is CANCEL
        assert prompter.select("Pick", [("a", "A")]) is CANCEL

    @patch("questionary.select")
    def test_select_without_navigation(self, mock_select):
        """navigation=False offers only the given choices"""
        mock_select.return_value.ask.return_value = "a"

        Prompter().select("Pick", [("a", "A")], navigation=False)

        assert len(mock_select.call_args.kwargs["choices"]) == 1

    @patch("questionary.select")
    def test_confirm(self, mock_select):
        """Yes/No become booleans and Cancel becomes CANCEL"""
        mock_select.return_value.ask.side_effect = [True, False, CANCEL_VALUE]
        prompter = Prompter()

        assert prompter.confirm("Sure?") == Proceed(True)
        assert prompter.confirm("Sure?") == Proceed(False)
        assert prompter.confirm("Sure?") is CANCEL

    @patch("questionary.select")
    def test_confirm_default_no_lists_no_first(self, mock_select):
        """default=False puts "No" first"""
        mock_select.return_value.ask.return_value = False

        Prompter().confirm("Sure?", default=False)

        titles = [c.title for c in mock_select.call_args.kwargs["choices"]]
        assert titles == ["No", "Yes", "✕ Cancel"]

    @patch("questionary.text")
    def test_text_strips_and_cancels(self, mock_text):
        """Text answers are stripped; Ctrl+C becomes CANCEL"""
        mock_text.return_value.ask.side_effect = ["  my-app  ", None]
        prompter = Prompter()

        assert prompter.text("Name:") == Proceed("my-app")
        assert prompter.text("Name:") is CANCEL

    @patch("questionary.text")
    def test_text_passes_validator(self, mock_text):
        """The validator is handed to questionary"""
        mock_text.return_value.ask.return_value = "x"
        validate = Mock(return_value=True)

        Prompter().text("Name:", default="d", validate=validate)

        assert mock_text.call_args.kwargs == {"default": "d", "validate": validate}
