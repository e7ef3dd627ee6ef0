"""Tests for user interaction module."""

import io

import pytest
from rich.console import Console

from ticket_deployer.interaction import (
    AutoResponseHandler,
    CLIInteractionHandler,
    InputType,
    InteractionRequest,
    InteractionResponse,
    QuestionCategory,
)


def _quiet_console() -> Console:
    return Console(file=io.StringIO(), force_terminal=False)


class TestInteractionRequest:
    """Tests for InteractionRequest dataclass."""

    def test_basic_choice_request(self):
        request = InteractionRequest(
            question="Which repository?",
            options=["team/app", "team/web"],
        )

        assert request.input_type == InputType.CHOICE
        assert request.category == QuestionCategory.SELECTION
        assert request.allow_custom is False

    def test_format_prompt_choice(self):
        """Options are numbered and the default is marked."""
        request = InteractionRequest(
            question="What now?",
            options=["Retry deployment", "Abort"],
            category=QuestionCategory.ERROR_RECOVERY,
            default="Abort",
        )

        prompt = request.format_prompt()
        assert "🔧" in prompt
        assert "What now?" in prompt
        assert "[1] Retry deployment" in prompt
        assert "[2] Abort (default)" in prompt
        assert "[0]" not in prompt

    def test_format_prompt_custom_option(self):
        request = InteractionRequest(question="Repo?", options=["team/app"], allow_custom=True)
        assert "[0] Enter a custom value" in request.format_prompt()

    def test_format_prompt_confirm_has_no_options(self):
        request = InteractionRequest(
            question="Push this file?",
            input_type=InputType.CONFIRM,
            category=QuestionCategory.CONFIRMATION,
            context="A remote commit cannot be undone.",
        )

        prompt = request.format_prompt()
        assert "⚠️" in prompt
        assert "A remote commit cannot be undone." in prompt
        assert "[1]" not in prompt


class TestInteractionResponse:
    """Tests for InteractionResponse dataclass."""

    def test_from_choice_valid(self):
        response = InteractionResponse.from_choice(2, ["a", "b", "c"])
        assert response.value == "b"
        assert response.selected_option == 2
        assert not response.is_custom

    def test_from_choice_custom(self):
        response = InteractionResponse.from_choice(0, ["a"])
        assert response.is_custom
        assert response.value == ""

    def test_from_choice_invalid(self):
        with pytest.raises(ValueError):
            InteractionResponse.from_choice(5, ["a", "b"])

    def test_confirmed(self):
        assert InteractionResponse(value="yes").confirmed
        assert not InteractionResponse(value="no").confirmed
        assert not InteractionResponse.cancelled_response().confirmed


class TestAutoResponseHandler:
    """Tests for the non-interactive handler."""

    def test_keyword_responses_win(self):
        handler = AutoResponseHandler(default_responses={"repository": "team/web"})
        response = handler.ask(
            InteractionRequest(question="Which repository should receive the file?", options=["team/app"])
        )
        assert response.value == "team/web"

    def test_confirm_follows_always_confirm(self):
        request = InteractionRequest(question="Push?", input_type=InputType.CONFIRM)
        assert AutoResponseHandler().ask(request).confirmed
        assert not AutoResponseHandler(always_confirm=False).ask(request).confirmed

    def test_falls_back_to_default_then_first_option(self):
        handler = AutoResponseHandler()
        assert handler.ask(InteractionRequest(question="?", options=["a", "b"], default="b")).value == "b"
        assert handler.ask(InteractionRequest(question="?", options=["a", "b"])).value == "a"
        assert handler.ask(InteractionRequest(question="?", input_type=InputType.TEXT)).value == ""

    def test_records_notifications(self):
        handler = AutoResponseHandler()
        handler.notify("Deployment cancelled", "warning")
        assert handler.notifications == [("warning", "Deployment cancelled")]


class TestCLIInteractionHandler:
    """Tests for the rich prompt handler, fed from a text stream."""

    def test_choice_by_number(self):
        handler = CLIInteractionHandler(console=_quiet_console(), stream=io.StringIO("2\n"))
        response = handler.ask(InteractionRequest(question="Repo?", options=["team/app", "team/web"]))
        assert response.value == "team/web"
        assert response.selected_option == 2

    def test_invalid_choice_is_asked_again(self):
        handler = CLIInteractionHandler(console=_quiet_console(), stream=io.StringIO("9\n1\n"))
        response = handler.ask(InteractionRequest(question="Repo?", options=["team/app"]))
        assert response.value == "team/app"

    def test_custom_value_typed_directly(self):
        handler = CLIInteractionHandler(console=_quiet_console(), stream=io.StringIO("acme/api\n"))
        response = handler.ask(
            InteractionRequest(question="Repo?", options=["team/app"], allow_custom=True)
        )
        assert response.value == "acme/api"
        assert response.is_custom

    def test_text_input(self):
        handler = CLIInteractionHandler(console=_quiet_console(), stream=io.StringIO("  src/app.js \n"))
        response = handler.ask(InteractionRequest(question="Path?", input_type=InputType.TEXT))
        assert response.value == "src/app.js"

    def test_confirm(self):
        handler = CLIInteractionHandler(console=_quiet_console(), stream=io.StringIO("y\n"))
        response = handler.ask(InteractionRequest(question="Push?", input_type=InputType.CONFIRM))
        assert response.confirmed
