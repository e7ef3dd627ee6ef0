"""User interaction handlers for the deploy flow."""

from __future__ import annotations

import logging
from abc import ABC, abstractmethod
from dataclasses import dataclass, field
from enum import Enum
from typing import Dict, List, Optional, TextIO, Tuple

from rich.console import Console
from rich.prompt import Confirm, Prompt

logger = logging.getLogger(__name__)


class InputType(str, Enum):
    """Type of user input expected."""
    CHOICE = "choice"       # pick one of `options`
    TEXT = "text"           # free text
    CONFIRM = "confirm"     # yes/no


class QuestionCategory(str, Enum):
    """Category of questions for context."""
    SELECTION = "selection"            # pick a repository
    CONFIGURATION = "configuration"    # fill a request field
    CONFIRMATION = "confirmation"      # confirm an irreversible push
    ERROR_RECOVERY = "error_recovery"  # retry or give up


@dataclass
class InteractionRequest:
    """A question for the user."""

    question: str
    input_type: InputType = InputType.CHOICE
    options: List[str] = field(default_factory=list)
    category: QuestionCategory = QuestionCategory.SELECTION
    context: Optional[str] = None
    default: Optional[str] = None
    allow_custom: bool = False  # accept free text for CHOICE

    def format_prompt(self) -> str:
        """Format the request as a user-friendly prompt (rich markup)."""
        icons = {
            QuestionCategory.SELECTION: "📦",
            QuestionCategory.CONFIGURATION: "📝",
            QuestionCategory.CONFIRMATION: "⚠️",
            QuestionCategory.ERROR_RECOVERY: "🔧",
        }
        lines = [f"\n{icons.get(self.category, '❓')} [bold]{self.question}[/bold]"]

        if self.context:
            lines.append(f"   [dim]{self.context}[/dim]")

        if self.input_type == InputType.CHOICE and self.options:
            for i, option in enumerate(self.options, 1):
                default_marker = " (default)" if self.default == option else ""
                lines.append(f"   [{i}] {option}{default_marker}")
            if self.allow_custom:
                lines.append("   [0] Enter a custom value")

        return "\n".join(lines)


@dataclass
class InteractionResponse:
    """User's response to an interaction request."""

    value: str
    selected_option: Optional[int] = None  # 1-based, 0 for custom input
    is_custom: bool = False
    cancelled: bool = False

    @property
    def confirmed(self) -> bool:
        return not self.cancelled and self.value == "yes"

    @classmethod
    def from_choice(cls, option_index: int, options: List[str]) -> "InteractionResponse":
        """Create response from a choice selection."""
        if option_index == 0:
            return cls(value="", selected_option=0, is_custom=True)
        if 1 <= option_index <= len(options):
            return cls(value=options[option_index - 1], selected_option=option_index)
        raise ValueError(f"Invalid option index: {option_index}")

    @classmethod
    def cancelled_response(cls) -> "InteractionResponse":
        return cls(value="", cancelled=True)


class UserInteractionHandler(ABC):
    """Abstract base class for handling user interactions."""

    @abstractmethod
    def ask(self, request: InteractionRequest) -> InteractionResponse:
        """Present a request to the user and return their response."""

    @abstractmethod
    def notify(self, message: str, level: str = "info") -> None:
        """Show a message that needs no answer (info, warning, error, success)."""


class CLIInteractionHandler(UserInteractionHandler):
    """Terminal interaction handler built on rich prompts."""

    def __init__(self, console: Optional[Console] = None, stream: Optional[TextIO] = None) -> None:
        self.console = console or Console()
        self.stream = stream

    def ask(self, request: InteractionRequest) -> InteractionResponse:
        self.console.print(request.format_prompt())
        try:
            if request.input_type == InputType.CHOICE:
                return self._handle_choice(request)
            if request.input_type == InputType.CONFIRM:
                return self._handle_confirm(request)
            return self._handle_text(request)
        except (KeyboardInterrupt, EOFError):
            self.console.print("\n   (cancelled)")
            return InteractionResponse.cancelled_response()

    def _handle_choice(self, request: InteractionRequest) -> InteractionResponse:
        default_idx: Optional[str] = None
        if request.default in request.options:
            default_idx = str(request.options.index(request.default) + 1)

        while True:
            answer = Prompt.ask(
                "   Choose",
                console=self.console,
                default=default_idx,
                stream=self.stream,
            )
            answer = (answer or "").strip()
            try:
                choice = int(answer)
            except ValueError:
                if request.allow_custom and answer:
                    return InteractionResponse(value=answer, is_custom=True)
                self.console.print("   [red]Please enter an option number[/red]")
                continue

            if choice == 0 and request.allow_custom:
                custom = Prompt.ask("   Value", console=self.console, stream=self.stream).strip()
                if custom:
                    return InteractionResponse(value=custom, selected_option=0, is_custom=True)
                self.console.print("   [yellow]Custom value cannot be empty[/yellow]")
            elif 1 <= choice <= len(request.options):
                return InteractionResponse.from_choice(choice, request.options)
            else:
                self.console.print(f"   [red]Invalid option, enter 1-{len(request.options)}[/red]")

    def _handle_confirm(self, request: InteractionRequest) -> InteractionResponse:
        default = (request.default or "n").lower() in ("y", "yes")
        confirmed = Confirm.ask("   Confirm?", console=self.console, default=default, stream=self.stream)
        return InteractionResponse(value="yes" if confirmed else "no")

    def _handle_text(self, request: InteractionRequest) -> InteractionResponse:
        answer = Prompt.ask(
            "   Enter value",
            console=self.console,
            default=request.default or "",
            stream=self.stream,
        )
        return InteractionResponse(value=(answer or "").strip())

    def notify(self, message: str, level: str = "info") -> None:
        styles = {
            "info": ("ℹ️", "cyan"),
            "warning": ("⚠️", "yellow"),
            "error": ("❌", "red"),
            "success": ("✅", "green"),
        }
        icon, style = styles.get(level, ("•", "white"))
        self.console.print(f"\n{icon} [{style}]{message}[/{style}]")


class AutoResponseHandler(UserInteractionHandler):
    """
    Non-interactive handler for `--yes` runs and tests.
    Answers from `default_responses`, then request defaults, then by type.
    """

    def __init__(
        self,
        default_responses: Optional[Dict[str, str]] = None,
        always_confirm: bool = True,
    ) -> None:
        self.default_responses = default_responses or {}
        self.always_confirm = always_confirm
        self.notifications: List[Tuple[str, str]] = []

    def ask(self, request: InteractionRequest) -> InteractionResponse:
        logger.info("Auto-responding to: %s", request.question[:60])

        for keyword, response in self.default_responses.items():
            if keyword.lower() in request.question.lower():
                return InteractionResponse(value=response)

        if request.input_type == InputType.CONFIRM:
            return InteractionResponse(value="yes" if self.always_confirm else "no")
        if request.default:
            return InteractionResponse(value=request.default)
        if request.input_type == InputType.CHOICE and request.options:
            return InteractionResponse.from_choice(1, request.options)
        return InteractionResponse(value="")

    def notify(self, message: str, level: str = "info") -> None:
        self.notifications.append((level, message))
        logger.info("[%s] %s", level, message)
