"""User interaction module for the deploy flow."""

from .handler import (
    UserInteractionHandler,
    InteractionRequest,
    InteractionResponse,
    CLIInteractionHandler,
    AutoResponseHandler,
    InputType,
    QuestionCategory,
)

__all__ = [
    "UserInteractionHandler",
    "InteractionRequest",
    "InteractionResponse",
    "CLIInteractionHandler",
    "AutoResponseHandler",
    "InputType",
    "QuestionCategory",
]
