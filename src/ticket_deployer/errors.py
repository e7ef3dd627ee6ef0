"""Error taxonomy shared by the deployment pipeline."""

from __future__ import annotations

from typing import Optional


class DeployerError(RuntimeError):
    """Base class for every error raised by ticket-deployer."""


class ValidationError(DeployerError):
    """Raised when a local precondition fails. Nothing has been sent yet."""

    def __init__(self, field: str, message: Optional[str] = None) -> None:
        self.field = field
        super().__init__(message or f"Missing required value: {field}")


class ServiceUnavailable(DeployerError):
    """Raised when the remote service cannot be reached at all."""

    def __init__(self, endpoint: str, reason: str) -> None:
        self.endpoint = endpoint
        self.reason = reason
        super().__init__(f"Failed to connect to the automation service ({endpoint}): {reason}")


class ServiceError(DeployerError):
    """Raised when the remote service answers but reports a failure."""

    def __init__(self, endpoint: str, message: str, status_code: Optional[int] = None) -> None:
        self.endpoint = endpoint
        self.status_code = status_code
        super().__init__(message)


class ArtifactNotFoundError(DeployerError):
    """Raised when an operation needs a staged artifact and there is none."""

    def __init__(self, message: str = "No generated code found. Please generate or stage code first.") -> None:
        super().__init__(message)


class InvalidTransitionError(DeployerError):
    """Raised when the orchestrator is asked to do something its state forbids."""

    def __init__(self, current: str, action: str) -> None:
        self.current = current
        self.action = action
        super().__init__(f"Cannot {action} while deployment is {current}")
