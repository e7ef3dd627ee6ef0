"""State and outcome models for the deployment orchestrator."""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from typing import Optional, Union

from ..models import AnnotationResult, AnnotationStatus, DeploymentRequest, TransferResult


class Phase(str, Enum):
    """Orchestrator phase, one per state class."""
    IDLE = "idle"
    LISTING = "listing"
    READY = "ready"
    DEPLOYING = "deploying"
    SUCCEEDED = "succeeded"
    FAILED = "failed"
    NOTHING_TO_DEPLOY = "nothing_to_deploy"


class DeploymentStatus(str, Enum):
    """Overall status of the current deployment attempt."""
    IDLE = "idle"
    TRANSFERRING = "transferring"
    SUCCEEDED = "succeeded"
    FAILED = "failed"


@dataclass(frozen=True)
class Idle:
    phase = Phase.IDLE


@dataclass(frozen=True)
class Listing:
    phase = Phase.LISTING


@dataclass(frozen=True)
class Ready:
    phase = Phase.READY


@dataclass(frozen=True)
class Deploying:
    request: DeploymentRequest
    phase = Phase.DEPLOYING


@dataclass(frozen=True)
class Succeeded:
    """The transfer went through. `annotation` evolves independently."""
    request: DeploymentRequest
    transfer: TransferResult
    annotation: AnnotationResult
    phase = Phase.SUCCEEDED


@dataclass(frozen=True)
class Failed:
    request: DeploymentRequest
    error_message: str
    phase = Phase.FAILED


@dataclass(frozen=True)
class NothingToDeploy:
    message: str
    phase = Phase.NOTHING_TO_DEPLOY


DeploymentState = Union[Idle, Listing, Ready, Deploying, Succeeded, Failed, NothingToDeploy]


@dataclass(frozen=True)
class DeploymentOutcome:
    """Consolidated view of one deployment attempt for the presentation layer."""

    status: DeploymentStatus
    transfer_result: Optional[TransferResult] = None
    annotation_status: AnnotationStatus = AnnotationStatus.SKIPPED
    annotation_reason: Optional[str] = None
    error_message: Optional[str] = None

    @property
    def succeeded(self) -> bool:
        return self.status == DeploymentStatus.SUCCEEDED

    @property
    def degraded(self) -> bool:
        """True when the transfer succeeded but the ticket was not annotated."""
        return self.succeeded and self.annotation_status == AnnotationStatus.FAILED

    @classmethod
    def from_state(cls, state: DeploymentState) -> "DeploymentOutcome":
        if isinstance(state, Deploying):
            return cls(status=DeploymentStatus.TRANSFERRING)
        if isinstance(state, Succeeded):
            return cls(
                status=DeploymentStatus.SUCCEEDED,
                transfer_result=state.transfer,
                annotation_status=state.annotation.status,
                annotation_reason=state.annotation.reason,
            )
        if isinstance(state, Failed):
            return cls(status=DeploymentStatus.FAILED, error_message=state.error_message)
        return cls(status=DeploymentStatus.IDLE)
