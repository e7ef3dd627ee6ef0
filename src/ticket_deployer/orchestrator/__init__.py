"""Orchestrator module for the deploy view.

- DeploymentOrchestrator: sequences listing, transfer and annotation
- Idle/Listing/Ready/Deploying/Succeeded/Failed/NothingToDeploy: its states
- DeploymentOutcome: the consolidated result shown to the user
"""

from .models import (
    Phase,
    DeploymentStatus,
    DeploymentState,
    DeploymentOutcome,
    Idle,
    Listing,
    Ready,
    Deploying,
    Succeeded,
    Failed,
    NothingToDeploy,
)
from .orchestrator import DeploymentOrchestrator

__all__ = [
    "Phase",
    "DeploymentStatus",
    "DeploymentState",
    "DeploymentOutcome",
    "Idle",
    "Listing",
    "Ready",
    "Deploying",
    "Succeeded",
    "Failed",
    "NothingToDeploy",
    "DeploymentOrchestrator",
]
