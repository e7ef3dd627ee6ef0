"""Deployment orchestrator: stages, transfers and annotates one artifact."""

from __future__ import annotations

import logging
from typing import Callable, List, Optional, Tuple, Type

from ..annotation import AnnotationUpdater
from ..config import DeployDefaults
from ..errors import ArtifactNotFoundError, InvalidTransitionError, ServiceError, ServiceUnavailable
from ..models import AnnotationResult, Artifact, DeploymentRequest, RepositoryDescriptor
from ..repos import RepositoryDirectoryClient
from ..store import ArtifactStore
from ..transfer import TransferExecutor, validate_transfer
from .models import (
    DeploymentOutcome,
    DeploymentState,
    Deploying,
    Failed,
    Idle,
    Listing,
    NothingToDeploy,
    Ready,
    Succeeded,
)

logger = logging.getLogger(__name__)

StateListener = Callable[[DeploymentState], None]

NOTHING_TO_DEPLOY_MESSAGE = "No generated code found. Please go back and generate code first."


class DeploymentOrchestrator:
    """
    Drives one deploy view from entry to outcome.

    Idle -> Listing -> Ready -> Deploying -> Succeeded | Failed, with
    NothingToDeploy as a dead end when no artifact is staged. Annotation runs
    only after a successful transfer and its failure never turns the
    deployment into a failure.
    """

    def __init__(
        self,
        directory: RepositoryDirectoryClient,
        store: ArtifactStore,
        executor: TransferExecutor,
        updater: AnnotationUpdater,
        defaults: Optional[DeployDefaults] = None,
        on_state_change: Optional[StateListener] = None,
    ) -> None:
        self.directory = directory
        self.store = store
        self.executor = executor
        self.updater = updater
        self.defaults = defaults or DeployDefaults()
        self.on_state_change = on_state_change

        self.state: DeploymentState = Idle()
        self.artifact: Optional[Artifact] = None
        self.repositories: List[RepositoryDescriptor] = []
        self.directory_error: Optional[str] = None

    @property
    def outcome(self) -> DeploymentOutcome:
        return DeploymentOutcome.from_state(self.state)

    def mount(self) -> DeploymentState:
        """Load the staged artifact and the repository list."""
        self._require((Idle,), "open the deploy view")
        self._transition(Listing())
        # Both reads are independent; neither failure blocks the other.
        self.artifact = self.store.load()
        self.refresh_repositories()
        self._settle()
        return self.state

    def refresh_repositories(self) -> List[RepositoryDescriptor]:
        self._require((Listing, Ready, Failed, Succeeded), "refresh repositories")
        self.directory_error = None
        try:
            self.repositories = self.directory.list()
        except (ServiceUnavailable, ServiceError) as exc:
            logger.error("Error fetching repositories: %s", exc)
            self.repositories = []
            self.directory_error = str(exc)
        return self.repositories

    def find_repository(self, name: str) -> Optional[RepositoryDescriptor]:
        for repository in self.repositories:
            if repository.name == name:
                return repository
        return None

    def draft_request(self) -> DeploymentRequest:
        """Prefill a request from the defaults and the artifact's origin."""
        request = DeploymentRequest(branch=self.defaults.branch)
        artifact = self.artifact
        if artifact and artifact.origin_id:
            source_dir = self.defaults.source_dir.strip("/")
            file_name = f"{artifact.origin_id.lower()}.{artifact.extension}"
            request.file_path = f"{source_dir}/{file_name}" if source_dir else file_name
            request.commit_message = (
                f"feat: implement {artifact.origin_id} - "
                f"{artifact.origin_title or 'code generation'}"
            )
        return request

    def edit_content(self, content: str) -> Artifact:
        """Replace the code to deploy; the change is persisted immediately."""
        self._require((Ready, Failed), "edit the code")
        self.artifact = self.store.update_content(content)
        return self.artifact

    def deploy(self, request: DeploymentRequest) -> DeploymentOutcome:
        """Run one attempt. Raises ValidationError without changing state."""
        self._require((Ready, Failed), "deploy")
        artifact = self.artifact
        if artifact is None:
            raise ArtifactNotFoundError()
        validate_transfer(artifact, request)

        self._transition(Deploying(request))
        try:
            transfer = self.executor.transfer(artifact, request)
        except (ServiceUnavailable, ServiceError) as exc:
            logger.error("Deployment error: %s", exc)
            self._transition(Failed(request, str(exc) or "Failed to deploy code. Please try again."))
            return self.outcome

        self._transition(Succeeded(request, transfer, AnnotationResult.skipped()))
        if artifact.origin_id and transfer.commit_url:
            self._transition(Succeeded(request, transfer, AnnotationResult.updating()))
            annotation = self._annotate(artifact.origin_id, request.commit_message, transfer.commit_url)
            self._transition(Succeeded(request, transfer, annotation))
        return self.outcome

    def reset(self) -> DeploymentState:
        """Start over with whatever artifact is staged now."""
        self._require((Ready, Deploying, Failed, Succeeded, NothingToDeploy), "start over")
        self.artifact = self.store.load()
        self._settle()
        return self.state

    def _annotate(self, origin_id: str, commit_message: str, commit_url: str) -> AnnotationResult:
        try:
            return self.updater.annotate(origin_id, commit_message, commit_url)
        except (ServiceUnavailable, ServiceError) as exc:
            logger.warning("Ticket update failed, but deployment was successful: %s", exc)
            return AnnotationResult.failed(str(exc))

    def _settle(self) -> None:
        if self.artifact is None:
            self._transition(NothingToDeploy(NOTHING_TO_DEPLOY_MESSAGE))
        else:
            self._transition(Ready())

    def _require(self, allowed: Tuple[Type, ...], action: str) -> None:
        if not isinstance(self.state, allowed):
            raise InvalidTransitionError(self.state.phase.value, action)

    def _transition(self, state: DeploymentState) -> None:
        if state.phase != self.state.phase:
            logger.info("Deployment state: %s -> %s", self.state.phase.value, state.phase.value)
        self.state = state
        if self.on_state_change:
            self.on_state_change(state)
