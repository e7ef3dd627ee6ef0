"""High-level workflows behind the CLI commands."""

from __future__ import annotations

from dataclasses import dataclass
from pathlib import Path
from typing import List, Optional

from .annotation import AnnotationUpdater
from .config import AppConfig
from .errors import ArtifactNotFoundError, ValidationError
from .interaction import (
    CLIInteractionHandler,
    InputType,
    InteractionRequest,
    QuestionCategory,
    UserInteractionHandler,
)
from .models import Artifact, Ticket, normalize_extension
from .orchestrator import DeploymentOrchestrator, NothingToDeploy
from .paths import get_exports_dir
from .presentation import DeployPresenter
from .repos import RepositoryDirectoryClient
from .service import ServiceClient
from .store import ArtifactStore, FileStorage
from .tickets import TicketClient, filter_tickets
from .transfer import TransferExecutor
from .utils.logging import get_logger

logger = get_logger(__name__)

RETRY = "Retry deployment"
REFRESH_AND_RETRY = "Refresh repositories and retry"
ABORT = "Abort"

_FIELD_PROMPTS = {
    "repository": "Which repository should receive the file?",
    "file_path": "Target file path in the repository",
    "commit_message": "Commit message",
}


@dataclass
class DeployOptions:
    """Deploy parameters captured from the CLI. Unset values are prompted for."""

    repository: Optional[str] = None
    branch: Optional[str] = None
    file_path: Optional[str] = None
    commit_message: Optional[str] = None
    content: Optional[str] = None  # replaces the staged code before pushing
    assume_yes: bool = False


class DeploymentWorkflow:
    """Wires the service-backed components together for one CLI invocation."""

    def __init__(
        self,
        config: AppConfig,
        interaction_handler: Optional[UserInteractionHandler] = None,
        presenter: Optional[DeployPresenter] = None,
        client: Optional[ServiceClient] = None,
        store: Optional[ArtifactStore] = None,
    ) -> None:
        self.config = config
        self.presenter = presenter or DeployPresenter()
        self.interaction_handler = interaction_handler or CLIInteractionHandler(console=self.presenter.console)
        self.client = client or ServiceClient(config.service)
        self.store = store or ArtifactStore(FileStorage(Path(config.storage.session_file)))

    def build_orchestrator(self) -> DeploymentOrchestrator:
        return DeploymentOrchestrator(
            directory=RepositoryDirectoryClient(self.client),
            store=self.store,
            executor=TransferExecutor(
                self.client,
                commit_host=self.config.deploy.commit_host,
                send_branch=self.config.service.send_branch,
            ),
            updater=AnnotationUpdater(self.client),
            defaults=self.config.deploy,
            on_state_change=self.presenter.on_state_change,
        )

    # Staging

    def list_tickets(self, search: Optional[str] = None, status: Optional[str] = None) -> List[Ticket]:
        tickets = filter_tickets(TicketClient(self.client).list(), search=search, status=status)
        self.presenter.tickets(tickets)
        return tickets

    def generate(self, ticket_id: str, extension: Optional[str] = None) -> Artifact:
        tickets = TicketClient(self.client)
        ticket = tickets.get(ticket_id)
        artifact = tickets.generate_code(ticket, extension or self.config.deploy.extension)
        self.store.save(artifact)
        self.presenter.artifact(artifact)
        return artifact

    def stage(
        self,
        source: Path,
        origin_id: Optional[str] = None,
        origin_title: Optional[str] = None,
        extension: Optional[str] = None,
    ) -> Artifact:
        default_extension = source.suffix.lstrip(".") or self.config.deploy.extension
        artifact = Artifact(
            content=source.read_text(encoding="utf-8"),
            origin_id=origin_id or None,
            origin_title=origin_title or None,
            extension=normalize_extension(extension, default_extension),
        )
        self.store.save(artifact)
        self.presenter.artifact(artifact)
        return artifact

    def edit(self, content: Optional[str] = None, extension: Optional[str] = None) -> Artifact:
        artifact = self.store.require()
        if content is not None:
            artifact = self.store.update_content(content)
        if extension is not None:
            artifact = self.store.update_extension(extension)
        self.presenter.artifact(artifact)
        return artifact

    def show(self) -> Artifact:
        artifact = self.store.require()
        self.presenter.artifact(artifact)
        return artifact

    def export(self, output_dir: Optional[Path] = None) -> Path:
        artifact = self.store.require()
        target_dir = output_dir or get_exports_dir()
        target_dir.mkdir(parents=True, exist_ok=True)
        target = target_dir / f"{artifact.origin_id or 'generated'}-code.{artifact.extension}"
        target.write_text(artifact.content, encoding="utf-8")
        logger.info("Exported generated code to %s", target)
        return target

    # Deploying

    def list_repositories(self) -> DeploymentOrchestrator:
        orchestrator = self.build_orchestrator()
        orchestrator.mount()
        self.presenter.repositories(orchestrator.repositories, orchestrator.directory_error)
        return orchestrator

    def run_deploy(self, options: DeployOptions) -> bool:
        """Run the deploy view until success, abort, or an unrecoverable input."""
        orchestrator = self.build_orchestrator()
        state = orchestrator.mount()
        if isinstance(state, NothingToDeploy):
            self.presenter.nothing_to_deploy(state.message)
            return False

        if orchestrator.directory_error:
            self.presenter.error_banner("Error Loading Repositories", orchestrator.directory_error)

        if options.content is not None:
            orchestrator.edit_content(options.content)

        request = orchestrator.draft_request()
        if options.repository:
            request.repository = options.repository
        if options.branch:
            request.branch = options.branch
        if options.file_path:
            request.file_path = options.file_path
        if options.commit_message is not None:
            request.commit_message = options.commit_message

        if not request.repository:
            request.repository = self._choose_repository(orchestrator)
        elif orchestrator.repositories and not orchestrator.find_repository(request.repository):
            self.interaction_handler.notify(
                f"Repository '{request.repository}' is not in the repository list", "warning"
            )
        for field_name in ("file_path", "commit_message"):
            if not getattr(request, field_name) and not options.assume_yes:
                setattr(request, field_name, self._ask_text(field_name))

        artifact = orchestrator.artifact
        if artifact is None:
            raise ArtifactNotFoundError()
        self.presenter.preview(request, artifact)
        if not options.assume_yes:
            confirm = self.interaction_handler.ask(
                InteractionRequest(
                    question="Push this file? A remote commit cannot be undone.",
                    input_type=InputType.CONFIRM,
                    category=QuestionCategory.CONFIRMATION,
                    default="y",
                )
            )
            if not confirm.confirmed:
                self.interaction_handler.notify("Deployment cancelled", "warning")
                return False

        while True:
            try:
                outcome = orchestrator.deploy(request)
            except ValidationError as exc:
                self.presenter.validation_error(exc.field, str(exc))
                if options.assume_yes or exc.field == "content":
                    return False
                value = self._fix_field(orchestrator, exc.field)
                if not value:
                    return False
                setattr(request, exc.field, value)
                continue

            self.presenter.outcome(outcome, request, artifact.origin_id)
            if outcome.succeeded:
                return True

            choice = self._ask_recovery(options.assume_yes)
            if choice == REFRESH_AND_RETRY:
                orchestrator.refresh_repositories()
                self.presenter.repositories(orchestrator.repositories, orchestrator.directory_error)
            elif choice != RETRY:
                return False

    def _choose_repository(self, orchestrator: DeploymentOrchestrator) -> str:
        names = [repo.name for repo in orchestrator.repositories]
        if not names:
            return self._ask_text("repository")
        response = self.interaction_handler.ask(
            InteractionRequest(
                question=_FIELD_PROMPTS["repository"],
                options=names,
                category=QuestionCategory.SELECTION,
                allow_custom=True,
            )
        )
        return "" if response.cancelled else response.value

    def _ask_text(self, field_name: str) -> str:
        response = self.interaction_handler.ask(
            InteractionRequest(
                question=_FIELD_PROMPTS.get(field_name, field_name),
                input_type=InputType.TEXT,
                category=QuestionCategory.CONFIGURATION,
            )
        )
        return "" if response.cancelled else response.value

    def _fix_field(self, orchestrator: DeploymentOrchestrator, field_name: str) -> str:
        if field_name == "repository":
            return self._choose_repository(orchestrator)
        return self._ask_text(field_name)

    def _ask_recovery(self, assume_yes: bool) -> str:
        if assume_yes:
            return ABORT
        response = self.interaction_handler.ask(
            InteractionRequest(
                question="Deployment failed. What would you like to do?",
                options=[RETRY, REFRESH_AND_RETRY, ABORT],
                category=QuestionCategory.ERROR_RECOVERY,
                default=RETRY,
            )
        )
        return ABORT if response.cancelled else response.value

