"""Pushes a staged artifact to a repository through the remote service."""

from __future__ import annotations

import logging
import mimetypes
from typing import Dict

from ..errors import ValidationError
from ..models import Artifact, DeploymentRequest, TransferResult
from ..service import PUSH_FILE_ENDPOINT, ServiceClient, ensure_success

logger = logging.getLogger(__name__)


def validate_transfer(artifact: Artifact, request: DeploymentRequest) -> None:
    """Check the preconditions of a transfer. Raises ValidationError."""
    if not request.repository.strip():
        raise ValidationError("repository", "Please select a repository")
    if not artifact.content:
        raise ValidationError("content", "No code to deploy")
    if not request.file_path.strip():
        raise ValidationError("file_path", "Please enter a file path")


class TransferExecutor:
    """Submits one file as one commit. No retries; the caller decides."""

    def __init__(
        self,
        client: ServiceClient,
        commit_host: str = "https://github.com",
        send_branch: bool = False,
    ) -> None:
        self.client = client
        self.commit_host = commit_host
        self.send_branch = send_branch

    def transfer(self, artifact: Artifact, request: DeploymentRequest) -> TransferResult:
        validate_transfer(artifact, request)

        form: Dict[str, str] = {
            "repo": request.repository,
            "file_path": request.file_path,
            "commit_message": request.commit_message,
        }
        if self.send_branch:
            form["branch"] = request.branch

        file_name = request.file_name
        mime_type = mimetypes.guess_type(file_name)[0] or "text/plain"
        files = {"file": (file_name, artifact.content.encode("utf-8"), mime_type)}

        logger.info("Deploying code to %s:%s", request.repository, request.file_path)
        logger.debug("Commit message: %s", request.commit_message)
        data = ensure_success(
            PUSH_FILE_ENDPOINT,
            self.client.post_multipart(PUSH_FILE_ENDPOINT, data=form, files=files),
            "Failed to deploy code",
        )

        result = TransferResult.from_payload(request.repository, data.get("result"), self.commit_host)
        logger.info(
            "Pushed commit %s%s",
            result.short_sha or "(no sha reported)",
            f" ({result.commit_url})" if result.commit_url else "",
        )
        return result
