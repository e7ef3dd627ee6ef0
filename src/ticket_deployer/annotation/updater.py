"""Annotates the originating work item with a commit link."""

from __future__ import annotations

import logging
from typing import Optional

from ..errors import ServiceError, ServiceUnavailable
from ..models import AnnotationResult
from ..service import COMMIT_COMMENT_ENDPOINT, ServiceClient, ensure_success

logger = logging.getLogger(__name__)


class AnnotationUpdater:
    """Posts a commit comment to a ticket. Failures are returned, not raised."""

    def __init__(self, client: ServiceClient) -> None:
        self.client = client

    def annotate(
        self,
        origin_id: Optional[str],
        commit_message: str,
        commit_url: Optional[str],
    ) -> AnnotationResult:
        if not origin_id:
            logger.info("No ticket ID available, skipping ticket update")
            return AnnotationResult.skipped("No originating ticket")
        if not commit_url:
            logger.info("No commit link resolved, skipping update of %s", origin_id)
            return AnnotationResult.skipped("No commit link available")

        payload = {
            "jira_ticket": origin_id,
            "commit_message": commit_message,
            "commit_url": commit_url,
        }
        logger.info("Updating ticket %s with commit information", origin_id)
        try:
            ensure_success(
                COMMIT_COMMENT_ENDPOINT,
                self.client.post_json(COMMIT_COMMENT_ENDPOINT, payload),
                "Failed to update ticket",
            )
        except (ServiceUnavailable, ServiceError) as exc:
            logger.warning("Ticket update failed, but deployment was successful: %s", exc)
            return AnnotationResult.failed(str(exc))

        logger.info("Updated ticket %s", origin_id)
        return AnnotationResult.annotated()
