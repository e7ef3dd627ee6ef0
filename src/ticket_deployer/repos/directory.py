"""Retrieves the list of deployable repositories."""

from __future__ import annotations

import logging
from typing import Any, List, Optional

from ..models import RepositoryDescriptor, Visibility
from ..service import REPOS_ENDPOINT, ServiceClient, ensure_success

logger = logging.getLogger(__name__)


class RepositoryDirectoryClient:
    """Lists repositories in the order the service delivers them."""

    def __init__(self, client: ServiceClient) -> None:
        self.client = client

    def list(self) -> List[RepositoryDescriptor]:
        logger.info("Fetching repositories from %s", self.client.url_for(REPOS_ENDPOINT))
        data = ensure_success(
            REPOS_ENDPOINT,
            self.client.get_json(REPOS_ENDPOINT),
            "Failed to fetch repositories",
        )
        repositories = [
            descriptor
            for descriptor in (_to_descriptor(entry) for entry in data.get("repos") or [])
            if descriptor is not None
        ]
        logger.info("Found %d repositories", len(repositories))
        return repositories


def _to_descriptor(entry: Any) -> Optional[RepositoryDescriptor]:
    # The service sends bare names; richer objects are accepted when present.
    if isinstance(entry, str):
        return RepositoryDescriptor(name=entry, description=f"Repository: {entry}")
    if isinstance(entry, dict) and entry.get("name"):
        name = str(entry["name"])
        if entry.get("private") is True or entry.get("visibility") == Visibility.PRIVATE.value:
            visibility = Visibility.PRIVATE
        else:
            visibility = Visibility.PUBLIC
        return RepositoryDescriptor(
            name=name,
            description=entry.get("description") or f"Repository: {name}",
            visibility=visibility,
        )
    logger.debug("Skipping unrecognised repository entry: %r", entry)
    return None
