"""Ticket lookup and code generation, the sources of staged artifacts."""

from __future__ import annotations

import logging
from typing import List, Optional

from ..errors import ServiceError
from ..models import Artifact, DEFAULT_EXTENSION, Ticket, normalize_extension
from ..service import GENERATE_CODE_ENDPOINT, TICKETS_ENDPOINT, ServiceClient, ensure_success

logger = logging.getLogger(__name__)


def filter_tickets(
    tickets: List[Ticket],
    search: Optional[str] = None,
    status: Optional[str] = None,
) -> List[Ticket]:
    """Case-insensitive match on id or title, plus an exact status filter."""
    term = (search or "").lower()
    matches = []
    for ticket in tickets:
        if term and term not in ticket.title.lower() and term not in ticket.id.lower():
            continue
        if status and status != "All" and ticket.status != status:
            continue
        matches.append(ticket)
    return matches


class TicketClient:
    def __init__(self, client: ServiceClient) -> None:
        self.client = client

    def list(self) -> List[Ticket]:
        data = ensure_success(
            TICKETS_ENDPOINT,
            self.client.get_json(TICKETS_ENDPOINT),
            "Failed to fetch tickets",
        )
        return [Ticket.from_dict(item) for item in data.get("data") or [] if isinstance(item, dict)]

    def get(self, ticket_id: str) -> Ticket:
        endpoint = f"{TICKETS_ENDPOINT}/{ticket_id}"
        data = ensure_success(
            endpoint,
            self.client.get_json(endpoint),
            "Failed to fetch ticket details",
        )
        if not isinstance(data.get("data"), dict):
            raise ServiceError(endpoint, "Failed to fetch ticket details")
        return Ticket.from_dict(data["data"])

    def generate_code(self, ticket: Ticket, extension: str = DEFAULT_EXTENSION) -> Artifact:
        """Ask the service for code implementing `ticket`.

        The service reports failures through an `error` field rather than the
        usual `success` flag.
        """
        payload = {
            "description": ticket.description,
            "ticketId": ticket.id,
            "title": ticket.title,
            "priority": ticket.priority,
            "type": ticket.type,
        }
        logger.info("Requesting generated code for %s", ticket.id)
        data = self.client.post_json(GENERATE_CODE_ENDPOINT, payload)
        if data.get("error"):
            raise ServiceError(GENERATE_CODE_ENDPOINT, str(data["error"]))

        return Artifact(
            content=data.get("code") or data.get("generated_code") or "No code generated",
            origin_id=ticket.id,
            origin_title=ticket.title or None,
            extension=normalize_extension(extension),
        )
