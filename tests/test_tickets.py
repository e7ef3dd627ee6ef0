from typing import Any, Dict, List, Tuple

import pytest

from ticket_deployer.config import ServiceConfig
from ticket_deployer.errors import ServiceError
from ticket_deployer.models import Ticket
from ticket_deployer.service import GENERATE_CODE_ENDPOINT, TICKETS_ENDPOINT, ServiceClient
from ticket_deployer.tickets import TicketClient, filter_tickets


class StubServiceClient(ServiceClient):
    def __init__(self, responses: Dict[str, Any]) -> None:
        super().__init__(ServiceConfig(base_url="https://service.test"))
        self.responses = responses
        self.calls: List[Tuple[str, str, Dict[str, Any]]] = []

    def _request(self, method: str, endpoint: str, **kwargs: Any) -> Dict[str, Any]:
        self.calls.append((method, endpoint, kwargs))
        return self.responses[endpoint]


TICKETS = [
    Ticket(id="PROJ-1", title="Login page", status="To Do"),
    Ticket(id="PROJ-2", title="Fix logout bug", status="Done"),
    Ticket(id="OPS-7", title="Rotate keys", status="In Progress"),
]


class TestFilterTickets:
    def test_no_filters_returns_everything(self):
        assert filter_tickets(TICKETS) == TICKETS

    def test_search_matches_title_or_id_case_insensitively(self):
        assert [t.id for t in filter_tickets(TICKETS, search="LOG")] == ["PROJ-1", "PROJ-2"]
        assert [t.id for t in filter_tickets(TICKETS, search="ops")] == ["OPS-7"]

    def test_status_filter(self):
        assert [t.id for t in filter_tickets(TICKETS, status="Done")] == ["PROJ-2"]
        assert filter_tickets(TICKETS, status="All") == TICKETS

    def test_filters_combine(self):
        assert filter_tickets(TICKETS, search="proj", status="In Progress") == []


class TestTicketClient:
    def test_list_parses_tickets(self):
        client = StubServiceClient(
            {
                TICKETS_ENDPOINT: {
                    "success": True,
                    "data": [
                        {"id": "PROJ-1", "title": "Login", "labels": ["ui"], "assignee": "sam"},
                        "garbage",
                    ],
                }
            }
        )

        tickets = TicketClient(client).list()

        assert len(tickets) == 1
        assert tickets[0].id == "PROJ-1"
        assert tickets[0].labels == ["ui"]

    def test_get_fetches_one_ticket(self):
        client = StubServiceClient(
            {f"{TICKETS_ENDPOINT}/PROJ-1": {"success": True, "data": {"id": "PROJ-1", "title": "Login"}}}
        )
        assert TicketClient(client).get("PROJ-1").title == "Login"

    def test_get_missing_ticket_raises(self):
        client = StubServiceClient({f"{TICKETS_ENDPOINT}/NOPE-1": {"success": False, "error": "Not found"}})
        with pytest.raises(ServiceError, match="Not found"):
            TicketClient(client).get("NOPE-1")

    def test_generate_code_builds_artifact(self):
        client = StubServiceClient({GENERATE_CODE_ENDPOINT: {"code": "def f(): pass"}})
        ticket = Ticket(id="PROJ-1", title="Login", description="Build it", priority="High", type="Story")

        artifact = TicketClient(client).generate_code(ticket, extension=".py")

        assert artifact.content == "def f(): pass"
        assert artifact.origin_id == "PROJ-1"
        assert artifact.origin_title == "Login"
        assert artifact.extension == "py"
        assert client.calls[0][2]["json"] == {
            "description": "Build it",
            "ticketId": "PROJ-1",
            "title": "Login",
            "priority": "High",
            "type": "Story",
        }

    def test_generate_code_accepts_alternate_field(self):
        client = StubServiceClient({GENERATE_CODE_ENDPOINT: {"generated_code": "x = 1"}})
        assert TicketClient(client).generate_code(Ticket(id="PROJ-1")).content == "x = 1"

    def test_generate_code_error_field_raises(self):
        client = StubServiceClient({GENERATE_CODE_ENDPOINT: {"error": "Model overloaded"}})
        with pytest.raises(ServiceError, match="Model overloaded"):
            TicketClient(client).generate_code(Ticket(id="PROJ-1"))
