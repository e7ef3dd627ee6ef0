from typing import Any, Dict, List, Tuple

import pytest

from ticket_deployer.config import ServiceConfig
from ticket_deployer.errors import ServiceError, ServiceUnavailable, ValidationError
from ticket_deployer.models import Artifact, DeploymentRequest, TransferResult
from ticket_deployer.service import PUSH_FILE_ENDPOINT, ServiceClient
from ticket_deployer.transfer import TransferExecutor, validate_transfer


class StubServiceClient(ServiceClient):
    def __init__(self, responses: Dict[str, Any]) -> None:
        super().__init__(ServiceConfig(base_url="https://service.test"))
        self.responses = responses
        self.calls: List[Tuple[str, str, Dict[str, Any]]] = []

    def _request(self, method: str, endpoint: str, **kwargs: Any) -> Dict[str, Any]:
        self.calls.append((method, endpoint, kwargs))
        response = self.responses[endpoint]
        if isinstance(response, Exception):
            raise response
        return response


def _request(**overrides) -> DeploymentRequest:
    fields = {
        "repository": "team/app",
        "branch": "main",
        "file_path": "src/x.js",
        "commit_message": "m",
    }
    fields.update(overrides)
    return DeploymentRequest(**fields)


class TestValidateTransfer:
    @pytest.mark.parametrize(
        "artifact, request_fields, field",
        [
            (Artifact(content="x"), {"repository": ""}, "repository"),
            (Artifact(content="x"), {"repository": "   "}, "repository"),
            (Artifact(content=""), {}, "content"),
            (Artifact(content="x"), {"file_path": " "}, "file_path"),
            # repository is checked before content
            (Artifact(content=""), {"repository": ""}, "repository"),
        ],
    )
    def test_rejects_missing_values(self, artifact, request_fields, field):
        with pytest.raises(ValidationError) as excinfo:
            validate_transfer(artifact, _request(**request_fields))
        assert excinfo.value.field == field

    def test_empty_commit_message_is_allowed(self):
        validate_transfer(Artifact(content="x"), _request(commit_message=""))


class TestTransferExecutor:
    def test_validation_failure_sends_nothing(self):
        client = StubServiceClient({})
        executor = TransferExecutor(client)

        with pytest.raises(ValidationError):
            executor.transfer(Artifact(content="x"), _request(repository=""))

        assert client.calls == []

    def test_submits_exactly_the_form_fields_and_file(self):
        client = StubServiceClient({PUSH_FILE_ENDPOINT: {"success": True, "result": {}}})

        TransferExecutor(client).transfer(Artifact(content="console.log(1)"), _request())

        assert len(client.calls) == 1
        method, endpoint, kwargs = client.calls[0]
        assert (method, endpoint) == ("POST", PUSH_FILE_ENDPOINT)
        assert kwargs["data"] == {"repo": "team/app", "file_path": "src/x.js", "commit_message": "m"}
        file_name, body, _ = kwargs["files"]["file"]
        assert file_name == "x.js"
        assert body == b"console.log(1)"

    def test_branch_is_sent_when_enabled(self):
        client = StubServiceClient({PUSH_FILE_ENDPOINT: {"success": True, "result": {}}})

        TransferExecutor(client, send_branch=True).transfer(Artifact(content="x"), _request(branch="dev"))

        assert client.calls[0][2]["data"]["branch"] == "dev"

    def test_success_without_sha_has_no_commit_link(self):
        client = StubServiceClient({PUSH_FILE_ENDPOINT: {"success": True, "result": {}}})

        result = TransferExecutor(client).transfer(Artifact(content="x"), _request())

        assert result.commit_sha is None
        assert result.commit_url is None

    def test_commit_link_is_synthesised_from_sha(self):
        client = StubServiceClient(
            {PUSH_FILE_ENDPOINT: {"success": True, "result": {"commit": {"sha": "abc1234"}}}}
        )

        result = TransferExecutor(client).transfer(Artifact(content="x"), _request())

        assert result.commit_url == "https://github.com/team/app/commit/abc1234"

    def test_reported_commit_link_wins(self):
        payload = {
            "success": True,
            "result": {
                "commit": {"sha": "abc1234def", "html_url": "https://git.example/c/abc"},
                "content": {"size": 14, "encoding": "base64"},
            },
        }
        client = StubServiceClient({PUSH_FILE_ENDPOINT: payload})

        result = TransferExecutor(client).transfer(Artifact(content="x"), _request())

        assert result.commit_url == "https://git.example/c/abc"
        assert result.short_sha == "abc1234"
        assert result.size == 14
        assert result.encoding == "base64"

    def test_unsuccessful_envelope_raises(self):
        client = StubServiceClient({PUSH_FILE_ENDPOINT: {"success": False, "error": "Branch protected"}})
        with pytest.raises(ServiceError, match="Branch protected"):
            TransferExecutor(client).transfer(Artifact(content="x"), _request())

        client = StubServiceClient({PUSH_FILE_ENDPOINT: {"success": False}})
        with pytest.raises(ServiceError, match="Failed to deploy code"):
            TransferExecutor(client).transfer(Artifact(content="x"), _request())

    def test_transport_failure_propagates(self):
        client = StubServiceClient({PUSH_FILE_ENDPOINT: ServiceUnavailable(PUSH_FILE_ENDPOINT, "timeout")})
        with pytest.raises(ServiceUnavailable):
            TransferExecutor(client).transfer(Artifact(content="x"), _request())


class TestTransferResult:
    def test_custom_commit_host(self):
        result = TransferResult.from_payload(
            "team/app", {"commit": {"sha": "f00"}}, commit_host="https://git.example.com/"
        )
        assert result.commit_url == "https://git.example.com/team/app/commit/f00"

    def test_missing_payload(self):
        result = TransferResult.from_payload("team/app", None)
        assert result.commit_url is None
        assert result.short_sha is None

    def test_non_numeric_size_is_dropped(self):
        result = TransferResult.from_payload(
            "team/app", {"commit": {"sha": "abc"}, "content": {"size": "n/a", "encoding": "base64"}}
        )
        assert result.size is None
        assert result.encoding == "base64"
        assert result.commit_url == "https://github.com/team/app/commit/abc"

    @pytest.mark.parametrize(
        "payload",
        [
            {"commit": "abc"},
            {"commit": {"sha": "abc"}, "content": ["not", "an", "object"]},
            ["unexpected"],
        ],
    )
    def test_malformed_metadata_is_ignored(self, payload):
        result = TransferResult.from_payload("team/app", payload)
        assert result.size is None
        assert result.encoding is None

    def test_malformed_metadata_after_push_is_still_success(self):
        client = StubServiceClient(
            {PUSH_FILE_ENDPOINT: {"success": True, "result": {"commit": "abc", "content": {"size": "n/a"}}}}
        )

        result = TransferExecutor(client).transfer(Artifact(content="x"), _request())

        assert result.commit_sha is None
        assert result.commit_url is None
