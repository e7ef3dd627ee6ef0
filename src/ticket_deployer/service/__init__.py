"""Remote automation service access."""

from .client import (
    COMMIT_COMMENT_ENDPOINT,
    GENERATE_CODE_ENDPOINT,
    PUSH_FILE_ENDPOINT,
    REPOS_ENDPOINT,
    TICKETS_ENDPOINT,
    ServiceClient,
    ensure_success,
)

__all__ = [
    "COMMIT_COMMENT_ENDPOINT",
    "GENERATE_CODE_ENDPOINT",
    "PUSH_FILE_ENDPOINT",
    "REPOS_ENDPOINT",
    "TICKETS_ENDPOINT",
    "ServiceClient",
    "ensure_success",
]
