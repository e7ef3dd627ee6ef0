"""Configuration loading utilities for ticket-deployer."""

from __future__ import annotations

import json
import os
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any, Dict, Optional

from dotenv import load_dotenv

from .paths import SESSION_FILE

# Load .env file if it exists
load_dotenv()

_DEFAULT_CONFIG_PATH = Path("config/default_config.json")

DEFAULT_SERVICE_URL = "https://jira-automation-backend.onrender.com"


@dataclass
class ServiceConfig:
    """Connection settings for the remote automation service."""

    base_url: str = DEFAULT_SERVICE_URL
    timeout: int = 30
    proxy: Optional[str] = None  # e.g. "http://127.0.0.1:7890"
    send_branch: bool = False    # also submit `branch` with /push-file


@dataclass
class StorageConfig:
    """Where the staged artifact record is persisted."""

    session_file: str = str(SESSION_FILE)


@dataclass
class DeployDefaults:
    """Defaults used to prefill a deployment request."""

    branch: str = "main"
    source_dir: str = "src"
    extension: str = "js"
    # Only correct for GitHub-shaped hosts: {host}/{owner}/{repo}/commit/{sha}
    commit_host: str = "https://github.com"


@dataclass
class InteractionConfig:
    """Configuration for user interaction."""

    enabled: bool = True
    mode: str = "cli"  # "cli" | "auto"


@dataclass
class AppConfig:
    """Top-level configuration."""

    service: ServiceConfig = field(default_factory=ServiceConfig)
    storage: StorageConfig = field(default_factory=StorageConfig)
    deploy: DeployDefaults = field(default_factory=DeployDefaults)
    interaction: InteractionConfig = field(default_factory=InteractionConfig)

    @classmethod
    def from_dict(cls, payload: Dict[str, Any]) -> "AppConfig":
        sections = {
            name: {k: v for k, v in (payload.get(name, {}) or {}).items() if not k.startswith("_")}
            for name in ("service", "storage", "deploy", "interaction")
        }
        return cls(
            service=ServiceConfig(**{**ServiceConfig().__dict__, **sections["service"]}),
            storage=StorageConfig(**{**StorageConfig().__dict__, **sections["storage"]}),
            deploy=DeployDefaults(**{**DeployDefaults().__dict__, **sections["deploy"]}),
            interaction=InteractionConfig(
                **{**InteractionConfig().__dict__, **sections["interaction"]}
            ),
        )


def load_config(path: Optional[str] = None) -> AppConfig:
    """Load configuration from `path` or the default location.

    Falls back to built-in defaults when no path is given and the default
    file does not exist. An explicit `path` that does not exist is an error.

    Environment variables (higher priority than config file):
    - TICKET_DEPLOYER_SERVICE_URL: base URL of the automation service
    - TICKET_DEPLOYER_SERVICE_TIMEOUT: request timeout in seconds
    - TICKET_DEPLOYER_PROXY: HTTP proxy for service requests
    - TICKET_DEPLOYER_SESSION_FILE: path of the staged artifact record
    - TICKET_DEPLOYER_COMMIT_HOST: host used to build fallback commit links
    """

    if path and not Path(path).is_file():
        raise FileNotFoundError(f"Could not find configuration file: {path}")

    candidate = Path(path) if path else _DEFAULT_CONFIG_PATH
    if candidate.is_file():
        with candidate.open("r", encoding="utf-8") as handle:
            config = AppConfig.from_dict(json.load(handle))
    else:
        config = AppConfig()

    env_url = os.getenv("TICKET_DEPLOYER_SERVICE_URL")
    if env_url:
        config.service.base_url = env_url

    env_timeout = os.getenv("TICKET_DEPLOYER_SERVICE_TIMEOUT")
    if env_timeout:
        try:
            config.service.timeout = int(env_timeout)
        except ValueError as exc:
            raise ValueError(
                f"TICKET_DEPLOYER_SERVICE_TIMEOUT must be a whole number of seconds, got {env_timeout!r}"
            ) from exc

    env_proxy = os.getenv("TICKET_DEPLOYER_PROXY")
    if env_proxy:
        config.service.proxy = env_proxy

    env_session = os.getenv("TICKET_DEPLOYER_SESSION_FILE")
    if env_session:
        config.storage.session_file = env_session

    env_commit_host = os.getenv("TICKET_DEPLOYER_COMMIT_HOST")
    if env_commit_host:
        config.deploy.commit_host = env_commit_host

    config.service.base_url = config.service.base_url.rstrip("/")
    config.deploy.commit_host = config.deploy.commit_host.rstrip("/")
    return config
