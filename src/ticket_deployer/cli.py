"""Command-line interface for ticket-deployer."""

from __future__ import annotations

import argparse
from dataclasses import dataclass
from pathlib import Path
from typing import Optional

from .config import AppConfig, load_config
from .errors import ArtifactNotFoundError, ServiceError, ServiceUnavailable
from .interaction import AutoResponseHandler, UserInteractionHandler
from .utils.logging import get_logger, set_verbosity
from .workflow import DeploymentWorkflow, DeployOptions

logger = get_logger(__name__)


@dataclass
class CLIContext:
    """Context captured from CLI arguments."""

    config: AppConfig
    workflow: DeploymentWorkflow


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="ticket-deployer",
        description="Review AI-generated code for a ticket and push it to a repository.",
    )
    parser.add_argument(
        "--config",
        type=str,
        default=None,
        help="Path to a JSON config file overriding defaults.",
    )
    parser.add_argument(
        "--verbose", "-v", action="store_true",
        help="Show debug logging, including service requests.",
    )

    subparsers = parser.add_subparsers(dest="command", required=True)

    subparsers.add_parser("repos", help="List repositories available for deployment")

    tickets_parser = subparsers.add_parser("tickets", help="List tickets")
    tickets_parser.add_argument("--search", "-s", help="Match ticket id or title")
    tickets_parser.add_argument("--status", help="Only show tickets with this status")

    generate_parser = subparsers.add_parser(
        "generate", help="Generate code for a ticket and stage it for deployment"
    )
    generate_parser.add_argument("ticket_id", help="Ticket identifier, e.g. PROJ-1")
    generate_parser.add_argument("--extension", "-e", help="File extension for the generated code")

    stage_parser = subparsers.add_parser("stage", help="Stage a local file for deployment")
    stage_parser.add_argument("file", help="File whose contents should be deployed")
    stage_parser.add_argument("--ticket", help="Ticket the code belongs to")
    stage_parser.add_argument("--title", help="Ticket title, used in the default commit message")
    stage_parser.add_argument("--extension", "-e", help="Override the file extension")

    subparsers.add_parser("show", help="Show the staged code")

    edit_parser = subparsers.add_parser("edit", help="Edit the staged code or its extension")
    edit_parser.add_argument("--content-file", help="Replace the staged code with this file")
    edit_parser.add_argument("--extension", "-e", help="Change the file extension")

    export_parser = subparsers.add_parser("export", help="Write the staged code to a local file")
    export_parser.add_argument("--output", "-o", help="Directory to write into")

    deploy_parser = subparsers.add_parser("deploy", help="Push the staged code to a repository")
    deploy_parser.add_argument("--repo", help="Target repository, e.g. team/app")
    deploy_parser.add_argument("--branch", help="Target branch (default from config)")
    deploy_parser.add_argument("--file-path", help="Target path inside the repository")
    deploy_parser.add_argument("--message", "-m", help="Commit message")
    deploy_parser.add_argument("--content-file", help="Deploy this file's contents instead")
    deploy_parser.add_argument(
        "--yes", "-y", action="store_true",
        help="Do not prompt; use defaults and abort on failure",
    )

    return parser


def _build_context(args: argparse.Namespace) -> CLIContext:
    config = load_config(args.config)
    handler: Optional[UserInteractionHandler] = None
    if getattr(args, "yes", False) or not config.interaction.enabled or config.interaction.mode == "auto":
        handler = AutoResponseHandler()
    return CLIContext(
        config=config,
        workflow=DeploymentWorkflow(config, interaction_handler=handler),
    )


def _read_text(path: Optional[str]) -> Optional[str]:
    if path is None:
        return None
    return Path(path).read_text(encoding="utf-8")


def dispatch_command(args: argparse.Namespace) -> int:
    context = _build_context(args)
    workflow = context.workflow

    if args.command == "repos":
        orchestrator = workflow.list_repositories()
        return 1 if orchestrator.directory_error else 0

    if args.command == "tickets":
        workflow.list_tickets(search=args.search, status=args.status)
        return 0

    if args.command == "generate":
        workflow.generate(args.ticket_id, extension=args.extension)
        return 0

    if args.command == "stage":
        workflow.stage(
            Path(args.file),
            origin_id=args.ticket,
            origin_title=args.title,
            extension=args.extension,
        )
        return 0

    if args.command == "show":
        workflow.show()
        return 0

    if args.command == "edit":
        workflow.edit(content=_read_text(args.content_file), extension=args.extension)
        return 0

    if args.command == "export":
        target = workflow.export(Path(args.output) if args.output else None)
        workflow.presenter.console.print(f"Exported to {target}")
        return 0

    if args.command == "deploy":
        options = DeployOptions(
            repository=args.repo,
            branch=args.branch,
            file_path=args.file_path,
            commit_message=args.message,
            content=_read_text(args.content_file),
            assume_yes=args.yes,
        )
        return 0 if workflow.run_deploy(options) else 1

    raise ValueError(f"Unsupported command: {args.command}")


def run_cli(argv: Optional[list[str]] = None) -> int:
    parser = build_parser()
    args = parser.parse_args(argv)
    set_verbosity(args.verbose)
    try:
        return dispatch_command(args)
    except ArtifactNotFoundError as exc:
        logger.error("%s", exc)
        return 1
    except (ServiceUnavailable, ServiceError) as exc:
        logger.error("%s", exc)
        return 1
    except OSError as exc:
        # Missing input files or an unreadable config file.
        logger.error("%s", exc)
        return 1
    except ValueError as exc:
        # Malformed config file or environment override.
        logger.error("Invalid configuration: %s", exc)
        return 1
