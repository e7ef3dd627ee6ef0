"""Artifact transfer to repositories."""

from .executor import TransferExecutor, validate_transfer

__all__ = ["TransferExecutor", "validate_transfer"]
