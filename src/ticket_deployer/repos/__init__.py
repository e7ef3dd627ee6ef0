"""Repository directory access."""

from .directory import RepositoryDirectoryClient

__all__ = ["RepositoryDirectoryClient"]
