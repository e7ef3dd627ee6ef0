"""ticket-deployer: push AI-generated code for a ticket to a repository."""

__version__ = "0.1.0"
