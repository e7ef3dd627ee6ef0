"""Ticket lookup and code generation."""

from .client import TicketClient, filter_tickets

__all__ = ["TicketClient", "filter_tickets"]
