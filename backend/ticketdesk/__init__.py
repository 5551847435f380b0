"""TicketDesk: role-scoped support ticket service."""
