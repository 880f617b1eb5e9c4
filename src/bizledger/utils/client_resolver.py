"""Utility for resolving client names to IDs."""

from bizledger.domain.client import ClientService
from bizledger.domain.entities import Client
from bizledger.domain.errors import NotFoundError, ValidationError


def resolve_client(client_service: ClientService, client: str | int) -> Client:
    """Resolve a client ID or full name to a client.

    Args:
        client_service: ClientService instance
        client: Client ID (int or numeric string) or "First Last" name,
            matched case-insensitively

    Returns:
        Client entity

    Raises:
        NotFoundError: If no client matches
        ValidationError: If a name matches more than one client
    """
    if isinstance(client, int) or str(client).strip().isdigit():
        return client_service.require_client(int(client))

    wanted = str(client).strip().lower()
    matches = [c for c in client_service.list_clients() if c.full_name.lower() == wanted]

    if not matches:
        raise NotFoundError(f"Client '{client}' not found")
    if len(matches) > 1:
        ids = ", ".join(str(c.id) for c in matches)
        raise ValidationError(f"Client name '{client}' is ambiguous (IDs: {ids}); use the ID")
    return matches[0]
