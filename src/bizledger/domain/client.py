"""Client domain service."""

import logging
import re
from typing import Any, Callable, Iterable, Optional, Sequence

from bizledger.database.base import Database
from bizledger.domain.entities import AustralianState, Client, ClientFilters
from bizledger.domain.errors import (
    NotFoundError,
    ValidationError,
    client_not_found,
    missing_required_fields,
)
from bizledger.domain.subscriptions import Channel, Subscription

logger = logging.getLogger(__name__)

EMAIL_PATTERN = re.compile(r"^[^@\s]+@[^@\s]+\.[^@\s]+$")

REQUIRED_FIELDS = (
    "first_name",
    "last_name",
    "email",
    "phone_number",
    "suburb",
    "post_code",
    "state",
)


def normalize_services(services: Optional[str | Iterable[str]]) -> tuple[str, ...]:
    """Normalise services purchased to a tuple of trimmed, non-empty names.

    Accepts a comma-separated string or any iterable of strings. Order is
    preserved.
    """
    if not services:
        return ()
    if isinstance(services, str):
        services = services.split(",")
    return tuple(name.strip() for name in services if name and name.strip())


def validate_email(email: str) -> str:
    """Return the trimmed email or raise ValidationError if malformed."""
    email = (email or "").strip()
    if not EMAIL_PATTERN.match(email):
        raise ValidationError(f"Invalid email address '{email}'")
    return email


def parse_state(state: AustralianState | str) -> AustralianState:
    """Return the AustralianState for a code, case-insensitively."""
    if isinstance(state, AustralianState):
        return state
    try:
        return AustralianState(str(state).strip().upper())
    except ValueError:
        allowed = ", ".join(member.value for member in AustralianState)
        raise ValidationError(f"Invalid state '{state}'. Expected one of: {allowed}")


def matches_search(client: Client, search: Optional[str]) -> bool:
    """Match names, email and suburb case-insensitively; phone and post code as typed."""
    if not search:
        return True
    needle = search.lower()
    return (
        needle in client.first_name.lower()
        or needle in client.last_name.lower()
        or needle in client.email.lower()
        or search in client.phone_number
        or needle in client.suburb.lower()
        or search in client.post_code
    )


def filter_clients(clients: Iterable[Client], filters: Optional[ClientFilters]) -> list[Client]:
    """Apply ClientFilters to an in-memory client set."""
    if filters is None:
        return list(clients)
    return [
        client
        for client in clients
        if (filters.state is None or client.state == filters.state)
        and (filters.service is None or filters.service in client.services_purchased)
        and matches_search(client, filters.search)
    ]


class ClientService:
    """Service for managing clients."""

    def __init__(self, db: Database, channel: Optional[Channel[Client]] = None):
        """Initialize client service.

        Args:
            db: Database instance
            channel: Optional change channel; the full client set is
                published to it after every change
        """
        self.db = db
        self.channel = channel if channel is not None else Channel("clients")

    def create_client(
        self,
        first_name: str,
        last_name: str,
        email: str,
        phone_number: str,
        suburb: str,
        post_code: str,
        state: AustralianState | str,
        created_by: str,
        services_purchased: Optional[str | Iterable[str]] = None,
        created_by_name: Optional[str] = None,
    ) -> int:
        """Create a client.

        Args:
            first_name: First name
            last_name: Last name
            email: Email address, must be well formed
            phone_number: Phone number
            suburb: Suburb
            post_code: Post code
            state: Australian state or territory code
            created_by: User creating the record
            services_purchased: Comma-separated string or list of services
            created_by_name: Optional display name of the creator

        Returns:
            Client ID

        Raises:
            ValidationError: If a required field is missing or invalid
        """
        values = {
            "first_name": first_name,
            "last_name": last_name,
            "email": email,
            "phone_number": phone_number,
            "suburb": suburb,
            "post_code": post_code,
            "state": state,
            "created_by": created_by,
        }
        missing = [name for name, value in values.items() if value is None or not str(value).strip()]
        if missing:
            raise ValidationError(missing_required_fields(missing))

        client_id = self.db.create_client(
            first_name=first_name.strip(),
            last_name=last_name.strip(),
            email=validate_email(email),
            phone_number=phone_number.strip(),
            suburb=suburb.strip(),
            post_code=post_code.strip(),
            state=parse_state(state),
            services_purchased=normalize_services(services_purchased),
            created_by=created_by,
            created_by_name=created_by_name,
        )
        logger.info("Created client %s", client_id)
        self._publish()
        return client_id

    def get_client(self, client_id: int) -> Optional[Client]:
        """Get client by ID, or None if not found."""
        return self.db.get_client(client_id)

    def require_client(self, client_id: int) -> Client:
        """Get client by ID or raise NotFoundError."""
        client = self.db.get_client(client_id)
        if client is None:
            raise NotFoundError(client_not_found(client_id))
        return client

    def update_client(
        self,
        client_id: int,
        updated_by: str,
        updated_by_name: Optional[str] = None,
        **changes: Any,
    ) -> Client:
        """Update the client fields that are provided.

        Accepts any of the required client fields plus
        ``services_purchased``. ``None`` values are ignored.

        Returns:
            The updated client

        Raises:
            NotFoundError: If the client doesn't exist
            ValidationError: If a provided field is invalid or unknown
        """
        if not updated_by:
            raise ValidationError(missing_required_fields(["updated_by"]))

        allowed = set(REQUIRED_FIELDS) | {"services_purchased"}
        unknown = sorted(set(changes) - allowed)
        if unknown:
            raise ValidationError(f"Unknown client fields: {', '.join(unknown)}")

        fields: dict[str, Any] = {"updated_by": updated_by}
        if updated_by_name:
            fields["updated_by_name"] = updated_by_name

        for name, value in changes.items():
            if value is None:
                continue
            if name == "services_purchased":
                fields[name] = normalize_services(value)
            elif name == "email":
                fields[name] = validate_email(value)
            elif name == "state":
                fields[name] = parse_state(value)
            else:
                if not str(value).strip():
                    raise ValidationError(f"{name} cannot be empty")
                fields[name] = str(value).strip()

        if not self.db.update_client(client_id, fields):
            raise NotFoundError(client_not_found(client_id))

        logger.info("Updated client %s: %s", client_id, ", ".join(sorted(fields)))
        self._publish()
        return self.require_client(client_id)

    def delete_client(self, client_id: int) -> None:
        """Delete a client. Transactions referencing it are left in place.

        Raises:
            NotFoundError: If the client doesn't exist
        """
        if not self.db.delete_client(client_id):
            raise NotFoundError(client_not_found(client_id))
        logger.info("Deleted client %s", client_id)
        self._publish()

    def list_clients(self, filters: Optional[ClientFilters] = None) -> list[Client]:
        """List clients newest first, filtered by state, service and search."""
        filters = filters or ClientFilters()
        clients = self.db.list_clients(state=filters.state, service=filters.service)
        return [client for client in clients if matches_search(client, filters.search)]

    def count_clients(self) -> int:
        """Return the number of clients."""
        return len(self.db.list_clients())

    def subscribe(
        self,
        callback: Callable[[Sequence[Client]], None],
        filters: Optional[ClientFilters] = None,
    ) -> Subscription:
        """Receive the current client set now and after every change."""

        def deliver(clients: Sequence[Client]) -> None:
            callback(filter_clients(clients, filters))

        subscription = self.channel.subscribe(deliver)
        subscription.deliver(self.db.list_clients())
        return subscription

    def _publish(self) -> None:
        if self.channel.subscriber_count:
            self.channel.publish(self.db.list_clients())
