"""Tests for ClientService."""

import pytest

from bizledger.domain.client import normalize_services
from bizledger.domain.entities import AustralianState, ClientFilters
from bizledger.domain.errors import NotFoundError, ValidationError
from bizledger.utils.client_resolver import resolve_client


def _create(service, **overrides):
    values = {
        "first_name": "Sam",
        "last_name": "Lee",
        "email": "sam@example.com",
        "phone_number": "0411 111 111",
        "suburb": "Newtown",
        "post_code": "2042",
        "state": "NSW",
        "created_by": "tester",
    }
    values.update(overrides)
    return service.create_client(**values)


def test_create_client(client_service, sample_client):
    assert sample_client.full_name == "Jane Citizen"
    assert sample_client.state == AustralianState.VIC
    assert sample_client.services_purchased == ("Bookkeeping", "BAS")
    assert sample_client.created_by == "tester"
    assert sample_client.updated_by is None


def test_create_client_missing_fields(client_service):
    with pytest.raises(ValidationError, match="Missing required fields: email, suburb"):
        _create(client_service, email="", suburb=None)


def test_create_client_invalid_email(client_service):
    with pytest.raises(ValidationError, match="Invalid email"):
        _create(client_service, email="not-an-email")


def test_create_client_invalid_state(client_service):
    with pytest.raises(ValidationError, match="Invalid state"):
        _create(client_service, state="ZZ")


def test_normalize_services():
    assert normalize_services(None) == ()
    assert normalize_services(" Audit, ,BAS ") == ("Audit", "BAS")
    assert normalize_services(["Payroll", "  "]) == ("Payroll",)


def test_update_client(client_service, sample_client):
    client = client_service.update_client(
        sample_client.id,
        updated_by="editor",
        updated_by_name="Ed Itor",
        email="jane.c@example.com",
        state="qld",
        services_purchased=["Payroll"],
        suburb=None,
    )

    assert client.email == "jane.c@example.com"
    assert client.state == AustralianState.QLD
    assert client.services_purchased == ("Payroll",)
    assert client.suburb == "Fitzroy"
    assert client.updated_by == "editor"
    assert client.updated_by_name == "Ed Itor"


def test_update_client_rejects_unknown_fields(client_service, sample_client):
    with pytest.raises(ValidationError, match="Unknown client fields: nickname"):
        client_service.update_client(sample_client.id, updated_by="editor", nickname="JC")


def test_update_client_rejects_blank_values(client_service, sample_client):
    with pytest.raises(ValidationError, match="first_name cannot be empty"):
        client_service.update_client(sample_client.id, updated_by="editor", first_name=" ")


def test_update_missing_client(client_service):
    with pytest.raises(NotFoundError, match="Client 42 not found"):
        client_service.update_client(42, updated_by="editor", suburb="Carlton")


def test_delete_client_keeps_transactions(client_service, transaction_service, sample_client):
    from datetime import date
    from decimal import Decimal

    transaction_id = transaction_service.create_transaction(
        type="INFLOW",
        category="CLIENT_PAYMENT",
        amount_net=Decimal("100"),
        payment_method="CASH_IN_HAND",
        date=date(2024, 1, 1),
        created_by="tester",
        client_id=sample_client.id,
        client_name=sample_client.full_name,
    )

    client_service.delete_client(sample_client.id)

    assert client_service.get_client(sample_client.id) is None
    assert transaction_service.get_transaction(transaction_id).client_id == sample_client.id
    with pytest.raises(NotFoundError):
        client_service.delete_client(sample_client.id)


class TestListClients:
    """Tests for listing and filtering clients."""

    @pytest.fixture
    def populated(self, client_service, sample_client):
        _create(client_service, services_purchased="Audit")
        _create(
            client_service,
            first_name="Alex",
            last_name="Ng",
            email="alex@example.com",
            suburb="Carlton",
            post_code="3053",
            state="VIC",
            services_purchased=["BAS"],
        )
        return client_service

    def test_newest_first(self, populated):
        names = [client.full_name for client in populated.list_clients()]

        assert names == ["Alex Ng", "Sam Lee", "Jane Citizen"]

    def test_filter_by_state(self, populated):
        clients = populated.list_clients(ClientFilters(state=AustralianState.VIC))

        assert {client.full_name for client in clients} == {"Alex Ng", "Jane Citizen"}

    def test_filter_by_service(self, populated):
        clients = populated.list_clients(ClientFilters(service="BAS"))

        assert {client.full_name for client in clients} == {"Alex Ng", "Jane Citizen"}

    def test_search(self, populated):
        assert [c.full_name for c in populated.list_clients(ClientFilters(search="carl"))] == [
            "Alex Ng"
        ]
        assert [c.full_name for c in populated.list_clients(ClientFilters(search="2042"))] == [
            "Sam Lee"
        ]
        assert populated.list_clients(ClientFilters(search="nobody")) == []

    def test_count_clients(self, populated):
        assert populated.count_clients() == 3


class TestResolveClient:
    """Tests for resolving a client by ID or name."""

    def test_by_id(self, client_service, sample_client):
        assert resolve_client(client_service, str(sample_client.id)) == sample_client

    def test_by_name_case_insensitive(self, client_service, sample_client):
        assert resolve_client(client_service, "jane citizen").id == sample_client.id

    def test_unknown_name(self, client_service, sample_client):
        with pytest.raises(NotFoundError):
            resolve_client(client_service, "John Doe")

    def test_ambiguous_name(self, client_service, sample_client):
        _create(client_service, first_name="Jane", last_name="Citizen", email="j2@example.com")

        with pytest.raises(ValidationError, match="ambiguous"):
            resolve_client(client_service, "Jane Citizen")
