"""Tests for client commands."""

from bizledger.cli.main import cli


def _invoke(cli_runner, temp_db, *args, **kwargs):
    return cli_runner.invoke(cli, ["--db-path", temp_db.database_path, *args], **kwargs)


def test_add_client(cli_runner, temp_db, client_service):
    result = _invoke(
        cli_runner,
        temp_db,
        "--user",
        "alice",
        "client",
        "add",
        "--first-name",
        "Sam",
        "--last-name",
        "Lee",
        "--email",
        "sam@example.com",
        "--phone",
        "0411 111 111",
        "--suburb",
        "Newtown",
        "--post-code",
        "2042",
        "--state",
        "nsw",
        "--services",
        "Audit, BAS",
    )

    assert result.exit_code == 0
    assert "Created client 'Sam Lee'" in result.output

    temp_db.disconnect()
    [client] = client_service.list_clients()
    assert client.created_by == "alice"
    assert client.services_purchased == ("Audit", "BAS")


def test_add_client_invalid_email(cli_runner, temp_db):
    result = _invoke(
        cli_runner,
        temp_db,
        "client",
        "add",
        "--first-name",
        "Sam",
        "--last-name",
        "Lee",
        "--email",
        "nope",
        "--phone",
        "0411",
        "--suburb",
        "Newtown",
        "--post-code",
        "2042",
        "--state",
        "NSW",
    )

    assert result.exit_code == 1
    assert "Error: Invalid email address" in result.output


def test_list_clients_empty(cli_runner, temp_db):
    result = _invoke(cli_runner, temp_db, "client", "list")

    assert result.exit_code == 0
    assert "No clients found" in result.output


def test_list_clients_with_filters(cli_runner, temp_db, sample_client):
    result = _invoke(cli_runner, temp_db, "client", "list", "--state", "VIC", "--service", "BAS")

    assert result.exit_code == 0
    assert "Found 1 client(s)" in result.output
    assert "Jane Citizen" in result.output

    result = _invoke(cli_runner, temp_db, "client", "list", "--state", "QLD")
    assert "No clients found" in result.output


def test_show_client(cli_runner, temp_db, sample_client):
    result = _invoke(cli_runner, temp_db, "client", "show", str(sample_client.id))

    assert result.exit_code == 0
    assert "Jane Citizen" in result.output
    assert "Victoria" in result.output
    assert "Bookkeeping, BAS" in result.output


def test_show_missing_client(cli_runner, temp_db):
    result = _invoke(cli_runner, temp_db, "client", "show", "42")

    assert result.exit_code == 1
    assert "Client 42 not found" in result.output


def test_update_client(cli_runner, temp_db, client_service, sample_client):
    result = _invoke(
        cli_runner,
        temp_db,
        "--user",
        "bob",
        "client",
        "update",
        str(sample_client.id),
        "--suburb",
        "Carlton",
        "--services",
        "",
    )

    assert result.exit_code == 0

    temp_db.disconnect()
    client = client_service.get_client(sample_client.id)
    assert client.suburb == "Carlton"
    assert client.services_purchased == ()
    assert client.updated_by == "bob"


def test_delete_client_requires_confirmation(cli_runner, temp_db, sample_client):
    result = _invoke(cli_runner, temp_db, "client", "delete", str(sample_client.id), input="n\n")

    assert result.exit_code == 0
    assert "Deletion cancelled" in result.output

    result = _invoke(cli_runner, temp_db, "client", "delete", str(sample_client.id), "--yes")
    assert result.exit_code == 0
    assert f"Deleted client {sample_client.id}" in result.output
