from __future__ import annotations

from collections.abc import Iterator

import pytest
from fastapi.testclient import TestClient
from prompt_console.core.app.application_factory import build_app, build_services
from prompt_console.core.config.app_config import AppConfig, HostContextConfig
from prompt_console.core.repositories.in_memory_user_repository import (
    InMemoryUserRepository,
)
from prompt_console.core.services.audit_log_service import InMemoryAuditLog


@pytest.fixture
def app_config() -> AppConfig:
    return AppConfig(
        host_context=HostContextConfig(
            user_id=2, username="admin", display_name="Administrator", is_superuser=False
        )
    )


@pytest.fixture
def client(
    app_config: AppConfig,
    user_repository: InMemoryUserRepository,
    audit_log: InMemoryAuditLog,
) -> Iterator[TestClient]:
    services = build_services(
        app_config, user_repository=user_repository, audit_log=audit_log
    )
    with TestClient(build_app(services=services)) as test_client:
        yield test_client


def test_list_commands(client: TestClient) -> None:
    response = client.get("/api/prompt/commands")

    assert response.status_code == 200
    commands = response.json()
    assert [c["key"] for c in commands] == ["USERS.LIST-USERS"]
    assert commands[0]["name"] == "list-users"
    assert commands[0]["namespace"] == "users"
    assert commands[0]["description"]


def test_run_command_returns_paged_result(
    client: TestClient, audit_log: InMemoryAuditLog
) -> None:
    response = client.post("/api/prompt/cmd", json={"cmdLine": "list-users -max 2"})

    assert response.status_code == 200
    body = response.json()
    assert [row["Username"] for row in body["Data"]] == ["admin", "jdoe"]
    assert body["PagingInfo"] == {"PageNo": 1, "TotalPages": 2, "PageSize": 2}
    assert body["Records"] == 2
    assert body["IsError"] is False
    assert len(audit_log.records) == 1


def test_current_page_is_accepted_by_field_name(client: TestClient) -> None:
    response = client.post(
        "/api/prompt/cmd", json={"cmd_line": "list-users jsmith", "current_page": 7}
    )

    assert response.status_code == 200
    assert [row["Username"] for row in response.json()["Data"]] == ["jsmith"]


def test_unknown_command_suggests_closest_match(client: TestClient) -> None:
    response = client.post("/api/prompt/cmd", json={"cmdLine": "lst-users"})

    assert response.status_code == 400
    body = response.json()
    assert body["status"] == 400
    assert body["message"].startswith("Command 'lst-users' not found.")
    assert "Did you mean 'list-users'?" in body["message"]


def test_empty_command_line_is_rejected(client: TestClient) -> None:
    response = client.post("/api/prompt/cmd", json={})

    assert response.status_code == 400
    assert "message" in response.json()


def test_validation_failure_is_a_bad_request(client: TestClient) -> None:
    response = client.post(
        "/api/prompt/cmd", json={"cmdLine": "list-users -email a@b.c -role x"}
    )

    assert response.status_code == 400
    assert "exactly one of the flags" in response.json()["message"]


def test_unknown_role_is_reported_in_the_result(client: TestClient) -> None:
    response = client.post("/api/prompt/cmd", json={"cmdLine": "list-users -role Nobody"})

    assert response.status_code == 200
    body = response.json()
    assert body["IsError"] is True
    assert body["Output"] == "Role 'Nobody' was not found."


def test_command_help(client: TestClient) -> None:
    response = client.post("/api/prompt/cmd", json={"cmdLine": "help list-users"})

    assert response.status_code == 200
    body = response.json()
    assert body["Name"] == "list-users"
    assert [option["Flag"] for option in body["Options"]] == [
        "email",
        "username",
        "role",
        "page",
        "max",
    ]


def test_help_topic(client: TestClient) -> None:
    response = client.post("/api/prompt/cmd", json={"cmdLine": "HELP syntax"})

    assert response.status_code == 200
    assert response.json()["ResultHtml"]


def test_malformed_body_is_unprocessable(client: TestClient) -> None:
    response = client.post("/api/prompt/cmd", json={"cmdLine": "list-users", "currentPage": "x"})

    assert response.status_code == 422
    body = response.json()
    assert body["message"] == "Validation failed"
    assert body["details"]["errors"]


def test_build_app_from_dict_config() -> None:
    app = build_app({"prompt": {"audit_enabled": False}})

    assert app.title == "Prompt Console"
    assert app.state.services.config.prompt.audit_enabled is False
