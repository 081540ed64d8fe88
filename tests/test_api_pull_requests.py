"""Tests for the pull request endpoints.

Covers:
- POST /pullRequest/create returns 201 with reviewers drawn from active teammates
- merged_at is omitted while OPEN; timestamps are ``YYYY-MM-DDTHH:MM:SSZ``
- 409 PR_EXISTS / AUTHOR_NOT_ACTIVE, 404 for unknown authors
- POST /pullRequest/merge is idempotent; 404 for unknown PRs
- POST /pullRequest/reassign swaps one reviewer; 409 PR_MERGED / NOT_ASSIGNED / NO_CANDIDATE
- unclassified failures become a generic 500 INTERNAL_ERROR

The random provider is the scripted fake from conftest.py: shuffles keep
the repository order (user_id ascending) and index draws return 0.
"""
from __future__ import annotations

from typing import Any

import pytest
from httpx import ASGITransport, AsyncClient

from pr_reviewers.api.dependencies import get_pull_request_service
from pr_reviewers.main import app
from pr_reviewers.services.pull_requests import PullRequestService
from tests.fakes import FixedClock, ScriptedRandom


# ---------------------------------------------------------------------------
# Helpers
# ---------------------------------------------------------------------------


async def _create_team(client: AsyncClient, team_name: str, *specs: tuple[str, bool]) -> None:
    response = await client.post(
        "/team/add",
        json={
            "team_name": team_name,
            "members": [
                {"user_id": uid, "username": uid.upper(), "is_active": active}
                for uid, active in specs
            ],
        },
    )
    assert response.status_code == 201, response.text


async def _create_pr(
    client: AsyncClient, pr_id: str = "pr-1", author_id: str = "a1", name: str = "Add search"
) -> Any:
    return await client.post(
        "/pullRequest/create",
        json={"pull_request_id": pr_id, "pull_request_name": name, "author_id": author_id},
    )


def _error(response: Any) -> dict[str, str]:
    return dict(response.json()["error"])


# ---------------------------------------------------------------------------
# Create
# ---------------------------------------------------------------------------


@pytest.mark.asyncio
async def test_create_assigns_two_reviewers(client: AsyncClient) -> None:
    await _create_team(client, "backend", ("a1", True), ("u1", True), ("u2", True), ("u3", True))

    response = await _create_pr(client)

    assert response.status_code == 201
    assert response.json() == {
        "pull_request_id": "pr-1",
        "pull_request_name": "Add search",
        "author_id": "a1",
        "status": "OPEN",
        "assigned_reviewers": ["u1", "u2"],
        "created_at": "2025-11-01T12:00:00Z",
    }


@pytest.mark.asyncio
async def test_create_uses_shuffled_candidates(client: AsyncClient, rng: ScriptedRandom) -> None:
    await _create_team(client, "backend", ("a1", True), ("u1", True), ("u2", False), ("u3", True))
    rng.reverse = True

    response = await _create_pr(client)

    assert response.json()["assigned_reviewers"] == ["u3", "u1"]
    assert rng.shuffled == [["u1", "u3"]]


@pytest.mark.asyncio
async def test_create_without_candidates(client: AsyncClient) -> None:
    await _create_team(client, "solo", ("a1", True), ("u1", False))
    response = await _create_pr(client)
    assert response.status_code == 201
    assert response.json()["assigned_reviewers"] == []


@pytest.mark.asyncio
async def test_create_duplicate(client: AsyncClient) -> None:
    await _create_team(client, "backend", ("a1", True), ("u1", True))
    await _create_pr(client)
    response = await _create_pr(client, name="Again")
    assert response.status_code == 409
    assert _error(response) == {"code": "PR_EXISTS", "message": "PR id already exists"}


@pytest.mark.asyncio
async def test_create_inactive_author(client: AsyncClient) -> None:
    await _create_team(client, "backend", ("a1", False), ("u1", True))
    response = await _create_pr(client)
    assert response.status_code == 409
    assert _error(response) == {
        "code": "AUTHOR_NOT_ACTIVE",
        "message": "user can not create PR with false active status",
    }


@pytest.mark.asyncio
async def test_create_unknown_author(client: AsyncClient) -> None:
    response = await _create_pr(client, author_id="ghost")
    assert response.status_code == 404
    assert _error(response)["code"] == "NOT_FOUND"


@pytest.mark.asyncio
async def test_create_invalid_body(client: AsyncClient) -> None:
    response = await client.post("/pullRequest/create", json={"pull_request_id": "pr-1"})
    assert response.status_code == 400
    assert _error(response)["code"] == "INVALID_REQUEST_BODY"


@pytest.mark.asyncio
async def test_failed_create_leaves_nothing_behind(client: AsyncClient) -> None:
    await _create_team(client, "backend", ("a1", False), ("u1", True))
    await _create_pr(client)

    stats = (await client.get("/stats")).json()
    assert stats["total_prs"] == 0


# ---------------------------------------------------------------------------
# Merge
# ---------------------------------------------------------------------------


@pytest.mark.asyncio
async def test_merge(client: AsyncClient) -> None:
    await _create_team(client, "backend", ("a1", True), ("u1", True))
    await _create_pr(client)

    response = await client.post("/pullRequest/merge", json={"pull_request_id": "pr-1"})

    assert response.status_code == 200
    body = response.json()
    assert body["status"] == "MERGED"
    assert body["merged_at"] == "2025-11-01T12:00:00Z"
    assert body["assigned_reviewers"] == ["u1"]


@pytest.mark.asyncio
async def test_merge_twice_keeps_first_timestamp(client: AsyncClient, clock: FixedClock) -> None:
    await _create_team(client, "backend", ("a1", True), ("u1", True))
    await _create_pr(client)
    await client.post("/pullRequest/merge", json={"pull_request_id": "pr-1"})
    clock.advance(days=1)

    response = await client.post("/pullRequest/merge", json={"pull_request_id": "pr-1"})

    assert response.status_code == 200
    assert response.json()["merged_at"] == "2025-11-01T12:00:00Z"


@pytest.mark.asyncio
async def test_merge_unknown(client: AsyncClient) -> None:
    response = await client.post("/pullRequest/merge", json={"pull_request_id": "nope"})
    assert response.status_code == 404
    assert _error(response) == {"code": "NOT_FOUND", "message": "resource not found"}


# ---------------------------------------------------------------------------
# Reassign
# ---------------------------------------------------------------------------


@pytest.mark.asyncio
async def test_reassign(client: AsyncClient) -> None:
    await _create_team(client, "backend", ("a1", True), ("u1", True), ("u2", True), ("u3", True))
    await _create_pr(client)

    response = await client.post(
        "/pullRequest/reassign", json={"pull_request_id": "pr-1", "old_reviewer_id": "u1"}
    )

    assert response.status_code == 200
    body = response.json()
    assert body["replaced_by"] == "u3"
    assert body["pr"]["assigned_reviewers"] == ["u3", "u2"]
    assert "merged_at" not in body["pr"]


@pytest.mark.asyncio
async def test_reassign_accepts_old_user_id(client: AsyncClient, rng: ScriptedRandom) -> None:
    await _create_team(
        client, "backend", ("a1", True), ("u1", True), ("u2", True), ("u3", True), ("u4", True)
    )
    await _create_pr(client)
    rng.indices = [1]

    response = await client.post(
        "/pullRequest/reassign", json={"pull_request_id": "pr-1", "old_user_id": "u2"}
    )

    assert response.status_code == 200
    assert response.json()["replaced_by"] == "u4"
    assert response.json()["pr"]["assigned_reviewers"] == ["u1", "u4"]


@pytest.mark.asyncio
async def test_reassign_merged(client: AsyncClient) -> None:
    await _create_team(client, "backend", ("a1", True), ("u1", True), ("u2", True))
    await _create_pr(client)
    await client.post("/pullRequest/merge", json={"pull_request_id": "pr-1"})

    response = await client.post(
        "/pullRequest/reassign", json={"pull_request_id": "pr-1", "old_reviewer_id": "u1"}
    )

    assert response.status_code == 409
    assert _error(response) == {"code": "PR_MERGED", "message": "cannot reassign on merged PR"}


@pytest.mark.asyncio
async def test_reassign_not_assigned(client: AsyncClient) -> None:
    await _create_team(client, "backend", ("a1", True), ("u1", True), ("u2", True), ("u3", True))
    await _create_pr(client)

    response = await client.post(
        "/pullRequest/reassign", json={"pull_request_id": "pr-1", "old_reviewer_id": "u3"}
    )

    assert response.status_code == 409
    assert _error(response) == {"code": "NOT_ASSIGNED", "message": "reviewer is not assigned to this PR"}


@pytest.mark.asyncio
async def test_reassign_no_candidate(client: AsyncClient) -> None:
    await _create_team(client, "backend", ("a1", True), ("u1", True), ("u2", True))
    await _create_pr(client)

    response = await client.post(
        "/pullRequest/reassign", json={"pull_request_id": "pr-1", "old_reviewer_id": "u1"}
    )

    assert response.status_code == 409
    assert _error(response) == {
        "code": "NO_CANDIDATE",
        "message": "no active replacement candidate in team",
    }


@pytest.mark.asyncio
async def test_reassign_unknown_pr(client: AsyncClient) -> None:
    response = await client.post(
        "/pullRequest/reassign", json={"pull_request_id": "nope", "old_reviewer_id": "u1"}
    )
    assert response.status_code == 404


# ---------------------------------------------------------------------------
# Internal failures
# ---------------------------------------------------------------------------


@pytest.mark.asyncio
async def test_missing_transaction_manager_is_internal_error(
    client: AsyncClient, clock: FixedClock, rng: ScriptedRandom
) -> None:
    class _Unused:
        pass

    app.dependency_overrides[get_pull_request_service] = lambda: PullRequestService(
        _Unused(), _Unused(), _Unused(), None, clock, rng  # type: ignore[arg-type]
    )

    response = await _create_pr(client)

    assert response.status_code == 500
    assert response.json() == {"error": {"code": "INTERNAL_ERROR", "message": "internal server error"}}


@pytest.mark.asyncio
async def test_unexpected_error_does_not_leak(db_session: Any) -> None:
    class _Exploding:
        async def create(self, *args: Any) -> None:
            raise RuntimeError("password=hunter2 connection refused")

    app.dependency_overrides[get_pull_request_service] = lambda: _Exploding()
    transport = ASGITransport(app=app, raise_app_exceptions=False)
    async with AsyncClient(transport=transport, base_url="http://test") as ac:
        response = await _create_pr(ac)

    assert response.status_code == 500
    assert response.json() == {"error": {"code": "INTERNAL_ERROR", "message": "internal server error"}}
    assert "hunter2" not in response.text
