"""Edge case tests for webhook deliveries.

Covers: concurrent duplicate deliveries, large pushes, branch deletion,
non-ASCII commit messages, and clone-URL-only repositories.
"""

from __future__ import annotations

import asyncio
import json
from typing import TYPE_CHECKING

import pytest

from payloads import ENDPOINT, WEBHOOK_SECRET, make_commit, make_push_payload, sign

if TYPE_CHECKING:
    from httpx import AsyncClient

    from commitlink.services.link_store import InMemoryLinkStore
    from commitlink.services.notifier import InMemoryNotifier


def _post_webhook(client: AsyncClient, payload: dict) -> object:
    """Send a signed push POST and return the awaitable response."""
    body = json.dumps(payload).encode()
    return client.post(
        ENDPOINT,
        content=body,
        headers={
            "Content-Type": "application/json",
            "X-GitHub-Event": "push",
            "X-Hub-Signature-256": sign(body, WEBHOOK_SECRET),
        },
    )


@pytest.mark.anyio
async def test_concurrent_duplicate_deliveries_store_one_row(
    client: AsyncClient,
    link_store: InMemoryLinkStore,
) -> None:
    """Five simultaneous copies of one push link each pair exactly once."""
    payload = make_push_payload(commits=[make_commit("abc0001", "fix #42")])

    responses = await asyncio.gather(*(_post_webhook(client, payload) for _ in range(5)))

    assert all(r.status_code == 200 for r in responses)
    assert sum(r.json()["linked"] for r in responses) == 1
    assert len(link_store.links) == 1


@pytest.mark.anyio
async def test_large_push(client: AsyncClient, link_store: InMemoryLinkStore) -> None:
    """A push of 100 commits is processed in order, commit by commit."""
    commits = [make_commit(f"sha{i:04d}", f"step {i} #42") for i in range(100)]

    response = await _post_webhook(client, make_push_payload(commits=commits))

    body = response.json()
    assert body["linked"] == 100
    assert [c["commitSha"] for c in body["commits"]] == [c["id"] for c in commits]
    assert len(link_store.links) == 100


@pytest.mark.anyio
async def test_branch_deletion(client: AsyncClient, notifier: InMemoryNotifier) -> None:
    """Deleting a task branch sends a push with no commits: nothing happens."""
    payload = make_push_payload(ref="refs/heads/feature/TASK-42-login", commits=[])
    payload["deleted"] = True
    payload["after"] = "0" * 40

    response = await _post_webhook(client, payload)

    assert response.status_code == 200
    assert response.json()["commits"] == []
    assert notifier.notices == []


@pytest.mark.anyio
async def test_non_ascii_commit_message(
    client: AsyncClient, link_store: InMemoryLinkStore
) -> None:
    payload = make_push_payload(commits=[make_commit("abc0001", "로그인 버그 수정 #TASK-42 ✨")])

    response = await _post_webhook(client, payload)

    assert response.json()["linked"] == 1
    assert link_store.links[0].commit_message == "로그인 버그 수정 #TASK-42 ✨"


@pytest.mark.anyio
async def test_repository_registered_by_clone_url(
    client: AsyncClient, link_store: InMemoryLinkStore
) -> None:
    """A team registered with the .git clone URL still resolves."""
    link_store.add_team(8, "Mirror", "https://github.com/testuser/mirror")
    payload = make_push_payload(
        commits=[make_commit("abc0001", "fix #42")],
        html_url="https://github.com/testuser/mirror/",
        clone_url="https://github.com/testuser/mirror.git",
    )

    response = await _post_webhook(client, payload)

    assert response.json()["teamId"] == 8
