"""Tests for the dependency initialization logic."""

from unittest.mock import MagicMock, patch

import pytest

from commitlink import dependencies
from commitlink.dependencies import get_link_store, get_notifier, init_production_deps
from commitlink.services.link_store import SqlLinkStore
from commitlink.services.notifier import InMemoryNotifier


def test_default_notifier_is_in_memory():
    assert isinstance(get_notifier(), InMemoryNotifier)


def test_init_production_deps_swaps_notifier(monkeypatch: pytest.MonkeyPatch):
    """init_production_deps replaces the in-memory notifier with Cloud Tasks."""
    monkeypatch.setattr(dependencies, "_notifier", dependencies._notifier)

    with patch("commitlink.services.notifier.CloudTasksNotifier") as mock_ctn:
        mock_ctn.return_value = mock_ctn

        init_production_deps(
            gcp_project="test-project",
            gcp_location="us-central1",
            cloud_tasks_queue="commit-notifications",
            notification_handler_url="https://notify.example.com/commit-linked",
        )

        mock_ctn.assert_called_once_with(
            "test-project",
            "us-central1",
            "commit-notifications",
            "https://notify.example.com/commit-linked",
        )
        assert get_notifier() is mock_ctn


@pytest.mark.anyio
async def test_get_link_store_wraps_session():
    session = MagicMock()
    store = await get_link_store(session)
    assert isinstance(store, SqlLinkStore)
