"""Resolution of a pushed repository to the team that owns it.

Teams store their repository URL normalized, so incoming URLs are normalized
the same way before the lookup.
"""

import structlog

from commitlink.schemas.tasks import TeamView
from commitlink.schemas.webhooks import Repository
from commitlink.services.link_store import LinkStore

logger = structlog.get_logger()


def normalize_repo_url(url: str) -> str:
    """Strip one trailing ``.git`` and then one trailing ``/``."""
    url = url.strip()
    url = url.removesuffix(".git")
    return url.removesuffix("/")


async def resolve_team(store: LinkStore, repo_url: str | None) -> TeamView | None:
    """Return the team registered for *repo_url*, or ``None``.

    A URL that matches no team is an ordinary outcome, not an error.
    """
    if not repo_url or not repo_url.strip():
        return None
    normalized = normalize_repo_url(repo_url)
    team = await store.find_team_by_repo_url(normalized)
    if team is None:
        logger.debug("team_not_found", repo_url=normalized)
    return team


async def resolve_team_for_repository(store: LinkStore, repository: Repository) -> TeamView | None:
    """Resolve by ``html_url`` first, falling back to ``clone_url``.

    A team registered with either form of the URL matches, since the clone
    URL normalizes to the browser URL once ``.git`` is stripped.
    """
    for candidate in (repository.html_url, repository.clone_url):
        team = await resolve_team(store, candidate)
        if team is not None:
            return team
    return None
