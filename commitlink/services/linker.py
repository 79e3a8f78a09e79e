"""Linking engine: turns a push event into task/commit links.

Flow per push: resolve the owning team -> extract task ids from the branch
once -> for each commit, merge in ids from its message, then link every
candidate task that exists and is not linked yet. Every (commit, task id)
pair is isolated, so one failure never blocks its siblings.
"""

from datetime import datetime

import structlog

from commitlink.schemas.results import CommitLinkResult, LinkSource, LinkStatus, WebhookResult
from commitlink.schemas.tasks import NewTaskCommit
from commitlink.schemas.webhooks import Commit, PushEvent
from commitlink.services.link_store import LinkStore
from commitlink.services.notifier import Notifier, fan_out_commit_linked
from commitlink.services.task_refs import parse_task_ids_from_branch, parse_task_ids_from_message
from commitlink.services.team_resolver import resolve_team_for_repository

logger = structlog.get_logger()

MAX_MESSAGE_LENGTH = 200
ELLIPSIS = "..."

REASON_NO_TASK_ID = "no task id found"
REASON_NOTHING_LINKED = "already linked or task not found"


def truncate_message(message: str | None) -> str | None:
    """Keep the first line of *message*, capped at 200 characters.

    >>> truncate_message("x" * 250)[-5:]
    'xx...'
    """
    if message is None:
        return None
    first_line = message.split("\n", 1)[0]
    if len(first_line) > MAX_MESSAGE_LENGTH:
        return first_line[: MAX_MESSAGE_LENGTH - len(ELLIPSIS)] + ELLIPSIS
    return first_line


def parse_commit_timestamp(value: str | None) -> datetime | None:
    """Parse an ISO-8601 commit timestamp, returning ``None`` when unparsable."""
    if not value:
        return None
    # GitHub sends a trailing "Z", which fromisoformat rejects before 3.11
    if value.endswith("Z"):
        value = value[:-1] + "+00:00"
    try:
        return datetime.fromisoformat(value)
    except ValueError:
        logger.debug("commit_timestamp_unparsable", timestamp=value)
        return None


def _short(sha: str) -> str:
    return sha[:7]


async def process_push(event: PushEvent, store: LinkStore, notifier: Notifier) -> WebhookResult:
    """Link every commit of *event* to the tasks it references.

    Returns a ``WebhookResult`` whose ``error`` is set only when the
    repository belongs to no team. A push without commits yields an empty,
    error-free result.
    """
    result = WebhookResult()

    if not event.commits:
        logger.info("push_without_commits", ref=event.ref)
        return result

    repository = event.repository
    branch_name = event.branch_name
    logger.info(
        "processing_push",
        repo=repository.full_name,
        branch=branch_name,
        commits=len(event.commits),
    )

    team = await resolve_team_for_repository(store, repository)
    if team is None:
        repo_url = repository.html_url or repository.clone_url
        logger.warning("no_team_for_repository", repo_url=repo_url)
        result.error = f"no team registered for repository: {repo_url}"
        return result

    result.team_id = team.id
    result.team_name = team.name

    branch_task_ids = parse_task_ids_from_branch(branch_name)
    logger.info("branch_task_ids", branch=branch_name, task_ids=sorted(branch_task_ids))

    for commit in event.commits:
        try:
            commit_result = await _process_commit(commit, branch_task_ids, store, notifier)
        except Exception:
            logger.exception("commit_processing_failed", sha=_short(commit.id))
            commit_result = CommitLinkResult(
                commit_sha=commit.id,
                commit_message=truncate_message(commit.message),
                status=LinkStatus.FAILED,
            )
        result.commit_results.append(commit_result)

    logger.info(
        "push_processed",
        team_id=team.id,
        linked=result.linked_count,
        skipped=result.skipped_count,
        failed=result.failed_count,
    )
    return result


async def _process_commit(
    commit: Commit,
    branch_task_ids: set[int],
    store: LinkStore,
    notifier: Notifier,
) -> CommitLinkResult:
    result = CommitLinkResult(commit_sha=commit.id, commit_message=truncate_message(commit.message))

    candidates: set[int] = set()
    if branch_task_ids:
        candidates |= branch_task_ids
        result.source = LinkSource.BRANCH

    message_task_ids = parse_task_ids_from_message(commit.message)
    if message_task_ids:
        candidates |= message_task_ids
        result.source = LinkSource.BOTH if result.source is LinkSource.BRANCH else LinkSource.COMMIT

    if not candidates:
        result.status = LinkStatus.SKIPPED
        result.reason = REASON_NO_TASK_ID
        return result

    linked: list[int] = []
    for task_id in sorted(candidates):
        try:
            if await _link_commit_to_task(commit, task_id, result.source, store, notifier):
                linked.append(task_id)
        except Exception:
            logger.exception("link_candidate_failed", sha=_short(commit.id), task_id=task_id)

    if linked:
        result.status = LinkStatus.LINKED
        result.linked_task_ids = linked
    else:
        result.status = LinkStatus.SKIPPED
        result.reason = REASON_NOTHING_LINKED
    return result


async def _link_commit_to_task(
    commit: Commit,
    task_id: int,
    source: LinkSource | None,
    store: LinkStore,
    notifier: Notifier,
) -> bool:
    """Link one commit to one task; ``False`` means there was nothing to do.

    Lookup, duplicate check and insert share one savepoint, so a database
    error here rolls back this candidate alone.
    """
    message = truncate_message(commit.message)
    async with store.savepoint():
        task = await store.get_task(task_id)
        if task is None:
            logger.debug("task_not_found", task_id=task_id)
            return False

        if await store.link_exists(task_id, commit.id):
            logger.debug("commit_already_linked", sha=_short(commit.id), task_id=task_id)
            return False

        inserted = await store.insert_link(
            NewTaskCommit(
                task_id=task_id,
                commit_sha=commit.id,
                commit_message=message,
                commit_author=commit.author.name,
                commit_date=parse_commit_timestamp(commit.timestamp),
                github_url=commit.url,
            )
        )
        if not inserted:
            # A concurrent delivery stored the same pair between check and insert
            logger.debug("commit_link_race_lost", sha=_short(commit.id), task_id=task_id)
            return False

    logger.info("commit_linked", sha=_short(commit.id), task_id=task_id)

    # The link is stored at this point; notification trouble must not undo it
    try:
        async with store.savepoint():
            assignee_ids = await store.list_assignee_ids(task_id)
        await fan_out_commit_linked(
            notifier,
            task=task,
            assignee_ids=assignee_ids,
            commit_message=message,
            source=source,
        )
    except Exception:
        logger.exception("notification_fan_out_failed", sha=_short(commit.id), task_id=task_id)
    return True
