"""Task identifier extraction from branch names and commit messages.

Two independent heuristics:

- branch names reference tasks as ``TASK-<n>`` at the start of the name or
  right after a ``/`` or ``-`` (``feature/TASK-42-login``, ``fix/TASK-1-TASK-2``);
- commit messages reference tasks as ``#TASK-<n>`` or ``#<n>`` anywhere.

Both are case-insensitive and return sets, so repeated references collapse.
"""

import re

BRANCH_TASK_PATTERN = re.compile(r"(?:^|[/-])TASK-(\d+)", re.IGNORECASE)
MESSAGE_TASK_PATTERN = re.compile(r"#(?:TASK-)?(\d+)", re.IGNORECASE)


def _collect_ids(pattern: re.Pattern[str], text: str | None) -> set[int]:
    if not text:
        return set()
    ids: set[int] = set()
    for match in pattern.finditer(text):
        try:
            ids.add(int(match.group(1)))
        except ValueError:
            continue
    return ids


def parse_task_ids_from_branch(branch_name: str | None) -> set[int]:
    """Return task ids referenced by a branch name.

    >>> sorted(parse_task_ids_from_branch("bugfix/TASK-10-and-TASK-20"))
    [10, 20]
    """
    return _collect_ids(BRANCH_TASK_PATTERN, branch_name)


def parse_task_ids_from_message(message: str | None) -> set[int]:
    """Return task ids referenced by a commit message.

    >>> sorted(parse_task_ids_from_message("feat: add #42 #43"))
    [42, 43]
    """
    return _collect_ids(MESSAGE_TASK_PATTERN, message)
