"""`[ci-skip]` directive detection on the last commit message or MR/PR title."""

from __future__ import annotations

from webhook_build_trigger.trigger.classifier import ActionType
from webhook_build_trigger.webhook.models import (
    MergeRequestEvent,
    PullRequestEvent,
    PushEvent,
    WebHookEvent,
)

CI_SKIP = "[ci-skip]"


def _contains_marker(text: str | None) -> bool:
    return text is not None and CI_SKIP in text.lower()


def is_ci_skip(event: WebHookEvent, action_type: ActionType | None) -> bool:
    """True if the last pushed commit, or the MR/PR title, carries `[ci-skip]`."""

    if action_type is ActionType.PUSH and isinstance(event, PushEvent):
        commit = event.last_commit
        return commit is not None and _contains_marker(commit.short_message)
    if action_type is ActionType.MR and isinstance(event, MergeRequestEvent):
        return _contains_marker(event.merge_request.title)
    if action_type is ActionType.PR and isinstance(event, PullRequestEvent):
        return _contains_marker(event.pull_request.title)
    return False
