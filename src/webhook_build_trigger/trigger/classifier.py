"""Event classification: which deliveries are candidates for a build."""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum

from webhook_build_trigger.webhook.models import (
    EventType,
    MergeRequestEvent,
    PullRequestEvent,
    PushEvent,
    WebHookEvent,
    shorten_ref,
)


class ActionType(str, Enum):
    PUSH = "PUSH"
    MR = "MR"
    PR = "PR"


@dataclass(frozen=True, slots=True)
class Classification:
    """Outcome of classifying one delivery.

    `action_type` is None for unrecognized tags and for deliveries that can never
    build (branch deletion, MR/PR sub-events other than "opened").
    """

    considered: bool
    action_type: ActionType | None = None
    target_branch: str | None = None


IGNORED = Classification(considered=False)


def classify(event_type: EventType | str | None, event: WebHookEvent) -> Classification:
    try:
        kind = EventType(event_type) if event_type is not None else None
    except ValueError:
        return IGNORED

    if kind is EventType.PUSH and isinstance(event, PushEvent):
        if event.is_branch_deletion:
            return IGNORED
        return Classification(
            considered=True, action_type=ActionType.PUSH, target_branch=shorten_ref(event.ref)
        )

    if kind is EventType.MERGE_REQUEST and isinstance(event, MergeRequestEvent):
        mr = event.merge_request
        if not mr.is_create_action:
            return IGNORED
        return Classification(
            considered=True, action_type=ActionType.MR, target_branch=mr.target_branch
        )

    if kind is EventType.PULL_REQUEST and isinstance(event, PullRequestEvent):
        pr = event.pull_request
        if not pr.is_create_action:
            return IGNORED
        return Classification(
            considered=True, action_type=ActionType.PR, target_branch=pr.target_branch
        )

    return IGNORED
