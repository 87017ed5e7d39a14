"""Structured webhook events consumed by the trigger core.

The core never sees raw JSON. `payload.parse_webhook` turns a delivery into one of
the event variants defined in `models`.
"""

from __future__ import annotations

from webhook_build_trigger.webhook.models import (
    NULL_SHA,
    Commit,
    EventType,
    MergeRequest,
    MergeRequestEvent,
    PullRequest,
    PullRequestEvent,
    PushEvent,
    Repository,
    SourceRepository,
    User,
    WebHookEvent,
    shorten_ref,
)

__all__ = [
    "NULL_SHA",
    "Commit",
    "EventType",
    "MergeRequest",
    "MergeRequestEvent",
    "PullRequest",
    "PullRequestEvent",
    "PushEvent",
    "Repository",
    "SourceRepository",
    "User",
    "WebHookEvent",
    "shorten_ref",
]
