"""Deserialize webhook deliveries into `WebHookEvent` variants.

Payload shape (push):
{
  "token": "secret",
  "ref": "refs/heads/main",
  "before": "0000000000000000000000000000000000000000",
  "after": "8f2c...",
  "commits": [{"sha": "8f2c...", "short_message": "Fix build"}],
  "user": {"name": "alice", "web_url": "https://coding.net/u/alice"},
  "repository": {"ssh_url": "git@git.coding.net:alice/demo.git"}
}

Merge request and pull request deliveries carry a `merge_request` or
`pull_request` object instead of the push fields.
"""

from __future__ import annotations

import logging
from typing import Any

from pydantic import BaseModel, ConfigDict, ValidationError

from webhook_build_trigger.webhook.models import (
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
)

logger = logging.getLogger(__name__)

CREATE_ACTIONS: frozenset[str] = frozenset({"create", "opened"})


class PayloadError(ValueError):
    """The delivery body could not be turned into a webhook event."""


class _Model(BaseModel):
    model_config = ConfigDict(extra="ignore")


class CommitPayload(_Model):
    sha: str | None = None
    short_message: str | None = None


class UserPayload(_Model):
    name: str | None = None
    web_url: str | None = None


class RepositoryPayload(_Model):
    ssh_url: str | None = None


class OwnerPayload(_Model):
    global_key: str | None = None


class SourceRepositoryPayload(_Model):
    ssh_url: str | None = None
    owner: OwnerPayload | None = None


class MergeRequestPayload(_Model):
    number: int | None = None
    title: str | None = None
    body: str | None = None
    web_url: str | None = None
    source_branch: str | None = None
    target_branch: str | None = None
    merge_commit_sha: str | None = None
    action: str | None = None

    @property
    def is_create(self) -> bool:
        return (self.action or "").lower() in CREATE_ACTIONS


class PullRequestPayload(MergeRequestPayload):
    source_repository: SourceRepositoryPayload | None = None


class WebHookPayload(_Model):
    token: str | None = None
    ref: str | None = None
    before: str | None = None
    after: str | None = None
    commits: list[CommitPayload] | None = None
    user: UserPayload | None = None
    repository: RepositoryPayload | None = None
    merge_request: MergeRequestPayload | None = None
    pull_request: PullRequestPayload | None = None


def _user(payload: WebHookPayload) -> User | None:
    if payload.user is None:
        return None
    return User(name=payload.user.name, web_url=payload.user.web_url)


def _repository(payload: WebHookPayload) -> Repository | None:
    if payload.repository is None:
        return None
    return Repository(ssh_url=payload.repository.ssh_url)


def _merge_request_fields(mr: MergeRequestPayload) -> dict[str, Any]:
    return {
        "number": mr.number,
        "title": mr.title,
        "body": mr.body,
        "web_url": mr.web_url,
        "source_branch": mr.source_branch,
        "target_branch": mr.target_branch,
        "merge_commit_sha": mr.merge_commit_sha,
        "is_create_action": mr.is_create,
    }


def to_event(event_type: EventType, payload: WebHookPayload) -> WebHookEvent | None:
    """Build the event variant for `event_type`, or None if its section is absent."""

    common: dict[str, Any] = {
        "token": payload.token,
        "user": _user(payload),
        "repository": _repository(payload),
    }

    if event_type is EventType.PUSH:
        return PushEvent(
            ref=payload.ref,
            before=payload.before,
            after=payload.after,
            commits=tuple(
                Commit(sha=c.sha, short_message=c.short_message) for c in payload.commits or []
            ),
            **common,
        )

    if event_type is EventType.MERGE_REQUEST:
        if payload.merge_request is None:
            return None
        return MergeRequestEvent(
            merge_request=MergeRequest(**_merge_request_fields(payload.merge_request)),
            **common,
        )

    if payload.pull_request is None:
        return None
    pr = payload.pull_request
    source: SourceRepository | None = None
    if pr.source_repository is not None:
        owner = pr.source_repository.owner
        source = SourceRepository(
            ssh_url=pr.source_repository.ssh_url,
            owner_global_key=owner.global_key if owner is not None else None,
        )
    return PullRequestEvent(
        pull_request=PullRequest(source_repository=source, **_merge_request_fields(pr)),
        **common,
    )


def parse_event_type(value: str | None) -> EventType | None:
    if value is None:
        return None
    try:
        return EventType(value.strip().lower())
    except ValueError:
        return None


def parse_webhook(event_type: str | None, payload: object) -> WebHookEvent | None:
    """Parse a raw delivery.

    Returns None for an unrecognized event tag or a delivery without the section the
    tag requires. Raises PayloadError when the body itself is malformed.
    """

    kind = parse_event_type(event_type)
    if kind is None:
        logger.debug("Ignoring unsupported event type", extra={"event_type": event_type})
        return None

    if not isinstance(payload, dict):
        raise PayloadError(f"Expected a JSON object, got {type(payload).__name__}")

    try:
        parsed = WebHookPayload.model_validate(payload)
    except ValidationError as e:
        raise PayloadError(f"Invalid {kind.value} payload: {e}") from e

    event = to_event(kind, parsed)
    if event is None:
        logger.warning(
            "Webhook payload is missing its %s section",
            kind.value,
            extra={"event_type": kind.value},
        )
    return event
