"""Webhook event domain types.

A delivery is exactly one of `PushEvent`, `MergeRequestEvent` or `PullRequestEvent`.
Each variant only carries the section that belongs to it, so "both a merge request
and a pull request" cannot be represented.
"""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from typing import ClassVar

NULL_SHA = "0" * 40

_REF_PREFIXES: tuple[str, ...] = ("refs/heads/", "refs/tags/", "refs/remotes/")


class EventType(str, Enum):
    PUSH = "push"
    MERGE_REQUEST = "merge_request"
    PULL_REQUEST = "pull_request"


def shorten_ref(ref: str | None) -> str | None:
    """Strip the namespace prefix from a ref (`refs/heads/main` -> `main`)."""

    if ref is None:
        return None
    for prefix in _REF_PREFIXES:
        if ref.startswith(prefix):
            return ref[len(prefix) :]
    return ref


@dataclass(frozen=True, slots=True)
class Commit:
    sha: str | None = None
    short_message: str | None = None


@dataclass(frozen=True, slots=True)
class User:
    name: str | None = None
    web_url: str | None = None


@dataclass(frozen=True, slots=True)
class Repository:
    ssh_url: str | None = None


@dataclass(frozen=True, slots=True)
class SourceRepository:
    """Fork (or same repo) a pull request was opened from."""

    ssh_url: str | None = None
    owner_global_key: str | None = None


@dataclass(frozen=True, slots=True, kw_only=True)
class MergeRequest:
    number: int | None = None
    title: str | None = None
    body: str | None = None
    web_url: str | None = None
    source_branch: str | None = None
    target_branch: str | None = None
    merge_commit_sha: str | None = None
    # True only for the "opened" sub-event, not update/close/merge.
    is_create_action: bool = False


@dataclass(frozen=True, slots=True, kw_only=True)
class PullRequest(MergeRequest):
    source_repository: SourceRepository | None = None


@dataclass(frozen=True, slots=True, kw_only=True)
class _WebHookEventBase:
    token: str | None = None
    user: User | None = None
    repository: Repository | None = None


@dataclass(frozen=True, slots=True, kw_only=True)
class PushEvent(_WebHookEventBase):
    event_type: ClassVar[EventType] = EventType.PUSH

    ref: str | None = None
    before: str | None = None
    after: str | None = None
    commits: tuple[Commit, ...] = ()

    @property
    def last_commit(self) -> Commit | None:
        return self.commits[-1] if self.commits else None

    @property
    def is_new_branch(self) -> bool:
        return self.before == NULL_SHA

    @property
    def is_branch_deletion(self) -> bool:
        return self.after is None or self.after == NULL_SHA


@dataclass(frozen=True, slots=True, kw_only=True)
class MergeRequestEvent(_WebHookEventBase):
    event_type: ClassVar[EventType] = EventType.MERGE_REQUEST

    merge_request: MergeRequest


@dataclass(frozen=True, slots=True, kw_only=True)
class PullRequestEvent(_WebHookEventBase):
    event_type: ClassVar[EventType] = EventType.PULL_REQUEST

    pull_request: PullRequest


WebHookEvent = PushEvent | MergeRequestEvent | PullRequestEvent
