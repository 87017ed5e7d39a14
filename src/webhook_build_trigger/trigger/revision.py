"""Revision and repository URL resolution for a triggered build."""

from __future__ import annotations

import re
from dataclasses import dataclass
from urllib.parse import urlparse

from webhook_build_trigger.trigger.classifier import ActionType
from webhook_build_trigger.webhook.models import (
    MergeRequestEvent,
    PullRequestEvent,
    PushEvent,
    WebHookEvent,
)

_URL_SCHEMES: frozenset[str] = frozenset(
    {"ssh", "git", "git+ssh", "ssh+git", "http", "https", "ftp", "ftps", "file"}
)

# user@host:path, the scp-like syntax git accepts for ssh remotes.
_SCP_LIKE = re.compile(r"^(?:(?P<user>[^@/\s]+)@)?(?P<host>[^:/\s]+):(?P<path>[^\s]+)$")


class NoRevisionToBuild(ValueError):
    pass


class RepositoryUrlUnparsable(ValueError):
    pass


@dataclass(frozen=True, slots=True)
class RepositoryUrl:
    """A parsed git remote URL."""

    path: str
    scheme: str | None = None
    user: str | None = None
    host: str | None = None
    port: int | None = None
    raw: str = ""

    def __str__(self) -> str:
        return self.raw


@dataclass(frozen=True, slots=True)
class RevisionPin:
    """Pins a scheduled build to a commit of a repository."""

    revision: str
    repository_url: RepositoryUrl | None = None


def retrieve_revision(event: WebHookEvent, action_type: ActionType | None) -> str:
    """Return the commit to build, or raise NoRevisionToBuild."""

    revision: str | None = None
    if action_type is ActionType.PUSH and isinstance(event, PushEvent):
        if not event.commits and event.is_new_branch:
            revision = event.after
        elif event.commits:
            revision = event.commits[-1].sha
    elif action_type is ActionType.MR and isinstance(event, MergeRequestEvent):
        revision = event.merge_request.merge_commit_sha
    elif action_type is ActionType.PR and isinstance(event, PullRequestEvent):
        revision = event.pull_request.merge_commit_sha

    if not revision:
        raise NoRevisionToBuild("No revision to build")
    return revision


def parse_repository_url(url: str | None) -> RepositoryUrl:
    """Parse `ssh://`, `https://`, `file://` style URLs and `git@host:owner/repo.git`."""

    if url is None or not url.strip():
        raise RepositoryUrlUnparsable("Repository URL is empty")
    value = url.strip()

    if "://" in value:
        parsed = urlparse(value)
        scheme = parsed.scheme.lower()
        if scheme not in _URL_SCHEMES:
            raise RepositoryUrlUnparsable(f"Unsupported URL scheme: {parsed.scheme!r}")
        try:
            port = parsed.port
        except ValueError as e:
            raise RepositoryUrlUnparsable(f"Invalid port in {value!r}") from e
        if scheme != "file" and not parsed.hostname:
            raise RepositoryUrlUnparsable(f"Missing host in {value!r}")
        if not parsed.path or parsed.path == "/":
            raise RepositoryUrlUnparsable(f"Missing repository path in {value!r}")
        return RepositoryUrl(
            path=parsed.path,
            scheme=scheme,
            user=parsed.username,
            host=parsed.hostname,
            port=port,
            raw=value,
        )

    match = _SCP_LIKE.match(value)
    if match is not None:
        return RepositoryUrl(
            path=match.group("path"),
            user=match.group("user"),
            host=match.group("host"),
            raw=value,
        )

    if value.startswith("/"):
        return RepositoryUrl(path=value, raw=value)

    raise RepositoryUrlUnparsable(f"Cannot parse repository URL {value!r}")
