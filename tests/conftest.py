"""Test configuration and fixtures."""

import logging
from collections.abc import Iterator
from pathlib import Path

import pytest

from webhook_build_trigger.config import JobSettings
from webhook_build_trigger.webhook.models import (
    NULL_SHA,
    Commit,
    MergeRequest,
    MergeRequestEvent,
    PullRequest,
    PullRequestEvent,
    PushEvent,
    Repository,
    SourceRepository,
    User,
)

SHA_A = "a" * 40
SHA_B = "b" * 40
REPO_SSH = "git@git.coding.net:acme/demo.git"


@pytest.fixture(autouse=True)
def restore_root_logging() -> Iterator[None]:
    """Undo `configure_logging` calls made by a test."""
    root = logging.getLogger()
    handlers = list(root.handlers)
    level = root.level
    yield
    for handler in list(root.handlers):
        if handler not in handlers and type(handler) is logging.StreamHandler:
            root.removeHandler(handler)
    root.setLevel(level)


@pytest.fixture
def push_event() -> PushEvent:
    """Provide an ordinary push of two commits to main."""
    return PushEvent(
        token="hook-token",
        user=User(name="alice", web_url="https://coding.net/u/alice"),
        repository=Repository(ssh_url=REPO_SSH),
        ref="refs/heads/main",
        before=SHA_A,
        after=SHA_B,
        commits=(
            Commit(sha="c1", short_message="First change"),
            Commit(sha="c2", short_message="Second change"),
        ),
    )


@pytest.fixture
def new_branch_push_event() -> PushEvent:
    """Provide a branch-creation push without a commit list."""
    return PushEvent(
        token="hook-token",
        repository=Repository(ssh_url=REPO_SSH),
        ref="refs/heads/main",
        before=NULL_SHA,
        after=SHA_B,
    )


@pytest.fixture
def merge_request_event() -> MergeRequestEvent:
    """Provide a newly opened merge request."""
    return MergeRequestEvent(
        token="hook-token",
        user=User(name="bob", web_url="https://coding.net/u/bob"),
        repository=Repository(ssh_url=REPO_SSH),
        merge_request=MergeRequest(
            number=7,
            title="Add feature",
            body="Implements the feature",
            web_url="https://coding.net/u/acme/p/demo/git/merge/7",
            source_branch="refs/heads/feature/x",
            target_branch="main",
            merge_commit_sha=SHA_A,
            is_create_action=True,
        ),
    )


@pytest.fixture
def pull_request_event() -> PullRequestEvent:
    """Provide a newly opened pull request from a fork."""
    return PullRequestEvent(
        token="hook-token",
        user=User(name="carol", web_url="https://coding.net/u/carol"),
        repository=Repository(ssh_url=REPO_SSH),
        pull_request=PullRequest(
            number=12,
            title="Fix typo",
            body="",
            web_url="https://coding.net/u/acme/p/demo/git/pull/12",
            source_branch="fix-typo",
            target_branch="main",
            merge_commit_sha=SHA_B,
            is_create_action=True,
            source_repository=SourceRepository(
                ssh_url="git@git.coding.net:carol/demo.git", owner_global_key="carol"
            ),
        ),
    )


@pytest.fixture
def job() -> JobSettings:
    """Provide a job with default trigger settings."""
    return JobSettings(name="demo-ci", quiet_period=5)


@pytest.fixture
def jobs_file(tmp_path: Path) -> Path:
    """Provide a jobs file with a permissive and a restricted job."""
    path = tmp_path / "jobs.json"
    path.write_text(
        """[
  {"name": "demo-ci", "ci_skip": true, "quiet_period": 3},
  {
    "name": "release-only",
    "trigger_on_push": false,
    "branch_filter_type": "NameBasedFilter",
    "include_branches": "release/*"
  }
]
""",
        encoding="utf-8",
    )
    return path
