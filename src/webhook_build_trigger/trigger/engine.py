"""Trigger decision: classify, short-circuit, then assemble a build request.

Evaluation order is fixed:
  1. classify the delivery (unsupported -> skip)
  2. `[ci-skip]` directive, when enabled
  3. branch filter on the target branch
  4. per-job trigger flags
  5. cause data, revision and repository URL (failures degrade, never abort)

The engine holds no mutable state and performs no I/O besides logging, so a single
handler may serve concurrent deliveries.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from enum import Enum
from typing import Protocol

from webhook_build_trigger.trigger.cause import CauseData, build_cause_data
from webhook_build_trigger.trigger.classifier import ActionType, classify
from webhook_build_trigger.trigger.filter import AllBranchesFilter, BranchFilter
from webhook_build_trigger.trigger.revision import (
    NoRevisionToBuild,
    RepositoryUrl,
    RepositoryUrlUnparsable,
    RevisionPin,
    parse_repository_url,
    retrieve_revision,
)
from webhook_build_trigger.trigger.skip import is_ci_skip
from webhook_build_trigger.webhook.models import EventType, WebHookEvent

logger = logging.getLogger(__name__)


class SkipReason(str, Enum):
    UNSUPPORTED_EVENT = "unsupported_event"
    CI_SKIP_REQUESTED = "ci_skip_requested"
    BRANCH_NOT_ALLOWED = "branch_not_allowed"
    TRIGGER_DISABLED_BY_CONFIG = "trigger_disabled_by_config"


class Job(Protocol):
    """The caller's job handle. Only its name and quiet period are read."""

    @property
    def full_name(self) -> str: ...

    @property
    def quiet_period(self) -> int: ...


class Scheduler(Protocol):
    def schedule(
        self,
        job: Job,
        quiet_period: int,
        cause: CauseData,
        revision_pin: RevisionPin | None,
    ) -> None: ...


@dataclass(frozen=True, slots=True)
class TriggerConfig:
    trigger_on_push: bool = True
    # Governs both merge requests and pull requests.
    trigger_on_merge_request: bool = True
    branch_filter: BranchFilter = AllBranchesFilter()


@dataclass(frozen=True, slots=True)
class BuildRequest:
    cause: CauseData
    revision: str | None = None
    repository_url: RepositoryUrl | None = None
    job: Job | None = None

    @property
    def revision_pin(self) -> RevisionPin | None:
        if self.revision is None:
            return None
        return RevisionPin(revision=self.revision, repository_url=self.repository_url)

    def to_json(self) -> dict[str, object]:
        return {
            "revision": self.revision,
            "repository_url": str(self.repository_url) if self.repository_url else None,
            "cause": self.cause.to_json(),
        }


@dataclass(frozen=True, slots=True)
class Trigger:
    request: BuildRequest

    def to_json(self) -> dict[str, object]:
        return {"decision": "trigger", **self.request.to_json()}


@dataclass(frozen=True, slots=True)
class Skip:
    reason: SkipReason

    def to_json(self) -> dict[str, object]:
        return {"decision": "skip", "reason": self.reason.value}


Decision = Trigger | Skip


def _job_name(job: Job | None) -> str | None:
    return job.full_name if job is not None else None


class TriggerHandler:
    """Decides whether a webhook delivery should build a job."""

    def __init__(self, config: TriggerConfig) -> None:
        self._config = config

    @property
    def config(self) -> TriggerConfig:
        return self._config

    def decide(
        self,
        event_type: EventType | str | None,
        event: WebHookEvent,
        *,
        job: Job | None = None,
        ci_skip: bool = False,
    ) -> Decision:
        classification = classify(event_type, event)
        action_type = classification.action_type
        if action_type is None:
            return Skip(SkipReason.UNSUPPORTED_EVENT)

        if ci_skip and is_ci_skip(event, action_type):
            logger.info("Skipping due to ci-skip.", extra={"job": _job_name(job)})
            return Skip(SkipReason.CI_SKIP_REQUESTED)

        branch = classification.target_branch
        if not self._config.branch_filter.is_allowed(branch):
            logger.info(
                "Branch %s is not allowed", branch, extra={"job": _job_name(job), "branch": branch}
            )
            return Skip(SkipReason.BRANCH_NOT_ALLOWED)

        enabled = (
            self._config.trigger_on_push
            if action_type is ActionType.PUSH
            else self._config.trigger_on_merge_request
        )
        if not (classification.considered and enabled):
            logger.debug(
                "Trigger disabled for %s events",
                action_type.value,
                extra={"job": _job_name(job)},
            )
            return Skip(SkipReason.TRIGGER_DISABLED_BY_CONFIG)

        return Trigger(self._build_request(event, action_type, job))

    def handle(
        self,
        job: Job,
        event_type: EventType | str | None,
        event: WebHookEvent,
        *,
        scheduler: Scheduler,
        ci_skip: bool = False,
    ) -> Decision:
        """Decide and, on a trigger, hand the request to `scheduler`."""

        decision = self.decide(event_type, event, job=job, ci_skip=ci_skip)
        if isinstance(decision, Trigger):
            request = decision.request
            quiet_period = max(0, job.quiet_period)
            scheduler.schedule(job, quiet_period, request.cause, request.revision_pin)
            logger.info(
                "Build scheduled",
                extra={
                    "job": job.full_name,
                    "action_type": request.cause.action_type.value,
                    "revision": request.revision,
                    "quiet_period": quiet_period,
                },
            )
        return decision

    def _build_request(
        self, event: WebHookEvent, action_type: ActionType, job: Job | None
    ) -> BuildRequest:
        cause = build_cause_data(event, action_type)

        revision: str | None = None
        try:
            revision = retrieve_revision(event, action_type)
        except NoRevisionToBuild as e:
            logger.warning(
                "Unable to build for req %s for job %s: %s",
                event,
                _job_name(job),
                e,
                extra={"job": _job_name(job), "action_type": action_type.value},
            )

        repository_url: RepositoryUrl | None = None
        if event.repository is not None:
            try:
                repository_url = parse_repository_url(event.repository.ssh_url)
            except RepositoryUrlUnparsable as e:
                logger.warning(
                    "could not parse URL",
                    extra={"job": _job_name(job), "url": event.repository.ssh_url, "error": str(e)},
                )

        return BuildRequest(cause=cause, revision=revision, repository_url=repository_url, job=job)
