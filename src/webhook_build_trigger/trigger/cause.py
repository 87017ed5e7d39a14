"""Build cause record: why a build was requested and from what source."""

from __future__ import annotations

from dataclasses import asdict, dataclass

from webhook_build_trigger.trigger.classifier import ActionType
from webhook_build_trigger.webhook.models import (
    MergeRequest,
    MergeRequestEvent,
    PullRequestEvent,
    PushEvent,
    WebHookEvent,
    shorten_ref,
)


@dataclass(frozen=True, slots=True)
class CauseData:
    """Immutable audit record handed to the scheduler with the build.

    Only `action_type` is mandatory; every other field is left unset when the
    delivery does not carry it.
    """

    action_type: ActionType
    token: str | None = None
    user_name: str | None = None
    user_url: str | None = None
    ref: str | None = None
    before: str | None = None
    after: str | None = None
    repo_url: str | None = None
    merge_request_iid: int | None = None
    merge_request_title: str | None = None
    merge_request_body: str | None = None
    merge_request_url: str | None = None
    source_branch: str | None = None
    source_repo_url: str | None = None
    source_user: str | None = None
    target_branch: str | None = None

    def to_json(self) -> dict[str, object]:
        out: dict[str, object] = {}
        for key, value in asdict(self).items():
            if value is None:
                continue
            out[key] = value.value if isinstance(value, ActionType) else value
        return out

    def short_description(self) -> str:
        if self.action_type is ActionType.PUSH:
            who = f" by {self.user_name}" if self.user_name else ""
            return f"Triggered by push to {shorten_ref(self.ref) or 'unknown ref'}{who}"
        kind = "merge request" if self.action_type is ActionType.MR else "pull request"
        number = f" #{self.merge_request_iid}" if self.merge_request_iid is not None else ""
        return (
            f"Triggered by {kind}{number}: "
            f"{self.source_branch or '?'} => {self.target_branch or '?'}"
        )


def _request_fields(request: MergeRequest) -> dict[str, object]:
    return {
        "merge_request_iid": request.number,
        "merge_request_title": request.title,
        "merge_request_body": request.body,
        "merge_request_url": request.web_url,
        "source_branch": shorten_ref(request.source_branch),
        "target_branch": shorten_ref(request.target_branch),
    }


def build_cause_data(event: WebHookEvent, action_type: ActionType) -> CauseData:
    fields: dict[str, object] = {"token": event.token}

    if event.user is not None:
        fields["user_name"] = event.user.name
        fields["user_url"] = event.user.web_url
    if event.repository is not None:
        fields["repo_url"] = event.repository.ssh_url

    if isinstance(event, PushEvent):
        fields.update(ref=event.ref, before=event.before, after=event.after)
    elif isinstance(event, MergeRequestEvent):
        fields.update(_request_fields(event.merge_request))
    elif isinstance(event, PullRequestEvent):
        pr = event.pull_request
        fields.update(_request_fields(pr))
        if pr.source_repository is not None:
            fields["source_repo_url"] = pr.source_repository.ssh_url
            fields["source_user"] = pr.source_repository.owner_global_key

    return CauseData(action_type=action_type, **fields)  # type: ignore[arg-type]
