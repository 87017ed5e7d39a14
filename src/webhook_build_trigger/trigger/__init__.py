"""Build trigger decision core.

Pure functions over `WebHookEvent` values:
- classification of the delivery
- `[ci-skip]` directive detection
- revision resolution
- cause data construction
- the ordered decision in `TriggerHandler`
"""

from __future__ import annotations

from webhook_build_trigger.trigger.cause import CauseData, build_cause_data
from webhook_build_trigger.trigger.classifier import ActionType, Classification, classify
from webhook_build_trigger.trigger.engine import (
    BuildRequest,
    Decision,
    Job,
    Scheduler,
    Skip,
    SkipReason,
    Trigger,
    TriggerConfig,
    TriggerHandler,
)
from webhook_build_trigger.trigger.filter import (
    AllBranchesFilter,
    BranchFilter,
    BranchFilterType,
    NameBasedFilter,
    RegexBasedFilter,
    branch_matches,
    create_branch_filter,
)
from webhook_build_trigger.trigger.revision import (
    NoRevisionToBuild,
    RepositoryUrl,
    RepositoryUrlUnparsable,
    RevisionPin,
    parse_repository_url,
    retrieve_revision,
)
from webhook_build_trigger.trigger.skip import CI_SKIP, is_ci_skip

__all__ = [
    "CI_SKIP",
    "ActionType",
    "AllBranchesFilter",
    "BranchFilter",
    "BranchFilterType",
    "BuildRequest",
    "CauseData",
    "Classification",
    "Decision",
    "Job",
    "NameBasedFilter",
    "NoRevisionToBuild",
    "RegexBasedFilter",
    "RepositoryUrl",
    "RepositoryUrlUnparsable",
    "RevisionPin",
    "Scheduler",
    "Skip",
    "SkipReason",
    "Trigger",
    "TriggerConfig",
    "TriggerHandler",
    "branch_matches",
    "build_cause_data",
    "classify",
    "create_branch_filter",
    "is_ci_skip",
    "parse_repository_url",
    "retrieve_revision",
]
