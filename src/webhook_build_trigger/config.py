"""Configuration for the webhook build trigger.

Process settings are loaded from environment variables and a local `.env` file.
Per-job trigger settings live in a JSON file (`WEBHOOK_JOBS_FILE`), e.g.:

[
  {
    "name": "demo-ci",
    "trigger_on_push": true,
    "trigger_on_merge_request": true,
    "ci_skip": true,
    "quiet_period": 5,
    "branch_filter_type": "NameBasedFilter",
    "include_branches": "main,release/*",
    "exclude_branches": ""
  }
]
"""

from __future__ import annotations

import json
import re
from pathlib import Path

from pydantic import BaseModel, Field, TypeAdapter, field_validator, model_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

from webhook_build_trigger.trigger.engine import TriggerConfig
from webhook_build_trigger.trigger.filter import BranchFilterType, create_branch_filter


class JobSettings(BaseModel):
    """Trigger settings for one job."""

    name: str = Field(min_length=1, description="Job name, used in the webhook URL")
    trigger_on_push: bool = Field(default=True, description="Build on push events")
    trigger_on_merge_request: bool = Field(
        default=True, description="Build on newly opened merge requests and pull requests"
    )
    ci_skip: bool = Field(
        default=True,
        description="Honour a `[ci-skip]` marker in the last commit message or MR/PR title",
    )
    quiet_period: int = Field(default=0, ge=0, description="Seconds to wait before building")

    branch_filter_type: BranchFilterType = BranchFilterType.ALL
    include_branches: str = ""
    exclude_branches: str = ""
    target_branch_regex: str = ""

    @field_validator("target_branch_regex")
    @classmethod
    def _validate_regex(cls, v: str) -> str:
        try:
            re.compile(v)
        except re.error as e:
            raise ValueError(f"target_branch_regex is not a valid regular expression: {e}") from e
        return v

    @property
    def full_name(self) -> str:
        return self.name

    def to_trigger_config(self) -> TriggerConfig:
        return TriggerConfig(
            trigger_on_push=self.trigger_on_push,
            trigger_on_merge_request=self.trigger_on_merge_request,
            branch_filter=create_branch_filter(
                self.branch_filter_type,
                include=self.include_branches,
                exclude=self.exclude_branches,
                pattern=self.target_branch_regex,
            ),
        )


_JOB_LIST = TypeAdapter(list[JobSettings])


def load_jobs(path: Path) -> dict[str, JobSettings]:
    """Load job definitions keyed by name. A missing file means no jobs."""

    if not path.exists():
        return {}
    raw = json.loads(path.read_text(encoding="utf-8"))
    jobs = _JOB_LIST.validate_python(raw)
    by_name: dict[str, JobSettings] = {}
    for job in jobs:
        if job.name in by_name:
            raise ValueError(f"Duplicate job name in {path}: {job.name}")
        by_name[job.name] = job
    return by_name


class TriggerSettings(BaseSettings):
    """Process settings.

    Environment variables:
    - LOG_LEVEL          (optional)
    - LOG_JSON           (optional, JSON log lines when true)
    - WEBHOOK_JOBS_FILE  (optional)
    - BUILD_HISTORY_LIMIT (optional, builds listed by the receiver)

    Notes:
        Tests can point at a different env file via
        `TriggerSettings(_env_file=path_to_env)`.
    """

    log_level: str = Field(
        default="INFO",
        validation_alias="LOG_LEVEL",
        description="Root logging level",
    )
    log_json: bool = Field(
        default=True,
        validation_alias="LOG_JSON",
        description="Emit JSON log lines instead of plain text",
    )
    jobs_file: Path = Field(
        default=Path("jobs.json"),
        validation_alias="WEBHOOK_JOBS_FILE",
        description="JSON file holding the job trigger definitions",
    )
    build_history_limit: int = Field(
        default=1000,
        ge=1,
        validation_alias="BUILD_HISTORY_LIMIT",
        description="Scheduled builds kept in memory for /api/builds",
    )

    model_config = SettingsConfigDict(
        env_prefix="",
        env_file=".env",
        extra="ignore",
    )

    @model_validator(mode="after")
    def _check_log_level(self) -> TriggerSettings:
        if self.log_level.upper() not in {"CRITICAL", "ERROR", "WARNING", "INFO", "DEBUG"}:
            raise ValueError(f"LOG_LEVEL must be a standard logging level, got {self.log_level!r}")
        return self

    def load_jobs(self) -> dict[str, JobSettings]:
        return load_jobs(self.jobs_file)
