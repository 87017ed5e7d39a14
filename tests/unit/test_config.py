"""Unit tests for settings and job definitions."""

from __future__ import annotations

from pathlib import Path

import pytest
from pydantic import ValidationError

from webhook_build_trigger.config import JobSettings, TriggerSettings, load_jobs
from webhook_build_trigger.trigger.filter import (
    AllBranchesFilter,
    BranchFilterType,
    NameBasedFilter,
    RegexBasedFilter,
)


def _clear_env(monkeypatch: pytest.MonkeyPatch) -> None:
    for name in ("LOG_LEVEL", "LOG_JSON", "WEBHOOK_JOBS_FILE", "BUILD_HISTORY_LIMIT"):
        monkeypatch.delenv(name, raising=False)


def test_settings_defaults(tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> None:
    _clear_env(monkeypatch)
    monkeypatch.chdir(tmp_path)

    settings = TriggerSettings()

    assert settings.log_level == "INFO"
    assert settings.log_json is True
    assert settings.jobs_file == Path("jobs.json")
    assert settings.build_history_limit == 1000


def test_settings_loads_from_dotenv(tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> None:
    _clear_env(monkeypatch)
    monkeypatch.chdir(tmp_path)
    (tmp_path / ".env").write_text(
        "\n".join(["LOG_LEVEL=DEBUG", "LOG_JSON=false", "WEBHOOK_JOBS_FILE=conf/jobs.json", ""]),
        encoding="utf-8",
    )

    settings = TriggerSettings()

    assert settings.log_level == "DEBUG"
    assert settings.log_json is False
    assert settings.jobs_file == Path("conf/jobs.json")


def test_settings_rejects_unknown_log_level(
    tmp_path: Path, monkeypatch: pytest.MonkeyPatch
) -> None:
    _clear_env(monkeypatch)
    monkeypatch.chdir(tmp_path)
    monkeypatch.setenv("LOG_LEVEL", "LOUD")

    with pytest.raises(ValidationError):
        TriggerSettings()


def test_settings_rejects_empty_build_history(
    tmp_path: Path, monkeypatch: pytest.MonkeyPatch
) -> None:
    _clear_env(monkeypatch)
    monkeypatch.chdir(tmp_path)
    monkeypatch.setenv("BUILD_HISTORY_LIMIT", "0")

    with pytest.raises(ValidationError):
        TriggerSettings()


def test_job_defaults() -> None:
    job = JobSettings(name="demo")

    assert job.trigger_on_push is True
    assert job.trigger_on_merge_request is True
    assert job.ci_skip is True
    assert job.quiet_period == 0
    assert job.full_name == "demo"

    config = job.to_trigger_config()
    assert isinstance(config.branch_filter, AllBranchesFilter)


def test_job_builds_branch_filters() -> None:
    name_based = JobSettings(
        name="a",
        branch_filter_type=BranchFilterType.NAME_BASED,
        include_branches="main, release/*",
        exclude_branches="release/old",
    ).to_trigger_config()
    regex_based = JobSettings(
        name="b", branch_filter_type="RegexBasedFilter", target_branch_regex="main|dev"
    ).to_trigger_config()

    assert name_based.branch_filter == NameBasedFilter(
        include=("main", "release/*"), exclude=("release/old",)
    )
    assert regex_based.branch_filter == RegexBasedFilter(pattern="main|dev")


def test_job_validation() -> None:
    with pytest.raises(ValidationError):
        JobSettings(name="")
    with pytest.raises(ValidationError):
        JobSettings(name="a", quiet_period=-1)
    with pytest.raises(ValidationError):
        JobSettings(name="a", target_branch_regex="(unclosed")


def test_load_jobs(jobs_file: Path) -> None:
    jobs = load_jobs(jobs_file)

    assert sorted(jobs) == ["demo-ci", "release-only"]
    assert jobs["demo-ci"].quiet_period == 3
    assert jobs["release-only"].trigger_on_push is False
    assert jobs["release-only"].branch_filter_type is BranchFilterType.NAME_BASED


def test_load_jobs_missing_file(tmp_path: Path) -> None:
    assert load_jobs(tmp_path / "absent.json") == {}


def test_load_jobs_rejects_duplicates(tmp_path: Path) -> None:
    path = tmp_path / "jobs.json"
    path.write_text('[{"name": "a"}, {"name": "a"}]', encoding="utf-8")

    with pytest.raises(ValueError, match="Duplicate job name"):
        load_jobs(path)
