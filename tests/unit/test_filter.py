"""Unit tests for branch filters."""

from __future__ import annotations

import re

import pytest

from webhook_build_trigger.trigger.filter import (
    AllBranchesFilter,
    BranchFilterType,
    NameBasedFilter,
    RegexBasedFilter,
    branch_matches,
    create_branch_filter,
    split_branch_specs,
)


def test_all_branches_filter_allows_everything() -> None:
    f = AllBranchesFilter()
    assert f.is_allowed("main")
    assert f.is_allowed(None)


def test_split_branch_specs() -> None:
    assert split_branch_specs(" main, release/* ,,") == ("main", "release/*")
    assert split_branch_specs(["dev", " "]) == ("dev",)
    assert split_branch_specs(None) == ()


def test_name_based_filter_include_and_exclude() -> None:
    f = NameBasedFilter(include=("main", "release/*"), exclude=("release/old-*",))

    assert f.is_allowed("main")
    assert f.is_allowed("release/1.0")
    assert not f.is_allowed("release/old-1")
    assert not f.is_allowed("feature/x")
    assert not f.is_allowed(None)


def test_name_based_filter_globs_stay_within_a_segment() -> None:
    f = NameBasedFilter(include=("release/*",))

    assert f.is_allowed("release/1.0")
    assert not f.is_allowed("release/1.0/hotfix")
    assert NameBasedFilter(include=("release/**",)).is_allowed("release/1.0/hotfix")


@pytest.mark.parametrize(
    ("branch", "spec", "expected"),
    [
        ("main", "main", True),
        ("main", "ma*", True),
        ("feature/x", "*", False),
        ("feature/x", "*/*", True),
        ("a/b/hotfix", "**/hotfix", True),
        ("hotfix", "**/hotfix", True),
        ("a/b/hotfix", "a/**", True),
        ("release/1.0", "Release/*", False),
    ],
)
def test_branch_matches(branch: str, spec: str, expected: bool) -> None:
    assert branch_matches(branch, spec) is expected


def test_name_based_filter_exclude_only() -> None:
    f = NameBasedFilter(exclude=("release/*",))

    assert f.is_allowed("main")
    assert not f.is_allowed("release/1.0")


def test_name_based_filter_without_specs_allows_everything() -> None:
    assert NameBasedFilter().is_allowed(None)
    assert NameBasedFilter().is_allowed("anything")


def test_regex_filter() -> None:
    f = RegexBasedFilter(pattern=r"(main|release/.*)")

    assert f.is_allowed("main")
    assert f.is_allowed("release/2.0")
    assert not f.is_allowed("mainline")
    # Nothing to match against: allowed.
    assert f.is_allowed(None)
    assert RegexBasedFilter().is_allowed("feature/x")


def test_create_branch_filter() -> None:
    assert isinstance(create_branch_filter(), AllBranchesFilter)

    name_based = create_branch_filter("NameBasedFilter", include="main", exclude="tmp/*")
    assert name_based == NameBasedFilter(include=("main",), exclude=("tmp/*",))

    regex = create_branch_filter(BranchFilterType.REGEX_BASED, pattern="main")
    assert regex == RegexBasedFilter(pattern="main")


def test_create_branch_filter_rejects_invalid_regex() -> None:
    with pytest.raises(re.error):
        create_branch_filter(BranchFilterType.REGEX_BASED, pattern="(unclosed")
