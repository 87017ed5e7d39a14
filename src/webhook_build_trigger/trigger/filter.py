"""Branch filters applied to the target branch of an event."""

from __future__ import annotations

import re
from collections.abc import Iterable
from dataclasses import dataclass
from enum import Enum
from fnmatch import fnmatchcase
from typing import Protocol


class BranchFilter(Protocol):
    def is_allowed(self, branch: str | None) -> bool: ...


class BranchFilterType(str, Enum):
    ALL = "All"
    NAME_BASED = "NameBasedFilter"
    REGEX_BASED = "RegexBasedFilter"


def split_branch_specs(value: str | Iterable[str] | None) -> tuple[str, ...]:
    """Split a comma-separated spec string (or iterable of specs) into clean entries."""

    if value is None:
        return ()
    parts = value.split(",") if isinstance(value, str) else list(value)
    return tuple(p.strip() for p in parts if p and p.strip())


def _match_segments(parts: list[str], specs: list[str]) -> bool:
    if not specs:
        return not parts
    head, rest = specs[0], specs[1:]
    if head == "**":
        return any(_match_segments(parts[i:], rest) for i in range(len(parts) + 1))
    return bool(parts) and fnmatchcase(parts[0], head) and _match_segments(parts[1:], rest)


def branch_matches(branch: str, spec: str) -> bool:
    """Glob-match `branch` against `spec` one path segment at a time."""

    return _match_segments(branch.split("/"), spec.split("/"))


@dataclass(frozen=True, slots=True)
class AllBranchesFilter:
    def is_allowed(self, branch: str | None) -> bool:
        return True


@dataclass(frozen=True, slots=True)
class NameBasedFilter:
    """Glob include/exclude lists, e.g. include `main,release/*`, exclude `release/old-*`.

    Specs match per `/`-separated segment: `*` stays inside one segment and `**`
    spans any number of them, so `release/*` allows `release/1.0` but not
    `release/1.0/hotfix`, while `release/**` allows both. An empty include list
    includes every branch. Exclusion wins over inclusion.
    """

    include: tuple[str, ...] = ()
    exclude: tuple[str, ...] = ()

    def is_allowed(self, branch: str | None) -> bool:
        if not self.include and not self.exclude:
            return True
        if branch is None:
            return False
        return self._is_included(branch) and not self._is_excluded(branch)

    def _is_included(self, branch: str) -> bool:
        return not self.include or any(branch_matches(branch, spec) for spec in self.include)

    def _is_excluded(self, branch: str) -> bool:
        return any(branch_matches(branch, spec) for spec in self.exclude)


@dataclass(frozen=True, slots=True)
class RegexBasedFilter:
    pattern: str = ""

    def is_allowed(self, branch: str | None) -> bool:
        if not self.pattern or not branch:
            return True
        return re.fullmatch(self.pattern, branch) is not None


def create_branch_filter(
    filter_type: BranchFilterType | str = BranchFilterType.ALL,
    *,
    include: str | Iterable[str] | None = None,
    exclude: str | Iterable[str] | None = None,
    pattern: str | None = None,
) -> BranchFilter:
    kind = BranchFilterType(filter_type)
    if kind is BranchFilterType.NAME_BASED:
        return NameBasedFilter(
            include=split_branch_specs(include), exclude=split_branch_specs(exclude)
        )
    if kind is BranchFilterType.REGEX_BASED:
        if pattern:
            re.compile(pattern)
        return RegexBasedFilter(pattern=pattern or "")
    return AllBranchesFilter()
