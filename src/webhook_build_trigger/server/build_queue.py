"""In-memory build queue backing the webhook receiver.

Implements the `Scheduler` protocol. Entries are not persisted: build history is
owned by the build system, not by this service. Only the most recent
`max_entries` builds are kept.
"""

from __future__ import annotations

import threading
import uuid
from collections import deque
from dataclasses import dataclass
from datetime import UTC, datetime, timedelta
from typing import Any

from pydantic import BaseModel

from webhook_build_trigger.trigger.cause import CauseData
from webhook_build_trigger.trigger.engine import Job
from webhook_build_trigger.trigger.revision import RevisionPin


class ScheduledBuild(BaseModel):
    build_id: str
    job: str
    quiet_period: int
    scheduled_at: datetime
    not_before: datetime
    cause: dict[str, Any]

    revision: str | None = None
    repository_url: str | None = None


@dataclass
class BuildQueue:
    max_entries: int = 1000

    def __post_init__(self) -> None:
        if self.max_entries < 1:
            raise ValueError(f"max_entries must be positive, got {self.max_entries}")
        self._builds: deque[ScheduledBuild] = deque(maxlen=self.max_entries)
        self._lock = threading.Lock()

    def schedule(
        self,
        job: Job,
        quiet_period: int,
        cause: CauseData,
        revision_pin: RevisionPin | None,
    ) -> None:
        now = datetime.now(tz=UTC)
        repository_url = None
        if revision_pin is not None and revision_pin.repository_url is not None:
            repository_url = str(revision_pin.repository_url)
        build = ScheduledBuild(
            build_id=uuid.uuid4().hex,
            job=job.full_name,
            quiet_period=quiet_period,
            scheduled_at=now,
            not_before=now + timedelta(seconds=quiet_period),
            revision=revision_pin.revision if revision_pin is not None else None,
            repository_url=repository_url,
            cause=cause.to_json(),
        )
        with self._lock:
            self._builds.append(build)

    def list(self, job: str | None = None) -> list[ScheduledBuild]:
        with self._lock:
            builds = list(self._builds)
        if job is None:
            return builds
        return [b for b in builds if b.job == job]

    def clear(self) -> None:
        with self._lock:
            self._builds.clear()
