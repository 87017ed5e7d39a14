#!/usr/bin/env python3
"""Programmatic trigger decision example.

This demonstrates using the trigger components directly:

* parse a saved webhook delivery
* decide against a job's trigger settings
* hand triggered builds to a scheduler (here: one that prints)

The job is defined inline rather than read from `WEBHOOK_JOBS_FILE`.
"""

from __future__ import annotations

import argparse
import json
from pathlib import Path
from typing import Sequence

from webhook_build_trigger.config import JobSettings, TriggerSettings
from webhook_build_trigger.logging import configure_logging
from webhook_build_trigger.trigger.cause import CauseData
from webhook_build_trigger.trigger.engine import Job, TriggerHandler
from webhook_build_trigger.trigger.revision import RevisionPin
from webhook_build_trigger.webhook.payload import PayloadError, parse_webhook


class PrintingScheduler:
    def schedule(
        self, job: Job, quiet_period: int, cause: CauseData, revision_pin: RevisionPin | None
    ) -> None:
        print(f"Scheduling {job.full_name} in {quiet_period}s: {cause.short_description()}")
        if revision_pin is not None:
            print(f"Revision: {revision_pin.revision} ({revision_pin.repository_url})")


def _parse_args(argv: Sequence[str] | None = None) -> argparse.Namespace:
    parser = argparse.ArgumentParser(description="Decide on a saved webhook delivery.")
    parser.add_argument("--event", required=True, help="push | merge_request | pull_request")
    parser.add_argument("--payload", type=Path, required=True, help="Path to the JSON payload")
    parser.add_argument(
        "--include",
        default="",
        help='Comma-separated branch globs to build, e.g. "main,release/*" (optional)',
    )
    return parser.parse_args(argv)


def main(argv: Sequence[str] | None = None) -> int:
    args = _parse_args(argv)

    settings = TriggerSettings()
    configure_logging(settings.log_level, json_format=settings.log_json)

    job = JobSettings(
        name="example",
        branch_filter_type="NameBasedFilter" if args.include else "All",
        include_branches=args.include,
        quiet_period=5,
    )

    try:
        event = parse_webhook(args.event, json.loads(args.payload.read_text(encoding="utf-8")))
    except PayloadError as exc:
        print(str(exc))
        return 1

    if event is None:
        print(f"Event type {args.event!r} is not handled")
        return 0

    handler = TriggerHandler(job.to_trigger_config())
    decision = handler.handle(
        job, event.event_type, event, scheduler=PrintingScheduler(), ci_skip=job.ci_skip
    )
    print(json.dumps(decision.to_json(), indent=2))
    return 0


if __name__ == "__main__":
    raise SystemExit(main())
