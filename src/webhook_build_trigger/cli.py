"""CLI entrypoint: evaluate a saved webhook delivery against a job's trigger settings."""

from __future__ import annotations

import argparse
import json
import logging
import sys
from pathlib import Path

from pydantic import ValidationError

from webhook_build_trigger import __version__
from webhook_build_trigger.config import JobSettings, TriggerSettings, load_jobs
from webhook_build_trigger.logging import configure_logging
from webhook_build_trigger.trigger.engine import Skip, SkipReason, TriggerHandler
from webhook_build_trigger.trigger.filter import BranchFilterType
from webhook_build_trigger.webhook.payload import parse_webhook

logger = logging.getLogger(__name__)


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="webhook-build-trigger",
        description="Decide whether repository webhook deliveries should trigger a build",
    )
    parser.add_argument(
        "--version", action="version", version=f"webhook-build-trigger {__version__}"
    )

    subparsers = parser.add_subparsers(dest="command", required=True)

    decide = subparsers.add_parser(
        "decide", help="Print the trigger decision for a webhook payload file"
    )
    decide.add_argument(
        "--event",
        required=True,
        help="Webhook event type: push | merge_request | pull_request",
    )
    decide.add_argument(
        "--payload", type=Path, required=True, help="Path to the JSON webhook payload"
    )
    decide.add_argument(
        "--job",
        default=None,
        help="Use the settings of this job from the jobs file instead of the flags below",
    )
    decide.add_argument(
        "--jobs-file",
        type=Path,
        default=None,
        help="Jobs file (defaults to WEBHOOK_JOBS_FILE)",
    )
    decide.add_argument(
        "--no-trigger-on-push", action="store_true", help="Never build on push events"
    )
    decide.add_argument(
        "--no-trigger-on-merge-request",
        action="store_true",
        help="Never build on merge request / pull request events",
    )
    decide.add_argument(
        "--ci-skip", action="store_true", help="Honour the [ci-skip] directive"
    )
    decide.add_argument(
        "--include",
        default="",
        help="Comma-separated branch globs to allow, e.g. 'main,release/*'",
    )
    decide.add_argument("--exclude", default="", help="Comma-separated branch globs to reject")
    decide.add_argument(
        "--regex", default="", help="Regular expression the target branch must fully match"
    )

    return parser


def _job_from_args(args: argparse.Namespace) -> JobSettings:
    if args.regex:
        filter_type = BranchFilterType.REGEX_BASED
    elif args.include or args.exclude:
        filter_type = BranchFilterType.NAME_BASED
    else:
        filter_type = BranchFilterType.ALL
    return JobSettings(
        name="cli",
        trigger_on_push=not args.no_trigger_on_push,
        trigger_on_merge_request=not args.no_trigger_on_merge_request,
        ci_skip=args.ci_skip,
        branch_filter_type=filter_type,
        include_branches=args.include,
        exclude_branches=args.exclude,
        target_branch_regex=args.regex,
    )


def _resolve_job(args: argparse.Namespace, settings: TriggerSettings) -> JobSettings:
    if args.job is None:
        return _job_from_args(args)
    jobs_file = args.jobs_file or settings.jobs_file
    jobs = load_jobs(jobs_file)
    job = jobs.get(args.job)
    if job is None:
        raise ValueError(f"Job {args.job!r} is not defined in {jobs_file}")
    return job


def main(argv: list[str] | None = None) -> int:
    parser = build_parser()
    args = parser.parse_args(argv)

    try:
        settings = TriggerSettings()
    except ValidationError as e:
        # Logging isn't configured yet.
        print("Configuration error (check your .env):", file=sys.stderr)
        print(e, file=sys.stderr)
        return 2

    # stdout carries the decision document.
    configure_logging(settings.log_level, json_format=settings.log_json, stream=sys.stderr)

    try:
        job = _resolve_job(args, settings)
    except (ValidationError, ValueError) as e:
        print(f"Configuration error: {e}", file=sys.stderr)
        return 2

    try:
        raw = json.loads(args.payload.read_text(encoding="utf-8"))
        event = parse_webhook(args.event, raw)
    except (OSError, ValueError) as e:
        # PayloadError and JSONDecodeError are both ValueErrors.
        logger.error("Could not read webhook payload", extra={"path": str(args.payload)})
        print(f"Payload error: {e}", file=sys.stderr)
        return 1

    if event is None:
        decision = Skip(SkipReason.UNSUPPORTED_EVENT)
    else:
        handler = TriggerHandler(job.to_trigger_config())
        decision = handler.decide(event.event_type, event, job=job, ci_skip=job.ci_skip)

    print(json.dumps(decision.to_json(), indent=2, ensure_ascii=False))
    return 0


if __name__ == "__main__":
    raise SystemExit(main())
