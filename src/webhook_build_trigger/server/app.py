"""FastAPI app factory for the webhook receiver.

Routes are thin: parse the delivery, run `TriggerHandler.handle` for the addressed
job, return the decision. Signature verification happens upstream.

With no `scheduler` given, builds go to an in-memory `BuildQueue` listed at
`/api/builds`. An injected scheduler owns its own history, so that route is not
registered.
"""

from __future__ import annotations

import logging
from typing import Any

from fastapi import Body, FastAPI, Header, HTTPException

from webhook_build_trigger import __version__
from webhook_build_trigger.config import JobSettings, TriggerSettings
from webhook_build_trigger.server.build_queue import BuildQueue, ScheduledBuild
from webhook_build_trigger.trigger.engine import Scheduler, Skip, SkipReason, TriggerHandler
from webhook_build_trigger.webhook.payload import PayloadError, parse_webhook

logger = logging.getLogger(__name__)


def create_app(
    settings: TriggerSettings | None = None,
    scheduler: Scheduler | None = None,
) -> FastAPI:
    settings = settings or TriggerSettings()
    jobs: dict[str, JobSettings] = settings.load_jobs()
    handlers = {name: TriggerHandler(job.to_trigger_config()) for name, job in jobs.items()}
    queue: BuildQueue | None = None
    target: Scheduler
    if scheduler is None:
        queue = target = BuildQueue(max_entries=settings.build_history_limit)
    else:
        target = scheduler

    app = FastAPI(
        title="Webhook Build Trigger",
        version=__version__,
        description="Decides whether repository webhook deliveries should build a job.",
        openapi_url="/api/openapi.json",
        docs_url="/api/docs",
        redoc_url="/api/redoc",
    )
    app.state.settings = settings
    app.state.build_queue = queue

    @app.get("/api/health")
    def health() -> dict[str, str]:
        return {"status": "ok"}

    @app.post("/api/webhook/{job_name}")
    def receive_webhook(
        job_name: str,
        payload: Any = Body(...),
        x_coding_event: str | None = Header(default=None),
    ) -> dict[str, Any]:
        job = jobs.get(job_name)
        if job is None:
            raise HTTPException(status_code=404, detail=f"Unknown job: {job_name}")

        try:
            event = parse_webhook(x_coding_event, payload)
        except PayloadError as e:
            logger.warning("Rejected webhook payload", extra={"job": job_name, "error": str(e)})
            raise HTTPException(status_code=400, detail=str(e)) from e

        if event is None:
            return Skip(SkipReason.UNSUPPORTED_EVENT).to_json()

        decision = handlers[job_name].handle(
            job, event.event_type, event, scheduler=target, ci_skip=job.ci_skip
        )
        return decision.to_json()

    if queue is not None:
        build_queue = queue

        @app.get("/api/builds", response_model=list[ScheduledBuild])
        def list_builds(job: str | None = None) -> list[ScheduledBuild]:
            return build_queue.list(job=job)

    return app
