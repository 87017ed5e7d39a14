"""Webhook Build Trigger.

Decides whether a repository webhook delivery (push, merge request, pull request)
should build a job, and which revision and cause data to attach:
- event classification and `[ci-skip]` handling
- branch filtering on the target branch
- revision resolution and cause data construction
"""

__version__ = "0.1.0"

from webhook_build_trigger.trigger.engine import TriggerConfig, TriggerHandler

__all__ = ["__version__", "TriggerConfig", "TriggerHandler"]
