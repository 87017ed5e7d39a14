"""FastAPI webhook receiver.

Run with: `uvicorn --factory webhook_build_trigger.server:create_app`
"""

from __future__ import annotations

__all__ = ["create_app"]

from webhook_build_trigger.server.app import create_app
