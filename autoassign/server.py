"""FastAPI server relaying Sentry issue webhooks into assignments."""

from __future__ import annotations

import logging
from typing import Callable, Dict, Optional, Union

from fastapi import FastAPI, HTTPException, Request, Response
from fastapi.concurrency import run_in_threadpool
from fastapi.responses import JSONResponse
from pydantic import ValidationError

from .common import log_error, log_server_message
from .config import AssignmentMap, RelayConfig
from .event_capture import capture_test_event
from .models import IssueNotification, TestEvent
from .sentry_client import AssignmentError, SentryClient

logger = logging.getLogger(__name__)

CaptureFn = Callable[[str], Optional[str]]


def create_app(
    config: RelayConfig,
    assignments: AssignmentMap,
    client: SentryClient,
    capture: CaptureFn = capture_test_event,
) -> FastAPI:
    """Build the relay app around already-validated startup state."""

    app = FastAPI(title="Sentry Auto-Assign", version="1.0.0")
    app.state.config = config
    app.state.assignments = assignments
    app.state.client = client
    app.state.capture = capture

    @app.on_event("startup")
    async def startup_event():
        """Handle application startup."""
        log_server_message("Server starting up")
        log_server_message(f"Default assignees configured for {len(assignments)} project(s)")
        log_server_message("Webhook endpoint: /events")

    @app.on_event("shutdown")
    async def shutdown_event():
        """Handle application shutdown."""
        log_server_message("Server shutting down")
        client.close()

    @app.get("/health")
    async def health_check() -> Dict[str, Union[str, int]]:
        """Health check endpoint."""
        return {"status": "healthy", "service": "autoassign", "projects": len(assignments)}

    @app.post("/events")
    async def handle_events(request: Request) -> Response:
        """Assign a newly reported Sentry issue to its project's default user.

        Always answers 200 so that Sentry considers the webhook delivered,
        whatever happened while handling it.
        """
        body = await request.body()

        try:
            issue = IssueNotification.model_validate_json(body)
        except ValidationError as e:
            log_error(f"failed to read request body from Sentry: {e}", body.decode("utf-8", errors="ignore"))
            return Response(status_code=200)

        assignee = assignments.get(issue.project)
        if assignee is None:
            log_error(f"no default assignee for the {issue.project} project")
            return Response(status_code=200)

        try:
            await run_in_threadpool(client.assign_issue, issue.id, assignee)
        except AssignmentError as e:
            log_error(f"failed to assign issue {issue.id} to {assignee}: {e}")
            return Response(status_code=200)

        log_server_message(f"Issue {issue.project}/{issue.id} assigned to {assignee}")
        return Response(status_code=200)

    @app.post("/fire")
    async def fire_event(request: Request) -> Response:
        """Fire a test event with the given culprit."""
        body = await request.body()

        try:
            event = TestEvent.model_validate_json(body)
        except ValidationError as e:
            log_error(f"failed to decode test event information: {e}", body.decode("utf-8", errors="ignore"))
            return Response(status_code=400)

        log_server_message(f"sending event to Sentry: {event.culprit}")
        await run_in_threadpool(capture, event.culprit)
        return Response(status_code=200)

    @app.exception_handler(404)
    async def not_found_handler(request: Request, exc: HTTPException):
        """Handle 404 errors."""
        log_server_message(f"404 Not Found: {request.url}")
        return JSONResponse(
            status_code=404,
            content={"error": "Not found", "path": str(request.url)}
        )

    return app
