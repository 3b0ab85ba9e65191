"""Sentry webhook and API models."""

from .sentry_models import (
    IssueNotification,
    TestEvent,
    AssignmentRequest,
    create_assignment,
)

__all__ = [
    "IssueNotification",
    "TestEvent",
    "AssignmentRequest",
    "create_assignment",
]
