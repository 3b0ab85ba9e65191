"""Pydantic models for Sentry webhooks and API interactions."""

from pydantic import BaseModel, ConfigDict


class IssueNotification(BaseModel):
    """Issue webhook payload from Sentry.

    Sentry sends a much larger document; only the issue ID and the project
    slug are needed to pick an assignee. Absent fields decode as empty strings.
    """
    model_config = ConfigDict(extra="ignore")

    id: str = ""
    project: str = ""


class TestEvent(BaseModel):
    """Synthetic event an operator can fire through the relay."""
    model_config = ConfigDict(extra="ignore")

    # Keep pytest from collecting this model as a test class
    __test__ = False

    culprit: str = ""


# Models for outgoing Sentry API calls

class AssignmentRequest(BaseModel):
    """Body of the issue update that sets the assignee."""

    assignedTo: str


def create_assignment(assignee: str) -> AssignmentRequest:
    """Create an issue assignment request."""
    return AssignmentRequest(assignedTo=assignee)
