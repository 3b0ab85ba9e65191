from __future__ import annotations

import logging
from typing import Optional

import requests

from .config import DEFAULT_API_BASE
from .models import create_assignment

logger = logging.getLogger(__name__)


class AssignmentError(Exception):
    """Raised when Sentry did not accept an issue assignment."""

    def __init__(self, message: str, status_code: Optional[int] = None) -> None:
        super().__init__(message)
        self.status_code = status_code


class SentryClient:
    """Thin wrapper around the Sentry issue API.

    refs: https://docs.sentry.io/api/events/put-group-details/
    """

    def __init__(
        self,
        api_token: str,
        api_base: str = DEFAULT_API_BASE,
        timeout: float = 10.0,
        session: Optional[requests.Session] = None,
    ) -> None:
        self.api_base = api_base.rstrip("/")
        self.timeout = timeout
        self._session = session or requests.Session()
        self._session.headers["Authorization"] = f"Bearer {api_token}"

    def issue_url(self, issue_id: str) -> str:
        return f"{self.api_base}/api/0/issues/{issue_id}/"

    def assign_issue(self, issue_id: str, assignee: str) -> None:
        """Assign the issue to the given user; only a 200 counts as success."""

        url = self.issue_url(issue_id)
        body = create_assignment(assignee).model_dump()
        try:
            response = self._session.put(url, json=body, timeout=self.timeout)
        except requests.RequestException as e:
            raise AssignmentError(f"failed to assign issue {issue_id} to {assignee}: {e}") from e

        if response.status_code != 200:
            raise AssignmentError(
                f"received non-200 status from Sentry: {response.status_code}",
                status_code=response.status_code,
            )
        logger.info(f"Assigned issue {issue_id} to {assignee}")

    def close(self) -> None:
        self._session.close()
