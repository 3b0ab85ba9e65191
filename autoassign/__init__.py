"""Autoassign - default assignees for new Sentry issues.

This package relays Sentry issue webhooks into issue assignments:

- autoassign.config: Startup settings and the project -> assignee mapping
- autoassign.server: Webhook reception and the test-event endpoint
- autoassign.sentry_client: Sentry REST API calls
- autoassign.event_capture: Sentry SDK event capture
- autoassign.common: Shared logging utilities
"""

__version__ = "1.0.0"
