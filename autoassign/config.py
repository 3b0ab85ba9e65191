from __future__ import annotations

import json
import os
from dataclasses import dataclass, field
from pathlib import Path
from types import MappingProxyType
from typing import Dict, Iterator, Mapping, Optional, Tuple

from dotenv import load_dotenv

# Load environment variables from .env file
load_dotenv()

DEFAULT_ASSIGNMENTS_PATH = "./assignments.json"
DEFAULT_BIND_ADDR = ":18091"
DEFAULT_API_BASE = "https://sentry.io"


class ConfigError(Exception):
    """Raised when the relay cannot start with the given configuration."""


def _env_float(name: str, default: float) -> float:
    value = os.getenv(name)
    if value is None:
        return default
    try:
        return float(value)
    except ValueError as e:
        raise ConfigError(f"{name} must be a number, got {value!r}") from e


@dataclass(frozen=True)
class AssignmentMap:
    """Read-only mapping of project slug to default assignee."""

    entries: Mapping[str, str] = field(default_factory=dict)

    def __post_init__(self) -> None:
        object.__setattr__(self, "entries", MappingProxyType(dict(self.entries)))

    def get(self, project: str) -> Optional[str]:
        return self.entries.get(project)

    def items(self):
        return self.entries.items()

    def __contains__(self, project: object) -> bool:
        return project in self.entries

    def __iter__(self) -> Iterator[str]:
        return iter(self.entries)

    def __len__(self) -> int:
        return len(self.entries)


@dataclass
class RelayConfig:
    """Settings the relay needs before it can accept webhooks."""

    # Sentry API token, needs the event:write scope
    api_token: str = ""
    # DSN used by the event-capture SDK
    sentry_dsn: str = ""

    assignments_path: str = DEFAULT_ASSIGNMENTS_PATH
    bind_addr: str = DEFAULT_BIND_ADDR
    api_base: str = DEFAULT_API_BASE
    request_timeout: float = 10.0

    # Logging
    log_dir: Optional[str] = "logs"

    @classmethod
    def from_env(cls) -> "RelayConfig":
        """Create configuration from environment variables."""
        return cls(
            api_token=os.getenv("SENTRY_API_TOKEN", ""),
            sentry_dsn=os.getenv("SENTRY_DSN", ""),
            assignments_path=os.getenv("AUTOASSIGN_ASSIGNMENTS", DEFAULT_ASSIGNMENTS_PATH),
            bind_addr=os.getenv("AUTOASSIGN_BIND_ADDR", DEFAULT_BIND_ADDR),
            api_base=os.getenv("SENTRY_API_BASE", DEFAULT_API_BASE),
            request_timeout=_env_float("AUTOASSIGN_REQUEST_TIMEOUT", 10.0),
            log_dir=os.getenv("AUTOASSIGN_LOG_DIR", "logs"),
        )

    def validate(self) -> None:
        """Check the required settings, DSN first and then the API token."""

        if not self.sentry_dsn:
            raise ConfigError("must provide a Sentry DSN")
        if not self.api_token:
            raise ConfigError("must provide a Sentry API token")


def load_assignments(path: str | Path) -> AssignmentMap:
    """Load the project -> assignee mapping from a flat JSON object.

    Example file::

        {
          "sentry-bot": "name@domain.com",
          "sentry-bot-client": "name2@domain.com"
        }
    """

    try:
        with open(path, "r", encoding="utf-8") as fh:
            data = json.load(fh)
    except OSError as e:
        raise ConfigError(f"no project -> user mapping: {e}") from e
    except (json.JSONDecodeError, UnicodeDecodeError) as e:
        raise ConfigError(f"failed to parse project -> user mapping: {e}") from e

    if not isinstance(data, dict):
        raise ConfigError(
            f"failed to parse project -> user mapping: expected a JSON object, got {type(data).__name__}"
        )

    entries: Dict[str, str] = {}
    for project, assignee in data.items():
        if not isinstance(assignee, str):
            raise ConfigError(
                f"failed to parse project -> user mapping: assignee for {project!r} must be a string"
            )
        entries[project] = assignee
    return AssignmentMap(entries)


def load_startup(config: RelayConfig) -> AssignmentMap:
    """Validate settings and load the mapping, in that order."""

    config.validate()
    return load_assignments(config.assignments_path)


def parse_bind_addr(addr: str) -> Tuple[str, int]:
    """Split a ``host:port`` bind address; an empty host means all interfaces."""

    host, sep, port_text = addr.rpartition(":")
    if not sep:
        raise ConfigError(f"invalid bind address {addr!r}: expected host:port")
    try:
        port = int(port_text)
    except ValueError as e:
        raise ConfigError(f"invalid bind address {addr!r}: bad port") from e
    if not 0 < port < 65536:
        raise ConfigError(f"invalid bind address {addr!r}: port out of range")

    host = host.strip("[]")
    return host or "0.0.0.0", port
