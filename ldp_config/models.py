"""Data models and constants for ldp-config."""

from __future__ import annotations

import uuid
from dataclasses import dataclass, field
from typing import Any

# ---------------------------------------------------------------------------
# Constants
# ---------------------------------------------------------------------------

LOGGER_NAME = "ldp-config"

CONFIG_PATH = "/ldp/config"
SETTINGS_ENTRIES_PATH = "/settings/entries"
SETTINGS_SCOPE = "mod-reporting"

LOGIN_WITH_EXPIRY_PATH = "/authn/login-with-expiry"
LOGIN_PATH = "/authn/login"
TOKEN_HEADER = "x-okapi-token"
TENANT_HEADER = "X-Okapi-Tenant"

# Environment variables used for credential discovery
ENV_URL = "OKAPI_URL"
ENV_TENANT = "OKAPI_TENANT"
ENV_USER = "OKAPI_USER"
ENV_PASSWORD = "OKAPI_PW"

# Retry configuration
DEFAULT_MAX_RETRIES = 0
RETRY_BACKOFF_FACTOR = 0.5  # seconds
RETRYABLE_STATUS_CODES = {429, 500, 502, 503, 504}


# ---------------------------------------------------------------------------
# Exceptions
# ---------------------------------------------------------------------------


class ConfigurationError(Exception):
    """Required connection settings are missing."""


class InputError(ValueError):
    """Standard input is not a JSON array of records."""


# ---------------------------------------------------------------------------
# Data Classes
# ---------------------------------------------------------------------------


@dataclass
class ConfigRecord:
    """A legacy configuration entry, as read from the input array."""

    key: str
    value: Any

    @classmethod
    def from_dict(cls, data: Any) -> ConfigRecord:
        if not isinstance(data, dict) or "key" not in data:
            raise InputError(f"Record is not an object with a 'key': {data!r}")
        if not isinstance(data["key"], str):
            raise InputError(f"Record key must be a string: {data!r}")
        return cls(key=data["key"], value=data.get("value"))

    def to_dict(self) -> dict:
        return {"key": self.key, "value": self.value}


@dataclass
class SettingsEntry:
    """A scoped settings-service entry wrapping a ConfigRecord."""

    key: str
    value: Any
    scope: str = SETTINGS_SCOPE
    id: str = field(default_factory=lambda: str(uuid.uuid4()))

    @classmethod
    def from_record(cls, record: ConfigRecord) -> SettingsEntry:
        return cls(key=record.key, value=record.value)

    def to_dict(self) -> dict:
        return {"id": self.id, "scope": self.scope, "key": self.key, "value": self.value}


@dataclass
class UploadResult:
    """Result of submitting a single record."""

    index: int
    key: str
    path: str
    action: str  # "applied", "would_apply", "error"
    detail: str = ""
    dry_run: bool = False

    def to_dict(self) -> dict:
        d = {
            "index": self.index,
            "key": self.key,
            "path": self.path,
            "action": self.action,
            "detail": self.detail,
        }
        if self.dry_run:
            d["dry_run"] = True
        return d
