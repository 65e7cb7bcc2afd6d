"""Upsert records into the settings service."""

from __future__ import annotations

from ldp_config.models import SETTINGS_ENTRIES_PATH, ConfigRecord, SettingsEntry
from ldp_config.operations.base import register_operation
from ldp_config.operations.upload import UploadOperation


@register_operation("write-settings")
class WriteSettingsOperation(UploadOperation):
    """Upsert each record from stdin as a mod-reporting settings entry."""

    def build_request(self, record: ConfigRecord) -> tuple[str, dict]:
        # A fresh id per record
        entry = SettingsEntry.from_record(record)
        return f"{SETTINGS_ENTRIES_PATH}/{entry.id}", entry.to_dict()
