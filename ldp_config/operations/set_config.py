"""Upsert legacy configuration records."""

from __future__ import annotations

from ldp_config.client import quote_segment
from ldp_config.models import CONFIG_PATH, ConfigRecord
from ldp_config.operations.base import register_operation
from ldp_config.operations.upload import UploadOperation


@register_operation("set")
class SetConfigOperation(UploadOperation):
    """Upsert each record from stdin into /ldp/config."""

    def build_request(self, record: ConfigRecord) -> tuple[str, dict]:
        return f"{CONFIG_PATH}/{quote_segment(record.key)}", record.to_dict()
