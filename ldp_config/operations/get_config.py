"""Dump the full configuration."""

from __future__ import annotations

import json
import sys

from ldp_config.models import CONFIG_PATH
from ldp_config.operations.base import Operation, register_operation


@register_operation("get")
class GetConfigOperation(Operation):
    """Fetch the full configuration and print it as JSON."""

    def run(self) -> int:
        body = self.session.fetch(CONFIG_PATH)
        print(json.dumps(body, indent=2, ensure_ascii=False), file=sys.stdout)
        return 0
