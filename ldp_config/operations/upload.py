"""Shared loop for operations that upsert a JSON array of records read from stdin."""

from __future__ import annotations

import argparse
import json
import logging
import sys
from abc import abstractmethod
from typing import IO, TYPE_CHECKING, Any

import requests

from ldp_config.models import LOGGER_NAME, ConfigRecord, InputError, UploadResult
from ldp_config.operations.base import Operation

if TYPE_CHECKING:
    from ldp_config.client import FolioSession


def read_records(stream: IO[Any]) -> list[Any]:
    """Read the whole stream as UTF-8 and parse it as a JSON array."""
    try:
        data = stream.read()
        if isinstance(data, bytes):
            data = data.decode("utf-8")
    except UnicodeDecodeError as e:
        raise InputError(f"Input is not valid UTF-8: {e}") from e
    try:
        items = json.loads(data)
    except json.JSONDecodeError as e:
        raise InputError(f"Input is not valid JSON: {e}") from e
    if not isinstance(items, list):
        raise InputError(f"Input must be a JSON array, got {type(items).__name__}")
    return items


class UploadOperation(Operation):
    """Base for write operations: one PUT per input record, strictly in order."""

    def __init__(self, session: FolioSession, args: argparse.Namespace):
        super().__init__(session, args)
        self.results: list[UploadResult] = []

    @abstractmethod
    def build_request(self, record: ConfigRecord) -> tuple[str, dict]:
        """Return the path and JSON body of the PUT for one record."""
        ...

    def run(self) -> int:
        items = read_records(getattr(sys.stdin, "buffer", sys.stdin))
        # Reject malformed elements before anything is sent
        records = [ConfigRecord.from_dict(item) for item in items]
        self.logger.info(f"Read {len(records)} records for {self.operation_name}")

        dry_run = getattr(self.args, "dry_run", False)
        keep_going = getattr(self.args, "keep_going", False)

        for index, (item, record) in enumerate(zip(items, records)):
            path, body = self.build_request(record)

            if dry_run:
                self._record(UploadResult(index, record.key, path, "would_apply", json.dumps(body), dry_run=True))
                continue

            try:
                self.session.put(path, body)
            except requests.RequestException as e:
                if not keep_going:
                    raise
                self._record(UploadResult(index, record.key, path, "error", str(e)))
                continue

            print(f"record {index} -- {json.dumps(item, ensure_ascii=False)}", file=sys.stdout, flush=True)
            self._record(UploadResult(index, record.key, path, "applied"))

        return self._summarize(dry_run)

    def _summarize(self, dry_run: bool) -> int:
        total = len(self.results)
        applied = sum(1 for r in self.results if r.action in ("applied", "would_apply"))
        errors = sum(1 for r in self.results if r.action == "error")

        self.logger.info(
            f"Done: {total} records, {applied} {'would be written' if dry_run else 'written'}, {errors} errors"
        )
        return 1 if errors > 0 else 0

    def _record(self, result: UploadResult) -> UploadResult:
        self.results.append(result)
        icon = {
            "applied": "✓",
            "error": "✗",
            "would_apply": "○",
        }.get(result.action, "?")

        handler = self.logger.handlers[0] if self.logger.handlers else None
        if handler and getattr(handler.formatter, "json_mode", False):
            record = self.logger.makeRecord(LOGGER_NAME, logging.INFO, "", 0, "", (), None)
            record.upload_result = result
            self.logger.handle(record)
            return result

        prefix = "[DRY-RUN] " if result.dry_run else ""
        level = logging.ERROR if result.action == "error" else logging.INFO
        self.logger.log(
            level,
            f"{prefix}{icon} record {result.index} ({result.key}): PUT {result.path} → {result.action}"
            f"{' (' + result.detail + ')' if result.detail else ''}",
        )
        return result
