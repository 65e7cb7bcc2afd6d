"""Base class and registry for operations."""

from __future__ import annotations

import argparse
import logging
from abc import ABC, abstractmethod
from typing import TYPE_CHECKING

from ldp_config.models import LOGGER_NAME

if TYPE_CHECKING:
    from ldp_config.client import FolioSession

# ---------------------------------------------------------------------------
# Operation Registry
# ---------------------------------------------------------------------------

_operation_registry: dict[str, type[Operation]] = {}


def register_operation(name: str):
    """Decorator to register an operation class under a CLI subcommand name."""

    def decorator(cls):
        _operation_registry[name] = cls
        cls.operation_name = name
        return cls

    return decorator


def get_operation_registry() -> dict[str, type[Operation]]:
    """Get the operation registry."""
    return _operation_registry


# ---------------------------------------------------------------------------
# Operation Base Class
# ---------------------------------------------------------------------------


class Operation(ABC):
    """Base class for all operations."""

    operation_name: str = ""

    def __init__(self, session: FolioSession, args: argparse.Namespace):
        self.session = session
        self.args = args
        self.logger = logging.getLogger(LOGGER_NAME)

    @staticmethod
    def add_arguments(parser: argparse.ArgumentParser) -> None:
        """Add operation-specific CLI arguments. None by default."""

    @abstractmethod
    def run(self) -> int:
        """Run the operation against the session and return the process exit code."""
        ...
