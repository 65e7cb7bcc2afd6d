"""
ldp-config: read or write FOLIO reporting configuration from the command line.

Fetches the full configuration, or upserts a JSON array of key/value records
read from stdin into the legacy /ldp/config endpoint or into mod-settings.

Environment:
    OKAPI_URL    - FOLIO gateway URL
    OKAPI_TENANT - Tenant id
    OKAPI_USER   - Username
    OKAPI_PW     - Password
"""

from ldp_config.cli import main
from ldp_config.client import FolioSession, default_setup

__version__ = "0.1.0"
__all__ = ["main", "FolioSession", "default_setup", "__version__"]
