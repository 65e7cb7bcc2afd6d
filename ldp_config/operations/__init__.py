"""Operations for ldp-config."""

from ldp_config.operations.base import Operation, get_operation_registry, register_operation

# Import all operations to register them
from ldp_config.operations.get_config import GetConfigOperation
from ldp_config.operations.set_config import SetConfigOperation
from ldp_config.operations.upload import UploadOperation, read_records
from ldp_config.operations.write_settings import WriteSettingsOperation

__all__ = [
    "Operation",
    "register_operation",
    "get_operation_registry",
    "read_records",
    "UploadOperation",
    "GetConfigOperation",
    "SetConfigOperation",
    "WriteSettingsOperation",
]
