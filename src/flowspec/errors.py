from enum import IntEnum
from typing import Any


class ExitCode(IntEnum):
    """Process exit codes surfaced by the flowspec command line."""

    SUCCESS = 0
    VALIDATION_MISMATCH = 1
    CONTRACT_FORMAT_ERROR = 2
    PARSE_ERROR = 3
    SYSTEM_ERROR = 4
    USAGE_ERROR = 64


ERROR_CODE_INGESTION_FAILED = "INGESTION_FAILED"
ERROR_CODE_INVALID_OPTION = "INVALID_OPTION"


class FlowSpecError(Exception):
    """Base class for failures that abort a contract generation run."""

    code = "FLOWSPEC_ERROR"
    exit_code = ExitCode.SYSTEM_ERROR

    def __init__(self, message: str, *, details: dict[str, Any] | None = None) -> None:
        super().__init__(message)
        self.message = message
        self.details = details or {}

    def to_dict(self) -> dict[str, Any]:
        return {
            "code": self.code,
            "message": self.message,
            "exit_code": int(self.exit_code),
            "details": self.details,
        }


class IngestionError(FlowSpecError):
    """The record source failed before it was read to completion."""

    code = ERROR_CODE_INGESTION_FAILED
    exit_code = ExitCode.PARSE_ERROR

    def __init__(self, message: str, *, records_read: int = 0, details: dict[str, Any] | None = None) -> None:
        super().__init__(message, details={"records_read": records_read, **(details or {})})
        self.records_read = records_read


class ConfigurationError(FlowSpecError):
    """A generation option is outside its valid domain."""

    code = ERROR_CODE_INVALID_OPTION
    exit_code = ExitCode.SYSTEM_ERROR

    def __init__(self, option: str, value: Any, reason: str) -> None:
        super().__init__(
            f"invalid value for {option}: {value!r} ({reason})",
            details={"option": option, "value": value, "reason": reason},
        )
        self.option = option
        self.value = value
