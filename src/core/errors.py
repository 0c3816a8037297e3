"""Error codes and error payloads for API responses.

The welding knowledge core never raises for unknown keys; these types only
describe failures at the HTTP boundary.
"""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from typing import Any, Dict, Optional


class ErrorCode(str, Enum):
    INPUT_ERROR = "INPUT_ERROR"  # blank or malformed request value
    VALIDATION_FAILED = "VALIDATION_FAILED"
    DATA_NOT_FOUND = "DATA_NOT_FOUND"  # key outside the knowledge tables
    INTERNAL_ERROR = "INTERNAL_ERROR"


class ErrorSource(str, Enum):
    INPUT = "input"
    SYSTEM = "system"


class ErrorSeverity(str, Enum):
    ERROR = "error"
    WARNING = "warning"
    INFO = "info"


ERROR_SOURCE_MAPPING: Dict[ErrorCode, ErrorSource] = {
    ErrorCode.INPUT_ERROR: ErrorSource.INPUT,
    ErrorCode.VALIDATION_FAILED: ErrorSource.INPUT,
    ErrorCode.DATA_NOT_FOUND: ErrorSource.INPUT,
    ErrorCode.INTERNAL_ERROR: ErrorSource.SYSTEM,
}

ERROR_SEVERITY_MAPPING: Dict[ErrorCode, ErrorSeverity] = {
    ErrorCode.INPUT_ERROR: ErrorSeverity.WARNING,
    ErrorCode.VALIDATION_FAILED: ErrorSeverity.WARNING,
    ErrorCode.DATA_NOT_FOUND: ErrorSeverity.INFO,
    ErrorCode.INTERNAL_ERROR: ErrorSeverity.ERROR,
}


@dataclass
class ExtendedError:
    code: ErrorCode
    source: ErrorSource
    severity: ErrorSeverity
    message: str
    stage: Optional[str] = None
    context: Optional[Dict[str, Any]] = None

    def to_dict(self) -> Dict[str, Any]:
        result = {
            "code": self.code.value,
            "source": self.source.value,
            "severity": self.severity.value,
            "message": self.message,
        }
        if self.stage:
            result["stage"] = self.stage
        if self.context:
            result["context"] = self.context
        return result


def create_extended_error(
    error_code: ErrorCode,
    message: str,
    stage: Optional[str] = None,
    context: Optional[Dict[str, Any]] = None,
) -> ExtendedError:
    return ExtendedError(
        code=error_code,
        source=ERROR_SOURCE_MAPPING.get(error_code, ErrorSource.SYSTEM),
        severity=ERROR_SEVERITY_MAPPING.get(error_code, ErrorSeverity.ERROR),
        message=message,
        stage=stage,
        context=context,
    )


def build_error(
    error_code: ErrorCode,
    stage: str,
    message: str,
    **context: Any,
) -> Dict[str, Any]:
    """Unified error dict builder for API responses.

    Returns a dict suitable for direct inclusion under `detail` or `error` fields.
    """
    return create_extended_error(
        error_code=error_code,
        message=message,
        stage=stage,
        context=context or None,
    ).to_dict()


__all__ = [
    "ErrorCode",
    "ErrorSource",
    "ErrorSeverity",
    "ExtendedError",
    "create_extended_error",
    "build_error",
]
