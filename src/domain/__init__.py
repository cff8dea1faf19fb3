"""Domain layer: errors, schemas, constants."""

from .errors import ClientValidationError, ErrorCodes, IntakeError
from .schemas import (
    BufferEntry,
    IntakeResult,
    LogRecord,
    format_number,
    parse_number,
)

__all__ = [
    "IntakeError",
    "ClientValidationError",
    "ErrorCodes",
    "BufferEntry",
    "IntakeResult",
    "LogRecord",
    "format_number",
    "parse_number",
]
