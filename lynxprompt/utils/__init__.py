from .enums import enum_value
from .errors import internal_error, not_found
from .log_sanitizer import sanitize_for_log

__all__ = ["enum_value", "internal_error", "not_found", "sanitize_for_log"]
