"""
Neutralizes request-controlled values before they reach the logs.

Paths, ids and query values come straight from clients. A CR/LF in one of
them would start a forged log line, so anything outside a conservative
character set is replaced and long values are cut.
"""
import re
from typing import Any

UNSAFE_CHARS = re.compile(r"[^A-Za-z0-9._\-@/:?=&%+ ]")


def sanitize_for_log(value: Any, max_length: int = 200) -> str:
    if value is None:
        return "None"
    text = UNSAFE_CHARS.sub("_", str(value))
    if len(text) > max_length:
        return text[:max_length] + "...[truncated]"
    return text
