"""
Application-level joins across schemas.

The four schemas live in separate databases, so a row in one schema can only
reference a row in another by id. ``merge_by_id`` collects the foreign ids of
a batch of rows, fetches the referenced rows with one query against the other
schema, and merges the two in memory.

The two queries are not covered by a common transaction. A referenced row can
be missing, either because it was deleted between the queries or because it
never existed. Callers choose what happens then with ``MissingReference``.
"""
import logging
from enum import Enum
from typing import Any, Awaitable, Callable, Dict, Iterable, List, Optional, Sequence, TypeVar

logger = logging.getLogger(__name__)

Row = TypeVar("Row")
Merged = TypeVar("Merged")


class MissingReference(str, Enum):
    NULL = "null"    # keep the row, attach None
    OMIT = "omit"    # drop the row
    ERROR = "error"  # raise DanglingReferenceError


class DanglingReferenceError(LookupError):
    def __init__(self, schema: str, missing_ids: Iterable[str]):
        self.schema = schema
        self.missing_ids = sorted(set(missing_ids))
        super().__init__(f"Missing rows in '{schema}': {', '.join(self.missing_ids)}")


def distinct_ids(rows: Iterable[Row], key: Callable[[Row], Optional[str]]) -> List[str]:
    seen: Dict[str, None] = {}
    for row in rows:
        ref = key(row)
        if ref is not None:
            seen.setdefault(ref, None)
    return list(seen)


async def merge_by_id(
    rows: Sequence[Row],
    *,
    key: Callable[[Row], Optional[str]],
    fetch: Callable[[List[str]], Awaitable[Iterable[Any]]],
    attach: Callable[[Row, Optional[Any]], Merged],
    policy: MissingReference,
    schema: str,
) -> List[Merged]:
    """
    Join ``rows`` to the rows of another schema.

    Args:
        rows: Primary rows, in the order they should be returned
        key: Extracts the foreign id from a primary row (None means no reference)
        fetch: Loads referenced rows for a list of ids with a single query
        attach: Builds the merged value from a primary row and its referenced row
        policy: What to do with a row whose foreign id has no referenced row
        schema: Name of the referenced schema, for logs and errors

    Rows without a foreign id are attached to None and never hit the policy.
    """
    ids = distinct_ids(rows, key)
    referenced: Dict[str, Any] = {}
    if ids:
        referenced = {item.id: item for item in await fetch(ids)}

    missing = [ref for ref in ids if ref not in referenced]
    if missing:
        if policy is MissingReference.ERROR:
            raise DanglingReferenceError(schema, missing)
        logger.warning(
            f"[COMPOSE] {len(missing)} dangling reference(s) into '{schema}' "
            f"(policy={policy.value}): {', '.join(missing)}"
        )

    merged: List[Merged] = []
    for row in rows:
        ref = key(row)
        if ref is None:
            merged.append(attach(row, None))
        elif ref in referenced:
            merged.append(attach(row, referenced[ref]))
        elif policy is MissingReference.NULL:
            merged.append(attach(row, None))
    return merged

