from __future__ import annotations

from typing import Any, Dict, Iterable, List, Mapping

import orjson
from pydantic import ValidationError

from ..domain import Entry
from ..errors import InvalidValue
from .models import EntryPayload


def serialize_entry(entry: Entry) -> Dict[str, Any]:
    return EntryPayload.from_domain(entry).model_dump(mode="json", by_alias=True)


def deserialize_entry(data: Mapping[str, Any]) -> Entry:
    try:
        payload = EntryPayload.model_validate(data)
    except ValidationError as exc:
        raise InvalidValue(f"Invalid entry payload: {exc}") from exc
    return payload.to_domain()


def dump_entries(entries: Iterable[Entry]) -> bytes:
    payload = [serialize_entry(entry) for entry in entries]
    return orjson.dumps(payload, option=orjson.OPT_INDENT_2) + b"\n"


def load_entries(raw: bytes) -> List[Entry]:
    """Parse a JSON array of entry payloads, keeping the given order."""

    try:
        records = orjson.loads(raw)
    except orjson.JSONDecodeError as exc:
        raise InvalidValue(f"Entry document is not valid JSON: {exc}") from exc
    if not isinstance(records, list):
        raise InvalidValue("Entry document must be a JSON array")
    return [deserialize_entry(record) for record in records]
