"""Wire payloads and JSON helpers for handing entries to collaborators."""

from __future__ import annotations

from .models import EntryPayload
from .serializers import deserialize_entry, dump_entries, load_entries, serialize_entry

__all__ = ["EntryPayload", "deserialize_entry", "dump_entries", "load_entries", "serialize_entry"]
