"""JSON output carrying every entry field."""

from __future__ import annotations

import json
from collections.abc import Sequence
from typing import Any

from bestls.classifier import Entry
from bestls.formatter.columns import UNKNOWN_TIME


def entry_to_dict(entry: Entry) -> dict[str, Any]:
    """Serialize *entry* to JSON-compatible values.

    ``modified_at`` is ISO-8601 in UTC, or ``"unknown"``.
    """
    return {
        "name": entry.name,
        "path": str(entry.path),
        "kind": entry.kind.value,
        "size_bytes": entry.size_bytes,
        "human_size": entry.human_size,
        "modified_at": (
            entry.modified_at.isoformat() if entry.modified_at else UNKNOWN_TIME
        ),
        "permissions": entry.permissions,
        "owner": entry.owner,
        "group": entry.group,
        "depth": entry.depth,
    }


def format_json(entries: Sequence[Entry], pretty: bool = False) -> str:
    """Render entries as a JSON array.

    Args:
        entries: Entries in display order.
        pretty: Indent with two spaces instead of compact output.
    """
    records = [entry_to_dict(entry) for entry in entries]
    if pretty:
        return json.dumps(records, indent=2, ensure_ascii=False)
    return json.dumps(records, ensure_ascii=False, separators=(",", ":"))
