"""
Loading of the bundled catalog records in plant_agenda/data/.
"""

from __future__ import annotations
import json
import os
from typing import Dict, List

_DATA_DIR = os.path.join(os.path.dirname(os.path.dirname(__file__)), "data")


class DataFileError(ValueError):
    """A bundled catalog file is missing or malformed."""


def load_records(filename: str) -> List[Dict]:
    """Load a catalog file holding a JSON array of objects keyed by ``id``.

    Every record must carry a unique, non-empty ``id``. A missing file is an
    error: the services cannot run without their catalogs.
    """
    filepath = os.path.join(_DATA_DIR, filename)
    try:
        with open(filepath, "r", encoding="utf-8") as f:
            records = json.load(f)
    except (OSError, json.JSONDecodeError) as e:
        raise DataFileError(f"Cannot read {filename}: {e}") from e

    if not isinstance(records, list):
        raise DataFileError(f"{filename} must contain a JSON array")

    seen = set()
    for index, record in enumerate(records):
        record_id = record.get("id") if isinstance(record, dict) else None
        if not record_id:
            raise DataFileError(f"{filename}[{index}] has no id")
        if record_id in seen:
            raise DataFileError(f"{filename} repeats id {record_id!r}")
        seen.add(record_id)
    return records
