"""JSON export sources.

The export is either a list of system records or an object wrapping
them under ``"systems"``::

    [
        {
            "fides_key": "orders_service",
            "name": "Orders Service",
            "description": "...",
            "system_type": "Service",
            "system_dependencies": ["orders_db"],
            "privacy_declarations": [
                {
                    "name": "Order processing",
                    "data_use": "provide.service.operations",
                    "data_categories": ["user.provided.identifiable.name"],
                    "data_subjects": ["customer"]
                }
            ]
        }
    ]
"""

from __future__ import annotations

import json
import logging
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any

from datamap.core.errors import SourceError
from datamap.core.models import RawSystem
from datamap.sources.base import FileSource, Source, expand_path

logger = logging.getLogger(__name__)

SAMPLE_DATA_PATH = Path(__file__).resolve().parent.parent / "data" / "sample_data.json"


def parse_records(data: Any, origin: str = "<data>") -> list[RawSystem]:
    """Turn decoded JSON into RawSystem records, skipping non-objects."""
    if isinstance(data, dict):
        data = data.get("systems", [])
    if not isinstance(data, list):
        raise SourceError(f"{origin}: expected a list of systems, got {type(data).__name__}")

    records: list[RawSystem] = []
    for i, entry in enumerate(data):
        if not isinstance(entry, dict):
            logger.warning("%s: skipping entry %d (not an object)", origin, i)
            continue
        records.append(RawSystem.from_dict(entry))
    return records


@dataclass
class JsonFileSource(FileSource):
    """Reads system records from a JSON export file."""

    def load(self) -> list[RawSystem]:
        self.validate()
        try:
            with open(self.file_path, encoding="utf-8") as f:
                data = json.load(f)
        except json.JSONDecodeError as e:
            raise SourceError(f"Invalid JSON in {self.file_path}: {e}") from e
        except UnicodeDecodeError as e:
            raise SourceError(f"{self.file_path} is not valid UTF-8: {e}") from e

        records = parse_records(data, origin=str(self.file_path))
        logger.info("Loaded %d system records from %s", len(records), self.file_path)
        return records


@dataclass
class SampleSource(JsonFileSource):
    """The sample dataset bundled with the package."""

    name: str = "sample"
    file_path: Path = field(default=SAMPLE_DATA_PATH)


def get_source(path: str | Path | None = None) -> Source:
    """Return the bundled sample for None, otherwise a JSON file source."""
    if path is None:
        return SampleSource()
    file_path = expand_path(path)
    return JsonFileSource(name=file_path.stem, file_path=file_path)
