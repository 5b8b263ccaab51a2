"""JSON file store for local tunnel records."""

import json
import logging
import os
import tempfile
from pathlib import Path
from typing import Any

from pydantic import ValidationError as PydanticValidationError

from ..common.exceptions import DuplicateNameError, NotFoundError
from .models import TunnelRecord

logger = logging.getLogger(__name__)


class RecordStore:
    """Tunnel records persisted as one pretty-printed JSON array.

    Every mutation reads the whole file, changes the list and rewrites the
    file in full. There is no protection against concurrent writers.
    """

    def __init__(self, path: Path):
        """Initialize record store.

        Args:
            path: Location of the tunnels JSON file
        """
        self.path = Path(path)

    def load(self) -> list[TunnelRecord]:
        """Load all records.

        Returns:
            Records in file order; empty if the file is missing or unreadable
        """
        try:
            data = json.loads(self.path.read_text(encoding="utf-8"))
        except FileNotFoundError:
            return []
        except (OSError, ValueError) as e:
            logger.warning(f"Could not read tunnel file {self.path}: {e}")
            return []

        if not isinstance(data, list):
            logger.warning(f"Tunnel file {self.path} does not hold a JSON array")
            return []

        records = []
        for item in data:
            try:
                records.append(TunnelRecord.model_validate(item))
            except PydanticValidationError as e:
                logger.warning(f"Skipping invalid tunnel record {item!r}: {e}")
        return records

    def save(self, records: list[TunnelRecord]) -> None:
        """Overwrite the file with ``records``.

        The list is written to a temporary file in the same directory which
        then replaces the target.

        Args:
            records: Complete list of records to persist
        """
        self.path.parent.mkdir(parents=True, exist_ok=True)
        payload: list[dict[str, Any]] = [record.to_json_dict() for record in records]

        fd, tmp_name = tempfile.mkstemp(
            dir=self.path.parent, prefix=f".{self.path.name}.", suffix=".tmp"
        )
        try:
            with os.fdopen(fd, "w", encoding="utf-8") as f:
                json.dump(payload, f, indent=2, ensure_ascii=False)
                f.write("\n")
            os.replace(tmp_name, self.path)
        except BaseException:
            Path(tmp_name).unlink(missing_ok=True)
            raise

        logger.debug(f"Saved {len(records)} tunnel record(s) to {self.path}")

    def get(self, name: str) -> TunnelRecord | None:
        """Get record by name.

        Args:
            name: Tunnel name

        Returns:
            Record if found, None otherwise
        """
        for record in self.load():
            if record.name == name:
                return record
        return None

    def names(self) -> set[str]:
        """Return the names of all stored records."""
        return {record.name for record in self.load()}

    def add(self, record: TunnelRecord) -> None:
        """Append a record.

        Args:
            record: Record to add

        Raises:
            DuplicateNameError: If a record with the same name exists
        """
        records = self.load()
        if any(existing.name == record.name for existing in records):
            raise DuplicateNameError(f"Tunnel '{record.name}' already exists")

        records.append(record)
        self.save(records)
        logger.info(f"Added tunnel {record.name} to store")

    def update(self, name: str, updates: dict[str, Any]) -> TunnelRecord:
        """Shallow-merge ``updates`` into the record called ``name``.

        Args:
            name: Tunnel name
            updates: Fields to replace; a None value clears the field

        Returns:
            The updated record

        Raises:
            NotFoundError: If no record has that name
        """
        records = self.load()
        for index, record in enumerate(records):
            if record.name == name:
                updated = record.merged_with(updates)
                records[index] = updated
                self.save(records)
                logger.info(f"Updated tunnel {name} in store")
                return updated

        raise NotFoundError(f"Tunnel '{name}' not found")

    def remove(self, name: str) -> TunnelRecord:
        """Remove the record called ``name``.

        Args:
            name: Tunnel name

        Returns:
            The removed record

        Raises:
            NotFoundError: If no record has that name
        """
        records = self.load()
        remaining = [record for record in records if record.name != name]
        if len(remaining) == len(records):
            raise NotFoundError(f"Tunnel '{name}' not found")

        removed = next(record for record in records if record.name == name)
        self.save(remaining)
        logger.info(f"Removed tunnel {name} from store")
        return removed
