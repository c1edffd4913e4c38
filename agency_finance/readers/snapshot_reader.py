"""Snapshot reader for loading finance entities from a JSON file.

The expected file is a single JSON object with one list per entity kind:

```
{
  "workers":      [{"id": "w-1", "first_name": "Ada", "monthly_salary": "176000", ...}],
  "clients":      [{"id": "c-1", "name": "Acme", "client_kind": "DIRECT"}],
  "projects":     [{"id": "p-1", "name": "Storefront", "currency": "USD", ...}],
  "tasks":        [{"id": "t-1", "project_id": "p-1", "title": "Checkout", ...}],
  "time_entries": [{"id": "e-1", "task_id": "t-1", "worker_id": "w-1", ...}],
  "milestones":   [{"id": "m-1", "project_id": "p-1", "amount": "1000", ...}]
}
```

Missing lists are treated as empty. Money values may be given as strings
or numbers; strings keep their exact decimal value.
"""

import json
import logging
from pathlib import Path
from typing import Union

from pydantic import ValidationError as PydanticValidationError

from agency_finance.exceptions import NotFoundError, ValidationError
from agency_finance.models.snapshot import FinanceSnapshot
from agency_finance.services.finance_store import InMemoryFinanceStore

logger = logging.getLogger(__name__)


class SnapshotReader:
    """Reader for finance snapshots stored as JSON.

    Attributes:
        path: Location of the snapshot file

    Example:
        >>> reader = SnapshotReader("data/snapshot.json")
        >>> snapshot = reader.read()
        >>> len(snapshot.projects)
        3
    """

    def __init__(self, path: Union[str, Path]):
        self.path = Path(path)

    def read(self) -> FinanceSnapshot:
        """Parse and validate the snapshot file.

        Returns:
            Validated FinanceSnapshot

        Raises:
            NotFoundError: If the file does not exist
            ValidationError: If the file is not valid JSON or an entity is invalid
        """
        if not self.path.is_file():
            raise NotFoundError("Snapshot file", str(self.path))

        logger.info(f"Reading snapshot from {self.path}")
        try:
            # parse_float keeps JSON numbers exact before Decimal conversion
            data = json.loads(
                self.path.read_text(encoding="utf-8"), parse_float=str
            )
        except json.JSONDecodeError as e:
            raise ValidationError(
                f"Snapshot {self.path} is not valid JSON: {e}",
                recovery_hint="Check the file for syntax errors",
            )

        if not isinstance(data, dict):
            raise ValidationError(
                f"Snapshot {self.path} must contain a JSON object, "
                f"got {type(data).__name__}"
            )

        try:
            snapshot = FinanceSnapshot.model_validate(data)
        except PydanticValidationError as e:
            logger.error(f"Invalid snapshot {self.path}: {e.error_count()} error(s)")
            raise ValidationError(
                f"Snapshot {self.path} failed validation: {e}",
                recovery_hint="Fix the listed fields and retry",
            )

        logger.debug(
            f"Loaded {len(snapshot.workers)} workers, {len(snapshot.projects)} "
            f"projects, {len(snapshot.time_entries)} time entries"
        )
        return snapshot

    def load_store(self) -> InMemoryFinanceStore:
        """Read the snapshot and index it in an in-memory store."""
        return InMemoryFinanceStore(self.read())
