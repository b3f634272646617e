"""
Loading operation batches from JSON.

The file holds either a list of operation objects or an object with an
``operations`` list. See :meth:`Operation.from_dict` for the accepted
keys.
"""

from __future__ import annotations

import json
import logging
from pathlib import Path
from typing import Any, List

from change_preview.diff.models import Operation, OperationError


logger = logging.getLogger(__name__)
if not logger.handlers:
    logger.addHandler(logging.NullHandler())
    logger.propagate = False


def parse_operations(data: Any) -> List[Operation]:
    """Build operations from decoded JSON.

    Raises
    ------
    OperationError
        If the structure is not a list of operations or an object with an
        ``operations`` list, or if an operation id is duplicated.
    """
    if isinstance(data, dict):
        data = data.get("operations")
    if not isinstance(data, list):
        raise OperationError("Expected a list of operations or an object with an 'operations' list")

    operations = [Operation.from_dict(item) for item in data]
    seen = set()
    for op in operations:
        if op.id in seen:
            raise OperationError(f"Duplicate operation id: {op.id}")
        seen.add(op.id)
    return operations


def load_operations(path: Path) -> List[Operation]:
    """Read and parse an operations file."""
    try:
        data = json.loads(path.read_text(encoding="utf-8"))
    except (OSError, json.JSONDecodeError) as exc:
        logger.error("Failed to read operations file %s: %s", path, exc)
        raise OperationError(f"Cannot read operations from {path.name}: {exc}") from exc
    operations = parse_operations(data)
    logger.debug("Loaded %d operation(s) from %s", len(operations), path)
    return operations
