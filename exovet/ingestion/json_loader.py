"""Streaming loader for the two static dataset files.

Both ``samples.json`` and ``synthesis_data.json`` are top-level JSON
arrays of flat objects.  Items are streamed with :mod:`ijson` so large
fixture files never have to be parsed in one piece.
"""

from __future__ import annotations

import asyncio
import logging
from typing import Any

import ijson

from exovet.repositories.storage import StorageBackend

logger = logging.getLogger(__name__)


class DatasetLoadError(ValueError):
    """A dataset file could not be read or does not have the expected shape."""


def _top_level_event(storage: StorageBackend, path: str) -> str | None:
    """Return the first ijson event of *path* (``start_array`` for arrays)."""
    with storage.open(path, "rb") as f:
        for _prefix, event, _value in ijson.parse(f):
            return event
    return None


def load_json_records(storage: StorageBackend, path: str) -> list[dict[str, Any]]:
    """Read *path* and return its array items as plain dicts.

    Raises
    ------
    DatasetLoadError
        If the file is missing, unreadable, malformed, not a JSON array,
        or contains an item that is not an object.
    """
    try:
        if not storage.exists(path):
            raise DatasetLoadError(f"Dataset file not found: {path}")

        first_event = _top_level_event(storage, path)
        if first_event != "start_array":
            raise DatasetLoadError(
                f"Expected a JSON array at the top level of {path}"
            )

        records: list[dict[str, Any]] = []
        with storage.open(path, "rb") as f:
            for idx, item in enumerate(ijson.items(f, "item", use_float=True)):
                if not isinstance(item, dict):
                    raise DatasetLoadError(
                        f"Item {idx} of {path} is not a JSON object"
                    )
                records.append(item)
    except (ijson.JSONError, OSError) as e:
        raise DatasetLoadError(f"Could not read {path}: {e}") from e

    logger.info("Loaded %d records from %s", len(records), path)
    return records


async def load_datasets(
    storage: StorageBackend,
    samples_path: str,
    synthesis_path: str,
) -> tuple[list[dict[str, Any]], list[dict[str, Any]]]:
    """Load samples and synthesis records concurrently.

    The two reads run as independent worker-thread tasks joined into a
    single completion point.  If either fails the whole load fails with
    :class:`DatasetLoadError`.
    """
    samples, synthesis = await asyncio.gather(
        asyncio.to_thread(load_json_records, storage, samples_path),
        asyncio.to_thread(load_json_records, storage, synthesis_path),
    )
    return samples, synthesis
