"""File storage layer for taskr."""

import json
import logging
import os
import tempfile
from pathlib import Path
from typing import List, Optional, Union

from taskr.config import data_file
from taskr.errors import StorageDegraded
from taskr.models import Task

logger = logging.getLogger(__name__)


class TaskStore:
    """
    Whole-collection JSON store.

    Every load() reads the full task list from disk and every save()
    replaces it. Nothing is cached between calls.
    """

    def __init__(self, path: Optional[Union[str, Path]] = None):
        self.path = Path(path) if path is not None else data_file()

    def ensure_file(self) -> None:
        """Create the data directory and an empty collection if missing."""
        self.path.parent.mkdir(parents=True, exist_ok=True)
        if not self.path.exists():
            self.path.write_text("[]\n", encoding="utf-8")
            logger.debug("Created empty task file %s", self.path)

    def _read_raw(self) -> list:
        try:
            with open(self.path, "r", encoding="utf-8") as f:
                data = json.load(f)
        except (OSError, ValueError) as e:
            raise StorageDegraded(f"Failed to read {self.path}: {e}") from e

        if not isinstance(data, list):
            raise StorageDegraded(f"{self.path} is not a list")
        return data

    def load(self) -> List[Task]:
        """
        Load every task from the data file.

        Returns:
            List of Task objects. Empty list if the file is unreadable or
            corrupt; records that fail to parse are skipped.
        """
        try:
            self.ensure_file()
            data = self._read_raw()
        except (OSError, StorageDegraded) as e:
            logger.warning("%s, starting with an empty task list", e)
            return []

        tasks = []
        for task_dict in data:
            try:
                tasks.append(Task.from_dict(task_dict))
            except (KeyError, TypeError, ValueError, AttributeError) as e:
                task_id = task_dict.get('id', 'unknown') if isinstance(task_dict, dict) else 'unknown'
                logger.warning("Failed to load task %s: %s", task_id, e)
                continue

        return tasks

    def save(self, tasks: List[Task]) -> None:
        """
        Save the full task list using an atomic write.

        Write failures are logged, not raised.

        Args:
            tasks: List of Task objects to save.
        """
        data = [task.to_dict() for task in tasks]

        temp_path = None
        try:
            self.ensure_file()
            # Temp file in the same directory so the rename stays atomic
            fd, temp_path = tempfile.mkstemp(
                dir=self.path.parent,
                prefix='.data_',
                suffix='.json.tmp'
            )

            with os.fdopen(fd, 'w', encoding='utf-8') as f:
                json.dump(data, f, indent=2, ensure_ascii=False)

            os.replace(temp_path, self.path)
            temp_path = None
            logger.debug("Saved %d tasks to %s", len(tasks), self.path)

        except (OSError, TypeError, ValueError) as e:
            logger.error("Failed to save %s: %s", self.path, e)
        finally:
            if temp_path is not None:
                try:
                    os.unlink(temp_path)
                except OSError:
                    logger.debug("Could not remove temp file %s", temp_path)
