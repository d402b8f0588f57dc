"""
Recently selected students.

Keeps a short most-recent-first list of student ids behind a small key-value
interface so the dashboard can run with an in-memory store in tests and a
JSON file on disk otherwise. Storage failures are logged and never fatal.
"""

import json
from abc import ABC, abstractmethod
from pathlib import Path
from typing import List, Sequence, Union
import logging

from ..models.assessment import Student

logger = logging.getLogger(__name__)

RECENT_LIMIT = 8


class RecentStudentsStore(ABC):
    """Abstract interface for recent-student storage."""

    @abstractmethod
    def get(self) -> List[str]:
        """Stored ids, most recent first."""
        pass

    @abstractmethod
    def set(self, ids: Sequence[str]) -> None:
        """Replace the stored ids."""
        pass


class InMemoryRecentStore(RecentStudentsStore):
    """Process-local store."""

    def __init__(self, ids: Sequence[str] = ()):
        self._ids: List[str] = list(ids)

    def get(self) -> List[str]:
        return list(self._ids)

    def set(self, ids: Sequence[str]) -> None:
        self._ids = list(ids)


class JSONFileRecentStore(RecentStudentsStore):
    """Stores the id list as a JSON array in a file."""

    def __init__(self, path: Union[str, Path]):
        self.path = Path(path)

    def get(self) -> List[str]:
        if not self.path.exists():
            return []

        try:
            with open(self.path, "r", encoding="utf-8") as f:
                data = json.load(f)
        except (OSError, json.JSONDecodeError) as e:
            logger.warning(f"Could not read recent students from {self.path}: {e}")
            return []

        if not isinstance(data, list):
            return []
        return [str(item) for item in data]

    def set(self, ids: Sequence[str]) -> None:
        try:
            self.path.parent.mkdir(parents=True, exist_ok=True)
            with open(self.path, "w", encoding="utf-8") as f:
                json.dump(list(ids), f)
        except OSError as e:
            logger.warning(f"Could not save recent students to {self.path}: {e}")


def remember_student(store: RecentStudentsStore, student_id: str, limit: int = RECENT_LIMIT) -> List[str]:
    """Move a student to the front of the recent list, deduplicated and capped."""
    current = store.get()
    if current and current[0] == student_id and len(current) <= limit:
        return current

    updated = [student_id] + [sid for sid in current if sid != student_id]
    updated = updated[:limit]
    store.set(updated)
    return updated


def recent_students(students: Sequence[Student], ids: Sequence[str], limit: int = RECENT_LIMIT) -> List[Student]:
    """Resolve stored ids to known students, skipping ids no longer present."""
    by_id = {student.id: student for student in students}
    result = []
    for sid in ids:
        if sid in by_id and by_id[sid] not in result:
            result.append(by_id[sid])
        if len(result) >= limit:
            break
    return result
