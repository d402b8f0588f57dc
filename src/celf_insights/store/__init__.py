"""Persistence of dashboard selection state."""

from .recent import (
    RECENT_LIMIT,
    InMemoryRecentStore,
    JSONFileRecentStore,
    RecentStudentsStore,
    recent_students,
    remember_student,
)

__all__ = [
    'RECENT_LIMIT',
    'InMemoryRecentStore',
    'JSONFileRecentStore',
    'RecentStudentsStore',
    'recent_students',
    'remember_student',
]
