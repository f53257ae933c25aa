"""
Persistence collaborator contract.

The pipeline only appends after a run or an import succeeds. The Django
implementation lives in lessons.store.
"""
from typing import Dict, List, Optional

from vocab_pipeline.types import Lesson


class LessonStore:
    """Flat collection of user lessons"""

    def list(self) -> List[Lesson]:
        raise NotImplementedError

    def get(self, lesson_id: str) -> Optional[Lesson]:
        for lesson in self.list():
            if lesson.id == lesson_id:
                return lesson
        return None

    def append(self, lesson: Lesson) -> None:
        raise NotImplementedError

    def remove_by_id(self, lesson_id: str) -> None:
        raise NotImplementedError


class InMemoryLessonStore(LessonStore):
    """Process-local store, insertion ordered. Last writer wins on a repeated id."""

    def __init__(self, lessons: Optional[List[Lesson]] = None):
        self._lessons: Dict[str, Lesson] = {}
        for lesson in lessons or []:
            self.append(lesson)

    def list(self) -> List[Lesson]:
        return list(self._lessons.values())

    def get(self, lesson_id: str) -> Optional[Lesson]:
        return self._lessons.get(lesson_id)

    def append(self, lesson: Lesson) -> None:
        self._lessons[lesson.id] = lesson

    def remove_by_id(self, lesson_id: str) -> None:
        self._lessons.pop(lesson_id, None)
