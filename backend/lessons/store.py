"""
Database-backed persistence for user lessons and the crystal tally.
"""
import logging
from typing import List, Optional

from django.db import transaction
from django.db.models import F

from vocab_pipeline.config import config
from vocab_pipeline.errors import ValidationError
from vocab_pipeline.storage import LessonStore
from vocab_pipeline.types import Lesson, lesson_from_dict, lesson_to_dict

from .models import CrystalTally, UserLesson

logger = logging.getLogger(__name__)


class DjangoLessonStore(LessonStore):
    """UserLesson rows in creation order"""

    def list(self) -> List[Lesson]:
        lessons = []
        for row in UserLesson.objects.all():
            lesson = self._load(row)
            if lesson is not None:
                lessons.append(lesson)
        return lessons

    def get(self, lesson_id: str) -> Optional[Lesson]:
        row = UserLesson.objects.filter(lesson_id=lesson_id).first()
        return self._load(row) if row is not None else None

    def append(self, lesson: Lesson) -> None:
        UserLesson.objects.update_or_create(
            lesson_id=lesson.id,
            defaults={
                'subtitle': lesson.subtitle,
                'payload': lesson_to_dict(lesson),
            },
        )

    def remove_by_id(self, lesson_id: str) -> None:
        UserLesson.objects.filter(lesson_id=lesson_id).delete()

    @staticmethod
    def _load(row: UserLesson) -> Optional[Lesson]:
        try:
            return lesson_from_dict(row.payload)
        except ValidationError as e:
            # Corrupted rows are dropped so the list stays usable
            logger.error(f"Failed to parse stored lesson {row.lesson_id}, removing it: {e}")
            row.delete()
            return None


def get_crystals(key: str = 'default') -> int:
    tally, _ = CrystalTally.objects.get_or_create(
        key=key,
        defaults={'crystals': config.initial_crystals},
    )
    return tally.crystals


def award_crystal(key: str = 'default', amount: int = 1) -> int:
    """Add crystals and return the new balance"""
    with transaction.atomic():
        CrystalTally.objects.get_or_create(key=key, defaults={'crystals': config.initial_crystals})
        CrystalTally.objects.filter(key=key).update(crystals=F('crystals') + amount)
        return CrystalTally.objects.get(key=key).crystals
