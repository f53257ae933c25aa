"""
Main orchestrator pipeline.

Turns a list of words into a complete Lesson: details, illustration and
narration for each word, strictly in input order.
"""
import logging
import threading
from dataclasses import dataclass
from typing import Callable, List, Optional

from vocab_pipeline.errors import GenerationCancelled, GenerationError, ValidationError
from vocab_pipeline.services.gemini_client import GeminiService
from vocab_pipeline.services.illustration import IllustrationService, to_data_uri
from vocab_pipeline.services.narration import NarrationService
from vocab_pipeline.services.word_details import WordDetailService
from vocab_pipeline.storage import LessonStore
from vocab_pipeline.types import (
    InlineMedia,
    Lesson,
    WordDetails,
    WordEntry,
    new_lesson_id,
    utc_now_iso,
)
from vocab_pipeline.utils.binary_text import bytes_to_base64

logger = logging.getLogger(__name__)

ProgressSink = Callable[[str], None]


def log_progress(message: str) -> None:
    """Default progress sink"""
    logger.info(message)


@dataclass
class GenerationStats:
    """Counters for one generation run"""
    words_requested: int = 0
    words_completed: int = 0
    images_missing: int = 0
    audio_missing: int = 0
    failed_word: Optional[str] = None

    def to_dict(self) -> dict:
        return {
            'words_requested': self.words_requested,
            'words_completed': self.words_completed,
            'images_missing': self.images_missing,
            'audio_missing': self.audio_missing,
            'failed_word': self.failed_word,
        }


def parse_word_list(raw_words_text: str) -> List[str]:
    """One word per line, blank lines dropped, order kept"""
    return [line.strip() for line in (raw_words_text or "").splitlines() if line.strip()]


def assemble_word_entry(
    details: WordDetails,
    image: Optional[InlineMedia],
    audio: Optional[InlineMedia],
) -> WordEntry:
    """Absent image/audio become empty strings at this boundary"""
    return WordEntry(
        kanji=details.kanji or None,
        hiragana=details.hiragana,
        portuguese=details.portuguese,
        romaji=details.romaji,
        emoji=details.emoji,
        image_prompt=details.image_prompt,
        phonemes=details.phonemes,
        image_url=to_data_uri(image) if image is not None else "",
        audio_data=bytes_to_base64(audio.data) if audio is not None else "",
    )


class LessonGenerator:
    """Runs the detail, image and audio steps for every word of a lesson"""

    def __init__(
        self,
        gemini: Optional[GeminiService] = None,
        details: Optional[WordDetailService] = None,
        illustrations: Optional[IllustrationService] = None,
        narration: Optional[NarrationService] = None,
    ):
        self.details = details or WordDetailService(gemini)
        self.illustrations = illustrations or IllustrationService(gemini)
        self.narration = narration or NarrationService(gemini)

    def generate_word(
        self,
        word: str,
        position: int,
        total: int,
        progress: ProgressSink,
        cancel_event: Optional[threading.Event] = None,
        stats: Optional[GenerationStats] = None,
    ) -> WordEntry:
        """Build one WordEntry. Detail failures propagate; missing media does not."""
        _check_cancelled(cancel_event)
        progress(f'Analisando "{word}" ({position}/{total})')
        details = self.details.generate(word)

        _check_cancelled(cancel_event)
        progress(f'Criando imagem para "{word}" ({position}/{total})...')
        image = self.illustrations.generate(details)

        _check_cancelled(cancel_event)
        progress(f'Gravando áudio para "{word}" ({position}/{total})...')
        audio = self.narration.generate(details)

        if stats is not None:
            if image is None:
                stats.images_missing += 1
            if audio is None:
                stats.audio_missing += 1
        return assemble_word_entry(details, image, audio)

    def generate_lesson(
        self,
        subtitle: str,
        raw_words_text: str,
        progress: Optional[ProgressSink] = None,
        store: Optional[LessonStore] = None,
        cancel_event: Optional[threading.Event] = None,
        stats: Optional[GenerationStats] = None,
    ) -> Lesson:
        """
        Generate a complete lesson.

        Args:
            subtitle: Lesson name shown to the learner
            raw_words_text: One target word per line
            progress: Receives human-readable status before each step
            store: Appended to once, only after every word succeeded
            cancel_event: Checked before each step
            stats: Optional counters filled in during the run

        Returns:
            Lesson with one WordEntry per input word, in input order

        Raises:
            ValidationError: blank subtitle or no words
            GenerationError: any service call failed; nothing is persisted
        """
        subtitle = (subtitle or "").strip()
        if not subtitle:
            raise ValidationError("Subtitle is required")
        words = parse_word_list(raw_words_text)
        if not words:
            raise ValidationError("At least one word is required")

        sink = _advisory_sink(progress or log_progress)
        if stats is not None:
            stats.words_requested = len(words)

        logger.info(f"=== Starting lesson generation: '{subtitle}' ({len(words)} words) ===")

        entries: List[WordEntry] = []
        for position, word in enumerate(words, 1):
            try:
                entry = self.generate_word(word, position, len(words), sink, cancel_event, stats)
            except GenerationError as e:
                if stats is not None:
                    stats.failed_word = word
                logger.error(f"Lesson generation failed at '{word}' ({position}/{len(words)}): {e}", exc_info=True)
                raise
            entries.append(entry)
            if stats is not None:
                stats.words_completed += 1

        lesson = Lesson(
            id=new_lesson_id(),
            subtitle=subtitle,
            words=tuple(entries),
            is_user_created=True,
            created_at=utc_now_iso(),
        )

        _check_cancelled(cancel_event)
        if store is not None:
            store.append(lesson)

        logger.info(f"=== Lesson generation complete: {lesson.id} ===")
        return lesson


def _check_cancelled(cancel_event: Optional[threading.Event]) -> None:
    if cancel_event is not None and cancel_event.is_set():
        raise GenerationCancelled("Lesson generation was cancelled")


def _advisory_sink(sink: ProgressSink) -> ProgressSink:
    """Progress is advisory: a failing sink never breaks the run"""
    def emit(message: str) -> None:
        try:
            sink(message)
        except Exception as e:
            logger.warning(f"Progress sink failed: {e}")
    return emit


# Global singleton
_lesson_generator: Optional[LessonGenerator] = None


def get_lesson_generator() -> LessonGenerator:
    """Get or create the global lesson generator"""
    global _lesson_generator
    if _lesson_generator is None:
        _lesson_generator = LessonGenerator()
    return _lesson_generator
