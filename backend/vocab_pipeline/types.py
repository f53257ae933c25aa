"""
Shared types for the vocabulary lesson pipeline.

The dict helpers at the bottom define the wire form shared by the HTTP API,
the share token and the lesson store. Keys are camelCase so links created by
the browser client keep decoding.
"""
from typing import Optional, Dict, Any, List, Tuple
from dataclasses import dataclass, field
from datetime import datetime, timezone
import uuid

from vocab_pipeline.errors import ValidationError


def new_lesson_id() -> str:
    """Random 128-bit id, safe across sessions that share lessons"""
    return uuid.uuid4().hex


def utc_now_iso() -> str:
    return datetime.now(timezone.utc).isoformat()


@dataclass(frozen=True)
class Phoneme:
    """One syllable and its romaji reading"""
    syllable: str
    romaji: str


@dataclass(frozen=True)
class WordDetails:
    """Structured output of the detail step, before image and audio exist"""
    hiragana: str
    portuguese: str
    romaji: str
    emoji: str
    image_prompt: str
    phonemes: Tuple[Phoneme, ...] = ()
    kanji: Optional[str] = None


@dataclass(frozen=True)
class InlineMedia:
    """Inline payload returned by the image or speech model"""
    mime_type: str
    data: bytes


@dataclass(frozen=True)
class WordEntry:
    """One taught word. Empty image_url / audio_data mean the asset is absent."""
    hiragana: str
    portuguese: str
    romaji: str
    emoji: str
    image_prompt: str
    phonemes: Tuple[Phoneme, ...] = ()
    kanji: Optional[str] = None
    image_url: str = ""
    audio_data: str = ""  # base64 PCM16 mono


@dataclass(frozen=True)
class Lesson:
    """Named, ordered collection of words"""
    id: str = field(default_factory=new_lesson_id)
    subtitle: str = ""
    words: Tuple[WordEntry, ...] = ()
    is_user_created: Optional[bool] = None
    created_at: Optional[str] = None


@dataclass(frozen=True)
class DecodedAudio:
    """Normalized mono samples ready for playback"""
    samples: Tuple[float, ...]
    sample_rate: int
    pcm: bytes = b""


# Helper functions for type conversions
def phoneme_to_dict(phoneme: Phoneme) -> Dict[str, Any]:
    return {'syllable': phoneme.syllable, 'romaji': phoneme.romaji}


def word_entry_to_dict(word: WordEntry) -> Dict[str, Any]:
    """Convert WordEntry to dict for serialization"""
    return {
        'kanji': word.kanji,
        'hiragana': word.hiragana,
        'portuguese': word.portuguese,
        'romaji': word.romaji,
        'emoji': word.emoji,
        'imagePrompt': word.image_prompt,
        'phonemes': [phoneme_to_dict(p) for p in word.phonemes],
        'imageUrl': word.image_url,
        'audioData': word.audio_data,
    }


def lesson_to_dict(lesson: Lesson) -> Dict[str, Any]:
    """Convert Lesson to dict for serialization. Unset optional keys are omitted."""
    data: Dict[str, Any] = {
        'id': lesson.id,
        'subtitle': lesson.subtitle,
        'words': [word_entry_to_dict(w) for w in lesson.words],
    }
    if lesson.is_user_created is not None:
        data['isUserCreated'] = lesson.is_user_created
    if lesson.created_at is not None:
        data['createdAt'] = lesson.created_at
    return data


def _require_str(data: Dict[str, Any], key: str, where: str) -> str:
    value = data.get(key)
    if not isinstance(value, str):
        raise ValidationError(f"{where}: '{key}' is required and must be a string")
    return value


def _optional_str(data: Dict[str, Any], key: str, where: str, default: Optional[str]) -> Optional[str]:
    value = data.get(key, default)
    if value is not None and not isinstance(value, str):
        raise ValidationError(f"{where}: '{key}' must be a string")
    return value


def phonemes_from_list(items: Any, where: str) -> Tuple[Phoneme, ...]:
    if not isinstance(items, list):
        raise ValidationError(f"{where}: 'phonemes' is required and must be a list")
    phonemes: List[Phoneme] = []
    for i, item in enumerate(items):
        if not isinstance(item, dict):
            raise ValidationError(f"{where}: phoneme {i} must be an object")
        phonemes.append(Phoneme(
            syllable=_require_str(item, 'syllable', f"{where} phoneme {i}"),
            romaji=_require_str(item, 'romaji', f"{where} phoneme {i}"),
        ))
    return tuple(phonemes)


def word_entry_from_dict(data: Any, where: str = "word") -> WordEntry:
    """Build a WordEntry from its wire form, raising ValidationError on bad shape"""
    if not isinstance(data, dict):
        raise ValidationError(f"{where} must be an object")
    return WordEntry(
        kanji=_optional_str(data, 'kanji', where, None) or None,
        hiragana=_require_str(data, 'hiragana', where),
        portuguese=_require_str(data, 'portuguese', where),
        romaji=_require_str(data, 'romaji', where),
        emoji=_require_str(data, 'emoji', where),
        image_prompt=_require_str(data, 'imagePrompt', where),
        phonemes=phonemes_from_list(data.get('phonemes'), where),
        image_url=_optional_str(data, 'imageUrl', where, '') or '',
        audio_data=_optional_str(data, 'audioData', where, '') or '',
    )


def lesson_from_dict(data: Any) -> Lesson:
    """Build a Lesson from its wire form, raising ValidationError on bad shape"""
    if not isinstance(data, dict):
        raise ValidationError("lesson must be an object")

    words = data.get('words')
    if not isinstance(words, list) or not words:
        raise ValidationError("lesson: 'words' is required and must be a non-empty list")

    is_user_created = data.get('isUserCreated')
    if is_user_created is not None and not isinstance(is_user_created, bool):
        raise ValidationError("lesson: 'isUserCreated' must be a boolean")

    return Lesson(
        id=_require_str(data, 'id', "lesson"),
        subtitle=_require_str(data, 'subtitle', "lesson"),
        words=tuple(word_entry_from_dict(w, f"word {i}") for i, w in enumerate(words)),
        is_user_created=is_user_created,
        created_at=_optional_str(data, 'createdAt', "lesson", None),
    )
