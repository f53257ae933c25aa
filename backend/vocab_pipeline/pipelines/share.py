"""
Share/import codec.

A lesson travels between sessions as base64 of its UTF-8 JSON, carried in
a single URL query parameter. Imports always get a fresh id.
"""
import dataclasses
import json
import logging
from typing import Optional
from urllib.parse import parse_qs, quote, urlencode, urlparse, urlunparse

from vocab_pipeline.config import config
from vocab_pipeline.errors import DecodeError
from vocab_pipeline.storage import LessonStore
from vocab_pipeline.types import Lesson, lesson_from_dict, lesson_to_dict, new_lesson_id
from vocab_pipeline.utils.binary_text import ascii_safe_to_utf8, utf8_to_ascii_safe

logger = logging.getLogger(__name__)


def encode_lesson_token(lesson: Lesson) -> str:
    """
    Serialize a lesson to an ASCII token.

    The token uses the standard base64 alphabet, so `+`, `/` and `=` still
    need percent-encoding when placed in a URL (see build_share_url).
    """
    text = json.dumps(lesson_to_dict(lesson), ensure_ascii=False, separators=(',', ':'))
    return utf8_to_ascii_safe(text)


def decode_lesson_token(token: str) -> Lesson:
    """
    Inverse of encode_lesson_token. The embedded id is returned as-is.

    Raises:
        DecodeError: token is not base64 / UTF-8 / JSON
        ValidationError: decoded structure is missing required fields
    """
    if not token or not token.strip():
        raise DecodeError("Share token is empty")

    text = ascii_safe_to_utf8(token.strip())
    try:
        data = json.loads(text)
    except json.JSONDecodeError as e:
        raise DecodeError(f"Share token does not contain JSON: {e}") from e

    return lesson_from_dict(data)


def build_share_url(base_url: str, lesson: Lesson, param: Optional[str] = None) -> str:
    """Append the lesson token to `base_url` as a percent-encoded query parameter"""
    param = param or config.share_query_param
    parsed = urlparse(base_url)
    query = parse_qs(parsed.query, keep_blank_values=True)
    query.pop(param, None)
    query[param] = [encode_lesson_token(lesson)]
    return urlunparse(parsed._replace(query=urlencode(query, doseq=True, quote_via=quote)))


def extract_share_token(url_or_token: str, param: Optional[str] = None) -> Optional[str]:
    """
    Pull the token out of a share URL.

    A bare token (no scheme, no query) is returned unchanged. None when a
    URL does not carry the parameter.
    """
    param = param or config.share_query_param
    value = (url_or_token or "").strip()
    if not value:
        return None

    parsed = urlparse(value)
    if not parsed.scheme and not parsed.query and '?' not in value:
        return value

    values = parse_qs(parsed.query).get(param)
    if not values:
        return None
    # Unencoded links lose "+" to query parsing; base64 never contains spaces
    return values[0].replace(" ", "+")


def import_lesson(token: str, store: Optional[LessonStore] = None) -> Lesson:
    """
    Decode a shared lesson and persist it under a fresh id.

    Raises:
        DecodeError: corrupted link
        ValidationError: decoded lesson is incomplete
    """
    shared = decode_lesson_token(token)
    new_id = new_lesson_id()
    while new_id == shared.id or (store is not None and store.get(new_id) is not None):
        new_id = new_lesson_id()

    lesson = dataclasses.replace(shared, id=new_id)
    if store is not None:
        store.append(lesson)

    logger.info(f"Imported lesson '{lesson.subtitle}' ({len(lesson.words)} words) as {lesson.id}")
    return lesson


def preview_lesson_token(token: str) -> dict:
    """What the import prompt shows before the learner accepts"""
    lesson = decode_lesson_token(token)
    return {
        'subtitle': lesson.subtitle,
        'word_count': len(lesson.words),
    }

