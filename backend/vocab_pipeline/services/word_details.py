"""
Detail step: ask the text model for the structured description of a word.
"""
import logging
from typing import Any, Dict, Optional

from google.genai import types

from vocab_pipeline.errors import GenerationError, ValidationError
from vocab_pipeline.services.gemini_client import GeminiService, get_gemini_service
from vocab_pipeline.types import WordDetails, phonemes_from_list

logger = logging.getLogger(__name__)


WORD_DETAIL_SCHEMA = types.Schema(
    type=types.Type.OBJECT,
    properties={
        'kanji': types.Schema(
            type=types.Type.STRING,
            description="The Japanese word in Kanji. If not applicable, return an empty string.",
        ),
        'hiragana': types.Schema(type=types.Type.STRING, description="The Japanese word in Hiragana."),
        'portuguese': types.Schema(type=types.Type.STRING, description="The Portuguese translation."),
        'romaji': types.Schema(type=types.Type.STRING, description="The romaji of the word."),
        'emoji': types.Schema(type=types.Type.STRING, description="A single emoji that represents the word."),
        'imagePrompt': types.Schema(
            type=types.Type.STRING,
            description=(
                "A simple, child-friendly English prompt for an image generation model to create a "
                "cute, vibrant watercolor illustration of the word. "
                "E.g., 'A cute, smiling cartoon dog, watercolor style'."
            ),
        ),
        'phonemes': types.Schema(
            type=types.Type.ARRAY,
            items=types.Schema(
                type=types.Type.OBJECT,
                properties={
                    'syllable': types.Schema(type=types.Type.STRING),
                    'romaji': types.Schema(type=types.Type.STRING),
                },
                required=['syllable', 'romaji'],
            ),
        ),
    },
    required=['hiragana', 'portuguese', 'romaji', 'emoji', 'imagePrompt', 'phonemes'],
)

REQUIRED_TEXT_FIELDS = ('hiragana', 'portuguese', 'romaji', 'emoji', 'imagePrompt')


def build_detail_prompt(word: str) -> str:
    return f'Gere os detalhes para a palavra japonesa "{word}" para uma criança brasileira de 6 anos.'


def parse_word_details(payload: Dict[str, Any]) -> WordDetails:
    """
    Check the model reply against the detail schema.

    Raises:
        GenerationError: if a required field is missing, mistyped or empty
    """
    for key in REQUIRED_TEXT_FIELDS:
        value = payload.get(key)
        if not isinstance(value, str) or not value.strip():
            raise GenerationError(f"Detail reply is missing '{key}'")

    kanji = payload.get('kanji')
    if kanji is not None and not isinstance(kanji, str):
        raise GenerationError("Detail reply has a non-string 'kanji'")

    try:
        phonemes = phonemes_from_list(payload.get('phonemes'), "detail reply")
    except ValidationError as e:
        raise GenerationError(str(e)) from e
    if not phonemes:
        raise GenerationError("Detail reply has no phonemes")

    return WordDetails(
        kanji=kanji or None,
        hiragana=payload['hiragana'],
        portuguese=payload['portuguese'],
        romaji=payload['romaji'],
        emoji=payload['emoji'],
        image_prompt=payload['imagePrompt'],
        phonemes=phonemes,
    )


class WordDetailService:
    """Service for the structured description of a single word"""

    def __init__(self, gemini: Optional[GeminiService] = None):
        self.gemini = gemini or get_gemini_service()

    def generate(self, word: str) -> WordDetails:
        logger.debug(f"Requesting details for '{word}'")
        payload = self.gemini.generate_structured(build_detail_prompt(word), WORD_DETAIL_SCHEMA)
        details = parse_word_details(payload)
        logger.info(f"Details for '{word}': {details.hiragana} ({details.romaji}) = {details.portuguese}")
        return details
