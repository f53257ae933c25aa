"""
Image step: wrap the word's image prompt in the house style and request
one illustration.
"""
import logging
from typing import Optional

from vocab_pipeline.services.gemini_client import GeminiService, get_gemini_service
from vocab_pipeline.types import InlineMedia, WordDetails
from vocab_pipeline.utils.binary_text import bytes_to_base64

logger = logging.getLogger(__name__)


ILLUSTRATION_TEMPLATE = """Create a cheerful, colorful illustration for teaching children Japanese words.
Style: bright, playful, child-friendly cartoon art with soft colors and rounded shapes.
Include: {subject}, warm and inviting atmosphere,
vibrant colors (pastels and bright hues), no scary elements,
suitable for ages 5-10, educational but fun, high quality illustration.
IMPORTANT: The illustration must not contain any text, letters, or words in any language."""


def build_illustration_prompt(image_prompt: str) -> str:
    return ILLUSTRATION_TEMPLATE.format(subject=image_prompt.strip())


def to_data_uri(media: InlineMedia) -> str:
    """Self-contained image reference: data:<mime>;base64,<bytes>"""
    return f"data:{media.mime_type};base64,{bytes_to_base64(media.data)}"


class IllustrationService:
    """Service for word illustrations"""

    def __init__(self, gemini: Optional[GeminiService] = None):
        self.gemini = gemini or get_gemini_service()

    def generate(self, details: WordDetails) -> Optional[InlineMedia]:
        """
        Illustrate a word.

        Returns:
            The image, or None when the model sent none. Callers fall back to
            the emoji.
        """
        media = self.gemini.generate_image(build_illustration_prompt(details.image_prompt))
        if media is None:
            logger.warning(f"No image returned for '{details.hiragana}', falling back to emoji")
        return media
