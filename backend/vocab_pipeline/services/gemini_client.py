"""
Google GenAI wrapper for the three generative collaborators:
structured text, illustration and speech.
"""
import json
import logging
from typing import Any, Dict, Optional

from google import genai
from google.genai import types

from vocab_pipeline.config import config
from vocab_pipeline.errors import GenerationError
from vocab_pipeline.types import InlineMedia

logger = logging.getLogger(__name__)


class GeminiService:
    """Single GenAI client shared by the detail, image and speech steps"""

    def __init__(self, client: Optional[Any] = None, api_key: Optional[str] = None):
        self._client = client
        self.api_key = api_key if api_key is not None else config.gemini_api_key
        self.text_model = config.text_model_name
        self.image_model = config.image_model_name
        self.speech_model = config.speech_model_name

    @property
    def client(self):
        if self._client is None:
            if not self.api_key:
                raise GenerationError("GEMINI_API_KEY is not set")
            self._client = genai.Client(api_key=self.api_key)
        return self._client

    def generate_structured(self, prompt: str, schema: types.Schema) -> Dict[str, Any]:
        """
        Ask the text model for JSON matching `schema`.

        Raises:
            GenerationError: if the call fails or the reply is not a JSON object
        """
        try:
            response = self.client.models.generate_content(
                model=self.text_model,
                contents=prompt,
                config=types.GenerateContentConfig(
                    response_mime_type="application/json",
                    response_schema=schema,
                ),
            )
        except GenerationError:
            raise
        except Exception as e:
            raise GenerationError(f"Text generation failed: {e}") from e

        text = response.text or ""
        try:
            payload = json.loads(text)
        except json.JSONDecodeError as e:
            raise GenerationError("Text model returned invalid JSON") from e

        if not isinstance(payload, dict):
            raise GenerationError("Text model did not return a JSON object")
        return payload

    def generate_image(self, prompt: str) -> Optional[InlineMedia]:
        """Request one image. None when the reply carries no image."""
        try:
            response = self.client.models.generate_content(
                model=self.image_model,
                contents=[prompt],
                config=types.GenerateContentConfig(response_modalities=["IMAGE"]),
            )
        except GenerationError:
            raise
        except Exception as e:
            raise GenerationError(f"Image generation failed: {e}") from e

        return first_inline_media(response)

    def generate_speech(self, script: str, voice_name: Optional[str] = None) -> Optional[InlineMedia]:
        """Synthesize `script` with a prebuilt voice. None when no audio comes back."""
        voice = voice_name or config.speech_voice_name
        try:
            response = self.client.models.generate_content(
                model=self.speech_model,
                contents=[script],
                config=types.GenerateContentConfig(
                    response_modalities=["AUDIO"],
                    speech_config=types.SpeechConfig(
                        voice_config=types.VoiceConfig(
                            prebuilt_voice_config=types.PrebuiltVoiceConfig(voice_name=voice),
                        ),
                    ),
                ),
            )
        except GenerationError:
            raise
        except Exception as e:
            raise GenerationError(f"Speech generation failed: {e}") from e

        return first_inline_media(response)


def first_inline_media(response: Any) -> Optional[InlineMedia]:
    """First inline payload of the first candidate, if any"""
    candidates = getattr(response, 'candidates', None) or []
    if not candidates:
        return None

    content = getattr(candidates[0], 'content', None)
    parts = getattr(content, 'parts', None) or []
    for part in parts:
        inline = getattr(part, 'inline_data', None)
        if inline is not None and inline.data:
            return InlineMedia(
                mime_type=inline.mime_type or "application/octet-stream",
                data=inline.data,
            )

    logger.debug("Response had no inline data")
    return None


# Global singleton
_gemini_service: Optional[GeminiService] = None


def get_gemini_service() -> GeminiService:
    """Get or create the global GenAI service"""
    global _gemini_service
    if _gemini_service is None:
        _gemini_service = GeminiService()
    return _gemini_service
