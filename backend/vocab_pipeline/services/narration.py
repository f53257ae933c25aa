"""
Audio step: the spoken walkthrough of a word.
"""
import logging
from typing import Optional

from vocab_pipeline.config import config
from vocab_pipeline.services.gemini_client import GeminiService, get_gemini_service
from vocab_pipeline.types import InlineMedia, WordDetails

logger = logging.getLogger(__name__)

SYLLABLE_PAUSE = "... "


def build_narration_script(details: WordDetails) -> str:
    """
    Narration: state the word, spell its syllables, spell them again
    together, say the whole word slowly, give the meaning, encourage.
    """
    syllables = SYLLABLE_PAUSE.join(p.syllable for p in details.phonemes)
    return (
        f"A palavra em japonês é: {details.hiragana}. "
        f"Soletrando em hiragana, temos: {syllables}. "
        f"Agora, tente soletrar comigo. Vamos lá: {syllables}. "
        f"Mais uma vez, juntos: {syllables}. "
        f"Excelente! Agora, vamos dizer a palavra inteira, devagarinho, como se lê em hiragana: {details.hiragana}. "
        f"Essa palavra significa \"{details.portuguese}\". "
        f"Você aprende muito rápido! Parabéns!"
    )


class NarrationService:
    """Service for narrated word audio"""

    def __init__(self, gemini: Optional[GeminiService] = None, voice_name: Optional[str] = None):
        self.gemini = gemini or get_gemini_service()
        self.voice_name = voice_name or config.speech_voice_name

    def generate(self, details: WordDetails) -> Optional[InlineMedia]:
        """Raw PCM16 narration, or None when the model sent no audio"""
        media = self.gemini.generate_speech(build_narration_script(details), self.voice_name)
        if media is None:
            logger.warning(f"No audio returned for '{details.hiragana}', playback will be silent")
        return media
