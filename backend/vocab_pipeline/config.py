"""
Configuration for the vocabulary lesson pipeline.
"""
import os
from dataclasses import dataclass


@dataclass
class AppConfig:
    """Application configuration loaded from environment variables"""

    # Google GenAI
    gemini_api_key: str = ""
    text_model_name: str = "gemini-2.5-flash"
    image_model_name: str = "gemini-2.5-flash-image"
    speech_model_name: str = "gemini-2.5-flash-preview-tts"
    speech_voice_name: str = "Puck"

    # Raw PCM16 mono returned by the speech model
    audio_sample_rate: int = 24000

    # Share links
    share_query_param: str = "lessonData"

    # Crystal tally starting balance
    initial_crystals: int = 7

    # Logging
    log_level: str = "INFO"


def load_config() -> AppConfig:
    """Load configuration from environment variables"""
    return AppConfig(
        # Same key name the live consumer used, GEMINI_API_KEY wins when both are set
        gemini_api_key=os.getenv('GEMINI_API_KEY', os.getenv('GOOGLE_AI_API_KEY', '')),
        text_model_name=os.getenv('TEXT_MODEL_NAME', 'gemini-2.5-flash'),
        image_model_name=os.getenv('IMAGE_MODEL_NAME', 'gemini-2.5-flash-image'),
        speech_model_name=os.getenv('SPEECH_MODEL_NAME', 'gemini-2.5-flash-preview-tts'),
        speech_voice_name=os.getenv('SPEECH_VOICE_NAME', 'Puck'),

        audio_sample_rate=int(os.getenv('AUDIO_SAMPLE_RATE', '24000')),

        share_query_param=os.getenv('SHARE_QUERY_PARAM', 'lessonData'),

        initial_crystals=int(os.getenv('INITIAL_CRYSTALS', '7')),

        log_level=os.getenv('LOG_LEVEL', 'INFO'),
    )


# Global config instance
config = load_config()
