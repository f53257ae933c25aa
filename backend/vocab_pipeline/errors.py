"""
Error taxonomy for the vocabulary lesson pipeline.

ValidationError and GenerationError abort a whole generation run.
DecodeError and AudioDecodeError are raised by the codecs and are expected
to be caught where a share link is imported or a word is played.
"""


class LessonPipelineError(Exception):
    """Base class for every error raised by the pipeline"""


class ValidationError(LessonPipelineError):
    """Malformed or empty user input, or a lesson missing required fields"""


class DecodeError(LessonPipelineError):
    """Malformed base64 or UTF-8 token"""


class AudioDecodeError(DecodeError):
    """Audio payload that is not a PCM16 stream"""


class GenerationError(LessonPipelineError):
    """A generative service call failed or returned an unusable payload"""


class GenerationCancelled(GenerationError):
    """The run was cancelled before it finished"""
