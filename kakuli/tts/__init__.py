"""Text-to-speech: voice validation, chunking and synthesis."""
from .chunking import split_text
from .synthesizer import MAX_TEXT_LENGTH, VoiceSynthesizer
from .voices import ALLOWED_VOICES, validate_voice

__all__ = [
    "ALLOWED_VOICES",
    "MAX_TEXT_LENGTH",
    "VoiceSynthesizer",
    "split_text",
    "validate_voice",
]
