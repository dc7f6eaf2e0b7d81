import pytest

from kakuli.exceptions import InputValidationError
from kakuli.tts import ALLOWED_VOICES, validate_voice


def test_known_voice_passes():
    assert validate_voice("Orus") == "Orus"


def test_voice_names_are_case_sensitive():
    with pytest.raises(InputValidationError):
        validate_voice("orus")


def test_invalid_voice_lists_every_voice():
    with pytest.raises(InputValidationError) as exc_info:
        validate_voice("Robot")
    message = str(exc_info.value)
    assert message.startswith("No voice available with that name.\nAvailable voices: ")
    for voice in ALLOWED_VOICES:
        assert voice in message


def test_voice_set_has_no_duplicates():
    assert len(set(ALLOWED_VOICES)) == len(ALLOWED_VOICES)
