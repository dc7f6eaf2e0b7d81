"""Prebuilt voices accepted by the speech model."""
from typing import Tuple

from ..exceptions import InputValidationError

ALLOWED_VOICES: Tuple[str, ...] = (
    "Achernar",
    "Achird",
    "Algenib",
    "Algieba",
    "Alnilam",
    "Aoede",
    "Autonoe",
    "Callirrhoe",
    "Charon",
    "Despina",
    "Enceladus",
    "Erinome",
    "Fenrir",
    "Gacrux",
    "Iapetus",
    "Kore",
    "Laomedeia",
    "Leda",
    "Orus",
    "Pulcherrima",
    "Puck",
    "Rasalgethi",
    "Sadachbia",
    "Sadaltager",
    "Schedar",
    "Sulafat",
    "Umbriel",
    "Vindemiatrix",
    "Zephyr",
    "Zubenelgenubi",
)


def validate_voice(voice: str) -> str:
    """Return ``voice`` unchanged if it is a known voice name (case-sensitive)."""
    if voice not in ALLOWED_VOICES:
        raise InputValidationError(
            f"No voice available with that name.\nAvailable voices: {', '.join(ALLOWED_VOICES)}"
        )
    return voice
