"""Narration settings and voice selection for reading section text aloud.

Playback itself belongs to whatever speech engine the caller provides.
"""

from typing import Literal, Optional, Protocol, Sequence

from loguru import logger
from pydantic import BaseModel, ConfigDict, Field

VoiceGender = Literal["male", "female"]

GENDER_HINTS: dict[str, tuple[str, ...]] = {
    "female": ("Female", "Linh", "Mai"),
    "male": ("Male", "Nam", "Minh"),
}


class VoiceSettings(BaseModel):
    model_config = ConfigDict(frozen=True)

    gender: VoiceGender = "male"
    speed: float = Field(default=1.0, ge=0.5, le=2.0)
    pitch: float = Field(default=1.0, gt=0)
    is_playing: bool = False


class Voice(BaseModel):
    model_config = ConfigDict(frozen=True)

    name: str
    lang: str


class SpeechEngine(Protocol):
    def speak(self, text: str, voice: Optional[Voice], rate: float, pitch: float) -> None: ...

    def cancel(self) -> None: ...


def select_voice(
    voices: Sequence[Voice], gender: VoiceGender, lang_tag: str = "vi"
) -> Optional[Voice]:
    """Pick the best available voice for a language and gender.

    Voices whose ``lang`` contains ``lang_tag`` are preferred, and among them
    one whose name carries a gender hint. Falls back to the first language
    match, then to the first voice at all.
    """
    if not voices:
        return None
    matching = [v for v in voices if lang_tag in v.lang]
    if not matching:
        return voices[0]
    for voice in matching:
        if any(hint in voice.name for hint in GENDER_HINTS[gender]):
            return voice
    return matching[0]


def toggle_narration(
    engine: SpeechEngine,
    text: str,
    settings: VoiceSettings,
    voices: Sequence[Voice],
    lang_tag: str = "vi",
) -> VoiceSettings:
    """Stop narration if it is running, otherwise start reading ``text``."""
    if settings.is_playing:
        engine.cancel()
        return settings.model_copy(update={"is_playing": False})
    if not text:
        return settings

    voice = select_voice(voices, settings.gender, lang_tag)
    logger.debug("Narrating {} chars with voice {}", len(text), voice.name if voice else "-")
    engine.speak(text, voice, settings.speed, settings.pitch)
    return settings.model_copy(update={"is_playing": True})
