"""Bible Analyst agent: turn a raw story idea into a StoryBible."""

from google.genai import types
from pydantic import ValidationError

from .base import BaseAgent, language_directive
from ..config import GeminiConfig, GenerationConfig
from ..errors import MalformedStructure
from ..gateway import GenerationGateway
from ..models.story import StoryBible

SYSTEM = """You are a story analysis engine. You read raw story ideas of any length, from a single line to a full treatment, and distil them into a story bible that later writers can rely on.

Propose a title when the material has none. Keep character descriptions concrete: who they are, what they want, what stands in their way."""

_STRING = types.Schema(type=types.Type.STRING)
_STRING_LIST = types.Schema(type=types.Type.ARRAY, items=_STRING)

BIBLE_SCHEMA = types.Schema(
    type=types.Type.OBJECT,
    properties={
        "title": _STRING,
        "genre": _STRING_LIST,
        "setting": _STRING,
        "characters": types.Schema(
            type=types.Type.ARRAY,
            items=types.Schema(
                type=types.Type.OBJECT,
                properties={
                    "name": _STRING,
                    "role": _STRING,
                    "description": _STRING,
                },
                required=["name", "role", "description"],
            ),
        ),
        "theme": _STRING_LIST,
        "synopsis": _STRING,
    },
    required=["title", "synopsis", "characters", "setting"],
)

REQUIRED_TEXT_FIELDS = ("title", "synopsis", "setting")


def bible_from_response(data) -> StoryBible:
    """Validate a decoded backend response into a StoryBible.

    Raises:
        MalformedStructure: if the payload is not an object, misses a
            required field, leaves a required text field blank, or
            names no characters (or an unnamed one).
    """
    if not isinstance(data, dict):
        raise MalformedStructure(f"Bible response must be an object, got {type(data).__name__}")

    # Optional tag lists may come back as null
    cleaned = {k: v for k, v in data.items() if not (k in ("genre", "theme") and v is None)}
    try:
        bible = StoryBible.model_validate(cleaned)
    except ValidationError as e:
        raise MalformedStructure(f"Bible response does not match schema: {e}") from e

    blank = [name for name in REQUIRED_TEXT_FIELDS if not getattr(bible, name).strip()]
    if blank:
        raise MalformedStructure(f"Bible response left required fields blank: {', '.join(blank)}")
    if not bible.characters:
        raise MalformedStructure("Bible response names no characters")
    if any(not c.name.strip() for c in bible.characters):
        raise MalformedStructure("Bible response has a character without a name")
    return bible


class BibleAnalyst(BaseAgent):
    def __init__(
        self,
        gateway: GenerationGateway,
        gemini_config: GeminiConfig,
        generation: GenerationConfig | None = None,
    ):
        super().__init__("BibleAnalyst", gateway, gemini_config.analysis_model, generation)

    def build_prompt(self, raw_input: str) -> str:
        return (
            "Read the whole story idea below and extract its story bible:\n"
            "- title (suggest one if the idea has none)\n"
            "- genre tags\n"
            "- setting\n"
            "- characters, each with name, role and description\n"
            "- themes\n"
            "- an overall synopsis of the plot\n\n"
            f"Story idea:\n{raw_input}\n\n"
            f"{language_directive(self.generation.language)}"
        )

    async def extract(self, raw_input: str) -> StoryBible:
        """Extract a StoryBible with a single structured generation call."""
        data = await self.ask(
            "extract_bible",
            self.build_prompt(raw_input),
            schema=BIBLE_SCHEMA,
            system=SYSTEM,
        )
        return bible_from_response(data)
