"""Outline Architect agent: expand a story bible into chapters, parts and sections."""

from google.genai import types
from pydantic import BaseModel, TypeAdapter, ValidationError

from .base import BaseAgent, language_directive
from ..config import GeminiConfig, GenerationConfig
from ..errors import MalformedStructure
from ..gateway import GenerationGateway
from ..models.story import Chapter, Part, Section, StoryBible

SYSTEM = """You are a master story architect. You design compelling, well-structured novel outlines with clear narrative arcs, character development, and thematic depth.

Every chapter, part and section gets its own short summary. Section summaries are briefs for the writer: they say what must happen in that stretch of the story, not how to write it."""

_INT = types.Schema(type=types.Type.INTEGER)
_STRING = types.Schema(type=types.Type.STRING)

OUTLINE_SCHEMA = types.Schema(
    type=types.Type.ARRAY,
    items=types.Schema(
        type=types.Type.OBJECT,
        properties={
            "number": _INT,
            "title": _STRING,
            "summary": _STRING,
            "parts": types.Schema(
                type=types.Type.ARRAY,
                items=types.Schema(
                    type=types.Type.OBJECT,
                    properties={
                        "number": _INT,
                        "summary": _STRING,
                        "sections": types.Schema(
                            type=types.Type.ARRAY,
                            items=types.Schema(
                                type=types.Type.OBJECT,
                                properties={"number": _INT, "summary": _STRING},
                                required=["number", "summary"],
                            ),
                        ),
                    },
                    required=["number", "summary", "sections"],
                ),
            ),
        },
        required=["number", "title", "summary", "parts"],
    ),
)


class SectionDraft(BaseModel):
    number: int
    summary: str


class PartDraft(BaseModel):
    number: int
    summary: str
    sections: list[SectionDraft]


class ChapterDraft(BaseModel):
    number: int
    title: str
    summary: str
    parts: list[PartDraft]


_OUTLINE_ADAPTER = TypeAdapter(list[ChapterDraft])


def parse_outline(data) -> list[ChapterDraft]:
    """Validate the decoded outline response.

    Raises:
        MalformedStructure: if the payload is not a chapter array or any node
            misses a field.
    """
    if isinstance(data, dict) and "chapters" in data:
        data = data["chapters"]
    if not isinstance(data, list):
        raise MalformedStructure(f"Outline response must be an array, got {type(data).__name__}")
    try:
        return _OUTLINE_ADAPTER.validate_python(data)
    except ValidationError as e:
        raise MalformedStructure(f"Outline response does not match schema: {e}") from e


def assign_identifiers(drafts: list[ChapterDraft]) -> tuple[Chapter, ...]:
    """Build the story tree with ids taken from list positions.

    The backend's ``number`` is kept as a display ordinal only.
    """
    chapters = []
    for ci, ch in enumerate(drafts):
        chapter_id = f"ch-{ci}"
        parts = []
        for pi, p in enumerate(ch.parts):
            part_id = f"{chapter_id}-p-{pi}"
            sections = tuple(
                Section(id=f"{part_id}-s-{si}", number=s.number, summary=s.summary)
                for si, s in enumerate(p.sections)
            )
            parts.append(Part(id=part_id, number=p.number, summary=p.summary, sections=sections))
        chapters.append(
            Chapter(
                id=chapter_id,
                number=ch.number,
                title=ch.title,
                summary=ch.summary,
                parts=tuple(parts),
            )
        )
    return tuple(chapters)


class OutlineArchitect(BaseAgent):
    def __init__(
        self,
        gateway: GenerationGateway,
        gemini_config: GeminiConfig,
        generation: GenerationConfig | None = None,
    ):
        super().__init__("OutlineArchitect", gateway, gemini_config.analysis_model, generation)

    def build_prompt(self, bible: StoryBible) -> str:
        g = self.generation
        return (
            "Design the detailed structure of the story described by this story bible.\n\n"
            f"Title: {bible.title}\n"
            f"Setting: {bible.setting}\n"
            f"Synopsis: {bible.synopsis}\n\n"
            "Requirements:\n"
            f"- {g.chapters} chapters\n"
            f"- {g.parts_per_chapter} parts per chapter\n"
            f"- {g.sections_per_part} sections per part\n"
            "- Every level carries a short summary\n"
            f"- {language_directive(g.language)}\n\n"
            "Return a JSON array shaped like:\n"
            '[{"number": 1, "title": "...", "summary": "...", '
            '"parts": [{"number": 1, "summary": "...", '
            '"sections": [{"number": 1, "summary": "..."}]}]}]'
        )

    async def expand(self, bible: StoryBible) -> tuple[Chapter, ...]:
        """Generate the outline with one structured call and assign ids."""
        data = await self.ask(
            "expand_structure",
            self.build_prompt(bible),
            schema=OUTLINE_SCHEMA,
            system=SYSTEM,
        )
        return assign_identifiers(parse_outline(data))
