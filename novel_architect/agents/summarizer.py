"""Section Summarizer agent: short recaps that carry context to the next section."""

from .base import BaseAgent
from ..config import GeminiConfig, GenerationConfig
from ..gateway import GenerationGateway
from ..models.story import Section, StoryBible
from ..utils.text import tail_window

SYSTEM = (
    "You are a story continuity tracker. Given a passage of a novel, you write a compact "
    "recap of what happened so the next passage can pick up the thread."
)


class SectionSummarizer(BaseAgent):
    def __init__(
        self,
        gateway: GenerationGateway,
        gemini_config: GeminiConfig,
        generation: GenerationConfig | None = None,
    ):
        super().__init__("SectionSummarizer", gateway, gemini_config.analysis_model, generation)

    async def summarize(self, bible: StoryBible, section: Section, content: str) -> str:
        passage = tail_window(content, self.generation.summary_window)
        prompt = (
            f"## Story\n{bible.title}: {bible.synopsis}\n\n"
            f"## Section Brief\n{section.summary}\n\n"
            f"## Section Text (latest part)\n{passage}\n\n"
            "Summarize in 2-4 sentences what actually happened in this section: "
            "key events, who was involved, and where things stand at its end. "
            "Use the same language as the section text. Return only the summary."
        )
        result = await self.ask("summarize_section", prompt, system=SYSTEM)
        return result.strip()
