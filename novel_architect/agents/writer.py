"""Writer agent: draft section prose and continue existing sections."""

from .base import BaseAgent, language_directive
from ..config import GeminiConfig, GenerationConfig
from ..gateway import GenerationGateway
from ..models.story import Chapter, Part, Section, StoryBible
from ..utils.text import tail_window

SYSTEM = """You are a talented fiction writer. You write vivid, engaging prose that brings stories to life. Your writing features:
- Rich sensory details and atmospheric descriptions
- Natural, distinctive character dialogue
- Varied sentence structure and pacing
- Show-don't-tell storytelling
- Emotional depth and psychological realism

Write continuous prose. Do not include headers, author notes, or meta-commentary. Just write the story."""

CONTINUATION_SEPARATOR = "\n\n"


def join_continuation(content: str, addition: str) -> str:
    """Append continuation text after the existing content."""
    return content + CONTINUATION_SEPARATOR + addition


class Writer(BaseAgent):
    def __init__(
        self,
        gateway: GenerationGateway,
        gemini_config: GeminiConfig,
        generation: GenerationConfig | None = None,
    ):
        super().__init__("Writer", gateway, gemini_config.writing_model, generation)

    def build_section_prompt(
        self,
        bible: StoryBible,
        chapter: Chapter,
        part: Part,
        section: Section,
        previous_summary: str,
    ) -> str:
        return (
            "Write the full text of the following story section.\n\n"
            "## Story Bible\n"
            f"- Title: {bible.title}\n"
            f"- Setting: {bible.setting}\n"
            f"- Synopsis: {bible.synopsis}\n\n"
            "## Current Context\n"
            f"- Chapter {chapter.number}: {chapter.title} ({chapter.summary})\n"
            f"- Part {part.number}: {part.summary}\n"
            f"- What happened before: {previous_summary}\n\n"
            f"## Section {section.number} Brief\n"
            f"{section.summary}\n\n"
            "## Requirements\n"
            "- Professional novel prose, emotionally rich, with detailed scenes\n"
            f"- Length: about {self.generation.section_target_words} words\n"
            "- Return only the story text\n"
            f"- {language_directive(self.generation.language)}"
        )

    async def write_section(
        self,
        bible: StoryBible,
        chapter: Chapter,
        part: Part,
        section: Section,
        previous_summary: str,
    ) -> str:
        """Draft a section. The returned text becomes its content verbatim."""
        prompt = self.build_section_prompt(bible, chapter, part, section, previous_summary)
        return await self.ask("write_section", prompt, system=SYSTEM)

    def build_continuation_prompt(
        self, bible: StoryBible, current_content: str, section_summary: str
    ) -> str:
        context_text = tail_window(current_content, self.generation.continuation_window)
        return (
            "You are continuing a story section that is already partly written.\n\n"
            f"## Story Synopsis\n{bible.synopsis}\n\n"
            f"## Goal Of This Section\n{section_summary}\n\n"
            "## Most Recent Passage\n"
            f'"{context_text}"\n\n'
            "## Task\n"
            "- Continue seamlessly from the passage, without repeating it\n"
            "- Keep the same voice and tone\n"
            "- Move the plot to its next beat\n"
            "- Return only the new text\n"
            f"- {language_directive(self.generation.language)}"
        )

    async def continue_section(
        self, bible: StoryBible, current_content: str, section_summary: str
    ) -> str:
        """Generate new text that follows ``current_content``.

        Only the trailing ``continuation_window`` characters of the content
        are sent to the backend.
        """
        prompt = self.build_continuation_prompt(bible, current_content, section_summary)
        return await self.ask("continue_section", prompt, system=SYSTEM)
