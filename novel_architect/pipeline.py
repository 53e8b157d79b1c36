"""Generation pipeline: bible -> outline -> section drafts and continuations."""

from dataclasses import dataclass, replace
from typing import Awaitable, Callable, Optional

from loguru import logger

from .config import Config
from .errors import GenerationError, InvalidTransition, PipelineBusy, SectionNotFound
from .gateway import GeminiGateway, GenerationGateway
from .models.story import Chapter, Part, Section, SectionRef, Story, StoryStatus
from .agents.bible_analyst import BibleAnalyst
from .agents.outline_architect import OutlineArchitect
from .agents.writer import Writer, join_continuation
from .agents.summarizer import SectionSummarizer
from .tree import SectionMutation, apply_section_update

ProgressCallback = Callable[[str, int, int], None]


def _noop_progress(msg: str, done: int, total: int) -> None:
    pass


@dataclass(frozen=True)
class PipelineContext:
    story: Optional[Story] = None
    in_flight: bool = False


def _require_bible(ctx: PipelineContext) -> Story:
    if ctx.story is None or ctx.story.bible is None:
        raise InvalidTransition("Analyze a story idea before building its structure")
    return ctx.story


def _locate(ctx: PipelineContext, ref: SectionRef) -> tuple[Story, Chapter, Part, Section]:
    story = _require_bible(ctx)
    found = story.find(ref)
    if found is None:
        raise SectionNotFound(ref)
    chapter, part, section = found
    return story, chapter, part, section


class Pipeline:
    """Pure pipeline steps. Each takes a context and returns a new one.

    A step either returns a fully updated context or raises; the context
    passed in is never modified.
    """

    def __init__(self, config: Config, gateway: Optional[GenerationGateway] = None):
        self.config = config
        self.gateway = gateway or GeminiGateway(config.gemini)
        gc = config.gemini
        gen = config.generation

        self.bible_analyst = BibleAnalyst(self.gateway, gc, gen)
        self.outline_architect = OutlineArchitect(self.gateway, gc, gen)
        self.writer = Writer(self.gateway, gc, gen)
        self.summarizer = SectionSummarizer(self.gateway, gc, gen)

    @property
    def all_agents(self) -> list:
        return [
            self.bible_analyst,
            self.outline_architect,
            self.writer,
            self.summarizer,
        ]

    @property
    def all_logs(self) -> list:
        logs = []
        for agent in self.all_agents:
            logs.extend(agent.logs)
        return logs

    async def analyze(self, ctx: PipelineContext, raw_input: str) -> PipelineContext:
        if not raw_input.strip():
            raise InvalidTransition("Story idea is empty")
        bible = await self.bible_analyst.extract(raw_input)
        story = Story(
            bible=bible,
            current_input=raw_input,
            status=StoryStatus.ANALYZING,
        )
        logger.bind(story=story.id).info(
            "Bible ready: '{}' with {} characters", bible.title, len(bible.characters)
        )
        return replace(ctx, story=story)

    async def build_structure(self, ctx: PipelineContext) -> PipelineContext:
        story = _require_bible(ctx)
        if story.chapters:
            raise InvalidTransition("Story structure already exists")
        chapters = await self.outline_architect.expand(story.bible)
        updated = story.model_copy(
            update={
                "chapters": chapters,
                "status": story.status.advance(StoryStatus.STRUCTURING),
            }
        )
        _, total = updated.progress
        logger.bind(story=story.id).info("Structure ready: {} chapters, {} sections", len(chapters), total)
        return replace(ctx, story=updated)

    def previous_summary(self, story: Story, ref: SectionRef) -> str:
        """Recap of the preceding section when one exists, else the synopsis."""
        previous = story.previous_section(ref)
        if previous is not None and previous.short_summary:
            return previous.short_summary
        return story.bible.synopsis

    async def _summarize(
        self, story: Story, section: Section, content: str, fallback: Optional[str]
    ) -> Optional[str]:
        if not self.config.generation.summarize_sections:
            return fallback
        try:
            return await self.summarizer.summarize(story.bible, section, content)
        except GenerationError as e:
            logger.bind(story=story.id, section=section.id).warning(
                "Section summary skipped: {}", e
            )
            return fallback

    async def write_section(self, ctx: PipelineContext, ref: SectionRef) -> PipelineContext:
        story, chapter, part, section = _locate(ctx, ref)
        log = logger.bind(story=story.id, section=section.id)

        previous = self.previous_summary(story, ref)
        content = await self.writer.write_section(story.bible, chapter, part, section, previous)
        # The old recap is dropped if summarising the redraft fails
        short_summary = await self._summarize(story, section, content, fallback="")

        update = apply_section_update(
            story,
            ref,
            SectionMutation(content=content, is_written=True, short_summary=short_summary),
        )
        if not update.applied:
            raise SectionNotFound(ref)

        log.info("Section written ({} chars)", len(content))
        written = update.story.model_copy(
            update={"status": story.status.advance(StoryStatus.WRITING)}
        )
        return replace(ctx, story=written)

    async def continue_section(self, ctx: PipelineContext, ref: SectionRef) -> PipelineContext:
        story, _, _, section = _locate(ctx, ref)
        log = logger.bind(story=story.id, section=section.id)
        if not section.content:
            raise InvalidTransition(f"Section {section.id} has no content to continue")

        try:
            addition = await self.writer.continue_section(story.bible, section.content, section.summary)
        except GenerationError as e:
            if self.config.generation.continuation_errors == "raise":
                raise
            log.error("Continuation failed, section left unchanged: {}", e)
            return ctx

        content = join_continuation(section.content, addition)
        short_summary = await self._summarize(story, section, content, fallback=None)

        update = apply_section_update(
            story, ref, SectionMutation(content=content, short_summary=short_summary)
        )
        if not update.applied:
            raise SectionNotFound(ref)

        log.info("Section continued (+{} chars)", len(addition))
        return replace(ctx, story=update.story)


class StorySession:
    """Owns the current context and runs at most one step at a time.

    The context is replaced only when a step succeeds; a failing step leaves
    the previous context installed.
    """

    def __init__(self, pipeline: Pipeline):
        self.pipeline = pipeline
        self.context = PipelineContext()

    @property
    def story(self) -> Optional[Story]:
        return self.context.story

    @property
    def busy(self) -> bool:
        return self.context.in_flight

    async def _run(
        self, step: Callable[..., Awaitable[PipelineContext]], *args
    ) -> Optional[Story]:
        if self.context.in_flight:
            raise PipelineBusy("Another generation request is still running")

        before = self.context
        result = before
        self.context = replace(before, in_flight=True)
        try:
            result = await step(before, *args)
        finally:
            self.context = replace(result, in_flight=False)
        return self.context.story

    async def analyze(self, raw_input: str) -> Story:
        return await self._run(self.pipeline.analyze, raw_input)

    async def build_structure(self) -> Story:
        return await self._run(self.pipeline.build_structure)

    async def write_section(self, ref: SectionRef) -> Story:
        return await self._run(self.pipeline.write_section, ref)

    async def continue_section(self, ref: SectionRef) -> Story:
        return await self._run(self.pipeline.continue_section, ref)

    async def write_all(
        self,
        continue_rounds: int = 0,
        progress: ProgressCallback = _noop_progress,
    ) -> Story:
        """Write every unwritten section in reading order.

        Each section can be followed by ``continue_rounds`` continuations.
        """
        story = self.story
        if story is None or not story.chapters:
            raise InvalidTransition("Build the story structure before writing")

        refs = story.section_refs()
        total = len(refs)
        for done, ref in enumerate(refs):
            _, _, section = self.story.find(ref)
            if not section.is_written:
                progress(f"Writing section {ref.section_id}...", done, total)
                await self.write_section(ref)
            for rnd in range(1, continue_rounds + 1):
                progress(f"Continuing section {ref.section_id} ({rnd}/{continue_rounds})...", done, total)
                await self.continue_section(ref)
        progress("All sections written", total, total)
        return self.story
