"""Path-copy updates of a single section inside a story tree."""

from dataclasses import dataclass
from typing import Any, Optional

from .models.story import Chapter, Part, Section, SectionRef, Story


@dataclass(frozen=True)
class SectionMutation:
    """New values for one section. ``None`` leaves a field as it is."""

    content: Optional[str] = None
    is_written: Optional[bool] = None
    short_summary: Optional[str] = None

    def changes(self) -> dict[str, Any]:
        return {
            name: value
            for name, value in (
                ("content", self.content),
                ("is_written", self.is_written),
                ("short_summary", self.short_summary),
            )
            if value is not None
        }


@dataclass(frozen=True)
class TreeUpdate:
    story: Story
    applied: bool


def _index_of(nodes, node_id: str) -> int:
    for i, node in enumerate(nodes):
        if node.id == node_id:
            return i
    return -1


def _replace_at(nodes: tuple, index: int, node) -> tuple:
    return nodes[:index] + (node,) + nodes[index + 1:]


def apply_section_update(story: Story, ref: SectionRef, mutation: SectionMutation) -> TreeUpdate:
    """Return a story where only the section at ``ref`` carries ``mutation``.

    Chapters, parts and sections off the chapter -> part -> section path are
    reused as-is. An unknown ``ref`` gives back the same story object with
    ``applied=False``.
    """
    ci = _index_of(story.chapters, ref.chapter_id)
    if ci < 0:
        return TreeUpdate(story, False)
    chapter: Chapter = story.chapters[ci]

    pi = _index_of(chapter.parts, ref.part_id)
    if pi < 0:
        return TreeUpdate(story, False)
    part: Part = chapter.parts[pi]

    si = _index_of(part.sections, ref.section_id)
    if si < 0:
        return TreeUpdate(story, False)
    section: Section = part.sections[si]

    new_section = section.model_copy(update=mutation.changes())
    new_part = part.model_copy(update={"sections": _replace_at(part.sections, si, new_section)})
    new_chapter = chapter.model_copy(update={"parts": _replace_at(chapter.parts, pi, new_part)})
    new_story = story.model_copy(update={"chapters": _replace_at(story.chapters, ci, new_chapter)})
    return TreeUpdate(new_story, True)
