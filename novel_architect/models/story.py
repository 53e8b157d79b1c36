"""Story tree: bible, chapters, parts and sections.

Every model is frozen. Updates go through ``model_copy`` so untouched
branches keep their identity across versions of a story.
"""

import uuid
from enum import Enum
from typing import Iterator, NamedTuple, Optional

from pydantic import BaseModel, ConfigDict, Field


class Character(BaseModel):
    model_config = ConfigDict(frozen=True)

    name: str
    role: str
    description: str


class StoryBible(BaseModel):
    model_config = ConfigDict(frozen=True)

    title: str
    genre: tuple[str, ...] = ()
    setting: str
    characters: tuple[Character, ...]
    theme: tuple[str, ...] = ()
    synopsis: str


class Section(BaseModel):
    model_config = ConfigDict(frozen=True)

    id: str
    number: int
    summary: str  # authoring brief
    content: str = ""
    short_summary: str = ""  # recap fed to the next section's authoring call
    is_written: bool = False


class Part(BaseModel):
    model_config = ConfigDict(frozen=True)

    id: str
    number: int
    summary: str
    sections: tuple[Section, ...] = ()


class Chapter(BaseModel):
    model_config = ConfigDict(frozen=True)

    id: str
    number: int
    title: str
    summary: str
    parts: tuple[Part, ...] = ()


class StoryStatus(str, Enum):
    INPUT = "INPUT"
    ANALYZING = "ANALYZING"
    STRUCTURING = "STRUCTURING"
    WRITING = "WRITING"

    @property
    def rank(self) -> int:
        return list(StoryStatus).index(self)

    def advance(self, target: "StoryStatus") -> "StoryStatus":
        """Move forward to ``target``; never move backwards."""
        return target if target.rank > self.rank else self


class SectionRef(NamedTuple):
    chapter_id: str
    part_id: str
    section_id: str

    @classmethod
    def of(cls, chapter: Chapter, part: Part, section: Section) -> "SectionRef":
        return cls(chapter.id, part.id, section.id)

    def __str__(self) -> str:
        return self.section_id


class Story(BaseModel):
    model_config = ConfigDict(frozen=True)

    id: str = Field(default_factory=lambda: uuid.uuid4().hex)
    bible: Optional[StoryBible] = None
    chapters: tuple[Chapter, ...] = ()
    current_input: str = ""
    status: StoryStatus = StoryStatus.INPUT

    def iter_sections(self) -> Iterator[tuple[Chapter, Part, Section]]:
        """Yield (chapter, part, section) in reading order."""
        for chapter in self.chapters:
            for part in chapter.parts:
                for section in part.sections:
                    yield chapter, part, section

    def find(self, ref: SectionRef) -> Optional[tuple[Chapter, Part, Section]]:
        for chapter, part, section in self.iter_sections():
            if SectionRef.of(chapter, part, section) == ref:
                return chapter, part, section
        return None

    def previous_section(self, ref: SectionRef) -> Optional[Section]:
        """The section read just before ``ref``, across part and chapter breaks."""
        previous = None
        for chapter, part, section in self.iter_sections():
            if SectionRef.of(chapter, part, section) == ref:
                return previous
            previous = section
        return None

    def section_refs(self) -> list[SectionRef]:
        return [SectionRef.of(c, p, s) for c, p, s in self.iter_sections()]

    @property
    def progress(self) -> tuple[int, int]:
        """(written sections, total sections)."""
        sections = [s for _, _, s in self.iter_sections()]
        return sum(1 for s in sections if s.is_written), len(sections)
