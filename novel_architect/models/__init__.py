from .story import (
    Character,
    StoryBible,
    Section,
    Part,
    Chapter,
    StoryStatus,
    SectionRef,
    Story,
)

__all__ = [
    "Character",
    "StoryBible",
    "Section",
    "Part",
    "Chapter",
    "StoryStatus",
    "SectionRef",
    "Story",
]
