from .base import BaseAgent, GenerationLog
from .bible_analyst import BibleAnalyst, BIBLE_SCHEMA
from .outline_architect import OutlineArchitect, OUTLINE_SCHEMA, assign_identifiers
from .writer import Writer, join_continuation
from .summarizer import SectionSummarizer

__all__ = [
    "BaseAgent",
    "GenerationLog",
    "BibleAnalyst",
    "BIBLE_SCHEMA",
    "OutlineArchitect",
    "OUTLINE_SCHEMA",
    "assign_identifiers",
    "Writer",
    "join_continuation",
    "SectionSummarizer",
]
