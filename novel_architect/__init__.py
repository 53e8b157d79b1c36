"""Novel Architect: from a story idea to a written, structured novel."""

from .config import Config, GeminiConfig, GenerationConfig
from .errors import (
    NovelArchitectError,
    GenerationError,
    EmptyResponse,
    BackendError,
    MalformedStructure,
    PipelineBusy,
    SectionNotFound,
    InvalidTransition,
)
from .gateway import GenerationGateway, GeminiGateway
from .models import Character, StoryBible, Section, Part, Chapter, StoryStatus, SectionRef, Story
from .pipeline import Pipeline, PipelineContext, StorySession
from .tree import SectionMutation, TreeUpdate, apply_section_update

__version__ = "0.1.0"

__all__ = [
    "Config",
    "GeminiConfig",
    "GenerationConfig",
    "NovelArchitectError",
    "GenerationError",
    "EmptyResponse",
    "BackendError",
    "MalformedStructure",
    "PipelineBusy",
    "SectionNotFound",
    "InvalidTransition",
    "GenerationGateway",
    "GeminiGateway",
    "Character",
    "StoryBible",
    "Section",
    "Part",
    "Chapter",
    "StoryStatus",
    "SectionRef",
    "Story",
    "Pipeline",
    "PipelineContext",
    "StorySession",
    "SectionMutation",
    "TreeUpdate",
    "apply_section_update",
]
