import os
from pathlib import Path
from typing import Literal, Optional

from pydantic import BaseModel, Field
import yaml

API_KEY_ENV_VARS = ("GEMINI_API_KEY", "GOOGLE_API_KEY")


class GeminiConfig(BaseModel):
    api_key: str = Field(default="")
    # Fast model for bible extraction, outlining and recaps; quality model for prose.
    analysis_model: str = Field(default="gemini-2.5-flash")
    writing_model: str = Field(default="gemini-2.5-pro")
    temperature: float = Field(default=0.8, ge=0.0, le=2.0)
    max_output_tokens: int = Field(default=8192, gt=0)

    def resolve_api_key(self) -> Optional[str]:
        if self.api_key:
            return self.api_key
        for name in API_KEY_ENV_VARS:
            value = os.getenv(name)
            if value:
                return value
        return None


class GenerationConfig(BaseModel):
    chapters: int = Field(default=3, gt=0)
    parts_per_chapter: int = Field(default=2, gt=0)
    sections_per_part: int = Field(default=2, gt=0)
    section_target_words: str = Field(default="1000-2000")
    continuation_window: int = Field(default=2000, gt=0)
    summary_window: int = Field(default=4000, gt=0)
    summarize_sections: bool = Field(default=True)
    continuation_errors: Literal["log", "raise"] = Field(default="log")
    language: str = Field(default="auto")


class Config(BaseModel):
    gemini: GeminiConfig = Field(default_factory=GeminiConfig)
    generation: GenerationConfig = Field(default_factory=GenerationConfig)
    log_level: str = Field(default="INFO")

    @classmethod
    def from_yaml(cls, path: Path) -> "Config":
        with open(path, "r", encoding="utf-8") as f:
            data = yaml.safe_load(f) or {}
        return cls(**data)

    def to_yaml(self, path: Path):
        with open(path, "w", encoding="utf-8") as f:
            yaml.dump(self.model_dump(), f, default_flow_style=False, allow_unicode=True)
