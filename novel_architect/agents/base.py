"""Base agent: shared gateway access and call logging."""

import time
from dataclasses import dataclass
from typing import Any, Optional

from loguru import logger

from ..config import GenerationConfig
from ..gateway import GenerationGateway
from ..utils.text import preview


@dataclass
class GenerationLog:
    agent_name: str = ""
    action: str = ""
    model: str = ""
    prompt_preview: str = ""
    response_preview: str = ""
    elapsed_seconds: float = 0.0


def language_directive(language: str) -> str:
    if language == "auto":
        return "Write in the same language as the story material above."
    return f"Write in {language}."


class BaseAgent:
    """Base class for agents that issue generation calls through one gateway."""

    def __init__(
        self,
        name: str,
        gateway: GenerationGateway,
        model: str,
        generation: Optional[GenerationConfig] = None,
    ):
        self.name = name
        self.gateway = gateway
        self.model = model
        self.generation = generation or GenerationConfig()
        self.logs: list[GenerationLog] = []

    async def ask(
        self,
        action: str,
        prompt: str,
        *,
        schema: Any = None,
        system: Optional[str] = None,
    ) -> Any:
        log = logger.bind(agent=self.name)
        log.debug("{} prompt ({} chars): {}", action, len(prompt), preview(prompt))

        start = time.time()
        result = await self.gateway.generate(prompt, model=self.model, schema=schema, system=system)
        elapsed = time.time() - start

        response_text = result if isinstance(result, str) else repr(result)
        self.logs.append(
            GenerationLog(
                agent_name=self.name,
                action=action,
                model=self.model,
                prompt_preview=preview(prompt),
                response_preview=preview(response_text),
                elapsed_seconds=round(elapsed, 2),
            )
        )
        log.info("{} done in {:.2f}s (model={})", action, elapsed, self.model)
        return result
