"""Shared fixtures: a scripted gateway and sample backend payloads."""

import asyncio
import json

import pytest

from novel_architect.config import Config, GenerationConfig
from novel_architect.gateway import GenerationGateway
from novel_architect.pipeline import Pipeline, StorySession


SAMPLE_BIBLE = {
    "title": "Rain Over Harrow Street",
    "genre": ["noir", "mystery"],
    "setting": "A rain-soaked port city in the late 1940s",
    "characters": [
        {
            "name": "Vera Cole",
            "role": "protagonist",
            "description": "A tired detective who still believes the city can be saved.",
        },
        {
            "name": "Silas Marsh",
            "role": "antagonist",
            "description": "A harbour boss who owns half the police force.",
        },
    ],
    "theme": ["corruption", "redemption"],
    "synopsis": "Detective Vera Cole hunts a killer through the flooded docks and uncovers the rot behind the badge.",
}


def make_outline(chapters: int = 3, parts: int = 2, sections: int = 2) -> list[dict]:
    return [
        {
            "number": c + 1,
            "title": f"Chapter title {c + 1}",
            "summary": f"Chapter summary {c + 1}",
            "parts": [
                {
                    "number": p + 1,
                    "summary": f"Part summary {c + 1}.{p + 1}",
                    "sections": [
                        {"number": s + 1, "summary": f"Section brief {c + 1}.{p + 1}.{s + 1}"}
                        for s in range(sections)
                    ],
                }
                for p in range(parts)
            ],
        }
        for c in range(chapters)
    ]


class FakeGateway(GenerationGateway):
    """Gateway that replays scripted responses and records every call.

    Dicts and lists are served as JSON text; exceptions are raised.
    """

    def __init__(self, responses=None):
        self.responses = list(responses or [])
        self.calls: list[dict] = []

    def queue(self, *responses):
        self.responses.extend(responses)

    async def _complete(self, prompt, *, model, schema, system):
        self.calls.append({"prompt": prompt, "model": model, "schema": schema, "system": system})
        if not self.responses:
            raise AssertionError(f"Unexpected generation call: {prompt[:80]}")
        response = self.responses.pop(0)
        if isinstance(response, BaseException):
            raise response
        if isinstance(response, (dict, list)):
            return json.dumps(response)
        return response


@pytest.fixture
def gateway():
    return FakeGateway()


@pytest.fixture
def config():
    """Config without post-draft summaries, so each step makes one call."""
    return Config(generation=GenerationConfig(summarize_sections=False))


@pytest.fixture
def pipeline(config, gateway):
    return Pipeline(config, gateway=gateway)


@pytest.fixture
def session(pipeline):
    return StorySession(pipeline)


@pytest.fixture
def bible_payload():
    return json.loads(json.dumps(SAMPLE_BIBLE))


@pytest.fixture
def outline_payload():
    return make_outline()


@pytest.fixture
def structured_session(session, gateway, bible_payload, outline_payload):
    """A session that already holds an analyzed and outlined story."""
    gateway.queue(bible_payload, outline_payload)

    async def _prepare():
        await session.analyze("a detective in a rain-soaked city")
        await session.build_structure()

    asyncio.run(_prepare())
    gateway.calls.clear()
    return session
