"""Exception hierarchy for the generation pipeline."""


class NovelArchitectError(Exception):
    """Base class for every error raised by novel_architect."""


class GenerationError(NovelArchitectError):
    """A generation call did not produce a usable result."""


class EmptyResponse(GenerationError):
    """The backend answered without any text."""


class BackendError(GenerationError):
    """Transport, authentication, quota or service failure at the backend."""

    def __init__(self, message: str, code: int | None = None):
        super().__init__(message)
        self.code = code


class MalformedStructure(GenerationError):
    """A structured response did not decode or did not match the expected shape."""


class PipelineBusy(NovelArchitectError):
    """Another action is still in flight for this session."""


class SectionNotFound(NovelArchitectError):
    def __init__(self, ref):
        super().__init__(f"No section at {ref}")
        self.ref = ref


class InvalidTransition(NovelArchitectError):
    """The requested step is not allowed from the story's current state."""
